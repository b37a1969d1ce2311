#!/usr/bin/env python
"""
Command-line entry point of the Saldus backend.

Runs Django management commands against ``core.settings.dev`` unless
``DJANGO_SETTINGS_MODULE`` selects another environment (``core.settings.test``,
``core.settings.production``).
"""

import os
import sys


def main():
    """Run a management command from ``sys.argv``."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.dev")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
