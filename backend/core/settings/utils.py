"""
Utility functions for Django settings configuration.

Environment modules call load_environment_config() to obtain a
python-decouple config callable bound to the matching .env file.
"""

import logging
from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

logger = logging.getLogger(__name__)

ENV_FILES = {
    "development": ".env.dev",
    "production": ".env.production",
    "test": ".env.test",
}

# Repository root (two levels above the backend package directory)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def load_environment_config(environment, root=None):
    """
    Load environment-specific configuration from the appropriate .env file.

    Args:
        environment (str): 'development', 'production' or 'test'
        root (Path): Directory holding the .env files, defaults to the repository root

    Returns:
        Callable config(name, default=..., cast=...) reading the .env file when
        it exists, otherwise the process environment.
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    env_file_path = Path(root or PROJECT_ROOT) / env_file_name

    if env_file_path.exists():
        logger.info(
            "Environment file loaded",
            extra={
                "environment": environment,
                "env_file": env_file_name,
                "action": "environment_file_loaded",
                "component": "settings",
            },
        )
        return Config(RepositoryEnv(env_file_path))

    logger.warning(
        "Environment file not found, using process environment",
        extra={
            "environment": environment,
            "env_file": env_file_name,
            "action": "environment_file_missing",
            "component": "settings",
        },
    )
    return default_config
