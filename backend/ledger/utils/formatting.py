"""
Brazilian number and date formatting helpers.
"""

from decimal import ROUND_HALF_UP, Decimal


def format_number(value, places=2):
    """
    Format a number with ``.`` thousands and ``,`` decimal separators.

    >>> format_number(1234.5)
    '1.234,50'
    """
    quantized = Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    text = f"{abs(quantized):,.{places}f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-{text}" if quantized < 0 else text


def format_currency(value):
    """
    Format as Brazilian reais.

    >>> format_currency(1234.5)
    'R$ 1.234,50'
    """
    text = format_number(value)
    if text.startswith("-"):
        return f"-R$ {text[1:]}"
    return f"R$ {text}"


def format_date(value):
    """dd/mm/yyyy"""
    return value.strftime("%d/%m/%Y")
