#!/usr/bin/env python3
"""
Utility functions for Splitt
"""

import re
import logging
import mimetypes
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from pathlib import Path
from typing import Optional

from config import CURRENCY_DEFAULT, MAX_IMAGE_SIZE_BYTES
from constants import CURRENCY_SYMBOLS, DECIMAL_QUANTIZE, IMAGE_EXTENSIONS, PREFIX_CURRENCIES, ZERO

logger = logging.getLogger(__name__)


def validate_image_path(image_path: str) -> bool:
    """Image path validation before a receipt is uploaded"""
    if not isinstance(image_path, str):
        logger.warning("Image path must be a string")
        return False

    try:
        path = Path(image_path)

        # Security: Basic directory traversal check
        if '..' in path.parts:
            logger.warning("Invalid path pattern: %s", image_path)
            return False

        if not path.exists():
            logger.warning("File not found: %s", image_path)
            return False

        if not path.is_file():
            logger.warning("Path is not a file: %s", image_path)
            return False

        size = path.stat().st_size
        if size > MAX_IMAGE_SIZE_BYTES:
            logger.warning("File too large: %d bytes (max: %d)", size, MAX_IMAGE_SIZE_BYTES)
            return False

        if path.suffix.lower() not in IMAGE_EXTENSIONS:
            logger.warning("Unsupported file extension: %s", path.suffix)
            return False

        mime_type, _ = mimetypes.guess_type(str(path))
        if mime_type and not mime_type.startswith('image/'):
            logger.warning("Invalid MIME type: %s", mime_type)
            return False

        return True

    except OSError as e:
        logger.warning("Path validation error: %s", e)
        return False


def to_money(value) -> Decimal:
    """Coerce a money value to a non-negative Decimal.

    Negative and unparseable values become zero, whatever their type; a
    string with a leading minus sign counts as negative.
    """
    if isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        if value.strip().startswith('-'):
            logger.warning("Negative amount %r clamped to 0", value)
            return ZERO
        amount = parse_money(value)
    else:
        return ZERO

    if not amount.is_finite():
        return ZERO
    if amount < 0:
        logger.warning("Negative amount %s clamped to 0", amount)
        return ZERO
    return amount


def to_cost(value) -> Decimal:
    """to_money() truncated to cents, for item prices"""
    amount = to_money(value)
    if amount.as_tuple().exponent < -2:
        return amount.quantize(DECIMAL_QUANTIZE, rounding=ROUND_DOWN)
    return amount


def parse_money(text: str) -> Decimal:
    """Parse what a user typed into a money field.

    Everything but digits and the first decimal point is dropped and at most
    two fractional digits are kept, so "$1,234.567" reads as 1234.56 and
    "-5" reads as 5.
    """
    if not isinstance(text, str):
        return ZERO

    cleaned = re.sub(r'[^0-9.]', '', text)
    parts = cleaned.split('.')
    whole = parts[0]
    fraction = parts[1][:2] if len(parts) > 1 else ''
    candidate = whole + ('.' + fraction if fraction else '')

    try:
        return Decimal(candidate) if candidate and candidate != '.' else ZERO
    except InvalidOperation:
        return ZERO


def clean_price(price_str) -> Optional[Decimal]:
    """Convert a receipt price such as "12.50", "12,50" or "1.234,50" to Decimal.

    Returns None when the text holds no number.
    """
    if price_str is None:
        return None

    cleaned = re.sub(r'[^\d,\.\-]', '', str(price_str))

    # European format (comma as decimal separator)
    if ',' in cleaned and '.' in cleaned:
        if cleaned.rfind(',') > cleaned.rfind('.'):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')
    elif ',' in cleaned and cleaned.count(',') == 1:
        if len(cleaned.split(',')[1]) <= 2:
            cleaned = cleaned.replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')

    try:
        price = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
    return price if price.is_finite() else None


def round_money(amount) -> Decimal:
    """Round to cents for display only"""
    return Decimal(str(amount)).quantize(DECIMAL_QUANTIZE, rounding=ROUND_HALF_UP)


def format_money(amount, currency: str = CURRENCY_DEFAULT) -> str:
    """Format currency amount with proper symbols"""
    try:
        rounded = round_money(amount)
    except (InvalidOperation, ValueError):
        rounded = round_money(0)

    symbol = CURRENCY_SYMBOLS.get(currency, currency)

    if currency in PREFIX_CURRENCIES:
        return f"{symbol}{rounded:,.2f}"
    return f"{rounded:,.2f} {symbol}"


def try_parse_int(value: str) -> Optional[int]:
    """Safely parse integer from string"""
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def try_parse_decimal(value: str) -> Optional[Decimal]:
    """Safely parse a decimal from string, accepting a comma separator"""
    try:
        parsed = Decimal(value.strip().replace(',', '.'))
    except (AttributeError, InvalidOperation):
        return None
    return parsed if parsed.is_finite() else None


def validate_menu_choice(choice: str, valid_choices: list[str]) -> Optional[str]:
    """Validate a menu choice against allowed options"""
    if not isinstance(choice, str):
        return None
    choice = choice.strip()
    return choice if choice in set(valid_choices) else None


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe file operations"""
    if not isinstance(filename, str):
        return "unnamed_file"

    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', filename)
    filename = filename.replace(' ', '_')

    if len(filename) > 200:
        filename = filename[:200]

    if not filename.strip():
        filename = "unnamed_file"

    return filename


def clean_text_for_display(text: str, max_length: int = 100) -> str:
    """Clean text for safe display in the terminal"""
    if not isinstance(text, str):
        return ""

    # Remove control characters
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)
    text = ' '.join(text.split())

    if len(text) > max_length:
        text = text[:max_length-3] + "..."

    return text
