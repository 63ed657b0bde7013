from decimal import Decimal

VERSION = "1.0"

ZERO = Decimal("0")
DECIMAL_QUANTIZE = Decimal("0.01")

DEFAULT_PERSON_NAME = "New Person"
DEFAULT_ITEM_NAME = "New Item"

# Stable persistence keys
STATE_KEYS = {
    'people': 'people',
    'items': 'items',
    'tax': 'tax',
    'tip': 'tip',
    'tax_mode': 'taxMode',
    'tip_mode': 'tipMode',
    'next_person_id': 'nextPersonId',
    'next_item_id': 'nextItemId',
}

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'BGN': 'лв',
}

# Currency symbols are printed before the amount
PREFIX_CURRENCIES = ['USD', 'EUR', 'GBP']

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.gif', '.webp'}
