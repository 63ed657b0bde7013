"""
Receipt import module for Splitt
Uploads a receipt image to the receipt-parsing service and validates its answer
"""

import io
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Tuple

import requests
from PIL import Image, UnidentifiedImageError

from config import MAX_UPLOAD_DIMENSION, RECEIPT_ENDPOINT, RECEIPT_TIMEOUT
from constants import ZERO
from data_models import ImportedItem, ImportedReceipt
from exceptions import ReceiptImportError
from utils import clean_price, validate_image_path

logger = logging.getLogger(__name__)


def _parse_amount(value: Any, field_name: str) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ReceiptImportError(f"{field_name} must be a number, got {type(value).__name__}")

    amount = clean_price(value)
    if amount is None:
        raise ReceiptImportError(f"{field_name} is not a number: {value!r}")
    if amount < 0:
        raise ReceiptImportError(f"{field_name} must not be negative: {value!r}")
    return amount


def parse_receipt_payload(data: Any) -> ImportedReceipt:
    """Validate the service's JSON answer.

    Expected shape: {"items": [{"name": str, "price": number}], "tax": number,
    "tip": number}. Tax and tip are optional. Prices may be strings in either
    "12.50" or "12,50" form. Anything else raises ReceiptImportError.
    """
    if not isinstance(data, dict):
        raise ReceiptImportError("Receipt payload must be a JSON object")

    raw_items = data.get('items')
    if not isinstance(raw_items, list):
        raise ReceiptImportError("Receipt payload has no 'items' list")

    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ReceiptImportError(f"Item {index} is not an object")
        name = raw.get('name')
        if not isinstance(name, str):
            raise ReceiptImportError(f"Item {index} has no name")
        if 'price' not in raw:
            raise ReceiptImportError(f"Item {index} ({name}) has no price")
        price = _parse_amount(raw['price'], f"Item {index} price")
        items.append(ImportedItem(name=name.strip(), price=price))

    receipt = ImportedReceipt(
        items=items,
        tax=_parse_amount(data.get('tax'), "tax"),
        tip=_parse_amount(data.get('tip'), "tip"),
    )
    logger.debug("Parsed receipt: %d items, tax %s, tip %s", len(items), receipt.tax, receipt.tip)
    return receipt


def prepare_image(image_path: str, max_dimension: int = MAX_UPLOAD_DIMENSION) -> Tuple[bytes, str]:
    """Load the image and shrink it so its longest side fits max_dimension.

    Returns the bytes to upload and their MIME type.
    """
    try:
        with Image.open(image_path) as image:
            image.load()
            if max(image.size) <= max_dimension:
                return Path(image_path).read_bytes(), Image.MIME.get(image.format, 'application/octet-stream')

            logger.info("Resizing %dx%d image for upload", image.size[0], image.size[1])
            resized = image.convert('RGB')
            resized.thumbnail((max_dimension, max_dimension))
            buffer = io.BytesIO()
            resized.save(buffer, format='JPEG', quality=90)
            return buffer.getvalue(), 'image/jpeg'
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ReceiptImportError(f"Could not read image {image_path}: {e}") from e


class ReceiptImportClient:
    """Client for the external receipt-parsing service"""

    def __init__(self, endpoint: str = RECEIPT_ENDPOINT, timeout: float = RECEIPT_TIMEOUT, session=None):
        self.endpoint = endpoint
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self):
        """Close the HTTP session if this client opened it"""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _post(self, filename: str, content: bytes, mime_type: str) -> Dict[str, Any]:
        try:
            response = self.session.post(
                self.endpoint,
                files={'file': (filename, content, mime_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Receipt upload failed: %s", e)
            raise ReceiptImportError(f"Receipt service request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ReceiptImportError("Receipt service returned invalid JSON") from e

    def parse_receipt(self, image_path: str) -> ImportedReceipt:
        """Upload an image and return the parsed receipt"""
        if not validate_image_path(image_path):
            raise ReceiptImportError(f"Invalid or unsupported image: {image_path}")

        content, mime_type = prepare_image(image_path)
        logger.info("Uploading %s (%d bytes) to %s", image_path, len(content), self.endpoint)
        data = self._post(Path(image_path).name, content, mime_type)
        return parse_receipt_payload(data)
