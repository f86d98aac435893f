from __future__ import annotations

import io
from typing import Optional

from ..common.validators import is_valid_lrn


def decode_lrn_from_image(image_bytes: bytes) -> Optional[str]:
    """Return the first barcode/QR payload in the image that is a valid LRN."""

    # Imported here: pyzbar loads the native zbar library on import.
    from PIL import Image
    from pyzbar.pyzbar import decode as pyzbar_decode

    with Image.open(io.BytesIO(image_bytes)) as img:
        symbols = pyzbar_decode(img.convert("RGB"))

    for symbol in symbols:
        value = symbol.data.decode("utf-8", errors="ignore").strip()
        if is_valid_lrn(value):
            return value
    return None
