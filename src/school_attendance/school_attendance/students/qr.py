"""QR helpers for student cards.

A student's scan token is ``QR_<nisn>``. It is fixed at creation time and
regenerated whenever the NISN changes, so the token stays unique as long as
the NISN is.
"""

from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image

from ..common.validators import require_non_empty
from ..core.constants import QR_CODE_PREFIX
from ..core.exceptions import ValidationError


def make_qr_code(nisn: str) -> str:
    return f"{QR_CODE_PREFIX}{require_non_empty(nisn, 'NISN')}"


def render_qr_png(data: str) -> bytes:
    """Render ``data`` as a PNG QR image."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> str:
    """Decode the first QR code found in an uploaded image."""

    # pyzbar loads the native zbar library on import.
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except OSError as exc:
        raise ValidationError("Uploaded file is not a readable image") from exc

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")

    return decoded[0].data.decode("utf-8").strip()
