"""
Image helpers shared by campaign assets and tickets

QR codes are produced with qrcode and composited with Pillow.
"""

import io
import json
from typing import Any, Dict, Tuple

import qrcode
from PIL import Image, ImageOps


def qr_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"))


def render_qr_image(payload: Dict[str, Any], size: int, margin: int) -> Image.Image:
    """Render a JSON payload as a square black-on-white QR image of ``size`` pixels"""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=margin,
    )
    qr.add_data(qr_payload(payload))
    qr.make(fit=True)

    buffer = io.BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buffer)
    buffer.seek(0)
    with Image.open(buffer) as raw:
        image = raw.convert("RGB")
    return image.resize((size, size), Image.NEAREST)


def render_qr_png(payload: Dict[str, Any], size: int, margin: int) -> bytes:
    return image_to_bytes(render_qr_image(payload, size, margin), "PNG")


def fit_within(image: Image.Image, box: Tuple[int, int], enlarge: bool = True) -> Image.Image:
    """Scale preserving aspect ratio so the image fits inside ``box``"""
    if not enlarge:
        fitted = image.copy()
        fitted.thumbnail(box)
        return fitted
    return ImageOps.contain(image, box)


def image_to_bytes(image: Image.Image, image_format: str, **save_kwargs) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=image_format, **save_kwargs)
    return buffer.getvalue()


def open_image(data: bytes) -> Image.Image:
    """Decode image bytes; raises PIL.UnidentifiedImageError for non-images"""
    with Image.open(io.BytesIO(data)) as raw:
        raw.load()
        return raw.copy()
