"""
QR codes that point to a restaurant's public menu page.
"""

from io import BytesIO

import qrcode
import qrcode.image.svg
from qrcode.constants import ERROR_CORRECT_H

from core.config import settings


def menu_url(slug: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/menu/{slug}"


def _build(slug: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=10, border=1)
    qr.add_data(menu_url(slug))
    qr.make(fit=True)
    return qr


def generate_qr_png(slug: str) -> bytes:
    img = _build(slug).make_image(fill_color="black", back_color="white")
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qr_svg(slug: str) -> bytes:
    img = _build(slug).make_image(image_factory=qrcode.image.svg.SvgPathImage)
    buf = BytesIO()
    img.save(buf)
    return buf.getvalue()
