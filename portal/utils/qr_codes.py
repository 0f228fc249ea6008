"""
Geração de QR Codes para memoriais (segno).

PNG é devolvido como data URI base64, pronto para <img src>; SVG como markup.
"""

import base64
import io
from typing import Literal

import segno

from portal.config.exceptions import ServiceError
from portal.config.logging_config import service_logger as logger

QRFormat = Literal["png", "svg"]

_DARK = "#000000"
_LIGHT = "#ffffff"


def build_memorial_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}/m/{slug}"


def _encode(content: str, fmt: QRFormat, scale: int, border: int) -> bytes:
    qr = segno.make(content, error="m")
    buffer = io.BytesIO()
    qr.save(buffer, kind=fmt, scale=scale, border=border, dark=_DARK, light=_LIGHT)
    return buffer.getvalue()


def generate_qr_code(content: str, fmt: QRFormat = "png", scale: int = 10, border: int = 1) -> str:
    """
    Gera QR Code para `content`.

    Returns:
        data URI (png) ou documento SVG (svg).
    """
    if fmt not in ("png", "svg"):
        raise ServiceError(f"Formato de QR Code não suportado: {fmt}", service="qrcode")
    try:
        raw = _encode(content, fmt, scale, border)
    except ValueError as exc:
        logger.error("Falha ao gerar QR Code (%s): %s", fmt, exc)
        raise ServiceError("Falha ao gerar código QR", service="qrcode") from exc

    if fmt == "svg":
        return raw.decode("utf-8")
    return "data:image/png;base64," + base64.b64encode(raw).decode("ascii")
