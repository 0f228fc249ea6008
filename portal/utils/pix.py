"""
Montagem do payload PIX "copia e cola" (BR Code, padrão EMV MPM).

Cada campo é codificado como ID (2 dígitos) + tamanho (2 dígitos) + valor;
o payload termina com o CRC16-CCITT (campo 63).
"""

from portal.utils.slug import strip_accents

_GUI = "br.gov.bcb.pix"


def _field(field_id: str, value: str) -> str:
    return f"{field_id}{len(value):02d}{value}"


def crc16_ccitt(payload: str) -> str:
    """
    CRC16-CCITT (polinômio 0x1021, valor inicial 0xFFFF) em hexadecimal.

    Example:
        >>> crc16_ccitt("123456789")
        '29B1'
    """
    crc = 0xFFFF
    for byte in payload.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return f"{crc:04X}"


def _sanitize(value: str, max_length: int) -> str:
    return strip_accents(value).upper()[:max_length]


def build_pix_payload(
    pix_key: str,
    amount_cents: int,
    merchant_name: str,
    merchant_city: str,
    txid: str = "***",
) -> str:
    merchant_account = _field("00", _GUI) + _field("01", pix_key)
    txid = "".join(ch for ch in txid if ch.isalnum())[:25] or "***"

    payload = (
        _field("00", "01")
        + _field("26", merchant_account)
        + _field("52", "0000")
        + _field("53", "986")  # BRL
        + _field("54", f"{amount_cents / 100:.2f}")
        + _field("58", "BR")
        + _field("59", _sanitize(merchant_name, 25))
        + _field("60", _sanitize(merchant_city, 15))
        + _field("62", _field("05", txid))
        + "6304"
    )
    return payload + crc16_ccitt(payload)
