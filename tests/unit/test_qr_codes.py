import base64

import pytest

from portal.config.exceptions import ServiceError
from portal.utils import qr_codes
from portal.utils.qr_codes import build_memorial_url, generate_qr_code

pytestmark = pytest.mark.unit

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_build_memorial_url_strips_trailing_slash():
    assert build_memorial_url("https://portal.test/", "joaquim-nabuco") == "https://portal.test/m/joaquim-nabuco"


def test_png_is_returned_as_data_uri():
    result = generate_qr_code("https://portal.test/m/capiba")
    prefix = "data:image/png;base64,"
    assert result.startswith(prefix)
    assert base64.b64decode(result[len(prefix):]).startswith(PNG_SIGNATURE)


def test_svg_is_returned_as_markup():
    result = generate_qr_code("https://portal.test/m/capiba", "svg")
    assert "<svg" in result
    assert result.rstrip().endswith("</svg>")


def test_unknown_format_raises_service_error():
    with pytest.raises(ServiceError) as exc_info:
        generate_qr_code("x", "gif")
    assert exc_info.value.service == "qrcode"


def test_encoder_failure_is_wrapped(monkeypatch):
    def _boom(*_args, **_kwargs):
        raise ValueError("data too large")

    monkeypatch.setattr(qr_codes, "_encode", _boom)
    with pytest.raises(ServiceError) as exc_info:
        generate_qr_code("x" * 10)
    assert exc_info.value.message == "Falha ao gerar código QR"
