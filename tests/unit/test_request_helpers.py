import pytest
from starlette.requests import Request

from portal.config.settings import settings
from portal.utils.auth import extract_client_ip, is_secure_request

pytestmark = pytest.mark.unit


def _request(client_ip: str, scheme: str = "http", **headers: str) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": scheme,
        "server": ("testserver", 80),
        "path": "/api/auth/login",
        "root_path": "",
        "query_string": b"",
        "headers": [(name.lower().replace("_", "-").encode(), value.encode()) for name, value in headers.items()],
        "client": (client_ip, 50000),
    }
    return Request(scope)


def test_forwarded_proto_from_untrusted_peer_is_ignored():
    request = _request("203.0.113.9", X_Forwarded_Proto="https")
    assert is_secure_request(request) is False


def test_forwarded_proto_from_trusted_proxy_is_honored(monkeypatch):
    monkeypatch.setattr(settings.security, "trusted_proxy_ips", ["10.0.0.0/8"])

    assert is_secure_request(_request("10.1.2.3", X_Forwarded_Proto="https")) is True
    assert is_secure_request(_request("10.1.2.3", scheme="https", X_Forwarded_Proto="http")) is False


def test_direct_https_without_proxy_headers():
    assert is_secure_request(_request("203.0.113.9", scheme="https")) is True
    assert is_secure_request(_request("203.0.113.9")) is False


def test_client_ip_uses_forwarded_for_only_behind_trusted_proxy(monkeypatch):
    spoofed = _request("203.0.113.9", X_Forwarded_For="198.51.100.1")
    assert extract_client_ip(spoofed) == "203.0.113.9"

    # Em desenvolvimento o loopback conta como proxy confiável
    proxied = _request("127.0.0.1", X_Forwarded_For="198.51.100.1, 127.0.0.1")
    assert extract_client_ip(proxied) == "198.51.100.1"

    monkeypatch.setattr(settings.server, "env", "production")
    assert extract_client_ip(_request("127.0.0.1", X_Forwarded_For="198.51.100.1")) == "127.0.0.1"
