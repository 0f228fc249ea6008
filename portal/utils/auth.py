from __future__ import annotations

import ipaddress
from typing import Any

from fastapi import Request

from portal.config.settings import settings


def is_secure_request(request: Request) -> bool:
    direct_ip = request.client.host if request.client and request.client.host else None
    forwarded_proto = request.headers.get("X-Forwarded-Proto", "")
    # Mesmo critério do X-Forwarded-For: só proxies confiáveis definem o esquema
    if forwarded_proto and _is_trusted_proxy(direct_ip):
        return forwarded_proto.split(",", 1)[0].strip().lower() == "https"
    return request.url.scheme == "https"


def _load_trusted_proxy_networks() -> list[Any]:
    raw_values = list(settings.security.trusted_proxy_ips or [])
    if settings.server.env == "development":
        raw_values.extend(["127.0.0.1/32", "::1/128"])

    networks: list[Any] = []
    for raw in raw_values:
        value = str(raw or "").strip()
        if not value:
            continue
        try:
            networks.append(ipaddress.ip_network(value, strict=False))
        except ValueError:
            continue
    return networks


def _is_trusted_proxy(ip_text: str | None) -> bool:
    if not ip_text:
        return False
    try:
        ip = ipaddress.ip_address(ip_text)
    except ValueError:
        return False
    return any(ip in network for network in _load_trusted_proxy_networks())


def extract_client_ip(request: Request) -> str:
    direct_ip = request.client.host if request.client and request.client.host else None
    forwarded_for = request.headers.get("X-Forwarded-For", "").strip()

    # X-Forwarded-For só vale quando o peer imediato é um proxy confiável.
    if forwarded_for and _is_trusted_proxy(direct_ip):
        first_hop = forwarded_for.split(",", 1)[0].strip()
        try:
            ipaddress.ip_address(first_hop)
            return first_hop
        except ValueError:
            pass

    return direct_ip or "unknown"
