import ipaddress
from typing import Optional


def mask_value(value: str) -> str:
    """Mask emails, tokens and other identifiers before they reach a log line."""
    if not isinstance(value, str):
        return value
    if "@" in value:
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def mask_ip(ip_address: Optional[str]) -> str:
    """Keep the network part of an address: 192.168.1.x, 2001:db8:85a3::x"""
    if not ip_address:
        return "-"
    try:
        address = ipaddress.ip_address(ip_address)
    except ValueError:
        return "***"
    if address.version == 4:
        return ".".join(str(address).split(".")[:3] + ["x"])
    return ":".join(address.exploded.split(":")[:3]) + "::x"
