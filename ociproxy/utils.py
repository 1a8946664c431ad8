import json
from email.utils import formatdate
from typing import Any, Optional

import httpx


def http_date() -> str:
    """
    Current time as an RFC 1123 HTTP-date, e.g. `Mon, 19 Oct 2026 10:00:00 GMT`.

    Returns:
        str: Timestamp suitable for the `Date` header.
    """
    return formatdate(usegmt=True)


def has_body(body: Any) -> bool:
    # falsy payloads (None, 0, false, empty str/bytes/containers) are never signed or sent
    return bool(body)


def serialize_body(body: Any) -> bytes:
    """
    Serialise a request payload to the exact bytes that are digested and transmitted.

    Bytes are passed through untouched; anything else is written as compact JSON
    (no whitespace after separators, non-ASCII characters kept as UTF-8).

    Args:
        body (Any): Payload to serialise.

    Returns:
        bytes: The canonical byte representation.
    """
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def resolve_host(service: str, region: str, domain: str, full_host: Optional[str] = None) -> str:
    """
    Work out the host a call is sent to.

    An explicit `full_host` always wins; otherwise the host is templated as
    `<service>.<region>.<domain>`.

    Args:
        service (str): OCI service prefix, e.g. `objectstorage` or `document`.
        region (str): Region identifier, e.g. `ap-singapore-1`.
        domain (str): Realm domain, e.g. `oraclecloud.com`.
        full_host (Optional[str]): Fully qualified override.

    Returns:
        str: Fully qualified host name.
    """
    if full_host:
        return full_host
    return f"{service}.{region}.{domain}"


def create_http_client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout)
