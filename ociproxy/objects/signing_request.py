from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SUPPORTED_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
BODY_METHODS = ("POST", "PUT", "PATCH")


@dataclass(frozen=True)
class SigningRequest:
    """
    Everything needed to sign a single outbound request.

    Attributes:
        method (str): HTTP verb, sent as given and lowercased only inside the signing string.
        path (str): Absolute request path including any query string, starting with `/`.
        host (str): Fully qualified host name the request is sent to.
        key_id (str): Opaque key identifier placed in the Authorization header.
        private_key (str): PEM-encoded RSA private key.
        body (Any): Optional payload; only signed for POST, PUT and PATCH.
        timestamp (Optional[str]): HTTP-date to sign; generated at signing time when omitted.
        passphrase (Optional[str]): Passphrase of an encrypted private key.
    """
    method: str
    path: str
    host: str
    key_id: str
    private_key: str = field(repr=False)
    body: Any = None
    timestamp: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)


@dataclass
class SignedHeaders:
    """
    The result of signing: headers to attach, plus the exact body bytes to transmit.

    Attributes:
        headers (Dict[str, str]): Ordered header mapping ending with Authorization.
        signed_header_names (List[str]): Header names covered by the signature, in signing order.
        signing_string (str): The canonical text the signature was computed over.
        body (Optional[bytes]): Serialized body that was digested, or None when no body is signed.
    """
    headers: Dict[str, str]
    signed_header_names: List[str]
    signing_string: str
    body: Optional[bytes] = None

    @property
    def authorization(self) -> str:
        return self.headers["Authorization"]
