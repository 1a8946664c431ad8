import base64
import hashlib
import logging
from functools import lru_cache
from typing import List, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ociproxy.errors import ConfigurationError, CryptoError, ValidationError
from ociproxy.objects.signing_request import BODY_METHODS, SUPPORTED_METHODS, SignedHeaders, SigningRequest
from ociproxy.utils import has_body, http_date, serialize_body

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"
DIGEST_HEADER = "x-content-sha256"


@lru_cache(maxsize=16)
def load_rsa_private_key(pem: str, passphrase: Optional[str] = None) -> rsa.RSAPrivateKey:
    """
    Parse a PEM-encoded RSA private key. Parsed keys are cached by (pem, passphrase).

    Args:
        pem (str): PEM text with real newlines.
        passphrase (Optional[str]): Passphrase for an encrypted key.

    Returns:
        rsa.RSAPrivateKey: The parsed key.

    Raises:
        ConfigurationError: If the text is not a PEM private key or the key is not RSA.
    """
    password = passphrase.encode("utf-8") if passphrase else None
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigurationError(f"Private key is not a valid PEM-encoded key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(f"Private key must be RSA, got {type(key).__name__}")
    return key


class SignatureBuilder:
    """
    Builds OCI HTTP-signature headers (`Signature version="1"`, rsa-sha256) for a request.

    The signing string always covers `(request-target)`, `date` and `host`. Requests that
    carry a body with POST, PUT or PATCH additionally cover `x-content-sha256`,
    `content-type` and `content-length`, in that order. The builder holds no state and is
    safe to share between threads.
    """

    def build(self, req: SigningRequest) -> SignedHeaders:
        """
        Sign a request.

        Args:
            req (SigningRequest): The request metadata and key material.

        Returns:
            SignedHeaders: Header mapping, the signed header names, the signing string and
                the exact body bytes to transmit.

        Raises:
            ValidationError: If method, path or host is missing or malformed.
            ConfigurationError: If key id or private key is missing or unparseable.
            CryptoError: If the signature cannot be produced.
        """
        self._validate(req)
        private_key = self._load_key(req)

        date = req.timestamp or http_date()
        signed_header_names = ["(request-target)", "date", "host"]
        signing_lines = [
            f"(request-target): {req.method.lower()} {req.path}",
            f"date: {date}",
            f"host: {req.host}",
        ]
        headers = {"Date": date, "Host": req.host}

        body_bytes = None
        if has_body(req.body) and req.method.upper() in BODY_METHODS:
            body_bytes = serialize_body(req.body)
            digest = self.content_digest(body_bytes)
            content_length = str(len(body_bytes))

            headers["Content-Type"] = CONTENT_TYPE
            headers["Content-Length"] = content_length
            headers[DIGEST_HEADER] = digest

            signing_lines.append(f"{DIGEST_HEADER}: {digest}")
            signing_lines.append(f"content-type: {CONTENT_TYPE}")
            signing_lines.append(f"content-length: {content_length}")
            signed_header_names.extend([DIGEST_HEADER, "content-type", "content-length"])

        signing_string = "\n".join(signing_lines)
        signature = self._sign(private_key, signing_string)
        headers["Authorization"] = self.authorization_value(req.key_id, signed_header_names, signature)

        logger.debug(f"Signed {req.method} {req.path} over headers: {' '.join(signed_header_names)}")
        return SignedHeaders(
            headers=headers,
            signed_header_names=signed_header_names,
            signing_string=signing_string,
            body=body_bytes,
        )

    @staticmethod
    def content_digest(body: bytes) -> str:
        return base64.b64encode(hashlib.sha256(body).digest()).decode("ascii")

    @staticmethod
    def authorization_value(key_id: str, signed_header_names: List[str], signature: str) -> str:
        return (
            f'Signature version="1",keyId="{key_id}",algorithm="rsa-sha256",'
            f'headers="{" ".join(signed_header_names)}",signature="{signature}"'
        )

    @staticmethod
    def _validate(req: SigningRequest):
        if not req.method or not req.path:
            raise ValidationError("Missing required fields: method and path")
        if req.method.upper() not in SUPPORTED_METHODS:
            raise ValidationError(f"Unsupported HTTP method: {req.method}")
        if not req.path.startswith("/"):
            raise ValidationError(f"Path must start with '/': {req.path}")
        if not req.host:
            raise ValidationError("Missing required field: host")

    @staticmethod
    def _load_key(req: SigningRequest) -> rsa.RSAPrivateKey:
        # keyId is "<tenancy>/<user>/<fingerprint>"; an empty component means missing identity
        if not req.key_id or any(not part for part in req.key_id.split("/")):
            raise ConfigurationError("Missing key identity (tenancy, user or fingerprint)")
        if not req.private_key:
            raise ConfigurationError("Missing private key")
        return load_rsa_private_key(req.private_key, req.passphrase)

    @staticmethod
    def _sign(private_key: rsa.RSAPrivateKey, signing_string: str) -> str:
        try:
            raw = private_key.sign(signing_string.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError) as e:
            raise CryptoError(f"Failed to sign request: {e}") from e
        return base64.b64encode(raw).decode("ascii")
