import logging
from typing import Optional

from ociproxy.loader.credentials_loader import load_credentials_from_env
from ociproxy.objects.credentials import OCICredentials
from ociproxy.processor.forwarder import RequestForwarder
from ociproxy.processor.line_reconstructor import DEFAULT_Y_PRECISION, LineReconstructor
from ociproxy.processor.signer import SignatureBuilder, load_rsa_private_key
from ociproxy.utils import create_http_client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_pipeline(
        timeout: float,
        credentials: Optional[OCICredentials] = None,
        y_precision: int = DEFAULT_Y_PRECISION) -> RequestForwarder:
    """
    Bootstraps the signing proxy: credentials → key check → HTTP client → forwarder.

    Args:
        timeout (float): Timeout in seconds for calls to OCI.
        credentials (Optional[OCICredentials]): Explicit credentials; read from the environment when omitted.
        y_precision (int): Decimal places used to bucket OCR words into lines.

    Returns:
        RequestForwarder: Configured forwarder ready to sign and send calls.

    Raises:
        ConfigurationError: If credentials are missing or the private key cannot be parsed.
    """
    if credentials is None:
        logger.info("Loading OCI credentials from environment...")
        credentials = load_credentials_from_env()

    # parse once up front so a bad key fails at startup, not on the first call
    load_rsa_private_key(credentials.private_key, credentials.passphrase)
    logger.info(f"Loaded OCI API key for fingerprint {credentials.fingerprint}")

    logger.info(f"Creating HTTP client [timeout={timeout}s]")
    client = create_http_client(timeout)

    logger.info("Ready to sign requests.")
    return RequestForwarder(
        credentials=credentials,
        client=client,
        signer=SignatureBuilder(),
        reconstructor=LineReconstructor(precision=y_precision),
    )
