import os
from typing import Mapping, Optional

from ociproxy.errors import ConfigurationError
from ociproxy.objects.credentials import OCICredentials

TENANCY_VAR = "OCI_TENANCY_OCID"
USER_VAR = "OCI_USER_OCID"
FINGERPRINT_VAR = "OCI_FINGERPRINT"
PRIVATE_KEY_VAR = "OCI_PRIVATE_KEY"
PASSPHRASE_VAR = "OCI_PRIVATE_KEY_PASSPHRASE"

REQUIRED_VARS = (TENANCY_VAR, USER_VAR, FINGERPRINT_VAR, PRIVATE_KEY_VAR)


def normalize_pem(pem: str) -> str:
    """
    Undo the escaping applied when a PEM key is stored in a single-line env var.

    Args:
        pem (str): Key text, possibly containing literal `\\n` sequences.

    Returns:
        str: PEM text with real newlines and no surrounding whitespace.
    """
    return pem.replace("\\n", "\n").strip()


def load_credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> OCICredentials:
    """
    Read the OCI API key identity and private key from the environment.

    Args:
        environ (Optional[Mapping[str, str]]): Variables to read from; defaults to `os.environ`.

    Returns:
        OCICredentials: Immutable credentials ready to hand to the signer.

    Raises:
        ConfigurationError: If any required variable is missing or empty.
    """
    env = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_VARS if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing OCI credentials: {', '.join(missing)}")

    return OCICredentials(
        tenancy_ocid=env[TENANCY_VAR].strip(),
        user_ocid=env[USER_VAR].strip(),
        fingerprint=env[FINGERPRINT_VAR].strip(),
        private_key=normalize_pem(env[PRIVATE_KEY_VAR]),
        passphrase=env.get(PASSPHRASE_VAR) or None,
    )
