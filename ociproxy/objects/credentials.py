from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class OCICredentials:
    """
    The identity triple and key material used to sign outbound OCI requests.

    Attributes:
        tenancy_ocid (str): OCID of the tenancy that owns the API key.
        user_ocid (str): OCID of the user the API key belongs to.
        fingerprint (str): Fingerprint of the uploaded public key.
        private_key (str): PEM-encoded RSA private key with real newlines.
        passphrase (Optional[str]): Passphrase of an encrypted private key, if any.
    """
    tenancy_ocid: str
    user_ocid: str
    fingerprint: str
    private_key: str = field(repr=False)
    passphrase: Optional[str] = field(default=None, repr=False)

    @property
    def key_id(self) -> str:
        return f"{self.tenancy_ocid}/{self.user_ocid}/{self.fingerprint}"
