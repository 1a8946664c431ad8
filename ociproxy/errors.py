class SigningError(Exception):
    """Base class for everything that stops a request from being signed."""


class ValidationError(SigningError):
    """A required signing input (method, path, host) is missing or malformed."""


class ConfigurationError(SigningError):
    """Key identity or private key material is missing or cannot be parsed."""


class CryptoError(SigningError):
    """The signing operation itself failed."""
