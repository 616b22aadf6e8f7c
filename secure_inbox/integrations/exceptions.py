"""
Reputation provider error taxonomy.

TransientProviderError and QuotaExceededError are recovered inside the
reputation clients. CredentialsExhaustedError escapes to the caller,
which reports the link as unverifiable.
"""


class ReputationServiceError(Exception):
    """Base class for reputation provider failures."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(message)


class TransientProviderError(ReputationServiceError):
    """Network failure, malformed payload or unexpected HTTP status."""


class QuotaExceededError(ReputationServiceError):
    """Provider answered 429 for the credential in use."""


class CredentialsExhaustedError(ReputationServiceError):
    """Every credential in the pool was rate limited for one request."""
