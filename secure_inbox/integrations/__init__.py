from .base import ReputationClient
from .cache import ReputationCache
from .credentials import CredentialPool
from .exceptions import (
    CredentialsExhaustedError,
    QuotaExceededError,
    ReputationServiceError,
    TransientProviderError,
)
from .safebrowsing.client import SafeBrowsingClient
from .virustotal.client import VirusTotalClient

__all__ = [
    'ReputationClient',
    'ReputationCache',
    'CredentialPool',
    'CredentialsExhaustedError',
    'QuotaExceededError',
    'ReputationServiceError',
    'TransientProviderError',
    'SafeBrowsingClient',
    'VirusTotalClient',
]
