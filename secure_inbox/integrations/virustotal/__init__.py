from .client import VirusTotalClient

__all__ = ['VirusTotalClient']
