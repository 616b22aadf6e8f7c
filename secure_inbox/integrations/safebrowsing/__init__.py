from .client import SafeBrowsingClient

__all__ = ['SafeBrowsingClient']
