"""
API Package Initialization

HTTP surface of the Secure Inbox scanner: configuration, request and
response models, routes and the scanner service wiring.
"""

from api.config import get_settings

__all__ = ['get_settings']
