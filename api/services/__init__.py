# api/services/__init__.py
"""
API Services Package

Centralizes service implementations for clean business logic
separation from route handlers.
"""

from api.services.scanner_service import ScannerService, get_scanner_service

__all__ = ["ScannerService", "get_scanner_service"]
