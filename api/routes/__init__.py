"""
API Routes Package

Centralizes route management with proper module organization
and clean import structure.
"""

from api.routes import contacts
from api.routes import dashboard
from api.routes import emails

__all__ = ["contacts", "dashboard", "emails"]
