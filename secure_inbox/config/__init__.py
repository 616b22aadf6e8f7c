from .scanner_config import SCANNER_CONFIG

__all__ = ['SCANNER_CONFIG']
