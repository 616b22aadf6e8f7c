from .logging_config import mask_email, setup_logging

__all__ = ['mask_email', 'setup_logging']
