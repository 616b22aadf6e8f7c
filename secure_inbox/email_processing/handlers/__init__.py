from .contacts import TrustedContacts
from .links import extract_links

__all__ = ['TrustedContacts', 'extract_links']
