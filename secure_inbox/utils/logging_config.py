"""
Logging setup and log-safe formatting helpers.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure root logging with a console handler and an optional file handler.

    Args:
        level: Logging level name
        log_dir: Directory for ``secure_inbox.log``; console only if None
    """
    handlers = [logging.StreamHandler()]
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(Path(log_dir) / 'secure_inbox.log'))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Provider request details are noisy at DEBUG
    logging.getLogger('aiohttp').setLevel(logging.WARNING)


def mask_email(email: str) -> str:
    """
    Mask an email address for logging.

    Keeps the first and last character of the user part and the first
    character of the domain label.
    """
    if not email or '@' not in email:
        return email

    username, domain = email.split('@', 1)
    if len(username) <= 2:
        masked_username = '*' * len(username)
    else:
        masked_username = username[0] + '*' * (len(username) - 2) + username[-1]

    domain_parts = domain.split('.')
    label = domain_parts[0]
    masked_label = (label[0] + '*' * (len(label) - 1)) if label else ''

    if len(domain_parts) > 1:
        return f"{masked_username}@{masked_label}.{'.'.join(domain_parts[1:])}"
    return f"{masked_username}@{masked_label}"
