"""
Cached Google service account credentials.

A single credentials handle is created from the service account key file the
first time it is needed and reused for the lifetime of the process. There is
no teardown; reset_credentials() exists for tests.

Initialization is not locked: the server acquires credentials once at startup
before any tool call runs.

Scopes:
- https://www.googleapis.com/auth/webmasters (read/write, needed for sitemaps)
- https://www.googleapis.com/auth/webmasters.readonly
"""

import logging
from typing import List, Optional

from google.oauth2 import service_account

from gsc_server.core.config import get_settings

logger = logging.getLogger(__name__)


WEBMASTERS_SCOPE = 'https://www.googleapis.com/auth/webmasters'
WEBMASTERS_READONLY_SCOPE = 'https://www.googleapis.com/auth/webmasters.readonly'


# Global credentials instance - None until init_credentials() is called
_credentials: Optional[service_account.Credentials] = None


def scopes_for(write_access: bool) -> List[str]:
    """Return the OAuth scopes for read/write or readonly access."""
    return [WEBMASTERS_SCOPE] if write_access else [WEBMASTERS_READONLY_SCOPE]


def init_credentials() -> service_account.Credentials:
    """
    Load service account credentials from GOOGLE_APPLICATION_CREDENTIALS.

    Idempotent: if credentials were already loaded, the cached handle is
    returned.

    Raises:
        FileNotFoundError: If the key file does not exist.
        ValueError: If the key file is not a valid service account key.
    """
    global _credentials

    if _credentials is None:
        settings = get_settings()
        _credentials = service_account.Credentials.from_service_account_file(
            settings.google_application_credentials,
            scopes=scopes_for(settings.gsc_write_access),
        )
        logger.info(
            f"Loaded service account credentials "
            f"({'read/write' if settings.gsc_write_access else 'readonly'} scope)"
        )

    return _credentials


def get_credentials() -> service_account.Credentials:
    """Get the credentials handle, loading it on first use."""
    if _credentials is None:
        return init_credentials()
    return _credentials


def reset_credentials() -> None:
    """Drop the cached handle so the next access reloads it."""
    global _credentials
    _credentials = None
