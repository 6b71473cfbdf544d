"""
Settings and environment management for the Search Console tool server.

Configuration is loaded with pydantic-settings from environment variables and
an optional .env file, then cached as a singleton via @lru_cache.

Environment Variables:
- GOOGLE_APPLICATION_CREDENTIALS: Path to the service account JSON key file (Required)
- GSC_WRITE_ACCESS: Request the full webmasters scope so sitemaps can be
  submitted and deleted (default: true). When false the readonly scope is used.
- LOG_LEVEL: Root logging level (default: INFO)
- SERVER_NAME: Name reported to tool clients during initialization
  (default: gsc-mcp-server)

Usage:
    from gsc_server.core.config import get_settings

    settings = get_settings()
    key_file = settings.google_application_credentials
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        google_application_credentials: Path to the service account key file.
        gsc_write_access: Whether to request the read/write webmasters scope.
        log_level: Logging level name applied at startup.
        server_name: Server name announced over the tool transport.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # Service account JSON key file; the server cannot start without it
    google_application_credentials: str

    # Full scope is needed for submit_sitemap / delete_sitemap
    gsc_write_access: bool = True

    log_level: str = 'INFO'

    server_name: str = 'gsc-mcp-server'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Raises:
        pydantic.ValidationError: If GOOGLE_APPLICATION_CREDENTIALS is not set.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
