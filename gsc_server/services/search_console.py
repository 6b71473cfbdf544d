"""
Google Search Console API Service

Thin client over the Search Console APIs used by the tool server:
- webmasters v3: searchanalytics.query, sites.list, sitemaps.*
- searchconsole v1: urlInspection.index.inspect

Features:
- Reuses one cached credentials handle (gsc_server.core.credentials)
- Permission fallback: a call that fails with a permission error is retried
  once against the sc-domain form of the site URL
- Enhanced search analytics: regex query filter plus quick wins detection

API calls are blocking (google-api-python-client); the tool transport runs
them in a worker thread.

See: https://developers.google.com/webmaster-tools/v1/api_reference_index
"""

import logging
import re
from typing import Any, Callable, Dict, Optional, TypeVar
from urllib.parse import urlparse

from googleapiclient.discovery import build

from gsc_server.core.credentials import get_credentials
from gsc_server.models.schemas import (
    DEFAULT_ROW_LIMIT,
    EnhancedSearchAnalyticsMetadata,
    EnhancedSearchAnalyticsResponse,
    QuickWinsThresholds,
    SearchAnalyticsRequest,
    SearchAnalyticsRow,
)
from gsc_server.services.query_builder import apply_regex_filter
from gsc_server.services.quick_wins import ThresholdsLike, detect_quick_wins

logger = logging.getLogger(__name__)

T = TypeVar("T")

SC_DOMAIN_PREFIX = "sc-domain:"

# Lower-cased fragments that mark an upstream error as a permission problem
PERMISSION_ERROR_MARKERS = ("permission", "403")


class SearchConsoleError(Exception):
    """An upstream Search Console call failed for a non-permission reason."""


# =============================================================================
# Site URL Normalization and Permission Fallback
# =============================================================================


def normalize_site_url(url: str) -> str:
    """
    Convert a site URL to its sc-domain property form.

    - "sc-domain:example.com" is returned unchanged
    - "https://www.example.com/blog" -> "sc-domain:www.example.com"
    - "example.com/path" (not a parseable URL) -> "sc-domain:example.com"
    """
    if url.startswith(SC_DOMAIN_PREFIX):
        return url

    parsed = urlparse(url)
    if parsed.scheme and parsed.hostname:
        return f"{SC_DOMAIN_PREFIX}{parsed.hostname}"

    # Not a URL; treat it as a bare domain
    return f"{SC_DOMAIN_PREFIX}{re.sub(r'^https?://', '', url).split('/')[0]}"


def is_permission_error(err: BaseException) -> bool:
    message = str(err).lower()
    return any(marker in message for marker in PERMISSION_ERROR_MARKERS)


def with_permission_fallback(
    operation: Callable[[], T],
    fallback_operation: Callable[[], T],
    context: str,
) -> T:
    """
    Run an operation, retrying once via a fallback on permission errors.

    Args:
        operation: Primary call
        fallback_operation: Alternate call, tried exactly once when the
            primary fails with a permission error
        context: Operation name used in log and error messages

    Returns:
        Result of whichever call succeeded

    Raises:
        SearchConsoleError: If the primary call fails for any other reason.
            Errors raised by the fallback propagate unchanged.
    """
    try:
        return operation()
    except Exception as err:
        if is_permission_error(err):
            logger.warning(f"[GSC] Permission error in {context}, trying normalized URL...")
            return fallback_operation()

        logger.error(f"[GSC] {context} failed: {err}")
        raise SearchConsoleError(f"[GSC] {context} failed: {err}") from err


# =============================================================================
# Service Class
# =============================================================================


class SearchConsoleService:
    """
    Service for interacting with the Google Search Console API.

    API resources are built lazily from the cached credentials. Tests can
    pass pre-built (mock) resources instead.
    """

    def __init__(
        self,
        write_access: bool = True,
        webmasters: Any = None,
        search_console: Any = None,
    ):
        self.has_write_access = write_access
        self._webmasters = webmasters
        self._search_console = search_console

    # -------------------------------------------------------------------------
    # API resources
    # -------------------------------------------------------------------------

    @property
    def webmasters(self) -> Any:
        if self._webmasters is None:
            self._webmasters = build(
                'webmasters', 'v3', credentials=get_credentials(), cache_discovery=False
            )
        return self._webmasters

    @property
    def search_console(self) -> Any:
        if self._search_console is None:
            self._search_console = build(
                'searchconsole', 'v1', credentials=get_credentials(), cache_discovery=False
            )
        return self._search_console

    def _require_write_access(self, action: str) -> None:
        if not self.has_write_access:
            raise PermissionError(
                f"Write access required to {action} sitemaps. "
                f"Set GSC_WRITE_ACCESS=true to request the full webmasters scope"
            )

    # -------------------------------------------------------------------------
    # Search Analytics
    # -------------------------------------------------------------------------

    def search_analytics(self, site_url: str, request: SearchAnalyticsRequest) -> Dict[str, Any]:
        """Query Search Analytics data for a site."""
        body = request.to_body()
        searchanalytics = self.webmasters.searchanalytics()

        return with_permission_fallback(
            lambda: searchanalytics.query(siteUrl=site_url, body=body).execute(),
            lambda: searchanalytics.query(siteUrl=normalize_site_url(site_url), body=body).execute(),
            'searchAnalytics',
        )

    def enhanced_search_analytics(
        self,
        site_url: str,
        request: SearchAnalyticsRequest,
        regex_filter: Optional[str] = None,
        enable_quick_wins: bool = False,
        quick_wins_thresholds: Optional[ThresholdsLike] = None,
    ) -> EnhancedSearchAnalyticsResponse:
        """
        Search Analytics with a regex query filter and quick wins detection.

        - The regex filter is only sent when the request groups by query
        - Quick wins run only when enabled and upstream returned rows

        Raises:
            ValueError: If no request is given.
        """
        if request is None:
            raise ValueError("Request body is required")

        enhanced_request = apply_regex_filter(request, regex_filter)

        result = self.search_analytics(site_url, enhanced_request)
        rows = [SearchAnalyticsRow.model_validate(row) for row in result.get('rows') or []]

        response = EnhancedSearchAnalyticsResponse(
            rows=rows,
            responseAggregationType=result.get('responseAggregationType'),
            metadata=EnhancedSearchAnalyticsMetadata(
                regexFilterApplied=bool(regex_filter),
                quickWinsEnabled=bool(enable_quick_wins),
                rowLimit=enhanced_request.rowLimit or DEFAULT_ROW_LIMIT,
                totalRows=len(rows),
            ),
        )

        if enable_quick_wins and rows:
            response.quickWins = detect_quick_wins(rows, quick_wins_thresholds or QuickWinsThresholds())

        return response

    # -------------------------------------------------------------------------
    # Sites
    # -------------------------------------------------------------------------

    def list_sites(self) -> Dict[str, Any]:
        """List all sites the service account can access."""
        return self.webmasters.sites().list().execute()

    # -------------------------------------------------------------------------
    # Sitemaps
    # -------------------------------------------------------------------------

    def list_sitemaps(self, site_url: str, sitemap_index: Optional[str] = None) -> Dict[str, Any]:
        sitemaps = self.webmasters.sitemaps()
        extra: Dict[str, Any] = {'sitemapIndex': sitemap_index} if sitemap_index else {}

        return with_permission_fallback(
            lambda: sitemaps.list(siteUrl=site_url, **extra).execute(),
            lambda: sitemaps.list(siteUrl=normalize_site_url(site_url), **extra).execute(),
            'listSitemaps',
        )

    def get_sitemap(self, site_url: str, feedpath: str) -> Dict[str, Any]:
        sitemaps = self.webmasters.sitemaps()

        return with_permission_fallback(
            lambda: sitemaps.get(siteUrl=site_url, feedpath=feedpath).execute(),
            lambda: sitemaps.get(siteUrl=normalize_site_url(site_url), feedpath=feedpath).execute(),
            'getSitemap',
        )

    def submit_sitemap(self, site_url: str, feedpath: str) -> Any:
        """
        Submit a sitemap for a site.

        Raises:
            PermissionError: If the service was created without write access.
        """
        self._require_write_access('submit')
        sitemaps = self.webmasters.sitemaps()

        return with_permission_fallback(
            lambda: sitemaps.submit(siteUrl=site_url, feedpath=feedpath).execute(),
            lambda: sitemaps.submit(siteUrl=normalize_site_url(site_url), feedpath=feedpath).execute(),
            'submitSitemap',
        )

    def delete_sitemap(self, site_url: str, feedpath: str) -> Any:
        """
        Delete a sitemap from a site.

        Raises:
            PermissionError: If the service was created without write access.
        """
        self._require_write_access('delete')
        sitemaps = self.webmasters.sitemaps()

        return with_permission_fallback(
            lambda: sitemaps.delete(siteUrl=site_url, feedpath=feedpath).execute(),
            lambda: sitemaps.delete(siteUrl=normalize_site_url(site_url), feedpath=feedpath).execute(),
            'deleteSitemap',
        )

    # -------------------------------------------------------------------------
    # URL Inspection
    # -------------------------------------------------------------------------

    def index_inspect(self, site_url: str, inspection_url: str, language_code: str) -> Dict[str, Any]:
        """
        Inspect a URL's indexing status. No permission fallback is attempted.

        See: https://developers.google.com/webmaster-tools/v1/urlInspection.index/inspect
        """
        body = {
            'siteUrl': site_url,
            'inspectionUrl': inspection_url,
            'languageCode': language_code,
        }
        try:
            return self.search_console.urlInspection().index().inspect(body=body).execute()
        except Exception as err:
            logger.error(f"[GSC] indexInspect failed: {err}")
            raise SearchConsoleError(f"[GSC] indexInspect failed: {err}") from err


__all__ = [
    "SearchConsoleError",
    "SearchConsoleService",
    "normalize_site_url",
    "is_permission_error",
    "with_permission_fallback",
]
