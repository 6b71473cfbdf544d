"""
Services Module

Business logic for the Search Console tool server. Services are stateless
apart from the lazily built API resources held by SearchConsoleService.

Services:
- normalization: Row framing with zero-defaulted measures, rounding helpers
- query_builder: Tool arguments -> Search Analytics request bodies
- quick_wins: Quick wins detection and reporting
- search_console: Search Console API client with permission fallback
"""

# =============================================================================
# Query Builder Exports
# =============================================================================

from gsc_server.services.query_builder import (
    apply_regex_filter,
    build_filter_groups,
    build_quick_wins_request,
    build_search_analytics_request,
    parse_dimensions,
)

# =============================================================================
# Quick Wins Exports
# =============================================================================

from gsc_server.services.quick_wins import (
    build_quick_wins_report,
    classify_opportunity,
    detect_quick_wins,
    generate_recommendation,
)

# =============================================================================
# Search Console Client Exports
# =============================================================================

from gsc_server.services.search_console import (
    SearchConsoleError,
    SearchConsoleService,
    normalize_site_url,
    with_permission_fallback,
)

__all__ = [
    "apply_regex_filter",
    "build_filter_groups",
    "build_quick_wins_request",
    "build_search_analytics_request",
    "parse_dimensions",
    "build_quick_wins_report",
    "classify_opportunity",
    "detect_quick_wins",
    "generate_recommendation",
    "SearchConsoleError",
    "SearchConsoleService",
    "normalize_site_url",
    "with_permission_fallback",
]
