"""
Package initialization file for models.

Re-exports the enums and Pydantic schemas so other modules can import them
from gsc_server.models directly.
"""

# =============================================================================
# Enums
# =============================================================================

from gsc_server.models.enums import (
    AggregationType,
    DataState,
    DeviceType,
    Dimension,
    FilterOperator,
    OpportunityLevel,
    SearchType,
)


# =============================================================================
# Schemas
# =============================================================================

from gsc_server.models.schemas import (
    # Tool arguments
    GSCBaseArgs,
    DateRangeArgs,
    SearchAnalyticsArgs,
    EnhancedSearchAnalyticsArgs,
    QuickWinsThresholds,
    QuickWinsThresholdArgs,
    QuickWinsDetectionArgs,
    IndexInspectArgs,
    ListSitemapsArgs,
    SitemapArgs,
    # Upstream request/response records
    DimensionFilter,
    DimensionFilterGroup,
    SearchAnalyticsRequest,
    SearchAnalyticsRow,
    # Quick wins
    QuickWin,
    EnhancedSearchAnalyticsMetadata,
    EnhancedSearchAnalyticsResponse,
    QuickWinsSummaryThresholds,
    QuickWinsSummary,
    QuickWinsReport,
)

__all__ = [
    "AggregationType",
    "DataState",
    "DeviceType",
    "Dimension",
    "FilterOperator",
    "OpportunityLevel",
    "SearchType",
    "GSCBaseArgs",
    "DateRangeArgs",
    "SearchAnalyticsArgs",
    "EnhancedSearchAnalyticsArgs",
    "QuickWinsThresholds",
    "QuickWinsThresholdArgs",
    "QuickWinsDetectionArgs",
    "IndexInspectArgs",
    "ListSitemapsArgs",
    "SitemapArgs",
    "DimensionFilter",
    "DimensionFilterGroup",
    "SearchAnalyticsRequest",
    "SearchAnalyticsRow",
    "QuickWin",
    "EnhancedSearchAnalyticsMetadata",
    "EnhancedSearchAnalyticsResponse",
    "QuickWinsSummaryThresholds",
    "QuickWinsSummary",
    "QuickWinsReport",
]
