"""
Pydantic request/response models for the Search Console tool server.

This module provides validation and serialization for every tool contract:
- Tool argument models (validated before any upstream call is made)
- Upstream request records for the Search Analytics query endpoint
- Performance rows as returned by the upstream API
- Quick win opportunities, the enhanced analytics response and the
  quick wins report

Field names are camelCase so they line up one-to-one with the JSON the tools
accept and emit. All models use Pydantic v2 syntax.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

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
# Validation Constants
# =============================================================================

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# IETF BCP-47 language code, e.g. "en" or "en-US"
LANGUAGE_CODE_PATTERN = r"^[a-z]{2}(-[A-Z]{2})?$"

MAX_ROW_LIMIT = 25000
DEFAULT_ROW_LIMIT = 1000

VALID_DIMENSIONS = [dimension.value for dimension in Dimension]


def _validate_calendar_date(value: str) -> str:
    """Reject strings that match YYYY-MM-DD but are not real dates (2024-02-30)."""
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("Must be a valid calendar date in YYYY-MM-DD format")
    return value


def _validate_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Must be a valid URL")
    return value


def split_dimensions(value: str) -> List[str]:
    """Split a comma-separated dimension list, trimming whitespace."""
    return [part.strip() for part in value.split(",")]


# =============================================================================
# Tool Argument Models
# =============================================================================


class GSCBaseArgs(BaseModel):
    """
    Arguments shared by every site-scoped tool.

    Example siteUrl values:
    - sc-domain:example.com (domain property)
    - https://www.example.com/ (URL-prefix property)
    """
    siteUrl: str = Field(
        ...,
        min_length=1,
        description=(
            "The site URL as defined in Search Console. Example: sc-domain:example.com "
            "(for domain properties) or https://www.example.com/ (for URL-prefix properties)"
        ),
    )


class DateRangeArgs(BaseModel):
    """Inclusive date range; start <= end is left to the upstream API."""
    startDate: str = Field(
        ...,
        pattern=DATE_PATTERN,
        description="Start date in YYYY-MM-DD format (Pacific Time)",
    )
    endDate: str = Field(
        ...,
        pattern=DATE_PATTERN,
        description="End date in YYYY-MM-DD format (Pacific Time)",
    )

    @field_validator("startDate", "endDate")
    @classmethod
    def check_calendar_date(cls, value: str) -> str:
        return _validate_calendar_date(value)


class SearchAnalyticsArgs(GSCBaseArgs, DateRangeArgs):
    """
    Arguments for the `search_analytics` tool.

    The four simple filters share `filterOperator`; country and device
    filters are always sent upstream with the `equals` operator.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "siteUrl": "sc-domain:example.com",
                "startDate": "2025-01-01",
                "endDate": "2025-01-31",
                "dimensions": "query,page",
                "rowLimit": 1000,
                "queryFilter": "shoes",
                "filterOperator": "contains",
            }
        }
    )

    dimensions: Optional[str] = Field(
        default=None,
        description=f"Comma-separated list of dimensions: {', '.join(VALID_DIMENSIONS)}",
    )
    type: Optional[SearchType] = Field(
        default=None,
        description="Search type filter",
    )
    aggregationType: Optional[AggregationType] = Field(
        default=None,
        description="How to aggregate results",
    )
    rowLimit: int = Field(
        default=DEFAULT_ROW_LIMIT,
        ge=1,
        le=MAX_ROW_LIMIT,
        description="Maximum rows to return (1-25,000, default: 1,000)",
    )
    startRow: int = Field(
        default=0,
        ge=0,
        description="Zero-based row offset for pagination",
    )
    dataState: DataState = Field(
        default=DataState.FINAL,
        description='Data freshness: "all" includes fresh unfinalized data, "final" for finalized only',
    )
    pageFilter: Optional[str] = Field(
        default=None,
        description="Filter by page URL (use with filterOperator)",
    )
    queryFilter: Optional[str] = Field(
        default=None,
        description="Filter by search query (use with filterOperator)",
    )
    countryFilter: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="Filter by country (ISO 3166-1 alpha-3 code, e.g., USA, DEU, CHN)",
    )
    deviceFilter: Optional[DeviceType] = Field(
        default=None,
        description="Filter by device type",
    )
    filterOperator: FilterOperator = Field(
        default=FilterOperator.EQUALS,
        description="Operator for page/query filters",
    )

    @field_validator("dimensions")
    @classmethod
    def check_dimensions(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not all(part in VALID_DIMENSIONS for part in split_dimensions(value)):
            raise ValueError(f"Invalid dimensions. Valid values: {', '.join(VALID_DIMENSIONS)}")
        return value


class QuickWinsThresholds(BaseModel):
    """
    Threshold profile controlling quick wins detection.

    Every field has a default so callers may override any subset. An inverted
    position range (min > max) is accepted and simply matches no rows.
    """
    minImpressions: int = Field(
        default=50,
        ge=0,
        description="Minimum impressions threshold",
    )
    maxCtr: float = Field(
        default=2.0,
        ge=0,
        le=100,
        description="Maximum CTR percentage (0-100)",
    )
    positionRangeMin: float = Field(
        default=4,
        ge=1,
        le=100,
        description="Minimum position (1-100)",
    )
    positionRangeMax: float = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum position (1-100)",
    )
    targetCtr: float = Field(
        default=5.0,
        ge=0,
        le=100,
        description="Target CTR percentage for potential calculation",
    )
    estimatedClickValue: float = Field(
        default=1.0,
        ge=0,
        description="Estimated value per click ($)",
    )
    conversionRate: float = Field(
        default=0.03,
        ge=0,
        le=1,
        description="Estimated conversion rate (0-1)",
    )


class QuickWinsThresholdArgs(QuickWinsThresholds):
    """Threshold overrides accepted from tool callers; at least one impression is required."""
    minImpressions: int = Field(
        default=50,
        ge=1,
        description="Minimum impressions threshold",
    )


class QuickWinsDetectionArgs(GSCBaseArgs, DateRangeArgs, QuickWinsThresholdArgs):
    """Arguments for the `detect_quick_wins` tool: site, date range and thresholds."""

    def thresholds(self) -> QuickWinsThresholds:
        return QuickWinsThresholds.model_validate(
            self.model_dump(include=set(QuickWinsThresholds.model_fields))
        )


class EnhancedSearchAnalyticsArgs(SearchAnalyticsArgs):
    """Arguments for `enhanced_search_analytics`: search analytics plus extras."""
    regexFilter: Optional[str] = Field(
        default=None,
        description="Additional regex filter for query dimension",
    )
    enableQuickWins: bool = Field(
        default=False,
        description="Enable automatic quick wins detection",
    )
    quickWinsThresholds: Optional[QuickWinsThresholdArgs] = Field(
        default=None,
        description="Custom thresholds for quick wins detection",
    )


class IndexInspectArgs(GSCBaseArgs):
    """Arguments for the `index_inspect` tool."""
    inspectionUrl: str = Field(
        ...,
        description="The fully-qualified URL to inspect",
    )
    languageCode: str = Field(
        default="en-US",
        pattern=LANGUAGE_CODE_PATTERN,
        description='Language code for translated messages (e.g., "en-US", "de-CH")',
    )

    @field_validator("inspectionUrl")
    @classmethod
    def check_inspection_url(cls, value: str) -> str:
        return _validate_url(value)


class ListSitemapsArgs(BaseModel):
    siteUrl: str = Field(
        ...,
        min_length=1,
        description="The site's URL, including protocol (e.g., https://www.example.com/)",
    )
    sitemapIndex: Optional[str] = Field(
        default=None,
        description="Optional sitemap index URL to filter results",
    )

    @field_validator("sitemapIndex")
    @classmethod
    def check_sitemap_index(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else _validate_url(value)


class SitemapArgs(BaseModel):
    """Arguments for the get/submit/delete sitemap tools."""
    siteUrl: str = Field(
        ...,
        min_length=1,
        description="The site's URL, including protocol",
    )
    feedpath: str = Field(
        ...,
        description="The URL of the sitemap",
    )

    @field_validator("feedpath")
    @classmethod
    def check_feedpath(cls, value: str) -> str:
        return _validate_url(value)


# =============================================================================
# Upstream Request Records
# =============================================================================


class DimensionFilter(BaseModel):
    """A single filter clause on one dimension."""
    model_config = ConfigDict(frozen=True)

    dimension: Dimension
    operator: FilterOperator
    expression: str


class DimensionFilterGroup(BaseModel):
    """A group of clauses combined with AND."""
    model_config = ConfigDict(frozen=True)

    groupType: Literal["and"] = "and"
    filters: List[DimensionFilter]


class SearchAnalyticsRequest(BaseModel):
    """
    Request body for the Search Analytics query endpoint.

    Optional fields left as None are omitted from the body entirely. This
    matters for `dimensionFilterGroups`: upstream treats a missing key as
    "no filtering", which is not the same as an empty group list.
    """
    model_config = ConfigDict(frozen=True)

    startDate: str
    endDate: str
    dimensions: Optional[List[Dimension]] = None
    searchType: Optional[SearchType] = None
    aggregationType: Optional[AggregationType] = None
    rowLimit: Optional[int] = None
    startRow: Optional[int] = None
    dataState: Optional[DataState] = None
    dimensionFilterGroups: Optional[List[DimensionFilterGroup]] = None

    def has_dimension(self, dimension: Dimension) -> bool:
        return bool(self.dimensions) and dimension in self.dimensions

    def to_body(self) -> Dict[str, Any]:
        """Serialize to the JSON body sent upstream."""
        return self.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Upstream Response Records
# =============================================================================


class SearchAnalyticsRow(BaseModel):
    """
    One row of Search Analytics performance data.

    `keys` holds the dimension values in requested-dimension order. `ctr` is
    a fraction in [0, 1] as supplied upstream. Any measure may be missing.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    keys: Optional[List[str]] = None
    clicks: Optional[Union[int, float]] = None
    impressions: Optional[Union[int, float]] = None
    ctr: Optional[float] = None
    position: Optional[float] = None


# =============================================================================
# Quick Wins Models
# =============================================================================


class QuickWin(BaseModel):
    """
    A query+page pair judged under-optimized for its impressions and rank.

    Created fresh per detection run and never mutated. `currentCtr` is a
    percentage rounded to 2 decimals, `currentPosition` is rounded to 1.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "query": "running shoes",
                "page": "https://www.example.com/shoes",
                "currentPosition": 6.2,
                "impressions": 1250,
                "currentClicks": 15,
                "currentCtr": 1.2,
                "potentialClicks": 63,
                "additionalClicks": 48,
                "estimatedValue": 49.44,
                "opportunity": "Medium",
                "recommendation": "Focus on on-page SEO and internal linking. High-volume keyword - prioritize optimization",
            }
        },
    )

    query: str
    page: str
    currentPosition: float
    impressions: int
    currentClicks: int
    currentCtr: float
    potentialClicks: int
    additionalClicks: int = Field(..., ge=0)
    estimatedValue: float
    opportunity: OpportunityLevel
    recommendation: str


class EnhancedSearchAnalyticsMetadata(BaseModel):
    regexFilterApplied: bool
    quickWinsEnabled: bool
    rowLimit: int
    totalRows: int


class EnhancedSearchAnalyticsResponse(BaseModel):
    """
    Raw rows plus metadata about the enhancements that ran.

    `quickWins` stays None (and is omitted when serialized) unless detection
    was enabled and upstream returned at least one row.
    """
    rows: List[SearchAnalyticsRow] = Field(default_factory=list)
    responseAggregationType: Optional[str] = None
    metadata: EnhancedSearchAnalyticsMetadata
    quickWins: Optional[List[QuickWin]] = None


class QuickWinsSummaryThresholds(BaseModel):
    minImpressions: int
    maxCtr: float
    positionRange: str
    targetCtr: float


class QuickWinsSummary(BaseModel):
    totalOpportunities: int
    totalAdditionalClicks: int
    totalEstimatedValue: float
    thresholds: QuickWinsSummaryThresholds


class QuickWinsReport(BaseModel):
    """Focused report returned by the `detect_quick_wins` tool."""
    quickWins: List[QuickWin] = Field(default_factory=list)
    summary: QuickWinsSummary
    analysisComplete: bool = True


__all__ = [
    "DATE_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "MAX_ROW_LIMIT",
    "DEFAULT_ROW_LIMIT",
    "VALID_DIMENSIONS",
    "split_dimensions",
    "GSCBaseArgs",
    "DateRangeArgs",
    "SearchAnalyticsArgs",
    "QuickWinsThresholds",
    "QuickWinsThresholdArgs",
    "QuickWinsDetectionArgs",
    "EnhancedSearchAnalyticsArgs",
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
