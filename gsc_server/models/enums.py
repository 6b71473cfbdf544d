"""
Enumeration definitions for the Search Console tool server.

All enums inherit from both `str` and `Enum` so they serialize cleanly through
Pydantic models and into the JSON text returned to tool callers.

Value sets follow the Search Console API reference:
- https://developers.google.com/webmaster-tools/v1/searchanalytics/query
"""

from enum import Enum


class Dimension(str, Enum):
    """
    Dimensions a Search Analytics query can group rows by.

    Row `keys` are returned in the same order as the requested dimensions,
    so a `query,page` request yields `keys = [query, page]`.
    """
    QUERY = "query"
    PAGE = "page"
    COUNTRY = "country"
    DEVICE = "device"
    SEARCH_APPEARANCE = "searchAppearance"
    DATE = "date"
    HOUR = "hour"


class SearchType(str, Enum):
    """Search type the performance data is restricted to."""
    WEB = "web"
    IMAGE = "image"
    VIDEO = "video"
    NEWS = "news"
    DISCOVER = "discover"
    GOOGLE_NEWS = "googleNews"


class AggregationType(str, Enum):
    """How upstream aggregates results (by property, by page, ...)."""
    AUTO = "auto"
    BY_NEWS_SHOWCASE_PANEL = "byNewsShowcasePanel"
    BY_PROPERTY = "byProperty"
    BY_PAGE = "byPage"


class FilterOperator(str, Enum):
    """
    Operators for dimension filter clauses.

    Only the page and query dimensions accept the pattern operators; country
    and device clauses are always sent with EQUALS.
    """
    EQUALS = "equals"
    CONTAINS = "contains"
    NOT_EQUALS = "notEquals"
    NOT_CONTAINS = "notContains"
    INCLUDING_REGEX = "includingRegex"
    EXCLUDING_REGEX = "excludingRegex"


class DeviceType(str, Enum):
    """Device categories accepted by the device filter."""
    DESKTOP = "DESKTOP"
    MOBILE = "MOBILE"
    TABLET = "TABLET"


class DataState(str, Enum):
    """
    Data freshness flag.

    - all: includes fresh, not yet finalized data
    - final: finalized data only
    """
    ALL = "all"
    FINAL = "final"


class OpportunityLevel(str, Enum):
    """
    Three-tier classification of a quick win by additional clicks potential.

    - High: 100 or more additional clicks
    - Medium: 25 to 99 additional clicks
    - Low: fewer than 25 additional clicks
    """
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
