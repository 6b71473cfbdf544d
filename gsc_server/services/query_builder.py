"""
Search Analytics Query Builder

Turns validated tool arguments into a SearchAnalyticsRequest for the upstream
query endpoint. Pure data transformation: no I/O and no failure modes of its
own beyond what argument validation already rejected.

Filter rules:
- One clause per present simple filter, in the fixed order page, query,
  country, device
- Page and query clauses use the caller's filterOperator
- Country and device clauses always use `equals` (upstream does not support
  pattern operators on them)
- No filters means no `dimensionFilterGroups` key at all; otherwise exactly
  one group of type "and"

The regex pattern filter is a separate, additive step (apply_regex_filter)
used by the enhanced analytics path.
"""

from typing import List, Optional

from gsc_server.models.enums import DataState, Dimension, FilterOperator
from gsc_server.models.schemas import (
    MAX_ROW_LIMIT,
    DimensionFilter,
    DimensionFilterGroup,
    SearchAnalyticsArgs,
    SearchAnalyticsRequest,
    split_dimensions,
)


# Dimensions requested by the quick wins detection tool; keys[0] is the
# query and keys[1] the page
QUICK_WINS_DIMENSIONS = [Dimension.QUERY, Dimension.PAGE]


def parse_dimensions(value: Optional[str]) -> Optional[List[Dimension]]:
    """Split a comma-separated dimension string into Dimension values."""
    if value is None:
        return None
    return [Dimension(part) for part in split_dimensions(value)]


def build_filter_groups(args: SearchAnalyticsArgs) -> Optional[List[DimensionFilterGroup]]:
    """
    Build dimension filter groups from the simple filter arguments.

    Returns:
        A single "and" group holding every present clause, or None when no
        simple filter was given
    """
    filters: List[DimensionFilter] = []

    if args.pageFilter:
        filters.append(DimensionFilter(
            dimension=Dimension.PAGE,
            operator=args.filterOperator,
            expression=args.pageFilter,
        ))

    if args.queryFilter:
        filters.append(DimensionFilter(
            dimension=Dimension.QUERY,
            operator=args.filterOperator,
            expression=args.queryFilter,
        ))

    # Country and device only support the equals operator
    if args.countryFilter:
        filters.append(DimensionFilter(
            dimension=Dimension.COUNTRY,
            operator=FilterOperator.EQUALS,
            expression=args.countryFilter,
        ))

    if args.deviceFilter:
        filters.append(DimensionFilter(
            dimension=Dimension.DEVICE,
            operator=FilterOperator.EQUALS,
            expression=args.deviceFilter.value,
        ))

    return [DimensionFilterGroup(groupType="and", filters=filters)] if filters else None


def build_search_analytics_request(args: SearchAnalyticsArgs) -> SearchAnalyticsRequest:
    """Build the upstream request body from parsed search analytics arguments."""
    return SearchAnalyticsRequest(
        startDate=args.startDate,
        endDate=args.endDate,
        dimensions=parse_dimensions(args.dimensions),
        searchType=args.type,
        aggregationType=args.aggregationType,
        rowLimit=args.rowLimit,
        startRow=args.startRow,
        dataState=args.dataState,
        dimensionFilterGroups=build_filter_groups(args),
    )


def apply_regex_filter(
    request: SearchAnalyticsRequest,
    regex_filter: Optional[str],
) -> SearchAnalyticsRequest:
    """
    Append an includingRegex clause on the query dimension.

    The clause goes in its own group after any existing groups. It is only
    added when a pattern is given and the request groups by query; otherwise
    the request is returned unchanged. The input request is never mutated.
    """
    if not regex_filter or not request.has_dimension(Dimension.QUERY):
        return request

    regex_group = DimensionFilterGroup(
        groupType="and",
        filters=[DimensionFilter(
            dimension=Dimension.QUERY,
            operator=FilterOperator.INCLUDING_REGEX,
            expression=regex_filter,
        )],
    )
    existing_groups = list(request.dimensionFilterGroups or [])
    return request.model_copy(update={"dimensionFilterGroups": existing_groups + [regex_group]})


def build_quick_wins_request(start_date: str, end_date: str) -> SearchAnalyticsRequest:
    """
    Build the request used for quick wins detection.

    Fetches the maximum row count grouped by query and page from finalized
    data, so detection sees as much of the site as one call allows.
    """
    return SearchAnalyticsRequest(
        startDate=start_date,
        endDate=end_date,
        dimensions=list(QUICK_WINS_DIMENSIONS),
        rowLimit=MAX_ROW_LIMIT,
        dataState=DataState.FINAL,
    )


__all__ = [
    "QUICK_WINS_DIMENSIONS",
    "parse_dimensions",
    "build_filter_groups",
    "build_search_analytics_request",
    "apply_regex_filter",
    "build_quick_wins_request",
]
