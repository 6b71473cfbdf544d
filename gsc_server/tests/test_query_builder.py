"""
Query Builder Test Module

Covers gsc_server.services.query_builder:
- Request fields copied from parsed arguments (dimension splitting, enums)
- Filter clause order page, query, country, device
- Country/device clauses forced to `equals`
- dimensionFilterGroups omitted when no simple filter is present
- Regex pattern filter only applied for the query dimension
- Quick wins request shape
"""

from gsc_server.models.enums import DataState, Dimension, FilterOperator
from gsc_server.models.schemas import SearchAnalyticsArgs, SearchAnalyticsRequest
from gsc_server.services.query_builder import (
    apply_regex_filter,
    build_filter_groups,
    build_quick_wins_request,
    build_search_analytics_request,
    parse_dimensions,
)


BASE_ARGS = {
    "siteUrl": "sc-domain:example.com",
    "startDate": "2025-01-01",
    "endDate": "2025-01-31",
}


def _args(**overrides) -> SearchAnalyticsArgs:
    return SearchAnalyticsArgs.model_validate({**BASE_ARGS, **overrides})


# =============================================================================
# Test Class: TestRequestFields
# =============================================================================


class TestRequestFields:

    def test_defaults(self):
        body = build_search_analytics_request(_args()).to_body()

        assert body == {
            "startDate": "2025-01-01",
            "endDate": "2025-01-31",
            "rowLimit": 1000,
            "startRow": 0,
            "dataState": "final",
        }

    def test_dimensions_are_split_and_trimmed(self):
        request = build_search_analytics_request(_args(dimensions="query, page ,country"))
        assert request.dimensions == [Dimension.QUERY, Dimension.PAGE, Dimension.COUNTRY]
        assert request.to_body()["dimensions"] == ["query", "page", "country"]

    def test_optional_enums_copied(self):
        body = build_search_analytics_request(
            _args(type="image", aggregationType="byPage", dataState="all", rowLimit=25000, startRow=50)
        ).to_body()

        assert body["searchType"] == "image"
        assert body["aggregationType"] == "byPage"
        assert body["dataState"] == "all"
        assert body["rowLimit"] == 25000
        assert body["startRow"] == 50

    def test_parse_dimensions_none(self):
        assert parse_dimensions(None) is None


# =============================================================================
# Test Class: TestFilterGroups
# =============================================================================


class TestFilterGroups:

    def test_no_filters_omits_key(self):
        assert build_filter_groups(_args()) is None
        assert "dimensionFilterGroups" not in build_search_analytics_request(_args()).to_body()

    def test_empty_strings_count_as_absent(self):
        assert build_filter_groups(_args(pageFilter="", queryFilter="")) is None

    def test_all_filters_in_fixed_order(self):
        args = _args(
            deviceFilter="MOBILE",
            countryFilter="USA",
            queryFilter="shoes",
            pageFilter="/blog/",
            filterOperator="contains",
        )
        body = build_search_analytics_request(args).to_body()

        assert body["dimensionFilterGroups"] == [
            {
                "groupType": "and",
                "filters": [
                    {"dimension": "page", "operator": "contains", "expression": "/blog/"},
                    {"dimension": "query", "operator": "contains", "expression": "shoes"},
                    {"dimension": "country", "operator": "equals", "expression": "USA"},
                    {"dimension": "device", "operator": "equals", "expression": "MOBILE"},
                ],
            }
        ]

    def test_country_and_device_ignore_pattern_operator(self):
        groups = build_filter_groups(
            _args(countryFilter="DEU", deviceFilter="TABLET", filterOperator="includingRegex")
        )

        assert len(groups) == 1
        assert [f.operator for f in groups[0].filters] == [FilterOperator.EQUALS, FilterOperator.EQUALS]

    def test_single_query_filter_uses_default_operator(self):
        groups = build_filter_groups(_args(queryFilter="running shoes"))

        assert len(groups[0].filters) == 1
        clause = groups[0].filters[0]
        assert clause.dimension == Dimension.QUERY
        assert clause.operator == FilterOperator.EQUALS
        assert clause.expression == "running shoes"


# =============================================================================
# Test Class: TestRegexFilter
# =============================================================================


class TestRegexFilter:

    def test_adds_clause_for_query_dimension(self):
        request = build_search_analytics_request(_args(dimensions="query"))
        enhanced = apply_regex_filter(request, "^how to")

        groups = enhanced.to_body()["dimensionFilterGroups"]
        assert groups == [
            {
                "groupType": "and",
                "filters": [
                    {"dimension": "query", "operator": "includingRegex", "expression": "^how to"},
                ],
            }
        ]

    def test_ignored_without_query_dimension(self):
        request = build_search_analytics_request(_args(dimensions="page"))
        assert apply_regex_filter(request, "^how to") == request

    def test_ignored_without_dimensions(self):
        request = build_search_analytics_request(_args())
        assert apply_regex_filter(request, "^how to") == request

    def test_ignored_without_pattern(self):
        request = build_search_analytics_request(_args(dimensions="query"))
        assert apply_regex_filter(request, None) == request
        assert apply_regex_filter(request, "") == request

    def test_appended_after_existing_groups(self):
        request = build_search_analytics_request(
            _args(dimensions="query,page", pageFilter="/blog/", filterOperator="contains")
        )
        enhanced = apply_regex_filter(request, "shoes?")

        groups = enhanced.dimensionFilterGroups
        assert len(groups) == 2
        assert groups[0] == request.dimensionFilterGroups[0]
        assert groups[1].filters[0].operator == FilterOperator.INCLUDING_REGEX

    def test_does_not_mutate_input(self):
        request = build_search_analytics_request(_args(dimensions="query"))
        apply_regex_filter(request, "shoes")
        assert request.dimensionFilterGroups is None


def test_quick_wins_request():
    request = build_quick_wins_request("2025-01-01", "2025-01-31")

    assert isinstance(request, SearchAnalyticsRequest)
    assert request.to_body() == {
        "startDate": "2025-01-01",
        "endDate": "2025-01-31",
        "dimensions": ["query", "page"],
        "rowLimit": 25000,
        "dataState": DataState.FINAL.value,
    }
