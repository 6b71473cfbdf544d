"""
Tool definitions and handlers for the Search Console tool server.

Each tool has a name, a description, an argument model (whose JSON schema is
advertised to clients) and a handler. Handlers validate arguments, call
SearchConsoleService and return JSON-ready data; the transport layer in
gsc_server.main serializes it.

Tools:
- list_sites: Sites the service account can access
- search_analytics: Search performance data with simple filters
- enhanced_search_analytics: Up to 25,000 rows, regex query filter, data
  freshness control and optional quick wins detection
- detect_quick_wins: Focused quick wins report for a date range
- index_inspect: URL indexing status
- list_sitemaps / get_sitemap / submit_sitemap / delete_sitemap

Error handling:
- Invalid arguments raise ToolArgumentError with one "path: message" entry
  per validation issue
- Unknown tool names raise ValueError
- Every failure is logged with the tool name and re-raised
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gsc_server.models.schemas import (
    EnhancedSearchAnalyticsArgs,
    IndexInspectArgs,
    ListSitemapsArgs,
    QuickWinsDetectionArgs,
    SearchAnalyticsArgs,
    SitemapArgs,
)
from gsc_server.services.query_builder import (
    build_quick_wins_request,
    build_search_analytics_request,
)
from gsc_server.services.quick_wins import build_quick_wins_report
from gsc_server.services.search_console import SearchConsoleService

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ToolHandler = Callable[[SearchConsoleService, Dict[str, Any]], Any]


class ToolArgumentError(ValueError):
    """Tool arguments failed validation."""


# =============================================================================
# Argument Parsing
# =============================================================================


def format_validation_error(exc: ValidationError) -> str:
    """
    Flatten a pydantic ValidationError into a single message.

    Example:
        "Invalid arguments: rowLimit: Input should be less than or equal to 25000"
    """
    issues = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) if error["loc"] else "input"
        issues.append(f"{path}: {error['msg']}")
    return f"Invalid arguments: {'; '.join(issues)}"


def parse_arguments(model: Type[ModelT], arguments: Optional[Dict[str, Any]]) -> ModelT:
    """
    Validate raw tool arguments against an argument model.

    Raises:
        ToolArgumentError: With a field-path-annotated message.
    """
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        raise ToolArgumentError(format_validation_error(exc)) from exc


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Handlers
# =============================================================================


def handle_list_sites(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    return service.list_sites()


def handle_search_analytics(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(SearchAnalyticsArgs, arguments)
    request = build_search_analytics_request(parsed)
    return service.search_analytics(parsed.siteUrl, request)


def handle_enhanced_search_analytics(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(EnhancedSearchAnalyticsArgs, arguments)
    request = build_search_analytics_request(parsed)

    response = service.enhanced_search_analytics(
        parsed.siteUrl,
        request,
        regex_filter=parsed.regexFilter,
        enable_quick_wins=parsed.enableQuickWins,
        quick_wins_thresholds=parsed.quickWinsThresholds,
    )
    return _dump(response)


def handle_detect_quick_wins(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    """
    Fetch query+page rows (25,000, finalized data) in one call and report
    the quick wins found in them.
    """
    parsed = parse_arguments(QuickWinsDetectionArgs, arguments)
    thresholds = parsed.thresholds()
    request = build_quick_wins_request(parsed.startDate, parsed.endDate)

    response = service.enhanced_search_analytics(
        parsed.siteUrl,
        request,
        enable_quick_wins=True,
        quick_wins_thresholds=thresholds,
    )

    report = build_quick_wins_report(response.quickWins or [], thresholds)
    return report.model_dump(mode="json")


def handle_index_inspect(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(IndexInspectArgs, arguments)
    return service.index_inspect(parsed.siteUrl, parsed.inspectionUrl, parsed.languageCode)


def handle_list_sitemaps(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(ListSitemapsArgs, arguments)
    return service.list_sitemaps(parsed.siteUrl, parsed.sitemapIndex)


def handle_get_sitemap(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(SitemapArgs, arguments)
    return service.get_sitemap(parsed.siteUrl, parsed.feedpath)


def handle_submit_sitemap(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(SitemapArgs, arguments)
    data = service.submit_sitemap(parsed.siteUrl, parsed.feedpath)
    return {
        "success": True,
        "message": f"Sitemap {parsed.feedpath} submitted successfully",
        "data": data,
    }


def handle_delete_sitemap(service: SearchConsoleService, arguments: Dict[str, Any]) -> Any:
    parsed = parse_arguments(SitemapArgs, arguments)
    data = service.delete_sitemap(parsed.siteUrl, parsed.feedpath)
    return {
        "success": True,
        "message": f"Sitemap {parsed.feedpath} deleted successfully",
        "data": data,
    }


# =============================================================================
# Registry
# =============================================================================


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    arguments_model: Optional[Type[BaseModel]]
    handler: ToolHandler

    def input_schema(self) -> Dict[str, Any]:
        if self.arguments_model is None:
            return {"type": "object", "properties": {}}
        return self.arguments_model.model_json_schema()


TOOL_DEFINITIONS: List[ToolDefinition] = [
    ToolDefinition(
        name="list_sites",
        description="List all sites you have access to in Google Search Console",
        arguments_model=None,
        handler=handle_list_sites,
    ),
    ToolDefinition(
        name="search_analytics",
        description=(
            "Query search performance data (clicks, impressions, CTR, position) "
            "from Google Search Console"
        ),
        arguments_model=SearchAnalyticsArgs,
        handler=handle_search_analytics,
    ),
    ToolDefinition(
        name="enhanced_search_analytics",
        description=(
            "Advanced search analytics with up to 25,000 rows, regex filters, data "
            "freshness control, and optional quick wins detection"
        ),
        arguments_model=EnhancedSearchAnalyticsArgs,
        handler=handle_enhanced_search_analytics,
    ),
    ToolDefinition(
        name="detect_quick_wins",
        description=(
            "Analyze search data to find SEO quick wins - keywords with high impressions "
            "but low CTR that could benefit from optimization"
        ),
        arguments_model=QuickWinsDetectionArgs,
        handler=handle_detect_quick_wins,
    ),
    ToolDefinition(
        name="index_inspect",
        description=(
            "Inspect a URL to check its indexing status, crawl info, and any issues "
            "preventing indexing"
        ),
        arguments_model=IndexInspectArgs,
        handler=handle_index_inspect,
    ),
    ToolDefinition(
        name="list_sitemaps",
        description="List all sitemaps submitted for a site in Google Search Console",
        arguments_model=ListSitemapsArgs,
        handler=handle_list_sitemaps,
    ),
    ToolDefinition(
        name="get_sitemap",
        description=(
            "Get detailed information about a specific sitemap including status and error counts"
        ),
        arguments_model=SitemapArgs,
        handler=handle_get_sitemap,
    ),
    ToolDefinition(
        name="submit_sitemap",
        description="Submit a new sitemap to Google Search Console for crawling",
        arguments_model=SitemapArgs,
        handler=handle_submit_sitemap,
    ),
    ToolDefinition(
        name="delete_sitemap",
        description="Delete a sitemap from Google Search Console",
        arguments_model=SitemapArgs,
        handler=handle_delete_sitemap,
    ),
]

TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOL_DEFINITIONS}


def dispatch_tool(
    service: SearchConsoleService,
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Run a tool by name and return its JSON-ready result.

    Raises:
        ValueError: If the tool name is unknown.
        ToolArgumentError: If the arguments are invalid.
        SearchConsoleError: If the upstream call fails.
    """
    try:
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")
        return tool.handler(service, arguments or {})
    except Exception as e:
        logger.error(f"[{name}] Error: {e}", exc_info=True)
        raise


__all__ = [
    "ToolArgumentError",
    "ToolDefinition",
    "TOOL_DEFINITIONS",
    "TOOLS_BY_NAME",
    "format_validation_error",
    "parse_arguments",
    "dispatch_tool",
]
