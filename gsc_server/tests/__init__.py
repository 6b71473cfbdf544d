'''
Search Console Tool Server Test Suite

Test Modules:
-------------
- test_query_builder.py: Request building
  - Filter clause order and operator rules
  - Omitted filter groups when no filters are given
  - Regex pattern filter on the query dimension

- test_quick_wins.py: Quick wins detection
  - Threshold filtering and zero-defaults for missing measures
  - Derived metrics, tiers and recommendations
  - Stable ordering and idempotence
  - Report summary totals

- test_search_console.py: API client
  - Site URL normalization
  - Permission fallback and error wrapping
  - Enhanced search analytics metadata and quick wins

- test_tools.py: Tool layer
  - Argument validation messages
  - Dispatch of every tool against a mocked API
  - Transport handlers

- test_config.py: Settings and cached credentials

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v
'''

__all__ = []
