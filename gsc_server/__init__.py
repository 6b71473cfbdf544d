"""
Search Console Tool Server Package.

Exposes Google Search Console as callable tools over the Model Context
Protocol (stdio), with analytics enhancements on top of the raw API:
regex query filtering and SEO quick wins detection.

Subpackages:
    - api: Tool definitions, argument parsing and dispatch
    - core: Configuration and cached credentials
    - models: Pydantic schemas and enums
    - services: Query building, quick wins detection and the API client
"""

__version__ = "0.2.2"
