"""
Bubble MCP Server - expose a Bubble.io application's Data and Workflow APIs
as MCP tools.

Modules:
- config: environment-derived settings and the read-only/read-write mode
- client: configured HTTP transport for the Bubble API
- service: upstream proxy, one call per tool
- tools: static tool catalog
- dispatcher: mode guard, argument checks and result envelopes
- app: FastMCP server wiring
"""

__version__ = "1.0.0"
