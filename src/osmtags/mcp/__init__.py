"""MCP tool server for osmtags."""

from .server import TOOLS, OsmTagsMCPServer

__all__ = ["OsmTagsMCPServer", "TOOLS"]
