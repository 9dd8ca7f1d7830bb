"""XcodeBuild MCP Server - build, run and test Apple projects over MCP"""

__version__ = "1.0.0"
