"""
Sarvam MCP Server package
"""
