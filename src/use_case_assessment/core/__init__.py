"""Core business logic: scoring, schema migration, reports and state transitions.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
storage or any server framework; the service and server layers import from here.
"""
