"""Use Case Assessment MCP Server.

Capture candidate automation/AI use cases, rate them, and prioritise them on a
business value / feasibility matrix. Exports JSON, CSV and HTML reports.
"""

__version__ = "0.1.0"
