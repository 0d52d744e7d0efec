"""Typed exceptions for diagram rendering."""

from src.confluence_client.errors import SyncError


class DiagramRenderError(SyncError):
    """Raised when the mermaid CLI is missing or fails to render a chart."""

    def __init__(self, chart_name: str, reason: str):
        super().__init__(f"Failed to render diagram {chart_name}: {reason}")
        self.chart_name = chart_name
        self.reason = reason
