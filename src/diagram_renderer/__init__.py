"""Diagram rendering for mermaid code blocks."""

from .errors import DiagramRenderError
from .mermaid_renderer import ChartData, MermaidRenderer

__all__ = [
    'ChartData',
    'DiagramRenderError',
    'MermaidRenderer',
]
