"""ADF (Atlassian Document Format) document model.

This package provides the dataclass model for ADF documents, a parser from
ADF JSON, canonical serialization, and pure tree transforms used to rewrite
links and media without mutating the source document.
"""

from .adf_models import AdfDocument, AdfMark, AdfNode, AdfNodeType
from .adf_parser import AdfParser, serialize_document
from .traverse import REMOVE, doc, filter_nodes, paragraph, text, transform

__all__ = [
    'AdfDocument',
    'AdfMark',
    'AdfNode',
    'AdfNodeType',
    'AdfParser',
    'serialize_document',
    'REMOVE',
    'doc',
    'filter_nodes',
    'paragraph',
    'text',
    'transform',
]
