"""Pure transforms and queries over ADF trees.

``transform`` walks a document and asks a per-node-type visitor what to do
with each node: return a replacement node, return ``REMOVE`` to drop it, or
return ``None`` to keep it (children are then visited too). The input
document is never modified; every kept node is copied.

Example:
    >>> def drop_rules(node):
    ...     return REMOVE
    >>> cleaned = transform(document, {"rule": drop_rules})
"""

import copy
from typing import Callable, Dict, List, Optional, Union

from .adf_models import AdfDocument, AdfMark, AdfNode


class _Remove:
    def __repr__(self) -> str:
        return "REMOVE"


REMOVE = _Remove()

VisitorResult = Optional[Union[AdfNode, _Remove]]
Visitor = Callable[[AdfNode], VisitorResult]


def transform(document: AdfDocument, visitors: Dict[str, Visitor]) -> AdfDocument:
    """Return a rewritten copy of ``document``.

    Args:
        document: Source document (left untouched)
        visitors: Mapping of node type to visitor callable

    Returns:
        New AdfDocument
    """
    return AdfDocument(
        version=document.version,
        content=_transform_nodes(document.content, visitors),
    )


def _transform_nodes(nodes: List[AdfNode], visitors: Dict[str, Visitor]) -> List[AdfNode]:
    result = []
    for node in nodes:
        transformed = _transform_node(node, visitors)
        if transformed is REMOVE:
            continue
        result.append(transformed)
    return result


def _transform_node(node: AdfNode, visitors: Dict[str, Visitor]) -> Union[AdfNode, _Remove]:
    visitor = visitors.get(node.type)
    if visitor is not None:
        replacement = visitor(node)
        if replacement is not None:
            return replacement

    return AdfNode(
        type=node.type,
        content=_transform_nodes(node.content, visitors),
        text=node.text,
        attrs=copy.deepcopy(node.attrs),
        marks=[AdfMark(type=m.type, attrs=copy.deepcopy(m.attrs)) for m in node.marks],
    )


def filter_nodes(document: AdfDocument, predicate: Callable[[AdfNode], bool]) -> List[AdfNode]:
    """Collect every node matching ``predicate`` in document order."""
    matches: List[AdfNode] = []

    def visit(node: AdfNode) -> None:
        if predicate(node):
            matches.append(node)
        for child in node.content:
            visit(child)

    for node in document.content:
        visit(node)

    return matches


def text(value: str, marks: Optional[List[AdfMark]] = None) -> AdfNode:
    return AdfNode(type="text", text=value, marks=list(marks or []))


def paragraph(*content: Union[str, AdfNode]) -> AdfNode:
    return AdfNode(
        type="paragraph",
        content=[text(item) if isinstance(item, str) else item for item in content],
    )


def doc(*content: AdfNode) -> AdfDocument:
    return AdfDocument(version=1, content=list(content))
