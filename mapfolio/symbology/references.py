# mapfolio/symbology/references.py
"""Symbol-name reference substitution inside renderer JSON trees.

Renderer files name their symbols instead of inlining them::

    {"type": "uniqueValue", "field1": "kind",
     "uniqueValueInfos": [{"value": "a", "symbol": "redDot"}]}

A string value under a ``symbol`` or ``defaultSymbol`` key is a reference.
Every other object or array value is walked whatever its key, since
renderer schemas nest symbol slots inside per-value and per-break infos.
Values under a symbol key that are not strings are taken as already
inline and are not walked.
"""

from __future__ import annotations

import copy
from typing import Any, Callable

SYMBOL_REFERENCE_KEYS = frozenset({"symbol", "defaultSymbol"})

JsonValue = Any
SymbolResolver = Callable[[str], dict[str, Any]]


class JsonVisitor:
    """Rebuilds a JSON value node by node; subclasses override the hooks."""

    def visit(self, node: JsonValue) -> JsonValue:
        if isinstance(node, dict):
            return self.visit_object(node)
        if isinstance(node, list):
            return self.visit_array(node)
        return self.visit_scalar(node)

    def visit_object(self, node: dict[str, JsonValue]) -> dict[str, JsonValue]:
        return {key: self.visit_member(key, value) for key, value in node.items()}

    def visit_member(self, key: str, value: JsonValue) -> JsonValue:
        return self.visit(value)

    def visit_array(self, node: list[JsonValue]) -> list[JsonValue]:
        return [self.visit(item) for item in node]

    def visit_scalar(self, node: JsonValue) -> JsonValue:
        return node


def is_symbol_reference(key: str, value: JsonValue) -> bool:
    return key in SYMBOL_REFERENCE_KEYS and isinstance(value, str) and value != ""


class SymbolReferenceSubstituter(JsonVisitor):
    """Replaces symbol-name strings with the resolver's inline symbol JSON."""

    def __init__(self, resolve: SymbolResolver):
        self._resolve = resolve

    def visit_member(self, key: str, value: JsonValue) -> JsonValue:
        if key in SYMBOL_REFERENCE_KEYS:
            if is_symbol_reference(key, value):
                return self._resolve(value)
            return copy.deepcopy(value)
        return self.visit(value)


class SymbolReferenceCollector(JsonVisitor):
    """Records every symbol name referenced in a tree."""

    def __init__(self) -> None:
        self.names: list[str] = []

    def visit_member(self, key: str, value: JsonValue) -> JsonValue:
        if key in SYMBOL_REFERENCE_KEYS:
            if is_symbol_reference(key, value) and value not in self.names:
                self.names.append(value)
            return value
        return self.visit(value)


def substitute_symbol_references(tree: JsonValue, resolve: SymbolResolver) -> JsonValue:
    """Return a copy of ``tree`` with every symbol reference resolved.

    ``tree`` is not modified.  Each substitution depends only on the
    referenced name, so the result is the same whatever order sibling keys
    are visited in.  Errors raised by ``resolve`` propagate unchanged.
    """
    return SymbolReferenceSubstituter(resolve).visit(tree)


def collect_symbol_references(tree: JsonValue) -> list[str]:
    """Return the distinct symbol names referenced in ``tree``, in walk order."""
    collector = SymbolReferenceCollector()
    collector.visit(tree)
    return collector.names
