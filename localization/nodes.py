"""Typed translation tree.

Raw locale tables are nested JSON-style dicts. They are converted once,
at load time, into three node kinds so resolution never has to guess
types on the fly:

- `Leaf`: a terminal value (normally a string template).
- `PluralNode`: a mapping from plural category to template.
- `SubTree`: any other mapping of segment -> node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

PLURAL_CATEGORIES = frozenset({"zero", "none", "one", "two", "few", "many", "other"})


@dataclass(frozen=True)
class Leaf:
    value: Any

    def child(self, segment: str) -> Optional["TranslationNode"]:
        return None

    def to_plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class PluralNode:
    forms: Mapping[str, str] = field(default_factory=dict)

    def child(self, segment: str) -> Optional["TranslationNode"]:
        if segment in self.forms:
            return Leaf(self.forms[segment])
        return None

    def first_form(self, categories) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(category, template)`` for the first category present."""
        for category in categories:
            if category in self.forms:
                return category, self.forms[category]
        return None, None

    def to_plain(self) -> Dict[str, str]:
        return dict(self.forms)


@dataclass(frozen=True)
class SubTree:
    children: Mapping[str, "TranslationNode"] = field(default_factory=dict)

    def child(self, segment: str) -> Optional["TranslationNode"]:
        return self.children.get(segment)

    def first_form(self, categories) -> Tuple[Optional[str], Optional[str]]:
        for category in categories:
            node = self.children.get(category)
            if isinstance(node, Leaf) and isinstance(node.value, str):
                return category, node.value
        return None, None

    def items(self) -> Iterator[Tuple[str, "TranslationNode"]]:
        return iter(self.children.items())

    def to_plain(self) -> Dict[str, Any]:
        return {key: node.to_plain() for key, node in self.children.items()}


TranslationNode = Union[Leaf, PluralNode, SubTree]


def is_plural_mapping(data: Mapping[str, Any]) -> bool:
    """True when every key is a plural category and every value a string."""
    if not data:
        return False
    return all(
        key in PLURAL_CATEGORIES and isinstance(value, str)
        for key, value in data.items()
    )


def build_node(data: Any) -> TranslationNode:
    """Convert raw (JSON-decoded) data into a typed node."""
    if isinstance(data, (Leaf, PluralNode, SubTree)):
        return data
    if isinstance(data, Mapping):
        if is_plural_mapping(data):
            return PluralNode(dict(data))
        return SubTree({str(key): build_node(value) for key, value in data.items()})
    return Leaf(data)


def build_table(data: Optional[Mapping[str, Any]]) -> Dict[str, SubTree]:
    """Convert a ``{locale: tree}`` mapping into ``{locale: SubTree}``."""
    table: Dict[str, SubTree] = {}
    for locale, tree in (data or {}).items():
        node = build_node(tree)
        if not isinstance(node, SubTree):
            node = SubTree({})
        table[str(locale)] = node
    return table


def walk(node: Optional[TranslationNode], segments) -> Optional[TranslationNode]:
    """Follow `segments` down from `node`; None as soon as a step is missing."""
    current = node
    for segment in segments:
        if current is None:
            return None
        current = current.child(segment)
    return current
