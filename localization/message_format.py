"""MessageFormat: compiled plural/select messages.

Messages too rich for a single-count plural node are written in ICU
MessageFormat syntax, e.g.::

    There {UNREAD, plural, =0 {} one {is 1 unread} other {are # unread}}
    {BOTH, select, true {and } false {} other {}}...

`compile_message` turns such a source into a small tree of parts that is
evaluated against a data mapping. `MessageFormatRegistry` keeps compiled
messages in a flat namespace keyed independently of the dotted
translation keys, and turns any evaluation failure into its message text.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import MessageFormatError, MessageFormatSyntaxError
from .interpolation import stringify
from .nodes import Leaf, SubTree, TranslationNode
from .pluralization import PluralizationRule, as_candidates, cldr_rule

logger = logging.getLogger(__name__)

ESCAPABLE = "{}#\\"
_NAME = re.compile(r"[^\s,{}#]+")
_KEY = re.compile(r"[^\s{}]+")
_OFFSET = re.compile(r"offset:\s*(-?\d+)")


def _simple_rule(n: float) -> str:
    return "one" if n == 1 else "other"


def message_rule(locale_code: str) -> PluralizationRule:
    """Plural rule used inside messages: Babel's CLDR rule, else one/other."""
    return cldr_rule(locale_code) or _simple_rule


def format_number(number: float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def exact_key(value: Any) -> str:
    """The literal key a raw value selects, e.g. ``0`` -> ``"0"``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def to_number(value: Any, name: str) -> float:
    """Coerce `value` for numeric dispatch; raise if it is not a number."""
    error = MessageFormatError(f"MessageFormat: `{name}` isnt a number.", {"argument": name})
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            raise error
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            raise error from None
        if math.isnan(number):
            raise error
        return number
    raise error


# ----------------------------------------------------------------------
# Branch keys
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Exact:
    """``=0`` / ``0``: matches the stringified value exactly."""

    value: str


@dataclass(frozen=True)
class Category:
    """``one`` / ``other``: matches a plural category from the locale rule."""

    name: str


@dataclass(frozen=True)
class Choice:
    """``true`` / ``false`` / ``other``: a select value."""

    value: str


BranchKey = Union[Exact, Category, Choice]


# ----------------------------------------------------------------------
# Message parts
# ----------------------------------------------------------------------
@dataclass
class _Scope:
    data: Mapping[str, Any]
    rule: PluralizationRule
    number: Optional[float] = None


@dataclass(frozen=True)
class Text:
    value: str

    def render(self, scope: _Scope) -> str:
        return self.value


@dataclass(frozen=True)
class Argument:
    name: str

    def render(self, scope: _Scope) -> str:
        value = scope.data.get(self.name)
        if value is None:
            return ""
        return stringify(value)


@dataclass(frozen=True)
class Hash:
    """``#`` inside a plural branch: the plural value minus its offset."""

    def render(self, scope: _Scope) -> str:
        if scope.number is None:
            return "#"
        return format_number(scope.number)


@dataclass(frozen=True)
class Message:
    parts: Tuple["Part", ...] = ()

    def render(self, scope: _Scope) -> str:
        return "".join(part.render(scope) for part in self.parts)


@dataclass(frozen=True)
class Plural:
    name: str
    branches: Tuple[Tuple[BranchKey, Message], ...]
    offset: int = 0

    def select(self, raw: Any, number: float, rule: PluralizationRule) -> Message:
        literal = exact_key(raw)
        for key, message in self.branches:
            if isinstance(key, Exact) and key.value == literal:
                return message
        by_category = {
            key.name: message for key, message in self.branches if isinstance(key, Category)
        }
        for candidate in as_candidates(rule(number - self.offset)):
            if candidate in by_category:
                return by_category[candidate]
        if "other" in by_category:
            return by_category["other"]
        raise MessageFormatError(
            f"MessageFormat: no branch of `{self.name}` matches {literal}",
            {"argument": self.name},
        )

    def render(self, scope: _Scope) -> str:
        raw = scope.data.get(self.name)
        number = to_number(raw, self.name)
        branch = self.select(raw, number, scope.rule)
        inner = _Scope(scope.data, scope.rule, number - self.offset)
        return branch.render(inner)


@dataclass(frozen=True)
class Select:
    name: str
    branches: Tuple[Tuple[BranchKey, Message], ...]

    def select(self, raw: Any) -> Message:
        literal = exact_key(raw) if raw is not None else ""
        fallback = None
        for key, message in self.branches:
            if isinstance(key, Choice):
                if key.value == literal:
                    return message
                if key.value == "other":
                    fallback = message
        if fallback is None:
            raise MessageFormatError(
                f"MessageFormat: no branch of `{self.name}` matches {literal}",
                {"argument": self.name},
            )
        return fallback

    def render(self, scope: _Scope) -> str:
        return self.select(scope.data.get(self.name)).render(scope)


Part = Union[Text, Argument, Hash, Plural, Select]


# ----------------------------------------------------------------------
# Parser
# ----------------------------------------------------------------------
class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def error(self, reason: str) -> MessageFormatSyntaxError:
        return MessageFormatSyntaxError(reason, self.source, self.pos)

    def skip_ws(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def expect(self, char: str) -> None:
        if self.pos >= len(self.source) or self.source[self.pos] != char:
            raise self.error(f"expected {char!r}")
        self.pos += 1

    def match(self, pattern: "re.Pattern[str]", what: str) -> "re.Match[str]":
        found = pattern.match(self.source, self.pos)
        if not found:
            raise self.error(f"expected {what}")
        self.pos = found.end()
        return found

    def parse(self) -> Message:
        message = self.message(in_plural=False, nested=False)
        if self.pos != len(self.source):
            raise self.error("unexpected '}'")
        return message

    def message(self, in_plural: bool, nested: bool) -> Message:
        parts: List[Part] = []
        buffer: List[str] = []

        def flush() -> None:
            if buffer:
                parts.append(Text("".join(buffer)))
                buffer.clear()

        source = self.source
        while self.pos < len(source):
            char = source[self.pos]
            if char == "\\" and self.pos + 1 < len(source) and source[self.pos + 1] in ESCAPABLE:
                buffer.append(source[self.pos + 1])
                self.pos += 2
            elif char == "{":
                flush()
                parts.append(self.argument(in_plural))
            elif char == "}":
                if not nested:
                    raise self.error("unexpected '}'")
                break
            elif char == "#" and in_plural:
                flush()
                parts.append(Hash())
                self.pos += 1
            else:
                buffer.append(char)
                self.pos += 1
        else:
            if nested:
                raise self.error("unclosed '{'")

        flush()
        return Message(tuple(parts))

    def argument(self, in_plural: bool) -> Part:
        self.expect("{")
        self.skip_ws()
        name = self.match(_NAME, "argument name").group(0)
        self.skip_ws()
        if self.source.startswith("}", self.pos):
            self.pos += 1
            return Argument(name)

        self.expect(",")
        self.skip_ws()
        kind = self.match(_NAME, "argument type").group(0)
        self.skip_ws()
        if self.source.startswith("}", self.pos):
            # Simple formatted arguments ({n, number}) render as plain values.
            self.pos += 1
            return Argument(name)

        self.expect(",")
        self.skip_ws()
        if kind == "plural":
            offset = 0
            found = _OFFSET.match(self.source, self.pos)
            if found:
                offset = int(found.group(1))
                self.pos = found.end()
            branches = self.branches(kind, in_plural=True)
            return Plural(name, branches, offset)
        if kind == "select":
            return Select(name, self.branches(kind, in_plural=in_plural))
        raise self.error(f"unsupported argument type {kind!r}")

    def branches(self, kind: str, in_plural: bool) -> Tuple[Tuple[BranchKey, Message], ...]:
        result: List[Tuple[BranchKey, Message]] = []
        while True:
            self.skip_ws()
            if self.source.startswith("}", self.pos):
                self.pos += 1
                break
            raw_key = self.match(_KEY, "branch key").group(0)
            self.skip_ws()
            self.expect("{")
            body = self.message(in_plural=in_plural, nested=True)
            self.expect("}")
            result.append((self._branch_key(kind, raw_key), body))

        keys = {getattr(key, "name", getattr(key, "value", None)) for key, _ in result}
        if "other" not in keys:
            raise self.error(f"no 'other' branch in {kind}")
        return tuple(result)

    def _branch_key(self, kind: str, raw_key: str) -> BranchKey:
        if kind == "select":
            return Choice(raw_key)
        literal = raw_key[1:] if raw_key.startswith("=") else raw_key
        try:
            return Exact(format_number(float(literal)))
        except ValueError:
            if raw_key.startswith("="):
                raise self.error(f"bad exact key {raw_key!r}") from None
            return Category(raw_key)


@dataclass(frozen=True)
class CompiledMessage:
    """A parsed message bound to a locale's plural rule; call it with data."""

    source: str
    message: Message
    rule: PluralizationRule = field(compare=False)

    def __call__(self, data: Optional[Mapping[str, Any]] = None) -> str:
        return self.message.render(_Scope(data or {}, self.rule))


def compile_message(
    source: str,
    locale: str = "en",
    plural_rule: Optional[PluralizationRule] = None,
) -> CompiledMessage:
    """Compile an ICU MessageFormat `source` for `locale`."""
    message = _Parser(source).parse()
    return CompiledMessage(source, message, plural_rule or message_rule(locale))


class MessageFormatRegistry:
    """Flat registry of compiled messages for one locale."""

    SUFFIX = "_MF"

    def __init__(self, locale: str = "en", plural_rule: Optional[PluralizationRule] = None):
        self.locale = locale
        self.plural_rule = plural_rule or message_rule(locale)
        self._compiled: Dict[str, Callable[[Mapping[str, Any]], str]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._compiled

    def __len__(self) -> int:
        return len(self._compiled)

    def keys(self) -> List[str]:
        return sorted(self._compiled)

    def add(self, key: str, source: str) -> CompiledMessage:
        compiled = compile_message(source, self.locale, self.plural_rule)
        self._compiled[key] = compiled
        return compiled

    def add_compiled(self, key: str, fn: Callable[[Mapping[str, Any]], str]) -> None:
        self._compiled[key] = fn

    def format(self, key: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Evaluate message `key`; failures come back as their message text."""
        fn = self._compiled.get(key)
        if fn is None:
            return f"Missing Key: {key}"
        try:
            return fn(data or {})
        except Exception as err:
            logger.debug("Message %s failed for %r: %s", key, data, err)
            return str(err)

    def load_from_table(self, tree: Optional[TranslationNode]) -> int:
        """Compile every ``*_MF`` string in `tree`; returns how many loaded."""
        loaded = 0
        for path, source in _mf_leaves(tree, ()):
            key = ".".join(path[1:] if path and path[0] == "js" else path)
            try:
                self.add(key, source)
            except MessageFormatSyntaxError as exc:
                logger.warning("Skipping message %s: %s", key, exc)
                continue
            loaded += 1
        return loaded


def _mf_leaves(node: Optional[TranslationNode], path: Tuple[str, ...]) -> Iterator[Tuple[Tuple[str, ...], str]]:
    if isinstance(node, SubTree):
        for key, child in node.items():
            if isinstance(child, Leaf):
                if key.endswith(MessageFormatRegistry.SUFFIX) and isinstance(child.value, str):
                    yield path + (key,), child.value
            else:
                yield from _mf_leaves(child, path + (key,))
