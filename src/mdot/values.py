"""
Config Value Tree

Every manifest reaches the normalizer as a tree of ConfigValue nodes,
produced by whatever evaluated the user's configuration file.

The tree mirrors the value model of an embedded scripting language:
    - Nil
    - Bool
    - Integer
    - Number (non-integral numbers)
    - String
    - Function (a deferred, zero-argument callable)
    - Table (sequence part + key/value part)

ARCHITECTURAL RULE:
    Values are pure data.
    They are immutable once produced.
    Consumers only ever use:
        - Table.get(key)
        - Table.pairs()
        - as_table() / as_string() / as_bool()
"""

import json
from abc import ABC
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Iterator, Optional, Tuple, Union


class ConfigValue(ABC):
    """
    Base class for all config tree nodes.

    The narrowing accessors return None on a kind mismatch so callers can
    pattern-match on the variant without try/except.
    """

    kind = "value"

    def as_table(self) -> Optional["Table"]:
        return None

    def as_string(self) -> Optional[str]:
        return None

    def as_bool(self) -> Optional[bool]:
        return None

    def is_nil(self) -> bool:
        return False


@dataclass(frozen=True)
class Nil(ConfigValue):
    """Absence of a value. Looking up a missing key yields NIL."""

    kind = "Nil"

    def is_nil(self) -> bool:
        return True


NIL = Nil()


@dataclass(frozen=True)
class Bool(ConfigValue):
    kind = "Boolean"

    value: bool

    def as_bool(self) -> Optional[bool]:
        return self.value


@dataclass(frozen=True)
class Integer(ConfigValue):
    kind = "Integer"

    value: int


@dataclass(frozen=True)
class Number(ConfigValue):
    kind = "Number"

    value: float


@dataclass(frozen=True)
class String(ConfigValue):
    kind = "String"

    value: str

    def as_string(self) -> Optional[str]:
        return self.value


@dataclass(frozen=True)
class Function(ConfigValue):
    """
    A deferred zero-argument callable (e.g. an `enabled` predicate).

    The tree never calls it. Evaluation belongs to whoever consumes the
    normalized Package.
    """

    kind = "Function"

    func: Callable[[], Any]


@dataclass(frozen=True)
class Table(ConfigValue):
    """
    Table with a sequence part and a key/value part.

    Properties:
        sequence:
            Positional values. Slot i (1-based) holds sequence[i - 1].

        mapping:
            (key, value) pairs in declaration order.
            Keys are unique and never Nil; Integer keys never shadow
            a sequence slot.

    Iteration order (pairs):
        sequence slots 1..n first, then mapping entries as declared.
    """

    kind = "Table"

    sequence: Tuple[ConfigValue, ...] = ()
    mapping: Tuple[Tuple[ConfigValue, ConfigValue], ...] = ()

    def __post_init__(self):
        seen = set()
        for key, value in self.mapping:
            if key.is_nil():
                raise ValueError("table key cannot be nil")
            if isinstance(key, Integer) and 1 <= key.value <= len(self.sequence):
                raise ValueError(f"table key [{key.value}] shadows a sequence slot")
            if key in seen:
                raise ValueError(f"duplicate table key {describe(key)}")
            seen.add(key)
        for value in self.sequence:
            if value.is_nil():
                raise ValueError("table sequence cannot contain nil")

    def as_table(self) -> Optional["Table"]:
        return self

    def get(self, key: Union[ConfigValue, int, str]) -> ConfigValue:
        """
        Look up a key.

        Args:
            key: ConfigValue, or a plain int/str for convenience

        Returns:
            The stored value, or NIL if absent
        """
        if not isinstance(key, ConfigValue):
            key = from_python(key)
        if isinstance(key, Integer) and 1 <= key.value <= len(self.sequence):
            return self.sequence[key.value - 1]
        for k, v in self.mapping:
            if k == key:
                return v
        return NIL

    def pairs(self) -> Iterator[Tuple[ConfigValue, ConfigValue]]:
        for index, value in enumerate(self.sequence, start=1):
            yield Integer(index), value
        yield from self.mapping

    def __len__(self) -> int:
        return len(self.sequence) + len(self.mapping)


def from_python(obj: Any) -> ConfigValue:
    """
    Convert plain Python data into a ConfigValue tree.

    Handles the shapes produced by YAML/JSON loaders plus callables:
        None          -> Nil
        bool          -> Bool
        int           -> Integer
        float         -> Number
        str           -> String
        callable      -> Function
        list / tuple  -> Table (sequence part)
        dict          -> Table (mapping part, declaration order kept)

    Dict entries whose value is None are dropped, as assigning nil drops a
    table entry.

    Raises:
        TypeError: unsupported Python type or dict key type
        ValueError: None inside a list, or a container that contains itself
    """
    return _convert(obj, frozenset())


def _convert(obj: Any, path: FrozenSet[int]) -> ConfigValue:
    # path holds the ids of the containers being converted above obj
    if isinstance(obj, ConfigValue):
        return obj
    if obj is None:
        return NIL
    # bool is a subclass of int; check it first
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple, dict)):
        if id(obj) in path:
            raise ValueError("recursive value: a table contains itself")
        path = path | {id(obj)}
    if isinstance(obj, (list, tuple)):
        items = []
        for index, item in enumerate(obj, start=1):
            if item is None:
                raise ValueError(f"nil at sequence slot [{index}]")
            items.append(_convert(item, path))
        return Table(sequence=tuple(items))
    if isinstance(obj, dict):
        pairs = []
        for key, value in obj.items():
            if isinstance(key, bool) or not isinstance(key, (int, str)):
                raise TypeError(f"unsupported table key type: {type(key).__name__}")
            if value is None:
                continue
            pairs.append((_convert(key, path), _convert(value, path)))
        return Table(mapping=tuple(pairs))
    if callable(obj):
        return Function(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to a config value")


def describe(value: ConfigValue) -> str:
    """Render a value as a compact literal for diagnostic messages."""
    if isinstance(value, Nil):
        return "nil"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, (Integer, Number)):
        return str(value.value)
    if isinstance(value, String):
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, Function):
        return "function"
    if isinstance(value, Table):
        parts = [describe(v) for v in value.sequence]
        parts.extend(f"[{describe(k)}] = {describe(v)}" for k, v in value.mapping)
        if not parts:
            return "{}"
        return "{ " + ", ".join(parts) + " }"
    return repr(value)


def describe_pair(key: ConfigValue, value: ConfigValue) -> str:
    return f"[{describe(key)}] = {describe(value)}"


__all__ = [
    "ConfigValue",
    "Nil",
    "NIL",
    "Bool",
    "Integer",
    "Number",
    "String",
    "Function",
    "Table",
    "from_python",
    "describe",
    "describe_pair",
]
