"""Typed view over OpenAPI schema fragments."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import NotRepresentable


MAX_SCHEMA_DEPTH = 32

MockValue = Union[str, int, float, bool, List[Any], Dict[str, Any], None]


class SchemaKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, value: Any) -> "SchemaKind":
        if value is None:
            return cls.OBJECT
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.UNKNOWN


@dataclass(frozen=True)
class SchemaFragment:
    kind: SchemaKind
    format: Optional[str] = None
    enum: Tuple[Any, ...] = ()
    example: Any = None
    items: Optional["SchemaFragment"] = None
    properties: Tuple[Tuple[str, "SchemaFragment"], ...] = ()

    @classmethod
    def parse(cls, node: Any, max_depth: int = MAX_SCHEMA_DEPTH) -> "SchemaFragment":
        """Build a fragment tree from a raw schema mapping.

        A missing ``type`` means ``object``. Nesting deeper than ``max_depth``
        (e.g. a YAML alias pointing back at its own ancestor) raises
        ``NotRepresentable``.
        """
        return cls._parse(node, 0, max_depth)

    @classmethod
    def _parse(cls, node: Any, depth: int, max_depth: int) -> "SchemaFragment":
        if depth > max_depth:
            raise NotRepresentable(f"Schema nesting exceeds {max_depth} levels")
        if not isinstance(node, dict):
            return cls(kind=SchemaKind.UNKNOWN)

        kind = SchemaKind.from_type(node.get("type"))
        enum = node.get("enum")
        fmt = node.get("format")

        items = None
        properties: Tuple[Tuple[str, SchemaFragment], ...] = ()
        # An example short-circuits the children, so they are never parsed.
        if node.get("example") is None:
            if kind is SchemaKind.ARRAY:
                raw_items = node.get("items")
                if raw_items is None:
                    raw_items = {"type": "string"}
                items = cls._parse(raw_items, depth + 1, max_depth)
            elif kind is SchemaKind.OBJECT:
                raw_properties = node.get("properties")
                if isinstance(raw_properties, dict):
                    properties = tuple(
                        (str(name), cls._parse(child, depth + 1, max_depth))
                        for name, child in raw_properties.items()
                    )

        return cls(
            kind=kind,
            format=fmt if isinstance(fmt, str) else None,
            enum=tuple(enum) if isinstance(enum, list) else (),
            example=node.get("example"),
            items=items,
            properties=properties,
        )

    @property
    def has_example(self) -> bool:
        return self.example is not None
