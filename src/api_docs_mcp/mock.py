"""Schema-driven example value synthesis."""

from __future__ import annotations

import copy
from typing import Dict

from .schema import MockValue, SchemaFragment, SchemaKind


STRING_FORMATS: Dict[str, str] = {
    "email": "user@example.com",
    "date": "2024-01-01",
    "date-time": "2024-01-01T00:00:00Z",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": "123e4567-e89b-12d3-a456-426614174000",
}

DEFAULT_STRING = "string"
DEFAULT_INTEGER = 123
DEFAULT_NUMBER = 123.45


class MockSynthesizer:
    """Turns a schema fragment into a deterministic example value.

    ``None`` means the fragment is not representable (unknown ``type``); inside
    arrays and objects it is kept as a null member.
    """

    def synthesize(self, schema: SchemaFragment) -> MockValue:
        if schema.has_example:
            return copy.deepcopy(schema.example)

        kind = schema.kind
        if kind is SchemaKind.STRING:
            return self._mock_string(schema)
        if kind is SchemaKind.INTEGER:
            return DEFAULT_INTEGER
        if kind is SchemaKind.NUMBER:
            return DEFAULT_NUMBER
        if kind is SchemaKind.BOOLEAN:
            return True
        if kind is SchemaKind.ARRAY:
            return [self.synthesize(schema.items or SchemaFragment(kind=SchemaKind.STRING))]
        if kind is SchemaKind.OBJECT:
            return {name: self.synthesize(child) for name, child in schema.properties}
        return None

    def _mock_string(self, schema: SchemaFragment) -> str:
        if schema.enum:
            return str(schema.enum[0])
        return STRING_FORMATS.get(schema.format or "", DEFAULT_STRING)
