"""Typed JSON values with path-based accessors.

A `JSONValue` wraps a parsed JSON document and knows which of the six JSON
shapes it holds. Accessors walk an optional path made of object keys (``str``)
and array indices (``int``) and return statically typed results, raising
`JSONError` when the path or the value's shape does not fit:

    >>> doc = JSONValue.from_bytes(b'{"friends": [{"name": "bill"}]}')
    >>> doc.get_string("friends", 0, "name")
    'bill'
"""

import json
from enum import Enum
from typing import Any, Dict, List, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")

PathComponent = Union[str, int]


class JSONType(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class JSONErrorKind(str, Enum):
    KEY_NOT_FOUND = "keyNotFound"
    INDEX_OUT_OF_BOUNDS = "indexOutOfBounds"
    UNEXPECTED_SUBSCRIPT = "unexpectedSubscript"
    VALUE_NOT_CONVERTIBLE = "valueNotConvertible"
    ENCODING_ERROR = "encodingError"


class JSONError(Exception):
    def __init__(self, kind: JSONErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


def _type_of(value: Any) -> JSONType:
    if value is None:
        return JSONType.NULL
    if isinstance(value, bool):
        return JSONType.BOOL
    if isinstance(value, (int, float)):
        return JSONType.NUMBER
    if isinstance(value, str):
        return JSONType.STRING
    if isinstance(value, list):
        return JSONType.ARRAY
    if isinstance(value, dict):
        return JSONType.OBJECT
    raise JSONError(
        JSONErrorKind.VALUE_NOT_CONVERTIBLE,
        f"{type(value).__name__} is not a JSON value",
    )


class JSONValue:
    __slots__ = ("_value", "_type")

    def __init__(self, value: Any):
        self._type = _type_of(value)
        self._value = value

    @classmethod
    def from_bytes(cls, data: bytes) -> "JSONValue":
        try:
            return cls(json.loads(data))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise JSONError(JSONErrorKind.ENCODING_ERROR, str(e)) from e

    @classmethod
    def from_string(cls, text: str) -> "JSONValue":
        return cls.from_bytes(text.encode("utf-8"))

    @property
    def type(self) -> JSONType:
        return self._type

    @property
    def value(self) -> Any:
        """The underlying Python value (dict, list, str, number, bool or None)."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JSONValue):
            return self._type == other._type and self._value == other._value
        return NotImplemented

    def __repr__(self) -> str:
        return f"JSONValue({self._type.value}: {self._value!r})"

    def serialize(self) -> bytes:
        return json.dumps(self._value, separators=(",", ":")).encode("utf-8")

    def serialize_string(self) -> str:
        return self.serialize().decode("utf-8")

    def get(self, *path: PathComponent) -> "JSONValue":
        current = self
        for component in path:
            current = current._step(component)
        return current

    def _step(self, component: PathComponent) -> "JSONValue":
        if isinstance(component, bool):
            raise JSONError(
                JSONErrorKind.UNEXPECTED_SUBSCRIPT, "bool is not a valid path component"
            )
        if isinstance(component, str):
            if self._type is not JSONType.OBJECT:
                raise JSONError(
                    JSONErrorKind.UNEXPECTED_SUBSCRIPT,
                    f"cannot subscript {self._type.value} with key '{component}'",
                )
            if component not in self._value:
                raise JSONError(
                    JSONErrorKind.KEY_NOT_FOUND, f"key '{component}' not found"
                )
            return JSONValue(self._value[component])
        if isinstance(component, int):
            if self._type is not JSONType.ARRAY:
                raise JSONError(
                    JSONErrorKind.UNEXPECTED_SUBSCRIPT,
                    f"cannot subscript {self._type.value} with index {component}",
                )
            if not -len(self._value) <= component < len(self._value):
                raise JSONError(
                    JSONErrorKind.INDEX_OUT_OF_BOUNDS,
                    f"index {component} out of bounds for array of {len(self._value)}",
                )
            return JSONValue(self._value[component])
        raise JSONError(
            JSONErrorKind.UNEXPECTED_SUBSCRIPT,
            f"{type(component).__name__} is not a valid path component",
        )

    def _expect(self, expected: JSONType, *path: PathComponent) -> Any:
        target = self.get(*path)
        if target._type is not expected:
            raise JSONError(
                JSONErrorKind.VALUE_NOT_CONVERTIBLE,
                f"expected {expected.value}, found {target._type.value}",
            )
        return target._value

    def get_string(self, *path: PathComponent) -> str:
        return self._expect(JSONType.STRING, *path)

    def get_bool(self, *path: PathComponent) -> bool:
        return self._expect(JSONType.BOOL, *path)

    def get_double(self, *path: PathComponent) -> float:
        return float(self._expect(JSONType.NUMBER, *path))

    def get_int(self, *path: PathComponent) -> int:
        number = self._expect(JSONType.NUMBER, *path)
        if isinstance(number, float):
            if not number.is_integer():
                raise JSONError(
                    JSONErrorKind.VALUE_NOT_CONVERTIBLE,
                    f"{number} is not an integer",
                )
            return int(number)
        return number

    def get_array(self, *path: PathComponent) -> List["JSONValue"]:
        return [JSONValue(item) for item in self._expect(JSONType.ARRAY, *path)]

    def get_dictionary(self, *path: PathComponent) -> Dict[str, "JSONValue"]:
        return {
            key: JSONValue(item)
            for key, item in self._expect(JSONType.OBJECT, *path).items()
        }

    def decode(self, model: Type[T], *path: PathComponent) -> T:
        """Validate the value at `path` into `model` with pydantic."""
        target = self.get(*path)
        try:
            return TypeAdapter(model).validate_python(target._value)
        except ValidationError as e:
            raise JSONError(JSONErrorKind.VALUE_NOT_CONVERTIBLE, str(e)) from e

    def is_null(self, *path: PathComponent) -> bool:
        return self.get(*path)._type is JSONType.NULL
