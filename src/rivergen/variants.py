"""
Fields whose wire representation may take one of several shapes.

Each variant decodes by trying its legal shapes in a fixed order and
committing to the first one that fits, and encodes to exactly one shape.
The classes plug into the pydantic document model as custom field types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pydantic_core import core_schema

from .errors import InvalidVariantShape


INHERIT_KEY = "inherit"
RESERVED_DIMENSIONS = ("include", "exclude")


def _wire_schema(cls) -> core_schema.CoreSchema:
    def validate(value: Any) -> Any:
        if isinstance(value, cls):
            return value
        return cls.decode(value)

    return core_schema.no_info_plain_validator_function(
        validate,
        serialization=core_schema.plain_serializer_function_ser_schema(
            lambda instance: instance.encode()
        ),
    )


# ---------------------------------------------------------------------
# String or integer scalar
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class StringOrInt:
    """Holds a string or an integer, never both."""
    string_value: Optional[str] = None
    int_value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.string_value is not None and self.int_value is not None:
            raise InvalidVariantShape(
                "string or int",
                "exactly one of a string or an integer",
                (self.string_value, self.int_value),
            )

    @classmethod
    def from_value(cls, value: Union["StringOrInt", str, int]) -> "StringOrInt":
        if isinstance(value, cls):
            return value
        return cls.decode(value)

    @classmethod
    def decode(cls, data: Any) -> "StringOrInt":
        if isinstance(data, str):
            return cls(string_value=data)
        # bool is an int subclass but never a legal matrix value
        if isinstance(data, int) and not isinstance(data, bool):
            return cls(int_value=data)
        raise InvalidVariantShape("string or int", "a string or an integer", data)

    def encode(self) -> Union[str, int, None]:
        if self.int_value is not None:
            return self.int_value
        if self.string_value is not None:
            return self.string_value
        return None

    @property
    def is_int(self) -> bool:
        return self.int_value is not None

    @property
    def value(self) -> Union[str, int, None]:
        return self.encode()

    def __str__(self) -> str:
        value = self.encode()
        return "" if value is None else str(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return _wire_schema(cls)


# ---------------------------------------------------------------------
# Secrets: inherit everything, or pass an explicit mapping
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Secrets:
    """
    The `secrets` field of a job calling a reusable workflow.

    Either `inherit` is set (pass every secret of the caller through) or
    `mapping` names callee secrets and the caller expressions feeding them.
    An empty mapping passes nothing.
    """
    inherit: bool = False
    mapping: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.inherit and self.mapping:
            raise InvalidVariantShape(
                "secrets",
                "either inherit or a mapping, not both",
                {INHERIT_KEY: self.inherit, **self.mapping},
            )

    @classmethod
    def inherit_all(cls) -> "Secrets":
        return cls(inherit=True)

    @classmethod
    def of(cls, mapping: Mapping[str, str]) -> "Secrets":
        return cls(mapping=dict(mapping))

    @classmethod
    def decode(cls, data: Any) -> "Secrets":
        # the vendor's shorthand for the inherit shape
        if data == INHERIT_KEY:
            return cls(inherit=True)

        if isinstance(data, Mapping):
            if set(data) == {INHERIT_KEY} and isinstance(data[INHERIT_KEY], bool):
                return cls(inherit=data[INHERIT_KEY])
            if all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
                return cls(mapping=dict(data))

        raise InvalidVariantShape(
            "secrets", "{'inherit': bool} or a mapping of strings to strings", data
        )

    def encode(self) -> Dict[str, Any]:
        if self.inherit:
            return {INHERIT_KEY: True}
        return dict(self.mapping)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return _wire_schema(cls)


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

Combination = Dict[str, StringOrInt]


def _combination(data: Any, key: str) -> Combination:
    if not isinstance(data, Mapping):
        raise InvalidVariantShape(f"matrix.{key}", "a mapping of dimension values", data)
    return {str(k): _scalar(v, f"{key}.{k}") for k, v in data.items()}


def _scalar(data: Any, key: str) -> StringOrInt:
    if isinstance(data, StringOrInt):
        return data
    try:
        return StringOrInt.decode(data)
    except InvalidVariantShape as e:
        raise InvalidVariantShape(f"matrix.{key}", e.expected, data) from e


def _list(data: Any, key: str) -> list:
    if isinstance(data, (str, bytes)) or not isinstance(data, (list, tuple)):
        raise InvalidVariantShape(f"matrix.{key}", "a list", data)
    return list(data)


@dataclass
class Matrix:
    """
    A build matrix: named dimensions plus the reserved `include`/`exclude`
    combination lists.

    Plain strings and integers are accepted anywhere a StringOrInt is
    expected.
    """
    dimensions: Dict[str, List[StringOrInt]] = field(default_factory=dict)
    include: List[Combination] = field(default_factory=list)
    exclude: List[Combination] = field(default_factory=list)

    def __post_init__(self) -> None:
        clash = sorted(set(self.dimensions) & set(RESERVED_DIMENSIONS))
        if clash:
            raise InvalidVariantShape(
                "matrix", f"dimension names other than {list(RESERVED_DIMENSIONS)}", clash
            )
        self.dimensions = {
            k: [_scalar(v, k) for v in _list(values, k)]
            for k, values in self.dimensions.items()
        }
        self.include = [_combination(c, "include") for c in _list(self.include, "include")]
        self.exclude = [_combination(c, "exclude") for c in _list(self.exclude, "exclude")]

    @classmethod
    def decode(cls, data: Any) -> "Matrix":
        if not isinstance(data, Mapping):
            raise InvalidVariantShape("matrix", "a mapping", data)

        dimensions: Dict[str, List[StringOrInt]] = {}
        include: List[Combination] = []
        exclude: List[Combination] = []

        # sorted so errors are reported in the same order on every run
        for key in sorted(data):
            raw = _list(data[key], key)
            if key == "include":
                include = [_combination(c, key) for c in raw]
            elif key == "exclude":
                exclude = [_combination(c, key) for c in raw]
            else:
                dimensions[key] = [_scalar(v, key) for v in raw]

        return cls(dimensions=dimensions, include=include, exclude=exclude)

    def encode(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            k: [v.encode() for v in self.dimensions[k]] for k in sorted(self.dimensions)
        }
        if self.include:
            out["include"] = [_encode_combination(c) for c in self.include]
        if self.exclude:
            out["exclude"] = [_encode_combination(c) for c in self.exclude]
        return out

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return _wire_schema(cls)


def _encode_combination(combination: Combination) -> Dict[str, Any]:
    return {k: combination[k].encode() for k in sorted(combination)}
