# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""JSON document to typed object mapping.

:class:`ObjectMapper` converts SQL++ rows and key-value documents into
dataclasses, Pydantic models or plain annotated classes, and back.  The
conventions are fixed:

- document keys are camelCase and matched case-insensitively
- numbers are accepted as numeric or string literals
- enums are written by member name and read by name (value as fallback)

Example::

    @dataclass
    class User:
        id: str
        first_name: str
        age: int
        status: Status = Status.ACTIVE
        internal_notes: Annotated[str, Ignore()] = ""
        mail: Annotated[str | None, Column("emailAddress")] = None

    mapper = ObjectMapper()
    mapper.validate_type(User)  # fail fast, e.g. at startup
    user = mapper.map('{"ID": "u1", "firstName": "Ada", "age": "36"}', User)
    doc = mapper.to_document(user)
    # {"id": "u1", "firstName": "Ada", "age": 36, "status": "ACTIVE", "emailAddress": None}
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import json
import sys
import types
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, TypeAdapter
from pydantic.alias_generators import to_camel

from simplemapper.kernel.exceptions import MappingException

T = TypeVar("T")

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence, MutableSequence)


@dataclasses.dataclass(frozen=True)
class Column:
    """Map a field to a document key other than its camelCase name.

    Usage: ``email: Annotated[str, Column("emailAddress")]``
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise MappingException("Column name cannot be empty.")


@dataclasses.dataclass(frozen=True)
class Ignore:
    """Exclude a field from both reading and writing documents."""


@dataclasses.dataclass(frozen=True)
class _Field:
    name: str
    key: str
    type: Any
    required: bool
    ignored: bool
    init_name: str


class ObjectMapper:
    """Maps JSON payloads to typed objects and typed objects to documents."""

    def map(self, payload: str | bytes | bytearray | Any, target_type: type[T]) -> T | None:
        """Deserialize *payload* into *target_type*.

        *payload* may be JSON text/bytes or an already-parsed value (a row
        from the query client). Returns ``None`` for a ``null`` document.

        Raises:
            MappingException: The payload is malformed or does not fit
                *target_type*.
        """
        data = self._parse(payload, target_type)
        if data is None:
            return None
        return self._convert(data, target_type, target_type, None)

    def map_list(self, rows: list[Any], target_type: type[T]) -> list[T]:
        """Map every row; ``null`` rows are dropped."""
        mapped = (self.map(row, target_type) for row in rows)
        return [item for item in mapped if item is not None]

    def to_document(self, value: Any) -> Any:
        """Convert *value* into JSON-compatible data using the document conventions."""
        if isinstance(value, enum.Enum):
            return value.name
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, Mapping):
            return {str(k): self.to_document(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_document(v) for v in value]
        if _is_structured(type(value)):
            return {
                f.key: self.to_document(getattr(value, f.name))
                for f in _fields_of(type(value))
                if not f.ignored
            }
        return _adapter(type(value)).dump_python(value, mode="json")

    def to_json(self, value: Any) -> str:
        """Serialize *value* to JSON text using :meth:`to_document`."""
        return json.dumps(self.to_document(value))

    def validate_type(self, target_type: Any) -> None:
        """Check that *target_type* can be built from a mapped document.

        Meant to surface configuration mistakes early; :meth:`map` does not
        depend on it.

        Raises:
            MappingException: *target_type* is not a concrete, constructible
                class, or its field declarations are invalid.
        """
        name = getattr(target_type, "__name__", repr(target_type))
        if not isinstance(target_type, type):
            raise MappingException(f"{name} is not a class.", target_type=name)
        if getattr(target_type, "_is_protocol", False):
            raise MappingException(f"Type {name} is a Protocol and cannot be constructed.", target_type=name)
        if inspect.isabstract(target_type):
            raise MappingException(f"Type {name} is abstract and cannot be constructed.", target_type=name)
        if target_type.__init__ is None or target_type.__new__ is None:  # type: ignore[comparison-overlap]
            raise MappingException(f"Type {name} does not have an accessible constructor.", target_type=name)

        fields = _fields_of(target_type)
        if dataclasses.is_dataclass(target_type) or issubclass(target_type, BaseModel):
            return
        if target_type.__init__ is object.__init__:
            return

        try:
            params = list(inspect.signature(target_type).parameters.values())
        except (TypeError, ValueError) as exc:
            raise MappingException(
                f"Type {name} does not have an accessible constructor.", target_type=name
            ) from exc

        known = {f.init_name for f in fields}
        for param in params:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            required = param.default is param.empty
            if required and (param.name.startswith("_") or param.name not in known):
                raise MappingException(
                    f"Type {name} does not have an accessible constructor: "
                    f"required parameter '{param.name}' has no matching field.",
                    target_type=name,
                    property_name=param.name,
                )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(payload: Any, target_type: Any) -> Any:
        if not isinstance(payload, (str, bytes, bytearray)):
            return payload
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise MappingException(
                f"Malformed JSON payload for {_type_name(target_type)}: {exc}",
                target_type=_type_name(target_type),
                value=payload,
            ) from exc

    def _convert(self, value: Any, tp: Any, root: Any, prop: str | None) -> Any:
        origin = get_origin(tp)
        if origin is Annotated:
            return self._convert(value, get_args(tp)[0], root, prop)
        if tp is Any:
            return value

        if origin is Union or origin is types.UnionType:
            args = get_args(tp)
            if value is None and type(None) in args:
                return None
            candidates = [a for a in args if a is not type(None)]
            if len(candidates) == 1:
                return self._convert(value, candidates[0], root, prop)
            return self._validate(value, tp, root, prop)

        if origin in _SEQUENCE_ORIGINS:
            if not isinstance(value, (list, tuple, set, frozenset)):
                raise self._error(f"Expected an array, got {type(value).__name__}", root, prop, value)
            args = get_args(tp)
            if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
                return self._validate(value, tp, root, prop)
            item_type = args[0] if args else Any
            container = list if origin in (Sequence, MutableSequence) else origin
            return container(self._convert(v, item_type, root, prop) for v in value)

        if origin in (dict, Mapping):
            if not isinstance(value, Mapping):
                raise self._error(f"Expected an object, got {type(value).__name__}", root, prop, value)
            args = get_args(tp)
            value_type = args[1] if len(args) == 2 else Any
            return {k: self._convert(v, value_type, root, prop) for k, v in value.items()}

        if isinstance(tp, type) and issubclass(tp, enum.Enum):
            return self._convert_enum(value, tp, root, prop)

        if isinstance(tp, type) and (_is_structured(tp) or issubclass(tp, BaseModel)):
            if isinstance(value, tp):
                return value
            return self._map_object(value, tp)

        return self._validate(value, tp, root, prop)

    def _map_object(self, data: Any, tp: type[T]) -> T:
        if not isinstance(data, Mapping):
            raise self._error(f"Expected a JSON object, got {type(data).__name__}", tp, None, data)

        by_key = {str(k).lower(): v for k, v in data.items()}
        kwargs: dict[str, Any] = {}
        for field in _fields_of(tp):
            if field.ignored:
                continue
            for candidate in (field.key, field.name):
                if candidate.lower() in by_key:
                    raw = by_key[candidate.lower()]
                    kwargs[field.init_name] = self._convert(raw, field.type, tp, field.name)
                    break
            else:
                if field.required:
                    raise self._error(f"Missing required property '{field.name}'", tp, field.name, None)

        try:
            if issubclass(tp, BaseModel):
                return tp.model_validate(kwargs)
            if tp.__init__ is object.__init__:
                # parameterless constructor, then assign attributes
                instance = tp()
                for name, value in kwargs.items():
                    setattr(instance, name, value)
                return instance
            return tp(**kwargs)
        except (TypeError, ValueError) as exc:
            raise self._error(f"Cannot construct {tp.__name__}: {exc}", tp, None, dict(data)) from exc

    def _convert_enum(self, value: Any, tp: type[enum.Enum], root: Any, prop: str | None) -> enum.Enum:
        if isinstance(value, tp):
            return value
        if isinstance(value, str):
            if value in tp.__members__:
                return tp.__members__[value]
            for member_name, member in tp.__members__.items():
                if member_name.lower() == value.lower():
                    return member
        try:
            return tp(value)
        except ValueError as exc:
            raise self._error(f"'{value}' is not a valid {tp.__name__}", root, prop, value) from exc

    def _validate(self, value: Any, tp: Any, root: Any, prop: str | None) -> Any:
        try:
            return _adapter(tp).validate_python(value)
        except (TypeError, ValueError) as exc:
            raise self._error(
                f"Cannot convert {value!r} to {_type_name(tp)}", root, prop, value
            ) from exc

    @staticmethod
    def _error(message: str, root: Any, prop: str | None, value: Any) -> MappingException:
        target = _type_name(root)
        where = f"{target}.{prop}" if prop else target
        return MappingException(f"{message} ({where})", target_type=target, property_name=prop, value=value)


@functools.lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", repr(tp))


def _is_library_type(tp: type) -> bool:
    root = tp.__module__.partition(".")[0]
    return root in sys.stdlib_module_names or root in ("builtins", "pydantic", "pydantic_core")


def _is_structured(tp: type) -> bool:
    """Dataclasses, Pydantic models and user classes with annotations or a constructor."""
    if dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel):
        return True
    if issubclass(tp, enum.Enum) or _is_library_type(tp):
        return False
    return bool(inspect.get_annotations(tp)) or inspect.isfunction(tp.__init__)


@functools.lru_cache(maxsize=256)
def _fields_of(tp: type) -> tuple[_Field, ...]:
    if issubclass(tp, BaseModel):
        result = []
        for name, info in tp.model_fields.items():
            # pydantic keeps Annotated markers in FieldInfo.metadata
            hint = Annotated[(info.annotation, *info.metadata)] if info.metadata else info.annotation
            field = _make_field(name, hint, info.is_required(), info.alias or name)
            if info.alias and _column_of(hint) is None:
                field = dataclasses.replace(field, key=info.alias)
            result.append(field)
        return tuple(result)

    try:
        hints = get_type_hints(tp, include_extras=True)
    except NameError as exc:
        raise MappingException(
            f"Cannot resolve field types of {tp.__name__}: {exc}", target_type=tp.__name__
        ) from exc

    if dataclasses.is_dataclass(tp):
        return tuple(
            _make_field(
                f.name,
                hints.get(f.name, Any),
                f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING,
                f.name,
            )
            for f in dataclasses.fields(tp)
            if f.init
        )

    init = tp.__init__
    if init is None or init is object.__init__:
        return tuple(_make_field(n, h, False, n) for n, h in hints.items())
    try:
        params = inspect.signature(init).parameters
        init_hints = get_type_hints(init, include_extras=True)
    except (TypeError, ValueError, NameError):
        return ()
    return tuple(
        _make_field(
            p.name,
            init_hints.get(p.name, hints.get(p.name, Any)),
            p.default is p.empty,
            p.name,
        )
        for p in list(params.values())[1:]
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD, p.POSITIONAL_ONLY)
    )


def _column_of(hint: Any) -> Column | None:
    if get_origin(hint) is Annotated:
        for meta in get_args(hint)[1:]:
            if isinstance(meta, Column):
                return meta
    return None


def _make_field(name: str, hint: Any, required: bool, init_name: str) -> _Field:
    ignored = get_origin(hint) is Annotated and any(isinstance(m, Ignore) for m in get_args(hint)[1:])
    column = _column_of(hint)
    key = column.name if column is not None else to_camel(name)
    return _Field(name=name, key=key, type=hint, required=required, ignored=ignored, init_name=init_name)
