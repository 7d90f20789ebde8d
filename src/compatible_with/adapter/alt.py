"""Shape alternative: a tagless two-way structural union.

``Alt[Old, Current]`` decodes its input as ``Old`` first and ``Current``
second; the first candidate that validates wins.  Nothing is written on the
wire to say which candidate was used, so disambiguation is purely
structural and left to pydantic's ``left_to_right`` union.

Classes
-------
- Variant             — enum naming the held case: OLD or CURRENT
- Alt                 — frozen value holding exactly one case
- StructuralMismatch  — raised when the input matches neither shape
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from pydantic import GetCoreSchemaHandler, ValidationError
from pydantic_core import CoreSchema, core_schema

from compatible_with.adapter.params import VersionPair, type_adapter


class StructuralMismatch(ValueError):
    """Raised when an input matches neither the old nor the current shape.

    The pydantic error list is kept as-is in :attr:`errors`; no attempt is
    made to decide which shape the input was "closer" to.
    """

    def __init__(self, adapter: str, error: ValidationError) -> None:
        self.adapter = adapter
        self.errors = error.errors()
        super().__init__(f"Input matches neither shape of {adapter}: {error}")


class Variant(str, Enum):
    """The case held by a shape alternative."""

    OLD = "old"
    CURRENT = "current"


def alternative_schema(
    old_schema: CoreSchema,
    current_schema: CoreSchema,
    make: Callable[[Variant, Any], Any],
    *,
    serialization: core_schema.SerSchema | None = None,
) -> CoreSchema:
    """Build the ordered two-candidate schema shared by all adapter forms.

    Parameters
    ----------
    old_schema:
        Core schema of the previous version.  Tried first.
    current_schema:
        Core schema of the present version.  Tried second.
    make:
        Called as ``make(variant, value)`` with the validated value of the
        candidate that matched.
    serialization:
        Optional serializer for the union's output.

    Returns
    -------
    CoreSchema
        A ``left_to_right`` union whose candidates are labelled ``old`` and
        ``current`` in error locations.
    """
    return core_schema.union_schema(
        [
            (
                core_schema.no_info_after_validator_function(
                    functools.partial(make, Variant.OLD), old_schema
                ),
                Variant.OLD.value,
            ),
            (
                core_schema.no_info_after_validator_function(
                    functools.partial(make, Variant.CURRENT), current_schema
                ),
                Variant.CURRENT.value,
            ),
        ],
        mode="left_to_right",
        serialization=serialization,
    )


def dump_held(tp: Any, value: Any, info: core_schema.SerializationInfo) -> Any:
    """Serialize *value* with the serializer of its declared type *tp*."""
    return type_adapter(tp).dump_python(
        value,
        mode=info.mode,
        by_alias=info.by_alias,
        exclude_unset=info.exclude_unset,
        exclude_defaults=info.exclude_defaults,
        exclude_none=info.exclude_none,
        round_trip=info.round_trip,
    )


@functools.total_ordering
@dataclass(frozen=True)
class Alt(VersionPair):
    """A value that is either ``Old``-shaped or ``Current``-shaped.

    Parameters
    ----------
    variant:
        Which case is held.
    value:
        The held value, an instance of ``old_type`` or ``current_type``.

    Example
    -------
    .. code-block:: python

        Alt[int, str].decode(1).variant      # Variant.OLD
        Alt[int, str].decode("one").variant  # Variant.CURRENT
    """

    variant: Variant
    value: Any

    @classmethod
    def of_old(cls, value: Any) -> Alt:
        """Wrap an ``Old`` value."""
        return cls(Variant.OLD, value)

    @classmethod
    def of_current(cls, value: Any) -> Alt:
        """Wrap a ``Current`` value."""
        return cls(Variant.CURRENT, value)

    @property
    def is_old(self) -> bool:
        return self.variant is Variant.OLD

    @property
    def is_current(self) -> bool:
        return self.variant is Variant.CURRENT

    @property
    def held_type(self) -> Any:
        """The declared type of the held case."""
        return self.old_type if self.is_old else self.current_type

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.is_current, self.value) < (other.is_current, other.value)  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @classmethod
    def decode(cls, data: Any, *, strict: bool | None = None) -> Alt:
        """Decode *data* as ``Old``, falling back to ``Current``.

        Raises
        ------
        StructuralMismatch
            If *data* validates as neither type.
        """
        cls._require_parametrized()
        try:
            return type_adapter(cls).validate_python(data, strict=strict)
        except ValidationError as exc:
            raise StructuralMismatch(cls.__qualname__, exc) from exc

    @classmethod
    def decode_json(cls, raw: str | bytes, *, strict: bool | None = None) -> Alt:
        """Like :meth:`decode`, reading JSON text."""
        cls._require_parametrized()
        try:
            return type_adapter(cls).validate_json(raw, strict=strict)
        except ValidationError as exc:
            raise StructuralMismatch(cls.__qualname__, exc) from exc

    def encode(self) -> bytes:
        """Return the JSON encoding of the held case, without any tag."""
        return type_adapter(type(self)).dump_json(self)

    # ------------------------------------------------------------------
    # pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        cls._require_parametrized()
        return alternative_schema(
            handler.generate_schema(cls.old_type),
            handler.generate_schema(cls.current_type),
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize_alt, info_arg=True
            ),
        )


def _serialize_alt(alt: Alt, info: core_schema.SerializationInfo) -> Any:
    return dump_held(alt.held_type, alt.value, info)
