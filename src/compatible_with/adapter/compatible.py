"""The compatibility adapter.

``Compatible[Old, Current]`` decodes either shape and normalizes to
``Current`` as the last step of every decode, so code holding an adapter
never sees the old shape.  Encoding emits whichever case is held (always
``Current`` after a decode), with no tag or version marker, so stored data
self-heals the next time it is written.

Because the adapter decodes and encodes exactly like the type it holds, it
can itself be the old half of another adapter:
``Compatible[Compatible[V1, V2], V3]`` reads all three versions.

Classes
-------
- Compatible  — the adapter
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler, ValidationError
from pydantic_core import CoreSchema, core_schema

from compatible_with.adapter.alt import Alt, StructuralMismatch, dump_held
from compatible_with.adapter.params import VersionPair, type_adapter
from compatible_with.conversion import produce_current
from compatible_with.conversion.registry import type_name

logger = logging.getLogger(__name__)


@functools.total_ordering
@dataclass(frozen=True)
class Compatible(VersionPair):
    """Wraps a value that was stored either as ``Old`` or as ``Current``.

    Parameters
    ----------
    alt:
        The held shape alternative.  Must be an ``Alt`` parametrized with
        the same ``(Old, Current)`` pair.

    Example
    -------
    .. code-block:: python

        class Record(BaseModel):
            dirs: Compatible[list[Dir], DirNode]

        record = Record.model_validate_json(stored)
        tree = record.dirs.into_current()
    """

    alt: Alt

    def __post_init__(self) -> None:
        self._require_parametrized()
        if type(self.alt) is not self.alt_type():
            raise TypeError(
                f"{type(self).__qualname__} must hold an {self.alt_type().__qualname__}, "
                f"got {type(self.alt).__qualname__}"
            )

    @classmethod
    def alt_type(cls) -> type[Alt]:
        """The ``Alt`` class for this adapter's ``(Old, Current)`` pair."""
        cls._require_parametrized()
        return Alt[cls.old_type, cls.current_type]

    @classmethod
    def from_current(cls, value: Any) -> Compatible:
        """Wrap an already-current *value*."""
        return cls(cls.alt_type().of_current(value))

    @property
    def is_current(self) -> bool:
        return self.alt.is_current

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def into_current(self) -> Any:
        """Return the held value as ``Current``, converting it if needed."""
        if self.alt.is_current:
            return self.alt.value
        return produce_current(self.current_type, self.alt.value, self.old_type)

    def make_current(self) -> Compatible:
        """Return an adapter holding ``Current``.

        Idempotent: an adapter already holding ``Current`` is returned as
        is.
        """
        if self.alt.is_current:
            return self
        current = self.into_current()
        logger.debug(
            "Upgraded %s value to %s",
            type_name(self.old_type),
            type_name(self.current_type),
        )
        return self.from_current(current)

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.alt < other.alt  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Decoding and encoding
    # ------------------------------------------------------------------

    @classmethod
    def decode(cls, data: Any, *, strict: bool | None = None) -> Compatible:
        """Decode *data* as either shape and normalize it.

        Raises
        ------
        StructuralMismatch
            If *data* matches neither ``Old`` nor ``Current``.
        """
        cls._require_parametrized()
        try:
            return type_adapter(cls).validate_python(data, strict=strict)
        except ValidationError as exc:
            raise StructuralMismatch(cls.__qualname__, exc) from exc

    @classmethod
    def decode_json(cls, raw: str | bytes, *, strict: bool | None = None) -> Compatible:
        """Like :meth:`decode`, reading JSON text."""
        cls._require_parametrized()
        try:
            return type_adapter(cls).validate_json(raw, strict=strict)
        except ValidationError as exc:
            raise StructuralMismatch(cls.__qualname__, exc) from exc

    @classmethod
    def decode_field(cls, data: Any) -> Any:
        """Decode *data* straight to ``Current``.

        Meant for a single field's decode hook, where the field is typed as
        the current type and the adapter is only used transiently:

        .. code-block:: python

            class Record(BaseModel):
                name: Annotated[Name, PlainValidator(Compatible[str, Name].decode_field)]
        """
        return cls.decode(data).into_current()

    def encode(self) -> bytes:
        """Return the JSON encoding of the held case."""
        return type_adapter(type(self)).dump_json(self)

    # ------------------------------------------------------------------
    # pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        cls._require_parametrized()
        return core_schema.no_info_after_validator_function(
            cls._normalized,
            handler.generate_schema(cls.alt_type()),
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize_compatible, info_arg=True
            ),
        )

    @classmethod
    def _normalized(cls, alt: Alt) -> Compatible:
        return cls(alt).make_current()


def _serialize_compatible(adapter: Compatible, info: core_schema.SerializationInfo) -> Any:
    return dump_held(adapter.alt.held_type, adapter.alt.value, info)
