"""The two conversion contracts and their universal derivations.

``CompatibleWith`` is implemented by a current type that knows how to build
itself from an old value; ``CompatibleTo`` is implemented by an old type
that knows how to turn itself into the current one.  A user implements at
most one of them, or neither when a plain conversion is registered: the
free functions below derive whichever direction is asked for, so each
version pair has exactly one conversion definition.

Resolution order of :func:`produce_current`:

1. ``current_type.from_old(value)`` when the current type implements it;
2. a plain conversion registered for the pair;
3. ``value.into_current()`` when the old value implements it.

An adapter passed as the old value is first unwrapped to its own current
type and resolution continues from there, which is what lets ``Compatible``
nest as the old half of another ``Compatible``.
"""
from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from compatible_with.conversion.registry import (
    ConversionRegistry,
    MissingConversionError,
    default_registry,
)

CurrentT = TypeVar("CurrentT")
CurrentT_co = TypeVar("CurrentT_co", covariant=True)


@runtime_checkable
class CompatibleWith(Protocol):
    """A current type that can be produced from an old value."""

    @classmethod
    def from_old(cls, value: Any) -> Any: ...


@runtime_checkable
class CompatibleTo(Protocol[CurrentT_co]):
    """An old value that converts itself into the current type."""

    def into_current(self) -> CurrentT_co: ...


def produce_current(
    current_type: type[CurrentT] | Any,
    value: Any,
    old_type: Any = None,
    *,
    registry: ConversionRegistry | None = None,
) -> CurrentT:
    """Produce a *current_type* value from the old *value*.

    Parameters
    ----------
    current_type:
        The type to produce.
    value:
        The old value.
    old_type:
        The declared old type, used for registry lookups when the runtime
        type of *value* is not specific enough (``list[Dir]`` decodes to a
        plain ``list``).
    registry:
        Registry of plain conversions.  Defaults to ``default_registry``.

    Returns
    -------
    CurrentT
        The converted value.

    Raises
    ------
    MissingConversionError
        If none of the three sources applies.
    """
    if _is_adapter(value):
        old_type = value.current_type
        value = value.into_current()
        if old_type == current_type:
            return value

    from_old = getattr(current_type, "from_old", None)
    if callable(from_old):
        return from_old(value)

    registry = registry if registry is not None else default_registry
    fn = registry.lookup(value, current_type, old_type)
    if fn is not None:
        return fn(value)

    if isinstance(value, CompatibleTo):
        return value.into_current()

    raise MissingConversionError(old_type if old_type is not None else type(value), current_type)


def into_current(
    value: Any,
    current_type: type[CurrentT] | Any,
    old_type: Any = None,
    *,
    registry: ConversionRegistry | None = None,
) -> CurrentT:
    """Convert the old *value* into *current_type*.

    Uses ``value.into_current()`` when the old type implements it, otherwise
    falls back to :func:`produce_current`.
    """
    if isinstance(value, CompatibleTo) and not _is_adapter(value):
        return value.into_current()
    return produce_current(current_type, value, old_type, registry=registry)


def _is_adapter(value: Any) -> bool:
    # Adapters declare the type they convert into, which may be an
    # intermediate version of a longer chain.
    return getattr(value, "current_type", None) is not None and isinstance(value, CompatibleTo)
