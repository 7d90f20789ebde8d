"""Class parametrization shared by the adapter types.

``Alt[Old, Current]`` and ``Compatible[Old, Current]`` must be real classes
(pydantic asks them for a core schema, and ``decode`` is a classmethod), so
subscription creates a cached concrete subclass carrying the two types.

Classes
-------
- VersionPair  — mixin adding ``Cls[Old, Current]`` subscription

Functions
---------
- type_adapter — cached ``TypeAdapter`` per type
"""
from __future__ import annotations

from typing import Any, ClassVar

from pydantic import TypeAdapter

from compatible_with.conversion.registry import type_name

_SPECIALIZATIONS: dict[tuple[type, Any, Any], type] = {}
_ADAPTERS: dict[Any, TypeAdapter[Any]] = {}


def type_adapter(tp: Any) -> TypeAdapter[Any]:
    """Return a cached ``TypeAdapter`` for *tp*.

    Unhashable typing constructs (``Annotated`` with unhashable metadata)
    get a fresh adapter on every call.
    """
    try:
        return _ADAPTERS[tp]
    except KeyError:
        adapter = _ADAPTERS[tp] = TypeAdapter(tp)
        return adapter
    except TypeError:
        return TypeAdapter(tp)


class VersionPair:
    """Mixin for classes parametrized by an ``(Old, Current)`` pair."""

    old_type: ClassVar[Any] = None
    current_type: ClassVar[Any] = None
    _parametrized: ClassVar[bool] = False

    def __class_getitem__(cls, params: Any) -> type:
        if cls.is_parametrized():
            raise TypeError(f"{cls.__qualname__} is already parametrized")
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError(
                f"{cls.__name__}[...] takes exactly two parameters (Old, Current), "
                f"got {params!r}"
            )
        old, current = params
        key = (cls, old, current)
        try:
            return _SPECIALIZATIONS[key]
        except KeyError:
            pass
        name = f"{cls.__name__}[{type_name(old)}, {type_name(current)}]"
        specialized = type(
            name,
            (cls,),
            {
                "__module__": cls.__module__,
                "__qualname__": name,
                "old_type": old,
                "current_type": current,
                "_parametrized": True,
            },
        )
        _SPECIALIZATIONS[key] = specialized
        return specialized

    @classmethod
    def is_parametrized(cls) -> bool:
        """Return ``True`` once ``Old`` and ``Current`` have been bound."""
        return cls._parametrized

    @classmethod
    def _require_parametrized(cls) -> None:
        if not cls.is_parametrized():
            raise TypeError(
                f"{cls.__name__} must be parametrized as {cls.__name__}[Old, Current] "
                "before it can be decoded"
            )
