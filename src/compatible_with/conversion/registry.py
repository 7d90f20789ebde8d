"""Registration of plain one-directional conversions.

A plain conversion is an ordinary ``Old -> Current`` function with no
failure path.  It is the only thing a user normally writes: both contract
directions are derived from it (see :mod:`compatible_with.conversion.contracts`).

Classes
-------
ConversionRegistry
    Conversions keyed by ``(old, current)`` type pairs.
MissingConversionError
    Raised when no conversion exists for a pair.

Functions
---------
register_conversion
    Register a function in :data:`default_registry`.
conversion
    Decorator form that reads the pair from the function's annotations.
type_name
    Short display name of a type, used in messages and logs.
"""
from __future__ import annotations

import logging
import typing
from typing import Any, Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[[Any], Any])


def type_name(tp: Any) -> str:
    """Return a short display name such as ``list[Dir]`` for a type."""
    origin = typing.get_origin(tp)
    if origin is not None:
        args = ", ".join(type_name(arg) for arg in typing.get_args(tp))
        return f"{type_name(origin)}[{args}]"
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


class MissingConversionError(TypeError):
    """Raised when no conversion from *old* to *current* can be found."""

    def __init__(self, old: Any, current: Any) -> None:
        self.old = old
        self.current = current
        super().__init__(
            f"No conversion from {type_name(old)} to {type_name(current)}. "
            "Register one with @conversion, or implement from_old() on the "
            "current type or into_current() on the old type."
        )


class ConversionRegistry:
    """Plain conversions keyed by ``(old, current)`` pairs.

    Example
    -------
    .. code-block:: python

        registry = ConversionRegistry()
        registry.register(int, str, str)
        registry.convert(1, str)  # "1"
    """

    def __init__(self) -> None:
        self._conversions: dict[tuple[Any, Any], Callable[[Any], Any]] = {}

    def register(self, old: Any, current: Any, convert: Callable[[Any], Any]) -> None:
        """Register *convert* as the conversion from *old* to *current*.

        A later registration for the same pair replaces the earlier one.
        """
        self._conversions[(old, current)] = convert
        logger.debug(
            "Registered conversion %s -> %s", type_name(old), type_name(current)
        )

    def get(self, old: Any, current: Any) -> Callable[[Any], Any] | None:
        """Return the conversion registered for exactly ``(old, current)``."""
        try:
            return self._conversions.get((old, current))
        except TypeError:
            return None

    def lookup(
        self, value: Any, current: Any, old: Any = None
    ) -> Callable[[Any], Any] | None:
        """Return the conversion to *current* applicable to *value*.

        The declared *old* type is tried first, then each class in the MRO
        of ``type(value)``.

        Returns
        -------
        Callable or None
            The registered function, or ``None`` when nothing matches.
        """
        for candidate in self._candidates(value, old):
            fn = self.get(candidate, current)
            if fn is not None:
                return fn
        return None

    def convert(self, value: Any, current: Any, old: Any = None) -> Any:
        """Apply the registered conversion to *value*.

        Raises
        ------
        MissingConversionError
            If no conversion is registered for the pair.
        """
        fn = self.lookup(value, current, old)
        if fn is None:
            raise MissingConversionError(old if old is not None else type(value), current)
        return fn(value)

    def __contains__(self, pair: object) -> bool:
        try:
            return pair in self._conversions
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._conversions)

    @staticmethod
    def _candidates(value: Any, old: Any) -> Iterator[Any]:
        if old is not None:
            yield old
        yield from type(value).__mro__


default_registry = ConversionRegistry()


def register_conversion(old: Any, current: Any, convert: Callable[[Any], Any]) -> None:
    """Register *convert* in :data:`default_registry`."""
    default_registry.register(old, current, convert)


def conversion(fn: F) -> F:
    """Register *fn* as a plain conversion in :data:`default_registry`.

    The pair is read from the annotations of the function's single
    parameter (``Old``) and its return value (``Current``):

    .. code-block:: python

        @conversion
        def upgrade_dirs(old: list[Dir]) -> DirNode:
            ...

    Raises
    ------
    TypeError
        If either annotation is missing.
    """
    hints = typing.get_type_hints(fn)
    current = hints.pop("return", None)
    if current is None or len(hints) != 1:
        raise TypeError(
            f"@conversion needs exactly one annotated parameter and a return "
            f"annotation on {fn.__qualname__}"
        )
    (old,) = hints.values()
    register_conversion(old, current, fn)
    return fn
