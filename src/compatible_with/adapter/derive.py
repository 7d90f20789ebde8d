"""Type-level auto-conversion.

``@upgrades_from(Old)`` on a current type ``T`` does two things:

- registers the conversion ``Compatible[Old, T] -> T`` (calling
  ``into_current``), so an adapter converts into ``T`` like any other old
  value;
- routes every decode of ``T`` through that adapter: other schemas that
  mention ``T`` (a model field, ``list[T]``, ...), ``TypeAdapter(T)`` and,
  for pydantic models and dataclasses, ``T.model_validate*``.  Call sites
  that decode ``T`` without ever naming the adapter accept the old shape.

Serialization of ``T`` is unchanged: writes always emit the current shape.
Constructors and assignment validation keep accepting only the current
shape, since conversions are usually written in terms of the constructor.
Subclasses of ``T`` do not inherit the old shape; decorate them separately.

.. code-block:: python

    @upgrades_from(int)
    class Label(RootModel[str]):
        pass

    @conversion
    def label_from_int(old: int) -> Label:
        return Label(str(old))

    Label.model_validate_json("1")  # Label("1")
"""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from pydantic import BaseModel, GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from compatible_with.adapter.alt import Alt, alternative_schema
from compatible_with.adapter.compatible import Compatible
from compatible_with.adapter.params import type_adapter
from compatible_with.conversion import register_conversion

T = TypeVar("T", bound=type)


class UpgradingValidator:
    """Stands in for a pydantic type's own ``__pydantic_validator__``.

    Decodes go through the type's adapter.  Calls that fill an existing
    instance (``self_instance``, used by ``__init__``) and every other
    validator attribute go to the type's own validator.

    Parameters
    ----------
    current:
        The type's original validator.
    adapter:
        ``Compatible[Old, T]`` for the decorated type ``T``.
    """

    __slots__ = ("_current", "_adapter")

    def __init__(self, current: Any, adapter: type[Compatible]) -> None:
        self._current = current
        self._adapter = adapter

    def validate_python(self, input: Any, *, self_instance: Any = None, **kwargs: Any) -> Any:
        if self_instance is not None:
            return self._current.validate_python(input, self_instance=self_instance, **kwargs)
        return self._upgrading().validate_python(input, **kwargs).into_current()

    def validate_json(self, input: Any, *, self_instance: Any = None, **kwargs: Any) -> Any:
        if self_instance is not None:
            return self._current.validate_json(input, self_instance=self_instance, **kwargs)
        return self._upgrading().validate_json(input, **kwargs).into_current()

    def validate_strings(self, input: Any, **kwargs: Any) -> Any:
        return self._upgrading().validate_strings(input, **kwargs).into_current()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._current, name)

    def _upgrading(self) -> Any:
        # Built on first use: conversions and forward references are
        # usually declared after the decorator runs.
        return type_adapter(self._adapter).validator


def upgrades_from(old: Any) -> Callable[[T], T]:
    """Declare that the decorated type can be decoded from the *old* shape.

    Parameters
    ----------
    old:
        The previous version's type.  A conversion from *old* to the
        decorated type must be available (see :mod:`compatible_with.conversion`)
        by the time data is decoded.

    Returns
    -------
    Callable
        The class decorator.

    Raises
    ------
    TypeError
        If the decorated pydantic type is not fully defined yet.
    """

    def decorate(cls: T) -> T:
        if not getattr(cls, "__pydantic_complete__", True):
            raise TypeError(
                f"{cls.__qualname__} is not fully defined; call model_rebuild() "
                "before decorating it with @upgrades_from"
            )
        adapter = Compatible[old, cls]
        register_conversion(adapter, cls, adapter.into_current)

        # Custom types supply their own schema; models and dataclasses get
        # pydantic's default one.
        own_schema = None
        if not issubclass(cls, BaseModel):
            own_schema = getattr(cls, "__get_pydantic_core_schema__", None)

        def into_current(alt: Alt) -> Any:
            return adapter(alt).into_current()

        def __get_pydantic_core_schema__(
            klass: type, source: Any, handler: GetCoreSchemaHandler
        ) -> CoreSchema:
            if own_schema is not None:
                current_schema = own_schema(source, handler)
            else:
                current_schema = handler(source)
            # Inherited by subclasses, which keep their own schema.
            if source is not cls:
                return current_schema
            # Models and dataclasses are stored as definitions under their
            # type's ref.  The wrapper takes over that ref so every later
            # reference to the type decodes through the adapter too.
            ref = current_schema.get("ref")
            if ref is not None:
                current_schema = {**current_schema, "ref": f"{ref}:current"}  # type: ignore[misc]
            return core_schema.no_info_after_validator_function(
                into_current,
                alternative_schema(
                    handler.generate_schema(old),
                    current_schema,
                    adapter.alt_type(),
                ),
                ref=ref,
            )

        cls.__get_pydantic_core_schema__ = classmethod(__get_pydantic_core_schema__)  # type: ignore[attr-defined]
        # Models and pydantic dataclasses carry a compiled validator that
        # TypeAdapter and model_validate* use without asking for a schema.
        if "__pydantic_validator__" in vars(cls):
            cls.__pydantic_validator__ = UpgradingValidator(cls.__pydantic_validator__, adapter)  # type: ignore[attr-defined]
        cls.__compatible_old__ = old  # type: ignore[attr-defined]
        return cls

    return decorate
