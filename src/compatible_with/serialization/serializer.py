"""Document serialization through a compatibility adapter.

Reads JSON or YAML documents stored in either the old or the current shape
and always writes the current shape.  No version marker is written or
expected: the shape alone decides how a document is read.

Classes
-------
- CompatibleSerializer  — read/write documents for one (Old, Current) pair

Functions
---------
- version_pair          — the (Old, Current) pair of an adapter target
"""
from __future__ import annotations

from typing import Any, Literal

import yaml

from compatible_with.adapter.alt import Alt
from compatible_with.adapter.compatible import Compatible
from compatible_with.adapter.params import VersionPair, type_adapter

Format = Literal["json", "yaml"]


def version_pair(target: Any) -> tuple[Any, Any]:
    """Return the ``(old, current)`` pair described by *target*.

    Parameters
    ----------
    target:
        A parametrized ``Compatible`` or ``Alt`` class, or a type decorated
        with ``@upgrades_from``.

    Raises
    ------
    TypeError
        If *target* describes no pair.
    """
    if isinstance(target, type) and issubclass(target, VersionPair):
        if target.is_parametrized():
            return target.old_type, target.current_type
    elif isinstance(target, type) and "__compatible_old__" in vars(target):
        return target.__compatible_old__, target
    raise TypeError(
        f"{target!r} is neither a parametrized adapter nor an @upgrades_from type"
    )


class CompatibleSerializer:
    """Serialize and deserialize values of one evolving type.

    Parameters
    ----------
    target:
        Anything accepted by :func:`version_pair`.

    Example
    -------
    .. code-block:: python

        serializer = CompatibleSerializer(Compatible[SettingsV1, Settings])
        settings = serializer.from_json(stored)   # either shape
        stored = serializer.to_json(settings)     # always the current shape
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        self.old_type, self.current_type = version_pair(target)
        self.adapter: type[Compatible] = Compatible[self.old_type, self.current_type]

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_json(self, value: Any, *, indent: int | None = 2) -> str:
        """Serialise *value* to JSON in the current shape.

        Parameters
        ----------
        value:
            A current value, or an adapter (which is normalized first).
        indent:
            JSON indentation level (default 2).
        """
        current = self._current(value)
        return type_adapter(self.current_type).dump_json(current, indent=indent).decode()

    def from_json(self, raw: str | bytes) -> Any:
        """Deserialize a JSON document stored in either shape.

        Raises
        ------
        StructuralMismatch
            If the document matches neither shape.
        """
        return self.adapter.decode_json(raw).into_current()

    # ------------------------------------------------------------------
    # YAML
    # ------------------------------------------------------------------

    def to_yaml(self, value: Any) -> str:
        """Serialise *value* to YAML in the current shape."""
        current = self._current(value)
        data = type_adapter(self.current_type).dump_python(current, mode="json")
        return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=True)

    def from_yaml(self, raw: str) -> Any:
        """Deserialize a YAML document stored in either shape.

        Raises
        ------
        StructuralMismatch
            If the document matches neither shape.
        """
        return self.adapter.decode(yaml.safe_load(raw)).into_current()

    # ------------------------------------------------------------------
    # Format dispatch
    # ------------------------------------------------------------------

    def serialize(self, value: Any, format: Format = "json") -> str:
        """Serialize using the named format."""
        if format == "yaml":
            return self.to_yaml(value)
        return self.to_json(value)

    def deserialize(self, raw: str, format: Format = "json") -> Any:
        """Deserialize using the named format."""
        if format == "yaml":
            return self.from_yaml(raw)
        return self.from_json(raw)

    def probe(self, raw: str, format: Format = "json") -> Alt:
        """Return which shape *raw* matches, without converting it.

        Useful to check whether current documents are being read as the old
        shape because the two shapes overlap.
        """
        alt = self.adapter.alt_type()
        if format == "yaml":
            return alt.decode(yaml.safe_load(raw))
        return alt.decode_json(raw)

    def _current(self, value: Any) -> Any:
        if isinstance(value, Compatible):
            return value.into_current()
        return value

