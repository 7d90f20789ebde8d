"""Field-level adapter hook.

Wrapping a whole record in ``Compatible`` forces every consumer to unwrap
it.  ``CompatibleField`` puts the adapter on one field's decode path only:
the field keeps its current type, decodes from either shape, and encodes as
the current type.

.. code-block:: python

    class Record(BaseModel):
        name: Annotated[Name, CompatibleField(str)]

``Compatible[Old, Current].decode_field`` is the equivalent plain function
for use with ``PlainValidator``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from compatible_with.adapter.alt import Alt, alternative_schema
from compatible_with.adapter.compatible import Compatible


@dataclass(frozen=True)
class CompatibleField:
    """``Annotated`` metadata decoding a field from its old shape *old*.

    Parameters
    ----------
    old:
        The type the field was stored as before.  The current type is the
        annotated type itself.
    """

    old: Any

    def __get_pydantic_core_schema__(
        self, source: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        adapter = Compatible[self.old, source]

        def into_current(alt: Alt) -> Any:
            return adapter(alt).into_current()

        return core_schema.no_info_after_validator_function(
            into_current,
            alternative_schema(
                handler.generate_schema(self.old),
                handler(source),
                adapter.alt_type(),
            ),
        )
