"""compatible-with — read old data shapes without version tags.

Wrap a field or record in ``Compatible[Old, Current]``, provide one plain
``Old -> Current`` conversion, and stored data in either shape decodes to
``Current``.  Writes always emit the current shape, so data self-heals on
the next write.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import compatible_with
>>> compatible_with.__version__
'0.1.0'
"""
from __future__ import annotations

# Adapters
from compatible_with.adapter.alt import Alt, StructuralMismatch, Variant
from compatible_with.adapter.compatible import Compatible
from compatible_with.adapter.field import CompatibleField
from compatible_with.adapter.derive import upgrades_from

# Conversion contracts
from compatible_with.conversion import (
    CompatibleTo,
    CompatibleWith,
    ConversionRegistry,
    MissingConversionError,
    conversion,
    default_registry,
    into_current,
    produce_current,
    register_conversion,
)

# Serialization
from compatible_with.serialization.serializer import CompatibleSerializer, version_pair

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Adapters
    "Alt",
    "Compatible",
    "CompatibleField",
    "StructuralMismatch",
    "Variant",
    "upgrades_from",
    # Conversion
    "CompatibleTo",
    "CompatibleWith",
    "ConversionRegistry",
    "MissingConversionError",
    "conversion",
    "default_registry",
    "into_current",
    "produce_current",
    "register_conversion",
    # Serialization
    "CompatibleSerializer",
    "version_pair",
]
