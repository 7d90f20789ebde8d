"""Conversion contracts between two versions of a type.

Public surface
--------------
- CompatibleWith          — protocol: current type built from an old value
- CompatibleTo            — protocol: old value converting itself
- produce_current         — derive CompatibleWith for any pair
- into_current            — derive CompatibleTo for any pair
- ConversionRegistry      — plain conversions keyed by (old, current)
- default_registry        — process-wide registry used by the adapters
- register_conversion     — register a plain conversion function
- conversion              — decorator form of register_conversion
- MissingConversionError  — no conversion exists for a pair
"""
from __future__ import annotations

from compatible_with.conversion.registry import (
    ConversionRegistry,
    MissingConversionError,
    conversion,
    default_registry,
    register_conversion,
)
from compatible_with.conversion.contracts import (
    CompatibleTo,
    CompatibleWith,
    into_current,
    produce_current,
)

__all__ = [
    "CompatibleTo",
    "CompatibleWith",
    "ConversionRegistry",
    "MissingConversionError",
    "conversion",
    "default_registry",
    "into_current",
    "produce_current",
    "register_conversion",
]
