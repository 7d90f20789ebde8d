"""Adapter subpackage.

Decodes a value stored in either an old or a current shape and hands the
rest of the program only the current one.

Public surface
--------------
- Alt                 — tagless two-way structural union (Old first)
- Variant             — enum: OLD, CURRENT
- StructuralMismatch  — input matches neither shape
- Compatible          — adapter normalizing to the current shape on decode
- CompatibleField     — ``Annotated`` hook adapting a single field
- upgrades_from       — class decorator adapting every decode of a type
"""
from __future__ import annotations

from compatible_with.adapter.alt import Alt, StructuralMismatch, Variant
from compatible_with.adapter.compatible import Compatible
from compatible_with.adapter.field import CompatibleField
from compatible_with.adapter.derive import upgrades_from

__all__ = [
    "Alt",
    "Compatible",
    "CompatibleField",
    "StructuralMismatch",
    "Variant",
    "upgrades_from",
]
