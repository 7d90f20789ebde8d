"""Serialization subpackage.

Public surface
--------------
- CompatibleSerializer  — JSON/YAML round-trip that reads either shape
- version_pair          — resolve the (Old, Current) pair of a target
"""
from __future__ import annotations

from compatible_with.serialization.serializer import CompatibleSerializer, version_pair

__all__ = ["CompatibleSerializer", "version_pair"]
