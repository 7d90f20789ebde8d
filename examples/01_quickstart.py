#!/usr/bin/env python3
"""Example: Quickstart — compatible-with

Minimal working example: a record whose field changed shape between two
releases.  Documents written by either release decode to the current shape,
and writing them back emits the current shape only.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install compatible-with
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

import compatible_with
from compatible_with import Compatible, CompatibleSerializer, conversion


class DirV1(BaseModel):
    model_config = ConfigDict(strict=True)

    id: int
    name: str
    path: str


class DirNode(BaseModel):
    id: int
    name: str
    path: str
    children: list[DirNode] = []


@conversion
def tree_from_list(dirs: list[DirV1]) -> DirNode:
    return DirNode(
        id=0,
        name="root",
        path="/",
        children=[DirNode(id=d.id, name=d.name, path=d.path) for d in dirs],
    )


class Workspace(BaseModel):
    dirs: Compatible[list[DirV1], DirNode]


def main() -> None:
    print(f"compatible-with version: {compatible_with.__version__}")

    # Step 1: A document written by the previous release
    stored = '{"dirs": [{"id": 1, "name": "a", "path": "/a"}, {"id": 2, "name": "b", "path": "/b"}]}'
    workspace = Workspace.model_validate_json(stored)
    tree = workspace.dirs.into_current()
    print(f"Root '{tree.name}' with {len(tree.children)} children")

    # Step 2: Writing it back emits the current shape
    print(f"Rewritten: {workspace.model_dump_json()}")

    # Step 3: Whole documents through a serializer
    serializer = CompatibleSerializer(Compatible[list[DirV1], DirNode])
    stored_dirs = '[{"id": 3, "name": "c", "path": "/c"}]'
    print(f"Stored shape: {serializer.probe(stored_dirs).variant.value}")
    print(serializer.to_yaml(serializer.from_json(stored_dirs)))


if __name__ == "__main__":
    main()
