"""Unit tests for compatible_with.adapter.derive.

``@upgrades_from(Old)`` makes every schema that mentions the decorated type
accept the old shape, while the type's own serialization is unchanged.
"""
from __future__ import annotations

import dataclasses

import pytest
from pydantic import BaseModel, ConfigDict, RootModel, TypeAdapter, ValidationError

from compatible_with.adapter.compatible import Compatible
from compatible_with.adapter.derive import upgrades_from
from compatible_with.conversion import conversion, default_registry, produce_current


@upgrades_from(int)
class Label(RootModel[str]):
    pass


@conversion
def label_from_int(old: int) -> Label:
    return Label(str(old))


class Tagged(BaseModel):
    label: Label
    backup: Label | None = None


class SizeV1(BaseModel):
    model_config = ConfigDict(strict=True)

    octets: int


@upgrades_from(SizeV1)
class Size(BaseModel):
    value: int
    unit: str


@conversion
def size_from_v1(old: SizeV1) -> Size:
    return Size(value=old.octets, unit="B")


class Disk(BaseModel):
    size: Size
    partitions: list[Size] = []


@upgrades_from(str)
@dataclasses.dataclass
class Version:
    major: int
    minor: int


@conversion
def version_from_str(old: str) -> Version:
    major, _, minor = old.partition(".")
    return Version(int(major), int(minor or 0))


class Package(BaseModel):
    version: Version


class BigSize(Size):
    label: str = "big"


class BigDisk(BaseModel):
    size: BigSize


# ---------------------------------------------------------------------------
# Decoding through containing schemas
# ---------------------------------------------------------------------------


class TestUpgradesFromRootModel:
    def test_old_field_decodes_without_naming_adapter(self) -> None:
        assert Tagged.model_validate_json('{"label": 1}').label == Label("1")

    def test_current_field_passes_through(self) -> None:
        assert Tagged.model_validate({"label": "one"}).label == Label("one")

    def test_second_field_of_same_type_upgrades(self) -> None:
        tagged = Tagged.model_validate({"label": 1, "backup": 2})
        assert tagged.backup == Label("2")

    def test_list_of_type_upgrades(self) -> None:
        labels = TypeAdapter(list[Label]).validate_python([1, "two"])
        assert labels == [Label("1"), Label("two")]

    def test_serializes_current_shape(self) -> None:
        tagged = Tagged.model_validate({"label": 1})
        assert tagged.model_dump_json() == '{"label":"1","backup":null}'

    def test_own_constructor_stays_current_only(self) -> None:
        assert Label("7").root == "7"

    def test_list_mixing_shapes_upgrades(self) -> None:
        assert TypeAdapter(list[Label]).validate_json('[3, "x"]') == [Label("3"), Label("x")]


class TestUpgradesFromModel:
    def test_old_field_upgrades(self) -> None:
        disk = Disk.model_validate({"size": {"octets": 512}})
        assert disk.size == Size(value=512, unit="B")

    def test_old_items_in_list_upgrade(self) -> None:
        disk = Disk.model_validate(
            {
                "size": {"value": 2, "unit": "GB"},
                "partitions": [{"octets": 10}, {"value": 1, "unit": "GB"}],
            }
        )
        assert disk.partitions == [Size(value=10, unit="B"), Size(value=1, unit="GB")]

    def test_current_shape_serialized(self) -> None:
        disk = Disk.model_validate({"size": {"octets": 1}})
        assert disk.model_dump() == {"size": {"value": 1, "unit": "B"}, "partitions": []}

    def test_neither_shape_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Disk.model_validate({"size": {"kilobytes": 1}})

    def test_constructor_stays_current_only(self) -> None:
        with pytest.raises(ValidationError):
            Size(octets=1)  # type: ignore[call-arg]


class TestUpgradesFromDataclass:
    def test_old_string_upgrades(self) -> None:
        assert Package.model_validate({"version": "2.5"}).version == Version(2, 5)

    def test_current_shape_passes_through(self) -> None:
        package = Package.model_validate({"version": {"major": 1, "minor": 0}})
        assert package.version == Version(1, 0)

    def test_serializes_current_shape(self) -> None:
        package = Package.model_validate({"version": "3"})
        assert package.model_dump() == {"version": {"major": 3, "minor": 0}}


# ---------------------------------------------------------------------------
# Decoding the type directly
# ---------------------------------------------------------------------------


class TestDirectDecode:
    def test_model_validate_json_upgrades_root_model(self) -> None:
        assert Label.model_validate_json("1") == Label("1")

    def test_type_adapter_upgrades_root_model(self) -> None:
        assert TypeAdapter(Label).validate_json("1") == Label("1")
        assert TypeAdapter(Label).validate_python(2) == Label("2")

    def test_model_validate_upgrades_model(self) -> None:
        assert Size.model_validate({"octets": 3}) == Size(value=3, unit="B")

    def test_type_adapter_upgrades_model(self) -> None:
        assert TypeAdapter(Size).validate_python({"octets": 1}) == Size(value=1, unit="B")

    def test_model_validate_strings_upgrades(self) -> None:
        assert Label.model_validate_strings("5") == Label("5")

    def test_current_shape_passes_through(self) -> None:
        size = Size.model_validate_json('{"value": 2, "unit": "GB"}')
        assert size == Size(value=2, unit="GB")

    def test_neither_shape_raises(self) -> None:
        with pytest.raises(ValidationError):
            Size.model_validate({"kilobytes": 1})

    def test_serialization_unchanged(self) -> None:
        assert TypeAdapter(Size).dump_python(Size(value=1, unit="B")) == {"value": 1, "unit": "B"}


# ---------------------------------------------------------------------------
# Subclasses
# ---------------------------------------------------------------------------


class TestSubclassesOfDecoratedType:
    def test_subclass_field_rejects_parent_old_shape(self) -> None:
        with pytest.raises(ValidationError):
            BigDisk.model_validate({"size": {"octets": 5}})

    def test_subclass_field_keeps_subclass_type(self) -> None:
        disk = BigDisk.model_validate({"size": {"value": 5, "unit": "B"}})
        assert isinstance(disk.size, BigSize)
        assert disk.size.label == "big"

    def test_subclass_model_validate_is_current_only(self) -> None:
        with pytest.raises(ValidationError):
            BigSize.model_validate({"octets": 5})

    def test_subclass_is_not_a_serializer_target(self) -> None:
        from compatible_with.serialization import version_pair

        assert version_pair(Size) == (SizeV1, Size)
        with pytest.raises(TypeError):
            version_pair(BigSize)

    def test_incomplete_model_is_rejected(self) -> None:
        class Pending(BaseModel):
            child: NotDefinedYet  # type: ignore[name-defined]  # noqa: F821

        with pytest.raises(TypeError, match="model_rebuild"):
            upgrades_from(int)(Pending)


# ---------------------------------------------------------------------------
# Generated conversion
# ---------------------------------------------------------------------------


class TestGeneratedConversion:
    def test_records_old_type(self) -> None:
        assert Label.__compatible_old__ is int
        assert Size.__compatible_old__ is SizeV1

    def test_registers_adapter_conversion(self) -> None:
        assert (Compatible[int, Label], Label) in default_registry

    def test_adapter_converts_into_type(self) -> None:
        adapter = Compatible[int, Label].decode(4)
        assert produce_current(Label, adapter, Compatible[int, Label]) == Label("4")

    def test_adapter_decode_matches_field_decode(self) -> None:
        via_adapter = Compatible[SizeV1, Size].decode({"octets": 9}).into_current()
        via_field = Disk.model_validate({"size": {"octets": 9}}).size
        assert via_adapter == via_field
