"""Tests for record schema construction."""

import gc
import weakref
from dataclasses import dataclass, field, make_dataclass
from typing import Annotated, Optional

import pytest

from envbind.domain.errors import (
    InvalidTargetError,
    MalformedOptionError,
    UnsupportedFieldTypeError,
)
from envbind.domain.schema import ENV_METADATA_KEY, SCHEMA_CACHE_SIZE, env, schema_of
from envbind.domain.types import FieldKind, Float32, Int16, UInt8, Width


@dataclass
class Leaves:
    count: int = env("name=COUNT")
    small: Int16 = env("name=SMALL,min=-10,max=10")
    byte: UInt8 = env("name=BYTE")
    ratio: float = env("name=RATIO")
    narrow: Float32 = env("name=NARROW")
    label: str = env("name=LABEL,default=x")
    enabled: bool = env("name=ENABLED,required")
    untagged: str = ""


@dataclass
class Inner:
    host: str = env("name=HOST", default="")


@dataclass
class Outer:
    level: str = env("name=LEVEL")
    inner: Inner = field(default_factory=Inner)


@dataclass
class WithList:
    name: str = env("name=NAME")
    tags: list[str] = field(default_factory=list)


@dataclass
class WithOptional:
    port: Optional[int] = None


@dataclass
class WithBadWidth:
    value: Annotated[int, Width(12)] = 0


@dataclass
class WithUnsignedFloat:
    value: Annotated[float, Width(64, signed=False)] = 0.0


@dataclass
class WithMalformed:
    ok: str = env("name=OK")
    bad: str = env("name=BAD,max=3")


@dataclass
class NestedMalformed:
    inner: WithMalformed = field(default_factory=lambda: WithMalformed("", ""))


@dataclass
class SelfReferencing:
    name: str = ""
    child: "SelfReferencing" = None  # type: ignore[assignment]


@dataclass(frozen=True)
class FrozenInner:
    host: str = ""


@dataclass
class WithFrozenInner:
    inner: FrozenInner = field(default_factory=FrozenInner)


@dataclass
class RequiresArgs:
    host: str = env("name=HOST")
    port: int = env("name=PORT")
    inner: Inner = env()
    computed: int = field(default=0, init=False)


class TestEnvHelper:
    def test_stores_options_in_metadata(self) -> None:
        fields = {f.name: f for f in Leaves.__dataclass_fields__.values()}
        assert fields["count"].metadata[ENV_METADATA_KEY] == "name=COUNT"

    def test_forwards_default_and_metadata(self) -> None:
        @dataclass
        class Local:
            port: int = env("name=PORT", default=5, metadata={"doc": "port"})

        f = Local.__dataclass_fields__["port"]
        assert f.default == 5
        assert f.metadata["doc"] == "port"
        assert f.metadata[ENV_METADATA_KEY] == "name=PORT"


class TestSchemaOf:
    def test_declaration_order_and_kinds(self) -> None:
        schema = schema_of(Leaves)
        assert schema.name == "Leaves"
        assert [f.name for f in schema.fields] == [
            "count",
            "small",
            "byte",
            "ratio",
            "narrow",
            "label",
            "enabled",
            "untagged",
        ]
        assert [f.kind for f in schema.fields] == [
            FieldKind.INT,
            FieldKind.INT,
            FieldKind.UINT,
            FieldKind.FLOAT,
            FieldKind.FLOAT,
            FieldKind.STR,
            FieldKind.BOOL,
            FieldKind.STR,
        ]
        assert [f.bits for f in schema.fields] == [64, 16, 8, 64, 32, None, None, None]

    def test_rules_are_parsed(self) -> None:
        fields = {f.name: f for f in schema_of(Leaves).fields}
        assert fields["small"].rule is not None
        assert fields["small"].rule.min == -10.0
        assert fields["enabled"].rule is not None
        assert fields["enabled"].rule.required is True
        assert fields["untagged"].annotation == ""
        assert fields["untagged"].rule is not None
        assert fields["untagged"].rule.name == ""

    def test_labels(self) -> None:
        labels = [f.label for f in schema_of(Leaves).fields]
        assert labels == ["int", "int16", "uint8", "float", "float32", "str", "bool", "str"]

    def test_cached_per_type(self) -> None:
        assert schema_of(Leaves) is schema_of(Leaves)

    def test_evicted_record_types_are_released(self) -> None:
        transient = make_dataclass("Transient", [("v", int, env("name=V"))])
        ref = weakref.ref(transient)
        assert schema_of(transient).name == "Transient"
        for i in range(SCHEMA_CACHE_SIZE):
            schema_of(make_dataclass(f"Filler{i}", [("v", int, env("name=V"))]))
        del transient
        gc.collect()
        assert ref() is None
        assert schema_of.cache_info().currsize <= SCHEMA_CACHE_SIZE

    def test_nested_record(self) -> None:
        schema = schema_of(Outer)
        inner = schema.fields[1]
        assert inner.kind is FieldKind.RECORD
        assert inner.rule is None
        assert inner.record is not None
        assert inner.record.name == "Inner"
        assert inner.label == "Inner"

    def test_leaves_are_flattened_with_paths(self) -> None:
        paths = [path for path, _ in schema_of(Outer).leaves()]
        assert paths == ["Outer.level", "Outer.inner.host"]


class TestZero:
    def test_zero_instance_uses_kind_zero_values(self) -> None:
        instance = schema_of(RequiresArgs).zero()
        assert instance.host == ""
        assert instance.port == 0
        assert instance.inner == Inner(host="")
        assert instance.computed == 0

    def test_zero_instance_is_fresh(self) -> None:
        schema = schema_of(Outer)
        assert schema.zero() is not schema.zero()
        assert schema.zero().inner is not schema.zero().inner


class TestSchemaErrors:
    def test_not_a_dataclass(self) -> None:
        with pytest.raises(InvalidTargetError):
            schema_of(int)

    @pytest.mark.parametrize(
        "record_type",
        [WithList, WithOptional, WithBadWidth, WithUnsignedFloat, WithFrozenInner],
    )
    def test_unsupported_field_types(self, record_type: type) -> None:
        with pytest.raises(UnsupportedFieldTypeError):
            schema_of(record_type)

    def test_unsupported_field_path(self) -> None:
        with pytest.raises(UnsupportedFieldTypeError, match="field tags") as excinfo:
            schema_of(WithList)
        assert excinfo.value.field == "WithList.tags"
        assert excinfo.value.code == "UNSUPPORTED_FIELD_TYPE"

    def test_self_referencing_record(self) -> None:
        with pytest.raises(UnsupportedFieldTypeError):
            schema_of(SelfReferencing)

    def test_malformed_option_carries_field_path(self) -> None:
        with pytest.raises(MalformedOptionError) as excinfo:
            schema_of(WithMalformed)
        assert excinfo.value.field == "WithMalformed.bad"

    def test_malformed_option_in_nested_record(self) -> None:
        with pytest.raises(MalformedOptionError) as excinfo:
            schema_of(NestedMalformed)
        assert excinfo.value.field == "NestedMalformed.inner.bad"
