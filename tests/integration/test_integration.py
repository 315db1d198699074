"""Integration tests for end-to-end binding."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

import pytest

from typebind import (
    CoercionError,
    Ref,
    Setter,
    ShapeMismatchError,
    Unmarshaler,
    Unsigned,
    bind,
    build_default_binder,
    field_name_with_tags,
)
from typebind.shapes import Kind, kind_of, pointee

UTC = timezone.utc


# ─────────────────────────────────────────────────────────────────────────────
# Record types
# ─────────────────────────────────────────────────────────────────────────────


class IntT(int):
    pass


class UintT(Unsigned):
    pass


class FloatT(float):
    pass


class StringT(str):
    pass


@dataclass
class Embed:
    int1: int = 0
    int2: IntT = IntT(0)
    uint1: Unsigned = Unsigned(0)
    uint2: UintT = UintT(0)
    string1: str = ""
    string2: StringT = StringT("")
    float1: float = 0.0
    float2: FloatT = FloatT(0.0)


@dataclass
class SquashPart:
    field1: int = 0
    field2: int = 0


@dataclass
class Everything:
    bool_: bool = field(default=False, metadata={"key": "bool"})
    int_: int = field(default=0, metadata={"key": "int"})
    uint: Unsigned = Unsigned(0)
    float_: float = field(default=0.0, metadata={"json": "float"})
    string: str = ""
    duration1: timedelta = timedelta(0)
    duration2: timedelta = timedelta(0)
    duration3: timedelta = timedelta(0)
    time1: Optional[datetime] = None
    time2: Optional[datetime] = None
    embed: Embed = field(default_factory=Embed)
    ignore: str = field(default="", metadata={"key": "-"})
    squash: SquashPart = field(default_factory=SquashPart, metadata={"key": ",squash"})


class Ints(List[int]):
    pass


@dataclass
class Entry:
    ints: Ints = field(default_factory=Ints)
    query: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class Containers:
    maps: Dict[str, Any] = field(default_factory=dict)
    slices: List[str] = field(default_factory=list)
    structs: List[Entry] = field(default_factory=list)


class Int:
    """Counter that sets itself from an int or a decimal string."""

    def __init__(self, value=0):
        self.value = value

    def set(self, value):
        if isinstance(value, int) and not isinstance(value, bool):
            self.value = value
        elif isinstance(value, str):
            self.value = int(value, 10)
        else:
            raise TypeError(f"unsupported to convert {type(value).__name__} to Int")

    def __str__(self):
        return str(self.value)


@dataclass
class Person:
    name: str = ""
    age: Int = field(default_factory=Int)

    def unmarshal_bind(self, value):
        if isinstance(value, str):
            name, age = value.split(";")
            self.name = name
            self.age = Int(int(age, 10))
        elif isinstance(value, Mapping):
            self.name = value.get("name", "")
            self.age.set(value.get("age"))
        else:
            raise TypeError(f"unsupported to convert {type(value).__name__} to a Person")

    def set(self, value):
        raise AssertionError("unmarshal_bind takes precedence")

    def __str__(self):
        return f"Name={self.name}, Age={self.age}"


@dataclass
class Interfaces:
    interface1: Setter = None
    interface2: Unmarshaler = None
    interface3: Exception = None
    interface4: Optional[Exception] = None
    interface5: Any = None
    interface6: Person = field(default_factory=Person)


@dataclass
class FileHeader:
    filename: str = ""


@dataclass
class Upload:
    file: Optional[FileHeader] = None
    files: List[FileHeader] = field(default_factory=list)


@dataclass
class User:
    name: str
    age: int
    email: str


@dataclass
class LineItem:
    id: int
    price: float


@dataclass
class Config:
    enabled: bool
    timeout: timedelta


@dataclass
class Document:
    user: User
    items: List[LineItem]
    config: Config


# ─────────────────────────────────────────────────────────────────────────────
# Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestBasicScalars:
    """Top-level scalar destinations through the process default."""

    @pytest.mark.parametrize("shape, src, expected", [
        (bool, "true", True),
        (int, timedelta(seconds=1), 1000),
        (int, 11.0, 11),
        (int, "12", 12),
        (int, True, 1),
        (int, datetime.fromtimestamp(1672531200, UTC), 1672531200),
        (Unsigned, 20, 20),
        (Unsigned, 21.0, 21),
        (Unsigned, "22", 22),
        (float, "1.2", 1.2),
        (float, 30, 30.0),
        (str, 40, "40"),
        (IntT, 50.0, 50),
        (UintT, IntT(60), 60),
        (FloatT, StringT("70"), 70.0),
        (StringT, "test", "test"),
    ])
    def test_scalar(self, shape, src, expected):
        ref = Ref(shape)
        bind(ref, src)
        assert ref.value == expected


class TestStructScenario:
    """Every scalar kind, nested records, ignore and squash at once."""

    def test_struct(self):
        binder = build_default_binder(field_name=field_name_with_tags("key", "json"))
        dest = Everything()

        binder.bind(dest, {
            "bool": True,
            "int": 10,
            "uint": 20,
            "float": 31,
            "string": "abc",
            "duration1": "1s",
            "duration2": 2000,
            "duration3": 3.0,
            "time1": 1672531200,
            "time2": "2023-02-01T00:00:00Z",
            "embed": {
                "int1": "41",
                "int2": "42",
                "uint1": "43",
                "uint2": "44",
                "float1": "45",
                "float2": "46",
                "string1": 47,
                "string2": 48,
            },
            "ignore": "xyz",
            "field1": 51,
            "field2": 52,
        })

        assert dest.bool_ is True
        assert dest.int_ == 10
        assert dest.uint == 20
        assert dest.float_ == 31.0
        assert dest.string == "abc"
        assert dest.duration1 == timedelta(seconds=1)
        assert dest.duration2 == timedelta(seconds=2)
        assert dest.duration3 == timedelta(seconds=3)
        assert dest.time1 == datetime(2023, 1, 1, tzinfo=UTC)
        assert dest.time2 == datetime(2023, 2, 1, tzinfo=UTC)
        assert dest.embed == Embed(
            int1=41, int2=IntT(42), uint1=Unsigned(43), uint2=UintT(44),
            string1="47", string2=StringT("48"), float1=45.0, float2=FloatT(46.0),
        )
        assert type(dest.embed.int2) is IntT
        assert type(dest.embed.string2) is StringT
        assert dest.squash == SquashPart(field1=51, field2=52)
        assert dest.ignore == ""


class TestContainerScenario:
    """Maps, lists, list subclasses and lists of records."""

    def test_containers(self, binder):
        dest = Containers()
        binder.bind(dest, {
            "maps": {"k11": "v11", "k12": "v12"},
            "slices": ["a", "b", "c"],
            "structs": [
                {
                    "ints": ["21", "22"],
                    "query": {"k20": ["v21", "v22"], "k30": ["v31", "v32"]},
                },
                {
                    "ints": [31, 32],
                    "query": {"k40": ["v40"]},
                },
            ],
        })

        assert dest.maps == {"k11": "v11", "k12": "v12"}
        assert dest.slices == ["a", "b", "c"]
        assert dest.structs == [
            Entry(ints=Ints([21, 22]), query={"k20": ["v21", "v22"], "k30": ["v31", "v32"]}),
            Entry(ints=Ints([31, 32]), query={"k40": ["v40"]}),
        ]
        assert all(type(s.ints) is Ints for s in dest.structs)


class TestInterfaceScenario:
    """Escape hatches reached through declared shapes and open slots."""

    def test_interfaces(self, binder):
        iface1, iface2 = Int(), Person()
        dest = Interfaces(interface1=iface1, interface2=iface2)
        err3, err4 = ValueError("test1"), ValueError("test2")

        binder.bind(dest, {
            "interface1": "123",
            "interface2": {"name": "Aaron", "age": 18},
            "interface3": err3,
            "interface4": err4,
            "interface5": "any",
            "interface6": "Xgfone;20",
        })

        assert dest.interface1 is iface1
        assert str(dest.interface1) == "123"
        assert dest.interface2 is iface2
        assert str(dest.interface2) == "Name=Aaron, Age=18"
        assert str(dest.interface3) == "test1"
        assert dest.interface4 is err4
        assert dest.interface5 == "any"
        assert str(dest.interface6) == "Name=Xgfone, Age=20"

    def test_unmarshal_bind_error_propagates(self, binder):
        with pytest.raises(TypeError, match="to a Person"):
            binder.bind(Interfaces(), {"interface6": 1.5})


class TestHookScenario:
    """A hook turns a list of uploads into the single upload a member wants."""

    @staticmethod
    def first_upload(slot, value):
        if kind_of(slot.shape) is not Kind.POINTER or pointee(slot.shape) is not FileHeader:
            return value
        if not isinstance(value, list):
            return value
        if not value:
            return None
        return value[0]

    def test_without_hook_fails(self, binder):
        strict = binder.with_options(slice_to_single=False)
        with pytest.raises(ShapeMismatchError):
            strict.bind(Upload(), {"file": [FileHeader("file")]})

    def test_hook(self, binder):
        hooked = binder.with_options(hook=self.first_upload, slice_to_single=False)
        dest = Upload()
        hooked.bind(dest, {
            "file": [FileHeader("file")],
            "files": [FileHeader("file1"), FileHeader("file2")],
        })

        assert dest.file.filename == "file"
        assert [f.filename for f in dest.files] == ["file1", "file2"]

    def test_hook_empty_upload_is_skipped(self, binder):
        hooked = binder.with_options(hook=self.first_upload, slice_to_single=False)
        dest = Upload()
        hooked.bind(dest, {"file": []})
        assert dest.file is None


class TestDocumentScenario:
    """A decoded JSON document bound into a nested record tree."""

    def test_document(self, binder, sample_data):
        ref = Ref(Document)
        binder.bind(ref, sample_data)

        doc = ref.value
        assert doc.user == User(name="Alice", age=30, email="alice@example.com")
        assert doc.items == [LineItem(id=1, price=10.0), LineItem(id=2, price=20.5)]
        assert doc.config == Config(enabled=True, timeout=timedelta(seconds=5))

    def test_failure_reports_path(self, binder, sample_data):
        sample_data["items"][1]["price"] = "n/a"

        with pytest.raises(CoercionError) as exc_info:
            binder.bind(Ref(Document), sample_data)

        assert exc_info.value.path == "items[1].price"

    def test_fail_fast_keeps_earlier_writes(self, binder, sample_data):
        sample_data["config"]["timeout"] = "later"
        ref = Ref(Document)

        with pytest.raises(CoercionError):
            binder.bind(ref, sample_data)

        assert ref.value.user.name == "Alice"
        assert ref.value.config.enabled is True
