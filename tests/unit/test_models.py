"""Unit tests for the structural model and extraction options."""

import json
from datetime import UTC, datetime, timedelta, timezone

from gouml.models import (
    DEFAULT_EXCLUDE_DIR_NAMES,
    ExtractOptions,
    Field,
    Function,
    Model,
    Module,
    Package,
    Param,
    Type,
    TypeKind,
    TypeParam,
)
from gouml.models.uml import format_timestamp


class TestEntitySerialization:
    """Tests for per-entity to_dict output."""

    def test_param_omits_empty_name(self) -> None:
        """Test that unnamed params serialize with only a type."""
        assert Param(type="int").to_dict() == {"type": "int"}
        assert Param(name="x", type="int").to_dict() == {"name": "x", "type": "int"}

    def test_type_param_omits_empty_constraint(self) -> None:
        """Test that type params without a constraint omit the key."""
        assert TypeParam(name="T").to_dict() == {"name": "T"}
        assert TypeParam(name="T", constraint="any").to_dict() == {"name": "T", "constraint": "any"}

    def test_field_optional_members(self) -> None:
        """Test field tag and flags appear only when set."""
        assert Field(name="x", type="int").to_dict() == {"name": "x", "type": "int"}

        tagged = Field(name="X", type="int", tag='json:"x"', exported=True)
        assert tagged.to_dict() == {"name": "X", "type": "int", "tag": 'json:"x"', "exported": True}

    def test_function_always_has_exported(self) -> None:
        """Test that exported is always emitted for functions."""
        assert Function(name="run").to_dict() == {"name": "run", "exported": False}

    def test_function_full(self) -> None:
        """Test function with every optional member."""
        func = Function(
            name="Map",
            exported=True,
            doc="Map applies f.",
            receiver="*List[T]",
            type_params=[TypeParam(name="U", constraint="any")],
            params=[Param(name="f", type="func(T) U"), Param(name="xs", type="...T")],
            results=[Param(type="[]U")],
            variadic=True,
        )

        data = func.to_dict()

        assert list(data) == [
            "name", "exported", "doc", "receiver", "type_params", "params", "results", "variadic",
        ]
        assert data["results"] == [{"type": "[]U"}]
        assert func.is_method is True

    def test_type_kind_values(self) -> None:
        """Test type kinds serialize to their wire names."""
        assert [k.value for k in TypeKind] == ["struct", "interface", "alias", "other"]

    def test_type_omits_empty_lists(self) -> None:
        """Test that a bare type only carries name, kind and exported."""
        type_ = Type(name="ID", kind=TypeKind.OTHER)

        assert type_.to_dict() == {"name": "ID", "kind": "other", "exported": False}

    def test_type_add_method(self) -> None:
        """Test attaching methods to a type."""
        type_ = Type(name="Box", kind=TypeKind.STRUCT, exported=True)
        type_.add_method(Function(name="Double", exported=True, receiver="*Box"))

        assert type_.to_dict()["methods"] == [
            {"name": "Double", "exported": True, "receiver": "*Box"},
        ]

    def test_package_key_order(self) -> None:
        """Test package keys appear in wire order and empties are omitted."""
        package = Package(name="sample", dir=".", import_path="example.com/m", files=["a.go"])

        assert list(package.to_dict()) == ["name", "import_path", "dir", "files"]
        assert Package(name="main", dir="cmd").to_dict() == {"name": "main", "dir": "cmd"}

    def test_package_get_type(self) -> None:
        """Test looking up a type by name."""
        package = Package(name="p", dir=".")
        package.add_type(Type(name="A", kind=TypeKind.STRUCT))

        assert package.get_type("A") is not None
        assert package.get_type("B") is None

    def test_package_sort_key(self) -> None:
        """Test package ordering key is (import path, dir, name)."""
        package = Package(name="p", dir="x", import_path="m/x")

        assert package.sort_key == ("m/x", "x", "p")


class TestModel:
    """Tests for the Model root."""

    def test_timestamp_format(self) -> None:
        """Test timestamps render as RFC 3339 UTC with Z suffix."""
        ts = datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC)

        assert format_timestamp(ts) == "2024-05-01T12:30:00Z"

    def test_timestamp_converted_to_utc(self) -> None:
        """Test non-UTC timestamps are converted."""
        ts = datetime(2024, 5, 1, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(ts) == "2024-05-01T12:30:00Z"

    def test_naive_timestamp_assumed_utc(self) -> None:
        """Test that naive timestamps are treated as UTC."""
        model = Model(root="/src", generated_at=datetime(2024, 1, 1))

        assert model.generated_at.tzinfo is UTC

    def test_empty_model_has_packages_array(self) -> None:
        """Test that packages is always present."""
        model = Model(root="/src", generated_at=datetime(2024, 1, 1, tzinfo=UTC))

        assert model.to_dict() == {
            "generated_at": "2024-01-01T00:00:00Z",
            "root": "/src",
            "packages": [],
        }

    def test_module_included_when_present(self) -> None:
        """Test module is serialized between root and packages."""
        model = Model(root="/src", module=Module(path="example.com/m", dir="/src"))

        data = model.to_dict()

        assert list(data) == ["generated_at", "root", "module", "packages"]
        assert data["module"] == {"path": "example.com/m", "dir": "/src"}

    def test_counts(self) -> None:
        """Test package, type and function counters."""
        package = Package(name="p", dir=".")
        package.add_type(Type(name="A", kind=TypeKind.STRUCT))
        package.add_function(Function(name="f"))
        model = Model(root="/src", packages=[package, Package(name="q", dir="q")])

        assert model.package_count == 2
        assert model.type_count == 1
        assert model.function_count == 1

    def test_to_json_indented(self) -> None:
        """Test indented output uses the given unit."""
        model = Model(root="/src", generated_at=datetime(2024, 1, 1, tzinfo=UTC))

        text = model.to_json("    ")

        assert '\n    "root": "/src"' in text
        assert not text.endswith("\n")

    def test_to_json_compact(self) -> None:
        """Test that an empty indent produces compact output."""
        model = Model(root="/src", generated_at=datetime(2024, 1, 1, tzinfo=UTC))

        text = model.to_json("")

        assert text == '{"generated_at":"2024-01-01T00:00:00Z","root":"/src","packages":[]}'

    def test_to_json_keeps_unicode(self) -> None:
        """Test that non-ASCII doc text is not escaped."""
        package = Package(name="p", dir=".")
        package.add_function(Function(name="Grüß", exported=True, doc="Sagt Grüß Gott."))
        model = Model(root="/src", packages=[package])

        text = model.to_json()

        assert "Grüß Gott" in text
        assert json.loads(text)["packages"][0]["functions"][0]["name"] == "Grüß"


class TestExtractOptions:
    """Tests for ExtractOptions defaults."""

    def test_defaults_fill_exclusions_and_indent(self) -> None:
        """Test with_defaults fills unset values."""
        options = ExtractOptions().with_defaults()

        assert options.exclude_dir_names == frozenset(DEFAULT_EXCLUDE_DIR_NAMES)
        assert options.indent == "  "
        assert options.include_tests is False
        assert options.include_generated is False

    def test_explicit_exclusions_replace_defaults(self) -> None:
        """Test that a non-empty exclusion set is kept as given."""
        options = ExtractOptions(exclude_dir_names=frozenset({"build"})).with_defaults()

        assert options.exclude_dir_names == frozenset({"build"})

    def test_empty_indent_kept_for_compact_output(self) -> None:
        """Test that an explicit empty indent survives defaulting."""
        options = ExtractOptions(indent="").with_defaults()

        assert options.indent == ""

    def test_default_exclusions(self) -> None:
        """Test the built-in exclusion list."""
        assert set(DEFAULT_EXCLUDE_DIR_NAMES) == {
            ".git", ".idea", ".vscode", "node_modules", "testdata", "vendor",
        }
