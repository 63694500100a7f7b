"""Unit tests for whole-tree model generation."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from gouml.analyzers.base import GoParseError, ModuleFileError, RootPathError
from gouml.analyzers.generator import ModelGenerator, generate, generate_json
from gouml.models.options import ExtractOptions

WriteTree = Callable[[dict[str, str]], Path]


def _strip_timestamp(data: dict) -> dict:
    return {k: v for k, v in data.items() if k != "generated_at"}


class TestGenerate:
    """Tests for generate()."""

    def test_module_and_import_paths(self, write_tree: WriteTree) -> None:
        """Test packages carry import paths derived from go.mod."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "root.go": "package m\n",
            "sub/sub.go": "package sub\n",
        })

        model = generate(root)

        assert model.module is not None
        assert model.module.path == "example.com/m"
        assert model.root == str(root)
        assert [(p.import_path, p.dir, p.name) for p in model.packages] == [
            ("example.com/m", ".", "m"),
            ("example.com/m/sub", "sub", "sub"),
        ]

    def test_excluded_directories_pruned(self, write_tree: WriteTree) -> None:
        """Test excluded names are pruned at any depth."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "a/a.go": "package a\n",
            "a/vendor/v/v.go": "package v\n",
            "node_modules/x/x.go": "package x\n",
            "testdata/bad.go": "package bad\n\nfunc {\n",
        })

        model = generate(root)

        assert [p.dir for p in model.packages] == ["a"]

    def test_exclusion_override_replaces_defaults(self, write_tree: WriteTree) -> None:
        """Test a custom exclusion set replaces the built-in names."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "vendor/v/v.go": "package v\n",
            "build/b.go": "package b\n",
        })

        model = generate(root, ExtractOptions(exclude_dir_names=frozenset({"build"})))

        assert [p.import_path for p in model.packages] == ["example.com/m/vendor/v"]

    def test_root_name_excluded(self, tmp_path: Path) -> None:
        """Test a root whose own name is excluded yields no packages."""
        root = tmp_path / "vendor"
        root.mkdir()
        (root / "v.go").write_text("package v\n")

        model = generate(root)

        assert model.packages == []

    def test_empty_tree(self, tmp_path: Path) -> None:
        """Test a tree without Go files yields an empty package list."""
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "README.md").write_text("# docs\n")

        model = generate(tmp_path)

        assert model.packages == []
        assert model.to_dict()["packages"] == []

    def test_multiple_packages_in_one_directory(self, write_tree: WriteTree) -> None:
        """Test each package name in a directory becomes its own package."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "foo/foo.go": "package foo\n\ntype T struct{}\n",
            "foo/foo_test.go": "package foo_test\n\nfunc TestT() {}\n",
        })

        model = generate(root, ExtractOptions(include_tests=True))

        assert [(p.dir, p.name) for p in model.packages] == [("foo", "foo"), ("foo", "foo_test")]
        assert model.packages[0].files == ["foo/foo.go"]
        assert model.packages[1].files == ["foo/foo_test.go"]

    def test_single_file_root(self, write_tree: WriteTree) -> None:
        """Test a file root restricts analysis to that file."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "a.go": "package m\n\nfunc A() {}\n",
            "b.go": "package m\n\nfunc B() {}\n",
            "sub/s.go": "package sub\n",
        })

        model = generate(root / "b.go")

        assert model.root == str(root / "b.go")
        assert len(model.packages) == 1
        package = model.packages[0]
        assert package.dir == "."
        assert package.files == ["b.go"]
        assert [f.name for f in package.functions] == ["B"]

    def test_single_file_filtered_out(self, write_tree: WriteTree) -> None:
        """Test a single test file is skipped unless tests are included."""
        root = write_tree({"a_test.go": "package a\n"})

        assert generate(root / "a_test.go").packages == []
        assert len(generate(root / "a_test.go", ExtractOptions(include_tests=True)).packages) == 1

    def test_missing_root(self, tmp_path: Path) -> None:
        """Test a missing root is a fatal error."""
        with pytest.raises(RootPathError, match="stat root"):
            generate(tmp_path / "missing")

    def test_parse_error_is_fatal(self, write_tree: WriteTree) -> None:
        """Test malformed source aborts the run."""
        root = write_tree({"ok.go": "package p\n", "bad.go": "package p\n\nfunc {\n"})

        with pytest.raises(GoParseError, match="bad.go"):
            generate(root)

    def test_malformed_go_mod_is_fatal(self, write_tree: WriteTree) -> None:
        """Test a go.mod without a module line aborts the run."""
        root = write_tree({"go.mod": "go 1.22\n", "a.go": "package a\n"})

        with pytest.raises(ModuleFileError):
            generate(root)

    def test_nested_module(self, write_tree: WriteTree) -> None:
        """Test a nested go.mod starts a new import path space."""
        root = write_tree({
            "go.mod": "module example.com/outer\n",
            "inner/go.mod": "module example.com/inner\n",
            "inner/pkg/p.go": "package pkg\n",
        })

        model = generate(root)

        assert [p.import_path for p in model.packages] == ["example.com/inner/pkg"]
        assert model.module is not None
        assert model.module.path == "example.com/outer"

    def test_repeated_runs_identical(self, write_tree: WriteTree) -> None:
        """Test two runs over the same tree serialize identically."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "z.go": "package m\n\ntype Z struct{}\n\nfunc (z Z) B() {}\nfunc (z Z) A() {}\n",
            "a.go": "package m\n\nfunc Zeta() {}\nfunc Alpha() {}\n",
            "c/c.go": "package c\n",
            "b/b.go": "package b\n",
        })

        first = _strip_timestamp(generate(root).to_dict())
        second = _strip_timestamp(generate(root).to_dict())

        assert first == second
        assert [p["dir"] for p in first["packages"]] == [".", "b", "c"]
        assert [f["name"] for f in first["packages"][0]["functions"]] == ["Alpha", "Zeta"]
        assert [m["name"] for m in first["packages"][0]["types"][0]["methods"]] == ["A", "B"]

    def test_generator_reusable(self, write_tree: WriteTree) -> None:
        """Test one generator sees go.mod changes between runs."""
        root = write_tree({"go.mod": "module example.com/a\n", "a.go": "package a\n"})
        generator = ModelGenerator()

        before = generator.generate(root)
        (root / "go.mod").write_text("module example.com/b\n")
        after = generator.generate(root)

        assert before.packages[0].import_path == "example.com/a"
        assert after.packages[0].import_path == "example.com/b"


class TestGenerateJSON:
    """Tests for generate_json()."""

    def test_default_indent(self, write_tree: WriteTree) -> None:
        """Test output is indented with two spaces by default."""
        root = write_tree({"a.go": "package a\n"})

        text = generate_json(root)

        assert text.startswith('{\n  "generated_at": ')
        assert not text.endswith("\n")

    def test_compact(self, write_tree: WriteTree) -> None:
        """Test an empty indent produces compact output."""
        root = write_tree({"a.go": "package a\n"})

        text = generate_json(root, ExtractOptions(indent=""))

        assert "\n" not in text
        assert json.loads(text)["packages"][0]["name"] == "a"

    def test_output_parses_back(self, write_tree: WriteTree) -> None:
        """Test the serialized model is valid JSON with the wire keys."""
        root = write_tree({
            "go.mod": "module example.com/m\n",
            "a.go": "package m\n\n// Run runs.\nfunc Run(ctx string) error { return nil }\n",
        })

        data = json.loads(generate_json(root))

        assert data["generated_at"].endswith("Z")
        assert data["module"]["path"] == "example.com/m"
        assert data["packages"][0]["functions"] == [
            {
                "name": "Run",
                "exported": True,
                "doc": "Run runs.",
                "params": [{"name": "ctx", "type": "string"}],
                "results": [{"type": "error"}],
            },
        ]
