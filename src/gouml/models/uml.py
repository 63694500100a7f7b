"""Structural model of a Go source tree.

The model is the wire contract consumed by downstream tooling (documentation
generators, diagramming, architecture linting). Every entity serializes via
``to_dict()``; optional members are omitted when empty so that the output
matches the artifact shape exactly.
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Syntactic kind of a type declaration."""

    STRUCT = "struct"
    INTERFACE = "interface"
    ALIAS = "alias"
    OTHER = "other"


@dataclass
class TypeParam:
    """Generic type parameter.

    Attributes:
        name: Parameter name
        constraint: Constraint expression as written (empty if none)
    """

    name: str
    constraint: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"name": self.name}
        if self.constraint:
            result["constraint"] = self.constraint
        return result


@dataclass
class Param:
    """Function parameter or result.

    Attributes:
        type: Type expression as written
        name: Parameter name (empty when anonymous)
    """

    type: str
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {}
        if self.name:
            result["name"] = self.name
        result["type"] = self.type
        return result


@dataclass
class Field:
    """Struct field.

    Attributes:
        name: Field name
        type: Type expression as written
        tag: Raw tag text without the surrounding backticks
        exported: Whether the field name is exported
        embedded: Whether the field is an anonymous member
    """

    name: str
    type: str
    tag: str = ""
    exported: bool = False
    embedded: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.tag:
            result["tag"] = self.tag
        if self.embedded:
            result["embedded"] = True
        if self.exported:
            result["exported"] = True
        return result


@dataclass
class Function:
    """Free function, method or interface method.

    Attributes:
        name: Function name
        exported: Whether the name is exported
        doc: Documentation text
        receiver: Receiver type expression (methods only)
        type_params: Generic type parameters
        params: Ordered parameter list
        results: Ordered result list
        variadic: Whether the last parameter is variadic
    """

    name: str
    exported: bool = False
    doc: str = ""
    receiver: str = ""
    type_params: list[TypeParam] = field(default_factory=list)
    params: list[Param] = field(default_factory=list)
    results: list[Param] = field(default_factory=list)
    variadic: bool = False

    @property
    def is_method(self) -> bool:
        """Return True if the function declares a receiver."""
        return bool(self.receiver)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"name": self.name, "exported": self.exported}
        if self.doc:
            result["doc"] = self.doc
        if self.receiver:
            result["receiver"] = self.receiver
        if self.type_params:
            result["type_params"] = [tp.to_dict() for tp in self.type_params]
        if self.params:
            result["params"] = [p.to_dict() for p in self.params]
        if self.results:
            result["results"] = [r.to_dict() for r in self.results]
        if self.variadic:
            result["variadic"] = True
        return result


@dataclass
class Type:
    """Type declaration.

    Struct types carry ``fields`` and ``embedded`` (anonymous field types);
    interface types carry ``methods`` and ``embedded`` (embedded interfaces).
    Methods declared on the type elsewhere in the package are appended to
    ``methods`` as well.
    """

    name: str
    kind: TypeKind
    exported: bool = False
    doc: str = ""
    type_params: list[TypeParam] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)
    embedded: list[str] = field(default_factory=list)
    methods: list[Function] = field(default_factory=list)

    def add_method(self, method: Function) -> None:
        """Attach a method to the type."""
        self.methods.append(method)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "exported": self.exported,
        }
        if self.doc:
            result["doc"] = self.doc
        if self.type_params:
            result["type_params"] = [tp.to_dict() for tp in self.type_params]
        if self.fields:
            result["fields"] = [f.to_dict() for f in self.fields]
        if self.embedded:
            result["embedded"] = list(self.embedded)
        if self.methods:
            result["methods"] = [m.to_dict() for m in self.methods]
        return result


@dataclass
class Module:
    """Go module declaration.

    Attributes:
        path: Declared module path
        dir: Directory containing the go.mod file
    """

    path: str
    dir: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"path": self.path, "dir": self.dir}


@dataclass
class Package:
    """One declared package within one directory.

    Attributes:
        name: Declared package name
        dir: Directory relative to the analysis root (slash separated)
        import_path: Module path joined with the module-relative directory
        files: Contributing files relative to the analysis root
        types: Type declarations
        functions: Free functions and methods whose receiver type is unknown
    """

    name: str
    dir: str
    import_path: str = ""
    files: list[str] = field(default_factory=list)
    types: list[Type] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)

    def add_type(self, type_: Type) -> None:
        """Add a type declaration to the package."""
        self.types.append(type_)

    def add_function(self, func: Function) -> None:
        """Add a free function to the package."""
        self.functions.append(func)

    def get_type(self, name: str) -> Type | None:
        """Get a type by name."""
        for t in self.types:
            if t.name == name:
                return t
        return None

    @property
    def sort_key(self) -> tuple[str, str, str]:
        """Ordering key across packages: import path, directory, name."""
        return (self.import_path, self.dir, self.name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"name": self.name}
        if self.import_path:
            result["import_path"] = self.import_path
        result["dir"] = self.dir
        if self.files:
            result["files"] = list(self.files)
        if self.types:
            result["types"] = [t.to_dict() for t in self.types]
        if self.functions:
            result["functions"] = [f.to_dict() for f in self.functions]
        return result


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC 3339 in UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass
class Model:
    """Root of the extracted model.

    Attributes:
        root: Absolute analysis root
        generated_at: Generation timestamp (UTC)
        module: Module enclosing the analysis root, if any
        packages: Packages ordered by (import path, directory, name)
    """

    root: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    module: Module | None = None
    packages: list[Package] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure timestamp is timezone-aware UTC."""
        if self.generated_at.tzinfo is None:
            self.generated_at = self.generated_at.replace(tzinfo=UTC)

    @property
    def package_count(self) -> int:
        """Return total number of packages."""
        return len(self.packages)

    @property
    def type_count(self) -> int:
        """Return total number of types across packages."""
        return sum(len(p.types) for p in self.packages)

    @property
    def function_count(self) -> int:
        """Return total number of free functions across packages."""
        return sum(len(p.functions) for p in self.packages)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "generated_at": format_timestamp(self.generated_at),
            "root": self.root,
        }
        if self.module is not None:
            result["module"] = self.module.to_dict()
        result["packages"] = [p.to_dict() for p in self.packages]
        return result

    def to_json(self, indent: str = "  ") -> str:
        """Serialize the model.

        Args:
            indent: Indentation unit; empty string produces compact output

        Returns:
            JSON document (without trailing newline)
        """
        if not indent:
            return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
