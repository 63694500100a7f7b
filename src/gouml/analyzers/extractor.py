"""Declaration extraction for one package of one directory.

Classifies top-level declarations into the normalized model in two passes
over all files of the package:

1. Types: kind, doc, generic parameters, struct fields or interface methods.
2. Functions: free functions go to the package; methods bind to their
   receiver's type when it was declared in pass 1, otherwise they fall back
   to the package's function list.
"""

import os
from pathlib import Path
from typing import Any

from gouml.analyzers.go_parser import ParsedFile
from gouml.analyzers.go_syntax import (
    COMMENT,
    doc_text,
    is_exported,
    node_text,
    receiver_base_name,
    render_expr,
)
from gouml.analyzers.module_locator import ModuleLocator
from gouml.models.uml import Field, Function, Package, Param, Type, TypeKind, TypeParam

# Interface members that declare a method (older grammars use method_spec)
METHOD_ELEMS = frozenset({"method_elem", "method_spec"})

# Declarations of generic parameters (older grammars use parameter_declaration)
TYPE_PARAM_DECLS = frozenset({"type_parameter_declaration", "parameter_declaration"})

PARAM_DECLS = frozenset({"parameter_declaration", "variadic_parameter_declaration"})


def to_rel_path(base: Path | str, path: Path | str) -> str:
    """Return ``path`` relative to ``base`` with forward slashes."""
    try:
        rel = os.path.relpath(path, base)
    except ValueError:
        return Path(path).as_posix()
    return Path(rel).as_posix()


def kind_for_type_spec(spec: Any) -> TypeKind:
    """Classify a type_spec / type_alias node.

    Alias syntax wins over the underlying form; otherwise struct and
    interface literals map to their kinds and everything else is "other".
    """
    if spec.type == "type_alias":
        return TypeKind.ALIAS
    underlying = spec.child_by_field_name("type")
    if underlying is None:
        return TypeKind.OTHER
    if underlying.type == "struct_type":
        return TypeKind.STRUCT
    if underlying.type == "interface_type":
        return TypeKind.INTERFACE
    return TypeKind.OTHER


def parse_type_params(params: Any | None, source: bytes) -> list[TypeParam]:
    """Extract generic type parameters from a type_parameter_list."""
    if params is None:
        return []

    out: list[TypeParam] = []
    for decl in params.named_children:
        if decl.type not in TYPE_PARAM_DECLS:
            continue
        constraint_node = decl.child_by_field_name("type")
        constraint = render_expr(constraint_node, source) if constraint_node is not None else ""
        for name in decl.children_by_field_name("name"):
            out.append(TypeParam(name=node_text(name, source), constraint=constraint))
    return out


def _param_groups(params: Any | None) -> list[Any]:
    if params is None:
        return []
    return [child for child in params.named_children if child.type in PARAM_DECLS]


def _group_params(group: Any, source: bytes) -> list[Param]:
    type_node = group.child_by_field_name("type")
    typ = render_expr(type_node, source) if type_node is not None else ""
    if group.type == "variadic_parameter_declaration":
        typ = f"...{typ}"
    names = group.children_by_field_name("name")
    if not names:
        return [Param(type=typ)]
    return [Param(name=node_text(name, source), type=typ) for name in names]


def parse_params(params: Any | None, source: bytes) -> tuple[list[Param], bool]:
    """Extract parameters from a parameter_list.

    Returns:
        Tuple of (params, variadic) where variadic reflects the last group only
    """
    groups = _param_groups(params)
    out: list[Param] = []
    for group in groups:
        out.extend(_group_params(group, source))
    variadic = bool(groups) and groups[-1].type == "variadic_parameter_declaration"
    return out, variadic


def parse_results(result: Any | None, source: bytes) -> list[Param]:
    """Extract results: either a parameter_list or a single bare type."""
    if result is None:
        return []
    if result.type != "parameter_list":
        return [Param(type=render_expr(result, source))]

    out: list[Param] = []
    for group in _param_groups(result):
        out.extend(_group_params(group, source))
    return out


def build_function(node: Any, source: bytes, doc: str) -> Function:
    """Build a Function from a function, method or interface method node."""
    name = node_text(node.child_by_field_name("name"), source)
    func = Function(
        name=name,
        exported=is_exported(name),
        doc=doc,
        type_params=parse_type_params(node.child_by_field_name("type_parameters"), source),
    )
    func.params, func.variadic = parse_params(node.child_by_field_name("parameters"), source)
    func.results = parse_results(node.child_by_field_name("result"), source)
    return func


def parse_struct_fields(struct_node: Any, source: bytes) -> tuple[list[Field], list[str]]:
    """Extract named fields and embedded member types of a struct type.

    A declaration with several names (``a, b int``) yields one Field per
    name sharing the type expression. Anonymous members are recorded by
    their type expression.
    """
    fields: list[Field] = []
    embedded: list[str] = []

    for field_list in struct_node.named_children:
        if field_list.type != "field_declaration_list":
            continue
        for decl in field_list.named_children:
            if decl.type != "field_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            typ = render_expr(type_node, source) if type_node is not None else ""
            tag_node = decl.child_by_field_name("tag")
            tag = node_text(tag_node, source).strip("`") if tag_node is not None else ""

            names = decl.children_by_field_name("name")
            if not names:
                if any(child.type == "*" for child in decl.children):
                    typ = f"*{typ}"
                embedded.append(typ)
                continue
            for name_node in names:
                name = node_text(name_node, source)
                fields.append(Field(name=name, type=typ, tag=tag, exported=is_exported(name)))

    return fields, embedded


def parse_interface_methods(iface_node: Any, source: bytes) -> tuple[list[Function], list[str]]:
    """Extract methods and embedded elements of an interface type.

    Method docs come from the preceding comment group only; a trailing
    comment on the same line is not documentation.
    """
    methods: list[Function] = []
    embedded: list[str] = []

    for member in iface_node.named_children:
        if member.type == COMMENT:
            continue
        if member.type in METHOD_ELEMS:
            if member.child_by_field_name("name") is None:
                continue
            methods.append(build_function(member, source, doc_text(member, source)))
            continue
        embedded.append(render_expr(member, source))

    return methods, embedded


class DeclarationExtractor:
    """Builds a Package from the parsed files of one directory and package name.

    Attributes:
        module_locator: Locator used to derive import paths
        rel_base: Directory that Package.dir and Package.files are relative to
    """

    def __init__(self, module_locator: ModuleLocator, rel_base: Path) -> None:
        """Initialize the extractor.

        Args:
            module_locator: Shared module locator for the run
            rel_base: Base directory for relative paths
        """
        self.module_locator = module_locator
        self.rel_base = rel_base

    def extract(self, directory: Path, package_name: str, files: list[ParsedFile]) -> Package:
        """Extract the declarations of one package.

        Args:
            directory: Absolute directory being analyzed
            package_name: Declared package name shared by ``files``
            files: Parsed files declaring ``package_name``

        Returns:
            Package with types, methods and functions populated (unsorted)

        Raises:
            ModuleFileError: If the enclosing go.mod is malformed
        """
        package = Package(
            name=package_name,
            dir=to_rel_path(self.rel_base, directory),
            import_path=self.module_locator.import_path_for_dir(directory),
            files=[to_rel_path(self.rel_base, parsed.path) for parsed in files],
        )

        types_by_name: dict[str, Type] = {}
        for parsed in files:
            for decl in parsed.declarations("type_declaration"):
                for type_ in self._extract_type_declaration(decl, parsed.source):
                    package.add_type(type_)
                    types_by_name[type_.name] = type_

        for parsed in files:
            for decl in parsed.declarations("function_declaration", "method_declaration"):
                self._bind_function(package, types_by_name, decl, parsed.source)

        return package

    def _extract_type_declaration(self, decl: Any, source: bytes) -> list[Type]:
        specs = [child for child in decl.named_children if child.type in ("type_spec", "type_alias")]
        group = decl if len(specs) == 1 else None

        types: list[Type] = []
        for spec in specs:
            name = node_text(spec.child_by_field_name("name"), source)
            type_ = Type(
                name=name,
                kind=kind_for_type_spec(spec),
                exported=is_exported(name),
                doc=doc_text(spec, source, fallback=group),
                type_params=parse_type_params(spec.child_by_field_name("type_parameters"), source),
            )

            underlying = spec.child_by_field_name("type")
            if underlying is not None and underlying.type == "struct_type":
                type_.fields, type_.embedded = parse_struct_fields(underlying, source)
            elif underlying is not None and underlying.type == "interface_type":
                type_.methods, type_.embedded = parse_interface_methods(underlying, source)

            types.append(type_)
        return types

    def _bind_function(
        self,
        package: Package,
        types_by_name: dict[str, Type],
        decl: Any,
        source: bytes,
    ) -> None:
        func = build_function(decl, source, doc_text(decl, source))

        receiver_type = self._receiver_type(decl)
        if receiver_type is None:
            package.add_function(func)
            return

        func.receiver = render_expr(receiver_type, source)
        target = types_by_name.get(receiver_base_name(receiver_type, source))
        if target is None:
            package.add_function(func)
            return
        target.add_method(func)

    def _receiver_type(self, decl: Any) -> Any | None:
        if decl.type != "method_declaration":
            return None
        receiver = decl.child_by_field_name("receiver")
        groups = _param_groups(receiver)
        if not groups:
            return None
        return groups[0].child_by_field_name("type")
