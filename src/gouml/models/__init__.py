"""gouml data models.

- Model: Root of the extracted structure (one per run)
- Module: Enclosing go.mod declaration
- Package: Declarations of one package name in one directory
- Type, Field, Function, Param, TypeParam: Declaration entities
- ExtractOptions: Options consumed by the generator
"""

from gouml.models.options import DEFAULT_EXCLUDE_DIR_NAMES, ExtractOptions
from gouml.models.uml import (
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

__all__ = [
    "DEFAULT_EXCLUDE_DIR_NAMES",
    "ExtractOptions",
    "Field",
    "Function",
    "Model",
    "Module",
    "Package",
    "Param",
    "Type",
    "TypeKind",
    "TypeParam",
]
