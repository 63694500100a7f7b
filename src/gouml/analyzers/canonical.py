"""Deterministic ordering of extracted packages.

Repeated runs over unchanged input must serialize byte-identically, whatever
order the filesystem lists directories and files in. Every list is sorted by
name (or path) using code point order, which matches UTF-8 byte order. Equal
names fall back to the serialized entity so that the order stays total.
"""

import json
from typing import Any

from gouml.models.uml import Field, Function, Package, Type


def _fingerprint(entity: Any) -> str:
    return json.dumps(entity.to_dict(), sort_keys=True, ensure_ascii=False)


def _function_key(func: Function) -> tuple[str, str, str]:
    return (func.name, func.receiver, _fingerprint(func))


def _field_key(field: Field) -> tuple[str, str]:
    return (field.name, _fingerprint(field))


def sort_type(type_: Type) -> Type:
    """Sort a type's fields, embedded names and methods in place."""
    type_.fields.sort(key=_field_key)
    type_.embedded.sort()
    type_.methods.sort(key=_function_key)
    return type_


def sort_package(package: Package) -> Package:
    """Sort a package's files, functions, types and type members in place."""
    package.files.sort()
    package.functions.sort(key=_function_key)
    for type_ in package.types:
        sort_type(type_)
    package.types.sort(key=lambda t: (t.name, _fingerprint(t)))
    return package


def sort_packages(packages: list[Package]) -> list[Package]:
    """Order packages by (import path, directory, name)."""
    return sorted(packages, key=lambda p: (*p.sort_key, _fingerprint(p)))
