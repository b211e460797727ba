"""Core domain logic for metasync.

This package has no external dependencies and holds the element model,
naming rules, type mapping and the reconciliation logic of the
Salesforce adapter. Network access lives in the adapters package.
"""

from .elements import (
    BuiltinTypes,
    Element,
    InstanceElement,
    ListType,
    ObjectType,
    PrimitiveType,
    PrimitiveTypes,
    Type,
    TypeID,
    TypesRegistry,
)
from .errors import ApiNameMismatchError, SaveFailedError, raise_for_errors
from .models import (
    CustomField,
    CustomObject,
    FieldPermissions,
    ProfileInfo,
    SaveError,
    SaveResult,
)

__all__ = [
    "ApiNameMismatchError",
    "BuiltinTypes",
    "CustomField",
    "CustomObject",
    "Element",
    "FieldPermissions",
    "InstanceElement",
    "ListType",
    "ObjectType",
    "PrimitiveType",
    "PrimitiveTypes",
    "ProfileInfo",
    "SaveError",
    "SaveFailedError",
    "SaveResult",
    "Type",
    "TypeID",
    "TypesRegistry",
    "raise_for_errors",
]
