"""Typed element model shared by all metasync adapters.

Elements are the common representation every adapter translates its
vendor metadata into:

- ObjectType: an object-shaped type with named fields
- PrimitiveType: a leaf type (string, number, boolean)
- ListType: a homogeneous list of another type
- InstanceElement: a concrete value of an ObjectType

Like the rest of the core, this module uses only the standard library.
"""

import copy
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PrimitiveTypes(Enum):
    """Kinds of types an element can represent."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"


@dataclass(frozen=True)
class TypeID:
    """Identifies a type by the adapter that owns it and its name."""

    adapter: str
    name: str

    @property
    def full_name(self) -> str:
        """Dotted name, or the bare name for adapter-less builtins."""
        if not self.adapter:
            return self.name
        return f"{self.adapter}.{self.name}"


class Type:
    """Base class of all element types.

    Annotations are free-form metadata attached to a type (label, api name,
    required flag, default value, ...).
    """

    DEFAULT = "_default"

    def __init__(
        self,
        type_id: TypeID,
        annotations: dict[str, Any] | None = None,
    ):
        self.type_id = type_id
        self.annotations: dict[str, Any] = dict(annotations or {})

    def annotate(self, values: dict[str, Any]) -> None:
        """Merge the given annotation values into this element."""
        self.annotations.update(values)

    def clone(self) -> "Type":
        """Return a deep copy that shares no mutable state with this one."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.type_id.full_name}>"


class PrimitiveType(Type):
    """A leaf type."""

    def __init__(
        self,
        type_id: TypeID,
        primitive: PrimitiveTypes,
        annotations: dict[str, Any] | None = None,
    ):
        super().__init__(type_id, annotations)
        self.primitive = primitive


class ObjectType(Type):
    """An object-shaped type whose fields are themselves types."""

    def __init__(
        self,
        type_id: TypeID,
        fields: dict[str, Type] | None = None,
        annotations: dict[str, Any] | None = None,
    ):
        super().__init__(type_id, annotations)
        self.fields: dict[str, Type] = dict(fields or {})

    @property
    def primitive(self) -> PrimitiveTypes:
        return PrimitiveTypes.OBJECT

    def get_fields_not_in_other(self, other: "ObjectType") -> list[str]:
        """Names of fields present on this type but missing from ``other``."""
        return [name for name in self.fields if name not in other.fields]


class ListType(Type):
    """A list whose items are all of ``element_type``."""

    def __init__(self, element_type: Type):
        super().__init__(
            TypeID(element_type.type_id.adapter, f"list<{element_type.type_id.name}>")
        )
        self.element_type = element_type


class InstanceElement:
    """A concrete value of an ObjectType."""

    def __init__(self, name: str, type_: ObjectType, value: dict[str, Any] | None = None):
        self.name = name
        self.type = type_
        self.value: dict[str, Any] = dict(value or {})

    @property
    def type_name(self) -> str:
        return self.type.type_id.name

    @property
    def full_name(self) -> str:
        return f"{self.type.type_id.full_name}.instance.{self.name}"

    def __repr__(self) -> str:
        return f"<InstanceElement {self.full_name}>"


Element = Type | InstanceElement


class BuiltinTypes:
    """Canonical adapter-less primitives."""

    STRING = PrimitiveType(TypeID("", "string"), PrimitiveTypes.STRING)
    NUMBER = PrimitiveType(TypeID("", "number"), PrimitiveTypes.NUMBER)
    BOOLEAN = PrimitiveType(TypeID("", "boolean"), PrimitiveTypes.BOOLEAN)


class TypesRegistry:
    """Canonical type instances keyed by TypeID.

    Populated lazily through get_type(). Callers that want to attach
    annotations must clone the returned instance first.
    """

    def __init__(self) -> None:
        self._types: dict[TypeID, Type] = {}

    def get_type(
        self,
        type_id: TypeID,
        primitive: PrimitiveTypes = PrimitiveTypes.OBJECT,
    ) -> Type:
        """Return the registered type for ``type_id``, creating it if needed."""
        existing = self._types.get(type_id)
        if existing is not None:
            return existing

        new_type: Type
        if primitive == PrimitiveTypes.OBJECT:
            new_type = ObjectType(type_id)
        else:
            new_type = PrimitiveType(type_id, primitive)
        self._types[type_id] = new_type
        return new_type

    def has_type(self, type_id: TypeID) -> bool:
        return type_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[Type]:
        return iter(self._types.values())


def is_object_type(element: Any) -> bool:
    return isinstance(element, ObjectType)


def is_instance_element(element: Any) -> bool:
    return isinstance(element, InstanceElement)


def element_to_dict(element: Type) -> dict[str, Any]:
    """Serialize a type into a JSON-friendly dictionary.

    Used by the CLI to print discovered elements and to read elements
    from files. Lists are serialized through their element type.
    """
    data: dict[str, Any] = {
        "adapter": element.type_id.adapter,
        "name": element.type_id.name,
        "annotations": dict(element.annotations),
    }
    if isinstance(element, ObjectType):
        data["primitive"] = PrimitiveTypes.OBJECT.value
        data["fields"] = {
            field_name: element_to_dict(field)
            for field_name, field in element.fields.items()
        }
    elif isinstance(element, ListType):
        data["list_of"] = element_to_dict(element.element_type)
    elif isinstance(element, PrimitiveType):
        data["primitive"] = element.primitive.value
    return data


def element_from_dict(data: dict[str, Any]) -> Type:
    """Build a type from the dictionary produced by element_to_dict.

    Raises:
        ValueError: If the dictionary has no name or an unknown primitive.
    """
    if not data.get("name") and "list_of" not in data:
        raise ValueError("Element definition must have a name")

    if "list_of" in data:
        element: Type = ListType(element_from_dict(data["list_of"]))
        element.annotate(data.get("annotations", {}))
        return element

    type_id = TypeID(data.get("adapter", ""), data["name"])
    try:
        primitive = PrimitiveTypes(data.get("primitive", PrimitiveTypes.OBJECT.value))
    except ValueError as e:
        raise ValueError(f"Unknown primitive for {type_id.full_name}: {e}") from e

    annotations = data.get("annotations", {})
    if primitive == PrimitiveTypes.OBJECT:
        fields = {
            field_name: element_from_dict(field_data)
            for field_name, field_data in data.get("fields", {}).items()
        }
        return ObjectType(type_id, fields=fields, annotations=annotations)
    return PrimitiveType(type_id, primitive, annotations=annotations)
