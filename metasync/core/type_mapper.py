"""Mapping between Salesforce descriptors and typed elements.

Inbound, vendor field descriptors become annotated field elements.
Outbound, object elements become CustomObject/CustomField payloads.
"""

from collections.abc import Sequence
from typing import Any

from . import constants
from .elements import ObjectType, PrimitiveTypes, Type, TypeID, TypesRegistry
from .models import (
    CustomField,
    CustomObject,
    PicklistEntry,
    SObjectField,
    ValueTypeField,
)
from .naming import field_full_name, to_internal_name, to_label, to_wire_name


class TypeMapper:
    """Resolves vendor type names to element types.

    Owns no state besides the injected registry. Every type it hands out is
    a clone, so callers may annotate it freely.
    """

    def __init__(self, registry: TypesRegistry):
        self.registry = registry

    def get_type(self, name: str) -> Type:
        """Return a fresh element type for a vendor type name.

        Known primitives map to builtin ids; any other name resolves to an
        object placeholder owned by the salesforce adapter. An XML namespace
        prefix ("xsd:string") is ignored when classifying.
        """
        type_name = to_internal_name(name.rsplit(":", 1)[-1])
        if type_name == "string":
            canonical = self.registry.get_type(TypeID("", "string"), PrimitiveTypes.STRING)
        elif type_name == "double":
            canonical = self.registry.get_type(TypeID("", "number"), PrimitiveTypes.NUMBER)
        elif type_name == "boolean":
            canonical = self.registry.get_type(
                TypeID(constants.SALESFORCE, "checkbox"), PrimitiveTypes.BOOLEAN
            )
        else:
            canonical = self.registry.get_type(TypeID(constants.SALESFORCE, name))
        return canonical.clone()

    def get_object_type(self, name: str) -> ObjectType:
        """Return a fresh object placeholder for an object or metadata type name."""
        element = self.registry.get_type(TypeID(constants.SALESFORCE, name)).clone()
        if not isinstance(element, ObjectType):
            raise ValueError(f"Type {name} is registered as a primitive")
        return element

    def create_sobject_field(self, field: SObjectField) -> Type:
        """Map a data object field descriptor to an annotated field element."""
        element = self.get_type(field.type)
        annotations = element.annotations
        annotations[constants.API_NAME] = field.name
        annotations[constants.LABEL] = field.label
        annotations[constants.REQUIRED] = not field.nillable
        annotations[Type.DEFAULT] = field.default_value

        if field.picklist_values:
            annotations[constants.PICKLIST_VALUES] = [
                entry.value for entry in field.picklist_values
            ]
            annotations[constants.RESTRICTED_PICKLIST] = bool(field.restricted_picklist)
            default = resolve_picklist_default(field.picklist_values)
            if default is not None:
                annotations[Type.DEFAULT] = default

        return element

    def create_metadata_field(self, field: ValueTypeField) -> Type:
        """Map a metadata type field descriptor to an annotated field element."""
        element = self.get_type(field.soap_type)
        annotations = element.annotations
        annotations[constants.API_NAME] = field.name
        annotations[constants.REQUIRED] = field.value_required

        if field.picklist_values:
            annotations[constants.PICKLIST_VALUES] = [
                entry.value for entry in field.picklist_values
            ]
            default = resolve_picklist_default(field.picklist_values)
            if default is not None:
                annotations[Type.DEFAULT] = default

        return element


def resolve_picklist_default(entries: Sequence[PicklistEntry]) -> Any:
    """Collapse the default-flagged picklist values into a default annotation.

    Returns:
        The value itself when exactly one entry is flagged default, a list
        of values when several are, None when none is.
    """
    defaults = [entry.value for entry in entries if entry.default_value]
    if not defaults:
        return None
    if len(defaults) == 1:
        return defaults[0]
    return defaults


def api_name(element: Type) -> str:
    return element.annotations[constants.API_NAME]


def annotate_api_name_and_label(element: ObjectType) -> None:
    """Add api name and label annotations wherever they are missing.

    Names are derived from the element's type name and each field's
    internal name. Existing annotations are never overwritten, so the
    call is idempotent.
    """

    def _annotate(target: Type, name: str) -> None:
        if not target.annotations.get(constants.API_NAME):
            target.annotate({constants.API_NAME: to_wire_name(name, is_custom=True)})
        if not target.annotations.get(constants.LABEL):
            target.annotate({constants.LABEL: to_label(name)})

    _annotate(element, element.type_id.name)
    for field_name, field in element.fields.items():
        _annotate(field, field_name)


def to_custom_field(
    field: Type,
    object_api_name: str | None = None,
) -> CustomField:
    """Build a CustomField payload from a field element.

    Args:
        field: Annotated field element.
        object_api_name: When given, the payload uses the fully qualified
            ``Object.Field`` name required by standalone field calls.
    """
    full_name = api_name(field)
    if object_api_name is not None:
        full_name = field_full_name(object_api_name, full_name)
    return CustomField(
        full_name=full_name,
        type=field.type_id.name,
        label=field.annotations.get(constants.LABEL, ""),
        required=bool(field.annotations.get(constants.REQUIRED, False)),
        picklist_values=field.annotations.get(constants.PICKLIST_VALUES),
    )


def to_custom_object(element: ObjectType) -> CustomObject:
    """Build a CustomObject payload with inline field definitions."""
    return CustomObject(
        full_name=api_name(element),
        label=element.annotations[constants.LABEL],
        fields=[to_custom_field(field) for field in element.fields.values()],
    )
