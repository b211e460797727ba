"""Wire-level models for the Salesforce metadata API.

Two groups of models live here:

1. Descriptors returned by the client (SObjectField, ValueTypeField, ...),
   normalized from REST and SOAP responses.
2. Metadata payloads built right before a create/update call
   (CustomObject, CustomField, ProfileInfo) and discarded afterwards.

All models use only Python standard library types.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PicklistEntry:
    """A single allowed value of a picklist field."""

    value: str
    default_value: bool = False
    active: bool = True


@dataclass(frozen=True)
class SObjectField:
    """A field of a data object as described by the REST describe call."""

    name: str
    type: str
    label: str = ""
    nillable: bool = True
    default_value: Any = None
    picklist_values: tuple[PicklistEntry, ...] = ()
    restricted_picklist: bool = False


@dataclass(frozen=True)
class ValueTypeField:
    """A field of a metadata type as described by describeValueType."""

    name: str
    soap_type: str
    value_required: bool = False
    picklist_values: tuple[PicklistEntry, ...] = ()


@dataclass(frozen=True)
class MetadataTypeInfo:
    """A metadata type listed by describeMetadata."""

    xml_name: str
    directory_name: str = ""
    in_folder: bool = False
    child_xml_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileProperties:
    """A metadata component listed by listMetadata."""

    full_name: str
    type: str
    id: str = ""


@dataclass(frozen=True)
class SaveError:
    """One error entry of a save result."""

    message: str
    status_code: str = ""
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a create/update/delete of one metadata component."""

    full_name: str
    success: bool
    errors: tuple[SaveError, ...] = ()


class MetadataInfo:
    """Base class of metadata payloads sent to the metadata API."""

    full_name: str

    def to_payload(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass
class CustomField(MetadataInfo):
    """A custom field definition.

    full_name is either the field api name (inline in a CustomObject) or
    the fully qualified ``Object.Field`` name (standalone create/delete).
    """

    full_name: str
    type: str
    label: str
    required: bool = False
    picklist_values: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "fullName": self.full_name,
            "type": self.type,
            "label": self.label,
            "required": bool(self.required),
        }
        if self.picklist_values:
            payload["picklistValues"] = [
                {"fullName": value, "default": False}
                for value in self.picklist_values
            ]
        return payload


@dataclass
class CustomObject(MetadataInfo):
    """A custom object definition with its inline fields."""

    full_name: str
    label: str
    fields: list[CustomField] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "label": self.label,
            "pluralLabel": f"{self.label}s",
            "deploymentStatus": "Deployed",
            "sharingModel": "ReadWrite",
            "nameField": {"type": "Text", "label": f"{self.label} Name"},
            "fields": [f.to_payload() for f in self.fields],
        }


@dataclass(frozen=True)
class FieldPermissions:
    """Read/edit permission of one profile on one field."""

    field: str  # Object.Field
    editable: bool
    readable: bool


@dataclass
class ProfileInfo(MetadataInfo):
    """Field-level permissions of a named profile."""

    full_name: str
    field_permissions: list[FieldPermissions] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "fieldPermissions": [
                {
                    "field": p.field,
                    "editable": p.editable,
                    "readable": p.readable,
                }
                for p in self.field_permissions
            ],
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProfileInfo":
        """Build a ProfileInfo from a readMetadata record.

        A single permission entry may arrive as a mapping instead of a list.
        """
        raw = payload.get("fieldPermissions") or []
        if isinstance(raw, Mapping):
            raw = [raw]
        return cls(
            full_name=payload.get("fullName", ""),
            field_permissions=[
                FieldPermissions(
                    field=p["field"],
                    editable=as_bool(p.get("editable")),
                    readable=as_bool(p.get("readable")),
                )
                for p in raw
            ],
        )


def as_bool(value: Any) -> bool:
    """Read a flag that may arrive as a bool or as "true"/"false" text."""
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)
