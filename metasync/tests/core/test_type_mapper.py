"""Unit tests for the Salesforce type mapper."""

import pytest

from metasync.core.elements import (
    BuiltinTypes,
    ObjectType,
    PrimitiveType,
    PrimitiveTypes,
    Type,
    TypeID,
    TypesRegistry,
)
from metasync.core.models import PicklistEntry, SObjectField, ValueTypeField
from metasync.core.type_mapper import (
    TypeMapper,
    annotate_api_name_and_label,
    resolve_picklist_default,
    to_custom_field,
    to_custom_object,
)


@pytest.fixture
def registry() -> TypesRegistry:
    return TypesRegistry()


@pytest.fixture
def mapper(registry: TypesRegistry) -> TypeMapper:
    return TypeMapper(registry)


@pytest.fixture
def test_object() -> ObjectType:
    """Create an unannotated custom object definition."""
    return ObjectType(
        TypeID("salesforce", "test_object"),
        fields={
            "description": BuiltinTypes.STRING.clone(),
            "is_done": BuiltinTypes.BOOLEAN.clone(),
        },
    )


class TestGetType:
    """Test resolution of vendor type names."""

    def test_string(self, mapper: TypeMapper) -> None:
        element = mapper.get_type("string")
        assert isinstance(element, PrimitiveType)
        assert element.type_id == TypeID("", "string")
        assert element.primitive == PrimitiveTypes.STRING

    def test_namespace_prefix_is_ignored(self, mapper: TypeMapper) -> None:
        element = mapper.get_type("xsd:string")
        assert element.type_id == TypeID("", "string")

    def test_double_is_number(self, mapper: TypeMapper) -> None:
        element = mapper.get_type("double")
        assert element.type_id == TypeID("", "number")
        assert element.primitive == PrimitiveTypes.NUMBER

    def test_boolean_is_checkbox(self, mapper: TypeMapper) -> None:
        element = mapper.get_type("boolean")
        assert element.type_id == TypeID("salesforce", "checkbox")
        assert element.primitive == PrimitiveTypes.BOOLEAN

    def test_other_names_are_object_placeholders(self, mapper: TypeMapper) -> None:
        element = mapper.get_type("picklist")
        assert isinstance(element, ObjectType)
        assert element.type_id == TypeID("salesforce", "picklist")

    def test_returns_independent_clones(
        self, mapper: TypeMapper, registry: TypesRegistry
    ) -> None:
        first = mapper.get_type("string")
        second = mapper.get_type("string")
        first.annotate({"label": "First"})

        assert first is not second
        assert second.annotations == {}
        assert registry.get_type(TypeID("", "string")).annotations == {}
        assert len(registry) == 1

    def test_object_type_registered_as_primitive(
        self, mapper: TypeMapper, registry: TypesRegistry
    ) -> None:
        registry.get_type(TypeID("salesforce", "Weird"), PrimitiveTypes.STRING)
        with pytest.raises(ValueError, match="registered as a primitive"):
            mapper.get_object_type("Weird")


class TestCreateSObjectField:
    """Test annotation of data object fields."""

    def test_basic_annotations(self, mapper: TypeMapper) -> None:
        field = SObjectField(
            name="Name",
            type="string",
            label="Account Name",
            nillable=False,
            default_value="Acme",
        )
        element = mapper.create_sobject_field(field)

        assert element.annotations == {
            "api_name": "Name",
            "label": "Account Name",
            "required": True,
            Type.DEFAULT: "Acme",
        }

    def test_nillable_field_is_not_required(self, mapper: TypeMapper) -> None:
        element = mapper.create_sobject_field(SObjectField(name="Phone", type="string"))
        assert element.annotations["required"] is False

    def test_picklist_with_single_default(self, mapper: TypeMapper) -> None:
        field = SObjectField(
            name="Industry",
            type="picklist",
            label="Industry",
            picklist_values=(
                PicklistEntry("Banking"),
                PicklistEntry("Retail", default_value=True),
            ),
            restricted_picklist=True,
        )
        element = mapper.create_sobject_field(field)

        assert element.annotations["values"] == ["Banking", "Retail"]
        assert element.annotations["restricted_pick_list"] is True
        assert element.annotations[Type.DEFAULT] == "Retail"

    def test_picklist_with_several_defaults(self, mapper: TypeMapper) -> None:
        field = SObjectField(
            name="Tags",
            type="multipicklist",
            picklist_values=(
                PicklistEntry("a", default_value=True),
                PicklistEntry("b"),
                PicklistEntry("c", default_value=True),
            ),
        )
        element = mapper.create_sobject_field(field)
        assert element.annotations[Type.DEFAULT] == ["a", "c"]
        assert element.annotations["restricted_pick_list"] is False

    def test_picklist_without_default_keeps_field_default(
        self, mapper: TypeMapper
    ) -> None:
        field = SObjectField(
            name="Rating",
            type="picklist",
            default_value="Hot",
            picklist_values=(PicklistEntry("Hot"), PicklistEntry("Cold")),
        )
        element = mapper.create_sobject_field(field)
        assert element.annotations[Type.DEFAULT] == "Hot"


class TestCreateMetadataField:
    """Test annotation of metadata type fields."""

    def test_basic_annotations(self, mapper: TypeMapper) -> None:
        field = ValueTypeField(name="description", soap_type="xsd:string", value_required=True)
        element = mapper.create_metadata_field(field)

        assert element.type_id == TypeID("", "string")
        assert element.annotations == {"api_name": "description", "required": True}

    def test_picklist_default(self, mapper: TypeMapper) -> None:
        field = ValueTypeField(
            name="sharingModel",
            soap_type="SharingModel",
            picklist_values=(
                PicklistEntry("Private"),
                PicklistEntry("ReadWrite", default_value=True),
            ),
        )
        element = mapper.create_metadata_field(field)

        assert element.annotations["values"] == ["Private", "ReadWrite"]
        assert element.annotations[Type.DEFAULT] == "ReadWrite"

    def test_picklist_without_default_has_no_default(self, mapper: TypeMapper) -> None:
        field = ValueTypeField(
            name="status",
            soap_type="Status",
            picklist_values=(PicklistEntry("On"), PicklistEntry("Off")),
        )
        element = mapper.create_metadata_field(field)
        assert Type.DEFAULT not in element.annotations


def test_resolve_picklist_default_without_defaults() -> None:
    assert resolve_picklist_default([PicklistEntry("a"), PicklistEntry("b")]) is None
    assert resolve_picklist_default([]) is None


class TestAnnotateApiNameAndLabel:
    """Test normalization of object definitions before deployment."""

    def test_derives_names(self, test_object: ObjectType) -> None:
        annotate_api_name_and_label(test_object)

        assert test_object.annotations == {"api_name": "TestObject__c", "label": "Test Object"}
        assert test_object.fields["description"].annotations == {
            "api_name": "Description__c",
            "label": "Description",
        }
        assert test_object.fields["is_done"].annotations["api_name"] == "IsDone__c"
        assert test_object.fields["is_done"].annotations["label"] == "Is Done"

    def test_keeps_existing_annotations(self, test_object: ObjectType) -> None:
        test_object.annotate({"label": "Tracked Work"})
        test_object.fields["description"].annotate({"api_name": "Desc__c"})
        annotate_api_name_and_label(test_object)

        assert test_object.annotations["label"] == "Tracked Work"
        assert test_object.annotations["api_name"] == "TestObject__c"
        assert test_object.fields["description"].annotations["api_name"] == "Desc__c"

    def test_is_idempotent(self, test_object: ObjectType) -> None:
        annotate_api_name_and_label(test_object)
        once = test_object.clone()
        annotate_api_name_and_label(test_object)

        assert test_object.annotations == once.annotations
        for name, field in test_object.fields.items():
            assert field.annotations == once.fields[name].annotations


class TestPayloads:
    """Test conversion of elements to metadata payloads."""

    def test_to_custom_object(self, test_object: ObjectType) -> None:
        annotate_api_name_and_label(test_object)
        payload = to_custom_object(test_object).to_payload()

        assert payload["fullName"] == "TestObject__c"
        assert payload["label"] == "Test Object"
        assert payload["pluralLabel"] == "Test Objects"
        assert payload["deploymentStatus"] == "Deployed"
        assert payload["sharingModel"] == "ReadWrite"
        assert payload["nameField"] == {"type": "Text", "label": "Test Object Name"}
        assert [f["fullName"] for f in payload["fields"]] == [
            "Description__c",
            "IsDone__c",
        ]

    def test_to_custom_field_with_object_name(self, test_object: ObjectType) -> None:
        annotate_api_name_and_label(test_object)
        field = to_custom_field(test_object.fields["description"], "TestObject__c")

        assert field.full_name == "TestObject__c.Description__c"
        assert field.type == "string"
        assert field.label == "Description"
        assert field.required is False

    def test_to_custom_field_with_picklist(self) -> None:
        element = ObjectType(
            TypeID("salesforce", "picklist"),
            annotations={
                "api_name": "Status__c",
                "label": "Status",
                "required": True,
                "values": ["Open", "Closed"],
            },
        )
        payload = to_custom_field(element).to_payload()

        assert payload["required"] is True
        assert payload["picklistValues"] == [
            {"fullName": "Open", "default": False},
            {"fullName": "Closed", "default": False},
        ]
