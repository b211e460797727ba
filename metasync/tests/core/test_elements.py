"""Unit tests for the typed element model."""

import pytest

from metasync.core.elements import (
    BuiltinTypes,
    InstanceElement,
    ListType,
    ObjectType,
    PrimitiveType,
    PrimitiveTypes,
    Type,
    TypeID,
    TypesRegistry,
    element_from_dict,
    element_to_dict,
    is_instance_element,
    is_object_type,
)


@pytest.fixture
def account() -> ObjectType:
    """Create an object type with two fields."""
    return ObjectType(
        TypeID("salesforce", "Account"),
        fields={
            "name": BuiltinTypes.STRING.clone(),
            "is_active": BuiltinTypes.BOOLEAN.clone(),
        },
        annotations={"api_name": "Account"},
    )


class TestTypeID:
    """Test type identifiers."""

    def test_full_name_includes_adapter(self) -> None:
        assert TypeID("salesforce", "Account").full_name == "salesforce.Account"

    def test_full_name_of_builtin(self) -> None:
        assert TypeID("", "string").full_name == "string"

    def test_type_ids_are_hashable_values(self) -> None:
        assert {TypeID("a", "b"), TypeID("a", "b")} == {TypeID("a", "b")}


class TestTypes:
    """Test annotation and cloning of types."""

    def test_annotate_merges_values(self) -> None:
        element = Type(TypeID("x", "y"), annotations={"label": "Y"})
        element.annotate({"required": True})
        assert element.annotations == {"label": "Y", "required": True}

    def test_clone_shares_no_mutable_state(self, account: ObjectType) -> None:
        copy = account.clone()
        copy.annotate({"api_name": "Other"})
        copy.fields["name"].annotate({"label": "Name"})
        copy.fields["extra"] = BuiltinTypes.NUMBER.clone()

        assert account.annotations["api_name"] == "Account"
        assert account.fields["name"].annotations == {}
        assert "extra" not in account.fields

    def test_builtin_clone_does_not_touch_builtin(self) -> None:
        copy = BuiltinTypes.STRING.clone()
        copy.annotate({"label": "x"})
        assert BuiltinTypes.STRING.annotations == {}

    def test_object_primitive(self, account: ObjectType) -> None:
        assert account.primitive == PrimitiveTypes.OBJECT

    def test_get_fields_not_in_other(self, account: ObjectType) -> None:
        other = ObjectType(
            TypeID("salesforce", "Account"),
            fields={"name": BuiltinTypes.STRING, "email": BuiltinTypes.STRING},
        )
        assert account.get_fields_not_in_other(other) == ["is_active"]
        assert other.get_fields_not_in_other(account) == ["email"]

    def test_list_type_name(self) -> None:
        list_type = ListType(BuiltinTypes.NUMBER)
        assert list_type.type_id == TypeID("", "list<number>")
        assert list_type.element_type is BuiltinTypes.NUMBER


class TestInstanceElement:
    """Test instance naming."""

    def test_names(self) -> None:
        automation = ObjectType(TypeID("zendesk", "automation"))
        instance = InstanceElement("close_tickets", automation, {"id": 1})

        assert instance.type_name == "automation"
        assert instance.full_name == "zendesk.automation.instance.close_tickets"
        assert is_instance_element(instance)
        assert not is_object_type(instance)


class TestTypesRegistry:
    """Test lookup-or-create of canonical types."""

    def test_returns_same_instance_for_same_id(self) -> None:
        registry = TypesRegistry()
        first = registry.get_type(TypeID("salesforce", "Account"))
        second = registry.get_type(TypeID("salesforce", "Account"))

        assert first is second
        assert len(registry) == 1

    def test_creates_object_by_default(self) -> None:
        registry = TypesRegistry()
        assert isinstance(registry.get_type(TypeID("salesforce", "Account")), ObjectType)

    def test_creates_primitive_when_asked(self) -> None:
        registry = TypesRegistry()
        created = registry.get_type(TypeID("", "number"), PrimitiveTypes.NUMBER)

        assert isinstance(created, PrimitiveType)
        assert created.primitive == PrimitiveTypes.NUMBER

    def test_first_registration_wins(self) -> None:
        registry = TypesRegistry()
        registry.get_type(TypeID("", "number"), PrimitiveTypes.NUMBER)
        again = registry.get_type(TypeID("", "number"))
        assert isinstance(again, PrimitiveType)

    def test_separate_registries_do_not_share_types(self) -> None:
        type_id = TypeID("salesforce", "Account")
        first = TypesRegistry()
        first.get_type(type_id)
        second = TypesRegistry()

        assert first.has_type(type_id)
        assert not second.has_type(type_id)


class TestSerialization:
    """Test conversion of elements to and from dictionaries."""

    def test_to_dict(self, account: ObjectType) -> None:
        data = element_to_dict(account)

        assert data["adapter"] == "salesforce"
        assert data["name"] == "Account"
        assert data["primitive"] == "object"
        assert data["annotations"] == {"api_name": "Account"}
        assert data["fields"]["is_active"]["primitive"] == "boolean"

    def test_from_dict_builds_object_with_fields(self) -> None:
        element = element_from_dict(
            {
                "adapter": "salesforce",
                "name": "test_object",
                "fields": {
                    "description": {"name": "string", "primitive": "string"},
                    "tags": {"list_of": {"name": "string", "primitive": "string"}},
                },
            }
        )

        assert isinstance(element, ObjectType)
        assert element.type_id == TypeID("salesforce", "test_object")
        assert isinstance(element.fields["description"], PrimitiveType)
        assert isinstance(element.fields["tags"], ListType)

    def test_from_dict_requires_name(self) -> None:
        with pytest.raises(ValueError, match="must have a name"):
            element_from_dict({"adapter": "salesforce"})

    def test_from_dict_rejects_unknown_primitive(self) -> None:
        with pytest.raises(ValueError, match="Unknown primitive"):
            element_from_dict({"name": "x", "primitive": "date"})
