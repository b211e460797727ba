"""Salesforce adapter: implements MetadataAdapterPort.

This is the core reconciliation logic. It discovers object and metadata
types from an org, and creates, updates and removes custom objects by
issuing the minimal set of metadata calls, granting the system
administrator profile access to every field it creates.

All vendor calls go through SalesforceClientPort; no adapter-specific
transport logic lives here.
"""

import asyncio
import logging
from collections.abc import Sequence

from . import constants
from .elements import ObjectType, Type, TypesRegistry
from .errors import ApiNameMismatchError, raise_for_errors
from .models import FieldPermissions, ProfileInfo, SaveResult
from .naming import field_full_name, to_internal_name
from .ports import MetadataAdapterPort, SalesforceClientPort
from .type_mapper import (
    TypeMapper,
    annotate_api_name_and_label,
    api_name,
    to_custom_field,
    to_custom_object,
)

logger = logging.getLogger(__name__)

# Object.Field -> profile name -> permissions
PermissionIndex = dict[str, dict[str, FieldPermissions]]


class SalesforceAdapter(MetadataAdapterPort):
    """Core implementation of MetadataAdapterPort for Salesforce.

    The type registry is owned by the adapter instance, so two adapters
    never share discovered types.
    """

    def __init__(
        self,
        client: SalesforceClientPort,
        registry: TypesRegistry | None = None,
    ):
        """Initialize the adapter.

        Args:
            client: SalesforceClientPort implementation for all remote calls.
            registry: Registry of canonical types used during discovery.
                A fresh one is created when omitted.
        """
        self.client = client
        self.types = registry if registry is not None else TypesRegistry()
        self.mapper = TypeMapper(self.types)

    async def discover(self) -> list[Type]:
        """Discover data objects and metadata types.

        Both passes run concurrently. Data objects come first in the result.
        """
        sobjects, metadata_types = await asyncio.gather(
            self._discover_sobjects(),
            self._discover_metadata_types(),
        )
        logger.info(
            f"Discovered {len(sobjects)} objects and "
            f"{len(metadata_types)} metadata types"
        )
        return [*sobjects, *metadata_types]

    async def add(self, element: ObjectType) -> ObjectType:
        """Create a custom object with its fields and admin permissions.

        Raises:
            SaveFailedError: If the object or its permissions fail to save.
                Permissions are not touched when the object fails.
        """
        post = element.clone()
        annotate_api_name_and_label(post)

        logger.debug(f"Creating custom object {api_name(post)}")
        result = await self.client.create(constants.CUSTOM_OBJECT, to_custom_object(post))
        raise_for_errors(result)

        permissions_result = await self._update_permissions(
            api_name(post),
            [api_name(field) for field in post.fields.values()],
        )
        raise_for_errors(permissions_result)

        logger.info(f"Created custom object {api_name(post)} with {len(post.fields)} fields")
        return post

    async def remove(self, element: ObjectType) -> None:
        """Delete a custom object by api name.

        A missing api name is derived the same way add() derives it.

        Raises:
            SaveFailedError: If the delete reports errors.
        """
        target = element.clone()
        annotate_api_name_and_label(target)

        result = await self.client.delete(constants.CUSTOM_OBJECT, api_name(target))
        raise_for_errors(result)
        logger.info(f"Removed custom object {api_name(target)}")

    async def update(
        self, prev_element: ObjectType, new_element: ObjectType
    ) -> ObjectType:
        """Add and delete custom fields so the object matches new_element.

        Fields present in both versions are left untouched; changes to
        their attributes are not propagated.

        Raises:
            ApiNameMismatchError: If the api names differ. Raised before
                any remote call.
            SaveFailedError: If a delete, create or permission call fails.
        """
        prev = prev_element.clone()
        annotate_api_name_and_label(prev)
        post = new_element.clone()
        annotate_api_name_and_label(post)

        if api_name(post) != api_name(prev):
            raise ApiNameMismatchError(api_name(prev), api_name(post))

        removed = prev.get_fields_not_in_other(post)
        await self._delete_custom_fields(
            api_name(prev),
            [api_name(prev.fields[name]) for name in removed],
        )

        added = post.get_fields_not_in_other(prev)
        await self._create_fields(
            api_name(post),
            [post.fields[name] for name in added],
        )

        logger.info(
            f"Updated custom object {api_name(post)}: "
            f"{len(added)} fields added, {len(removed)} fields removed"
        )
        return post

    async def _create_fields(
        self, object_api_name: str, fields_to_add: Sequence[Type]
    ) -> None:
        """Create custom fields and grant admin permissions on them."""
        if not fields_to_add:
            return

        result = await self.client.create(
            constants.CUSTOM_FIELD,
            [to_custom_field(field, object_api_name) for field in fields_to_add],
        )
        raise_for_errors(result)

        permissions_result = await self._update_permissions(
            object_api_name,
            [api_name(field) for field in fields_to_add],
        )
        raise_for_errors(permissions_result)

    async def _delete_custom_fields(
        self, object_api_name: str, field_api_names: Sequence[str]
    ) -> None:
        if not field_api_names:
            return

        result = await self.client.delete(
            constants.CUSTOM_FIELD,
            [field_full_name(object_api_name, name) for name in field_api_names],
        )
        raise_for_errors(result)

    async def _update_permissions(
        self, object_api_name: str, field_api_names: Sequence[str]
    ) -> list[SaveResult]:
        """Grant the system administrator read and edit access to fields."""
        profile = ProfileInfo(
            full_name=constants.PROFILE_NAME_SYSTEM_ADMINISTRATOR,
            field_permissions=[
                FieldPermissions(
                    field=field_full_name(object_api_name, name),
                    editable=True,
                    readable=True,
                )
                for name in field_api_names
            ],
        )
        return await self.client.update(constants.METADATA_PROFILE_OBJECT, profile)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def _discover_metadata_types(self) -> list[Type]:
        type_infos = await self.client.list_metadata_types()
        return list(
            await asyncio.gather(
                *(
                    self._create_metadata_type_element(info.xml_name)
                    for info in type_infos
                    # Custom objects are discovered as data objects
                    if info.xml_name != constants.CUSTOM_OBJECT
                )
            )
        )

    async def _create_metadata_type_element(self, type_name: str) -> ObjectType:
        element = self.mapper.get_object_type(type_name)
        element.annotate({constants.API_NAME: type_name})
        fields = await self.client.discover_metadata_object(type_name)
        for field in fields:
            if field.name == constants.METADATA_OBJECT_NAME_FIELD:
                continue
            element.fields[to_internal_name(field.name)] = self.mapper.create_metadata_field(field)
        return element

    async def _discover_sobjects(self) -> list[ObjectType]:
        """Discover data objects and attach field level security.

        Permissions are fetched for all profiles at once, concurrently with
        the object descriptions, and attached once both are available.
        """

        async def _create_all() -> list[ObjectType]:
            names = await self.client.list_sobjects()
            return list(
                await asyncio.gather(
                    *(self._create_sobject_element(name) for name in names)
                )
            )

        sobjects, permissions = await asyncio.gather(
            _create_all(),
            self._discover_permissions(),
        )
        for sobject in sobjects:
            attach_field_level_security(sobject, permissions)
        return sobjects

    async def _create_sobject_element(self, object_name: str) -> ObjectType:
        element = self.mapper.get_object_type(object_name)
        element.annotate({constants.API_NAME: object_name})
        fields = await self.client.discover_sobject(object_name)
        for field in fields:
            element.fields[to_internal_name(field.name)] = self.mapper.create_sobject_field(field)
        logger.debug(f"Discovered object {object_name} with {len(fields)} fields")
        return element

    async def _discover_permissions(self) -> PermissionIndex:
        """Index every profile's field permissions by full field name."""
        profiles = await self.client.list_metadata_objects(constants.METADATA_PROFILE_OBJECT)
        payloads = await asyncio.gather(
            *(
                self.client.read_metadata(constants.METADATA_PROFILE_OBJECT, profile.full_name)
                for profile in profiles
            )
        )

        permissions: PermissionIndex = {}
        for payload in payloads:
            info = ProfileInfo.from_payload(payload)
            for permission in info.field_permissions:
                permissions.setdefault(permission.field, {})[info.full_name] = permission
        logger.debug(
            f"Indexed field permissions of {len(profiles)} profiles "
            f"for {len(permissions)} fields"
        )
        return permissions


def attach_field_level_security(
    sobject: ObjectType, permissions: PermissionIndex
) -> None:
    """Annotate each field with the permissions recorded for it.

    Fields without any recorded permission are left unannotated.
    """
    for field in sobject.fields.values():
        field_permissions = permissions.get(
            field_full_name(api_name(sobject), api_name(field))
        )
        if not field_permissions:
            continue
        field.annotations[constants.FIELD_LEVEL_SECURITY] = {
            to_internal_name(profile): {
                "editable": permission.editable,
                "readable": permission.readable,
            }
            for profile, permission in field_permissions.items()
        }
