"""Port interfaces for metasync.

These abstract base classes define the boundaries between core
reconciliation logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - SalesforceClientPort: Describe, read and write Salesforce metadata
   - ZendeskClientPort: Write Zendesk resources

2. **Driving Ports** (adapters/external systems call into core)
   - MetadataAdapterPort: Discover, add, update and remove elements
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .elements import ObjectType, Type
from .models import (
    FileProperties,
    MetadataInfo,
    MetadataTypeInfo,
    SaveResult,
    SObjectField,
    ValueTypeField,
)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class SalesforceClientPort(ABC):
    """Port for talking to the Salesforce REST and metadata APIs.

    Adapters implementing this port normalize vendor responses into the
    core's wire models. Write operations accept either a single item or a
    sequence and always return a list of SaveResult, one per component,
    so callers never deal with the vendor's single-vs-array result shape.

    No retry policy is expected: a failed network call raises and aborts
    the calling operation.
    """

    @abstractmethod
    async def list_sobjects(self) -> list[str]:
        """Return the names of all data objects in the org.

        Raises:
            Exception: If the API is unreachable or returns an error.
        """

    @abstractmethod
    async def discover_sobject(self, object_name: str) -> list[SObjectField]:
        """Return the field descriptors of a data object.

        Args:
            object_name: API name of the object (e.g. "Account").

        Raises:
            Exception: If the object doesn't exist or the API is unreachable.
        """

    @abstractmethod
    async def list_metadata_types(self) -> list[MetadataTypeInfo]:
        """Return every metadata type the org supports.

        Raises:
            Exception: If the API is unreachable.
        """

    @abstractmethod
    async def discover_metadata_object(self, type_name: str) -> list[ValueTypeField]:
        """Return the field descriptors of a metadata type.

        Args:
            type_name: Metadata type name (e.g. "Profile").

        Returns:
            Field descriptors, empty if the type has none.

        Raises:
            Exception: If the API is unreachable.
        """

    @abstractmethod
    async def list_metadata_objects(self, type_name: str) -> list[FileProperties]:
        """Return all components of a metadata type.

        Raises:
            Exception: If the API is unreachable.
        """

    @abstractmethod
    async def read_metadata(self, type_name: str, full_name: str) -> dict[str, Any]:
        """Read one metadata component.

        Args:
            type_name: Metadata type name.
            full_name: Full name of the component.

        Returns:
            The component record as a dictionary of vendor field names.

        Raises:
            Exception: If the API is unreachable.
        """

    @abstractmethod
    async def create(
        self, type_name: str, metadata: MetadataInfo | Sequence[MetadataInfo]
    ) -> list[SaveResult]:
        """Create one or more metadata components.

        Returns:
            One SaveResult per component. Failed components carry errors;
            they do not raise.
        """

    @abstractmethod
    async def update(
        self, type_name: str, metadata: MetadataInfo | Sequence[MetadataInfo]
    ) -> list[SaveResult]:
        """Update one or more metadata components.

        Returns:
            One SaveResult per component.
        """

    @abstractmethod
    async def delete(
        self, type_name: str, full_names: str | Sequence[str]
    ) -> list[SaveResult]:
        """Delete one or more metadata components by full name.

        Returns:
            One SaveResult per component.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release any network resources held by the client."""


class ZendeskClientPort(ABC):
    """Port for writing Zendesk resources."""

    @abstractmethod
    async def put(self, url: str, data: dict[str, Any]) -> dict[str, Any]:
        """Send a PUT request and return the decoded response body.

        Args:
            url: Path relative to the account's API root
                (e.g. "/api/v2/automations/update_many").
            data: JSON body.

        Raises:
            Exception: If the API is unreachable or rejects the request.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release any network resources held by the client."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class MetadataAdapterPort(ABC):
    """Port for configuration-as-code operations on a service's metadata.

    Driving port: the CLI invokes these methods. Implementations live in
    the core (adapter.py).
    """

    @abstractmethod
    async def discover(self) -> list[Type]:
        """Discover every type element in the connected account.

        Raises:
            Exception: If any underlying call fails. Partial results are
                never returned.
        """

    @abstractmethod
    async def add(self, element: ObjectType) -> ObjectType:
        """Create a new object type remotely.

        Args:
            element: The object to create. It is not modified.

        Returns:
            A normalized copy carrying api name and label annotations.

        Raises:
            SaveFailedError: If the remote call reports errors.
        """

    @abstractmethod
    async def update(
        self, prev_element: ObjectType, new_element: ObjectType
    ) -> ObjectType:
        """Reconcile the remote object from prev_element to new_element.

        Returns:
            A normalized copy of new_element.

        Raises:
            ApiNameMismatchError: If the two versions have different api names.
            SaveFailedError: If a remote call reports errors.
        """

    @abstractmethod
    async def remove(self, element: ObjectType) -> None:
        """Delete an object type remotely.

        Raises:
            SaveFailedError: If the remote call reports errors.
        """
