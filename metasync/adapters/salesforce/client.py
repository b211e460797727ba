"""Salesforce API client.

Implements SalesforceClientPort on top of httpx: the REST API for data
object descriptions, the metadata SOAP API for everything else, and the
partner SOAP API for username/password login.

Vendor responses are normalized into core wire models. Every write call
returns a list of SaveResult regardless of how many components were sent.
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import Any

import httpx

from metasync.core.models import (
    FileProperties,
    MetadataInfo,
    MetadataTypeInfo,
    PicklistEntry,
    SaveError,
    SaveResult,
    SObjectField,
    ValueTypeField,
    as_bool,
)
from metasync.core.ports import SalesforceClientPort

from .soap import (
    METADATA_NS,
    PARTNER_NS,
    append_value,
    as_list,
    build_envelope,
    operation,
    parse_response,
)

logger = logging.getLogger(__name__)

LOGIN_URL = "https://login.salesforce.com"
SANDBOX_LOGIN_URL = "https://test.salesforce.com"


class SalesforceClient(SalesforceClientPort):
    """httpx-backed Salesforce client.

    Call login() before any other method. The client is safe to use
    concurrently from multiple tasks once logged in.
    """

    def __init__(
        self,
        username: str,
        password: str,
        security_token: str = "",
        sandbox: bool = False,
        api_version: str = "47.0",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            username: Salesforce username.
            password: Salesforce password.
            security_token: Security token appended to the password on login.
            sandbox: Log in through the sandbox login host.
            api_version: API version used for every endpoint (e.g. "47.0").
            timeout: Timeout in seconds of each HTTP request.
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ValueError: If username or password is empty.
        """
        if not username or not password:
            raise ValueError("Salesforce username and password must be provided")
        self.username = username
        self.password = password
        self.security_token = security_token
        self.login_url = SANDBOX_LOGIN_URL if sandbox else LOGIN_URL
        self.api_version = api_version
        self.session_id: str | None = None
        self.instance_url: str | None = None
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "SalesforceClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def login(self) -> None:
        """Open a session with the partner SOAP login call.

        Raises:
            SalesforceApiError: If the credentials are rejected.
            httpx.HTTPError: If the login host is unreachable.
        """
        body = operation("login", PARTNER_NS)
        append_value(body, "username", self.username, PARTNER_NS)
        append_value(body, "password", self.password + self.security_token, PARTNER_NS)

        results = await self._post_soap(
            f"{self.login_url}/services/Soap/u/{self.api_version}",
            build_envelope(body, PARTNER_NS),
            "login",
        )
        result = results[0]
        self.session_id = result["sessionId"]
        server_url = httpx.URL(result["serverUrl"])
        self.instance_url = f"{server_url.scheme}://{server_url.host}"
        logger.info(f"Logged in to Salesforce instance {self.instance_url}")

    # ------------------------------------------------------------------
    # REST API
    # ------------------------------------------------------------------

    async def list_sobjects(self) -> list[str]:
        data = await self._get_rest("sobjects/")
        return [sobject["name"] for sobject in data.get("sobjects", [])]

    async def discover_sobject(self, object_name: str) -> list[SObjectField]:
        data = await self._get_rest(f"sobjects/{object_name}/describe/")
        return [self._parse_sobject_field(field) for field in data.get("fields", [])]

    # ------------------------------------------------------------------
    # Metadata API
    # ------------------------------------------------------------------

    async def list_metadata_types(self) -> list[MetadataTypeInfo]:
        body = operation("describeMetadata")
        append_value(body, "asOfVersion", self.api_version)
        results = await self._metadata_call(body)
        if not results:
            return []
        return [
            MetadataTypeInfo(
                xml_name=info["xmlName"],
                directory_name=info.get("directoryName") or "",
                in_folder=as_bool(info.get("inFolder", False)),
                child_xml_names=tuple(as_list(info.get("childXmlNames"))),
            )
            for info in as_list(results[0].get("metadataObjects"))
        ]

    async def discover_metadata_object(self, type_name: str) -> list[ValueTypeField]:
        body = operation("describeValueType")
        append_value(body, "type", f"{{{METADATA_NS}}}{type_name}")
        results = await self._metadata_call(body)
        if not results:
            return []
        return [
            ValueTypeField(
                name=field["name"],
                soap_type=field.get("soapType") or "",
                value_required=as_bool(field.get("valueRequired", False)),
                picklist_values=self._parse_picklist(field.get("picklistValues")),
            )
            for field in as_list(results[0].get("valueTypeFields"))
        ]

    async def list_metadata_objects(self, type_name: str) -> list[FileProperties]:
        body = operation("listMetadata")
        append_value(body, "queries", {"type": type_name})
        append_value(body, "asOfVersion", self.api_version)
        results = await self._metadata_call(body)
        return [
            FileProperties(
                full_name=result["fullName"],
                type=result.get("type") or type_name,
                id=result.get("id") or "",
            )
            for result in results
        ]

    async def read_metadata(self, type_name: str, full_name: str) -> dict[str, Any]:
        body = operation("readMetadata")
        append_value(body, "type", type_name)
        append_value(body, "fullNames", full_name)
        results = await self._metadata_call(body)
        result = results[0] if results else None
        # An unknown component comes back as an empty result element
        records = as_list(result.get("records")) if isinstance(result, dict) else []
        if not records:
            return {}
        return records[0]

    async def create(
        self, type_name: str, metadata: MetadataInfo | Sequence[MetadataInfo]
    ) -> list[SaveResult]:
        return await self._save("createMetadata", type_name, metadata)

    async def update(
        self, type_name: str, metadata: MetadataInfo | Sequence[MetadataInfo]
    ) -> list[SaveResult]:
        return await self._save("updateMetadata", type_name, metadata)

    async def delete(
        self, type_name: str, full_names: str | Sequence[str]
    ) -> list[SaveResult]:
        names = [full_names] if isinstance(full_names, str) else list(full_names)
        body = operation("deleteMetadata")
        append_value(body, "type", type_name)
        append_value(body, "fullNames", names)
        logger.debug(f"Deleting {len(names)} {type_name} components")
        results = await self._metadata_call(body)
        return [self._parse_save_result(result) for result in results]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _save(
        self,
        operation_name: str,
        type_name: str,
        metadata: MetadataInfo | Sequence[MetadataInfo],
    ) -> list[SaveResult]:
        items = [metadata] if isinstance(metadata, MetadataInfo) else list(metadata)
        body = operation(operation_name)
        for item in items:
            append_value(body, "metadata", item.to_payload(), xsi_type=type_name)
        logger.debug(f"{operation_name}: {len(items)} {type_name} components")
        results = await self._metadata_call(body)
        return [self._parse_save_result(result) for result in results]

    def _require_session(self) -> tuple[str, str]:
        if self.session_id is None or self.instance_url is None:
            raise RuntimeError("Not logged in. Call login() first.")
        return self.session_id, self.instance_url

    async def _get_rest(self, path: str) -> dict[str, Any]:
        session_id, instance_url = self._require_session()
        try:
            response = await self.client.get(
                f"{instance_url}/services/data/v{self.api_version}/{path}",
                headers={"Authorization": f"Bearer {session_id}"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Salesforce REST call {path} failed: {e}")
            raise

    async def _metadata_call(self, body: ET.Element) -> list[Any]:
        session_id, instance_url = self._require_session()
        return await self._post_soap(
            f"{instance_url}/services/Soap/m/{self.api_version}",
            build_envelope(body, METADATA_NS, session_id),
            body.tag.rsplit("}", 1)[-1],
        )

    async def _post_soap(self, url: str, envelope: str, action: str) -> list[Any]:
        try:
            response = await self.client.post(
                url,
                content=envelope.encode("utf-8"),
                headers={
                    "Content-Type": "text/xml; charset=UTF-8",
                    "SOAPAction": action,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Salesforce SOAP call {action} failed: {e}")
            raise

        # Faults are returned with a 500 status and a parseable body
        if response.status_code >= 400 and "Fault" not in response.text:
            response.raise_for_status()
        return parse_response(response.text)

    @staticmethod
    def _parse_picklist(raw: Any) -> tuple[PicklistEntry, ...]:
        return tuple(
            PicklistEntry(
                value=entry.get("value") or "",
                default_value=as_bool(entry.get("defaultValue", False)),
                active=as_bool(entry.get("active", True)),
            )
            for entry in as_list(raw)
        )

    @classmethod
    def _parse_sobject_field(cls, field: dict[str, Any]) -> SObjectField:
        return SObjectField(
            name=field["name"],
            type=field.get("type") or "",
            label=field.get("label") or "",
            nillable=as_bool(field.get("nillable", True)),
            default_value=field.get("defaultValue"),
            picklist_values=cls._parse_picklist(field.get("picklistValues")),
            restricted_picklist=as_bool(field.get("restrictedPicklist", False)),
        )

    @staticmethod
    def _parse_save_result(result: dict[str, Any]) -> SaveResult:
        return SaveResult(
            full_name=result.get("fullName") or "",
            success=as_bool(result.get("success", False)),
            errors=tuple(
                SaveError(
                    message=error.get("message") or "",
                    status_code=error.get("statusCode") or "",
                    fields=tuple(as_list(error.get("fields"))),
                )
                for error in as_list(result.get("errors"))
            ),
        )
