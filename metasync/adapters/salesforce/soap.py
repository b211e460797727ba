"""SOAP envelope building and response parsing for Salesforce APIs.

Request bodies are built as ElementTree elements in the target API's
namespace and wrapped in a textual envelope. Responses are turned into
plain dictionaries: leaf text stays str and repeated child tags become
lists. Callers convert the flags they know to be booleans.
"""

import xml.etree.ElementTree as ET
from typing import Any

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
METADATA_NS = "http://soap.sforce.com/2006/04/metadata"
PARTNER_NS = "urn:partner.soap.sforce.com"


class SalesforceApiError(Exception):
    """A SOAP fault returned by a Salesforce API."""

    def __init__(self, fault_code: str, message: str):
        self.fault_code = fault_code
        self.message = message
        super().__init__(f"{fault_code}: {message}")


def build_envelope(body: ET.Element, namespace: str, session_id: str | None = None) -> str:
    """Wrap a request element in a SOAP envelope.

    Args:
        body: Operation element, with tags in ``namespace``.
        namespace: Namespace of the target API.
        session_id: Session to authenticate with; omitted for login.
    """
    header = ""
    if session_id is not None:
        session = ET.Element(f"{{{namespace}}}SessionHeader")
        ET.SubElement(session, f"{{{namespace}}}sessionId").text = session_id
        header = ET.tostring(session, encoding="unicode", default_namespace=namespace)

    body_xml = ET.tostring(body, encoding="unicode", default_namespace=namespace)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<soapenv:Envelope xmlns:soapenv="{SOAP_ENV_NS}" xmlns:xsi="{XSI_NS}">'
        f"<soapenv:Header>{header}</soapenv:Header>"
        f"<soapenv:Body>{body_xml}</soapenv:Body>"
        "</soapenv:Envelope>"
    )


def operation(name: str, namespace: str = METADATA_NS) -> ET.Element:
    """Create the root element of a SOAP operation."""
    return ET.Element(f"{{{namespace}}}{name}")


def append_value(
    parent: ET.Element,
    tag: str,
    value: Any,
    namespace: str = METADATA_NS,
    xsi_type: str | None = None,
) -> None:
    """Serialize a Python value under ``parent``.

    Dictionaries become nested elements, lists become repeated elements,
    booleans become "true"/"false" and None is skipped.
    """
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            append_value(parent, tag, item, namespace, xsi_type)
        return

    child = ET.SubElement(parent, f"{{{namespace}}}{tag}")
    if xsi_type is not None:
        child.set(f"{{{XSI_NS}}}type", xsi_type)
    if isinstance(value, dict):
        for key, item in value.items():
            append_value(child, key, item, namespace)
    elif isinstance(value, bool):
        child.text = "true" if value else "false"
    else:
        child.text = str(value)


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_value(element: ET.Element) -> Any:
    """Convert a response element into plain Python values."""
    children = list(element)
    if not children:
        if element.get(f"{{{XSI_NS}}}nil") == "true":
            return None
        return element.text or ""

    result: dict[str, Any] = {}
    for child in children:
        key = local_name(child.tag)
        value = element_to_value(child)
        if key in result:
            existing = result[key]
            if not isinstance(existing, list):
                result[key] = [existing]
            result[key].append(value)
        else:
            result[key] = value
    return result


def as_list(value: Any) -> list[Any]:
    """Normalize a value that may be missing, single or repeated."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return [value]


def parse_response(text: str) -> list[Any]:
    """Extract the ``result`` entries of a SOAP response.

    Returns:
        One converted value per ``result`` element, in document order.

    Raises:
        SalesforceApiError: If the response is a SOAP fault.
        ValueError: If the response has no body.
    """
    root = ET.fromstring(text)
    body = root.find(f"{{{SOAP_ENV_NS}}}Body")
    if body is None:
        raise ValueError("SOAP response has no Body element")

    fault = body.find(f"{{{SOAP_ENV_NS}}}Fault")
    if fault is not None:
        details = {local_name(child.tag): child.text or "" for child in fault}
        raise SalesforceApiError(
            fault_code=details.get("faultcode", ""),
            message=details.get("faultstring", ""),
        )

    response = next(iter(body), None)
    if response is None:
        return []
    return [
        element_to_value(child)
        for child in response
        if local_name(child.tag) == "result"
    ]
