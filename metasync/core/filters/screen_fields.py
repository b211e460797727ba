"""Reduce nested field definitions to their ids.

Jira returns screen tab fields as full objects. Only the ids carry
configuration, so both the type and its instances are rewritten to hold
a plain list of id strings.
"""

import json
import logging
from collections.abc import Sequence

from ..elements import (
    BuiltinTypes,
    Element,
    InstanceElement,
    ListType,
    ObjectType,
)

logger = logging.getLogger(__name__)


def convert_fields(
    elements: Sequence[Element],
    type_name: str,
    fields_field_name: str,
) -> None:
    """Rewrite ``fields_field_name`` of ``type_name`` to a list of ids in place.

    Items without an id are dropped with a warning. A missing type is
    logged but instances are still rewritten.
    """
    object_type = next(
        (
            element
            for element in elements
            if isinstance(element, ObjectType) and element.type_id.name == type_name
        ),
        None,
    )
    if object_type is None:
        logger.warning(f"{type_name} type was not found")
    else:
        object_type.fields[fields_field_name] = ListType(BuiltinTypes.STRING)

    for instance in elements:
        if not isinstance(instance, InstanceElement) or instance.type_name != type_name:
            continue
        items = instance.value.get(fields_field_name)
        if items is None:
            continue
        ids = []
        for item in items:
            if item.get("id") is None:
                logger.warning(
                    f"Received {fields_field_name} item without id "
                    f"{json.dumps(item, default=str)} in instance {instance.full_name}"
                )
                continue
            ids.append(item["id"])
        instance.value[fields_field_name] = ids
