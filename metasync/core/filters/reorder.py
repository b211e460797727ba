"""Capture the order of positioned resources in a dedicated element.

Zendesk resources such as automations carry a ``position``. Positions of
individual instances are hard to review and deploy one by one, so the
fetch step adds a single ``<type>_order`` instance listing the ids in
their effective order, and deployment sends all positions at once.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..elements import (
    BuiltinTypes,
    Element,
    InstanceElement,
    ListType,
    ObjectType,
    TypeID,
)
from ..ports import ZendeskClientPort

logger = logging.getLogger(__name__)

ZENDESK = "zendesk"
ORDER_INSTANCE_NAME = "_config"
ORDER_FIELD_NAME = "ids"

SortKey = Callable[[InstanceElement], Any]


class ReorderFilter:
    """Builds and deploys the order element of one resource type."""

    def __init__(
        self,
        type_name: str,
        order_field_name: str,
        sort_keys: Sequence[SortKey],
        resource_name: str,
        adapter: str = ZENDESK,
    ):
        """Initialize the filter.

        Args:
            type_name: Type of the ordered instances (e.g. "automation").
            order_field_name: Field of the order instance holding the ids.
            sort_keys: Keys applied in turn to compute the effective order.
            resource_name: API collection used for deployment
                (e.g. "automations").
            adapter: Adapter name of the generated type.
        """
        self.type_name = type_name
        self.order_field_name = order_field_name
        self.sort_keys = tuple(sort_keys)
        self.resource_name = resource_name
        self.adapter = adapter

    @property
    def order_type_name(self) -> str:
        return f"{self.type_name}_order"

    def _sort_key(self, instance: InstanceElement) -> tuple[Any, ...]:
        return tuple(key(instance) for key in self.sort_keys)

    def on_fetch(self, elements: list[Element]) -> None:
        """Append the order type and its single instance to ``elements``."""
        instances = sorted(
            (
                element
                for element in elements
                if isinstance(element, InstanceElement)
                and element.type_name == self.type_name
            ),
            key=self._sort_key,
        )

        ids = []
        for instance in instances:
            if instance.value.get("id") is None:
                logger.warning(f"Skipping {instance.full_name} in order: no id")
                continue
            ids.append(instance.value["id"])

        order_type = ObjectType(
            TypeID(self.adapter, self.order_type_name),
            fields={self.order_field_name: ListType(BuiltinTypes.NUMBER)},
        )
        order_instance = InstanceElement(
            ORDER_INSTANCE_NAME,
            order_type,
            {self.order_field_name: ids},
        )
        elements.extend([order_type, order_instance])
        logger.debug(f"Ordered {len(ids)} {self.type_name} instances")

    async def deploy(
        self, client: ZendeskClientPort, order_instance: InstanceElement
    ) -> dict[str, Any]:
        """Send the positions recorded in ``order_instance``.

        Positions are 1-based, following the order of the ids.

        Raises:
            ValueError: If the instance is not an order of this filter's type.
            Exception: If the client call fails.
        """
        if order_instance.type_name != self.order_type_name:
            raise ValueError(
                f"Expected a {self.order_type_name} instance, "
                f"got {order_instance.type_name}"
            )
        ids = order_instance.value.get(self.order_field_name) or []
        payload = {
            self.resource_name: [
                {"id": item_id, "position": position}
                for position, item_id in enumerate(ids, start=1)
            ]
        }
        return await client.put(f"/api/v2/{self.resource_name}/update_many", payload)


def value_key(field_name: str, fallback: Any) -> SortKey:
    """Sort key on one instance value. Missing and None values sort last."""

    def _key(instance: InstanceElement) -> tuple[bool, Any]:
        value = instance.value.get(field_name)
        return (value is None, fallback if value is None else value)

    return _key


def automation_order_filter() -> ReorderFilter:
    """Order automations: active ones first, then by position, then by title."""
    return ReorderFilter(
        type_name="automation",
        order_field_name=ORDER_FIELD_NAME,
        sort_keys=[
            lambda instance: not instance.value.get("active", False),
            value_key("position", 0),
            value_key("title", ""),
        ],
        resource_name="automations",
    )
