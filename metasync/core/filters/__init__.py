"""Element filters run over fetched elements.

- screen_fields: Jira screen field references reduced to their ids
- reorder: Zendesk ordered resources captured as a single order element
"""

from .reorder import ReorderFilter, automation_order_filter
from .screen_fields import convert_fields

__all__ = ["ReorderFilter", "automation_order_filter", "convert_fields"]
