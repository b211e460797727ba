"""CLI command implementations for metasync.

This adapter maps CLI commands (discover, add, update, remove) to
MetadataAdapterPort operations. It handles reading element definitions
from JSON files, formatting results and error reporting.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from metasync.core.elements import ObjectType, element_from_dict, element_to_dict
from metasync.core.errors import ApiNameMismatchError, SaveFailedError
from metasync.core.ports import MetadataAdapterPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to MetadataAdapterPort.

    Every command returns a result dictionary with a "status" of
    "success" or "error" instead of raising on expected failures.
    """

    def __init__(self, adapter: MetadataAdapterPort):
        """Initialize the CLI command handler.

        Args:
            adapter: MetadataAdapterPort implementation to execute commands.
        """
        self.adapter = adapter

    async def discover(self, output_format: str = "json") -> dict[str, Any]:
        """Discover all elements.

        Args:
            output_format: 'json' for element dictionaries, 'text' for a
                one-line-per-element summary.
        """
        elements = await self.adapter.discover()

        if output_format == "json":
            data: Any = [element_to_dict(element) for element in elements]
        elif output_format == "text":
            data = self._format_elements_as_text(elements)
        else:
            return {
                "status": "error",
                "operation": "discover",
                "message": f"Unsupported format: {output_format}",
            }

        return {
            "status": "success",
            "operation": "discover",
            "count": len(elements),
            "data": data,
        }

    async def add(self, element_path: str) -> dict[str, Any]:
        """Create the object defined in a JSON file."""
        try:
            element = await self._load_object(element_path)
            added = await self.adapter.add(element)
        except (ValueError, SaveFailedError) as e:
            logger.error(f"Failed to add element: {e}")
            return {"status": "error", "operation": "add", "message": str(e)}

        return {
            "status": "success",
            "operation": "add",
            "data": element_to_dict(added),
        }

    async def update(self, prev_path: str, new_path: str) -> dict[str, Any]:
        """Reconcile the object from one JSON definition to another."""
        try:
            prev_element, new_element = await asyncio.gather(
                self._load_object(prev_path),
                self._load_object(new_path),
            )
            updated = await self.adapter.update(prev_element, new_element)
        except ApiNameMismatchError as e:
            logger.error(f"Refusing to update element: {e}")
            return {"status": "error", "operation": "update", "message": str(e)}
        except (ValueError, SaveFailedError) as e:
            logger.error(f"Failed to update element: {e}")
            return {"status": "error", "operation": "update", "message": str(e)}

        return {
            "status": "success",
            "operation": "update",
            "data": element_to_dict(updated),
        }

    async def remove(self, element_path: str) -> dict[str, Any]:
        """Delete the object defined in a JSON file."""
        try:
            element = await self._load_object(element_path)
            await self.adapter.remove(element)
        except (ValueError, SaveFailedError) as e:
            logger.error(f"Failed to remove element: {e}")
            return {"status": "error", "operation": "remove", "message": str(e)}

        return {
            "status": "success",
            "operation": "remove",
            "message": f"Removed {element.type_id.name}",
        }

    async def _load_object(self, path: str) -> ObjectType:
        """Read an object element definition from a JSON file.

        Raises:
            ValueError: If the file is unreadable, not JSON, or not an object type.
        """
        try:
            text = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
            data = json.loads(text)
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot read element from {path}: {e}") from e

        element = element_from_dict(data)
        if not isinstance(element, ObjectType):
            raise ValueError(f"Element in {path} is not an object type")
        return element

    def _format_elements_as_text(self, elements: list[Any]) -> str:
        lines = []
        for element in elements:
            fields = getattr(element, "fields", {})
            lines.append(f"{element.type_id.full_name} ({len(fields)} fields)")
        return "\n".join(lines)


async def run_command(
    adapter: MetadataAdapterPort,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        adapter: MetadataAdapterPort implementation.
        command: Command name ('discover', 'add', 'update', 'remove').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized.
    """
    handler = CLICommandHandler(adapter)

    if command == "discover":
        return await handler.discover(args.get("format", "json"))

    elif command == "add":
        return await handler.add(args["element"])

    elif command == "update":
        return await handler.update(args["prev"], args["new"])

    elif command == "remove":
        return await handler.remove(args["element"])

    else:
        raise ValueError(f"Unknown command: {command}")
