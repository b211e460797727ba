"""Composition root for metasync.

This module is the ONLY location that imports both core logic and
concrete adapter implementations. All wiring of dependencies happens
here, creating a clear entry point for the application.

Module Structure:
- Command-line parsing
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Command dispatch
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from metasync.adapters.cli.commands import run_command
from metasync.adapters.salesforce.client import SalesforceClient
from metasync.config import Settings, load_settings
from metasync.core.adapter import SalesforceAdapter
from metasync.core.elements import TypesRegistry


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Commands:
        discover [--format json|text]
        add ELEMENT
        update PREV NEW
        remove ELEMENT
    """
    parser = argparse.ArgumentParser(
        prog="metasync",
        description="Discover and deploy Salesforce custom object metadata",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file with connection settings",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover = subparsers.add_parser("discover", help="Print all discovered elements")
    discover.add_argument("--format", choices=["json", "text"], default="json")

    add = subparsers.add_parser("add", help="Create a custom object")
    add.add_argument("element", help="JSON file with the object definition")

    update = subparsers.add_parser("update", help="Reconcile a custom object")
    update.add_argument("prev", help="JSON file with the deployed definition")
    update.add_argument("new", help="JSON file with the desired definition")

    remove = subparsers.add_parser("remove", help="Delete a custom object")
    remove.add_argument("element", help="JSON file with the object definition")

    return parser


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stdout carries command results
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def create_client(settings: Settings) -> SalesforceClient:
    """Instantiate the Salesforce client from settings.

    Raises:
        ValueError: If credentials are missing.
    """
    return SalesforceClient(
        username=settings.salesforce_username,
        password=settings.salesforce_password,
        security_token=settings.salesforce_token,
        sandbox=settings.salesforce_sandbox,
        api_version=settings.salesforce_api_version,
        timeout=settings.salesforce_timeout_seconds,
    )


async def bootstrap(argv: list[str] | None = None) -> dict[str, Any]:
    """Parse arguments, wire adapters, and run one command.

    Steps:
    1. Parse command line
    2. Load configuration and configure logging
    3. Instantiate and log in the Salesforce client
    4. Initialize the core adapter
    5. Run the command

    Returns:
        The command result dictionary.
    """
    # Step 1: Parse command line
    args = build_parser().parse_args(argv)

    # Step 2: Load configuration
    settings = load_settings(args.env_file)
    configure_logging(
        "DEBUG" if settings.debug else settings.log_level,
        settings.log_format,
    )
    logger = logging.getLogger(__name__)

    # Step 3: Instantiate adapters
    client = create_client(settings)
    try:
        await client.login()

        # Step 4: Initialize core services
        adapter = SalesforceAdapter(client=client, registry=TypesRegistry())

        # Step 5: Run the command
        logger.info(f"Running {args.command}")
        command_args = {
            key: value
            for key, value in vars(args).items()
            if key not in ("command", "env_file")
        }
        return await run_command(adapter, args.command, command_args)
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> None:
    """Application entry point.

    Prints the command result as JSON on stdout.

    Exit codes:
        0: Command succeeded
        1: Command failed or fatal error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        result = asyncio.run(bootstrap(argv))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(json.dumps({"status": "error", "message": str(e)}, indent=2))
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))
    if result.get("status") != "success":
        sys.exit(1)


if __name__ == "__main__":
    main()
