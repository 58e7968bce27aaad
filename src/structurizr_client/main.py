#!/usr/bin/env python3
"""Command-line entry point for the Structurizr workspace client.

Configuration comes from the environment (``STRUCTURIZR_HOST``,
``STRUCTURIZR_ADMIN_API_KEY``, ``STRUCTURIZR_TLS_INSECURE``,
``STRUCTURIZR_TIMEOUT``, ``STRUCTURIZR_CLI_DIR``), optionally loaded from a
``.env`` file in the current directory.

Usage:
    structurizr-client list
    structurizr-client create --source workspace.dsl --passphrase secret
    structurizr-client delete 42
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from dotenv import load_dotenv

from .cancellation import CancelToken
from .config import CLIConfig, ClientConfig, ConfigurationError
from .exceptions import RollbackFailedError, StructurizrClientError
from .factory import create_provisioner, create_workspaces_client
from .logging_config import configure_logging
from .services import parse_workspace_id

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structurizr-client",
        description="Manage workspaces on a Structurizr server",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--timeout", type=float, default=None, help="Overall deadline in seconds")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List all workspaces")

    create = subparsers.add_parser("create", help="Create a workspace, optionally pushing content into it")
    create.add_argument("--source", default=None, help="DSL/JSON file to push into the new workspace")
    create.add_argument("--passphrase", default="", help="Client-side encryption passphrase")

    delete = subparsers.add_parser("delete", help="Delete a workspace")
    delete.add_argument("id", help="Workspace id")
    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def run(args: argparse.Namespace) -> int:
    config = ClientConfig.from_environment()
    cancel_token = CancelToken(timeout=args.timeout) if args.timeout else None

    if args.command == "list":
        client = create_workspaces_client(config)
        try:
            workspaces = client.list_workspaces(cancel_token=cancel_token)
        finally:
            client.close()
        _print_json(workspaces.model_dump(mode="json"))
        return 0

    cli_config = CLIConfig.from_environment() if getattr(args, "source", None) else None
    provisioner = create_provisioner(config, cli_config=cli_config)

    if args.command == "create":
        result = provisioner.provision(source=args.source, passphrase=args.passphrase, cancel_token=cancel_token)
        _print_json({"state": result.state.value, "workspace": result.workspace.model_dump(mode="json")})
        return 0

    response = provisioner.delete(parse_workspace_id(args.id), cancel_token=cancel_token)
    _print_json(response.model_dump(mode="json"))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Load .env from the current working directory for local use
    load_dotenv()
    configure_logging(args.log_level)

    try:
        return run(args)
    except RollbackFailedError as exc:
        logger.error("Workspace %s may have been left behind without content", exc.workspace_id)
        print(str(exc), file=sys.stderr)
        return 2
    except (StructurizrClientError, ConfigurationError) as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
