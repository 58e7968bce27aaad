"""Factory functions wiring configuration into clients and services."""

import logging
from typing import Optional

import requests

from .auth import Clock, build_auth
from .clients import CommandExecutor, StructurizrCLI, Transport, WorkspacesClient
from .config import CLIConfig, ClientConfig
from .services import WorkspaceProvisioner

logger = logging.getLogger(__name__)


def create_workspaces_client(
    config: ClientConfig,
    key: Optional[str] = None,
    secret: Optional[str] = None,
    clock: Optional[Clock] = None,
    session: Optional[requests.Session] = None,
) -> WorkspacesClient:
    """Create a workspace client for ``config``.

    The admin API key from ``config`` is used unless a workspace ``key`` and
    ``secret`` are given, in which case requests are HMAC-signed.

    Raises:
        ConfigValidationError: If ``config`` is invalid
        AuthConfigError: If the selected strategy is missing a credential
    """
    config.validate_or_raise(require_admin_key=key is None and secret is None)
    auth = build_auth(config, key=key, secret=secret, clock=clock)
    logger.debug("Creating workspace client for %s with %r", config.base_url, auth)
    return WorkspacesClient(Transport(config, auth, session=session))


def create_provisioner(
    config: ClientConfig,
    cli_config: Optional[CLIConfig] = None,
    executor: Optional[CommandExecutor] = None,
    session: Optional[requests.Session] = None,
) -> WorkspaceProvisioner:
    """Create a provisioner; content pushes are available only with ``cli_config``."""
    api = create_workspaces_client(config, session=session)

    pusher = None
    if cli_config is not None:
        cli_config.validate_or_raise()
        pusher = StructurizrCLI(cli_config, executor=executor)

    return WorkspaceProvisioner(api, pusher)
