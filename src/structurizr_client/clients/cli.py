"""Push workspace content through the external Structurizr CLI.

The CLI is an opaque executable in a configured working directory; this module
only assembles its arguments, runs it synchronously and reports the combined
output. Key, secret and passphrase arguments are masked whenever the command is
logged.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..cancellation import CancelToken
from ..config import CLIConfig
from ..constants import API_BASE_PATH
from ..exceptions import ContentPushFailedError

logger = logging.getLogger(__name__)

_SECRET_FLAGS = {"-key", "-secret", "-passphrase"}


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of a finished command."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """Runs a command and returns its combined output."""

    def combined_output(
        self,
        name: str,
        args: Sequence[str],
        timeout: Optional[float] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> CommandResult: ...


class SubprocessExecutor:
    """:class:`CommandExecutor` backed by :mod:`subprocess`.

    Raises ``OSError`` if the executable cannot be started and
    ``subprocess.TimeoutExpired`` if ``timeout`` elapses; the process is killed
    in both the timeout and the cancellation case.
    """

    def combined_output(
        self,
        name: str,
        args: Sequence[str],
        timeout: Optional[float] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> CommandResult:
        process = subprocess.Popen(
            [name, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        unregister = cancel_token.on_cancel(process.kill) if cancel_token is not None else None
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            raise
        finally:
            if unregister is not None:
                unregister()
        return CommandResult(returncode=process.returncode, output=output or "")


DEFAULT_EXECUTOR = SubprocessExecutor()


def redact_args(args: Sequence[str]) -> List[str]:
    """Mask the values following credential flags."""
    redacted: List[str] = []
    mask_next = False
    for arg in args:
        redacted.append("***" if mask_next else arg)
        mask_next = arg in _SECRET_FLAGS
    return redacted


class StructurizrCLI:
    """Content pusher backed by ``structurizr.sh`` / ``structurizr.bat``."""

    def __init__(self, config: CLIConfig, executor: Optional[CommandExecutor] = None):
        self._config = config
        self._executor = executor or DEFAULT_EXECUTOR

    @property
    def executable(self) -> str:
        script = "structurizr.bat" if self._config.is_windows else "structurizr.sh"
        return os.path.join(self._config.working_dir or "", script)

    @property
    def api_url(self) -> str:
        return (self._config.base_url or "").rstrip("/") + API_BASE_PATH

    def push_args(self, workspace_id: int, key: str, secret: str, passphrase: str, source: str) -> List[str]:
        return [
            "push",
            "-id", str(workspace_id),
            "-key", key,
            "-secret", secret,
            "-passphrase", passphrase,
            "-workspace", source,
            "-url", self.api_url,
            "-merge", "false",
            "-archive", "true",
        ]

    def push_workspace(
        self,
        workspace_id: int,
        key: str,
        secret: str,
        passphrase: str,
        source: str,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        """Push a new version of a workspace from an existing DSL/JSON file.

        Returns:
            The combined CLI output

        Raises:
            ContentPushFailedError: The CLI could not be started, timed out,
                was cancelled or exited non-zero; ``output`` holds its output verbatim
        """
        args = self.push_args(workspace_id, key, secret, passphrase, source)
        context = {"workspace_id": workspace_id, "source": source}
        timeout = cancel_token.remaining() if cancel_token is not None else None
        logger.debug("Running Structurizr CLI: %s %s", self.executable, " ".join(redact_args(args)))

        try:
            result = self._executor.combined_output(self.executable, args, timeout=timeout, cancel_token=cancel_token)
        except subprocess.TimeoutExpired as exc:
            output = exc.output or ""
            if isinstance(output, bytes):
                output = output.decode("utf-8", errors="replace")
            raise ContentPushFailedError(
                "error running Structurizr CLI: deadline exceeded", output=output, context={**context, "reason": "timeout"}
            ) from exc
        except OSError as exc:
            raise ContentPushFailedError(f"error running Structurizr CLI: {exc}", context=context) from exc

        if cancel_token is not None and cancel_token.cancelled and not result.ok:
            raise ContentPushFailedError(
                "error running Structurizr CLI: cancelled",
                output=result.output,
                returncode=result.returncode,
                context={**context, "reason": "cancelled"},
            )

        if not result.ok:
            raise ContentPushFailedError(
                f"error running Structurizr CLI: exit status {result.returncode}",
                output=result.output,
                returncode=result.returncode,
                context=context,
            )

        logger.debug("Structurizr CLI output: %s", result.output)
        return result.output
