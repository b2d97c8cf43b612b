"""
awslogin/core/command.py - subprocess boundary

All external programs (the AWS CLI and the 1Password CLI) are reached
through a CommandRunner. Production code uses the subprocess-backed
runner; tests inject a fake that records invocations.

Usage:
    from awslogin.core.command import AwsCli, CommandRunner

    aws = AwsCli(CommandRunner())
    result = aws.get_caller_identity("dev")
    if result.success:
        print(result.json()["Arn"])
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .config import settings

logger = logging.getLogger(__name__)

# Flags whose value must never reach a log line
_SECRET_FLAGS = {"--token-code", "--access-token", "--otp"}
_SECRET_CONFIG_KEYS = {"aws_secret_access_key", "aws_session_token"}

MISSING_EXECUTABLE_RC = 127


@dataclass
class CommandResult:
    """Outcome of one external command.

    Attributes:
        args: full argument vector, executable included
        returncode: process exit status (127 when the executable is missing)
        stdout: captured standard output ("" for interactive runs)
        stderr: captured standard error ("" for interactive runs)
    """

    args: list[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def json(self) -> Any:
        """Parse stdout as JSON.

        Raises:
            ValueError: stdout is empty or not JSON
        """
        text = self.stdout.strip()
        if not text:
            raise ValueError(f"empty output from {' '.join(self.args[:3])}")
        return json.loads(text)

    def json_or_none(self) -> Any:
        try:
            return self.json()
        except ValueError:
            return None


def mask_args(args: Sequence[str]) -> list[str]:
    """Copy of args with secret values replaced by '****'."""
    masked = list(args)
    for i, arg in enumerate(masked[:-1]):
        if arg in _SECRET_FLAGS:
            masked[i + 1] = "****"
    if "configure" in masked and "set" in masked:
        idx = masked.index("set")
        if idx + 2 < len(masked) and masked[idx + 1] in _SECRET_CONFIG_KEYS:
            masked[idx + 2] = "****"
    return masked


class CommandRunner:
    """Runs external commands with subprocess.run."""

    def run(
        self,
        args: Sequence[str],
        interactive: bool = False,
        input_text: str | None = None,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            args: argument vector
            interactive: inherit the terminal instead of capturing output
            input_text: text written to stdin (captured runs only)

        Returns:
            CommandResult; a missing executable yields returncode 127
        """
        argv = list(args)
        logger.debug("exec: %s", " ".join(mask_args(argv)))

        try:
            if interactive:
                completed = subprocess.run(argv, check=False)
                return CommandResult(argv, completed.returncode)

            completed = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                text=True,
                input=input_text,
            )
        except FileNotFoundError as e:
            logger.debug("executable not found: %s", argv[0])
            return CommandResult(argv, MISSING_EXECUTABLE_RC, "", str(e))

        if completed.returncode != 0:
            logger.debug("exit %d: %s", completed.returncode, (completed.stderr or "").strip())
        return CommandResult(argv, completed.returncode, completed.stdout or "", completed.stderr or "")

    def which(self, program: str) -> str | None:
        return shutil.which(program)


# =============================================================================
# AWS CLI
# =============================================================================


class AwsCli:
    """Typed wrappers over the AWS CLI calls awslogin makes."""

    def __init__(self, runner: CommandRunner, executable: str | None = None):
        self.runner = runner
        self.executable = executable or settings.AWS_CLI

    def _run(self, *args: str, interactive: bool = False) -> CommandResult:
        return self.runner.run([self.executable, *args], interactive=interactive)

    # --- configure ---------------------------------------------------------

    def list_profiles(self) -> CommandResult:
        return self._run("configure", "list-profiles")

    def configure_get(self, profile: str, key: str) -> CommandResult:
        return self._run("configure", "get", key, "--profile", profile)

    def configure_set(self, profile: str, key: str, value: str) -> CommandResult:
        return self._run("configure", "set", key, value, "--profile", profile)

    def configure_unset(self, profile: str, key: str) -> CommandResult:
        return self._run("configure", "unset", key, "--profile", profile)

    def export_credentials(self, profile: str) -> CommandResult:
        """Resolve a profile's credentials, SSO included, without writing them."""
        return self._run("configure", "export-credentials", "--profile", profile, "--format", "process")

    def configure_sso(self, profile: str) -> CommandResult:
        return self._run("configure", "sso", "--profile", profile, interactive=True)

    # --- sts ---------------------------------------------------------------

    def get_caller_identity(self, profile: str, interactive: bool = False) -> CommandResult:
        if interactive:
            return self._run("sts", "get-caller-identity", "--profile", profile, interactive=True)
        return self._run("sts", "get-caller-identity", "--profile", profile, "--output", "json")

    def get_session_token(
        self,
        profile: str,
        serial_number: str,
        token_code: str,
        duration_seconds: int,
        region: str,
    ) -> CommandResult:
        return self._run(
            "sts", "get-session-token",
            "--profile", profile,
            "--serial-number", serial_number,
            "--token-code", token_code,
            "--duration-seconds", str(duration_seconds),
            "--region", region,
            "--output", "json",
        )

    def assume_role(
        self,
        profile: str,
        role_arn: str,
        session_name: str,
        duration_seconds: int,
        region: str | None = None,
        serial_number: str | None = None,
        token_code: str | None = None,
    ) -> CommandResult:
        args = [
            "sts", "assume-role",
            "--profile", profile,
            "--role-arn", role_arn,
            "--role-session-name", session_name,
            "--duration-seconds", str(duration_seconds),
        ]
        if serial_number and token_code:
            args += ["--serial-number", serial_number, "--token-code", token_code]
        if region:
            args += ["--region", region]
        args += ["--output", "json"]
        return self._run(*args)

    # --- sso / organizations ----------------------------------------------

    def sso_login(self, profile: str) -> CommandResult:
        return self._run("sso", "login", "--profile", profile, interactive=True)

    def sso_list_accounts(self, profile: str, access_token: str, region: str) -> CommandResult:
        return self._run(
            "sso", "list-accounts",
            "--access-token", access_token,
            "--region", region,
            "--profile", profile,
            "--output", "json",
        )

    def sso_list_account_roles(
        self, profile: str, access_token: str, region: str, account_id: str
    ) -> CommandResult:
        return self._run(
            "sso", "list-account-roles",
            "--access-token", access_token,
            "--account-id", account_id,
            "--region", region,
            "--profile", profile,
            "--output", "json",
        )

    def organizations_list_accounts(self, profile: str) -> CommandResult:
        return self._run("organizations", "list-accounts", "--profile", profile, "--output", "json")


# =============================================================================
# 1Password CLI
# =============================================================================


class OnePasswordCli:
    """Typed wrappers over the 1Password CLI (op)."""

    def __init__(self, runner: CommandRunner, executable: str | None = None):
        self.runner = runner
        self.executable = executable or settings.OP_CLI
        self._available: bool | None = None

    def available(self) -> bool:
        """True when op is installed and signed in."""
        if self._available is None:
            if not self.runner.which(self.executable):
                self._available = False
            else:
                result = self.runner.run([self.executable, "account", "list", "--format", "json"])
                self._available = result.success
            logger.debug("1Password CLI available: %s", self._available)
        return self._available

    def list_items(self) -> list[dict[str, Any]]:
        result = self.runner.run([self.executable, "item", "list", "--format", "json"])
        if not result.success:
            return []
        items = result.json_or_none()
        return items if isinstance(items, list) else []

    def get_item(self, item_id: str) -> dict[str, Any] | None:
        result = self.runner.run([self.executable, "item", "get", item_id, "--format", "json"])
        if not result.success:
            return None
        item = result.json_or_none()
        return item if isinstance(item, dict) else None

    def get_otp(self, item_id: str) -> str | None:
        result = self.runner.run([self.executable, "item", "get", item_id, "--otp"])
        if not result.success:
            return None
        code = result.stdout.strip()
        return code or None
