"""
awslogin/core/exceptions.py - exception hierarchy

Every error raised on purpose by awslogin derives from AwsLoginError so the
CLI can turn it into one line of reason plus at most one hint and exit 1.

Hierarchy:
    AwsLoginError (base)
    ├── ProfileNotFound
    ├── NoStrategyApplicable
    ├── ConfigurationError
    ├── AuthFailed                  - core.auth.types
    │   ├── FederationExpired
    │   ├── ParentFederationExpired
    │   ├── OtpRejected
    │   └── ProbeFailed
    ├── TransientSubprocess
    ├── StoreUnavailable
    └── UserCancelError

Usage:
    from awslogin.core.exceptions import AwsLoginError, format_error_for_user

    try:
        orchestrator.login(profile)
    except AwsLoginError as e:
        print(format_error_for_user(e))
"""

from __future__ import annotations

import re
from typing import Any

# =============================================================================
# Base
# =============================================================================


class AwsLoginError(Exception):
    """Base class for every awslogin error.

    Attributes:
        message: one-line reason
        cause: underlying exception, if any
        details: structured context for logs and to_dict()
        hint: at most one actionable suggestion shown to the user
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}
        self.hint = hint

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
            "hint": self.hint,
        }


# =============================================================================
# Profile / configuration
# =============================================================================


class ProfileNotFound(AwsLoginError):
    """The named profile is absent from the profile store."""

    def __init__(self, profile: str, hint: str | None = None):
        super().__init__(
            f"Profile '{profile}' not found",
            details={"profile": profile},
            hint=hint or f"Run 'awslogin {profile} --configure' to create it",
        )
        self.profile = profile


class NoStrategyApplicable(AwsLoginError):
    """The classifier found no usable credential source on the profile."""

    def __init__(self, profile: str):
        super().__init__(
            f"Profile '{profile}' has no SSO configuration, long-term keys or MFA sibling",
            details={"profile": profile},
            hint=f"Run 'awslogin {profile} --configure' to set it up",
        )
        self.profile = profile


class ConfigurationError(AwsLoginError):
    """A profile is present but its configuration cannot be used.

    Attributes:
        profile: profile name
        config_key: offending key, if one is to blame
    """

    def __init__(
        self,
        message: str,
        profile: str | None = None,
        config_key: str | None = None,
        hint: str | None = None,
        cause: Exception | None = None,
    ):
        details = {}
        if profile:
            details["profile"] = profile
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, cause=cause, details=details, hint=hint)
        self.profile = profile
        self.config_key = config_key


# =============================================================================
# Infrastructure
# =============================================================================


class TransientSubprocess(AwsLoginError):
    """A platform CLI call failed in a way that retrying will not fix."""

    def __init__(self, command: str, stderr: str, returncode: int):
        reason = first_line(stderr) or f"exit code {returncode}"
        super().__init__(
            f"'{command}' failed: {reason}",
            details={"command": command, "returncode": returncode},
        )
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class StoreUnavailable(AwsLoginError):
    """The profile store cannot be read or written."""

    def __init__(self, message: str, path: str | None = None, cause: Exception | None = None):
        super().__init__(
            message,
            cause=cause,
            details={"path": path} if path else None,
            hint="Check that the AWS CLI is installed and ~/.aws is readable",
        )
        self.path = path


class UserCancelError(AwsLoginError):
    """The user aborted an interactive prompt."""

    def __init__(self, message: str = "Cancelled by user"):
        super().__init__(message)


# =============================================================================
# stderr classification
# =============================================================================

_ACCESS_DENIED = re.compile(
    r"AccessDenied|UnauthorizedException|not authorized|ForbiddenException", re.IGNORECASE
)
_OTP_REJECTED = re.compile(
    r"MultiFactorAuthentication|invalid MFA|MFA code|one time pass", re.IGNORECASE
)
_POINTLESS_RETRY = re.compile(
    r"InvalidClientTokenId|SignatureDoesNotMatch|could not be found|"
    r"Could not connect to the endpoint|ExpiredToken|Unable to locate credentials|"
    r"command not found|No such file or directory",
    re.IGNORECASE,
)


def is_access_denied(stderr: str) -> bool:
    """True when stderr reports a missing permission rather than a broken call."""
    return bool(stderr and _ACCESS_DENIED.search(stderr))


def is_otp_rejection(stderr: str) -> bool:
    return bool(stderr and _OTP_REJECTED.search(stderr))


def is_pointless_to_retry(stderr: str) -> bool:
    """True when stderr says the credentials or endpoint are unusable.

    A rejected one-time password is not in this class: the caller may ask
    for another code.
    """
    if not stderr or is_otp_rejection(stderr):
        return False
    return bool(_POINTLESS_RETRY.search(stderr))


def first_line(text: str | None) -> str:
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return line
    return ""


# =============================================================================
# Formatting
# =============================================================================


def format_error_for_user(error: Exception) -> str:
    """Render an error as one reason line plus at most one hint line.

    Args:
        error: any exception

    Returns:
        text suitable for the console
    """
    if isinstance(error, AwsLoginError):
        text = error.message
        if error.cause:
            cause = first_line(str(error.cause))
            if cause:
                text = f"{text}: {cause}"
        if error.hint:
            text = f"{text}\n  hint: {error.hint}"
        return text

    return first_line(str(error)) or error.__class__.__name__
