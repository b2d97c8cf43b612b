# awslogin/core/auth/types/types.py
"""
awslogin/core/auth/types/types.py - core types of the auth package

Contents:
    - ProfileKind / ProfileStrategy: classification of a profile record
    - Session, Identity, AccountInfo, RoleInfo: values moved between drivers
    - SelectionPolicy / decide_selection_policy: account and role selection
    - LoginOptions, LoginStatus, LoginResult: orchestrator contract
    - AuthFailed and its subclasses
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Mapping

from botocore.utils import parse_timestamp as _botocore_parse_timestamp

from awslogin.core.config import settings
from awslogin.core.exceptions import AwsLoginError, NoStrategyApplicable

from ..config import keys

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 (or epoch) timestamp into an aware UTC datetime.

    Returns:
        datetime or None when the value is empty or unparseable
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = _botocore_parse_timestamp(value)
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with a trailing Z, the format written to profiles."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# Classification
# =============================================================================


class ProfileKind(Enum):
    """Credential strategy of a profile.

    - CHILD: pins an account/role under a federated parent
    - FEDERATED: SSO (sso_session or sso_start_url)
    - DIRECT_WITH_MFA: long-term keys plus an MFA device
    - DIRECT: long-term keys only
    """

    CHILD = "child"
    FEDERATED = "federated"
    DIRECT_WITH_MFA = "direct-with-mfa"
    DIRECT = "direct"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProfileStrategy:
    """Classified profile.

    Build with from_record(); this is the only place that reads a key set
    to decide how a profile authenticates.

    Attributes:
        kind: strategy
        profile: profile name
        parent: parent profile (CHILD only)
        long_term_profile: profile holding the permanent keys
            (DIRECT_WITH_MFA; the sibling, or the profile itself)
    """

    kind: ProfileKind
    profile: str
    parent: str | None = None
    long_term_profile: str | None = None

    @property
    def uses_sibling(self) -> bool:
        return self.long_term_profile is not None and self.long_term_profile != self.profile

    @classmethod
    def from_record(
        cls,
        profile: str,
        record: Mapping[str, str],
        sibling_exists: bool = False,
    ) -> ProfileStrategy:
        """Classify a profile record.

        Args:
            profile: profile name
            record: the profile's keys
            sibling_exists: whether "<profile>-long-term" exists

        Raises:
            NoStrategyApplicable: nothing usable on the record
        """
        parent = record.get(keys.PARENT_PROFILE)
        if parent:
            return cls(ProfileKind.CHILD, profile, parent=parent)

        if keys.is_federated(record):
            return cls(ProfileKind.FEDERATED, profile)

        if sibling_exists:
            return cls(
                ProfileKind.DIRECT_WITH_MFA,
                profile,
                long_term_profile=long_term_name(profile),
            )

        if keys.has_long_term_keys(record):
            if keys.mfa_device_of(record):
                return cls(ProfileKind.DIRECT_WITH_MFA, profile, long_term_profile=profile)
            return cls(ProfileKind.DIRECT, profile)

        raise NoStrategyApplicable(profile)


def long_term_name(profile: str) -> str:
    return f"{profile}{settings.LONG_TERM_SUFFIX}"


# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class Session:
    """Short-lived credentials.

    Attributes:
        access_key_id: temporary access key id
        secret_access_key: temporary secret
        session_token: session token
        expiration: absolute expiry (UTC, whole seconds)
    """

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def __post_init__(self):
        normalised = self.expiration.astimezone(timezone.utc).replace(microsecond=0)
        object.__setattr__(self, "expiration", normalised)

    def to_record(self) -> dict[str, str]:
        """Profile keys for this session."""
        return {
            keys.ACCESS_KEY_ID: self.access_key_id,
            keys.SECRET_ACCESS_KEY: self.secret_access_key,
            keys.SESSION_TOKEN: self.session_token,
            keys.SESSION_EXPIRATION: format_timestamp(self.expiration),
        }

    def remaining(self, now: datetime | None = None) -> timedelta:
        return self.expiration - (now or utc_now())

    def is_expired(self, buffer_seconds: int | None = None, now: datetime | None = None) -> bool:
        """True at or inside the buffer before expiry."""
        if buffer_seconds is None:
            buffer_seconds = settings.EXPIRY_BUFFER_SECONDS
        return self.remaining(now) <= timedelta(seconds=buffer_seconds)

    @classmethod
    def from_record(cls, record: Mapping[str, str]) -> Session | None:
        """Session stored on a profile, or None unless all four keys parse."""
        values = [record.get(k) for k in keys.SESSION_KEYS]
        if not all(values):
            return None
        expiration = parse_timestamp(values[3])
        if expiration is None:
            return None
        return cls(values[0], values[1], values[2], expiration)

    @classmethod
    def from_sts_response(cls, data: Mapping[str, Any]) -> Session:
        """Build from get-session-token / assume-role JSON.

        Raises:
            ValueError: the response has no usable Credentials block
        """
        creds = data.get("Credentials") or {}
        expiration = parse_timestamp(creds.get("Expiration"))
        if not (creds.get("AccessKeyId") and creds.get("SecretAccessKey") and creds.get("SessionToken")):
            raise ValueError("STS response is missing credentials")
        if expiration is None:
            raise ValueError("STS response is missing Expiration")
        return cls(creds["AccessKeyId"], creds["SecretAccessKey"], creds["SessionToken"], expiration)

    @classmethod
    def from_process_output(cls, data: Mapping[str, Any], default_expiration: datetime) -> Session:
        """Build from 'configure export-credentials --format process' JSON.

        Args:
            data: parsed output
            default_expiration: used when the output carries no Expiration

        Raises:
            ValueError: required fields missing
        """
        if not (data.get("AccessKeyId") and data.get("SecretAccessKey") and data.get("SessionToken")):
            raise ValueError("exported credentials are not a session")
        expiration = parse_timestamp(data.get("Expiration")) or default_expiration
        return cls(data["AccessKeyId"], data["SecretAccessKey"], data["SessionToken"], expiration)

    def __repr__(self) -> str:
        return f"Session(access_key_id={self.access_key_id!r}, expiration={format_timestamp(self.expiration)})"


@dataclass(frozen=True)
class Identity:
    """Result of sts get-caller-identity."""

    account: str
    arn: str
    user_id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Identity:
        return cls(
            account=str(data.get("Account", "")),
            arn=str(data.get("Arn", "")),
            user_id=str(data.get("UserId", "")),
        )

    @property
    def name(self) -> str:
        """Last path element of the ARN (user or assumed-role session)."""
        return self.arn.rsplit("/", 1)[-1] if "/" in self.arn else self.arn


@dataclass(frozen=True)
class AccountInfo:
    account_id: str
    account_name: str
    email: str | None = None

    @property
    def label(self) -> str:
        return f"{self.account_name} ({self.account_id})"


@dataclass(frozen=True)
class RoleInfo:
    """A role under an account.

    Attributes:
        role_name: role (permission set) name
        guessed: True when the role was not listed by the API but taken from
            the fallback set of well-known names
    """

    role_name: str
    guessed: bool = False


# =============================================================================
# Selection policy
# =============================================================================


class SelectionPolicy(Enum):
    """How the account/role pair of a federated login is chosen.

    - PINNED: use the profile as configured, no prompt
    - DEFAULT_FIRST: no pin; take the first account and role, no prompt
    - PROMPT_WITH_CONFIRM: offer the pinned pair, prompt if declined
    - FORCE_PROMPT: always prompt
    """

    PINNED = "pinned"
    DEFAULT_FIRST = "default-first"
    PROMPT_WITH_CONFIRM = "prompt-with-confirm"
    FORCE_PROMPT = "force-prompt"


def decide_selection_policy(select: bool, change: bool, pinned: bool) -> SelectionPolicy:
    """Pick the selection policy from the login flags and the profile's pin.

    Args:
        select: --select given
        change: --change given
        pinned: profile has both sso_account_id and sso_role_name
    """
    if change:
        return SelectionPolicy.FORCE_PROMPT
    if select:
        return SelectionPolicy.PROMPT_WITH_CONFIRM if pinned else SelectionPolicy.FORCE_PROMPT
    return SelectionPolicy.PINNED if pinned else SelectionPolicy.DEFAULT_FIRST


# =============================================================================
# Orchestrator contract
# =============================================================================


@dataclass(frozen=True)
class LoginOptions:
    select: bool = False
    change: bool = False
    force: bool = False
    mfa_token: str | None = None


class LoginStatus(Enum):
    ALREADY_VALID = "already-valid"
    REFRESHED = "refreshed"
    CREATED = "created"
    REUSED_CHILD = "reused-child"

    def __str__(self) -> str:
        return self.value


@dataclass
class LoginResult:
    """Outcome of Orchestrator.login().

    Attributes:
        resolved_profile: profile that now holds a valid session; differs
            from the requested one when a child was selected
        status: what the call did
        identity: caller identity observed by the final probe
        session: session written by this call (None when nothing was minted)
    """

    resolved_profile: str
    status: LoginStatus
    identity: Identity | None = None
    session: Session | None = field(default=None, repr=False)


# =============================================================================
# Error Classes
# =============================================================================


class AuthFailed(AwsLoginError):
    """Authentication did not produce usable credentials.

    Attributes:
        profile: profile being authenticated
    """

    def __init__(
        self,
        message: str,
        profile: str | None = None,
        hint: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message,
            cause=cause,
            details={"profile": profile} if profile else None,
            hint=hint,
        )
        self.profile = profile


class FederationExpired(AuthFailed):
    """No valid SSO token and the browser login did not produce one."""

    def __init__(self, profile: str, cause: Exception | None = None):
        super().__init__(
            f"SSO login for '{profile}' did not complete",
            profile=profile,
            hint=f"Run 'awslogin {profile}' again and finish the browser sign-in",
            cause=cause,
        )


class ParentFederationExpired(AuthFailed):
    """A child was requested while its parent's SSO token is invalid.

    Attributes:
        parent: parent profile to log in first
    """

    def __init__(self, profile: str, parent: str):
        super().__init__(
            f"SSO session of parent profile '{parent}' has expired",
            profile=profile,
            hint=f"Run 'awslogin {parent}' first, then 'awslogin {profile}'",
        )
        self.parent = parent


class OtpRejected(AuthFailed):
    """The MFA code was not accepted."""

    def __init__(self, profile: str, reason: str = ""):
        message = f"MFA code rejected for '{profile}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            profile=profile,
            hint="Wait for the next code on your authenticator and try again",
        )


class ProbeFailed(AuthFailed):
    """Credentials were written but the identity probe failed."""

    def __init__(self, profile: str, reason: str = ""):
        message = f"Credentials for '{profile}' were written but could not be verified"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            profile=profile,
            hint=f"Run 'awslogin {profile} --force' to mint a fresh session",
        )
