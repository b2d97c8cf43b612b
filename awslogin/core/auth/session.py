# awslogin/core/auth/session.py
"""
awslogin/core/auth/session.py - session validation

SessionValidator answers "is profile P usable right now?" in three steps,
cheapest first:

    1. federated profiles need a valid SSO token in the CLI token cache
    2. a stored session expiring within the buffer (15 minutes) is expired
    3. otherwise a live sts get-caller-identity probe decides

The probe result carries the caller identity so the orchestrator can show
it without a second call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from awslogin.core.command import AwsCli
from awslogin.core.config import settings
from awslogin.core.exceptions import first_line

from .cache import TokenCacheReader
from .config import ProfileStore, keys
from .types import Clock, Identity, Session, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Verdict on a profile.

    Attributes:
        valid: usable right now
        reason: short machine-friendly reason ("ok", "no-sso-token", ...)
        identity: caller identity when the probe ran and succeeded
        expires_at: stored session expiry, if any
    """

    valid: bool
    reason: str
    identity: Identity | None = None
    expires_at: datetime | None = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class ProbeResult:
    identity: Identity | None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.identity is not None


class SessionValidator:
    """Decides whether a profile's credentials can be used.

    Args:
        store: profile store
        aws: AWS CLI wrapper for the identity probe
        token_cache: SSO token cache reader
        clock: time source
        buffer_seconds: sessions this close to expiry count as expired
    """

    def __init__(
        self,
        store: ProfileStore,
        aws: AwsCli,
        token_cache: TokenCacheReader,
        clock: Clock = utc_now,
        buffer_seconds: int | None = None,
    ):
        self.store = store
        self.aws = aws
        self.token_cache = token_cache
        self.clock = clock
        self.buffer_seconds = settings.EXPIRY_BUFFER_SECONDS if buffer_seconds is None else buffer_seconds

    def has_federation_token(self, profile: str | None = None) -> bool:
        """True when the SSO token cache holds an unexpired token for the
        profile's SSO session (any token when no profile is given).

        Answered from the cache alone; never starts a login.
        """
        if profile is None:
            return self.token_cache.has_valid_token()
        session_name, start_url, _ = self.store.federation_lookup(profile)
        return self.token_cache.has_token_for(session_name, start_url)

    def stored_session_state(self, profile: str) -> tuple[str, datetime | None]:
        """Classify the session keys stored on a profile without probing.

        Returns:
            (state, expiry) where state is one of "none", "incomplete",
            "unparseable", "expired", "fresh"
        """
        record = self.store.snapshot(profile)
        token = record.get(keys.SESSION_TOKEN)
        raw_expiration = record.get(keys.SESSION_EXPIRATION)

        if not token and not raw_expiration:
            return "none", None
        if Session.from_record(record) is None:
            expires_at = parse_timestamp(raw_expiration)
            if raw_expiration and expires_at is None:
                return "unparseable", None
            return "incomplete", expires_at

        expires_at = parse_timestamp(raw_expiration)
        if expires_at - self.clock() <= timedelta(seconds=self.buffer_seconds):
            return "expired", expires_at
        return "fresh", expires_at

    def is_fresh(self, profile: str) -> bool:
        """Complete stored session outside the expiry buffer (no probe)."""
        state, _ = self.stored_session_state(profile)
        return state == "fresh"

    def probe(self, profile: str) -> ProbeResult:
        """Run sts get-caller-identity under the profile."""
        result = self.aws.get_caller_identity(profile)
        if not result.success:
            logger.debug("identity probe failed for %s: %s", profile, first_line(result.stderr))
            return ProbeResult(None, first_line(result.stderr))

        data = result.json_or_none()
        if not isinstance(data, dict):
            return ProbeResult(None, "unexpected get-caller-identity output")
        return ProbeResult(Identity.from_json(data))

    def validate(self, profile: str, probe: bool = True) -> ValidationResult:
        """Check a profile, cheapest test first.

        Args:
            profile: profile name
            probe: run the live probe when the cheap checks pass

        Returns:
            ValidationResult
        """
        record = self.store.snapshot(profile)
        if keys.is_federated(record) and not self.has_federation_token(profile):
            logger.debug("%s: no valid SSO token", profile)
            return ValidationResult(False, "no-sso-token")

        state, expires_at = self.stored_session_state(profile)
        if state in ("incomplete", "unparseable", "expired"):
            logger.debug("%s: stored session %s", profile, state)
            return ValidationResult(False, f"session-{state}", expires_at=expires_at)

        if not probe:
            return ValidationResult(True, "not-probed", expires_at=expires_at)

        result = self.probe(profile)
        if not result.success:
            return ValidationResult(False, "probe-failed", expires_at=expires_at)
        return ValidationResult(True, "ok", identity=result.identity, expires_at=expires_at)

    def is_valid(self, profile: str) -> bool:
        return self.validate(profile).valid
