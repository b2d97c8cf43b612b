# awslogin/core/auth/provider/mfa.py
"""
awslogin/core/auth/provider/mfa.py - MFA session from long-term keys

The permanent keys live on "<P>-long-term"; the session minted with them
and a TOTP code is written to P. The long-term profile is only read.

Code sources, in order: the --token value, 1Password, an interactive
prompt. A rejected --token or 1Password code falls back to the prompt
exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from awslogin.cli.i18n import t
from awslogin.core.command import AwsCli, CommandResult
from awslogin.core.config import settings
from awslogin.core.exceptions import (
    ConfigurationError,
    TransientSubprocess,
    first_line,
    is_otp_rejection,
    is_pointless_to_retry,
)
from awslogin.core.prompt import Prompter, validate_otp

from ..config import ProfileStore, keys
from ..types import AuthFailed, Identity, OtpRejected, ProbeFailed, Session
from .otp import OnePasswordOtpProvider

logger = logging.getLogger(__name__)

SOURCE_ARGUMENT = "argument"
SOURCE_STORE = "1password"
SOURCE_PROMPT = "prompt"


@dataclass
class LongTermLoginResult:
    """Outcome of LongTermSessionDriver.login().

    Attributes:
        session: session written to the standard profile
        identity: identity returned by the verification probe
        otp_source: where the accepted code came from
    """

    session: Session
    identity: Identity
    otp_source: str


class LongTermSessionDriver:
    """Mints MFA sessions with get-session-token or assume-role.

    Args:
        store: profile store
        aws: AWS CLI wrapper
        prompter: asks for a code when no other source has one
        otp_provider: optional 1Password source
    """

    def __init__(
        self,
        store: ProfileStore,
        aws: AwsCli,
        prompter: Prompter,
        otp_provider: OnePasswordOtpProvider | None = None,
    ):
        self.store = store
        self.aws = aws
        self.prompter = prompter
        self.otp_provider = otp_provider

    def resolve_region(self, profile: str, long_term: str) -> str:
        return (
            self.store.get(long_term, keys.REGION)
            or self.store.get(profile, keys.REGION)
            or settings.DEFAULT_REGION
        )

    def _codes(self, profile: str, mfa_token: str | None) -> Iterator[tuple[str, str]]:
        if mfa_token:
            yield mfa_token.strip(), SOURCE_ARGUMENT
        elif self.otp_provider is not None:
            code = self.otp_provider.get_otp(profile)
            if code:
                yield code, SOURCE_STORE
        yield self.prompter.text(t("login.mfa_prompt", profile=profile), secret=True, validate=validate_otp).strip(), SOURCE_PROMPT

    def _request(self, long_term: str, device: str, code: str, region: str, role_arn: str | None) -> CommandResult:
        if role_arn:
            return self.aws.assume_role(
                long_term,
                role_arn,
                f"{settings.ROLE_SESSION_PREFIX}-{long_term}",
                settings.MFA_SESSION_DURATION_SECONDS,
                region=region,
                serial_number=device,
                token_code=code,
            )
        return self.aws.get_session_token(
            long_term,
            device,
            code,
            settings.MFA_SESSION_DURATION_SECONDS,
            region,
        )

    def login(self, profile: str, long_term: str, mfa_token: str | None = None) -> LongTermLoginResult:
        """Mint and store an MFA session for profile.

        Args:
            profile: standard profile receiving the session
            long_term: profile holding the permanent keys and MFA device
            mfa_token: code supplied on the command line

        Raises:
            ConfigurationError: no MFA device, or keys and session would share a profile
            OtpRejected: the last code tried was refused
            TransientSubprocess: STS failed in a way another code will not fix
            ProbeFailed: the written session does not work
        """
        if long_term == profile:
            raise ConfigurationError(
                f"Profile '{profile}' holds long-term keys and an MFA device itself",
                profile=profile,
                hint=f"Move the keys and {keys.MFA_DEVICE} to a profile named '{profile}{settings.LONG_TERM_SUFFIX}'",
            )

        lt_record = self.store.snapshot(long_term)
        device = keys.mfa_device_of(lt_record)
        if not device:
            raise ConfigurationError(
                f"No MFA device configured on '{long_term}'",
                profile=long_term,
                config_key=keys.MFA_DEVICE,
                hint=f"Run 'awslogin {profile} --configure' to set the MFA device",
            )

        region = self.resolve_region(profile, long_term)
        role_arn = lt_record.get(keys.ASSUME_ROLE) or self.store.get(profile, keys.ASSUME_ROLE)

        session = None
        source = ""
        last_error = ""
        for code, source in self._codes(profile, mfa_token):
            logger.debug("Requesting MFA session for %s (code from %s)", profile, source)
            result = self._request(long_term, device, code, region, role_arn)
            if result.success:
                try:
                    session = Session.from_sts_response(result.json_or_none() or {})
                except ValueError as e:
                    raise AuthFailed(f"Unexpected STS output for '{profile}'", profile=profile, cause=e) from e
                break

            last_error = first_line(result.stderr)
            if is_pointless_to_retry(result.stderr):
                raise TransientSubprocess(
                    "sts assume-role" if role_arn else "sts get-session-token",
                    result.stderr,
                    result.returncode,
                )
            if not is_otp_rejection(result.stderr) and source == SOURCE_PROMPT:
                raise AuthFailed(
                    f"Could not obtain an MFA session for '{profile}': {last_error or result.returncode}",
                    profile=profile,
                )
            logger.info("MFA code from %s was not accepted", source)

        if session is None:
            raise OtpRejected(profile, last_error)

        values = session.to_record()
        if source == SOURCE_STORE:
            values[keys.OTP_ENABLED] = "true"
        self.store.set_many(profile, values)

        probe = self.aws.get_caller_identity(profile)
        data = probe.json_or_none() if probe.success else None
        if not isinstance(data, dict):
            raise ProbeFailed(profile, first_line(probe.stderr))

        return LongTermLoginResult(session, Identity.from_json(data), source)
