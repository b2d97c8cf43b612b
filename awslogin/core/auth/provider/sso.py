# awslogin/core/auth/provider/sso.py
"""
awslogin/core/auth/provider/sso.py - federated (IAM Identity Center) driver

Responsibilities:
    - make sure an SSO token exists (browser login through 'aws sso login')
    - list accounts and roles reachable with that token
    - mint short-lived credentials for an (account, role) pair

Credentials are minted through a scratch profile that carries only the
parent's SSO settings pinned to the target pair; the AWS CLI resolves it
from the cached token ('configure export-credentials'). If that fails the
driver assumes the role directly under the parent.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timedelta

from awslogin.core.command import AwsCli
from awslogin.core.config import settings
from awslogin.core.exceptions import (
    ConfigurationError,
    TransientSubprocess,
    first_line,
    is_access_denied,
    is_pointless_to_retry,
)

from ..cache import TokenCacheReader
from ..config import ProfileStore, keys
from ..types import (
    AccountInfo,
    AuthFailed,
    Clock,
    FederationExpired,
    RoleInfo,
    Session,
    utc_now,
)

logger = logging.getLogger(__name__)


class EphemeralProfile:
    """Scratch profile that exists only inside a with block.

    Every key written on entry is unset on exit, whether the block returns
    or raises.

    Args:
        store: profile store
        name: unique profile name
        values: keys to write
    """

    def __init__(self, store: ProfileStore, name: str, values: Mapping[str, str]):
        self.store = store
        self.name = name
        self.values = dict(values)

    def __enter__(self) -> EphemeralProfile:
        try:
            self.store.set_many(self.name, self.values)
        except Exception:
            self._release(propagating=True)
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._release(propagating=exc_type is not None)
        return False

    def _release(self, propagating: bool) -> None:
        try:
            self.store.unset_many(self.name, list(self.values))
        except Exception:
            if not propagating:
                raise
            logger.warning("Could not remove scratch profile %s", self.name, exc_info=True)


def _name_part(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "-", text).strip("-").lower() or "x"


class FederatedLoginDriver:
    """SSO login, account/role enumeration and role credentials.

    Args:
        store: profile store
        aws: AWS CLI wrapper
        token_cache: SSO token cache reader
        clock: time source
    """

    def __init__(
        self,
        store: ProfileStore,
        aws: AwsCli,
        token_cache: TokenCacheReader,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.aws = aws
        self.token_cache = token_cache
        self.clock = clock

    # =========================================================================
    # Token
    # =========================================================================

    def federation_config(self, profile: str) -> dict[str, str]:
        """SSO keys of a profile as written on it (sso_session or legacy)."""
        return self.store.get_many(profile, keys.FEDERATION_KEYS)

    def _token_lookup(self, profile: str) -> tuple[str | None, str | None, str | None]:
        """(session name, start URL, SSO region), following sso_session."""
        return self.store.federation_lookup(profile)

    def has_valid_token(self, profile: str | None = None) -> bool:
        """True when a valid token serves this profile's SSO session.

        Without a profile, any valid cached token counts.
        """
        if profile is None:
            return self.token_cache.has_valid_token()
        session_name, start_url, _ = self._token_lookup(profile)
        return self.token_cache.has_token_for(session_name, start_url)

    def ensure_federation_token(self, profile: str) -> bool:
        """Run the browser login unless a valid SSO token is cached.

        Returns:
            True when the browser flow ran

        Raises:
            FederationExpired: the login exited non-zero or left no token
        """
        if self.has_valid_token(profile):
            logger.debug("%s: cached SSO token is valid", profile)
            return False

        logger.info("Starting SSO browser login for %s", profile)
        result = self.aws.sso_login(profile)
        if not result.success:
            raise FederationExpired(profile)
        if not self.has_valid_token(profile):
            raise FederationExpired(profile)
        return True

    def _access_token(self, profile: str) -> tuple[str, str]:
        session_name, start_url, sso_region = self._token_lookup(profile)
        token = self.token_cache.access_token_for(session_name, start_url)
        if not token:
            raise FederationExpired(profile)
        region = sso_region or self.store.get(profile, keys.REGION) or settings.DEFAULT_REGION
        return token, region

    # =========================================================================
    # Accounts / roles
    # =========================================================================

    def list_accounts(self, profile: str) -> list[AccountInfo]:
        """Accounts reachable with the profile's SSO token.

        Falls back to the organization's active accounts when the SSO API
        refuses the call.
        """
        token, region = self._access_token(profile)
        result = self.aws.sso_list_accounts(profile, token, region)
        if result.success:
            data = result.json_or_none() or {}
            accounts = [
                AccountInfo(
                    account_id=str(item.get("accountId", "")),
                    account_name=item.get("accountName") or str(item.get("accountId", "")),
                    email=item.get("emailAddress"),
                )
                for item in data.get("accountList", [])
                if item.get("accountId")
            ]
            logger.debug("%s: %d account(s) from SSO", profile, len(accounts))
            return accounts

        logger.info(
            "SSO list-accounts failed for %s (%s), trying organizations",
            profile,
            first_line(result.stderr) or result.returncode,
        )
        fallback = self.aws.organizations_list_accounts(profile)
        if not fallback.success:
            raise TransientSubprocess("sso list-accounts", result.stderr, result.returncode)

        data = fallback.json_or_none() or {}
        return [
            AccountInfo(
                account_id=str(item.get("Id", "")),
                account_name=item.get("Name") or str(item.get("Id", "")),
                email=item.get("Email"),
            )
            for item in data.get("Accounts", [])
            if item.get("Id") and item.get("Status", "ACTIVE") == "ACTIVE"
        ]

    def list_roles(self, profile: str, account_id: str) -> list[RoleInfo]:
        """Roles in an account.

        When the API refuses (common when access comes through a group),
        the well-known role names are returned flagged as guessed.
        """
        token, region = self._access_token(profile)
        result = self.aws.sso_list_account_roles(profile, token, region, account_id)
        if result.success:
            data = result.json_or_none() or {}
            roles = [RoleInfo(item["roleName"]) for item in data.get("roleList", []) if item.get("roleName")]
            if roles:
                return roles

        logger.warning(
            "Could not list roles in %s (%s); offering common role names",
            account_id,
            first_line(result.stderr) or "empty list",
        )
        return [RoleInfo(name, guessed=True) for name in settings.FALLBACK_ROLE_NAMES]

    # =========================================================================
    # Credentials
    # =========================================================================

    def _expiry_ceiling(self, profile: str) -> datetime:
        session_name, start_url, _ = self._token_lookup(profile)
        ceiling = self.clock() + timedelta(seconds=settings.FEDERATION_CREDENTIAL_CEILING_SECONDS)
        token_expiry = self.token_cache.expiry_for(session_name, start_url)
        if token_expiry is not None and token_expiry < ceiling:
            return token_expiry
        return ceiling

    def resolve_profile_credentials(self, profile: str, expiry_source: str | None = None) -> Session:
        """Let the AWS CLI resolve a profile's credentials.

        Args:
            profile: profile to resolve
            expiry_source: profile whose SSO token bounds the expiry when
                the CLI reports none (defaults to profile)

        Raises:
            TransientSubprocess: the CLI failed in a way a retry will not fix
            AuthFailed: any other failure
        """
        result = self.aws.export_credentials(profile)
        if not result.success:
            if is_pointless_to_retry(result.stderr):
                raise TransientSubprocess("configure export-credentials", result.stderr, result.returncode)
            raise AuthFailed(
                f"Could not resolve credentials for '{profile}': {first_line(result.stderr) or result.returncode}",
                profile=profile,
            )

        data = result.json_or_none()
        try:
            return Session.from_process_output(data or {}, self._expiry_ceiling(expiry_source or profile))
        except ValueError as e:
            raise AuthFailed(f"Unexpected credentials for '{profile}'", profile=profile, cause=e) from e

    def ephemeral_name(self, account_id: str, role_name: str) -> str:
        stamp = int(self.clock().timestamp() * 1000)
        return f"{settings.EPHEMERAL_PROFILE_PREFIX}-{account_id}-{_name_part(role_name)}-{stamp}"

    def mint_role_credentials(self, profile: str, account_id: str, role_name: str) -> Session:
        """Short-lived credentials for (account_id, role_name) under profile.

        Raises:
            ConfigurationError: profile carries no SSO settings
            AuthFailed: neither path produced credentials
        """
        config = self.federation_config(profile)
        if not keys.is_federated(config):
            raise ConfigurationError(
                f"Profile '{profile}' has no SSO configuration",
                profile=profile,
                config_key=keys.SSO_SESSION,
            )

        values = dict(config)
        values[keys.SSO_ACCOUNT_ID] = account_id
        values[keys.SSO_ROLE_NAME] = role_name
        values[keys.REGION] = self.store.get(profile, keys.REGION) or settings.DEFAULT_REGION

        try:
            with EphemeralProfile(self.store, self.ephemeral_name(account_id, role_name), values) as tmp:
                session = self.resolve_profile_credentials(tmp.name, expiry_source=profile)
            logger.debug("Minted %s/%s through SSO", account_id, role_name)
            return session
        except (AuthFailed, TransientSubprocess) as e:
            logger.info("SSO credential resolution failed (%s); assuming role instead", e.message)

        return self.assume_role(profile, account_id, role_name)

    def assume_role(self, profile: str, account_id: str, role_name: str) -> Session:
        """Assume arn:aws:iam::<account>:role/<role> with the profile's credentials."""
        role_arn = f"arn:aws:iam::{account_id}:role/{role_name}"
        session_name = f"{settings.ROLE_SESSION_PREFIX}-{int(self.clock().timestamp() * 1000)}"
        result = self.aws.assume_role(
            profile,
            role_arn,
            session_name,
            settings.ASSUME_ROLE_DURATION_SECONDS,
        )
        if not result.success:
            if is_pointless_to_retry(result.stderr) and not is_access_denied(result.stderr):
                raise TransientSubprocess("sts assume-role", result.stderr, result.returncode)
            raise AuthFailed(
                f"Could not obtain credentials for {role_name} in {account_id}",
                profile=profile,
                hint="Check that the role exists and is assigned to you",
            )

        try:
            return Session.from_sts_response(result.json_or_none() or {})
        except ValueError as e:
            raise AuthFailed(f"Unexpected assume-role output for {role_arn}", profile=profile, cause=e) from e
