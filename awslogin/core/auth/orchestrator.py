# awslogin/core/auth/orchestrator.py
"""
awslogin/core/auth/orchestrator.py - authentication orchestrator

The orchestrator classifies a profile, drives the matching driver, writes
the result to the profile store and confirms it with an identity probe.
It is the only part of the core that prints; drivers raise tagged errors
and log.

    login(P)
      ├─ child            → parent token? → valid? → refresh from parent
      ├─ federated        → valid? → SSO token → pinned/first pair, or
      │                     selection → child profile
      ├─ direct-with-MFA  → valid? → MFA session from "<P>-long-term"
      └─ direct           → probe

Usage:
    from awslogin.core.auth import create_orchestrator, LoginOptions

    orchestrator = create_orchestrator(prompter)
    result = orchestrator.login("dev", LoginOptions(select=True))
    print(result.resolved_profile)
"""

from __future__ import annotations

import logging

from awslogin.cli.i18n import t
from awslogin.cli.ui.console import print_hint, print_identity, print_info, print_success, print_warning
from awslogin.core.command import AwsCli, CommandRunner, OnePasswordCli
from awslogin.core.config import settings
from awslogin.core.exceptions import ConfigurationError, ProfileNotFound
from awslogin.core.prompt import Prompter

from .cache import TokenCacheReader
from .children import ChildProfileManager
from .config import AwsCliConfigBackend, ProfileStore, keys
from .provider import FederatedLoginDriver, LongTermSessionDriver, OnePasswordOtpProvider
from .session import SessionValidator
from .types import (
    AccountInfo,
    AuthFailed,
    Clock,
    LoginOptions,
    LoginResult,
    LoginStatus,
    ParentFederationExpired,
    ProbeFailed,
    ProfileKind,
    ProfileStrategy,
    SelectionPolicy,
    Session,
    decide_selection_policy,
    long_term_name,
    utc_now,
)

logger = logging.getLogger(__name__)


class Orchestrator:
    """Outward verbs: login, change_account, clean, configure_all_org.

    Args:
        store: profile store
        validator: session validator
        federated: SSO driver
        long_term: MFA session driver
        children: child profile manager
        prompter: the single prompter of this run
    """

    def __init__(
        self,
        store: ProfileStore,
        validator: SessionValidator,
        federated: FederatedLoginDriver,
        long_term: LongTermSessionDriver,
        children: ChildProfileManager,
        prompter: Prompter,
    ):
        self.store = store
        self.validator = validator
        self.federated = federated
        self.long_term = long_term
        self.children = children
        self.prompter = prompter

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(self, profile: str) -> ProfileStrategy:
        """Classify a stored profile.

        Raises:
            ProfileNotFound: no such profile
            NoStrategyApplicable: nothing usable on it
        """
        if not self.store.exists(profile):
            raise ProfileNotFound(profile)

        record = self.store.snapshot(profile)
        sibling = self.store.exists(long_term_name(profile))
        strategy = ProfileStrategy.from_record(profile, record, sibling_exists=sibling)
        logger.debug("%s classified as %s", profile, strategy.kind)
        return strategy

    # =========================================================================
    # Login
    # =========================================================================

    def login(self, profile: str, options: LoginOptions | None = None) -> LoginResult:
        """Make profile (or a selected child of it) hold a valid session.

        Raises:
            ProfileNotFound, NoStrategyApplicable, ConfigurationError,
            AuthFailed (and subclasses), TransientSubprocess, StoreUnavailable
        """
        options = options or LoginOptions()
        strategy = self.classify(profile)

        if options.force:
            print_info(t("login.forcing", profile=profile))

        if strategy.kind is ProfileKind.CHILD:
            return self._login_child(strategy, options)
        if strategy.kind is ProfileKind.FEDERATED:
            return self._login_federated(strategy, options)
        if strategy.kind is ProfileKind.DIRECT_WITH_MFA:
            return self._login_long_term(strategy, options)
        return self._login_direct(strategy)

    def change_account(self, profile: str) -> LoginResult:
        """Force account and role selection under profile's SSO session."""
        return self.login(profile, LoginOptions(select=True, change=True))

    def _login_child(self, strategy: ProfileStrategy, options: LoginOptions) -> LoginResult:
        child = strategy.profile
        if options.select or options.change:
            print_info(t("login.child_selects_parent", child=child, parent=strategy.parent))
            return self.login(strategy.parent, options)

        parent = self.children.parent_of(child)
        if not self.validator.has_federation_token(parent):
            raise ParentFederationExpired(child, parent)

        if not options.force:
            check = self.validator.validate(child)
            if check.valid:
                return self._report(LoginResult(child, LoginStatus.ALREADY_VALID, check.identity))

        print_info(t("login.refreshing_child", child=child, parent=parent))
        session = self.children.refresh_child(child)
        return self._finish(child, LoginStatus.REFRESHED, session)

    def _pinned_pair(self, profile: str) -> tuple[str, str] | None:
        pinned = self.store.get_many(profile, keys.PINNED_KEYS)
        if len(pinned) == len(keys.PINNED_KEYS):
            return pinned[keys.SSO_ACCOUNT_ID], pinned[keys.SSO_ROLE_NAME]
        return None

    def _login_federated(self, strategy: ProfileStrategy, options: LoginOptions) -> LoginResult:
        profile = strategy.profile
        pinned = self._pinned_pair(profile)
        policy = decide_selection_policy(options.select, options.change, pinned is not None)
        logger.debug("%s: selection policy %s", profile, policy.value)

        if policy in (SelectionPolicy.PINNED, SelectionPolicy.DEFAULT_FIRST):
            if not options.force:
                check = self.validator.validate(profile)
                if check.valid:
                    return self._report(LoginResult(profile, LoginStatus.ALREADY_VALID, check.identity))

            self._ensure_token(profile)
            if pinned is not None:
                account_id, role_name = pinned
            else:
                account_id, role_name = self._first_pair(profile)
            session = self.federated.mint_role_credentials(profile, account_id, role_name)
            self.store.set_many(profile, session.to_record())
            return self._finish(profile, LoginStatus.REFRESHED, session)

        if options.select and not options.change and not options.force:
            reused = self._reuse_child(profile)
            if reused is not None:
                return reused

        self._ensure_token(profile)
        account, role_name = self._choose_pair(profile, policy, pinned)
        session = self.federated.mint_role_credentials(profile, account.account_id, role_name)
        child, created = self.children.create_or_refresh(profile, account, role_name, session)
        result = self._finish(child, LoginStatus.CREATED if created else LoginStatus.REFRESHED, session)
        print_hint(t("login.child_usage", profile=child))
        return result

    def _login_long_term(self, strategy: ProfileStrategy, options: LoginOptions) -> LoginResult:
        profile = strategy.profile
        if not options.force:
            check = self.validator.validate(profile)
            if check.valid:
                return self._report(LoginResult(profile, LoginStatus.ALREADY_VALID, check.identity))

        print_info(t("login.mfa_session", profile=profile, long_term=strategy.long_term_profile))
        outcome = self.long_term.login(profile, strategy.long_term_profile, options.mfa_token)
        return self._report(LoginResult(profile, LoginStatus.REFRESHED, outcome.identity, outcome.session))

    def _login_direct(self, strategy: ProfileStrategy) -> LoginResult:
        profile = strategy.profile
        probe = self.validator.probe(profile)
        if not probe.success:
            raise ProbeFailed(profile, probe.error)
        return self._report(LoginResult(profile, LoginStatus.ALREADY_VALID, probe.identity))

    # =========================================================================
    # Federated helpers
    # =========================================================================

    def _ensure_token(self, profile: str) -> None:
        if not self.validator.has_federation_token(profile):
            print_info(t("login.sso_browser", profile=profile))
        self.federated.ensure_federation_token(profile)

    def _reuse_child(self, profile: str) -> LoginResult | None:
        for child in self.children.list_children(profile):
            if not self.validator.is_fresh(child):
                continue
            probe = self.validator.probe(child)
            if probe.success:
                result = self._report(LoginResult(child, LoginStatus.REUSED_CHILD, probe.identity))
                print_hint(t("login.change_hint", parent=profile))
                return result
        return None

    def _first_pair(self, profile: str) -> tuple[str, str]:
        accounts = self.federated.list_accounts(profile)
        if not accounts:
            raise AuthFailed(
                f"No accounts are available under '{profile}'",
                profile=profile,
                hint=f"Pin one with sso_account_id and sso_role_name, or run 'awslogin {profile} --select'",
            )
        account = accounts[0]
        roles = self.federated.list_roles(profile, account.account_id)
        listed = [r for r in roles if not r.guessed]
        role = (listed or roles)[0]
        logger.info("%s: using first account %s and role %s", profile, account.account_id, role.role_name)
        return account.account_id, role.role_name

    def _choose_pair(
        self,
        profile: str,
        policy: SelectionPolicy,
        pinned: tuple[str, str] | None,
    ) -> tuple[AccountInfo, str]:
        if policy is SelectionPolicy.PROMPT_WITH_CONFIRM and pinned is not None:
            account_id, role_name = pinned
            if self.prompter.confirm(t("login.use_pinned", account=account_id, role=role_name), default=True):
                return AccountInfo(account_id, account_id), role_name
            accounts = self.federated.list_accounts(profile)
            if not accounts:
                print_warning(t("login.no_accounts_fallback"))
                return AccountInfo(account_id, account_id), role_name
        else:
            accounts = self.federated.list_accounts(profile)
            if not accounts:
                raise AuthFailed(f"No accounts are available under '{profile}'", profile=profile)

        account = self.prompter.select(
            t("login.select_account"),
            [(a.label, a) for a in accounts],
        )
        roles = self.federated.list_roles(profile, account.account_id)
        if any(r.guessed for r in roles):
            print_warning(t("login.roles_guessed", account=account.account_name))
        unverified = t("login.unverified")
        role = self.prompter.select(
            t("login.select_role", account=account.account_name),
            [(f"{r.role_name} ({unverified})" if r.guessed else r.role_name, r) for r in roles],
        )
        return account, role.role_name

    # =========================================================================
    # Reporting
    # =========================================================================

    def _finish(self, profile: str, status: LoginStatus, session: Session | None) -> LoginResult:
        probe = self.validator.probe(profile)
        if not probe.success:
            raise ProbeFailed(profile, probe.error)
        return self._report(LoginResult(profile, status, probe.identity, session))

    def _report(self, result: LoginResult) -> LoginResult:
        print_success(t(f"login.status_{result.status.name.lower()}", profile=result.resolved_profile))
        print_identity(result.identity)
        return result

    # =========================================================================
    # Clean / all-org
    # =========================================================================

    def clean(self, profile: str) -> list[str]:
        """Remove the short-lived session (and child metadata) from profile.

        Long-term keys and SSO settings stay. Calling it again is a no-op.

        Returns:
            keys removed
        """
        if not self.store.exists(profile):
            raise ProfileNotFound(profile)

        record = self.store.snapshot(profile)
        targets: list[str] = []
        if record.get(keys.SESSION_TOKEN) or record.get(keys.SESSION_EXPIRATION):
            targets.extend(keys.SESSION_KEYS)
        if record.get(keys.PARENT_PROFILE):
            targets.extend(keys.CHILD_KEYS)

        removed = self.store.unset_many(profile, targets)
        if removed:
            print_success(t("login.cleaned", profile=profile, count=len(removed)))
        else:
            print_info(t("login.clean_nothing", profile=profile))
        return removed

    def configure_all_org(self, profile: str) -> list[str]:
        """Create one pinned child per account reachable from profile.

        Each child carries the parent's SSO settings pinned to the account's
        first listed role. Accounts whose roles cannot be listed are skipped.

        Returns:
            child profile names written
        """
        strategy = self.classify(profile)
        if strategy.kind is not ProfileKind.FEDERATED:
            raise ConfigurationError(
                f"Profile '{profile}' has no SSO configuration",
                profile=profile,
                hint=f"Run 'awslogin {profile} --setup-iam-identity-center' first",
            )

        self._ensure_token(profile)
        accounts = self.federated.list_accounts(profile)
        if not accounts:
            raise AuthFailed(f"No accounts are available under '{profile}'", profile=profile)
        print_info(t("login.org_found", count=len(accounts)))

        federation = self.store.get_many(profile, keys.FEDERATION_KEYS)
        region = self.store.get(profile, keys.REGION) or settings.DEFAULT_REGION
        written = []
        for account in accounts:
            roles = [r for r in self.federated.list_roles(profile, account.account_id) if not r.guessed]
            if not roles:
                print_warning(t("login.org_skipped", account=account.label))
                continue

            role_name = roles[0].role_name
            name = self.children.name_for(profile, account)
            values = dict(federation)
            values.update(
                {
                    keys.SSO_ACCOUNT_ID: account.account_id,
                    keys.SSO_ROLE_NAME: role_name,
                    keys.REGION: region,
                    keys.PARENT_PROFILE: profile,
                    keys.ACCOUNT_ID: account.account_id,
                    keys.ACCOUNT_NAME: account.account_name,
                    keys.ROLE_NAME: role_name,
                }
            )
            self.store.set_many(name, values)
            written.append(name)
            print_success(t("login.org_created", profile=name, account=account.label, role=role_name))

        print_info(t("login.org_done", count=len(written), profile=profile))
        return written


def create_orchestrator(
    prompter: Prompter,
    runner: CommandRunner | None = None,
    store: ProfileStore | None = None,
    token_cache: TokenCacheReader | None = None,
    clock: Clock = utc_now,
) -> Orchestrator:
    """Wire an orchestrator against the real AWS and 1Password CLIs.

    Args:
        prompter: shared prompter
        runner: command runner (tests pass a fake)
        store: profile store (defaults to the shared AWS config files)
        token_cache: SSO token cache reader
        clock: time source
    """
    runner = runner or CommandRunner()
    aws = AwsCli(runner)
    store = store or ProfileStore(AwsCliConfigBackend(aws), clock=clock)
    token_cache = token_cache or TokenCacheReader(clock=clock)

    validator = SessionValidator(store, aws, token_cache, clock=clock)
    federated = FederatedLoginDriver(store, aws, token_cache, clock=clock)
    otp = OnePasswordOtpProvider(store, OnePasswordCli(runner), prompter)
    long_term = LongTermSessionDriver(store, aws, prompter, otp_provider=otp)
    children = ChildProfileManager(store, federated)
    return Orchestrator(store, validator, federated, long_term, children, prompter)
