# awslogin/core/auth/children.py
"""
awslogin/core/auth/children.py - child profiles under a federated parent

A child pins one (account, role) pair and holds a session minted with the
parent's SSO token. Only the child-to-parent edge is stored
(parent_profile); a parent's children are found by scanning profiles.
"""

from __future__ import annotations

import logging
import re

from awslogin.core.config import settings
from awslogin.core.exceptions import ConfigurationError, ProfileNotFound

from .config import ProfileStore, keys
from .provider import FederatedLoginDriver
from .types import AccountInfo, ParentFederationExpired, Session

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Lowercase ASCII letters and digits joined by single dashes."""
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


class ChildProfileManager:
    """Creates, lists and refreshes child profiles.

    Args:
        store: profile store
        federated: driver used to mint child credentials
    """

    def __init__(self, store: ProfileStore, federated: FederatedLoginDriver):
        self.store = store
        self.federated = federated

    def derive_name(self, parent: str, account: AccountInfo) -> str:
        slug = slugify(account.account_name) or account.account_id
        return f"{parent}-{slug}"

    def list_children(self, parent: str) -> list[str]:
        return sorted(
            name for name in self.store.list() if self.store.get(name, keys.PARENT_PROFILE) == parent
        )

    def find_child(self, parent: str, account_id: str) -> str | None:
        """Existing child of parent pinned to account_id."""
        for name in self.list_children(parent):
            if self.store.get(name, keys.ACCOUNT_ID) == account_id:
                return name
        return None

    def name_for(self, parent: str, account: AccountInfo) -> str:
        """Name to use for a child of parent pinned to account.

        An existing child for the account keeps its name. A clash with a
        profile that is not a child of parent is an error.
        """
        existing = self.find_child(parent, account.account_id)
        if existing:
            return existing

        name = self.derive_name(parent, account)
        if not self.store.exists(name):
            return name

        owner = self.store.get(name, keys.PARENT_PROFILE)
        if owner == parent:
            # another account of this parent slugs to the same name
            return f"{name}-{account.account_id}"
        raise ConfigurationError(
            f"Profile '{name}' already exists and is not a child of '{parent}'",
            profile=name,
            hint="Rename that profile or the account alias",
        )

    def create_or_refresh(self, parent: str, account: AccountInfo, role_name: str, session: Session) -> tuple[str, bool]:
        """Write a session and child metadata.

        Returns:
            (child name, True when the child was created)
        """
        name = self.name_for(parent, account)
        created = not self.store.exists(name)

        values = session.to_record()
        values[keys.REGION] = self.store.get(parent, keys.REGION) or settings.DEFAULT_REGION
        values[keys.PARENT_PROFILE] = parent
        values[keys.ACCOUNT_ID] = account.account_id
        values[keys.ACCOUNT_NAME] = account.account_name
        values[keys.ROLE_NAME] = role_name
        self.store.set_many(name, values)

        logger.info("%s child profile %s (%s/%s)", "Created" if created else "Updated", name, account.account_id, role_name)
        return name, created

    def parent_of(self, child: str) -> str:
        """Parent of a child, checked to exist and to be federated.

        Raises:
            ConfigurationError: child has no parent_profile, or parent is not federated
            ProfileNotFound: parent profile is missing
        """
        parent = self.store.get(child, keys.PARENT_PROFILE)
        if not parent:
            raise ConfigurationError(f"Profile '{child}' is not a child profile", profile=child)
        if not self.store.exists(parent):
            raise ProfileNotFound(parent, hint=f"Recreate '{parent}' or clean '{child}'")
        if not keys.is_federated(self.store.snapshot(parent)):
            raise ConfigurationError(
                f"Parent profile '{parent}' of '{child}' has no SSO configuration",
                profile=parent,
                config_key=keys.SSO_SESSION,
            )
        return parent

    def is_stale(self, child: str) -> bool:
        """True when SSO keys copied onto the child differ from the parent's."""
        parent = self.store.get(child, keys.PARENT_PROFILE)
        if not parent:
            return False
        child_keys = self.store.get_many(child, keys.FEDERATION_KEYS)
        parent_keys = self.store.get_many(parent, keys.FEDERATION_KEYS)
        return any(parent_keys.get(k) != v for k, v in child_keys.items())

    def refresh_child(self, child: str) -> Session:
        """Mint a new session for a child from its parent's SSO token.

        Raises:
            ParentFederationExpired: the parent's token is not valid
            ConfigurationError: metadata missing or parent not federated
            ProfileNotFound: parent missing
        """
        parent = self.parent_of(child)
        if not self.federated.has_valid_token(parent):
            raise ParentFederationExpired(child, parent)

        meta = self.store.get_many(child, (keys.ACCOUNT_ID, keys.ROLE_NAME, keys.SSO_ACCOUNT_ID, keys.SSO_ROLE_NAME))
        account_id = meta.get(keys.ACCOUNT_ID) or meta.get(keys.SSO_ACCOUNT_ID)
        role_name = meta.get(keys.ROLE_NAME) or meta.get(keys.SSO_ROLE_NAME)
        if not account_id or not role_name:
            raise ConfigurationError(
                f"Child profile '{child}' is missing {keys.ACCOUNT_ID} or {keys.ROLE_NAME}",
                profile=child,
                hint=f"Run 'awslogin {parent} --change' to recreate it",
            )

        stale = self.is_stale(child)
        session = self.federated.mint_role_credentials(parent, account_id, role_name)

        values = session.to_record()
        dropped: list[str] = []
        if stale:
            logger.info("Child %s has outdated SSO settings; copying them from %s", child, parent)
            parent_keys = self.store.get_many(parent, keys.FEDERATION_KEYS)
            values.update(parent_keys)
            dropped = [k for k in keys.FEDERATION_KEYS if k not in parent_keys]

        with self.store.lock(child):
            self.store.set_many(child, values)
            self.store.unset_many(child, dropped)
        return session
