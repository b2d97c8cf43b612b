# awslogin/core/auth/provider/otp.py
"""
awslogin/core/auth/provider/otp.py - one-time passwords from 1Password

The provider is optional: when the op CLI is missing or signed out it
returns None and the caller prompts instead. Codes are never cached.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from awslogin.cli.i18n import t
from awslogin.core.command import OnePasswordCli
from awslogin.core.config import settings
from awslogin.core.prompt import Prompter

from ..config import ProfileStore, keys

logger = logging.getLogger(__name__)

STOP_WORDS = {"aws", "amazon", "mfa", "totp", "otp"}
_SEPARATORS = re.compile(r"[-_\s]+")


def normalise_title(text: str) -> str:
    """Lowercase, drop stop-words and separators."""
    words = _SEPARATORS.split(text.lower())
    return "".join(w for w in words if w and w not in STOP_WORDS)


def base_profile_name(profile: str) -> str:
    suffix = settings.LONG_TERM_SUFFIX
    if profile.endswith(suffix):
        profile = profile[: -len(suffix)]
    return profile.lower()


def match_items(items: Iterable[Mapping[str, Any]], profile: str) -> list[Mapping[str, Any]]:
    """1Password items that plausibly hold the profile's MFA secret.

    Only titles mentioning aws or amazon are considered. Exact matches of
    the normalised title win over substring matches. The result is sorted
    by (title, id).
    """
    base = base_profile_name(profile)
    wanted = normalise_title(base)
    exact, partial = [], []

    for item in items:
        title = str(item.get("title") or "").lower()
        if "aws" not in title and "amazon" not in title:
            continue

        normalised = normalise_title(title)
        if normalised and normalised == wanted:
            exact.append(item)
        elif base in title or (normalised and normalised in wanted):
            partial.append(item)

    chosen = exact or partial
    return sorted(chosen, key=lambda i: (str(i.get("title") or ""), str(i.get("id") or "")))


class OnePasswordOtpProvider:
    """TOTP codes for a profile from 1Password.

    Args:
        store: profile store (holds the item link)
        op: 1Password CLI wrapper
        prompter: used to choose between several matching items
    """

    def __init__(self, store: ProfileStore, op: OnePasswordCli, prompter: Prompter | None = None):
        self.store = store
        self.op = op
        self.prompter = prompter

    def available(self) -> bool:
        return self.op.available()

    def get_otp(self, profile: str) -> str | None:
        """Current code for a profile, or None when 1Password cannot supply one."""
        if keys.is_false(self.store.get(profile, keys.OTP_ENABLED)):
            logger.debug("1Password MFA switched off for %s", profile)
            return None
        if not self.op.available():
            return None

        item_id = self.store.get(profile, keys.OTP_ITEM_ID)
        if item_id:
            if self.op.get_item(item_id) is not None:
                return self.op.get_otp(item_id)
            logger.info("Linked 1Password item %s no longer exists", item_id)

        item_id = self.find_item(profile)
        if not item_id:
            return None

        self.store.set(profile, keys.OTP_ITEM_ID, item_id)
        return self.op.get_otp(item_id)

    def find_item(self, profile: str) -> str | None:
        """Search 1Password for the profile's item, asking when ambiguous."""
        matches = match_items(self.op.list_items(), profile)
        if not matches:
            logger.debug("No 1Password item matches %s", profile)
            return None
        if len(matches) == 1:
            return str(matches[0].get("id"))
        if self.prompter is None:
            return None

        choices = [(f"{m.get('title')} ({m.get('id')})", str(m.get("id"))) for m in matches]
        return self.prompter.select(t("login.otp_choose", profile=profile), choices)
