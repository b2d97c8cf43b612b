# awslogin/core/auth/cache/cache.py
"""
Auth caches

- CacheEntry: generic in-memory entry with an expiry
- TokenCache: one SSO token record written by the AWS CLI
- TokenCacheReader: read-only view over ~/.aws/sso/cache

The SSO token cache belongs to the AWS CLI. awslogin only reads it, to tell
whether a browser login is needed and to pass --access-token to the SSO API.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar

from awslogin.core.config import get_sso_cache_dir

from ..types import Clock, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

# =============================================================================
# Generic Cache Entry
# =============================================================================

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """Cached value with an optional expiry.

    Attributes:
        value: cached value
        created_at: creation time (UTC)
        expires_at: expiry (UTC, None never expires)
    """

    value: T
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    @classmethod
    def with_ttl(cls, value: T, ttl_seconds: float, now: Optional[datetime] = None) -> "CacheEntry[T]":
        created = now or datetime.now(timezone.utc)
        return cls(value=value, created_at=created, expires_at=created + timedelta(seconds=ttl_seconds))

    def is_expired(self, buffer_seconds: int = 0, now: Optional[datetime] = None) -> bool:
        """True once now is within buffer_seconds of expires_at."""
        if self.expires_at is None:
            return False

        current = now or datetime.now(timezone.utc)
        return current >= (self.expires_at - timedelta(seconds=buffer_seconds))

    def remaining_seconds(self, now: Optional[datetime] = None) -> Optional[int]:
        if self.expires_at is None:
            return None

        remaining = self.expires_at - (now or datetime.now(timezone.utc))
        return max(0, int(remaining.total_seconds()))


# =============================================================================
# Token Cache
# =============================================================================


@dataclass
class TokenCache:
    """SSO token record (~/.aws/sso/cache/<sha1>.json).

    Attributes:
        access_token: SSO access token
        expires_at: raw expiry string as written by the CLI
        client_id: OIDC client id
        client_secret: OIDC client secret (set on client registrations)
        region: SSO region
        start_url: SSO start URL
    """

    access_token: str
    expires_at: str
    client_id: str = ""
    client_secret: str = ""
    refresh_token: Optional[str] = None
    region: Optional[str] = None
    start_url: Optional[str] = None

    @property
    def expires_at_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.expires_at)

    @property
    def is_client_registration(self) -> bool:
        """OIDC client registrations share the directory but hold no token."""
        return bool(self.client_secret) and not self.access_token

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True while expires_at is strictly in the future."""
        expires_at = self.expires_at_datetime
        if expires_at is None:
            return False
        return expires_at > (now or utc_now())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenCache":
        return cls(
            access_token=data.get("accessToken", ""),
            expires_at=str(data.get("expiresAt") or data.get("expires_at") or ""),
            client_id=data.get("clientId", ""),
            client_secret=data.get("clientSecret", ""),
            refresh_token=data.get("refreshToken"),
            region=data.get("region"),
            start_url=data.get("startUrl"),
        )


def sso_cache_key(session_name: Optional[str] = None, start_url: Optional[str] = None) -> str:
    """File stem the AWS CLI uses for a token.

    sso-session profiles hash the session name; legacy profiles hash the
    start URL.
    """
    input_str = session_name if session_name else (start_url or "")
    return hashlib.sha1(input_str.encode("utf-8")).hexdigest()


class TokenCacheReader:
    """Read-only access to the AWS CLI SSO token cache.

    Every *.json file in the directory is parsed; malformed files and
    client registrations are skipped.
    """

    def __init__(self, cache_dir: Optional[Path] = None, clock: Clock = utc_now):
        self.cache_dir = Path(cache_dir) if cache_dir else get_sso_cache_dir()
        self.clock = clock

    def load_all(self) -> List[TokenCache]:
        if not self.cache_dir.is_dir():
            return []

        tokens = []
        for path in sorted(self.cache_dir.glob("*.json")):
            token = self._load(path)
            if token is not None:
                tokens.append(token)
        return tokens

    def _load(self, path: Path) -> Optional[TokenCache]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return None

        if not isinstance(data, dict):
            return None
        token = TokenCache.from_dict(data)
        if token.is_client_registration or not token.expires_at:
            return None
        return token

    def valid_tokens(self) -> List[TokenCache]:
        now = self.clock()
        return [t for t in self.load_all() if t.is_valid(now)]

    def has_valid_token(self) -> bool:
        """True when at least one cached token has not expired."""
        valid = bool(self.valid_tokens())
        logger.debug("SSO token cache %s: valid=%s", self.cache_dir, valid)
        return valid

    def has_token_for(
        self, session_name: Optional[str] = None, start_url: Optional[str] = None
    ) -> bool:
        """True when a valid token matches the session name or start URL.

        Without either, any valid token counts.
        """
        if not (session_name or start_url):
            return self.has_valid_token()
        found = self.token_for(session_name, start_url) is not None
        logger.debug("SSO token for %s: valid=%s", session_name or start_url, found)
        return found

    def token_for(
        self, session_name: Optional[str] = None, start_url: Optional[str] = None
    ) -> Optional[TokenCache]:
        """Valid token for a session name or start URL.

        Looks up the CLI's own file first, then any valid token with the
        same start URL.
        """
        if session_name or start_url:
            path = self.cache_dir / f"{sso_cache_key(session_name, start_url)}.json"
            token = self._load(path) if path.exists() else None
            if token is not None and token.access_token and token.is_valid(self.clock()):
                return token

        if start_url:
            matches = [t for t in self.valid_tokens() if t.access_token and t.start_url == start_url]
            if matches:
                return max(matches, key=lambda t: t.expires_at_datetime)
        return None

    def access_token_for(
        self, session_name: Optional[str] = None, start_url: Optional[str] = None
    ) -> Optional[str]:
        token = self.token_for(session_name, start_url)
        return token.access_token if token else None

    def expiry_for(
        self, session_name: Optional[str] = None, start_url: Optional[str] = None
    ) -> Optional[datetime]:
        """Expiry of the matching token, else of the longest-lived valid one."""
        token = self.token_for(session_name, start_url)
        if token is None:
            valid = self.valid_tokens()
            if not valid:
                return None
            token = max(valid, key=lambda t: t.expires_at_datetime)
        return token.expires_at_datetime
