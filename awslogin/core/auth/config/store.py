# awslogin/core/auth/config/store.py
"""
awslogin/core/auth/config/store.py - profile store

ProfileStore is the typed key/value view over the shared AWS configuration
that the rest of awslogin uses. It sits on a ConfigBackend:

    - AwsCliConfigBackend: parses ~/.aws/config and ~/.aws/credentials with
      botocore and writes through 'aws configure set/unset', so the files
      stay in the format every other tool expects
    - InMemoryConfigBackend: dict-backed, for tests and dry runs

Writes to one profile are serialised by a per-profile lock, and a short
read-through cache absorbs the many reads of classification and validation.

Usage:
    from awslogin.core.auth.config import ProfileStore, AwsCliConfigBackend

    store = ProfileStore(AwsCliConfigBackend(aws_cli))
    store.set_many("dev", session.to_record())
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path

from botocore.configloader import raw_config_parse
from botocore.exceptions import ConfigNotFound, ConfigParseError

from awslogin.core.command import AwsCli
from awslogin.core.config import get_aws_config_file, get_aws_credentials_file, settings
from awslogin.core.exceptions import StoreUnavailable, first_line

from ..cache import CacheEntry
from ..types import Clock, utc_now
from . import keys

logger = logging.getLogger(__name__)

Record = dict[str, str]


# =============================================================================
# Backends
# =============================================================================


class ConfigBackend(ABC):
    """Raw access to profile records."""

    @abstractmethod
    def list_profiles(self) -> list[str]:
        """Names of all profiles."""

    @abstractmethod
    def read_profile(self, name: str) -> Record | None:
        """All non-empty keys of a profile, or None when it does not exist."""

    @abstractmethod
    def write(self, name: str, key: str, value: str) -> None:
        """Set one key, creating the profile if needed."""

    @abstractmethod
    def delete(self, name: str, key: str) -> None:
        """Remove one key."""

    def read_sso_session(self, name: str) -> Record | None:
        """Keys of an [sso-session] section."""
        return None


def _clean_section(section: Mapping) -> Record:
    # nested sub-sections (s3 = ...) come back as dicts
    return {
        str(k): str(v).strip()
        for k, v in section.items()
        if isinstance(v, str) and v.strip()
    }


class AwsCliConfigBackend(ConfigBackend):
    """Shared AWS config files, read with botocore and written with the CLI.

    Args:
        aws: AWS CLI wrapper used for writes
        config_file: override of ~/.aws/config
        credentials_file: override of ~/.aws/credentials
    """

    def __init__(
        self,
        aws: AwsCli,
        config_file: Path | None = None,
        credentials_file: Path | None = None,
    ):
        self.aws = aws
        self.config_file = Path(config_file) if config_file else get_aws_config_file()
        self.credentials_file = Path(credentials_file) if credentials_file else get_aws_credentials_file()

    def _parse(self, path: Path) -> dict | None:
        try:
            return raw_config_parse(str(path))
        except ConfigNotFound:
            return None
        except ConfigParseError as e:
            raise StoreUnavailable(f"Cannot parse {path}", path=str(path), cause=e) from e
        except OSError as e:
            raise StoreUnavailable(f"Cannot read {path}", path=str(path), cause=e) from e

    def _load(self) -> tuple[dict[str, Record], dict[str, Record]]:
        config = self._parse(self.config_file)
        credentials = self._parse(self.credentials_file)
        if config is None and credentials is None:
            raise StoreUnavailable(
                f"No AWS configuration found at {self.config_file}",
                path=str(self.config_file),
            )

        profiles: dict[str, Record] = {}
        sso_sessions: dict[str, Record] = {}
        for section, values in (config or {}).items():
            if section == "default":
                profiles.setdefault("default", {}).update(_clean_section(values))
            elif section.startswith("profile "):
                name = section[len("profile "):].strip()
                profiles.setdefault(name, {}).update(_clean_section(values))
            elif section.startswith("sso-session "):
                sso_sessions[section[len("sso-session "):].strip()] = _clean_section(values)

        for section, values in (credentials or {}).items():
            profiles.setdefault(section.strip(), {}).update(_clean_section(values))

        return profiles, sso_sessions

    def list_profiles(self) -> list[str]:
        profiles, _ = self._load()
        return list(profiles)

    def read_profile(self, name: str) -> Record | None:
        profiles, _ = self._load()
        record = profiles.get(name)
        return dict(record) if record is not None else None

    def read_sso_session(self, name: str) -> Record | None:
        _, sso_sessions = self._load()
        record = sso_sessions.get(name)
        return dict(record) if record is not None else None

    def write(self, name: str, key: str, value: str) -> None:
        result = self.aws.configure_set(name, key, value)
        if not result.success:
            raise StoreUnavailable(
                f"Cannot write '{key}' to profile '{name}': {first_line(result.stderr) or result.returncode}",
                path=str(self.config_file),
            )

    def delete(self, name: str, key: str) -> None:
        result = self.aws.configure_unset(name, key)
        if result.success:
            return
        # CLI builds without 'configure unset' still accept an empty value,
        # which readers treat as absent
        logger.debug("configure unset failed for %s/%s, blanking instead", name, key)
        self.write(name, key, "")


class InMemoryConfigBackend(ConfigBackend):
    """Dict-backed store.

    Attributes:
        writes: (profile, key, value-or-None) in call order
    """

    def __init__(
        self,
        profiles: Mapping[str, Mapping[str, str]] | None = None,
        sso_sessions: Mapping[str, Mapping[str, str]] | None = None,
    ):
        self.profiles: dict[str, Record] = {k: dict(v) for k, v in (profiles or {}).items()}
        self.sso_sessions: dict[str, Record] = {k: dict(v) for k, v in (sso_sessions or {}).items()}
        self.writes: list[tuple[str, str, str | None]] = []

    def list_profiles(self) -> list[str]:
        return list(self.profiles)

    def read_profile(self, name: str) -> Record | None:
        record = self.profiles.get(name)
        return dict(record) if record is not None else None

    def read_sso_session(self, name: str) -> Record | None:
        record = self.sso_sessions.get(name)
        return dict(record) if record is not None else None

    def write(self, name: str, key: str, value: str) -> None:
        self.writes.append((name, key, value))
        self.profiles.setdefault(name, {})[key] = value

    def delete(self, name: str, key: str) -> None:
        self.writes.append((name, key, None))
        self.profiles.get(name, {}).pop(key, None)


# =============================================================================
# Profile Store
# =============================================================================


class ProfileStore:
    """Typed profile access with per-profile locking and a read cache.

    Missing keys read as None. Backend failures surface as StoreUnavailable.

    Args:
        backend: where records live
        ttl_seconds: lifetime of cached records
        clock: time source for cache expiry
    """

    def __init__(
        self,
        backend: ConfigBackend,
        ttl_seconds: float | None = None,
        clock: Clock = utc_now,
    ):
        self.backend = backend
        self.ttl_seconds = settings.STORE_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self._records: dict[str, CacheEntry[Record | None]] = {}
        self._names: CacheEntry[list[str]] | None = None
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    # --- locking / cache ---------------------------------------------------

    def lock(self, name: str) -> threading.RLock:
        """Lock serialising reads and writes of one profile."""
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.RLock()
            return lock

    def invalidate(self, name: str | None = None) -> None:
        """Drop cached data for one profile, or everything."""
        with self._guard:
            if name is None:
                self._records.clear()
            else:
                self._records.pop(name, None)
            self._names = None

    def _entry(self, value):
        return CacheEntry.with_ttl(value, self.ttl_seconds, now=self.clock())

    def _record(self, name: str) -> Record | None:
        with self.lock(name):
            entry = self._records.get(name)
            if entry is not None and not entry.is_expired(now=self.clock()):
                return entry.value

            record = self.backend.read_profile(name)
            self._records[name] = self._entry(record)
            return record

    # --- reads -------------------------------------------------------------

    def list(self) -> list[str]:
        entry = self._names
        if entry is not None and not entry.is_expired(now=self.clock()):
            return list(entry.value)

        names = self.backend.list_profiles()
        self._names = self._entry(list(names))
        return list(names)

    def exists(self, name: str) -> bool:
        return self._record(name) is not None

    def snapshot(self, name: str) -> Record:
        """Copy of every key on a profile ({} when it does not exist)."""
        return dict(self._record(name) or {})

    def get(self, name: str, key: str) -> str | None:
        record = self._record(name)
        if not record:
            return None
        return record.get(key) or None

    def get_many(self, name: str, keys: Iterable[str]) -> Record:
        """Present keys among the requested ones."""
        record = self._record(name) or {}
        return {k: record[k] for k in keys if record.get(k)}

    def sso_session(self, name: str) -> Record | None:
        return self.backend.read_sso_session(name)

    def federation_lookup(self, name: str) -> tuple[str | None, str | None, str | None]:
        """(sso session name, start URL, SSO region) of a profile.

        Values missing on the profile are taken from its [sso-session]
        section.
        """
        record = self.get_many(name, (keys.SSO_SESSION, keys.SSO_START_URL, keys.SSO_REGION))
        session_name = record.get(keys.SSO_SESSION)
        start_url = record.get(keys.SSO_START_URL)
        sso_region = record.get(keys.SSO_REGION)
        if session_name:
            section = self.sso_session(session_name) or {}
            start_url = start_url or section.get(keys.SSO_START_URL)
            sso_region = sso_region or section.get(keys.SSO_REGION)
        return session_name, start_url, sso_region

    # --- writes ------------------------------------------------------------

    def set(self, name: str, key: str, value: str) -> None:
        self.set_many(name, {key: value})

    def set_many(self, name: str, values: Mapping[str, str]) -> None:
        """Write several keys under the profile's lock.

        The cached record is updated as each key lands, so readers holding
        the same store see either none or all of the keys.
        """
        if not values:
            return

        with self.lock(name):
            existing = self._record(name)
            current = dict(existing or {})
            if existing is None:
                self._names = None
            try:
                for key, value in values.items():
                    self.backend.write(name, key, str(value))
                    current[key] = str(value)
                    self._records[name] = self._entry(dict(current))
            except Exception:
                # the backend may hold part of the batch; reread on next access
                self.invalidate(name)
                raise
        logger.debug("profile %s: wrote %s", name, ", ".join(values))

    def unset(self, name: str, key: str) -> None:
        self.unset_many(name, [key])

    def unset_many(self, name: str, keys: Iterable[str]) -> list[str]:
        """Remove keys that are present. Returns the keys actually removed."""
        with self.lock(name):
            current = self._record(name)
            if not current:
                return []
            present = [k for k in keys if k in current]
            if not present:
                return []

            remaining = dict(current)
            try:
                for key in present:
                    self.backend.delete(name, key)
                    remaining.pop(key, None)
                    self._records[name] = self._entry(dict(remaining))
            except Exception:
                self.invalidate(name)
                raise
        logger.debug("profile %s: removed %s", name, ", ".join(present))
        return present
