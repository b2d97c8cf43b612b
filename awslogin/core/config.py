"""
awslogin/core/config.py - settings and path helpers

Application-wide constants live in one frozen dataclass. A handful of
values can be overridden through environment variables; everything else
is fixed because other tools depend on it (key names, cache locations).

Usage:
    from awslogin.core.config import settings, get_sso_cache_dir

    buffer = settings.EXPIRY_BUFFER_SECONDS
    cache_dir = get_sso_cache_dir()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable.

    Args:
        name: variable name
        default: value used when unset or unrecognised

    Returns:
        parsed boolean
    """
    raw = os.environ.get(name)
    if raw is None:
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False

    logger.warning("Ignoring unrecognised boolean for %s: %r", name, raw)
    return default


def get_env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad input."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default

    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-integer value for %s: %r", name, raw)
        return default


def get_env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        DEFAULT_REGION: region used when neither the long-term nor the
            standard profile defines one
        EXPIRY_BUFFER_SECONDS: sessions closer than this to expiry are
            treated as expired
        MFA_SESSION_DURATION_SECONDS: duration requested from
            get-session-token / assume-role with MFA
        ASSUME_ROLE_DURATION_SECONDS: duration for the role-assume
            fallback of the federated driver
        FEDERATION_CREDENTIAL_CEILING_SECONDS: expiry assumed for
            federation credentials that come without one
        STORE_CACHE_TTL_SECONDS: profile store read cache lifetime
        AWS_CLI: platform CLI executable
        OP_CLI: 1Password CLI executable
        LONG_TERM_SUFFIX: suffix of the sibling profile holding
            permanent keys
        EPHEMERAL_PROFILE_PREFIX: prefix of scratch profiles
    """

    DEFAULT_REGION: str = "us-east-1"
    DEFAULT_OUTPUT: str = "json"
    EXPIRY_BUFFER_SECONDS: int = 15 * 60
    MFA_SESSION_DURATION_SECONDS: int = 8 * 60 * 60
    ASSUME_ROLE_DURATION_SECONDS: int = 60 * 60
    FEDERATION_CREDENTIAL_CEILING_SECONDS: int = 8 * 60 * 60
    STORE_CACHE_TTL_SECONDS: float = 5.0
    AWS_CLI: str = "aws"
    OP_CLI: str = "op"
    LONG_TERM_SUFFIX: str = "-long-term"
    EPHEMERAL_PROFILE_PREFIX: str = "awslogin-tmp"
    ROLE_SESSION_PREFIX: str = "awslogin"
    FALLBACK_ROLE_NAMES: tuple[str, ...] = (
        "AdministratorAccess",
        "PowerUserAccess",
        "ReadOnlyAccess",
        "AWSAdministratorAccess",
        "AWSPowerUserAccess",
        "AWSReadOnlyAccess",
    )

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings, applying the supported environment overrides."""
        defaults = cls()
        return cls(
            DEFAULT_REGION=get_env_str("AWSLOGIN_DEFAULT_REGION", defaults.DEFAULT_REGION),
            MFA_SESSION_DURATION_SECONDS=get_env_int(
                "AWSLOGIN_MFA_DURATION", defaults.MFA_SESSION_DURATION_SECONDS
            ),
            STORE_CACHE_TTL_SECONDS=float(
                get_env_int("AWSLOGIN_CACHE_TTL", int(defaults.STORE_CACHE_TTL_SECONDS))
            ),
            AWS_CLI=get_env_str("AWSLOGIN_AWS_CLI", defaults.AWS_CLI),
            OP_CLI=get_env_str("AWSLOGIN_OP_CLI", defaults.OP_CLI),
        )


settings = Settings.from_env()


# =============================================================================
# Paths
# =============================================================================


def get_home_dir() -> Path:
    """Home directory used to locate ~/.aws (HOME, then USERPROFILE)."""
    for name in ("HOME", "USERPROFILE"):
        value = os.environ.get(name)
        if value:
            return Path(value)
    return Path.home()


def get_sso_cache_dir() -> Path:
    """Directory where the AWS CLI keeps SSO token cache files."""
    return get_home_dir() / ".aws" / "sso" / "cache"


def get_aws_config_file() -> Path:
    override = os.environ.get("AWS_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return get_home_dir() / ".aws" / "config"


def get_aws_credentials_file() -> Path:
    override = os.environ.get("AWS_SHARED_CREDENTIALS_FILE")
    if override:
        return Path(override).expanduser()
    return get_home_dir() / ".aws" / "credentials"


def get_version() -> str:
    """Installed package version."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("awslogin")
    except PackageNotFoundError:
        from awslogin import __version__

        return __version__


def is_debug_enabled() -> bool:
    return get_env_bool("AWSLOGIN_DEBUG", False)
