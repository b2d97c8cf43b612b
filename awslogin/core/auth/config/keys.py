"""
awslogin/core/auth/config/keys.py - profile key names

The names below are shared with the AWS CLI, the SDKs and every other tool
reading ~/.aws, so they are spelled here and nowhere else.
"""

from __future__ import annotations

from collections.abc import Mapping

# Identity
REGION = "region"
OUTPUT = "output"

# Federation
SSO_START_URL = "sso_start_url"
SSO_SESSION = "sso_session"
SSO_REGION = "sso_region"
SSO_ACCOUNT_ID = "sso_account_id"
SSO_ROLE_NAME = "sso_role_name"

# Long-term keys and short-lived session
ACCESS_KEY_ID = "aws_access_key_id"
SECRET_ACCESS_KEY = "aws_secret_access_key"
SESSION_TOKEN = "aws_session_token"
SESSION_EXPIRATION = "aws_session_expiration"

# MFA
MFA_DEVICE = "aws_mfa_device"
MFA_SERIAL = "mfa_serial"

# 1Password link
OTP_ITEM_ID = "aws_1password_item_id"
OTP_ENABLED = "aws_1password_mfa"

# Child metadata
PARENT_PROFILE = "parent_profile"
ACCOUNT_ID = "account_id"
ACCOUNT_NAME = "account_name"
ROLE_NAME = "role_name"

ASSUME_ROLE = "assume_role"

SESSION_KEYS = (ACCESS_KEY_ID, SECRET_ACCESS_KEY, SESSION_TOKEN, SESSION_EXPIRATION)
LONG_TERM_KEYS = (ACCESS_KEY_ID, SECRET_ACCESS_KEY)
FEDERATION_KEYS = (SSO_SESSION, SSO_START_URL, SSO_REGION)
PINNED_KEYS = (SSO_ACCOUNT_ID, SSO_ROLE_NAME)
CHILD_KEYS = (PARENT_PROFILE, ACCOUNT_ID, ACCOUNT_NAME, ROLE_NAME)

PROFILE_KEYS = (
    REGION,
    OUTPUT,
    *FEDERATION_KEYS,
    *PINNED_KEYS,
    *SESSION_KEYS,
    MFA_DEVICE,
    MFA_SERIAL,
    OTP_ITEM_ID,
    OTP_ENABLED,
    *CHILD_KEYS,
    ASSUME_ROLE,
)

TRUE_STRINGS = {"true", "yes", "1", "on"}
FALSE_STRINGS = {"false", "no", "0", "off"}


def mfa_device_of(record: Mapping[str, str]) -> str | None:
    """MFA device ARN, falling back to the AWS CLI's own mfa_serial key."""
    return record.get(MFA_DEVICE) or record.get(MFA_SERIAL) or None


def is_federated(record: Mapping[str, str]) -> bool:
    return bool(record.get(SSO_START_URL) or record.get(SSO_SESSION))


def has_long_term_keys(record: Mapping[str, str]) -> bool:
    return bool(record.get(ACCESS_KEY_ID) and record.get(SECRET_ACCESS_KEY))


def is_true(value: str | None) -> bool:
    return bool(value) and value.strip().lower() in TRUE_STRINGS


def is_false(value: str | None) -> bool:
    """Explicitly switched off; an absent value is not false."""
    return bool(value) and value.strip().lower() in FALSE_STRINGS
