# awslogin/core/auth/provider/__init__.py
"""
Credential drivers.

- FederatedLoginDriver: SSO token, account/role listing, role credentials
- LongTermSessionDriver: MFA session from long-term keys
- OnePasswordOtpProvider: one-time passwords from 1Password

Note:
    This package uses lazy imports.
"""

__all__ = [
    "FederatedLoginDriver",
    "EphemeralProfile",
    "LongTermSessionDriver",
    "LongTermLoginResult",
    "OnePasswordOtpProvider",
    "match_items",
]

_IMPORT_MAPPING = {
    "FederatedLoginDriver": (".sso", "FederatedLoginDriver"),
    "EphemeralProfile": (".sso", "EphemeralProfile"),
    "LongTermSessionDriver": (".mfa", "LongTermSessionDriver"),
    "LongTermLoginResult": (".mfa", "LongTermLoginResult"),
    "OnePasswordOtpProvider": (".otp", "OnePasswordOtpProvider"),
    "match_items": (".otp", "match_items"),
}


def __getattr__(name: str):
    """Lazy import: submodules load on first use"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
