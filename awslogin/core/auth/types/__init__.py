# awslogin/core/auth/types/__init__.py
"""
Shared types of the auth package: profile classification, credential
values, the login contract and auth errors.

Note:
    This package uses lazy imports.
"""

__all__ = [
    "utc_now",
    "parse_timestamp",
    "format_timestamp",
    "Clock",
    "ProfileKind",
    "ProfileStrategy",
    "long_term_name",
    "Session",
    "Identity",
    "AccountInfo",
    "RoleInfo",
    "SelectionPolicy",
    "decide_selection_policy",
    "LoginOptions",
    "LoginStatus",
    "LoginResult",
    "AuthFailed",
    "FederationExpired",
    "ParentFederationExpired",
    "OtpRejected",
    "ProbeFailed",
]

_IMPORT_MAPPING = {
    "utc_now": (".types", "utc_now"),
    "parse_timestamp": (".types", "parse_timestamp"),
    "format_timestamp": (".types", "format_timestamp"),
    "Clock": (".types", "Clock"),
    "ProfileKind": (".types", "ProfileKind"),
    "ProfileStrategy": (".types", "ProfileStrategy"),
    "long_term_name": (".types", "long_term_name"),
    "Session": (".types", "Session"),
    "Identity": (".types", "Identity"),
    "AccountInfo": (".types", "AccountInfo"),
    "RoleInfo": (".types", "RoleInfo"),
    "SelectionPolicy": (".types", "SelectionPolicy"),
    "decide_selection_policy": (".types", "decide_selection_policy"),
    "LoginOptions": (".types", "LoginOptions"),
    "LoginStatus": (".types", "LoginStatus"),
    "LoginResult": (".types", "LoginResult"),
    "AuthFailed": (".types", "AuthFailed"),
    "FederationExpired": (".types", "FederationExpired"),
    "ParentFederationExpired": (".types", "ParentFederationExpired"),
    "OtpRejected": (".types", "OtpRejected"),
    "ProbeFailed": (".types", "ProbeFailed"),
}


def __getattr__(name: str):
    """Lazy import: submodules load on first use"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
