# awslogin/core/auth/__init__.py
"""
awslogin authentication core (core/auth)

Sub-packages and modules:
- types: profile classification, credential values, auth errors
- cache: SSO token cache reader, generic cache entry
- config: profile store and key names
- provider: federated, MFA and 1Password drivers
- session: session validation
- children: child profiles under a federated parent
- orchestrator: the login / clean / change-account verbs

Usage:
    from awslogin.core.auth import create_orchestrator, LoginOptions

    orchestrator = create_orchestrator(prompter)
    result = orchestrator.login("company", LoginOptions(select=True))

Note:
    This package uses lazy imports: submodules load on first use.
"""

__all__ = [
    # Types
    "ProfileKind",
    "ProfileStrategy",
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
    # Cache
    "CacheEntry",
    "TokenCache",
    "TokenCacheReader",
    # Config
    "ProfileStore",
    "AwsCliConfigBackend",
    "InMemoryConfigBackend",
    # Providers
    "FederatedLoginDriver",
    "LongTermSessionDriver",
    "OnePasswordOtpProvider",
    # Session
    "SessionValidator",
    "ValidationResult",
    # Children
    "ChildProfileManager",
    "slugify",
    # Orchestrator
    "Orchestrator",
    "create_orchestrator",
]

_IMPORT_MAPPING = {
    # Types
    "ProfileKind": (".types", "ProfileKind"),
    "ProfileStrategy": (".types", "ProfileStrategy"),
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
    # Cache
    "CacheEntry": (".cache", "CacheEntry"),
    "TokenCache": (".cache", "TokenCache"),
    "TokenCacheReader": (".cache", "TokenCacheReader"),
    # Config
    "ProfileStore": (".config", "ProfileStore"),
    "AwsCliConfigBackend": (".config", "AwsCliConfigBackend"),
    "InMemoryConfigBackend": (".config", "InMemoryConfigBackend"),
    # Providers
    "FederatedLoginDriver": (".provider", "FederatedLoginDriver"),
    "LongTermSessionDriver": (".provider", "LongTermSessionDriver"),
    "OnePasswordOtpProvider": (".provider", "OnePasswordOtpProvider"),
    # Session
    "SessionValidator": (".session", "SessionValidator"),
    "ValidationResult": (".session", "ValidationResult"),
    # Children
    "ChildProfileManager": (".children", "ChildProfileManager"),
    "slugify": (".children", "slugify"),
    # Orchestrator
    "Orchestrator": (".orchestrator", "Orchestrator"),
    "create_orchestrator": (".orchestrator", "create_orchestrator"),
}


def __getattr__(name: str):
    """Lazy import: submodules load on first use"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
