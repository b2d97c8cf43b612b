# awslogin/core/auth/cache/__init__.py
"""
Caches used by the auth package.

- TokenCache / TokenCacheReader: the AWS CLI SSO token cache (read only)
- CacheEntry: generic in-memory entry with expiry

Note:
    This package uses lazy imports.
"""

__all__ = [
    "CacheEntry",
    "TokenCache",
    "TokenCacheReader",
    "sso_cache_key",
]

_IMPORT_MAPPING = {
    "CacheEntry": (".cache", "CacheEntry"),
    "TokenCache": (".cache", "TokenCache"),
    "TokenCacheReader": (".cache", "TokenCacheReader"),
    "sso_cache_key": (".cache", "sso_cache_key"),
}


def __getattr__(name: str):
    """Lazy import: submodules load on first use"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
