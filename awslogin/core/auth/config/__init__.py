# awslogin/core/auth/config/__init__.py
"""
Profile store over the shared AWS configuration files.

Note:
    This package uses lazy imports. Key names live in .keys.
"""

__all__ = [
    "ConfigBackend",
    "AwsCliConfigBackend",
    "InMemoryConfigBackend",
    "ProfileStore",
]

_IMPORT_MAPPING = {
    "ConfigBackend": (".store", "ConfigBackend"),
    "AwsCliConfigBackend": (".store", "AwsCliConfigBackend"),
    "InMemoryConfigBackend": (".store", "InMemoryConfigBackend"),
    "ProfileStore": (".store", "ProfileStore"),
}


def __getattr__(name: str):
    """Lazy import: submodules load on first use"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
