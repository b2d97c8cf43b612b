"""
awslogin/cli/i18n/__init__.py - message translation

Every line awslogin prints comes from the MESSAGES registry through t().
English is the default; Korean is selected with --lang ko.

Usage:
    from awslogin.cli.i18n import t, use_lang

    print(t("login.status_refreshed", profile="dev"))

    with use_lang("ko"):
        print(t("cli.cancelled"))
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextvars import ContextVar
from typing import Any

SUPPORTED_LANGS = ("en", "ko")
DEFAULT_LANG = "en"

_current_lang: ContextVar[str] = ContextVar("awslogin_lang", default=DEFAULT_LANG)


def _normalise(lang: str | None) -> str:
    return lang if lang in SUPPORTED_LANGS else DEFAULT_LANG


def get_lang() -> str:
    return _current_lang.get()


def set_lang(lang: str) -> None:
    """Select the output language; unsupported codes select English."""
    _current_lang.set(_normalise(lang))


@contextlib.contextmanager
def use_lang(lang: str) -> Iterator[str]:
    """Select a language for the duration of a with block.

    Yields:
        the language actually in effect
    """
    token = _current_lang.set(_normalise(lang))
    try:
        yield _current_lang.get()
    finally:
        _current_lang.reset(token)


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """Look up a message and fill in its placeholders.

    Args:
        key: "<namespace>.<name>", e.g. "login.status_refreshed"
        lang: override of the current language
        **kwargs: placeholder values

    Returns:
        the message; the key itself when unknown, the raw template when a
        placeholder is missing

    Examples:
        >>> t("cli.cancelled", lang="en")
        'Cancelled'
    """
    from awslogin.cli.i18n.messages import MESSAGES

    entry = MESSAGES.get(key)
    if entry is None:
        return key

    text = entry.get(_normalise(lang or get_lang())) or entry.get(DEFAULT_LANG) or key
    if kwargs:
        with contextlib.suppress(KeyError, ValueError, IndexError):
            text = text.format(**kwargs)
    return text


__all__ = [
    "t",
    "get_lang",
    "set_lang",
    "use_lang",
    "SUPPORTED_LANGS",
    "DEFAULT_LANG",
]
