"""
awslogin/cli/i18n/messages/__init__.py - message registry

One module per namespace (login, wizard, cli), each a dict of
name -> {"en": ..., "ko": ...}. register_messages() flattens them into
MESSAGES under "<namespace>.<name>".
"""

from __future__ import annotations

from typing import TypedDict


class MessageDict(TypedDict):
    en: str
    ko: str


MESSAGES: dict[str, MessageDict] = {}


def register_messages(namespace: str, messages: dict[str, MessageDict]) -> None:
    """Add a namespace's messages to the registry.

    Raises:
        ValueError: a key is already registered with different text
    """
    for name, entry in messages.items():
        key = f"{namespace}.{name}"
        if key in MESSAGES and MESSAGES[key] != entry:
            raise ValueError(f"message {key!r} registered twice")
        MESSAGES[key] = entry


# Registered after register_messages is defined
from awslogin.cli.i18n.messages.cli_commands import CLI_MESSAGES  # noqa: E402
from awslogin.cli.i18n.messages.login import LOGIN_MESSAGES  # noqa: E402
from awslogin.cli.i18n.messages.wizard import WIZARD_MESSAGES  # noqa: E402

register_messages("login", LOGIN_MESSAGES)
register_messages("wizard", WIZARD_MESSAGES)
register_messages("cli", CLI_MESSAGES)

__all__ = ["MESSAGES", "register_messages", "MessageDict"]
