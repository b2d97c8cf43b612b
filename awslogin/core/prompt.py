"""
awslogin/core/prompt.py - interactive prompt interface

Drivers and the orchestrator ask questions through a Prompter so that one
instance owns the terminal for the whole run and tests can script answers.
The questionary-backed implementation lives in awslogin.cli.ui.prompt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

Validator = Callable[[str], "bool | str"]


class Prompter(ABC):
    """Interactive questions.

    Implementations raise UserCancelError when the user aborts.
    """

    @abstractmethod
    def select(self, message: str, choices: Sequence[tuple[str, T]], default: T | None = None) -> T:
        """Pick one value from (label, value) pairs."""

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Yes/no question."""

    @abstractmethod
    def text(
        self,
        message: str,
        default: str = "",
        secret: bool = False,
        validate: Validator | None = None,
    ) -> str:
        """Free text; secret hides the input."""


def validate_otp(value: Any) -> bool | str:
    """questionary-style validator for a six digit code."""
    text = str(value or "").strip()
    if len(text) == 6 and text.isdigit():
        return True
    return "Enter the 6-digit code"
