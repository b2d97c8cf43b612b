"""
awslogin/cli/ui/prompt.py - questionary prompter

One QuestionaryPrompter is created per run and shared by the orchestrator,
the drivers and the wizards.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import questionary

from awslogin.core.exceptions import UserCancelError
from awslogin.core.prompt import Prompter, Validator

T = TypeVar("T")


class QuestionaryPrompter(Prompter):
    """Prompter backed by questionary.

    ask() returns None when the user presses Ctrl+C; that is turned into
    UserCancelError.
    """

    def _ask(self, question):
        answer = question.ask()
        if answer is None:
            raise UserCancelError()
        return answer

    def select(self, message: str, choices: Sequence[tuple[str, T]], default: T | None = None) -> T:
        options = [questionary.Choice(label, value=value) for label, value in choices]
        if not options:
            raise ValueError("no choices to select from")
        if default is not None and not any(c.value == default for c in options):
            default = None
        return self._ask(questionary.select(message, choices=options, default=default))

    def confirm(self, message: str, default: bool = False) -> bool:
        return bool(self._ask(questionary.confirm(message, default=default)))

    def text(
        self,
        message: str,
        default: str = "",
        secret: bool = False,
        validate: Validator | None = None,
    ) -> str:
        if secret:
            question = questionary.password(message, validate=validate)
        else:
            question = questionary.text(message, default=default, validate=validate)
        return self._ask(question)
