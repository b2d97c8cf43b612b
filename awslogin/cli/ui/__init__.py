# awslogin/cli/ui - console output and prompts (rich, questionary)
"""
CLI-only UI components (console output, interactive prompts)
"""

# Direct imports (rich/questionary are commonly used, no lazy import needed)
from .console import (
    INDENT,
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    get_console,
    get_logger,
    print_error,
    print_header,
    print_hint,
    print_identity,
    print_info,
    print_success,
    print_table,
    print_warning,
)
from .prompt import QuestionaryPrompter

__all__ = [
    "INDENT",
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "console",
    "get_console",
    "get_logger",
    "print_error",
    "print_header",
    "print_hint",
    "print_identity",
    "print_info",
    "print_success",
    "print_table",
    "print_warning",
    "QuestionaryPrompter",
]
