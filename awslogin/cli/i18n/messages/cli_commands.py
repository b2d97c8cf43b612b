"""
awslogin/cli/i18n/messages/cli_commands.py - CLI Command Messages

Contains translations for the click entry point.
"""

from __future__ import annotations

CLI_MESSAGES = {
    "cancelled": {
        "ko": "취소되었습니다",
        "en": "Cancelled",
    },
    "clean_confirm": {
        "ko": "'{profile}'의 임시 세션을 삭제할까요?",
        "en": "Remove the short-lived session from '{profile}'?",
    },
    "clean_skipped": {
        "ko": "삭제하지 않았습니다",
        "en": "Nothing removed",
    },
}
