"""
awslogin/cli/i18n/messages/login.py - Login Flow Messages

Contains translations printed by the orchestrator and the drivers.
"""

from __future__ import annotations

LOGIN_MESSAGES = {
    # =========================================================================
    # Progress
    # =========================================================================
    "forcing": {
        "ko": "'{profile}' 세션을 강제로 새로 발급합니다",
        "en": "Forcing a new session for '{profile}'",
    },
    "child_selects_parent": {
        "ko": "'{child}'은(는) 하위 프로필입니다. 상위 프로필 '{parent}'에서 계정을 선택합니다",
        "en": "'{child}' is a child profile; selecting from its parent '{parent}'",
    },
    "refreshing_child": {
        "ko": "'{parent}'의 SSO 토큰으로 '{child}' 세션을 갱신합니다",
        "en": "Refreshing '{child}' with the SSO token of '{parent}'",
    },
    "sso_browser": {
        "ko": "'{profile}' SSO 로그인을 위해 브라우저를 엽니다",
        "en": "Opening the browser for the SSO login of '{profile}'",
    },
    "mfa_session": {
        "ko": "'{long_term}' 자격 증명으로 '{profile}' MFA 세션을 발급합니다",
        "en": "Requesting an MFA session for '{profile}' from '{long_term}'",
    },
    "mfa_prompt": {
        "ko": "'{profile}' MFA 코드 (6자리)",
        "en": "MFA code for '{profile}' (6 digits)",
    },
    "otp_choose": {
        "ko": "'{profile}'에 해당하는 1Password 항목이 여러 개입니다. MFA 코드가 있는 항목을 선택하세요",
        "en": "Several 1Password items match '{profile}'. Which one holds the MFA code?",
    },
    # =========================================================================
    # Account / role selection
    # =========================================================================
    "use_pinned": {
        "ko": "고정된 계정 {account} / 역할 {role}을(를) 사용할까요?",
        "en": "Use the pinned account {account} with role {role}?",
    },
    "no_accounts_fallback": {
        "ko": "계정 목록을 가져올 수 없어 고정된 계정을 사용합니다",
        "en": "No accounts could be listed; using the pinned account",
    },
    "select_account": {
        "ko": "AWS 계정을 선택하세요",
        "en": "Select an AWS account",
    },
    "select_role": {
        "ko": "{account} 계정의 역할을 선택하세요",
        "en": "Select a role in {account}",
    },
    "roles_guessed": {
        "ko": "{account} 계정의 역할 목록을 가져올 수 없어 일반적인 역할 이름을 표시합니다",
        "en": "Roles for {account} could not be listed; showing common role names",
    },
    "unverified": {
        "ko": "미확인",
        "en": "unverified",
    },
    # =========================================================================
    # Results
    # =========================================================================
    "status_already_valid": {
        "ko": "'{profile}' 세션이 이미 유효합니다",
        "en": "Session for '{profile}' is already valid",
    },
    "status_refreshed": {
        "ko": "'{profile}' 세션을 갱신했습니다",
        "en": "Refreshed session for '{profile}'",
    },
    "status_created": {
        "ko": "'{profile}' 프로필을 만들었습니다",
        "en": "Created profile '{profile}'",
    },
    "status_reused_child": {
        "ko": "유효한 하위 프로필 '{profile}'을(를) 재사용합니다",
        "en": "Reusing valid child profile '{profile}'",
    },
    "child_usage": {
        "ko": "사용법: export AWS_PROFILE={profile}",
        "en": "Use it with: export AWS_PROFILE={profile}",
    },
    "change_hint": {
        "ko": "다른 계정을 선택하려면: awslogin {parent} --change",
        "en": "To pick another account: awslogin {parent} --change",
    },
    "identity_account": {
        "ko": "계정",
        "en": "Account",
    },
    "identity_arn": {
        "ko": "ARN",
        "en": "ARN",
    },
    "identity_user_id": {
        "ko": "사용자 ID",
        "en": "User ID",
    },
    # =========================================================================
    # Clean / all-org
    # =========================================================================
    "cleaned": {
        "ko": "'{profile}'에서 {count}개 키를 제거했습니다",
        "en": "Removed {count} keys from '{profile}'",
    },
    "clean_nothing": {
        "ko": "'{profile}'에 제거할 세션이 없습니다",
        "en": "Nothing to clean on '{profile}'",
    },
    "org_found": {
        "ko": "{count}개 계정을 찾았습니다",
        "en": "Found {count} accounts",
    },
    "org_skipped": {
        "ko": "{account}: 역할을 확인할 수 없어 건너뜁니다",
        "en": "{account}: no roles could be listed, skipped",
    },
    "org_created": {
        "ko": "{profile} ← {account} ({role})",
        "en": "{profile} ← {account} ({role})",
    },
    "org_done": {
        "ko": "'{profile}' 아래에 {count}개 프로필을 구성했습니다",
        "en": "Configured {count} profiles under '{profile}'",
    },
}
