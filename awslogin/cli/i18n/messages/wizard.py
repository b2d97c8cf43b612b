"""
awslogin/cli/i18n/messages/wizard.py - Configuration Wizard Messages

Contains translations for --configure and --setup-iam-identity-center.
"""

from __future__ import annotations

WIZARD_MESSAGES = {
    # =========================================================================
    # Menu
    # =========================================================================
    "title": {
        "ko": "프로필 설정: {profile}",
        "en": "Configure profile: {profile}",
    },
    "menu": {
        "ko": "무엇을 설정할까요?",
        "en": "What would you like to configure?",
    },
    "menu_region": {
        "ko": "리전 / 출력 형식",
        "en": "Region / output format",
    },
    "menu_mfa": {
        "ko": "MFA 디바이스",
        "en": "MFA device",
    },
    "menu_onepassword": {
        "ko": "1Password 연동",
        "en": "1Password integration",
    },
    "menu_done": {
        "ko": "완료",
        "en": "Done",
    },
    "column_key": {
        "ko": "키",
        "en": "Key",
    },
    "column_value": {
        "ko": "값",
        "en": "Value",
    },
    "done": {
        "ko": "'{profile}' 설정을 마쳤습니다",
        "en": "Finished configuring '{profile}'",
    },
    "create_profile": {
        "ko": "'{profile}' 프로필이 없습니다. 새로 만들까요?",
        "en": "Profile '{profile}' does not exist. Create it?",
    },
    "profile_created": {
        "ko": "'{profile}' 프로필을 만들었습니다 (리전 {region})",
        "en": "Created profile '{profile}' (region {region})",
    },
    "saved": {
        "ko": "'{profile}'에 저장했습니다",
        "en": "Saved to '{profile}'",
    },
    "unchanged": {
        "ko": "변경 사항 없음",
        "en": "No changes",
    },
    "keep_current": {
        "ko": "현재 값 유지 ({value})",
        "en": "Keep current setting ({value})",
    },
    # =========================================================================
    # Region / output
    # =========================================================================
    "region_prompt": {
        "ko": "기본 리전을 선택하세요",
        "en": "Select the default region",
    },
    "output_prompt": {
        "ko": "출력 형식을 선택하세요",
        "en": "Select the output format",
    },
    # =========================================================================
    # MFA
    # =========================================================================
    "long_term_needed": {
        "ko": "MFA 인증에는 영구 자격 증명을 가진 '{long_term}' 프로필이 필요합니다",
        "en": "MFA login needs a profile named '{long_term}' holding your permanent keys",
    },
    "long_term_create": {
        "ko": "지금 '{long_term}' 프로필을 만들까요?",
        "en": "Create '{long_term}' now?",
    },
    "access_key_prompt": {
        "ko": "AWS Access Key ID",
        "en": "AWS Access Key ID",
    },
    "secret_key_prompt": {
        "ko": "AWS Secret Access Key",
        "en": "AWS Secret Access Key",
    },
    "long_term_created": {
        "ko": "'{long_term}' 프로필을 만들었습니다",
        "en": "Created '{long_term}'",
    },
    "long_term_skipped": {
        "ko": "키가 입력되지 않아 장기 프로필을 만들지 않았습니다",
        "en": "Access key or secret key missing; long-term profile not created",
    },
    "mfa_device_prompt": {
        "ko": "'{long_term}'의 MFA 디바이스 ARN (비우면 건너뜀)",
        "en": "MFA device ARN for '{long_term}' (empty to skip)",
    },
    "mfa_device_invalid": {
        "ko": "arn:aws:iam::<계정 ID>:mfa/<이름> 형식이어야 합니다",
        "en": "Expected arn:aws:iam::<account id>:mfa/<name>",
    },
    "mfa_device_saved": {
        "ko": "'{long_term}' MFA 디바이스: {device}",
        "en": "MFA device for '{long_term}': {device}",
    },
    # =========================================================================
    # 1Password
    # =========================================================================
    "op_enable": {
        "ko": "'{profile}' MFA 코드를 1Password에서 가져올까요?",
        "en": "Fetch MFA codes for '{profile}' from 1Password?",
    },
    "op_disabled": {
        "ko": "'{profile}' 1Password 연동을 해제했습니다",
        "en": "1Password integration disabled for '{profile}'",
    },
    "op_unavailable": {
        "ko": "1Password CLI(op)가 없거나 로그인되지 않았습니다. 로그인 시 항목을 찾습니다",
        "en": "1Password CLI (op) is missing or signed out; the item will be looked up at login",
    },
    "op_no_items": {
        "ko": "'{profile}'에 맞는 1Password 항목이 없습니다",
        "en": "No 1Password item matches '{profile}'",
    },
    "op_choose": {
        "ko": "{count}개 항목이 일치합니다. MFA 코드에 사용할 항목을 선택하세요",
        "en": "{count} items match. Which one holds the MFA code?",
    },
    "op_choose_later": {
        "ko": "로그인할 때 선택",
        "en": "Choose during login",
    },
    "op_linked": {
        "ko": "'{profile}'을(를) 1Password 항목 {item}에 연결했습니다",
        "en": "Linked '{profile}' to 1Password item {item}",
    },
    "op_later": {
        "ko": "로그인할 때 항목을 선택합니다",
        "en": "The item will be chosen during login",
    },
    # =========================================================================
    # IAM Identity Center
    # =========================================================================
    "sso_setup": {
        "ko": "'aws configure sso'로 '{profile}'을(를) 설정합니다",
        "en": "Running 'aws configure sso' for '{profile}'",
    },
    "sso_setup_done": {
        "ko": "'{profile}' SSO 설정 완료. 'awslogin {profile}'으로 로그인하세요",
        "en": "SSO configured for '{profile}'. Log in with 'awslogin {profile}'",
    },
}
