# awslogin/cli/wizard.py
"""
Configuration wizards behind --configure and --setup-iam-identity-center.

--configure opens a menu over one profile:
    - region / output format
    - MFA device on "<P>-long-term" (creating that profile if asked)
    - 1Password link for MFA codes

SSO profiles only get the region menu; the SSO settings themselves come
from the AWS CLI's own `aws configure sso`.
"""

from __future__ import annotations

import logging
import re

from awslogin.cli.i18n import t
from awslogin.cli.ui.console import (
    print_header,
    print_info,
    print_success,
    print_table,
    print_warning,
)
from awslogin.core.auth.config import ProfileStore, keys
from awslogin.core.auth.provider import match_items
from awslogin.core.auth.types import Identity, long_term_name
from awslogin.core.command import AwsCli, OnePasswordCli
from awslogin.core.config import settings
from awslogin.core.exceptions import AwsLoginError, StoreUnavailable, UserCancelError, first_line
from awslogin.core.prompt import Prompter
from awslogin.core.region import OUTPUT_FORMATS, format_region, ordered_regions

logger = logging.getLogger(__name__)

MFA_ARN_PATTERN = re.compile(r"^arn:aws[\w-]*:iam::\d{12}:mfa/.+$")


def validate_mfa_arn(value: str) -> bool | str:
    """Empty (skip) or an IAM MFA device ARN."""
    value = (value or "").strip()
    if not value or MFA_ARN_PATTERN.match(value):
        return True
    return t("wizard.mfa_device_invalid")


def suggest_mfa_device(identity: Identity | None) -> str | None:
    """arn:aws:iam::<account>:mfa/<user> for an IAM user identity."""
    if identity is None or ":user/" not in identity.arn:
        return None
    partition = identity.arn.split(":")[1] or "aws"
    return f"arn:{partition}:iam::{identity.account}:mfa/{identity.name}"


class ProfileWizard:
    """Interactive editor for one profile.

    Args:
        store: profile store
        aws: AWS CLI wrapper (identity lookup for the MFA suggestion)
        op: 1Password CLI wrapper
        prompter: shared prompter
    """

    def __init__(self, store: ProfileStore, aws: AwsCli, op: OnePasswordCli, prompter: Prompter):
        self.store = store
        self.aws = aws
        self.op = op
        self.prompter = prompter

    def _exists(self, profile: str) -> bool:
        # A fresh machine has no ~/.aws files yet
        try:
            return self.store.exists(profile)
        except StoreUnavailable:
            return False

    def run(self, profile: str) -> None:
        print_header(t("wizard.title", profile=profile))
        self.ensure_profile(profile)

        federated = keys.is_federated(self.store.snapshot(profile))
        while True:
            self.show_settings(profile)
            choices = [(t("wizard.menu_region"), "region")]
            if not federated:
                choices.append((t("wizard.menu_mfa"), "mfa"))
                choices.append((t("wizard.menu_onepassword"), "onepassword"))
            choices.append((t("wizard.menu_done"), "done"))

            action = self.prompter.select(t("wizard.menu"), choices)
            if action == "done":
                break
            if action == "region":
                self.configure_region_output(profile)
            elif action == "mfa":
                self.configure_mfa(profile)
            elif action == "onepassword":
                self.configure_onepassword(profile)

        print_success(t("wizard.done", profile=profile))

    def ensure_profile(self, profile: str) -> None:
        """Create a missing profile with the default region and output."""
        if self._exists(profile):
            return
        if not self.prompter.confirm(t("wizard.create_profile", profile=profile), default=True):
            raise UserCancelError()
        self.store.set_many(
            profile,
            {keys.REGION: settings.DEFAULT_REGION, keys.OUTPUT: settings.DEFAULT_OUTPUT},
        )
        print_success(t("wizard.profile_created", profile=profile, region=settings.DEFAULT_REGION))

    def show_settings(self, profile: str) -> None:
        record = self.store.snapshot(profile)
        lt = long_term_name(profile)
        lt_record = self.store.snapshot(lt) if self._exists(lt) else {}
        rows = [
            [keys.REGION, format_region(record.get(keys.REGION))],
            [keys.OUTPUT, record.get(keys.OUTPUT) or "-"],
        ]
        if keys.is_federated(record):
            rows.append([keys.SSO_SESSION, record.get(keys.SSO_SESSION) or record.get(keys.SSO_START_URL) or "-"])
        else:
            rows.append([keys.MFA_DEVICE, keys.mfa_device_of(lt_record) or keys.mfa_device_of(record) or "-"])
            rows.append([keys.OTP_ENABLED, record.get(keys.OTP_ENABLED) or "-"])
        print_table(profile, [t("wizard.column_key"), t("wizard.column_value")], rows)

    # =========================================================================
    # Region / output
    # =========================================================================

    def configure_region_output(self, profile: str) -> None:
        current_region = self.store.get(profile, keys.REGION)
        current_output = self.store.get(profile, keys.OUTPUT)

        region_choices = [(format_region(r), r) for r in ordered_regions()]
        region_choices.append((t("wizard.keep_current", value=format_region(current_region)), ""))
        region = self.prompter.select(t("wizard.region_prompt"), region_choices, default=current_region)

        output_choices = [(f"{name}  {desc}", name) for name, desc in OUTPUT_FORMATS.items()]
        output_choices.append((t("wizard.keep_current", value=current_output or "-"), ""))
        output = self.prompter.select(t("wizard.output_prompt"), output_choices, default=current_output)

        values = {}
        if region and region != current_region:
            values[keys.REGION] = region
        if output and output != current_output:
            values[keys.OUTPUT] = output
        if values:
            self.store.set_many(profile, values)
            print_success(t("wizard.saved", profile=profile))
        else:
            print_info(t("wizard.unchanged"))

    # =========================================================================
    # MFA
    # =========================================================================

    def configure_mfa(self, profile: str) -> None:
        suffix = settings.LONG_TERM_SUFFIX
        lt = profile if profile.endswith(suffix) else long_term_name(profile)

        if not self._exists(lt):
            print_info(t("wizard.long_term_needed", long_term=lt))
            if not self.prompter.confirm(t("wizard.long_term_create", long_term=lt), default=False):
                return
            if not self.create_long_term(profile, lt):
                return

        identity = self.lookup_identity(lt)
        suggestion = suggest_mfa_device(identity) or keys.mfa_device_of(self.store.snapshot(lt)) or ""
        device = self.prompter.text(
            t("wizard.mfa_device_prompt", long_term=lt),
            default=suggestion,
            validate=validate_mfa_arn,
        ).strip()
        if not device:
            print_info(t("wizard.unchanged"))
            return

        self.store.set(lt, keys.MFA_DEVICE, device)
        print_success(t("wizard.mfa_device_saved", long_term=lt, device=device))

    def create_long_term(self, profile: str, lt: str) -> bool:
        access_key = self.prompter.text(t("wizard.access_key_prompt")).strip()
        secret_key = self.prompter.text(t("wizard.secret_key_prompt"), secret=True).strip()
        if not access_key or not secret_key:
            print_warning(t("wizard.long_term_skipped"))
            return False

        values = {keys.ACCESS_KEY_ID: access_key, keys.SECRET_ACCESS_KEY: secret_key}
        region = self.store.get(profile, keys.REGION) if self._exists(profile) else None
        if region:
            values[keys.REGION] = region
        self.store.set_many(lt, values)
        print_success(t("wizard.long_term_created", long_term=lt))
        return True

    def lookup_identity(self, profile: str) -> Identity | None:
        result = self.aws.get_caller_identity(profile)
        if not result.success:
            logger.debug("No identity for %s: %s", profile, first_line(result.stderr))
            return None
        data = result.json_or_none()
        return Identity.from_json(data) if isinstance(data, dict) else None

    # =========================================================================
    # 1Password
    # =========================================================================

    def configure_onepassword(self, profile: str) -> None:
        enabled = keys.is_true(self.store.get(profile, keys.OTP_ENABLED))
        if not self.prompter.confirm(t("wizard.op_enable", profile=profile), default=enabled):
            # an explicit "false" stops login from linking an item again
            self.store.set(profile, keys.OTP_ENABLED, "false")
            self.store.unset(profile, keys.OTP_ITEM_ID)
            print_success(t("wizard.op_disabled", profile=profile))
            return

        self.store.set(profile, keys.OTP_ENABLED, "true")
        if not self.op.available():
            print_warning(t("wizard.op_unavailable"))
            return

        matches = match_items(self.op.list_items(), profile)
        if not matches:
            print_warning(t("wizard.op_no_items", profile=profile))
            return

        choices = [(f"{m.get('title')} ({m.get('id')})", str(m.get("id"))) for m in matches]
        choices.append((t("wizard.op_choose_later"), ""))
        item_id = self.prompter.select(
            t("wizard.op_choose", count=len(matches)),
            choices,
            default=self.store.get(profile, keys.OTP_ITEM_ID),
        )
        if item_id:
            self.store.set(profile, keys.OTP_ITEM_ID, item_id)
            print_success(t("wizard.op_linked", profile=profile, item=item_id))
        else:
            self.store.unset(profile, keys.OTP_ITEM_ID)
            print_info(t("wizard.op_later"))


def setup_identity_center(aws: AwsCli, profile: str) -> None:
    """Hand over to `aws configure sso --profile <profile>`."""
    print_info(t("wizard.sso_setup", profile=profile))
    result = aws.configure_sso(profile)
    if not result.success:
        raise AwsLoginError(
            f"'aws configure sso' failed for '{profile}' (exit {result.returncode})",
            hint=f"Check the start URL and region, then run 'awslogin {profile} --setup-iam-identity-center' again",
        )
    print_success(t("wizard.sso_setup_done", profile=profile))
