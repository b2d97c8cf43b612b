# tests/cli/test_cli_wizard.py
"""
awslogin/cli/wizard.py tests

Targets:
- validate_mfa_arn / suggest_mfa_device
- ProfileWizard: profile creation, menu, region/output, MFA device,
  1Password link
- setup_identity_center
"""

import pytest
from conftest import ScriptedPrompter, fail, ok

from awslogin.cli.wizard import ProfileWizard, setup_identity_center, suggest_mfa_device, validate_mfa_arn
from awslogin.core.auth.config import keys
from awslogin.core.auth.provider import OnePasswordOtpProvider
from awslogin.core.auth.types import Identity
from awslogin.core.command import OnePasswordCli
from awslogin.core.exceptions import AwsLoginError, UserCancelError

DEVICE = "arn:aws:iam::123456789012:mfa/alice"


class RecordingPrompter(ScriptedPrompter):
    """ScriptedPrompter that also keeps the offered select labels"""

    def __init__(self, *answers):
        super().__init__(*answers)
        self.offered = []

    def select(self, message, choices, default=None):
        self.offered.append([label for label, _ in choices])
        return super().select(message, choices, default)


@pytest.fixture
def make_wizard(world, aws):
    def factory(*answers):
        prompter = RecordingPrompter(*answers)
        op = OnePasswordCli(world.runner, executable="op")
        return ProfileWizard(world.store, aws, op, prompter), prompter

    return factory


def route_op(world, items):
    world.runner.installed.add("op")
    world.runner.on("account", "list", tool="op", response=ok([{"url": "my.1password.com"}]))
    world.runner.on("item", "list", tool="op", response=ok(items))


class TestHelpers:
    @pytest.mark.parametrize(
        "value,valid",
        [
            ("", True),
            (DEVICE, True),
            ("arn:aws-us-gov:iam::123456789012:mfa/bob", True),
            ("arn:aws:iam::123:mfa/short-account", False),
            ("alice", False),
        ],
    )
    def test_validate_mfa_arn(self, value, valid):
        assert (validate_mfa_arn(value) is True) is valid

    def test_suggest_for_user(self):
        identity = Identity("123456789012", "arn:aws:iam::123456789012:user/alice")
        assert suggest_mfa_device(identity) == DEVICE

    def test_no_suggestion_for_role(self):
        """Assumed roles have no MFA device of their own"""
        identity = Identity("123456789012", "arn:aws:sts::123456789012:assumed-role/Admin/alice")
        assert suggest_mfa_device(identity) is None
        assert suggest_mfa_device(None) is None


class TestProfileCreation:
    """ensure_profile"""

    def test_creates_missing_profile(self, world, make_wizard):
        wizard, _ = make_wizard(True)
        wizard.ensure_profile("dev")
        assert world.store.snapshot("dev") == {keys.REGION: "us-east-1", keys.OUTPUT: "json"}

    def test_declined(self, world, make_wizard):
        wizard, _ = make_wizard(False)
        with pytest.raises(UserCancelError):
            wizard.ensure_profile("dev")
        assert not world.store.exists("dev")

    def test_existing_profile_untouched(self, world, make_wizard):
        world.add_profile("dev", region="eu-west-1")
        wizard, prompter = make_wizard()
        wizard.ensure_profile("dev")
        assert prompter.asked == []


class TestMenu:
    """run()"""

    def test_federated_profile_gets_region_only(self, world, make_wizard):
        world.add_profile("corp", sso_session="corp", region="us-east-1")
        wizard, prompter = make_wizard("Done")

        wizard.run("corp")

        labels = prompter.offered[0]
        assert any("Region" in label for label in labels)
        assert not any("MFA" in label for label in labels)
        assert not any("1Password" in label for label in labels)

    def test_direct_profile_full_menu(self, world, make_wizard):
        world.add_profile("dev", region="us-east-1")
        wizard, prompter = make_wizard("Done")

        wizard.run("dev")

        assert len(prompter.offered[0]) == 4

    def test_loops_until_done(self, world, make_wizard):
        world.add_profile("dev", region="us-east-1", output="json")
        wizard, prompter = make_wizard("Region", "eu-central-1", "yaml", "Done")

        wizard.run("dev")

        assert world.store.get("dev", keys.REGION) == "eu-central-1"
        assert world.store.get("dev", keys.OUTPUT) == "yaml"
        assert prompter.answers == []


class TestRegionOutput:
    def test_keep_current(self, world, make_wizard):
        """Keeping both values writes nothing"""
        world.add_profile("dev", region="us-east-1", output="json")
        wizard, _ = make_wizard("Keep current", "Keep current")

        wizard.configure_region_output("dev")

        assert world.backend.writes == []

    def test_common_regions_first(self, world, make_wizard):
        world.add_profile("dev")
        wizard, prompter = make_wizard("Keep current", "Keep current")
        wizard.configure_region_output("dev")
        assert prompter.offered[0][0].startswith("us-east-1")


class TestMfaDevice:
    """configure_mfa"""

    def test_existing_long_term_uses_suggestion(self, world, make_wizard):
        """Empty answer accepts the device derived from the IAM user"""
        world.add_profile("q", region="us-east-1")
        world.add_profile("q-long-term", aws_access_key_id="AKIA", aws_secret_access_key="s")
        world.runner.on(
            "sts",
            "get-caller-identity",
            profile="q-long-term",
            response=ok({"Account": "123456789012", "Arn": "arn:aws:iam::123456789012:user/alice"}),
        )
        wizard, _ = make_wizard("")

        wizard.configure_mfa("q")

        assert world.store.get("q-long-term", keys.MFA_DEVICE) == DEVICE
        assert world.store.get("q", keys.MFA_DEVICE) is None

    def test_creates_long_term_profile(self, world, make_wizard):
        world.add_profile("q", region="ap-northeast-2")
        wizard, _ = make_wizard(True, "AKIANEW", "secret", DEVICE)

        wizard.configure_mfa("q")

        record = world.store.snapshot("q-long-term")
        assert record[keys.ACCESS_KEY_ID] == "AKIANEW"
        assert record[keys.SECRET_ACCESS_KEY] == "secret"
        assert record[keys.REGION] == "ap-northeast-2"
        assert record[keys.MFA_DEVICE] == DEVICE

    def test_long_term_creation_declined(self, world, make_wizard):
        world.add_profile("q", region="us-east-1")
        wizard, _ = make_wizard(False)
        wizard.configure_mfa("q")
        assert not world.store.exists("q-long-term")

    def test_missing_keys_skip_creation(self, world, make_wizard):
        world.add_profile("q", region="us-east-1")
        wizard, _ = make_wizard(True, "AKIANEW", "")
        wizard.configure_mfa("q")
        assert not world.store.exists("q-long-term")

    def test_empty_device_is_no_change(self, world, make_wizard):
        world.add_profile("q")
        world.add_profile("q-long-term", aws_access_key_id="AKIA", aws_secret_access_key="s")
        world.runner.on("sts", "get-caller-identity", response=fail("denied"))
        wizard, _ = make_wizard("")
        wizard.configure_mfa("q")
        assert world.store.get("q-long-term", keys.MFA_DEVICE) is None

    def test_long_term_profile_itself(self, world, make_wizard):
        """Configuring '<P>-long-term' directly edits that profile"""
        world.add_profile("q-long-term", aws_access_key_id="AKIA", aws_secret_access_key="s")
        wizard, _ = make_wizard(DEVICE)
        wizard.configure_mfa("q-long-term")
        assert world.store.get("q-long-term", keys.MFA_DEVICE) == DEVICE
        assert not world.store.exists("q-long-term-long-term")


class TestOnePassword:
    """configure_onepassword"""

    def test_disable(self, world, make_wizard):
        world.add_profile("q", aws_1password_mfa="true", aws_1password_item_id="item-1")
        wizard, _ = make_wizard(False)

        wizard.configure_onepassword("q")

        assert world.store.snapshot("q") == {keys.OTP_ENABLED: "false"}

    def test_disable_survives_login_lookup(self, world, make_wizard):
        """After opting out, fetching a code neither asks 1Password nor relinks"""
        world.add_profile("q", aws_1password_mfa="true", aws_1password_item_id="item-1")
        route_op(world, [{"id": "item-1", "title": "AWS q"}])
        wizard, _ = make_wizard(False)
        wizard.configure_onepassword("q")
        world.runner.calls.clear()

        op = OnePasswordCli(world.runner, executable="op")
        assert OnePasswordOtpProvider(world.store, op).get_otp("q") is None

        assert world.store.get("q", keys.OTP_ITEM_ID) is None
        assert world.runner.calls_for("item", tool="op") == []

    def test_enable_without_cli(self, world, make_wizard):
        """The flag is saved; the item is found at login"""
        world.add_profile("q")
        wizard, _ = make_wizard(True)

        wizard.configure_onepassword("q")

        assert world.store.get("q", keys.OTP_ENABLED) == "true"
        assert world.store.get("q", keys.OTP_ITEM_ID) is None

    def test_link_item(self, world, make_wizard):
        world.add_profile("q")
        route_op(world, [{"id": "item-7", "title": "AWS q"}])
        wizard, _ = make_wizard(True, "item-7")

        wizard.configure_onepassword("q")

        assert world.store.get("q", keys.OTP_ITEM_ID) == "item-7"

    def test_choose_later(self, world, make_wizard):
        world.add_profile("q", aws_1password_item_id="old")
        route_op(world, [{"id": "item-7", "title": "AWS q"}])
        wizard, _ = make_wizard(True, "Choose during login")

        wizard.configure_onepassword("q")

        assert world.store.get("q", keys.OTP_ITEM_ID) is None
        assert world.store.get("q", keys.OTP_ENABLED) == "true"

    def test_no_matching_items(self, world, make_wizard):
        world.add_profile("q")
        route_op(world, [{"id": "x", "title": "Netflix"}])
        wizard, prompter = make_wizard(True)
        wizard.configure_onepassword("q")
        assert prompter.offered == []


class TestIdentityCenter:
    def test_runs_configure_sso(self, world, aws):
        world.runner.on("configure", "sso", response=ok())
        setup_identity_center(aws, "corp")
        assert world.runner.interactive_calls == [["aws", "configure", "sso", "--profile", "corp"]]

    def test_failure(self, world, aws):
        world.runner.on("configure", "sso", response=fail(returncode=130))
        with pytest.raises(AwsLoginError) as exc_info:
            setup_identity_center(aws, "corp")
        assert "--setup-iam-identity-center" in exc_info.value.hint
