"""
awslogin/cli/app.py - main CLI entry point

Click based entry point. One positional profile name plus flags:

    awslogin dev                     # make 'dev' hold a valid session
    awslogin corp --select           # pick account/role, reuse a valid child
    awslogin corp --change           # pick account/role, always prompt
    awslogin prod --token 123456     # supply the MFA code
    awslogin dev --clean             # drop the short-lived session
    awslogin dev --configure         # region / MFA / 1Password wizard
    awslogin corp --configure --all-org
    awslogin corp --setup-iam-identity-center

Exit codes: 0 on success, 1 on any failure (including usage errors and
cancelled prompts).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import click
from click import Context

from awslogin.cli.i18n import SUPPORTED_LANGS, t, use_lang
from awslogin.cli.ui.console import get_logger, print_error, print_info, print_warning
from awslogin.cli.ui.prompt import QuestionaryPrompter
from awslogin.cli.wizard import ProfileWizard, setup_identity_center
from awslogin.core.auth import LoginOptions, Orchestrator, create_orchestrator
from awslogin.core.auth.config import AwsCliConfigBackend, ProfileStore
from awslogin.core.command import AwsCli, CommandRunner, OnePasswordCli
from awslogin.core.config import get_version, is_debug_enabled
from awslogin.core.exceptions import AwsLoginError, UserCancelError, format_error_for_user
from awslogin.core.prompt import Prompter

# Keep lightweight, centralized logging config
# WARNING so INFO logs from the drivers do not mix with user output
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

VERSION = get_version()


@dataclass
class AppServices:
    """Everything one run needs, wired once."""

    orchestrator: Orchestrator
    aws: AwsCli
    op: OnePasswordCli
    prompter: Prompter


def build_services(prompter: Prompter | None = None, runner: CommandRunner | None = None) -> AppServices:
    prompter = prompter or QuestionaryPrompter()
    runner = runner or CommandRunner()
    aws = AwsCli(runner)
    store = ProfileStore(AwsCliConfigBackend(aws))
    orchestrator = create_orchestrator(prompter, runner=runner, store=store)
    return AppServices(orchestrator, aws, OnePasswordCli(runner), prompter)


class AwsLoginCommand(click.Command):
    """Click command that exits 1 (not 2) on usage errors and shows help."""

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo(ctx.get_help(), err=True)
            ctx.exit(1)


def _configure_logging(verbose: bool) -> None:
    if verbose or is_debug_enabled():
        get_logger("awslogin", logging.DEBUG)


@click.command(
    cls=AwsLoginCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog="Examples: awslogin dev | awslogin corp --select | awslogin prod --token 123456",
)
@click.argument("profile", required=False)
@click.option("--select", is_flag=True, help="Choose an account and role under an SSO profile")
@click.option("--change", is_flag=True, help="Always prompt for account and role, even when pinned")
@click.option("--force", is_flag=True, help="Mint a new session even if the current one is valid")
@click.option("--token", "--mfa-token", "mfa_token", metavar="CODE", help="MFA code (6 digits)")
@click.option("--clean", is_flag=True, help="Remove the short-lived session from the profile")
@click.option("--configure", is_flag=True, help="Configure region, MFA device and 1Password link")
@click.option("--all-org", "--org-accounts", "all_org", is_flag=True, help="With --configure: one profile per account")
@click.option("--setup-iam-identity-center", "setup_sso", is_flag=True, help="Run 'aws configure sso' for the profile")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.option("--lang", type=click.Choice(list(SUPPORTED_LANGS)), default="en", help="Output language")
@click.version_option(VERSION, prog_name="awslogin")
@click.pass_context
def cli(
    ctx: Context,
    profile: str | None,
    select: bool,
    change: bool,
    force: bool,
    mfa_token: str | None,
    clean: bool,
    configure: bool,
    all_org: bool,
    setup_sso: bool,
    verbose: bool,
    lang: str,
) -> None:
    """Log in to an AWS profile and keep its credentials fresh.

    SSO profiles, long-term keys with MFA and plain keys are detected from
    the profile itself.
    """
    _configure_logging(verbose)

    if not profile:
        click.echo(ctx.get_help())
        ctx.exit(1)

    if all_org and not configure:
        click.echo("Error: --all-org can only be used with --configure", err=True)
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    with use_lang(lang):
        _run(ctx, profile, select, change, force, mfa_token, clean, configure, all_org, setup_sso)


def _run(
    ctx: Context,
    profile: str,
    select: bool,
    change: bool,
    force: bool,
    mfa_token: str | None,
    clean: bool,
    configure: bool,
    all_org: bool,
    setup_sso: bool,
) -> None:
    services: AppServices = ctx.obj or build_services()

    try:
        if setup_sso:
            setup_identity_center(services.aws, profile)
        elif configure and all_org:
            services.orchestrator.configure_all_org(profile)
        elif configure:
            wizard = ProfileWizard(services.orchestrator.store, services.aws, services.op, services.prompter)
            wizard.run(profile)
        elif clean:
            if services.prompter.confirm(t("cli.clean_confirm", profile=profile), default=False):
                services.orchestrator.clean(profile)
            else:
                print_info(t("cli.clean_skipped"))
        else:
            options = LoginOptions(select=select, change=change, force=force, mfa_token=mfa_token)
            services.orchestrator.login(profile, options)
    except (KeyboardInterrupt, UserCancelError):
        print_warning(t("cli.cancelled"))
        ctx.exit(1)
    except AwsLoginError as e:
        logging.getLogger(__name__).debug("login failed", exc_info=True)
        print_error(format_error_for_user(e))
        ctx.exit(1)


def main() -> None:
    cli(prog_name="awslogin")


if __name__ == "__main__":
    main()
