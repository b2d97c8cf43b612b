"""
tests/conftest.py - pytest shared fixtures

No test spawns a process or touches the real home directory. External
commands go through FakeRunner, profiles live in an in-memory backend and
the SSO token cache is a temporary directory.

Usage:
    def test_something(world):
        world.add_profile("corp", sso_session="corp", region="us-east-1")
        world.sso.write_token("corp")
        result = world.orchestrator().login("corp")
"""

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add the project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from awslogin.cli.i18n import DEFAULT_LANG, set_lang  # noqa: E402
from awslogin.core.auth.cache import TokenCacheReader, sso_cache_key  # noqa: E402
from awslogin.core.auth.config import InMemoryConfigBackend, ProfileStore, keys  # noqa: E402
from awslogin.core.auth.orchestrator import create_orchestrator  # noqa: E402
from awslogin.core.auth.types import format_timestamp  # noqa: E402
from awslogin.core.command import AwsCli, CommandResult, CommandRunner  # noqa: E402
from awslogin.core.prompt import Prompter  # noqa: E402

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and the AWS config paths at a temp directory"""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("AWS_CONFIG_FILE", str(home / ".aws" / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(home / ".aws" / "credentials"))
    monkeypatch.delenv("AWSLOGIN_DEBUG", raising=False)
    set_lang(DEFAULT_LANG)
    yield home


# =============================================================================
# Clock
# =============================================================================


class FrozenClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FrozenClock()


# =============================================================================
# Fake command runner
# =============================================================================


def ok(data=None, text: str = "") -> CommandResult:
    """Successful result with JSON (or plain text) stdout"""
    stdout = json.dumps(data) if data is not None else text
    return CommandResult([], 0, stdout, "")


def fail(stderr: str = "An error occurred", returncode: int = 255) -> CommandResult:
    return CommandResult([], returncode, "", stderr)


def option(argv, flag):
    """Value following flag in argv, or None"""
    if flag in argv:
        idx = argv.index(flag)
        if idx + 1 < len(argv):
            return argv[idx + 1]
    return None


class FakeRunner(CommandRunner):
    """Scripted CommandRunner.

    Routes are matched newest first on (executable, leading arguments,
    --profile). A route's response is a CommandResult, a list of them
    (consumed in order, the last one repeats) or a callable(argv).
    Unmatched commands fail with returncode 255.
    """

    def __init__(self, installed=("aws",)):
        self.calls: list[list[str]] = []
        self.interactive_calls: list[list[str]] = []
        self.installed = set(installed)
        self._routes = []

    def on(self, *command, response, tool="aws", profile=None):
        if isinstance(response, list):
            response = list(response)
        self._routes.append((tool, tuple(command), profile, response))

    def _respond(self, response, argv):
        if callable(response):
            result = response(argv)
        elif isinstance(response, list):
            result = response.pop(0) if len(response) > 1 else response[0]
        else:
            result = response
        return CommandResult(list(argv), result.returncode, result.stdout, result.stderr)

    def run(self, args, interactive=False, input_text=None):
        argv = list(args)
        self.calls.append(argv)
        if interactive:
            self.interactive_calls.append(argv)

        for tool, command, profile, response in reversed(self._routes):
            if argv[0] != tool or tuple(argv[1 : 1 + len(command)]) != command:
                continue
            if profile is not None and option(argv, "--profile") != profile:
                continue
            return self._respond(response, argv)
        return CommandResult(argv, 255, "", f"unhandled command: {' '.join(argv)}")

    def which(self, program):
        return f"/usr/bin/{program}" if program in self.installed else None

    def calls_for(self, *command, tool="aws", profile=None):
        return [
            c
            for c in self.calls
            if c[0] == tool
            and tuple(c[1 : 1 + len(command)]) == command
            and (profile is None or option(c, "--profile") == profile)
        ]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def aws(runner):
    return AwsCli(runner, executable="aws")


# =============================================================================
# Prompter
# =============================================================================


class ScriptedPrompter(Prompter):
    """Answers prompts from a queue.

    select answers are matched against choice labels (substring); confirm
    answers are bools; text answers are strings. An unexpected prompt
    fails the test.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked: list[tuple[str, str]] = []

    def _next(self, kind, message):
        self.asked.append((kind, message))
        if not self.answers:
            raise AssertionError(f"unexpected {kind} prompt: {message}")
        return self.answers.pop(0)

    def select(self, message, choices, default=None):
        answer = self._next("select", message)
        for label, value in choices:
            if answer in label:
                return value
        raise AssertionError(f"no choice matching {answer!r} in {[c[0] for c in choices]}")

    def confirm(self, message, default=False):
        return bool(self._next("confirm", message))

    def text(self, message, default="", secret=False, validate=None):
        answer = self._next("text", message)
        if answer == "" and default:
            return default
        return answer


@pytest.fixture
def prompter():
    return ScriptedPrompter()


# =============================================================================
# SSO token cache
# =============================================================================


class SsoCache:
    """Temporary ~/.aws/sso/cache"""

    def __init__(self, path: Path, clock: FrozenClock):
        self.path = path
        self.clock = clock
        self.path.mkdir(parents=True, exist_ok=True)

    def write_token(
        self,
        session_name="corp",
        start_url="https://corp.awsapps.com/start",
        expires_in=7200,
        access_token=None,
        filename=None,
    ) -> Path:
        data = {
            "startUrl": start_url,
            "region": "us-east-1",
            "accessToken": access_token or f"token-{session_name}",
            "expiresAt": format_timestamp(self.clock() + timedelta(seconds=expires_in)),
        }
        name = filename or f"{sso_cache_key(session_name, start_url)}.json"
        target = self.path / name
        target.write_text(json.dumps(data), encoding="utf-8")
        return target

    def write_raw(self, name: str, content: str) -> Path:
        target = self.path / name
        target.write_text(content, encoding="utf-8")
        return target


@pytest.fixture
def sso_cache(isolated_home, clock):
    return SsoCache(isolated_home / ".aws" / "sso" / "cache", clock)


@pytest.fixture
def token_cache(sso_cache, clock):
    return TokenCacheReader(sso_cache.path, clock=clock)


# =============================================================================
# Store
# =============================================================================


@pytest.fixture
def backend():
    return InMemoryConfigBackend()


@pytest.fixture
def store(backend, clock):
    """Uncached store, for tests that edit the backend between reads"""
    return ProfileStore(backend, ttl_seconds=0, clock=clock)


@pytest.fixture
def cached_store(backend, clock):
    """Store with the default read cache; expiry follows the frozen clock"""
    return ProfileStore(backend, clock=clock)


# =============================================================================
# World: store + fake AWS + token cache wired together
# =============================================================================


@dataclass
class Account:
    account_id: str
    name: str
    roles: tuple = ("Reader",)


class World:
    """Fake AWS environment behind one orchestrator.

    Default routes:
        - sts get-caller-identity succeeds for profiles holding keys
        - sso login writes a token for session "corp"
        - sso list-accounts / list-account-roles serve self.accounts
        - export-credentials, assume-role and get-session-token mint
          fresh credentials expiring in one hour
    """

    def __init__(self, runner, backend, store, sso_cache, token_cache, clock, prompter):
        self.runner = runner
        self.backend = backend
        self.store = store
        self.sso = sso_cache
        self.token_cache = token_cache
        self.clock = clock
        self.prompter = prompter
        self.accounts = [Account("222222222222", "Dev", ("Reader", "Admin")), Account("333333333333", "Prod")]
        self.minted = 0
        self._install_routes()

    # --- setup ---------------------------------------------------------

    def add_profile(self, name, **values):
        self.backend.profiles[name] = {k: str(v) for k, v in values.items()}
        self.store.invalidate()

    def add_sso_session(self, name="corp", **values):
        values.setdefault(keys.SSO_START_URL, "https://corp.awsapps.com/start")
        values.setdefault(keys.SSO_REGION, "us-east-1")
        self.backend.sso_sessions[name] = dict(values)

    def session_values(self, expires_in=3600, token="old-token"):
        return {
            keys.ACCESS_KEY_ID: "ASIAOLD",
            keys.SECRET_ACCESS_KEY: "old-secret",
            keys.SESSION_TOKEN: token,
            keys.SESSION_EXPIRATION: format_timestamp(self.clock() + timedelta(seconds=expires_in)),
        }

    def orchestrator(self):
        return create_orchestrator(
            self.prompter,
            runner=self.runner,
            store=self.store,
            token_cache=self.token_cache,
            clock=self.clock,
        )

    # --- fake AWS --------------------------------------------------------

    def _credentials(self, with_expiration=True):
        self.minted += 1
        data = {
            "AccessKeyId": f"ASIANEW{self.minted}",
            "SecretAccessKey": f"secret-{self.minted}",
            "SessionToken": f"token-{self.minted}",
        }
        if with_expiration:
            data["Expiration"] = format_timestamp(self.clock() + timedelta(hours=1))
        return data

    def _identity(self, argv):
        profile = option(argv, "--profile")
        record = self.backend.profiles.get(profile) or {}
        if not record.get(keys.ACCESS_KEY_ID):
            return fail("Unable to locate credentials. You can configure credentials by running \"aws configure\".")
        account = record.get(keys.ACCOUNT_ID) or "111111111111"
        return ok(
            {
                "Account": account,
                "Arn": f"arn:aws:sts::{account}:assumed-role/Role/{profile}",
                "UserId": f"AROAEXAMPLE:{profile}",
            }
        )

    def _sso_login(self, argv):
        self.sso.write_token("corp")
        return ok()

    def _list_roles(self, argv):
        account_id = option(argv, "--account-id")
        for account in self.accounts:
            if account.account_id == account_id:
                return ok({"roleList": [{"roleName": r, "accountId": account_id} for r in account.roles]})
        return fail("ResourceNotFoundException")

    def _install_routes(self):
        self.runner.on("sts", "get-caller-identity", response=self._identity)
        self.runner.on("sso", "login", response=self._sso_login)
        self.runner.on(
            "sso",
            "list-accounts",
            response=lambda argv: ok(
                {"accountList": [{"accountId": a.account_id, "accountName": a.name} for a in self.accounts]}
            ),
        )
        self.runner.on("sso", "list-account-roles", response=self._list_roles)
        self.runner.on("configure", "export-credentials", response=lambda argv: ok(self._credentials()))
        self.runner.on("sts", "assume-role", response=lambda argv: ok({"Credentials": self._credentials()}))
        self.runner.on("sts", "get-session-token", response=lambda argv: ok({"Credentials": self._credentials()}))


@pytest.fixture
def world(runner, backend, cached_store, sso_cache, token_cache, clock, prompter):
    return World(runner, backend, cached_store, sso_cache, token_cache, clock, prompter)


