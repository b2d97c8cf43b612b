# tests/core/auth/test_auth_store.py
"""
awslogin/core/auth/config/store.py tests

Targets:
- ProfileStore over InMemoryConfigBackend (reads, writes, TTL cache)
- AwsCliConfigBackend (botocore parsing of real files, CLI writes)
"""

import threading

import pytest
from conftest import FakeRunner, fail, ok

from awslogin.core.auth.config import AwsCliConfigBackend, InMemoryConfigBackend, ProfileStore, keys
from awslogin.core.command import AwsCli
from awslogin.core.exceptions import StoreUnavailable

# =============================================================================
# ProfileStore
# =============================================================================


class TestProfileStoreReads:
    """Reads through the store"""

    def test_missing_profile(self, store):
        assert store.exists("nope") is False
        assert store.get("nope", keys.REGION) is None
        assert store.snapshot("nope") == {}
        assert store.get_many("nope", [keys.REGION]) == {}

    def test_get_and_get_many(self, backend, store):
        backend.profiles["dev"] = {keys.REGION: "eu-west-1", keys.OUTPUT: "json"}
        assert store.get("dev", keys.REGION) == "eu-west-1"
        assert store.get("dev", keys.MFA_DEVICE) is None
        assert store.get_many("dev", [keys.REGION, keys.MFA_DEVICE]) == {keys.REGION: "eu-west-1"}

    def test_empty_value_reads_as_none(self, backend, store):
        """A blanked key is treated as absent"""
        backend.profiles["dev"] = {keys.MFA_DEVICE: ""}
        assert store.get("dev", keys.MFA_DEVICE) is None
        assert store.get_many("dev", [keys.MFA_DEVICE]) == {}

    def test_list(self, backend, store):
        backend.profiles.update({"a": {}, "b": {}})
        assert sorted(store.list()) == ["a", "b"]

    def test_sso_session(self, backend, store):
        backend.sso_sessions["corp"] = {keys.SSO_START_URL: "https://corp"}
        assert store.sso_session("corp") == {keys.SSO_START_URL: "https://corp"}
        assert store.sso_session("other") is None

    def test_federation_lookup_follows_sso_session(self, backend, store):
        backend.sso_sessions["corp"] = {keys.SSO_START_URL: "https://corp", keys.SSO_REGION: "us-east-1"}
        backend.profiles["dev"] = {keys.SSO_SESSION: "corp", keys.SSO_REGION: "eu-west-1"}
        assert store.federation_lookup("dev") == ("corp", "https://corp", "eu-west-1")

    def test_federation_lookup_legacy_and_plain(self, backend, store):
        backend.profiles["old"] = {keys.SSO_START_URL: "https://old"}
        backend.profiles["plain"] = {keys.REGION: "us-east-1"}
        assert store.federation_lookup("old") == (None, "https://old", None)
        assert store.federation_lookup("plain") == (None, None, None)

    def test_snapshot_is_a_copy(self, backend, store):
        backend.profiles["dev"] = {keys.REGION: "us-east-1"}
        snap = store.snapshot("dev")
        snap[keys.REGION] = "changed"
        assert store.get("dev", keys.REGION) == "us-east-1"


class TestProfileStoreWrites:
    """Writes through the store"""

    def test_set_many_creates_profile(self, backend, store):
        """Writing to an unknown profile creates it"""
        store.set_many("new", {keys.REGION: "us-east-1", keys.OUTPUT: "json"})

        assert backend.profiles["new"] == {keys.REGION: "us-east-1", keys.OUTPUT: "json"}
        assert store.exists("new")
        assert "new" in store.list()

    def test_set_many_empty_is_noop(self, backend, store):
        store.set_many("dev", {})
        assert backend.writes == []

    def test_set_single(self, backend, store):
        store.set("dev", keys.REGION, "ap-northeast-2")
        assert backend.writes == [("dev", keys.REGION, "ap-northeast-2")]

    def test_unset_many_only_present(self, backend, store):
        """Only keys that exist are removed and reported"""
        backend.profiles["dev"] = {keys.REGION: "us-east-1", keys.MFA_DEVICE: "arn"}

        removed = store.unset_many("dev", [keys.MFA_DEVICE, keys.OTP_ITEM_ID])

        assert removed == [keys.MFA_DEVICE]
        assert backend.profiles["dev"] == {keys.REGION: "us-east-1"}
        assert backend.writes == [("dev", keys.MFA_DEVICE, None)]

    def test_unset_on_missing_profile(self, store):
        assert store.unset_many("ghost", [keys.REGION]) == []

    def test_reads_see_own_writes_with_cache(self, backend, clock):
        """Cached records are updated by writes"""
        store = ProfileStore(backend, ttl_seconds=60, clock=clock)
        backend.profiles["dev"] = {keys.REGION: "us-east-1"}
        assert store.get("dev", keys.REGION) == "us-east-1"

        store.set("dev", keys.REGION, "eu-west-1")
        store.unset("dev", keys.OUTPUT)

        assert store.get("dev", keys.REGION) == "eu-west-1"


class TestProfileStoreCache:
    """TTL read cache"""

    def test_cached_until_ttl(self, backend, clock):
        store = ProfileStore(backend, ttl_seconds=5, clock=clock)
        backend.profiles["dev"] = {keys.REGION: "us-east-1"}
        assert store.get("dev", keys.REGION) == "us-east-1"

        backend.profiles["dev"][keys.REGION] = "eu-west-1"
        assert store.get("dev", keys.REGION) == "us-east-1"

        clock.advance(5)
        assert store.get("dev", keys.REGION) == "eu-west-1"

    def test_invalidate(self, backend, clock):
        store = ProfileStore(backend, ttl_seconds=60, clock=clock)
        backend.profiles["dev"] = {keys.REGION: "us-east-1"}
        store.get("dev", keys.REGION)
        backend.profiles["dev"][keys.REGION] = "eu-west-1"

        store.invalidate("dev")

        assert store.get("dev", keys.REGION) == "eu-west-1"

    def test_failed_set_many_rereads_backend(self, backend, cached_store):
        """Keys written before the failing one stay visible, and unset removes them"""
        original_write = backend.write

        def flaky_write(name, key, value):
            if key == keys.OUTPUT:
                raise StoreUnavailable("disk full")
            original_write(name, key, value)

        backend.write = flaky_write
        with pytest.raises(StoreUnavailable):
            cached_store.set_many("tmp", {keys.REGION: "us-east-1", keys.OUTPUT: "json"})

        assert cached_store.snapshot("tmp") == {keys.REGION: "us-east-1"}
        assert cached_store.unset_many("tmp", [keys.REGION, keys.OUTPUT]) == [keys.REGION]
        assert backend.profiles["tmp"] == {}

    def test_failed_unset_many_rereads_backend(self, backend, cached_store):
        backend.profiles["dev"] = {keys.REGION: "us-east-1", keys.OUTPUT: "json"}
        cached_store.snapshot("dev")
        original_delete = backend.delete

        def flaky_delete(name, key):
            if key == keys.OUTPUT:
                raise StoreUnavailable("read-only")
            original_delete(name, key)

        backend.delete = flaky_delete
        with pytest.raises(StoreUnavailable):
            cached_store.unset_many("dev", [keys.REGION, keys.OUTPUT])

        assert cached_store.snapshot("dev") == {keys.OUTPUT: "json"}

    def test_zero_ttl_always_reads(self, backend, store):
        backend.profiles["dev"] = {keys.REGION: "a"}
        store.get("dev", keys.REGION)
        backend.profiles["dev"][keys.REGION] = "b"
        assert store.get("dev", keys.REGION) == "b"

    def test_lock_is_per_profile(self, store):
        assert store.lock("a") is store.lock("a")
        assert store.lock("a") is not store.lock("b")

    def test_concurrent_writers(self, backend):
        """Parallel writes to one profile all land"""
        store = ProfileStore(backend, ttl_seconds=60)
        threads = [
            threading.Thread(target=store.set, args=("dev", f"key_{i}", str(i)))
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(backend.profiles["dev"]) == 20
        assert len(store.snapshot("dev")) == 20


# =============================================================================
# AwsCliConfigBackend
# =============================================================================

CONFIG = """\
[default]
region = us-east-1

[profile dev]
region = eu-west-1
output = json
sso_session = corp
s3 =
    max_concurrent_requests = 10

[profile q]
region = ap-northeast-2
aws_session_token = from-config

[sso-session corp]
sso_start_url = https://corp.awsapps.com/start
sso_region = us-east-1
"""

CREDENTIALS = """\
[q]
aws_access_key_id = ASIAQ
aws_secret_access_key = secret
aws_session_token = from-credentials

[q-long-term]
aws_access_key_id = AKIAQ
aws_secret_access_key = permanent
"""


@pytest.fixture
def aws_files(isolated_home):
    aws_dir = isolated_home / ".aws"
    aws_dir.mkdir(exist_ok=True)
    config = aws_dir / "config"
    credentials = aws_dir / "credentials"
    config.write_text(CONFIG, encoding="utf-8")
    credentials.write_text(CREDENTIALS, encoding="utf-8")
    return config, credentials


@pytest.fixture
def file_backend(aws_files):
    config, credentials = aws_files
    return AwsCliConfigBackend(AwsCli(FakeRunner(), executable="aws"), config, credentials)


class TestAwsCliConfigBackendReads:
    """botocore-parsed config and credentials"""

    def test_lists_both_files(self, file_backend):
        assert sorted(file_backend.list_profiles()) == ["default", "dev", "q", "q-long-term"]

    def test_profile_section(self, file_backend):
        """'[profile x]' sections are read; nested sections dropped"""
        record = file_backend.read_profile("dev")
        assert record == {"region": "eu-west-1", "output": "json", "sso_session": "corp"}

    def test_credentials_override_config(self, file_backend):
        record = file_backend.read_profile("q")
        assert record[keys.SESSION_TOKEN] == "from-credentials"
        assert record[keys.REGION] == "ap-northeast-2"

    def test_sso_session_section(self, file_backend):
        assert file_backend.read_sso_session("corp") == {
            "sso_start_url": "https://corp.awsapps.com/start",
            "sso_region": "us-east-1",
        }
        assert file_backend.read_sso_session("nope") is None

    def test_missing_profile(self, file_backend):
        assert file_backend.read_profile("ghost") is None

    def test_only_credentials_file(self, aws_files):
        """A missing config file alone is fine"""
        config, credentials = aws_files
        config.unlink()
        backend = AwsCliConfigBackend(AwsCli(FakeRunner(), executable="aws"), config, credentials)
        assert backend.read_profile("q-long-term")[keys.ACCESS_KEY_ID] == "AKIAQ"

    def test_no_files_is_unavailable(self, tmp_path):
        backend = AwsCliConfigBackend(AwsCli(FakeRunner(), executable="aws"), tmp_path / "c", tmp_path / "k")
        with pytest.raises(StoreUnavailable):
            backend.list_profiles()

    def test_unparseable_is_unavailable(self, aws_files):
        config, credentials = aws_files
        config.write_text("region = no section header\n", encoding="utf-8")
        backend = AwsCliConfigBackend(AwsCli(FakeRunner(), executable="aws"), config, credentials)
        with pytest.raises(StoreUnavailable):
            backend.read_profile("dev")


class TestAwsCliConfigBackendWrites:
    """Writes go through 'aws configure'"""

    def test_write_uses_configure_set(self, tmp_path):
        runner = FakeRunner()
        runner.on("configure", "set", response=ok())
        backend = AwsCliConfigBackend(AwsCli(runner, executable="aws"), tmp_path / "c", tmp_path / "k")

        backend.write("dev", keys.REGION, "eu-west-1")

        assert runner.calls == [["aws", "configure", "set", "region", "eu-west-1", "--profile", "dev"]]

    def test_write_failure(self, tmp_path):
        runner = FakeRunner()
        runner.on("configure", "set", response=fail("Permission denied"))
        backend = AwsCliConfigBackend(AwsCli(runner, executable="aws"), tmp_path / "c", tmp_path / "k")

        with pytest.raises(StoreUnavailable) as exc_info:
            backend.write("dev", keys.REGION, "eu-west-1")
        assert "Permission denied" in exc_info.value.message

    def test_delete_uses_configure_unset(self, tmp_path):
        runner = FakeRunner()
        runner.on("configure", "unset", response=ok())
        backend = AwsCliConfigBackend(AwsCli(runner, executable="aws"), tmp_path / "c", tmp_path / "k")

        backend.delete("dev", keys.MFA_DEVICE)

        assert runner.calls_for("configure", "unset")
        assert not runner.calls_for("configure", "set")

    def test_delete_falls_back_to_blank(self, tmp_path):
        """Without 'configure unset' the key is set to an empty value"""
        runner = FakeRunner()
        runner.on("configure", "unset", response=fail("Invalid choice: 'unset'", returncode=252))
        runner.on("configure", "set", response=ok())
        backend = AwsCliConfigBackend(AwsCli(runner, executable="aws"), tmp_path / "c", tmp_path / "k")

        backend.delete("dev", keys.MFA_DEVICE)

        assert runner.calls_for("configure", "set") == [
            ["aws", "configure", "set", keys.MFA_DEVICE, "", "--profile", "dev"]
        ]


class TestInMemoryBackend:
    def test_records_writes(self):
        backend = InMemoryConfigBackend({"dev": {keys.REGION: "us-east-1"}})
        backend.write("dev", keys.OUTPUT, "json")
        backend.delete("dev", keys.REGION)
        assert backend.profiles["dev"] == {keys.OUTPUT: "json"}
        assert backend.writes == [("dev", keys.OUTPUT, "json"), ("dev", keys.REGION, None)]
