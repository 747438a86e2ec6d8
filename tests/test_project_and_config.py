"""Tests for package.json handling, configuration and logging helpers."""

import json
import logging

import pytest

from heroui_cli import config
from heroui_cli.common.logging_utils import Timer, configure_logging, extra_context, safe_url
from heroui_cli.errors import FileNotFoundError as CLIFileNotFoundError
from heroui_cli.errors import ValidationError
from heroui_cli.project import read_package_info, to_records, write_upgrade_version
from heroui_cli.versioning.models import PackageRecord, UpgradeCandidate, VersionChannel


@pytest.fixture
def package_json(tmp_path):
    path = tmp_path / "package.json"
    path.write_text(json.dumps({
        "name": "app",
        "dependencies": {"@heroui/react": "^2.0.0", "react": "18.2.0"},
        "devDependencies": {"@heroui/theme": "~2.1.0", "react": "18.0.0"},
    }))
    return path


class TestProject:
    """Tests for read_package_info() and write_upgrade_version()."""

    def test_read_package_info(self, package_json):
        info = read_package_info(str(package_json))
        assert info.all_dependencies == {
            "@heroui/theme": "~2.1.0",
            "react": "18.2.0",
            "@heroui/react": "^2.0.0",
        }
        records = {r.name: r for r in info.records()}
        assert records["@heroui/react"] == PackageRecord("@heroui/react", "2.0.0", "^")
        assert records["@heroui/theme"].version_range_prefix == "~"

    def test_missing_file(self, tmp_path):
        with pytest.raises(CLIFileNotFoundError) as excinfo:
            read_package_info(str(tmp_path / "package.json"))
        assert excinfo.value.exit_code == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text("{oops")
        with pytest.raises(ValidationError):
            read_package_info(str(path))

    def test_write_upgrade_version(self, package_json):
        info = read_package_info(str(package_json))
        write_upgrade_version(info, [
            UpgradeCandidate("@heroui/react", "2.0.0", "2.4.0", False, "^"),
            UpgradeCandidate("@heroui/theme", "2.1.0", "2.2.0", False, "~"),
            UpgradeCandidate("framer-motion", "Missing", "11.5.6", False),
        ])
        written = json.loads(package_json.read_text())
        assert written["dependencies"]["@heroui/react"] == "^2.4.0"
        assert written["dependencies"]["framer-motion"] == "11.5.6"
        assert written["devDependencies"]["@heroui/theme"] == "~2.2.0"
        assert "@heroui/theme" not in written["dependencies"]

    def test_to_records(self):
        assert to_records({"a": "~1.0.0"}) == [PackageRecord("a", "1.0.0", "~")]


class TestConfig:
    """Tests for load_config(), build_context() and build_cache()."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = config.load_config(environ={})
        assert settings["channel"] == "latest"
        assert settings["no_cache"] is False
        context = config.build_context(settings)
        assert context.channel is VersionChannel.LATEST
        assert context.channel_tag is None

    def test_yaml_and_env_precedence(self, tmp_path):
        cfg = tmp_path / "heroui-cli.yml"
        cfg.write_text(
            "channel: beta\n"
            "component_packages:\n  - '@heroui/button'\n"
            "unknown_key: ignored\n"
        )
        settings = config.load_config(str(cfg), environ={"HEROUI_CLI_NO_CACHE": "true"})
        assert settings["channel"] == "beta"
        assert settings["no_cache"] is True
        assert "unknown_key" not in settings

        settings = config.load_config(str(cfg), environ={"HEROUI_CLI_CHANNEL": "canary"})
        context = config.build_context(settings)
        assert context.channel is VersionChannel.CANARY
        assert context.channel_tag == "canary"
        assert context.component_packages == frozenset({"@heroui/button"})

    def test_override_beats_settings(self):
        context = config.build_context({"channel": "latest"}, channel="beta")
        assert context.channel is VersionChannel.BETA

    def test_unknown_channel(self):
        with pytest.raises(ValidationError):
            config.build_context({"channel": "nightly"})

    def test_missing_explicit_config(self, tmp_path):
        with pytest.raises(ValidationError):
            config.load_config(str(tmp_path / "nope.yml"), environ={})

    def test_malformed_yaml(self, tmp_path):
        cfg = tmp_path / "bad.yml"
        cfg.write_text("- just\n- a list\n")
        with pytest.raises(ValidationError):
            config.load_config(str(cfg), environ={})

    def test_build_cache(self, tmp_path):
        settings = {"cache_dir": str(tmp_path / "c"), "cache_ttl": 60, "no_cache": True}
        cache = config.build_cache(settings)
        assert cache.ttl == 60
        assert cache.disabled is True
        assert (tmp_path / "c" / "cache.json").exists()


class TestLoggingUtils:
    """Tests for logging helpers."""

    def test_configure_logging(self, tmp_path):
        log_file = tmp_path / "cli.log"
        configure_logging("DEBUG", str(log_file))
        logging.getLogger("heroui_cli.test").debug("hello %s", "world")
        logging.shutdown()
        assert "[DEBUG] hello world" in log_file.read_text()
        configure_logging("WARNING")

    def test_extra_context_drops_none(self):
        assert extra_context(event="x", target=None) == {"event": "x"}

    def test_safe_url(self):
        assert safe_url("https://user:pw@host/p?token=abc&x=1") == (
            "https://[REDACTED]@host/p?token=[REDACTED]&x=1"
        )

    def test_timer(self):
        with Timer() as timer:
            pass
        assert timer.duration_ms() >= 0
