"""Tests for version comparison and peer range normalization."""

import pytest

from heroui_cli.versioning.compare import (
    compare_versions,
    get_update_type,
    get_version_and_mode,
    is_up_to_date,
    min_required_version,
    normalize_peer_version,
    parse_version,
)


class TestCompareVersions:
    """Tests for numeric compare_versions()."""

    @pytest.mark.parametrize("a,b,expected", [
        ("1.2.3", "1.2.4", -1),
        ("2.0.0", "1.9.9", 1),
        ("1.0.0", "1.0.0", 0),
        ("1.10.0", "1.9.0", 1),
        ("1", "1.0.0", 0),
    ])
    def test_ordering(self, a, b, expected):
        assert compare_versions(a, b) == expected

    def test_antisymmetric_and_reflexive(self):
        versions = ["0.0.1", "1.2.3", "2.1.0-beta.0", "10.0.0", "garbage", ""]
        for a in versions:
            assert compare_versions(a, a) == 0
            for b in versions:
                assert compare_versions(a, b) == -compare_versions(b, a)

    def test_prerelease_suffix_ignored(self):
        """Numeric comparison treats 2.1.0 and 2.1.0-beta.0 as equal."""
        assert compare_versions("2.1.0", "2.1.0-beta.0") == 0

    def test_malformed_segments_default_to_zero(self):
        assert parse_version("x.y.z") == (0, 0, 0)
        assert parse_version("3.beta") == (3, 0, 0)
        assert compare_versions("beta", "0.0.0") == 0

    @pytest.mark.parametrize("a,b,expected", [
        ("^2.0.0", "1.0.0", 1),
        (">=3.0.0", "2.1.0", 1),
        ("~1.2.3", "1.2.3", 0),
        ("> 1.0.0", "1.0.1", -1),
        (">=2.0.0 || >=3.0.0", "2.5.0", -1),
    ])
    def test_range_prefixes_ignored(self, a, b, expected):
        assert compare_versions(a, b) == expected
        assert compare_versions(b, a) == -expected

    def test_parse_range_prefixed_version(self):
        assert parse_version("^2.0.0") == (2, 0, 0)
        assert parse_version(">= 11.5.6 || >=12.0.0") == (11, 5, 6)


class TestNormalizePeerVersion:
    """Tests for normalize_peer_version()."""

    def test_min_of_or_range(self):
        assert normalize_peer_version(">=11.5.6 || >=12.0.0-alpha.1") == "11.5.6"

    def test_max_of_or_range(self):
        assert normalize_peer_version(">=11.5.6 || >=12.0.0", True) == "12.0.0"

    @pytest.mark.parametrize("raw,expected", [
        ("^18.0.0", "18.0.0"),
        ("~1.2.3", "1.2.3"),
        (">= 2.0.0", "2.0.0"),
        ("<=3.0.0", "3.0.0"),
        ("=4.1.0", "4.1.0"),
    ])
    def test_strips_operators(self, raw, expected):
        assert normalize_peer_version(raw) == expected

    def test_idempotent_on_plain_version(self):
        assert normalize_peer_version("1.2.3") == "1.2.3"
        assert normalize_peer_version(normalize_peer_version("^1.2.3")) == "1.2.3"

    def test_empty_input_returned_unchanged(self):
        assert normalize_peer_version("") == ""
        assert normalize_peer_version(" || ") == " || "


class TestIsUpToDate:
    """Tests for channel-aware is_up_to_date()."""

    def test_stable_channel(self):
        assert is_up_to_date("2.1.0", "2.1.0") is True
        assert is_up_to_date("2.0.0", "2.1.0") is False
        assert is_up_to_date("3.0.0", "2.1.0") is True

    def test_prerelease_older_than_same_stable(self):
        assert is_up_to_date("2.1.0-beta.0", "2.1.0") is False

    def test_beta_channel_requires_tag(self):
        assert is_up_to_date("2.1.0", "2.1.0-beta.0", "beta") is False
        assert is_up_to_date("2.1.0-beta.0", "2.1.0-beta.0", "beta") is True

    def test_beta_channel_without_tagged_target(self):
        """When no beta exists the target is stable and numeric rules apply."""
        assert is_up_to_date("2.1.0", "2.1.0", "beta") is True

    def test_auto_change_tag(self):
        assert is_up_to_date("beta", "2.1.0-beta.0") is True
        assert is_up_to_date("beta", "2.1.0") is False


class TestHelpers:
    """Tests for version mode, update type and min requirement helpers."""

    def test_get_version_and_mode(self):
        deps = {"a": "^1.0.0", "b": "~2.0.0", "c": "3.0.0"}
        assert get_version_and_mode(deps, "a") == ("1.0.0", "^")
        assert get_version_and_mode(deps, "b") == ("2.0.0", "~")
        assert get_version_and_mode(deps, "c") == ("3.0.0", "")

    def test_get_update_type(self):
        assert get_update_type("1.0.0", "2.0.0") == "major"
        assert get_update_type("1.0.0", "1.1.0") == "minor"
        assert get_update_type("1.0.0", "1.0.1") == "patch"
        assert get_update_type("1.0.0", "1.0.0") is None

    def test_min_required_version_strict(self):
        assert min_required_version(["^18.2.0", ">=18.0.0", "^19.0.0"]) == "18.0.0"

    def test_min_required_version_lenient(self):
        assert min_required_version(["^18.2.0", ">=18.0.0"], strict=False) == "18.2.0"

    def test_min_required_version_empty(self):
        assert min_required_version([]) == ""
