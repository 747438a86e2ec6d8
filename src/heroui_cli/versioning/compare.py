"""Loose semantic version comparison and peer range normalization.

Versions are compared on (major, minor, patch) only. Segments that do not
start with a digit count as 0, so every pair of strings has an ordering and
nothing here raises on malformed input.
"""

import functools
import re
from typing import Dict, Iterable, Optional, Tuple

_LEADING_DIGITS = re.compile(r"^\d+")
_RANGE_OPERATORS = re.compile(r"^[<=>^~]+\s*")
_AUTO_CHANGE_TAG = re.compile(r"^(\w+)$")
VERSION_MODE_REGEX = re.compile(r"([\^~])")


def parse_version(version: str) -> Tuple[int, int, int]:
    """Split a version into numeric (major, minor, patch), defaulting to 0.

    Range operators are ignored and only the first ``||`` alternative is
    read, so ``"^2.0.0"`` and ``">=2.0.0 || 3"`` both parse as (2, 0, 0).
    """
    first = (version or "").split("||")[0].strip()
    parts = _RANGE_OPERATORS.sub("", first).split(".")
    numbers = []
    for index in range(3):
        segment = parts[index] if index < len(parts) else ""
        match = _LEADING_DIGITS.match(segment)
        numbers.append(int(match.group(0)) if match else 0)
    return numbers[0], numbers[1], numbers[2]


def compare_versions(a: str, b: str) -> int:
    """Compare two versions numerically.

    Returns:
        -1 if a < b, 0 if equal on all three segments, 1 if a > b.
    """
    left, right = parse_version(a), parse_version(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def has_prerelease(version: str) -> bool:
    """True when the version carries a ``-tag`` after its numeric core."""
    return "-" in (version or "")


def normalize_peer_version(version_range: str, prefer_max: bool = False) -> str:
    """Reduce a peer dependency range to one representative version.

    >>> normalize_peer_version(">=11.5.6 || >=12.0.0-alpha.1")
    '11.5.6'
    >>> normalize_peer_version(">=11.5.6 || >=12.0.0", prefer_max=True)
    '12.0.0'
    """
    if not version_range:
        return version_range
    alternatives = [
        _RANGE_OPERATORS.sub("", item.strip()).strip()
        for item in version_range.split("||")
    ]
    alternatives = [item for item in alternatives if item]
    if not alternatives:
        return version_range
    alternatives.sort(key=functools.cmp_to_key(compare_versions), reverse=prefer_max)
    return alternatives[0]


def is_up_to_date(current: str, target: str, channel_tag: Optional[str] = None) -> bool:
    """Decide whether ``current`` already satisfies ``target``.

    ``channel_tag`` is the active pre-release channel ("beta", "canary") or
    None for the stable line.
    """
    # A bare tag like "beta" in package.json follows the channel automatically.
    auto_tag = _AUTO_CHANGE_TAG.match(current or "")
    if auto_tag and not auto_tag.group(1).isdigit():
        return auto_tag.group(1) in (target or "")

    result = compare_versions(current, target)
    if channel_tag:
        if result >= 0 and channel_tag in (target or "") and channel_tag not in current:
            return False
        return result >= 0
    if result == 0 and has_prerelease(current) and not has_prerelease(target):
        return False
    return result >= 0


def get_version_and_mode(dependencies: Dict[str, str], package_name: str) -> Tuple[str, str]:
    """Return (version without ^/~, the ^/~ prefix or "")."""
    raw = dependencies[package_name]
    mode = VERSION_MODE_REGEX.search(raw)
    return VERSION_MODE_REGEX.sub("", raw), mode.group(1) if mode else ""


def get_update_type(current: str, latest: str) -> Optional[str]:
    """Classify the jump from current to latest as major, minor or patch."""
    cur = parse_version(normalize_peer_version(current))
    new = parse_version(normalize_peer_version(latest))
    if cur[0] != new[0]:
        return "major"
    if cur[1] != new[1]:
        return "minor"
    if cur[2] != new[2]:
        return "patch"
    return None


def min_required_version(ranges: Iterable[str], strict: bool = True) -> str:
    """Pick one normalized requirement out of several declared ranges.

    In strict mode the lowest requirement wins; otherwise the first declared
    range is used as an example version.
    """
    declared = [r for r in ranges if r]
    if not declared:
        return ""
    if not strict:
        return normalize_peer_version(declared[0])
    minimum = declared[0]
    for candidate in declared[1:]:
        if compare_versions(normalize_peer_version(minimum), normalize_peer_version(candidate)) > 0:
            minimum = candidate
    return normalize_peer_version(minimum)
