"""
Glob-style allow-list matching for repositories and channels.

Patterns are split on '/' and compared part by part. Each part may hold at
most one '*' wildcard, which matches one or more characters. Matching is done
with plain string slicing; no regular expressions are involved.
"""

from typing import Iterable, List, Optional

from .errors import InvalidConfiguration


WILDCARD = "*"


def split_parts(value: str) -> List[str]:
    """Split a key or pattern on '/', dropping empty parts."""
    return [part for part in value.split("/") if part]


def match_wildcard(value: str, pattern: str) -> bool:
    """
    Check whether a single part matches a single-wildcard pattern part.

    Args:
        value: The key part (e.g. "widgets")
        pattern: The pattern part (e.g. "wid*")

    Returns:
        True if the part matches
    """
    if pattern == value:
        return True

    if WILDCARD not in pattern:
        return False

    if pattern == WILDCARD:
        return len(value) > 0

    # "prefix-*"
    if pattern.endswith(WILDCARD):
        prefix = pattern[:-1]
        return len(value) >= len(prefix) and value[:len(prefix)] == prefix

    # "*-suffix"
    if pattern.startswith(WILDCARD):
        suffix = pattern[1:]
        return len(value) >= len(suffix) and value[len(value) - len(suffix):] == suffix

    # "pre*fix"
    star = pattern.index(WILDCARD)
    prefix = pattern[:star]
    suffix = pattern[star + 1:]
    if len(value) < len(prefix) + len(suffix):
        return False
    return value[:len(prefix)] == prefix and value[len(value) - len(suffix):] == suffix


def match_pattern(key: str, pattern: str) -> bool:
    """Check whether a '/'-separated key matches a '/'-separated pattern."""
    key_parts = split_parts(key)
    pattern_parts = split_parts(pattern)

    if len(key_parts) != len(pattern_parts):
        return False

    return all(match_wildcard(k, p) for k, p in zip(key_parts, pattern_parts))


def matches_any_pattern(key: str, patterns: Iterable[str]) -> bool:
    """
    Check a key against an allow-list.

    An empty allow-list means no restriction is configured, so every key
    matches.

    Args:
        key: Repository full name or channel name
        patterns: Allow-list patterns

    Returns:
        True if the key is allowed
    """
    patterns = list(patterns)
    if not patterns:
        return True
    return any(match_pattern(key, pattern) for pattern in patterns)


def validate_pattern(pattern: str, segments: Optional[int] = None) -> None:
    """
    Validate an allow-list pattern before it is used for matching.

    Args:
        pattern: The pattern to validate
        segments: Required number of '/'-separated parts, if any

    Raises:
        InvalidConfiguration: If the pattern is empty, has an empty part,
            has the wrong number of parts, or holds more than one wildcard
            in a single part
    """
    if not pattern:
        raise InvalidConfiguration("pattern cannot be empty")

    raw_parts = pattern.split("/")
    if any(part == "" for part in raw_parts):
        raise InvalidConfiguration(f"invalid pattern: parts cannot be empty. Got: '{pattern}'")

    if segments is not None and len(raw_parts) != segments:
        if segments == 2:
            raise InvalidConfiguration(
                f"pattern must be in 'owner/repo' format (e.g., 'myorg/*', 'user/repo'). Got: '{pattern}'"
            )
        raise InvalidConfiguration(f"pattern must have exactly {segments} part(s). Got: '{pattern}'")

    for part in raw_parts:
        if part.count(WILDCARD) > 1:
            raise InvalidConfiguration(
                f"only one '*' is supported per pattern part. Got: '{pattern}'"
            )
