# src/regionbuild/matcher.py: Ant-style path matching for included regions.
# Patterns follow Ant's path selector rules: '**' as a whole segment spans any
# number of directories, '*' spans characters inside one segment and '?'
# matches a single character. Matching is anchored and case-sensitive unless
# asked otherwise. Everything here is pure and safe to share between threads.

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence

DEEP_WILDCARD = "**"
_SEPARATORS = ("/", "\\")


def tokenize_path(path: str) -> List[str]:
    """Splits a path on '/' or '\\', dropping empty segments."""
    return [segment for segment in re.split(r"[/\\]+", path) if segment]


@lru_cache(maxsize=1024)
def _segment_regex(segment: str, case_sensitive: bool) -> "re.Pattern[str]":
    parts = []
    for char in segment:
        if char == "*":
            # A run of stars inside one segment behaves like a single star.
            if not parts or parts[-1] != ".*":
                parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    return re.compile("".join(parts), flags)


def match_segment(pattern: str, segment: str, case_sensitive: bool = True) -> bool:
    """Matches one path segment against one pattern segment ('*' and '?' only)."""
    return _segment_regex(pattern, case_sensitive).fullmatch(segment) is not None


def _only_deep_wildcards(tokens: Sequence[str], start: int, end: int) -> bool:
    return all(tokens[i] == DEEP_WILDCARD for i in range(start, end + 1))


def match_path(pattern: str, path: str, case_sensitive: bool = True) -> bool:
    """
    Returns True when the whole of `path` matches the Ant-style `pattern`.

    Examples:
        >>> match_path("src/**/*.go", "src/pkg/sub/file.go")
        True
        >>> match_path("*.txt", "dir/notes.txt")
        False
    """
    if pattern.startswith(_SEPARATORS) != path.startswith(_SEPARATORS):
        return False

    pat = tokenize_path(pattern)
    dirs = tokenize_path(path)

    pat_start, pat_end = 0, len(pat) - 1
    str_start, str_end = 0, len(dirs) - 1

    # Leading segments up to the first '**'.
    while pat_start <= pat_end and str_start <= str_end:
        if pat[pat_start] == DEEP_WILDCARD:
            break
        if not match_segment(pat[pat_start], dirs[str_start], case_sensitive):
            return False
        pat_start += 1
        str_start += 1

    if str_start > str_end:
        return _only_deep_wildcards(pat, pat_start, pat_end)
    if pat_start > pat_end:
        return False

    # Trailing segments back to the last '**'.
    while pat_start <= pat_end and str_start <= str_end:
        if pat[pat_end] == DEEP_WILDCARD:
            break
        if not match_segment(pat[pat_end], dirs[str_end], case_sensitive):
            return False
        pat_end -= 1
        str_end -= 1

    if str_start > str_end:
        return _only_deep_wildcards(pat, pat_start, pat_end)

    # Fixed runs between '**' markers, each placed at its leftmost fit.
    while pat_start != pat_end and str_start <= str_end:
        next_deep = -1
        for i in range(pat_start + 1, pat_end + 1):
            if pat[i] == DEEP_WILDCARD:
                next_deep = i
                break
        if next_deep == pat_start + 1:
            # '**/**'
            pat_start += 1
            continue

        run_length = next_deep - pat_start - 1
        remaining = str_end - str_start + 1
        found = -1
        for offset in range(remaining - run_length + 1):
            if all(
                match_segment(pat[pat_start + j + 1], dirs[str_start + offset + j], case_sensitive)
                for j in range(run_length)
            ):
                found = str_start + offset
                break
        if found == -1:
            return False

        pat_start = next_deep
        str_start = found + run_length

    return _only_deep_wildcards(pat, pat_start, pat_end)


def matches_any(patterns: Iterable[str], path: str, case_sensitive: bool = True) -> bool:
    """True if any pattern matches; stops at the first hit in input order."""
    return any(match_path(pattern, path, case_sensitive) for pattern in patterns)


def matching_region(patterns: Iterable[str], path: str, case_sensitive: bool = True) -> Optional[str]:
    """Returns the first pattern that matches `path`, or None."""
    for pattern in patterns:
        if match_path(pattern, path, case_sensitive):
            return pattern
    return None
