# src/resource_manifest/filters.py

"""Ordered include/exclude filters over resource names.

Pattern syntax (a mix of ANT-style paths and plain names):

- a leading ``-`` or ``!`` marks an exclude, a leading ``+`` an explicit include;
  without a marker the pattern is an include
- ``**/`` stands for any number of path segments (folders), including none
- ``*`` stands for any run of characters except ``/``
- a trailing ``/`` means "everything below this folder"
- a pattern without ``*`` (after the trailing-slash rewrite) matches one name exactly

A glob must match the whole candidate, except when it ends in ``**/`` (folder
patterns): those accept every name below the folder.

Order is significant: a later rule can re-admit or re-reject what an earlier
one decided. A list made only of excludes lets everything else through; a
single include anywhere flips the default to "nothing unless included".

Example::

    !sap/ui/core/
    +sap/ui/core/utils/

excludes everything from sap/ui/core but keeps the sub-package
sap/ui/core/utils/.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .utils_logs import get_logger

FILTER_PREFIXES = ("-", "!", "+")

_ANY_DIRS = "**/"
_ANY_NAME = "*"

_REGEX_FOR_TOKEN = {
    _ANY_DIRS: "(?:[^/]+/)*",
    _ANY_NAME: "[^/]*",
}


# --------------------------------------------------------------------------- #
# compilation
# --------------------------------------------------------------------------- #


def split_marker(pattern: str) -> tuple[bool, str]:
    """Return (include, pattern-without-marker)."""
    if pattern.startswith(FILTER_PREFIXES):
        return pattern[0] == "+", pattern[1:]
    return True, pattern


def expand_trailing_slash(glob: str) -> str:
    """Rewrite a folder pattern ``foo/`` to the recursive form ``foo/**/``."""
    if glob.endswith("/") and glob != _ANY_DIRS and not glob.endswith("/" + _ANY_DIRS):
        return glob + _ANY_DIRS
    return glob


def tokenize_glob(glob: str) -> list[str]:
    """Split a glob into ``**/`` and ``*`` wildcard tokens and literal runs.

    ``**/`` only counts as a wildcard at the start of the pattern or right
    after a ``/``; anywhere else its stars are plain ``*`` tokens.
    """
    tokens: list[str] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            tokens.append("".join(literal))
            literal.clear()

    i = 0
    while i < len(glob):
        at_segment_start = i == 0 or glob[i - 1] == "/"
        if at_segment_start and glob.startswith(_ANY_DIRS, i):
            flush()
            tokens.append(_ANY_DIRS)
            i += len(_ANY_DIRS)
        elif glob[i] == _ANY_NAME:
            flush()
            tokens.append(_ANY_NAME)
            i += 1
        else:
            literal.append(glob[i])
            i += 1
    flush()
    return tokens


def glob_to_regex(glob: str) -> str:
    """Translate a glob into a regular expression source.

    Anchored at both ends unless the glob ends in ``**/``, which is left open so
    a folder pattern matches the files inside it.
    """
    tokens = tokenize_glob(glob)
    parts = [_REGEX_FOR_TOKEN.get(tok) or re.escape(tok) for tok in tokens]
    tail = "" if tokens and tokens[-1] == _ANY_DIRS else r"\Z"
    return "^" + "".join(parts) + tail


@dataclass(frozen=True)
class FilterMatcher:
    """One compiled rule of a ResourceFilterList."""

    pattern: str  # as given, marker included
    include: bool
    regexp: re.Pattern[str] | None = None
    value: str | None = None

    def test(self, candidate: str) -> bool:
        if self.regexp is not None:
            return self.regexp.match(candidate) is not None
        return candidate == self.value

    def calc_match(self, candidate: str, match_so_far: bool) -> bool:
        if self.include:
            return match_so_far or self.test(candidate)
        return match_so_far and not self.test(candidate)


def make_matcher(pattern: str) -> FilterMatcher:
    if not isinstance(pattern, str):
        xmsg = f"unsupported filter pattern {pattern!r} (expected a string)"
        raise TypeError(xmsg)

    logger = get_logger()
    include, glob = split_marker(pattern)
    glob = expand_trailing_slash(glob)
    kind = "include" if include else "exclude"

    if _ANY_NAME in glob:
        regexp = re.compile(glob_to_regex(glob))
        logger.trace("  %s --> %s: /%s/", pattern, kind, regexp.pattern)
        return FilterMatcher(pattern, include, regexp=regexp)

    logger.trace("  %s --> %s: %r", pattern, kind, glob)
    return FilterMatcher(pattern, include, value=glob)


# --------------------------------------------------------------------------- #
# filter list
# --------------------------------------------------------------------------- #


class ResourceFilterList:
    """Ordered list of include/exclude rules evaluated left to right."""

    def __init__(self, filters: Sequence[str] | None = None) -> None:
        self.matchers: list[FilterMatcher] = []
        self.match_by_default = True
        self.add_filters(filters)

    def add_filters(self, filters: Sequence[str] | None) -> ResourceFilterList:
        if filters is None:
            return self
        if isinstance(filters, (str, bytes)) or not isinstance(filters, Sequence):
            xmsg = f"unsupported filter {filters!r} (expected a list of patterns)"
            raise TypeError(xmsg)

        for pattern in filters:
            matcher = make_matcher(pattern)
            self.matchers.append(matcher)
            self.match_by_default = self.match_by_default and not matcher.include
        return self

    def matches(self, candidate: str, initial_match: bool | None = None) -> bool:
        acc = self.match_by_default if initial_match is None else initial_match
        for matcher in self.matchers:
            acc = matcher.calc_match(candidate, acc)
        return acc

    def __str__(self) -> str:
        return ",".join(m.pattern for m in self.matchers)

    def __repr__(self) -> str:
        return f"ResourceFilterList({[m.pattern for m in self.matchers]!r})"

    def __len__(self) -> int:
        return len(self.matchers)

    @classmethod
    def from_string(cls, filter_str: str | None) -> ResourceFilterList:
        """Build a list from one comma separated string of patterns."""
        result = cls()
        if filter_str is not None:
            result.add_filters(
                [p for p in re.split(r"\s*,\s*", filter_str.strip()) if p]
            )
        return result


def negate_filters(patterns: Sequence[str]) -> list[str]:
    """Turn includes into excludes and excludes into includes."""
    negated: list[str] = []
    for pattern in patterns:
        include, glob = split_marker(pattern)
        negated.append(("!" if include else "+") + glob)
    return negated
