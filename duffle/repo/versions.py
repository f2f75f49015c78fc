"""Semantic versions and version constraints for looking up bundles."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Callable

_VERSION = re.compile(
    r"v?(?P<major>[0-9]+)(?:\.(?P<minor>[0-9]+))?(?:\.(?P<patch>[0-9]+))?"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<meta>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)

_PART = r"(?:[0-9]+|[xX*])"
_TERM = re.compile(
    r"(?P<op>!=|>=|=>|<=|=<|~>|[=<>~^])?\s*"
    rf"v?(?P<major>{_PART})(?:\.(?P<minor>{_PART}))?(?:\.(?P<patch>{_PART}))?"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<meta>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)
_SEPARATORS = re.compile(r"[\s,]*")
_HYPHEN_RANGE = re.compile(r"(?P<low>[^\s,]+)\s+-\s+(?P<high>[^\s,]+)")
_WILDCARDS = frozenset("xX*")


class VersionError(ValueError):
    """A version or a constraint could not be parsed."""


def _compare_identifier(a: str, b: str) -> int:
    a_numeric, b_numeric = a.isdigit(), b.isdigit()
    if a_numeric and b_numeric:
        left, right = int(a), int(b)
    elif a_numeric:
        return -1
    elif b_numeric:
        return 1
    else:
        left, right = a, b  # type: ignore[assignment]
    return (left > right) - (left < right)


def _compare_prerelease(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return 1
    if not b:
        return -1
    a_parts, b_parts = a.split("."), b.split(".")
    for left, right in zip(a_parts, b_parts):
        result = _compare_identifier(left, right)
        if result:
            return result
    return (len(a_parts) > len(b_parts)) - (len(a_parts) < len(b_parts))


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version; build metadata does not take part in comparisons."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    metadata: str = ""

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1 as this version is lower, equal or higher."""
        left = (self.major, self.minor, self.patch)
        right = (other.major, other.minor, other.patch)
        if left != right:
            return -1 if left < right else 1
        return _compare_prerelease(self.prerelease, other.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text


def parse_version(text: str) -> Version:
    """Parse a version such as ``1.2.3``, ``v1.2`` or ``1.0.0-beta+build``."""
    match = _VERSION.fullmatch(text)
    if match is None:
        raise VersionError("Invalid Semantic Version")
    return Version(
        major=int(match["major"]),
        minor=int(match["minor"] or 0),
        patch=int(match["patch"] or 0),
        prerelease=match["pre"] or "",
        metadata=match["meta"] or "",
    )


@dataclass(frozen=True)
class _Term:
    op: str
    version: Version
    any_major: bool
    any_minor: bool
    any_patch: bool

    @property
    def dirty(self) -> bool:
        return self.any_major or self.any_minor or self.any_patch

    def _in_range(self, v: Version) -> bool:
        if v < self.version:
            return False
        if self.any_major:
            return True
        if v.major != self.version.major:
            return False
        return self.any_minor or v.minor == self.version.minor

    def matches(self, v: Version) -> bool:
        con = self.version
        exact = self.op in ("", "=", "!=") and not self.dirty
        if not exact and v.prerelease and not con.prerelease:
            return False
        check: Callable[[Version], bool] = _CHECKS[self.op].__get__(self)
        return check(v)

    def _equal(self, v: Version) -> bool:
        if self.dirty:
            return self._in_range(v)
        return v == self.version

    def _not_equal(self, v: Version) -> bool:
        if not self.dirty:
            return v != self.version
        if self.any_major:
            return False
        if v.major != self.version.major:
            return True
        if self.any_minor:
            return False
        return v.minor != self.version.minor

    def _greater(self, v: Version) -> bool:
        return v > self.version

    def _greater_equal(self, v: Version) -> bool:
        return v >= self.version

    def _less(self, v: Version) -> bool:
        return v < self.version

    def _less_equal(self, v: Version) -> bool:
        con = self.version
        if not self.dirty:
            return v <= con
        if self.any_major:
            return True
        if v.major != con.major:
            return v.major < con.major
        if self.any_minor:
            return True
        if v.minor != con.minor:
            return v.minor < con.minor
        return True

    def _tilde(self, v: Version) -> bool:
        return self._in_range(v)

    def _caret(self, v: Version) -> bool:
        if v < self.version:
            return False
        return self.any_major or v.major == self.version.major


_CHECKS = {
    "": _Term._equal,
    "=": _Term._equal,
    "!=": _Term._not_equal,
    ">": _Term._greater,
    ">=": _Term._greater_equal,
    "=>": _Term._greater_equal,
    "<": _Term._less,
    "<=": _Term._less_equal,
    "=<": _Term._less_equal,
    "~": _Term._tilde,
    "~>": _Term._tilde,
    "^": _Term._caret,
}


@dataclass(frozen=True)
class Constraint:
    """Alternatives joined by ``||``, each a set of terms that must all hold."""

    source: str
    alternatives: tuple[tuple[_Term, ...], ...]

    def check(self, version: Version) -> bool:
        """Return True if the version satisfies the constraint."""
        return any(
            all(term.matches(version) for term in terms) for terms in self.alternatives
        )

    def __str__(self) -> str:
        return self.source


def _is_wild(part: str | None) -> bool:
    return part is None or part in _WILDCARDS


def _term_from(match: re.Match[str]) -> _Term:
    any_major = match["major"] in _WILDCARDS
    any_minor = any_major or _is_wild(match["minor"])
    any_patch = any_minor or _is_wild(match["patch"])

    def number(part: str | None, wild: bool) -> int:
        return 0 if wild or part is None else int(part)

    version = Version(
        major=number(match["major"], any_major),
        minor=number(match["minor"], any_minor),
        patch=number(match["patch"], any_patch),
        prerelease=match["pre"] or "",
        metadata=match["meta"] or "",
    )
    return _Term(match["op"] or "", version, any_major, any_minor, any_patch)


def _parse_clause(clause: str, source: str) -> tuple[_Term, ...]:
    clause = _HYPHEN_RANGE.sub(r">=\g<low>, <=\g<high>", clause)
    terms = []
    position = 0
    while True:
        position = _SEPARATORS.match(clause, position).end()
        if position == len(clause):
            break
        match = _TERM.match(clause, position)
        if match is None or (
            match.end() < len(clause) and not _SEPARATORS.match(clause, match.end()).end() > match.end()
        ):
            raise VersionError(f"improper constraint: {source}")
        terms.append(_term_from(match))
        position = match.end()
    if not terms:
        raise VersionError(f"improper constraint: {source}")
    return tuple(terms)


def parse_constraint(text: str) -> Constraint:
    """Parse a constraint such as ``>=1.2, <2``, ``^1.4``, ``1.2.x`` or ``*``."""
    alternatives = tuple(_parse_clause(part.strip(), text) for part in text.split("||"))
    return Constraint(source=text, alternatives=alternatives)