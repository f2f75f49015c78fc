"""Helpers for presenting and matching references."""

from __future__ import annotations

import re

from duffle.reference.reference import (
    CanonicalReference,
    Reference,
    Repository,
    TaggedReference,
)


class PatternError(ValueError):
    """A match pattern is malformed."""

    def __init__(self, message: str = "syntax error in pattern") -> None:
        super().__init__(message)


def is_name_only(ref: Repository) -> bool:
    """Return True if the reference holds only a repository name."""
    return not isinstance(ref, (TaggedReference, CanonicalReference))


def familiar_name(ref: Repository) -> str:
    """Return the name of a reference in the form shown to users."""
    return ref.name()


def familiar_string(ref: Reference) -> str:
    """Return the full reference in the form shown to users."""
    return str(ref)


def _class_char(pattern: str, index: int) -> tuple[str, int]:
    if index >= len(pattern) or pattern[index] in "-]":
        raise PatternError()
    char = pattern[index]
    if char == "\\":
        index += 1
        if index >= len(pattern):
            raise PatternError()
        char = pattern[index]
    index += 1
    if index >= len(pattern):
        raise PatternError()
    return char, index


def _translate_class(pattern: str, index: int) -> tuple[str, int]:
    negated = index < len(pattern) and pattern[index] == "^"
    if negated:
        index += 1
    ranges: list[tuple[str, str]] = []
    while True:
        if index < len(pattern) and pattern[index] == "]" and ranges:
            index += 1
            break
        low, index = _class_char(pattern, index)
        high = low
        if pattern[index] == "-":
            high, index = _class_char(pattern, index + 1)
        ranges.append((low, high))
    body = "".join(
        f"{re.escape(low)}-{re.escape(high)}" for low, high in ranges if low <= high
    )
    if not body:
        return (r"[\s\S]" if negated else "(?!)"), index
    return f"[{'^' if negated else ''}{body}]", index


def _translate(pattern: str) -> str:
    parts = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "*":
            parts.append("[^/]*")
            index += 1
        elif char == "?":
            parts.append("[^/]")
            index += 1
        elif char == "\\":
            if index + 1 >= len(pattern):
                raise PatternError()
            parts.append(re.escape(pattern[index + 1]))
            index += 2
        elif char == "[":
            translated, index = _translate_class(pattern, index + 1)
            parts.append(translated)
        else:
            parts.append(re.escape(char))
            index += 1
    return "".join(parts)


def _path_match(pattern: str, name: str) -> bool:
    return re.fullmatch(_translate(pattern), name, re.DOTALL) is not None


def familiar_match(pattern: str, ref: Reference) -> bool:
    """Report whether a reference matches a shell-style path pattern.

    ``*`` and ``?`` do not match ``/``. A named reference also matches when
    its name alone matches. A malformed pattern raises :class:`PatternError`.
    """
    matched = _path_match(pattern, familiar_string(ref))
    if not matched and isinstance(ref, Repository):
        matched = _path_match(pattern, familiar_name(ref))
    return matched