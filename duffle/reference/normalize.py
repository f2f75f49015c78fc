"""Parsing of user-supplied reference strings into named or digest references."""

from __future__ import annotations

from duffle.reference.digest import DigestError, DigestSet, Digest, parse_digest
from duffle.reference.helpers import is_name_only
from duffle.reference.patterns import (
    ANCHORED_IDENTIFIER_REGEXP,
    ANCHORED_SHORT_IDENTIFIER_REGEXP,
)
from duffle.reference.reference import (
    DigestReference,
    NameContainsUppercaseError,
    NameNotCanonicalError,
    Reference,
    ReferenceFormatError,
    Repository,
    parse,
    with_tag,
)

DEFAULT_TAG = "latest"


def _split_docker_domain(name: str) -> tuple[str, str]:
    """Split a name into a domain and the remainder; the domain may be empty."""
    index = name.find("/")
    if index == -1:
        return "", name
    head = name[:index]
    if not any(ch in head for ch in ".:") and head != "localhost":
        return "", name
    return head, name[index + 1 :]


def parse_normalized_named(text: str) -> Repository:
    """Parse a familiar name into a fully qualified named reference.

    If the value may be an identifier, use :func:`parse_any_reference`.
    """
    if ANCHORED_IDENTIFIER_REGEXP.match(text):
        raise ReferenceFormatError(
            f"repository name ({text}) cannot be a 64-byte hexadecimal strings"
        )
    domain, remainder = _split_docker_domain(text)
    remote_name = remainder.split(":", 1)[0]
    if remote_name.lower() != remote_name:
        raise NameContainsUppercaseError(
            "in a reference name, the repository part must be lowercase"
        )
    ref = parse(f"{domain}/{remainder}" if domain else remainder)
    if not isinstance(ref, Repository):
        raise ReferenceFormatError(f"reference {ref} has no name")
    return ref


def parse_named(text: str) -> Repository:
    """Parse a named reference that must already be in canonical form."""
    named = parse_normalized_named(text)
    if str(named) != text:
        raise NameNotCanonicalError()
    return named


def tag_name_only(ref: Repository) -> Repository:
    """Add the default tag ``latest`` to a reference holding only a name."""
    if is_name_only(ref):
        return with_tag(ref, DEFAULT_TAG)
    return ref


def parse_any_reference(text: str) -> Reference:
    """Parse text as an identifier, a full digest or a familiar name."""
    if ANCHORED_IDENTIFIER_REGEXP.match(text):
        return DigestReference(Digest("sha256:" + text))
    try:
        return DigestReference(parse_digest(text))
    except DigestError:
        pass
    return parse_normalized_named(text)


def parse_any_reference_with_set(text: str, digest_set: DigestSet) -> Reference:
    """Parse text as a short identifier found in a set, a full digest or a familiar name."""
    if ANCHORED_SHORT_IDENTIFIER_REGEXP.match(text):
        try:
            return DigestReference(digest_set.lookup(text))
        except DigestError:
            pass
    else:
        try:
            return DigestReference(parse_digest(text))
        except DigestError:
            pass
    return parse_normalized_named(text)