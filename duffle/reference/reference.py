"""Parsed references to bundles: names, tags and content digests.

A reference has the form ``name[:tag][@digest]``. Parsing picks the most
specific type for what was given: a bare :class:`Repository`, a
:class:`TaggedReference`, a :class:`CanonicalReference` (name and digest),
a :class:`FullReference` (name, tag and digest) or a :class:`DigestReference`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from duffle.reference.digest import Digest, parse_digest
from duffle.reference.patterns import (
    ANCHORED_DIGEST_REGEXP,
    ANCHORED_NAME_REGEXP,
    ANCHORED_TAG_REGEXP,
    REFERENCE_REGEXP,
)

NAME_TOTAL_LENGTH_MAX = 255
"""The maximum total number of characters in a repository name."""


class ReferenceFormatError(ValueError):
    """The text is not a valid reference."""

    def __init__(self, message: str = "invalid reference format") -> None:
        super().__init__(message)


class TagFormatError(ValueError):
    """The text is not a valid tag."""

    def __init__(self, message: str = "invalid tag format") -> None:
        super().__init__(message)


class DigestFormatError(ValueError):
    """The text is not a valid digest."""

    def __init__(self, message: str = "invalid digest format") -> None:
        super().__init__(message)


class NameContainsUppercaseError(ValueError):
    """The repository name contains uppercase characters."""

    def __init__(self, message: str = "repository name must be lowercase") -> None:
        super().__init__(message)


class NameEmptyError(ValueError):
    """The repository name is empty."""

    def __init__(
        self, message: str = "repository name must have at least one component"
    ) -> None:
        super().__init__(message)


class NameTooLongError(ValueError):
    """The repository name is longer than the allowed maximum."""

    def __init__(
        self,
        message: str = (
            f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters"
        ),
    ) -> None:
        super().__init__(message)


class NameNotCanonicalError(ValueError):
    """The repository name is not in canonical form."""

    def __init__(self, message: str = "repository name must be canonical") -> None:
        super().__init__(message)


class Reference(ABC):
    """Any reference; ``str()`` gives its full textual form."""

    @abstractmethod
    def __str__(self) -> str:
        """Return the full reference."""


@dataclass(frozen=True)
class Repository(Reference):
    """A named repository with an optional domain."""

    domain: str
    path: str

    def name(self) -> str:
        """Return the full name, domain included."""
        if not self.domain:
            return self.path
        return f"{self.domain}/{self.path}"

    def __str__(self) -> str:
        return self.name()


@dataclass(frozen=True)
class TaggedReference(Repository):
    """A named repository with a tag."""

    tag: str

    def __str__(self) -> str:
        return f"{self.name()}:{self.tag}"


@dataclass(frozen=True)
class CanonicalReference(Repository):
    """A named repository pinned to a digest."""

    digest: Digest

    def __str__(self) -> str:
        return f"{self.name()}@{self.digest}"


@dataclass(frozen=True)
class FullReference(TaggedReference, CanonicalReference):
    """A named repository with both a tag and a digest."""

    def __str__(self) -> str:
        return f"{self.name()}:{self.tag}@{self.digest}"


@dataclass(frozen=True)
class DigestReference(Reference):
    """A reference made of a digest alone."""

    digest: Digest

    def __str__(self) -> str:
        return str(self.digest)


@dataclass(frozen=True)
class Field:
    """Wraps a reference for text encoding and decoding."""

    reference: Reference

    def marshal_text(self) -> bytes:
        """Return the reference's text as bytes."""
        return str(self.reference).encode()

    @classmethod
    def unmarshal_text(cls, text: Union[bytes, str]) -> "Field":
        """Parse text into a field holding the appropriately typed reference."""
        if isinstance(text, bytes):
            text = text.decode()
        return cls(parse(text))


def as_field(reference: Reference) -> Field:
    """Wrap a reference in a Field for encoding."""
    return Field(reference)


def _split_domain(name: str) -> tuple[str, str]:
    match = ANCHORED_NAME_REGEXP.match(name)
    if match is None:
        return "", name
    return match.group(1) or "", match.group(2) or ""


def domain(named: Repository) -> str:
    """Return the domain part of a named reference."""
    if isinstance(named, Repository):
        return named.domain
    return _split_domain(named.name())[0]


def path(named: Repository) -> str:
    """Return the name of a named reference without its domain."""
    if isinstance(named, Repository):
        return named.path
    return _split_domain(named.name())[1]


def split_hostname(named: Repository) -> tuple[str, str]:
    """Split a named reference into its domain and the rest of its name."""
    if isinstance(named, Repository):
        return named.domain, named.path
    return _split_domain(named.name())


def _repository_from(full_name: str) -> Repository:
    match = ANCHORED_NAME_REGEXP.match(full_name)
    if match is not None:
        candidate = match.group(1) or ""
        if any(ch in candidate for ch in ".:") or candidate.startswith("localhost"):
            return Repository(domain=candidate, path=match.group(2))
    return Repository(domain="", path=full_name)


def _best_reference(repo: Repository, tag: str, dgst: Optional[Digest]) -> Reference:
    if not repo.name():
        if dgst:
            return DigestReference(dgst)
        raise NameEmptyError()
    if not tag:
        if dgst:
            return CanonicalReference(domain=repo.domain, path=repo.path, digest=dgst)
        return repo
    if not dgst:
        return TaggedReference(domain=repo.domain, path=repo.path, tag=tag)
    return FullReference(domain=repo.domain, path=repo.path, tag=tag, digest=dgst)


def parse(text: str) -> Reference:
    """Parse text into a syntactically valid reference.

    Short digests are not handled.
    """
    match = REFERENCE_REGEXP.match(text)
    if match is None:
        if text == "":
            raise NameEmptyError()
        if REFERENCE_REGEXP.match(text.lower()) is not None:
            raise NameContainsUppercaseError()
        raise ReferenceFormatError()

    full_name = match.group(1)
    tag = match.group(2) or ""
    digest_text = match.group(3) or ""

    if len(full_name) > NAME_TOTAL_LENGTH_MAX:
        raise NameTooLongError()

    repo = _repository_from(full_name)
    dgst = parse_digest(digest_text) if digest_text else None
    return _best_reference(repo, tag, dgst)


def with_name(name: str) -> Repository:
    """Return a named reference for the given name string."""
    if len(name) > NAME_TOTAL_LENGTH_MAX:
        raise NameTooLongError()
    match = ANCHORED_NAME_REGEXP.match(name)
    if match is None:
        raise ReferenceFormatError()
    return Repository(domain=match.group(1) or "", path=match.group(2))


def with_tag(name: Repository, tag: str) -> TaggedReference:
    """Combine a named reference with a tag."""
    if ANCHORED_TAG_REGEXP.match(tag) is None:
        raise TagFormatError()
    repo_domain, repo_path = split_hostname(name)
    if isinstance(name, CanonicalReference):
        return FullReference(
            domain=repo_domain, path=repo_path, tag=tag, digest=name.digest
        )
    return TaggedReference(domain=repo_domain, path=repo_path, tag=tag)


def with_digest(name: Repository, digest: str) -> CanonicalReference:
    """Combine a named reference with a digest."""
    if ANCHORED_DIGEST_REGEXP.match(str(digest)) is None:
        raise DigestFormatError()
    dgst = Digest(digest)
    repo_domain, repo_path = split_hostname(name)
    if isinstance(name, TaggedReference):
        return FullReference(
            domain=repo_domain, path=repo_path, tag=name.tag, digest=dgst
        )
    return CanonicalReference(domain=repo_domain, path=repo_path, digest=dgst)


def trim_named(ref: Repository) -> Repository:
    """Remove any tag or digest from a named reference."""
    repo_domain, repo_path = split_hostname(ref)
    return Repository(domain=repo_domain, path=repo_path)