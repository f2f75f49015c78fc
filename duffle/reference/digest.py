"""Content digests of the form ``algorithm:hex`` and sets of them."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

_HEX_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}
_ENCODED = re.compile(r"[a-f0-9]+")
_DIGEST_FORMAT = re.compile(r"[a-z0-9]+(?:[.+_-][a-z0-9]+)*:[a-zA-Z0-9=_-]+")


class DigestError(ValueError):
    """Base class for digest errors."""


class InvalidDigestFormat(DigestError):
    """The text is not a well-formed digest."""

    def __init__(self, message: str = "invalid checksum digest format") -> None:
        super().__init__(message)


class InvalidDigestLength(DigestError):
    """The hex part has the wrong length for its algorithm."""

    def __init__(self, message: str = "invalid checksum digest length") -> None:
        super().__init__(message)


class UnsupportedDigest(DigestError):
    """The digest names an algorithm that is not supported."""

    def __init__(self, message: str = "unsupported digest algorithm") -> None:
        super().__init__(message)


class DigestNotFound(DigestError, LookupError):
    """No digest in a set matches the given value."""

    def __init__(self, message: str = "digest not found") -> None:
        super().__init__(message)


class AmbiguousDigest(DigestError, LookupError):
    """More than one digest in a set matches the given value."""

    def __init__(self, message: str = "ambiguous digest string") -> None:
        super().__init__(message)


class Digest(str):
    """A digest string such as ``sha256:<hex>``; not validated on construction."""

    __slots__ = ()

    def _split(self) -> tuple[str, str]:
        index = self.find(":")
        if index < 0:
            raise InvalidDigestFormat()
        return self[:index], self[index + 1 :]

    def algorithm(self) -> str:
        """Return the algorithm part."""
        return self._split()[0]

    def hex(self) -> str:
        """Return the encoded part."""
        return self._split()[1]


def _validate(text: str) -> None:
    index = text.find(":")
    if index <= 0 or index + 1 == len(text):
        raise InvalidDigestFormat()
    algorithm, encoded = text[:index], text[index + 1 :]
    length = _HEX_LENGTHS.get(algorithm)
    if length is None:
        if not _DIGEST_FORMAT.fullmatch(text):
            raise InvalidDigestFormat()
        raise UnsupportedDigest()
    if len(encoded) != length:
        raise InvalidDigestLength()
    if not _ENCODED.fullmatch(encoded):
        raise InvalidDigestFormat()


def parse_digest(text: str) -> Digest:
    """Parse and validate a digest, raising a DigestError if it is invalid."""
    _validate(text)
    return Digest(text)


class DigestSet:
    """A set of digests that can be looked up by a unique prefix."""

    def __init__(self, digests: Iterable[str] = ()) -> None:
        self._entries: dict[str, Digest] = {}
        for digest in digests:
            self.add(digest)

    def add(self, digest: str) -> None:
        """Validate and add a digest; adding one twice has no effect."""
        parsed = parse_digest(str(digest))
        self._entries[parsed] = parsed

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, digest: object) -> bool:
        return digest in self._entries

    def __iter__(self) -> Iterator[Digest]:
        return iter(sorted(self._entries.values()))

    def lookup(self, short: str) -> Digest:
        """Find the one digest matching a full digest, a hex prefix or ``alg:prefix``."""
        if not self._entries:
            raise DigestNotFound()
        try:
            parsed = parse_digest(short)
            algorithm, encoded = parsed.algorithm(), parsed.hex()
        except InvalidDigestFormat:
            algorithm, encoded = "", short
        except DigestError:
            algorithm, encoded = short.split(":", 1)

        candidates = [
            digest
            for digest in self
            if digest.hex().startswith(encoded)
            and (not algorithm or digest.algorithm() == algorithm)
        ]
        for digest in candidates:
            if digest.hex() == encoded:
                return digest
        if not candidates:
            raise DigestNotFound()
        if len(candidates) > 1:
            raise AmbiguousDigest()
        return candidates[0]