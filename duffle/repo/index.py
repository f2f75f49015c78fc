"""A local index of bundle repositories, their versions and digests."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import IO, Any, Union

from duffle.repo.versions import Version, VersionError, parse_constraint, parse_version

_GO_ESCAPES = {
    ord("<"): "\\u003c",
    ord(">"): "\\u003e",
    ord("&"): "\\u0026",
    0x2028: "\\u2028",
    0x2029: "\\u2029",
}


class NoBundleName(LookupError):
    """No bundle with the given name is in the index."""

    def __init__(self, message: str = "no bundle name found") -> None:
        super().__init__(message)


class NoBundleVersion(LookupError):
    """No bundle with a matching version is in the index."""

    def __init__(self, message: str = "no bundle with the given version found") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class BundleVersion:
    """One version of a bundle and its digest; ordered by version."""

    version: Version
    digest: str = ""

    def __lt__(self, other: "BundleVersion") -> bool:
        if not isinstance(other, BundleVersion):
            return NotImplemented
        return self.version < other.version


class Index(dict):
    """Maps bundle names to their versions, and each version to a digest."""

    def add(self, name: str, version: str, digest: str) -> None:
        """Add or replace the digest for a name and version."""
        self.setdefault(name, {})[version] = digest

    def delete(self, name: str) -> bool:
        """Remove a bundle; return False if there was none."""
        return self.pop(name, None) is not None or False

    def delete_version(self, name: str, version: str) -> bool:
        """Remove one version of a bundle; return False if it was not found."""
        versions = self.get(name)
        if versions is None or version not in versions:
            return False
        del versions[version]
        return True

    def has(self, name: str, version: str) -> bool:
        """Return True if a bundle of that name matches the version."""
        try:
            self.lookup(name, version)
        except (NoBundleName, NoBundleVersion, VersionError):
            return False
        return True

    def lookup(self, name: str, version: str = "") -> str:
        """Return the digest of the highest version matching the constraint.

        An empty version matches any release.
        """
        versions = self.get_versions(name)
        if not versions:
            raise NoBundleVersion()
        constraint = parse_constraint(version or "*")
        for candidate in sorted(versions, reverse=True):
            if constraint.check(candidate.version):
                return candidate.digest
        raise NoBundleVersion()

    def get_versions(self, name: str) -> list[BundleVersion]:
        """Return every version recorded for a name, raising NoBundleName if absent."""
        if name not in self:
            raise NoBundleName()
        result = []
        for raw, digest in (self[name] or {}).items():
            try:
                parsed = parse_version(raw)
            except VersionError as exc:
                raise ValueError(
                    f"found a version in the index that is not semver compatible: {raw}"
                ) from exc
            result.append(BundleVersion(version=parsed, digest=digest))
        return result

    def write_file(self, dest: Union[str, os.PathLike], mode: int = 0o644) -> None:
        """Write the index as indented JSON; mode applies when the file is created."""
        text = json.dumps(self, indent=4, sort_keys=True, ensure_ascii=False)
        data = text.translate(_GO_ESCAPES).encode("utf-8")
        fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

    def merge(self, src: "Index") -> None:
        """Add every name and version of src that this index does not yet have."""
        for name, versions in list(src.items()):
            for version, digest in list((versions or {}).items()):
                if not self.has(name, version):
                    self.add(name, version, digest)


def _from_data(data: Any) -> Index:
    index = Index()
    if data is None:
        return index
    if not isinstance(data, dict):
        raise ValueError("index must be a JSON object")
    for name, versions in data.items():
        if versions is None:
            index[name] = {}
            continue
        if not isinstance(versions, dict) or not all(
            isinstance(digest, str) for digest in versions.values()
        ):
            raise ValueError(f"index entry {name!r} must map versions to digests")
        index[name] = dict(versions)
    return index


def _decode(text: str) -> Index:
    stripped = text.lstrip(" \t\r\n")
    if not stripped:
        return Index()
    data, _ = json.JSONDecoder().raw_decode(stripped)
    return _from_data(data)


def load_index(path: Union[str, os.PathLike]) -> Index:
    """Load an index from a file, creating the file empty if it does not exist."""
    fd = os.open(path, os.O_RDONLY | os.O_CREAT, 0o644)
    with os.fdopen(fd, "rb") as handle:
        return _decode(handle.read().decode("utf-8"))


def load_index_reader(reader: IO[Any]) -> Index:
    """Load an index from a text or binary file object."""
    return load_index_buffer(reader.read())


def load_index_buffer(data: Union[bytes, str]) -> Index:
    """Load an index from JSON bytes or text."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return _decode(data)