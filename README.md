# duffle

Building blocks for working with bundle repositories:

- `duffle.reference` parses and validates image-style references such as
  `example.com:8000/library/app:1.0@sha256:...`.
  - `duffle.reference.reference` has `parse`, `with_name`, `with_tag`,
    `with_digest`, `trim_named`, `domain`, `path` and `split_hostname`. It also
    has the reference types `Repository`, `TaggedReference`,
    `CanonicalReference`, `FullReference` and `DigestReference`, and `Field`
    for text encoding.
  - `duffle.reference.normalize` has `parse_normalized_named`, `parse_named`,
    `tag_name_only`, `parse_any_reference` and `parse_any_reference_with_set`.
  - `duffle.reference.helpers` has `is_name_only`, `familiar_name`,
    `familiar_string` and `familiar_match`. `familiar_match` does shell-style
    matching in which `*` and `?` do not match `/`.
  - `duffle.reference.digest` has `Digest`, `parse_digest` and `DigestSet`.
    `DigestSet` looks up a digest by a unique prefix. The algorithms sha256,
    sha384 and sha512 are supported.
  - `duffle.reference.patterns` holds the compiled regular expressions of the
    reference grammar.
- `duffle.repo` holds bundle indexes.
  - `duffle.repo.index.Index` maps bundle names to versions and each version
    to a digest. It can find the digest of the highest version, or of the
    highest version that satisfies a constraint.
  - `duffle.repo.versions` has `parse_version` and `parse_constraint`. Both
    work on semantic versions.
- `duffle.signature.user_id` parses OpenPGP-style user IDs of the form
  `NAME (COMMENT) <EMAIL>`.
- `duffle.crud.filesystem` has the abstract `Store` and `FileSystemStore`. A
  `FileSystemStore` keeps each key as a file `<name>.<extension>` in one
  directory.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

## Examples

### References

```python
from duffle.reference.reference import parse, split_hostname
from duffle.reference.normalize import parse_normalized_named, tag_name_only
from duffle.reference.helpers import familiar_match

ref = parse("example.com:8000/library/app:1.0")
print(ref.name(), ref.tag)          # example.com:8000/library/app 1.0
print(split_hostname(ref))          # ('example.com:8000', 'library/app')

named = parse_normalized_named("library/app")
print(tag_name_only(named))         # library/app:latest
print(familiar_match("library/*", named))  # True
```

Invalid input raises a `ValueError` subclass. The subclasses are
`ReferenceFormatError`, `NameEmptyError`, `NameContainsUppercaseError`,
`NameTooLongError`, `NameNotCanonicalError`, `TagFormatError`,
`DigestFormatError` and the `DigestError` family.

### Digests

```python
from duffle.reference.digest import DigestSet
from duffle.reference.normalize import parse_any_reference_with_set

digests = DigestSet(["sha256:" + "ab" * 32])
print(parse_any_reference_with_set("ababab", digests))  # sha256:abab...
```

### Bundle index

```python
from duffle.repo.index import load_index_buffer

index = load_index_buffer(b'{"example/hello": {"1.0.0": "sha256:aaa", "2.0.0": "sha256:bbb"}}')
print(index.lookup("example/hello", ""))        # sha256:bbb  (highest version)
print(index.lookup("example/hello", "^1.0.0"))  # sha256:aaa
index.add("example/hello", "2.1.0", "sha256:ccc")
index.write_file("index.json", 0o644)
```

Index files are loaded with:

- `load_index(path)`, which creates the file empty if it is missing;
- `load_index_reader(file_object)`;
- `load_index_buffer(bytes_or_str)`.

Looking up a name that is not in the index raises `NoBundleName`. When no
version matches, the lookup raises `NoBundleVersion`.

### User IDs

```python
from duffle.signature.user_id import parse_user_id

uid = parse_user_id("Ahab (Captain) <ahab@example.com>")
print(uid.name, uid.comment, uid.email)
print(str(uid))  # Ahab (Captain) <ahab@example.com>
```

### File system store

```python
from duffle.crud.filesystem import FileSystemStore

store = FileSystemStore("/tmp/claims", "json")
store.store("first", b"{}")
print(store.list())        # ['first']
print(store.read("first")) # b'{}'
store.delete("first")
```

The store creates its directory on first use. Reading a missing key raises
`FileDoesNotExist`.

## What this package does not do

- It does not sign or verify bundles.
- It does not manage OpenPGP keys or key rings. `duffle.signature` only
  parses user IDs.
- It does not fetch indexes from remote repositories.
- It has no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```