"""Regular expressions describing the grammar of bundle references.

Grammar::

    reference        := name [ ":" tag ] [ "@" digest ]
    name             := [domain '/'] path-component ['/' path-component]*
    domain           := domain-component ['.' domain-component]* [':' port-number]
    domain-component := /([a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])/
    port-number      := /[0-9]+/
    path-component   := alpha-numeric [separator alpha-numeric]*
    alpha-numeric    := /[a-z0-9]+/
    separator        := /[_.]|__|[-]*/
    tag              := /[\\w][\\w.-]{0,127}/
    digest           := digest-algorithm ":" digest-hex
    identifier       := /[a-f0-9]{64}/
    short-identifier := /[a-f0-9]{6,64}/
"""

import re


def _literal(text: str) -> str:
    return re.escape(text)


def _expression(*parts: str) -> str:
    return "".join(parts)


def _group(*parts: str) -> str:
    return f"(?:{_expression(*parts)})"


def _optional(*parts: str) -> str:
    return _group(*parts) + "?"


def _repeated(*parts: str) -> str:
    return _group(*parts) + "+"


def _capture(*parts: str) -> str:
    return f"({_expression(*parts)})"


def _anchored(*parts: str) -> str:
    return rf"\A{_expression(*parts)}\Z"


_WORD = "A-Za-z0-9_"

_ALPHA_NUMERIC = r"[a-z0-9]+"

# One period, one or two underscores, or one or more dashes. An empty
# separator would only join two alphanumeric runs, which the runs already
# allow, so requiring at least one dash accepts the same names while keeping
# the backtracking matcher from exploring every split of a long run.
_SEPARATOR = r"(?:[._]|__|-+)"

_NAME_COMPONENT = _expression(
    _ALPHA_NUMERIC,
    _optional(_repeated(_SEPARATOR, _ALPHA_NUMERIC)),
)

_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"

_DOMAIN = _expression(
    _DOMAIN_COMPONENT,
    _optional(_repeated(_literal("."), _DOMAIN_COMPONENT)),
    _optional(_literal(":"), r"[0-9]+"),
)

_TAG = rf"[{_WORD}][{_WORD}.-]{{0,127}}"

_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*[:][0-9a-fA-F]{32,}"

_NAME = _expression(
    _optional(_DOMAIN, _literal("/")),
    _NAME_COMPONENT,
    _optional(_repeated(_literal("/"), _NAME_COMPONENT)),
)

_IDENTIFIER = r"([a-f0-9]{64})"
_SHORT_IDENTIFIER = r"([a-f0-9]{6,64})"

DOMAIN_REGEXP = re.compile(_DOMAIN)
"""Domain part of a name: dotted components with an optional port."""

TAG_REGEXP = re.compile(_TAG)
"""A valid tag."""

ANCHORED_TAG_REGEXP = re.compile(_anchored(_TAG))

DIGEST_REGEXP = re.compile(_DIGEST)
"""A valid digest, algorithm and hex value."""

ANCHORED_DIGEST_REGEXP = re.compile(_anchored(_DIGEST))

NAME_REGEXP = re.compile(_NAME)
"""The name part of a reference, with an optional domain."""

ANCHORED_NAME_REGEXP = re.compile(
    _anchored(
        _optional(_capture(_DOMAIN), _literal("/")),
        _capture(_NAME_COMPONENT, _optional(_repeated(_literal("/"), _NAME_COMPONENT))),
    )
)
"""A whole name, capturing the domain and the path."""

REFERENCE_REGEXP = re.compile(
    _anchored(
        _capture(_NAME),
        _optional(_literal(":"), _capture(_TAG)),
        _optional(_literal("@"), _capture(_DIGEST)),
    )
)
"""A whole reference, capturing the name, the tag and the digest."""

IDENTIFIER_REGEXP = re.compile(_IDENTIFIER)
"""A sha256 content identifier without its algorithm."""

SHORT_IDENTIFIER_REGEXP = re.compile(_SHORT_IDENTIFIER)
"""A prefix of a content identifier."""

ANCHORED_IDENTIFIER_REGEXP = re.compile(_anchored(_IDENTIFIER))

ANCHORED_SHORT_IDENTIFIER_REGEXP = re.compile(_anchored(_SHORT_IDENTIFIER))