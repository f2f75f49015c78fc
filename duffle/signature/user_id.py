"""OpenPGP user IDs of the form ``NAME (COMMENT) <EMAIL>``."""

from __future__ import annotations

import re
from dataclasses import dataclass

_PRINT = r"[ -~]"
_SPACE = r"[\t\n\f\r ]"
_EMAIL = r"[a-zA-Z0-9.+\-_]+@[a-zA-Z0-9.+\-_]+"

# A mandatory name, an optional "(comment)", and an optional "<email>".
_USER_ID = re.compile(
    rf"\A({_PRINT}+?)(?:{_SPACE}*?\(({_PRINT}*?)\))?(?:{_SPACE}+<({_EMAIL})>)?\Z"
)
_EMAILISH = re.compile(rf"\A{_EMAIL}\Z")


class UserIDError(ValueError):
    """A user ID string could not be parsed."""


@dataclass(frozen=True)
class UserID:
    """A user identity with a name, an optional comment and an e-mail address."""

    name: str = ""
    comment: str = ""
    email: str = ""

    def __str__(self) -> str:
        comment = f" ({self.comment})" if self.comment else ""
        return f"{self.name}{comment} <{self.email}>"


def parse_user_id(text: str) -> UserID:
    """Parse ``NAME (COMMENT) <EMAIL>``.

    The comment may be left out. If the e-mail is left out, the name is used
    as the e-mail when it looks like an address; otherwise an error is raised.
    """
    match = _USER_ID.match(text)
    if match is None:
        raise UserIDError("invalid ID format")
    raw_name, raw_comment, raw_email = match.groups(default="")
    if not raw_name:
        raise UserIDError("name field is required")
    name = raw_name.strip()
    comment = raw_comment.strip()
    if raw_email:
        email = raw_email.strip()
    else:
        if not _EMAILISH.match(name):
            raise UserIDError("email is required")
        email = name
    return UserID(name=name, comment=comment, email=email)