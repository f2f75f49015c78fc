import pytest

from duffle.signature.user_id import UserID, UserIDError, parse_user_id


@pytest.mark.parametrize(
    "text, expected",
    [
        (
            "NAME (COMMENT) <name@example.com>",
            UserID(name="NAME", comment="COMMENT", email="name@example.com"),
        ),
        ("NAME <name@example.com>", UserID(name="NAME", email="name@example.com")),
        ("name@example.com", UserID(name="name@example.com", email="name@example.com")),
        (
            "This is a long name (this is a long comment) <long@example.com>",
            UserID(
                name="This is a long name",
                comment="this is a long comment",
                email="long@example.com",
            ),
        ),
        ("me () <me@example.com>", UserID(name="me", comment="", email="me@example.com")),
        ("(foo) <email@example.com>", UserID(name="(foo)", email="email@example.com")),
    ],
)
def test_parse_user_id(text, expected):
    assert parse_user_id(text) == expected


@pytest.mark.parametrize(
    "text",
    ["<name@example.com>", "me () me@example.com", "", "bad\x01name <a@example.com>"],
)
def test_parse_user_id_fails(text):
    with pytest.raises(UserIDError):
        parse_user_id(text)


def test_missing_email_message():
    with pytest.raises(UserIDError, match="email is required"):
        parse_user_id("just a name")


def test_user_id_string():
    user = UserID(name="Ahab", comment="Captain", email="ahab@example.com")
    assert str(user) == "Ahab (Captain) <ahab@example.com>"

    user = UserID(name="Captain Ahab", email="[email]")
    assert str(user) == "Captain Ahab <[email]>"


def test_round_trip():
    user = UserID(name="Ahab", comment="Captain", email="ahab@example.com")
    assert parse_user_id(str(user)) == user