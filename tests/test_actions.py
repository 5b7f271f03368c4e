import json

import pytest

from errors import ParseError, UnknownActionError, ValidationError
from handlers.actions import Like, Login, NewPost, Show, parse_request


@pytest.mark.parametrize("raw", ["{not json", "", b"\xff\xfe"])
def test_malformed_body(raw):
    with pytest.raises(ParseError) as exc:
        parse_request(raw)
    assert exc.value.message == "Malformatted request."


@pytest.mark.parametrize("raw", [
    '{}', '{"action": ""}', '{"action": null}', "[1, 2]", "42", '"hello"', "null",
])
def test_missing_action_keyword(raw):
    with pytest.raises(ValidationError) as exc:
        parse_request(raw)
    assert exc.value.message == "Malformatted request: no action keyword."


@pytest.mark.parametrize("action", ["myprof", "delete", "LOGOUT", "   ", 3])
def test_unrecognized_action(action):
    with pytest.raises(UnknownActionError) as exc:
        parse_request(json.dumps({"action": action}))
    assert exc.value.message == "Unrecognized action keyword."


def test_action_is_trimmed_and_case_folded():
    req = parse_request('{"action": "  LoGiN ", "uname": "a", "pass": "b"}')
    assert isinstance(req, Login)
    assert req.action == "login"
    assert req.password == "b"


def test_missing_required_field_is_rejected_before_any_query():
    with pytest.raises(ValidationError) as exc:
        parse_request('{"action": "login", "pass": "b"}')
    assert exc.value.message == "Malformatted request: missing or invalid uname."


def test_post_accepts_desc_alias():
    req = parse_request(
        '{"action": "post", "authkey": "k", "title": "t", "desc": "d", "location": "l"}'
    )
    assert isinstance(req, NewPost)
    assert req.description == "d"


def test_id_is_coerced_and_authkey_optional():
    req = parse_request('{"action": "show", "id": "12"}')
    assert isinstance(req, Show)
    assert req.post_id == 12
    assert req.authkey is None


def test_non_numeric_id_is_invalid():
    with pytest.raises(ValidationError):
        parse_request('{"action": "like", "authkey": "k", "id": "abc"}')
    assert isinstance(parse_request('{"action": "like", "authkey": "k", "id": 3}'), Like)
