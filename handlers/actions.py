# handlers/actions.py
from __future__ import annotations

import json
from typing import Literal

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from errors import ParseError, UnknownActionError, ValidationError


class Action(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    action: str


class AuthedAction(Action):
    # absent = refusé par SessionAuthority, pas par la validation
    authkey: str | None = None


class Login(Action):
    action: Literal["login"] = "login"
    uname: str
    password: str = Field(validation_alias=AliasChoices("pass", "password"))


class Register(Action):
    action: Literal["register"] = "register"
    uname: str
    email: str
    password: str = Field(validation_alias=AliasChoices("pass", "password"))


class ListPosts(AuthedAction):
    action: Literal["list"] = "list"


class NewPost(AuthedAction):
    action: Literal["post"] = "post"
    title: str
    description: str = Field(validation_alias=AliasChoices("description", "desc"))
    location: str


class Show(AuthedAction):
    action: Literal["show"] = "show"
    post_id: int = Field(validation_alias=AliasChoices("id", "post_id"))


class Like(AuthedAction):
    action: Literal["like"] = "like"
    post_id: int = Field(validation_alias=AliasChoices("id", "post_id"))


class Unlike(AuthedAction):
    action: Literal["unlike"] = "unlike"
    post_id: int = Field(validation_alias=AliasChoices("id", "post_id"))


# Ensemble fermé ; "myprof" volontairement absent (pas encore implémenté)
ACTIONS: dict[str, type[Action]] = {
    "login": Login,
    "register": Register,
    "list": ListPosts,
    "post": NewPost,
    "show": Show,
    "like": Like,
    "unlike": Unlike,
}


def _field_names(err: pydantic.ValidationError) -> list[str]:
    names: list[str] = []
    for e in err.errors():
        name = str(e["loc"][0]) if e["loc"] else "body"
        if name not in names:
            names.append(name)
    return names


def parse_request(raw: str | bytes) -> Action:
    """JSON brut -> action typée, ou RequestError avec le message client."""
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        raise ParseError()
    # JSON valide mais sans champ action (tableau, nombre, null, "")
    if not isinstance(data, dict) or not data.get("action"):
        raise ValidationError()

    action = data["action"]
    if not isinstance(action, str):
        raise UnknownActionError()

    model = ACTIONS.get(action.strip().lower())
    if model is None:
        raise UnknownActionError()

    try:
        return model.model_validate({**data, "action": model.model_fields["action"].default})
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Malformatted request: missing or invalid " + ", ".join(_field_names(e)) + "."
        )
