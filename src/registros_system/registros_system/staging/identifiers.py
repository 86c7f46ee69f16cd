"""Record identifiers.

A staged record is identified either by a client-side temporary token
(never sent to storage) or by the integer MySQL assigned on insert. The two
kinds are separate types so callers branch on the type, not on the text.
"""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import Union

from ..core.constants import TEMP_ID_LENGTH
from ..core.enums import RecordState

_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class TemporaryId:
    token: str

    @property
    def text(self) -> str:
        return self.token

    @property
    def state(self) -> RecordState:
        return RecordState.STAGED

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class AuthoritativeId:
    value: int

    @property
    def text(self) -> str:
        return str(self.value)

    @property
    def state(self) -> RecordState:
        return RecordState.COMMITTED

    def __str__(self) -> str:
        return str(self.value)


Identifier = Union[TemporaryId, AuthoritativeId]


def new_temporary_id() -> TemporaryId:
    token = "".join(secrets.choice(_ALPHABET) for _ in range(TEMP_ID_LENGTH))
    if token.isdigit():
        # An all-digit token would read back as a storage id.
        token = secrets.choice(string.ascii_lowercase) + token[1:]
    return TemporaryId(token)


def parse_identifier(value: object) -> Identifier:
    text = str(value).strip()
    if text.isdigit():
        return AuthoritativeId(int(text))
    if not text:
        raise ValueError("Empty record identifier")
    return TemporaryId(text)
