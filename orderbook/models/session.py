"""Session models consumed from the identity provider."""

from dataclasses import dataclass
from enum import StrEnum


class SessionStatus(StrEnum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Session:
    user_id: str | None
    display_name: str = ""
