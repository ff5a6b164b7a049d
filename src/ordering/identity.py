"""Authenticated identity passed explicitly into every checkout operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    user_id: str | None = None
    name: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


ANONYMOUS = Identity()
