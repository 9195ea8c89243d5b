"""
Учётные данные MoabDB: имя пользователя и API‑токен.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ValidationError
from .utils import mask_secret


@dataclass(frozen=True)
class Credentials:
    """Пара `username`/`token`, передаваемая в каждом запросе."""

    username: str
    token: str

    def __post_init__(self) -> None:
        username = (self.username or "").strip()
        token = (self.token or "").strip()
        if not username or not token:
            raise ValidationError("Both username and token are required for credentials")
        object.__setattr__(self, "username", username)
        object.__setattr__(self, "token", token)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, token={mask_secret(self.token)!r})"

    @classmethod
    def from_env(cls) -> Optional["Credentials"]:
        """
        Прочитать `MOABDB_USERNAME`/`MOABDB_TOKEN`.

        Возвращает None, если не задана ни одна переменная (анонимный доступ).
        """
        username = os.getenv("MOABDB_USERNAME", "")
        token = os.getenv("MOABDB_TOKEN", "")
        if not username and not token:
            return None
        return cls(username=username, token=token)
