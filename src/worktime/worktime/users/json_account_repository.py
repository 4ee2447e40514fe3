from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class JsonAccountRepository(AccountRepository):
    """Accounts loaded once from a JSON list of
    {id, email, name, role, password_hash}.

    Demo files may carry a plain `password` instead; it is hashed on load.
    """

    def __init__(self, accounts: Sequence[Account]):
        self._accounts = list(accounts)

    @classmethod
    def from_file(cls, path: str | Path) -> "JsonAccountRepository":
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("could not load accounts from %s: %s", path, e)
            return cls([])

        accounts = []
        for item in raw if isinstance(raw, list) else []:
            try:
                accounts.append(
                    Account(
                        account_id=int(item["id"]),
                        email=str(item["email"]).strip().lower(),
                        name=str(item.get("name") or item["email"]),
                        role=Role(item.get("role", Role.EMPLOYEE.value)),
                        password_hash=_password_hash(item),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("skipping malformed account entry in %s: %s", path, e)
        return cls(accounts)

    def get_by_email(self, email: str) -> Optional[Account]:
        email = (email or "").strip().lower()
        return next((a for a in self._accounts if a.email == email), None)

    def get_by_id(self, role: Role, account_id: int) -> Optional[Account]:
        return next((a for a in self._accounts if a.role == role and a.account_id == int(account_id)), None)

    def list_all(self) -> Sequence[Account]:
        return list(self._accounts)


def _password_hash(item: dict) -> str:
    if item.get("password_hash"):
        return str(item["password_hash"])
    return generate_password_hash(str(item["password"]))
