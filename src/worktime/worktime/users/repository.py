from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Read-only source of demo accounts."""

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_id(self, role: Role, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Account]:
        raise NotImplementedError
