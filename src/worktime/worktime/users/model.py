from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: a demo login account.

    Note: plain data object, the identity provider of the demo. Real
    authentication is out of scope.
    """

    account_id: int
    email: str
    name: str
    role: Role
    password_hash: str
