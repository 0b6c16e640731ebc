from __future__ import annotations

from spotrate.domain.entities import User
from spotrate.models.users import User as UserRow
from spotrate.repositories.sql_base import SqlRepository


class SqlUserRepository(SqlRepository):
    """Local mirror of identities so review/rating rows can reference them."""

    def ensure(self, user_id: str) -> User:
        with self._op("users.ensure"):
            if self.db.get(UserRow, user_id) is None:
                self.db.add(UserRow(id=user_id))
                self.db.flush()
            return User(id=user_id)
