from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def _insert(self, model):
        """Dialect-specific INSERT supporting ON CONFLICT (PostgreSQL or SQLite)."""
        dialect = self.db.get_bind().dialect.name
        if dialect == 'postgresql':
            return postgresql.insert(model)
        if dialect == 'sqlite':
            return sqlite.insert(model)
        raise NotImplementedError(f"Upsert not supported for dialect: {dialect}")
