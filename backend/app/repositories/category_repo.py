from typing import Optional

from sqlalchemy.orm import Session

from app.models.category import Category


def _dialect_insert(dialect_name: str):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


class CategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, category_id: int) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def upsert(self, category_id: int, name: str, owner_id: Optional[int]) -> Category:
        """
        Insert the category or overwrite name/owner_id when the id already
        exists. Uses the dialect's INSERT .. ON CONFLICT so no existence check
        is issued; other backends fall back to Session.merge.
        """
        values = {"id": category_id, "name": name, "owner_id": owner_id}
        insert = _dialect_insert(self.db.get_bind().dialect.name)
        if insert is None:
            self.db.merge(Category(**values))
            self.db.flush()
        else:
            stmt = insert(Category).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[Category.id],
                set_={"name": stmt.excluded.name, "owner_id": stmt.excluded.owner_id},
            )
            self.db.execute(stmt)
        # re-read so a previously loaded instance does not keep stale columns
        return self.db.get(Category, category_id, populate_existing=True)
