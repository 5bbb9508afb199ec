from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Run the block in a transaction on `session` and commit when it exits cleanly.
    Inside an already open transaction a SAVEPOINT is used instead, so the
    outer caller still decides when to commit.

        with smart_transaction(db):
            repo.update(product, price=10)
    """
    cm = session.begin_nested() if session.in_transaction() else session.begin()
    with cm:
        yield session
