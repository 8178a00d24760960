"""Wizard drafts kept in the `draft_entries` table, one row per storage key."""
# app/services/drafts.py
import uuid
from sqlalchemy import delete
from sqlalchemy.orm import Session

from src.app.core.errors import SessionNotFoundError
from src.app.services.submission import store_step
from src.credit.wizard import STORAGE_KEYS, Wizard
from src.db.models import DraftEntry


class SqlDraftStore:
    """`DraftStore` over the database; writes are committed immediately."""

    def __init__(self, db: Session, session_id: str):
        self.db = db
        self.session_id = session_id

    def get(self, key: str) -> str | None:
        entry = self.db.get(DraftEntry, (self.session_id, key))
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with store_step(self.db, "Failed to save draft"):
            entry = self.db.get(DraftEntry, (self.session_id, key))
            if entry:
                entry.value = value
            else:
                self.db.add(DraftEntry(session_id=self.session_id, key=key, value=value))
            self.db.commit()

    def remove(self, key: str) -> None:
        with store_step(self.db, "Failed to remove draft"):
            self.db.execute(
                delete(DraftEntry).where(DraftEntry.session_id == self.session_id, DraftEntry.key == key)
            )
            self.db.commit()


def new_session(db: Session) -> tuple[str, Wizard]:
    session_id = str(uuid.uuid4())
    wizard = Wizard(SqlDraftStore(db, session_id))
    wizard.save()
    return session_id, wizard


def load_session(db: Session, session_id: str) -> Wizard:
    store = SqlDraftStore(db, session_id)
    if store.get(STORAGE_KEYS["SURVEY_STATE"]) is None:
        raise SessionNotFoundError(session_id)
    return Wizard.load(store)
