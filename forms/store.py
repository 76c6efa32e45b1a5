"""
forms/store.py -- SQLAlchemy-backed persistence layer for folders and forms.

Uses SQLAlchemy Core (not ORM) so the dataclasses in forms/models.py remain
the authoritative domain representation. Form field definitions are stored as
a single JSON document column; the rest of each record is flat.

Pattern: Repository + Data Mapper. FormStore is the repository; the _row_to_*
functions are the mappers. Route handlers never touch SQL directly.

Ownership is NOT enforced here. The store returns records with their owner_id
and the route layer calls auth.ownership.ensure_owner() before mutating.
The one exception is folder name uniqueness, which is scoped per owner by
a UNIQUE constraint.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = FormStore()                               # SQLite default
    store = FormStore("postgresql://user:pw@host/db") # PostgreSQL
    folder_id = store.create_folder(Folder(name="Surveys", owner_id=user_id))
    form_id = store.create_form(Form(name="Signup", owner_id=user_id, folder_id=folder_id, fields=[...]))
    store.delete_folder(folder_id)                    # also deletes its forms
    store.close()
"""

import json
from pathlib import Path
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text, UniqueConstraint
from sqlalchemy.engine import Engine

from core.db import create_store_engine, new_id, now_iso
from forms.models import Folder, Form

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'formbot_forms.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_folders = Table(
    "folders",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("owner_id", String(32), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    UniqueConstraint("owner_id", "name", name="uq_folder_owner_name"),
)

_forms = Table(
    "forms",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("fields", Text, nullable=False),  # JSON array of field definitions
    Column("owner_id", String(32), nullable=False, index=True),
    Column("folder_id", String(32), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class FormStore:
    def __init__(self, db_url: str = _DEFAULT_DB_URL, timeout: float = 5.0) -> None:
        self.engine: Engine = create_store_engine(db_url, timeout)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def create_folder(self, folder: Folder) -> str:
        """Insert a folder and return its id.

        Raises sqlalchemy.exc.IntegrityError if the owner already has a
        folder with this name.
        """
        folder_id = new_id()
        with self.engine.connect() as conn:
            conn.execute(
                _folders.insert().values(
                    id=folder_id,
                    name=folder.name,
                    owner_id=folder.owner_id,
                    created_at=now_iso(),
                )
            )
            conn.commit()
        return folder_id

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        with self.engine.connect() as conn:
            row = conn.execute(_folders.select().where(_folders.c.id == folder_id)).fetchone()
        return _row_to_folder(row) if row is not None else None

    def get_folder_by_name(self, owner_id: str, name: str) -> Optional[Folder]:
        with self.engine.connect() as conn:
            row = conn.execute(
                _folders.select().where((_folders.c.owner_id == owner_id) & (_folders.c.name == name))
            ).fetchone()
        return _row_to_folder(row) if row is not None else None

    def list_folders(self, owner_id: str) -> list[Folder]:
        """Return the owner's folders, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _folders.select().where(_folders.c.owner_id == owner_id).order_by(_folders.c.created_at)
            ).fetchall()
        return [_row_to_folder(r) for r in rows]

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder and every form inside it, in one transaction.

        Returns True if the folder existed.
        """
        with self.engine.begin() as conn:
            conn.execute(_forms.delete().where(_forms.c.folder_id == folder_id))
            result = conn.execute(_folders.delete().where(_folders.c.id == folder_id))
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def create_form(self, form: Form) -> Optional[str]:
        """Insert a form and return its id.

        The folder lookup and the insert share one transaction, so a form is
        never written into a folder that was deleted in between. Returns None
        if the folder does not exist.
        """
        form_id = new_id()
        stamp = now_iso()
        with self.engine.begin() as conn:
            folder_row = conn.execute(_folders.select().where(_folders.c.id == form.folder_id)).fetchone()
            if folder_row is None:
                return None
            conn.execute(
                _forms.insert().values(
                    id=form_id,
                    name=form.name,
                    fields=json.dumps(form.fields),
                    owner_id=form.owner_id,
                    folder_id=form.folder_id,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
        return form_id

    def get_form(self, form_id: str) -> Optional[Form]:
        with self.engine.connect() as conn:
            row = conn.execute(_forms.select().where(_forms.c.id == form_id)).fetchone()
        return _row_to_form(row) if row is not None else None

    def list_forms(self, folder_id: str) -> list[Form]:
        """Return the forms in a folder, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _forms.select().where(_forms.c.folder_id == folder_id).order_by(_forms.c.created_at)
            ).fetchall()
        return [_row_to_form(r) for r in rows]

    def delete_form(self, form_id: str) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_forms.delete().where(_forms.c.id == form_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_folder(row) -> Folder:
    return Folder(
        id=row.id,
        name=row.name,
        owner_id=row.owner_id,
        created_at=row.created_at,
    )


def _row_to_form(row) -> Form:
    return Form(
        id=row.id,
        name=row.name,
        fields=json.loads(row.fields) if row.fields else [],
        owner_id=row.owner_id,
        folder_id=row.folder_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
