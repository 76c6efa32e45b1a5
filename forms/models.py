"""
forms/models.py -- Domain dataclasses for folders and forms.

These are pure data containers with zero logic. Ownership rules live in
auth/ownership.py; persistence lives in forms/store.py.

owner_id on both types is the id of the User who created the record. It is
set once at creation and never changes.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Folder:
    """A named container for a user's forms.

    id is None before the record is written to the database.
    """

    name: str
    owner_id: str
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class Form:
    """A form definition inside a folder.

    fields is the ordered list of field definitions as plain dicts
    ({"type", "label", "value"}); the API layer validates their shape and the
    store persists the list as one JSON document.
    """

    name: str
    owner_id: str
    folder_id: str
    fields: list[dict] = field(default_factory=list)
    id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
