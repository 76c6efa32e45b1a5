"""
API request and response models for FormBot REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
forms/models.py, which own the internal domain representation. Route handlers
map between the two.

JSON keys are camelCase (the FormBot UI sends oldPassword, folderId, ...).
_ApiModel generates the aliases; populate_by_name lets Python code build
models with snake_case field names. FastAPI serializes responses by alias.
"""

from typing import Annotated, Optional

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from auth.passwords import MAX_PASSWORD_BYTES
from forms.models import Folder, Form

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Same rule the login page applies client-side.
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

_MIN_PASSWORD_LENGTH = 8


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    """bcrypt refuses passwords over 72 bytes. Reject them here as a 400."""
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


# Passwords are taken exactly as typed. _ApiModel strips other strings.
_Secret = Annotated[str, StringConstraints(strip_whitespace=False)]

# Applies the bcrypt byte limit wherever a new or current password is accepted.
_Password = Annotated[_Secret, AfterValidator(_check_password_bytes)]


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class _FrozenApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response.

    message is the human-readable text the UI shows; code is stable and
    machine-readable. detail is only set for request validation failures.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class SignupRequest(_ApiModel):
    """Request body for POST /api/v1/user/signup."""

    username: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    password: _Password = Field(min_length=_MIN_PASSWORD_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(_ApiModel):
    """Request body for POST /api/v1/user/login.

    No length rules on password beyond presence -- login must never reveal
    the signup policy, it just reports a mismatch.
    """

    email: str = Field(min_length=1, max_length=320)
    password: _Secret = Field(min_length=1, max_length=1024)


class LoginResponse(_FrozenApiModel):
    token: str
    username: str
    expires_in: int


class UserUpdateRequest(_ApiModel):
    """Request body for POST /api/v1/user/update. Every field is optional.

    Changing the password needs both oldPassword and newPassword; the route
    handler enforces that pairing so it can answer with the exact message.
    """

    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    old_password: Optional[_Password] = Field(default=None, min_length=1)
    new_password: Optional[_Password] = Field(default=None, min_length=_MIN_PASSWORD_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value is not None else None


class MeResponse(_FrozenApiModel):
    id: str
    username: str
    email: str
    created_at: str


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


class FolderCreate(_ApiModel):
    """Request body for POST /api/v1/folder (also /folders).

    The UI sends the name as foldername; name is accepted too.
    """

    name: str = Field(min_length=1, max_length=255, validation_alias=AliasChoices("name", "foldername"))


class FolderResponse(_FrozenApiModel):
    id: str
    name: str
    owner_id: str
    created_at: str

    @classmethod
    def from_folder(cls, folder: Folder) -> "FolderResponse":
        return cls(id=folder.id, name=folder.name, owner_id=folder.owner_id, created_at=folder.created_at)


class FolderEnvelope(_FrozenApiModel):
    folder: FolderResponse


class FolderCreatedResponse(_FrozenApiModel):
    message: str
    folder: FolderResponse


class FolderListResponse(_FrozenApiModel):
    folders: list[FolderResponse]


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------


class FormField(_ApiModel):
    """One field definition.

    type is the builder's own kind name and is stored as given. value holds
    bubble content or a button caption; plain inputs leave it empty.
    """

    type: str = Field(min_length=1, max_length=64)
    label: str = Field(min_length=1, max_length=255)
    value: Optional[str] = Field(default=None, max_length=2000)


class FormCreate(_ApiModel):
    """Request body for POST /api/v1/forms. The name may arrive as formname."""

    name: str = Field(min_length=1, max_length=255, validation_alias=AliasChoices("name", "formname"))
    fields: list[FormField] = Field(min_length=1, max_length=200)
    folder_id: str = Field(min_length=1, max_length=64)


class FormResponse(_FrozenApiModel):
    id: str
    name: str
    fields: list[FormField]
    owner_id: str
    folder_id: str
    created_at: str
    updated_at: str

    @classmethod
    def from_form(cls, form: Form) -> "FormResponse":
        return cls(
            id=form.id,
            name=form.name,
            fields=[FormField.model_validate(f) for f in form.fields],
            owner_id=form.owner_id,
            folder_id=form.folder_id,
            created_at=form.created_at,
            updated_at=form.updated_at,
        )


class FormEnvelope(_FrozenApiModel):
    form: FormResponse


class FormCreatedResponse(_FrozenApiModel):
    message: str
    form: FormResponse


class FormListResponse(_FrozenApiModel):
    forms: list[FormResponse]
