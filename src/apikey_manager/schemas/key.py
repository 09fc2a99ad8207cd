"""Pydantic schemas for key records.

Learn: Pydantic v2 models validate request/response data. Separate
"Create"/"Update" schemas (input) from the "Read" schema (output).

Unknown fields are dropped on input (extra="ignore"), which is how a
client-supplied owner_id or user_id silently disappears: the owner is
always the verified caller.

favorite is a StrictBool and order a strict number. In lax mode
pydantic would turn "yes" into True and "5" into 5.0; the API only
accepts real JSON booleans and numbers.

Key ids may not contain "/": they appear as a single path segment in
PUT/DELETE /api/keys/{id}.
"""

from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

# Fields a client may change after creation
UPDATABLE_FIELDS = ("name", "notes", "favorite", "order")
NULLABLE_UPDATE_FIELDS = ("notes", "order")

# A JSON number; strings and booleans are not coerced
Number = Union[StrictInt, StrictFloat]


class KeyCreate(BaseModel):
    id: StrictStr = Field(..., min_length=1, max_length=255, pattern=r"^[^/]+$")
    name: StrictStr = Field(..., max_length=255)
    value: StrictStr
    type: StrictStr = Field(..., max_length=100)
    notes: Optional[StrictStr] = None
    favorite: StrictBool = False
    order: Optional[Number] = None
    status: Optional[StrictStr] = Field(None, max_length=100)
    status_message: Optional[StrictStr] = None
    created_at: Optional[StrictStr] = Field(None, max_length=64)

    model_config = ConfigDict(extra="ignore")


class KeyUpdate(BaseModel):
    """Partial update. Only fields present in the body are applied."""

    name: Optional[StrictStr] = Field(None, max_length=255)
    notes: Optional[StrictStr] = None
    favorite: Optional[StrictBool] = None
    order: Optional[Number] = None

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def reject_null_for_required_fields(self):
        for field in self.model_fields_set - set(NULLABLE_UPDATE_FIELDS):
            if getattr(self, field) is None:
                raise ValueError(f"'{field}' cannot be null")
        return self

    def changes(self) -> dict:
        """The recognized fields the client actually sent."""
        return self.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)


class KeyRead(BaseModel):
    id: str
    owner_id: str
    name: str
    value: str
    type: str
    notes: Optional[str] = None
    favorite: bool = False
    order: Optional[float] = None
    status: Optional[str] = None
    status_message: Optional[str] = None
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
