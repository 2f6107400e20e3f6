from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from email_validator import EmailNotValidError, validate_email
from typing import List, Optional
from datetime import date, datetime

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class Credentials(BaseModel):
    """Schema for login and sign-up requests"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        try:
            result = validate_email(value.strip(), check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("value_error", "Email must be a valid email address.") from None
        return result.normalized.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "value_error",
                "Password must be at least {min_length} characters long.",
                {"min_length": MIN_PASSWORD_LENGTH},
            )
        # bcrypt only looks at the first 72 bytes
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise PydanticCustomError(
                "value_error",
                "Password must be at most {max_bytes} bytes long.",
                {"max_bytes": MAX_PASSWORD_BYTES},
            )
        return value


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str


class ItemCreate(CamelModel):
    """Checklist item as sent by the client on task creation"""
    id: Optional[str] = Field(None, min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=500)
    is_completed: bool = False
    scheduled_date: Optional[date] = None
    note: Optional[str] = Field(None, max_length=1000)


class TaskCreate(CamelModel):
    """Schema for creating a new task"""
    title: str = Field(..., min_length=1, max_length=200)
    items: List[ItemCreate] = Field(..., min_length=1)


class ItemPatch(CamelModel):
    """
    Schema for patching one checklist item of a task

    Only fields present in the request body are applied; an explicit null
    clears scheduledDate or note.
    """
    item_id: str = Field(..., min_length=1)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1, max_length=500)
    is_completed: Optional[bool] = None
    scheduled_date: Optional[date] = None
    note: Optional[str] = Field(None, max_length=1000)

    def changes(self) -> dict:
        """Fields explicitly set by the caller, without the item id"""
        return self.model_dump(exclude_unset=True, exclude={"item_id"})


class ItemRead(CamelModel):
    id: str
    content: str
    is_completed: bool
    scheduled_date: Optional[date]
    note: Optional[str]


class TaskRead(CamelModel):
    id: str
    title: str
    items: List[ItemRead]
    created_at: datetime
    updated_at: datetime


class ProgressRead(CamelModel):
    completed: int
    pending: int
    percentage: int
