from datetime import date, datetime
from typing import Literal, Optional

from pydantic import AliasChoices
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from library_portal.exceptions import ValidationError


class BaseModel(PydanticBaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


def validate_model(schema, data, label):
    """
    Validate `data` against a pydantic schema.

    Raises:
        ValidationError: naming every field that is missing or malformed.
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise ValidationError(f"Invalid {label}: {', '.join(fields)}", fields) from e


class Record(BaseModel):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserRecord(Record):
    email: str
    password: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    roll_number: Optional[str] = None
    department: Optional[str] = None
    student_class: Optional[str] = None
    type: str = "user"


class ProfileRecord(Record):
    user_id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    roll_number: Optional[str] = None
    department: Optional[str] = None
    student_class: Optional[str] = None


class UserRoleRecord(Record):
    user_id: str
    role: Literal["admin", "moderator", "user"] = "user"


class ContactMessageRecord(Record):
    name: str
    email: str
    subject: str
    message: str
    is_seen: bool = False


class BookBorrowRecord(Record):
    user_id: str
    book_id: Optional[str] = None
    book_title: str
    isbn: Optional[str] = None
    borrow_date: datetime
    due_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    status: str = "borrowed"


class LibraryCardApplicationRecord(Record):
    user_id: Optional[str] = None
    first_name: str
    last_name: str
    father_name: Optional[str] = None
    dob: Optional[date] = None
    student_class: str
    field: Optional[str] = None
    roll_no: str
    email: str
    phone: str
    address_street: str
    address_city: str
    address_state: str
    address_zip: str
    status: str = "pending"
    card_number: Optional[str] = None
    student_id: Optional[str] = None
    issue_date: Optional[date] = None
    valid_through: Optional[date] = None


class DonationRecord(Record):
    donor_name: Optional[str] = None
    email: Optional[str] = None
    book_title: Optional[str] = None
    author: Optional[str] = None
    quantity: Optional[int] = None
    message: Optional[str] = None
    status: str = "received"


class NoteRecord(Record):
    student_class: str
    subject: str
    title: str
    description: Optional[str] = None
    pdf_path: Optional[str] = None
    status: str = "active"


class RareBookRecord(Record):
    title: str
    description: Optional[str] = None
    category: str = "General"
    pdf_path: Optional[str] = None
    status: str = "active"


class LibraryCardApplicationInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: Optional[str] = None
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    father_name: Optional[str] = None
    dob: Optional[date] = None
    student_class: str = Field(
        min_length=1, validation_alias=AliasChoices("student_class", "class")
    )
    field: Optional[str] = None
    roll_no: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address_street: str = Field(min_length=1)
    address_city: str = Field(min_length=1)
    address_state: str = Field(min_length=1)
    address_zip: str = Field(min_length=1)

    @field_validator("user_id", "father_name", "dob", "field", mode="before")
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
