from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass

    def __str__(self):
        return self.__repr__()


class RecordMixin:
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class User(RecordMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    roll_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    student_class: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    type: Mapped[str] = mapped_column(
        String(20), default="user", nullable=False, server_default="user"
    )

    def __repr__(self):
        return self.email


class Profile(RecordMixin, Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    roll_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    student_class: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    def __repr__(self):
        return self.full_name or self.user_id


class UserRole(RecordMixin, Base):
    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default="user", nullable=False, server_default="user"
    )

    def __repr__(self):
        return f"{self.user_id}:{self.role}"


class ContactMessage(RecordMixin, Base):
    __tablename__ = "contact_messages"

    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    subject: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(String, nullable=False)
    is_seen: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default="0"
    )

    def __repr__(self):
        return self.subject


class BookBorrow(RecordMixin, Base):
    __tablename__ = "book_borrows"

    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    book_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    book_title: Mapped[str] = mapped_column(String, nullable=False)
    isbn: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    borrow_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    return_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default="borrowed", nullable=False, server_default="borrowed"
    )

    def __repr__(self):
        return self.book_title


class LibraryCardApplication(RecordMixin, Base):
    __tablename__ = "library_card_applications"

    user_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    father_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    dob: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    student_class: Mapped[str] = mapped_column(String, nullable=False)
    field: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    roll_no: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    address_street: Mapped[str] = mapped_column(String, nullable=False)
    address_city: Mapped[str] = mapped_column(String, nullable=False)
    address_state: Mapped[str] = mapped_column(String, nullable=False)
    address_zip: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="pending", nullable=False, server_default="pending"
    )
    card_number: Mapped[Optional[str]] = mapped_column(String, unique=True, nullable=True)
    student_id: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    valid_through: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    def __repr__(self):
        return self.card_number or f"{self.first_name} {self.last_name}"


class Donation(RecordMixin, Base):
    __tablename__ = "donations"

    donor_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    book_title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    author: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    message: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default="received", nullable=False, server_default="received"
    )

    def __repr__(self):
        return self.book_title or self.id


class Note(RecordMixin, Base):
    __tablename__ = "notes"

    student_class: Mapped[str] = mapped_column(String, nullable=False)
    subject: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    pdf_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default="active", nullable=False, server_default="active"
    )

    def __repr__(self):
        return self.title


class RareBook(RecordMixin, Base):
    __tablename__ = "rare_books"

    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    category: Mapped[str] = mapped_column(
        String, default="General", nullable=False, server_default="General"
    )
    pdf_path: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default="active", nullable=False, server_default="active"
    )

    def __repr__(self):
        return self.title
