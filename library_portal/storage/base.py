from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from library_portal import p_models as pmd
from library_portal.identifiers import new_record_id

USERS = "users"
PROFILES = "profiles"
USER_ROLES = "user_roles"
CONTACT_MESSAGES = "contact_messages"
BOOK_BORROWS = "book_borrows"
LIBRARY_CARD_APPLICATIONS = "library_card_applications"
DONATIONS = "donations"
NOTES = "notes"
RARE_BOOKS = "rare_books"

RECORD_SCHEMAS = {
    USERS: pmd.UserRecord,
    PROFILES: pmd.ProfileRecord,
    USER_ROLES: pmd.UserRoleRecord,
    CONTACT_MESSAGES: pmd.ContactMessageRecord,
    BOOK_BORROWS: pmd.BookBorrowRecord,
    LIBRARY_CARD_APPLICATIONS: pmd.LibraryCardApplicationRecord,
    DONATIONS: pmd.DonationRecord,
    NOTES: pmd.NoteRecord,
    RARE_BOOKS: pmd.RareBookRecord,
}
COLLECTIONS = tuple(RECORD_SCHEMAS)

UNIQUE_FIELDS = {
    USERS: ("email",),
    PROFILES: ("user_id",),
    LIBRARY_CARD_APPLICATIONS: ("card_number",),
}

IMMUTABLE_FIELDS = ("id", "created_at")

ACTIVE = "active"
INACTIVE = "inactive"


class Storage(ABC):
    """
    Record store over the nine library collections.

    Records go in and come out as plain dicts with JSON-ready values
    (ISO strings for dates and timestamps). Subclasses implement the generic
    collection operations; the entity helpers below are built only on those,
    so every backend behaves the same way.

    Contract shared by every backend:
        - `create` assigns `id`, `created_at` and `updated_at=None` and
          returns a record that `get` can read back straight away.
        - `update` merges the given fields, stamps `updated_at`, and returns
          None when the id is unknown.
        - `delete` of an unknown id is a no-op.
        - A write either lands completely and durably before returning or
          raises and leaves stored state untouched.
    """

    def init(self) -> None:
        """Prepare the backing store; call once before use."""

    def close(self) -> None:
        pass

    @abstractmethod
    def all(self, collection: str) -> list[dict]:
        pass

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[dict]:
        pass

    @abstractmethod
    def find(self, collection: str, **criteria) -> list[dict]:
        """Records whose fields equal every given criterion, in creation order."""

    @abstractmethod
    def create(self, collection: str, data: dict) -> dict:
        pass

    @abstractmethod
    def update(self, collection: str, record_id: str, changes: dict) -> Optional[dict]:
        pass

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        pass

    def find_one(self, collection: str, **criteria) -> Optional[dict]:
        records = self.find(collection, **criteria)
        return records[0] if records else None

    def new_record(self, collection: str, data: dict):
        values = {k: v for k, v in data.items() if v is not None}
        values.update(id=new_record_id(), created_at=datetime.now(), updated_at=None)
        return pmd.validate_model(RECORD_SCHEMAS[collection], values, f"{collection} record")

    def merged_record(self, collection: str, current: dict, changes: dict):
        values = dict(current)
        values.update({k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS})
        values["updated_at"] = datetime.now()
        return pmd.validate_model(RECORD_SCHEMAS[collection], values, f"{collection} record")

    # Users

    def get_user(self, user_id):
        return self.get(USERS, user_id)

    def get_user_by_email(self, email):
        return self.find_one(USERS, email=email)

    def create_user(self, user):
        return self.create(USERS, user)

    def get_students(self):
        return self.find(USERS, type="student")

    def get_non_students(self):
        return [user for user in self.all(USERS) if user["type"] != "student"]

    # Profiles

    def get_profile(self, user_id):
        return self.find_one(PROFILES, user_id=user_id)

    def upsert_profile(self, user_id, profile):
        """Create the user's profile on first write, merge into it afterwards."""
        existing = self.get_profile(user_id)
        if existing is None:
            return self.create(PROFILES, {**profile, "user_id": user_id})
        changes = {k: v for k, v in profile.items() if k != "user_id"}
        return self.update(PROFILES, existing["id"], changes)

    # Roles

    def get_user_roles(self, user_id):
        return self.find(USER_ROLES, user_id=user_id)

    def create_user_role(self, user_id, role):
        return self.create(USER_ROLES, {"user_id": user_id, "role": role})

    def has_role(self, user_id, role) -> bool:
        return self.find_one(USER_ROLES, user_id=user_id, role=role) is not None

    # Contact messages

    def get_contact_messages(self):
        return self.all(CONTACT_MESSAGES)

    def get_contact_message(self, message_id):
        return self.get(CONTACT_MESSAGES, message_id)

    def create_contact_message(self, message):
        return self.create(CONTACT_MESSAGES, {**message, "is_seen": False})

    def set_contact_message_seen(self, message_id, is_seen):
        return self.update(CONTACT_MESSAGES, message_id, {"is_seen": is_seen})

    def delete_contact_message(self, message_id):
        self.delete(CONTACT_MESSAGES, message_id)

    # Book borrows

    def get_book_borrows(self):
        return self.all(BOOK_BORROWS)

    def get_book_borrow(self, borrow_id):
        return self.get(BOOK_BORROWS, borrow_id)

    def get_book_borrows_by_user(self, user_id):
        return self.find(BOOK_BORROWS, user_id=user_id)

    def create_book_borrow(self, borrow):
        return self.create(BOOK_BORROWS, borrow)

    def update_book_borrow_status(self, borrow_id, status, return_date=None):
        changes = {"status": status}
        if return_date is not None:
            changes["return_date"] = return_date
        return self.update(BOOK_BORROWS, borrow_id, changes)

    # Library card applications

    def get_library_card_applications(self):
        return self.all(LIBRARY_CARD_APPLICATIONS)

    def get_library_card_application(self, application_id):
        return self.get(LIBRARY_CARD_APPLICATIONS, application_id)

    def get_library_card_applications_by_user(self, user_id):
        return self.find(LIBRARY_CARD_APPLICATIONS, user_id=user_id)

    def create_library_card_application(self, application):
        return self.create(LIBRARY_CARD_APPLICATIONS, application)

    def update_library_card_application_status(self, application_id, status):
        return self.update(LIBRARY_CARD_APPLICATIONS, application_id, {"status": status})

    def delete_library_card_application(self, application_id):
        self.delete(LIBRARY_CARD_APPLICATIONS, application_id)

    def get_library_card_by_card_number(self, card_number):
        return self.find_one(LIBRARY_CARD_APPLICATIONS, card_number=card_number)

    # Donations

    def get_donations(self):
        return self.all(DONATIONS)

    def create_donation(self, donation):
        return self.create(DONATIONS, donation)

    def delete_donation(self, donation_id):
        self.delete(DONATIONS, donation_id)

    # Notes

    def get_notes(self):
        return self.all(NOTES)

    def get_active_notes(self):
        return self.find(NOTES, status=ACTIVE)

    def get_notes_by_class_and_subject(self, student_class, subject):
        return self.find(NOTES, student_class=student_class, subject=subject, status=ACTIVE)

    def create_note(self, note):
        return self.create(NOTES, note)

    def update_note(self, note_id, note):
        return self.update(NOTES, note_id, note)

    def toggle_note_status(self, note_id):
        return self._toggle_status(NOTES, note_id)

    def delete_note(self, note_id):
        self.delete(NOTES, note_id)

    # Rare books

    def get_rare_books(self):
        return self.all(RARE_BOOKS)

    def get_active_rare_books(self):
        return self.find(RARE_BOOKS, status=ACTIVE)

    def create_rare_book(self, book):
        return self.create(RARE_BOOKS, book)

    def toggle_rare_book_status(self, book_id):
        return self._toggle_status(RARE_BOOKS, book_id)

    def delete_rare_book(self, book_id):
        self.delete(RARE_BOOKS, book_id)

    def _toggle_status(self, collection, record_id):
        record = self.get(collection, record_id)
        if record is None:
            return None
        status = INACTIVE if record["status"] == ACTIVE else ACTIVE
        return self.update(collection, record_id, {"status": status})
