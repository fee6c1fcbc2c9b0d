import logging
import re
import threading
from datetime import date, timedelta
from enum import Enum

from library_portal import p_models as pmd
from library_portal.exceptions import (
    ConflictError,
    DuplicateApplicationError,
    DuplicateRecordError,
    ValidationError,
)
from library_portal.identifiers import new_student_id

logger = logging.getLogger(__name__)

FIELD_CODES = {
    "Computer Science": "CS",
    "Commerce": "COM",
    "Humanities": "HM",
    "Pre-Engineering": "PE",
    "Pre-Medical": "PM",
}
UNKNOWN_FIELD_CODE = "XX"
CARD_NUMBER_ATTEMPTS = 5

_DIGITS = re.compile(r"\d+")


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def field_code(field):
    return FIELD_CODES.get(field or "", UNKNOWN_FIELD_CODE)


def class_number(student_class):
    """First run of digits in the class name ("Class 12" -> "12"), else the name itself."""
    match = _DIGITS.search(student_class)
    return match.group(0) if match else student_class.strip()


def base_card_number(field, roll_no, student_class):
    return f"{field_code(field)}-{roll_no}-{class_number(student_class)}"


def parse_status(status):
    try:
        return ApplicationStatus(status)
    except ValueError:
        valid = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(f"Invalid status {status!r}. Must be one of {valid}", ["status"]) from None


class CardApplications:
    """
    Library card applications from submission to approval or rejection.

    Submissions go through one lock per instance, so the email check, the
    card number search and the insert happen as one step for every request
    served by this process.
    """

    def __init__(self, storage, validity_days=365):
        self.storage = storage
        self.validity_days = validity_days
        self._submit_lock = threading.Lock()

    def submit(self, payload) -> dict:
        """
        Validate an application, give it a card number and store it as pending.

        Raises:
            ValidationError: a required field is missing or malformed.
            DuplicateApplicationError: an application with this email exists.
            ConflictError: no free card number was found after a few attempts.
        """
        application = pmd.validate_model(
            pmd.LibraryCardApplicationInput, payload, "library card application"
        )
        with self._submit_lock:
            if self.email_taken(application.email):
                raise DuplicateApplicationError(
                    "A library card application with this email already exists"
                )

            base = base_card_number(application.field, application.roll_no, application.student_class)
            for _ in range(CARD_NUMBER_ATTEMPTS):
                card_number = self.free_card_number(base)
                issue_date = date.today()
                try:
                    created = self.storage.create_library_card_application(
                        {
                            **application.model_dump(),
                            "status": ApplicationStatus.PENDING.value,
                            "card_number": card_number,
                            "student_id": new_student_id(),
                            "issue_date": issue_date,
                            "valid_through": issue_date + timedelta(days=self.validity_days),
                        }
                    )
                except DuplicateRecordError:
                    logger.warning("Card number %s was taken during submission, retrying", card_number)
                    continue
                logger.info("Library card application %s submitted as %s", created["id"], card_number)
                return created
        raise ConflictError(f"Could not allocate a card number from {base}")

    def email_taken(self, email) -> bool:
        email = email.lower()
        return any(
            existing["email"].lower() == email
            for existing in self.storage.get_library_card_applications()
        )

    def free_card_number(self, base) -> str:
        candidate = base
        suffix = 0
        while self.storage.get_library_card_by_card_number(candidate) is not None:
            suffix += 1
            candidate = f"{base}-{suffix}"
        return candidate

    def transition(self, application_id, status):
        """
        Set an application's status. Any status may follow any other.
        Returns None when the application does not exist.
        """
        status = parse_status(status)
        updated = self.storage.update_library_card_application_status(application_id, status.value)
        if updated is not None:
            logger.info("Library card application %s is now %s", application_id, status.value)
        return updated

    def lookup_by_card_number(self, card_number):
        """
        The application holding `card_number`, whatever its status.
        Callers that log in with a card must check for "approved" themselves.
        """
        return self.storage.get_library_card_by_card_number(card_number)

    def get(self, application_id):
        return self.storage.get_library_card_application(application_id)

    def list_applications(self, user_id=None):
        if user_id is None:
            return self.storage.get_library_card_applications()
        return self.storage.get_library_card_applications_by_user(user_id)

    def delete(self, application_id):
        self.storage.delete_library_card_application(application_id)
