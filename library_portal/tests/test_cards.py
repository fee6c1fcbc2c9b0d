import logging
import os
import re
import tempfile
import threading
import unittest
from datetime import date, timedelta
from unittest import mock

from faker import Faker

from library_portal.cards.lifecycle import (
    CARD_NUMBER_ATTEMPTS,
    CardApplications,
    base_card_number,
    class_number,
    field_code,
)
from library_portal.exceptions import (
    ConflictError,
    DuplicateApplicationError,
    DuplicateRecordError,
    ValidationError,
)
from library_portal.storage import LIBRARY_CARD_APPLICATIONS, JsonStorage, SqlStorage

fake = Faker()
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")


def application_payload(**overrides):
    payload = {
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "father_name": fake.name(),
        "dob": "2007-09-14",
        "class": "Class 12",
        "field": "Computer Science",
        "roll_no": "5",
        "email": fake.unique.email(),
        "phone": fake.phone_number(),
        "address_street": fake.street_address(),
        "address_city": fake.city(),
        "address_state": fake.state(),
        "address_zip": fake.postcode(),
    }
    payload.update(overrides)
    return payload


class CardNumberTestCase(unittest.TestCase):
    def test_field_codes(self):
        self.assertEqual(field_code("Computer Science"), "CS")
        self.assertEqual(field_code("Commerce"), "COM")
        self.assertEqual(field_code("Humanities"), "HM")
        self.assertEqual(field_code("Pre-Engineering"), "PE")
        self.assertEqual(field_code("Pre-Medical"), "PM")
        self.assertEqual(field_code("Astronomy"), "XX")
        self.assertEqual(field_code(None), "XX")

    def test_class_number(self):
        self.assertEqual(class_number("Class 12"), "12")
        self.assertEqual(class_number("11th Grade 2"), "11")
        self.assertEqual(class_number(" Inter "), "Inter")

    def test_base_card_number(self):
        self.assertEqual(base_card_number("Pre-Medical", "42", "Class 11"), "PM-42-11")
        self.assertEqual(base_card_number(None, "7", "Class 9"), "XX-7-9")


class CardApplicationsContract:
    """Lifecycle behaviour shared by both storage backends."""

    def make_storage(self):
        raise NotImplementedError

    def setUp(self):
        self.storage = self.make_storage()
        self.storage.init()
        self.applications = CardApplications(self.storage)

    def tearDown(self):
        self.storage.close()

    def test_submit_stores_a_pending_application(self):
        payload = application_payload()
        created = self.applications.submit(payload)

        self.assertEqual(created["status"], "pending")
        self.assertEqual(created["card_number"], "CS-5-12")
        self.assertEqual(created["student_class"], "Class 12")
        self.assertEqual(created["email"], payload["email"])
        self.assertEqual(created["dob"], "2007-09-14")
        self.assertIsNone(created["user_id"])
        self.assertRegex(created["student_id"], r"^GCMN-\d{6}$")
        self.assertEqual(self.applications.get(created["id"]), created)

    def test_card_is_valid_for_a_year_from_today(self):
        created = self.applications.submit(application_payload())

        issue_date = date.fromisoformat(created["issue_date"])
        valid_through = date.fromisoformat(created["valid_through"])
        self.assertEqual(issue_date, date.today())
        self.assertEqual(valid_through - issue_date, timedelta(days=365))

    def test_validity_window_is_configurable(self):
        applications = CardApplications(self.storage, validity_days=30)
        created = applications.submit(application_payload())
        self.assertEqual(
            date.fromisoformat(created["valid_through"]) - date.fromisoformat(created["issue_date"]),
            timedelta(days=30),
        )

    def test_colliding_card_numbers_get_a_suffix(self):
        numbers = [self.applications.submit(application_payload())["card_number"] for _ in range(3)]
        self.assertEqual(numbers, ["CS-5-12", "CS-5-12-1", "CS-5-12-2"])

    def test_suffix_search_skips_taken_suffixes(self):
        self.applications.submit(application_payload())
        second = self.applications.submit(application_payload())
        self.applications.delete(second["id"])

        self.assertEqual(self.applications.submit(application_payload())["card_number"], "CS-5-12-1")
        self.assertEqual(self.applications.submit(application_payload())["card_number"], "CS-5-12-2")

    def test_unknown_field_uses_placeholder_code(self):
        created = self.applications.submit(application_payload(field="", roll_no="9", **{"class": "Class 10"}))
        self.assertEqual(created["card_number"], "XX-9-10")
        self.assertIsNone(created["field"])

    def test_class_without_digits(self):
        created = self.applications.submit(application_payload(**{"class": "Inter Part"}))
        self.assertEqual(created["card_number"], "CS-5-Inter Part")

    def test_student_class_key_is_accepted(self):
        payload = application_payload()
        payload["student_class"] = payload.pop("class")
        self.assertEqual(self.applications.submit(payload)["student_class"], "Class 12")

    def test_duplicate_email_is_rejected_case_insensitively(self):
        first = self.applications.submit(application_payload(email="reader@example.com"))

        with self.assertRaises(DuplicateApplicationError) as ctx:
            self.applications.submit(application_payload(email="Reader@Example.COM"))
        self.assertIsInstance(ctx.exception, ConflictError)
        self.assertEqual(self.applications.list_applications(), [first])

    def test_missing_required_field_is_rejected(self):
        payload = application_payload()
        del payload["roll_no"]

        with self.assertRaises(ValidationError) as ctx:
            self.applications.submit(payload)
        self.assertIn("roll_no", ctx.exception.fields)
        self.assertEqual(self.applications.list_applications(), [])

    def test_blank_required_field_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.applications.submit(application_payload(phone="   "))
        self.assertIn("phone", ctx.exception.fields)
        self.assertEqual(self.applications.list_applications(), [])

    def test_transition(self):
        created = self.applications.submit(application_payload())

        approved = self.applications.transition(created["id"], "approved")
        self.assertEqual(approved["status"], "approved")
        self.assertIsNotNone(approved["updated_at"])
        self.assertEqual(approved["card_number"], created["card_number"])

        # nothing restricts the order of statuses
        self.assertEqual(self.applications.transition(created["id"], "pending")["status"], "pending")
        self.assertEqual(self.applications.transition(created["id"], "rejected")["status"], "rejected")

    def test_transition_to_unknown_status_is_rejected(self):
        created = self.applications.submit(application_payload())

        with self.assertRaises(ValidationError) as ctx:
            self.applications.transition(created["id"], "archived")
        self.assertEqual(ctx.exception.fields, ["status"])
        self.assertEqual(self.applications.get(created["id"])["status"], "pending")

    def test_transition_of_unknown_application_returns_none(self):
        self.assertIsNone(self.applications.transition("missing", "approved"))

    def test_lookup_by_card_number_ignores_status(self):
        created = self.applications.submit(application_payload())

        self.assertEqual(self.applications.lookup_by_card_number("CS-5-12"), created)
        self.applications.transition(created["id"], "approved")
        self.assertEqual(self.applications.lookup_by_card_number("CS-5-12")["status"], "approved")
        self.assertIsNone(self.applications.lookup_by_card_number("CS-5-13"))

    def test_list_applications_by_user(self):
        mine = self.applications.submit(application_payload(user_id="user-1"))
        self.applications.submit(application_payload(user_id="user-2"))
        self.applications.submit(application_payload())

        self.assertEqual(self.applications.list_applications(user_id="user-1"), [mine])
        self.assertEqual(len(self.applications.list_applications()), 3)

    def test_delete_is_idempotent(self):
        created = self.applications.submit(application_payload())
        self.applications.delete(created["id"])
        self.applications.delete(created["id"])
        self.assertIsNone(self.applications.get(created["id"]))

    def test_retries_when_card_number_is_taken_during_insert(self):
        create = self.storage.create_library_card_application
        calls = []

        def create_once_taken(application):
            calls.append(application["card_number"])
            if len(calls) == 1:
                raise DuplicateRecordError(LIBRARY_CARD_APPLICATIONS, "card_number")
            return create(application)

        with mock.patch.object(self.storage, "create_library_card_application", side_effect=create_once_taken):
            created = self.applications.submit(application_payload())

        self.assertEqual(len(calls), 2)
        self.assertEqual(created["card_number"], "CS-5-12")

    def test_gives_up_after_repeated_collisions(self):
        with mock.patch.object(
            self.storage,
            "create_library_card_application",
            side_effect=DuplicateRecordError(LIBRARY_CARD_APPLICATIONS, "card_number"),
        ) as create:
            with self.assertRaises(ConflictError) as ctx:
                self.applications.submit(application_payload())

        self.assertNotIsInstance(ctx.exception, DuplicateApplicationError)
        self.assertEqual(create.call_count, CARD_NUMBER_ATTEMPTS)
        self.assertEqual(self.applications.list_applications(), [])


class JsonCardApplicationsTestCase(CardApplicationsContract, unittest.TestCase):
    def make_storage(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        return JsonStorage(os.path.join(tmp.name, "data.json"))

    def run_concurrently(self, payloads):
        results, errors = [], []
        barrier = threading.Barrier(len(payloads))

        def submit(payload):
            barrier.wait()
            try:
                results.append(self.applications.submit(payload))
            except ConflictError as e:
                errors.append(e)

        threads = [threading.Thread(target=submit, args=(payload,)) for payload in payloads]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return results, errors

    def test_concurrent_submissions_with_one_email(self):
        results, errors = self.run_concurrently(
            [application_payload(email="same@example.com") for _ in range(8)]
        )

        self.assertEqual(len(results), 1)
        self.assertEqual(len(errors), 7)
        self.assertTrue(all(isinstance(e, DuplicateApplicationError) for e in errors))
        self.assertEqual(len(self.applications.list_applications()), 1)

    def test_concurrent_submissions_get_distinct_card_numbers(self):
        results, errors = self.run_concurrently([application_payload() for _ in range(8)])

        self.assertEqual(errors, [])
        numbers = {created["card_number"] for created in results}
        self.assertEqual(len(numbers), 8)
        self.assertTrue(all(re.fullmatch(r"CS-5-12(-[1-7])?", n) for n in numbers))


class SqlCardApplicationsTestCase(CardApplicationsContract, unittest.TestCase):
    def make_storage(self):
        return SqlStorage("sqlite:///:memory:")


if __name__ == "__main__":
    unittest.main()
