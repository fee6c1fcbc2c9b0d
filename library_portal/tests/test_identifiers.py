import unittest

from library_portal.identifiers import new_record_id, new_student_id


class IdentifiersTestCase(unittest.TestCase):
    def test_record_ids_are_unique_hex(self):
        ids = {new_record_id() for _ in range(1000)}
        self.assertEqual(len(ids), 1000)
        for record_id in ids:
            self.assertRegex(record_id, r"^[0-9a-f]{32}$")

    def test_student_id_format(self):
        for _ in range(100):
            self.assertRegex(new_student_id(), r"^GCMN-\d{6}$")


if __name__ == "__main__":
    unittest.main()
