import unittest
from datetime import datetime, timezone

from ams_sync.exceptions import UnparseableResponseError
from ams_sync.models import Address, Envelope, Organization
from ams_sync.utils import parse_utc


class TestOrganizationDecoding(unittest.TestCase):
    def test_field_names_are_case_insensitive(self):
        camel = Organization.from_wire({"orgId": 7, "orgName": "Acme", "hasLocations": True, "updatedAt": "2024-02-03T04:05:06Z"})
        pascal = Organization.from_wire({"OrgId": 7, "ORGNAME": "Acme", "HasLocations": True, "UpdatedAt": "2024-02-03T04:05:06Z"})

        self.assertEqual(camel, pascal)
        self.assertEqual(camel.org_id, 7)
        self.assertTrue(camel.has_locations)
        self.assertEqual(camel.updated_at, datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc))

    def test_nested_address_is_decoded_with_the_record(self):
        org = Organization.from_wire({
            "orgId": 1,
            "updatedAt": "2024-02-03T04:05:06Z",
            "mailingAddress": {"AddressId": 9, "address1": "1 Main St", "StateCode": "IL", "countryCode": "US"},
        })

        self.assertEqual(org.mailing_address, Address(address_id=9, address1="1 Main St", state_code="IL", country_code="US"))

    def test_unknown_fields_are_ignored(self):
        org = Organization.from_wire({"updatedAt": "2024-02-03T04:05:06Z", "somethingNew": 1})
        self.assertIsNone(org.org_id)
        self.assertIsNone(org.mailing_address)

    def test_missing_updated_at_is_an_error(self):
        with self.assertRaises(ValueError):
            Organization.from_wire({"orgId": 1})

    def test_to_dict_is_json_ready(self):
        org = Organization.from_wire({"orgId": 1, "updatedAt": "2024-02-03T04:05:06Z", "mailingAddress": {"city": "Springfield"}})
        d = org.to_dict()

        self.assertEqual(d["updated_at"], "2024-02-03T04:05:06Z")
        self.assertEqual(d["mailing_address"]["city"], "Springfield")


class TestEnvelope(unittest.TestCase):
    def test_decode_page(self):
        env = Envelope.decode(
            {"@odata.count": 42, "value": [{"orgId": 1, "updatedAt": "2024-01-01T00:00:00Z"}]},
            Organization.from_wire,
        )
        self.assertEqual(env.count, 42)
        self.assertEqual(len(env.value), 1)

    def test_count_is_optional(self):
        env = Envelope.decode({"value": []}, Organization.from_wire)
        self.assertIsNone(env.count)
        self.assertEqual(env.value, [])

    def test_bad_shapes_are_unparseable(self):
        bad_payloads = [
            [],
            {"value": None},
            {"value": {"orgId": 1}},
            {"value": ["not an object"]},
            {"value": [{"orgId": 1}]},
            {"value": [{"updatedAt": "yesterday"}]},
            {"@odata.count": "many", "value": []},
        ]
        for payload in bad_payloads:
            with self.assertRaises(UnparseableResponseError, msg=repr(payload)):
                Envelope.decode(payload, Organization.from_wire)


class TestTimestamps(unittest.TestCase):
    def test_seven_fraction_digits(self):
        self.assertEqual(
            parse_utc("2024-01-02T03:04:05.1234567Z"),
            datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc),
        )

    def test_short_fractions_are_padded(self):
        cases = {
            "2024-01-02T03:04:05.1Z": 100000,
            "2024-01-02T03:04:05.12Z": 120000,
            "2024-01-02T03:04:05.12345Z": 123450,
            "2024-01-02T03:04:05.12+02:00": 120000,
        }
        for raw, micros in cases.items():
            self.assertEqual(parse_utc(raw).microsecond, micros, raw)

    def test_trimmed_fraction_decodes_in_a_page(self):
        env = Envelope.decode({"value": [{"orgId": 1, "updatedAt": "2024-01-02T03:04:05.12Z"}]}, Organization.from_wire)
        self.assertEqual(env.value[0].updated_at, datetime(2024, 1, 2, 3, 4, 5, 120000, tzinfo=timezone.utc))

    def test_naive_wire_value_is_utc(self):
        self.assertEqual(parse_utc("2024-01-02T03:04:05"), datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    def test_offset_is_converted(self):
        self.assertEqual(parse_utc("2024-01-02T05:04:05+02:00"), datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))


if __name__ == "__main__":
    unittest.main()
