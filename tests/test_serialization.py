import json
import unittest

from luckyscratch.models import WinRecord


class WinRecordSerializationTests(unittest.TestCase):
    def setUp(self):
        self.record = WinRecord(
            id="ET-88-AB12C",
            prize_id="minor",
            label="88 Lucky Credit",
            value=88,
            timestamp=1768874400000,
            message="Double luck is yours!",
        )

    def test_to_dict_uses_storage_field_names(self):
        data = self.record.to_dict()
        self.assertEqual(
            set(data),
            {"id", "prizeId", "label", "value", "timestamp", "message", "synced"},
        )
        self.assertEqual(data["prizeId"], "minor")
        self.assertFalse(data["synced"])
        # must be JSON serializable
        json.dumps(data)

    def test_from_dict_accepts_legacy_greeting_key(self):
        data = self.record.to_dict()
        data["aiMessage"] = data.pop("message")
        restored = WinRecord.from_dict(data)
        self.assertEqual(restored, self.record)

    def test_from_dict_defaults_synced(self):
        data = self.record.to_dict()
        del data["synced"]
        self.assertFalse(WinRecord.from_dict(data).synced)

    def test_from_dict_rejects_bad_shapes(self):
        with self.assertRaises(TypeError):
            WinRecord.from_dict(["not", "a", "mapping"])  # type: ignore[arg-type]
        data = self.record.to_dict()
        del data["prizeId"]
        with self.assertRaises(KeyError):
            WinRecord.from_dict(data)
        data = self.record.to_dict()
        data["timestamp"] = "yesterday"
        with self.assertRaises(TypeError):
            WinRecord.from_dict(data)

    def test_from_dict_requires_boolean_synced(self):
        data = self.record.to_dict()
        data["synced"] = "false"
        with self.assertRaises(TypeError):
            WinRecord.from_dict(data)
        data["synced"] = 1
        with self.assertRaises(TypeError):
            WinRecord.from_dict(data)

    def test_as_synced_returns_flagged_copy(self):
        synced = self.record.as_synced()
        self.assertTrue(synced.synced)
        self.assertFalse(self.record.synced)
        self.assertIs(synced.as_synced(), synced)


if __name__ == "__main__":
    unittest.main()
