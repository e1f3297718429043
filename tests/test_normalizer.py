"""Tests for feed validation and re-serialization."""

import copy
import unittest
import sys
from pathlib import Path

# Add src to path so we can import viarailmap
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from viarailmap.exceptions import FeedValidationError
from viarailmap.models import IntermediateStationTime, TerminalStationTime, ViaRailData
from viarailmap.normalizer import normalize_feed, normalize_train, to_payload

ORIGIN = {
    "station": "Montréal",
    "code": "MTRL",
    "estimated": "2025-01-15T09:55:00-05:00",
    "scheduled": "2025-01-15T09:55:00-05:00",
    "eta": "",
    "arrival": {"scheduled": "2025-01-15T09:55:00-05:00", "estimated": "2025-01-15T09:55:00-05:00"},
    "departure": {"scheduled": "2025-01-15T10:00:00-05:00", "estimated": "2025-01-15T10:03:00-05:00"},
}

MIDDLE = {
    "station": "Kingston",
    "code": "KGON",
    "estimated": "2025-01-15T12:20:00-05:00",
    "scheduled": "2025-01-15T12:15:00-05:00",
    "eta": "5 min",
    "departure": {"scheduled": "2025-01-15T12:17:00-05:00", "estimated": None},
    "diff": "late",
    "diffMin": 5,
}

DESTINATION = {
    "station": "Toronto",
    "code": "TRTO",
    "estimated": "2025-01-15T15:10:00-05:00",
    "scheduled": "2025-01-15T15:00:00-05:00",
    "eta": "",
    "arrival": {"scheduled": "2025-01-15T15:00:00-05:00"},
}

TRAIN_60 = {
    "departed": True,
    "arrived": False,
    "from": "Montréal",
    "to": "Toronto",
    "instance": "2025-01-15",
    "times": [ORIGIN, MIDDLE, DESTINATION],
    "lat": 44.23,
    "lng": -76.48,
    "speed": 120,
    "direction": 245.5,
    "poll": "2025-01-15T12:00:00-05:00",
    "pollMin": 1,
    "alerts": [
        {
            "header": {"en": "Delay", "fr": "Retard"},
            "description": {"en": "Freight traffic", "fr": "Trafic marchandises"},
            "url": {"en": "https://example.com/en", "fr": "https://example.com/fr"},
        }
    ],
}

TRAIN_61 = {
    "departed": False,
    "arrived": False,
    "from": "Toronto",
    "to": "Montréal",
    "instance": "2025-01-15",
    "times": [copy.deepcopy(DESTINATION)],
}


def make_feed():
    return {"60": copy.deepcopy(TRAIN_60), "61": copy.deepcopy(TRAIN_61)}


class TestNormalizeFeed(unittest.TestCase):
    """Test validation of the raw feed."""

    def test_valid_feed(self):
        data = normalize_feed(make_feed())

        self.assertIsInstance(data, ViaRailData)
        self.assertEqual(len(data), 2)
        self.assertIn("60", data)

        train = data["60"]
        self.assertEqual(train.from_, "Montréal")
        self.assertEqual(train.to, "Toronto")
        self.assertEqual(train.alerts[0].header.fr, "Retard")
        self.assertEqual(train.times[1].diff_min, 5)

    def test_station_variants(self):
        times = normalize_feed(make_feed())["60"].times

        self.assertIsInstance(times[0], TerminalStationTime)
        self.assertIsInstance(times[1], IntermediateStationTime)
        self.assertIsInstance(times[2], TerminalStationTime)

    def test_arrival_and_departure_is_terminal(self):
        origin = normalize_feed(make_feed())["60"].times[0]
        self.assertIsInstance(origin, TerminalStationTime)
        self.assertEqual(origin.departure.estimated, "2025-01-15T10:03:00-05:00")

    def test_terminal_without_departure(self):
        destination = normalize_feed(make_feed())["60"].times[2]
        self.assertIsInstance(destination, TerminalStationTime)
        self.assertIsNone(destination.departure)
        self.assertIsNone(destination.arrival.estimated)

    def test_missing_from_fails_whole_batch(self):
        feed = make_feed()
        del feed["61"]["from"]

        with self.assertRaises(FeedValidationError) as ctx:
            normalize_feed(feed)

        self.assertTrue(ctx.exception.path.endswith("61.from"))
        self.assertEqual(len(ctx.exception.errors), 1)

    def test_station_matching_neither_variant(self):
        feed = make_feed()
        del feed["60"]["times"][1]["departure"]

        with self.assertRaises(FeedValidationError) as ctx:
            normalize_feed(feed)

        self.assertTrue(ctx.exception.path.endswith("60.times.1.departure"))

    def test_wrong_primitive_type(self):
        feed = make_feed()
        feed["60"]["departed"] = "true"

        with self.assertRaises(FeedValidationError) as ctx:
            normalize_feed(feed)

        self.assertTrue(ctx.exception.path.endswith("60.departed"))

    def test_numeric_instance_rejected(self):
        feed = make_feed()
        feed["61"]["instance"] = 20250115

        with self.assertRaises(FeedValidationError):
            normalize_feed(feed)

    def test_not_a_mapping(self):
        with self.assertRaises(FeedValidationError):
            normalize_feed([TRAIN_60])

    def test_validation_error_is_value_error(self):
        with self.assertRaises(ValueError):
            normalize_feed({"60": {}})

    def test_empty_feed(self):
        data = normalize_feed({})
        self.assertEqual(len(data), 0)

    def test_null_top_level_estimate(self):
        feed = make_feed()
        feed["60"]["times"][1]["estimated"] = None

        data = normalize_feed(feed)
        self.assertIsNone(data["60"].times[1].estimated)

    def test_numeric_train_id(self):
        data = normalize_feed({60: copy.deepcopy(TRAIN_60)})
        self.assertIn(60, data)

    def test_snapshot_is_immutable(self):
        train = normalize_feed(make_feed())["60"]
        with self.assertRaises(Exception):
            train.departed = False

    def test_null_optional_train_fields_rejected(self):
        for field in ("lat", "lng", "speed", "poll", "pollMin", "alerts"):
            with self.subTest(field=field):
                feed = make_feed()
                feed["60"][field] = None

                with self.assertRaises(FeedValidationError) as ctx:
                    normalize_feed(feed)
                self.assertTrue(ctx.exception.path.endswith(f"60.{field}"))

    def test_null_delay_fields_rejected(self):
        for field in ("diff", "diffMin"):
            with self.subTest(field=field):
                feed = make_feed()
                feed["60"]["times"][1][field] = None

                with self.assertRaises(FeedValidationError) as ctx:
                    normalize_feed(feed)
                self.assertTrue(ctx.exception.path.endswith(f"60.times.1.{field}"))

    def test_null_terminal_departure_rejected(self):
        feed = make_feed()
        feed["60"]["times"][2]["departure"] = None

        with self.assertRaises(FeedValidationError) as ctx:
            normalize_feed(feed)
        self.assertTrue(ctx.exception.path.endswith("60.times.2.departure"))

    def test_null_direction_accepted(self):
        feed = make_feed()
        feed["60"]["direction"] = None

        data = normalize_feed(feed)
        self.assertIsNone(data["60"].direction)

    def test_itinerary_is_immutable(self):
        train = normalize_feed(make_feed())["60"]

        self.assertIsInstance(train.times, tuple)
        self.assertIsInstance(train.alerts, tuple)
        with self.assertRaises(AttributeError):
            train.times.append(train.times[0])
        self.assertEqual(len(train.times), 3)

    def test_normalize_train(self):
        train = normalize_train(copy.deepcopy(TRAIN_61))
        self.assertFalse(train.departed)
        self.assertFalse(train.has_position)

        with self.assertRaises(FeedValidationError) as ctx:
            normalize_train({"departed": True})
        self.assertIsNotNone(ctx.exception.path)


class TestToPayload(unittest.TestCase):
    """Test serialization back to the wire shape."""

    def test_null_direction_preserved(self):
        feed = make_feed()
        feed["60"]["direction"] = None

        payload = to_payload(normalize_feed(feed))

        self.assertIn("direction", payload["60"])
        self.assertIsNone(payload["60"]["direction"])
        self.assertNotIn("direction", payload["61"])

    def test_wire_names_and_absent_fields(self):
        payload = to_payload(normalize_feed(make_feed()))

        train = payload["60"]
        self.assertEqual(train["from"], "Montréal")
        self.assertEqual(train["pollMin"], 1)
        self.assertEqual(train["times"][1]["diffMin"], 5)
        self.assertNotIn("departure", train["times"][2])
        self.assertNotIn("estimated", train["times"][2]["arrival"])
        self.assertNotIn("lat", payload["61"])

    def test_round_trip(self):
        feed = make_feed()
        self.assertEqual(to_payload(normalize_feed(feed)), feed)


if __name__ == "__main__":
    unittest.main()
