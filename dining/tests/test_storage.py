import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from dining import run_enrichment
from dining.extraction import EntityExtractor, ExtractionRules
from dining.merge import EnrichmentPipeline
from dining.models import Item, RatingRecord, Restaurant
from dining.settings import DiningSettings
from dining.storage import DataStore, MalformedDocumentError, MissingDocumentError, write_json_atomic


class DataStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self.store = DataStore(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, payload) -> Path:
        path = self.data_dir / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    def test_missing_item_list_is_fatal(self):
        with self.assertRaises(MissingDocumentError):
            self.store.load_items()

    def test_missing_registry_and_overrides_are_empty(self):
        self.assertEqual(self.store.load_restaurants(), {})
        self.assertEqual(self.store.load_overrides(), {})

    def test_unparseable_documents_are_fatal(self):
        self._write("videos.json", "[{not json")
        with self.assertRaises(MalformedDocumentError):
            self.store.load_items()
        self._write("restaurants.json", "[]")
        with self.assertRaises(MalformedDocumentError):
            self.store.load_restaurants()

    def test_undecodable_document_is_fatal(self):
        (self.data_dir / "videos.json").write_bytes(b"\xff\xfe[\x00\x00]")
        with self.assertRaises(MalformedDocumentError):
            self.store.load_items()

    def test_schema_violation_is_fatal(self):
        self._write("videos.json", [{"caption": "no id"}])
        with self.assertRaises(MalformedDocumentError):
            self.store.load_items()

    def test_round_trip_preserves_camel_case_and_unknown_keys(self):
        self._write(
            "videos.json",
            [
                {
                    "videoId": "1",
                    "caption": "Tatiana in Brighton Beach",
                    "createTime": 1706000000,
                    "thumbnailUrl": "/assets/images/1/frame-1.jpg",
                    "embedUrl": "https://www.tiktok.com/embed/v2/1",
                    "restaurantSlug": "",
                    "city": "",
                    "cuisine": "",
                    "stats": {"likes": 3, "comments": 2, "shares": 1},
                    "transcript": "kept as-is",
                }
            ],
        )
        items = self.store.load_items()
        self.assertEqual(items[0].video_id, "1")
        self.store.save_items(items)

        saved = json.loads((self.data_dir / "videos.json").read_text(encoding="utf-8"))
        self.assertEqual(saved[0]["videoId"], "1")
        self.assertEqual(saved[0]["restaurantSlug"], "")
        self.assertEqual(saved[0]["transcript"], "kept as-is")

    def test_registry_round_trip(self):
        registry = {
            "tatiana": Restaurant(
                name="Tatiana", slug="tatiana", google=RatingRecord(rating=4.6, review_count=10, place_id="p")
            )
        }
        self.store.save_restaurants(registry)
        raw = json.loads((self.data_dir / "restaurants.json").read_text(encoding="utf-8"))
        self.assertEqual(raw["tatiana"]["google"], {"rating": 4.6, "reviewCount": 10, "placeId": "p"})
        self.assertEqual(raw["tatiana"]["videoIds"], [])
        loaded = self.store.load_restaurants()
        self.assertEqual(loaded["tatiana"].google.place_id, "p")

    def test_override_formats(self):
        self._write("overrides.json", {"overrides": {"1": "Tatiana", "2": None}})
        self.assertEqual(self.store.load_overrides(), {"1": "Tatiana"})
        self._write("overrides.json", {"3": "Lucali"})
        self.assertEqual(self.store.load_overrides(), {"3": "Lucali"})

    def test_failed_write_leaves_previous_document(self):
        path = self._write("videos.json", [{"videoId": "old"}])
        with patch("dining.storage.json.dump", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                self.store.save_items([Item(video_id="new")])
        self.assertEqual(json.loads(path.read_text(encoding="utf-8")), [{"videoId": "old"}])
        self.assertEqual(sorted(p.name for p in self.data_dir.iterdir()), ["videos.json"])


class RunEnrichmentPersistenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self.settings = DiningSettings(
            data_dir=self.data_dir,
            google_places_key="",
            yelp_api_key="",
            provider_delay=0.0,
            rules_path=None,
            ner_model="",
            base_url="/",
            log_level="INFO",
        )
        self.pipeline = EnrichmentPipeline(extractor=EntityExtractor(rules=ExtractionRules.load()))
        (self.data_dir / "videos.json").write_text(
            json.dumps([{"videoId": "1", "caption": "Tatiana in Brighton Beach"}]), encoding="utf-8"
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_failed_second_write_leaves_no_orphan_references(self):
        calls = []

        def fail_on_second(path, payload):
            calls.append(path.name)
            if len(calls) == 2:
                raise OSError("disk full")
            write_json_atomic(path, payload)

        with patch("dining.storage.write_json_atomic", side_effect=fail_on_second):
            with self.assertRaises(OSError):
                run_enrichment(self.settings, pipeline=self.pipeline)

        self.assertEqual(calls, ["restaurants.json", "videos.json"])
        store = DataStore(self.data_dir)
        registry = store.load_restaurants()
        for item in store.load_items():
            if item.restaurant_slug:
                self.assertIn(item.restaurant_slug, registry)


if __name__ == "__main__":
    unittest.main()
