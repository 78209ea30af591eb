import unittest

from dining.ingestion import merge_items
from dining.models import Item, ItemStats


class MergeItemsTests(unittest.TestCase):
    def test_appends_new_and_refreshes_known(self):
        existing = [
            Item(
                video_id="1",
                caption="Tatiana in Brighton Beach",
                thumbnail_url="/assets/images/1/frame-1.jpg",
                restaurant_slug="tatiana",
                city="New York",
                cuisine="Russian",
                stats=ItemStats(likes=10),
            )
        ]
        incoming = [
            Item(
                video_id="1",
                caption="edited caption",
                thumbnail_url="https://cdn.example.com/1.jpg",
                stats=ItemStats(likes=99, comments=5, shares=1),
            ),
            Item(video_id="2", caption="Lucali - best slice"),
        ]

        counts = merge_items(existing, incoming)

        self.assertEqual(counts, {"added": 1, "updated": 1})
        self.assertEqual([item.video_id for item in existing], ["1", "2"])
        known = existing[0]
        self.assertEqual(known.stats.likes, 99)
        self.assertEqual(known.thumbnail_url, "https://cdn.example.com/1.jpg")
        self.assertEqual(known.caption, "Tatiana in Brighton Beach")
        self.assertEqual((known.restaurant_slug, known.city, known.cuisine), ("tatiana", "New York", "Russian"))

    def test_remote_thumbnail_is_not_replaced(self):
        existing = [Item(video_id="1", thumbnail_url="https://cdn.example.com/old.jpg")]
        merge_items(existing, [Item(video_id="1", thumbnail_url="https://cdn.example.com/new.jpg")])
        self.assertEqual(existing[0].thumbnail_url, "https://cdn.example.com/old.jpg")

        merge_items(existing, [Item(video_id="1", thumbnail_url="/assets/local.jpg")])
        self.assertEqual(existing[0].thumbnail_url, "https://cdn.example.com/old.jpg")

    def test_duplicate_incoming_ids_are_added_once(self):
        existing = []
        counts = merge_items(existing, [Item(video_id="7"), Item(video_id="7", stats=ItemStats(likes=3))])
        self.assertEqual(counts, {"added": 1, "updated": 1})
        self.assertEqual(len(existing), 1)
        self.assertEqual(existing[0].stats.likes, 3)


if __name__ == "__main__":
    unittest.main()
