import unittest

from dining.dataset import Dataset, combined_rating, google_reviews, has_google_data, has_yelp_data
from dining.models import Item, ItemStats, RatingRecord, Restaurant, ReviewSnippet


def _dataset() -> Dataset:
    items = [
        Item(video_id="1", restaurant_slug="tatiana", city="New York", cuisine="Russian", create_time=100,
             stats=ItemStats(likes=500)),
        Item(video_id="2", restaurant_slug="lucali", city="new york", cuisine="Pizza", create_time=300,
             stats=ItemStats(likes=900)),
        Item(video_id="3", restaurant_slug="franklin", city="Austin", cuisine="BBQ", create_time=200,
             stats=ItemStats(likes=500)),
        Item(video_id="4", restaurant_slug="", city="", create_time=400, stats=ItemStats(likes=10000)),
        Item(video_id="5", restaurant_slug="tatiana", city="New York", cuisine="Russian", create_time=50,
             stats=ItemStats(likes=500)),
    ]
    restaurants = {
        "tatiana": Restaurant(
            name="Tatiana", slug="tatiana",
            google=RatingRecord(rating=4.0, review_count=100, place_id="p1"),
            yelp=RatingRecord(rating=5.0, review_count=300, url="https://y"),
            reviews=[ReviewSnippet(source="google", author="A"), ReviewSnippet(source="yelp", author="B")],
        ),
        "lucali": Restaurant(name="Lucali", slug="lucali"),
        "franklin": Restaurant(name="Franklin", slug="franklin", google=RatingRecord(rating=4.8, review_count=50)),
    }
    return Dataset(items, restaurants)


class DatasetTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dataset = _dataset()

    def test_lookup_by_id_and_slug(self):
        self.assertEqual(self.dataset.get_item("3").restaurant_slug, "franklin")
        self.assertIsNone(self.dataset.get_item("missing"))
        self.assertEqual(self.dataset.get_restaurant("lucali").name, "Lucali")
        self.assertIsNone(self.dataset.get_restaurant("missing"))

    def test_city_filter_is_case_insensitive_equality(self):
        upper = [item.video_id for item in self.dataset.items_by_city("New York")]
        lower = [item.video_id for item in self.dataset.items_by_city("new york")]
        self.assertEqual(upper, lower)
        self.assertEqual(upper, ["1", "2", "5"])
        self.assertEqual(self.dataset.items_by_city("York"), [])

    def test_cuisine_filter(self):
        self.assertEqual([i.video_id for i in self.dataset.items_by_cuisine("pizza")], ["2"])

    def test_items_by_restaurant(self):
        self.assertEqual([i.video_id for i in self.dataset.items_by_restaurant("tatiana")], ["1", "5"])

    def test_top_by_likes_is_stable_and_skips_unresolved(self):
        top = self.dataset.top(limit=10)
        self.assertEqual([item.video_id for item, _ in top], ["2", "1", "3", "5"])
        self.assertEqual(top[0][1].slug, "lucali")
        self.assertEqual(len(self.dataset.top(limit=2)), 2)

    def test_top_by_combined_rating(self):
        top = self.dataset.top(limit=3, key="rating")
        self.assertEqual([item.video_id for item, _ in top], ["3", "1", "5"])

    def test_latest(self):
        self.assertEqual([item.video_id for item in self.dataset.latest(3)], ["4", "2", "3"])

    def test_results_do_not_alias_storage(self):
        items = self.dataset.items()
        items.clear()
        self.assertEqual(len(self.dataset.items()), 5)
        filtered = self.dataset.items_by_city("Austin")
        filtered.append(Item(video_id="x"))
        self.assertEqual(len(self.dataset.items_by_city("Austin")), 1)

    def test_aggregations(self):
        self.assertEqual(self.dataset.cities(), ["Austin", "New York", "new york"])
        self.assertEqual(self.dataset.cuisines(), ["BBQ", "Pizza", "Russian"])


class RestaurantHelperTests(unittest.TestCase):
    def test_provider_presence(self):
        dataset = _dataset()
        tatiana = dataset.get_restaurant("tatiana")
        franklin = dataset.get_restaurant("franklin")
        self.assertTrue(has_google_data(tatiana))
        self.assertTrue(has_yelp_data(tatiana))
        self.assertFalse(has_google_data(franklin))
        self.assertFalse(has_yelp_data(dataset.get_restaurant("lucali")))
        self.assertEqual([r.author for r in google_reviews(tatiana)], ["A"])

    def test_combined_rating(self):
        dataset = _dataset()
        self.assertEqual(combined_rating(dataset.get_restaurant("tatiana")), 4.75)
        self.assertEqual(combined_rating(dataset.get_restaurant("lucali")), 0.0)
        self.assertEqual(combined_rating(dataset.get_restaurant("franklin")), 4.8)


if __name__ == "__main__":
    unittest.main()
