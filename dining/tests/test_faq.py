import unittest

from dining.faq import generate_faqs
from dining.models import Item, ItemStats, RatingRecord, Restaurant


def _restaurant(**overrides) -> Restaurant:
    data = dict(
        name="Tatiana",
        slug="tatiana",
        city="New York",
        state="NY",
        cuisine="Russian",
        address="3152 Brighton 6th St",
    )
    data.update(overrides)
    return Restaurant(**data)


class FaqTests(unittest.TestCase):
    def setUp(self) -> None:
        self.item = Item(video_id="1", stats=ItemStats(likes=29400))

    def test_without_google_data(self):
        faqs = generate_faqs(_restaurant(), self.item)
        self.assertEqual(len(faqs), 5)
        self.assertEqual(faqs[0]["question"], "Is Tatiana worth it?")
        self.assertNotIn("Google", faqs[0]["answer"])
        self.assertIn("29,400 likes", faqs[1]["answer"])
        self.assertIn("3152 Brighton 6th St", faqs[2]["answer"])
        self.assertIn("russian cuisine in New York, NY", faqs[2]["answer"])

    def test_google_question_only_with_google_data(self):
        restaurant = _restaurant(google=RatingRecord(rating=4.6, review_count=1234, place_id="pid"))
        faqs = generate_faqs(restaurant, self.item)
        self.assertEqual(len(faqs), 6)
        self.assertEqual(faqs[-1]["question"], "What is Tatiana's Google rating?")
        self.assertIn("4.6/5", faqs[-1]["answer"])
        self.assertIn("1,234 reviews", faqs[0]["answer"])

    def test_rating_without_place_id_is_not_google_data(self):
        restaurant = _restaurant(google=RatingRecord(rating=4.6, review_count=1234))
        self.assertEqual(len(generate_faqs(restaurant, self.item)), 5)

    def test_every_entry_has_question_and_answer(self):
        for faq in generate_faqs(_restaurant(address="", cuisine=""), self.item):
            self.assertEqual(set(faq), {"question", "answer"})
            self.assertTrue(faq["answer"])


if __name__ == "__main__":
    unittest.main()
