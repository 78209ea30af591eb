"""
Question/answer pairs rendered on each item page.
"""
from __future__ import annotations

from typing import Dict, List

from dining.dataset import has_google_data
from dining.models import Item, Restaurant
from dining.slugs import VIDEO_HOST_HANDLE


def generate_faqs(restaurant: Restaurant, item: Item, handle: str = VIDEO_HOST_HANDLE) -> List[Dict[str, str]]:
    name = restaurant.name
    reviewer = f"@{handle}"
    likes = item.stats.likes
    has_google = has_google_data(restaurant)
    google_rating = restaurant.google.rating
    google_count = restaurant.google.review_count

    if has_google:
        worth_it = (
            f"With a {google_rating:g}/5 rating on Google from {google_count:,} reviews, {name} is highly "
            f"regarded. Watch our honest one-minute {reviewer} video to see for yourself."
        )
    else:
        worth_it = (
            f"Watch our honest one-minute video review to decide for yourself. {reviewer} gives you an "
            "unfiltered, unsponsored look at the food, the vibe, and whether it's worth your money."
        )

    location = f"{name} is located at {restaurant.address}." if restaurant.address else f"{name} is in {restaurant.city}."
    if restaurant.cuisine:
        where = ", ".join(part for part in (restaurant.city, restaurant.state) if part)
        location += f" It serves {restaurant.cuisine.lower()} cuisine in {where}."

    faqs = [
        {"question": f"Is {name} worth it?", "answer": worth_it},
        {
            "question": f"What does {reviewer} think of {name}?",
            "answer": (
                f"Our reviewer visited {name} and captured the experience in a one-minute video. "
                f"With {likes:,} likes, it's one of our most engaging reviews. Watch above for the honest verdict."
            ),
        },
        {"question": f"Where is {name} located?", "answer": location},
        {
            "question": f"Who reviews {name}?",
            "answer": (
                f"{name} was reviewed by {reviewer}: honest, one-minute video restaurant reviews with no "
                "sponsorships and no paid placements."
            ),
        },
        {
            "question": f"Is there a video review of {name}?",
            "answer": (
                f"Yes! {reviewer} posted an honest one-minute video review of {name}. "
                "Watch it above to see the food, the vibe, and the verdict."
            ),
        },
    ]

    if has_google:
        faqs.append(
            {
                "question": f"What is {name}'s Google rating?",
                "answer": (
                    f"{name} has a {google_rating:g}/5 rating on Google based on {google_count:,} reviews."
                ),
            }
        )
    return faqs
