import random
from typing import Optional

from dailyfive.features.store import Store
from dailyfive.models.content import Quote

# (text, author)
DEFAULT_QUOTES = [
    ("Success is the sum of small efforts, repeated day in and day out.", "Robert Collier"),
    ("The size of your dreams announces the size of your success.", "Daily Five"),
    ("The choices you make today write the story of tomorrow.", "Daily Five"),
    ("It does not matter how slowly you go as long as you do not stop.", "Confucius"),
    ("We are what we repeatedly do.", "Will Durant"),
    ("A journey of a thousand miles begins with a single step.", "Lao Tzu"),
    ("Motivation gets you going, habit keeps you growing.", "John C. Maxwell"),
]

# Served when the quotes table is empty
FALLBACK_QUOTE = Quote(id=None, text="Success is taking small steps every day.", author="Daily Five")


def seed_quotes(store: Store) -> int:
    if store.query_many("quotes", {}):
        return 0
    rows = [{"text": text, "author": author} for text, author in DEFAULT_QUOTES]
    return len(store.insert_many("quotes", rows))


class QuoteService:
    """Quote of the moment for the home screen and reminder bodies."""

    def __init__(self, store: Store, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    def random_quote(self) -> Quote:
        rows = self.store.query_many("quotes", {}, order_by="id")
        if not rows:
            return FALLBACK_QUOTE
        return Quote.from_row(self.rng.choice(rows))
