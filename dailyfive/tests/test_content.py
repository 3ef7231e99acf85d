import random
from datetime import datetime, timedelta, timezone

import pytest

from dailyfive.core.errors import ValidationError
from dailyfive.features.education.service import EducationService
from dailyfive.features.quotes.service import DEFAULT_QUOTES, FALLBACK_QUOTE, QuoteService, seed_quotes


def test_random_quote_comes_from_table(seeded_store):
    service = QuoteService(seeded_store, rng=random.Random(1))
    texts = {text for text, _ in DEFAULT_QUOTES}

    picked = {service.random_quote().text for _ in range(30)}
    assert picked <= texts
    assert len(picked) > 1


def test_random_quote_is_reproducible_with_seeded_rng(seeded_store):
    first = QuoteService(seeded_store, rng=random.Random(42)).random_quote()
    second = QuoteService(seeded_store, rng=random.Random(42)).random_quote()
    assert first == second


def test_empty_table_serves_fallback(store):
    assert QuoteService(store).random_quote() == FALLBACK_QUOTE


def test_seed_quotes_only_once(store):
    assert seed_quotes(store) == len(DEFAULT_QUOTES)
    assert seed_quotes(store) == 0


def test_education_listed_newest_first(store):
    service = EducationService(store)
    base = datetime(2024, 3, 1, tzinfo=timezone.utc)
    service.add_content("Breathing basics", "https://example.org/breathing", duration="5 min", created_at=base)
    service.add_content("Sleep hygiene", "https://example.org/sleep", created_at=base + timedelta(days=1))

    items = service.list_content()
    assert [item.title for item in items] == ["Sleep hygiene", "Breathing basics"]
    assert items[1].duration == "5 min"


@pytest.mark.parametrize(
    "title, url, image",
    [
        ("", "https://example.org/a", None),
        ("No link", "", None),
        ("Bad scheme", "javascript:alert(1)", None),
        ("Bad image", "https://example.org/a", "ftp://example.org/a.png"),
    ],
)
def test_education_rejects_invalid_entries(store, title, url, image):
    with pytest.raises(ValidationError):
        EducationService(store).add_content(title, url, image_url=image)
    assert store.query_many("education_content", {}) == []
