from typing import List

from dailyfive.features.store import Store
from dailyfive.models.daily_tasks import TaskCatalogEntry

# Starter catalog of daily tasks: (title, icon, description)
DEFAULT_TASKS = [
    ("Meditation", "meditation", "Meditate for 10 minutes somewhere quiet."),
    ("Walk", "walk", "Take a 15 minute light walk."),
    ("Reading", "book-open-variant", "Read 20 pages of a book you enjoy."),
    ("Hydration", "cup-water", "Drink 8 glasses of water today."),
    ("Gratitude", "heart", "Write down three things you are grateful for."),
    ("Stretching", "human-handsup", "Stretch for 10 minutes after waking up."),
    ("Digital detox", "cellphone-off", "Spend one hour without your phone."),
    ("Tidy up", "broom", "Tidy one corner of your room."),
    ("Call someone", "phone", "Call a friend or family member."),
    ("Early night", "weather-night", "Go to bed before 23:00."),
    ("Journal", "notebook", "Write a short journal entry about your day."),
    ("Healthy meal", "food-apple", "Cook or eat one balanced meal."),
]


def seed_catalog(store: Store) -> int:
    """Insert the starter catalog when the catalog is empty. Returns rows added."""
    if store.query_many("task_catalog", {}):
        return 0
    rows = [
        {"title": title, "icon": icon, "description": description}
        for title, icon, description in DEFAULT_TASKS
    ]
    return len(store.insert_many("task_catalog", rows))


def load_catalog(store: Store) -> List[TaskCatalogEntry]:
    return [TaskCatalogEntry.from_row(row) for row in store.query_many("task_catalog", {}, order_by="id")]
