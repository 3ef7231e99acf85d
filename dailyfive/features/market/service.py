from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from dailyfive.core.errors import InsufficientPointsError, NotFoundError, PersistenceError
from dailyfive.core.logging import log_event
from dailyfive.features.profiles.service import ProfileService
from dailyfive.features.store import Store
from dailyfive.models.rewards import Purchase, ShopItem

# (name, description, price)
DEFAULT_SHOP_ITEMS = [
    ("Book Raffle", "Enter this month's book giveaway.", 50),
    ("Coffee Voucher Raffle", "Enter the weekly coffee voucher draw.", 100),
    ("Headphones Raffle", "Enter the headphones giveaway.", 500),
]


def seed_shop_items(store: Store) -> int:
    if store.query_many("shop_items", {}):
        return 0
    base = datetime.now(timezone.utc)
    rows = [
        # Staggered so "newest first" ordering is stable
        {"name": name, "description": description, "price": price, "is_active": True, "created_at": base + timedelta(seconds=i)}
        for i, (name, description, price) in enumerate(DEFAULT_SHOP_ITEMS)
    ]
    return len(store.insert_many("shop_items", rows))


class MarketService:
    """Spend achievement points on shop items."""

    def __init__(self, store: Store):
        self.store = store
        self.profiles = ProfileService(store)

    def list_items(self) -> List[ShopItem]:
        rows = self.store.query_many("shop_items", {"is_active": True}, order_by="-created_at")
        return [ShopItem.from_row(row) for row in rows]

    def list_purchases(self, user_id: str) -> List[Purchase]:
        rows = self.store.query_many("user_purchases", {"user_id": user_id}, order_by="-purchase_date")
        return [Purchase.from_row(row) for row in rows]

    def purchase(self, user_id: str, item_id: int) -> Tuple[Purchase, int]:
        """Buy one item. Returns the purchase and the remaining point balance."""
        row = self.store.query_one("shop_items", {"id": item_id})
        if row is None or not row.get("is_active"):
            raise NotFoundError(f"Shop item {item_id} not found")
        item = ShopItem.from_row(row)

        profile = self.profiles.get_or_create_profile(user_id)
        balance = self.store.increment("profiles", {"user_id": user_id}, "achievement_points", -item.price)
        if balance is None:
            raise InsufficientPointsError(
                f"{item.name} costs {item.price} points, balance is {profile.achievement_points}"
            )

        try:
            created = self.store.insert(
                "user_purchases",
                {
                    "user_id": user_id,
                    "item_id": item.id,
                    "price_paid": item.price,
                    "purchase_date": datetime.now(timezone.utc),
                },
            )
        except PersistenceError:
            # Give the points back when the purchase could not be recorded
            self.store.increment("profiles", {"user_id": user_id}, "achievement_points", item.price)
            raise
        log_event(
            "info",
            "market.purchase",
            user_id=user_id,
            event_type="market.purchase",
            extra={"item_id": item.id, "price": item.price, "balance": balance},
        )
        return Purchase.from_row(created), balance
