"""FastAPI dependency providers. Services are built per request from app state."""

from datetime import date

from fastapi import Depends, Request

from dailyfive.core import dates
from dailyfive.features.badges.service import BadgeService
from dailyfive.features.education.service import EducationService
from dailyfive.features.market.service import MarketService
from dailyfive.features.notes.service import NoteService
from dailyfive.features.profiles.service import ProfileService
from dailyfive.features.quotes.service import QuoteService
from dailyfive.features.store import Store
from dailyfive.features.streaks.service import StreakService
from dailyfive.features.tasks.service import DailyTaskService


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_today() -> date:
    """Current calendar day in the configured day-boundary timezone."""
    return dates.today()


def get_task_service(request: Request, store: Store = Depends(get_store)) -> DailyTaskService:
    return DailyTaskService(store, rng=getattr(request.app.state, "rng", None))


def get_streak_service(store: Store = Depends(get_store)) -> StreakService:
    return StreakService(store)


def get_profile_service(store: Store = Depends(get_store)) -> ProfileService:
    return ProfileService(store)


def get_badge_service(store: Store = Depends(get_store)) -> BadgeService:
    return BadgeService(store)


def get_market_service(store: Store = Depends(get_store)) -> MarketService:
    return MarketService(store)


def get_note_service(store: Store = Depends(get_store)) -> NoteService:
    return NoteService(store)


def get_quote_service(request: Request, store: Store = Depends(get_store)) -> QuoteService:
    return QuoteService(store, rng=getattr(request.app.state, "rng", None))


def get_education_service(store: Store = Depends(get_store)) -> EducationService:
    return EducationService(store)
