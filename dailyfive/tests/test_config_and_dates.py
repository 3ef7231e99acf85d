from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from dailyfive.core import dates
from dailyfive.core.config import validate_config
from dailyfive.core.errors import ValidationError


def make_settings(**overrides):
    defaults = dict(
        CONFIG_STRICT=False,
        DATABASE_URL="sqlite://",
        DAY_BOUNDARY_TZ="UTC",
        STREAK_WINDOW_DAYS=30,
        STATUS_WINDOW_DAYS=7,
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def test_valid_config_passes():
    assert validate_config(settings_obj=make_settings()) is True


def test_unknown_timezone_fails_in_strict_mode():
    with pytest.raises(RuntimeError) as exc:
        validate_config(strict=True, settings_obj=make_settings(DAY_BOUNDARY_TZ="Mars/Olympus_Mons"))
    assert "DAY_BOUNDARY_TZ" in str(exc.value)


def test_problems_only_warn_when_not_strict(caplog):
    cfg = make_settings(DATABASE_URL=None, STREAK_WINDOW_DAYS=0)
    assert validate_config(settings_obj=cfg) is False
    assert "DATABASE_URL" in caplog.text
    assert "STREAK_WINDOW_DAYS" in caplog.text


@pytest.mark.parametrize(
    "tz_name, now, expected",
    [
        ("UTC", datetime(2024, 3, 15, 23, 59, tzinfo=timezone.utc), date(2024, 3, 15)),
        ("Pacific/Auckland", datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc), date(2024, 3, 16)),
        ("America/Los_Angeles", datetime(2024, 3, 15, 3, 0, tzinfo=timezone.utc), date(2024, 3, 14)),
    ],
)
def test_today_respects_day_boundary(tz_name, now, expected):
    assert dates.today(tz_name, now=now) == expected


def test_naive_now_is_treated_as_utc():
    assert dates.today("UTC", now=datetime(2024, 1, 1, 0, 30)) == date(2024, 1, 1)


def test_parse_day():
    assert dates.parse_day("2024-03-15") == date(2024, 3, 15)
    assert dates.parse_day("2024-03-15T10:00:00Z") == date(2024, 3, 15)
    with pytest.raises(ValidationError):
        dates.parse_day("15/03/2024")


def test_trailing_days_crosses_leap_day():
    assert dates.trailing_days(date(2024, 3, 2), 3) == [date(2024, 2, 29), date(2024, 3, 1), date(2024, 3, 2)]
