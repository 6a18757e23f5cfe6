"""Test the temporary state session."""
from datetime import datetime, timedelta

import pytest

from custom_components.energy_planner.domain import (
    InvalidArgument,
    TemporaryStateSession,
    format_countdown,
)
from custom_components.energy_planner.domain.session import SessionState, TemporaryState
from custom_components.energy_planner.models import EnergyLevel, TemporaryStateType


@pytest.fixture
def session():
    """Idle session with the default step."""
    return TemporaryStateSession()


def test_expiry(session, now):
    """Session stays active until its end, then goes idle with zero remaining."""
    session.start(TemporaryStateType.FAST_CHARGE, timedelta(seconds=60), now)

    assert session.check_expiration(now + timedelta(seconds=59)) is None
    assert session.state is SessionState.ACTIVE

    expired = session.check_expiration(now + timedelta(seconds=61))
    assert expired is not None
    assert expired.type is TemporaryStateType.FAST_CHARGE
    assert session.state is SessionState.IDLE
    assert session.remaining_time(now + timedelta(seconds=61)) == timedelta(0)


def test_expiry_exactly_at_end(session, now):
    """A session is over at expires_at itself."""
    session.start("low_power", timedelta(minutes=15), now)
    end = now + timedelta(minutes=15)

    assert not session.is_active(end)
    assert session.check_expiration(end) is not None


def test_check_expiration_idempotent(session, now):
    """Only the transition call reports the expired session."""
    session.start("low_power", timedelta(minutes=15), now)
    later = now + timedelta(hours=1)

    assert session.check_expiration(later) is not None
    assert session.check_expiration(later) is None
    assert session.check_expiration(now) is None


def test_start_replaces_running_session(session, now):
    """There is never more than one session."""
    session.start("fast_charge", timedelta(hours=1), now)
    replaced = session.start("low_power", timedelta(minutes=30), now + timedelta(minutes=5))

    assert session.current is replaced
    assert session.active_level(now + timedelta(minutes=10)) is EnergyLevel.LOW
    assert replaced.expires_at == now + timedelta(minutes=35)


def test_end_is_idempotent(session, now):
    """Ending twice is safe."""
    session.start("fast_charge", timedelta(minutes=30), now)

    assert session.end().type is TemporaryStateType.FAST_CHARGE
    assert session.end() is None
    assert session.state is SessionState.IDLE


@pytest.mark.parametrize(
    "duration",
    [timedelta(0), timedelta(seconds=-1)],
)
def test_non_positive_duration_rejected(session, now, duration):
    """Durations must be positive."""
    with pytest.raises(InvalidArgument):
        session.start("fast_charge", duration, now)
    assert session.current is None


def test_duration_beyond_midnight_rejected(session, now):
    """Sessions may not run past the end of the day."""
    with pytest.raises(InvalidArgument):
        session.start("fast_charge", session.max_allowed(now) + timedelta(seconds=1), now)
    assert session.current is None


def test_rejected_start_keeps_running_session(session, now):
    """A failed start leaves the existing session alone."""
    running = session.start("low_power", timedelta(minutes=30), now)

    with pytest.raises(InvalidArgument):
        session.start("bogus", timedelta(minutes=30), now)

    assert session.current is running


def test_max_allowed_floors_to_step(session, now):
    """Time until midnight is rounded down to 15 minutes."""
    # 10:00 -> 14h exactly
    assert session.max_allowed(now) == timedelta(hours=14)

    late = now.replace(hour=22, minute=52, second=30)
    # 1h7m30s left -> 1h
    assert session.max_allowed(late) == timedelta(hours=1)

    last_minutes = now.replace(hour=23, minute=50)
    assert session.max_allowed(last_minutes) == timedelta(0)


def test_max_allowed_custom_step(now):
    """The rounding step is configurable."""
    session = TemporaryStateSession(step_minutes=5)
    late = now.replace(hour=23, minute=52)
    assert session.max_allowed(late) == timedelta(minutes=5)


def test_default_duration(session, now):
    """Two hours, or less near midnight."""
    assert session.default_duration(now) == timedelta(hours=2)
    assert session.default_duration(now.replace(hour=23)) == timedelta(hours=1)
    assert session.default_duration(now, timedelta(minutes=45)) == timedelta(minutes=45)


def test_remaining_time(session, now):
    """Remaining time counts down and never goes negative."""
    assert session.remaining_time(now) == timedelta(0)

    session.start("fast_charge", timedelta(minutes=30), now)

    assert session.remaining_time(now + timedelta(minutes=10)) == timedelta(minutes=20)
    assert session.remaining_time(now + timedelta(hours=2)) == timedelta(0)


def test_overdue_session_does_not_apply(session, now):
    """An expired but unchecked session forces nothing."""
    session.start("fast_charge", timedelta(minutes=30), now)
    assert session.active_level(now + timedelta(minutes=31)) is None
    assert session.state is SessionState.ACTIVE


@pytest.mark.parametrize(
    ("remaining", "expected"),
    [
        (timedelta(hours=1, minutes=5, seconds=9), "1:05:09"),
        (timedelta(minutes=59, seconds=59), "59:59"),
        (timedelta(seconds=7), "00:07"),
        (timedelta(seconds=-3), "00:00"),
    ],
)
def test_format_countdown(remaining, expected):
    """Countdown text drops the hour field under one hour."""
    assert format_countdown(remaining) == expected


def test_round_trip(session, now):
    """The running session survives export and reload."""
    session.start("low_power", timedelta(minutes=45), now)

    restored = TemporaryStateSession()
    restored.load_dict(session.to_dict())

    assert restored.current == session.current
    assert restored.current.expires_at == now + timedelta(minutes=45)


def test_temporary_state_from_dict():
    """Stored durations are seconds."""
    state = TemporaryState.from_dict(
        {
            "type": "fast_charge",
            "started_at": "2026-10-19T10:00:00+02:00",
            "duration_seconds": 90.0,
        }
    )
    assert state.duration == timedelta(seconds=90)
    assert state.expires_at == datetime.fromisoformat("2026-10-19T10:01:30+02:00")
    assert state.level is EnergyLevel.HIGH


def test_history_keeps_when_sessions_really_stopped(session, now):
    """Expired, cancelled and replaced sessions are kept with their real end."""
    session.start("fast_charge", timedelta(minutes=15), now)
    session.check_expiration(now + timedelta(minutes=20))
    session.start("low_power", timedelta(minutes=30), now + timedelta(minutes=30))
    session.start("fast_charge", timedelta(minutes=30), now + timedelta(minutes=40))
    session.end(now + timedelta(minutes=50))

    assert [(i.type.value, i.ended_at - now) for i in session.history] == [
        ("fast_charge", timedelta(minutes=15)),
        ("low_power", timedelta(minutes=40)),
        ("fast_charge", timedelta(minutes=50)),
    ]

    restored = TemporaryStateSession()
    restored.load_dict(session.to_dict())
    assert restored.history == session.history


def test_intervals_include_running_session(session, now):
    """The running session is reported up to its expiry."""
    session.start("low_power", timedelta(minutes=30), now)

    (interval,) = session.intervals()

    assert interval.covers(now + timedelta(minutes=29))
    assert not interval.covers(now + timedelta(minutes=30))
