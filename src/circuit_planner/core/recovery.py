"""
Muscle recovery estimation from completed-workout history.

History records carry no exercise-level detail, so the muscles a workout
trained are inferred from two signals only: workout type (home/gym) and
duration bucket.  Each muscle group then recovers linearly over its own
recovery time constant (hours) from the most recent workout that hit it.
"""

import math
from datetime import datetime, timezone

from .config import (
    ALMOST_RECOVERED_HOURS,
    FALLBACK_MUSCLES,
    GYM_LONG_ROTATION,
    GYM_MEDIUM_SPLIT,
    GYM_SHORT_MUSCLES,
    HOME_MUSCLES,
    LONG_WORKOUT_MINUTES,
    RECOVERY_TIMES,
    SHORT_WORKOUT_MINUTES,
)
from .models import MUSCLE_GROUPS, CompletedWorkout, MuscleRecoveryStatus


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp.

    A trailing ``Z`` is accepted.  Values without an offset keep their
    local wall-clock fields; use ``to_utc`` for arithmetic.
    """
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_utc(moment: datetime) -> datetime:
    """Convert to an aware UTC datetime (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def duration_bucket(duration_minutes: int) -> str:
    """Return "short" (<30 min), "medium" (30-44 min) or "long" (>=45 min)."""
    if duration_minutes < SHORT_WORKOUT_MINUTES:
        return "short"
    if duration_minutes < LONG_WORKOUT_MINUTES:
        return "medium"
    return "long"


def _day_of_month(workout: CompletedWorkout) -> int:
    if workout.completed_at:
        return parse_timestamp(workout.completed_at).day
    return datetime.strptime(workout.date, "%Y-%m-%d").day


def infer_muscles(workout: CompletedWorkout) -> tuple[str, ...]:
    """
    Infer the muscle groups a workout trained.

    Gym sessions are assumed to follow a split rather than full-body work
    every time: medium sessions alternate upper/lower on day-of-month
    parity, long sessions rotate push/pull/legs on day-of-month mod 3.
    Unknown workout types fall back to cardio/conditioning.

    Args:
        workout: Completed workout record

    Returns:
        Muscle groups considered trained
    """
    bucket = duration_bucket(workout.duration_minutes)

    if workout.workout_type == "home":
        return HOME_MUSCLES[bucket]

    if workout.workout_type == "gym":
        if bucket == "short":
            return GYM_SHORT_MUSCLES
        day = _day_of_month(workout)
        if bucket == "medium":
            return GYM_MEDIUM_SPLIT[day % 2]
        return GYM_LONG_ROTATION[day % 3]

    return FALLBACK_MUSCLES


def last_trained_by_muscle(history: list[CompletedWorkout]) -> dict[str, datetime]:
    """
    Map each muscle group to the completion time of the latest workout
    that trained it.  Workouts without ``completed_at`` are ignored.
    """
    completed = [w for w in history if w.completed_at]
    completed.sort(key=lambda w: to_utc(parse_timestamp(w.completed_at)), reverse=True)

    last_trained: dict[str, datetime] = {}
    for workout in completed:
        finished = to_utc(parse_timestamp(workout.completed_at))
        for muscle in infer_muscles(workout):
            last_trained.setdefault(muscle, finished)
    return last_trained


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_recovery(
    history: list[CompletedWorkout],
    now: datetime | None = None,
    recovery_times: dict[str, float] | None = None,
) -> list[MuscleRecoveryStatus]:
    """
    Estimate recovery status for every muscle group.

    percent_recovered = clip(elapsed_h / recovery_h * 100, 0, 100)
    hours_until       = round(max(0, recovery_h - elapsed_h))

    A muscle never matched by any workout is fully recovered.

    Args:
        history: Completed-workout history (any order)
        now: Reference time (default: current UTC time)
        recovery_times: Per-muscle overrides of RECOVERY_TIMES (hours)

    Returns:
        One MuscleRecoveryStatus per muscle group, in vocabulary order
    """
    reference = to_utc(now) if now is not None else datetime.now(timezone.utc)
    times = dict(RECOVERY_TIMES)
    if recovery_times:
        times.update(recovery_times)

    last_trained = last_trained_by_muscle(history)
    statuses: list[MuscleRecoveryStatus] = []

    for muscle in MUSCLE_GROUPS:
        trained_at = last_trained.get(muscle)
        if trained_at is None:
            statuses.append(
                MuscleRecoveryStatus(
                    muscle=muscle,
                    is_recovered=True,
                    percent_recovered=100.0,
                    hours_until_recovered=0,
                )
            )
            continue

        recovery_hours = float(times[muscle])
        elapsed_hours = (reference - trained_at).total_seconds() / 3600.0
        if recovery_hours <= 0:
            percent = 100.0
        else:
            percent = max(0.0, min(100.0, elapsed_hours / recovery_hours * 100.0))

        statuses.append(
            MuscleRecoveryStatus(
                muscle=muscle,
                is_recovered=percent >= 100.0,
                percent_recovered=percent,
                hours_until_recovered=_round_half_up(max(0.0, recovery_hours - elapsed_hours)),
                last_trained=trained_at.isoformat(),
            )
        )

    return statuses


def recovered_muscles(statuses: list[MuscleRecoveryStatus]) -> list[str]:
    """Muscle groups ready to train."""
    return [s.muscle for s in statuses if s.is_recovered]


def fatigued_muscles(statuses: list[MuscleRecoveryStatus]) -> list[MuscleRecoveryStatus]:
    """Statuses of muscle groups still recovering."""
    return [s for s in statuses if not s.is_recovered]


def recovery_message(status: MuscleRecoveryStatus) -> str:
    """Short human-readable recovery hint for one muscle group."""
    if status.is_recovered:
        return "Ready to train"
    if status.hours_until_recovered < ALMOST_RECOVERED_HOURS:
        return "Almost recovered"
    if status.hours_until_recovered < 24:
        return f"{status.hours_until_recovered}h rest needed"
    days = math.ceil(status.hours_until_recovered / 24)
    return f"{days} day{'s' if days > 1 else ''} rest needed"
