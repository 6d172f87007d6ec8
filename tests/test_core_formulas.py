"""
Unit tests for the core formulas: duration estimation and trimming,
recovery estimation, category recommendation and exercise filtering.

Each test class corresponds to one formula or rule and is named after it.
"""

from datetime import datetime, timedelta, timezone

import pytest

from circuit_planner.core.config import (
    FALLBACK_MUSCLES,
    GYM_SHORT_MUSCLES,
    HOME_MUSCLES,
    LEG_MUSCLES,
    PULL_MUSCLES,
    PUSH_MUSCLES,
    RECOVERY_TIMES,
    UPPER_MUSCLES,
)
from circuit_planner.core.models import (
    CATEGORIES,
    MUSCLE_GROUPS,
    CompletedWorkout,
    Exercise,
    GeneratedWorkoutExercise,
    MuscleRecoveryStatus,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _exercise(exercise_id="ex", category="core", difficulty="beginner",
              location="both", equipment=("bodyweight_only",),
              reps=10, duration=None, sets=3) -> Exercise:
    return Exercise(
        exercise_id=exercise_id,
        name=exercise_id.replace("_", " ").title(),
        category=category,
        location=location,
        difficulty=difficulty,
        equipment=tuple(equipment),
        default_sets=sets,
        default_reps=reps if duration is None else None,
        default_duration_seconds=duration,
    )


def _entry(sets=3, reps=10, duration=None, rest=60, order_index=0) -> GeneratedWorkoutExercise:
    return GeneratedWorkoutExercise(
        exercise=_exercise(reps=reps or 10, duration=duration),
        sets=sets,
        target_reps=reps,
        target_duration_seconds=duration,
        rest_seconds=rest,
        order_index=order_index,
    )


def _workout(hours_ago, workout_type="home", minutes=20, workout_id="w1") -> CompletedWorkout:
    finished = NOW - timedelta(hours=hours_ago)
    return CompletedWorkout(
        workout_id=workout_id,
        name="Test",
        workout_type=workout_type,
        duration_minutes=minutes,
        date=finished.date().isoformat(),
        completed_at=finished.isoformat(),
    )


def _on_day(day, workout_type="gym", minutes=35) -> CompletedWorkout:
    return CompletedWorkout(
        workout_id=f"d{day}",
        name="Test",
        workout_type=workout_type,
        duration_minutes=minutes,
        date=f"2026-03-{day:02d}",
        completed_at=f"2026-03-{day:02d}T18:00:00",
    )


def _status(statuses, muscle) -> MuscleRecoveryStatus:
    return next(s for s in statuses if s.muscle == muscle)


# ===========================================================================
# duration.py  exercise_duration_seconds
# ===========================================================================

class TestExerciseDuration:
    """total = work * sets + rest * (sets - 1)"""

    def test_reps_based(self):
        # 10 reps * 3 s = 30 s work; 3 sets; 2 rests of 60 s
        from circuit_planner.core.duration import exercise_duration_seconds
        assert exercise_duration_seconds(_entry(sets=3, reps=10, rest=60)) == 30 * 3 + 120

    def test_timed(self):
        from circuit_planner.core.duration import exercise_duration_seconds
        entry = _entry(sets=2, reps=None, duration=45, rest=15)
        assert exercise_duration_seconds(entry) == 45 * 2 + 15

    def test_single_set_has_no_rest(self):
        from circuit_planner.core.duration import exercise_duration_seconds
        entry = _entry(sets=1, reps=None, duration=60, rest=10)
        assert exercise_duration_seconds(entry) == 60

    def test_missing_target_counts_rest_only(self):
        from circuit_planner.core.duration import exercise_duration_seconds
        entry = _entry(sets=3, reps=None, duration=None, rest=30)
        assert exercise_duration_seconds(entry) == 60

    def test_workout_sum(self):
        from circuit_planner.core.duration import workout_duration_seconds
        entries = [_entry(sets=3, reps=10, rest=60), _entry(sets=1, reps=None, duration=45, rest=15)]
        assert workout_duration_seconds(entries) == 210 + 45
        assert workout_duration_seconds([]) == 0


# ===========================================================================
# duration.py  optimize_duration
# ===========================================================================

class TestOptimizeDuration:
    """Greedy: drop a set from the first entry above 2 sets, else drop the last entry."""

    def test_under_budget_is_unchanged(self):
        from circuit_planner.core.duration import optimize_duration
        entries = [_entry(sets=4, reps=10, rest=60)]
        result = optimize_duration(entries, 30)
        assert result is entries
        assert result[0].sets == 4

    def test_single_heavy_entry_ends_empty(self):
        # 4x20 @60s = 420 s; 3 sets = 300 s; 2 sets = 180 s; still > 60 s -> dropped
        from circuit_planner.core.duration import optimize_duration
        entries = [_entry(sets=4, reps=20, rest=60)]
        assert optimize_duration(entries, 1) == []

    def test_sets_trimmed_before_exercises_dropped(self):
        # 2 x 210 s = 420 s; budget 360 s; first entry 3 -> 2 sets gives 330 s
        from circuit_planner.core.duration import optimize_duration
        entries = [_entry(sets=3, order_index=0), _entry(sets=3, order_index=1)]
        result = optimize_duration(entries, 6)
        assert [e.sets for e in result] == [2, 3]

    def test_sets_never_below_two(self):
        from circuit_planner.core.duration import optimize_duration
        entries = [_entry(sets=5, order_index=i) for i in range(4)]
        result = optimize_duration(entries, 3)
        assert all(e.sets >= 2 for e in result)

    def test_drops_from_the_end(self):
        # each 2x10 @60s = 120 s; three entries = 360 s; budget 240 s
        from circuit_planner.core.duration import optimize_duration
        entries = [_entry(sets=2, order_index=i) for i in range(3)]
        result = optimize_duration(entries, 4)
        assert [e.order_index for e in result] == [0, 1]

    def test_result_fits_budget(self):
        from circuit_planner.core.duration import optimize_duration, workout_duration_seconds
        entries = [_entry(sets=4, reps=15, order_index=i) for i in range(6)]
        result = optimize_duration(entries, 10)
        assert workout_duration_seconds(result) <= 600

    def test_empty_input(self):
        from circuit_planner.core.duration import optimize_duration
        assert optimize_duration([], 0) == []


# ===========================================================================
# recovery.py  infer_muscles
# ===========================================================================

class TestInferMuscles:
    """Muscles trained by a history record: (type, duration bucket) lookup."""

    @pytest.mark.parametrize(
        "minutes,bucket",
        [(0, "short"), (29, "short"), (30, "medium"), (44, "medium"), (45, "long"), (90, "long")],
    )
    def test_duration_buckets(self, minutes, bucket):
        from circuit_planner.core.recovery import duration_bucket
        assert duration_bucket(minutes) == bucket

    @pytest.mark.parametrize("minutes,bucket", [(20, "short"), (35, "medium"), (60, "long")])
    def test_home_lookup(self, minutes, bucket):
        from circuit_planner.core.recovery import infer_muscles
        assert infer_muscles(_on_day(10, "home", minutes)) == HOME_MUSCLES[bucket]

    def test_gym_short_is_push(self):
        from circuit_planner.core.recovery import infer_muscles
        assert infer_muscles(_on_day(10, "gym", 20)) == GYM_SHORT_MUSCLES

    def test_gym_medium_alternates_on_day_parity(self):
        from circuit_planner.core.recovery import infer_muscles
        assert infer_muscles(_on_day(2, "gym", 35)) == UPPER_MUSCLES
        assert infer_muscles(_on_day(3, "gym", 35)) == LEG_MUSCLES

    def test_gym_long_rotates_push_pull_legs(self):
        from circuit_planner.core.recovery import infer_muscles
        assert infer_muscles(_on_day(3, "gym", 60)) == PUSH_MUSCLES
        assert infer_muscles(_on_day(4, "gym", 60)) == PULL_MUSCLES
        assert infer_muscles(_on_day(5, "gym", 60)) == LEG_MUSCLES

    def test_unknown_type_falls_back(self):
        from circuit_planner.core.recovery import infer_muscles
        assert infer_muscles(_on_day(10, "park", 60)) == FALLBACK_MUSCLES

    def test_day_taken_from_date_without_timestamp(self):
        from circuit_planner.core.recovery import infer_muscles
        workout = CompletedWorkout("x", "Test", "gym", 35, "2026-03-03")
        assert infer_muscles(workout) == LEG_MUSCLES


# ===========================================================================
# recovery.py  estimate_recovery
# ===========================================================================

class TestEstimateRecovery:
    """percent = clip(elapsed / recovery * 100, 0, 100); hours = round(recovery - elapsed)"""

    def test_empty_history_all_recovered(self):
        from circuit_planner.core.recovery import estimate_recovery
        statuses = estimate_recovery([], now=NOW)
        assert [s.muscle for s in statuses] == list(MUSCLE_GROUPS)
        for s in statuses:
            assert s.is_recovered
            assert s.percent_recovered == 100.0
            assert s.hours_until_recovered == 0
            assert s.last_trained is None

    def test_partial_recovery(self):
        # short home -> core (24 h); 12 h ago -> 50 %
        from circuit_planner.core.recovery import estimate_recovery
        statuses = estimate_recovery([_workout(12)], now=NOW)
        core = _status(statuses, "core")
        assert not core.is_recovered
        assert core.percent_recovered == pytest.approx(50.0)
        assert core.hours_until_recovered == 12

    def test_untouched_muscle_is_recovered(self):
        from circuit_planner.core.recovery import estimate_recovery
        chest = _status(estimate_recovery([_workout(1)], now=NOW), "chest")
        assert chest.is_recovered
        assert chest.percent_recovered == 100.0

    def test_exactly_recovered_at_recovery_time(self):
        from circuit_planner.core.recovery import estimate_recovery
        core = _status(estimate_recovery([_workout(RECOVERY_TIMES["core"])], now=NOW), "core")
        assert core.is_recovered
        assert core.percent_recovered == 100.0
        assert core.hours_until_recovered == 0

    def test_percent_capped_at_100(self):
        from circuit_planner.core.recovery import estimate_recovery
        core = _status(estimate_recovery([_workout(500)], now=NOW), "core")
        assert core.percent_recovered == 100.0

    def test_future_workout_clamped_to_zero(self):
        from circuit_planner.core.recovery import estimate_recovery
        core = _status(estimate_recovery([_workout(-2)], now=NOW), "core")
        assert core.percent_recovered == 0.0
        assert core.hours_until_recovered == 26

    def test_hours_round_half_up(self):
        # 11.5 h elapsed of 24 h -> 12.5 h left -> 13
        from circuit_planner.core.recovery import estimate_recovery
        core = _status(estimate_recovery([_workout(11.5)], now=NOW), "core")
        assert core.hours_until_recovered == 13

    def test_monotone_in_elapsed_time(self):
        from circuit_planner.core.recovery import estimate_recovery
        history = [_workout(2)]
        earlier = _status(estimate_recovery(history, now=NOW), "abs").percent_recovered
        later = _status(
            estimate_recovery(history, now=NOW + timedelta(hours=6)), "abs"
        ).percent_recovered
        assert later > earlier

    def test_most_recent_workout_wins(self):
        from circuit_planner.core.recovery import estimate_recovery
        history = [_workout(20, workout_id="old"), _workout(4, workout_id="new")]
        core = _status(estimate_recovery(history, now=NOW), "core")
        assert core.last_trained == (NOW - timedelta(hours=4)).isoformat()

    def test_uncompleted_workouts_ignored(self):
        from circuit_planner.core.recovery import estimate_recovery
        pending = CompletedWorkout("p", "Pending", "home", 20, "2026-03-10")
        assert all(s.is_recovered for s in estimate_recovery([pending], now=NOW))

    def test_naive_timestamp_treated_as_utc(self):
        from circuit_planner.core.recovery import estimate_recovery
        workout = CompletedWorkout(
            "n", "Naive", "home", 20, "2026-03-10", completed_at="2026-03-10T00:00:00"
        )
        core = _status(estimate_recovery([workout], now=NOW), "core")
        assert core.percent_recovered == pytest.approx(50.0)

    def test_z_suffix_accepted(self):
        from circuit_planner.core.recovery import estimate_recovery
        workout = CompletedWorkout(
            "z", "Zulu", "home", 20, "2026-03-10", completed_at="2026-03-10T00:00:00Z"
        )
        core = _status(estimate_recovery([workout], now=NOW), "core")
        assert core.hours_until_recovered == 12

    def test_recovery_time_override(self):
        from circuit_planner.core.recovery import estimate_recovery
        statuses = estimate_recovery([_workout(24)], now=NOW, recovery_times={"core": 48})
        assert _status(statuses, "core").percent_recovered == pytest.approx(50.0)
        assert _status(statuses, "abs").is_recovered

    def test_fatigued_and_recovered_partition(self):
        from circuit_planner.core.recovery import (
            estimate_recovery,
            fatigued_muscles,
            recovered_muscles,
        )
        statuses = estimate_recovery([_workout(1)], now=NOW)
        fatigued = {s.muscle for s in fatigued_muscles(statuses)}
        assert fatigued == set(HOME_MUSCLES["short"])
        assert set(recovered_muscles(statuses)) == set(MUSCLE_GROUPS) - fatigued


class TestRecoveryMessage:

    @pytest.mark.parametrize(
        "recovered,hours,expected",
        [
            (True, 0, "Ready to train"),
            (False, 3, "Almost recovered"),
            (False, 12, "12h rest needed"),
            (False, 24, "1 day rest needed"),
            (False, 30, "2 days rest needed"),
        ],
    )
    def test_messages(self, recovered, hours, expected):
        from circuit_planner.core.recovery import recovery_message
        status = MuscleRecoveryStatus("chest", recovered, 100.0 if recovered else 10.0, hours)
        assert recovery_message(status) == expected


# ===========================================================================
# recommender.py
# ===========================================================================

class TestRecommender:
    """n <= 2 -> 1 recovered; n >= 3 -> ceil(n / 3) recovered"""

    @pytest.mark.parametrize("n,threshold", [(1, 1), (2, 1), (3, 1), (4, 2), (6, 2), (7, 3)])
    def test_threshold(self, n, threshold):
        from circuit_planner.core.recommender import recovered_threshold
        assert recovered_threshold(n) == threshold

    def test_empty_history_recommends_everything(self):
        from circuit_planner.core.recommender import recommend_categories
        assert recommend_categories([], now=NOW) == list(CATEGORIES)

    def test_fatigued_categories_excluded(self):
        # medium home -> chest, shoulders, triceps, core, abs all fatigued
        from circuit_planner.core.recommender import recommend_categories
        result = recommend_categories([_workout(1, minutes=35)], now=NOW)
        assert result == ["upper_pull", "lower_body", "cardio", "skills", "mobility"]

    def test_one_recovered_muscle_is_enough(self):
        from circuit_planner.core.recommender import can_train_category
        statuses = [
            MuscleRecoveryStatus("chest", False, 10.0, 40),
            MuscleRecoveryStatus("shoulders", False, 10.0, 30),
            MuscleRecoveryStatus("triceps", True, 100.0, 0),
        ]
        assert can_train_category("upper_push", statuses)

    def test_unmapped_category_always_trainable(self):
        from circuit_planner.core.recommender import can_train_category
        assert can_train_category("stretching", [])


# ===========================================================================
# generator.py  filtering and naming
# ===========================================================================

class TestFilterExercises:

    def test_intermediate_accepts_beginner(self):
        from circuit_planner.core.generator import accepted_difficulties
        assert set(accepted_difficulties("intermediate")) == {"intermediate", "beginner"}
        assert accepted_difficulties("beginner") == ("beginner",)
        assert accepted_difficulties("advanced") == ("advanced",)

    def test_difficulty_filter(self):
        from circuit_planner.core.generator import filter_exercises
        pool = [
            _exercise("easy", difficulty="beginner"),
            _exercise("mid", difficulty="intermediate"),
            _exercise("hard", difficulty="advanced"),
        ]
        ids = [e.exercise_id for e in filter_exercises(pool, "intermediate", ["bodyweight_only"], "gym")]
        assert ids == ["easy", "mid"]
        ids = [e.exercise_id for e in filter_exercises(pool, "advanced", ["bodyweight_only"], "gym")]
        assert ids == ["hard"]

    def test_all_equipment_required(self):
        from circuit_planner.core.generator import filter_exercises
        pool = [
            _exercise("row", equipment=("dumbbells", "bench")),
            _exercise("squat", equipment=("bodyweight_only",)),
        ]
        ids = [e.exercise_id for e in filter_exercises(pool, "beginner", ["dumbbells"], "gym")]
        assert ids == []
        ids = [e.exercise_id for e in filter_exercises(pool, "beginner", ["dumbbells", "bench"], "gym")]
        assert ids == ["row"]

    def test_home_excludes_gym_only(self):
        from circuit_planner.core.generator import filter_exercises
        pool = [
            _exercise("a", location="home"),
            _exercise("b", location="gym"),
            _exercise("c", location="both"),
        ]
        home = [e.exercise_id for e in filter_exercises(pool, "beginner", ["bodyweight_only"], "home")]
        gym = [e.exercise_id for e in filter_exercises(pool, "beginner", ["bodyweight_only"], "gym")]
        assert home == ["a", "c"]
        assert gym == ["a", "b", "c"]

    def test_sample_never_repeats(self):
        import random
        from circuit_planner.core.generator import sample_exercises
        pool = [_exercise(f"e{i}") for i in range(4)]
        picked = sample_exercises(pool, 10, random.Random(1))
        assert len(picked) == 4
        assert len({e.exercise_id for e in picked}) == 4

    def test_workout_name(self):
        from circuit_planner.core.generator import workout_name
        assert workout_name(["upper_push", "core"], "intermediate") == (
            "Intermediate upper push, core Workout"
        )
