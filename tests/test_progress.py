from datetime import date

import pytest

from src.database.models import CompletedExercise, CompletedSet, WorkoutSession
from src.utils.progress import analyze_exercise_progress, detect_progressive_overload, summarize_workouts


def _session(day, sets, exercise_id="squat", name="Squat", month=1, duration=45):
    return WorkoutSession(
        date=date(2024, month, day),
        duration=duration,
        exercises=[CompletedExercise(exercise_id=exercise_id, exercise_name=name, sets=sets)]
    )


@pytest.fixture
def squat_sessions():
    return [
        _session(1, [CompletedSet(reps=10, weight=100)]),
        _session(3, [CompletedSet(reps=10, weight=105)]),
        _session(5, [CompletedSet(reps=5, weight=110), CompletedSet(reps=5, weight=110, completed=False)]),
        _session(7, [CompletedSet(reps=10, weight=120)]),
    ]


def test_unweighted_set_volume_is_reps():
    assert CompletedSet(reps=12).volume == 12
    assert CompletedSet(reps=8, weight=50).volume == 400


def test_exercise_progress_improving(squat_sessions):
    progress = analyze_exercise_progress(squat_sessions)
    assert len(progress) == 1

    squat = progress[0]
    assert [s.total_volume for s in squat.sessions] == [1000, 1050, 550, 1200]

    metrics = squat.metrics
    assert metrics.total_sessions == 4
    assert metrics.total_volume == 3800
    assert metrics.average_volume == 950
    assert metrics.best_volume == 1200
    assert metrics.volume_improvement == pytest.approx(20)
    assert metrics.strength_improvement == pytest.approx(20)
    assert metrics.consistency_score == 100
    assert metrics.trend == "improving"
    assert metrics.last_workout == date(2024, 1, 7)


def test_exercise_progress_declining():
    sessions = [
        _session(1, [CompletedSet(reps=10, weight=100)]),
        _session(8, [CompletedSet(reps=9, weight=100)]),
    ]
    metrics = analyze_exercise_progress(sessions)[0].metrics
    assert metrics.volume_improvement == pytest.approx(-10)
    assert metrics.consistency_score == pytest.approx(60)
    assert metrics.trend == "declining"


def test_incomplete_sets_are_ignored():
    sessions = [_session(1, [CompletedSet(reps=10, weight=100, completed=False)])]
    progress = analyze_exercise_progress(sessions)
    assert progress[0].sessions == []
    assert progress[0].metrics.total_sessions == 0


def test_filter_by_exercise(squat_sessions):
    squat_sessions.append(_session(9, [CompletedSet(reps=15)], exercise_id="plank", name="Plank"))
    progress = analyze_exercise_progress(squat_sessions, exercise_id="plank")
    assert [entry.exercise_name for entry in progress] == ["Plank"]


def test_summary_streaks_and_frequency(squat_sessions):
    summary = summarize_workouts(squat_sessions, today=date(2024, 1, 8))

    assert summary.total_workouts == 4
    assert summary.total_duration == 180
    assert summary.average_duration == 45
    assert summary.total_volume == 3800
    assert summary.current_streak == 4
    assert summary.longest_streak == 4
    assert summary.workouts_per_week == pytest.approx(4 / 6 * 7)
    assert summary.last_workout == date(2024, 1, 7)
    assert summary.favorite_exercises == [{"exercise_id": "squat", "exercise_name": "Squat", "frequency": 4}]


def test_current_streak_resets_after_long_break(squat_sessions):
    summary = summarize_workouts(squat_sessions, today=date(2024, 1, 20))
    assert summary.current_streak == 0
    assert summary.longest_streak == 4


def test_longest_streak_with_gap():
    sessions = [_session(day, [CompletedSet(reps=10)]) for day in (1, 3, 10, 11)]
    summary = summarize_workouts(sessions, today=date(2024, 1, 11))
    assert summary.longest_streak == 2
    assert summary.current_streak == 2


def test_empty_history():
    summary = summarize_workouts([])
    assert summary.total_workouts == 0
    assert summary.favorite_exercises == []


def _volumes(*weights):
    return [_session(day, [CompletedSet(reps=10, weight=weight)]) for day, weight in enumerate(weights, 1)]


def test_overload_improving_when_recent_volume_grows():
    analysis = detect_progressive_overload(_volumes(100, 100, 100, 120, 120, 120), "squat")

    # 1000 -> 1200: +20%
    assert analysis.trend == "improving"
    assert analysis.is_progressing
    assert analysis.stagnant_sessions == 0
    assert len(analysis.recommendations) == 1


def test_overload_declining():
    analysis = detect_progressive_overload(_volumes(100, 80, 80), "squat")

    assert analysis.trend == "declining"
    assert not analysis.is_progressing
    assert analysis.next_suggestion == ""


def test_overload_stagnation_suggests_more_load():
    analysis = detect_progressive_overload(_volumes(100, 100), "squat")

    assert analysis.trend == "stable"
    assert analysis.stagnant_sessions == 1
    assert analysis.next_suggestion


def test_overload_needs_two_sessions_with_the_exercise():
    sessions = _volumes(100) + [_session(9, [CompletedSet(reps=10, weight=50)], exercise_id="row", name="Row")]
    analysis = detect_progressive_overload(sessions, "squat")

    assert analysis.trend == "stable"
    assert analysis.recommendations == []


def test_overload_uses_only_latest_sessions():
    # три старые тяжелые тренировки выпадают из окна в 2 сессии
    sessions = _volumes(200, 200, 200, 100, 100)
    analysis = detect_progressive_overload(sessions, "squat", limit=2)

    assert analysis.stagnant_sessions == 1
    assert analysis.trend == "stable"
