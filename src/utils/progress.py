"""
Анализ прогресса по завершенным тренировкам
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
import logging

from src.database.models import CompletedSet, WorkoutSession

logger = logging.getLogger(__name__)

TREND_THRESHOLD_PERCENT = 5
IDEAL_DAYS_BETWEEN = 3
# Перерыв до 2 дней не прерывает серию
STREAK_MAX_GAP_DAYS = 2
FAVORITE_EXERCISES_LIMIT = 5
OVERLOAD_SESSIONS = 10
OVERLOAD_RECENT_SESSIONS = 3


@dataclass
class ExerciseSessionStats:
    date: date
    sets: List[CompletedSet]
    total_volume: float
    average_reps: float
    max_weight: Optional[float] = None


@dataclass
class ProgressMetrics:
    total_sessions: int = 0
    total_volume: float = 0
    average_volume: float = 0
    best_volume: float = 0
    volume_improvement: float = 0  # проценты
    strength_improvement: float = 0  # проценты
    consistency_score: float = 0  # 0-100
    last_workout: Optional[date] = None
    trend: str = "maintaining"


@dataclass
class ExerciseProgress:
    exercise_id: str
    exercise_name: str
    sessions: List[ExerciseSessionStats] = field(default_factory=list)
    metrics: ProgressMetrics = field(default_factory=ProgressMetrics)


@dataclass
class WorkoutSummary:
    total_workouts: int = 0
    total_duration: int = 0
    average_duration: float = 0
    total_volume: float = 0
    average_volume: float = 0
    workouts_per_week: float = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_workout: Optional[date] = None
    favorite_exercises: List[Dict] = field(default_factory=list)


@dataclass
class OverloadAnalysis:
    is_progressing: bool = False
    stagnant_sessions: int = 0
    recommendations: List[str] = field(default_factory=list)
    trend: str = "stable"
    next_suggestion: str = ""


def _percent_change(before: float, after: float) -> float:
    if before <= 0:
        return 0
    return (after - before) / before * 100


def _quarter_size(count: int) -> int:
    return max(1, int(count * 0.25))


def _max_weight(stats: List[ExerciseSessionStats]) -> float:
    return max((s.weight or 0 for item in stats for s in item.sets), default=0)


def calculate_metrics(sessions: List[ExerciseSessionStats]) -> ProgressMetrics:
    """
    Метрики прогресса по упражнению

    Улучшение считается как разница средних значений первой и последней
    четверти сессий (минимум по одной сессии).
    """
    if not sessions:
        return ProgressMetrics()

    total_sessions = len(sessions)
    total_volume = sum(s.total_volume for s in sessions)
    quarter = _quarter_size(total_sessions)
    first_quarter = sessions[:quarter]
    last_quarter = sessions[-quarter:]

    volume_improvement = _percent_change(
        sum(s.total_volume for s in first_quarter) / len(first_quarter),
        sum(s.total_volume for s in last_quarter) / len(last_quarter)
    )
    strength_improvement = _percent_change(_max_weight(first_quarter), _max_weight(last_quarter))

    gaps = [(sessions[i].date - sessions[i - 1].date).days for i in range(1, total_sessions)]
    average_days_between = sum(gaps) / len(gaps) if gaps else 0
    consistency_score = max(0, min(100, 100 - (average_days_between - IDEAL_DAYS_BETWEEN) * 10))

    if volume_improvement > TREND_THRESHOLD_PERCENT:
        trend = "improving"
    elif volume_improvement < -TREND_THRESHOLD_PERCENT:
        trend = "declining"
    else:
        trend = "maintaining"

    return ProgressMetrics(
        total_sessions=total_sessions,
        total_volume=total_volume,
        average_volume=total_volume / total_sessions,
        best_volume=max(s.total_volume for s in sessions),
        volume_improvement=volume_improvement,
        strength_improvement=strength_improvement,
        consistency_score=consistency_score,
        last_workout=sessions[-1].date,
        trend=trend
    )


def analyze_exercise_progress(sessions: List[WorkoutSession], exercise_id: Optional[str] = None) -> List[ExerciseProgress]:
    """
    Прогресс по каждому упражнению

    Учитываются только выполненные подходы; сессии без выполненных подходов
    в историю упражнения не попадают.
    """
    progress: Dict[str, ExerciseProgress] = {}

    for session in sorted(sessions, key=lambda s: s.date):
        for exercise in session.exercises:
            if exercise_id and exercise.exercise_id != exercise_id:
                continue

            entry = progress.setdefault(
                exercise.exercise_id,
                ExerciseProgress(exercise_id=exercise.exercise_id, exercise_name=exercise.exercise_name)
            )

            completed = [s for s in exercise.sets if s.completed]
            if not completed:
                continue

            max_weight = max(s.weight or 0 for s in completed)
            entry.sessions.append(ExerciseSessionStats(
                date=session.date,
                sets=completed,
                total_volume=sum(s.volume for s in completed),
                average_reps=sum(s.reps for s in completed) / len(completed),
                max_weight=max_weight if max_weight > 0 else None
            ))

    for entry in progress.values():
        entry.metrics = calculate_metrics(entry.sessions)

    logger.info(f"Прогресс рассчитан для {len(progress)} упражнений")
    return list(progress.values())


def _longest_streak(dates: List[date]) -> int:
    longest = 0
    current = 1
    for previous, following in zip(dates, dates[1:]):
        if (following - previous).days <= STREAK_MAX_GAP_DAYS:
            current += 1
        else:
            longest = max(longest, current)
            current = 1
    return max(longest, current)


def _current_streak(dates: List[date], today: date) -> int:
    if (today - dates[-1]).days > STREAK_MAX_GAP_DAYS:
        return 0

    streak = 1
    for i in range(len(dates) - 2, -1, -1):
        if (dates[i + 1] - dates[i]).days <= STREAK_MAX_GAP_DAYS:
            streak += 1
        else:
            break
    return streak


def summarize_workouts(sessions: List[WorkoutSession], today: Optional[date] = None) -> WorkoutSummary:
    """
    Сводка по тренировкам: объем, частота в неделю, серии и любимые упражнения
    """
    if not sessions:
        return WorkoutSummary()

    today = today or date.today()
    sessions = sorted(sessions, key=lambda s: s.date)
    total_workouts = len(sessions)
    total_duration = sum(s.duration or 0 for s in sessions)

    total_volume = 0
    frequency = Counter()
    names = {}
    for session in sessions:
        for exercise in session.exercises:
            frequency[exercise.exercise_id] += 1
            names[exercise.exercise_id] = exercise.exercise_name
            total_volume += sum(s.volume for s in exercise.sets if s.completed)

    dates = [s.date for s in sessions]
    day_span = (dates[-1] - dates[0]).days
    workouts_per_week = total_workouts / day_span * 7 if day_span > 0 else 0

    # most_common сохраняет порядок первого появления при равной частоте
    favorites = [
        {"exercise_id": exercise_id, "exercise_name": names[exercise_id], "frequency": count}
        for exercise_id, count in frequency.most_common(FAVORITE_EXERCISES_LIMIT)
    ]

    return WorkoutSummary(
        total_workouts=total_workouts,
        total_duration=total_duration,
        average_duration=total_duration / total_workouts,
        total_volume=total_volume,
        average_volume=total_volume / total_workouts,
        workouts_per_week=workouts_per_week,
        current_streak=_current_streak(dates, today),
        longest_streak=_longest_streak(dates),
        last_workout=dates[-1],
        favorite_exercises=favorites
    )


def detect_progressive_overload(
    sessions: List[WorkoutSession],
    exercise_id: str,
    limit: int = OVERLOAD_SESSIONS
) -> OverloadAnalysis:
    """
    Проверка прогрессивной перегрузки по одному упражнению

    Берутся последние `limit` тренировок с этим упражнением. Средний объем
    трех последних сравнивается со средним объемом более ранних; если
    изменение в пределах 5%, а последняя тренировка не тяжелее предыдущей,
    упражнение считается застоявшимся.

    Args:
        sessions: завершенные тренировки в любом порядке
        exercise_id: упражнение для анализа
        limit: сколько последних тренировок учитывать

    Returns:
        OverloadAnalysis с трендом и рекомендациями
    """
    volumes = []
    for session in sorted(sessions, key=lambda s: s.date):
        exercise = session.get_exercise(exercise_id)
        if exercise is None:
            continue
        volumes.append(sum(s.volume for s in exercise.sets if s.completed))
    volumes = volumes[-limit:]

    analysis = OverloadAnalysis()
    if len(volumes) < 2:
        return analysis

    recent = volumes[-OVERLOAD_RECENT_SESSIONS:]
    earlier = volumes[:max(1, len(volumes) - OVERLOAD_RECENT_SESSIONS)]
    volume_change = _percent_change(sum(earlier) / len(earlier), sum(recent) / len(recent))

    if volume_change > TREND_THRESHOLD_PERCENT:
        analysis.is_progressing = True
        analysis.trend = "improving"
        analysis.recommendations.append("Отличный прогресс! Так держать.")
    elif volume_change < -TREND_THRESHOLD_PERCENT:
        analysis.trend = "declining"
        analysis.recommendations.append("Снизь интенсивность или возьми день отдыха.")
    elif volumes[-1] <= volumes[-2]:
        analysis.stagnant_sessions += 1
        analysis.recommendations.append("В следующий раз добавь вес, повторения или подход.")
        analysis.next_suggestion = "Нужна прогрессивная перегрузка: увеличь нагрузку"

    return analysis
