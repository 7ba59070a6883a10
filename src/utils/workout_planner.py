"""
Генератор программы тренировок: выбор сплита, подбор упражнений, объем нагрузки
"""
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union
import logging

from src.config import DEFAULT_PLAN_DURATION_WEEKS
from src.database.models import (
    ActivityLevel,
    BodyComposition,
    Difficulty,
    Exercise,
    ExerciseCategory,
    Goal,
    Language,
    SplitType,
    WorkoutDay,
    WorkoutExercise,
    WorkoutPlan,
    WorkoutSplit,
    WorkoutSplitDay,
)

logger = logging.getLogger(__name__)

MAX_WORKOUT_DAYS = 6
MINUTES_PER_SET = 1.5
WARMUP_COOLDOWN_MINUTES = 10

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

_FULL_BODY_GROUPS = ("chest", "back", "legs", "shoulders", "arms")
_UPPER_GROUPS = ("chest", "back", "shoulders", "arms")
_LOWER_GROUPS = ("legs", "glutes")
_PUSH_GROUPS = ("chest", "shoulders", "triceps")
_PULL_GROUPS = ("back", "biceps")

SPLIT_DAYS = {
    SplitType.FULL_BODY: [
        WorkoutSplitDay("Full Body A", _FULL_BODY_GROUPS, 1),
        WorkoutSplitDay("Full Body B", _FULL_BODY_GROUPS, 3),
        WorkoutSplitDay("Full Body C", _FULL_BODY_GROUPS, 5),
    ],
    SplitType.UPPER_LOWER: [
        WorkoutSplitDay("Upper Body A", _UPPER_GROUPS, 1),
        WorkoutSplitDay("Lower Body A", _LOWER_GROUPS, 2),
        WorkoutSplitDay("Upper Body B", _UPPER_GROUPS, 4),
        WorkoutSplitDay("Lower Body B", _LOWER_GROUPS, 5),
    ],
    SplitType.PUSH_PULL_LEGS: [
        WorkoutSplitDay("Push Day", _PUSH_GROUPS, 1),
        WorkoutSplitDay("Pull Day", _PULL_GROUPS, 2),
        WorkoutSplitDay("Leg Day", _LOWER_GROUPS, 3),
        WorkoutSplitDay("Push Day", _PUSH_GROUPS, 5),
        WorkoutSplitDay("Pull Day", _PULL_GROUPS, 6),
        WorkoutSplitDay("Leg Day", _LOWER_GROUPS, 0),
    ],
}

GOAL_NAMES = {
    Goal.BULKING: "Muscle Building",
    Goal.CUTTING: "Fat Loss",
    Goal.MAINTAIN: "Maintenance",
}

SPLIT_NAMES = {
    SplitType.FULL_BODY: "Full Body",
    SplitType.UPPER_LOWER: "Upper/Lower Split",
    SplitType.PUSH_PULL_LEGS: "Push/Pull/Legs",
}

# Упражнений на группу мышц и всего за тренировку
EXERCISES_PER_GROUP = {Goal.CUTTING: 2, Goal.BULKING: 3, Goal.MAINTAIN: 3}
MAX_EXERCISES_PER_DAY = {Goal.CUTTING: 6, Goal.BULKING: 8, Goal.MAINTAIN: 8}

GOAL_CATEGORIES = {
    Goal.BULKING: [ExerciseCategory.STRENGTH],
    Goal.CUTTING: [ExerciseCategory.STRENGTH, ExerciseCategory.CARDIO],
    Goal.MAINTAIN: [ExerciseCategory.STRENGTH, ExerciseCategory.CARDIO, ExerciseCategory.FLEXIBILITY],
}

OUTDOOR_CARDIO_RE = re.compile(r"run|jog|walk|cycle|bike|sprint|jumps?", re.IGNORECASE)


@dataclass(frozen=True)
class VolumePrescription:
    """Подходы, повторения и отдых (секунды)"""
    sets: int
    reps: str
    rest_period: int


_CARDIO = VolumePrescription(1, "20-30 minutes", 60)
_FLEXIBILITY = VolumePrescription(2, "30-60 seconds", 30)

# (категория, цель) -> (базовое упражнение, изолирующее упражнение)
VOLUME_TABLE: Dict[Tuple[ExerciseCategory, Goal], Tuple[VolumePrescription, VolumePrescription]] = {
    (ExerciseCategory.STRENGTH, Goal.BULKING): (
        VolumePrescription(4, "6-8", 180),
        VolumePrescription(3, "8-12", 180),
    ),
    (ExerciseCategory.STRENGTH, Goal.CUTTING): (
        VolumePrescription(3, "12-15", 90),
        VolumePrescription(3, "12-15", 90),
    ),
    (ExerciseCategory.STRENGTH, Goal.MAINTAIN): (
        VolumePrescription(3, "8-12", 120),
        VolumePrescription(3, "8-12", 120),
    ),
    (ExerciseCategory.CARDIO, Goal.BULKING): (_CARDIO, _CARDIO),
    (ExerciseCategory.CARDIO, Goal.CUTTING): (_CARDIO, _CARDIO),
    (ExerciseCategory.CARDIO, Goal.MAINTAIN): (_CARDIO, _CARDIO),
    (ExerciseCategory.FLEXIBILITY, Goal.BULKING): (_FLEXIBILITY, _FLEXIBILITY),
    (ExerciseCategory.FLEXIBILITY, Goal.CUTTING): (_FLEXIBILITY, _FLEXIBILITY),
    (ExerciseCategory.FLEXIBILITY, Goal.MAINTAIN): (_FLEXIBILITY, _FLEXIBILITY),
}


@dataclass
class WorkoutPlanOptions:
    """Параметры генерации программы"""
    frequency: int
    goal: Goal
    plan_name: Optional[str] = None
    duration_weeks: int = DEFAULT_PLAN_DURATION_WEEKS
    language: Language = Language.EN


def prescribe_volume(exercise: Exercise, goal: Union[Goal, str]) -> VolumePrescription:
    compound, isolation = VOLUME_TABLE[(exercise.category, Goal(goal))]
    return compound if exercise.is_compound else isolation


class WorkoutPlanGenerator:
    """Генератор недельной программы тренировок из каталога упражнений"""

    def generate_workout_plan(self, options: WorkoutPlanOptions, catalog: List[Exercise]) -> WorkoutPlan:
        """
        Сгенерировать программу тренировок

        Args:
            options: частота, цель, название и длительность программы
            catalog: упражнения, уже отфильтрованные по инвентарю и цели

        Returns:
            WorkoutPlan с одним недельным циклом
        """
        goal = Goal(options.goal)
        split = self.determine_workout_split(options.frequency)
        schedule = self.generate_workout_days(split, catalog, goal, options.language)

        plan = WorkoutPlan(
            name=options.plan_name or self.generate_plan_name(goal, split.type),
            goal=goal,
            duration_weeks=options.duration_weeks,
            schedule=schedule,
            split_type=split.type
        )

        logger.info(
            f"Программа '{plan.name}': {len(schedule)} дн., "
            f"{sum(len(day.exercises) for day in schedule)} упражнений"
        )
        return plan

    def determine_workout_split(self, frequency: int) -> WorkoutSplit:
        """
        Сплит по частоте: до 3 дней - full body, 4 - верх/низ, 5+ - push/pull/legs (максимум 6 дней)
        """
        frequency = max(frequency, 0)
        if frequency <= 3:
            split_type = SplitType.FULL_BODY
        elif frequency == 4:
            split_type = SplitType.UPPER_LOWER
        else:
            split_type = SplitType.PUSH_PULL_LEGS

        days = SPLIT_DAYS[split_type][:min(frequency, MAX_WORKOUT_DAYS)]
        return WorkoutSplit(type=split_type, days=list(days))

    def generate_workout_days(
        self,
        split: WorkoutSplit,
        catalog: List[Exercise],
        goal: Goal,
        language: Language = Language.EN
    ) -> List[WorkoutDay]:
        workout_days = []

        for split_day in split.days:
            day_pool = self.filter_exercises_for_day(catalog, split_day.muscle_groups)
            selected = self.select_exercises_for_day(day_pool, split_day.muscle_groups, goal)
            exercises = [self.create_workout_exercise(exercise, goal, language) for exercise in selected]

            workout_days.append(WorkoutDay(
                day_of_week=split_day.day_of_week,
                exercises=exercises,
                estimated_duration=self.calculate_estimated_duration(exercises),
                name=split_day.name
            ))

        return workout_days

    def filter_exercises_for_day(self, catalog: List[Exercise], muscle_groups) -> List[Exercise]:
        """Упражнения, у которых хотя бы одна группа мышц совпадает (по вхождению) с группами дня"""
        targets = [group.lower() for group in muscle_groups]
        return [
            exercise for exercise in catalog
            if any(
                tag.lower() in target or target in tag.lower()
                for tag in exercise.muscle_groups
                for target in targets
            )
        ]

    def select_exercises_for_day(self, available: List[Exercise], target_groups, goal: Goal) -> List[Exercise]:
        """
        Подбор упражнений на день

        Для каждой целевой группы берутся первые N упражнений (базовые впереди,
        в остальном порядок каталога), уже выбранные на этот день отбрасываются.
        """
        per_group = EXERCISES_PER_GROUP[goal]
        selected: List[Exercise] = []
        selected_ids = set()

        by_group: Dict[str, List[Exercise]] = defaultdict(list)
        for exercise in available:
            for tag in exercise.muscle_groups:
                by_group[tag.lower()].append(exercise)

        for target in target_groups:
            group_exercises = sorted(by_group.get(target.lower(), []), key=lambda e: 0 if e.is_compound else 1)
            for exercise in group_exercises[:per_group]:
                if exercise.id not in selected_ids:
                    selected.append(exercise)
                    selected_ids.add(exercise.id)

        return selected[:MAX_EXERCISES_PER_DAY[goal]]

    def create_workout_exercise(self, exercise: Exercise, goal: Goal, language: Language = Language.EN) -> WorkoutExercise:
        prescription = prescribe_volume(exercise, goal)
        return WorkoutExercise(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            sets=prescription.sets,
            reps=prescription.reps,
            rest_period=prescription.rest_period,
            notes=self.generate_exercise_notes(exercise, goal, language)
        )

    def generate_exercise_notes(self, exercise: Exercise, goal: Goal, language: Language = Language.EN) -> Optional[str]:
        """Подсказки к упражнению: прогрессия, отдых, техника, питьевой режим"""
        notes = []

        if goal == Goal.BULKING and exercise.is_compound:
            notes.append("Focus on progressive overload - increase weight when you can complete all sets")

        if goal == Goal.CUTTING:
            notes.append("Keep rest periods short to maintain intensity")

        if exercise.difficulty == Difficulty.BEGINNER and exercise.beginner_modifications:
            notes.append(f"Beginner tip: {exercise.beginner_modifications[0]}")

        if exercise.form_tips:
            notes.append(f"Form tip: {exercise.form_tips[0]}")

        if exercise.category == ExerciseCategory.CARDIO and OUTDOOR_CARDIO_RE.search(exercise.name):
            notes.append(
                "Sa mainit na panahon, mag-cardio nang mas maaga o mas late at uminom ng sapat na tubig"
                if language == Language.FIL
                else "In hot weather, schedule cardio earlier or later and hydrate well"
            )
        elif exercise.category == ExerciseCategory.STRENGTH:
            notes.append(
                "Dagdagan ang tubig sa pagitan ng sets lalo na kapag mainit ang panahon"
                if language == Language.FIL
                else "Increase water intake between sets, especially in hot weather"
            )

        return ". ".join(notes) or None

    def calculate_estimated_duration(self, exercises: List[WorkoutExercise]) -> int:
        """Оценка длительности: 1.5 мин на подход + отдых между подходами + 10 мин разминка/заминка"""
        total_minutes = 0.0
        for exercise in exercises:
            rest_minutes = exercise.rest_period * (exercise.sets - 1) / 60
            total_minutes += exercise.sets * MINUTES_PER_SET + rest_minutes

        total_minutes += WARMUP_COOLDOWN_MINUTES
        return int(total_minutes + 0.5)

    def generate_plan_name(self, goal: Goal, split_type: SplitType) -> str:
        return f"{GOAL_NAMES[goal]} - {SPLIT_NAMES[split_type]}"

    @staticmethod
    def determine_user_difficulty(
        activity_level: Union[ActivityLevel, str],
        body_composition: Union[BodyComposition, str]
    ) -> Difficulty:
        """Уровень сложности по активности и телосложению"""
        activity_level = ActivityLevel(activity_level)
        body_composition = BodyComposition(body_composition)

        if (activity_level == ActivityLevel.SEDENTARY
                or body_composition in (BodyComposition.SKINNY, BodyComposition.OBESE)):
            return Difficulty.BEGINNER
        if activity_level == ActivityLevel.VERY_ACTIVE and body_composition == BodyComposition.AVERAGE:
            return Difficulty.ADVANCED
        return Difficulty.INTERMEDIATE

    @staticmethod
    def categories_for_goal(goal: Union[Goal, str]) -> List[ExerciseCategory]:
        """Категории упражнений, подходящие для цели"""
        return list(GOAL_CATEGORIES[Goal(goal)])

    @staticmethod
    def get_day_name(day_of_week: int, schedule: List[WorkoutDay]) -> str:
        """Название дня для отображения: 'Monday Workout A' при нескольких тренировках в неделю"""
        index = next((i for i, day in enumerate(schedule) if day.day_of_week == day_of_week), None)
        if index is not None and any(day.day_of_week != day_of_week for day in schedule):
            return f"{DAY_NAMES[day_of_week]} Workout {chr(65 + index)}"
        return DAY_NAMES[day_of_week]


def generate_workout_plan(
    frequency: int,
    catalog: List[Exercise],
    goal: Union[Goal, str],
    plan_name: Optional[str] = None,
    duration_weeks: int = DEFAULT_PLAN_DURATION_WEEKS
) -> WorkoutPlan:
    """Сгенерировать программу тренировок по частоте и цели"""
    options = WorkoutPlanOptions(
        frequency=frequency,
        goal=Goal(goal),
        plan_name=plan_name,
        duration_weeks=duration_weeks
    )
    return WorkoutPlanGenerator().generate_workout_plan(options, catalog)
