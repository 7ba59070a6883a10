"""
Модели данных: перечисления, расчеты, каталоги продуктов и упражнений, планы
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, List, Union, Any


class Gender(str, Enum):
    """Пол (используется только как поправка в формуле BMR)"""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Уровень физической активности"""
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly-active"
    MODERATELY_ACTIVE = "moderately-active"
    VERY_ACTIVE = "very-active"


class Goal(str, Enum):
    """Цель пользователя"""
    BULKING = "bulking"
    CUTTING = "cutting"
    MAINTAIN = "maintain"


class BodyComposition(str, Enum):
    SKINNY = "skinny"
    SKINNY_FAT = "skinny-fat"
    AVERAGE = "average"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class MealType(str, Enum):
    """Приемы пищи (merienda - полдник между обедом и ужином)"""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    MERIENDA = "merienda"
    DINNER = "dinner"


class ExerciseCategory(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SplitType(str, Enum):
    """Схема тренировочной недели"""
    FULL_BODY = "full-body"
    UPPER_LOWER = "upper-lower"
    PUSH_PULL_LEGS = "push-pull-legs"


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


class HeightUnit(str, Enum):
    CM = "cm"
    FT_IN = "ft-in"  # десятичные футы: 5.75 = 5'9"


class Language(str, Enum):
    EN = "en"
    FIL = "fil"


# ===== РАСЧЕТ КАЛОРИЙ =====

@dataclass(frozen=True)
class UserMetrics:
    """Входные данные для расчета метаболизма (метрическая система)"""
    age: int
    gender: Gender
    weight_kg: float
    height_cm: float
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class MacroTarget:
    """Норма одного макронутриента"""
    grams: int
    calories: int


@dataclass(frozen=True)
class MacroTargets:
    """Нормы белков, углеводов и жиров"""
    protein: MacroTarget
    carbs: MacroTarget
    fats: MacroTarget

    @property
    def total_calories(self) -> int:
        return self.protein.calories + self.carbs.calories + self.fats.calories


@dataclass(frozen=True)
class TDEECalculation:
    """Результат полного расчета: BMR, TDEE, целевая калорийность и БЖУ"""
    bmr: int
    tdee: int
    target_calories: int
    macros: MacroTargets

    def to_profile_fields(self) -> Dict[str, int]:
        """Плоская копия расчета для хранения в профиле"""
        return {
            "bmr": self.bmr,
            "tdee": self.tdee,
            "target_calories": self.target_calories,
            "protein_grams": self.macros.protein.grams,
            "protein_calories": self.macros.protein.calories,
            "carbs_grams": self.macros.carbs.grams,
            "carbs_calories": self.macros.carbs.calories,
            "fats_grams": self.macros.fats.grams,
            "fats_calories": self.macros.fats.calories,
        }


# ===== ПИТАНИЕ =====

@dataclass
class MacroBreakdown:
    """БЖУ в граммах"""
    protein: float = 0
    carbs: float = 0
    fats: float = 0

    def __add__(self, other: "MacroBreakdown") -> "MacroBreakdown":
        return MacroBreakdown(
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats
        )

    def to_dict(self) -> Dict[str, float]:
        return {"protein": self.protein, "carbs": self.carbs, "fats": self.fats}


@dataclass
class FoodItem:
    """Продукт из каталога (только чтение)"""
    id: str
    name: str
    category: str
    serving_size: str
    calories: int
    macros: MacroBreakdown
    common_locally: bool = False
    name_filipino: Optional[str] = None
    estimated_cost: Optional[float] = None
    regions: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "FoodItem":
        """Создать продукт из строки таблицы filipino_foods"""
        return cls(
            id=str(record["id"]),
            name=record["name"],
            category=record.get("category", ""),
            serving_size=record.get("serving_size") or "",
            calories=record.get("calories") or 0,
            macros=MacroBreakdown(
                protein=record.get("protein") or 0,
                carbs=record.get("carbs") or 0,
                fats=record.get("fats") or 0
            ),
            common_locally=bool(record.get("common_in_ph", False)),
            name_filipino=record.get("name_filipino"),
            estimated_cost=record.get("estimated_cost"),
            regions=list(record.get("regions") or [])
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "name_filipino": self.name_filipino,
            "category": self.category,
            "serving_size": self.serving_size,
            "calories": self.calories,
            "macros": self.macros.to_dict(),
            "common_in_ph": self.common_locally,
            "estimated_cost": self.estimated_cost,
        }


@dataclass
class MealFoodItem:
    """Выбранный продукт с количеством порций"""
    food: FoodItem
    quantity: int = 1
    unit: str = "serving"

    @property
    def calories(self):
        return self.food.calories * self.quantity

    @property
    def macros(self) -> MacroBreakdown:
        return MacroBreakdown(
            protein=self.food.macros.protein * self.quantity,
            carbs=self.food.macros.carbs * self.quantity,
            fats=self.food.macros.fats * self.quantity
        )


@dataclass
class Meal:
    """Прием пищи. Итоги всегда пересчитываются из выбранных продуктов"""
    type: MealType
    foods: List[MealFoodItem] = field(default_factory=list)

    @property
    def calories(self):
        return sum(item.calories for item in self.foods)

    @property
    def macros(self) -> MacroBreakdown:
        total = MacroBreakdown()
        for item in self.foods:
            total = total + item.macros
        return total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "foods": [
                {**item.food.to_dict(), "quantity": item.quantity, "unit": item.unit}
                for item in self.foods
            ],
            "calories": self.calories,
            "macros": self.macros.to_dict(),
        }


@dataclass
class MealPlan:
    """План питания на день: ровно четыре приема пищи"""
    date: date
    meals: List[Meal]
    id: Optional[str] = None

    @property
    def total_calories(self):
        return sum(meal.calories for meal in self.meals)

    @property
    def total_macros(self) -> MacroBreakdown:
        total = MacroBreakdown()
        for meal in self.meals:
            total = total + meal.macros
        return total

    def get_meal(self, meal_type: MealType) -> Optional[Meal]:
        for meal in self.meals:
            if meal.type == meal_type:
                return meal
        return None


# ===== ТРЕНИРОВКИ =====

@dataclass
class Exercise:
    """Упражнение из каталога (только чтение)"""
    id: str
    name: str
    category: ExerciseCategory
    muscle_groups: List[str]
    equipment: List[str]
    difficulty: Difficulty
    instructions: List[str] = field(default_factory=list)
    form_tips: List[str] = field(default_factory=list)
    common_mistakes: List[str] = field(default_factory=list)
    beginner_modifications: List[str] = field(default_factory=list)
    name_filipino: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_compound(self) -> bool:
        """Базовое (многосуставное) упражнение - задействует больше одной группы"""
        return len(self.muscle_groups) > 1

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Exercise":
        """Создать упражнение из строки таблицы exercises"""
        modifications = record.get("modifications") or {}
        return cls(
            id=str(record["id"]),
            name=record["name"],
            category=ExerciseCategory(record["category"]),
            muscle_groups=list(record.get("muscle_groups") or []),
            equipment=list(record.get("equipment") or []),
            difficulty=Difficulty(record.get("difficulty") or "beginner"),
            instructions=list(record.get("instructions") or []),
            form_tips=list(record.get("form_tips") or []),
            common_mistakes=list(record.get("common_mistakes") or []),
            beginner_modifications=list(modifications.get("beginner") or []),
            name_filipino=record.get("name_filipino"),
            description=record.get("description")
        )


@dataclass
class WorkoutExercise:
    """Упражнение в тренировочном дне с подходами и отдыхом"""
    exercise_id: str
    sets: int
    reps: Union[int, str]  # "8-12" для диапазонов
    rest_period: int  # секунды
    notes: Optional[str] = None
    exercise_name: Optional[str] = None
    weight: Optional[float] = None


@dataclass
class WorkoutDay:
    """Тренировочный день"""
    day_of_week: int  # 0 - воскресенье
    exercises: List[WorkoutExercise]
    estimated_duration: int  # минуты
    name: str = ""


@dataclass
class WorkoutPlan:
    """Недельный цикл тренировок"""
    name: str
    goal: Goal
    duration_weeks: int
    schedule: List[WorkoutDay]
    split_type: SplitType
    id: Optional[str] = None


@dataclass(frozen=True)
class WorkoutSplitDay:
    name: str
    muscle_groups: tuple
    day_of_week: int


@dataclass
class WorkoutSplit:
    type: SplitType
    days: List[WorkoutSplitDay]


# ===== ПРОГРЕСС =====

@dataclass
class CompletedSet:
    reps: int
    weight: Optional[float] = None
    completed: bool = True

    @property
    def volume(self) -> float:
        """Объем подхода: повторения x вес (или только повторения без веса)"""
        return self.reps * self.weight if self.weight else self.reps


@dataclass
class CompletedExercise:
    exercise_id: str
    exercise_name: str
    sets: List[CompletedSet] = field(default_factory=list)


@dataclass
class WorkoutSession:
    """Тренировка: записанные подходы по упражнениям"""
    date: date
    duration: int  # минуты
    exercises: List[CompletedExercise] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None  # название дня программы

    def get_exercise(self, exercise_id: str) -> Optional[CompletedExercise]:
        return next((e for e in self.exercises if str(e.exercise_id) == str(exercise_id)), None)

    @property
    def total_volume(self) -> float:
        return sum(s.volume for e in self.exercises for s in e.sets if s.completed)


# ===== ПРОФИЛЬ =====

@dataclass
class UserProfile:
    """Профиль пользователя с физическими параметрами"""
    user_id: int
    age: int
    gender: Gender
    height_value: float
    height_unit: HeightUnit
    weight_value: float
    weight_unit: WeightUnit
    body_composition: BodyComposition
    goal: Goal
    activity_level: ActivityLevel
    workout_frequency: int
    available_equipment: List[str]
    language: Language = Language.EN
    target_calories: Optional[int] = None
    protein_grams: Optional[int] = None
    carbs_grams: Optional[int] = None
    fats_grams: Optional[int] = None
    id: Optional[int] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserProfile":
        """Создать профиль из строки таблицы user_profiles"""
        return cls(
            id=record.get("id"),
            user_id=record["user_id"],
            age=record["age"],
            gender=Gender(record["gender"]),
            height_value=record["height_value"],
            height_unit=HeightUnit(record.get("height_unit") or "cm"),
            weight_value=record["weight_value"],
            weight_unit=WeightUnit(record.get("weight_unit") or "kg"),
            body_composition=BodyComposition(record.get("body_composition") or "average"),
            goal=Goal(record["goal"]),
            activity_level=ActivityLevel(record["activity_level"]),
            workout_frequency=record.get("workout_frequency") or 3,
            available_equipment=list(record.get("available_equipment") or []),
            language=Language(record.get("language") or "en"),
            target_calories=record.get("target_calories"),
            protein_grams=record.get("protein_grams"),
            carbs_grams=record.get("carbs_grams"),
            fats_grams=record.get("fats_grams")
        )
