"""
Генератор плана питания: жадный подбор продуктов под КБЖУ каждого приема пищи

Алгоритм детерминирован: при равенстве плотности макронутриентов порядок
определяется порядком каталога (сортировки стабильные).
"""
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Union
import logging

from src.config import MEAL_CALORIE_RATIOS, MEAL_PATTERNS
from src.database.models import (
    FoodItem,
    Goal,
    Language,
    MacroBreakdown,
    Meal,
    MealFoodItem,
    MealPlan,
    MealType,
    TDEECalculation,
)

logger = logging.getLogger(__name__)

# Если приоритетных продуктов не больше этого числа - берем весь отфильтрованный список
MIN_PRIORITIZED_FOODS = 10
MAX_FOODS_PER_MEAL = 5

MEAL_EXPLANATIONS = {
    Language.EN: {
        Goal.BULKING: {
            MealType.BREAKFAST: "High-calorie Filipino breakfast with rice, eggs, and fruits to fuel muscle-building goals. Traditional foods that support your gains.",
            MealType.LUNCH: "Protein-rich lunch with rice and ulam (viand) to support muscle growth. Familiar Filipino flavors with optimal nutrition.",
            MealType.MERIENDA: "Energy-dense Filipino snacks to maintain caloric surplus. Try turon, banana cue, or nuts for extra calories.",
            MealType.DINNER: "Balanced dinner with sabaw (soup) and vegetables for overnight muscle repair. Complete nutrition in familiar flavors.",
        },
        Goal.CUTTING: {
            MealType.BREAKFAST: "Protein-focused Filipino breakfast with less rice, more eggs and vegetables. Satisfying while supporting fat loss.",
            MealType.LUNCH: "Lean protein ulam with moderate rice and lots of vegetables. Filipino comfort food optimized for weight loss.",
            MealType.MERIENDA: "Light Filipino snacks like fresh fruits or yogurt. Avoid heavy kakanin to support your cutting goals.",
            MealType.DINNER: "Light dinner with plenty of sabaw and vegetables. Minimal rice to maintain calorie deficit while staying satisfied.",
        },
        Goal.MAINTAIN: {
            MealType.BREAKFAST: "Balanced Filipino breakfast with rice, protein, and fruits. Perfect portions for maintaining your current weight.",
            MealType.LUNCH: "Traditional lunch with rice and ulam. Balanced macros in familiar Filipino meal patterns.",
            MealType.MERIENDA: "Moderate Filipino snacks to bridge meals. Enjoy local delicacies in reasonable portions.",
            MealType.DINNER: "Casual dinner with sabaw and vegetables. Complete daily nutrition with traditional Filipino flavors.",
        },
    },
    Language.FIL: {
        Goal.BULKING: {
            MealType.BREAKFAST: "Masustansyang almusal na may rice, itlog, at prutas para sa muscle-building. Perfect para sa mga Pinoy na gusto mag-gain ng muscle mass.",
            MealType.LUNCH: "Malaking tanghalian na may rice at ulam na puno ng protein. Suportahan ang muscle growth habang nakakain ng pamilyar na pagkain.",
            MealType.MERIENDA: "Matamis o maalat na merienda para sa extra calories. Pwedeng turon, banana cue, o nuts para sa energy boost.",
            MealType.DINNER: "Balanced na hapunan na may sabaw at gulay. Magbibigay ng nutrients para sa muscle recovery habang natutulog.",
        },
        Goal.CUTTING: {
            MealType.BREAKFAST: "Light pero filling na almusal na may protein. Iwas sa sobrang rice, dagdag sa itlog at gulay para sa satiety.",
            MealType.LUNCH: "Lean protein na ulam na may konting rice lang. Maraming gulay para mabusog ka nang hindi sobrang calories.",
            MealType.MERIENDA: "Light snack lang - pwedeng prutas o yogurt. Iwas sa matamis na kakanin para sa fat loss goals.",
            MealType.DINNER: "Magaan na hapunan na may maraming sabaw at gulay. Konting rice lang para sa calorie deficit.",
        },
        Goal.MAINTAIN: {
            MealType.BREAKFAST: "Balanced na almusal na kasama ang rice, protein, at prutas. Sakto lang para sa daily energy needs.",
            MealType.LUNCH: "Normal na tanghalian na may rice at ulam. Balanced macros para sa sustained energy buong araw.",
            MealType.MERIENDA: "Moderate na snack para hindi ka magutom. Pwedeng local delicacies pero hindi sobra.",
            MealType.DINNER: "Kaswal na hapunan na may sabaw. Kumpleto ang nutrients para sa araw na ito.",
        },
    },
}

CONTEXT_NOTES = {
    "night": {
        Language.EN: "Meal times adapted for night-shift schedule (e.g., midnight meal and early-morning merienda).",
        Language.FIL: "Inangkop ang oras ng kainan para sa night shift (hal., midnight meal at maagang merienda).",
    },
    "hot": {
        Language.EN: "Hydrate more around midday; consider more soups/fruits for a refreshing merienda.",
        Language.FIL: "Mag-hydrate lalo na sa tanghali; pumili ng mas sabaw/prutas sa merienda para presko.",
    },
    "rainy": {
        Language.EN: "During rainy days, warmer dishes and soups provide comfort and satiety.",
        Language.FIL: "Sa tag-ulan, mas mainit na ulam at sabaw ang inirerekomenda para sa comfort.",
    },
}


@dataclass
class CulturalContext:
    """Контекст пользователя для подсказок по времени и климату"""
    work_schedule: str = "day"  # day, night, flex
    climate: str = "hot"  # hot, rainy, cool
    budget_level: str = "medium"


@dataclass
class MealPlanOptions:
    """Параметры генерации плана питания"""
    target_calories: float
    target_macros: MacroBreakdown
    goal: Goal
    language: Language = Language.EN
    cultural_context: CulturalContext = field(default_factory=CulturalContext)

    @classmethod
    def from_calculation(
        cls,
        calculation: TDEECalculation,
        goal: Union[Goal, str],
        language: Union[Language, str] = Language.EN
    ) -> "MealPlanOptions":
        return cls(
            target_calories=calculation.target_calories,
            target_macros=MacroBreakdown(
                protein=calculation.macros.protein.grams,
                carbs=calculation.macros.carbs.grams,
                fats=calculation.macros.fats.grams
            ),
            goal=Goal(goal),
            language=Language(language)
        )


@dataclass
class MealSuggestion:
    meal: Meal
    alternatives: List[FoodItem]
    explanation: str


def _density(food: FoodItem, macro: str) -> float:
    """Граммы макронутриента на 1 ккал"""
    if food.calories <= 0:
        return 0.0
    return getattr(food.macros, macro) / food.calories


class MealPlanGenerator:
    """Генератор дневного плана питания из каталога продуктов"""

    def generate_meal_plan(
        self,
        options: MealPlanOptions,
        catalog: List[FoodItem],
        plan_date: Optional[date] = None
    ) -> MealPlan:
        """
        Сгенерировать план питания на день: завтрак, обед, мерьенда, ужин

        Args:
            options: целевые калории, БЖУ и цель
            catalog: каталог продуктов
            plan_date: дата плана (по умолчанию сегодня)

        Returns:
            MealPlan с четырьмя приемами пищи
        """
        meals = [
            self.generate_meal(meal_type, options, catalog)
            for meal_type in MealType
        ]
        plan = MealPlan(date=plan_date or date.today(), meals=meals)

        logger.info(
            f"План питания: {plan.total_calories} ккал из {options.target_calories} "
            f"({sum(len(meal.foods) for meal in meals)} продуктов)"
        )
        return plan

    def generate_meal(self, meal_type: MealType, options: MealPlanOptions, catalog: List[FoodItem]) -> Meal:
        """Собрать один прием пищи под его долю дневной нормы"""
        return self._build_meal(meal_type, options, self.get_meal_specific_foods(meal_type, catalog))

    def _build_meal(self, meal_type: MealType, options: MealPlanOptions, foods: List[FoodItem]) -> Meal:
        ratio = MEAL_CALORIE_RATIOS[meal_type.value]
        target_calories = options.target_calories * ratio
        target_macros = MacroBreakdown(
            protein=options.target_macros.protein * ratio,
            carbs=options.target_macros.carbs * ratio,
            fats=options.target_macros.fats * ratio
        )

        selected = self.select_foods_for_macros(foods, target_calories, target_macros)

        return Meal(
            type=meal_type,
            foods=[MealFoodItem(food=food) for food in selected]
        )

    def get_meal_specific_foods(self, meal_type: MealType, catalog: List[FoodItem]) -> List[FoodItem]:
        """
        Продукты, подходящие для приема пищи

        Сначала продукты из списка типичных блюд, затем местные. Если таких
        набирается не больше MIN_PRIORITIZED_FOODS, возвращается весь
        отфильтрованный по категориям список.
        """
        pattern = MEAL_PATTERNS[meal_type.value]

        all_foods: List[FoodItem] = []
        for category in pattern["categories"]:
            all_foods.extend(food for food in catalog if food.category.lower() == category)

        common_words = [word.lower() for word in pattern["common_foods"]]
        common_meal_foods = [
            food for food in all_foods
            if any(word in food.name.lower() for word in common_words)
        ]
        local_foods = [food for food in all_foods if food.common_locally]

        prioritized: List[FoodItem] = []
        seen = set()
        for food in common_meal_foods + local_foods:
            if food.id not in seen:
                seen.add(food.id)
                prioritized.append(food)

        if len(prioritized) > MIN_PRIORITIZED_FOODS:
            return prioritized
        return all_foods

    def select_foods_for_macros(
        self,
        available_foods: List[FoodItem],
        target_calories: float,
        target_macros: MacroBreakdown
    ) -> List[FoodItem]:
        """
        Жадный подбор продуктов: белок, углеводы, жиры при необходимости,
        затем добор до 110% калорий (не более 5 продуктов)
        """
        selected: List[FoodItem] = []
        current_calories = 0
        current_fats = 0

        protein_foods = sorted(
            (food for food in available_foods if food.macros.protein > 10),
            key=lambda food: _density(food, "protein"),
            reverse=True
        )
        carb_foods = sorted(
            (food for food in available_foods if food.macros.carbs > 15),
            key=lambda food: _density(food, "carbs"),
            reverse=True
        )
        fat_foods = sorted(
            (food for food in available_foods if food.macros.fats > 5),
            key=lambda food: _density(food, "fats"),
            reverse=True
        )

        # Основной источник белка
        if protein_foods and current_calories < target_calories * 0.8:
            food = protein_foods[0]
            selected.append(food)
            current_calories += food.calories
            current_fats += food.macros.fats

        # Основной источник углеводов
        if carb_foods and current_calories < target_calories * 0.8:
            food = carb_foods[0]
            selected.append(food)
            current_calories += food.calories
            current_fats += food.macros.fats

        # Источник жиров, если их не хватает
        if fat_foods and current_fats < target_macros.fats * 0.7:
            food = fat_foods[0]
            if current_calories + food.calories <= target_calories * 1.1:
                selected.append(food)
                current_calories += food.calories
                current_fats += food.macros.fats

        selected_ids = {food.id for food in selected}
        for food in available_foods:
            if food.id in selected_ids:
                continue
            if current_calories + food.calories <= target_calories * 1.1 and len(selected) < MAX_FOODS_PER_MEAL:
                selected.append(food)
                selected_ids.add(food.id)
                current_calories += food.calories

        return selected

    def generate_meal_suggestions(
        self,
        meal_type: MealType,
        options: MealPlanOptions,
        catalog: List[FoodItem],
        count: int = 3,
        seed: Optional[int] = None
    ) -> List[MealSuggestion]:
        """
        Варианты приема пищи с альтернативами (до двух продуктов той же категории)

        Каждый вариант собирается из перемешанного списка продуктов: порядок
        влияет на выбор среди продуктов с одинаковой плотностью и на добор
        калорий, поэтому варианты различаются, если в каталоге есть из чего
        выбирать. Один и тот же seed дает одни и те же варианты.
        """
        rng = random.Random(seed)
        foods = self.get_meal_specific_foods(meal_type, catalog)
        suggestions = []

        for _ in range(count):
            shuffled = list(foods)
            rng.shuffle(shuffled)
            meal = self._build_meal(meal_type, options, shuffled)

            alternatives: List[FoodItem] = []
            for item in meal.foods:
                similar = [
                    food for food in shuffled
                    if food.category == item.food.category and food.id != item.food.id
                ]
                alternatives.extend(similar[:2])

            explanation = self.generate_meal_explanation(meal, options.goal, options.language)
            notes = self.generate_context_notes(meal_type, options)
            if notes:
                explanation += " " + notes

            suggestions.append(MealSuggestion(meal=meal, alternatives=alternatives, explanation=explanation))

        return suggestions

    def generate_meal_explanation(
        self,
        meal: Meal,
        goal: Union[Goal, str],
        language: Union[Language, str] = Language.EN
    ) -> str:
        return MEAL_EXPLANATIONS[Language(language)][Goal(goal)][meal.type]

    def generate_context_notes(self, meal_type: MealType, options: MealPlanOptions) -> str:
        """Подсказки по графику работы и климату"""
        language = options.language
        context = options.cultural_context
        notes = []

        if context.work_schedule == "night":
            notes.append(CONTEXT_NOTES["night"][language])

        if context.climate in ("hot", "rainy"):
            notes.append(CONTEXT_NOTES[context.climate][language])

        return " ".join(notes)

    def get_recommended_meal_times(self, work_schedule: str = "day", now: Optional[datetime] = None) -> Dict[str, str]:
        """Рекомендуемое время приемов пищи для дневного, ночного и гибкого графика"""
        if work_schedule == "night":
            return {
                "breakfast": "18:30",
                "lunch": "00:00",
                "merienda": "03:00",
                "dinner": "08:00",
            }

        if work_schedule == "flex":
            hour = (now or datetime.now()).hour
            start = 8 if hour < 10 else min(10, hour + 1)
            return {
                "breakfast": f"{start:02d}:00",
                "lunch": f"{(start + 4) % 24:02d}:00",
                "merienda": f"{(start + 7) % 24:02d}:30",
                "dinner": f"{(start + 11) % 24:02d}:00",
            }

        return {
            "breakfast": "07:00",
            "lunch": "12:00",
            "merienda": "15:30",
            "dinner": "19:00",
        }


def generate_meal_plan(
    target_calories: float,
    target_macros: MacroBreakdown,
    catalog: List[FoodItem],
    goal: Union[Goal, str],
    plan_date: Optional[date] = None
) -> MealPlan:
    """Сгенерировать план питания по целевым калориям и БЖУ"""
    options = MealPlanOptions(
        target_calories=target_calories,
        target_macros=target_macros,
        goal=Goal(goal)
    )
    return MealPlanGenerator().generate_meal_plan(options, catalog, plan_date)
