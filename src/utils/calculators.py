"""
Калькуляторы метаболизма, КБЖУ и перевода единиц
"""
import math
from typing import Union
import logging

from src.config import ACTIVITY_LEVELS, FITNESS_GOALS, MACRO_RATIOS, CALORIES_PER_GRAM
from src.database.models import (
    ActivityLevel,
    Gender,
    Goal,
    HeightUnit,
    MacroTarget,
    MacroTargets,
    TDEECalculation,
    UserMetrics,
    UserProfile,
    WeightUnit,
)

logger = logging.getLogger(__name__)

KG_PER_LB = 0.453592
LBS_PER_KG = 2.20462
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12


def round_half_up(value: float) -> int:
    """Округление до целого, .5 всегда вверх (не банковское округление)"""
    return int(math.floor(value + 0.5))


class NutritionCalculator:
    """Калькулятор для расчета BMR, TDEE и КБЖУ"""

    @staticmethod
    def calculate_bmr(age: int, gender: Union[Gender, str], weight_kg: float, height_cm: float) -> float:
        """
        Расчет базового метаболизма по формуле Миффлина-Сан Жеора

        Args:
            age: возраст в годах
            gender: пол ('male' или 'female')
            weight_kg: вес в кг
            height_cm: рост в см

        Returns:
            BMR в ккал/день (без округления)
        """
        gender = Gender(gender)
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        bmr = base + 5 if gender == Gender.MALE else base - 161

        logger.info(f"BMR (Mifflin): {bmr:.2f} ккал для {gender.value}, {age} лет, {weight_kg} кг, {height_cm} см")
        return bmr

    @staticmethod
    def calculate_tdee(bmr: float, activity_level: Union[ActivityLevel, str]) -> float:
        """
        Расчет общего расхода энергии (TDEE) с учетом уровня активности

        Неизвестный уровень активности - ошибка вызывающего кода (ValueError),
        значение по умолчанию не подставляется.
        """
        level = ActivityLevel(activity_level)
        multiplier = ACTIVITY_LEVELS[level.value]["multiplier"]
        tdee = bmr * multiplier

        logger.info(f"TDEE: {tdee:.2f} ккал (BMR: {bmr} * {multiplier})")
        return tdee

    @staticmethod
    def adjust_calories_for_goal(tdee: float, goal: Union[Goal, str]) -> int:
        """
        Целевая калорийность: TDEE плюс середина диапазона корректировки цели

        bulking: +350, cutting: -400, maintain: 0
        """
        goal = Goal(goal)
        low, high = FITNESS_GOALS[goal.value]["calorie_adjustment"]
        target = round_half_up(tdee + (low + high) / 2)

        logger.info(f"Целевая калорийность: {target} ккал для цели '{goal.value}'")
        return target

    @staticmethod
    def calculate_macros(target_calories: int, goal: Union[Goal, str]) -> MacroTargets:
        """
        Расчет макронутриентов по долям калорий цели

        Каждое значение (граммы и калории) округляется отдельно, поэтому сумма
        калорий БЖУ может отличаться от target_calories на 1-2 ккал.
        """
        goal = Goal(goal)
        ratios = MACRO_RATIOS[goal.value]

        def macro(name: str) -> MacroTarget:
            calories = target_calories * ratios[name]
            return MacroTarget(
                grams=round_half_up(calories / CALORIES_PER_GRAM[name]),
                calories=round_half_up(calories)
            )

        macros = MacroTargets(protein=macro("protein"), carbs=macro("carbs"), fats=macro("fats"))

        logger.info(
            f"Макронутриенты: Б:{macros.protein.grams}г, У:{macros.carbs.grams}г, Ж:{macros.fats.grams}г"
        )
        return macros

    @staticmethod
    def calculate_complete_tdee(
        age: int,
        gender: Union[Gender, str],
        weight_kg: float,
        height_cm: float,
        activity_level: Union[ActivityLevel, str],
        goal: Union[Goal, str]
    ) -> TDEECalculation:
        """
        Полный расчет: BMR -> TDEE -> целевая калорийность -> БЖУ

        Каждый шаг получает округленный результат предыдущего.
        """
        bmr = round_half_up(NutritionCalculator.calculate_bmr(age, gender, weight_kg, height_cm))
        tdee = round_half_up(NutritionCalculator.calculate_tdee(bmr, activity_level))
        target_calories = NutritionCalculator.adjust_calories_for_goal(tdee, goal)
        macros = NutritionCalculator.calculate_macros(target_calories, goal)

        return TDEECalculation(
            bmr=bmr,
            tdee=tdee,
            target_calories=target_calories,
            macros=macros
        )

    @staticmethod
    def calculate_for_metrics(metrics: UserMetrics) -> TDEECalculation:
        return NutritionCalculator.calculate_complete_tdee(
            metrics.age,
            metrics.gender,
            metrics.weight_kg,
            metrics.height_cm,
            metrics.activity_level,
            metrics.goal
        )

    @staticmethod
    def metrics_from_profile(profile: UserProfile) -> UserMetrics:
        """Перевести профиль (в единицах пользователя) в метрические данные для расчета"""
        return UserMetrics(
            age=profile.age,
            gender=profile.gender,
            weight_kg=convert_weight(profile.weight_value, profile.weight_unit, WeightUnit.KG),
            height_cm=convert_height(profile.height_value, profile.height_unit, HeightUnit.CM),
            activity_level=profile.activity_level,
            goal=profile.goal
        )

    @staticmethod
    def get_methodology_explanation(
        activity_level: Union[ActivityLevel, str],
        goal: Union[Goal, str],
        calculation: TDEECalculation
    ) -> str:
        """
        Генерация объяснения методики расчета
        """
        level = ActivityLevel(activity_level)
        goal = Goal(goal)
        activity = ACTIVITY_LEVELS[level.value]
        low, high = FITNESS_GOALS[goal.value]["calorie_adjustment"]
        adjustment = (low + high) / 2

        explanation = f"""📊 МЕТОДИКА РАСЧЕТА:

🔹 Базовый метаболизм (BMR): {calculation.bmr} ккал/день
   Рассчитан по формуле Миффлина-Сан Жеора.

🔹 Общий расход энергии (TDEE): {calculation.tdee} ккал/день
   BMR умножен на коэффициент активности {activity['multiplier']} ({activity['label']})

🔹 Целевая калорийность: {calculation.target_calories} ккал/день
   Корректировка под цель {FITNESS_GOALS[goal.value]['label']}: {adjustment:+.0f} ккал

🔹 Распределение БЖУ:
   Белки {MACRO_RATIOS[goal.value]['protein']:.0%}, углеводы {MACRO_RATIOS[goal.value]['carbs']:.0%}, жиры {MACRO_RATIOS[goal.value]['fats']:.0%} от калорий."""

        return explanation


def convert_weight(value: float, from_unit: Union[WeightUnit, str], to_unit: Union[WeightUnit, str]) -> float:
    """
    Перевод веса между кг и фунтами
    """
    from_unit = WeightUnit(from_unit)
    to_unit = WeightUnit(to_unit)
    if from_unit == to_unit:
        return value
    if from_unit == WeightUnit.LBS:
        return value * KG_PER_LB
    return value * LBS_PER_KG


def convert_height(value: float, from_unit: Union[HeightUnit, str], to_unit: Union[HeightUnit, str]) -> float:
    """
    Перевод роста между см и десятичными футами

    Дробная часть футов - доля фута, а не дюймы: 5.75 = 5 футов 9 дюймов.
    """
    from_unit = HeightUnit(from_unit)
    to_unit = HeightUnit(to_unit)
    if from_unit == to_unit:
        return value

    if from_unit == HeightUnit.FT_IN:
        feet = math.floor(value)
        inches = (value - feet) * INCHES_PER_FOOT
        return (feet * INCHES_PER_FOOT + inches) * CM_PER_INCH

    total_inches = value / CM_PER_INCH
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    remaining_inches = total_inches % INCHES_PER_FOOT
    return feet + remaining_inches / INCHES_PER_FOOT
