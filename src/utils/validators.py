"""
Валидаторы для проверки данных пользователя
"""
import re
from typing import List, Tuple, Optional, Union

from src.config import EQUIPMENT_OPTIONS
from src.database.models import CompletedSet, HeightUnit, WeightUnit
from src.utils.calculators import convert_height, convert_weight

MAX_SETS_PER_MESSAGE = 10
# 10x20, 10х20 (кириллица), 10*20
SET_SEPARATOR = re.compile(r"[xх*]", re.IGNORECASE)


class DataValidator:
    """Валидация пользовательских данных"""

    @staticmethod
    def _parse_number(value_str: str) -> float:
        return float(value_str.strip().replace(',', '.'))

    @staticmethod
    def validate_age(age_str: str) -> Tuple[bool, Optional[int], str]:
        """Валидация возраста"""
        try:
            age = int(age_str.strip())
            if 13 <= age <= 100:
                return True, age, ""
            else:
                return False, None, "Возраст должен быть от 13 до 100 лет"
        except ValueError:
            return False, None, "Пожалуйста, введите корректное число"

    @staticmethod
    def validate_weight(weight_str: str, unit: Union[WeightUnit, str] = WeightUnit.KG) -> Tuple[bool, Optional[float], str]:
        """
        Валидация веса в единицах пользователя

        Диапазон 30-300 кг проверяется после перевода в килограммы.
        """
        try:
            weight = DataValidator._parse_number(weight_str)
        except ValueError:
            return False, None, "Пожалуйста, введите корректное число"

        weight_kg = convert_weight(weight, unit, WeightUnit.KG)
        if 30 <= weight_kg <= 300:
            return True, weight, ""
        if WeightUnit(unit) == WeightUnit.LBS:
            return False, None, "Вес должен быть от 67 до 661 lbs"
        return False, None, "Вес должен быть от 30 до 300 кг"

    @staticmethod
    def validate_height(height_str: str, unit: Union[HeightUnit, str] = HeightUnit.CM) -> Tuple[bool, Optional[float], str]:
        """
        Валидация роста (см или десятичные футы, например 5.75)

        Диапазон 100-250 см проверяется после перевода в сантиметры.
        """
        try:
            height = DataValidator._parse_number(height_str)
        except ValueError:
            return False, None, "Пожалуйста, введите корректное число"

        height_cm = convert_height(height, unit, HeightUnit.CM)
        if 100 <= height_cm <= 250:
            return True, height, ""
        if HeightUnit(unit) == HeightUnit.FT_IN:
            return False, None, "Рост должен быть от 3.3 до 8.2 фута"
        return False, None, "Рост должен быть от 100 до 250 см"

    @staticmethod
    def validate_workout_frequency(frequency_str: str) -> Tuple[bool, Optional[int], str]:
        """Валидация количества тренировок в неделю"""
        try:
            frequency = int(frequency_str.strip())
            if 1 <= frequency <= 7:
                return True, frequency, ""
            else:
                return False, None, "Количество тренировок должно быть от 1 до 7 в неделю"
        except ValueError:
            return False, None, "Пожалуйста, введите корректное число"

    @staticmethod
    def validate_equipment(equipment: List[str]) -> Tuple[bool, Optional[List[str]], str]:
        """Хотя бы один вариант инвентаря из списка доступных"""
        unknown = [item for item in equipment if item not in EQUIPMENT_OPTIONS]
        if unknown:
            return False, None, f"Неизвестный инвентарь: {', '.join(unknown)}"
        if not equipment:
            return False, None, "Выберите хотя бы один вариант инвентаря"
        return True, list(equipment), ""

    @staticmethod
    def validate_calories(calories_str: str) -> Tuple[bool, Optional[int], str]:
        """Валидация калорий"""
        try:
            calories = int(calories_str)
            if 500 <= calories <= 10000:
                return True, calories, ""
            else:
                return False, None, "Калорийность должна быть от 500 до 10000 ккал"
        except ValueError:
            return False, None, "Пожалуйста, введите корректное число"

    @staticmethod
    def validate_sets(sets_str: str) -> Tuple[bool, Optional[List[CompletedSet]], str]:
        """
        Разбор подходов: "10x20 8x22,5" (повторения x вес) или "12 12 10" без веса
        """
        tokens = sets_str.split()
        if not tokens:
            return False, None, "Введите подходы, например: 10x20 10x20 8x22.5"
        if len(tokens) > MAX_SETS_PER_MESSAGE:
            return False, None, f"Не больше {MAX_SETS_PER_MESSAGE} подходов за раз"

        sets = []
        for token in tokens:
            parts = SET_SEPARATOR.split(token)
            if len(parts) > 2:
                return False, None, f"Не понял подход: {token}"
            try:
                reps = int(parts[0])
                weight = DataValidator._parse_number(parts[1]) if len(parts) == 2 else None
            except ValueError:
                return False, None, f"Не понял подход: {token}"

            if not 1 <= reps <= 100:
                return False, None, "Повторений должно быть от 1 до 100"
            if weight is not None and not 0 < weight <= 500:
                return False, None, "Вес должен быть от 0 до 500"
            sets.append(CompletedSet(reps=reps, weight=weight))

        return True, sets, ""
