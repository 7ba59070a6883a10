"""
Состояния для FSM (Finite State Machine) бота
"""
from enum import Enum


class BotState(str, Enum):
    """Состояния бота"""
    # Основные состояния
    IDLE = "idle"

    # Состояния создания профиля (в порядке опроса)
    PROFILE_AGE = "profile_age"
    PROFILE_GENDER = "profile_gender"
    PROFILE_HEIGHT_UNIT = "profile_height_unit"
    PROFILE_HEIGHT = "profile_height"
    PROFILE_WEIGHT_UNIT = "profile_weight_unit"
    PROFILE_WEIGHT = "profile_weight"
    PROFILE_BODY_COMPOSITION = "profile_body_composition"
    PROFILE_GOAL = "profile_goal"
    PROFILE_ACTIVITY = "profile_activity"
    PROFILE_FREQUENCY = "profile_frequency"
    PROFILE_EQUIPMENT = "profile_equipment"

    # Запись тренировки: ждем подходы текущего упражнения
    WORKOUT_SET = "workout_set"

    # Поиск продукта по названию
    FOOD_SEARCH = "food_search"

    # Состояние общения с AI
    AI_CHAT = "ai_chat"
