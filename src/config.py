"""
Конфигурация приложения
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Supabase настройки
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# OpenAI
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Длительность программы тренировок по умолчанию (недели)
DEFAULT_PLAN_DURATION_WEEKS = int(os.getenv("DEFAULT_PLAN_DURATION_WEEKS", "8"))

# Коэффициенты активности
ACTIVITY_LEVELS = {
    "sedentary": {
        "multiplier": 1.2,
        "label": "Sedentary (Desk Job)",
        "description": "Little or no exercise, desk job"
    },
    "lightly-active": {
        "multiplier": 1.375,
        "label": "Lightly Active",
        "description": "Light exercise 1-3 days/week"
    },
    "moderately-active": {
        "multiplier": 1.55,
        "label": "Moderately Active",
        "description": "Moderate exercise 3-5 days/week"
    },
    "very-active": {
        "multiplier": 1.725,
        "label": "Very Active",
        "description": "Hard exercise 6-7 days/week"
    }
}

# Цели и диапазоны корректировки калорий
FITNESS_GOALS = {
    "bulking": {
        "label": "Bulking (Muscle Gain)",
        "calorie_adjustment": (200, 500)
    },
    "cutting": {
        "label": "Cutting (Fat Loss)",
        "calorie_adjustment": (-500, -300)
    },
    "maintain": {
        "label": "Maintain",
        "calorie_adjustment": (0, 0)
    }
}

# Доли калорий: белки / углеводы / жиры
MACRO_RATIOS = {
    "bulking": {"protein": 0.25, "carbs": 0.45, "fats": 0.30},
    "cutting": {"protein": 0.35, "carbs": 0.35, "fats": 0.30},
    "maintain": {"protein": 0.30, "carbs": 0.40, "fats": 0.30}
}

# 1 г белка = 4 ккал, 1 г углеводов = 4 ккал, 1 г жира = 9 ккал
CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fats": 9
}

# Распределение дневной нормы по приемам пищи
MEAL_CALORIE_RATIOS = {
    "breakfast": 0.25,
    "lunch": 0.35,
    "merienda": 0.15,
    "dinner": 0.25
}

# Категории продуктов и типичные блюда для каждого приема пищи
MEAL_PATTERNS = {
    "breakfast": {
        "categories": ["grains", "protein", "dairy", "fruits"],
        "common_foods": ["rice", "egg", "milk", "banana", "bread", "oatmeal", "pandesal", "longganisa", "tocino"]
    },
    "lunch": {
        "categories": ["protein", "grains", "vegetables", "fats"],
        "common_foods": ["rice", "chicken", "fish", "vegetables", "adobo", "sinigang", "bangus", "pork", "beef"]
    },
    "merienda": {
        "categories": ["snacks", "fruits", "dairy", "sweets"],
        "common_foods": ["banana", "crackers", "nuts", "yogurt", "biscuits", "halo-halo", "turon", "bibingka"]
    },
    "dinner": {
        "categories": ["protein", "vegetables", "grains", "soup"],
        "common_foods": ["fish", "vegetables", "rice", "soup", "chicken", "tinola", "nilaga", "pakbet"]
    }
}

# Все категории продуктов, которые используются в приемах пищи
FOOD_CATEGORIES = list(dict.fromkeys(
    category for pattern in MEAL_PATTERNS.values() for category in pattern["categories"]
))

EQUIPMENT_OPTIONS = [
    "home",
    "dumbbells",
    "barbells",
    "gym-machines",
    "resistance-bands",
    "pull-up-bar",
    "kettlebells",
    "cable-machine"
]

MUSCLE_GROUPS = [
    "chest",
    "back",
    "shoulders",
    "biceps",
    "triceps",
    "legs",
    "glutes",
    "core",
    "calves",
    "forearms"
]
