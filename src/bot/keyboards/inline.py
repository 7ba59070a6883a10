"""
Inline клавиатуры для навигации в боте
"""
from typing import Iterable, List
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from src.config import ACTIVITY_LEVELS, EQUIPMENT_OPTIONS, FITNESS_GOALS, FOOD_CATEGORIES, MUSCLE_GROUPS


class InlineKeyboards:
    """Класс для создания inline клавиатур"""

    @staticmethod
    def main_menu() -> InlineKeyboardMarkup:
        """Главное меню бота"""
        keyboard = [
            [
                InlineKeyboardButton("📊 Мой профиль", callback_data="profile"),
                InlineKeyboardButton("🎯 Мой план КБЖУ", callback_data="nutrition_plan")
            ],
            [
                InlineKeyboardButton("🍽 Меню на день", callback_data="meal_plan"),
                InlineKeyboardButton("👨‍🍳 Варианты блюд", callback_data="meal_suggestions")
            ],
            [
                InlineKeyboardButton("🏋️ Программа тренировок", callback_data="workout_plan"),
                InlineKeyboardButton("📈 Прогресс", callback_data="progress")
            ],
            [
                InlineKeyboardButton("📝 Записать тренировку", callback_data="log_workout"),
                InlineKeyboardButton("📋 Мои планы", callback_data="my_plans")
            ],
            [
                InlineKeyboardButton("🥘 Продукты", callback_data="foods"),
                InlineKeyboardButton("💪 Упражнения", callback_data="exercises")
            ],
            [
                InlineKeyboardButton("💬 Спросить тренера", callback_data="ai_chat")
            ],
            [
                InlineKeyboardButton("⚙️ Настройки", callback_data="settings"),
                InlineKeyboardButton("ℹ️ Помощь", callback_data="help")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def gender_selection() -> InlineKeyboardMarkup:
        """Выбор пола"""
        keyboard = [
            [
                InlineKeyboardButton("👨 Мужской", callback_data="gender_male"),
                InlineKeyboardButton("👩 Женский", callback_data="gender_female")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def height_unit_selection() -> InlineKeyboardMarkup:
        """Единицы роста"""
        keyboard = [
            [
                InlineKeyboardButton("📏 Сантиметры", callback_data="hunit_cm"),
                InlineKeyboardButton("📐 Футы (5.75)", callback_data="hunit_ft-in")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def weight_unit_selection() -> InlineKeyboardMarkup:
        """Единицы веса"""
        keyboard = [
            [
                InlineKeyboardButton("⚖️ Килограммы", callback_data="wunit_kg"),
                InlineKeyboardButton("⚖️ Фунты", callback_data="wunit_lbs")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def body_composition() -> InlineKeyboardMarkup:
        """Выбор телосложения"""
        keyboard = [
            [InlineKeyboardButton("🦴 Худощавое", callback_data="body_skinny")],
            [InlineKeyboardButton("🍩 Худощавое с жирком", callback_data="body_skinny-fat")],
            [InlineKeyboardButton("🙂 Среднее", callback_data="body_average")],
            [InlineKeyboardButton("🐻 Лишний вес", callback_data="body_overweight")],
            [InlineKeyboardButton("🐘 Ожирение", callback_data="body_obese")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def goal_selection() -> InlineKeyboardMarkup:
        """Выбор цели"""
        icons = {"bulking": "📈", "cutting": "📉", "maintain": "⚖️"}
        keyboard = [
            [InlineKeyboardButton(f"{icons[key]} {goal['label']}", callback_data=f"goal_{key}")]
            for key, goal in FITNESS_GOALS.items()
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def activity_level() -> InlineKeyboardMarkup:
        """Выбор уровня активности"""
        keyboard = [
            [InlineKeyboardButton(f"{level['label']} - {level['description']}", callback_data=f"activity_{key}")]
            for key, level in ACTIVITY_LEVELS.items()
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def workout_frequency() -> InlineKeyboardMarkup:
        """Количество тренировок в неделю"""
        keyboard = [
            [InlineKeyboardButton(str(days), callback_data=f"freq_{days}") for days in range(1, 5)],
            [InlineKeyboardButton(str(days), callback_data=f"freq_{days}") for days in range(5, 8)]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def equipment_selection(selected: Iterable[str]) -> InlineKeyboardMarkup:
        """Выбор инвентаря (повторное нажатие снимает выбор)"""
        selected = set(selected)
        keyboard = [
            [InlineKeyboardButton(
                f"{'✅' if item in selected else '▫️'} {item}",
                callback_data=f"equip_{item}"
            )]
            for item in EQUIPMENT_OPTIONS
        ]
        keyboard.append([InlineKeyboardButton("💾 Готово", callback_data="equip_done")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def nutrition_plan_actions() -> InlineKeyboardMarkup:
        """Действия с планом КБЖУ"""
        keyboard = [
            [
                InlineKeyboardButton("🍽 Меню на день", callback_data="meal_plan"),
                InlineKeyboardButton("👨‍🍳 Варианты блюд", callback_data="meal_suggestions")
            ],
            [
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def meal_plan_actions() -> InlineKeyboardMarkup:
        """Действия с меню на день"""
        keyboard = [
            [
                InlineKeyboardButton("💾 Сохранить", callback_data="save_meal_plan"),
                InlineKeyboardButton("🔄 Заново", callback_data="meal_plan")
            ],
            [
                InlineKeyboardButton("💡 Советы по питанию", callback_data="meal_tips"),
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def meal_type_selection() -> InlineKeyboardMarkup:
        """Выбор типа приема пищи"""
        keyboard = [
            [
                InlineKeyboardButton("🌅 Завтрак", callback_data="suggest_breakfast"),
                InlineKeyboardButton("🌞 Обед", callback_data="suggest_lunch")
            ],
            [
                InlineKeyboardButton("🍌 Мерьенда", callback_data="suggest_merienda"),
                InlineKeyboardButton("🌆 Ужин", callback_data="suggest_dinner")
            ],
            [
                InlineKeyboardButton("🔙 Назад", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def workout_plan_actions() -> InlineKeyboardMarkup:
        """Действия с программой тренировок"""
        keyboard = [
            [
                InlineKeyboardButton("💾 Сохранить", callback_data="save_workout_plan"),
                InlineKeyboardButton("💡 Советы тренера", callback_data="workout_tips")
            ],
            [
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def progress_actions() -> InlineKeyboardMarkup:
        """Действия на экране прогресса"""
        keyboard = [
            [InlineKeyboardButton("🗓 Обзор месяца от тренера", callback_data="monthly_review")],
            [InlineKeyboardButton("📜 История тренировок", callback_data="workout_history")],
            [InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def workout_day_selection(day_names: List[str]) -> InlineKeyboardMarkup:
        """Выбор дня программы для записи тренировки"""
        keyboard = [
            [InlineKeyboardButton(f"🏋️ {name}", callback_data=f"logday_{index}")]
            for index, name in enumerate(day_names)
        ]
        keyboard.append([InlineKeyboardButton("🔙 Назад", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def workout_set_actions() -> InlineKeyboardMarkup:
        """Действия во время записи тренировки"""
        keyboard = [
            [
                InlineKeyboardButton("⏭ Пропустить", callback_data="wset_skip"),
                InlineKeyboardButton("🏁 Завершить", callback_data="wset_finish")
            ],
            [
                InlineKeyboardButton("❌ Отменить тренировку", callback_data="wset_cancel")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def food_categories() -> InlineKeyboardMarkup:
        """Категории каталога продуктов"""
        keyboard = [
            [InlineKeyboardButton(category, callback_data=f"foodcat_{category}") for category in FOOD_CATEGORIES[i:i + 3]]
            for i in range(0, len(FOOD_CATEGORIES), 3)
        ]
        keyboard.append([
            InlineKeyboardButton("⭐ Популярные", callback_data="foods_popular"),
            InlineKeyboardButton("🔍 Поиск", callback_data="foods_search")
        ])
        keyboard.append([InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def muscle_group_selection() -> InlineKeyboardMarkup:
        """Группы мышц для каталога упражнений"""
        keyboard = [
            [InlineKeyboardButton(group, callback_data=f"muscle_{group}") for group in MUSCLE_GROUPS[i:i + 2]]
            for i in range(0, len(MUSCLE_GROUPS), 2)
        ]
        keyboard.append([InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def language_selection() -> InlineKeyboardMarkup:
        """Выбор языка объяснений"""
        keyboard = [
            [
                InlineKeyboardButton("🇬🇧 English", callback_data="lang_en"),
                InlineKeyboardButton("🇵🇭 Filipino", callback_data="lang_fil")
            ],
            [
                InlineKeyboardButton("✏️ Редактировать профиль", callback_data="edit_profile")
            ],
            [
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def back_to_menu() -> InlineKeyboardMarkup:
        """Кнопка возврата в главное меню"""
        keyboard = [[InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def profile_actions() -> InlineKeyboardMarkup:
        """Действия с профилем"""
        keyboard = [
            [
                InlineKeyboardButton("✏️ Редактировать", callback_data="edit_profile"),
                InlineKeyboardButton("🎯 План КБЖУ", callback_data="nutrition_plan")
            ],
            [
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def fill_profile() -> InlineKeyboardMarkup:
        keyboard = [[InlineKeyboardButton("✨ Заполнить профиль", callback_data="edit_profile")]]
        return InlineKeyboardMarkup(keyboard)
