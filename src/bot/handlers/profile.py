"""
Обработчики для работы с профилем пользователя
"""
from typing import Dict, Any, Optional
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.states import BotState
from src.config import ACTIVITY_LEVELS, FITNESS_GOALS
from src.database.models import (
    ActivityLevel,
    Gender,
    Goal,
    HeightUnit,
    UserMetrics,
    UserProfile,
    WeightUnit,
)
from src.utils.validators import DataValidator
from src.utils.calculators import NutritionCalculator, convert_height, convert_weight
import logging

logger = logging.getLogger(__name__)

BODY_COMPOSITION_NAMES = {
    "skinny": "Худощавое",
    "skinny-fat": "Худощавое с жирком",
    "average": "Среднее",
    "overweight": "Лишний вес",
    "obese": "Ожирение"
}


def build_profile_record(profile_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Запись профиля для сохранения: ответы пользователя + плоская копия расчета TDEE

    Рост и вес хранятся в единицах пользователя, расчет ведется в метрической системе.
    """
    metrics = UserMetrics(
        age=profile_data['age'],
        gender=Gender(profile_data['gender']),
        weight_kg=convert_weight(profile_data['weight_value'], profile_data['weight_unit'], WeightUnit.KG),
        height_cm=convert_height(profile_data['height_value'], profile_data['height_unit'], HeightUnit.CM),
        activity_level=ActivityLevel(profile_data['activity_level']),
        goal=Goal(profile_data['goal'])
    )
    calculation = NutritionCalculator.calculate_for_metrics(metrics)
    return {**profile_data, **calculation.to_profile_fields()}


def format_profile(profile: Dict[str, Any]) -> str:
    gender_text = "Мужской" if profile['gender'] == 'male' else "Женский"
    activity = ACTIVITY_LEVELS.get(profile['activity_level'], {}).get('label', profile['activity_level'])
    goal = FITNESS_GOALS.get(profile['goal'], {}).get('label', profile['goal'])
    equipment = ", ".join(profile.get('available_equipment') or []) or "—"

    return f"""📊 ТВОЙ ПРОФИЛЬ

👤 Пол: {gender_text}
🎂 Возраст: {profile['age']} лет
📏 Рост: {profile['height_value']} {profile.get('height_unit', 'cm')}
⚖️ Вес: {profile['weight_value']} {profile.get('weight_unit', 'kg')}
🧍 Телосложение: {BODY_COMPOSITION_NAMES.get(profile.get('body_composition'), profile.get('body_composition'))}
🎯 Цель: {goal}
💪 Активность: {activity}
🗓 Тренировок в неделю: {profile.get('workout_frequency')}
🏋️ Инвентарь: {equipment}
🔥 Норма: {profile.get('target_calories')} ккал/день"""


async def profile_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать профиль пользователя"""
    query = update.callback_query
    await query.answer()

    db = context.bot_data['db']
    user_id = context.user_data.get('user_id')

    profile = await db.get_user_profile(user_id)

    if not profile:
        await start_profile_survey(query, context)
        return

    await query.edit_message_text(
        text=format_profile(profile),
        reply_markup=InlineKeyboards.profile_actions()
    )


async def edit_profile_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать заполнение или редактирование профиля"""
    query = update.callback_query
    await query.answer()
    await start_profile_survey(query, context)


async def start_profile_survey(query, context: ContextTypes.DEFAULT_TYPE):
    message = """📊 ПРОФИЛЬ

Для расчета нормы КБЖУ и программы тренировок мне нужно узнать о тебе больше.

Укажи свой возраст (в годах):"""

    context.user_data['profile_data'] = {'language': context.user_data.get('language', 'en')}
    context.user_data['state'] = BotState.PROFILE_AGE
    await query.edit_message_text(text=message)


# Обработчики ответов анкеты
async def handle_profile_age(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка возраста"""
    valid, age, error = DataValidator.validate_age(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('profile_data', {})['age'] = age
    context.user_data['state'] = BotState.PROFILE_GENDER

    await update.message.reply_text(
        "👤 Укажи свой пол:",
        reply_markup=InlineKeyboards.gender_selection()
    )


async def handle_gender_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора пола"""
    query = update.callback_query
    await query.answer()

    context.user_data['profile_data']['gender'] = query.data.split('_', 1)[1]  # gender_male -> male
    context.user_data['state'] = BotState.PROFILE_HEIGHT_UNIT

    await query.edit_message_text(
        "📏 В чем удобнее указать рост?",
        reply_markup=InlineKeyboards.height_unit_selection()
    )


async def handle_height_unit_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора единиц роста"""
    query = update.callback_query
    await query.answer()

    unit = query.data.split('_', 1)[1]  # hunit_ft-in -> ft-in
    context.user_data['profile_data']['height_unit'] = unit
    context.user_data['state'] = BotState.PROFILE_HEIGHT

    if unit == HeightUnit.FT_IN.value:
        await query.edit_message_text("📏 Укажи рост в футах (например, 5.75 = 5'9\"):")
    else:
        await query.edit_message_text("📏 Укажи свой рост (в сантиметрах):")


async def handle_profile_height(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка роста"""
    unit = context.user_data['profile_data'].get('height_unit', HeightUnit.CM.value)
    valid, height, error = DataValidator.validate_height(update.message.text, unit)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data['profile_data']['height_value'] = height
    context.user_data['state'] = BotState.PROFILE_WEIGHT_UNIT

    await update.message.reply_text(
        "⚖️ В чем удобнее указать вес?",
        reply_markup=InlineKeyboards.weight_unit_selection()
    )


async def handle_weight_unit_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора единиц веса"""
    query = update.callback_query
    await query.answer()

    unit = query.data.split('_', 1)[1]  # wunit_lbs -> lbs
    context.user_data['profile_data']['weight_unit'] = unit
    context.user_data['state'] = BotState.PROFILE_WEIGHT

    unit_name = "фунтах" if unit == WeightUnit.LBS.value else "килограммах"
    await query.edit_message_text(f"⚖️ Укажи свой текущий вес (в {unit_name}):")


async def handle_profile_weight(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка веса"""
    unit = context.user_data['profile_data'].get('weight_unit', WeightUnit.KG.value)
    valid, weight, error = DataValidator.validate_weight(update.message.text, unit)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data['profile_data']['weight_value'] = weight
    context.user_data['state'] = BotState.PROFILE_BODY_COMPOSITION

    await update.message.reply_text(
        "🧍 Как бы ты описал свое телосложение?",
        reply_markup=InlineKeyboards.body_composition()
    )


async def handle_body_composition_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора телосложения"""
    query = update.callback_query
    await query.answer()

    context.user_data['profile_data']['body_composition'] = query.data.split('_', 1)[1]
    context.user_data['state'] = BotState.PROFILE_GOAL

    await query.edit_message_text(
        "🎯 Какая у тебя цель?",
        reply_markup=InlineKeyboards.goal_selection()
    )


async def handle_goal_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора цели"""
    query = update.callback_query
    await query.answer()

    context.user_data['profile_data']['goal'] = query.data.split('_', 1)[1]  # goal_bulking -> bulking
    context.user_data['state'] = BotState.PROFILE_ACTIVITY

    await query.edit_message_text(
        "💪 Выбери уровень своей физической активности:",
        reply_markup=InlineKeyboards.activity_level()
    )


async def handle_activity_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора активности"""
    query = update.callback_query
    await query.answer()

    # activity_lightly-active -> lightly-active
    context.user_data['profile_data']['activity_level'] = query.data.split('_', 1)[1]
    context.user_data['state'] = BotState.PROFILE_FREQUENCY

    await query.edit_message_text(
        "🗓 Сколько раз в неделю готов тренироваться?",
        reply_markup=InlineKeyboards.workout_frequency()
    )


async def handle_frequency_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка частоты тренировок"""
    query = update.callback_query
    await query.answer()

    valid, frequency, error = DataValidator.validate_workout_frequency(query.data.split('_', 1)[1])
    if not valid:
        await query.edit_message_text(f"❌ {error}", reply_markup=InlineKeyboards.workout_frequency())
        return

    context.user_data['profile_data']['workout_frequency'] = frequency
    context.user_data['profile_data']['available_equipment'] = []
    context.user_data['state'] = BotState.PROFILE_EQUIPMENT

    await query.edit_message_text(
        "🏋️ Какой инвентарь у тебя есть? Отметь все подходящие и нажми «Готово»:",
        reply_markup=InlineKeyboards.equipment_selection([])
    )


async def handle_equipment_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Отметка инвентаря; по кнопке «Готово» профиль сохраняется"""
    query = update.callback_query
    await query.answer()

    profile_data = context.user_data['profile_data']
    selected = profile_data.setdefault('available_equipment', [])
    item = query.data.split('_', 1)[1]

    if item != "done":
        if item in selected:
            selected.remove(item)
        else:
            selected.append(item)
        await query.edit_message_reply_markup(reply_markup=InlineKeyboards.equipment_selection(selected))
        return

    valid, equipment, error = DataValidator.validate_equipment(selected)
    if not valid:
        await query.edit_message_text(f"❌ {error}", reply_markup=InlineKeyboards.equipment_selection(selected))
        return

    await save_profile(query, context)


async def save_profile(query, context: ContextTypes.DEFAULT_TYPE):
    """Расчет TDEE и сохранение профиля"""
    db = context.bot_data['db']
    user_id = context.user_data['user_id']

    await query.edit_message_text("⏳ Сохраняю профиль и рассчитываю норму КБЖУ...")

    try:
        record = build_profile_record(context.user_data['profile_data'])
        await db.upsert_user_profile(user_id, record)

        context.user_data['state'] = BotState.IDLE
        context.user_data['language'] = record.get('language', 'en')
        context.user_data.pop('profile_data', None)

        result_message = f"""✅ ПРОФИЛЬ СОХРАНЕН!

🎯 ТВОЯ НОРМА:

📊 Калории: {record['target_calories']} ккал/день
🥩 Белки: {record['protein_grams']} г
🍞 Углеводы: {record['carbs_grams']} г
🥑 Жиры: {record['fats_grams']} г

Теперь можно собрать меню и программу тренировок! 🎉"""

        await query.edit_message_text(
            text=result_message,
            reply_markup=InlineKeyboards.main_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка сохранения профиля: {e}")
        await query.edit_message_text(
            "❌ Произошла ошибка при сохранении профиля. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def load_user_profile(context: ContextTypes.DEFAULT_TYPE) -> Optional[UserProfile]:
    """Профиль текущего пользователя или None, если анкета еще не заполнена"""
    db = context.bot_data['db']
    record = await db.get_user_profile(context.user_data.get('user_id'))
    return UserProfile.from_record(record) if record else None
