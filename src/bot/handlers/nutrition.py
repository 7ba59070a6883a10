"""
Обработчики для плана КБЖУ, меню на день и вариантов блюд
"""
from dataclasses import asdict
from datetime import date
from typing import List
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.handlers.profile import load_user_profile
from src.config import FOOD_CATEGORIES, MEAL_PATTERNS
from src.database.models import MealPlan, MealType
from src.utils.calculators import NutritionCalculator
from src.utils.meal_planner import MealPlanGenerator, MealPlanOptions, MealSuggestion
import logging

logger = logging.getLogger(__name__)

MEAL_NAMES = {
    MealType.BREAKFAST: "🌅 Завтрак",
    MealType.LUNCH: "🌞 Обед",
    MealType.MERIENDA: "🍌 Мерьенда",
    MealType.DINNER: "🌆 Ужин",
}

NO_PROFILE_MESSAGE = "⚠️ Сначала заполни профиль, чтобы я рассчитал твою норму."


def format_meal_plan(plan: MealPlan, meal_times: dict) -> str:
    lines = [f"🍽 МЕНЮ НА {plan.date.strftime('%d.%m.%Y')}", ""]

    for meal_type in MealType:
        meal = plan.get_meal(meal_type)
        if meal is None:
            continue
        lines.append(f"{MEAL_NAMES[meal.type]} ({meal_times.get(meal.type.value, '')}) - {meal.calories} ккал")
        if not meal.foods:
            lines.append("   нет подходящих продуктов в каталоге")
        for item in meal.foods:
            lines.append(f"   • {item.food.name} ({item.food.serving_size}) - {item.calories} ккал")
        lines.append("")

    macros = plan.total_macros
    lines.append(f"📊 Итого: {plan.total_calories} ккал")
    lines.append(f"🥩 Б: {macros.protein:.0f} г  🍞 У: {macros.carbs:.0f} г  🥑 Ж: {macros.fats:.0f} г")
    return "\n".join(lines)


def format_saved_meal_plan(record: dict) -> str:
    """Сохраненное меню (строка meal_plans)"""
    plan_date = date.fromisoformat(record["date"])
    meals = {meal["type"]: meal for meal in record.get("meals") or []}
    lines = [f"🍽 МЕНЮ НА {plan_date.strftime('%d.%m.%Y')}", ""]

    for meal_type in MealType:
        meal = meals.get(meal_type.value)
        if meal is None:
            continue
        foods = ", ".join(food["name"] for food in meal.get("foods") or []) or "—"
        lines.append(f"{MEAL_NAMES[meal_type]} - {meal.get('calories', 0)} ккал: {foods}")

    macros = record.get("total_macros") or {}
    lines.append("")
    lines.append(f"📊 Итого: {record.get('total_calories', 0)} ккал")
    lines.append(
        f"🥩 Б: {macros.get('protein', 0):.0f} г  🍞 У: {macros.get('carbs', 0):.0f} г  "
        f"🥑 Ж: {macros.get('fats', 0):.0f} г"
    )
    return "\n".join(lines)


def format_suggestions(meal_type: MealType, suggestions: List[MealSuggestion]) -> str:
    lines = [f"👨‍🍳 ВАРИАНТЫ: {MEAL_NAMES[meal_type]}", ""]

    for index, suggestion in enumerate(suggestions, 1):
        foods = ", ".join(item.food.name for item in suggestion.meal.foods) or "—"
        lines.append(f"{index}. {foods} - {suggestion.meal.calories} ккал")
        if suggestion.alternatives:
            alternatives = ", ".join(dict.fromkeys(food.name for food in suggestion.alternatives))
            lines.append(f"   🔄 Замены: {alternatives}")
        lines.append("")

    if suggestions:
        lines.append(f"💡 {suggestions[0].explanation}")
    return "\n".join(lines)


async def nutrition_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать норму КБЖУ и методику расчета"""
    query = update.callback_query
    await query.answer()

    profile = await load_user_profile(context)
    if not profile:
        await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
        return

    calculation = NutritionCalculator.calculate_for_metrics(NutritionCalculator.metrics_from_profile(profile))
    explanation = NutritionCalculator.get_methodology_explanation(profile.activity_level, profile.goal, calculation)
    macros = calculation.macros

    message = f"""🎯 ТВОЙ ПЛАН КБЖУ

🔥 Калории: {calculation.target_calories} ккал/день
🥩 Белки: {macros.protein.grams} г ({macros.protein.calories} ккал)
🍞 Углеводы: {macros.carbs.grams} г ({macros.carbs.calories} ккал)
🥑 Жиры: {macros.fats.grams} г ({macros.fats.calories} ккал)

{explanation}"""

    await query.edit_message_text(text=message, reply_markup=InlineKeyboards.nutrition_plan_actions())


async def _meal_plan_options(context: ContextTypes.DEFAULT_TYPE):
    profile = await load_user_profile(context)
    if not profile:
        return None, None

    calculation = NutritionCalculator.calculate_for_metrics(NutritionCalculator.metrics_from_profile(profile))
    return profile, MealPlanOptions.from_calculation(calculation, profile.goal, profile.language)


async def meal_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Собрать меню на сегодня"""
    query = update.callback_query
    await query.answer()

    try:
        profile, options = await _meal_plan_options(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        await query.edit_message_text("⏳ Собираю меню из филиппинских продуктов...")

        db = context.bot_data['db']
        generator = MealPlanGenerator()
        catalog = await db.get_foods_by_categories(FOOD_CATEGORIES)
        plan = generator.generate_meal_plan(options, catalog)

        context.user_data['meal_plan'] = plan
        meal_times = generator.get_recommended_meal_times(options.cultural_context.work_schedule)

        await query.edit_message_text(
            text=format_meal_plan(plan, meal_times),
            reply_markup=InlineKeyboards.meal_plan_actions()
        )

    except Exception as e:
        logger.error(f"Ошибка генерации меню: {e}")
        await query.edit_message_text(
            "❌ Не удалось собрать меню. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def save_meal_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Сохранить текущее меню"""
    query = update.callback_query
    await query.answer()

    plan = context.user_data.get('meal_plan')
    if not plan:
        await query.edit_message_text("⚠️ Сначала собери меню на день.", reply_markup=InlineKeyboards.back_to_menu())
        return

    try:
        db = context.bot_data['db']
        await db.save_meal_plan(context.user_data['user_id'], plan)
        context.user_data.pop('meal_plan', None)

        await query.edit_message_text(
            f"✅ Меню на {plan.date.strftime('%d.%m.%Y')} сохранено ({plan.total_calories} ккал).",
            reply_markup=InlineKeyboards.main_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка сохранения меню: {e}")
        await query.edit_message_text(
            "❌ Не удалось сохранить меню. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def meal_suggestions_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Выбор приема пищи для вариантов"""
    query = update.callback_query
    await query.answer()

    await query.edit_message_text(
        "👨‍🍳 Для какого приема пищи подобрать варианты?",
        reply_markup=InlineKeyboards.meal_type_selection()
    )


async def handle_meal_suggestion_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Три варианта приема пищи с заменами"""
    query = update.callback_query
    await query.answer()

    meal_type = MealType(query.data.split('_', 1)[1])  # suggest_merienda -> merienda

    try:
        profile, options = await _meal_plan_options(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        db = context.bot_data['db']
        catalog = await db.get_foods_by_categories(MEAL_PATTERNS[meal_type.value]["categories"])
        suggestions = MealPlanGenerator().generate_meal_suggestions(meal_type, options, catalog)

        await query.edit_message_text(
            text=format_suggestions(meal_type, suggestions),
            reply_markup=InlineKeyboards.meal_type_selection()
        )

    except Exception as e:
        logger.error(f"Ошибка подбора вариантов ({meal_type.value}): {e}")
        await query.edit_message_text(
            "❌ Не удалось подобрать варианты. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def meal_tips_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Советы AI-тренера по питанию"""
    query = update.callback_query
    await query.answer()

    try:
        profile = await load_user_profile(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        await query.edit_message_text("🤖 Думаю...")

        plan = context.user_data.get('meal_plan')
        tips_context = None
        if plan:
            tips_context = {
                "meals": [meal.to_dict() for meal in plan.meals],
                "total_calories": plan.total_calories,
            }

        openai_service = context.bot_data['openai']
        tips = await openai_service.suggest("meal", asdict(profile), tips_context)

        await query.edit_message_text(text=f"💡 СОВЕТЫ ПО ПИТАНИЮ\n\n{tips}", reply_markup=InlineKeyboards.back_to_menu())

    except Exception as e:
        logger.error(f"Ошибка советов по питанию: {e}")
        await query.edit_message_text(
            "❌ Ошибка связи с AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
