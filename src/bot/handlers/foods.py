"""
Обработчики каталога филиппинских продуктов
"""
from typing import List
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.states import BotState
from src.database.models import FoodItem
import logging

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def format_food_list(title: str, foods: List[FoodItem]) -> str:
    if not foods:
        return f"{title}\n\nНичего не найдено."

    lines = [title, ""]
    for food in foods:
        name = f"{food.name} ({food.name_filipino})" if food.name_filipino else food.name
        macros = food.macros
        lines.append(
            f"• {name}, {food.serving_size}: {food.calories} ккал, "
            f"Б {macros.protein:g} / У {macros.carbs:g} / Ж {macros.fats:g}"
        )
    return "\n".join(lines)


async def foods_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Меню каталога продуктов"""
    query = update.callback_query
    await query.answer()

    await query.edit_message_text(
        "🥘 КАТАЛОГ ПРОДУКТОВ\n\nВыбери категорию, популярные продукты или поиск:",
        reply_markup=InlineKeyboards.food_categories()
    )


async def food_category_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Продукты выбранной категории"""
    query = update.callback_query
    await query.answer()

    category = query.data.split('_', 1)[1]  # foodcat_grains -> grains

    try:
        db = context.bot_data['db']
        foods = await db.get_foods_by_category(category)

        await query.edit_message_text(
            text=format_food_list(f"🥘 {category.upper()}", foods),
            reply_markup=InlineKeyboards.food_categories()
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки продуктов категории {category}: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить продукты. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def popular_foods_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Продукты, распространенные на Филиппинах"""
    query = update.callback_query
    await query.answer()

    try:
        db = context.bot_data['db']
        foods = await db.get_popular_foods()

        await query.edit_message_text(
            text=format_food_list("⭐ ПОПУЛЯРНЫЕ ПРОДУКТЫ", foods),
            reply_markup=InlineKeyboards.food_categories()
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки популярных продуктов: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить продукты. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def food_search_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать поиск продукта"""
    query = update.callback_query
    await query.answer()

    context.user_data['state'] = BotState.FOOD_SEARCH

    await query.edit_message_text(
        "🔍 Напиши название продукта на английском или филиппинском (например, adobo или itlog):",
        reply_markup=InlineKeyboards.back_to_menu()
    )


async def handle_food_search(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Поиск продукта по названию"""
    search = update.message.text.strip()

    if len(search) < MIN_QUERY_LENGTH:
        await update.message.reply_text(f"❌ Минимум {MIN_QUERY_LENGTH} символа\n\nПопробуй еще раз:")
        return

    try:
        db = context.bot_data['db']
        foods = await db.search_foods(search)

        await update.message.reply_text(
            format_food_list(f"🔍 «{search}»", foods) + "\n\nМожно искать дальше или выбрать категорию.",
            reply_markup=InlineKeyboards.food_categories()
        )

    except Exception as e:
        logger.error(f"Ошибка поиска продуктов '{search}': {e}")
        await update.message.reply_text(
            "❌ Не удалось выполнить поиск. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
