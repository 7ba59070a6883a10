"""
Обработчики для настроек бота
"""
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.database.models import Language
import logging

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {Language.EN: "English", Language.FIL: "Filipino"}


async def settings_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать настройки"""
    query = update.callback_query
    await query.answer()

    current = Language(context.user_data.get('language', 'en'))

    message = f"""⚙️ НАСТРОЙКИ

🌐 Язык объяснений к меню и программе: {LANGUAGE_NAMES[current]}

Что хочешь настроить?"""

    await query.edit_message_text(
        text=message,
        reply_markup=InlineKeyboards.language_selection()
    )


async def language_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Смена языка объяснений"""
    query = update.callback_query
    await query.answer()

    language = Language(query.data.split('_', 1)[1])  # lang_fil -> fil

    try:
        db = context.bot_data['db']
        user_id = context.user_data['user_id']
        if await db.get_user_profile(user_id):
            await db.update_user_profile(user_id, {"language": language.value})

        context.user_data['language'] = language.value
        logger.info(f"Пользователь {user_id} выбрал язык {language.value}")

        await query.edit_message_text(
            f"✅ Язык объяснений: {LANGUAGE_NAMES[language]}",
            reply_markup=InlineKeyboards.main_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка смены языка: {e}")
        await query.edit_message_text(
            "❌ Не удалось сохранить настройку. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
