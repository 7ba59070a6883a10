"""
Обработчики общения с AI-тренером
"""
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.states import BotState
import logging

logger = logging.getLogger(__name__)

# Сколько сообщений истории отправлять в модель и хранить
CONTEXT_WINDOW = 10
HISTORY_LIMIT = 20


async def ai_chat_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать общение с AI"""
    query = update.callback_query
    await query.answer()

    message = """💬 AI-ТРЕНЕР

Задай мне любой вопрос о тренировках или питании!

Примеры:
• "Чем заменить рис на ужин при сушке?"
• "Как тренироваться в жару?"
• "Сколько белка в adobo?"
• "Как правильно делать приседания?"

Я здесь, чтобы помочь! 🤖"""

    context.user_data['state'] = BotState.AI_CHAT

    await query.edit_message_text(
        text=message,
        reply_markup=InlineKeyboards.back_to_menu()
    )


async def handle_ai_chat(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка общения с AI"""
    user_message = update.message.text

    await update.message.reply_text("🤖 Думаю...")

    try:
        openai_service = context.bot_data['openai']

        # История хранится без текущего сообщения, оно передается отдельно
        chat_context = context.user_data.get('chat_context', [])
        response = await openai_service.general_chat(user_message, chat_context[-CONTEXT_WINDOW:])

        chat_context.append({"role": "user", "content": user_message})
        chat_context.append({"role": "assistant", "content": response})
        context.user_data['chat_context'] = chat_context[-HISTORY_LIMIT:]

        await update.message.reply_text(
            response,
            reply_markup=InlineKeyboards.back_to_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка AI чата: {e}")
        await update.message.reply_text(
            "❌ Ошибка связи с AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
