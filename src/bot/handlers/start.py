"""
Обработчик команды /start и главное меню
"""
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.states import BotState
import logging

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = """🤖 Kumusta! Я твой AI-тренер по питанию и тренировкам.
Рассчитаю норму КБЖУ, соберу меню из филиппинских продуктов
и составлю программу тренировок под твой инвентарь."""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик команды /start"""
    user = update.effective_user

    # Получаем или создаем пользователя в БД
    db = context.bot_data['db']
    user_data = await db.get_or_create_user(
        telegram_id=user.id,
        username=user.username,
        first_name=user.first_name
    )

    context.user_data['user_id'] = user_data['id']
    context.user_data['state'] = BotState.IDLE

    profile = await db.get_user_profile(user_data['id'])

    if not profile:
        await update.message.reply_text(
            WELCOME_MESSAGE + "\n\nДля начала заполни профиль 👇",
            reply_markup=InlineKeyboards.fill_profile()
        )
    else:
        context.user_data['language'] = profile.get('language') or 'en'
        await update.message.reply_text(
            WELCOME_MESSAGE + "\n\n✅ Твой профиль уже создан!",
            reply_markup=InlineKeyboards.main_menu()
        )

    logger.info(f"Пользователь {user.id} ({user.username}) запустил бота")


async def main_menu_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Возврат в главное меню"""
    query = update.callback_query
    await query.answer()

    context.user_data['state'] = BotState.IDLE

    await query.edit_message_text(
        text="🏠 Главное меню\n\nВыбери действие:",
        reply_markup=InlineKeyboards.main_menu()
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик команды /help"""
    help_text = """ℹ️ ПОМОЩЬ

🔹 Основные функции:

📊 Мой профиль - возраст, рост, вес, цель и инвентарь
🎯 Мой план КБЖУ - BMR, TDEE, целевые калории и БЖУ
🍽 Меню на день - завтрак, обед, мерьенда и ужин под твою норму
👨‍🍳 Варианты блюд - три варианта приема пищи с заменами
🏋️ Программа тренировок - сплит под частоту тренировок и цель
📈 Прогресс - объем, серии и динамика по упражнениям
📝 Записать тренировку - подходы по дню активной программы и советы по нагрузке
📋 Мои планы - сохраненная программа и меню на сегодня
🥘 Продукты - каталог, популярные продукты и поиск по названию
💪 Упражнения - каталог по группам мышц под твой инвентарь
💬 Спросить тренера - вопрос AI-тренеру

🔹 Команды:
/start - главное меню
/help - эта справка

💡 Рост можно указать в футах десятичной дробью: 5.75 = 5'9"."""

    if update.message:
        await update.message.reply_text(help_text, reply_markup=InlineKeyboards.back_to_menu())
    else:
        query = update.callback_query
        await query.answer()
        await query.edit_message_text(text=help_text, reply_markup=InlineKeyboards.back_to_menu())
