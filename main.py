"""
Главный файл запуска Telegram бота AI-тренера по питанию и тренировкам
"""
import logging
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    filters,
    ContextTypes
)

# Импорты сервисов
from src.services.supabase_service import SupabaseService
from src.services.openai_service import OpenAIService
from src.database.queries import DatabaseQueries
from src.config import SUPABASE_URL, SUPABASE_KEY, OPENAI_MODEL

# Импорты обработчиков
from src.bot.handlers.start import start_command, main_menu_callback, help_command
from src.bot.handlers.profile import (
    profile_callback,
    edit_profile_callback,
    handle_profile_age,
    handle_gender_callback,
    handle_height_unit_callback,
    handle_profile_height,
    handle_weight_unit_callback,
    handle_profile_weight,
    handle_body_composition_callback,
    handle_goal_callback,
    handle_activity_callback,
    handle_frequency_callback,
    handle_equipment_callback
)
from src.bot.handlers.nutrition import (
    nutrition_plan_callback,
    meal_plan_callback,
    save_meal_plan_callback,
    meal_suggestions_callback,
    handle_meal_suggestion_callback,
    meal_tips_callback
)
from src.bot.handlers.workout import (
    workout_plan_callback,
    save_workout_plan_callback,
    workout_tips_callback,
    progress_callback,
    monthly_review_callback,
    exercises_callback,
    muscle_group_callback,
    my_plans_callback
)
from src.bot.handlers.workout_log import (
    log_workout_callback,
    handle_log_day_callback,
    handle_workout_sets,
    workout_set_action_callback,
    workout_history_callback
)
from src.bot.handlers.foods import (
    foods_callback,
    food_category_callback,
    popular_foods_callback,
    food_search_callback,
    handle_food_search
)
from src.bot.handlers.ai_chat import ai_chat_callback, handle_ai_chat
from src.bot.handlers.settings import settings_callback, language_callback
from src.bot.states import BotState

# Настройка логирования
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)


async def route_text_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Маршрутизация текстовых сообщений в зависимости от состояния"""
    state = context.user_data.get('state', BotState.IDLE)

    # Состояния анкеты профиля с текстовым вводом
    if state == BotState.PROFILE_AGE:
        await handle_profile_age(update, context)
    elif state == BotState.PROFILE_HEIGHT:
        await handle_profile_height(update, context)
    elif state == BotState.PROFILE_WEIGHT:
        await handle_profile_weight(update, context)

    # Запись тренировки и поиск продуктов
    elif state == BotState.WORKOUT_SET:
        await handle_workout_sets(update, context)
    elif state == BotState.FOOD_SEARCH:
        await handle_food_search(update, context)

    # По умолчанию - AI чат
    else:
        await handle_ai_chat(update, context)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик ошибок"""
    logger.error(f"Update {update} caused error {context.error}")

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(
            "❌ Произошла ошибка. Попробуй еще раз или напиши /start"
        )


def main():
    """Главная функция запуска бота"""
    logger.info("🚀 Запуск бота...")

    # Инициализация Supabase
    if not SUPABASE_URL or not SUPABASE_KEY:
        logger.error("❌ SUPABASE_URL и SUPABASE_KEY должны быть установлены в .env файле!")
        return

    supabase_service = SupabaseService(SUPABASE_URL, SUPABASE_KEY)

    # Секреты из переменных окружения или из таблицы настроек Supabase
    telegram_token = supabase_service.get_secret("TELEGRAM_BOT_TOKEN")
    openai_api_key = supabase_service.get_secret("OPENAI_API_KEY")

    if not telegram_token:
        logger.error("❌ TELEGRAM_BOT_TOKEN не найден!")
        return

    if not openai_api_key:
        logger.error("❌ OPENAI_API_KEY не найден!")
        return

    # Инициализация сервисов
    openai_service = OpenAIService(openai_api_key, OPENAI_MODEL)
    db_queries = DatabaseQueries(supabase_service.get_client())

    # Создание приложения
    application = Application.builder().token(telegram_token).build()

    # Сохраняем сервисы в bot_data для доступа в обработчиках
    application.bot_data['db'] = db_queries
    application.bot_data['openai'] = openai_service

    # Регистрация обработчиков команд
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))

    # Регистрация обработчиков callback'ов
    application.add_handler(CallbackQueryHandler(main_menu_callback, pattern="^main_menu$"))
    application.add_handler(CallbackQueryHandler(help_command, pattern="^help$"))

    # Профиль
    application.add_handler(CallbackQueryHandler(profile_callback, pattern="^profile$"))
    application.add_handler(CallbackQueryHandler(edit_profile_callback, pattern="^edit_profile$"))
    application.add_handler(CallbackQueryHandler(handle_gender_callback, pattern="^gender_"))
    application.add_handler(CallbackQueryHandler(handle_height_unit_callback, pattern="^hunit_"))
    application.add_handler(CallbackQueryHandler(handle_weight_unit_callback, pattern="^wunit_"))
    application.add_handler(CallbackQueryHandler(handle_body_composition_callback, pattern="^body_"))
    application.add_handler(CallbackQueryHandler(handle_goal_callback, pattern="^goal_"))
    application.add_handler(CallbackQueryHandler(handle_activity_callback, pattern="^activity_"))
    application.add_handler(CallbackQueryHandler(handle_frequency_callback, pattern="^freq_"))
    application.add_handler(CallbackQueryHandler(handle_equipment_callback, pattern="^equip_"))

    # Питание
    application.add_handler(CallbackQueryHandler(nutrition_plan_callback, pattern="^nutrition_plan$"))
    application.add_handler(CallbackQueryHandler(meal_plan_callback, pattern="^meal_plan$"))
    application.add_handler(CallbackQueryHandler(save_meal_plan_callback, pattern="^save_meal_plan$"))
    application.add_handler(CallbackQueryHandler(meal_suggestions_callback, pattern="^meal_suggestions$"))
    application.add_handler(CallbackQueryHandler(handle_meal_suggestion_callback, pattern="^suggest_"))
    application.add_handler(CallbackQueryHandler(meal_tips_callback, pattern="^meal_tips$"))

    # Тренировки и прогресс
    application.add_handler(CallbackQueryHandler(workout_plan_callback, pattern="^workout_plan$"))
    application.add_handler(CallbackQueryHandler(save_workout_plan_callback, pattern="^save_workout_plan$"))
    application.add_handler(CallbackQueryHandler(workout_tips_callback, pattern="^workout_tips$"))
    application.add_handler(CallbackQueryHandler(progress_callback, pattern="^progress$"))
    application.add_handler(CallbackQueryHandler(monthly_review_callback, pattern="^monthly_review$"))
    application.add_handler(CallbackQueryHandler(my_plans_callback, pattern="^my_plans$"))
    application.add_handler(CallbackQueryHandler(exercises_callback, pattern="^exercises$"))
    application.add_handler(CallbackQueryHandler(muscle_group_callback, pattern="^muscle_"))

    # Запись тренировки
    application.add_handler(CallbackQueryHandler(log_workout_callback, pattern="^log_workout$"))
    application.add_handler(CallbackQueryHandler(handle_log_day_callback, pattern="^logday_"))
    application.add_handler(CallbackQueryHandler(workout_set_action_callback, pattern="^wset_"))
    application.add_handler(CallbackQueryHandler(workout_history_callback, pattern="^workout_history$"))

    # Каталог продуктов
    application.add_handler(CallbackQueryHandler(foods_callback, pattern="^foods$"))
    application.add_handler(CallbackQueryHandler(food_category_callback, pattern="^foodcat_"))
    application.add_handler(CallbackQueryHandler(popular_foods_callback, pattern="^foods_popular$"))
    application.add_handler(CallbackQueryHandler(food_search_callback, pattern="^foods_search$"))

    # AI-тренер
    application.add_handler(CallbackQueryHandler(ai_chat_callback, pattern="^ai_chat$"))

    # Настройки
    application.add_handler(CallbackQueryHandler(settings_callback, pattern="^settings$"))
    application.add_handler(CallbackQueryHandler(language_callback, pattern="^lang_"))

    # Обработчики сообщений
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, route_text_message))

    # Обработчик ошибок
    application.add_error_handler(error_handler)

    # Запуск бота
    logger.info("✅ Бот успешно запущен и готов к работе!")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
