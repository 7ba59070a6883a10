"""
Обработчики записи тренировки по активной программе
"""
from datetime import date, datetime
from typing import Dict, List
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.states import BotState
from src.database.models import CompletedExercise, WorkoutSession
from src.utils.progress import OverloadAnalysis, detect_progressive_overload
from src.utils.validators import DataValidator
from src.utils.workout_planner import WorkoutPlanGenerator
import logging

logger = logging.getLogger(__name__)

PROGRESS_DAYS = 90
HISTORY_LIMIT = 10
TREND_ICONS = {"improving": "📈", "stable": "➡️", "declining": "📉"}


def format_exercise_prompt(log: Dict) -> str:
    planned = log['planned']
    index = log['index']
    exercise = planned[index]
    name = log['session'].exercises[index].exercise_name or "Упражнение"

    return f"""🏋️ {name} ({index + 1}/{len(planned)})
📋 План: {exercise.sets} x {exercise.reps}, отдых {exercise.rest_period} с

Отправь подходы одним сообщением:
• 10x20 10x20 8x22.5 (повторения x вес)
• 12 12 10 (без веса)"""


def format_session_summary(session: WorkoutSession, analyses: Dict[str, OverloadAnalysis]) -> str:
    lines = [
        f"✅ Тренировка «{session.name or 'Тренировка'}» сохранена",
        f"⏱ {session.duration} мин, 📦 объем {session.total_volume:.0f}",
        ""
    ]

    for exercise in session.exercises:
        sets = " ".join(
            f"{s.reps}x{s.weight:g}" if s.weight else str(s.reps)
            for s in exercise.sets
        )
        lines.append(f"• {exercise.exercise_name}: {sets}")

        analysis = analyses.get(exercise.exercise_id)
        if analysis and analysis.recommendations:
            lines.append(f"   {TREND_ICONS[analysis.trend]} {' '.join(analysis.recommendations)}")
        if analysis and analysis.next_suggestion:
            lines.append(f"   💡 {analysis.next_suggestion}")

    return "\n".join(lines)


def format_workout_history(sessions: List[WorkoutSession]) -> str:
    if not sessions:
        return "📜 ИСТОРИЯ ТРЕНИРОВОК\n\nПока нет завершенных тренировок."

    lines = ["📜 ИСТОРИЯ ТРЕНИРОВОК", ""]
    for session in sessions:
        sets_count = sum(len(e.sets) for e in session.exercises)
        lines.append(
            f"📅 {session.date.strftime('%d.%m.%Y')} {session.name or ''}".rstrip()
            + f": {len(session.exercises)} упр., {sets_count} подх., {session.duration} мин"
        )
    return "\n".join(lines)


async def log_workout_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Выбор дня активной программы для записи тренировки"""
    query = update.callback_query
    await query.answer()

    log = context.user_data.get('workout_log')
    if log:
        # Незавершенная тренировка: продолжаем с текущего упражнения
        context.user_data['state'] = BotState.WORKOUT_SET
        await query.edit_message_text(format_exercise_prompt(log), reply_markup=InlineKeyboards.workout_set_actions())
        return

    try:
        db = context.bot_data['db']
        plan = await db.get_active_workout_plan(context.user_data.get('user_id'))

        if not plan:
            await query.edit_message_text(
                "⚠️ Сначала составь и сохрани программу тренировок.",
                reply_markup=InlineKeyboards.back_to_menu()
            )
            return

        context.user_data['log_plan'] = plan
        day_names = [WorkoutPlanGenerator.get_day_name(day.day_of_week, plan.schedule) for day in plan.schedule]

        await query.edit_message_text(
            f"📝 {plan.name}\n\nКакую тренировку записываем?",
            reply_markup=InlineKeyboards.workout_day_selection(day_names)
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки программы для записи тренировки: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить программу. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def handle_log_day_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать тренировку выбранного дня"""
    query = update.callback_query
    await query.answer()

    plan = context.user_data.get('log_plan')
    if not plan:
        await query.edit_message_text("⚠️ Выбери тренировку заново.", reply_markup=InlineKeyboards.back_to_menu())
        return

    day = plan.schedule[int(query.data.split('_', 1)[1])]  # logday_0 -> 0
    if not day.exercises:
        await query.edit_message_text("⚠️ В этом дне нет упражнений.", reply_markup=InlineKeyboards.back_to_menu())
        return

    try:
        db = context.bot_data['db']
        session = await db.start_workout_session(context.user_data['user_id'], WorkoutSession(
            date=date.today(),
            duration=0,
            name=WorkoutPlanGenerator.get_day_name(day.day_of_week, plan.schedule),
            exercises=[
                CompletedExercise(exercise_id=e.exercise_id, exercise_name=e.exercise_name or "")
                for e in day.exercises
            ]
        ))

        log = {"session": session, "planned": day.exercises, "index": 0, "started_at": datetime.now()}
        context.user_data['workout_log'] = log
        context.user_data.pop('log_plan', None)
        context.user_data['state'] = BotState.WORKOUT_SET

        await query.edit_message_text(format_exercise_prompt(log), reply_markup=InlineKeyboards.workout_set_actions())

    except Exception as e:
        logger.error(f"Ошибка начала тренировки: {e}")
        await query.edit_message_text(
            "❌ Не удалось начать тренировку. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def _finish_workout(context: ContextTypes.DEFAULT_TYPE) -> str:
    """Сохранить тренировку и вернуть итог с рекомендациями по нагрузке"""
    log = context.user_data['workout_log']
    session = log['session']
    db = context.bot_data['db']

    if not any(e.sets for e in session.exercises):
        await db.cancel_workout_session(session.id)
        context.user_data.pop('workout_log', None)
        context.user_data['state'] = BotState.IDLE
        return "⚠️ Ни одного подхода не записано, тренировка не сохранена."

    session.exercises = [e for e in session.exercises if e.sets]
    session.duration = max(1, round((datetime.now() - log['started_at']).total_seconds() / 60))
    await db.complete_workout_session(session)
    context.user_data.pop('workout_log', None)
    context.user_data['state'] = BotState.IDLE

    history = await db.get_completed_sessions(context.user_data['user_id'], PROGRESS_DAYS)
    analyses = {
        exercise.exercise_id: detect_progressive_overload(history, exercise.exercise_id)
        for exercise in session.exercises
    }

    logger.info(f"Тренировка {session.id} записана: {len(session.exercises)} упражнений")
    return format_session_summary(session, analyses)


async def handle_workout_sets(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Подходы текущего упражнения"""
    log = context.user_data.get('workout_log')
    if not log:
        context.user_data['state'] = BotState.IDLE
        await update.message.reply_text("⚠️ Нет начатой тренировки.", reply_markup=InlineKeyboards.main_menu())
        return

    valid, sets, error = DataValidator.validate_sets(update.message.text)
    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    try:
        db = context.bot_data['db']
        exercise = log['session'].exercises[log['index']]
        exercise.sets.extend(sets)
        try:
            await db.update_workout_session(log['session'])
        except Exception:
            del exercise.sets[-len(sets):]
            raise

        if log['index'] + 1 >= len(log['planned']):
            summary = await _finish_workout(context)
            await update.message.reply_text(summary, reply_markup=InlineKeyboards.main_menu())
            return

        log['index'] += 1
        await update.message.reply_text(format_exercise_prompt(log), reply_markup=InlineKeyboards.workout_set_actions())

    except Exception as e:
        logger.error(f"Ошибка записи подходов: {e}")
        await update.message.reply_text(
            "❌ Не удалось сохранить подходы. Попробуй еще раз.",
            reply_markup=InlineKeyboards.workout_set_actions()
        )


async def workout_set_action_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Пропустить упражнение, завершить или отменить тренировку"""
    query = update.callback_query
    await query.answer()

    log = context.user_data.get('workout_log')
    if not log:
        await query.edit_message_text("⚠️ Нет начатой тренировки.", reply_markup=InlineKeyboards.main_menu())
        return

    action = query.data.split('_', 1)[1]  # wset_skip -> skip

    try:
        if action == "cancel":
            db = context.bot_data['db']
            await db.cancel_workout_session(log['session'].id)
            context.user_data.pop('workout_log', None)
            context.user_data['state'] = BotState.IDLE
            await query.edit_message_text("🗑 Тренировка отменена.", reply_markup=InlineKeyboards.main_menu())
            return

        if action == "finish" or log['index'] + 1 >= len(log['planned']):
            summary = await _finish_workout(context)
            await query.edit_message_text(summary, reply_markup=InlineKeyboards.main_menu())
            return

        log['index'] += 1
        await query.edit_message_text(format_exercise_prompt(log), reply_markup=InlineKeyboards.workout_set_actions())

    except Exception as e:
        logger.error(f"Ошибка действия с тренировкой ({action}): {e}")
        await query.edit_message_text(
            "❌ Не удалось сохранить тренировку. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def workout_history_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Последние завершенные тренировки"""
    query = update.callback_query
    await query.answer()

    try:
        db = context.bot_data['db']
        sessions = await db.get_workout_session_history(context.user_data.get('user_id'), HISTORY_LIMIT)

        await query.edit_message_text(
            text=format_workout_history(sessions),
            reply_markup=InlineKeyboards.progress_actions()
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки истории тренировок: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить историю. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
