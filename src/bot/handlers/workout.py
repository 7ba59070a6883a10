"""
Обработчики для программы тренировок и прогресса
"""
from dataclasses import asdict
from datetime import date
from typing import List
from telegram import Update
from telegram.ext import ContextTypes
from src.bot.keyboards.inline import InlineKeyboards
from src.bot.handlers.profile import load_user_profile
from src.bot.handlers.nutrition import format_saved_meal_plan
from src.database.models import Exercise, WorkoutPlan
from src.utils.progress import ExerciseProgress, WorkoutSummary, analyze_exercise_progress, summarize_workouts
from src.utils.workout_planner import WorkoutPlanGenerator, WorkoutPlanOptions
import logging

logger = logging.getLogger(__name__)

NO_PROFILE_MESSAGE = "⚠️ Сначала заполни профиль, чтобы я подобрал программу."
TREND_ICONS = {"improving": "📈", "maintaining": "➡️", "declining": "📉"}
PROGRESS_DAYS = 90


def format_workout_plan(plan: WorkoutPlan) -> str:
    lines = [f"🏋️ {plan.name}", f"🗓 {plan.duration_weeks} недель, {len(plan.schedule)} тренировок в неделю", ""]

    for day in plan.schedule:
        title = WorkoutPlanGenerator.get_day_name(day.day_of_week, plan.schedule)
        lines.append(f"📅 {title}: {day.name} (~{day.estimated_duration} мин)")
        if not day.exercises:
            lines.append("   нет подходящих упражнений для твоего инвентаря")
        for exercise in day.exercises:
            lines.append(f"   • {exercise.exercise_name}: {exercise.sets} x {exercise.reps}, отдых {exercise.rest_period} с")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_exercise_list(muscle_group: str, exercises: List[Exercise]) -> str:
    if not exercises:
        return f"💪 {muscle_group.upper()}\n\nНет упражнений для твоего инвентаря."

    lines = [f"💪 {muscle_group.upper()}", ""]
    for exercise in exercises:
        lines.append(f"• {exercise.name} ({exercise.difficulty.value}, {', '.join(exercise.equipment)})")
        if exercise.form_tips:
            lines.append(f"   💡 {exercise.form_tips[0]}")
    return "\n".join(lines)


def format_progress(summary: WorkoutSummary, progress: List[ExerciseProgress]) -> str:
    if not summary.total_workouts:
        return "📈 ПРОГРЕСС\n\nПока нет завершенных тренировок. Самое время начать! 💪"

    lines = [
        "📈 ПРОГРЕСС",
        "",
        f"🏋️ Тренировок: {summary.total_workouts} ({summary.workouts_per_week:.1f} в неделю)",
        f"⏱ Среднее время: {summary.average_duration:.0f} мин",
        f"🔥 Текущая серия: {summary.current_streak}, лучшая: {summary.longest_streak}",
        f"📦 Общий объем: {summary.total_volume:.0f}",
        ""
    ]

    for entry in progress:
        metrics = entry.metrics
        if not metrics.total_sessions:
            continue
        lines.append(
            f"{TREND_ICONS[metrics.trend]} {entry.exercise_name}: объем {metrics.volume_improvement:+.0f}%, "
            f"регулярность {metrics.consistency_score:.0f}/100"
        )

    return "\n".join(lines)


async def workout_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Составить программу тренировок"""
    query = update.callback_query
    await query.answer()

    try:
        profile = await load_user_profile(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        await query.edit_message_text("⏳ Подбираю упражнения...")

        generator = WorkoutPlanGenerator()
        difficulty = generator.determine_user_difficulty(profile.activity_level, profile.body_composition)

        db = context.bot_data['db']
        catalog = await db.get_exercises_for_goal(profile.goal, difficulty, profile.available_equipment)

        plan = generator.generate_workout_plan(
            WorkoutPlanOptions(frequency=profile.workout_frequency, goal=profile.goal, language=profile.language),
            catalog
        )
        context.user_data['workout_plan'] = plan

        await query.edit_message_text(
            text=format_workout_plan(plan),
            reply_markup=InlineKeyboards.workout_plan_actions()
        )

    except Exception as e:
        logger.error(f"Ошибка генерации программы тренировок: {e}")
        await query.edit_message_text(
            "❌ Не удалось составить программу. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def save_workout_plan_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Сохранить программу как активную"""
    query = update.callback_query
    await query.answer()

    plan = context.user_data.get('workout_plan')
    if not plan:
        await query.edit_message_text("⚠️ Сначала составь программу.", reply_markup=InlineKeyboards.back_to_menu())
        return

    try:
        db = context.bot_data['db']
        await db.save_workout_plan(context.user_data['user_id'], plan)
        context.user_data.pop('workout_plan', None)

        await query.edit_message_text(
            f"✅ Программа «{plan.name}» сохранена и стала активной.",
            reply_markup=InlineKeyboards.main_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка сохранения программы: {e}")
        await query.edit_message_text(
            "❌ Не удалось сохранить программу. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def workout_tips_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Советы AI-тренера по программе"""
    query = update.callback_query
    await query.answer()

    try:
        profile = await load_user_profile(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        await query.edit_message_text("🤖 Думаю...")

        plan = context.user_data.get('workout_plan')
        tips_context = {"plan": asdict(plan)} if plan else None

        openai_service = context.bot_data['openai']
        tips = await openai_service.suggest("workout", asdict(profile), tips_context)

        await query.edit_message_text(text=f"💡 СОВЕТЫ ТРЕНЕРА\n\n{tips}", reply_markup=InlineKeyboards.back_to_menu())

    except Exception as e:
        logger.error(f"Ошибка советов по тренировкам: {e}")
        await query.edit_message_text(
            "❌ Ошибка связи с AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def progress_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать прогресс за последние 90 дней"""
    query = update.callback_query
    await query.answer()

    try:
        db = context.bot_data['db']
        sessions = await db.get_completed_sessions(context.user_data.get('user_id'), PROGRESS_DAYS)

        summary = summarize_workouts(sessions)
        progress = analyze_exercise_progress(sessions)

        await query.edit_message_text(
            text=format_progress(summary, progress),
            reply_markup=InlineKeyboards.progress_actions()
        )

    except Exception as e:
        logger.error(f"Ошибка расчета прогресса: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить прогресс. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def monthly_review_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обзор месяца от AI-тренера"""
    query = update.callback_query
    await query.answer()

    try:
        profile = await load_user_profile(context)
        if not profile:
            await query.edit_message_text(NO_PROFILE_MESSAGE, reply_markup=InlineKeyboards.fill_profile())
            return

        await query.edit_message_text("🤖 Готовлю обзор месяца...")

        db = context.bot_data['db']
        sessions = await db.get_completed_sessions(profile.user_id, 30)
        summary = summarize_workouts(sessions)

        openai_service = context.bot_data['openai']
        review = await openai_service.monthly_review(
            asdict(profile),
            asdict(summary),
            month=date.today().strftime('%Y-%m')
        )

        adjustments = review.get('adjustments') or {}
        lines = ["🗓 ОБЗОР МЕСЯЦА", "", review.get('assessment', '')]
        for title, key in (("🏋️ Тренировки", "workout"), ("🍽 Питание", "meal")):
            if adjustments.get(key):
                lines.extend(["", f"{title}:"] + [f"• {item}" for item in adjustments[key]])

        await query.edit_message_text(text="\n".join(lines), reply_markup=InlineKeyboards.back_to_menu())

    except Exception as e:
        logger.error(f"Ошибка обзора месяца: {e}")
        await query.edit_message_text(
            "❌ Ошибка связи с AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def exercises_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Каталог упражнений: выбор группы мышц"""
    query = update.callback_query
    await query.answer()

    await query.edit_message_text(
        "💪 КАТАЛОГ УПРАЖНЕНИЙ\n\nВыбери группу мышц:",
        reply_markup=InlineKeyboards.muscle_group_selection()
    )


async def muscle_group_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Упражнения на группу мышц под инвентарь из профиля"""
    query = update.callback_query
    await query.answer()

    muscle_group = query.data.split('_', 1)[1]  # muscle_chest -> chest

    try:
        profile = await load_user_profile(context)
        equipment = profile.available_equipment if profile else None

        db = context.bot_data['db']
        exercises = await db.get_exercises_by_muscle_groups([muscle_group], equipment)

        await query.edit_message_text(
            text=format_exercise_list(muscle_group, exercises),
            reply_markup=InlineKeyboards.muscle_group_selection()
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки упражнений ({muscle_group}): {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить упражнения. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )


async def my_plans_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Сохраненная программа тренировок и меню на сегодня"""
    query = update.callback_query
    await query.answer()

    try:
        db = context.bot_data['db']
        user_id = context.user_data.get('user_id')
        plan = await db.get_active_workout_plan(user_id)
        meal_plan = await db.get_meal_plan(user_id, date.today())

        sections = [
            format_workout_plan(plan) if plan else "🏋️ Сохраненной программы тренировок пока нет.",
            format_saved_meal_plan(meal_plan) if meal_plan else "🍽 Меню на сегодня не сохранено."
        ]

        await query.edit_message_text(
            text="📋 МОИ ПЛАНЫ\n\n" + "\n\n".join(sections),
            reply_markup=InlineKeyboards.back_to_menu()
        )

    except Exception as e:
        logger.error(f"Ошибка загрузки сохраненных планов: {e}")
        await query.edit_message_text(
            "❌ Не удалось загрузить планы. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
