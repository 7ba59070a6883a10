import asyncio
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from src.bot.handlers.foods import (
    food_category_callback,
    food_search_callback,
    handle_food_search,
    popular_foods_callback,
)
from src.bot.handlers.nutrition import format_meal_plan
from src.bot.handlers.workout import muscle_group_callback, my_plans_callback
from src.bot.handlers.workout_log import (
    handle_log_day_callback,
    handle_workout_sets,
    log_workout_callback,
    workout_history_callback,
    workout_set_action_callback,
)
from src.bot.states import BotState
from src.database.models import (
    CompletedExercise,
    CompletedSet,
    Goal,
    Meal,
    MealFoodItem,
    MealPlan,
    MealType,
    SplitType,
    WorkoutDay,
    WorkoutExercise,
    WorkoutPlan,
    WorkoutSession,
)
from src.database.queries import DatabaseQueries

from conftest import make_food


def run(coro):
    return asyncio.run(coro)


class FakeReply:
    """Асинхронный метод Telegram, запоминающий вызовы"""

    def __init__(self):
        self.calls = []

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))


def _callback(data):
    query = SimpleNamespace(data=data, answer=FakeReply(), edit_message_text=FakeReply())
    return SimpleNamespace(callback_query=query), query


def _message(text):
    message = SimpleNamespace(text=text, reply_text=FakeReply())
    return SimpleNamespace(message=message), message


def _sent_text(reply):
    args, kwargs = reply.calls[-1]
    return kwargs.get("text") or args[0]


@pytest.fixture
def db(fake_supabase):
    return DatabaseQueries(fake_supabase)


@pytest.fixture
def context(db):
    return SimpleNamespace(bot_data={"db": db}, user_data={"user_id": 1})


@pytest.fixture
def saved_plan(db, fake_supabase, exercise_catalog):
    fake_supabase.tables["exercises"] = [{"id": e.id, "name": e.name} for e in exercise_catalog]
    plan = WorkoutPlan(
        name="Muscle Building - Upper/Lower",
        goal=Goal.BULKING,
        duration_weeks=8,
        split_type=SplitType.UPPER_LOWER,
        schedule=[
            WorkoutDay(day_of_week=1, estimated_duration=30, name="Lower Body", exercises=[
                WorkoutExercise("e3", sets=3, reps="8-12", rest_period=90),
                WorkoutExercise("e4", sets=3, reps="8-12", rest_period=90),
            ]),
            WorkoutDay(day_of_week=4, estimated_duration=20, name="Upper Body", exercises=[
                WorkoutExercise("e1", sets=3, reps="8-12", rest_period=90),
            ]),
        ]
    )
    run(db.save_workout_plan(1, plan))
    return plan


def _start_first_day(context):
    update, _ = _callback("log_workout")
    run(log_workout_callback(update, context))
    update, query = _callback("logday_0")
    run(handle_log_day_callback(update, context))
    return query


def test_log_workout_needs_saved_plan(context):
    update, query = _callback("log_workout")
    run(log_workout_callback(update, context))

    assert "сохрани программу" in _sent_text(query.edit_message_text)
    assert "log_plan" not in context.user_data


def test_logging_flow_records_sets_and_suggests_overload(db, fake_supabase, context, saved_plan):
    run(db.create_workout_session(1, WorkoutSession(
        date=date.today() - timedelta(days=2),
        duration=40,
        exercises=[CompletedExercise("e3", "Bodyweight Squat", [CompletedSet(reps=10, weight=20)])]
    )))

    update, query = _callback("log_workout")
    run(log_workout_callback(update, context))
    assert "Muscle Building - Upper/Lower" in _sent_text(query.edit_message_text)

    query = _start_first_day(context)
    assert context.user_data["state"] == BotState.WORKOUT_SET
    assert "Bodyweight Squat (1/2)" in _sent_text(query.edit_message_text)
    session_id = context.user_data["workout_log"]["session"].id

    update, message = _message("10x20")
    run(handle_workout_sets(update, context))
    assert "Bent-over Row (2/2)" in _sent_text(message.reply_text)
    row = next(r for r in fake_supabase.tables["workout_sessions"] if r["id"] == session_id)
    assert row["end_time"] is None
    assert row["exercises"][0]["sets"] == [{"reps": 10, "weight": 20.0, "completed": True}]

    update, query = _callback("wset_finish")
    run(workout_set_action_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "✅" in text
    assert "увеличь нагрузку" in text
    assert context.user_data["state"] == BotState.IDLE
    assert "workout_log" not in context.user_data

    row = next(r for r in fake_supabase.tables["workout_sessions"] if r["id"] == session_id)
    assert row["end_time"] is not None
    assert row["name"] == "Monday Workout A"
    assert [e["exercise_id"] for e in row["exercises"]] == ["e3"]


def test_invalid_sets_keep_current_exercise(context, saved_plan):
    _start_first_day(context)

    update, message = _message("десять")
    run(handle_workout_sets(update, context))

    assert _sent_text(message.reply_text).startswith("❌")
    assert context.user_data["workout_log"]["index"] == 0
    assert context.user_data["workout_log"]["session"].exercises[0].sets == []


def test_skip_moves_to_next_exercise(context, saved_plan):
    _start_first_day(context)

    update, query = _callback("wset_skip")
    run(workout_set_action_callback(update, context))

    assert context.user_data["workout_log"]["index"] == 1
    assert "Bent-over Row (2/2)" in _sent_text(query.edit_message_text)


def test_cancel_removes_started_session(fake_supabase, context, saved_plan):
    _start_first_day(context)

    update, query = _callback("wset_cancel")
    run(workout_set_action_callback(update, context))

    assert fake_supabase.tables["workout_sessions"] == []
    assert context.user_data["state"] == BotState.IDLE
    assert "workout_log" not in context.user_data


def test_finish_without_sets_discards_session(fake_supabase, context, saved_plan):
    _start_first_day(context)

    update, query = _callback("wset_finish")
    run(workout_set_action_callback(update, context))

    assert "не сохранена" in _sent_text(query.edit_message_text)
    assert fake_supabase.tables["workout_sessions"] == []


def test_session_write_error_keeps_sets_unrecorded(fake_supabase, context, saved_plan):
    _start_first_day(context)
    fake_supabase.failures.add(("workout_sessions", "update"))

    update, message = _message("10x20")
    run(handle_workout_sets(update, context))

    assert _sent_text(message.reply_text).startswith("❌")
    assert context.user_data["workout_log"]["session"].exercises[0].sets == []
    assert context.user_data["workout_log"]["index"] == 0


def test_workout_history_lists_sessions(db, context):
    run(db.create_workout_session(1, WorkoutSession(
        date=date(2024, 3, 5),
        duration=45,
        name="Monday Workout A",
        exercises=[CompletedExercise("e3", "Bodyweight Squat", [CompletedSet(reps=15), CompletedSet(reps=12)])]
    )))

    update, query = _callback("workout_history")
    run(workout_history_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "05.03.2024 Monday Workout A: 1 упр., 2 подх., 45 мин" in text


FOOD_ROWS = [
    {"id": 1, "name": "Milkfish", "name_filipino": "Bangus", "category": "protein", "calories": 200,
     "protein": 25, "fats": 10, "serving_size": "100 g", "common_in_ph": True},
    {"id": 2, "name": "Garlic Rice", "name_filipino": "Sinangag", "category": "grains", "calories": 300,
     "carbs": 60, "serving_size": "1 cup", "common_in_ph": True},
    {"id": 3, "name": "Oatmeal", "category": "grains", "calories": 150, "carbs": 27, "serving_size": "1 cup"},
]


def test_food_category_lists_only_that_category(fake_supabase, context):
    fake_supabase.tables["filipino_foods"] = [dict(row) for row in FOOD_ROWS]

    update, query = _callback("foodcat_grains")
    run(food_category_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "Garlic Rice (Sinangag), 1 cup: 300 ккал" in text
    assert "Oatmeal" in text
    assert "Milkfish" not in text


def test_popular_foods(fake_supabase, context):
    fake_supabase.tables["filipino_foods"] = [dict(row) for row in FOOD_ROWS]

    update, query = _callback("foods_popular")
    run(popular_foods_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "Milkfish" in text
    assert "Oatmeal" not in text


def test_food_search_by_filipino_name(fake_supabase, context):
    fake_supabase.tables["filipino_foods"] = [dict(row) for row in FOOD_ROWS]

    update, query = _callback("foods_search")
    run(food_search_callback(update, context))
    assert context.user_data["state"] == BotState.FOOD_SEARCH

    update, message = _message("bangus")
    run(handle_food_search(update, context))
    assert "Milkfish (Bangus)" in _sent_text(message.reply_text)

    update, message = _message("b")
    run(handle_food_search(update, context))
    assert _sent_text(message.reply_text).startswith("❌")


def test_muscle_group_browser_without_profile(fake_supabase, context):
    fake_supabase.tables["exercises"] = [
        {"id": 1, "name": "Push-up", "category": "strength", "difficulty": "beginner",
         "equipment": ["home"], "muscle_groups": ["chest", "triceps"], "form_tips": ["Keep your core tight"]},
        {"id": 2, "name": "Squat", "category": "strength", "difficulty": "beginner",
         "equipment": ["home"], "muscle_groups": ["legs"]},
    ]

    update, query = _callback("muscle_chest")
    run(muscle_group_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "• Push-up (beginner, home)" in text
    assert "Keep your core tight" in text
    assert "Squat" not in text


def test_my_plans_shows_workout_and_todays_menu(db, context, saved_plan, breakfast_catalog):
    meal_plan = MealPlan(date=date.today(), meals=[
        Meal(type=MealType.BREAKFAST, foods=[MealFoodItem(food=breakfast_catalog[0])]),
    ])
    run(db.save_meal_plan(1, meal_plan))

    update, query = _callback("my_plans")
    run(my_plans_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "Muscle Building - Upper/Lower" in text
    assert "Garlic Rice" in text
    assert "📊 Итого: 300 ккал" in text


def test_my_plans_without_saved_plans(context):
    update, query = _callback("my_plans")
    run(my_plans_callback(update, context))

    text = _sent_text(query.edit_message_text)
    assert "программы тренировок пока нет" in text
    assert "не сохранено" in text


def test_meal_plan_is_listed_in_meal_order():
    rice = make_food("g1", "Steamed Rice", "grains", 200, carbs=45)
    egg = make_food("p1", "Boiled Egg", "protein", 80, protein=6)
    plan = MealPlan(date=date(2024, 5, 1), meals=[
        Meal(type=MealType.DINNER, foods=[MealFoodItem(food=rice)]),
        Meal(type=MealType.BREAKFAST, foods=[MealFoodItem(food=egg)]),
    ])

    text = format_meal_plan(plan, {"breakfast": "7:00", "dinner": "19:00"})

    assert text.index("Завтрак") < text.index("Ужин")
    assert "Обед" not in text
