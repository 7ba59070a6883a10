"""
Запросы к базе данных Supabase
"""
from typing import Optional, List, Dict, Any
from datetime import date, datetime, timedelta
import logging

from postgrest.exceptions import APIError

from src.database.models import (
    CompletedExercise,
    CompletedSet,
    Difficulty,
    Exercise,
    FoodItem,
    Goal,
    MealPlan,
    SplitType,
    WorkoutDay,
    WorkoutExercise,
    WorkoutPlan,
    WorkoutSession,
)
from src.utils.workout_planner import WorkoutPlanGenerator

logger = logging.getLogger(__name__)


class DatabaseQueries:
    """Класс для работы с запросами к базе данных"""

    def __init__(self, supabase_client):
        self.client = supabase_client

    # ===== USERS =====
    async def get_or_create_user(self, telegram_id: int, username: str = None, first_name: str = None) -> Dict:
        """Получить или создать пользователя"""
        result = self.client.table("users").select("*").eq("telegram_id", telegram_id).execute()

        if result.data:
            return result.data[0]

        user_data = {
            "telegram_id": telegram_id,
            "username": username,
            "first_name": first_name
        }
        result = self.client.table("users").insert(user_data).execute()
        logger.info(f"Создан пользователь {telegram_id}")
        return result.data[0]

    # ===== USER PROFILES =====
    async def get_user_profile(self, user_id: int) -> Optional[Dict]:
        """Получить профиль пользователя"""
        result = self.client.table("user_profiles").select("*").eq("user_id", user_id).execute()
        return result.data[0] if result.data else None

    async def upsert_user_profile(self, user_id: int, profile_data: Dict) -> Dict:
        """
        Создать или обновить профиль (один профиль на пользователя)

        profile_data уже содержит плоскую копию расчета TDEE
        """
        try:
            result = self.client.table("user_profiles")\
                .upsert({**profile_data, "user_id": user_id}, on_conflict="user_id")\
                .execute()
        except APIError as e:
            logger.error(f"Ошибка сохранения профиля {user_id}: {e}")
            raise
        return result.data[0]

    async def update_user_profile(self, user_id: int, profile_data: Dict) -> Dict:
        """Обновить профиль пользователя"""
        result = self.client.table("user_profiles").update(profile_data).eq("user_id", user_id).execute()
        return result.data[0]

    # ===== FOOD CATALOG =====
    async def get_foods_by_category(self, category: str) -> List[FoodItem]:
        """Продукты одной категории"""
        result = self.client.table("filipino_foods").select("*")\
            .eq("category", category)\
            .order("name")\
            .execute()
        return [FoodItem.from_record(row) for row in result.data]

    async def get_foods_by_categories(self, categories: List[str]) -> List[FoodItem]:
        """Продукты нескольких категорий (каталог для генератора меню)"""
        result = self.client.table("filipino_foods").select("*")\
            .in_("category", categories)\
            .order("name")\
            .execute()
        return [FoodItem.from_record(row) for row in result.data]

    async def search_foods(self, query: str, category: Optional[str] = None, limit: int = 20) -> List[FoodItem]:
        """Поиск продуктов по названию (английскому или филиппинскому)"""
        request = self.client.table("filipino_foods").select("*")\
            .or_(f"name.ilike.%{query}%,name_filipino.ilike.%{query}%")

        if category:
            request = request.eq("category", category)

        result = request.order("name").limit(limit).execute()
        return [FoodItem.from_record(row) for row in result.data]

    async def get_popular_foods(self, limit: int = 20) -> List[FoodItem]:
        """Продукты, распространенные на Филиппинах"""
        result = self.client.table("filipino_foods").select("*")\
            .eq("common_in_ph", True)\
            .order("name")\
            .limit(limit)\
            .execute()
        return [FoodItem.from_record(row) for row in result.data]

    # ===== EXERCISE CATALOG =====
    async def get_exercises_for_goal(self, goal: Goal, difficulty: Difficulty, equipment: List[str]) -> List[Exercise]:
        """Упражнения, подходящие под цель, уровень и доступный инвентарь"""
        categories = [c.value for c in WorkoutPlanGenerator.categories_for_goal(goal)]

        result = self.client.table("exercises").select("*")\
            .in_("category", categories)\
            .eq("difficulty", Difficulty(difficulty).value)\
            .overlaps("equipment", equipment)\
            .order("name")\
            .execute()

        logger.info(f"Найдено {len(result.data)} упражнений для цели '{Goal(goal).value}'")
        return [Exercise.from_record(row) for row in result.data]

    async def get_exercises_by_muscle_groups(self, muscle_groups: List[str], equipment: Optional[List[str]] = None) -> List[Exercise]:
        """Упражнения на выбранные группы мышц"""
        request = self.client.table("exercises").select("*").overlaps("muscle_groups", muscle_groups)

        if equipment:
            request = request.overlaps("equipment", equipment)

        result = request.order("name").execute()
        return [Exercise.from_record(row) for row in result.data]

    # ===== MEAL PLANS =====
    async def save_meal_plan(self, user_id: int, plan: MealPlan) -> Dict:
        """Сохранить план питания на день"""
        plan_data = {
            "user_id": user_id,
            "date": plan.date.isoformat(),
            "meals": [meal.to_dict() for meal in plan.meals],
            "total_calories": plan.total_calories,
            "total_macros": plan.total_macros.to_dict()
        }
        if plan.id:
            plan_data["id"] = plan.id

        try:
            result = self.client.table("meal_plans").insert(plan_data).execute()
        except APIError as e:
            logger.error(f"Ошибка сохранения плана питания: {e}")
            raise

        saved = result.data[0]
        plan.id = saved.get("id")
        logger.info(f"План питания на {plan.date} сохранен для пользователя {user_id}")
        return saved

    async def get_meal_plan(self, user_id: int, plan_date: date) -> Optional[Dict]:
        """Получить сохраненный план питания на дату"""
        result = self.client.table("meal_plans").select("*")\
            .eq("user_id", user_id)\
            .eq("date", plan_date.isoformat())\
            .execute()
        return result.data[0] if result.data else None

    # ===== WORKOUT PLANS =====
    async def save_workout_plan(self, user_id: int, plan: WorkoutPlan) -> Any:
        """
        Сохранить программу тренировок: план, дни и упражнения

        Новый план записывается неактивным; активным он становится только после
        записи всех дней и упражнений. При ошибке недописанный план удаляется,
        а предыдущий активный план остается активным.
        """
        try:
            plan_row = self.client.table("workout_plans").insert({
                "user_id": user_id,
                "name": plan.name,
                "goal": plan.goal.value,
                "duration_weeks": plan.duration_weeks,
                "split_type": plan.split_type.value,
                "is_active": False
            }).execute().data[0]
        except APIError as e:
            logger.error(f"Ошибка сохранения программы тренировок: {e}")
            raise

        try:
            for day in plan.schedule:
                day_row = self.client.table("workout_days").insert({
                    "workout_plan_id": plan_row["id"],
                    "day_of_week": day.day_of_week,
                    "name": WorkoutPlanGenerator.get_day_name(day.day_of_week, plan.schedule),
                    "estimated_duration": day.estimated_duration
                }).execute().data[0]

                if not day.exercises:
                    continue

                self.client.table("workout_exercises").insert([
                    {
                        "workout_day_id": day_row["id"],
                        "exercise_id": exercise.exercise_id,
                        "sets": exercise.sets,
                        "reps": str(exercise.reps),
                        "weight": exercise.weight,
                        "rest_period": exercise.rest_period,
                        "order_index": index,
                        "notes": exercise.notes
                    }
                    for index, exercise in enumerate(day.exercises)
                ]).execute()

            # Сначала включаем новый план: при сбое на втором шаге старый план еще активен
            self.client.table("workout_plans").update({"is_active": True}).eq("id", plan_row["id"]).execute()
            self.client.table("workout_plans").update({"is_active": False})\
                .eq("user_id", user_id)\
                .neq("id", plan_row["id"])\
                .execute()
        except APIError as e:
            logger.error(f"Ошибка сохранения программы тренировок: {e}")
            self._delete_workout_plan(plan_row["id"])
            raise

        plan.id = plan_row["id"]
        logger.info(f"Программа '{plan.name}' сохранена для пользователя {user_id}")
        return plan.id

    def _delete_workout_plan(self, plan_id: Any):
        """Удалить недописанный план вместе с его днями и упражнениями"""
        try:
            day_ids = [
                row["id"] for row in
                self.client.table("workout_days").select("id").eq("workout_plan_id", plan_id).execute().data
            ]
            if day_ids:
                self.client.table("workout_exercises").delete().in_("workout_day_id", day_ids).execute()
                self.client.table("workout_days").delete().eq("workout_plan_id", plan_id).execute()
            self.client.table("workout_plans").delete().eq("id", plan_id).execute()
            logger.info(f"Недописанная программа {plan_id} удалена")
        except APIError as e:
            logger.error(f"Не удалось удалить недописанную программу {plan_id}: {e}")

    async def get_active_workout_plan(self, user_id: int) -> Optional[WorkoutPlan]:
        """Получить активную программу тренировок с днями и упражнениями"""
        result = self.client.table("workout_plans").select("*")\
            .eq("user_id", user_id)\
            .eq("is_active", True)\
            .execute()

        if not result.data:
            return None

        plan_row = result.data[0]
        days = self.client.table("workout_days").select("*")\
            .eq("workout_plan_id", plan_row["id"])\
            .execute().data

        exercises_by_day: Dict[Any, List[Dict]] = {day["id"]: [] for day in days}
        if days:
            exercise_rows = self.client.table("workout_exercises").select("*")\
                .in_("workout_day_id", list(exercises_by_day))\
                .order("order_index")\
                .execute().data
            for row in exercise_rows:
                exercises_by_day[row["workout_day_id"]].append(row)

        exercise_ids = list({row["exercise_id"] for rows in exercises_by_day.values() for row in rows})
        names = {}
        if exercise_ids:
            name_rows = self.client.table("exercises").select("id, name").in_("id", exercise_ids).execute().data
            names = {str(row["id"]): row["name"] for row in name_rows}

        schedule = [
            WorkoutDay(
                day_of_week=day["day_of_week"],
                name=day.get("name") or "",
                estimated_duration=day.get("estimated_duration") or 0,
                exercises=[
                    WorkoutExercise(
                        exercise_id=row["exercise_id"],
                        exercise_name=names.get(str(row["exercise_id"])),
                        sets=row["sets"],
                        reps=row["reps"],
                        rest_period=row["rest_period"],
                        notes=row.get("notes"),
                        weight=row.get("weight")
                    )
                    for row in exercises_by_day[day["id"]]
                ]
            )
            for day in days
        ]

        return WorkoutPlan(
            id=plan_row["id"],
            name=plan_row["name"],
            goal=Goal(plan_row["goal"]),
            duration_weeks=plan_row["duration_weeks"],
            schedule=schedule,
            split_type=SplitType(plan_row["split_type"]) if plan_row.get("split_type")
            else WorkoutPlanGenerator().determine_workout_split(len(schedule)).type
        )

    # ===== WORKOUT SESSIONS =====
    @staticmethod
    def _session_exercises(exercises: List[CompletedExercise]) -> List[Dict]:
        return [
            {
                "exercise_id": exercise.exercise_id,
                "exercise_name": exercise.exercise_name,
                "sets": [
                    {"reps": s.reps, "weight": s.weight, "completed": s.completed}
                    for s in exercise.sets
                ]
            }
            for exercise in exercises
        ]

    @staticmethod
    def _session_from_row(row: Dict) -> WorkoutSession:
        return WorkoutSession(
            id=row.get("id"),
            date=date.fromisoformat(row["date"]),
            duration=row.get("duration") or 0,
            name=row.get("name"),
            exercises=[
                CompletedExercise(
                    exercise_id=exercise["exercise_id"],
                    exercise_name=exercise.get("exercise_name") or "",
                    sets=[
                        CompletedSet(
                            reps=s["reps"],
                            weight=s.get("weight"),
                            completed=s.get("completed", True)
                        )
                        for s in exercise.get("sets") or []
                    ]
                )
                for exercise in row.get("exercises") or []
            ]
        )

    async def create_workout_session(self, user_id: int, session: WorkoutSession) -> Dict:
        """Сохранить уже завершенную тренировку одной записью"""
        now = datetime.now().isoformat()
        session_data = {
            "user_id": user_id,
            "date": session.date.isoformat(),
            "name": session.name,
            "start_time": now,
            "end_time": now,
            "duration": session.duration,
            "exercises": self._session_exercises(session.exercises)
        }

        try:
            result = self.client.table("workout_sessions").insert(session_data).execute()
        except APIError as e:
            logger.error(f"Ошибка сохранения тренировки: {e}")
            raise
        return result.data[0]

    async def start_workout_session(self, user_id: int, session: WorkoutSession) -> WorkoutSession:
        """
        Начать тренировку: запись без end_time, подходы дописываются по ходу
        """
        try:
            row = self.client.table("workout_sessions").insert({
                "user_id": user_id,
                "date": session.date.isoformat(),
                "name": session.name,
                "start_time": datetime.now().isoformat(),
                "end_time": None,
                "duration": 0,
                "exercises": self._session_exercises(session.exercises)
            }).execute().data[0]
        except APIError as e:
            logger.error(f"Ошибка начала тренировки: {e}")
            raise

        session.id = row["id"]
        logger.info(f"Тренировка {session.id} начата пользователем {user_id}")
        return session

    async def update_workout_session(self, session: WorkoutSession) -> Dict:
        """Сохранить записанные подходы незавершенной тренировки"""
        try:
            result = self.client.table("workout_sessions")\
                .update({"exercises": self._session_exercises(session.exercises)})\
                .eq("id", session.id)\
                .execute()
        except APIError as e:
            logger.error(f"Ошибка сохранения подходов тренировки {session.id}: {e}")
            raise
        return result.data[0] if result.data else {}

    async def complete_workout_session(self, session: WorkoutSession) -> Dict:
        """Завершить тренировку: длительность, подходы и end_time"""
        try:
            result = self.client.table("workout_sessions").update({
                "end_time": datetime.now().isoformat(),
                "duration": session.duration,
                "exercises": self._session_exercises(session.exercises)
            }).eq("id", session.id).execute()
        except APIError as e:
            logger.error(f"Ошибка завершения тренировки {session.id}: {e}")
            raise

        logger.info(f"Тренировка {session.id} завершена ({session.duration} мин)")
        return result.data[0] if result.data else {}

    async def cancel_workout_session(self, session_id: Any):
        """Отменить незавершенную тренировку"""
        try:
            self.client.table("workout_sessions").delete().eq("id", session_id).is_("end_time", "null").execute()
        except APIError as e:
            logger.error(f"Ошибка отмены тренировки {session_id}: {e}")
            raise
        logger.info(f"Тренировка {session_id} отменена")

    async def get_completed_sessions(self, user_id: int, days: int = 90, today: Optional[date] = None) -> List[WorkoutSession]:
        """Завершенные тренировки за последние N дней (по возрастанию даты)"""
        cutoff = (today or date.today()) - timedelta(days=days)

        result = self.client.table("workout_sessions").select("*")\
            .eq("user_id", user_id)\
            .gte("date", cutoff.isoformat())\
            .not_.is_("end_time", "null")\
            .order("date")\
            .execute()

        return [self._session_from_row(row) for row in result.data]

    async def get_workout_session_history(self, user_id: int, limit: int = 10) -> List[WorkoutSession]:
        """Последние завершенные тренировки, новые первыми"""
        result = self.client.table("workout_sessions").select("*")\
            .eq("user_id", user_id)\
            .not_.is_("end_time", "null")\
            .order("date", desc=True)\
            .limit(limit)\
            .execute()

        return [self._session_from_row(row) for row in result.data]
