import copy
import itertools

import pytest
from postgrest.exceptions import APIError

from src.database.models import (
    Difficulty,
    Exercise,
    ExerciseCategory,
    FoodItem,
    MacroBreakdown,
)


def make_food(food_id, name, category, calories, protein=0, carbs=0, fats=0, common=False):
    return FoodItem(
        id=food_id,
        name=name,
        category=category,
        serving_size="1 serving",
        calories=calories,
        macros=MacroBreakdown(protein=protein, carbs=carbs, fats=fats),
        common_locally=common
    )


def make_exercise(exercise_id, name, muscle_groups, category=ExerciseCategory.STRENGTH,
                  difficulty=Difficulty.INTERMEDIATE, equipment=None, form_tips=None, beginner=None):
    return Exercise(
        id=exercise_id,
        name=name,
        category=category,
        muscle_groups=list(muscle_groups),
        equipment=list(equipment or ["home"]),
        difficulty=difficulty,
        form_tips=list(form_tips or []),
        beginner_modifications=list(beginner or [])
    )


@pytest.fixture
def breakfast_catalog():
    return [
        make_food("f1", "Garlic Rice", "grains", 300, protein=5, carbs=60, fats=4),
        make_food("f2", "Boiled Egg", "protein", 80, protein=6, carbs=1, fats=5),
        make_food("f3", "Chicken Breast", "protein", 165, protein=31, carbs=0, fats=4),
        make_food("f4", "Whole Milk", "dairy", 150, protein=8, carbs=12, fats=8),
        make_food("f5", "Banana", "fruits", 105, protein=1, carbs=27, fats=0),
        make_food("f6", "Peanuts", "snacks", 160, protein=7, carbs=5, fats=14),
    ]


@pytest.fixture
def exercise_catalog():
    return [
        make_exercise("e1", "Push-up", ["chest", "triceps", "shoulders"], difficulty=Difficulty.BEGINNER,
                      form_tips=["Keep your core tight"], beginner=["Do knee push-ups"]),
        make_exercise("e2", "Dumbbell Fly", ["chest"], equipment=["dumbbells"]),
        make_exercise("e3", "Bodyweight Squat", ["legs", "glutes"]),
        make_exercise("e4", "Bent-over Row", ["back", "biceps"], equipment=["dumbbells"]),
        make_exercise("e5", "Bicep Curl", ["biceps"], equipment=["dumbbells"]),
        make_exercise("e6", "Overhead Press", ["shoulders", "triceps"], equipment=["dumbbells"]),
        make_exercise("e7", "Jogging", ["legs"], category=ExerciseCategory.CARDIO),
        make_exercise("e8", "Plank", ["core"]),
        make_exercise("e9", "Lunge", ["legs"]),
    ]


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Минимальная копия цепочки запросов supabase-py поверх списков в памяти"""

    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self.action = "select"
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.order_by = None
        self.order_desc = False
        self.limit_count = None
        self.negate_next = False

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict=None):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.action = "delete"
        return self

    @property
    def not_(self):
        self.negate_next = True
        return self

    def _add_filter(self, check):
        if self.negate_next:
            self.negate_next = False
            self.filters.append(lambda row: not check(row))
        else:
            self.filters.append(check)
        return self

    def eq(self, column, value):
        return self._add_filter(lambda row: row.get(column) == value)

    def neq(self, column, value):
        return self._add_filter(lambda row: row.get(column) != value)

    def is_(self, column, value):
        expected = None if value == "null" else value
        return self._add_filter(lambda row: row.get(column) is expected)

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def overlaps(self, column, values):
        values = set(values)
        self.filters.append(lambda row: bool(set(row.get(column) or []) & values))
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def or_(self, expression):
        conditions = []
        for part in expression.split(","):
            column, operator, pattern = part.split(".", 2)
            assert operator == "ilike"
            conditions.append((column, pattern.strip("%").lower()))
        self.filters.append(
            lambda row: any(needle in (row.get(column) or "").lower() for column, needle in conditions)
        )
        return self

    def order(self, column, desc=False):
        self.order_by, self.order_desc = column, desc
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        self.client.calls.append((self.table_name, self.action))
        if (self.table_name, self.action) in self.client.failures:
            raise APIError({"message": "write failed", "code": "500"})

        rows = self.client.tables.setdefault(self.table_name, [])

        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {"id": next(self.client.ids), **copy.deepcopy(payload)}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self.action == "delete":
            deleted = [row for row in rows if self._matches(row)]
            rows[:] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(deleted))

        if self.action == "upsert":
            for row in rows:
                if row.get(self.on_conflict) == self.payload.get(self.on_conflict):
                    row.update(copy.deepcopy(self.payload))
                    return FakeResponse([copy.deepcopy(row)])
            row = {"id": next(self.client.ids), **copy.deepcopy(self.payload)}
            rows.append(row)
            return FakeResponse([copy.deepcopy(row)])

        result = [row for row in rows if self._matches(row)]
        if self.order_by:
            result = sorted(result, key=lambda row: row.get(self.order_by), reverse=self.order_desc)
        if self.limit_count is not None:
            result = result[:self.limit_count]
        return FakeResponse(copy.deepcopy(result))


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = tables or {}
        self.calls = []
        self.failures = set()
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()
