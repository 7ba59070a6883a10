from datetime import date, datetime

from src.database.models import Goal, Language, MacroBreakdown, MealType
from src.utils.calculators import NutritionCalculator
from src.utils.meal_planner import (
    CulturalContext,
    MealPlanGenerator,
    MealPlanOptions,
    generate_meal_plan,
)

from conftest import make_food


def _options(goal=Goal.MAINTAIN, language=Language.EN, context=None):
    return MealPlanOptions(
        target_calories=2000,
        target_macros=MacroBreakdown(protein=150, carbs=200, fats=67),
        goal=goal,
        language=language,
        cultural_context=context or CulturalContext()
    )


def test_breakfast_greedy_selection(breakfast_catalog):
    meal = MealPlanGenerator().generate_meal(MealType.BREAKFAST, _options(), breakfast_catalog)

    # белок, углеводы, жиры, затем добор до 110% от 500 ккал
    assert [item.food.name for item in meal.foods] == ["Chicken Breast", "Banana", "Whole Milk", "Boiled Egg"]
    assert meal.calories == 500


def test_meal_totals_are_sum_of_foods(breakfast_catalog):
    plan = generate_meal_plan(2000, MacroBreakdown(150, 200, 67), breakfast_catalog, Goal.MAINTAIN, date(2024, 5, 1))

    assert [meal.type for meal in plan.meals] == list(MealType)
    for meal in plan.meals:
        assert meal.calories == sum(item.food.calories for item in meal.foods)
        assert meal.macros.protein == sum(item.food.macros.protein for item in meal.foods)
    assert plan.total_calories == sum(meal.calories for meal in plan.meals)
    assert plan.date == date(2024, 5, 1)


def test_meal_never_exceeds_five_foods():
    catalog = [make_food(f"s{i}", f"Snack {i}", "snacks", 20) for i in range(12)]
    meal = MealPlanGenerator().generate_meal(MealType.MERIENDA, _options(), catalog)
    assert len(meal.foods) == 5


def test_empty_catalog_gives_empty_meals():
    plan = MealPlanGenerator().generate_meal_plan(_options(), [])
    assert len(plan.meals) == 4
    assert all(not meal.foods for meal in plan.meals)
    assert plan.total_calories == 0


def test_prioritized_foods_used_when_more_than_ten():
    catalog = [make_food(f"r{i}", f"Rice Bowl {i}", "grains", 200, carbs=40) for i in range(11)]
    catalog.append(make_food("cf", "Corn Flakes", "grains", 150, carbs=30))

    foods = MealPlanGenerator().get_meal_specific_foods(MealType.BREAKFAST, catalog)
    assert "Corn Flakes" not in [food.name for food in foods]
    assert len(foods) == 11


def test_full_list_used_when_ten_or_fewer_prioritized():
    catalog = [make_food(f"r{i}", f"Rice Bowl {i}", "grains", 200, carbs=40) for i in range(10)]
    catalog.append(make_food("cf", "Corn Flakes", "grains", 150, carbs=30))

    foods = MealPlanGenerator().get_meal_specific_foods(MealType.BREAKFAST, catalog)
    assert "Corn Flakes" in [food.name for food in foods]
    assert len(foods) == 11


def test_prioritized_order_common_dishes_then_local_without_duplicates():
    catalog = [make_food("loc", "Kesong Puti", "dairy", 90, common=True)]
    catalog += [make_food(f"e{i}", f"Egg Dish {i}", "protein", 120, protein=12, common=True) for i in range(10)]

    foods = MealPlanGenerator().get_meal_specific_foods(MealType.BREAKFAST, catalog)
    names = [food.name for food in foods]
    assert names[:10] == [f"Egg Dish {i}" for i in range(10)]
    assert names[10] == "Kesong Puti"
    assert len(names) == len(set(names))


def test_foods_outside_meal_categories_are_ignored(breakfast_catalog):
    foods = MealPlanGenerator().get_meal_specific_foods(MealType.BREAKFAST, breakfast_catalog)
    assert "Peanuts" not in [food.name for food in foods]


def test_suggestions_have_alternatives_and_explanation():
    catalog = [
        make_food("p1", "Bangus", "protein", 200, protein=25, fats=10),
        make_food("p2", "Chicken Adobo", "protein", 250, protein=28, fats=12),
        make_food("p3", "Pork Sinigang", "protein", 230, protein=20, fats=14),
        make_food("g1", "Steamed Rice", "grains", 200, carbs=45),
    ]
    options = _options(goal=Goal.CUTTING, language=Language.FIL)
    suggestions = MealPlanGenerator().generate_meal_suggestions(MealType.LUNCH, options, catalog, seed=7)

    assert len(suggestions) == 3
    for suggestion in suggestions:
        assert suggestion.explanation.startswith("Lean protein na ulam")
        assert "Mag-hydrate" in suggestion.explanation
        meal_categories = {item.food.category for item in suggestion.meal.foods}
        assert suggestion.alternatives
        assert all(food.category in meal_categories for food in suggestion.alternatives)


def test_context_notes_for_night_shift_and_rain():
    options = _options(context=CulturalContext(work_schedule="night", climate="rainy"))
    notes = MealPlanGenerator().generate_context_notes(MealType.DINNER, options)
    assert "night-shift" in notes
    assert "rainy days" in notes


def test_no_context_notes_for_cool_day_schedule():
    options = _options(context=CulturalContext(work_schedule="day", climate="cool"))
    assert MealPlanGenerator().generate_context_notes(MealType.DINNER, options) == ""


def test_recommended_meal_times():
    generator = MealPlanGenerator()
    assert generator.get_recommended_meal_times("day")["merienda"] == "15:30"
    assert generator.get_recommended_meal_times("night")["lunch"] == "00:00"

    flex = generator.get_recommended_meal_times("flex", now=datetime(2024, 5, 1, 14, 0))
    assert flex == {"breakfast": "10:00", "lunch": "14:00", "merienda": "17:30", "dinner": "21:00"}

    early = generator.get_recommended_meal_times("flex", now=datetime(2024, 5, 1, 6, 0))
    assert early["breakfast"] == "08:00"


def test_options_from_calculation():
    calculation = NutritionCalculator.calculate_complete_tdee(25, "male", 70, 175, "moderately-active", "bulking")
    options = MealPlanOptions.from_calculation(calculation, "bulking", "fil")

    assert options.target_calories == 2945
    assert options.target_macros.protein == calculation.macros.protein.grams
    assert options.language == Language.FIL


def test_carb_source_skipped_when_protein_covers_most_calories():
    protein = make_food("p", "Lechon Kawali", "protein", 420, protein=40)
    carbs = make_food("c", "Steamed Rice", "grains", 200, carbs=45)

    selected = MealPlanGenerator().select_foods_for_macros(
        [protein, carbs], 500, MacroBreakdown(protein=30, carbs=60, fats=15)
    )

    # 420 ккал >= 80% от 500, а рис уже не влезает в 110%
    assert selected == [protein]


def test_fat_source_rejected_past_calorie_ceiling():
    chicken = make_food("p", "Chicken Breast", "protein", 165, protein=31, fats=4)
    banana = make_food("c", "Banana", "fruits", 105, carbs=27)
    oil = make_food("f", "Coconut Oil", "fats", 300, fats=20)

    selected = MealPlanGenerator().select_foods_for_macros(
        [chicken, banana, oil], 500, MacroBreakdown(protein=30, carbs=60, fats=20)
    )

    # 270 + 300 = 570 > 550
    assert selected == [chicken, banana]


def test_equal_density_follows_catalog_order():
    tilapia = make_food("a", "Tilapia", "protein", 100, protein=20)
    tokwa = make_food("b", "Tokwa", "protein", 150, protein=30)
    generator = MealPlanGenerator()
    macros = MacroBreakdown(protein=75, carbs=100, fats=30)

    assert generator.select_foods_for_macros([tilapia, tokwa], 1000, macros) == [tilapia, tokwa]
    assert generator.select_foods_for_macros([tokwa, tilapia], 1000, macros) == [tokwa, tilapia]


def test_suggestions_vary_and_repeat_for_same_seed():
    catalog = [make_food(f"p{i}", f"Fish Fillet {i}", "protein", 100, protein=20) for i in range(6)]
    catalog.append(make_food("g1", "Steamed Rice", "grains", 200, carbs=45))
    generator = MealPlanGenerator()

    first = generator.generate_meal_suggestions(MealType.LUNCH, _options(), catalog, count=6, seed=3)
    again = generator.generate_meal_suggestions(MealType.LUNCH, _options(), catalog, count=6, seed=3)

    def ids(suggestions):
        return [[item.food.id for item in s.meal.foods] for s in suggestions]

    assert ids(first) == ids(again)
    assert len({tuple(meal) for meal in ids(first)}) > 1
    catalog_ids = {food.id for food in catalog}
    assert all(set(meal) <= catalog_ids for meal in ids(first))
