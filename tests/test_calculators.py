import pytest

from src.database.models import ActivityLevel, Gender, Goal, HeightUnit, UserProfile, WeightUnit
from src.utils.calculators import NutritionCalculator, convert_height, convert_weight, round_half_up


def test_bmr_reference_values():
    assert NutritionCalculator.calculate_bmr(25, Gender.MALE, 70, 175) == pytest.approx(1673.75)
    assert NutritionCalculator.calculate_bmr(30, "female", 60, 165) == pytest.approx(1320.25)


def test_bmr_male_exceeds_female_by_166():
    male = NutritionCalculator.calculate_bmr(40, "male", 82.5, 181)
    female = NutritionCalculator.calculate_bmr(40, "female", 82.5, 181)
    assert male - female == pytest.approx(166)


def test_tdee_increases_with_activity():
    values = [NutritionCalculator.calculate_tdee(1600, level) for level in ActivityLevel]
    assert values == sorted(values)
    assert len(set(values)) == 4
    assert NutritionCalculator.calculate_tdee(1000, "sedentary") == pytest.approx(1200)


def test_unknown_activity_level_is_rejected():
    with pytest.raises(ValueError):
        NutritionCalculator.calculate_tdee(1600, "couch-potato")


def test_goal_adjustment_uses_range_midpoint():
    assert NutritionCalculator.adjust_calories_for_goal(2500, Goal.BULKING) == 2850
    assert NutritionCalculator.adjust_calories_for_goal(2500, "cutting") == 2100
    assert NutritionCalculator.adjust_calories_for_goal(2500, "maintain") == 2500


def test_macros_reference_vector():
    macros = NutritionCalculator.calculate_macros(2400, Goal.BULKING)
    assert (macros.protein.grams, macros.protein.calories) == (150, 600)
    assert (macros.carbs.grams, macros.carbs.calories) == (270, 1080)
    assert (macros.fats.grams, macros.fats.calories) == (80, 720)


@pytest.mark.parametrize("goal", list(Goal))
@pytest.mark.parametrize("calories", [1415, 1999, 2945, 3333])
def test_macro_calories_drift_stays_small(goal, calories):
    macros = NutritionCalculator.calculate_macros(calories, goal)
    assert abs(macros.total_calories - calories) <= 3


def test_complete_tdee_male_bulking():
    result = NutritionCalculator.calculate_complete_tdee(25, "male", 70, 175, "moderately-active", "bulking")
    assert (result.bmr, result.tdee, result.target_calories) == (1674, 2595, 2945)


def test_complete_tdee_female_cutting():
    result = NutritionCalculator.calculate_complete_tdee(30, "female", 60, 165, "lightly-active", "cutting")
    assert (result.bmr, result.tdee, result.target_calories) == (1320, 1815, 1415)


def test_profile_fields_are_flat_copy():
    result = NutritionCalculator.calculate_complete_tdee(25, "male", 70, 175, "moderately-active", "bulking")
    fields = result.to_profile_fields()
    assert fields["target_calories"] == 2945
    assert fields["protein_grams"] == result.macros.protein.grams
    assert fields["fats_calories"] == result.macros.fats.calories


def test_round_half_up_is_not_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(1673.5) == 1674
    assert round_half_up(1673.49) == 1673


def test_height_conversion():
    assert convert_height(5.75, HeightUnit.FT_IN, HeightUnit.CM) == pytest.approx(175.26)
    assert convert_height(180, "cm", "cm") == 180
    for cm in (150, 172.5, 199):
        back = convert_height(convert_height(cm, "cm", "ft-in"), "ft-in", "cm")
        assert back == pytest.approx(cm, abs=0.5)


def test_weight_conversion():
    assert convert_weight(100, WeightUnit.LBS, WeightUnit.KG) == pytest.approx(45.3592)
    assert convert_weight(70, "kg", "kg") == 70
    for kg in (45, 70.3, 150):
        assert convert_weight(convert_weight(kg, "kg", "lbs"), "lbs", "kg") == pytest.approx(kg, abs=1e-2)


def test_profile_in_imperial_units():
    profile = UserProfile(
        user_id=1, age=25, gender=Gender.MALE,
        height_value=5.75, height_unit=HeightUnit.FT_IN,
        weight_value=154.324, weight_unit=WeightUnit.LBS,
        body_composition="average", goal=Goal.MAINTAIN,
        activity_level=ActivityLevel.SEDENTARY, workout_frequency=3,
        available_equipment=["home"]
    )
    metrics = NutritionCalculator.metrics_from_profile(profile)
    assert metrics.height_cm == pytest.approx(175.26)
    assert metrics.weight_kg == pytest.approx(70.0, abs=0.01)


def test_methodology_explanation_mentions_numbers():
    result = NutritionCalculator.calculate_complete_tdee(25, "male", 70, 175, "moderately-active", "bulking")
    text = NutritionCalculator.get_methodology_explanation("moderately-active", "bulking", result)
    assert "1674" in text
    assert "2945" in text
    assert "1.55" in text
