import pytest

from src.database.models import HeightUnit, WeightUnit
from src.utils.validators import DataValidator


@pytest.mark.parametrize("value, expected", [("13", 13), (" 25 ", 25), ("100", 100)])
def test_valid_age(value, expected):
    assert DataValidator.validate_age(value) == (True, expected, "")


@pytest.mark.parametrize("value", ["12", "101", "abc", "25.5"])
def test_invalid_age(value):
    ok, age, error = DataValidator.validate_age(value)
    assert not ok
    assert age is None
    assert error


def test_weight_in_kg_accepts_comma():
    assert DataValidator.validate_weight("70,5") == (True, 70.5, "")


def test_weight_range_is_checked_in_kg():
    assert DataValidator.validate_weight("29.9")[0] is False
    assert DataValidator.validate_weight("300")[0] is True

    ok, weight, _ = DataValidator.validate_weight("154", WeightUnit.LBS)
    assert ok and weight == 154

    ok, weight, error = DataValidator.validate_weight("66", "lbs")
    assert not ok
    assert "lbs" in error


def test_height_in_feet_is_converted_before_range_check():
    assert DataValidator.validate_height("5.75", HeightUnit.FT_IN) == (True, 5.75, "")
    ok, _, error = DataValidator.validate_height("3", "ft-in")
    assert not ok
    assert "фута" in error


def test_height_in_cm():
    assert DataValidator.validate_height("175") == (True, 175.0, "")
    assert DataValidator.validate_height("99")[0] is False
    assert DataValidator.validate_height("251")[0] is False
    assert DataValidator.validate_height("tall")[2] == "Пожалуйста, введите корректное число"


def test_workout_frequency():
    assert DataValidator.validate_workout_frequency("7") == (True, 7, "")
    assert DataValidator.validate_workout_frequency("0")[0] is False
    assert DataValidator.validate_workout_frequency("8")[0] is False


def test_equipment():
    assert DataValidator.validate_equipment(["home", "dumbbells"]) == (True, ["home", "dumbbells"], "")

    ok, _, error = DataValidator.validate_equipment([])
    assert not ok and "хотя бы один" in error

    ok, _, error = DataValidator.validate_equipment(["home", "jetpack"])
    assert not ok and "jetpack" in error


def test_calories():
    assert DataValidator.validate_calories("2000") == (True, 2000, "")
    assert DataValidator.validate_calories("499")[0] is False
    assert DataValidator.validate_calories("lots")[0] is False


def test_sets_with_weights_and_comma_decimals():
    ok, sets, error = DataValidator.validate_sets("10x20 8х22,5  6*25")

    assert ok and error == ""
    assert [(s.reps, s.weight) for s in sets] == [(10, 20.0), (8, 22.5), (6, 25.0)]


def test_sets_without_weight():
    ok, sets, _ = DataValidator.validate_sets("12 12 10")
    assert ok
    assert [s.weight for s in sets] == [None, None, None]
    assert sum(s.volume for s in sets) == 34


@pytest.mark.parametrize("value", ["", "ten", "10x", "0x20", "10x-5", "10x20x3", "101", " ".join(["10"] * 11)])
def test_invalid_sets(value):
    ok, sets, error = DataValidator.validate_sets(value)
    assert not ok
    assert sets is None
    assert error
