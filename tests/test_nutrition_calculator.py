"""Tests for BMI, energy target and weight bucket calculations."""
from datetime import date

import pytest

from services.nutrition_calculator import nutrition_calculator as calc


def test_bmi_rounded_to_two_decimals():
    assert calc.calculate_bmi(170, 70) == 24.22
    assert calc.bmi_category(24.22) == "normal"


@pytest.mark.parametrize("height,weight", [(0, 70), (170, 0), (None, 70), (-170, 70)])
def test_bmi_missing_when_body_data_invalid(height, weight):
    assert calc.calculate_bmi(height, weight) is None
    assert calc.bmi_category(None) is None


@pytest.mark.parametrize("bmi,category", [(17.9, "underweight"), (18.5, "normal"), (25, "overweight"), (30, "obese")])
def test_bmi_categories(bmi, category):
    assert calc.bmi_category(bmi) == category


def test_age_counts_birthdays():
    assert calc.age_on(date(1990, 6, 15), today=date(2026, 6, 14)) == 35
    assert calc.age_on(date(1990, 6, 15), today=date(2026, 6, 15)) == 36


def test_target_calories_follow_weight_goal():
    assert calc.calculate_target_calories(2000, "lose") == 1500
    assert calc.calculate_target_calories(1500, "lose") == 1200
    assert calc.calculate_target_calories(2000, "gain") == 2300
    assert calc.calculate_target_calories(2000, "maintain") == 2000


def test_macros_use_preference_presets():
    assert calc.calculate_macros(2000) == {"protein": 150, "carbs": 200, "fat": 67}
    keto = calc.calculate_macros(2000, ["Keto"])
    assert keto["carbs"] == 50


@pytest.mark.parametrize("weight,label", [
    (59.9, "<60kg"), (60, "60-70kg"), (79.5, "70-80kg"), (85, "80-90kg"), (99.9, "90-100kg"), (100, ">100kg"),
])
def test_weight_buckets(weight, label):
    assert calc.weight_bucket(weight) == label
