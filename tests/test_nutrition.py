import pytest

from gymapp.errors import ValidationError
from gymapp.services import nutrition


def test_mifflin_st_jeor_maintenance_for_reference_male():
    # 10*70 + 6.25*175 - 5*30 + 5 = 1648.75; * 1.55 = 2555.5625
    assert nutrition.calculate_bmr(70, 175, 30, 'male') == 1648.75
    assert nutrition.calculate_calorie_needs(70, 175, 30, 'male', 'maintain') == 2556


@pytest.mark.parametrize('goal, expected', [
    ('gain', 3056),
    ('lose', 2056),
    ('lose-significant', 1806),
    ('maintain', 2556),
    ('anything-else', 2556),
])
def test_goal_adjustments(goal, expected):
    assert nutrition.calculate_calorie_needs(70, 175, 30, 'male', goal) == expected


@pytest.mark.parametrize('gender', ['female', 'other', None])
def test_non_male_uses_female_constant(gender):
    # 10*60 + 6.25*165 - 5*25 - 161 = 1345.25; * 1.55 = 2085.1375
    assert nutrition.calculate_bmr(60, 165, 25, gender) == 1345.25
    assert nutrition.calculate_calorie_needs(60, 165, 25, gender) == 2085


def test_half_rounds_up():
    assert nutrition.js_round(2.5) == 3
    assert nutrition.js_round(2.4999) == 2


@pytest.mark.parametrize('bmi, category', [
    (15.0, 'Underweight'),
    (18.49, 'Underweight'),
    (18.5, 'Normal weight'),
    (24.99, 'Normal weight'),
    (25.0, 'Overweight'),
    (29.99, 'Overweight'),
    (30.0, 'Obese'),
    (42.0, 'Obese'),
])
def test_bmi_category_boundaries(bmi, category):
    assert nutrition.bmi_category(bmi) == category


def test_calculate_bmi():
    assert round(nutrition.calculate_bmi(70, 175), 2) == 22.86


def test_recommend_normal_weight():
    result = nutrition.recommend(70, 175, 30, 'male')
    assert result['bmi'] == 22.9
    assert result['category'] == 'Normal weight'
    assert result['dailyCalories'] == 2556
    assert result['suggestedDietPlan'] == 'health-wellness'
    assert result['keyRecommendations'][0] == 'Focus on whole, unprocessed foods'


def test_recommend_obese_targets_significant_loss():
    result = nutrition.recommend(110, 170, 40, 'male')
    assert result['category'] == 'Obese'
    # 10*110 + 6.25*170 - 200 + 5 = 1967.5 -> round(3049.625) = 3050 - 750
    assert result['dailyCalories'] == 2300
    assert 'note' in result


@pytest.mark.parametrize('weight, height, age', [
    (None, 175, 30),
    (70, 0, 30),
    ('heavy', 175, 30),
    (70, 175, -1),
    (float('nan'), 175, 30),
    ('nan', 175, 30),
    (70, float('inf'), 30),
    (70, 175, float('inf')),
    (True, 175, 30),
])
def test_recommend_validates_inputs(weight, height, age):
    with pytest.raises(ValidationError):
        nutrition.recommend(weight, height, age, 'male')
