"""
BMI and calorie target estimator (Mifflin-St Jeor).

This is independent of diet_service.daily_plan: the meal plans carry fixed
calories per category, while this module estimates a target from the
member's body measurements. The two are not reconciled.
"""

import math

from gymapp.errors import ValidationError

ACTIVITY_MULTIPLIER = 1.55  # moderate activity

GOAL_ADJUSTMENTS = {
    'gain': 500,
    'lose': -500,
    'lose-significant': -750,
    'maintain': 0,
}

UNDERWEIGHT = 'Underweight'
NORMAL = 'Normal weight'
OVERWEIGHT = 'Overweight'
OBESE = 'Obese'

RECOMMENDATIONS = {
    UNDERWEIGHT: {
        'goal': 'gain',
        'suggestedDietPlan': 'muscle-building',
        'recommendation': 'Based on your BMI, we recommend our Muscle Building Diet Plan with '
                          'added calories to help you gain healthy weight.',
        'summary': 'Your goal should be to gain weight in a healthy way by consuming '
                   'nutrient-dense foods and a calorie surplus.',
        'macronutrients': [
            'Protein: 20-25% (focus on lean proteins like chicken, fish, eggs, dairy, legumes)',
            'Carbohydrates: 50-60% (whole grains, starchy vegetables, fruits)',
            'Fats: 25-30% (healthy oils, nuts, avocados)',
        ],
        'mealStructure': [
            'Breakfast: High-protein breakfast with healthy carbs',
            'Mid-morning snack: Protein and healthy fats (nuts, yogurt)',
            'Lunch: Balanced meal with protein, complex carbs, and vegetables',
            'Afternoon snack: Protein shake or fruit with nut butter',
            'Dinner: Hearty meal with protein, starchy vegetables, and healthy fats',
            'Evening snack: Protein-rich snack before bed',
        ],
        'keyRecommendations': [
            'Eat frequently - 5-6 smaller meals throughout the day',
            'Include calorie-dense foods like nuts, dried fruits, and healthy oils',
            'Drink smoothies made with fruits, milk, protein powder, and nut butters',
            'Combine with strength training for muscle gain rather than just fat gain',
        ],
    },
    NORMAL: {
        'goal': 'maintain',
        'suggestedDietPlan': 'health-wellness',
        'recommendation': 'Based on your BMI, we recommend our Health & Wellness Diet Plan to '
                          'maintain your healthy weight and optimize nutrition.',
        'summary': 'Your goal should be to maintain your healthy weight while focusing on '
                   'optimal nutrition and performance.',
        'macronutrients': [
            'Protein: 15-20% (lean meats, fish, plant proteins)',
            'Carbohydrates: 45-55% (focus on high-fiber complex carbs)',
            'Fats: 25-35% (emphasize unsaturated fats)',
        ],
        'mealStructure': [
            'Breakfast: Balanced breakfast with protein and fiber',
            'Lunch: Lean protein with complex carbs and plenty of vegetables',
            'Snacks: Whole foods like fruits, nuts, yogurt',
            'Dinner: Lean protein, vegetables, and moderate carbohydrates',
        ],
        'keyRecommendations': [
            'Focus on whole, unprocessed foods',
            'Include a wide variety of colorful fruits and vegetables',
            'Stay hydrated with 2-3 liters of water daily',
            'Practice portion control and mindful eating',
            'Adjust calorie intake based on activity level',
        ],
    },
    OVERWEIGHT: {
        'goal': 'lose',
        'suggestedDietPlan': 'weight-loss',
        'recommendation': 'Based on your BMI, we recommend our Weight Loss Diet Plan with a '
                          'moderate calorie deficit to achieve healthy weight.',
        'summary': 'Your goal should be to gradually lose weight with a sustainable approach '
                   'focused on nutrition, not just calorie restriction.',
        'macronutrients': [
            'Protein: 25-30% (to preserve muscle mass during weight loss)',
            'Carbohydrates: 40-45% (focus on high-fiber options)',
            'Fats: 25-30% (emphasize healthy fats)',
        ],
        'mealStructure': [
            'Breakfast: High-protein breakfast with fiber',
            'Lunch: Lean protein with large portion of vegetables and small portion of complex carbs',
            'Snacks: Protein-based snacks with fiber (Greek yogurt, fruits, vegetables)',
            'Dinner: Protein with vegetables and minimal starchy carbs',
        ],
        'keyRecommendations': [
            'Create a moderate calorie deficit (300-500 calories below maintenance)',
            'Emphasize protein to maintain muscle and increase satiety',
            'Focus on high-volume, low-calorie foods like vegetables',
            'Limit refined carbohydrates and added sugars',
            'Practice portion control and mindful eating',
            'Include regular physical activity',
        ],
    },
    OBESE: {
        'goal': 'lose-significant',
        'suggestedDietPlan': 'weight-loss',
        'recommendation': 'Based on your BMI, we recommend our Weight Loss Diet Plan with '
                          'professional guidance for safe, sustainable weight loss.',
        'summary': 'Your goal should be to gradually lose weight with a comprehensive approach '
                   'that includes professional guidance.',
        'macronutrients': [
            'Protein: 30-35% (higher protein for satiety and muscle preservation)',
            'Carbohydrates: 35-40% (focus on high-fiber, low-glycemic options)',
            'Fats: 25-30% (emphasize omega-3 and monounsaturated fats)',
        ],
        'mealStructure': [
            'Breakfast: High-protein, low-carbohydrate options',
            'Lunch: Lean protein with abundant non-starchy vegetables',
            'Snacks: Protein and fiber-rich options',
            'Dinner: Lean protein with vegetables and minimal starchy foods',
        ],
        'keyRecommendations': [
            'Work with a healthcare provider or registered dietitian',
            'Focus on whole, unprocessed foods',
            'Consider a structured eating approach (e.g., intermittent fasting if approved by doctor)',
            'Monitor portions carefully',
            'Stay well-hydrated - drink water before meals',
            'Include regular physical activity with both cardio and strength training',
            'Track food intake to maintain awareness',
        ],
        'note': 'Please consult with a healthcare professional before starting this plan.',
    },
}


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return UNDERWEIGHT
    if bmi < 25:
        return NORMAL
    if bmi < 30:
        return OVERWEIGHT
    return OBESE


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Mifflin-St Jeor basal metabolic rate; non-male uses the female constant."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if gender == 'male' else base - 161


def js_round(value: float) -> int:
    """Round half up like Math.round: 2.5 -> 3, where round() gives 2."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def calculate_calorie_needs(weight_kg, height_cm, age, gender, goal='maintain') -> int:
    """Daily calorie target: BMR x activity multiplier, then the goal adjustment."""
    maintenance = js_round(calculate_bmr(weight_kg, height_cm, age, gender) * ACTIVITY_MULTIPLIER)
    return maintenance + GOAL_ADJUSTMENTS.get(goal, 0)


def _positive_number(raw, field):
    if isinstance(raw, bool):
        raise ValidationError(f"'{field}' must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"'{field}' must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"'{field}' must be a finite number")
    if value <= 0:
        raise ValidationError(f"'{field}' must be greater than zero")
    return value


def recommend(weight_kg, height_cm, age, gender) -> dict:
    """BMI, its category, the category's recommendation block and calorie target."""
    weight_kg = _positive_number(weight_kg, 'weight')
    height_cm = _positive_number(height_cm, 'height')
    age = int(_positive_number(age, 'age'))

    bmi = calculate_bmi(weight_kg, height_cm)
    category = bmi_category(bmi)
    block = RECOMMENDATIONS[category]

    result = {
        'bmi': round(bmi, 1),
        'category': category,
        'dailyCalories': calculate_calorie_needs(weight_kg, height_cm, age, gender, block['goal']),
    }
    result.update(block)
    return result
