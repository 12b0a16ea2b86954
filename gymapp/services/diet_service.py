"""
Diet plan selection and the fixed daily meal plans.

Meal plans are static per category. Calories here do not depend on the
member's body measurements; see nutrition.py for the BMI-based estimator.
"""

import copy

from flask import current_app

from gymapp.errors import ValidationError
from gymapp.models.member import DIET_PLANS
from gymapp.services import events
from gymapp.services.persistence import commit

DEFAULT_DIET_PLAN = 'health-wellness'

DIET_PLAN_CATALOG = [
    {
        'id': 'weight-loss',
        'name': 'Weight Loss',
        'description': 'Perfect for those looking to shed pounds and improve overall health',
        'features': [
            'Calorie deficit meal plans',
            'High-protein options',
            'Low-carb alternatives',
            'Meal prep guides',
            'Shopping lists',
            'Progress tracking'
        ],
        'macronutrientSplit': {'protein': '30%', 'carbs': '40%', 'fats': '30%'}
    },
    {
        'id': 'muscle-building',
        'name': 'Muscle Building',
        'description': 'Optimized for muscle growth and strength gains',
        'features': [
            'High-protein meal plans',
            'Calorie surplus options',
            'Pre/post workout meals',
            'Supplement recommendations',
            'Meal timing guides',
            'Progress tracking'
        ],
        'macronutrientSplit': {'protein': '40%', 'carbs': '40%', 'fats': '20%'}
    },
    {
        'id': 'athletic-performance',
        'name': 'Athletic Performance',
        'description': 'Designed for athletes and active individuals',
        'features': [
            'Performance-optimized meals',
            'Energy-dense options',
            'Hydration guides',
            'Pre-competition meals',
            'Recovery nutrition',
            'Progress tracking'
        ],
        'macronutrientSplit': {'protein': '30%', 'carbs': '50%', 'fats': '20%'}
    },
    {
        'id': 'health-wellness',
        'name': 'Health & Wellness',
        'description': 'Balanced nutrition for overall health and well-being',
        'features': [
            'Balanced meal plans',
            'Whole food focus',
            'Anti-inflammatory options',
            'Gut health support',
            'Mindful eating guides',
            'Progress tracking'
        ],
        'macronutrientSplit': {'protein': '25%', 'carbs': '45%', 'fats': '30%'}
    }
]


def _meal(name, calories, protein, carbs, fats, ingredients=None):
    meal = {
        'name': name,
        'calories': calories,
        'macros': {'protein': protein, 'carbs': carbs, 'fats': fats},
    }
    if ingredients is not None:
        meal['ingredients'] = ingredients
    return meal


MEAL_PLANS = {
    'weight-loss': {
        'breakfast': _meal('High-Protein Breakfast Bowl', 350, 25, 35, 15,
                           ['Eggs', 'Oatmeal', 'Greek yogurt', 'Berries', 'Almonds']),
        'lunch': _meal('Grilled Chicken Salad', 400, 35, 25, 20,
                       ['Chicken breast', 'Mixed greens', 'Cherry tomatoes', 'Cucumber', 'Olive oil']),
        'dinner': _meal('Baked Salmon with Vegetables', 450, 40, 30, 25,
                        ['Salmon', 'Broccoli', 'Sweet potato', 'Lemon', 'Herbs']),
        'snacks': [
            _meal('Protein Smoothie', 200, 20, 25, 5),
            _meal('Mixed Nuts', 150, 5, 10, 12),
        ],
    },
    'muscle-building': {
        'breakfast': _meal('Protein-Packed Breakfast', 500, 35, 45, 20,
                           ['Eggs', 'Whole grain toast', 'Avocado', 'Banana', 'Protein powder']),
        'lunch': _meal('Turkey and Quinoa Bowl', 550, 45, 50, 20,
                       ['Ground turkey', 'Quinoa', 'Mixed vegetables', 'Olive oil', 'Spices']),
        'dinner': _meal('Steak and Sweet Potato', 600, 50, 60, 25,
                        ['Lean steak', 'Sweet potato', 'Green beans', 'Butter', 'Herbs']),
        'snacks': [
            _meal('Protein Shake', 250, 25, 30, 5),
            _meal('Greek Yogurt with Granola', 200, 15, 25, 8),
        ],
    },
    'athletic-performance': {
        'breakfast': _meal('Energy Boost Breakfast', 450, 25, 60, 15,
                           ['Oatmeal', 'Banana', 'Honey', 'Almonds', 'Protein powder']),
        'lunch': _meal('Power Bowl', 500, 30, 65, 15,
                       ['Brown rice', 'Chicken', 'Mixed vegetables', 'Sauce', 'Seeds']),
        'dinner': _meal('Performance Dinner', 550, 35, 70, 15,
                        ['Pasta', 'Lean meat', 'Vegetables', 'Olive oil', 'Herbs']),
        'snacks': [
            _meal('Energy Bar', 200, 10, 30, 5),
            _meal('Fruit and Nuts', 150, 5, 20, 8),
        ],
    },
    'health-wellness': {
        'breakfast': _meal('Balanced Breakfast Bowl', 400, 20, 45, 20,
                           ['Quinoa', 'Eggs', 'Avocado', 'Spinach', 'Seeds']),
        'lunch': _meal('Mediterranean Bowl', 450, 25, 50, 20,
                       ['Chickpeas', 'Mixed vegetables', 'Olive oil', 'Feta', 'Herbs']),
        'dinner': _meal('Healthy Dinner Plate', 500, 30, 55, 20,
                        ['Fish', 'Brown rice', 'Vegetables', 'Olive oil', 'Lemon']),
        'snacks': [
            _meal('Hummus and Vegetables', 150, 5, 15, 8),
            _meal('Mixed Berries', 100, 2, 20, 1),
        ],
    },
}


def list_plans() -> list:
    return DIET_PLAN_CATALOG


def daily_plan(plan) -> dict:
    """
    Fixed meal plan for a diet category.

    Unrecognized categories get the health-wellness plan instead of an error.
    Returns a copy so callers can't alter the catalog.
    """
    if not isinstance(plan, str) or plan not in MEAL_PLANS:
        plan = DEFAULT_DIET_PLAN
    return copy.deepcopy(MEAL_PLANS[plan])


def daily_totals(meal_plan: dict) -> dict:
    """Sum calories and macros across every meal and snack of a plan."""
    meals = [meal_plan['breakfast'], meal_plan['lunch'], meal_plan['dinner']] + meal_plan['snacks']
    totals = {'calories': 0, 'protein': 0, 'carbs': 0, 'fats': 0}
    for meal in meals:
        totals['calories'] += meal['calories']
        for macro in ('protein', 'carbs', 'fats'):
            totals[macro] += meal['macros'][macro]
    return totals


def current_plan(member) -> str:
    return member.diet_plan


def select_plan(member, plan) -> str:
    if plan not in DIET_PLANS:
        raise ValidationError('Invalid diet plan')

    member.diet_plan = plan
    commit('diet plan selection')

    current_app.logger.info(f"Member {member.id} selected diet plan {plan}")
    events.publish('members', events.UPDATE, new=member.to_dict())
    return member.diet_plan
