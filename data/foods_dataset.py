FOODS_DATA = [
    # Proteins
    {"name": "Chicken Breast", "category": "protein", "calories": 165, "protein": 31, "carbs": 0, "fat": 3.6, "serving_size": 100, "serving_unit": "g", "restrictions": []},
    {"name": "Salmon Fillet", "category": "protein", "calories": 208, "protein": 20, "carbs": 0, "fat": 13, "serving_size": 100, "serving_unit": "g", "restrictions": ["fish"]},
    {"name": "Whole Egg", "category": "protein", "calories": 78, "protein": 6.3, "carbs": 0.6, "fat": 5.3, "serving_size": 50, "serving_unit": "g", "restrictions": ["egg", "vegetarian"]},
    {"name": "Firm Tofu", "category": "protein", "calories": 144, "protein": 17, "carbs": 3, "fat": 9, "serving_size": 100, "serving_unit": "g", "restrictions": ["soy", "vegan", "vegetarian"]},
    {"name": "Greek Yogurt", "category": "dairy", "calories": 59, "protein": 10, "carbs": 3.6, "fat": 0.4, "serving_size": 100, "serving_unit": "g", "restrictions": ["lactose", "vegetarian"]},
    # Carbohydrates
    {"name": "Rolled Oats", "category": "grain", "calories": 379, "protein": 13, "carbs": 68, "fat": 6.5, "fiber": 10, "serving_size": 100, "serving_unit": "g", "restrictions": ["gluten", "vegan", "vegetarian"]},
    {"name": "Brown Rice (cooked)", "category": "grain", "calories": 112, "protein": 2.3, "carbs": 24, "fat": 0.8, "fiber": 1.8, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Whole Wheat Bread", "category": "grain", "calories": 82, "protein": 4, "carbs": 14, "fat": 1.1, "fiber": 1.9, "serving_size": 32, "serving_unit": "g", "restrictions": ["gluten", "vegan", "vegetarian"]},
    {"name": "Sweet Potato", "category": "vegetable", "calories": 86, "protein": 1.6, "carbs": 20, "fat": 0.1, "fiber": 3, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    # Fruit & vegetables
    {"name": "Banana", "category": "fruit", "calories": 105, "protein": 1.3, "carbs": 27, "fat": 0.4, "fiber": 3.1, "serving_size": 118, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Blueberries", "category": "fruit", "calories": 57, "protein": 0.7, "carbs": 14, "fat": 0.3, "fiber": 2.4, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Broccoli", "category": "vegetable", "calories": 34, "protein": 2.8, "carbs": 7, "fat": 0.4, "fiber": 2.6, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Spinach", "category": "vegetable", "calories": 23, "protein": 2.9, "carbs": 3.6, "fat": 0.4, "fiber": 2.2, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    # Fats
    {"name": "Avocado", "category": "fat", "calories": 160, "protein": 2, "carbs": 8.5, "fat": 14.7, "fiber": 6.7, "serving_size": 100, "serving_unit": "g", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Almonds", "category": "fat", "calories": 164, "protein": 6, "carbs": 6, "fat": 14, "fiber": 3.5, "serving_size": 28, "serving_unit": "g", "restrictions": ["tree_nuts", "vegan", "vegetarian"]},
    {"name": "Olive Oil", "category": "fat", "calories": 119, "protein": 0, "carbs": 0, "fat": 13.5, "serving_size": 13.5, "serving_unit": "ml", "restrictions": ["vegan", "vegetarian"]},
    {"name": "Semi-skimmed Milk", "category": "dairy", "calories": 122, "protein": 8, "carbs": 12, "fat": 4.8, "serving_size": 244, "serving_unit": "ml", "restrictions": ["lactose", "vegetarian"]},
]
