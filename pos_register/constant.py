"""Editable seed catalog: categories, menu items, ingredients and recipes."""

from __future__ import annotations

CATEGORY_META_BY_ID: dict[int, dict[str, str | None]] = {
    1: {"name": "Meal", "search_key": None},
    2: {"name": "Side", "search_key": "s"},
    3: {"name": "Entree", "search_key": "e"},
    4: {"name": "Appetizer", "search_key": "a"},
    5: {"name": "Drink", "search_key": "r"},
}

# Meal items carry the meal's price; their names must match the meal labels.
MENU_META_BY_NAME: dict[str, dict[str, int | bool]] = {
    "Bowl": {"category_id": 1, "price_cents": 750, "active": True},
    "Plate": {"category_id": 1, "price_cents": 950, "active": True},
    "Bigger Plate": {"category_id": 1, "price_cents": 1100, "active": True},
    "White Steamed Rice": {"category_id": 2, "price_cents": 440, "active": True},
    "Fried Rice": {"category_id": 2, "price_cents": 440, "active": True},
    "Chow Mein": {"category_id": 2, "price_cents": 440, "active": True},
    "Super Greens": {"category_id": 2, "price_cents": 440, "active": True},
    "Orange Chicken": {"category_id": 3, "price_cents": 520, "active": True},
    "Kung Pao Chicken": {"category_id": 3, "price_cents": 520, "active": True},
    "Broccoli Beef": {"category_id": 3, "price_cents": 520, "active": True},
    "Grilled Teriyaki Chicken": {"category_id": 3, "price_cents": 520, "active": True},
    "Honey Walnut Shrimp": {"category_id": 3, "price_cents": 620, "active": True},
    "Black Pepper Sirloin": {"category_id": 3, "price_cents": 620, "active": False},
    "Veggie Spring Roll": {"category_id": 4, "price_cents": 200, "active": True},
    "Chicken Egg Roll": {"category_id": 4, "price_cents": 200, "active": True},
    "Cream Cheese Rangoon": {"category_id": 4, "price_cents": 200, "active": True},
    "Fountain Drink": {"category_id": 5, "price_cents": 210, "active": True},
    "Bottled Water": {"category_id": 5, "price_cents": 230, "active": True},
}

INGREDIENT_META_BY_ID: dict[int, dict[str, str | float]] = {
    1: {"name": "Rice", "unit": "oz", "current_quantity": 1600.0},
    2: {"name": "Chicken", "unit": "oz", "current_quantity": 1200.0},
    3: {"name": "Beef", "unit": "oz", "current_quantity": 600.0},
    4: {"name": "Shrimp", "unit": "oz", "current_quantity": 300.0},
    5: {"name": "Noodles", "unit": "oz", "current_quantity": 900.0},
    6: {"name": "Mixed Vegetables", "unit": "oz", "current_quantity": 800.0},
    7: {"name": "Broccoli", "unit": "oz", "current_quantity": 500.0},
    8: {"name": "Orange Sauce", "unit": "oz", "current_quantity": 250.0},
    9: {"name": "Kung Pao Sauce", "unit": "oz", "current_quantity": 200.0},
    10: {"name": "Teriyaki Sauce", "unit": "oz", "current_quantity": 200.0},
    11: {"name": "Walnuts", "unit": "oz", "current_quantity": 120.0},
    12: {"name": "Spring Roll Stock", "unit": "units", "current_quantity": 150.0},
    13: {"name": "Egg Roll Stock", "unit": "units", "current_quantity": 150.0},
    14: {"name": "Rangoon Stock", "unit": "units", "current_quantity": 200.0},
    15: {"name": "Fountain Cups", "unit": "units", "current_quantity": 500.0},
    16: {"name": "Bottled Water", "unit": "units", "current_quantity": 96.0},
}

# Ingredient consumption per unit sold, keyed by menu item name.
RECIPE_BY_MENU_NAME: dict[str, dict[int, float]] = {
    "White Steamed Rice": {1: 4.0},
    "Fried Rice": {1: 4.0},
    "Chow Mein": {5: 4.0, 6: 1.5},
    "Super Greens": {6: 3.0, 7: 2.0},
    "Orange Chicken": {2: 3.0},
    "Kung Pao Chicken": {2: 3.0, 9: 0.5, 6: 0.5},
    "Broccoli Beef": {3: 2.5, 7: 1.5},
    "Grilled Teriyaki Chicken": {2: 3.5, 10: 0.75},
    "Honey Walnut Shrimp": {4: 3.0, 11: 0.5},
    "Black Pepper Sirloin": {3: 3.0},
    "Veggie Spring Roll": {12: 1.0},
    "Chicken Egg Roll": {13: 1.0},
    "Cream Cheese Rangoon": {14: 1.0},
    "Fountain Drink": {15: 1.0},
    "Bottled Water": {16: 1.0},
}
