"""
Turn raw Open Food Facts records into flat, display-ready product data,
and render finished analyses as plain-text reports.
"""

import re

UNKNOWN_PRODUCT = 'Unknown Product'
UNKNOWN_BRAND = 'Unknown Brand'
NO_INGREDIENTS = 'Ingredients not available'
NO_ALLERGENS = 'No allergens specified'
NO_NUTRITION = 'Nutrition information not available'
LIMITED_NUTRITION = 'Limited nutrition data available'

# (key, label, unit), in display order
KEY_NUTRIENTS = [
    ('energy-kcal_100g', 'Energy', 'kcal/100g'),
    ('fat_100g', 'Fat', 'g/100g'),
    ('saturated-fat_100g', 'Saturated Fat', 'g/100g'),
    ('sugars_100g', 'Sugars', 'g/100g'),
    ('salt_100g', 'Salt', 'g/100g'),
    ('sodium_100g', 'Sodium', 'g/100g'),
    ('proteins_100g', 'Proteins', 'g/100g'),
    ('fiber_100g', 'Fiber', 'g/100g'),
]

LANGUAGE_PREFIX = re.compile(r'^[a-z]{2,3}:')


def format_product_data(product):
    """
    Flatten a raw product into name, brand, barcode, ingredients, allergens,
    nutrition and categories. Every value is a non-empty string.
    """
    product = product or {}

    return {
        'name': product.get('product_name') or product.get('product_name_en') or UNKNOWN_PRODUCT,
        'brand': product.get('brands') or UNKNOWN_BRAND,
        'barcode': product.get('code') or 'Unknown',
        'ingredients': format_ingredients(
            product.get('ingredients_text') or product.get('ingredients_text_en')),
        'allergens': format_allergens(product.get('allergens') or product.get('allergens_tags')),
        'nutrition': format_nutrition(product.get('nutriments')),
        'categories': product.get('categories') or 'Unknown',
    }


def format_ingredients(ingredients):
    """Drop markdown emphasis and normalize whitespace"""
    if not ingredients:
        return NO_INGREDIENTS

    cleaned = re.sub(r'[_*]', '', ingredients)
    cleaned = re.sub(r'\s+', ' ', cleaned).strip()
    return cleaned or NO_INGREDIENTS


def _pretty_allergen(tag):
    name = LANGUAGE_PREFIX.sub('', tag.strip()).replace('-', ' ')
    return name[:1].upper() + name[1:]


def format_allergens(allergens):
    """
    Allergen tags like "en:may-contain-nuts" become "May contain nuts".
    Free text is passed through as is.
    """
    if not allergens:
        return NO_ALLERGENS

    if isinstance(allergens, (list, tuple)):
        names = [_pretty_allergen(str(tag)) for tag in allergens if tag]
        return ', '.join(name for name in names if name) or NO_ALLERGENS

    return str(allergens)


def _display_value(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_nutrition(nutriments):
    if not nutriments or not isinstance(nutriments, dict):
        return NO_NUTRITION

    nutrition_info = []
    for key, label, unit in KEY_NUTRIENTS:
        value = nutriments.get(key)
        if value is None or value == '':
            continue
        nutrition_info.append(f"{label}: {_display_value(value)} {unit}")

    return ', '.join(nutrition_info) if nutrition_info else LIMITED_NUTRITION


def score_emoji(score):
    if score >= 7:
        return '🟢'
    if score >= 4:
        return '🟠'
    return '🔴'


def score_label(score):
    if score >= 7:
        return 'healthy 7-10'
    if score >= 4:
        return 'moderate 4-6'
    return 'unhealthy 0-3'


def _bullets(items):
    return '\n'.join(f"      • {str(item).strip()}" for item in items)


def format_report(product, analysis):
    """
    Render a formatted product and its analysis as a terminal report
    """
    score = analysis['healthScore']
    rule = '=' * 50

    return f"""
🔍 FOOD BARCODE ANALYSIS REPORT
{rule}
📦 PRODUCT INFORMATION
   Name: {product['name']}
   Brand: {product['brand']}
   Barcode: {product['barcode']}

🛡️ SAFETY ASSESSMENT
   Overall Health Score: {score}/10 {score_emoji(score)}
   ({score_label(score)})
   ⚠️ Warnings:
{_bullets(analysis['warnings'])}
   💡 Recommendations:
{_bullets(analysis['recommendations'])}

🧪 INGREDIENT ANALYSIS
   📋 Main Ingredients:
{_bullets(analysis['mainIngredients'])}
   🚨 Allergens:
{_bullets(analysis['allergens'])}

🤖 AI ANALYSIS SUMMARY
   {analysis['summary']}

{rule}
"""
