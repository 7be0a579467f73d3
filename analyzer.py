"""
AI health assessment of a formatted product using the Groq chat API
"""

import json
import logging
import re

import groq
from groq import Groq

from config import DEFAULT_GROQ_MODEL
from errors import AnalysisFailed, AnalysisTimeout, InvalidAPIKey, RateLimited
from formatting import NO_ALLERGENS, NO_INGREDIENTS

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = ("You are a nutrition expert and a JSON generator. "
                 "Only respond with valid JSON. Never include markdown formatting or explanations.")

FALLBACK_WARNINGS = ['Unable to perform detailed analysis', 'Please review ingredients manually']
FALLBACK_RECOMMENDATIONS = ['Check product labels carefully', 'Consult nutrition information']
FALLBACK_SUMMARY = ('AI analysis partially available. Please review product information '
                    'manually for detailed assessment.')
FALLBACK_SCORE = 5

JSON_OBJECT = re.compile(r'\{.*\}', re.DOTALL)

LIST_FIELDS = ('warnings', 'recommendations', 'mainIngredients', 'allergens')


def create_analysis_prompt(product):
    """Build the analysis prompt for a formatted product"""
    return f"""Please analyze this food product and provide a health assessment. Return your response as a JSON object with the following structure:

{{
  "healthScore": 7,
  "warnings": ["High sodium content", "Contains artificial preservatives"],
  "recommendations": ["Consume in moderation", "Consider low-sodium alternatives"],
  "mainIngredients": ["Wheat flour", "Sugar", "Salt"],
  "allergens": ["Gluten", "May contain nuts"],
  "summary": "This product is moderately healthy but should be consumed in moderation due to high sodium content."
}}

Product Information:
- Name: {product['name']}
- Brand: {product['brand']}
- Ingredients: {product['ingredients']}
- Allergens: {product['allergens']}
- Nutrition Facts: {product['nutrition']}

Please provide:
1. A health score from 0-10 (0=very unhealthy, 10=very healthy)
2. Specific warnings about concerning ingredients or nutritional aspects
3. Practical recommendations for consumers
4. List of main ingredients (simplified, top 5-7)
5. List of allergens present
6. A 2-3 sentence summary of the overall health assessment

Focus on practical consumer advice based on ingredients, additives, nutritional content, and potential health impacts."""


def _split_list(text, limit=None):
    items = [item.strip() for item in text.split(',')]
    items = [item for item in items if item]
    return items[:limit] if limit else items


def fallback_analysis(product):
    """
    Deterministic analysis used when the model reply cannot be parsed.
    Same shape as a model result.
    """
    ingredients = product.get('ingredients')
    allergens = product.get('allergens')

    main_ingredients = []
    if ingredients and ingredients != NO_INGREDIENTS:
        main_ingredients = _split_list(ingredients, limit=5)

    allergen_list = []
    if allergens and allergens != NO_ALLERGENS:
        allergen_list = _split_list(allergens)

    return {
        'healthScore': FALLBACK_SCORE,
        'warnings': list(FALLBACK_WARNINGS),
        'recommendations': list(FALLBACK_RECOMMENDATIONS),
        'mainIngredients': main_ingredients or ['Not available'],
        'allergens': allergen_list or ['Not specified'],
        'summary': FALLBACK_SUMMARY,
    }


def _health_score(value):
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return max(0, min(10, score))


def _string_list(value):
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def normalize_analysis(data, product):
    """Coerce a decoded model reply into the analysis schema"""
    fallback = fallback_analysis(product)
    analysis = {}

    score = _health_score(data.get('healthScore'))
    analysis['healthScore'] = fallback['healthScore'] if score is None else score

    for field in LIST_FIELDS:
        items = _string_list(data.get(field))
        analysis[field] = fallback[field] if items is None else items

    summary = data.get('summary')
    if isinstance(summary, str) and summary.strip():
        analysis['summary'] = summary.strip()
    else:
        analysis['summary'] = fallback['summary']

    return analysis


def _decode_object(region):
    """Decode the object opening region, ignoring anything after it"""
    try:
        data, _ = json.JSONDecoder().raw_decode(region)
        return data
    except ValueError:
        return json.loads(region)


def parse_analysis(text, product):
    """
    Pull the first {...} region out of the model reply and decode it.
    Anything unusable gives the fallback analysis instead of an error.
    """
    match = JSON_OBJECT.search(text or '')
    if not match:
        logger.warning("No JSON object in AI response, using fallback analysis")
        return fallback_analysis(product)

    try:
        data = _decode_object(match.group(0))
    except ValueError as e:
        logger.warning("AI response parsing failed (%s), using fallback analysis", e)
        return fallback_analysis(product)

    if not isinstance(data, dict):
        logger.warning("AI response JSON is not an object, using fallback analysis")
        return fallback_analysis(product)

    return normalize_analysis(data, product)


def request_analysis(client, prompt, model):
    """Send the prompt and return the raw reply text"""
    try:
        chat_completion = client.chat.completions.create(
            messages=[
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT
                },
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            model=model,
            temperature=0.3,
            max_tokens=1000,
        )
        return chat_completion.choices[0].message.content or ''
    except groq.AuthenticationError:
        logger.error("Groq rejected the API key")
        raise InvalidAPIKey()
    except groq.RateLimitError:
        logger.warning("Groq rate limit exceeded")
        raise RateLimited()
    except groq.APITimeoutError:
        logger.warning("Groq request timed out")
        raise AnalysisTimeout()
    except Exception as e:
        logger.error("Groq request failed: %s", e)
        raise AnalysisFailed(str(e))


def analyze_product(product, api_key, model=DEFAULT_GROQ_MODEL, timeout=30.0, client=None):
    """
    Run the AI health assessment for a formatted product.

    Makes exactly one model call. Upstream failures raise InvalidAPIKey,
    RateLimited, AnalysisTimeout or AnalysisFailed; an unparseable reply
    yields fallback_analysis(product).
    """
    if client is None:
        client = Groq(api_key=api_key, timeout=timeout, max_retries=0)

    logger.info("Analyzing %s with %s", product.get('name'), model)
    response_text = request_analysis(client, create_analysis_prompt(product), model)

    return parse_analysis(response_text.strip(), product)
