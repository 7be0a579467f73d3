import json
from types import SimpleNamespace

import pytest
import requests

from app import app as flask_app
from config import Config

SAMPLE_PRODUCT = {
    'code': '3017620422003',
    'product_name': 'Nutella',
    'brands': 'Ferrero',
    'ingredients_text': 'Sugar, palm oil, _hazelnuts_ 13%, skimmed milk powder 8.7%, fat-reduced cocoa 7.4%, emulsifier: lecithins',
    'allergens_tags': ['en:milk', 'en:nuts', 'en:soybeans'],
    'nutriments': {
        'energy-kcal_100g': 539,
        'fat_100g': 30.9,
        'saturated-fat_100g': 10.6,
        'sugars_100g': 56.3,
        'salt_100g': 0.107,
        'proteins_100g': 6.3,
    },
    'categories': 'Spreads, Sweet spreads, Hazelnut spreads',
}


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setitem(flask_app.config, 'NUTRISCAN', Config(groq_api_key='test-key'))
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_product():
    return dict(SAMPLE_PRODUCT)


def make_response(status_code, payload=None, reason='', content=None):
    """Build a requests.Response as the Open Food Facts API would send it"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = 'https://world.openfoodfacts.org/api/v0/product/test.json'
    if content is None:
        content = json.dumps(payload).encode('utf-8') if payload is not None else b''
    response._content = content
    return response


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=None):
        self.content = content
        self.error = error
        self.choices = choices
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.choices is not None:
            return SimpleNamespace(choices=self.choices)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeGroq:
    """Stands in for groq.Groq; records how it was built and called"""

    def __init__(self, content=None, error=None, choices=None, **client_kwargs):
        self.client_kwargs = client_kwargs
        self.completions = FakeCompletions(content, error, choices)
        self.chat = SimpleNamespace(completions=self.completions)
