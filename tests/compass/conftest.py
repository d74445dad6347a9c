import copy
import random
import pytest

from services.compass_engine.core.config import CompassSettings
from services.compass_engine.loader import load_dataset_data
from services.compass_engine.session import CompassSession

# Two axes, two categories with two questions each, two comprehensive questions
MINIMAL_DATASET = {
    "meta": {
        "axes": {
            "econ": {"name": "Economy", "left": "Equality", "right": "Markets"},
            "auth": {"name": "Authority", "leftLabel": "Liberty", "rightLabel": "Order"},
        },
        "question_logic": {
            "categories": ["economy", "governance"],
            "questions_per_category_before_skip": 1,
        },
        "category_labels": {"economy": "Economy"},
    },
    "questions": {
        "economy": [
            {"text": "E1", "options": [
                {"text": "left", "effects": {"econ": -2}},
                {"text": "right", "effects": {"econ": 2}},
            ]},
            {"text": "E2", "options": [
                {"text": "left", "effects": {"econ": -1}},
                {"text": "right", "effects": {"econ": 1}},
            ]},
        ],
        "governance": [
            {"text": "G1", "options": [
                {"text": "liberty", "effects": {"auth": -2}},
                {"text": "order", "effects": {"auth": 2, "bogus": 5}},
            ]},
            {"text": "G2", "options": [
                {"text": "liberty", "effects": {"auth": -1}},
                {"text": "order", "effects": {"auth": 1}},
            ]},
        ],
    },
    "comprehensive_questions": [
        {"text": "C1", "options": [
            {"text": "a", "effects": {"econ": 1}},
            {"text": "b", "effects": {"econ": 2, "auth": -1}},
            {"text": "c", "effects": {"auth": 3}},
        ]},
        {"text": "C2", "options": [
            {"text": "a", "effects": {"auth": 1}},
        ]},
    ],
    "ideologies": [
        {"name": "Market Liberal", "icon": "🗽", "stats": {"econ": 80, "auth": -60}, "desc": "Markets and liberty."},
        {"name": "Socialist", "icon": "🌹", "stats": {"econ": -80, "auth": 0}, "desc": "Equality."},
        {"name": "Centrist (中间派)", "stats": {"econ": 0, "auth": 0}, "desc": "The middle."},
        {"name": "Authoritarian", "stats": {"auth": 90}, "desc": "Order above all."},
    ],
}


@pytest.fixture
def dataset_data():
    return copy.deepcopy(MINIMAL_DATASET)


@pytest.fixture
def dataset(dataset_data):
    return load_dataset_data(dataset_data)


@pytest.fixture
def settings():
    return CompassSettings(comprehensive_interval=2)


@pytest.fixture
def session(dataset, settings):
    return CompassSession(dataset, settings=settings, rng=random.Random(42))
