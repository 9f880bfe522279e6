import pytest

from hoshin_compass.factory import create_empty_document
from hoshin_compass.models import ConnectionDirection

STATEMENT_TEXTS = [
    "I/We must establish weekly planning rituals",
    "I/We must define measurable revenue goals",
    "I/We must improve cross-team communication cadence",
    "I/We must automate repetitive reporting tasks",
    "I/We must reduce blocked dependency handoffs",
]


def make_wizard_ready_document():
    document = create_empty_document("Test Hoshin", now="2026-01-01T00:00:00.000Z")
    for order, (statement, text) in enumerate(zip(document.statements, STATEMENT_TEXTS), start=1):
        statement.text = text
        statement.initial_order = order
    return document


def make_valid_document():
    document = make_wizard_ready_document()
    for connection in document.connections:
        a, b = connection.pair
        connection.direction = ConnectionDirection(a, b)
    return document


@pytest.fixture
def wizard_ready_document():
    return make_wizard_ready_document()


@pytest.fixture
def valid_document():
    return make_valid_document()
