import os
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("LOG_JSON", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.main import app
from discounts.engine import CartLine, CartSnapshot


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


def variant_line(amount, n=1, tagged=True, typename="ProductVariant"):
    return CartLine(
        amount=Decimal(str(amount)),
        merchandise_type=typename,
        variant_id=f"gid://shopify/ProductVariant/{n}",
        has_any_tag=tagged,
    )


@pytest.fixture
def make_cart():
    def _make(*amounts, tagged=True):
        return CartSnapshot(
            lines=tuple(variant_line(a, n=i + 1, tagged=tagged) for i, a in enumerate(amounts))
        )

    return _make


@pytest.fixture
def two_tiers():
    # Scenario tiers: 0..100 -> 5%, 100+ -> 10%
    return {
        "tiers": [
            {"from": 0, "to": 100, "discount": 5},
            {"from": 100, "to": -1, "discount": 10},
        ],
        "type": "tiered",
        "message": "You get {{percentage}}% off!",
        "next_message": "Spend {{remaining}} more and get {{percentage}}% off.",
    }
