import json

from prometheus_client import REGISTRY

from app.core.settings import settings
from app.schemas.discount import FunctionInput
from app.services import discount_function
from discounts.engine.editor import MSG_UNBOUNDED_EXISTS, MSG_ZERO_UPTO


def _function_input(configuration, *amounts, tagged=True):
    return {
        "cart": {
            "lines": [
                {
                    "cost": {"totalAmount": {"amount": amount}},
                    "merchandise": {
                        "__typename": "ProductVariant",
                        "id": f"gid://shopify/ProductVariant/{i + 1}",
                        "product": {"hasAnyTag": tagged},
                    },
                }
                for i, amount in enumerate(amounts)
            ]
        },
        "discountNode": {
            "metafield": {"value": json.dumps(configuration)} if configuration is not None else None
        },
    }


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_run_function_applies_tier(client, two_tiers):
    r = client.post("/discounts/function/run", json=_function_input(two_tiers, "20.00", "30.00"))

    assert r.status_code == 200
    assert r.json() == {
        "discountApplicationStrategy": "MAXIMUM",
        "discounts": [
            {
                "targets": [
                    {"productVariant": {"id": "gid://shopify/ProductVariant/1"}},
                    {"productVariant": {"id": "gid://shopify/ProductVariant/2"}},
                ],
                "value": {"percentage": {"value": "5"}},
                "message": "You get 5% off! Spend 50 more and get 10% off.",
            }
        ],
    }


def test_run_function_skips_other_merchandise(client, two_tiers):
    payload = _function_input(two_tiers, "150.00")
    payload["cart"]["lines"].append(
        {"cost": {"totalAmount": {"amount": "999.00"}}, "merchandise": {"__typename": "CustomProduct"}}
    )
    r = client.post("/discounts/function/run", json=payload)

    discount = r.json()["discounts"][0]
    assert discount["value"]["percentage"]["value"] == "10"
    assert len(discount["targets"]) == 1


def test_run_function_without_metafield_is_empty(client):
    r = client.post("/discounts/function/run", json=_function_input(None, "50.00"))

    assert r.status_code == 200
    assert r.json() == {"discountApplicationStrategy": "FIRST", "discounts": []}


def test_run_function_untagged_cart_is_empty(client, two_tiers):
    r = client.post("/discounts/function/run", json=_function_input(two_tiers, "50.00", tagged=False))

    assert r.json() == {"discountApplicationStrategy": "FIRST", "discounts": []}


def test_run_function_bad_metafield_is_400(client):
    payload = _function_input(None, "50.00")
    payload["discountNode"]["metafield"] = {"value": "{not json"}
    r = client.post("/discounts/function/run", json=payload)

    assert r.status_code == 400


def test_defaults(client):
    r = client.get("/discounts/tiered/defaults")

    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "tiered"
    assert body["tiers"] == [{"from": 0, "to": -1, "discount": 1}]


def test_validate_ok(client):
    payload = {
        "tiers": [{"from": "0", "to": "100", "discount": "5"}, {"from": 100.01, "to": -1, "discount": 10}],
        "message": "{{percentage}}% off",
        "next_message": "{{remaining}} more for {{percentage}}%",
    }
    r = client.post("/discounts/tiered/validate", json=payload)

    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is True
    assert body["configuration"]["tiers"] == [
        {"from": 0, "to": 100, "discount": 5},
        {"from": 100.01, "to": -1, "discount": 10},
    ]
    assert body["configuration"]["type"] == "tiered"


def test_validate_zero_upto(client):
    r = client.post("/discounts/tiered/validate", json={"tiers": [{"from": 0, "to": 0, "discount": 5}]})

    assert r.status_code == 400
    assert r.json()["detail"]["errors"] == [MSG_ZERO_UPTO]


def test_validate_non_numeric(client):
    r = client.post("/discounts/tiered/validate", json={"tiers": [{"from": "abc", "to": 10, "discount": 5}]})

    assert r.status_code == 400
    assert r.json()["detail"]["issues"][0]["code"] == "INVALID_NUMBER"


def test_validate_requires_a_tier(client):
    r = client.post("/discounts/tiered/validate", json={"tiers": []})

    assert r.status_code == 422


def test_add_tier(client):
    r = client.post("/discounts/tiered/tiers", json={"tiers": [{"from": 0, "to": 100, "discount": 5}]})

    assert r.status_code == 200
    assert r.json()["tiers"][-1] == {"from": 100.01, "to": -1, "discount": 1}


def test_add_tier_after_unbounded_is_blocked(client):
    r = client.post("/discounts/tiered/tiers", json={"tiers": [{"from": 0, "to": -1, "discount": 5}]})

    assert r.status_code == 400
    assert MSG_UNBOUNDED_EXISTS in r.json()["detail"]["errors"]


def test_metrics_counts_decisions(client, two_tiers):
    client.post("/discounts/function/run", json=_function_input(two_tiers, "50.00"))
    r = client.get("/metrics")

    assert r.status_code == 200
    assert 'tiered_discount_decisions_total{outcome="applied"}' in r.text


def _validation_count(result):
    return REGISTRY.get_sample_value("tiered_discount_validations_total", {"result": result}) or 0


def test_run_function_variant_without_id_is_skipped(client, two_tiers):
    payload = _function_input(two_tiers, "50.00")
    del payload["cart"]["lines"][0]["merchandise"]["id"]
    r = client.post("/discounts/function/run", json=payload)

    assert r.status_code == 200
    assert r.json() == {"discountApplicationStrategy": "FIRST", "discounts": []}


def test_validate_adding_after_unbounded_is_400(client):
    payload = {"tiers": [{"from": 0, "to": -1, "discount": 5}], "adding": True}
    r = client.post("/discounts/tiered/validate", json=payload)

    assert r.status_code == 400
    assert r.json()["detail"]["errors"] == [MSG_UNBOUNDED_EXISTS]

    # same tiers without adding are fine
    payload["adding"] = False
    assert client.post("/discounts/tiered/validate", json=payload).status_code == 200


def test_blocked_add_tier_is_counted(client):
    before = _validation_count("invalid")
    r = client.post("/discounts/tiered/tiers", json={"tiers": [{"from": 0, "to": -1, "discount": 5}]})

    assert r.status_code == 400
    assert _validation_count("invalid") == before + 1


def test_empty_decision_logs_input_when_enabled(monkeypatch, two_tiers):
    events = RecordingLogger()
    monkeypatch.setattr(discount_function, "logger", events)
    monkeypatch.setattr(settings, "LOG_EMPTY_DECISION_INPUT", True)

    payload = FunctionInput.model_validate(_function_input(two_tiers, "50.00", tagged=False))
    decision = discount_function.evaluate(payload)

    assert not decision.applies
    level, event, fields = events.calls[-1]
    assert (level, event) == ("warning", "discount_not_applied")
    assert fields["input"]["cart"]["lines"][0]["merchandise"]["__typename"] == "ProductVariant"
    assert events.bound["outcome"] == "no_eligible_target"


def test_empty_decision_input_not_logged_by_default(monkeypatch, two_tiers):
    events = RecordingLogger()
    monkeypatch.setattr(discount_function, "logger", events)
    monkeypatch.setattr(settings, "LOG_EMPTY_DECISION_INPUT", False)

    payload = FunctionInput.model_validate(_function_input(two_tiers, "50.00", tagged=False))
    discount_function.evaluate(payload)

    level, event, fields = events.calls[-1]
    assert (level, event) == ("debug", "discount_not_applied")
    assert "input" not in fields


class RecordingLogger:
    def __init__(self):
        self.calls = []
        self.bound = {}

    def bind(self, **fields):
        self.bound.update(fields)
        return self

    def _log(self, level, event, **fields):
        self.calls.append((level, event, fields))

    def debug(self, event, **fields):
        self._log("debug", event, **fields)

    def info(self, event, **fields):
        self._log("info", event, **fields)

    def warning(self, event, **fields):
        self._log("warning", event, **fields)
