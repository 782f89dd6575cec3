"""JSON API for the economy calculator.

The browser front end keeps its form state locally and posts plain economy
documents here for the derived values. Each browser also gets a random user
token in its session, under which one economy document can be stored.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional
from uuid import uuid4

from flask import Flask, jsonify, request, session

from economy_calc.cache import AmortizationCache
from economy_calc.data_models import EconomyData, Loan
from economy_calc.equity import equity_series, project_equity, standard_checkpoints
from economy_calc.exceptions import EconomyCalcError
from economy_calc.logging_config import setup_logging
from economy_calc.payment_plan import generate_payment_plan
from economy_calc.serialization import (
    amortization_to_dict,
    economy_from_dict,
    equity_point_to_dict,
    loan_from_dict,
    plan_row_to_dict,
    tax_breakdown_to_dict,
)
from economy_calc.settings import Settings, get_settings
from economy_calc.tax_rules import load_tax_rules
from economy_calc.taxes import calculate_economy_taxes
from economy_calc.utils import parse_date, to_decimal, to_int
from economy_calc_web.economy_store import EconomyStore, create_store_from_url

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    pass


def _ensure_user_token() -> str:
    token = session.get("user_token")
    if not token:
        token = uuid4().hex
        session["user_token"] = token
        session.modified = True
    return token


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")
    return body


def _economy_from_body(body: Dict[str, Any]) -> EconomyData:
    document = body.get("economy", body)
    return economy_from_dict(document)


def _check_loan_terms(loans: Iterable[Loan], max_terms: int) -> None:
    for loan in loans:
        if loan.number_of_terms > max_terms:
            raise BadRequest(
                f"Loan '{loan.description}' has {loan.number_of_terms} terms; at most {max_terms} are allowed"
            )


def _bounded_years(body: Dict[str, Any], key: str, default: int, upper: int) -> int:
    return min(max(to_int(body.get(key), default), 0), upper)


def _date_field(body: Dict[str, Any], key: str, default: date) -> date:
    value = body.get(key)
    if not value:
        return default
    try:
        return parse_date(value)
    except ValueError as exc:
        raise BadRequest(str(exc))


def create_app(settings: Optional[Settings] = None, store: Optional[EconomyStore] = None) -> Flask:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_json, settings.service_name)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.json.sort_keys = False

    economy_store = store or create_store_from_url(settings.database_url)
    cache = AmortizationCache(max_entries=settings.cache_max_entries)
    app.extensions["amortization_cache"] = cache
    rules = load_tax_rules(settings.tax_year)

    @app.errorhandler(BadRequest)
    @app.errorhandler(EconomyCalcError)
    def handle_bad_request(exc: Exception):
        logger.info("Rejected request", extra={"path": request.path, "error": str(exc)})
        return jsonify({"error": str(exc)}), 400

    @app.post("/api/amortization")
    def amortization():
        loan = loan_from_dict(_json_body())
        _check_loan_terms([loan], settings.max_loan_terms)
        return jsonify(amortization_to_dict(cache.get(loan)))

    @app.post("/api/taxes")
    def taxes():
        economy = _economy_from_body(_json_body())
        _check_loan_terms(economy.all_loans(), settings.max_loan_terms)
        return jsonify(tax_breakdown_to_dict(calculate_economy_taxes(economy, rules, cache)))

    @app.post("/api/payment-plan")
    def payment_plan():
        body = _json_body()
        economy = _economy_from_body(body)
        _check_loan_terms(economy.all_loans(), settings.max_loan_terms)
        growth = to_decimal(body.get("salaryGrowthPct"), settings.default_salary_growth_pct)
        start = _date_field(body, "startDate", date.today())
        years = _bounded_years(body, "years", settings.plan_years, settings.max_plan_years)
        rows = generate_payment_plan(economy, growth, start, years, rules, cache)
        return jsonify([plan_row_to_dict(r) for r in rows])

    @app.post("/api/equity")
    def equity():
        body = _json_body()
        economy = _economy_from_body(body)
        house = economy.active_house()
        if house is None:
            raise BadRequest("No active house selected")
        loan = house.as_housing_loan()
        _check_loan_terms([loan], settings.max_loan_terms)
        growth = to_decimal(body.get("growthPct"), house.purchase.expected_growth_pct)
        today = _date_field(body, "today", date.today())
        years = _bounded_years(body, "yearsToShow", 10, settings.max_plan_years)
        snapshots = project_equity(loan, growth, standard_checkpoints(loan, today), cache)
        series = equity_series(loan, growth, years, cache)
        return jsonify(
            {
                "house": house.name,
                "growthPct": float(growth),
                "snapshots": [equity_point_to_dict(p) for p in snapshots],
                "monthly": [equity_point_to_dict(p) for p in series],
            }
        )

    @app.get("/api/economy")
    def get_economy():
        stored = economy_store.load(_ensure_user_token())
        if stored is None:
            return jsonify({"error": "No economy saved"}), 404
        return jsonify(stored)

    @app.put("/api/economy")
    def put_economy():
        body = _json_body()
        document = body.get("economy", body)
        # raises InvalidEconomyDataError for broken documents
        economy_from_dict(document)
        return jsonify(economy_store.save(_ensure_user_token(), document))

    @app.delete("/api/economy")
    def delete_economy():
        if not economy_store.delete(_ensure_user_token()):
            return jsonify({"error": "No economy saved"}), 404
        return "", 204

    return app


if __name__ == "__main__":
    print("Starting economy calculator API...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
