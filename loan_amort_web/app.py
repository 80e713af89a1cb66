import json
import logging
import os
from decimal import Decimal

from flask import Flask, jsonify, render_template, request

from loan_amort.data_models import LoanInputs
from loan_amort.engine import compare_extra_payment, compute_for_inputs
from loan_amort.exceptions import AmortizationError, InvalidInputError
from loan_amort.formatter import (
    build_chart_series,
    format_currency,
    format_tooltip_label,
    result_to_dict,
    savings_to_dict,
)
from loan_amort.utils import clean_amount_text, coerce_non_negative, coerce_term, decimal_from_str

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["SCHEDULE_PREVIEW_ROWS"] = int(os.environ.get("SCHEDULE_PREVIEW_ROWS", "120"))
app.config["MAX_TERM_YEARS"] = Decimal(os.environ.get("MAX_TERM_YEARS", "100"))
app.jinja_env.filters["currency"] = format_currency

API_FIELDS = ("principal", "annual_rate_percent", "term_years", "extra_monthly_payment")


def _check_term(inputs: LoanInputs) -> LoanInputs:
    """Reject terms longer than the web app is willing to simulate."""
    max_term = app.config["MAX_TERM_YEARS"]
    if inputs.term_years > max_term:
        raise InvalidInputError("term_years", inputs.term_years, f"must be at most {max_term} years")
    return inputs


def _form_to_inputs(form) -> LoanInputs:
    """Sanitise the calculator form the way the input fields always have."""
    return _check_term(
        LoanInputs(
            principal=clean_amount_text(form.get("principal")),
            annual_rate_percent=coerce_non_negative(form.get("rate")),
            term_years=coerce_term(form.get("term")),
            extra_monthly_payment=coerce_non_negative(form.get("extra_payment")),
        )
    )


def _api_inputs(payload) -> LoanInputs:
    values = {}
    for field in API_FIELDS:
        raw = payload.get(field)
        if raw is None or raw == "":
            if field == "extra_monthly_payment":
                raw = 0
            else:
                raise InvalidInputError(field, raw, "is required")
        try:
            values[field] = decimal_from_str(str(raw))
        except ValueError as exc:
            raise InvalidInputError(field, raw, "expected a number") from exc
    return _check_term(LoanInputs(**values))


def _savings(inputs: LoanInputs):
    """Return what the extra payment saves, or None when there is no baseline to compare.

    The loan without the extra payment may itself never pay off; the requested
    loan is still reported in that case.
    """
    if not inputs.extra_monthly_payment:
        return None
    try:
        return compare_extra_payment(inputs)
    except AmortizationError as exc:
        logger.info("No baseline for savings (%s): %s", exc.kind, exc)
        return None


def _schedule_rows(result, limit: int):
    points = result.amortization_schedule
    last_index = len(points) - 1
    rows = [
        {"label": format_tooltip_label(p.month, i == last_index), "point": p}
        for i, p in enumerate(points[:limit])
    ]
    return rows, max(0, len(points) - limit)


@app.route("/", methods=["GET", "POST"])
@app.route("/loan-repayment-calculator", methods=["GET", "POST"])
def index():
    result = None
    savings = None
    error = None
    rows = []
    truncated = 0
    chart_payload = "null"
    form = request.form if request.method == "POST" else {}

    if request.method == "POST":
        try:
            inputs = _form_to_inputs(request.form)
            result = compute_for_inputs(inputs)
        except ValueError as exc:
            logger.info("Calculation rejected: %s", exc)
            error = str(exc)
        else:
            savings = _savings(inputs)
            rows, truncated = _schedule_rows(result, app.config["SCHEDULE_PREVIEW_ROWS"])
            chart_payload = json.dumps(build_chart_series(result))

    return render_template(
        "index.html",
        form=form,
        result=result,
        savings=savings,
        rows=rows,
        truncated=truncated,
        error=error,
        chart_payload=chart_payload,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.route("/api/amortization", methods=["GET", "POST"])
def amortization_api():
    if request.method == "POST":
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = request.form
    else:
        payload = request.args
    inputs = _api_inputs(payload)
    result = compute_for_inputs(inputs)
    savings = _savings(inputs)
    body = result_to_dict(result)
    body["chart"] = build_chart_series(result)
    body["savings"] = savings_to_dict(savings) if savings else None
    return jsonify(body)


@app.errorhandler(AmortizationError)
def handle_amortization_error(exc: AmortizationError):
    logger.info("API request rejected (%s): %s", exc.kind, exc)
    return jsonify({"error": exc.kind, "message": str(exc)}), 400


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    print("Starting Loan Amortization web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
