"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from backend.core.advisor import (
    AdvisoryError,
    AdvisorUnavailableError,
    RateAdvisor,
    apply_suggestion,
    build_request,
)
from backend.core.calculator import build_response, recompute
from backend.core.ping import SERVICE_NAME, get_ping_message
from backend.schemas.advisor import (
    AdvisoryRequest,
    ApplySuggestionRequest,
    SuggestionResponse,
)
from backend.schemas.deposit import FinancialInputs
from backend.schemas.ping import PingResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    detail = exc.errors(include_context=False, include_input=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(AdvisoryError)
def _handle_advisory_error(exc: AdvisoryError):
    """Advisor failures are recoverable; report them without touching results."""
    if isinstance(exc, AdvisorUnavailableError):
        return jsonify({"detail": str(exc)}), HTTPStatus.SERVICE_UNAVAILABLE
    return jsonify({"detail": str(exc)}), HTTPStatus.BAD_GATEWAY


def _payload() -> Any:
    return request.get_json(force=True, silent=False) or {}


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message(), service=SERVICE_NAME)
    return jsonify(response.model_dump())


@api_bp.post("/calc/deposit")
def deposit() -> Any:
    """Maturity value, interest and yearly projection for a deposit."""
    inputs = FinancialInputs.model_validate(_payload())
    response = build_response(recompute(inputs))
    return jsonify(response.model_dump())


@api_bp.post("/advisor/suggest")
def suggest_rate() -> Any:
    """Ask the advisor for a rate. Accepts deposit inputs or a raw advisor request."""
    raw_payload = _payload()
    if isinstance(raw_payload, dict) and "fdAmount" in raw_payload:
        advisory_request = AdvisoryRequest.model_validate(raw_payload)
    else:
        advisory_request = build_request(FinancialInputs.model_validate(raw_payload))

    advisor: RateAdvisor = current_app.config["RATE_ADVISOR"]
    try:
        suggestion = advisor.suggest(advisory_request)
    except AdvisoryError:
        logger.exception("rate suggestion failed for %s", advisory_request.model_dump())
        raise

    response = SuggestionResponse(
        **suggestion.model_dump(),
        suggestedRatePercent=round(suggestion.suggestedInterestRate * 100, 2),
    )
    return jsonify(response.model_dump())


@api_bp.post("/advisor/apply")
def apply_rate() -> Any:
    """Recalculate with a suggested rate the user chose to apply."""
    payload = ApplySuggestionRequest.model_validate(_payload())
    inputs = apply_suggestion(payload.inputs, payload.suggestion)
    response = build_response(recompute(inputs))
    return jsonify(response.model_dump())
