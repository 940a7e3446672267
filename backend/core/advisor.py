"""
Interest-rate advisor: the contract the calculator consumes, a Gemini-backed
implementation, and the caller-side request bookkeeping.

Suggestions are inert data. Nothing here touches a calculation result; a
suggested rate only reaches the inputs through `apply_suggestion`.

`AdvisorySession` is the caller-side helper for interactive clients that keep
one user's request state; the HTTP routes call the advisor directly.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import Optional, Protocol

import google.generativeai as genai
from pydantic import ValidationError

from backend.core.normalize import period_in_months
from backend.schemas.advisor import AdvisoryRequest, AdvisoryResponse
from backend.schemas.deposit import FinancialInputs

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are an expert financial advisor specializing in fixed deposit (FD) interest rates.

Based on the FD amount, FD period, and current market trends, suggest an optimal interest rate for the FD.
Provide a reasoning for the suggested rate, considering the current market conditions.

FD Amount: {fdAmount}
FD Period (months): {fdPeriod}

Consider current market conditions when providing your suggestion.
Give the suggestedInterestRate as a decimal number (e.g., 0.05 for 5%). Do NOT include a percent (%) sign in the suggestedInterestRate.
Respond with a JSON object with exactly two keys: "suggestedInterestRate" (number) and "reasoning" (string).
"""


class AdvisoryError(RuntimeError):
    """The advisor could not produce a usable suggestion. Always recoverable."""


class AdvisoryBusyError(AdvisoryError):
    """A suggestion is already being fetched."""


class AdvisorUnavailableError(AdvisoryError):
    """No advisor is configured (e.g. missing API key)."""


class RateAdvisor(Protocol):
    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        ...


def build_request(inputs: FinancialInputs) -> AdvisoryRequest:
    """Advisor request for the current inputs, with the term converted to months."""
    return AdvisoryRequest(fdAmount=inputs.principal, fdPeriod=period_in_months(inputs))


def apply_suggestion(inputs: FinancialInputs, suggestion: AdvisoryResponse) -> FinancialInputs:
    """Copy of `inputs` using the suggested rate, as a percentage with 2 decimals."""
    rate_percent = round(suggestion.suggestedInterestRate * 100, 2)
    return inputs.model_copy(update={"annualRatePercent": rate_percent})


def parse_response(text: str) -> AdvisoryResponse:
    """Validate raw model output, tolerating a fenced ```json block."""
    body = text.strip()
    if body.startswith("```"):
        body = body.strip("`")
        if body.lower().startswith("json"):
            body = body[4:]
    try:
        return AdvisoryResponse.model_validate_json(body)
    except ValidationError as exc:
        raise AdvisoryError(f"advisor returned an unusable suggestion: {exc}") from exc


class GeminiRateAdvisor:
    """Ask a Gemini model for a rate suggestion."""

    def __init__(self, api_key: Optional[str], model_name: str = "gemini-1.5-flash", timeout: float = 30.0):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout

    def _model(self):
        if not self.api_key:
            raise AdvisorUnavailableError("GOOGLE_API_KEY is not configured")
        genai.configure(api_key=self.api_key)
        return genai.GenerativeModel(
            self.model_name,
            generation_config={"response_mime_type": "application/json"},
        )

    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        model = self._model()
        prompt = PROMPT_TEMPLATE.format(fdAmount=request.fdAmount, fdPeriod=request.fdPeriod)
        try:
            response = model.generate_content(prompt, request_options={"timeout": self.timeout})
            text = response.text
        except Exception as exc:
            raise AdvisoryError(f"advisor request failed: {exc}") from exc

        suggestion = parse_response(text)
        logger.info(
            "advisor suggested %.4f for amount=%s period=%s months",
            suggestion.suggestedInterestRate,
            request.fdAmount,
            request.fdPeriod,
        )
        return suggestion


class RequestState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AdvisorySession:
    """
    Tracks one user's advisory requests.

      - At most one request is in flight; a second one raises AdvisoryBusyError.
      - Every request gets the next sequence number. A response is kept only
        if its number is still the latest, so `invalidate()` (call it when the
        inputs change) turns a pending response stale.
      - The suggestion is never applied automatically; see `apply()`.
    """

    def __init__(self, advisor: RateAdvisor, executor: Optional[Executor] = None):
        self._advisor = advisor
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="advisor")
        self._lock = threading.Lock()
        self._sequence = 0
        self._future: Optional[Future] = None
        self.state = RequestState.IDLE
        self.suggestion: Optional[AdvisoryResponse] = None
        self.error: Optional[AdvisoryError] = None

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def busy(self) -> bool:
        return self.state is RequestState.PENDING

    def request(self, inputs: FinancialInputs) -> Future:
        """Start fetching a suggestion for `inputs` in the background."""
        request = build_request(inputs)
        with self._lock:
            if self.state is RequestState.PENDING:
                raise AdvisoryBusyError("a rate suggestion is already being fetched")
            self._sequence += 1
            sequence = self._sequence
            self.state = RequestState.PENDING
            self.suggestion = None
            self.error = None

        try:
            future = self._executor.submit(self._run, sequence, request)
        except RuntimeError as exc:
            with self._lock:
                self.state = RequestState.FAILED
                self.error = AdvisoryError(f"advisor executor unavailable: {exc}")
            raise self.error from exc

        with self._lock:
            self._future = future
        return future

    def _run(self, sequence: int, request: AdvisoryRequest) -> Optional[AdvisoryResponse]:
        try:
            suggestion = self._advisor.suggest(request)
        except Exception as exc:
            error = exc if isinstance(exc, AdvisoryError) else AdvisoryError(str(exc))
            logger.exception("rate suggestion #%d failed", sequence)
            with self._lock:
                if not self._settle_stale(sequence):
                    self.state = RequestState.FAILED
                    self.error = error
            if error is exc:
                raise
            raise error from exc

        with self._lock:
            if self._settle_stale(sequence):
                return None
            self.state = RequestState.SUCCEEDED
            self.suggestion = suggestion
        return suggestion

    def _settle_stale(self, sequence: int) -> bool:
        # lock must be held
        if sequence == self._sequence:
            return False
        logger.info("discarding stale rate suggestion #%d (latest is #%d)", sequence, self._sequence)
        self.state = RequestState.IDLE
        return True

    def invalidate(self) -> None:
        """Mark any pending response as stale."""
        with self._lock:
            self._sequence += 1

    def cancel(self) -> None:
        """Invalidate and drop the pending request if it has not started yet."""
        self.invalidate()
        with self._lock:
            future = self._future
        if future is not None and future.cancel():
            with self._lock:
                self.state = RequestState.IDLE

    def dismiss(self) -> None:
        with self._lock:
            if self.state is not RequestState.PENDING:
                self.state = RequestState.IDLE
            self.suggestion = None
            self.error = None

    def apply(self, inputs: FinancialInputs) -> FinancialInputs:
        """Inputs with the held suggestion applied; unchanged if there is none."""
        with self._lock:
            suggestion = self.suggestion
            if suggestion is None:
                return inputs
            self.suggestion = None
            self.state = RequestState.IDLE
        return apply_suggestion(inputs, suggestion)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
