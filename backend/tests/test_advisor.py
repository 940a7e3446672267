from __future__ import annotations

import threading
from types import SimpleNamespace

import pytest

import backend.core.advisor as advisor_module
from backend.core.advisor import (
    AdvisoryBusyError,
    AdvisoryError,
    AdvisorySession,
    AdvisorUnavailableError,
    GeminiRateAdvisor,
    RequestState,
    apply_suggestion,
    build_request,
    parse_response,
)
from backend.schemas.advisor import AdvisoryRequest, AdvisoryResponse
from backend.schemas.deposit import FinancialInputs


class StubAdvisor:
    def __init__(self, rate: float = 0.07):
        self.rate = rate
        self.requests: list[AdvisoryRequest] = []

    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        self.requests.append(request)
        return AdvisoryResponse(suggestedInterestRate=self.rate, reasoning="firm rates")


class BlockingAdvisor:
    def __init__(self):
        self.release = threading.Event()
        self.started = threading.Event()

    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        self.started.set()
        self.release.wait(5)
        return AdvisoryResponse(suggestedInterestRate=0.08, reasoning="late")


class BrokenAdvisor:
    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        raise ConnectionError("network unreachable")


def test_request_period_is_always_months():
    assert build_request(FinancialInputs(principal=100000, period=1, periodUnit="years")) == AdvisoryRequest(
        fdAmount=100000, fdPeriod=12
    )
    assert build_request(FinancialInputs(principal=5000, period=9, periodUnit="months")).fdPeriod == 9


def test_apply_sets_rate_as_percentage():
    inputs = FinancialInputs(principal=100000, annualRatePercent=6.5, period=1)
    suggestion = AdvisoryResponse(suggestedInterestRate=0.07, reasoning="...")

    applied = apply_suggestion(inputs, suggestion)

    assert applied.annualRatePercent == 7.0
    assert applied.principal == inputs.principal
    assert inputs.annualRatePercent == 6.5


def test_parse_response_accepts_fenced_json():
    text = '```json\n{"suggestedInterestRate": 0.0675, "reasoning": "steady"}\n```'

    assert parse_response(text).suggestedInterestRate == 0.0675


@pytest.mark.parametrize(
    "text",
    [
        '{"suggestedInterestRate": 6.5, "reasoning": "percent, not fraction"}',
        '{"suggestedInterestRate": "6.5%", "reasoning": "has a percent sign"}',
        '{"reasoning": "missing rate"}',
        "not json at all",
    ],
)
def test_parse_response_rejects_unusable_output(text):
    with pytest.raises(AdvisoryError):
        parse_response(text)


def test_session_success_then_apply():
    advisor = StubAdvisor(rate=0.07)
    session = AdvisorySession(advisor)
    inputs = FinancialInputs(principal=100000, annualRatePercent=6.5, period=1)

    suggestion = session.request(inputs).result(timeout=5)

    assert suggestion.suggestedInterestRate == 0.07
    assert session.state is RequestState.SUCCEEDED
    assert advisor.requests == [AdvisoryRequest(fdAmount=100000, fdPeriod=12)]

    applied = session.apply(inputs)
    assert applied.annualRatePercent == 7.0
    assert session.suggestion is None
    assert session.state is RequestState.IDLE
    session.shutdown()


def test_apply_without_suggestion_keeps_inputs():
    session = AdvisorySession(StubAdvisor())
    inputs = FinancialInputs()

    assert session.apply(inputs) is inputs
    session.shutdown()


def test_overlapping_request_is_refused():
    advisor = BlockingAdvisor()
    session = AdvisorySession(advisor)
    inputs = FinancialInputs()

    future = session.request(inputs)
    assert session.busy
    with pytest.raises(AdvisoryBusyError):
        session.request(inputs)

    advisor.release.set()
    future.result(timeout=5)
    assert session.state is RequestState.SUCCEEDED
    session.shutdown()


def test_stale_response_is_discarded():
    advisor = BlockingAdvisor()
    session = AdvisorySession(advisor)

    future = session.request(FinancialInputs(principal=100000))
    session.invalidate()
    advisor.release.set()

    assert future.result(timeout=5) is None
    assert session.state is RequestState.IDLE
    assert session.suggestion is None
    session.shutdown()


def test_failure_is_recoverable():
    session = AdvisorySession(BrokenAdvisor())

    future = session.request(FinancialInputs())
    with pytest.raises(AdvisoryError):
        future.result(timeout=5)

    assert session.state is RequestState.FAILED
    assert "network unreachable" in str(session.error)

    session.dismiss()
    assert session.state is RequestState.IDLE
    assert session.error is None
    session.shutdown()


def test_sequence_increases_per_request():
    session = AdvisorySession(StubAdvisor())

    session.request(FinancialInputs()).result(timeout=5)
    first = session.sequence
    session.request(FinancialInputs()).result(timeout=5)

    assert session.sequence == first + 1
    session.shutdown()


class FakeModel:
    calls: list = []
    reply = '{"suggestedInterestRate": 0.071, "reasoning": "Mid-term deposits pay well."}'

    def __init__(self, model_name, generation_config=None):
        self.model_name = model_name
        self.generation_config = generation_config

    def generate_content(self, prompt, request_options=None):
        FakeModel.calls.append((self.model_name, prompt, request_options))
        if isinstance(FakeModel.reply, Exception):
            raise FakeModel.reply
        return SimpleNamespace(text=FakeModel.reply)


@pytest.fixture()
def fake_gemini(monkeypatch):
    FakeModel.calls = []
    FakeModel.reply = '{"suggestedInterestRate": 0.071, "reasoning": "Mid-term deposits pay well."}'
    monkeypatch.setattr(advisor_module.genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(advisor_module.genai, "GenerativeModel", FakeModel)
    return FakeModel


def test_gemini_advisor_prompts_with_amount_and_months(fake_gemini):
    advisor = GeminiRateAdvisor(api_key="test-key", model_name="gemini-test", timeout=5)

    suggestion = advisor.suggest(AdvisoryRequest(fdAmount=250000, fdPeriod=18))

    assert suggestion.suggestedInterestRate == 0.071
    model_name, prompt, options = fake_gemini.calls[0]
    assert model_name == "gemini-test"
    assert "FD Amount: 250000" in prompt
    assert "FD Period (months): 18" in prompt
    assert options == {"timeout": 5}


def test_gemini_advisor_wraps_client_errors(fake_gemini):
    fake_gemini.reply = TimeoutError("deadline exceeded")
    advisor = GeminiRateAdvisor(api_key="test-key")

    with pytest.raises(AdvisoryError, match="deadline exceeded"):
        advisor.suggest(AdvisoryRequest(fdAmount=1000, fdPeriod=12))


def test_gemini_advisor_requires_api_key(fake_gemini):
    with pytest.raises(AdvisorUnavailableError):
        GeminiRateAdvisor(api_key=None).suggest(AdvisoryRequest(fdAmount=1000, fdPeriod=12))
    assert fake_gemini.calls == []


def test_cancel_while_running_discards_response():
    advisor = BlockingAdvisor()
    session = AdvisorySession(advisor)

    future = session.request(FinancialInputs())
    assert advisor.started.wait(5)
    session.cancel()
    advisor.release.set()

    assert future.result(timeout=5) is None
    assert session.state is RequestState.IDLE
    assert session.suggestion is None
    session.shutdown()
