from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from backend.app import create_app
from backend.config import Settings
from backend.core.advisor import AdvisoryError
from backend.schemas.advisor import AdvisoryRequest, AdvisoryResponse


class StubAdvisor:
    """Returns a fixed suggestion and remembers what it was asked."""

    def __init__(self, rate: float = 0.07, reasoning: str = "Rates for 1 year deposits are firm."):
        self.rate = rate
        self.reasoning = reasoning
        self.requests: list[AdvisoryRequest] = []

    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        self.requests.append(request)
        return AdvisoryResponse(suggestedInterestRate=self.rate, reasoning=self.reasoning)


class FailingAdvisor:
    def suggest(self, request: AdvisoryRequest) -> AdvisoryResponse:
        raise AdvisoryError("model timed out")


@pytest.fixture()
def stub_advisor() -> StubAdvisor:
    return StubAdvisor()


@pytest.fixture()
def client(stub_advisor: StubAdvisor) -> FlaskClient:
    app = create_app(settings=Settings(), advisor=stub_advisor)
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def failing_client() -> FlaskClient:
    app = create_app(settings=Settings(), advisor=FailingAdvisor())
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def unconfigured_client() -> FlaskClient:
    app = create_app(settings=Settings(google_api_key=None))
    with app.test_client() as test_client:
        yield test_client
