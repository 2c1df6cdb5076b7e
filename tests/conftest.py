import pytest

from fake_backend import FakeAnalysisService, create_app


@pytest.fixture
def service():
    return FakeAnalysisService()


@pytest.fixture
def app(service):
    return create_app(service)


class Alerts(list):
    def __call__(self, message: str) -> None:
        self.append(message)


@pytest.fixture
def alerts():
    return Alerts()
