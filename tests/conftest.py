# ContainerWatch - shared test fixtures
import pytest

from containerwatch.models import NormalizedNotification


class ListSink:
    def __init__(self) -> None:
        self.delivered: list[NormalizedNotification] = []

    def deliver(self, notification: NormalizedNotification) -> None:
        self.delivered.append(notification)


class AllowAll:
    def allows_all(self, category=None):
        return True

    def allows(self, category, action):
        raise AssertionError("exact match must not be consulted when everything is allowed")


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def allow_all():
    return AllowAll()
