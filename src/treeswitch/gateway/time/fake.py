"""Fake time provider for tests."""

from treeswitch.gateway.time.abc import Time


class FakeTime(Time):
    """Records sleep calls instead of sleeping.

    Mutation Tracking:
    -----------------
    - sleep_calls: Durations passed to sleep(), in call order
    """

    def __init__(self) -> None:
        self._sleep_calls: list[float] = []

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)

    @property
    def sleep_calls(self) -> list[float]:
        return list(self._sleep_calls)
