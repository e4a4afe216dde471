"""Production time provider."""

import time

from treeswitch.gateway.time.abc import Time


class RealTime(Time):
    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
