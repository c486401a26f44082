import random
from typing import Sequence

import pytest


class ScriptedRandom(random.Random):
    """Returns the scripted draws in order, then ``fallback`` forever."""

    def __init__(self, values: Sequence[float] = (), fallback: float = 0.75) -> None:
        super().__init__(0)
        self._values = list(values)
        self._fallback = fallback
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        if self._values:
            return self._values.pop(0)
        return self._fallback


@pytest.fixture
def scripted():
    return ScriptedRandom
