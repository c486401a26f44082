from __future__ import annotations

import random

FIRST_NAMES = [
    "Alex", "Andres", "Austin", "Ben", "Blake", "Bobby", "Brandon", "Bryce", "Caleb", "Carlos",
    "Chase", "Cody", "Colton", "Corey", "Dalton", "Danny", "Derek", "Diego", "Dylan", "Eddie",
    "Eli", "Emilio", "Eric", "Ethan", "Felix", "Francisco", "Gavin", "Hector", "Hunter", "Isaac",
    "Jace", "Jake", "Javier", "Jose", "Josh", "Julio", "Justin", "Kenji", "Kyle", "Landon",
    "Logan", "Luis", "Manny", "Marcus", "Mason", "Matt", "Miguel", "Nate", "Nolan", "Omar",
    "Pablo", "Rafael", "Ramon", "Reid", "Ricky", "Ryan", "Sam", "Shohei", "Spencer", "Taylor",
    "Trevor", "Tyler", "Victor", "Wade", "Walker", "Wes", "Yoshi", "Zach",
]

LAST_NAMES = [
    "Acosta", "Alvarez", "Baker", "Barnes", "Bautista", "Bell", "Brooks", "Cabrera", "Castillo", "Chapman",
    "Cole", "Cruz", "Daniels", "Delgado", "Diaz", "Dunn", "Ellis", "Espinoza", "Fisher", "Flores",
    "Foster", "Garcia", "Gibson", "Gomez", "Graves", "Greene", "Gutierrez", "Harper", "Hayes", "Hernandez",
    "Hill", "Holt", "Hudson", "Jensen", "Jimenez", "Keller", "Kimura", "Lawson", "Lopez", "Maddox",
    "Marquez", "Martinez", "Mendoza", "Miller", "Morales", "Nakamura", "Nash", "Ortiz", "Owens", "Parker",
    "Perez", "Ramirez", "Reyes", "Rivera", "Rodriguez", "Ruiz", "Sanchez", "Santana", "Soto", "Stanton",
    "Suzuki", "Tanaka", "Torres", "Turner", "Vargas", "Vasquez", "Walker", "Webb", "Wheeler", "Young",
]


class NameGenerator:
    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._used: set[str] = set()
        self._pool = [f"{first} {last}" for first in FIRST_NAMES for last in LAST_NAMES]
        self._rng.shuffle(self._pool)
        self._idx = 0

    def next_name(self) -> str:
        while self._idx < len(self._pool):
            name = self._pool[self._idx]
            self._idx += 1
            if name not in self._used:
                self._used.add(name)
                return name

        # Pool exhausted: reuse a name with a generational suffix.
        suffix = 2
        while True:
            base = self._pool[int(self._rng.random() * len(self._pool))]
            candidate = f"{base} {_roman(suffix)}"
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate
            suffix += 1


def _roman(number: int) -> str:
    numerals = ((10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"))
    out = []
    for value, symbol in numerals:
        while number >= value:
            out.append(symbol)
            number -= value
    return "".join(out)
