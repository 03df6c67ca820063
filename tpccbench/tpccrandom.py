"""Random value generation for TPC-C loading and transactions."""

from __future__ import annotations

import random
import string

from tpccbench.schema import NAME_TOKENS

_ALNUM = frozenset(string.ascii_letters + string.digits)


def customer_last_name(num: int) -> str:
    """Build the syllable-based TPC-C last name for ``num`` in [0, 999]."""
    if not 0 <= num <= 999:
        raise ValueError(f"last name number out of range: {num}")
    return NAME_TOKENS[num // 100] + NAME_TOKENS[(num // 10) % 10] + NAME_TOKENS[num % 10]


class TpccRandom:
    """Seeded generator of the numbers and strings TPC-C asks for."""

    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(seed)

    def next(self) -> int:
        """Return a uniformly random unsigned 64-bit integer."""
        return self._rng.getrandbits(64)

    def _next_uniform(self) -> float:
        return self._rng.random()

    def _next_char(self) -> str:
        return chr(self._rng.getrandbits(8))

    def random_number(self, low: int, high: int) -> int:
        """Return a uniform integer in ``[low, high]``."""
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        value = int(self._next_uniform() * (high - low + 1) + low)
        # Guard against rounding reaching one past the upper bound.
        return min(value, high)

    def non_uniform_random(self, a: int, c: int, low: int, high: int) -> int:
        """The TPC-C NURand function."""
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        mixed = self.random_number(0, a) | self.random_number(low, high)
        return ((mixed + c) % (high - low + 1)) + low

    def item_id(self, num_item: int, uniform: bool = False) -> int:
        """Pick an item id in ``[1, num_item]``."""
        if uniform:
            return self.random_number(1, num_item)
        return self.non_uniform_random(8191, 7911, 1, num_item)

    def customer_id(self, num_customer: int) -> int:
        """Pick a customer id in ``[1, num_customer]``."""
        return self.non_uniform_random(1023, 259, 1, num_customer)

    def pick_warehouse_id(self, start: int, end: int) -> int:
        """Pick a warehouse id in ``[start, end)``."""
        if start >= end:
            raise ValueError(f"empty warehouse range [{start}, {end})")
        diff = end - start
        if diff == 1:
            return start
        return self.next() % diff + start

    def random_str(self, length: int) -> str:
        """Return ``length`` random ASCII letters and digits."""
        if length < 0:
            raise ValueError("length must not be negative")
        chars: list[str] = []
        while len(chars) < length:
            c = self._next_char()
            if c in _ALNUM:
                chars.append(c)
        return "".join(chars)

    def random_nstr(self, length: int) -> str:
        """Return ``length`` random decimal digits."""
        if length < 0:
            raise ValueError("length must not be negative")
        return "".join(chr(ord("0") + self.next() % 10) for _ in range(length))

    def last_name_load(self) -> str:
        """Non-uniform last name with the load-time constant."""
        return customer_last_name(self.non_uniform_random(255, 157, 0, 999))

    def last_name_run(self) -> str:
        """Non-uniform last name with the run-time constant."""
        return customer_last_name(self.non_uniform_random(255, 223, 0, 999))


class Clock:
    """Logical clock handing out increasing timestamps, starting at 1."""

    def __init__(self) -> None:
        self._now = 0

    def tick(self) -> int:
        """Advance the clock and return the new time."""
        self._now = (self._now + 1) & 0xFFFFFFFF
        return self._now