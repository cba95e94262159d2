"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import List, Sequence, Tuple, TypedDict, TypeVar

T_co = TypeVar("T_co")

DIE_FACES = 6


class RNGStatePayload(TypedDict):
    """JSON-safe form of the underlying Random state."""

    version: int
    internal: List[int]
    gauss_next: float | None


class RNG:
    """Wrapper around random.Random that provides deterministic dice helpers."""

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def roll_die(self, faces: int = DIE_FACES) -> int:
        """Roll a single die with the given number of faces."""
        if faces < 1:
            raise ValueError("A die needs at least one face.")
        return self._random.randint(1, faces)

    def roll_dice(self, count: int, faces: int = DIE_FACES) -> List[int]:
        """Roll ``count`` independent dice."""
        if count < 0:
            raise ValueError("Cannot roll a negative number of dice.")
        return [self.roll_die(faces) for _ in range(count)]

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def export_state(self) -> RNGStatePayload:
        """Return the generator state in a JSON-serializable form."""
        version, internal, gauss_next = self._random.getstate()
        return {"version": version, "internal": list(internal), "gauss_next": gauss_next}

    def restore_state(self, payload: RNGStatePayload) -> None:
        """Restore a state previously produced by export_state."""
        try:
            state: Tuple[int, Tuple[int, ...], float | None] = (
                int(payload["version"]),
                tuple(int(value) for value in payload["internal"]),
                payload["gauss_next"],
            )
            self._random.setstate(state)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed RNG state: {exc}") from exc
