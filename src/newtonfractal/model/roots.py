"""
Root Configuration
==================
The three explicit roots that define the target cubic
f(z) = (z - r1)(z - r2)(z - r3).

Classes:
    RootSet: Immutable triple of complex roots.
"""
from __future__ import annotations

import cmath
import math
from dataclasses import dataclass, replace
from typing import Iterator, Optional

_FIELDS = ("first", "second", "third")


@dataclass(frozen=True)
class RootSet:
    """
    Three complex roots. Changing a root means building a new RootSet,
    so a sweep can hold on to the instance it was started with.
    """
    first: complex
    second: complex
    third: complex

    def __post_init__(self) -> None:
        # Accept ints/floats, store plain complex values
        for name in _FIELDS:
            object.__setattr__(self, name, complex(getattr(self, name)))

    @classmethod
    def cube_roots_of_unity(cls) -> RootSet:
        """Roots of z^3 - 1 = 0: 1, ω and ω²."""
        return cls(
            first=complex(1.0, 0.0),
            second=cmath.exp(1j * (+2.0 * math.pi / 3.0)),
            third=cmath.exp(1j * (-2.0 * math.pi / 3.0)),
        )

    def __iter__(self) -> Iterator[complex]:
        return iter((self.first, self.second, self.third))

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int) -> complex:
        return getattr(self, _FIELDS[self._check_index(index)])

    @staticmethod
    def _check_index(index: int) -> int:
        if not 0 <= index < 3:
            raise IndexError(f"Root index must be 0, 1 or 2, got {index}.")
        return index

    def replace_root(self, index: int, value: complex) -> RootSet:
        return replace(self, **{_FIELDS[self._check_index(index)]: complex(value)})

    def replace_component(
        self,
        index: int,
        real: Optional[float] = None,
        imag: Optional[float] = None
    ) -> RootSet:
        """Return a copy with the real and/or imaginary part of one root replaced."""
        current = self[index]
        re = current.real if real is None else float(real)
        im = current.imag if imag is None else float(imag)
        return self.replace_root(index, complex(re, im))

    @property
    def sum(self) -> complex:
        return self.first + self.second + self.third

    @property
    def pairwise_product_sum(self) -> complex:
        """r1*r2 + r2*r3 + r3*r1"""
        return (self.second * self.third
                + self.third * self.first
                + self.first * self.second)
