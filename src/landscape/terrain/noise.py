"""Gradient noise for terrain generation.

Provides a lattice gradient noise field with smootherstep interpolation
and its fractal (multi-octave) composition.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

PERMUTATION_SIZE = 256


def fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Smootherstep fade curve 6t^5 - 15t^4 + 10t^3.

    Has zero first and second derivatives at 0 and 1.
    """
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(
    a: NDArray[np.float64], b: NDArray[np.float64], t: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Linear interpolation from a to b."""
    return a + t * (b - a)


def _grad(
    hash_value: NDArray[np.int64],
    x: NDArray[np.float64],
    y: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Dot product of the hashed corner gradient with the offset (x, y).

    The low two hash bits select one of four diagonal gradients.
    """
    h = hash_value & 3
    u = np.where(h < 2, x, y)
    v = np.where(h < 2, y, x)
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


class NoiseField:
    """Deterministic 2D gradient noise field.

    The lattice hash table is drawn once at construction from the supplied
    generator. Two fields built from identically seeded generators are
    identical; an unseeded generator gives a different field every time.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        """Initialize the lattice hash table.

        Args:
            rng: Random number generator. A fresh unseeded one is used if
                omitted.
        """
        if rng is None:
            rng = np.random.default_rng()
        table = rng.integers(0, PERMUTATION_SIZE, size=PERMUTATION_SIZE, dtype=np.int64)
        # Duplicated so perm[perm[X] + Y + 1] never wraps
        self.perm = np.concatenate([table, table])

    def sample(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64] | float:
        """Signed noise value, roughly in [-1, 1].

        Args:
            x: X coordinate(s) in lattice units.
            y: Y coordinate(s) in lattice units.

        Returns:
            Noise value(s); a float for scalar input, an array otherwise.
        """
        xa = np.asarray(x, dtype=np.float64)
        ya = np.asarray(y, dtype=np.float64)
        scalar = xa.ndim == 0 and ya.ndim == 0

        x_floor = np.floor(xa)
        y_floor = np.floor(ya)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255
        xf = xa - x_floor
        yf = ya - y_floor
        u = fade(xf)
        v = fade(yf)

        perm = self.perm
        aa = perm[perm[xi] + yi]
        ab = perm[perm[xi] + yi + 1]
        ba = perm[perm[xi + 1] + yi]
        bb = perm[perm[xi + 1] + yi + 1]

        x1 = lerp(_grad(aa, xf, yf), _grad(ba, xf - 1.0, yf), u)
        x2 = lerp(_grad(ab, xf, yf - 1.0), _grad(bb, xf - 1.0, yf - 1.0), u)
        result = lerp(x1, x2, v)

        if scalar:
            return float(result)
        return result

    def sample_unit(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64] | float:
        """Noise remapped to roughly [0, 1]."""
        return (self.sample(x, y) + 1.0) / 2.0

    def fractal(
        self,
        x: ArrayLike,
        y: ArrayLike,
        octaves: int,
        persistence: float,
        frequency_scale: float,
        lacunarity: float = 2.0,
    ) -> NDArray[np.float64] | float:
        """Fractal Brownian motion over this field.

        Sums octaves at increasing frequency and decaying amplitude, then
        divides by the total amplitude so the range does not grow with the
        octave count. With one octave this is ``sample`` at
        ``frequency_scale``.

        Args:
            x: X coordinate(s) in grid units.
            y: Y coordinate(s) in grid units.
            octaves: Number of noise layers to sum.
            persistence: Amplitude multiplier between octaves.
            frequency_scale: Frequency of the first octave.
            lacunarity: Frequency multiplier between octaves.

        Returns:
            Normalized noise value(s), roughly in [-1, 1].
        """
        xa = np.asarray(x, dtype=np.float64)
        ya = np.asarray(y, dtype=np.float64)

        total = np.zeros(np.broadcast_shapes(xa.shape, ya.shape), dtype=np.float64)
        frequency = frequency_scale
        amplitude = 1.0
        max_amplitude = 0.0

        for _ in range(octaves):
            total += self.sample(xa * frequency, ya * frequency) * amplitude
            max_amplitude += amplitude
            amplitude *= persistence
            frequency *= lacunarity

        if max_amplitude > 0:
            total /= max_amplitude

        if total.ndim == 0:
            return float(total)
        return total
