"""Magnetic rigidity (Brho) reconstruction from tracks at two foci."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

# Length and angle units: lengths in mm, angles in rad.
_MM = 1.0
_MRAD = 1.0e-3

# Indices into the first-order transfer matrix.
_X, _A, _Y, _B, _L, _D = range(6)


class CubicRoots(NamedTuple):
    """Roots of a cubic polynomial.

    With ``complex`` false, ``a``, ``b`` and ``c`` are three real roots
    (largest, middle, smallest). With ``complex`` true, ``a`` is the real
    root and the other two are ``b + ic`` and ``b - ic``.
    """

    complex: bool
    a: float
    b: float
    c: float


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def roots_cubic(coef) -> CubicRoots:
    """Roots of ``coef[3]*x**3 + coef[2]*x**2 + coef[1]*x + coef[0]``.

    A zero leading coefficient gives all-zero roots.
    """
    c0, c1, c2, c3 = (float(value) for value in coef)
    if c3 == 0:
        return CubicRoots(False, 0.0, 0.0, 0.0)

    r = c2 / c3
    s = c1 / c3
    t = c0 / c3
    p = s - r * r / 3.0
    ps3 = p / 3.0
    q = 2.0 * r * r * r / 27.0 - r * s / 3.0 + t
    qs2 = q / 2.0
    ps33 = ps3 * ps3 * ps3
    disc = ps33 + qs2 * qs2
    shift = r / 3.0

    if disc >= 0:
        root = math.sqrt(disc)
        u = _cbrt(-qs2 + root)
        v = _cbrt(-qs2 - root)
        y1 = u + v
        y2 = -y1 / 2.0
        y3 = (u - v) * math.sqrt(3.0) / 2.0
        return CubicRoots(True, y1 - shift, y2 - shift, y3)

    cphi = -qs2 / math.sqrt(-ps33)
    cphi = max(-1.0, min(1.0, cphi))
    phis3 = math.acos(cphi) / 3.0
    pis3 = math.pi / 3.0
    scale = math.sqrt(-ps3)
    y1 = 2.0 * scale * math.cos(phis3)
    y2 = -2.0 * scale * math.cos(pis3 + phis3)
    y3 = -2.0 * scale * math.cos(pis3 - phis3)
    return CubicRoots(False, y1 - shift, y2 - shift, y3 - shift)


@dataclass
class Track:
    """A straight track: positions in mm, angles in rad, at position ``z``."""

    x: float
    a: float
    y: float = 0.0
    b: float = 0.0
    z: float = 0.0


def _empty_matrix() -> list[list[float]]:
    return [[0.0] * 6 for _ in range(6)]


_SECTIONS = {
    # F3-F5
    35: {
        (_X, _X): 0.926591,
        (_X, _A): -0.00471245 * _MM / _MRAD,
        (_A, _X): -0.0196513 * _MRAD / _MM,
        (_A, _A): 1.07932,
        (_X, _D): 31.6690,
        (_A, _D): 0.015266,
    },
    # F5-F7
    57: {
        (_X, _X): 1.08043,
        (_X, _A): 0.0226346 * _MM / _MRAD,
        (_A, _X): -0.0182343 * _MRAD / _MM,
        (_A, _A): 0.925174,
        (_X, _D): -34.1741,
        (_A, _D): 0.654360,
    },
}

_MODES = (0, 1, 2)


class BrhoReconstructor:
    """First-order Brho reconstruction for the F3-F5 (35) or F5-F7 (57) section.

    Modes: 0 both tracks on focus, 1 only the entrance track on focus,
    2 only the exit track on focus. ``z`` is the focus position used by
    modes 1 and 2.
    """

    def __init__(
        self, brho0: float = 0.0, z: float = 0.0, mode: int = 0, section: int = 35
    ) -> None:
        if section not in _SECTIONS:
            raise ValueError(f"Unknown section {section}")
        if mode not in _MODES:
            raise ValueError(f"unknown mode {mode}")
        self.brho0 = brho0
        self.z = z
        self.mode = mode
        self.section = section
        self.matrix = _empty_matrix()
        for (row, col), value in _SECTIONS[section].items():
            self.matrix[row][col] = value

    def process(self, track1: Track | None, track2: Track | None) -> float | None:
        """Return Brho from the entrance and exit tracks, or ``None`` if one is missing."""
        if track1 is None or track2 is None:
            return None
        m = self.matrix
        x1, a1 = track1.x, track1.a
        x2, a2 = track2.x, track2.a
        l1 = self.z - track1.z
        l2 = self.z - track2.z

        if self.mode == 0:
            d = (x2 - m[_X][_X] * x1 - m[_X][_A] * a1) / m[_X][_D]
        elif self.mode == 1:
            d = (
                x2
                - (m[_X][_X] - m[_A][_X] * l1) * x1
                + (m[_X][_A] - l1 * m[_A][_A]) * a1
            ) / (m[_X][_D] - l1 * m[_A][_D])
        else:
            k = m[_A][_X] * l2 + m[_A][_A]
            d = (
                (x2 - m[_X][_X] * x1) * k
                - (a2 - m[_A][_X] * x1) * (m[_X][_X] * l2 + m[_X][_A])
            ) / (k * m[_X][_D] - k * m[_A][_D])
        return self.brho0 * (1.0 + d / 100.0)


# Higher-order S0-S1 transfer coefficients (angles in mrad, delta as fraction).
_S1_X0 = 0.0
_S1_XD = -2055.0
_S1_XDD = -814.19
_S1_XDDD = 12795.1
_S1_XA = 0.0
_S1_XAD = 19.2342
_S1_XADD = -414.067
_S1_XADDD = 4882.33
_S1_XX = -0.799825
_S1_XXD = 11.402
_S1_XYY = -0.0493525
_S1_XYYD = -0.350427
_S1_XBB = 0.0237474
_S1_XBBBB = -0.392603e-05

_S1_A0 = 0.0
_S1_ADD = 0.0
_S1_AD = -1022.0
_S1_AA = -1.42
_S1_AAD = 7.22942
_S1_AX = -0.88
_S1_AYY = -0.0163254
_S1_ABB = 0.011862
_S1_ABBBB = -1.99647e-05

_S1_B_FIXED = 5.872
_S1_ITERATIONS = 6


class BrhoReconstructorS1:
    """Iterative higher-order Brho reconstruction for the S0-S1 section."""

    def __init__(self, brho0: float = 0.0, z: float = 0.0) -> None:
        self.brho0 = brho0
        self.z = z
        self.matrix = _empty_matrix()
        self.matrix[_X][_X] = _S1_XX
        self.matrix[_X][_A] = _S1_XA
        self.matrix[_A][_X] = _S1_AX
        self.matrix[_A][_A] = _S1_AA
        self.matrix[_X][_D] = _S1_XD
        self.matrix[_A][_D] = _S1_AD

    def process(self, track1: Track | None, track2: Track | None) -> float | None:
        """Return Brho from the S0 and S1 tracks, or ``None`` if one is missing."""
        if track1 is None or track2 is None:
            return None
        s0x = track1.x
        s0y = track1.y
        s1x = track2.x
        s1a = track2.a * 1000.0

        b = _S1_B_FIXED
        xb_term = _S1_XBB * b * b + _S1_XBBBB * b ** 4
        ab_term = _S1_ABB * b * b + _S1_ABBBB * b ** 4

        delta = (s1x - _S1_X0) / _S1_XD
        angle = (s1a - _S1_A0) / (_S1_AA + _S1_AAD * delta)
        for _ in range(_S1_ITERATIONS):
            x_from_a = (
                _S1_XA * angle
                + _S1_XAD * angle * delta
                + _S1_XADD * angle * delta ** 2
                + _S1_XADDD * angle * delta ** 3
            )
            x_from_x = _S1_XX * s0x + _S1_XXD * s0x * delta
            x_from_y = _S1_XYY * s0y * s0y + _S1_XYYD * s0y * s0y * delta
            coef = (
                _S1_X0 - s1x + x_from_a + x_from_x + x_from_y + xb_term,
                _S1_XD,
                _S1_XDD,
                _S1_XDDD,
            )
            delta = roots_cubic(coef).b

            a_from_d = _S1_AD * delta + _S1_ADD * delta * delta
            a_from_x = _S1_AX * s0x
            a_from_y = _S1_AYY * s0y * s0y
            angle = (s1a - _S1_A0 - a_from_d - a_from_x - a_from_y - ab_term) / (
                _S1_AA + _S1_AAD * delta
            )
        return self.brho0 * (1.0 + delta)