"""CIEDE2000 color difference.

Implements the formula as published by the CIE (see also Sharma, Wu and Dalal,
"The CIEDE2000 Color-Difference Formula", 2005). Both operands are arrays of
LAB triples with shape ``(..., 3)`` and broadcast against each other, so one
sample can be compared with a whole catalog in a single call.
"""

from __future__ import annotations

import numpy as np

from .models import LABColor

_25_POW_7 = 25.0**7


def ciede2000(
    lab1: np.ndarray,
    lab2: np.ndarray,
    k_l: float = 1.0,
    k_c: float = 1.0,
    k_h: float = 1.0,
) -> np.ndarray:
    lab1 = np.asarray(lab1, dtype=np.float64)
    lab2 = np.asarray(lab2, dtype=np.float64)
    if lab1.shape[-1] != 3 or lab2.shape[-1] != 3:
        raise ValueError("LAB arrays must have a trailing dimension of size 3")

    l1, a1, b1 = lab1[..., 0], lab1[..., 1], lab1[..., 2]
    l2, a2, b2 = lab2[..., 0], lab2[..., 1], lab2[..., 2]

    c1 = np.hypot(a1, b1)
    c2 = np.hypot(a2, b2)
    c_bar_7 = ((c1 + c2) / 2.0) ** 7
    g = 0.5 * (1.0 - np.sqrt(c_bar_7 / (c_bar_7 + _25_POW_7)))

    a1_prime = (1.0 + g) * a1
    a2_prime = (1.0 + g) * a2
    c1_prime = np.hypot(a1_prime, b1)
    c2_prime = np.hypot(a2_prime, b2)

    h1_prime = _hue_degrees(b1, a1_prime)
    h2_prime = _hue_degrees(b2, a2_prime)

    delta_l_prime = l2 - l1
    delta_c_prime = c2_prime - c1_prime

    chroma_product = c1_prime * c2_prime
    achromatic = chroma_product == 0.0

    # Hue is undefined when either color has no chroma.
    raw_dh = h2_prime - h1_prime
    delta_h_prime = np.where(
        raw_dh > 180.0,
        raw_dh - 360.0,
        np.where(raw_dh < -180.0, raw_dh + 360.0, raw_dh),
    )
    delta_h_prime = np.where(achromatic, 0.0, delta_h_prime)
    delta_big_h_prime = (
        2.0 * np.sqrt(chroma_product) * np.sin(np.radians(delta_h_prime / 2.0))
    )

    l_bar_prime = (l1 + l2) / 2.0
    c_bar_prime = (c1_prime + c2_prime) / 2.0

    hue_sum = h1_prime + h2_prime
    h_bar_prime = np.where(
        np.abs(h1_prime - h2_prime) > 180.0,
        (hue_sum + 360.0) / 2.0,
        hue_sum / 2.0,
    )
    h_bar_prime = np.where(achromatic, hue_sum, h_bar_prime)

    t = (
        1.0
        - 0.17 * np.cos(np.radians(h_bar_prime - 30.0))
        + 0.24 * np.cos(np.radians(2.0 * h_bar_prime))
        + 0.32 * np.cos(np.radians(3.0 * h_bar_prime + 6.0))
        - 0.20 * np.cos(np.radians(4.0 * h_bar_prime - 63.0))
    )
    delta_theta = 30.0 * np.exp(-(((h_bar_prime - 275.0) / 25.0) ** 2))
    c_bar_prime_7 = c_bar_prime**7
    r_c = 2.0 * np.sqrt(c_bar_prime_7 / (c_bar_prime_7 + _25_POW_7))

    l_offset_sq = (l_bar_prime - 50.0) ** 2
    s_l = 1.0 + (0.015 * l_offset_sq) / np.sqrt(20.0 + l_offset_sq)
    s_c = 1.0 + 0.045 * c_bar_prime
    s_h = 1.0 + 0.015 * c_bar_prime * t
    r_t = -np.sin(np.radians(2.0 * delta_theta)) * r_c

    l_term = delta_l_prime / (k_l * s_l)
    c_term = delta_c_prime / (k_c * s_c)
    h_term = delta_big_h_prime / (k_h * s_h)

    squared = l_term**2 + c_term**2 + h_term**2 + r_t * c_term * h_term
    # Rounding can push an exact-zero sum a hair below zero.
    return np.sqrt(np.maximum(squared, 0.0))


def delta_e_2000(lab1: LABColor, lab2: LABColor) -> float:
    return float(ciede2000(np.array(lab1.as_tuple()), np.array(lab2.as_tuple())))


def _hue_degrees(b: np.ndarray, a_prime: np.ndarray) -> np.ndarray:
    hue = np.degrees(np.arctan2(b, a_prime))
    return np.where(hue < 0.0, hue + 360.0, hue)
