from __future__ import annotations

import math

import numpy as np
import pytest
from skimage.color import deltaE_ciede2000

from shade_finder.src.shade_match.delta_e import ciede2000, delta_e_2000
from shade_finder.src.shade_match.models import LABColor

# Sharma, Wu & Dalal (2005), "The CIEDE2000 Color-Difference Formula:
# Implementation Notes, Supplementary Test Data, and Mathematical Observations".
SHARMA_PAIRS = [
    ((50.0000, 2.6772, -79.7751), (50.0000, 0.0000, -82.7485), 2.0425),
    ((50.0000, 3.1571, -77.2803), (50.0000, 0.0000, -82.7485), 2.8615),
    ((50.0000, 2.8361, -74.0200), (50.0000, 0.0000, -82.7485), 3.4412),
    ((50.0000, -1.3802, -84.2814), (50.0000, 0.0000, -82.7485), 1.0000),
    ((50.0000, -1.1848, -84.8006), (50.0000, 0.0000, -82.7485), 1.0000),
    ((50.0000, -0.9009, -85.5211), (50.0000, 0.0000, -82.7485), 1.0000),
    ((50.0000, 0.0000, 0.0000), (50.0000, -1.0000, 2.0000), 2.3669),
    ((50.0000, -1.0000, 2.0000), (50.0000, 0.0000, 0.0000), 2.3669),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0009), 7.1792),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0010), 7.1792),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0011), 7.2195),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0012), 7.2195),
    ((50.0000, -0.0010, 2.4900), (50.0000, 0.0009, -2.4900), 4.8045),
    ((50.0000, -0.0010, 2.4900), (50.0000, 0.0010, -2.4900), 4.8045),
    ((50.0000, -0.0010, 2.4900), (50.0000, 0.0011, -2.4900), 4.7461),
    ((50.0000, 2.5000, 0.0000), (50.0000, 0.0000, -2.5000), 4.3065),
    ((50.0000, 2.5000, 0.0000), (73.0000, 25.0000, -18.0000), 27.1492),
    ((50.0000, 2.5000, 0.0000), (61.0000, -5.0000, 29.0000), 22.8977),
    ((50.0000, 2.5000, 0.0000), (56.0000, -27.0000, -3.0000), 31.9030),
    ((50.0000, 2.5000, 0.0000), (58.0000, 24.0000, 15.0000), 19.4535),
    ((50.0000, 2.5000, 0.0000), (50.0000, 3.1736, 0.5854), 1.0000),
    ((50.0000, 2.5000, 0.0000), (50.0000, 3.2972, 0.0000), 1.0000),
    ((50.0000, 2.5000, 0.0000), (50.0000, 1.8634, 0.5757), 1.0000),
    ((50.0000, 2.5000, 0.0000), (50.0000, 3.2592, 0.3350), 1.0000),
    ((60.2574, -34.0099, 36.2677), (60.4626, -34.1751, 39.4387), 1.2644),
    ((63.0109, -31.0961, -5.8663), (62.8187, -29.7946, -4.0864), 1.2630),
    ((61.2901, 3.7196, -5.3901), (61.4292, 2.2480, -4.9620), 1.8731),
    ((35.0831, -44.1164, 3.7933), (35.0232, -40.0716, 1.5901), 1.8645),
    ((22.7233, 20.0904, -46.6940), (23.0331, 14.9730, -42.5619), 2.0373),
    ((36.4612, 47.8580, 18.3852), (36.2715, 50.5065, 21.2231), 1.4146),
    ((90.8027, -2.0831, 1.4410), (91.1528, -1.6435, 0.0447), 1.4441),
    ((90.9257, -0.5406, -0.9208), (88.6381, -0.8985, -0.7239), 1.5381),
    ((6.7747, -0.2908, -2.4247), (5.8714, -0.0985, -2.2286), 0.6377),
    ((2.0776, 0.0795, -1.1350), (0.9033, -0.0636, -0.5514), 0.9082),
]


@pytest.mark.parametrize("lab1,lab2,expected", SHARMA_PAIRS)
def test_published_reference_pairs(lab1, lab2, expected):
    assert delta_e_2000(LABColor(*lab1), LABColor(*lab2)) == pytest.approx(
        expected, abs=1e-3
    )


def test_reference_pairs_vectorised():
    lab1 = np.array([pair[0] for pair in SHARMA_PAIRS])
    lab2 = np.array([pair[1] for pair in SHARMA_PAIRS])
    expected = np.array([pair[2] for pair in SHARMA_PAIRS])

    np.testing.assert_allclose(ciede2000(lab1, lab2), expected, atol=1e-3)


def test_identical_colors_have_zero_distance():
    for lab in [(0.0, 0.0, 0.0), (50.0, 0.0, 0.0), (74.1, 8.3, 16.9), (30.0, -60.0, 45.0)]:
        assert delta_e_2000(LABColor(*lab), LABColor(*lab)) == 0.0


def test_achromatic_pair_has_no_hue_term():
    dark = LABColor(50.0, 0.0, 0.0)
    light = LABColor(60.0, 0.0, 0.0)

    distance = delta_e_2000(dark, light)

    l_offset_sq = (55.0 - 50.0) ** 2
    s_l = 1.0 + 0.015 * l_offset_sq / math.sqrt(20.0 + l_offset_sq)
    assert math.isfinite(distance)
    assert distance == pytest.approx(10.0 / s_l)


def test_one_achromatic_color_stays_finite():
    distance = delta_e_2000(LABColor(40.0, 0.0, 0.0), LABColor(40.0, 0.0, -12.0))

    assert math.isfinite(distance)
    assert distance > 0.0


def test_distance_is_non_negative_and_matches_scikit_image():
    rng = np.random.default_rng(2024)
    lab1 = np.column_stack(
        [rng.uniform(5, 95, 200), rng.uniform(-60, 60, 200), rng.uniform(-60, 60, 200)]
    )
    lab2 = np.column_stack(
        [rng.uniform(5, 95, 200), rng.uniform(-60, 60, 200), rng.uniform(-60, 60, 200)]
    )

    ours = ciede2000(lab1, lab2)

    assert np.all(ours >= 0.0)
    np.testing.assert_allclose(ours, deltaE_ciede2000(lab1, lab2), atol=1e-3)


def test_one_sample_broadcasts_against_catalog():
    sample = np.array([[65.0, 12.0, 20.0]])
    catalog = np.array([[65.0, 12.0, 20.0], [40.0, 20.0, 30.0], [90.0, 2.0, 8.0]])

    distances = ciede2000(sample, catalog)

    assert distances.shape == (3,)
    assert distances[0] == 0.0
    assert distances[1] > 0.0 and distances[2] > 0.0


def test_rejects_arrays_without_three_channels():
    with pytest.raises(ValueError):
        ciede2000(np.zeros((2, 2)), np.zeros((2, 3)))
