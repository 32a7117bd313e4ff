"""Unit tests for registration normalization and device matching."""

from dataclasses import dataclass

import pytest

from fleet_tracker.core.registration import (
    is_similar,
    match_device_to_vehicle,
    normalize_registration,
)


@dataclass
class _Vehicle:
    make: str
    model: str


class TestNormalizeRegistration:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("AB12 CDE", "AB12CDE"),
            (" ab12  cde ", "AB12CDE"),
            ("ab12\tcde", "AB12CDE"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_registration(raw) == expected


class TestSimilarity:
    @pytest.mark.parametrize(
        "a,b,similar",
        [
            ("transit", "trnsxt", True),
            ("mondeo", "mxndxx", False),
            ("fiesta", "fxestx", True),
            ("corsa", "cxrsxx", False),
        ],
    )
    def test_edit_distance_limit(self, a, b, similar):
        assert is_similar(a, b) is similar

    def test_substring_is_similar(self):
        assert is_similar("trans", "Transit")

    def test_small_typo_is_similar(self):
        assert is_similar("vauxhal", "vauxhall")
        assert is_similar("frod", "ford")

    def test_different_words_are_not_similar(self):
        assert not is_similar("sprinter", "transit")

    def test_empty_never_matches(self):
        assert not is_similar("", "ford")
        assert not is_similar("ford", "  ")


class TestMatchDeviceToVehicle:
    """Test tracker device names against the fleet's make and model."""

    @pytest.fixture
    def fleet(self):
        return [
            _Vehicle("Vauxhall", "Vivaro"),
            _Vehicle("Ford", "Transit Custom"),
            _Vehicle("Mercedes", "Sprinter"),
        ]

    def test_exact_make_and_model(self, fleet):
        assert match_device_to_vehicle("Mercedes Sprinter", fleet) is fleet[2]

    def test_device_contains_make_and_model(self, fleet):
        assert match_device_to_vehicle("Vauxhall Vivaro Van 2", fleet) is fleet[0]

    def test_words_similar_to_make_and_model(self, fleet):
        assert match_device_to_vehicle("Merc Sprinter", fleet) is fleet[2]

    def test_make_and_one_word_of_multi_word_model(self, fleet):
        assert match_device_to_vehicle("Ford Custom", fleet) is fleet[1]

    def test_case_and_whitespace_ignored(self, fleet):
        assert match_device_to_vehicle("  FORD   transit  ", fleet) is fleet[1]

    def test_no_match(self, fleet):
        assert match_device_to_vehicle("Iveco Daily", fleet) is None

    def test_blank_device(self, fleet):
        assert match_device_to_vehicle("   ", fleet) is None

    def test_first_matching_vehicle_wins(self):
        vans = [_Vehicle("Ford", "Transit"), _Vehicle("Ford", "Transit")]

        assert match_device_to_vehicle("Ford Transit", vans) is vans[0]
