"""
Tests para la normalización de perfiles y propiedades.
"""

import pytest

from estatematch.matching.normalizers import (
    ConditionTier,
    CriteriaNormalizer,
    extract_amenities,
    normalize_condition,
    normalize_furnished,
    normalize_location,
    normalize_property_type,
    normalize_transaction_type,
    parse_floor,
    property_size_sqm,
)
from estatematch.models import CandidateListing, RequirementProfile


class TestParseFloor:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("3", 3.0),
            ("-1", -1.0),
            ("ground", 0.0),
            ("Ground Floor", 0.0),
            ("Ισόγειο", 0.0),
            ("basement", -1.0),
            ("penthouse", 99.0),
        ],
    )
    def test_known_values(self, raw, expected):
        assert parse_floor(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "top-ish"])
    def test_unparseable(self, raw):
        assert parse_floor(raw) is None


class TestLocation:
    def test_strips_prefix_and_accents(self):
        assert normalize_location("Municipality of Glyfada") == "glyfada"
        assert normalize_location("Δήμος Γλυφάδας") == "γλυφαδας"

    def test_strips_suffix(self):
        assert normalize_location("Athens City") == "athens"

    def test_empty(self):
        assert normalize_location(None) == ""
        assert normalize_location("") == ""


class TestVocabularies:
    def test_condition(self):
        assert normalize_condition("Excellent") == ConditionTier.EXCELLENT
        assert normalize_condition("Very Good") == ConditionTier.VERY_GOOD
        assert normalize_condition("needs renovation") == ConditionTier.POOR
        assert normalize_condition("Ανακαινισμένο") == ConditionTier.VERY_GOOD
        assert normalize_condition("whatever") is None
        assert normalize_condition(None) is None

    def test_property_type(self):
        assert normalize_property_type("Flat") == "apartment"
        assert normalize_property_type("Διαμέρισμα") == "apartment"
        assert normalize_property_type("Loft") == "loft"
        assert normalize_property_type(None) is None

    def test_transaction_type(self):
        assert normalize_transaction_type("For Sale") == "sale"
        assert normalize_transaction_type("RENTAL") == "rental"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("FULLY", "fully"),
            ("Furnished", "fully"),
            ("semi", "partially"),
            ("Unfurnished", "no"),
            ("maybe", None),
            (None, None),
        ],
    )
    def test_furnished(self, raw, expected):
        assert normalize_furnished(raw) == expected

    def test_condition_preferences(self):
        profile = RequirementProfile(
            condition_preferences=["Excellent", "needs renovation", "???"]
        )
        req = CriteriaNormalizer().normalize_requirement(profile)
        assert req.conditions == frozenset({ConditionTier.EXCELLENT, ConditionTier.POOR})

    def test_amenities_dict_keeps_truthy_keys(self):
        amenities = {"Pool": True, "Gym": False, "Air Conditioning": 1}
        assert extract_amenities(amenities) == frozenset({"pool", "air_conditioning"})

    def test_amenities_list(self):
        assert extract_amenities(["Sea View", "garage"]) == frozenset({"sea_view", "garage"})

    def test_amenities_empty(self):
        assert extract_amenities(None) == frozenset()
        assert extract_amenities({}) == frozenset()


class TestSize:
    def test_prefers_net(self):
        listing = CandidateListing(size_net_sqm=80, size_gross_sqm=95)
        assert property_size_sqm(listing) == 80

    def test_falls_back_to_gross(self):
        assert property_size_sqm(CandidateListing(size_gross_sqm=95)) == 95

    def test_converts_square_feet(self):
        assert property_size_sqm(CandidateListing(square_feet=1000)) == 93

    def test_missing(self):
        assert property_size_sqm(CandidateListing()) is None


class TestCriteriaNormalizer:
    def test_currency_conversion(self):
        normalizer = CriteriaNormalizer()
        assert normalizer.to_base_currency(100, "USD") == pytest.approx(92.0)
        assert normalizer.to_base_currency(100, "EUR") == 100
        assert normalizer.to_base_currency(100, None) == 100

    def test_unknown_currency_is_not_evaluable(self):
        normalizer = CriteriaNormalizer()
        assert normalizer.to_base_currency(100, "JPY") is None

    def test_custom_rates(self):
        normalizer = CriteriaNormalizer(exchange_rates={"USD": 1.0}, base_currency="USD")
        assert normalizer.to_base_currency(50, "usd") == 50
        assert normalizer.to_base_currency(50, "EUR") is None

    def test_swaps_reversed_budget(self):
        profile = RequirementProfile(budget_min=300000, budget_max=200000)
        req = CriteriaNormalizer().normalize_requirement(profile)

        assert (req.budget_min, req.budget_max) == (200000, 300000)

    def test_intent_maps_to_transactions(self):
        req = CriteriaNormalizer().normalize_requirement(RequirementProfile(intent="rent"))
        assert req.transactions == frozenset({"rental", "short_term"})

        req = CriteriaNormalizer().normalize_requirement(RequirementProfile())
        assert req.transactions == frozenset()

    def test_normalize_listing(self):
        listing = CandidateListing(
            id="p1",
            price="250000",
            area="Glyfada",
            city="Athens",
            floor="ground",
            condition="renovated",
            amenities={"Pool": True},
            description="Φωτεινό διαμέρισμα",
        )

        lst = CriteriaNormalizer().normalize_listing(listing)

        assert lst.price == 250000
        assert lst.locations == frozenset({"glyfada", "athens"})
        assert lst.floor == 0
        assert lst.condition == ConditionTier.VERY_GOOD
        assert lst.amenities == frozenset({"pool"})
        assert lst.description == "φωτεινο διαμερισμα"
