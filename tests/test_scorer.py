"""
Tests para el scorer de compatibilidad.
"""

import pytest

from estatematch.matching.scorer import MatchScorer, ScoringWeights, overall_score
from estatematch.models import CriterionKind, Importance, PreferenceType, RequirementProfile

from conftest import pref


class TestOverallScore:
    @pytest.mark.parametrize(
        "numerator, denominator, expected",
        [
            (0, 0, 100),
            (5, 5, 100),
            (0, 7, 0),
            (3, 5, 60),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
        ],
    )
    def test_rounding(self, numerator, denominator, expected):
        assert overall_score(numerator, denominator) == expected


class TestHardCriteria:
    def test_nothing_evaluable_is_vacuous(self, scorer, make_profile, make_listing):
        result = scorer.score(make_profile(), make_listing())

        assert result.overall_score == 100
        assert result.breakdown == []
        assert result.total_criteria == 0
        assert result.is_vacuous

    def test_budget_inside_range(self, scorer, make_profile, make_listing):
        profile = make_profile(budget_min=200000, budget_max=300000)
        listing = make_listing(price=250000)

        result = scorer.score(profile, listing)

        assert result.overall_score == 100
        assert result.matched_criteria == 1
        assert result.total_criteria == 1
        budget = result.breakdown[0]
        assert budget.criterion == "budget"
        assert budget.kind == CriterionKind.HARD
        assert budget.weight == 3
        assert budget.contribution == 3

    def test_budget_outside_range(self, scorer, make_profile, make_listing):
        result = scorer.score(
            make_profile(budget_min=200000, budget_max=300000), make_listing(price=350000)
        )

        assert result.overall_score == 0
        assert result.total_criteria == 1
        assert result.breakdown[0].contribution == 0

    def test_budget_tolerance(self, make_profile, make_listing):
        scorer = MatchScorer(budget_tolerance_percent=10)
        result = scorer.score(make_profile(budget_max=300000), make_listing(price=320000))
        assert result.breakdown[0].matched

    def test_budget_compares_in_base_currency(self, scorer, make_profile, make_listing):
        profile = make_profile(budget_min=200000, budget_max=300000, currency="EUR")
        listing = make_listing(price=300000, currency="USD")

        assert scorer.score(profile, listing).breakdown[0].matched

    def test_unknown_currency_skips_budget(self, scorer, make_profile, make_listing):
        result = scorer.score(
            make_profile(budget_max=300000), make_listing(price=1000, currency="XYZ")
        )
        assert result.total_criteria == 0

    def test_fixed_order(self, scorer, make_profile, make_listing):
        profile = make_profile(
            budget_min=100000,
            budget_max=400000,
            locations=["Glyfada"],
            property_types=["apartment"],
            bedrooms_min=2,
            bathrooms_min=1,
            intent="buy",
            size_min_sqm=60,
        )
        listing = make_listing(
            price=250000,
            area="Glyfada",
            property_type="flat",
            bedrooms=3,
            bathrooms=1,
            transaction_type="sale",
            size_net_sqm=90,
        )

        result = scorer.score(profile, listing)

        assert [c.criterion for c in result.breakdown] == [
            "budget",
            "location",
            "type",
            "bedrooms",
            "bathrooms",
            "transaction",
            "size",
        ]
        assert result.overall_score == 100

    def test_missing_listing_field_is_omitted(self, scorer, make_profile, make_listing):
        profile = make_profile(budget_max=300000, bedrooms_min=2)
        listing = make_listing(price=250000)

        result = scorer.score(profile, listing)

        assert [c.criterion for c in result.breakdown] == ["budget"]

    def test_location_mismatch(self, scorer, make_profile, make_listing):
        profile = make_profile(locations=["Kifisia"])
        listing = make_listing(area="Glyfada", city="Athens")

        result = scorer.score(profile, listing)

        assert result.overall_score == 0
        assert result.breakdown[0].criterion == "location"

    def test_custom_weights(self, make_profile, make_listing):
        scorer = MatchScorer(weights=ScoringWeights(hard=1))
        profile = make_profile(budget_max=300000, locations=["Kifisia"])
        listing = make_listing(price=250000, area="Glyfada")

        result = scorer.score(profile, listing)

        assert [c.weight for c in result.breakdown] == [1, 1]
        assert result.overall_score == 50


class TestSoftCriteria:
    def test_required_elevator_and_preferred_balcony(self, scorer, make_profile, make_listing):
        profile = make_profile(
            preferences=[
                pref(PreferenceType.ELEVATOR, Importance.REQUIRED),
                pref(PreferenceType.BALCONY, Importance.PREFERRED),
            ]
        )
        listing = make_listing(elevator=True, description="Apartment close to the metro")

        result = scorer.score(profile, listing)

        assert result.overall_score == 60
        assert [(c.criterion, c.weight, c.contribution) for c in result.breakdown] == [
            ("elevator", 3, 3),
            ("balcony", 2, 0),
        ]
        assert all(c.kind == CriterionKind.SOFT for c in result.breakdown)

    def test_text_preference_needs_listing_text(self, scorer, make_profile, make_listing):
        profile = make_profile(
            preferences=[
                pref(PreferenceType.ELEVATOR, Importance.REQUIRED),
                pref(PreferenceType.BALCONY, Importance.PREFERRED),
            ]
        )

        result = scorer.score(profile, make_listing(elevator=True))

        assert result.total_criteria == 1
        assert result.overall_score == 100

    def test_amenity_match(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.POOL)])
        listing = make_listing(amenities={"Swimming Pool": True})

        criterion = scorer.score(profile, listing).breakdown[0]

        assert criterion.matched
        assert criterion.weight == 1
        assert "amenities" in criterion.reason

    def test_false_amenity_is_ignored(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.POOL)])
        listing = make_listing(amenities={"pool": False}, description="Quiet street")

        result = scorer.score(profile, listing)

        assert result.total_criteria == 1
        assert not result.breakdown[0].matched

    def test_description_match_in_greek(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.SEA_VIEW)])
        listing = make_listing(description="Διαμέρισμα με θέα στη θάλασσα")

        assert scorer.score(profile, listing).breakdown[0].matched

    def test_avoided_feature_present(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.BALCONY, value=False)])
        listing = make_listing(description="Lovely balcony facing south")

        assert not scorer.score(profile, listing).breakdown[0].matched

    def test_ground_floor(self, scorer, make_profile, make_listing):
        wants = make_profile(preferences=[pref(PreferenceType.GROUND_FLOOR)])
        avoids = make_profile(preferences=[pref(PreferenceType.GROUND_FLOOR, value=False)])

        assert scorer.score(wants, make_listing(floor="ground")).breakdown[0].matched
        assert not scorer.score(wants, make_listing(floor=3)).breakdown[0].matched
        assert scorer.score(avoids, make_listing(floor=3)).breakdown[0].matched

    def test_elevator_unknown_is_omitted(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.ELEVATOR)])
        assert scorer.score(profile, make_listing(description="Nice")).is_vacuous

    def test_condition_ignores_polarity(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.RENOVATED, value=False)])
        listing = make_listing(condition="excellent")

        result = scorer.score(profile, listing)

        assert result.breakdown[0].matched
        assert result.overall_score == 100

    def test_condition_below_very_good(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.NEW_BUILD)])
        assert not scorer.score(profile, make_listing(condition="good")).breakdown[0].matched

    def test_preferences_from_notes(self, scorer, make_profile, make_listing):
        profile = make_profile(notes="Must have an elevator")
        listing = make_listing(elevator=False)

        result = scorer.score(profile, listing)

        assert result.total_criteria == 1
        assert result.breakdown[0].weight == 3
        assert result.overall_score == 0

    def test_hard_before_soft(self, scorer, make_profile, make_listing):
        profile = make_profile(
            budget_max=300000,
            preferences=[pref(PreferenceType.QUIET)],
        )
        listing = make_listing(price=250000, description="Quiet street")

        result = scorer.score(profile, listing)

        assert [c.criterion for c in result.breakdown] == ["budget", "quiet"]
        assert result.matched_criteria == 2

    def test_every_preference_type_has_a_matcher(self, scorer):
        assert set(scorer.soft_matchers) == set(PreferenceType)


class TestDeterminism:
    def test_same_input_same_score(self, scorer, make_profile, make_listing):
        profile = make_profile(
            budget_max=300000, notes="Needs a lift and would like a garden"
        )
        listing = make_listing(price=280000, elevator=True, description="Garden flat")

        first = scorer.score(profile, listing)
        second = scorer.score(profile, listing)

        assert first.overall_score == second.overall_score
        assert first.breakdown == second.breakdown


class TestMissingValues:
    def test_non_finite_price_skips_budget(self, scorer, make_profile, make_listing):
        result = scorer.score(make_profile(budget_max=300000), make_listing(price="nan"))

        assert result.total_criteria == 0
        assert result.is_vacuous


class TestStructuredPreferences:
    def test_crm_flags_are_scored(self, scorer, make_listing):
        profile = RequirementProfile.from_db_row(
            {
                "id": "c1",
                "property_preferences": {
                    "requires_elevator": True,
                    "ground_floor_only": True,
                    "amenities_required": ["pool"],
                },
            }
        )
        listing = make_listing(elevator=False, floor="3", amenities=["gym"])

        result = scorer.score(profile, listing)

        assert [(c.criterion, c.weight, c.matched) for c in result.breakdown] == [
            ("elevator", 3, False),
            ("groundFloor", 3, False),
            ("pool", 3, False),
        ]
        assert result.overall_score == 0

    def test_condition_preferences(self, scorer, make_profile, make_listing):
        profile = make_profile(condition_preferences=["EXCELLENT", "VERY_GOOD"])

        good = scorer.score(profile, make_listing(condition="good")).breakdown
        excellent = scorer.score(profile, make_listing(condition="excellent")).breakdown

        assert [(c.criterion, c.kind, c.matched) for c in good] == [
            ("condition", CriterionKind.HARD, False)
        ]
        assert excellent[0].matched

    def test_condition_preferences_lowest_tier(self, scorer, make_profile, make_listing):
        profile = make_profile(condition_preferences=["NEEDS_RENOVATION"])
        assert scorer.score(profile, make_listing(condition="poor")).breakdown[0].matched

    def test_accepts_pets_column_wins(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.PET_FRIENDLY)])

        assert scorer.score(profile, make_listing(accepts_pets=True)).breakdown[0].matched
        result = scorer.score(
            profile, make_listing(accepts_pets=False, description="Pets allowed")
        )
        assert not result.breakdown[0].matched

    def test_carpet_is_not_a_pet_amenity(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.PET_FRIENDLY)])

        result = scorer.score(profile, make_listing(amenities=["carpet"]))

        assert not result.breakdown[0].matched

    def test_pet_amenity(self, scorer, make_profile, make_listing):
        profile = make_profile(preferences=[pref(PreferenceType.PET_FRIENDLY)])
        listing = make_listing(amenities={"Pets Allowed": True})

        assert scorer.score(profile, listing).breakdown[0].matched

    def test_furnished_column(self, scorer, make_profile, make_listing):
        wants = make_profile(preferences=[pref(PreferenceType.FURNISHED)])
        avoids = make_profile(preferences=[pref(PreferenceType.FURNISHED, value=False)])

        assert scorer.score(wants, make_listing(furnished="partial")).breakdown[0].matched
        assert not scorer.score(avoids, make_listing(furnished="FULLY")).breakdown[0].matched
        assert scorer.score(avoids, make_listing(furnished="NO")).breakdown[0].matched
