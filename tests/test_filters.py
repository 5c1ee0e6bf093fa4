from __future__ import annotations

import pytest

from src.filtering.filters import FilterState, apply_filters, get_filter_options, search_grants
from src.normalize.schema import Grant


def _grants() -> list[Grant]:
    return [
        Grant(id="G1", funding_body="NHMRC", organisation="Monash", scheme="Ideas", investigators="Dr Ada Lovelace", summary="sleep", funding=10.0, is_in_subset=True),
        Grant(id="G2", funding_body="ARC", organisation="Monash", scheme="Discovery", investigators="Prof Alan Turing", summary="cancer", funding=20.0),
        Grant(id="G3", funding_body="NHMRC", organisation="UQ", scheme="Ideas", investigators="A/Prof Grace Hopper", summary="apnea", funding=30.0, is_in_subset=True),
        Grant(id="G4", funding_body="NHMRC", organisation="Monash", scheme="Ideas", investigators="Dr Alan Kay", summary="genomics", funding=40.0),
    ]


def _ids(grants: list[Grant]) -> list[str]:
    return [grant.id for grant in grants]


def test_empty_filter_state_passes_everything_through() -> None:
    assert _ids(apply_filters(_grants(), FilterState())) == ["G1", "G2", "G3", "G4"]
    assert _ids(apply_filters(_grants())) == ["G1", "G2", "G3", "G4"]


def test_predicates_combine_with_and() -> None:
    state = FilterState(funding_body="NHMRC", organisation="Monash", scheme="Ideas")

    assert _ids(apply_filters(_grants(), state)) == ["G1", "G4"]


def test_investigator_filter_is_case_insensitive_substring() -> None:
    assert _ids(apply_filters(_grants(), FilterState(investigator="alan"))) == ["G2", "G4"]


def test_subset_toggle_restricts_to_subset_or_other() -> None:
    assert _ids(apply_filters(_grants(), FilterState(subset=True))) == ["G1", "G3"]
    assert _ids(apply_filters(_grants(), FilterState(subset=False))) == ["G2", "G4"]


def test_filters_are_idempotent_and_commutative() -> None:
    body_first = apply_filters(apply_filters(_grants(), FilterState(funding_body="NHMRC")), FilterState(organisation="Monash"))
    org_first = apply_filters(apply_filters(_grants(), FilterState(organisation="Monash")), FilterState(funding_body="NHMRC"))
    state = FilterState(funding_body="NHMRC")

    assert _ids(body_first) == _ids(org_first)
    assert _ids(apply_filters(apply_filters(_grants(), state), state)) == _ids(apply_filters(_grants(), state))


def test_filtering_does_not_mutate_input() -> None:
    grants = _grants()

    apply_filters(grants, FilterState(funding_body="ARC"))

    assert len(grants) == 4


def test_with_value_updates_one_field_and_reset_clears_all() -> None:
    state = FilterState().with_value("scheme", "Ideas").with_value("subset", True)

    assert state == FilterState(scheme="Ideas", subset=True)
    assert state.reset().is_empty


def test_with_value_rejects_unknown_filters_and_bad_subset_values() -> None:
    with pytest.raises(ValueError):
        FilterState().with_value("year", "2020")
    with pytest.raises(ValueError):
        FilterState().with_value("subset", "yes")


def test_search_grants_matches_across_text_columns() -> None:
    assert _ids(search_grants(_grants(), "GRACE")) == ["G3"]
    assert _ids(search_grants(_grants(), "genomics")) == ["G4"]
    assert _ids(search_grants(_grants(), "  ")) == ["G1", "G2", "G3", "G4"]


def test_get_filter_options_sorts_bodies_by_name_and_others_by_frequency() -> None:
    options = get_filter_options(_grants())

    assert options.funding_bodies == ["ARC", "NHMRC"]
    assert options.organisations == ["Monash", "UQ"]
    assert options.organisation_counts == {"Monash": 3, "UQ": 1}
    assert options.schemes == ["Ideas", "Discovery"]
    assert get_filter_options(_grants(), limit=1).schemes == ["Ideas"]
