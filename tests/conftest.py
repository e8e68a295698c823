"""Shared fixtures for Bundle-Sentinel tests."""

import pytest

from tests.factories import FakeTerminology, make_bundle, snomed


@pytest.fixture
def complete_bundle():
    """Bundle with every required resource type and two SNOMED codings."""
    return make_bundle(
        {"resourceType": "Patient", "id": "p1"},
        {
            "resourceType": "Encounter",
            "id": "e1",
            "class": [{"coding": [{"system": "http://terminology.hl7.org/CodeSystem/v3-ActCode", "code": "AMB"}]}],
        },
        {
            "resourceType": "Condition",
            "id": "c1",
            "code": {"coding": [snomed("22298006", "Myocardial infarction")]},
            "bodySite": [{"coding": [snomed("80891009", "Heart structure")]}],
        },
        {"resourceType": "Organization", "id": "o1", "name": "General Hospital"},
    )


@pytest.fixture
def fake_terminology():
    return FakeTerminology(valid_codes={"22298006", "80891009"})
