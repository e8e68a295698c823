"""Unit tests for narrative backfill."""

from src.domain.services.narrative import backfill_bundle_narratives, ensure_minimal_narrative

from tests.factories import make_bundle


class TestEnsureMinimalNarrative:
    """Test suite for ensure_minimal_narrative."""

    def test_adds_narrative_with_type_and_id(self):
        """Test narrative generation for a resource with an id."""
        resource = {"resourceType": "Patient", "id": "p1"}

        assert ensure_minimal_narrative(resource) is True
        assert resource["text"] == {
            "status": "generated",
            "div": '<div xmlns="http://www.w3.org/1999/xhtml"><p>Patient p1</p></div>',
        }

    def test_adds_narrative_without_id(self):
        """Test narrative generation for a resource without an id."""
        resource = {"resourceType": "Organization"}

        ensure_minimal_narrative(resource)

        assert resource["text"]["div"].endswith("<p>Organization</p></div>")

    def test_keeps_existing_narrative(self):
        """Test that an existing narrative is left untouched."""
        text = {"status": "additional", "div": '<div xmlns="http://www.w3.org/1999/xhtml">Existing</div>'}
        resource = {"resourceType": "Condition", "text": dict(text)}

        assert ensure_minimal_narrative(resource) is False
        assert resource["text"] == text

    def test_replaces_blank_div(self):
        """Test that a blank div counts as missing."""
        resource = {"resourceType": "Encounter", "id": "e1", "text": {"status": "empty", "div": "   "}}

        assert ensure_minimal_narrative(resource) is True
        assert resource["text"]["status"] == "generated"

    def test_escapes_id(self):
        """Test that ids are escaped inside the XHTML."""
        resource = {"resourceType": "Patient", "id": "<b>"}

        ensure_minimal_narrative(resource)

        assert "&lt;b&gt;" in resource["text"]["div"]

    def test_skips_non_domain_resources(self):
        """Test that Bundle, Parameters and Binary are not given narratives."""
        for resource_type in ("Bundle", "Parameters", "Binary"):
            resource = {"resourceType": resource_type}
            assert ensure_minimal_narrative(resource) is False
            assert "text" not in resource

    def test_ignores_non_resources(self):
        """Test input that is not a resource."""
        assert ensure_minimal_narrative(None) is False
        assert ensure_minimal_narrative({"id": "x"}) is False
        assert ensure_minimal_narrative("Patient") is False


class TestBackfillBundleNarratives:
    """Test suite for backfill_bundle_narratives."""

    def test_backfills_entries(self):
        """Test that every entry resource missing a narrative gets one."""
        bundle = make_bundle(
            {"resourceType": "Patient", "id": "p1"},
            {"resourceType": "Condition", "text": {"status": "generated", "div": "<div>x</div>"}},
        )
        bundle["entry"].append({"fullUrl": "urn:uuid:empty"})

        assert backfill_bundle_narratives(bundle) == 1
        assert "text" in bundle["entry"][0]["resource"]
        assert "text" not in bundle

    def test_non_bundle_input(self):
        """Test that malformed input is left alone."""
        assert backfill_bundle_narratives([]) == 0
        assert backfill_bundle_narratives({"resourceType": "Bundle", "entry": "nope"}) == 0
        assert backfill_bundle_narratives({"resourceType": "Bundle"}) == 0
