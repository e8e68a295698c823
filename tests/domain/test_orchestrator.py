"""Unit tests for the validation orchestrator."""

from unittest.mock import Mock

import pytest

from src.domain.document import from_json
from src.domain.models import Issue, OutcomeReport
from src.domain.ports import InvalidDocumentError, ValidatorModule
from src.domain.services import CompletenessChecker, TerminologyValidator
from src.domain.services.orchestrator import ValidationOrchestrator, run_modules

from tests.factories import FakeTerminology, make_bundle, snomed


class StaticModule(ValidatorModule):
    """Module returning a fixed list of issues."""

    def __init__(self, name, *messages):
        self.name = name
        self.messages = messages
        self.seen = []

    def check(self, document):
        self.seen.append(document)
        return [Issue.error(m) for m in self.messages]


class TestRunModules:
    """Test suite for run_modules."""

    def test_no_modules_is_successful(self):
        """Test that an empty module list yields an empty, successful report."""
        report = run_modules(from_json({}), [])

        assert report == OutcomeReport()
        assert report.is_successful

    def test_issue_order_follows_module_then_emission_order(self):
        """Test aggregation order."""
        modules = [StaticModule("a", "a1", "a2"), StaticModule("b"), StaticModule("c", "c1")]

        report = run_modules(from_json({}), modules)

        assert [issue.message for issue in report.issues] == ["a1", "a2", "c1"]
        assert report.error_count == 3
        assert not report.is_successful

    def test_every_module_sees_same_document(self):
        """Test that all modules receive the same tree."""
        modules = [StaticModule("a", "x"), StaticModule("b")]
        tree = from_json({"resourceType": "Bundle"})

        run_modules(tree, modules)

        assert modules[0].seen == [tree]
        assert modules[1].seen == [tree]

    def test_missing_document_raises(self):
        """Test that a None document is a defect."""
        with pytest.raises(InvalidDocumentError):
            run_modules(None, [StaticModule("a")])

    def test_module_exceptions_propagate(self):
        """Test that unexpected module failures are not swallowed."""
        broken = Mock(spec=ValidatorModule)
        broken.name = "broken"
        broken.check.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            run_modules(from_json({}), [broken])


class TestValidationOrchestrator:
    """Test the orchestrator with the real modules."""

    def test_non_bundle_still_runs_terminology(self):
        """Test that the completeness check stopping early does not stop later modules."""
        terminology = FakeTerminology()
        patient = {"resourceType": "Patient", "maritalStatus": {"coding": [snomed("BAD")]}}
        orchestrator = ValidationOrchestrator([CompletenessChecker(), TerminologyValidator(terminology)])

        report = orchestrator.validate(from_json(patient))

        assert len(report.issues) == 2
        assert report.issues[0].message.startswith("Root resource must be a Bundle")
        assert "BAD" in report.issues[1].message
        assert terminology.calls == ["BAD"]

    def test_valid_bundle(self, complete_bundle, fake_terminology):
        """Test a fully valid bundle."""
        orchestrator = ValidationOrchestrator([CompletenessChecker(), TerminologyValidator(fake_terminology)])

        report = orchestrator.validate(from_json(complete_bundle))

        assert report.is_successful
        assert report.issues == ()

    def test_combined_findings(self):
        """Test missing resources and invalid codes in one bundle."""
        bundle = make_bundle(
            {"resourceType": "Patient"},
            {"resourceType": "Condition", "code": {"coding": [snomed("1"), snomed("2")]}},
        )
        orchestrator = ValidationOrchestrator([
            CompletenessChecker(),
            TerminologyValidator(FakeTerminology(valid_codes={"2"})),
        ])

        report = orchestrator.validate(from_json(bundle))

        assert report.issues[0].message == "Bundle is missing required resources: Encounter, Organization"
        assert len(report.issues) == 2
        assert report.issues[1].location.endswith("|1)")

    def test_modules_are_fixed_at_construction(self):
        """Test that the module list is copied into an immutable tuple."""
        modules = [StaticModule("a")]
        orchestrator = ValidationOrchestrator(modules)
        modules.append(StaticModule("b", "late"))

        assert orchestrator.validate(from_json({})).is_successful
        assert len(orchestrator.modules) == 1
