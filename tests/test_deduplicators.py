from __future__ import annotations

import pytest

from workflow_transfer.plugins import FuzzyDeduplicator, StandardDeduplicator


def _workflow(name: str, tags: list[object] | None = None) -> dict[str, object]:
    return {"name": name, "nodes": [], "connections": {}, "tags": tags or []}


def test_standard_deduplicator_matches_name_and_tag_set_in_any_order() -> None:
    deduplicator = StandardDeduplicator()
    target = [
        _workflow("Customer Sync", ["crm"]),
        _workflow("Customer Sync", [{"name": "sync"}, {"name": "crm"}]),
    ]

    assert deduplicator.is_duplicate(_workflow("Customer Sync", ["crm", "sync"]), target) is True
    assert deduplicator.last_match is target[1]
    assert deduplicator.get_reason() == (
        "Duplicate found: name 'Customer Sync' and tags [\"crm\", \"sync\"] already exist"
    )


def test_standard_deduplicator_rejects_different_tags_and_resets_reason() -> None:
    deduplicator = StandardDeduplicator()
    target = [_workflow("Customer Sync", ["crm"])]

    assert deduplicator.is_duplicate(_workflow("Customer Sync", ["crm"]), target) is True
    assert deduplicator.is_duplicate(_workflow("Customer Sync", ["crm", "prod"]), target) is False
    assert deduplicator.get_reason() is None
    assert deduplicator.last_match is None


def test_standard_deduplicator_is_case_sensitive_on_names() -> None:
    deduplicator = StandardDeduplicator()
    target = [_workflow("Customer Sync")]

    assert deduplicator.is_duplicate(_workflow("customer sync"), target) is False


def test_fuzzy_deduplicator_uses_threshold() -> None:
    strict = FuzzyDeduplicator(threshold=0.85)
    lenient = FuzzyDeduplicator(threshold=0.8)
    target = [_workflow("Customer Sync")]

    assert strict.similarity("Customer Sync v2", "Customer Sync") == pytest.approx(0.8125)
    assert strict.is_duplicate(_workflow("Customer Sync v2"), target) is False
    assert strict.get_reason() is None
    assert lenient.is_duplicate(_workflow("Customer Sync v2"), target) is True
    assert lenient.get_reason() == "Similar workflow found: 'Customer Sync' (similarity: 81.2%)"


def test_fuzzy_deduplicator_ignores_case_and_whitespace_by_default() -> None:
    deduplicator = FuzzyDeduplicator()

    assert deduplicator.is_duplicate(_workflow("  CUSTOMER sync "), [_workflow("Customer Sync")])
    assert deduplicator.get_reason() == (
        "Similar workflow found: 'Customer Sync' (similarity: 100.0%)"
    )


def test_fuzzy_deduplicator_case_sensitive_option() -> None:
    deduplicator = FuzzyDeduplicator(case_sensitive=True)

    assert deduplicator.similarity("ABC", "abc") == 0.0
    assert deduplicator.is_duplicate(_workflow("ABC"), [_workflow("abc")]) is False


def test_fuzzy_deduplicator_reports_best_match() -> None:
    deduplicator = FuzzyDeduplicator(threshold=0.5)
    target = [_workflow("Invoice Export"), _workflow("Invoice Exports"), _workflow("Other")]

    assert deduplicator.is_duplicate(_workflow("Invoice Export"), target) is True
    assert "'Invoice Export'" in (deduplicator.get_reason() or "")


def test_fuzzy_deduplicator_rejects_missing_name_and_invalid_threshold() -> None:
    with pytest.raises(ValueError, match="name"):
        FuzzyDeduplicator().is_duplicate({"nodes": []}, [])

    deduplicator = FuzzyDeduplicator()
    deduplicator.set_options({"threshold": 1.5})
    with pytest.raises(ValueError, match="threshold"):
        deduplicator.is_duplicate(_workflow("A"), [])
