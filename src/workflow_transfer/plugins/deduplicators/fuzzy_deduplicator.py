"""Levenshtein-similarity deduplicator."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from workflow_transfer.domain.models import WorkflowRecord
from workflow_transfer.domain.workflows import workflow_name
from workflow_transfer.plugins.base import DeduplicatorPlugin

_DEFAULT_THRESHOLD = 0.85


@dataclass(slots=True, frozen=True)
class _FuzzyMatch:
    name: str
    similarity: float


class FuzzyDeduplicator(DeduplicatorPlugin):
    """Treat a workflow as duplicate when a TARGET name is similar enough.

    Similarity is the normalized Levenshtein similarity of the trimmed names,
    case-insensitive unless the `case_sensitive` option is set.
    """

    def __init__(self, threshold: float = _DEFAULT_THRESHOLD, case_sensitive: bool = False) -> None:
        super().__init__(
            "fuzzy-deduplicator",
            description="Name similarity matching using Levenshtein distance",
            options={"threshold": threshold, "case_sensitive": case_sensitive},
        )
        self._last_match: _FuzzyMatch | None = None

    def is_duplicate(
        self,
        record: WorkflowRecord,
        target_workflows: Sequence[WorkflowRecord],
    ) -> bool:
        self._last_match = None
        name = workflow_name(record)
        if not name:
            raise ValueError("Workflow must have a string 'name' property.")

        threshold = float(self.get_option("threshold", _DEFAULT_THRESHOLD))
        if not 0 <= threshold <= 1:
            raise ValueError("Fuzzy threshold must be between 0 and 1.")

        best: _FuzzyMatch | None = None
        for candidate in target_workflows:
            candidate_name = workflow_name(candidate)
            if not candidate_name:
                continue
            similarity = self.similarity(name, candidate_name)
            if best is None or similarity >= best.similarity:
                best = _FuzzyMatch(name=candidate_name, similarity=similarity)

        if best is not None and best.similarity >= threshold:
            self._last_match = best
            return True
        return False

    def get_reason(self) -> str | None:
        if self._last_match is None:
            return None
        percent = self._last_match.similarity * 100
        return f"Similar workflow found: '{self._last_match.name}' (similarity: {percent:.1f}%)"

    def similarity(self, first: str, second: str) -> float:
        """Return normalized similarity in [0, 1]."""

        left = first.strip()
        right = second.strip()
        if not self.get_option("case_sensitive", False):
            left = left.lower()
            right = right.lower()
        if not left and not right:
            return 1.0
        return Levenshtein.normalized_similarity(left, right)


__all__ = ["FuzzyDeduplicator"]
