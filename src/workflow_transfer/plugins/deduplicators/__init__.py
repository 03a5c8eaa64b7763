"""Built-in deduplicator plugins."""

from workflow_transfer.plugins.deduplicators.fuzzy_deduplicator import FuzzyDeduplicator
from workflow_transfer.plugins.deduplicators.standard_deduplicator import StandardDeduplicator

__all__ = ["FuzzyDeduplicator", "StandardDeduplicator"]
