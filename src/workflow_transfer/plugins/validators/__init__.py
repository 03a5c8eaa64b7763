"""Built-in validator plugins."""

from workflow_transfer.plugins.validators.integrity_validator import IntegrityValidator
from workflow_transfer.plugins.validators.schema_validator import SchemaValidator, WorkflowSchema

__all__ = ["IntegrityValidator", "SchemaValidator", "WorkflowSchema"]
