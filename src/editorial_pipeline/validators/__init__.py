"""Validators for article metadata."""

from .schema_validator import FIELD_RULES, FieldRule, SchemaValidator

__all__ = ["FIELD_RULES", "FieldRule", "SchemaValidator"]
