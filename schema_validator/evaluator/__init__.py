"""Validation evaluator: applies a compiled schema to documents."""

from .validator import Validator, validate

__all__ = ["Validator", "validate"]
