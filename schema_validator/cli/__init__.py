"""Command line interface for validating documents against schemas."""

from .run_validate import main

__all__ = ['main']
