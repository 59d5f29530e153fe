"""Functional-options code generation for annotated dataclasses."""

from .orchestrator import GenerationOutcome, Orchestrator

__version__ = "0.1.0"

__all__ = ["GenerationOutcome", "Orchestrator", "__version__"]
