"""Terminology adapters implementing TerminologyPort."""

from src.adapters.terminology.snowstorm_adapter import SnowstormTerminologyAdapter

__all__ = ["SnowstormTerminologyAdapter"]
