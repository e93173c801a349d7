"""Per-building cap on twig-grade construction."""

from .admission import AdmissionController, AdmissionOutcome, Decision
from .plugin import TwigCapPlugin
from .registry import TwigRegistry

__all__ = ["AdmissionController", "AdmissionOutcome", "Decision", "TwigCapPlugin", "TwigRegistry"]
