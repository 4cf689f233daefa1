"""Módulo de lint: reglas de calidad del VideoDoc y preflight de locuciones."""

from .findings import LintFinding, LintReport, Severity, aggregate, generate_summary
from .rules import LINT_RULES, lint_video_doc, run_lints
from .preflight import PREFLIGHT_RULES, PreflightIssue, PreflightReport, qa_preflight

__all__ = [
    "LINT_RULES",
    "LintFinding",
    "LintReport",
    "PREFLIGHT_RULES",
    "PreflightIssue",
    "PreflightReport",
    "Severity",
    "aggregate",
    "generate_summary",
    "lint_video_doc",
    "qa_preflight",
    "run_lints",
]
