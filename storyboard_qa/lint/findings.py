"""
Hallazgos del linter y agregación del reporte final.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from ..domain.models import VideoDoc


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class LintFinding:
    """Un problema detectado por una regla."""
    category: str
    rule: str
    severity: Severity
    message: str
    scene_id: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "category": self.category,
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.scene_id is not None:
            data["sceneId"] = self.scene_id
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class LintReport:
    """Resultado del lint: pasa si no hay ningún error."""
    passed: bool
    errors: List[LintFinding] = field(default_factory=list)
    warnings: List[LintFinding] = field(default_factory=list)
    summary: str = ""

    def __bool__(self):
        return self.passed

    @property
    def findings(self) -> List[LintFinding]:
        return self.errors + self.warnings

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
            "summary": self.summary,
        }


def generate_summary(doc: VideoDoc, errors: List[LintFinding], warnings: List[LintFinding]) -> str:
    """Resumen legible del análisis, terminado en la línea de veredicto."""
    story = doc.story
    total_sec = doc.total_duration_ms / 1000

    lines = [
        f"📊 Análisis de video: {story.controlling_idea[:50]}...",
        f"   Duración: {total_sec:.1f}s (objetivo: {story.target_duration_sec:g}s)",
        f"   Escenas: {len(doc.scenes)} (arco {story.arc})",
        f"   Incidencias: {len(errors)} errores, {len(warnings)} advertencias",
    ]

    if not errors:
        lines.append("✅ Todos los controles de calidad superados")
    else:
        lines.append("❌ Controles de calidad fallidos - revisar errores")

    return "\n".join(lines)


def aggregate(doc: VideoDoc, findings: Iterable[LintFinding]) -> LintReport:
    """Separa los hallazgos por severidad y calcula el veredicto."""
    findings = list(findings)
    errors = [f for f in findings if f.severity == Severity.ERROR]
    warnings = [f for f in findings if f.severity == Severity.WARNING]

    return LintReport(
        passed=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        summary=generate_summary(doc, errors, warnings),
    )
