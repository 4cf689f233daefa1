"""
Preflight de locuciones y patrones visuales.
Revisión ligera, previa al VideoDoc, sobre las decisiones por escena
(patrón elegido + locución). Es un conjunto de reglas independiente del
lint completo y opera sobre otra forma de documento.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Union

from ..domain.models import BeatDecision
from ..timing.estimator import estimate_voiceover_seconds
from .findings import Severity

logger = logging.getLogger(__name__)

VO_MIN_SEC = 1.5
VO_MAX_SEC = 12
BRIDGE_RE = re.compile(r"^\s*(So|For example|Next|Meanwhile|In short|Then)\b", re.IGNORECASE)

TITLE_MIN_CHARS = 8
TITLE_MAX_CHARS = 120
CALLOUT_BODY_MAX_CHARS = 240
CHART_MIN_BARS = 2
CHART_MAX_BARS = 6
BAR_LABEL_MAX_CHARS = 18


@dataclass
class PreflightIssue:
    scene: int
    severity: Severity
    code: str
    message: str

    def to_dict(self) -> dict:
        return {
            "scene": self.scene,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class PreflightReport:
    ok: bool
    issues: List[PreflightIssue] = field(default_factory=list)

    def __bool__(self):
        return self.ok

    @property
    def errors(self) -> List[PreflightIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[PreflightIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def to_dict(self) -> dict:
        return {"ok": self.ok, "issues": [i.to_dict() for i in self.issues]}


def _error(d: BeatDecision, code: str, message: str) -> PreflightIssue:
    return PreflightIssue(d.scene, Severity.ERROR, code, message)


def _warning(d: BeatDecision, code: str, message: str) -> PreflightIssue:
    return PreflightIssue(d.scene, Severity.WARNING, code, message)


def check_vo_length(d: BeatDecision) -> List[PreflightIssue]:
    issues = []
    secs = estimate_voiceover_seconds(d.vo.vo_script)
    if secs < VO_MIN_SEC:
        issues.append(_warning(d, "vo_short", f"Locución de {secs}s, puede quedar corta."))
    if secs > VO_MAX_SEC:
        issues.append(_error(d, "vo_long", f"Locución de {secs}s, supera los {VO_MAX_SEC}s."))
    return issues


def check_bridge(d: BeatDecision) -> List[PreflightIssue]:
    """A partir de la segunda escena se recomienda un conector narrativo."""
    if d.scene > 1 and not BRIDGE_RE.match(d.vo.vo_script or ""):
        return [_warning(d, "vo_no_bridge", "Considerar un conector breve para dar coherencia.")]
    return []


def _check_title_subhead(d: BeatDecision, props: Dict[str, Any]) -> List[PreflightIssue]:
    issues = []
    title = str(props.get("title") or "")
    if len(title.strip()) < TITLE_MIN_CHARS:
        issues.append(_error(d, "title_missing", f"TitleSubhead requiere un título con sentido (>={TITLE_MIN_CHARS} caracteres)."))
    if len(title) > TITLE_MAX_CHARS:
        issues.append(_warning(d, "title_long", f"El título puede ser demasiado largo (>{TITLE_MAX_CHARS} caracteres)."))
    return issues


def _check_callout(d: BeatDecision, props: Dict[str, Any]) -> List[PreflightIssue]:
    issues = []
    title = str(props.get("title") or "")
    body = str(props.get("body") or "")
    if not title:
        issues.append(_error(d, "callout_title_missing", "El callout requiere un título."))
    if not body:
        issues.append(_error(d, "callout_body_missing", "El callout requiere un cuerpo."))
    if len(body) > CALLOUT_BODY_MAX_CHARS:
        issues.append(_warning(d, "callout_body_long", f"El cuerpo del callout puede ser demasiado largo (>{CALLOUT_BODY_MAX_CHARS} caracteres)."))
    return issues


def _check_chart_reveal(d: BeatDecision, props: Dict[str, Any]) -> List[PreflightIssue]:
    issues = []
    data = props.get("data") or []
    if not (CHART_MIN_BARS <= len(data) <= CHART_MAX_BARS):
        issues.append(_error(d, "chart_density", f"El gráfico requiere entre {CHART_MIN_BARS} y {CHART_MAX_BARS} barras."))
    for idx, point in enumerate(data):
        label = point.get("label") if isinstance(point, dict) else None
        if not label or len(str(label)) > BAR_LABEL_MAX_CHARS:
            issues.append(_warning(d, "label_length", f"La etiqueta de la barra {idx + 1} falta o es demasiado larga (>{BAR_LABEL_MAX_CHARS})."))
    return issues


def _check_stat_hero(d: BeatDecision, props: Dict[str, Any]) -> List[PreflightIssue]:
    value = props.get("statValue")
    if value is None or not str(value).strip():
        return [_error(d, "stat_missing", "StatHero requiere un statValue.")]
    return []


PATTERN_CHECKS: Dict[str, Callable[[BeatDecision, Dict[str, Any]], List[PreflightIssue]]] = {
    "TitleSubhead": _check_title_subhead,
    "CalloutPattern": _check_callout,
    "ChartReveal": _check_chart_reveal,
    "StatHero": _check_stat_hero,
}


def check_pattern(d: BeatDecision) -> List[PreflightIssue]:
    check = PATTERN_CHECKS.get(d.decision.pattern)
    if check is None:
        return []
    return check(d, d.decision.props or {})


PREFLIGHT_RULES: Dict[str, Callable[[BeatDecision], List[PreflightIssue]]] = {
    "vo_length": check_vo_length,
    "bridge": check_bridge,
    "pattern": check_pattern,
}


def qa_preflight(decisions: Iterable[Union[BeatDecision, Dict[str, Any]]]) -> PreflightReport:
    """
    Revisa las decisiones por escena antes de construir el VideoDoc.

    Args:
        decisions: Decisiones (modelo o dict) con escena, patrón y locución

    Returns:
        PreflightReport; ok es False si existe algún error
    """
    issues = []
    for raw in decisions:
        d = raw if isinstance(raw, BeatDecision) else BeatDecision.model_validate(raw)
        for rule in PREFLIGHT_RULES.values():
            issues.extend(rule(d))

    ok = not any(i.severity == Severity.ERROR for i in issues)
    logger.info(f"Preflight: {len(issues)} incidencias ({'OK' if ok else 'FALLA'})")
    return PreflightReport(ok=ok, issues=issues)
