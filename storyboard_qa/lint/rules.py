"""
Reglas de calidad sobre el VideoDoc.
Cada categoría es una función pura que recibe el documento y devuelve sus
hallazgos; el registro LINT_RULES las ejecuta todas sin cortocircuito.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from ..domain.models import (
    CalloutVisual,
    ChartVisual,
    MediaVisual,
    SceneRole,
    ShapeVisual,
    TextVisual,
    VideoDoc,
)
from .findings import LintFinding, LintReport, Severity, aggregate

logger = logging.getLogger(__name__)

# Narrativa
TURN_MAX_RATIO = 0.4
CTA_WORDS = ("next", "start", "begin")

# Ritmo (segundos)
CLIP_TARGET_SEC = 30
CLIP_MAX_SCENE_SEC = 20
LONG_MAX_SCENE_SEC = 28
MIN_SCENE_SEC = 3
MAX_MEAN_SCENE_SEC = 15

# Diseño
MAX_FOCAL_ELEMENTS = 3
MAX_ACCENTS_WITHOUT_COLOR = 1
MAX_TEXT_CHARS = 200

# Evidencias
PROV_TOKEN_RE = re.compile(r"\[prov:[^\]]+\]")

LintRule = Callable[[VideoDoc], List[LintFinding]]


def lint_narrative(doc: VideoDoc) -> List[LintFinding]:
    """HOOK obligatorio, TURN antes del 40% del metraje y cierre con CTA."""
    results = []
    scenes = doc.scenes

    if not any(s.role == SceneRole.HOOK for s in scenes):
        results.append(LintFinding(
            category="narrative",
            rule="hook_required",
            severity=Severity.ERROR,
            message="Falta una escena HOOK que capte la atención",
            suggestion="Añadir una escena inicial con una afirmación llamativa",
        ))

    turn_index = next((i for i, s in enumerate(scenes) if s.role == SceneRole.TURN), None)
    total_ms = sum(s.effective_duration_ms for s in scenes)

    if turn_index is None:
        results.append(LintFinding(
            category="narrative",
            rule="turn_required",
            severity=Severity.ERROR,
            message="Falta una escena TURN (giro o idea clave)",
            suggestion="Añadir una escena que presente la idea clave o la solución",
        ))
    elif total_ms > 0:
        turn_ms = sum(s.effective_duration_ms for s in scenes[:turn_index + 1])
        turn_ratio = turn_ms / total_ms
        if turn_ratio > TURN_MAX_RATIO:
            results.append(LintFinding(
                category="narrative",
                rule="turn_timing",
                severity=Severity.WARNING,
                message=f"El TURN aparece al {round(turn_ratio * 100)}% (debería ser ≤40%)",
                scene_id=scenes[turn_index].id,
                suggestion="Adelantar la escena TURN o recortar las escenas previas",
            ))

    has_cta = any(s.role == SceneRole.CTA for s in scenes)
    last = scenes[-1] if scenes else None
    # Coincidencia sin distinguir mayúsculas (decisión registrada en DESIGN.md)
    last_text = last.voiceover.text.lower() if last else ""
    has_explicit_end = any(word in last_text for word in CTA_WORDS)

    if not has_cta and not has_explicit_end:
        results.append(LintFinding(
            category="narrative",
            rule="cta_required",
            severity=Severity.ERROR,
            message="Falta una llamada a la acción o un siguiente paso claro",
            scene_id=last.id if last else None,
            suggestion="Añadir un siguiente paso explícito o una llamada a la acción",
        ))

    return results


def lint_pacing(doc: VideoDoc) -> List[LintFinding]:
    """Duración máxima/mínima por escena y duración media del documento."""
    results = []
    scenes = doc.scenes

    is_clip = doc.story.target_duration_sec <= CLIP_TARGET_SEC
    max_scene_sec = CLIP_MAX_SCENE_SEC if is_clip else LONG_MAX_SCENE_SEC

    for scene in scenes:
        duration_sec = scene.effective_duration_ms / 1000

        if duration_sec > max_scene_sec:
            results.append(LintFinding(
                category="pacing",
                rule="scene_duration",
                severity=Severity.ERROR,
                message=f"La escena dura {duration_sec:.1f}s y supera el límite ({max_scene_sec}s)",
                scene_id=scene.id,
                suggestion="Dividir la escena o recortar contenido",
            ))

        if duration_sec < MIN_SCENE_SEC:
            results.append(LintFinding(
                category="pacing",
                rule="scene_minimum",
                severity=Severity.WARNING,
                message=f"La escena dura {duration_sec:.1f}s, muy corta (<{MIN_SCENE_SEC}s)",
                scene_id=scene.id,
                suggestion="Considerar unirla con la escena adyacente",
            ))

    if scenes:
        mean_sec = sum(s.effective_duration_ms for s in scenes) / 1000 / len(scenes)
        if mean_sec > MAX_MEAN_SCENE_SEC:
            results.append(LintFinding(
                category="pacing",
                rule="mean_duration",
                severity=Severity.WARNING,
                message=f"Duración media por escena {mean_sec:.1f}s (objetivo ≤{MAX_MEAN_SCENE_SEC}s)",
                suggestion="Reducir la longitud de las escenas para mejorar el ritmo",
            ))

    return results


def _is_focal(visual) -> bool:
    if isinstance(visual, (ChartVisual, MediaVisual)):
        return True
    return isinstance(visual, TextVisual) and visual.role == "title"


def _is_accent(visual) -> bool:
    if isinstance(visual, ShapeVisual):
        return visual.animate is not None
    if isinstance(visual, CalloutVisual):
        return True
    if isinstance(visual, ChartVisual):
        return bool(visual.emphasize)
    return False


def lint_design(doc: VideoDoc) -> List[LintFinding]:
    """Densidad de elementos focales, coherencia de acentos y densidad de texto."""
    results = []

    for scene in doc.scenes:
        focal_count = sum(1 for v in scene.visuals if _is_focal(v))
        if focal_count > MAX_FOCAL_ELEMENTS:
            results.append(LintFinding(
                category="design",
                rule="focal_density",
                severity=Severity.ERROR,
                message=f"Demasiados elementos focales ({focal_count} > {MAX_FOCAL_ELEMENTS})",
                scene_id=scene.id,
                suggestion=f"Reducir a un máximo de {MAX_FOCAL_ELEMENTS} elementos focales por escena",
            ))

        accent_count = sum(1 for v in scene.visuals if _is_accent(v))
        if accent_count > MAX_ACCENTS_WITHOUT_COLOR and not scene.accent_color:
            results.append(LintFinding(
                category="design",
                rule="accent_consistency",
                severity=Severity.WARNING,
                message=f"{accent_count} elementos de acento sin un color unificado",
                scene_id=scene.id,
                suggestion="Definir un accentColor común para la escena",
            ))

        text_length = sum(len(v.text) for v in scene.visuals if isinstance(v, TextVisual))
        if text_length > MAX_TEXT_CHARS:
            results.append(LintFinding(
                category="design",
                rule="text_density",
                severity=Severity.WARNING,
                message=f"Alta densidad de texto ({text_length} caracteres)",
                scene_id=scene.id,
                suggestion="Reducir el texto o repartirlo en varias escenas",
            ))

    return results


def lint_evidence(doc: VideoDoc) -> List[LintFinding]:
    """Cada [prov:...] de la locución debe tener su evidencia, en un cue existente."""
    results = []

    for scene in doc.scenes:
        prov_tokens = PROV_TOKEN_RE.findall(scene.voiceover.text)
        evidence = scene.evidence or []

        if len(prov_tokens) != len(evidence):
            results.append(LintFinding(
                category="evidence",
                rule="provenance_mismatch",
                severity=Severity.ERROR,
                message=f"La locución tiene {len(prov_tokens)} marcas prov pero {len(evidence)} evidencias",
                scene_id=scene.id,
                suggestion="Asegurar que cada marca [prov:...] tenga su entrada de evidencia",
            ))

        cue_count = len(scene.voiceover.cues)
        for item in evidence:
            if item.at_cue < 0 or item.at_cue >= cue_count:
                results.append(LintFinding(
                    category="evidence",
                    rule="evidence_timing",
                    severity=Severity.ERROR,
                    message=f"El cue de evidencia {item.at_cue} no existe (cues disponibles: {cue_count})",
                    scene_id=scene.id,
                    suggestion="Ajustar evidence.atCue a un índice de cue válido",
                ))

    return results


def lint_accessibility(doc: VideoDoc) -> List[LintFinding]:
    """Heurísticas de accesibilidad: texto alternativo en media y contraste."""
    results = []

    for scene in doc.scenes:
        for i, visual in enumerate(scene.visuals):
            if isinstance(visual, MediaVisual) and "alt" not in visual.src:
                results.append(LintFinding(
                    category="accessibility",
                    rule="media_alt_text",
                    severity=Severity.WARNING,
                    message=f"El elemento media {i + 1} puede no tener texto alternativo",
                    scene_id=scene.id,
                    suggestion="Asegurar que el media tenga un texto alternativo descriptivo",
                ))

        # Heurística por nombre de color, no cálculo de luminancia
        has_text = any(isinstance(v, TextVisual) for v in scene.visuals)
        light_accent = "light" in (scene.accent_color or "").lower()
        has_dark_backdrop = any(
            isinstance(v, ShapeVisual) and "dark" in (v.fill or "").lower()
            for v in scene.visuals
        )

        if has_text and light_accent and not has_dark_backdrop:
            results.append(LintFinding(
                category="accessibility",
                rule="color_contrast",
                severity=Severity.WARNING,
                message="Posible problema de contraste con texto claro",
                scene_id=scene.id,
                suggestion="Cumplir el contraste WCAG AA (4.5:1)",
            ))

    return results


LINT_RULES: Dict[str, LintRule] = {
    "narrative": lint_narrative,
    "pacing": lint_pacing,
    "design": lint_design,
    "evidence": lint_evidence,
    "accessibility": lint_accessibility,
}


def run_lints(doc: VideoDoc, categories: Optional[Iterable[str]] = None) -> List[LintFinding]:
    """
    Ejecuta las categorías de reglas indicadas (todas por defecto).

    Args:
        doc: VideoDoc a revisar (no se modifica)
        categories: Subconjunto de claves de LINT_RULES

    Returns:
        Lista de hallazgos en orden de categoría
    """
    names = list(categories) if categories is not None else list(LINT_RULES)
    unknown = [n for n in names if n not in LINT_RULES]
    if unknown:
        raise ValueError(f"Categorías de lint desconocidas: {', '.join(unknown)}")

    findings = []
    for name in names:
        category_findings = LINT_RULES[name](doc)
        logger.debug(f"Lint {name}: {len(category_findings)} hallazgos")
        findings.extend(category_findings)
    return findings


def lint_video_doc(doc: VideoDoc, categories: Optional[Iterable[str]] = None) -> LintReport:
    """Ejecuta el lint completo y devuelve el reporte agregado."""
    report = aggregate(doc, run_lints(doc, categories))
    logger.info(
        f"Lint: {len(report.errors)} errores, {len(report.warnings)} advertencias "
        f"({'OK' if report.passed else 'FALLA'})"
    )
    return report
