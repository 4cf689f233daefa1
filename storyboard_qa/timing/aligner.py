"""
Alineador de tiempos del storyboard.
Suma las duraciones de los beats, añade los gaps de presentación entre beats,
escenas y actos, y escribe el desglose en `meta.overhead` junto al total
estimado. También regenera el resumen Markdown del storyboard.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..config import GapConfig
from ..domain.models import ScriptDocument
from .estimator import estimate_tts_duration

logger = logging.getLogger(__name__)

DocumentLike = Union[ScriptDocument, Dict[str, Any]]


@dataclass
class OverheadBreakdown:
    """Desglose del overhead de gaps por nivel (se recalcula en cada alineación)."""
    beat_gap_sec: float
    scene_gap_sec: float
    act_gap_sec: float
    beat_gaps_count: int
    scene_gaps_count: int
    act_gaps_count: int
    beat_gaps_total_sec: float
    scene_gaps_total_sec: float
    act_gaps_total_sec: float
    total_overhead_sec: float

    def to_dict(self) -> dict:
        return {
            "beatGapSec": self.beat_gap_sec,
            "sceneGapSec": self.scene_gap_sec,
            "actGapSec": self.act_gap_sec,
            "beatGapsCount": self.beat_gaps_count,
            "sceneGapsCount": self.scene_gaps_count,
            "actGapsCount": self.act_gaps_count,
            "beatGapsTotalSec": self.beat_gaps_total_sec,
            "sceneGapsTotalSec": self.scene_gaps_total_sec,
            "actGapsTotalSec": self.act_gaps_total_sec,
            "totalOverheadSec": self.total_overhead_sec,
        }


@dataclass
class AlignmentResult:
    """Resultado de una alineación: documento alineado y resumen derivado."""
    document: ScriptDocument
    beats_sum: float
    overhead: OverheadBreakdown
    aligned_total: float
    markdown: str
    estimated_beats: list = field(default_factory=list)


def as_document(document: DocumentLike) -> ScriptDocument:
    """Devuelve una copia profunda del documento como ScriptDocument."""
    if isinstance(document, ScriptDocument):
        return document.model_copy(deep=True)
    return ScriptDocument.model_validate(document)


def compute_overhead(document: ScriptDocument, gaps: GapConfig) -> OverheadBreakdown:
    """Cuenta los gaps por nivel y calcula sus segundos (redondeo a 2 decimales)."""
    beat_gaps = sum(max(0, len(s.beats) - 1) for s in document.scenes)
    scene_gaps = max(0, len(document.scenes) - 1)
    act_gaps = max(0, len(document.acts) - 1)

    beat_total = round(beat_gaps * gaps.beat_gap_sec, 2)
    scene_total = round(scene_gaps * gaps.scene_gap_sec, 2)
    act_total = round(act_gaps * gaps.act_gap_sec, 2)

    return OverheadBreakdown(
        beat_gap_sec=gaps.beat_gap_sec,
        scene_gap_sec=gaps.scene_gap_sec,
        act_gap_sec=gaps.act_gap_sec,
        beat_gaps_count=beat_gaps,
        scene_gaps_count=scene_gaps,
        act_gaps_count=act_gaps,
        beat_gaps_total_sec=beat_total,
        scene_gaps_total_sec=scene_total,
        act_gaps_total_sec=act_total,
        total_overhead_sec=round(beat_total + scene_total + act_total, 2),
    )


def align_storyboard(
    document: DocumentLike,
    gaps: Optional[GapConfig] = None,
    estimate_missing: bool = True,
) -> AlignmentResult:
    """
    Alinea la duración total del storyboard con sus beats y gaps.

    Args:
        document: Storyboard (modelo o dict JSON); no se modifica el original
        gaps: Configuración de gaps (defaults si no se indica)
        estimate_missing: Estimar con el TTS los beats sin durationSec

    Returns:
        AlignmentResult con el documento alineado, el desglose y el Markdown
    """
    gaps = gaps or GapConfig()
    doc = as_document(document)

    estimated_beats = []
    if estimate_missing:
        for scene, idx, beat in doc.iter_beats():
            if beat.duration_sec is None:
                beat.duration_sec = estimate_tts_duration(beat.voiceover or beat.beat)
                estimated_beats.append((scene.scene_number, idx))
        if estimated_beats:
            logger.info(f"Duración estimada para {len(estimated_beats)} beats sin durationSec")

    beats_sum = sum(beat.duration_sec or 0 for _, _, beat in doc.iter_beats())
    overhead = compute_overhead(doc, gaps)
    aligned_total = round(beats_sum + overhead.total_overhead_sec, 2)

    # Asignación (no mutación in situ) para que meta cuente como campo informado
    doc.meta = {**doc.meta, "overhead": overhead.to_dict()}
    doc.estimated_total_duration_sec = aligned_total

    markdown = build_storyboard_markdown(doc, beats_sum, overhead)

    logger.info(
        f"Beats: {beats_sum:.2f}s, Overhead: {overhead.total_overhead_sec}s, Alineado: {aligned_total}s"
    )

    return AlignmentResult(
        document=doc,
        beats_sum=beats_sum,
        overhead=overhead,
        aligned_total=aligned_total,
        markdown=markdown,
        estimated_beats=estimated_beats,
    )


def format_seconds(value: Optional[float]) -> str:
    """17.0 → '17', 3.25 → '3.25'."""
    value = round(float(value or 0), 2)
    if value.is_integer():
        return str(int(value))
    return str(value)


def build_storyboard_markdown(
    document: ScriptDocument,
    beats_sum: float,
    overhead: OverheadBreakdown,
) -> str:
    """Genera el resumen legible (STORYBOARD.md) del documento alineado."""
    scenes = document.scenes
    lines = [f"# Storyboard: {document.title}"]

    if document.logline:
        lines.append(f"\n> {document.logline}\n")

    lines.append(f"- Formato: {document.video_specs.format or 'vertical'}")
    lines.append(f"- Duración total (alineada): {format_seconds(document.estimated_total_duration_sec)}s")
    lines.append(f"- Suma de beats: {format_seconds(beats_sum)}s")
    lines.append(
        f"- Overhead: {format_seconds(overhead.total_overhead_sec)}s "
        f"(gaps de beat {format_seconds(overhead.beat_gaps_total_sec)}s, "
        f"gaps de escena {format_seconds(overhead.scene_gaps_total_sec)}s, "
        f"gaps de acto {format_seconds(overhead.act_gaps_total_sec)}s)"
    )
    lines.append(f"- Escenas: {len(scenes)}")
    lines.append(f"- Beats: {document.beat_count}")

    if document.acts:
        lines.append("\n## Actos")
        for act in document.acts:
            lines.append(f"- {act.label}: {act.summary}")

    lines.append("\n## Escenas")
    for scene in scenes:
        lines.append(f"\n### Escena {scene.scene_number}: {scene.label or ''} ({len(scene.beats)} beats)")
        if scene.purpose:
            lines.append(f"- Propósito: {scene.purpose}")
        for idx, beat in enumerate(scene.beats, start=1):
            vo = (beat.voiceover or "").replace("\n", " ")
            lines.append(f"\n- Beat {idx}: {beat.beat}")
            lines.append(f"  - Visual: {beat.visual_type or '-'} / {beat.recommended_component or '-'}")
            lines.append(f"  - Duración: {format_seconds(beat.duration_sec)}s")
            lines.append(f"  - VO: {vo}")

    return "\n".join(lines)
