"""
Overrides de tiempos sobre el storyboard.
Permite fijar la duración de beats concretos (uno o en lote), exportar una
plantilla editable de tiempos y auto-temporizar todos los beats a partir de
un beat de calibración. Cada operación re-alinea el documento al terminar.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import GapConfig
from ..domain.errors import InvalidDocumentError, TimingOverrideError
from ..domain.models import Beat, ScriptDocument
from .aligner import AlignmentResult, DocumentLike, align_storyboard, as_document

logger = logging.getLogger(__name__)


class TimingOverride(BaseModel):
    """Asignación escena/beat (ambos 1-based) → duración en segundos."""
    model_config = ConfigDict(populate_by_name=True)

    scene: int
    beat: int
    duration_sec: float = Field(..., alias="durationSec")


def parse_timing_overrides(data: Dict[str, Any]) -> List[TimingOverride]:
    """Lee el formato `{ "beats": [{scene, beat, durationSec}] }`."""
    if not isinstance(data, dict) or not isinstance(data.get("beats", []), list):
        raise InvalidDocumentError("El archivo de tiempos debe tener la forma {\"beats\": [...]}")
    try:
        return [TimingOverride.model_validate(item) for item in data.get("beats", [])]
    except ValidationError as e:
        raise InvalidDocumentError(f"Override de tiempos inválido: {e}")


def _locate_beat(document: ScriptDocument, scene_number: int, beat_number: int) -> Beat:
    scene = document.find_scene(scene_number)
    if scene is None:
        raise TimingOverrideError(f"Escena no encontrada: {scene_number}")
    if beat_number < 1 or beat_number > len(scene.beats):
        raise TimingOverrideError(
            f"Beat no encontrado: escena {scene_number}, beat {beat_number} "
            f"(la escena tiene {len(scene.beats)} beats)"
        )
    return scene.beats[beat_number - 1]


def apply_timing_overrides(
    document: DocumentLike,
    overrides: Iterable[TimingOverride],
    gaps: Optional[GapConfig] = None,
) -> AlignmentResult:
    """
    Aplica un lote de overrides y re-alinea.

    Todos los índices se validan antes de modificar nada: si alguno no
    existe se lanza TimingOverrideError y el documento queda intacto.
    """
    doc = as_document(document)
    overrides = list(overrides)

    targets = []
    for override in overrides:
        if not override.duration_sec > 0:
            raise TimingOverrideError(
                f"Duración inválida para escena {override.scene}, beat {override.beat}: {override.duration_sec}"
            )
        targets.append((_locate_beat(doc, override.scene, override.beat), override.duration_sec))

    for beat, duration in targets:
        beat.duration_sec = duration

    logger.info(f"Aplicados {len(targets)} overrides de tiempo")
    return align_storyboard(doc, gaps)


def apply_timing_override(
    document: DocumentLike,
    scene: int,
    beat: int,
    duration_sec: float,
    gaps: Optional[GapConfig] = None,
) -> AlignmentResult:
    """Fija la duración de un único beat (escena y beat 1-based) y re-alinea."""
    override = TimingOverride(scene=scene, beat=beat, duration_sec=duration_sec)
    return apply_timing_overrides(document, [override], gaps)


def export_timings_template(document: DocumentLike) -> Dict[str, List[Dict[str, Any]]]:
    """Exporta una plantilla `{beats: [...]}` con las duraciones actuales para editar."""
    doc = as_document(document)
    beats = []
    for scene, idx, beat in doc.iter_beats():
        beats.append({
            "scene": scene.scene_number,
            "beat": idx,
            "label": (scene.label or "")[:80],
            "text": (beat.beat or "")[:120],
            "durationSec": float(beat.duration_sec or 0),
        })
    return {"beats": beats}


def _beat_text(beat: Beat, field: str) -> str:
    if field == "voiceover":
        return str(beat.voiceover if beat.voiceover is not None else beat.beat or "")
    return str(beat.beat or beat.voiceover or "")


def _count(text: str, unit: str) -> int:
    if unit == "chars":
        return len(text)
    return len(text.split())


def autotime_storyboard(
    document: DocumentLike,
    cal_scene: int = 1,
    cal_beat: int = 1,
    cal_seconds: Optional[float] = None,
    unit: str = "chars",
    field: str = "voiceover",
    gaps: Optional[GapConfig] = None,
) -> AlignmentResult:
    """
    Auto-temporiza todos los beats a partir de un beat de calibración.

    Args:
        document: Storyboard a temporizar
        cal_scene: Escena del beat de calibración (1-based)
        cal_beat: Beat de calibración dentro de la escena (1-based)
        cal_seconds: Duración de referencia; si es None se usa la del beat (o 10s)
        unit: 'chars' (caracteres por segundo) o 'words' (palabras por segundo)
        field: Texto a medir: 'voiceover' o 'beat'
        gaps: Configuración de gaps para la re-alineación

    Returns:
        AlignmentResult del documento re-temporizado
    """
    if unit not in ("chars", "words"):
        raise ValueError(f"Unidad desconocida: {unit}")
    if field not in ("voiceover", "beat"):
        raise ValueError(f"Campo desconocido: {field}")

    doc = as_document(document)
    try:
        cal = _locate_beat(doc, cal_scene, cal_beat)
    except TimingOverrideError:
        raise TimingOverrideError(f"Beat de calibración no encontrado: escena {cal_scene}, beat {cal_beat}")

    base_seconds = cal_seconds if cal_seconds is not None else (cal.duration_sec or 10)
    if base_seconds <= 0:
        raise TimingOverrideError(f"Duración de calibración inválida: {base_seconds}")

    # Unidades del texto de calibración (sin texto: 1 unidad por segundo)
    cal_amount = _count(_beat_text(cal, field), unit)
    if unit == "words":
        cal_amount = cal_amount or 1
    elif cal_amount == 0:
        cal_amount, base_seconds = 1, 1

    for _, _, beat in doc.iter_beats():
        amount = _count(_beat_text(beat, field), unit)
        beat.duration_sec = max(1, math.ceil(amount * base_seconds / cal_amount))

    rate = cal_amount / base_seconds
    logger.info(
        f"Auto-temporizados {doc.beat_count} beats ({unit}, campo={field}); "
        f"calibración escena {cal_scene} beat {cal_beat} = {base_seconds}s → "
        f"{rate:.2f} {'cps' if unit == 'chars' else 'wps'}"
    )
    return align_storyboard(doc, gaps)
