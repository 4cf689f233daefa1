"""
Reparto proporcional de duraciones hacia un total objetivo.
"""

import logging
from typing import Any, Dict, List, Sequence

from .estimator import (
    MIN_SEGMENT_SECONDS,
    SegmentLike,
    as_segment,
    ceil_tenth,
    estimate_segment_duration,
)

logger = logging.getLogger(__name__)

# Si la estimación cae dentro de este margen del objetivo, se usa tal cual
TARGET_TOLERANCE = 0.1


def adjust_segment_durations(
    segments: Sequence[SegmentLike],
    target_duration: float,
) -> List[Dict[str, Any]]:
    """
    Ajusta las duraciones de los segmentos a un total objetivo manteniendo proporciones.

    Args:
        segments: Segmentos con título/narrativa/script/bullets
        target_duration: Duración total deseada en segundos

    Returns:
        Copias de los segmentos con duration_seconds y estimated_duration
        (y scale_factor cuando hubo escalado). Tras escalar se vuelve a
        aplicar el mínimo de 3s por segmento, por lo que el total puede
        quedar algo por encima del objetivo.
    """
    if target_duration <= 0:
        raise ValueError(f"Duración objetivo inválida: {target_duration}")

    parsed = [as_segment(s) for s in segments]
    if not parsed:
        return []

    estimated = [estimate_segment_duration(s) for s in parsed]
    total_estimated = sum(estimated)

    if abs(total_estimated - target_duration) / target_duration < TARGET_TOLERANCE:
        logger.info(
            f"Estimación {total_estimated:.1f}s dentro del 10% de {target_duration}s, sin escalar"
        )
        return [
            {**seg.to_dict(), "duration_seconds": est, "estimated_duration": est}
            for seg, est in zip(parsed, estimated)
        ]

    scale_factor = target_duration / total_estimated
    logger.info(
        f"Escalando {len(parsed)} segmentos: {total_estimated:.1f}s → {target_duration}s (x{scale_factor:.3f})"
    )

    adjusted = []
    for seg, est in zip(parsed, estimated):
        duration = max(MIN_SEGMENT_SECONDS, est * scale_factor)
        adjusted.append({
            **seg.to_dict(),
            "duration_seconds": ceil_tenth(duration),
            "estimated_duration": est,
            "scale_factor": scale_factor,
        })
    return adjusted
