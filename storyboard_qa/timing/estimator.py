"""
Estimador de duración de locución.
Calcula cuánto tardará el TTS en leer un texto a partir del número de
palabras y las pausas de puntuación. Nunca subestima: redondea hacia arriba
y aplica un mínimo de 3 segundos, para no cortar audio en el render.
"""

import math
import re
from typing import Any, Dict, Iterable, Union

from ..domain.models import Segment

# Velocidad de lectura clara para TTS
DEFAULT_WORDS_PER_MINUTE = 150
# Ritmo más lento para segmentos densos (título + narrativa + bullets)
DENSE_WORDS_PER_MINUTE = 140
DEFAULT_BUFFER_SECONDS = 1.5
MIN_SEGMENT_SECONDS = 3.0

SENTENCE_PAUSE_SECONDS = 0.5
CLAUSE_PAUSE_SECONDS = 0.2

# Estimación ligera usada por el preflight de locuciones (~0.21s/palabra)
VO_WORDS_PER_SECOND = 4.8

_DISALLOWED_CHARS_RE = re.compile(r"""[^\w\s.,!?;:'"()-]""")
_SENTENCE_END_RE = re.compile(r"[.!?]+")
_CLAUSE_RE = re.compile(r"[,;:]")

SegmentLike = Union[Segment, Dict[str, Any]]


def normalize_text(text: str) -> str:
    """Colapsa espacios y elimina caracteres fuera de la lista permitida."""
    text = re.sub(r"\s+", " ", text or "")
    text = _DISALLOWED_CHARS_RE.sub("", text)
    return text.strip()


def ceil_tenth(value: float) -> float:
    """Redondea hacia arriba a un decimal."""
    return math.ceil(value * 10) / 10


def estimate_tts_duration(
    text: str,
    words_per_minute: float = DEFAULT_WORDS_PER_MINUTE,
    buffer_seconds: float = DEFAULT_BUFFER_SECONDS,
) -> float:
    """
    Estima la duración TTS de un texto.

    Args:
        text: Texto a locutar
        words_per_minute: Velocidad media de lectura
        buffer_seconds: Margen fijo al final para evitar cortes

    Returns:
        Duración estimada en segundos (mínimo 3.0, redondeada hacia arriba
        a un decimal). Un texto sin palabras devuelve el buffer tal cual.
    """
    cleaned = normalize_text(text)
    word_count = len([w for w in cleaned.split() if w])

    if word_count == 0:
        return buffer_seconds

    base_duration = (word_count / words_per_minute) * 60

    # Pausas: 0.5s por final de frase, 0.2s por coma/punto y coma/dos puntos
    sentence_count = len(_SENTENCE_END_RE.findall(cleaned))
    clause_count = len(_CLAUSE_RE.findall(cleaned))
    punctuation_pause = sentence_count * SENTENCE_PAUSE_SECONDS + clause_count * CLAUSE_PAUSE_SECONDS

    total = base_duration + punctuation_pause + buffer_seconds
    return max(MIN_SEGMENT_SECONDS, ceil_tenth(total))


def as_segment(segment: SegmentLike) -> Segment:
    if isinstance(segment, Segment):
        return segment
    return Segment.model_validate(segment)


def segment_text(segment: SegmentLike) -> str:
    """Compone título + guion (o narrativa) + bullets en un solo texto."""
    seg = as_segment(segment)
    full_text = ""

    if seg.title:
        full_text += seg.title + ". "

    # El script es lo que realmente lee el TTS; la narrativa es el fallback
    if seg.script:
        full_text += seg.script
    elif seg.narrative:
        full_text += seg.narrative

    if seg.bullets:
        full_text += " " + ". ".join(seg.bullets)

    return full_text


def estimate_segment_duration(segment: SegmentLike) -> float:
    """Estima la duración de un segmento; los segmentos densos se leen más lento."""
    seg = as_segment(segment)
    has_multiple_elements = bool(seg.title and (seg.narrative or seg.script) and seg.bullets)
    words_per_minute = DENSE_WORDS_PER_MINUTE if has_multiple_elements else DEFAULT_WORDS_PER_MINUTE

    return estimate_tts_duration(segment_text(seg), words_per_minute)


def calculate_total_duration(segments: Iterable[SegmentLike]) -> float:
    """
    Duración total de un documento.
    Usa la duración real del audio cuando existe; si no, la estimación.
    """
    total = 0.0
    for segment in segments:
        seg = as_segment(segment)
        if seg.audio_duration:
            total += seg.audio_duration
        else:
            total += estimate_segment_duration(seg)
    return total


def estimate_voiceover_seconds(text: str) -> float:
    """Estimación rápida por palabras (4.8 palabras/s), a dos decimales."""
    words = len((text or "").split())
    return round(words / VO_WORDS_PER_SECOND, 2)
