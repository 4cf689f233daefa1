"""Modelos de dominio y excepciones."""

from .errors import ConfigError, InvalidDocumentError, StoryboardQAError, TimingOverrideError
from .models import (
    BeatDecision,
    ScriptDocument,
    Segment,
    SceneRole,
    VideoDoc,
    VideoScene,
    compute_scene_duration,
)

__all__ = [
    "BeatDecision",
    "ConfigError",
    "InvalidDocumentError",
    "ScriptDocument",
    "Segment",
    "SceneRole",
    "StoryboardQAError",
    "TimingOverrideError",
    "VideoDoc",
    "VideoScene",
    "compute_scene_duration",
]
