"""Módulo de tiempos: estimación TTS, alineación y overrides del storyboard."""

from .estimator import (
    calculate_total_duration,
    estimate_segment_duration,
    estimate_tts_duration,
    estimate_voiceover_seconds,
)
from .rebalance import adjust_segment_durations
from .aligner import AlignmentResult, OverheadBreakdown, align_storyboard, build_storyboard_markdown
from .overrides import (
    TimingOverride,
    apply_timing_override,
    apply_timing_overrides,
    autotime_storyboard,
    export_timings_template,
    parse_timing_overrides,
)

__all__ = [
    "AlignmentResult",
    "OverheadBreakdown",
    "TimingOverride",
    "adjust_segment_durations",
    "align_storyboard",
    "apply_timing_override",
    "apply_timing_overrides",
    "autotime_storyboard",
    "build_storyboard_markdown",
    "calculate_total_duration",
    "estimate_segment_duration",
    "estimate_tts_duration",
    "estimate_voiceover_seconds",
    "export_timings_template",
    "parse_timing_overrides",
]
