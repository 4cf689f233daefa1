import copy

from storyboard_qa.config import GapConfig
from storyboard_qa.domain.models import ScriptDocument
from storyboard_qa.timing.aligner import align_storyboard, compute_overhead, format_seconds
from storyboard_qa.timing.estimator import estimate_tts_duration


def test_aligned_total_includes_overhead(storyboard, gaps):
    result = align_storyboard(storyboard, gaps)

    assert result.beats_sum == 15
    assert result.overhead.beat_gaps_count == 1
    assert result.overhead.scene_gaps_count == 1
    assert result.overhead.act_gaps_count == 1
    assert result.overhead.total_overhead_sec == 6.5
    assert result.aligned_total == 21.5
    assert result.document.estimated_total_duration_sec == 21.5


def test_aligned_total_formula(storyboard, gaps):
    storyboard["scenes"][0]["beats"][0]["durationSec"] = 3.33
    result = align_storyboard(storyboard, gaps)
    o = result.overhead

    expected = round(result.beats_sum + o.beat_gaps_total_sec + o.scene_gaps_total_sec + o.act_gaps_total_sec, 2)
    assert result.aligned_total == expected


def test_overhead_written_to_meta(storyboard, gaps):
    data = align_storyboard(storyboard, gaps).document.to_dict()

    assert data["estimatedTotalDurationSec"] == 21.5
    assert data["meta"]["overhead"] == {
        "beatGapSec": 1.5,
        "sceneGapSec": 2.0,
        "actGapSec": 3.0,
        "beatGapsCount": 1,
        "sceneGapsCount": 1,
        "actGapsCount": 1,
        "beatGapsTotalSec": 1.5,
        "sceneGapsTotalSec": 2.0,
        "actGapsTotalSec": 3.0,
        "totalOverheadSec": 6.5,
    }


def test_alignment_is_idempotent(storyboard, gaps):
    first = align_storyboard(storyboard, gaps).document.to_dict()
    second = align_storyboard(first, gaps).document.to_dict()

    assert second["estimatedTotalDurationSec"] == first["estimatedTotalDurationSec"]
    assert second["meta"]["overhead"] == first["meta"]["overhead"]
    assert second == first


def test_input_is_not_mutated(storyboard, gaps):
    original = copy.deepcopy(storyboard)
    align_storyboard(storyboard, gaps)
    assert storyboard == original

    model = ScriptDocument.model_validate(storyboard)
    align_storyboard(model, gaps)
    assert model.estimated_total_duration_sec is None


def test_missing_durations_are_estimated(storyboard, gaps):
    del storyboard["scenes"][1]["beats"][0]["durationSec"]
    result = align_storyboard(storyboard, gaps)

    expected = estimate_tts_duration("Start with the payoff.")
    assert result.document.scenes[1].beats[0].duration_sec == expected
    assert result.estimated_beats == [(2, 1)]
    assert result.beats_sum == 9 + expected


def test_missing_durations_count_as_zero_without_estimation(storyboard, gaps):
    del storyboard["scenes"][1]["beats"][0]["durationSec"]
    result = align_storyboard(storyboard, gaps, estimate_missing=False)
    assert result.beats_sum == 9


def test_unknown_fields_survive(storyboard, gaps):
    storyboard["custom"] = {"k": 1}
    storyboard["scenes"][0]["beats"][0]["notes"] = "keep me"

    data = align_storyboard(storyboard, gaps).document.to_dict()

    assert data["custom"] == {"k": 1}
    assert data["scenes"][0]["beats"][0]["notes"] == "keep me"


def test_zero_gaps(storyboard):
    result = align_storyboard(storyboard, GapConfig(0, 0, 0))
    assert result.aligned_total == 15


def test_overhead_without_acts(storyboard, gaps):
    storyboard["acts"] = []
    overhead = compute_overhead(ScriptDocument.model_validate(storyboard), gaps)
    assert overhead.act_gaps_count == 0
    assert overhead.total_overhead_sec == 3.5


def test_markdown_summary(storyboard, gaps):
    md = align_storyboard(storyboard, gaps).markdown

    assert md.startswith("# Storyboard: Demo")
    assert "- Duración total (alineada): 21.5s" in md
    assert "- Overhead: 6.5s (gaps de beat 1.5s, gaps de escena 2s, gaps de acto 3s)" in md
    assert "### Escena 1: Gancho (2 beats)" in md
    assert "  - Visual: text / TitleSubhead" in md
    assert "  - VO: Most lose viewers early." in md


def test_format_seconds():
    assert format_seconds(17.0) == "17"
    assert format_seconds(3.25) == "3.25"
    assert format_seconds(None) == "0"


def test_output_keeps_input_shape(gaps):
    doc = {
        "title": "Minimal",
        "logline": None,
        "scenes": [{"sceneNumber": 1, "beats": [{"beat": "Solo", "durationSec": 4}]}],
    }
    data = align_storyboard(doc, gaps).document.to_dict()

    assert data["logline"] is None
    assert "acts" not in data
    assert "videoSpecs" not in data
    assert "voiceover" not in data["scenes"][0]["beats"][0]
    assert data["meta"]["overhead"]["totalOverheadSec"] == 0
    assert data["estimatedTotalDurationSec"] == 4
