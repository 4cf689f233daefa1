import pytest

from conftest import make_doc, make_scene
from storyboard_qa.domain.models import compute_scene_duration
from storyboard_qa.lint import LINT_RULES, Severity, lint_video_doc, run_lints


def _rules(findings):
    return [(f.rule, f.severity) for f in findings]


def test_clean_document_passes(clean_doc):
    report = lint_video_doc(clean_doc)

    assert report.passed
    assert report.findings == []
    assert report.summary.endswith("✅ Todos los controles de calidad superados")


def test_hook_and_late_turn_without_cta():
    doc = make_doc([make_scene("s1", "HOOK"), make_scene("s2", "TURN")])
    report = lint_video_doc(doc)

    assert _rules(report.errors) == [("cta_required", Severity.ERROR)]
    assert _rules(report.warnings) == [("turn_timing", Severity.WARNING)]
    assert report.passed is False
    assert report.errors[0].scene_id == "s2"
    assert report.warnings[0].scene_id == "s2"


def test_missing_hook_and_turn():
    doc = make_doc([make_scene("s1", "PROBLEM"), make_scene("s2", "CTA")])
    rules = [f.rule for f in run_lints(doc, ["narrative"])]
    assert rules == ["hook_required", "turn_required"]


def test_cta_word_in_last_voiceover_counts_as_ending():
    doc = make_doc([
        make_scene("s1", "HOOK"),
        make_scene("s2", "TURN"),
        make_scene("s3", "PROOF"),
        make_scene("s4", "PROOF"),
        make_scene("s5", "PROOF"),
        make_scene("s6", "OUTCOME", text="Next, apply it to your own channel."),
    ])
    assert run_lints(doc, ["narrative"]) == []


def test_scene_over_clip_limit():
    doc = make_doc([make_scene("s1", "HOOK", duration_ms=21000), make_scene("s2", "CTA", duration_ms=3000)], target=30)
    assert _rules(run_lints(doc, ["pacing"])) == [("scene_duration", Severity.ERROR)]


def test_long_form_allows_longer_scenes():
    doc = make_doc([make_scene("s1", "HOOK", duration_ms=21000), make_scene("s2", "CTA")], target=90)
    assert run_lints(doc, ["pacing"]) == []


def test_short_scene_warning():
    doc = make_doc([make_scene("s1", "HOOK", duration_ms=2000)])
    assert _rules(run_lints(doc, ["pacing"])) == [("scene_minimum", Severity.WARNING)]


def test_scene_without_duration_uses_estimate():
    scene = make_scene("s1", "HOOK", text="", duration_ms=None)
    doc = make_doc([scene])

    assert compute_scene_duration(doc.scenes[0]) == 2200
    assert _rules(run_lints(doc, ["pacing"])) == [("scene_minimum", Severity.WARNING)]


def test_estimated_duration_is_capped():
    scene = make_scene("s1", "HOOK", text=" ".join(["word"] * 100), duration_ms=None)
    assert compute_scene_duration(make_doc([scene]).scenes[0]) == 6500


def test_mean_scene_duration():
    doc = make_doc([
        make_scene("s1", "HOOK", duration_ms=16000),
        make_scene("s2", "CTA", duration_ms=16000),
    ], target=120)
    assert _rules(run_lints(doc, ["pacing"])) == [("mean_duration", Severity.WARNING)]


def test_four_charts_is_too_many_focal_elements():
    charts = [{"kind": "CHART", "chart": "bar", "data": [1, 2]} for _ in range(4)]
    doc = make_doc([make_scene("s1", "PROOF", visuals=charts)])

    findings = run_lints(doc, ["design"])

    assert _rules(findings) == [("focal_density", Severity.ERROR)]
    assert findings[0].scene_id == "s1"


def test_accents_need_a_shared_color():
    callouts = [{"kind": "CALLOUT", "text": "Uno"}, {"kind": "SHAPE", "shape": "ring", "animate": "pulse"}]
    without_color = make_doc([make_scene("s1", "PROOF", visuals=callouts)])
    with_color = make_doc([make_scene("s1", "PROOF", visuals=callouts, accentColor="#ff0066")])

    assert _rules(run_lints(without_color, ["design"])) == [("accent_consistency", Severity.WARNING)]
    assert run_lints(with_color, ["design"]) == []


def test_chart_without_emphasis_is_not_an_accent():
    visuals = [
        {"kind": "CHART", "chart": "bar", "data": [1]},
        {"kind": "CHART", "chart": "bar", "data": [1], "emphasize": []},
    ]
    assert run_lints(make_doc([make_scene("s1", "PROOF", visuals=visuals)]), ["design"]) == []


def test_text_density():
    visuals = [{"kind": "TEXT", "role": "body", "text": "x" * 150}, {"kind": "TEXT", "role": "caption", "text": "y" * 51}]
    doc = make_doc([make_scene("s1", "PROOF", visuals=visuals)])
    assert _rules(run_lints(doc, ["design"])) == [("text_density", Severity.WARNING)]


def test_provenance_marker_without_evidence():
    doc = make_doc([make_scene("s1", "PROOF", text="Revenue grew [prov:1] this year.")])
    findings = run_lints(doc, ["evidence"])
    assert _rules(findings) == [("provenance_mismatch", Severity.ERROR)]
    assert "1" in findings[0].message and "0" in findings[0].message


def test_evidence_cue_out_of_range():
    scene = make_scene(
        "s1", "PROOF",
        text="Revenue grew [prov:1] this year.",
        evidence=[{"provId": "1", "atCue": 2}],
    )
    scene["voiceover"]["cues"] = [0, 1200]
    assert _rules(run_lints(make_doc([scene]), ["evidence"])) == [("evidence_timing", Severity.ERROR)]


def test_matching_evidence_passes():
    scene = make_scene("s1", "PROOF", text="Revenue grew [prov:1] this year.", evidence=[{"provId": "1", "atCue": 0}])
    assert run_lints(make_doc([scene]), ["evidence"]) == []


def test_media_alt_text_heuristic():
    visuals = [{"kind": "MEDIA", "src": "img/photo.png"}, {"kind": "MEDIA", "src": "img/alt-photo.png"}]
    findings = run_lints(make_doc([make_scene("s1", "CASE", visuals=visuals)]), ["accessibility"])

    assert _rules(findings) == [("media_alt_text", Severity.WARNING)]
    assert "1" in findings[0].message


def test_light_accent_needs_dark_backdrop():
    text = {"kind": "TEXT", "role": "title", "text": "Hola"}
    backdrop = {"kind": "SHAPE", "shape": "blob", "fill": "Dark-Navy"}
    light = make_doc([make_scene("s1", "HOOK", visuals=[text], accentColor="light-yellow")])
    with_backdrop = make_doc([make_scene("s1", "HOOK", visuals=[text, backdrop], accentColor="light-yellow")])

    assert _rules(run_lints(light, ["accessibility"])) == [("color_contrast", Severity.WARNING)]
    assert run_lints(with_backdrop, ["accessibility"]) == []


def test_categories_do_not_short_circuit():
    charts = [{"kind": "CHART", "chart": "bar", "data": [1]} for _ in range(4)]
    doc = make_doc([make_scene("s1", "PROBLEM", text="Costs [prov:a] rose.", visuals=charts)])

    categories = {f.category for f in lint_video_doc(doc).findings}

    assert categories == {"narrative", "design", "evidence"}


@pytest.mark.parametrize("scenes", [
    [make_scene("s1", "HOOK"), make_scene("s2", "TURN")],
    [make_scene("s1", "HOOK", duration_ms=2000), make_scene("s2", "TURN"), make_scene("s3", "CTA"),
     make_scene("s4", "PROOF"), make_scene("s5", "PROOF"), make_scene("s6", "PROOF")],
    [make_scene("s1", "HOOK"), make_scene("s2", "TURN"), make_scene("s3", "PROOF"),
     make_scene("s4", "PROOF"), make_scene("s5", "CTA")],
])
def test_passed_iff_no_errors(scenes):
    report = lint_video_doc(make_doc(scenes))
    assert report.passed == (not any(f.severity == Severity.ERROR for f in report.findings))


def test_unknown_category(clean_doc):
    with pytest.raises(ValueError):
        run_lints(clean_doc, ["typography"])


def test_registry_has_five_categories():
    assert list(LINT_RULES) == ["narrative", "pacing", "design", "evidence", "accessibility"]


def test_report_serialization():
    doc = make_doc([make_scene("s1", "HOOK"), make_scene("s2", "TURN")])
    data = lint_video_doc(doc).to_dict()

    assert data["passed"] is False
    assert data["errors"][0] == {
        "category": "narrative",
        "rule": "cta_required",
        "severity": "error",
        "message": "Falta una llamada a la acción o un siguiente paso claro",
        "sceneId": "s2",
        "suggestion": "Añadir un siguiente paso explícito o una llamada a la acción",
    }
    assert "❌ Controles de calidad fallidos - revisar errores" in data["summary"]
    assert "Duración: 10.0s (objetivo: 30s)" in data["summary"]
