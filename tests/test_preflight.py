import pytest

from storyboard_qa.lint import PREFLIGHT_RULES, Severity, qa_preflight

TEN_WORDS = "This line has exactly ten words in it for testing."


def decision(scene=1, pattern="Custom", props=None, vo=TEN_WORDS):
    return {
        "scene": scene,
        "decision": {"pattern": pattern, "props": props or {}},
        "vo": {"vo_script": vo, "screen_text": {}},
    }


def _codes(report):
    return [(i.code, i.severity) for i in report.issues]


def test_good_decisions_pass():
    report = qa_preflight([
        decision(1),
        decision(2, vo="So " + TEN_WORDS),
        decision(3, pattern="TitleSubhead", props={"title": "A proper title"}, vo="Then " + TEN_WORDS),
    ])
    assert report.ok
    assert report.issues == []


def test_vo_too_short_is_a_warning():
    report = qa_preflight([decision(vo="Too short here.")])
    assert _codes(report) == [("vo_short", Severity.WARNING)]
    assert report.ok


def test_vo_too_long_is_an_error():
    report = qa_preflight([decision(vo=" ".join(["word"] * 60))])
    assert _codes(report) == [("vo_long", Severity.ERROR)]
    assert not report.ok


def test_bridge_recommended_after_first_scene():
    report = qa_preflight([decision(1), decision(2)])
    assert _codes(report) == [("vo_no_bridge", Severity.WARNING)]
    assert report.issues[0].scene == 2


@pytest.mark.parametrize("opening", ["So", "for example,", "NEXT", "Meanwhile", "In short", "then"])
def test_bridge_words(opening):
    report = qa_preflight([decision(2, vo=f"  {opening} {TEN_WORDS}")])
    assert report.issues == []


def test_bridge_needs_word_boundary():
    report = qa_preflight([decision(2, vo="Someday " + TEN_WORDS)])
    assert _codes(report) == [("vo_no_bridge", Severity.WARNING)]


def test_title_subhead_checks():
    missing = qa_preflight([decision(pattern="TitleSubhead", props={"title": "  Short "})])
    long = qa_preflight([decision(pattern="TitleSubhead", props={"title": "t" * 121})])

    assert _codes(missing) == [("title_missing", Severity.ERROR)]
    assert _codes(long) == [("title_long", Severity.WARNING)]


def test_callout_checks():
    report = qa_preflight([decision(pattern="CalloutPattern", props={})])
    assert _codes(report) == [
        ("callout_title_missing", Severity.ERROR),
        ("callout_body_missing", Severity.ERROR),
    ]

    long_body = qa_preflight([decision(pattern="CalloutPattern", props={"title": "T", "body": "b" * 241})])
    assert _codes(long_body) == [("callout_body_long", Severity.WARNING)]


@pytest.mark.parametrize("bars,ok", [(1, False), (2, True), (6, True), (7, False)])
def test_chart_density(bars, ok):
    data = [{"label": f"L{i}", "value": i} for i in range(bars)]
    report = qa_preflight([decision(pattern="ChartReveal", props={"data": data})])
    assert report.ok is ok
    if not ok:
        assert _codes(report) == [("chart_density", Severity.ERROR)]


def test_chart_label_length():
    data = [{"label": "Ok", "value": 1}, {"label": "x" * 19, "value": 2}, {"value": 3}]
    report = qa_preflight([decision(pattern="ChartReveal", props={"data": data})])

    assert _codes(report) == [("label_length", Severity.WARNING), ("label_length", Severity.WARNING)]
    assert "2" in report.issues[0].message
    assert "3" in report.issues[1].message


def test_stat_hero_requires_value():
    assert _codes(qa_preflight([decision(pattern="StatHero", props={"statValue": " "})])) == [
        ("stat_missing", Severity.ERROR)
    ]
    assert qa_preflight([decision(pattern="StatHero", props={"statValue": "42%"})]).ok
    assert qa_preflight([decision(pattern="StatHero", props={"statValue": 0})]).ok


def test_report_serialization():
    data = qa_preflight([decision(vo="Hi.")]).to_dict()
    assert data == {
        "ok": True,
        "issues": [{"scene": 1, "severity": "warning", "code": "vo_short", "message": data["issues"][0]["message"]}],
    }


def test_registry_is_independent_of_full_lint():
    from storyboard_qa.lint import LINT_RULES

    assert set(PREFLIGHT_RULES).isdisjoint(LINT_RULES)
