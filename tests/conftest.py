import pytest

from storyboard_qa.config import GapConfig
from storyboard_qa.domain.models import VideoDoc


@pytest.fixture
def gaps():
    return GapConfig(beat_gap_sec=1.5, scene_gap_sec=2.0, act_gap_sec=3.0)


@pytest.fixture
def storyboard():
    """Dos actos, dos escenas (2 beats + 1 beat), 15s de beats."""
    return {
        "title": "Demo",
        "logline": "Un guion de prueba",
        "videoSpecs": {"format": "vertical"},
        "acts": [
            {"label": "Acto 1", "summary": "Planteamiento"},
            {"label": "Acto 2", "summary": "Resolución"},
        ],
        "scenes": [
            {
                "sceneNumber": 1,
                "label": "Gancho",
                "purpose": "Captar atención",
                "beats": [
                    {"beat": "Pregunta inicial", "voiceover": "Why do videos fail?", "durationSec": 4},
                    {"beat": "Dato", "voiceover": "Most lose viewers early.", "durationSec": 5},
                ],
            },
            {
                "sceneNumber": 2,
                "label": "Giro",
                "beats": [
                    {"beat": "La idea", "voiceover": "Start with the payoff.", "durationSec": 6,
                     "visualType": "text", "recommendedComponent": "TitleSubhead"},
                ],
            },
        ],
    }


def make_scene(scene_id, role, text="A short line.", duration_ms=5000, visuals=None, **extra):
    scene = {
        "id": scene_id,
        "role": role,
        "voiceover": {"text": text, "cues": [0]},
        "visuals": visuals or [],
    }
    if duration_ms is not None:
        scene["durationMs"] = duration_ms
    scene.update(extra)
    return scene


def make_doc(scenes, target=30, idea="Lead with the result, then explain it"):
    return VideoDoc.model_validate({
        "story": {
            "controllingIdea": idea,
            "targetDurationSec": target,
            "arc": "ProblemTurnProof",
        },
        "scenes": scenes,
    })


@pytest.fixture
def clean_doc():
    return make_doc([
        make_scene("s1", "HOOK"),
        make_scene("s2", "TURN"),
        make_scene("s3", "PROOF"),
        make_scene("s4", "PROOF"),
        make_scene("s5", "CTA", text="Try it on your own script."),
    ])
