"""
Modelos de Dominio (Clean Architecture)
Definen la estructura de datos central del sistema: el storyboard jerárquico
(actos → escenas → beats) que se alinea en tiempos, y el VideoDoc que revisa
el linter antes del render.
"""
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class _DocumentModel(BaseModel):
    """
    Base común: alias camelCase del JSON y campos desconocidos preservados.
    to_dict() solo emite los campos presentes en la entrada o asignados
    después (nulls explícitos incluidos), nunca los defaults.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


# --------------------------------------------------------------------------
# Storyboard (documento de guion para alineación de tiempos)
# --------------------------------------------------------------------------

class Beat(_DocumentModel):
    """Unidad mínima de narración dentro de una escena."""
    beat: str = Field("", description="Etiqueta o descripción corta del beat")
    voiceover: Optional[str] = Field(None, description="Texto que se narra en este beat")
    visual_type: Optional[str] = Field(None, alias="visualType")
    recommended_component: Optional[str] = Field(None, alias="recommendedComponent")

    # Timing (se estima si no viene informado)
    duration_sec: Optional[float] = Field(None, alias="durationSec", ge=0)


class StoryboardScene(_DocumentModel):
    """Grupo de beats con un propósito visual/narrativo común."""
    scene_number: int = Field(..., alias="sceneNumber")
    label: Optional[str] = None
    purpose: Optional[str] = None
    beats: List[Beat] = Field(default_factory=list)


class Act(_DocumentModel):
    label: str = ""
    summary: str = ""


class VideoSpecs(_DocumentModel):
    format: str = "vertical"


class ScriptDocument(_DocumentModel):
    """El storyboard completo estructurado en actos, escenas y beats."""
    title: str
    logline: Optional[str] = None
    video_specs: VideoSpecs = Field(default_factory=VideoSpecs, alias="videoSpecs")
    acts: List[Act] = Field(default_factory=list)
    scenes: List[StoryboardScene] = Field(default_factory=list)
    estimated_total_duration_sec: Optional[float] = Field(None, alias="estimatedTotalDurationSec")
    meta: Dict[str, Any] = Field(default_factory=dict)

    def iter_beats(self) -> Iterator[Tuple[StoryboardScene, int, Beat]]:
        """Recorre los beats en orden de presentación (escena, índice 1-based, beat)."""
        for scene in self.scenes:
            for idx, beat in enumerate(scene.beats, start=1):
                yield scene, idx, beat

    @property
    def beat_count(self) -> int:
        return sum(len(s.beats) for s in self.scenes)

    def find_scene(self, scene_number: int) -> Optional[StoryboardScene]:
        for scene in self.scenes:
            if scene.scene_number == scene_number:
                return scene
        return None


class Segment(_DocumentModel):
    """Segmento plano (título + narrativa + bullets) usado para reparto de duración."""
    title: Optional[str] = None
    narrative: Optional[str] = None
    script: Optional[str] = None
    bullets: List[str] = Field(default_factory=list)
    audio_duration: Optional[float] = Field(None, description="Duración real del audio TTS, si existe")


# --------------------------------------------------------------------------
# VideoDoc (documento final que revisa el linter)
# --------------------------------------------------------------------------

class SceneRole(str, Enum):
    HOOK = "HOOK"
    PROBLEM = "PROBLEM"
    TURN = "TURN"
    APPROACH = "APPROACH"
    PROCESS = "PROCESS"
    PROOF = "PROOF"
    CASE = "CASE"
    QUOTE = "QUOTE"
    CTA = "CTA"
    OUTCOME = "OUTCOME"
    BACKSTORY = "BACKSTORY"
    RESULT = "RESULT"
    COUNTER_INSIGHT = "COUNTER_INSIGHT"


class TextVisual(_DocumentModel):
    kind: Literal["TEXT"] = "TEXT"
    role: Literal["title", "subtitle", "body", "caption", "kicker"] = "body"
    text: str = ""


class MediaVisual(_DocumentModel):
    kind: Literal["MEDIA"] = "MEDIA"
    src: str = ""
    fit: Optional[Literal["cover", "contain"]] = None
    focal_point: Optional[Dict[str, float]] = Field(None, alias="focalPoint")
    mask: Optional[Literal["rounded", "device", "circle", "none"]] = None


class ShapeVisual(_DocumentModel):
    kind: Literal["SHAPE"] = "SHAPE"
    shape: Literal["blob", "bar", "ring", "underline"] = "blob"
    seed: Optional[float] = None
    opacity: Optional[float] = None
    animate: Optional[Literal["drift", "pulse", "wipe"]] = None
    fill: Optional[str] = Field(None, description="Color de relleno (p.ej. 'dark-navy' para fondos)")


class ChartVisual(_DocumentModel):
    kind: Literal["CHART"] = "CHART"
    chart: Literal["bar", "line", "pie", "metric"] = "bar"
    data: Any = None
    emphasize: Optional[List[int]] = Field(None, description="Índices de datos resaltados")


class CalloutVisual(_DocumentModel):
    kind: Literal["CALLOUT"] = "CALLOUT"
    text: str = ""


Visual = Annotated[
    Union[TextVisual, MediaVisual, ShapeVisual, ChartVisual, CalloutVisual],
    Field(discriminator="kind"),
]


class Voiceover(_DocumentModel):
    text: str = ""
    cues: List[float] = Field(default_factory=list, description="Offsets en ms del inicio de cada frase")


class EvidenceRef(_DocumentModel):
    prov_id: Optional[str] = Field(None, alias="provId")
    at_cue: int = Field(..., alias="atCue", description="Índice de cue (no ms)")


class VideoScene(_DocumentModel):
    """Escena del VideoDoc con rol narrativo, visuales, locución y evidencias."""
    id: str
    role: SceneRole
    voiceover: Voiceover = Field(default_factory=Voiceover)
    visuals: List[Visual] = Field(default_factory=list)
    evidence: Optional[List[EvidenceRef]] = None
    motion: Optional[Literal["standard", "emphasis", "gentle"]] = None
    accent_color: Optional[str] = Field(None, alias="accentColor")
    duration_ms: Optional[float] = Field(None, alias="durationMs")

    @property
    def effective_duration_ms(self) -> float:
        return compute_scene_duration(self)


class ProvenanceSource(_DocumentModel):
    id: str
    label: str = ""
    href: Optional[str] = None


class StoryMeta(_DocumentModel):
    controlling_idea: str = Field(..., alias="controllingIdea")
    target_duration_sec: float = Field(..., alias="targetDurationSec")
    arc: str = Field("ProblemTurnProof", description="ProblemTurnProof | CaseLed | MMS")
    audience: Optional[str] = None
    allow_resequence: bool = Field(True, alias="allowResequence")
    provenance: List[ProvenanceSource] = Field(default_factory=list)


class VideoDoc(_DocumentModel):
    """Documento de video completo (solo lectura para el linter)."""
    story: StoryMeta
    scenes: List[VideoScene] = Field(..., min_length=1)

    @property
    def total_duration_ms(self) -> float:
        return sum(s.effective_duration_ms for s in self.scenes)


# Palabras por segundo objetivo para escenas sin duración explícita
TARGET_WPS = 1.83


def compute_scene_duration(scene: VideoScene) -> float:
    """
    Duración efectiva de una escena en ms.

    Usa durationMs si viene informado; si no, la estima por palabras de la
    locución más 250ms por visual revelado y 950ms de entrada/salida,
    acotada a [2200, 6500] ms.
    """
    if scene.duration_ms:
        return scene.duration_ms

    word_count = len(scene.voiceover.text.split())
    base = (word_count / TARGET_WPS) * 1000
    reveal_time = len(scene.visuals) * 250
    enter_exit = 600 + 350

    return min(max(base + reveal_time + enter_exit, 2200), 6500)


# --------------------------------------------------------------------------
# Preflight (beats con locución y patrón visual elegido)
# --------------------------------------------------------------------------

class PatternDecision(_DocumentModel):
    pattern: str = Field(..., description="TitleSubhead | CalloutPattern | ChartReveal | StatHero | ...")
    props: Dict[str, Any] = Field(default_factory=dict)


class BeatVO(_DocumentModel):
    vo_script: str = ""
    screen_text: Dict[str, Any] = Field(default_factory=dict)
    bridge: Optional[str] = None


class BeatDecision(_DocumentModel):
    """Decisión de patrón + locución para una escena (1-based)."""
    scene: int = Field(..., ge=1)
    decision: PatternDecision
    vo: BeatVO = Field(default_factory=BeatVO)


class PreflightInput(_DocumentModel):
    decisions: List[BeatDecision] = Field(default_factory=list)
