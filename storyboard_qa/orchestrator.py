"""
Orquestador de QA del storyboard
Coordina carga, alineación de tiempos, overrides y lint sobre archivos,
escribiendo los artefactos resultantes junto a cada entrada.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .config import GapConfig
from .director.parser import DocumentParser, dump_json
from .lint import LintReport, PreflightReport, lint_video_doc, qa_preflight
from .timing import (
    AlignmentResult,
    TimingOverride,
    align_storyboard,
    apply_timing_override,
    apply_timing_overrides,
    autotime_storyboard,
    export_timings_template,
    parse_timing_overrides,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

STORYBOARD_MD = "STORYBOARD.md"
LINT_REPORT_JSON = "lint-report.json"
TIMINGS_JSON = "timings.json"


class StoryboardOrchestrator:
    """
    Recibe rutas de documentos JSON, ejecuta la operación pedida y persiste
    el resultado: el storyboard alineado se reescribe en su sitio y el
    Markdown/reporte se escriben en el directorio de salida.
    """

    def __init__(self, gaps: Optional[GapConfig] = None, output_dir: Optional[PathLike] = None):
        self.gaps = gaps or GapConfig()
        self.output_dir = Path(output_dir) if output_dir else None
        self.parser = DocumentParser()

    def _artifact_path(self, source: Path, name: str) -> Path:
        base = self.output_dir or source.parent
        base.mkdir(parents=True, exist_ok=True)
        return base / name

    def _persist_alignment(self, path: Path, result: AlignmentResult) -> AlignmentResult:
        dump_json(result.document.to_dict(), path)
        md_path = self._artifact_path(path, STORYBOARD_MD)
        md_path.write_text(result.markdown + "\n", encoding="utf-8")
        logger.info(f"Storyboard alineado: {path} ({result.aligned_total}s), resumen en {md_path}")
        return result

    # ------------------------------------------------------------------
    # Tiempos
    # ------------------------------------------------------------------

    def align_file(self, path: PathLike) -> AlignmentResult:
        """Alinea el storyboard, lo reescribe y genera STORYBOARD.md."""
        path = Path(path)
        document = self.parser.parse_storyboard(path)
        return self._persist_alignment(path, align_storyboard(document, self.gaps))

    def set_timing(self, path: PathLike, scene: int, beat: int, duration_sec: float) -> AlignmentResult:
        path = Path(path)
        document = self.parser.parse_storyboard(path)
        result = apply_timing_override(document, scene, beat, duration_sec, self.gaps)
        return self._persist_alignment(path, result)

    def apply_timings_file(self, path: PathLike, timings_path: PathLike) -> AlignmentResult:
        """Aplica un archivo `{beats: [...]}` de overrides al storyboard."""
        path = Path(path)
        document = self.parser.parse_storyboard(path)
        overrides: List[TimingOverride] = parse_timing_overrides(self.parser.load(Path(timings_path)))
        return self._persist_alignment(path, apply_timing_overrides(document, overrides, self.gaps))

    def export_timings(self, path: PathLike, out_path: Optional[PathLike] = None) -> Path:
        path = Path(path)
        document = self.parser.parse_storyboard(path)
        target = Path(out_path) if out_path else self._artifact_path(path, TIMINGS_JSON)
        dump_json(export_timings_template(document), target)
        logger.info(f"Plantilla de tiempos exportada: {target}")
        return target

    def autotime_file(self, path: PathLike, **options) -> AlignmentResult:
        """Auto-temporiza el storyboard (ver autotime_storyboard para las opciones)."""
        path = Path(path)
        document = self.parser.parse_storyboard(path)
        return self._persist_alignment(path, autotime_storyboard(document, gaps=self.gaps, **options))

    # ------------------------------------------------------------------
    # Calidad
    # ------------------------------------------------------------------

    def lint_file(self, path: PathLike, categories: Optional[Iterable[str]] = None) -> LintReport:
        """Ejecuta el lint del VideoDoc y escribe lint-report.json."""
        path = Path(path)
        doc = self.parser.parse_video_doc(path)
        report = lint_video_doc(doc, categories)
        report_path = self._artifact_path(path, LINT_REPORT_JSON)
        dump_json(report.to_dict(), report_path)
        logger.info(f"Reporte de lint escrito en {report_path}")
        return report

    def preflight_file(self, path: PathLike) -> PreflightReport:
        return qa_preflight(self.parser.parse_preflight(Path(path)))

    def run(self, storyboard_path: PathLike, videodoc_path: PathLike) -> Tuple[AlignmentResult, LintReport]:
        """Pipeline completo: primero alinear tiempos, luego lint."""
        logger.info("Iniciando QA del storyboard")
        alignment = self.align_file(storyboard_path)
        report = self.lint_file(videodoc_path)
        return alignment, report
