"""
Document Parser
Se encarga de leer los JSON de entrada (storyboard, VideoDoc, decisiones de
preflight) y convertirlos en objetos de dominio validados.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from ..domain.errors import InvalidDocumentError
from ..domain.models import BeatDecision, PreflightInput, ScriptDocument, VideoDoc

logger = logging.getLogger(__name__)

RawInput = Union[str, Path, Dict[str, Any], List[Any]]


def load_json(path: Union[str, Path]) -> Any:
    """Lee un archivo JSON. FileNotFoundError se propaga tal cual."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"JSON inválido en {path}: {e}")
        raise InvalidDocumentError(f"JSON inválido en {path}: {e}")


def dump_json(data: Any, path: Union[str, Path]) -> Path:
    """Escribe JSON legible (indentado, UTF-8) y devuelve la ruta."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path


class DocumentParser:
    """Validador y parseador de documentos de entrada."""

    def load(self, raw_input: RawInput) -> Any:
        """
        Normaliza la entrada a datos JSON.

        Acepta un dict/lista ya cargado, una ruta (Path o str que no parece
        JSON) o el texto JSON, incluso envuelto en bloques ```json.
        """
        if isinstance(raw_input, (dict, list)):
            return raw_input
        if isinstance(raw_input, Path):
            return load_json(raw_input)

        stripped = raw_input.strip()
        if not stripped.startswith(("{", "[", "```")):
            return load_json(stripped)

        # Limpiar bloques de código markdown si existen
        clean_input = stripped.replace("```json", "").replace("```", "").strip()
        try:
            return json.loads(clean_input)
        except json.JSONDecodeError as e:
            logger.error(f"Error decodificando JSON: {e}")
            raise InvalidDocumentError(f"El documento no es un JSON válido: {e}")

    def parse_storyboard(self, raw_input: RawInput) -> ScriptDocument:
        """Convierte la entrada en un ScriptDocument validado."""
        data = self.load(raw_input)
        try:
            document = ScriptDocument.model_validate(data)
        except ValidationError as e:
            logger.error(f"Error parseando storyboard: {e}")
            raise InvalidDocumentError(f"Storyboard inválido: {e}")

        self._validate_logic(document)
        return document

    def parse_video_doc(self, raw_input: RawInput) -> VideoDoc:
        data = self.load(raw_input)
        try:
            return VideoDoc.model_validate(data)
        except ValidationError as e:
            logger.error(f"Error parseando VideoDoc: {e}")
            raise InvalidDocumentError(f"VideoDoc inválido: {e}")

    def parse_preflight(self, raw_input: RawInput) -> List[BeatDecision]:
        """Acepta una lista de decisiones o un objeto `{decisions: [...]}`."""
        data = self.load(raw_input)
        if isinstance(data, list):
            data = {"decisions": data}
        try:
            return PreflightInput.model_validate(data).decisions
        except ValidationError as e:
            logger.error(f"Error parseando decisiones de preflight: {e}")
            raise InvalidDocumentError(f"Decisiones de preflight inválidas: {e}")

    def _validate_logic(self, document: ScriptDocument):
        """Reglas de negocio extra (solo avisos)."""
        if not document.scenes:
            logger.warning("El storyboard no tiene escenas.")

        # Verificar que los números de escena sean secuenciales
        expected = 1
        for scene in document.scenes:
            if scene.scene_number != expected:
                logger.warning(f"Números de escena desordenados. Esperado {expected}, encontrado {scene.scene_number}")
            if not scene.beats:
                logger.warning(f"La escena {scene.scene_number} no tiene beats")
            expected += 1


_parser = DocumentParser()


def parse_script_document(raw_input: RawInput) -> ScriptDocument:
    return _parser.parse_storyboard(raw_input)


def parse_video_doc(raw_input: RawInput) -> VideoDoc:
    return _parser.parse_video_doc(raw_input)


def parse_preflight_input(raw_input: RawInput) -> List[BeatDecision]:
    return _parser.parse_preflight(raw_input)
