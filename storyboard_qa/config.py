"""
Configuración de gaps de presentación entre beats, escenas y actos.
Los valores se resuelven una vez (overrides > entorno > YAML > defaults) y se
pasan explícitamente al alineador.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv

from .domain.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/config.yaml"

# Variable de entorno → campo de GapConfig
ENV_VARS = {
    "beat_gap_sec": "BEAT_GAP_SEC",
    "scene_gap_sec": "SCENE_GAP_SEC",
    "act_gap_sec": "ACT_GAP_SEC",
}


@dataclass(frozen=True)
class GapConfig:
    """Segundos de pausa insertados entre unidades de cada nivel."""
    beat_gap_sec: float = 1.5
    scene_gap_sec: float = 2.0
    act_gap_sec: float = 3.0

    def to_dict(self) -> dict:
        return asdict(self)


def _to_seconds(name: str, value) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Valor inválido para {name}: {value!r}")
    if seconds < 0:
        raise ConfigError(f"{name} no puede ser negativo: {seconds}")
    return seconds


def _load_yaml_gaps(path: str) -> dict:
    """Lee la sección `timing:` del YAML de configuración, si existe."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Archivo de configuración no encontrado: {path}")
        return {}

    timing = config.get("timing", {}) or {}
    return {k: v for k, v in timing.items() if k in ENV_VARS}


def load_gap_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Optional[float],
) -> GapConfig:
    """
    Resuelve la configuración de gaps.

    Args:
        config_path: YAML con sección `timing` (usa ./config/config.yaml si existe)
        env: Entorno a consultar (por defecto os.environ tras load_dotenv)
        **overrides: beat_gap_sec / scene_gap_sec / act_gap_sec explícitos;
            los valores None se ignoran

    Returns:
        GapConfig con los valores finales
    """
    if env is None:
        load_dotenv()
        env = os.environ

    values = GapConfig().to_dict()

    if config_path is not None:
        values.update(_load_yaml_gaps(config_path))
    elif Path(DEFAULT_CONFIG_PATH).exists():
        values.update(_load_yaml_gaps(DEFAULT_CONFIG_PATH))

    for field_name, var in ENV_VARS.items():
        raw = env.get(var)
        if raw not in (None, ""):
            values[field_name] = raw

    for field_name, value in overrides.items():
        if field_name not in ENV_VARS:
            raise ConfigError(f"Parámetro de gap desconocido: {field_name}")
        if value is not None:
            values[field_name] = value

    return GapConfig(**{name: _to_seconds(name, value) for name, value in values.items()})
