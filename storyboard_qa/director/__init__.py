"""Carga y validación de documentos JSON."""

from .parser import (
    DocumentParser,
    dump_json,
    load_json,
    parse_preflight_input,
    parse_script_document,
    parse_video_doc,
)

__all__ = [
    "DocumentParser",
    "dump_json",
    "load_json",
    "parse_preflight_input",
    "parse_script_document",
    "parse_video_doc",
]
