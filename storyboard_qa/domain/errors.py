"""
Excepciones del dominio.
Solo los errores de contrato (documentos mal formados, índices inexistentes)
interrumpen el flujo; los problemas de calidad se devuelven como hallazgos.
"""


class StoryboardQAError(Exception):
    """Error genérico del sistema."""
    pass


class InvalidDocumentError(StoryboardQAError, ValueError):
    """El documento de entrada no es JSON válido o no cumple el esquema."""
    pass


class TimingOverrideError(StoryboardQAError, ValueError):
    """Un override de tiempos apunta a una escena o beat inexistente."""
    pass


class ConfigError(StoryboardQAError, ValueError):
    """Valor de configuración inválido (gaps no numéricos o negativos)."""
    pass
