"""
storyboard_qa
Alineación de tiempos de storyboards de video y controles de calidad
(narrativa, ritmo, diseño, evidencias y accesibilidad) antes del render.
"""

__version__ = "0.1.0"
