"""
Entrada principal storyboard-qa
Alineación de tiempos del storyboard y controles de calidad del VideoDoc.
"""
import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import load_gap_config
from .domain.errors import StoryboardQAError
from .lint import LintReport, PreflightReport, Severity
from .orchestrator import StoryboardOrchestrator
from .timing import AlignmentResult, estimate_tts_duration, estimate_voiceover_seconds

console = Console()

EXIT_OK = 0
EXIT_LINT_FAILED = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storyboard-qa",
        description="Alineador de tiempos y linter de calidad para guiones de video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="YAML de configuración (sección timing)")
    parser.add_argument("--beat-gap", type=float, help="Segundos entre beats (default 1.5)")
    parser.add_argument("--scene-gap", type=float, help="Segundos entre escenas (default 2.0)")
    parser.add_argument("--act-gap", type=float, help="Segundos entre actos (default 3.0)")
    parser.add_argument("--output-dir", help="Directorio para STORYBOARD.md, lint-report.json, etc.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Logging detallado")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("align", help="Alinear la duración total del storyboard")
    p.add_argument("storyboard")

    p = sub.add_parser("set", help="Fijar la duración de un beat y re-alinear")
    p.add_argument("storyboard")
    p.add_argument("scene", type=int)
    p.add_argument("beat", type=int)
    p.add_argument("seconds", type=float)

    p = sub.add_parser("apply", help="Aplicar un archivo de tiempos {beats: [...]}")
    p.add_argument("storyboard")
    p.add_argument("timings")

    p = sub.add_parser("export-timings", help="Exportar plantilla editable de tiempos")
    p.add_argument("storyboard")
    p.add_argument("--out", help="Ruta de salida (default: timings.json)")

    p = sub.add_parser("autotime", help="Auto-temporizar desde un beat de calibración")
    p.add_argument("storyboard")
    p.add_argument("--cal-scene", type=int, default=1)
    p.add_argument("--cal-beat", type=int, default=1)
    p.add_argument("--cal-seconds", type=float, help="Duración de referencia (default: la del beat o 10s)")
    p.add_argument("--unit", choices=["chars", "words"], default="chars")
    p.add_argument("--field", choices=["voiceover", "beat"], default="voiceover")

    p = sub.add_parser("lint", help="Controles de calidad del VideoDoc")
    p.add_argument("videodoc")
    p.add_argument("--category", action="append", dest="categories",
                   choices=["narrative", "pacing", "design", "evidence", "accessibility"],
                   help="Limitar a una categoría (repetible)")

    p = sub.add_parser("preflight", help="Preflight de locuciones y patrones")
    p.add_argument("decisions")

    p = sub.add_parser("estimate", help="Estimar la duración TTS de un texto")
    p.add_argument("--text", required=True)
    p.add_argument("--wpm", type=float, default=150, help="Palabras por minuto")
    p.add_argument("--buffer", type=float, default=1.5, help="Margen final en segundos")

    return parser


def print_alignment(result: AlignmentResult):
    overhead = result.overhead
    console.print(Panel(
        f"[bold]{escape(result.document.title)}[/bold]\n"
        f"Suma de beats: {result.beats_sum:.2f}s\n"
        f"Overhead: {overhead.total_overhead_sec}s "
        f"(beats {overhead.beat_gaps_count}×{overhead.beat_gap_sec}s, "
        f"escenas {overhead.scene_gaps_count}×{overhead.scene_gap_sec}s, "
        f"actos {overhead.act_gaps_count}×{overhead.act_gap_sec}s)\n"
        f"[green]Duración alineada: {result.aligned_total}s[/green]",
        title="Alineación",
    ))
    if result.estimated_beats:
        console.print(f"[yellow]Duración estimada para {len(result.estimated_beats)} beats sin durationSec[/yellow]")


def print_lint(report: LintReport):
    if report.findings:
        table = Table(title="Hallazgos")
        table.add_column("Severidad")
        table.add_column("Categoría")
        table.add_column("Regla")
        table.add_column("Escena")
        table.add_column("Mensaje")
        for finding in report.findings:
            color = "red" if finding.severity == Severity.ERROR else "yellow"
            table.add_row(
                f"[{color}]{finding.severity.value}[/{color}]",
                escape(finding.category),
                escape(finding.rule),
                escape(finding.scene_id or "-"),
                escape(finding.message),
            )
        console.print(table)

    style = "green" if report.passed else "red"
    console.print(Panel(f"[{style}]{escape(report.summary)}[/{style}]", title="Resultado"))


def print_preflight(report: PreflightReport):
    for issue in report.issues:
        color = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"  [{color}]• escena {issue.scene} {escape(f'[{issue.code}]')}[/{color}] {escape(issue.message)}")

    if report.ok:
        console.print(Panel("[green]✓ Preflight superado[/green]", title="Resultado"))
    else:
        console.print(Panel("[red]✗ Preflight fallido[/red]", title="Resultado"))


def run(args: argparse.Namespace) -> int:
    if args.command == "estimate":
        seconds = estimate_tts_duration(args.text, args.wpm, args.buffer)
        console.print(f"Duración TTS estimada: [bold]{seconds}s[/bold] "
                      f"(locución rápida: {estimate_voiceover_seconds(args.text)}s)")
        return EXIT_OK

    gaps = load_gap_config(
        config_path=args.config,
        beat_gap_sec=args.beat_gap,
        scene_gap_sec=args.scene_gap,
        act_gap_sec=args.act_gap,
    )
    orchestrator = StoryboardOrchestrator(gaps=gaps, output_dir=args.output_dir)

    if args.command == "align":
        print_alignment(orchestrator.align_file(args.storyboard))
    elif args.command == "set":
        print_alignment(orchestrator.set_timing(args.storyboard, args.scene, args.beat, args.seconds))
    elif args.command == "apply":
        print_alignment(orchestrator.apply_timings_file(args.storyboard, args.timings))
    elif args.command == "export-timings":
        target = orchestrator.export_timings(args.storyboard, args.out)
        console.print(f"[green]✓ Plantilla de tiempos: {escape(str(target))}[/green]")
    elif args.command == "autotime":
        print_alignment(orchestrator.autotime_file(
            args.storyboard,
            cal_scene=args.cal_scene,
            cal_beat=args.cal_beat,
            cal_seconds=args.cal_seconds,
            unit=args.unit,
            field=args.field,
        ))
    elif args.command == "lint":
        report = orchestrator.lint_file(args.videodoc, args.categories)
        print_lint(report)
        return EXIT_OK if report.passed else EXIT_LINT_FAILED
    elif args.command == "preflight":
        report = orchestrator.preflight_file(args.decisions)
        print_preflight(report)
        return EXIT_OK if report.ok else EXIT_LINT_FAILED

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    "Punto de entrada CLI."
    args = build_parser().parse_args(argv)

    # Configurar logging
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return run(args)
    except StoryboardQAError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
