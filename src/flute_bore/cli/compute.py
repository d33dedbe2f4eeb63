"""Command-line tool for evaluating bore design scripts.

The flute-compute CLI tool executes a design script, predicts the playing
pitch and writes the requested manufacturing and analysis files.
"""

import hashlib
import logging
import sys
import time
from pathlib import Path

import click
import numpy as np
from rich.console import Console

from flute_bore.exceptions import FluteBoreError, NoResonanceFound
from flute_bore.io import write_impedance_spectrum
from flute_bore.logging_config import setup_logging

from .executor import RestrictedImportError, execute_design_script, validate_engine_object
from .report import format_frequency, print_design_info, print_resonance

console = Console()


@click.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--guess",
    type=float,
    help="Starting frequency for the resonance search in Hz (default: script 'guess' or c/2L)",
)
@click.option("--obj", "obj_path", type=click.Path(path_type=Path), help="Write wall mesh as OBJ")
@click.option("--stl", "stl_path", type=click.Path(path_type=Path), help="Write wall mesh as STL")
@click.option(
    "--dxf", "dxf_path", type=click.Path(path_type=Path), help="Write DXF drilling template"
)
@click.option(
    "--spectrum",
    "spectrum_path",
    type=click.Path(path_type=Path),
    help="Write impedance spectrum to HDF5",
)
@click.option("--fmin", type=float, default=20.0, show_default=True, help="Spectrum start (Hz)")
@click.option("--fmax", type=float, default=5000.0, show_default=True, help="Spectrum end (Hz)")
@click.option(
    "--points", type=click.IntRange(min=2), default=2000, show_default=True,
    help="Spectrum sample count",
)
@click.option(
    "--segments", type=click.IntRange(min=8), default=64, show_default=True,
    help="Angular segments of the exported mesh",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug info")
@click.option("--dry-run", is_flag=True, help="Validate script without computing the pitch")
@click.version_option(version="0.1.0", prog_name="flute-compute")
def main(
    script: Path,
    guess: float | None,
    obj_path: Path | None,
    stl_path: Path | None,
    dxf_path: Path | None,
    spectrum_path: Path | None,
    fmin: float,
    fmax: float,
    points: int,
    segments: int,
    verbose: bool,
    dry_run: bool,
):
    """Predict the pitch of a bore design from a Python script.

    SCRIPT is the path to a Python file that defines an 'engine' variable
    containing a FluteEngine instance. An optional 'guess' variable sets
    the starting frequency of the resonance search.

    Example script:

    \b
        from flute_bore import FluteEngine
        engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)
        engine.set_holes([25, 28, 32], [0.35, 0.35, 0.35], [True, True, True])
        guess = 440.0

    The tool will:
    - Execute the script to create the engine
    - Display the design
    - Predict the playing pitch
    - Write any requested OBJ, STL, DXF or HDF5 files
    """
    if fmin <= 0 or fmax <= fmin:
        raise click.BadParameter("need 0 < fmin < fmax", param_hint="'--fmin' / '--fmax'")

    sys.exit(
        _run(
            script, guess, obj_path, stl_path, dxf_path, spectrum_path,
            fmin, fmax, points, segments, verbose, dry_run,
        )
    )


def _run(
    script: Path,
    guess: float | None,
    obj_path: Path | None,
    stl_path: Path | None,
    dxf_path: Path | None,
    spectrum_path: Path | None,
    fmin: float,
    fmax: float,
    points: int,
    segments: int,
    verbose: bool,
    dry_run: bool,
) -> int:
    if verbose:
        setup_logging(logging.DEBUG)

    try:
        console.print(f"\n[bold]Bore design:[/bold] {script.name}", style="blue")
        console.print("─" * 60)

        script_content = script.read_text()
        if verbose:
            script_hash = hashlib.sha256(script_content.encode()).hexdigest()
            console.print(f"Script hash: {script_hash}")

        console.print("Loading design...", style="dim")
        try:
            namespace = execute_design_script(script, script_content, verbose=verbose)
        except RestrictedImportError as e:
            console.print(f"\n[bold red]Security Error:[/bold red] {e}")
            return 1
        except SyntaxError as e:
            console.print("\n[bold red]Syntax Error in script:[/bold red]")
            console.print(f"  {e}")
            return 1

        try:
            engine = validate_engine_object(namespace)
        except ValueError as e:
            console.print(f"\n[bold red]Error:[/bold red] {e}")
            return 1

        if guess is None:
            guess = float(namespace.get("guess", 0.0))

        print_design_info(console, engine)

        if dry_run:
            console.print("[yellow]Dry run - pitch not computed[/yellow]")
            return 0

        start_time = time.perf_counter()
        try:
            resonance = engine.resonance(guess)
        except NoResonanceFound as e:
            console.print(f"\n[bold red]No resonance:[/bold red] {e}")
            return 1
        elapsed = time.perf_counter() - start_time

        print_resonance(console, resonance)
        if verbose:
            console.print(f"  Search time: {elapsed * 1e3:.2f} ms", style="dim")

        if obj_path is not None:
            obj_path.parent.mkdir(parents=True, exist_ok=True)
            obj_path.write_text(engine.export_obj(name=script.stem, segments=segments))
            console.print(f"  OBJ: {obj_path}")

        if stl_path is not None:
            engine.export_stl(stl_path, segments=segments)
            console.print(f"  STL: {stl_path}")

        if dxf_path is not None:
            engine.export_dxf_template(dxf_path)
            console.print(f"  DXF: {dxf_path}")

        if spectrum_path is not None:
            write_impedance_spectrum(
                spectrum_path,
                engine,
                np.linspace(fmin, fmax, points),
                script_content=script_content,
                resonance_hz=resonance.frequency,
            )
            console.print(f"  Spectrum: {spectrum_path}")

        console.print("─" * 60)
        console.print(
            f"✓ [bold green]Predicted pitch {format_frequency(resonance.frequency)}[/bold green]"
        )
        return 0

    except FluteBoreError as e:
        console.print(f"\n[bold red]Design Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        return 1
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    main()
