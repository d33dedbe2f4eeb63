"""Terminal report for bore designs.

Renders the design parameters and the hole table with rich.
"""

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from flute_bore.acoustics.resonance import Resonance
    from flute_bore.engine import FluteEngine


def format_frequency(hz: float) -> str:
    """Format a frequency for display.

    Args:
        hz: Frequency in Hz

    Returns:
        Formatted string like "440.00 Hz" or "1.25 kHz"
    """
    if hz < 1000:
        return f"{hz:.2f} Hz"
    return f"{hz / 1000:.3f} kHz"


def print_design_info(console: Console, engine: "FluteEngine") -> None:
    """Print tube parameters and the hole table.

    Args:
        console: Rich console instance
        engine: Engine holding the design
    """
    tube = engine.tube

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Length", f"{tube.length:.2f} cm")
    table.add_row("Bore", f"{2 * tube.bore_radius:.2f} cm diameter")
    table.add_row("Wall", f"{tube.wall_thickness:.2f} cm")
    open_count = sum(1 for h in engine.holes if h.open)
    table.add_row("Holes", f"{engine.num_holes} ({open_count} open)")
    table.add_row("Embouchure", "modelled" if engine.embouchure is not None else "reference plane")

    console.print(table)

    if engine.num_holes:
        holes = Table(title="Tone holes", header_style="bold")
        holes.add_column("#", justify="right")
        holes.add_column("Position (cm)", justify="right")
        holes.add_column("Diameter (cm)", justify="right")
        holes.add_column("State")
        for i, hole in enumerate(engine.holes):
            holes.add_row(
                str(i),
                f"{hole.position:.2f}",
                f"{2 * hole.radius:.2f}",
                "[green]open[/green]" if hole.open else "[dim]closed[/dim]",
            )
        console.print(holes)

    console.print()


def print_resonance(console: Console, resonance: "Resonance") -> None:
    """Print the outcome of a resonance search."""
    console.print(f"  Pitch: [bold green]{format_frequency(resonance.frequency)}[/bold green]")
    console.print(
        f"  Search: {resonance.strategy} bracket "
        f"[{resonance.bracket[0]:.1f}, {resonance.bracket[1]:.1f}] Hz, "
        f"{resonance.iterations} iterations",
        style="dim",
    )
    if not resonance.converged:
        console.print("[yellow]Warning:[/yellow] refinement stopped at the iteration cap")
