# src/belief/debug_view.py
"""
Debug rendering of a BeliefState with rich.

Read-only: builds renderables, never mutates the belief. Handy in a REPL
or from a test harness:

    from rich.console import Console
    Console().print(render_belief_table(belief))
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from world.entity import EntityKind

from .state import BeliefState


def render_belief_table(belief: BeliefState) -> Table:
    """One row per known entity, freshest and nearest first."""
    table = Table(
        title=f"Belief @ tick {belief.last_updated}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Id", style="bold")
    table.add_column("Tag")
    table.add_column("Kind")
    table.add_column("Active", justify="center")
    table.add_column("Age", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Blocked nodes")

    entities = sorted(
        belief.known_entities(),
        key=lambda e: (belief.age(e) or 0, belief.distance_to(e)),
    )
    for entity in entities:
        if entity.kind is EntityKind.INTERACTIVE:
            active = "[green]on[/green]" if entity.is_active else "[red]off[/red]"
        else:
            active = "-"
        nodes = belief.get_nodes_blocked_by_entity(entity.id)
        blocked = [n for n in nodes if n in belief.blocked_nodes]
        table.add_row(
            entity.id,
            entity.tag,
            entity.kind.value,
            active,
            str(belief.age(entity)),
            f"{belief.distance_to(entity):.2f}",
            ", ".join(str(n) for n in blocked) or "<none>",
        )
    return table


def belief_to_text(belief: BeliefState, width: int = 120) -> str:
    """Render the belief table to plain text (no colour codes)."""
    console = Console(width=width, color_system=None)
    with console.capture() as capture:
        console.print(render_belief_table(belief))
    return capture.get()


__all__ = ["render_belief_table", "belief_to_text"]
