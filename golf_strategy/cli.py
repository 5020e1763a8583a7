"""
Command-line interface for the Golf Strategy Optimizer.
Built with Click and Rich for terminal output.
"""

import sys
import json
import logging
from typing import List

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich import box

from . import __version__
from .config import get_config
from .distributions import build_distributions
from .geo import bearing_between
from .landing_zones import compute_landing_zones_from_aim_points
from .models import (
    Course, CourseDataError, ClubShotGroup, ClubDistribution, StrategyMode, ColorCode,
)
from .optimizer import optimize_hole, generate_game_plan
from .simulator import find_best_approaches

console = Console()
logging.basicConfig(level=logging.INFO, format="%(message)s")

COLOR_STYLES = {ColorCode.GREEN: "green", ColorCode.YELLOW: "yellow", ColorCode.RED: "red"}


def _read_json(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CourseDataError(f"{path} is not valid JSON: {e}")


def load_bag(path: str) -> List[ClubDistribution]:
    """Shot groups from a JSON file (a list, or an object with 'shotGroups')."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("shotGroups", data.get("shot_groups", []))
    if not isinstance(data, list):
        raise CourseDataError(f"{path} must hold a list of shot groups")
    return build_distributions([ClubShotGroup.from_dict(g) for g in data])


def load_course(path: str) -> Course:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise CourseDataError(f"{path} must hold a course object")
    return Course.from_dict(data)


def _find_hole(course: Course, number: int):
    for hole in course.holes:
        if hole.hole_number == number:
            return hole
    raise CourseDataError(f"{course.name} has no hole {number}")


def _fail(message: str):
    console.print(f"[red]{message}[/]")
    sys.exit(1)


def _check_config():
    errors = get_config().validate_config()
    if errors:
        _fail("\n".join(f"Config: {error}" for error in errors))


@click.group()
@click.version_option(version=__version__, prog_name="Golf Strategy Optimizer")
@click.option("--verbose", "-v", is_flag=True, help="Show per-candidate debug output")
def cli(verbose: bool):
    """Golf Strategy Optimizer - Monte Carlo club and target selection."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    _check_config()


@cli.command()
@click.argument("distance", type=float)
@click.option("--bag", "-b", required=True, type=click.Path(exists=True), help="Shot groups JSON")
@click.option("--trials", "-n", default=None, type=int, help="Trials per candidate")
def approach(distance: float, bag: str, trials: int):
    """Best club sequences for a remaining DISTANCE in yards."""
    try:
        clubs = load_bag(bag)
    except CourseDataError as e:
        _fail(str(e))

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
        task = progress.add_task("Simulating...", total=None)
        results = find_best_approaches(distance, clubs, trials)
        progress.update(task, completed=True)

    if not results:
        console.print(f"[yellow]No club combination fits {distance:.0f} yards.[/]")
        return

    table = Table(title=f"Best Approaches from {distance:.0f}y", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Rank", style="bold", width=4)
    table.add_column("Clubs", style="white")
    table.add_column("xStrokes", justify="right", style="green")
    table.add_column("Tip", style="cyan")

    for i, result in enumerate(results, 1):
        table.add_row(
            f"#{i}",
            result.label,
            f"{result.expected_strokes:.2f}",
            result.tip or "-",
            style="bold green" if i == 1 else None,
        )

    console.print(table)


@cli.command()
@click.argument("course_file", type=click.Path(exists=True))
@click.option("--bag", "-b", required=True, type=click.Path(exists=True), help="Shot groups JSON")
@click.option("--hole", "-h", "hole_number", required=True, type=int, help="Hole number")
@click.option("--tee-box", "-t", default=None, help="Tee box name")
@click.option("--mode", "-m", type=click.Choice(["scoring", "safe"]), default=None)
@click.option("--trials", "-n", default=None, type=int)
def hole(course_file: str, bag: str, hole_number: int, tee_box: str, mode: str, trials: int):
    """Ranked strategies for one hole, with aim points."""
    config = get_config()
    try:
        clubs = load_bag(bag)
        course = load_course(course_file)
        target = _find_hole(course, hole_number)
    except CourseDataError as e:
        _fail(str(e))

    tee_box = tee_box or config.default_tee_box
    strategy_mode = StrategyMode(mode or config.default_mode)
    strategies = optimize_hole(target, tee_box, clubs, strategy_mode, trials)

    if not strategies:
        console.print(f"[yellow]No strategies for hole {hole_number}.[/]")
        return

    console.print(Panel(
        f"[bold]Hole {target.hole_number}[/] | Par {target.par} | "
        f"{target.distance_for(tee_box):.0f}y"
        + (f"\n{target.notes}" if target.notes else ""),
        title=course.name,
        border_style="cyan",
    ))

    table = Table(title=f"Strategies ({strategy_mode.value})", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Strategy", style="white")
    table.add_column("Clubs")
    table.add_column("xStrokes", justify="right", style="green")
    table.add_column("Std", justify="right")
    table.add_column("Birdie %", justify="right")
    table.add_column("Blow-up %", justify="right", style="red")

    for i, s in enumerate(strategies):
        table.add_row(
            s.strategy_name,
            s.label,
            f"{s.expected_strokes:.2f}",
            f"{s.std_strokes:.2f}",
            f"{s.score_distribution.birdie*100:.1f}%",
            f"{s.blowup_risk*100:.1f}%",
            style="bold green" if i == 0 else None,
        )
    console.print(table)

    console.print("\n[bold cyan]Aim Points:[/]")
    for aim in strategies[0].aim_points:
        note = f" ({aim.carry_note})" if aim.carry_note else ""
        console.print(f"  {aim.shot_number}. [white]{aim.club_name}[/] {aim.carry}y{note} - {aim.tip}")


@cli.command()
@click.argument("course_file", type=click.Path(exists=True))
@click.option("--bag", "-b", required=True, type=click.Path(exists=True), help="Shot groups JSON")
@click.option("--tee-box", "-t", default=None, help="Tee box name")
@click.option("--mode", "-m", type=click.Choice(["scoring", "safe"]), default=None)
@click.option("--trials", "-n", default=None, type=int)
def plan(course_file: str, bag: str, tee_box: str, mode: str, trials: int):
    """Full-course game plan."""
    config = get_config()
    try:
        clubs = load_bag(bag)
        course = load_course(course_file)
    except CourseDataError as e:
        _fail(str(e))

    tee_box = tee_box or config.default_tee_box
    strategy_mode = StrategyMode(mode or config.default_mode)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Planning holes...", total=len(course.holes))
        game_plan = generate_game_plan(
            course, tee_box, clubs, strategy_mode,
            on_progress=lambda done, total: progress.update(task, completed=done),
            trials=trials,
        )

    table = Table(title=f"{game_plan.course_name} Game Plan", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Hole", style="bold", width=4)
    table.add_column("Par", justify="center", width=3)
    table.add_column("Yds", justify="right", width=5)
    table.add_column("Strategy")
    table.add_column("Clubs")
    table.add_column("xS", justify="right", style="green")
    table.add_column("Notes")

    for h in game_plan.holes:
        notes = []
        if h.carry_to_avoid:
            notes.append(f"Carry: {h.carry_to_avoid}y")
        if h.miss_side:
            notes.append(h.miss_side)
        marker = "*" if h.hole_number in game_plan.key_holes else ""
        table.add_row(
            f"{h.hole_number}{marker}",
            str(h.par),
            str(h.plays_like_yardage if h.plays_like_yardage is not None else h.yardage),
            h.strategy.strategy_name,
            h.strategy.label,
            f"{h.strategy.expected_strokes:.2f}",
            " | ".join(notes),
            style=COLOR_STYLES[h.color_code],
        )
    console.print(table)

    b = game_plan.breakdown
    console.print(Panel(
        f"Expected score: [bold green]{game_plan.total_expected:.1f}[/] "
        f"over {game_plan.total_plays_like:,} plays-like yards\n"
        f"Eagle {b.eagle*100:.1f}% | Birdie {b.birdie*100:.1f}% | Par {b.par*100:.1f}% | "
        f"Bogey {b.bogey*100:.1f}% | Double {b.double*100:.1f}% | Worse {b.worse*100:.1f}%\n"
        f"Key holes: {', '.join(str(n) for n in game_plan.key_holes) or '-'}",
        title=f"Summary ({game_plan.mode.value}, {game_plan.date})",
        border_style="green",
    ))


@cli.command()
@click.argument("course_file", type=click.Path(exists=True))
@click.option("--bag", "-b", required=True, type=click.Path(exists=True), help="Shot groups JSON")
@click.option("--hole", "-h", "hole_number", required=True, type=int, help="Hole number")
@click.option("--tee-box", "-t", default=None, help="Tee box name")
@click.option("--trials", "-n", default=None, type=int)
def zones(course_file: str, bag: str, hole_number: int, tee_box: str, trials: int):
    """Landing zones for the top strategy on a hole."""
    config = get_config()
    try:
        clubs = load_bag(bag)
        course = load_course(course_file)
        target = _find_hole(course, hole_number)
    except CourseDataError as e:
        _fail(str(e))

    strategies = optimize_hole(
        target, tee_box or config.default_tee_box, clubs, StrategyMode(config.default_mode), trials
    )
    if not strategies:
        console.print(f"[yellow]No strategies for hole {hole_number}.[/]")
        return

    top = strategies[0]
    heading = bearing_between(target.tee, target.pin)
    table = Table(title=f"Hole {hole_number}: {top.strategy_name}", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Club", style="white")
    table.add_column("Center", justify="right")
    table.add_column("1σ pts", justify="right")
    table.add_column("2σ pts", justify="right")

    for zone in compute_landing_zones_from_aim_points(top, clubs, heading):
        table.add_row(
            zone.club_name,
            f"{zone.center.lat:.6f}, {zone.center.lng:.6f}",
            str(len(zone.sigma1)),
            str(len(zone.sigma2)),
        )
    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
