from __future__ import annotations

import dataclasses
import json
import math
from pathlib import Path

import typer

from lorenzfun.cli import ui
from lorenzfun.core import constants
from lorenzfun.core.chaos.lorenz import LorenzSystem
from lorenzfun.io.formats import write_trajectory
from lorenzfun.io.scene import ConfigError, SceneConfig, parse_scene
from lorenzfun.io.svg import render_svg, write_svg
from lorenzfun.orchestrator.pipeline import build_system, divergence as run_divergence, simulate, svg_points
from lorenzfun.report.divergence import (
    divergence_rows,
    divergence_summary,
    plot_divergence,
    write_csv,
)
from lorenzfun.utils.logging import configure_logging, get_logger, set_command_context
from lorenzfun.viewer.state import LorenzPreset, Scene

app = typer.Typer(help="Lorenz attractor toolkit: SVG export, trajectories, divergence and a 3D viewer")
logger = get_logger(__name__)


@app.callback()
def _global_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress (INFO)"),
    debug: bool = typer.Option(False, "--debug", help="Log everything (DEBUG)"),
):
    configure_logging(verbose, debug)
    set_command_context(ctx.invoked_subcommand or "cli")


def _check_steps(steps: int) -> None:
    if steps < 0:
        typer.secho("steps must be >= 0", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command()
def svg(
    steps: int = typer.Option(constants.SVG_STEPS, "--steps", "-n", help="Number of Euler steps"),
    dt: float = typer.Option(constants.DEFAULT_DT, help="Time step for Lorenz integration"),
    x: float = typer.Option(constants.SVG_START[0], "--x", help="Initial x"),
    y: float = typer.Option(constants.SVG_START[1], "--y", help="Initial y"),
    z: float = typer.Option(constants.SVG_START[2], "--z", help="Initial z"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Write the SVG here instead of stdout"),
):
    """Render the (x, y) projection of a trajectory as an SVG polyline."""
    _check_steps(steps)
    document = render_svg(svg_points(steps, dt, (x, y, z)))
    if out is None:
        typer.echo(document, nl=False)
        return

    ui.print_run_header("svg", start=(x, y, z), dt=dt, steps=steps)
    ui.print_io_write(out)
    write_svg(out, document)
    ui.print_done(f"{steps} points → {out}")


@app.command()
def trajectory(
    steps: int = typer.Option(..., "--steps", "-n", help="Number of Euler steps"),
    out: Path = typer.Option(..., "--out", "-o", help="Output path (.csv or .json)"),
    dt: float = typer.Option(constants.DEFAULT_DT, help="Time step for Lorenz integration"),
    x: float = typer.Option(constants.SVG_START[0], "--x", help="Initial x"),
    y: float = typer.Option(constants.SVG_START[1], "--y", help="Initial y"),
    z: float = typer.Option(constants.SVG_START[2], "--z", help="Initial z"),
    sigma: float = typer.Option(constants.SIGMA, help="Lorenz sigma"),
    rho: float = typer.Option(constants.RHO, help="Lorenz rho"),
    beta: float = typer.Option(constants.BETA, help="Lorenz beta"),
):
    """Dump the raw state after every step to CSV or JSON."""
    _check_steps(steps)
    ui.print_run_header("trajectory", start=(x, y, z), dt=dt, steps=steps, sigma=sigma, rho=rho, beta=beta)
    states = simulate(build_system((x, y, z), sigma=sigma, beta=beta, rho=rho), steps, dt)
    ui.print_io_write(out)
    try:
        write_trajectory(out, states)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    if steps:
        ui.print_state("final", states[-1])
    ui.print_done(f"{steps} states → {out}")


@app.command()
def divergence(
    steps: int = typer.Option(constants.DIVERGENCE_STEPS, "--steps", "-n", help="Number of Euler steps"),
    dt: float = typer.Option(constants.DEFAULT_DT, help="Time step for Lorenz integration"),
    offset: float = typer.Option(constants.CHAOS_OFFSET, help="Initial offset of the twin trajectory"),
    axis: int = typer.Option(0, help="Axis of the offset (0=x, 1=y, 2=z)"),
    x: float = typer.Option(1.0, "--x", help="Initial x"),
    y: float = typer.Option(1.0, "--y", help="Initial y"),
    z: float = typer.Option(1.0, "--z", help="Initial z"),
    out: Path | None = typer.Option(None, "--out", "-o", help="CSV of the separation per step"),
    plot: Path | None = typer.Option(None, "--plot", help="PNG plot of the separation"),
    json_summary: bool = typer.Option(False, "--json", help="Print summary JSON to stdout"),
):
    """Show sensitive dependence: track two trajectories that start almost together."""
    _check_steps(steps)
    if axis not in (0, 1, 2):
        typer.secho("axis must be 0, 1 or 2", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    distances = run_divergence((x, y, z), offset=offset, axis=axis, steps=steps, dt=dt)
    summary = divergence_summary(distances, dt)

    if json_summary:
        typer.echo(json.dumps(summary))
    else:
        ui.print_run_header("divergence", start=(x, y, z), dt=dt, steps=steps)
        ui.print_divergence(summary["initial_distance"], summary["final_distance"], summary["growth"])

    try:
        if out:
            write_csv(out, divergence_rows(distances, dt))
        if plot:
            plot_divergence(distances, dt, plot)
    except OSError as exc:
        typer.secho(f"Failed to write outputs: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not json_summary:
        if out:
            ui.print_done(f"CSV → {out}")
        if plot:
            ui.print_done(f"Plot → {plot}")


@app.command()
def view(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML scene config"),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Start with Lorenz config 'one' or 'two' (default one)"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for randomly added trajectories"),
    no_help: bool = typer.Option(False, "--no-help", help="Start with the help overlay hidden"),
    frames: int | None = typer.Option(None, "--frames", help="Run this many ticks without a window and print the heads"),
):
    """Open the interactive 3D viewer."""
    chosen = None
    if preset is not None:
        chosen = LorenzPreset.from_selector(preset)
        if chosen is None:
            typer.secho(f"Unknown preset '{preset}'. Use one or two.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    if config is not None:
        try:
            scene_cfg = parse_scene(config)
        except ConfigError as exc:
            typer.secho(f"Config error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        if seed is not None:
            scene_cfg = dataclasses.replace(scene_cfg, seed=seed)
        if no_help:
            scene_cfg = dataclasses.replace(scene_cfg, show_help=False)
        if chosen is not None:
            scene_cfg = dataclasses.replace(scene_cfg, preset=chosen.name.lower())
    else:
        chosen = chosen or LorenzPreset.ONE
        scene_cfg = SceneConfig(preset=chosen.name.lower(), seed=seed, show_help=not no_help)

    scene = Scene.from_config(scene_cfg)

    if frames is not None:
        if frames < 0:
            typer.secho("frames must be >= 0", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        for _ in range(frames):
            scene.tick()
        for index, traj in enumerate(scene.trajectories):
            ui.print_state(f"trajectory[{index}]", traj.lorenz.state)
        ui.print_done(f"{frames} frames, {len(scene)} trajectories")
        return

    from lorenzfun.viewer.window import LorenzViewer

    LorenzViewer(scene).run()


@app.command()
def selftest():
    """
    Check one Euler step from (1, 1, 1) against the hand-computed values.
    """
    system = LorenzSystem(1.0, 1.0, 1.0)
    got = system.update(0.01)
    expected = (1.0, 1.0 + 0.26, 1.0 + (1.0 - constants.BETA) * 0.01)
    logger.debug("selftest got=%s expected=%s", got, expected)

    replay = LorenzSystem(1.0, 1.0, 1.0)
    deterministic = simulate(replay, 100).tobytes() == simulate(LorenzSystem(1.0, 1.0, 1.0), 100).tobytes()

    if all(math.isclose(g, e, rel_tol=1e-12) for g, e in zip(got, expected)) and deterministic:
        typer.secho("Selftest passed (single step + determinism).", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Selftest FAILED. got={got} expected={expected}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
