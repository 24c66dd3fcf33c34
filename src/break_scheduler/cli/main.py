"""CLI commands for Break Scheduler using Typer."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from break_scheduler import __version__
from break_scheduler.core.config import Settings, get_settings
from break_scheduler.storage.state_store import StateStore
from break_scheduler.timer.display import cycles_label, format_clock, phase_label, window_title
from break_scheduler.timer.driver import TimerDriver
from break_scheduler.timer.durations import format_duration
from break_scheduler.timer.editor import ConfigEditor
from break_scheduler.timer.errors import InvalidConfigurationError
from break_scheduler.timer.scheduler import BreakScheduler
from break_scheduler.timer.schemas import DURATION_FIELDS, RawInputs, SchedulerSnapshot, TimerConfig

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="break-scheduler",
    help="Work/break interval timer with enforced breaks.",
    add_completion=False,
)

console = Console()

CONTROL_ACTIONS = ("start", "pause", "reset", "switch", "skip", "release", "enforce", "work", "stop")

FIELD_ALIASES = {
    "work": "work_duration",
    "short": "short_break_duration",
    "short-break": "short_break_duration",
    "long": "long_break_duration",
    "long-break": "long_break_duration",
    "sessions": "sessions_before_long_break",
    "cycles": "total_cycles",
}

FIELD_LABELS = {
    "work_duration": "Work Duration",
    "short_break_duration": "Short Break",
    "long_break_duration": "Long Break",
    "sessions_before_long_break": "Sessions before Long Break",
    "total_cycles": "Total Cycles (0 for infinite)",
}


def setup_logging(log_level: str, log_file: Path | None = None, stream: bool = True) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if stream:
        handlers.append(logging.StreamHandler())

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def resolve_field(name: str) -> str:
    """Map a CLI field name (``work``, ``short-break``, ``total_cycles``...) to a config field."""
    key = name.strip().lower()
    if key in FIELD_ALIASES:
        return FIELD_ALIASES[key]
    key = key.replace("-", "_")
    if key in FIELD_LABELS:
        return key
    raise InvalidConfigurationError(f"Unknown configuration field: {name}")


def load_editor(store: StateStore, settings: Settings) -> ConfigEditor:
    """Editor over the stored configuration and the edit text saved with it."""
    config = store.load_config_or_default(settings.defaults)
    raw_inputs = store.load_raw_inputs()
    if raw_inputs is None or not raw_inputs.describes(config):
        if raw_inputs is not None:
            logger.warning("Stored raw inputs do not match the configuration, rebuilding them")
        raw_inputs = RawInputs.from_config(config)
    return ConfigEditor(config, raw_inputs)


# =============================================================================
# Control file
# =============================================================================


def write_control(control_file: Path, action: str) -> None:
    """Write a control command for the running timer."""
    control_file.parent.mkdir(parents=True, exist_ok=True)
    control_file.write_text(json.dumps({"action": action, "timestamp": datetime.now().isoformat()}))


def read_control(control_file: Path) -> dict | None:
    """Read and clear the control command."""
    if not control_file.exists():
        return None
    try:
        data = json.loads(control_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Discarding unreadable control file: {e}")
        data = None
    control_file.unlink(missing_ok=True)
    return data if isinstance(data, dict) else None


async def apply_control(driver: TimerDriver, store: StateStore, action: str) -> str | None:
    """Run one control action against the driver. Returns a message to show, if any."""
    if action == "start":
        await driver.start()
    elif action == "pause":
        await driver.pause()
    elif action == "reset":
        await driver.reset()
    elif action == "switch":
        await driver.switch_mode()
    elif action == "skip":
        await driver.skip()
    elif action == "release":
        await driver.set_enforced(False)
    elif action == "enforce":
        await driver.set_enforced(True)
    elif action == "work":
        was_break = driver.scheduler.is_break
        await driver.leave_break()
        if was_break and driver.scheduler.is_break:
            return "Break is enforced: release it first or skip"
    elif action == "reload":
        config = store.load_config()
        if config is not None:
            await driver.configure(config)
    else:
        logger.warning(f"Unknown control action: {action}")
    return None


# =============================================================================
# Rendering
# =============================================================================


def render_status(
    snapshot: SchedulerSnapshot,
    config: TimerConfig,
    enforced: bool,
    note: str | None = None,
) -> Panel:
    """Timer panel for the live display."""
    clock = Text(format_clock(snapshot.time_left), style="bold")
    state = "[green]running[/green]" if snapshot.is_running else "[yellow]paused[/yellow]"

    lines = [
        clock,
        Text.from_markup(f"{phase_label(snapshot)} ({state})"),
        Text(f"Completed Cycles: {cycles_label(snapshot, config)}"),
    ]
    if snapshot.is_break:
        if enforced:
            lines.append(Text.from_markup("[red]Break enforced[/red] (control: release, skip)"))
        else:
            lines.append(Text.from_markup("[green]Break released[/green] (control: work)"))
    if note:
        lines.append(Text(note, style="dim"))

    border = "cyan" if snapshot.is_break else "green"
    return Panel(Group(*lines), title=window_title(snapshot), border_style=border)


def config_table(editor: ConfigEditor) -> Table:
    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_column("Seconds", justify="right")

    config = editor.config
    for field, label in FIELD_LABELS.items():
        value = getattr(config, field)
        if field in DURATION_FIELDS:
            table.add_row(label, getattr(editor.raw_inputs, field), str(value))
        else:
            table.add_row(label, str(value), "")
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command()
def run(
    fresh: bool = typer.Option(
        False,
        "--fresh",
        help="Ignore the saved timer state and start from work session 1",
    ),
    paused: bool = typer.Option(
        False,
        "--paused",
        "-p",
        help="Do not start the countdown automatically",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Run the timer in the foreground."""
    settings = get_settings()
    settings.ensure_directories()
    setup_logging(log_level or settings.log_level, settings.log_file, stream=False)

    store = StateStore(settings.state_dir)

    async def run_timer() -> SchedulerSnapshot:
        config = store.load_config_or_default(settings.defaults)
        saved = None if fresh else store.load_state()
        if saved is not None:
            scheduler = BreakScheduler.from_snapshot(config, saved)
            logger.info(f"Resumed saved state: {window_title(saved)}")
        else:
            scheduler = BreakScheduler(config)

        driver = TimerDriver(
            scheduler,
            on_change=store.save_state,
            interval=settings.tick_interval_seconds,
        )
        # Stale commands from an earlier run must not replay.
        settings.control_file.unlink(missing_ok=True)

        tick_task = asyncio.create_task(driver.run())
        await driver.publish()
        if not paused:
            await driver.start()

        note = None
        try:
            with Live(console=console, refresh_per_second=4, transient=False) as live:
                while True:
                    ctrl = read_control(settings.control_file)
                    if ctrl:
                        action = ctrl.get("action")
                        if action == "stop":
                            break
                        note = await apply_control(driver, store, str(action))

                    live.update(
                        render_status(
                            scheduler.snapshot(), scheduler.config, scheduler.enforced, note
                        )
                    )
                    await asyncio.sleep(settings.control_poll_seconds)
        finally:
            await driver.stop()
            if not tick_task.done():
                tick_task.cancel()
            await driver.pause()
        return scheduler.snapshot()

    console.print("[green]Break timer running[/green] (Ctrl+C or 'break-scheduler control stop' to quit)")
    try:
        final = asyncio.run(run_timer())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        return

    console.print(f"\n[yellow]Stopped at[/yellow] {window_title(final)}")


@app.command()
def control(
    action: str = typer.Argument(..., help=f"Action: {', '.join(CONTROL_ACTIONS)}"),
) -> None:
    """Send a command to the running timer."""
    action = action.strip().lower()
    if action == "resume":
        action = "start"
    if action not in CONTROL_ACTIONS:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print(f"Valid actions: {', '.join(CONTROL_ACTIONS)}")
        raise typer.Exit(1)

    write_control(get_settings().control_file, action)
    console.print(f"[green]Sent {action} command[/green]")


@app.command(name="set")
def set_field(
    field: str = typer.Argument(..., help="work, short-break, long-break, sessions or cycles"),
    value: str = typer.Argument(..., help="Duration expression (e.g. '25m', '+5m', '1m 30s') or a number"),
) -> None:
    """Change one configuration value."""
    settings = get_settings()
    store = StateStore(settings.state_dir)
    editor = load_editor(store, settings)

    try:
        name = resolve_field(field)
        if name in DURATION_FIELDS:
            applied = editor.commit_text(name, value)
        else:
            try:
                number = int(value.strip())
            except ValueError:
                raise InvalidConfigurationError(f"{FIELD_LABELS[name]} must be a whole number") from None
            editor.commit_value(name, number)
            applied = True
    except InvalidConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not applied:
        current = getattr(editor.config, name)
        console.print(
            f"[yellow]Invalid duration {value!r}, keeping {format_duration(current)}[/yellow]"
        )
        raise typer.Exit(1)

    store.save_config(editor.config)
    store.save_raw_inputs(editor.raw_inputs)
    if settings.control_file.parent.exists():
        write_control(settings.control_file, "reload")

    new_value = getattr(editor.config, name)
    if name in DURATION_FIELDS:
        console.print(f"[green]{FIELD_LABELS[name]}:[/green] {format_duration(new_value)} ({new_value} seconds)")
    else:
        console.print(f"[green]{FIELD_LABELS[name]}:[/green] {new_value}")


@app.command(name="config")
def show_config() -> None:
    """Show the timer configuration."""
    settings = get_settings()
    store = StateStore(settings.state_dir)
    console.print(config_table(load_editor(store, settings)))


@app.command()
def status() -> None:
    """Show the last saved timer state."""
    settings = get_settings()
    store = StateStore(settings.state_dir)
    config = store.load_config_or_default(settings.defaults)
    snapshot = store.load_state()

    if snapshot is None:
        console.print("[dim]No saved timer state. Use 'break-scheduler run' to start.[/dim]")
        return

    enforced = snapshot.is_break and BreakScheduler.from_snapshot(config, snapshot).enforced
    console.print(render_status(snapshot, config, enforced))


@app.command()
def version() -> None:
    """Show the version."""
    console.print(f"break-scheduler {__version__}")


@app.callback()
def main_callback() -> None:
    """Break Scheduler - work/break interval timer with enforced breaks."""
    pass


if __name__ == "__main__":
    app()
