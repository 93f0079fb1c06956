"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from ledctl.api import Client
from ledctl.core.config import DEFAULT_BOARD
from ledctl.core.errors import LedctlError
from ledctl.core.model import ActionRequest, ReplyStatus
from ledctl.core.toolchain import LOG_LEVELS, ArduinoCli, resolve_sketch_dir

app = typer.Typer(help="Control board LEDs over serial and manage their sketches")


@app.callback()
def main(
    ctx: typer.Context,
    board: str = typer.Option(
        DEFAULT_BOARD, "--board", "-b", envvar="LEDCTL_BOARD", help="Target board ID"
    ),
    log_level: str = typer.Option("warning", "--log-level", help="Python log level"),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"board": board}


def _build_client(ctx: typer.Context) -> Client:
    client = Client(board_id=ctx.obj["board"])
    for warning in getattr(client, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return client


@app.command("led")
def control_led(
    ctx: typer.Context,
    port: str | None = typer.Option(None, "--port", "-p", help="Serial port (COM3, /dev/ttyACM0)"),
    led: int | None = typer.Option(None, "--led", help="Configured LED number (LED_<n>_PORT)"),
    on: bool = typer.Option(False, "--on", help="Turn LED on (white)"),
    off: bool = typer.Option(False, "--off", help="Turn LED off"),
    color: str | None = typer.Option(
        None, "--color", "-c", help="red, green, blue, yellow, purple, cyan, white, or R,G,B"
    ),
    blink: bool = typer.Option(False, "--blink", help="Blink (color from --color, default white)"),
    blink_color: str | None = typer.Option(None, "--blink-color", help="Blink in this color"),
    second_color: str | None = typer.Option(
        None, "--second-color", "-s", help="Second color for two-color blinking"
    ),
    interval: int | None = typer.Option(
        None, "--interval", "-i", help="Blink interval or rainbow speed in ms (50-5000)"
    ),
    rainbow: bool = typer.Option(False, "--rainbow", "-r", help="Rainbow effect"),
) -> None:
    """Send one LED command and report the device reply."""
    request = ActionRequest(
        on=on,
        off=off,
        color=color,
        blink=blink_color if blink_color else blink,
        second_color=second_color,
        rainbow=rainbow,
        interval=interval,
    )
    try:
        client = _build_client(ctx)
        result = client.execute(request, port=port, led=led)
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(f"Sent command: {result.command.wire.strip()} to {result.port}")
    if result.outcome.status is ReplyStatus.TIMED_OUT:
        typer.echo("No response received from device (timeout)")
    else:
        typer.echo(f"Device response: {result.outcome.payload}")
    typer.echo("Command executed")


@app.command("boards")
def list_boards(ctx: typer.Context) -> None:
    """List available boards and their LED protocol."""
    try:
        client = _build_client(ctx)
        for board in client.list_boards():
            typer.echo(f"{board.id}: {board.name} [{board.variant.value}] ({board.status})")
            pin = board.led.pin if board.led.pin is not None else "-"
            typer.echo(f"  led: pin {pin}, count {board.led.count}")
            port = board.default_port()
            if port:
                typer.echo(f"  default port: {port}")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("sketches")
def list_sketches(ctx: typer.Context) -> None:
    """List sketches available for the selected board."""
    try:
        board = _build_client(ctx).board
        if not board.sketches:
            typer.echo(f"No sketches available for {board.name}")
            return
        typer.echo(f"Sketches for {board.name}:")
        for sketch in board.sketches.values():
            typer.echo(f"  {sketch.name}: {sketch.description}")
            typer.echo(f"    path: {sketch.path}")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def _arduino(arduino_log_level: str, config_file: Path | None) -> ArduinoCli:
    return ArduinoCli(config_file=config_file, log_level=arduino_log_level)


_SKETCH_ROOT = typer.Option(Path("."), "--sketch-root", help="Directory sketch paths are relative to")
_CONFIG_FILE = typer.Option(None, "--config-file", help="arduino-cli config file")
_ARDUINO_LOG_LEVEL = typer.Option(
    "info", "--arduino-log-level", help=f"arduino-cli log level ({', '.join(LOG_LEVELS)})"
)


@app.command("compile")
def compile_sketch(
    ctx: typer.Context,
    sketch: str,
    sketch_root: Path = _SKETCH_ROOT,
    config_file: Path | None = _CONFIG_FILE,
    arduino_log_level: str = _ARDUINO_LOG_LEVEL,
) -> None:
    """Compile a sketch for the selected board."""
    try:
        board = _build_client(ctx).board
        sketch_dir = resolve_sketch_dir(board, sketch, sketch_root)
        output = _arduino(arduino_log_level, config_file).compile(board, sketch_dir)
        typer.echo(output, nl=False)
        typer.echo(f"Compiled {sketch} for {board.name}")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("deploy")
def deploy_sketch(
    ctx: typer.Context,
    sketch: str,
    port: str | None = typer.Option(None, "--port", "-p", help="Serial port"),
    sketch_root: Path = _SKETCH_ROOT,
    config_file: Path | None = _CONFIG_FILE,
    arduino_log_level: str = _ARDUINO_LOG_LEVEL,
) -> None:
    """Upload a compiled sketch to the selected board."""
    try:
        client = _build_client(ctx)
        board = client.board
        sketch_dir = resolve_sketch_dir(board, sketch, sketch_root)
        upload_port = client.resolve_port(port)
        output = _arduino(arduino_log_level, config_file).upload(board, sketch_dir, upload_port)
        typer.echo(output, nl=False)
        typer.echo(f"Uploaded {sketch} to {board.name} on {upload_port}")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


app.command("upload", help="Alias for deploy.")(deploy_sketch)


@app.command("install")
def install_dependencies(
    ctx: typer.Context,
    config_file: Path | None = _CONFIG_FILE,
    arduino_log_level: str = _ARDUINO_LOG_LEVEL,
) -> None:
    """Install the board core and libraries the selected board needs."""
    try:
        board = _build_client(ctx).board
        output = _arduino(arduino_log_level, config_file).install(board)
        typer.echo(output, nl=False)
        typer.echo(f"Installation complete for {board.name}")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("leds")
def list_leds(ctx: typer.Context) -> None:
    """List numbered LEDs configured through LED_<n>_PORT / LED_<n>_NAME."""
    try:
        leds = _build_client(ctx).list_leds()
        if not leds:
            typer.echo("No LEDs configured")
            return
        for mapping in leds:
            typer.echo(f"{mapping.number}: {mapping.name} ({mapping.port})")
    except LedctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("examples")
def show_examples() -> None:
    """Show usage examples."""
    typer.echo(
        "\n".join(
            [
                "ledctl led --on -p /dev/ttyACM0          # Turn LED on (white)",
                "ledctl led --off                         # Port from SERIAL_PORT",
                "ledctl led --color red                   # Solid red",
                "ledctl led --color 255,100,0             # Custom RGB",
                "ledctl led --blink                       # Blink white, 500ms",
                "ledctl led --blink-color green -i 300    # Blink green, 300ms",
                "ledctl led --blink -c red -s blue        # Alternate red/blue",
                "ledctl led --rainbow                     # Rainbow, 50ms steps",
                "ledctl -b arduino-uno-r4 led --blink     # Digital LED: plain BLINK",
                "ledctl compile UniversalLedControl --sketch-root ./firmware",
                "ledctl deploy UniversalLedControl -p COM3",
                "ledctl install",
            ]
        )
    )


def run() -> None:
    app()


if __name__ == "__main__":
    run()
