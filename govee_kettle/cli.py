"""Command line tools for Govee Kettle frames and control."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
from aioconsole import ainput
from rich.console import Console
from rich.table import Table

from .client import GoveeKettleBLEClient
from .config import DeviceConfig
from .exceptions import DeviceUnreachableError, GoveeKettleError, MalformedFrameError
from .kettle import GoveeKettle
from .protocol import (
    CMD_POWER_OFF,
    CMD_POWER_ON,
    MODE_COMMANDS,
    MODE_NAMES,
    decode_frame,
    describe_function,
)
from .surface import InMemoryControlSurface

console = Console()


class OfflineSender:
    """Sender for replaying reports without a kettle attached."""

    async def send(self, frame_b64: str) -> None:
        raise DeviceUnreachableError("No kettle connected")


def _load_config(config_path: Optional[Path]) -> DeviceConfig:
    if config_path is None:
        return DeviceConfig()
    try:
        return DeviceConfig.from_file(config_path)
    except GoveeKettleError as err:
        raise click.BadParameter(str(err), param_hint="--config") from err


def _status_table(kettle: GoveeKettle, surface: InMemoryControlSurface) -> Table:
    table = Table(title=f"{kettle.name} Status", show_header=True, header_style="bold magenta")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    power = kettle.cache.power_on
    table.add_row("Power", "Unknown" if power is None else ("ON" if power else "OFF"))
    mode = kettle.cache.current_mode
    table.add_row("Mode", MODE_NAMES.get(mode, mode or "Unknown"))
    for toggle in surface.toggles.values():
        table.add_row(toggle.spec.name, "ON" if toggle.on else "OFF")
    if surface.temperature_exposed:
        temp = surface.temperature
        table.add_row("Temperature", "Unknown" if temp is None else f"{temp:.1f}°C")
    return table


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Govee Kettle frame tools and BLE control."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command()
@click.argument("frames", nargs=-1, required=True)
def decode(frames: tuple[str, ...]):
    """Decode base64 FRAMES and show their fields."""
    table = Table(title="Frames")
    table.add_column("Frame", style="cyan")
    table.add_column("Marker", style="yellow")
    table.add_column("Function", style="green")
    table.add_column("Meaning", style="green")
    table.add_column("Payload", style="blue")
    table.add_column("Checksum")

    for command in frames:
        try:
            frame = decode_frame(command)
            function_code = frame.function_code
        except MalformedFrameError as err:
            table.add_row(command, "-", "-", f"[red]{err}[/red]", "-", "-")
            continue
        table.add_row(
            command,
            frame.marker,
            function_code,
            describe_function(function_code) if frame.is_report else "Command",
            frame.payload.hex(),
            "[green]ok[/green]" if frame.checksum_valid else "[red]bad[/red]",
        )

    console.print(table)


@main.command()
def commands():
    """List the command frames the kettle accepts."""
    table = Table(title="Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Frame", style="yellow")
    table.add_column("Hex", style="green")

    rows = [("Power Off", CMD_POWER_OFF), ("Power On", CMD_POWER_ON)]
    rows.extend((f"Mode {MODE_NAMES[mode]}", frame) for mode, frame in MODE_COMMANDS.items())
    for name, frame in rows:
        table.add_row(name, frame, decode_frame(frame).hex)

    console.print(table)


@main.command()
@click.argument("report_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="JSON file with kettle options")
def replay(report_file: Path, config_path: Optional[Path]):
    """Replay report batches from REPORT_FILE, one batch per line."""
    config = _load_config(config_path)
    surface = InMemoryControlSurface()

    async def run() -> None:
        async with GoveeKettle(OfflineSender(), surface, config) as kettle:
            for line in report_file.read_text(encoding="utf-8").splitlines():
                batch = line.replace(",", " ").split()
                if batch:
                    kettle.handle_batch(batch)
                    active = ", ".join(surface.active) or "none"
                    console.print(f"[dim]batch of {len(batch)} -> on: {active}[/dim]")
            console.print(_status_table(kettle, surface))

    asyncio.run(run())


class KettleShell:
    """Interactive control of a connected kettle."""

    def __init__(self, kettle: GoveeKettle, surface: InMemoryControlSurface):
        self.kettle = kettle
        self.surface = surface

    async def set_toggle(self, key: str, on: bool) -> None:
        try:
            await self.kettle.async_apply_toggle(key, on)
        except DeviceUnreachableError as err:
            console.print(f"[red]No response: {err}[/red]")
            return
        except GoveeKettleError as err:
            console.print(f"[red]{err}[/red]")
            return
        console.print(f"[green]{key} {'on' if on else 'off'}[/green]")

    def show_help(self) -> None:
        table = Table(title="Commands", show_header=True)
        table.add_column("Command", style="cyan")
        table.add_column("Description", style="green")

        table.add_row("on <mode>", f"Start a mode ({', '.join(self.kettle.toggles)})")
        table.add_row("off <mode>", "Switch the kettle off")
        table.add_row("status", "Show current status")
        table.add_row("quit", "Exit")
        console.print(table)

    async def loop(self) -> None:
        console.print("[bold blue]Govee Kettle BLE CLI[/bold blue]")
        console.print("Type 'help' for commands, 'quit' to exit\n")

        while True:
            try:
                cmd = (await ainput("kettle> ") or "").strip()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[yellow]Interrupted[/yellow]")
                break

            parts = cmd.split()
            command = parts[0].lower() if parts else "quit"
            args = parts[1:]

            if command in ("quit", "exit"):
                break
            elif command == "help":
                self.show_help()
            elif command == "status":
                console.print(_status_table(self.kettle, self.surface))
            elif command in ("on", "off"):
                if not args:
                    console.print(f"[red]Usage: {command} <mode>[/red]")
                else:
                    await self.set_toggle(args[0], command == "on")
            else:
                console.print(f"[red]Unknown command: {command}[/red]")
                console.print("Type 'help' for available commands")


@main.command()
@click.argument("address")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="JSON file with kettle options")
def control(address: str, config_path: Optional[Path]):
    """Connect to the kettle at ADDRESS and control it interactively."""
    config = _load_config(config_path)
    surface = InMemoryControlSurface()

    async def run() -> None:
        client = GoveeKettleBLEClient(
            address, notification_callback=lambda batch: kettle.handle_batch(batch)
        )
        kettle = GoveeKettle(client, surface, config)

        async with kettle:
            console.print(f"[green]Connecting to {address}...[/green]")
            try:
                await client.connect()
            except DeviceUnreachableError as err:
                console.print(f"[red]Connection failed: {err}[/red]")
                return

            try:
                await KettleShell(kettle, surface).loop()
            finally:
                await client.disconnect()
                console.print("[yellow]Disconnected[/yellow]")

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Exiting...[/yellow]")


if __name__ == "__main__":
    main()
