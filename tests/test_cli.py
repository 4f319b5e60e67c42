"""Tests for the command line interface."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from govee_kettle import cli
from govee_kettle.exceptions import DeviceUnreachableError
from govee_kettle.kettle import GoveeKettle
from govee_kettle.protocol import CMD_MODE_GREEN_TEA, CMD_POWER_OFF, build_frame
from govee_kettle.surface import InMemoryControlSurface


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render rich output wide enough that frames are never wrapped."""
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def runner():
    return CliRunner()


def report(hex_head: str) -> str:
    return build_frame(bytes.fromhex(hex_head))


def test_decode(runner):
    """Test decoding a command frame and a report frame."""
    result = runner.invoke(cli.main, ["decode", CMD_MODE_GREEN_TEA, report("aa10011b58")])

    assert result.exit_code == 0, result.output
    assert CMD_MODE_GREEN_TEA in result.output
    assert "0500" in result.output
    assert "Command" in result.output
    assert "Temperature" in result.output
    assert "1b58" in result.output
    assert "bad" not in result.output


def test_decode_malformed(runner):
    """Test malformed frames are shown instead of aborting."""
    result = runner.invoke(cli.main, ["decode", "qgU="])

    assert result.exit_code == 0, result.output
    assert "position 3 requested" in result.output


def test_decode_requires_frames(runner):
    """Test decode needs at least one frame."""
    result = runner.invoke(cli.main, ["decode"])

    assert result.exit_code != 0


def test_commands(runner):
    """Test listing the command table."""
    result = runner.invoke(cli.main, ["commands"])

    assert result.exit_code == 0, result.output
    assert CMD_POWER_OFF in result.output
    assert "Mode Black Tea/Boil" in result.output
    assert "Mode Custom Mode 2" in result.output


def test_replay(runner, tmp_path):
    """Test replaying report batches."""
    reports = tmp_path / "reports.txt"
    reports.write_text(
        "\n".join(
            [
                f"{report('aa05000400')} {report('aa1901')}",
                "",
                f"{report('aa10011b58')},{report('aa2201')}",
            ]
        )
    )

    result = runner.invoke(cli.main, ["replay", str(reports)])

    assert result.exit_code == 0, result.output
    assert "batch of 2 -> on: coffee" in result.output
    assert "21.1°C" in result.output


def test_replay_with_config(runner, tmp_path):
    """Test replay honours hidden toggles."""
    reports = tmp_path / "reports.txt"
    reports.write_text(f"{report('aa05000400')} {report('aa1901')}\n")
    config = tmp_path / "kettle.json"
    config.write_text(json.dumps({"name": "Office", "hide_mode_coffee": True}))

    result = runner.invoke(cli.main, ["replay", str(reports), "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "on: none" in result.output
    assert "Office Status" in result.output


def test_replay_invalid_config(runner, tmp_path):
    """Test an invalid config file is a usage error."""
    reports = tmp_path / "reports.txt"
    reports.write_text("")
    config = tmp_path / "kettle.json"
    config.write_text(json.dumps({"hide_mode_coffee": "sometimes"}))

    result = runner.invoke(cli.main, ["replay", str(reports), "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid kettle configuration" in result.output


def test_control_connection_failure(runner):
    """Test a failed connection is reported."""
    mock_client = MagicMock()
    mock_client.connect = AsyncMock(side_effect=DeviceUnreachableError("no device"))
    mock_client.disconnect = AsyncMock()

    with patch("govee_kettle.cli.GoveeKettleBLEClient", return_value=mock_client):
        result = runner.invoke(cli.main, ["control", "AA:BB:CC:DD:EE:FF"])

    assert result.exit_code == 0, result.output
    assert "Connection failed: no device" in result.output


def test_control_attaches_before_connecting(runner):
    """Test reports arriving while connecting reach exposed toggles."""
    surface = InMemoryControlSurface()
    mock_client = MagicMock()
    mock_client.disconnect = AsyncMock()

    def make_client(address, notification_callback):
        async def connect():
            notification_callback([report("aa05000400"), report("aa1901")])
            raise DeviceUnreachableError("dropped")

        mock_client.connect = AsyncMock(side_effect=connect)
        return mock_client

    with patch("govee_kettle.cli.GoveeKettleBLEClient", side_effect=make_client):
        with patch("govee_kettle.cli.InMemoryControlSurface", return_value=surface):
            result = runner.invoke(cli.main, ["control", "AA:BB:CC:DD:EE:FF"])

    assert result.exit_code == 0, result.output
    assert surface.active == ["coffee"]


class TestKettleShell:
    """Test the interactive shell."""

    @pytest.fixture
    def shell(self, mock_sender):
        surface = InMemoryControlSurface()
        kettle = GoveeKettle(mock_sender, surface)
        kettle.attach()
        return cli.KettleShell(kettle, surface)

    @pytest.mark.asyncio
    async def test_on_and_off(self, shell, mock_sender):
        """Test switching a mode on and off from the shell."""
        inputs = ["on coffee", "status", "off coffee", "quit"]
        with patch("govee_kettle.cli.ainput", AsyncMock(side_effect=inputs)):
            with patch("govee_kettle.kettle.asyncio.sleep", new_callable=AsyncMock):
                await shell.loop()

        assert mock_sender.send.await_count == 3
        assert shell.kettle.cache.power_on is False

    @pytest.mark.asyncio
    async def test_no_response(self, shell, mock_sender, capsys):
        """Test a failed update is reported without leaving the shell."""
        mock_sender.send.side_effect = DeviceUnreachableError("timeout")
        inputs = ["on coffee", "help", "bogus", "on", "exit"]
        with patch("govee_kettle.cli.ainput", AsyncMock(side_effect=inputs)):
            with patch("govee_kettle.kettle.asyncio.sleep", new_callable=AsyncMock):
                await shell.loop()
                await shell.kettle.async_wait_pending()

        output = capsys.readouterr().out
        assert "No response" in output
        assert "Unknown command: bogus" in output
        assert "Usage: on <mode>" in output

    @pytest.mark.asyncio
    async def test_unknown_mode(self, shell, mock_sender, capsys):
        """Test an unknown mode name is reported."""
        with patch("govee_kettle.cli.ainput", AsyncMock(side_effect=["on espresso", EOFError()])):
            await shell.loop()

        assert "'espresso' is not exposed" in capsys.readouterr().out
        mock_sender.send.assert_not_awaited()
