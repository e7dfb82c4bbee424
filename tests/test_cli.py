"""Tests for argument handling in scripts/run_game.py."""

import importlib.util
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

SCRIPT = Path(__file__).parent.parent / "scripts" / "run_game.py"


@pytest.fixture
def run_game():
    spec = importlib.util.spec_from_file_location("run_game", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestArguments:
    """Bad settings are reported as usage errors before a game starts."""

    @pytest.mark.asyncio
    async def test_zero_rounds(self, run_game, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_game.py", "--rounds", "0"])

        with pytest.raises(SystemExit) as exc_info:
            await run_game.main()

        assert exc_info.value.code == 2
        assert "invalid game settings: total_rounds" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_negative_delay(self, run_game, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_game.py", "--guess-delay", "-1"])

        with pytest.raises(SystemExit) as exc_info:
            await run_game.main()

        assert exc_info.value.code == 2
        assert "guess_delay" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_unknown_provider(self, run_game, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_game.py", "--player", "skynet:t-800"])

        with pytest.raises(SystemExit) as exc_info:
            await run_game.main()

        assert exc_info.value.code == 2
        assert "Unknown provider" in capsys.readouterr().err
