"""
Tests for the command line interface.
"""

import pytest
from click.testing import CliRunner

from dutchauction.cli.main import cli
from dutchauction.core.config import ENV_PREFIX
from dutchauction.utils.logger import AuctionLogger


@pytest.fixture
def runner(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield CliRunner()
    # Handlers were bound to the runner's captured stdout
    AuctionLogger.reset()


class TestPricingCommands:
    """Tests for schedule and price."""

    def test_price_after_five_steps(self, runner):
        result = runner.invoke(cli, ["price", "--elapsed", "5"])
        assert result.exit_code == 0
        assert result.output.strip().splitlines()[-1] == "750"

    def test_price_pinned(self, runner):
        result = runner.invoke(cli, ["price", "--elapsed", "40"])
        assert result.exit_code == 0
        assert result.output.strip().splitlines()[-1] == "500"

    def test_price_overrides(self, runner):
        result = runner.invoke(
            cli, ["price", "--reserve", "0", "--duration", "4", "--decrement", "25", "--elapsed", "1"]
        )
        assert result.exit_code == 0
        assert result.output.strip().splitlines()[-1] == "75"

    def test_negative_elapsed(self, runner):
        result = runner.invoke(cli, ["price", "--elapsed", "-1"])
        assert result.exit_code != 0

    def test_invalid_params(self, runner):
        result = runner.invoke(cli, ["price", "--duration", "0", "--elapsed", "1"])
        assert result.exit_code != 0
        assert "invalid auction parameters" in result.output

    def test_schedule(self, runner):
        result = runner.invoke(cli, ["schedule", "--extra", "1"])
        assert result.exit_code == 0
        assert "Initial price: 1000" in result.output
        assert "EXPIRED" in result.output

    def test_schedule_default_range(self, runner):
        """Steps 0 through duration + 1 are listed."""
        result = runner.invoke(cli, ["schedule"])
        assert result.exit_code == 0
        rows = [line.split() for line in result.output.splitlines() if line.strip().endswith(("OPEN", "EXPIRED"))]
        assert [int(row[0]) for row in rows] == list(range(12))
        assert rows[-1] == ["11", "500", "EXPIRED"]


class TestConfigCommand:
    """Tests for config loading through the CLI."""

    def test_config_defaults(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "Reserve price:   500" in result.output

    def test_config_file(self, runner, tmp_path):
        env_file = tmp_path / "auction.env"
        env_file.write_text("DUTCH_AUCTION_RESERVE_PRICE=42\n")
        result = runner.invoke(cli, ["--config", str(env_file), "config"])
        assert result.exit_code == 0
        assert "Reserve price:   42" in result.output

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.env"), "config"])
        assert result.exit_code != 0


class TestDemo:
    """Tests for the end-to-end demo."""

    @pytest.mark.parametrize("variant", ["basic", "collectible", "token"])
    def test_demo_variants(self, runner, variant):
        result = runner.invoke(cli, ["demo", "--variant", variant])
        assert result.exit_code == 0, result.output
        assert "rejected: bid amount below current price" in result.output
        assert "rejected: auction already has an accepted winner" in result.output
        assert "State: WON" in result.output
        assert "Demo complete" in result.output

    def test_demo_token_requires_allowance(self, runner):
        result = runner.invoke(cli, ["demo", "--variant", "token"])
        assert "insufficient balance or spending authorization" in result.output
        assert "owner is winner: True" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
