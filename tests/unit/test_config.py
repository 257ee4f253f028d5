"""
Unit tests for configuration loading and logging setup.
"""

import logging
from pathlib import Path

import pytest

from dutchauction.core.config import ENV_PREFIX, AuctionConfig, load_config
from dutchauction.core.errors import InvalidAuctionParams
from dutchauction.utils.logger import AuctionLogger, get_logger, setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of these tests."""
    import os

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)


class TestAuctionConfig:
    """Tests for defaults and conversion."""

    def test_defaults(self):
        cfg = AuctionConfig()
        assert (cfg.reserve_price, cfg.duration_steps, cfg.price_decrement) == (500, 10, 50)
        assert cfg.log_to_file is False

    def test_to_params(self):
        params = AuctionConfig().to_params()
        assert params.initial_price == 1000

    def test_invalid_params(self):
        with pytest.raises(InvalidAuctionParams):
            AuctionConfig(duration_steps=0).to_params()

    def test_level(self):
        assert AuctionConfig(log_level="debug").level == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            AuctionConfig(log_level="chatty").level


class TestLoadConfig:
    """Tests for dotenv and environment overrides."""

    def test_no_sources(self):
        assert load_config() == AuctionConfig()

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / "auction.env"
        env_file.write_text(
            "DUTCH_AUCTION_RESERVE_PRICE=100\n"
            "DUTCH_AUCTION_DURATION_STEPS=4\n"
            "DUTCH_AUCTION_LOG_TO_FILE=true\n"
            "DUTCH_AUCTION_LOG_DIR=/tmp/auction-logs\n"
            "UNRELATED=1\n"
        )

        cfg = load_config(str(env_file))

        assert cfg.reserve_price == 100
        assert cfg.duration_steps == 4
        assert cfg.price_decrement == 50
        assert cfg.log_to_file is True
        assert cfg.log_dir == Path("/tmp/auction-logs")

    def test_environment_wins(self, tmp_path, monkeypatch):
        env_file = tmp_path / "auction.env"
        env_file.write_text("DUTCH_AUCTION_PRICE_DECREMENT=7\n")
        monkeypatch.setenv("DUTCH_AUCTION_PRICE_DECREMENT", "9")

        assert load_config(str(env_file)).price_decrement == 9

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.env"))

    def test_malformed_integer(self, monkeypatch):
        monkeypatch.setenv("DUTCH_AUCTION_RESERVE_PRICE", "lots")
        with pytest.raises(ValueError, match="must be an integer"):
            load_config()


class TestLogging:
    """Tests for logger setup."""

    def test_subsystem_logger_name(self):
        assert get_logger("auction").name == "dutchauction.auction"

    def test_file_logging(self, tmp_path):
        setup_logging(level=logging.DEBUG, log_dir=str(tmp_path / "logs"), log_to_file=True)
        try:
            get_logger("test").info("hello file")
            for handler in logging.getLogger("dutchauction").handlers:
                handler.flush()
            line = (tmp_path / "logs" / "dutchauction.log").read_text().strip()
            assert line.endswith("[dutchauction.test] INFO     hello file")
        finally:
            AuctionLogger.reset()

    def test_setup_idempotent(self):
        AuctionLogger.reset()
        AuctionLogger.setup()
        AuctionLogger.setup()
        assert len(logging.getLogger("dutchauction").handlers) == 1
        AuctionLogger.reset()

    def test_reset_closes_file_handler(self, tmp_path):
        setup_logging(log_dir=str(tmp_path), log_to_file=True)
        handlers = list(logging.getLogger("dutchauction").handlers)
        AuctionLogger.reset()
        assert logging.getLogger("dutchauction").handlers == []
        file_handler = next(h for h in handlers if isinstance(h, logging.FileHandler))
        assert file_handler.stream is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
