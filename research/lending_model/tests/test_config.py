"""Tests for config loading and logging setup"""
import logging
import textwrap

import pytest

from lending_model.src.config import AppConfig, load_config
from lending_model.src.constants import FIXED_ORACLE_PRICE
from lending_model.src.errors import InvalidLltvError
from lending_model.src.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def write(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(body))
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config == AppConfig()
    assert config.oracle.price == FIXED_ORACLE_PRICE


def test_no_path_gives_defaults(monkeypatch):
    monkeypatch.delenv("LENDING_MODEL_CONFIG", raising=False)
    assert load_config() == AppConfig()


def test_loads_yaml_with_env_interpolation(tmp_path, monkeypatch):
    monkeypatch.setenv("ORACLE_PRICE", "250000")
    path = write(tmp_path, """
        oracle:
          price: ${ORACLE_PRICE}
        market:
          loan_token_mint: USDT
          lltv: 90000000
        logging:
          level: debug
    """)
    config = load_config(path)
    assert config.oracle.price == 250_000
    assert config.market.loan_token_mint == "USDT"
    assert config.market.collateral_token_mint == "SOL"
    assert config.market.lltv == 90_000_000
    assert config.logging.level == "DEBUG"


def test_path_from_environment(tmp_path, monkeypatch):
    path = write(tmp_path, "oracle:\n  price: 5\n")
    monkeypatch.setenv("LENDING_MODEL_CONFIG", str(path))
    assert load_config().oracle.price == 5


def test_invalid_values(tmp_path):
    with pytest.raises(InvalidLltvError):
        load_config(write(tmp_path, "market:\n  lltv: 0\n"))
    with pytest.raises(ValueError):
        load_config(write(tmp_path, "oracle:\n  price: -1\n"))


def test_empty_file(tmp_path):
    assert load_config(write(tmp_path, "")) == AppConfig()


class TestConfigureLogging:
    def test_sets_info_level(self):
        configure_logging("INFO")
        assert logging.getLogger().level == logging.INFO

    def test_sets_debug_level(self):
        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_silences_matplotlib(self):
        configure_logging("DEBUG")
        assert logging.getLogger("matplotlib").level == logging.WARNING

    def test_invalid_level_defaults_to_info(self):
        configure_logging("NONEXISTENT")
        assert logging.getLogger().level == logging.INFO
