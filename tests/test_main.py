"""Tests for the command-line entry point."""

import pytest

import swapbot.main as main_module
from conftest import TOKEN_ADDRESS, TX_HASH


class TestMain:

    def test_success_exit_code(self, monkeypatch):
        received = []

        async def fake_run_swap(token_address, amount, slippage_override=None):
            received.append((token_address, amount, slippage_override))
            return TX_HASH

        monkeypatch.setattr(main_module, "run_swap", fake_run_swap)
        assert main_module.main(["swap", TOKEN_ADDRESS, "--amount", "0.01", "--slippage", "2"]) == 0
        assert received == [(TOKEN_ADDRESS, "0.01", "2")]

    def test_default_slippage_is_none(self, monkeypatch):
        received = []

        async def fake_run_swap(token_address, amount, slippage_override=None):
            received.append(slippage_override)
            return TX_HASH

        monkeypatch.setattr(main_module, "run_swap", fake_run_swap)
        assert main_module.main(["swap", TOKEN_ADDRESS, "--amount", "0.01"]) == 0
        assert received == [None]

    def test_failure_exit_code(self, monkeypatch):
        async def failing_run_swap(token_address, amount, slippage_override=None):
            raise RuntimeError("No suitable pools found")

        monkeypatch.setattr(main_module, "run_swap", failing_run_swap)
        assert main_module.main(["swap", TOKEN_ADDRESS, "--amount", "0.01"]) == 1

    def test_amount_is_required(self):
        with pytest.raises(SystemExit):
            main_module.main(["swap", TOKEN_ADDRESS])
