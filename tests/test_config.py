"""Tests for slippage validation and swap configuration resolution."""

import math

import pytest

from swapbot.configuration.config import resolve_swap_config, slippage_to_bps, validate_slippage
from swapbot.core.structures.errors import SwapValidationError


class TestValidateSlippage:

    @pytest.mark.parametrize("value", [0.01, 0.5, 1.0, 1.15, 50.0, 99.99])
    def test_accepts_valid_values(self, value):
        assert validate_slippage(value) == value

    @pytest.mark.parametrize("value", [0.0, 0.001, 100.0, -1.0])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(SwapValidationError, match="Slippage must be between 0.01% and 99.99%"):
            validate_slippage(value)

    def test_rejects_nan(self):
        with pytest.raises(SwapValidationError, match="Invalid slippage: not a number"):
            validate_slippage(math.nan)

    def test_rejects_three_decimals(self):
        with pytest.raises(SwapValidationError, match="at most 2 decimal places"):
            validate_slippage(1.155)


class TestSlippageToBps:

    @pytest.mark.parametrize("percent,bps", [(0.01, 1), (0.5, 50), (1.0, 100), (1.15, 115), (2.55, 255),
                                             (99.99, 9999)])
    def test_conversion(self, percent, bps):
        assert slippage_to_bps(percent) == bps


class TestResolveSwapConfig:

    def test_environment_values(self, swap_settings):
        config = resolve_swap_config(swap_settings)
        assert config.slippage_percent == 1.0
        assert config.slippage_bps == 100
        assert config.deadline_seconds == 30
        assert config.min_liquidity_usd == 1000.0
        assert config.use_universal_router is False
        assert config.slippage_overridden is False
        assert config.chain_id_key == "bsc"

    def test_cli_override_wins(self, swap_settings):
        swap_settings.SLIPPAGE = "5"
        config = resolve_swap_config(swap_settings, "2.5")
        assert config.slippage_percent == 2.5
        assert config.slippage_bps == 250
        assert config.slippage_overridden is True

    def test_blank_override_falls_back_to_environment(self, swap_settings):
        swap_settings.SLIPPAGE = "0.75"
        config = resolve_swap_config(swap_settings, "  ")
        assert config.slippage_bps == 75
        assert config.slippage_overridden is False

    def test_unparsable_override(self, swap_settings):
        with pytest.raises(SwapValidationError, match="not a number"):
            resolve_swap_config(swap_settings, "abc")

    def test_missing_private_key(self, swap_settings):
        swap_settings.PRIVATE_KEY = ""
        with pytest.raises(SwapValidationError, match="Missing required environment variable: PRIVATE_KEY"):
            resolve_swap_config(swap_settings)

    def test_whitespace_private_key(self, swap_settings):
        swap_settings.PRIVATE_KEY = "   "
        with pytest.raises(SwapValidationError, match="PRIVATE_KEY cannot be empty or whitespace"):
            resolve_swap_config(swap_settings)

    def test_non_positive_deadline(self, swap_settings):
        swap_settings.DEADLINE_SECONDS = 0
        with pytest.raises(SwapValidationError) as exc_info:
            resolve_swap_config(swap_settings)
        assert exc_info.value.field == "DEADLINE_SECONDS"

    def test_negative_min_liquidity(self, swap_settings):
        swap_settings.MIN_LIQUIDITY_USD = -1.0
        with pytest.raises(SwapValidationError) as exc_info:
            resolve_swap_config(swap_settings)
        assert exc_info.value.field == "MIN_LIQUIDITY_USD"

    def test_validation_error_is_value_error(self, swap_settings):
        swap_settings.SLIPPAGE = "150"
        with pytest.raises(ValueError):
            resolve_swap_config(swap_settings)
