"""
Unit tests for token metadata and unit conversion.
"""

from decimal import Decimal

import pytest

from irishub_sdk.runtime.errors import ConversionError
from irishub_sdk.types.coins import Coin, DecCoin
from irishub_sdk.types.token import Token


@pytest.fixture
def iris():
    return Token(symbol="IRIS", scale=18, min_unit="iris-atto")


class TestToken:

    def test_denoms_lowercased(self, iris):
        assert iris.symbol == "iris"
        assert iris.matches("IRIS-ATTO")

    def test_min_unit_defaults_to_symbol(self):
        token = Token(symbol="abc", scale=0)
        assert token.min_unit == "abc"

    def test_supply_strings(self):
        token = Token.model_validate({"symbol": "abc", "initial_supply": "1000", "max_supply": ""})
        assert token.initial_supply == 1000
        assert token.max_supply == 0

    def test_scale_bounds(self):
        with pytest.raises(ValueError):
            Token(symbol="abc", scale=19)


class TestConversion:

    def test_to_min(self, iris):
        assert iris.convert_to_min_coin(DecCoin("iris", "0.6")) == Coin("iris-atto", 600000000000000000)

    def test_to_min_keeps_min_unit(self, iris):
        assert iris.convert_to_min_coin(Coin("iris-atto", 42)) == Coin("iris-atto", 42)

    def test_to_min_too_precise(self):
        token = Token(symbol="abc", scale=2, min_unit="abc-min")
        with pytest.raises(ConversionError):
            token.convert_to_min_coin(DecCoin("abc", "0.001"))

    def test_to_min_foreign_denom(self, iris):
        with pytest.raises(ConversionError):
            iris.convert_to_min_coin(DecCoin("abc", "1"))

    def test_to_main(self, iris):
        main = iris.convert_to_main_coin(Coin("iris-atto", 1500000000000000000))
        assert main == DecCoin("iris", Decimal("1.5"))

    def test_to_main_keeps_main_unit(self, iris):
        assert iris.convert_to_main_coin(DecCoin("iris", "2")) == DecCoin("iris", Decimal("2"))
