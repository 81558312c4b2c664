"""
Coin conversion between main and minimal units.

Token metadata is resolved through an injected ``TokenCache``; on a miss the
token registry is queried on chain and the result is stored under both the
symbol and the minimal-unit name. Cache entries never expire: token metadata
is immutable on chain.
"""

from __future__ import annotations
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..runtime.codec import Codec
from ..runtime.errors import SdkError, TokenNotFoundError
from ..types.coins import Coin, Coins, DecCoin, DecCoins, sort_coins
from ..types.token import Token

logger = logging.getLogger(__name__)

TOKEN_QUERY_PATH = "custom/asset/token"
LEGACY_MIN_SUFFIX = "-min"

# (path, payload) -> raw response value
Querier = Callable[[str, Any], bytes]


class TokenCache:
    """
    Thread-safe token metadata cache.

    Keys are ``token:<denom>`` with the denomination lower-cased; every token
    is reachable by its symbol and by its minimal-unit name.
    """

    KEY_FORMAT = "token:%s"

    def __init__(self):
        self._tokens: Dict[str, Token] = {}
        self._lock = threading.RLock()

    @classmethod
    def key(cls, denom: str) -> str:
        return cls.KEY_FORMAT % denom.lower()

    def get(self, denom: str) -> Optional[Token]:
        with self._lock:
            return self._tokens.get(self.key(denom))

    def put(self, token: Token) -> None:
        with self._lock:
            self._tokens[self.key(token.symbol)] = token
            self._tokens[self.key(token.min_unit)] = token

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __contains__(self, denom: str) -> bool:
        return self.get(denom) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)


class CoinConverter:
    """
    Converts coins between main and minimal units.

    Example:
        ```python
        converter = CoinConverter(client.query, TokenCache())
        fee = converter.to_min_coin(DecCoin("iris", Decimal("0.6")))
        ```
    """

    def __init__(self, querier: Querier, cache: Optional[TokenCache] = None,
                 codec: Optional[Codec] = None):
        self._query = querier
        self.cache = cache if cache is not None else TokenCache()
        self.codec = codec or Codec()

    def query_token(self, denom: str) -> Token:
        """
        Resolve token metadata for a denomination.

        Args:
            denom: Symbol or minimal-unit name

        Returns:
            Token metadata

        Raises:
            TokenNotFoundError: If the token is unknown or the lookup fails
        """
        token = self.cache.get(denom)
        if token is not None:
            return token

        query_denom = denom.lower()
        if query_denom.endswith(LEGACY_MIN_SUFFIX):
            query_denom = query_denom[:-len(LEGACY_MIN_SUFFIX)]
        logger.debug("token cache miss for %s, querying %s", denom, query_denom)

        try:
            raw = self._query(TOKEN_QUERY_PATH, {"denom": query_denom})
        except SdkError as e:
            raise TokenNotFoundError(f"token {denom} not found: {e.log}",
                                     details={"denom": denom}, cause=e)
        if not raw:
            raise TokenNotFoundError(f"token {denom} not found", details={"denom": denom})

        try:
            data = self.codec.unmarshal_json(raw)
            if isinstance(data, dict) and "type" in data and "value" in data:
                data = data["value"]
            token = Token.model_validate(data)
        except (SdkError, ValueError) as e:
            raise TokenNotFoundError(f"cannot decode token {denom}: {e}",
                                     details={"denom": denom}, cause=e)

        self.cache.put(token)
        return token

    def to_min_coin(self, *coins: Union[DecCoin, Coin]) -> Coins:
        """
        Convert coins to their minimal units.

        Coins already in the minimal unit pass through unchanged. The result is
        sorted by denomination; any single failure fails the whole call.

        Raises:
            TokenNotFoundError: If a token cannot be resolved
            ConversionError: If an amount is finer than the token's scale
        """
        result: List[Coin] = []
        for coin in _flatten(coins):
            token = self.query_token(coin.denom)
            result.append(token.convert_to_min_coin(coin))
        return sort_coins(result)

    def to_main_coin(self, *coins: Union[Coin, DecCoin]) -> DecCoins:
        """
        Convert coins to their main units, sorted by denomination.

        Raises:
            TokenNotFoundError: If a token cannot be resolved
            ConversionError: If a denomination does not belong to its token
        """
        result: List[DecCoin] = []
        for coin in _flatten(coins):
            token = self.query_token(coin.denom)
            result.append(token.convert_to_main_coin(coin))
        return sort_coins(result)


def _flatten(coins: Iterable[Any]) -> List[Union[Coin, DecCoin]]:
    # accepts both to_min_coin(a, b) and to_min_coin([a, b])
    flat: List[Union[Coin, DecCoin]] = []
    for coin in coins:
        if isinstance(coin, (list, tuple)):
            flat.extend(coin)
        else:
            flat.append(coin)
    return flat
