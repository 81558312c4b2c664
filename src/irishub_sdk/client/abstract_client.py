"""
Abstract client.

Composes the coin converter, transaction context, builder, broadcast
dispatcher and transaction querier into the public submission and query
operations.

A submission runs validate -> prepare -> build & sign -> serialize ->
dispatch. Each step's failure short-circuits the rest; nothing is retried.
The transaction context is rebuilt for every call and passed explicitly
through the pipeline. Submissions on one client instance are serialized so
that concurrent callers never sign with the same account sequence.
"""

from __future__ import annotations
import logging
import threading
from typing import Any, List, Optional, Sequence, Type, Union

from ..config import SDKConfig
from ..keys.keymanager import KeyManager, MemoryKeyManager
from ..rpc.client import TendermintRPC, response_value
from ..runtime.address import AccAddress, parse_address
from ..runtime.codec import Codec
from ..runtime.errors import (
    AccountNotFoundError,
    AddressNotFoundError,
    EncodingError,
    InternalError,
    SdkError,
    TransportError,
    ValidationError,
    get_error,
)
from ..tx.builder import TxBuilder
from ..tx.context import TxContext
from ..tx.msgs.base import Msg
from ..types.coins import Coin, Coins, DecCoin, DecCoins, coins_to_dec_coins, truncate_dec_coins
from ..types.token import Token
from ..types.tx import BaseAccount, BaseTx, BroadcastMode, ResultTx, StdTx, TxDetail, TxSearch
from .broadcast import BroadcastDispatcher
from .coins import CoinConverter, TokenCache
from .query import EventQueryBuilder, TxQuerier

logger = logging.getLogger(__name__)

ACCOUNT_QUERY_PATH = "custom/acc/account"
STORE_QUERY_PATH = "/store/{store}/subspace"


def split_msgs(batch: int, msgs: Sequence[Msg]) -> List[List[Msg]]:
    """
    Split messages into ``batch`` contiguous segments.

    Fewer messages than ``batch`` yields a single segment. Otherwise every
    segment holds ``len(msgs) // batch`` messages and the last one also takes
    the remainder: 10 messages in 3 batches gives sizes 3, 3 and 4.
    """
    msgs = list(msgs)
    if len(msgs) < batch:
        return [msgs]

    quantity = len(msgs) // batch
    segments = []
    for i in range(1, batch + 1):
        start = (i - 1) * quantity
        if i != batch:
            segments.append(msgs[start:i * quantity])
        else:
            segments.append(msgs[start:])
    return segments


class AbstractClient:
    """
    Transaction pipeline and chain queries against one node.

    Use ``AbstractClient.create`` to build an instance; it resolves the
    configured default fee into minimal units and raises instead of leaving
    a half-initialized client behind.

    Example:
        ```python
        client = AbstractClient.create(SDKConfig(node_uri="http://localhost:26657"),
                                       key_manager=keys)
        result = client.build_and_send([msg], BaseTx(from_="alice", password="secret"))
        print(result.hash)
        ```

    Thread safety: submissions (``build_and_send`` and ``send_msg_batch``)
    hold a per-instance lock, so only one is in flight at a time. Queries do
    not take the lock.
    """

    def __init__(
        self,
        config: SDKConfig,
        rpc: TendermintRPC,
        key_manager: KeyManager,
        codec: Optional[Codec] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        self.config = config
        self.rpc = rpc
        self.key_manager = key_manager
        self.codec = codec or Codec()

        self.logger = logging.getLogger("irishub_sdk")
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self.converter = CoinConverter(self.query, token_cache, self.codec)
        self.builder = TxBuilder(key_manager)
        self.dispatcher = BroadcastDispatcher(rpc, self.codec)
        self.tx_querier = TxQuerier(rpc, self.codec)

        # configured fee in minimal units
        self._default_fee: DecCoins = []
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        config: Union[str, SDKConfig],
        rpc: Optional[TendermintRPC] = None,
        key_manager: Optional[KeyManager] = None,
        codec: Optional[Codec] = None,
        token_cache: Optional[TokenCache] = None,
    ) -> AbstractClient:
        """
        Create a client and resolve its default fee.

        Args:
            config: Node URI or full configuration
            rpc: Node transport (default: ``TendermintRPC`` on ``config.node_uri``)
            key_manager: Signer (default: empty ``MemoryKeyManager``)
            codec: Codec (default: ``Codec()``)
            token_cache: Token cache to share between clients

        Raises:
            TokenNotFoundError: If the default fee's token cannot be resolved
            ConversionError: If the default fee cannot be expressed in minimal units
        """
        if isinstance(config, str):
            config = SDKConfig(node_uri=config)
        if rpc is None:
            rpc = TendermintRPC(config.node_uri, timeout=config.timeout,
                                user_agent=config.user_agent)
        if key_manager is None:
            key_manager = MemoryKeyManager(prefix=config.address_prefix)

        client = cls(config, rpc, key_manager, codec, token_cache)
        client._default_fee = coins_to_dec_coins(client.to_min_coin(*config.fee))
        logger.debug("default fee resolved to %s", client._default_fee)
        return client

    @property
    def default_fee(self) -> Coins:
        fee, _ = truncate_dec_coins(self._default_fee)
        return fee

    # =========================================================================
    # Transaction context
    # =========================================================================

    def reset(self) -> TxContext:
        """A context holding only the configured defaults, fee truncated to whole minimal units."""
        return TxContext.defaults(
            chain_id=self.config.chain_id,
            fee=self.default_fee,
            gas=self.config.gas,
            mode=self.config.mode,
            online=self.config.online,
        )

    def prepare(self, base_tx: BaseTx) -> TxContext:
        """
        Build the context for one submission.

        Starts from ``reset()``. Online clients look up the sender's account
        number and sequence on chain. Fee, mode, simulate, gas and memo are
        overridden only when the caller supplied them.

        Raises:
            AddressNotFoundError: If the sender name cannot be resolved
            AccountNotFoundError: If the chain has no usable account for the sender
            TransportError: If the account lookup did not reach the node
            TokenNotFoundError: If the fee override's token cannot be resolved
            ConversionError: If the fee override cannot be converted
        """
        ctx = self.reset()
        if ctx.online:
            try:
                address = self.query_address(base_tx.from_)
            except SdkError as e:
                raise AddressNotFoundError(f"address of {base_tx.from_!r} not found: {e.log}",
                                           details={"from": base_tx.from_}, cause=e)
            try:
                account = self.query_account(str(address))
            except TransportError:
                raise
            except SdkError as e:
                raise AccountNotFoundError(f"account {address} not found: {e.log}",
                                           details={"address": str(address)}, cause=e)
            ctx = ctx.with_account_number(account.account_number).with_sequence(account.sequence)

        ctx = ctx.with_password(base_tx.password)

        if base_tx.fee:
            ctx = ctx.with_fee(self.to_min_coin(*base_tx.fee))
        if base_tx.mode:
            ctx = ctx.with_mode(base_tx.mode)
        if base_tx.simulate:
            ctx = ctx.with_simulate(True)
        if base_tx.gas > 0:
            ctx = ctx.with_gas(base_tx.gas)
        if base_tx.memo:
            ctx = ctx.with_memo(base_tx.memo)
        return ctx

    # =========================================================================
    # Submission
    # =========================================================================

    def build_and_send(self, msgs: Sequence[Msg], base_tx: BaseTx) -> ResultTx:
        """
        Validate, sign and broadcast messages in one transaction.

        Args:
            msgs: Messages to include, in order
            base_tx: Sender, password and optional overrides

        Returns:
            ResultTx whose populated fields depend on the broadcast mode

        Raises:
            ValidationError: If a message is invalid (no network call is made)
            PreparationError: If the context cannot be prepared
            SigningError: If signing fails
            NodeError: If the node rejects the transaction
            TransportError: If the node cannot be reached
            InternalError: If an unexpected fault occurs while signing or broadcasting
        """
        if not msgs:
            raise ValidationError("no messages to send")
        for msg in msgs:
            msg.validate_basic()
        logger.info("validate msg success")

        with self._lock:
            ctx = self.prepare(base_tx)
            return self._sign_and_broadcast(ctx, base_tx.from_, msgs)

    def send_msg_batch(self, batch: int, msgs: Sequence[Msg], base_tx: BaseTx) -> List[ResultTx]:
        """
        Submit messages in ``batch`` sequential commit-mode transactions.

        On the first failing segment its error is raised with ``results``
        holding the results of the segments already committed; those are not
        rolled back.
        """
        if batch <= 0:
            raise ValidationError(f"batch must be positive, got {batch}")

        base_tx = base_tx.model_copy(update={"mode": BroadcastMode.COMMIT})
        results: List[ResultTx] = []
        for segment in split_msgs(batch, msgs):
            try:
                results.append(self.build_and_send(segment, base_tx))
            except SdkError as e:
                e.results = list(results)
                raise
        return results

    def broadcast(self, signed_tx: StdTx, mode: BroadcastMode) -> ResultTx:
        """Serialize and broadcast an already signed transaction."""
        tx_bytes = self.codec.marshal_binary_length_prefixed(signed_tx)
        return self.dispatcher.broadcast_tx(tx_bytes, BroadcastMode(mode))

    def _sign_and_broadcast(self, ctx: TxContext, name: str, msgs: Sequence[Msg]) -> ResultTx:
        try:
            tx = self.builder.build_and_sign(ctx, name, msgs)
            logger.info("sign transaction success")
            tx_bytes = self.codec.marshal_binary_length_prefixed(tx)
            if ctx.simulate:
                result = self.dispatcher.simulate(tx_bytes)
            else:
                result = self.dispatcher.broadcast_tx(tx_bytes, ctx.mode)
        except SdkError as e:
            logger.error("broadcast transaction failed: %s", e)
            raise
        except Exception as e:
            logger.exception("broadcast msg failed")
            raise InternalError(f"broadcast msg failed: {e}", cause=e)

        logger.info("broadcast transaction success, hash=%s tags=[%s]", result.hash, result.tags)
        return result

    # =========================================================================
    # Queries
    # =========================================================================

    def query(self, path: str, data: Any = None) -> bytes:
        """
        Run an ABCI query.

        Args:
            path: Query path
            data: Payload; bytes are sent as is, anything else as canonical JSON

        Returns:
            Raw response value

        Raises:
            NodeError: If the node answers with a non-OK code; the log is the message
        """
        if data is None:
            payload = b""
        elif isinstance(data, (bytes, bytearray)):
            payload = bytes(data)
        else:
            payload = self.codec.marshal_json(data)

        response = self.rpc.abci_query(path, payload)
        code = int(response.get("code") or 0)
        if code != 0:
            raise get_error(response.get("codespace", ""), code, response.get("log", ""))
        return response_value(response)

    def query_with_response(self, path: str, data: Any, model: Optional[Type[Any]] = None) -> Any:
        """Run an ABCI query and decode the JSON response, optionally into ``model``."""
        return self.codec.unmarshal_json(self.query(path, data) or b"null", model)

    def query_store(self, key: Union[bytes, str], store_name: str) -> bytes:
        """Range-query a raw store by key prefix. ``key`` may be hex."""
        if isinstance(key, str):
            try:
                key = bytes.fromhex(key)
            except ValueError as e:
                raise ValidationError(f"invalid store key {key!r}", cause=e)
        return self.query(STORE_QUERY_PATH.format(store=store_name), key)

    def query_account(self, address: Union[str, AccAddress]) -> BaseAccount:
        """
        Fetch account state.

        Raises:
            ValidationError: If the address is malformed
            AccountNotFoundError: If the chain returns no account
            EncodingError: If the account cannot be decoded
        """
        try:
            addr = parse_address(address)
        except ValueError as e:
            raise ValidationError(f"invalid address {address!r}: {e}", cause=e)
        account = self.query_with_response(ACCOUNT_QUERY_PATH, {"address": str(addr)})
        if not account:
            raise AccountNotFoundError(f"account {addr} not found", details={"address": str(addr)})
        try:
            return BaseAccount.model_validate(account)
        except ValueError as e:
            raise EncodingError(f"cannot decode account {addr}: {e}",
                                details={"address": str(addr)}, cause=e)

    def query_address(self, name: str) -> AccAddress:
        return self.key_manager.query(name)

    def query_token(self, denom: str) -> Token:
        return self.converter.query_token(denom)

    def to_min_coin(self, *coins: Union[DecCoin, Coin]) -> Coins:
        return self.converter.to_min_coin(*coins)

    def to_main_coin(self, *coins: Union[Coin, DecCoin]) -> DecCoins:
        return self.converter.to_main_coin(*coins)

    def query_tx(self, tx_hash: str) -> TxDetail:
        return self.tx_querier.query_tx(tx_hash)

    def query_txs(self, builder: EventQueryBuilder, page: int = 1, size: int = 30) -> TxSearch:
        return self.tx_querier.query_txs(builder, page, size)
