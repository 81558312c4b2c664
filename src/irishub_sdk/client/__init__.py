"""
Client core: coin conversion, broadcast, transaction queries and the
orchestrating client.
"""

from .abstract_client import AbstractClient, split_msgs
from .broadcast import BroadcastDispatcher
from .coins import CoinConverter, TokenCache
from .iris_client import IrisClient
from .query import EventQueryBuilder, TxQuerier, format_timestamp

__all__ = [
    "AbstractClient",
    "split_msgs",
    "BroadcastDispatcher",
    "CoinConverter",
    "TokenCache",
    "IrisClient",
    "EventQueryBuilder",
    "TxQuerier",
    "format_timestamp",
]
