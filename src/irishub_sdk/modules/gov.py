"""
Governance module: deposits, votes and proposal queries.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..runtime.errors import NotFoundError
from ..tx.msgs.gov import MsgDeposit, MsgVote, VoteOption
from ..types.coins import Coin, DecCoin, parse_dec_coins
from ..types.tx import BaseTx, ResultTx
from .base import Module

QUERY_PROPOSAL = "custom/gov/proposal"
QUERY_PROPOSALS = "custom/gov/proposals"
QUERY_DEPOSIT = "custom/gov/deposit"
QUERY_DEPOSITS = "custom/gov/deposits"
QUERY_VOTE = "custom/gov/vote"
QUERY_VOTES = "custom/gov/votes"
QUERY_TALLY = "custom/gov/tally"


def _unwrap(data: Any) -> Any:
    if isinstance(data, dict) and "type" in data and "value" in data:
        data = data["value"]
    if isinstance(data, dict) and "basic_proposal" in data:
        data = {**data["basic_proposal"], **{k: v for k, v in data.items() if k != "basic_proposal"}}
    return data


class TallyResult(BaseModel):
    yes: str = "0"
    abstain: str = "0"
    no: str = "0"
    no_with_veto: str = "0"

    model_config = {"extra": "ignore"}


class Proposal(BaseModel):
    proposal_id: int
    title: str = ""
    description: str = ""
    proposal_type: str = ""
    proposal_status: str = ""
    tally_result: TallyResult = Field(default_factory=TallyResult)
    total_deposit: List[Coin] = Field(default_factory=list)
    submit_time: str = ""
    deposit_end_time: str = ""
    voting_start_time: str = ""
    voting_end_time: str = ""
    proposer: str = ""

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def unwrap(cls, data: Any) -> Any:
        return _unwrap(data)

    @field_validator("total_deposit", mode="before")
    @classmethod
    def none_coins(cls, v: Any) -> Any:
        return v or []


class Deposit(BaseModel):
    proposal_id: int
    depositor: str
    amount: List[Coin] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class Vote(BaseModel):
    proposal_id: int
    voter: str
    option: str

    model_config = {"extra": "ignore"}


class ProposalRequest(BaseModel):
    """Filters for ``query_proposals``; empty fields are not sent."""

    voter: str = ""
    depositor: str = ""
    status: str = ""
    limit: int = 0

    def to_params(self) -> Dict[str, str]:
        params = {
            "Voter": self.voter,
            "Depositor": self.depositor,
            "ProposalStatus": self.status,
            "Limit": str(self.limit) if self.limit else "",
        }
        return {k: v for k, v in params.items() if v}


class GovModule(Module):
    """
    Example:
        ```python
        client.gov.deposit(8, "1000iris", base_tx)
        client.gov.vote(8, VoteOption.YES, base_tx)
        tally = client.gov.query_tally(8)
        ```
    """

    name = "gov"

    def deposit(self, proposal_id: int, amount: Union[str, Sequence[DecCoin]],
                base_tx: BaseTx) -> ResultTx:
        if isinstance(amount, str):
            amount = parse_dec_coins(amount)
        msg = MsgDeposit(
            proposal_id=proposal_id,
            depositor=self.sender(base_tx),
            amount=self.min_coins(amount),
        )
        return self.client.build_and_send([msg], base_tx)

    def vote(self, proposal_id: int, option: Union[str, VoteOption], base_tx: BaseTx) -> ResultTx:
        msg = MsgVote(
            proposal_id=proposal_id,
            voter=self.sender(base_tx),
            option=VoteOption(option),
        )
        return self.client.build_and_send([msg], base_tx)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _query(self, path: str, params: Dict[str, str]) -> Any:
        data = self.client.query_with_response(path, params)
        if data is None:
            raise NotFoundError(f"{path} returned nothing for {params}")
        return data

    def query_proposal(self, proposal_id: int) -> Proposal:
        return Proposal.model_validate(
            self._query(QUERY_PROPOSAL, {"ProposalID": str(proposal_id)})
        )

    def query_proposals(self, request: Optional[ProposalRequest] = None) -> List[Proposal]:
        request = request or ProposalRequest()
        data = self.client.query_with_response(QUERY_PROPOSALS, request.to_params()) or []
        return [Proposal.model_validate(p) for p in data]

    def query_deposit(self, proposal_id: int, depositor: str) -> Deposit:
        return Deposit.model_validate(self._query(QUERY_DEPOSIT, {
            "ProposalID": str(proposal_id),
            "Depositor": depositor,
        }))

    def query_deposits(self, proposal_id: int) -> List[Deposit]:
        data = self.client.query_with_response(QUERY_DEPOSITS, {"ProposalID": str(proposal_id)})
        return [Deposit.model_validate(d) for d in data or []]

    def query_vote(self, proposal_id: int, voter: str) -> Vote:
        return Vote.model_validate(self._query(QUERY_VOTE, {
            "ProposalID": str(proposal_id),
            "Voter": voter,
        }))

    def query_votes(self, proposal_id: int) -> List[Vote]:
        data = self.client.query_with_response(QUERY_VOTES, {"ProposalID": str(proposal_id)})
        return [Vote.model_validate(v) for v in data or []]

    def query_tally(self, proposal_id: int) -> TallyResult:
        return TallyResult.model_validate(
            self._query(QUERY_TALLY, {"ProposalID": str(proposal_id)})
        )
