"""Pydantic schemas for pv_settlement API."""

from pydantic import BaseModel

from src.pv_common.enums import VoteOption


class PublishResultRequest(BaseModel):
    result: VoteOption


class PayoutItem(BaseModel):
    voter: str
    stake: int
    extra_reward: int
    total_reward: int


class SettlementResponse(BaseModel):
    project_id: str
    result: VoteOption
    payouts: list[PayoutItem]
    total_voted_points: int
    total_extra_reward: int
    total_rewards: int
    creator_refund: int
    retained_escrow: int
    forfeited_points: int
