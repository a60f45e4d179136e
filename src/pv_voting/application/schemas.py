"""Pydantic schemas for pv_voting API."""

from pydantic import BaseModel, Field

from src.pv_common.enums import VoteOption


class CastVoteRequest(BaseModel):
    option: VoteOption
    points: int = Field(..., description="Points to stake, >= 1")


class CastVoteResponse(BaseModel):
    project_id: str
    option: VoteOption
    points: int
    remaining: int  # points still open on this option
    balance: int
