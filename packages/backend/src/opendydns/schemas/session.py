"""Pydantic schemas for login."""

from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class TokenRead(BaseModel):
    token: str
