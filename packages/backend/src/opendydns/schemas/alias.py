"""Pydantic schemas for aliases.

Learn: "Create"/"Update" schemas validate input, "Read" shapes output.
Host is a single DNS label, domain one or more labels, value an IP.
"""

import ipaddress
from typing import Optional

from pydantic import BaseModel, Field, field_validator

LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
HOST_PATTERN = rf"^{LABEL}$"
DOMAIN_PATTERN = rf"^{LABEL}(?:\.{LABEL})*\.?$"


def _ip_literal(value: str) -> str:
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        raise ValueError("value must be an IPv4 or IPv6 address")


class AliasCreate(BaseModel):
    host: str = Field(..., max_length=63, pattern=HOST_PATTERN)
    domain: str = Field(..., max_length=253, pattern=DOMAIN_PATTERN)
    value: str

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        return _ip_literal(v)


class AliasUpdate(AliasCreate):
    new_domain: Optional[str] = Field(None, max_length=253, pattern=DOMAIN_PATTERN)


class AliasRead(BaseModel):
    host: str
    domain: str
    value: str

    model_config = {"from_attributes": True}
