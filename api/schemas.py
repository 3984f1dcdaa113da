"""
Request schemas.

Pydantic models for JSON bodies. Clients send camelCase keys; services
receive plain values and apply the business validation themselves.
"""

import functools
import json
from decimal import Decimal
from typing import TypeVar

import pydantic
from aiohttp import web
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.utils.exceptions import ValidationError

# JSON numbers become Decimal so money never passes through float
json_loads = functools.partial(json.loads, parse_float=Decimal)

M = TypeVar("M", bound=BaseModel)


class RequestModel(BaseModel):
    """Base for request bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class RegisterRequest(RequestModel):
    full_name: str
    email: str
    password: str
    referral_code: str | None = None
    device_id: str | None = None


class LoginRequest(RequestModel):
    email: str
    password: str


class DepositRequest(RequestModel):
    amount: Decimal
    txid: str | None = None
    screenshot_url: str | None = None


class StartInvestmentRequest(RequestModel):
    deposit_id: str


class WithdrawalRequest(RequestModel):
    amount: Decimal
    usdt_address: str | None = None


class AdminLoginRequest(RequestModel):
    username: str
    password: str


class RejectRequest(RequestModel):
    reason: str | None = None


class BalanceRequest(RequestModel):
    balance: Decimal
    reason: str | None = None


async def parse_body(request: web.Request, model: type[M]) -> M:
    """
    Parse and validate a JSON request body.

    An empty body is treated as {} so models with only optional fields
    accept bodiless requests.

    Args:
        request: Incoming request
        model: Schema to validate against

    Returns:
        Validated model instance

    Raises:
        ValidationError: On malformed JSON or schema mismatch
    """
    raw = await request.text()
    try:
        data = json_loads(raw) if raw.strip() else {}
    except ValueError as e:
        raise ValidationError("Invalid JSON body") from e
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")

    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        message = f"{field}: {error['msg']}" if field else error["msg"]
        raise ValidationError(message) from e
