"""Async circuit with an explicit import name and a nested input schema.

Inputs are not declared here; pass them with `--inputs examples/balance_check.json`.
"""

from pydantic import BaseModel, Field

IMPORT_NAME = "axiom"


class Account(BaseModel):
    address: str
    block_number: int = Field(ge=0)


class BalanceInputs(BaseModel):
    account: Account
    threshold: int = 0


input_schema = BalanceInputs


async def circuit(account: Account, threshold: int) -> dict[str, object]:
    return {
        "address": account.address.lower(),
        "block_number": account.block_number,
        "above_threshold": account.block_number > threshold,
    }
