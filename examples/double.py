"""Double a number.

Compile with:

    axbuild compile examples/double.py --function double --provider http://localhost:8545
"""

from pydantic import BaseModel


class DoubleInputs(BaseModel):
    x: int


input_schema = DoubleInputs

inputs = {"x": 3}


def double(x: int) -> int:
    return 2 * x
