from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallContext:
    """Who is calling, and at what logical clock value.

    Built by the invocation layer for every mutating ledger call:
        caller: opaque identity (the JWT subject over HTTP)
        block_height: logical clock used to timestamp writes
    """

    caller: str
    block_height: int
