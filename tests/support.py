"""Constants and helpers shared by the test suites."""
from __future__ import annotations

from synth_engine.engine import SynthEngine

ONE = 10**18
ETH_USD_FEED = 4000 * 10**8  # $4000 at 8 decimals
BTC_USD_FEED = 60000 * 10**8
START_TIME = 1_700_000_000.0
THREE_HOURS = 3 * 60 * 60


class FakeClock:
    """Controllable replacement for ``time.time``."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def fund_and_deposit(engine: SynthEngine, user: str, asset: str, amount: int) -> None:
    engine.collateral_tokens[asset].faucet(user, amount)
    engine.deposit_collateral(user, asset, amount)
