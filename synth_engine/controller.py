"""Mint/redeem controller — deposits, withdrawals, mints and burns."""
from __future__ import annotations

import logging
from typing import Any, Callable

from .config import EngineConfig
from .errors import BurnFailed, EngineError, MintFailed, TransferFailed, UnknownAsset
from .guards import require_positive
from .health import HealthFactorCalculator
from .interfaces.revertible import Revertible
from .interfaces.tokens import CollateralToken, SyntheticToken
from .ledger import CollateralLedger
from .oracles.registry import AssetRegistry
from .transaction import RevertScope, atomic

logger = logging.getLogger(__name__)

SYNTHETIC_SYMBOL = "SYNTH"


def _checked_call(call: Callable[[], bool], failure: EngineError) -> None:
    """Run an external call; a ``False`` result or a foreign exception raises ``failure``."""
    try:
        ok = call()
    except EngineError:
        raise
    except Exception as e:
        raise failure from e
    if not ok:
        raise failure


def _compensate(
    scope: RevertScope, collaborator: Any, description: str, action: Callable[[], Any]
) -> None:
    # revertible collaborators are restored from their snapshot instead
    if not isinstance(collaborator, Revertible):
        scope.on_revert(description, action)


class MintRedeemController:
    """Execute deposit / mint / redeem / burn requests atomically.

    Inside every operation the ledger is updated first and the external
    collaborators (collateral token, synthetic token) are called last, so a
    reentrant call from a collaborator only ever sees settled state. Among
    the external calls, whatever the user pays in (collateral, burned
    supply) is collected before anything is paid out; a collateral payout is
    always the final step of an operation.
    """

    def __init__(
        self,
        ledger: CollateralLedger,
        registry: AssetRegistry,
        health: HealthFactorCalculator,
        collateral_tokens: dict[str, CollateralToken],
        synthetic: SyntheticToken,
        config: EngineConfig,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._health = health
        self._collateral_tokens = dict(collateral_tokens)
        self._synthetic = synthetic
        self._custody = config.custody_account

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @property
    def custody_account(self) -> str:
        return self._custody

    def stores(self) -> list[Any]:
        """Everything an operation may mutate, for ``atomic()``."""
        return [self._ledger, self._synthetic, *self._collateral_tokens.values()]

    def _token(self, asset: str) -> CollateralToken:
        if asset not in self._registry or asset not in self._collateral_tokens:
            raise UnknownAsset(asset)
        return self._collateral_tokens[asset]

    def _pull_collateral(
        self, scope: RevertScope, user: str, asset: str, amount: int
    ) -> None:
        token = self._token(asset)
        _checked_call(
            lambda: token.transfer_from(user, self._custody, amount),
            TransferFailed(asset, user, self._custody, amount),
        )
        _compensate(
            scope,
            token,
            f"return of {amount} {asset} to {user}",
            lambda: token.transfer(user, amount),
        )

    def _push_collateral(self, recipient: str, asset: str, amount: int) -> None:
        token = self._token(asset)
        _checked_call(
            lambda: token.transfer(recipient, amount),
            TransferFailed(asset, self._custody, recipient, amount),
        )

    def _mint_synthetic(self, scope: RevertScope, user: str, amount: int) -> None:
        _checked_call(
            lambda: self._synthetic.mint(user, amount), MintFailed(user, amount)
        )
        _compensate(
            scope,
            self._synthetic,
            f"burn of {amount} minted to {user}",
            lambda: self._synthetic.burn(user, amount),
        )

    def _burn_synthetic(self, scope: RevertScope, payer: str, amount: int) -> None:
        _checked_call(
            lambda: self._synthetic.burn(payer, amount),
            BurnFailed(payer, amount, SYNTHETIC_SYMBOL),
        )
        _compensate(
            scope,
            self._synthetic,
            f"re-mint of {amount} burned from {payer}",
            lambda: self._synthetic.mint(payer, amount),
        )

    def _redeem_collateral(
        self,
        scope: RevertScope,
        from_user: str,
        to_user: str,
        asset: str,
        amount: int,
        guard: Callable[[], Any],
        collect: Callable[[], Any] | None = None,
    ) -> None:
        """Debit ``from_user``, run ``guard``, collect payment, then pay ``to_user``.

        The solvency guard runs after the ledger debit instead of before it,
        so the post-redemption state is checked directly rather than
        simulated. ``collect`` is the caller's payer-side external call (a
        synthetic burn); it runs after the guard and before the payout, so
        collateral never leaves custody for a request that cannot pay.
        Callers must run this inside ``atomic()`` and pass its scope.
        """
        self._token(asset)
        self._ledger.debit(from_user, asset, amount)
        guard()
        if collect is not None:
            collect()
        self._push_collateral(to_user, asset, amount)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deposit_collateral(self, user: str, asset: str, amount: int) -> None:
        require_positive(amount, "deposit_collateral")
        self._token(asset)
        with atomic("deposit_collateral", self.stores()) as scope:
            self._ledger.credit(user, asset, amount)
            self._pull_collateral(scope, user, asset, amount)
        logger.info("Deposited %d %s for %s", amount, asset, user)

    def mint(self, user: str, amount: int) -> None:
        require_positive(amount, "mint")
        with atomic("mint", self.stores()) as scope:
            self._ledger.add_debt(user, amount)
            health_factor = self._health.require_healthy(user)
            self._mint_synthetic(scope, user, amount)
        logger.info(
            "Minted %d for %s (health factor %s)", amount, user, health_factor
        )

    def redeem_collateral(self, user: str, asset: str, amount: int) -> None:
        require_positive(amount, "redeem_collateral")
        with atomic("redeem_collateral", self.stores()) as scope:
            self._redeem_collateral(
                scope,
                user,
                user,
                asset,
                amount,
                lambda: self._health.require_healthy(user),
            )
        logger.info("Redeemed %d %s for %s", amount, asset, user)

    def burn(self, user: str, amount: int) -> None:
        """Repay debt. Burning can only raise the health factor, so no check."""
        require_positive(amount, "burn")
        with atomic("burn", self.stores()) as scope:
            self._ledger.reduce_debt(user, amount)
            self._burn_synthetic(scope, user, amount)
        logger.info("Burned %d for %s", amount, user)

    def deposit_collateral_and_mint(
        self, user: str, asset: str, collateral_amount: int, mint_amount: int
    ) -> None:
        """Deposit and mint as one operation."""
        require_positive(collateral_amount, "deposit_collateral_and_mint")
        require_positive(mint_amount, "deposit_collateral_and_mint")
        self._token(asset)
        with atomic("deposit_collateral_and_mint", self.stores()) as scope:
            self._ledger.credit(user, asset, collateral_amount)
            self._ledger.add_debt(user, mint_amount)
            self._health.require_healthy(user)
            self._pull_collateral(scope, user, asset, collateral_amount)
            self._mint_synthetic(scope, user, mint_amount)
        logger.info(
            "Deposited %d %s and minted %d for %s",
            collateral_amount,
            asset,
            mint_amount,
            user,
        )

    def redeem_collateral_for_synthetic(
        self, user: str, asset: str, collateral_amount: int, burn_amount: int
    ) -> None:
        """Burn debt and withdraw collateral as one operation."""
        require_positive(collateral_amount, "redeem_collateral_for_synthetic")
        require_positive(burn_amount, "redeem_collateral_for_synthetic")
        with atomic("redeem_collateral_for_synthetic", self.stores()) as scope:
            self._ledger.reduce_debt(user, burn_amount)
            self._redeem_collateral(
                scope,
                user,
                user,
                asset,
                collateral_amount,
                lambda: self._health.require_healthy(user),
                collect=lambda: self._burn_synthetic(scope, user, burn_amount),
            )
        logger.info(
            "Burned %d and redeemed %d %s for %s",
            burn_amount,
            collateral_amount,
            asset,
            user,
        )
