"""Unit tests for the atomic operation scope."""
from __future__ import annotations

import pytest

from synth_engine.ledger import CollateralLedger
from synth_engine.tokens import InMemoryCollateralToken
from synth_engine.transaction import atomic


class TestAtomic:
    def test_commits_on_success(self) -> None:
        ledger = CollateralLedger()
        with atomic("op", [ledger]):
            ledger.credit("alice", "WETH", 1)
        assert ledger.balance("alice", "WETH") == 1

    def test_restores_every_store_on_failure(self) -> None:
        ledger = CollateralLedger()
        token = InMemoryCollateralToken("WETH", "engine")
        token.faucet("alice", 5)

        with pytest.raises(RuntimeError):
            with atomic("op", [ledger, token]):
                ledger.credit("alice", "WETH", 5)
                token.transfer_from("alice", "engine", 5)
                raise RuntimeError("boom")

        assert ledger.balance("alice", "WETH") == 0
        assert token.balance_of("alice") == 5
        assert token.balance_of("engine") == 0

    def test_skips_non_revertible_stores(self) -> None:
        ledger = CollateralLedger()
        with pytest.raises(ValueError):
            with atomic("op", [ledger, object()]):
                ledger.credit("alice", "WETH", 1)
                raise ValueError("x")
        assert ledger.balance("alice", "WETH") == 0

    def test_nested_failure_only_unwinds_inner_scope(self) -> None:
        ledger = CollateralLedger()
        with atomic("outer", [ledger]):
            ledger.credit("alice", "WETH", 1)
            with pytest.raises(RuntimeError):
                with atomic("inner", [ledger]):
                    ledger.credit("alice", "WETH", 10)
                    raise RuntimeError("inner")
        assert ledger.balance("alice", "WETH") == 1


class TestRevertScope:
    def test_compensations_run_newest_first_on_failure(self) -> None:
        undone: list[str] = []
        with pytest.raises(RuntimeError):
            with atomic("op", []) as scope:
                scope.on_revert("first", lambda: undone.append("first"))
                scope.on_revert("second", lambda: undone.append("second"))
                raise RuntimeError("boom")
        assert undone == ["second", "first"]

    def test_compensations_skipped_on_success(self) -> None:
        undone: list[str] = []
        with atomic("op", []) as scope:
            scope.on_revert("first", lambda: undone.append("first"))
        assert undone == []

    def test_failing_compensation_is_logged_and_original_error_kept(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        undone: list[str] = []

        def explode() -> bool:
            raise OSError("token offline")

        with pytest.raises(ValueError, match="original"):
            with atomic("op", []) as scope:
                scope.on_revert("later", lambda: undone.append("later"))
                scope.on_revert("return of 5 WETH", explode)
                scope.on_revert("refused", lambda: False)
                raise ValueError("original")

        assert undone == ["later"]
        assert "compensating return of 5 WETH raised: token offline" in caplog.text
        assert "compensating refused was refused" in caplog.text

    def test_compensation_runs_alongside_snapshot_restore(self) -> None:
        ledger = CollateralLedger()
        undone: list[int] = []
        with pytest.raises(RuntimeError):
            with atomic("op", [ledger]) as scope:
                ledger.credit("alice", "WETH", 3)
                scope.on_revert("return", lambda: undone.append(3))
                raise RuntimeError("boom")
        assert ledger.balance("alice", "WETH") == 0
        assert undone == [3]
