"""
Launch engine: imperative shell around the core kernels.

Each public method is one launch operation:
- `initialize_pool`: size and create the bootstrap pool from the creator's balance,
- `create_stream`: create one vesting grant for the creator,
- `deposit`: open the fee-earning position and add liquidity to it,
- `swap`: exact-in swap through the pool,
- `claim_fees`: claim accrued fees and run one distribution cycle.

The core computes; this module reads inputs from the clients, executes the
resulting transfers, and persists records only once an operation has fully
succeeded. Operations on the same settlement mint are serialized with a lock
so the cooldown read-modify-write cannot interleave.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..config import EngineConfig
from ..core.bootstrap import commitment_amount, plan_pool_bootstrap
from ..core.distribution import check_cooldown, run_distribution
from ..core.errors import EngineError, InvalidCollectFeeModeError, InvalidPreconditionError
from ..core.liquidity import calculate_liquidity
from ..core.types import DistributionResult, PoolBootstrapRequest, PoolBootstrapResult
from ..state.records import CreatorRecord, FeePositionOwnerRecord, RecordStore
from .clients import (
    AmmClient,
    CollectFeeMode,
    GrantParameters,
    InitializePoolParameters,
    PoolFeeParameters,
    TokenLedger,
    VestingClient,
)


logger = logging.getLogger(__name__)


def _wall_clock() -> int:
    return int(time.time())


@dataclass(frozen=True)
class PoolInitResult:
    pool: str
    token_a_amount: int
    token_b_amount: int
    plan: PoolBootstrapResult


@dataclass(frozen=True)
class DepositResult:
    position: str
    token_a_amount: int
    token_b_amount: int
    liquidity: int


class LaunchEngine:
    def __init__(
        self,
        *,
        amm: AmmClient,
        vesting: VestingClient,
        ledger: TokenLedger,
        config: Optional[EngineConfig] = None,
        store: Optional[RecordStore] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.amm = amm
        self.vesting = vesting
        self.ledger = ledger
        self.config = config or EngineConfig()
        self.store = store if store is not None else RecordStore()
        self._clock = clock or _wall_clock
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _mint_lock(self, mint: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(mint)
            if lock is None:
                lock = threading.Lock()
                self._locks[mint] = lock
            return lock

    # -- pool bootstrap -------------------------------------------------------

    def initialize_pool(self, *, mint_a: str, mint_b: str, creator: str) -> PoolInitResult:
        """Commit a share of the creator's token A against the fixed token B pool amount."""
        with self._mint_lock(mint_a):
            if self.store.has_creator(mint_a):
                raise InvalidPreconditionError(f"pool already initialized for mint {mint_a!r}")

            params = self.config.bootstrap
            balance_a = self.ledger.balance_of(creator, mint_a)
            amount_a = commitment_amount(balance_a, params.commitment_bps)
            amount_b = params.pool_amount
            try:
                plan = plan_pool_bootstrap(
                    PoolBootstrapRequest(token_a_amount=amount_a, token_b_amount=amount_b),
                    params,
                )
            except EngineError as exc:
                logger.warning("pool bootstrap rejected for %s: %s", mint_a, exc)
                raise

            pool = self.amm.initialize_pool(
                InitializePoolParameters(
                    mint_a=mint_a,
                    mint_b=mint_b,
                    token_a_amount=amount_a,
                    token_b_amount=amount_b,
                    sqrt_price=plan.sqrt_price,
                    sqrt_min_price=plan.sqrt_min_price,
                    sqrt_max_price=plan.sqrt_max_price,
                    liquidity=plan.liquidity,
                    pool_fees=PoolFeeParameters(cliff_fee_numerator=params.cliff_fee_numerator),
                    collect_fee_mode=CollectFeeMode.ONLY_B,
                )
            )
            self.store.put_creator(CreatorRecord(mint=mint_a, pool=pool))
            logger.info("initialized pool %s for %s/%s (amount_a=%d)", pool, mint_a, mint_b, amount_a)
            return PoolInitResult(pool=pool, token_a_amount=amount_a, token_b_amount=amount_b, plan=plan)

    # -- grants ---------------------------------------------------------------

    def create_stream(self, *, mint_a: str, sender: str, recipient: str) -> str:
        with self._mint_lock(mint_a):
            creator = self.store.get_creator(mint_a)
            tmpl = self.config.grant
            grant_id = self.vesting.create_grant(
                GrantParameters(
                    sender=sender,
                    recipient=recipient,
                    mint=mint_a,
                    index=creator.streams,
                    start_time=self._clock(),
                    net_amount_deposited=tmpl.net_amount_deposited,
                    period=tmpl.period,
                    amount_per_period=tmpl.amount_per_period,
                    cliff=tmpl.cliff,
                    cliff_amount=tmpl.cliff_amount,
                )
            )
            self.store.put_creator(creator.with_grant(grant_id))
            logger.info("created grant %s (#%d) for %s -> %s", grant_id, creator.streams, mint_a, recipient)
            return grant_id

    # -- fee position ---------------------------------------------------------

    def deposit(self, *, mint_a: str, mint_b: str, owner: str) -> DepositResult:
        """Open the fee-earning position with the owner's full balances of both tokens."""
        with self._mint_lock(mint_b):
            if self.store.has_fee_owner(mint_b):
                raise InvalidPreconditionError(f"fee position already exists for mint {mint_b!r}")
            creator = self.store.get_creator(mint_a)
            if creator.pool is None:
                raise InvalidPreconditionError(f"no pool recorded for mint {mint_a!r}")

            pool = self.amm.get_pool(creator.pool)
            if pool.collect_fee_mode != CollectFeeMode.ONLY_B:
                raise InvalidCollectFeeModeError(
                    f"pool {pool.pool} collects fees in mode {pool.collect_fee_mode.name}, expected ONLY_B"
                )

            amount_a = self.ledger.balance_of(owner, mint_a)
            amount_b = self.ledger.balance_of(owner, mint_b)
            liquidity = calculate_liquidity(
                amount_a,
                amount_b,
                pool.sqrt_price,
                pool.sqrt_min_price,
                pool.sqrt_max_price,
            )

            position = self.amm.create_position(pool.pool, owner)
            self.amm.add_liquidity(
                position,
                liquidity_delta=liquidity,
                token_a_amount_threshold=amount_a,
                token_b_amount_threshold=amount_b,
            )
            self.store.put_fee_owner(
                FeePositionOwnerRecord(
                    associated_mint=mint_b,
                    creator_mint=mint_a,
                    pool=pool.pool,
                    owner=owner,
                    position=position,
                    last_claimed_at=0,
                )
            )
            logger.info("deposited liquidity %d into position %s", liquidity, position)
            return DepositResult(position=position, token_a_amount=amount_a, token_b_amount=amount_b, liquidity=liquidity)

    def swap(self, *, mint_a: str, payer: str, amount: int) -> int:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidPreconditionError(f"swap amount must be a positive int: {amount!r}")
        creator = self.store.get_creator(mint_a)
        if creator.pool is None:
            raise InvalidPreconditionError(f"no pool recorded for mint {mint_a!r}")
        return self.amm.swap(creator.pool, payer, amount_in=amount, minimum_amount_out=0)

    # -- fee distribution -----------------------------------------------------

    def claim_fees(self, *, mint_b: str, beneficiary: str) -> DistributionResult:
        """
        Claim position fees, then distribute the settlement balance.

        The cycle timestamp is read once. The cooldown is checked before the
        claim so a rejected call leaves fees in the position. Payouts and the
        remainder move in one all-or-nothing ledger batch, and the record is
        advanced only after that batch went through.
        """
        with self._mint_lock(mint_b):
            record = self.store.get_fee_owner(mint_b)
            if record.position is None:
                raise InvalidPreconditionError(f"no position recorded for mint {mint_b!r}")
            creator = self.store.get_creator(record.creator_mint)
            params = self.config.distribution

            now = self._clock()
            check_cooldown(now, record.cycle_state, params.cooldown_seconds)

            claimed = self.amm.claim_position_fee(record.position)
            logger.debug("claimed %d in fees from position %s", claimed, record.position)

            balance = self.ledger.balance_of(record.owner, mint_b)
            grants = [self.vesting.get_grant(grant_id) for grant_id in creator.grant_ids]
            try:
                result = run_distribution(now, balance, grants, record.cycle_state, params)
            except EngineError as exc:
                logger.warning("distribution for %s failed: %s", mint_b, exc)
                raise

            legs = [(str(payout.recipient), payout.amount) for payout in result.payouts]
            if result.creator_remainder > 0:
                legs.append((beneficiary, result.creator_remainder))
            if legs:
                self.ledger.transfer_batch(record.owner, mint_b, legs)

            self.store.put_fee_owner(record.with_cycle_state(result.new_state))
            return result
