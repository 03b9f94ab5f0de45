"""
Persistent records for launch pools.

Two records per launch, both keyed by a mint id:
- `CreatorRecord`: the ordered grant ids created for the creator (keyed by the
  launch token mint).
- `FeePositionOwnerRecord`: the fee-earning position and its distribution
  cooldown (keyed by the settlement token mint).

Round-trip property (tested): `store_from_dict(store_to_dict(s))` reproduces `s`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, Mapping, Optional

from ..core.errors import UnknownRecordError
from ..core.types import DistributionCycleState

MintId = str


@dataclass(frozen=True)
class CreatorRecord:
    mint: MintId
    pool: Optional[str] = None
    grant_ids: tuple[str, ...] = ()

    @property
    def streams(self) -> int:
        return len(self.grant_ids)

    def with_grant(self, grant_id: str) -> "CreatorRecord":
        if grant_id in self.grant_ids:
            raise ValueError(f"duplicate grant id: {grant_id}")
        return replace(self, grant_ids=self.grant_ids + (grant_id,))


@dataclass(frozen=True)
class FeePositionOwnerRecord:
    associated_mint: MintId
    creator_mint: MintId
    pool: str
    owner: str
    position: Optional[str] = None
    last_claimed_at: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.last_claimed_at, int) or isinstance(self.last_claimed_at, bool):
            raise TypeError("last_claimed_at must be an int")

    @property
    def cycle_state(self) -> DistributionCycleState:
        return DistributionCycleState(last_distributed_at=self.last_claimed_at)

    def with_cycle_state(self, state: DistributionCycleState) -> "FeePositionOwnerRecord":
        if state.last_distributed_at < self.last_claimed_at:
            raise ValueError("last_claimed_at must not decrease")
        return replace(self, last_claimed_at=state.last_distributed_at)


class RecordStore:
    """
    Mutable mapping of mint -> record.

    Writes replace whole (immutable) records, so readers never observe a
    half-updated record.
    """

    def __init__(self) -> None:
        self._creators: Dict[MintId, CreatorRecord] = {}
        self._fee_owners: Dict[MintId, FeePositionOwnerRecord] = {}

    def get_creator(self, mint: MintId) -> CreatorRecord:
        rec = self._creators.get(mint)
        if rec is None:
            raise UnknownRecordError(f"no creator record for mint {mint!r}")
        return rec

    def has_creator(self, mint: MintId) -> bool:
        return mint in self._creators

    def put_creator(self, record: CreatorRecord) -> None:
        self._creators[record.mint] = record

    def get_fee_owner(self, mint: MintId) -> FeePositionOwnerRecord:
        rec = self._fee_owners.get(mint)
        if rec is None:
            raise UnknownRecordError(f"no fee position owner record for mint {mint!r}")
        return rec

    def has_fee_owner(self, mint: MintId) -> bool:
        return mint in self._fee_owners

    def put_fee_owner(self, record: FeePositionOwnerRecord) -> None:
        self._fee_owners[record.associated_mint] = record

    def creators(self) -> Iterator[CreatorRecord]:
        """Creator records in mint order."""
        for _, rec in sorted(self._creators.items()):
            yield rec

    def fee_owners(self) -> Iterator[FeePositionOwnerRecord]:
        """Fee position owner records in mint order."""
        for _, rec in sorted(self._fee_owners.items()):
            yield rec

    def __repr__(self) -> str:
        return f"RecordStore({len(self._creators)} creators, {len(self._fee_owners)} fee owners)"


def store_to_dict(store: RecordStore) -> dict[str, Any]:
    """Serialize to a JSON-friendly dict with deterministic ordering."""
    creators = [
        {"mint": r.mint, "pool": r.pool, "grant_ids": list(r.grant_ids)}
        for r in store.creators()
    ]
    fee_owners = [
        {
            "associated_mint": r.associated_mint,
            "creator_mint": r.creator_mint,
            "pool": r.pool,
            "owner": r.owner,
            "position": r.position,
            "last_claimed_at": r.last_claimed_at,
        }
        for r in store.fee_owners()
    ]
    return {"creators": creators, "fee_owners": fee_owners}


def _require_str(obj: Mapping[str, Any], key: str, *, optional: bool = False) -> Optional[str]:
    v = obj[key]
    if v is None and optional:
        return None
    if not isinstance(v, str):
        raise TypeError(f"{key} must be a string")
    return v


def store_from_dict(d: Mapping[str, Any]) -> RecordStore:
    """Deserialize a dict produced by `store_to_dict`. Raises KeyError on missing fields."""
    store = RecordStore()
    for c in d["creators"]:
        grant_ids = c["grant_ids"]
        if not isinstance(grant_ids, list) or not all(isinstance(g, str) for g in grant_ids):
            raise TypeError("grant_ids must be a list of strings")
        store.put_creator(
            CreatorRecord(
                mint=_require_str(c, "mint"),
                pool=_require_str(c, "pool", optional=True),
                grant_ids=tuple(grant_ids),
            )
        )
    for f in d["fee_owners"]:
        last = f["last_claimed_at"]
        if not isinstance(last, int) or isinstance(last, bool):
            raise TypeError("last_claimed_at must be an int")
        store.put_fee_owner(
            FeePositionOwnerRecord(
                associated_mint=_require_str(f, "associated_mint"),
                creator_mint=_require_str(f, "creator_mint"),
                pool=_require_str(f, "pool"),
                owner=_require_str(f, "owner"),
                position=_require_str(f, "position", optional=True),
                last_claimed_at=int(last),
            )
        )
    return store
