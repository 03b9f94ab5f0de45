"""
Command-line quoting and simulation tool.

    starbounty quote-pool --token-a-balance 50000000000000
    starbounty liquidity --amount-a 1000000 --amount-b 10000000000 \
        --sqrt-price ... --sqrt-min ... --sqrt-max ...
    starbounty simulate-distribution --input cycle.yaml

Results are printed as JSON on stdout; failures go to stderr with exit status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import yaml

from .config import EngineConfig, load_config
from .core.bootstrap import commitment_amount, plan_from_creator_balance
from .core.distribution import run_distribution
from .core.errors import EngineError
from .core.liquidity import calculate_liquidity
from .core.pricing import sqrt_price_to_price
from .core.types import DistributionCycleState, DistributionResult
from .core.vesting import FixedVestedAmount, Grant


logger = logging.getLogger("starbounty.cli")


def _int_arg(raw: str) -> int:
    try:
        return int(raw.replace("_", ""), 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc


def _load(args: argparse.Namespace) -> EngineConfig:
    return load_config(args.config)


def _cmd_quote_pool(args: argparse.Namespace) -> dict[str, Any]:
    cfg = _load(args)
    plan = plan_from_creator_balance(args.token_a_balance, cfg.bootstrap)
    return {
        "token_a_amount": commitment_amount(args.token_a_balance, cfg.bootstrap.commitment_bps),
        "token_b_amount": cfg.bootstrap.pool_amount,
        "sqrt_price": plan.sqrt_price,
        "sqrt_min_price": plan.sqrt_min_price,
        "sqrt_max_price": plan.sqrt_max_price,
        "liquidity": plan.liquidity,
        "price": sqrt_price_to_price(plan.sqrt_price),
    }


def _cmd_liquidity(args: argparse.Namespace) -> dict[str, Any]:
    liquidity = calculate_liquidity(args.amount_a, args.amount_b, args.sqrt_price, args.sqrt_min, args.sqrt_max)
    return {"liquidity": liquidity}


def _int_field(obj: Mapping[str, Any], key: str, where: str, default: Optional[int] = None) -> int:
    if key not in obj and default is not None:
        return default
    v = obj[key]
    if not isinstance(v, int) or isinstance(v, bool):
        raise ValueError(f"{where}.{key} must be an integer, got {v!r}")
    return v


def _grants_from_input(rows: Any) -> list[Grant]:
    if not isinstance(rows, list):
        raise ValueError("grants must be a list")
    grants: list[Grant] = []
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ValueError(f"grants[{i}] must be a mapping")
        grants.append(
            Grant(
                id=str(row.get("id", i)),
                net_deposited=_int_field(row, "net_deposited", f"grants[{i}]"),
                withdrawn=_int_field(row, "withdrawn", f"grants[{i}]", 0),
                schedule=FixedVestedAmount(vested=_int_field(row, "vested", f"grants[{i}]", 0)),
                recipient=str(row.get("recipient", row.get("id", i))),
            )
        )
    return grants


def _result_to_dict(result: DistributionResult) -> dict[str, Any]:
    return {
        "payouts": [
            {"grant_id": p.grant_id, "recipient": p.recipient, "amount": p.amount} for p in result.payouts
        ],
        "creator_remainder": result.creator_remainder,
        "last_distributed_at": result.new_state.last_distributed_at,
        "initial_locked": result.initial_locked,
        "total_locked": result.total_locked,
        "eligible_share_bps": result.eligible_share_bps,
        "investor_fee": result.investor_fee,
        "distributable": result.distributable,
    }


def _cmd_simulate_distribution(args: argparse.Namespace) -> dict[str, Any]:
    cfg = _load(args)
    data = yaml.safe_load(Path(args.input).read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("distribution input must be a mapping")
    result = run_distribution(
        now=_int_field(data, "now", "input"),
        settlement_balance=_int_field(data, "settlement_balance", "input"),
        grants=_grants_from_input(data.get("grants", [])),
        prior_state=DistributionCycleState(last_distributed_at=_int_field(data, "last_distributed_at", "input", 0)),
        params=cfg.distribution,
    )
    return _result_to_dict(result)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="starbounty", description="Launch pool pricing and fee distribution tool")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="command", required=True)

    q = sub.add_parser("quote-pool", help="plan the bootstrap pool for a creator balance")
    q.add_argument("--token-a-balance", type=_int_arg, required=True)
    q.add_argument("--config", default=None, help="YAML config file")
    q.set_defaults(func=_cmd_quote_pool)

    liq = sub.add_parser("liquidity", help="liquidity for two amounts over a sqrt price range")
    liq.add_argument("--amount-a", type=_int_arg, required=True)
    liq.add_argument("--amount-b", type=_int_arg, required=True)
    liq.add_argument("--sqrt-price", type=_int_arg, required=True)
    liq.add_argument("--sqrt-min", type=_int_arg, required=True)
    liq.add_argument("--sqrt-max", type=_int_arg, required=True)
    liq.set_defaults(func=_cmd_liquidity)

    d = sub.add_parser("simulate-distribution", help="run one distribution cycle from a YAML description")
    d.add_argument("--input", required=True)
    d.add_argument("--config", default=None, help="YAML config file")
    d.set_defaults(func=_cmd_simulate_distribution)
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        out = args.func(args)
    except (EngineError, ValueError, TypeError, KeyError, OSError) as exc:
        logger.debug("command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(out, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
