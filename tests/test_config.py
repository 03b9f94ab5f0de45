# [TESTER] v1

from __future__ import annotations

import pytest

from starbounty.config import EngineConfig, GrantTemplate, config_from_mapping, load_config
from starbounty.core.errors import InvalidPreconditionError


def test_defaults_without_file_or_env() -> None:
    cfg = load_config(environ={})
    assert cfg == EngineConfig()
    assert cfg.distribution.daily_cap == 1_000_000_000
    assert cfg.distribution.cooldown_seconds == 86_400
    assert cfg.bootstrap.pool_amount == 1_000_000_000_000
    assert cfg.grant == GrantTemplate()


def test_yaml_file(tmp_path) -> None:
    path = tmp_path / "starbounty.yaml"
    path.write_text(
        "distribution:\n"
        "  daily_cap: 2_000_000_000\n"
        "  max_share_bps: 500\n"
        "grant:\n"
        "  cliff_amount: 100\n",
        encoding="utf-8",
    )
    cfg = load_config(path, environ={})
    assert cfg.distribution.daily_cap == 2_000_000_000
    assert cfg.distribution.max_share_bps == 500
    assert cfg.distribution.dust_threshold == 1_000_000
    assert cfg.grant.cliff_amount == 100


def test_empty_yaml_file_is_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, environ={}) == EngineConfig()


def test_env_overrides_file(tmp_path) -> None:
    path = tmp_path / "starbounty.yaml"
    path.write_text("distribution:\n  daily_cap: 5\n", encoding="utf-8")
    env = {
        "STARBOUNTY_DISTRIBUTION_DAILY_CAP": "7",
        "STARBOUNTY_BOOTSTRAP_COMMITMENT_BPS": "2_000",
        "UNRELATED": "x",
    }
    cfg = load_config(path, environ=env)
    assert cfg.distribution.daily_cap == 7
    assert cfg.bootstrap.commitment_bps == 2_000


@pytest.mark.parametrize(
    "data",
    [
        {"distribution": {"no_such_key": 1}},
        {"nonsense": {}},
        {"distribution": {"daily_cap": "lots"}},
        {"distribution": {"daily_cap": True}},
        {"distribution": {"max_share_bps": 20_000}},
        {"grant": {"period": 0}},
        {"bootstrap": "not-a-mapping"},
    ],
)
def test_invalid_values_fail_closed(data) -> None:
    with pytest.raises(InvalidPreconditionError):
        config_from_mapping(data)


def test_bad_env_value_fails_closed() -> None:
    with pytest.raises(InvalidPreconditionError):
        load_config(environ={"STARBOUNTY_DISTRIBUTION_COOLDOWN_SECONDS": "1d"})


def test_non_mapping_yaml_rejected(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidPreconditionError):
        load_config(path, environ={})
