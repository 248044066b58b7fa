from __future__ import annotations

import pytest

from bulkgraph.config import (
    DEFAULT_PARTITIONS,
    ConfigurationError,
    LoaderConfig,
    MissingConfigurationError,
    WritePolicyKind,
    get_loader_config,
)

_ENV_VARS = (
    "BULKGRAPH_PARTITIONS",
    "BULKGRAPH_MAX_WORKERS",
    "BULKGRAPH_WRITE_POLICY",
    "BULKGRAPH_MERGE_KEY",
    "BULKGRAPH_POLICY_HOOK",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    config = get_loader_config()

    assert config == LoaderConfig()
    assert config.partitions == DEFAULT_PARTITIONS
    assert config.write_policy is WritePolicyKind.DEFAULT
    assert config.merge_key == "name"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BULKGRAPH_PARTITIONS", "8")
    monkeypatch.setenv("BULKGRAPH_MAX_WORKERS", " 3 ")
    monkeypatch.setenv("BULKGRAPH_WRITE_POLICY", "Merge")
    monkeypatch.setenv("BULKGRAPH_MERGE_KEY", "uid")

    config = get_loader_config()

    assert config.partitions == 8
    assert config.max_workers == 3
    assert config.write_policy is WritePolicyKind.MERGE
    assert config.merge_key == "uid"


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BULKGRAPH_PARTITIONS", "   ")
    monkeypatch.setenv("BULKGRAPH_MERGE_KEY", "")

    config = get_loader_config()

    assert config.partitions == DEFAULT_PARTITIONS
    assert config.merge_key == "name"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("BULKGRAPH_PARTITIONS", "many", "must be an integer"),
        ("BULKGRAPH_MAX_WORKERS", "0", "must be >= 1"),
        ("BULKGRAPH_WRITE_POLICY", "upsert", "Unknown write policy"),
    ],
)
def test_invalid_values_raise(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=message):
        get_loader_config()


def test_hook_policy_requires_reference(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BULKGRAPH_WRITE_POLICY", "hook")

    with pytest.raises(MissingConfigurationError, match="BULKGRAPH_POLICY_HOOK"):
        get_loader_config()

    monkeypatch.setenv("BULKGRAPH_POLICY_HOOK", "my_hooks:merge")
    assert get_loader_config().policy_hook == "my_hooks:merge"


def test_direct_construction_is_validated() -> None:
    with pytest.raises(ConfigurationError, match="partitions"):
        LoaderConfig(partitions=0)


def test_explicit_values_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BULKGRAPH_PARTITIONS", "many")
    monkeypatch.setenv("BULKGRAPH_WRITE_POLICY", "hook")
    monkeypatch.setenv("BULKGRAPH_MERGE_KEY", "uid")

    config = get_loader_config(partitions=2, policy_hook="my_hooks:merge")

    assert config.partitions == 2
    assert config.write_policy is WritePolicyKind.HOOK
    assert config.policy_hook == "my_hooks:merge"
    assert config.merge_key == "uid"
