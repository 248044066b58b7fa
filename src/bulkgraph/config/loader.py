"""Pipeline run defaults and environment overrides."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError, MissingConfigurationError

DEFAULT_PARTITIONS = 4
DEFAULT_MAX_WORKERS = 1
DEFAULT_MERGE_KEY = "name"


class WritePolicyKind(StrEnum):
    DEFAULT = "default"
    MERGE = "merge"
    HOOK = "hook"


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    partitions: int = DEFAULT_PARTITIONS
    max_workers: int = DEFAULT_MAX_WORKERS
    write_policy: WritePolicyKind = WritePolicyKind.DEFAULT
    merge_key: str = DEFAULT_MERGE_KEY
    policy_hook: str | None = None

    def __post_init__(self) -> None:
        if self.partitions < 1:
            raise ConfigurationError(f"partitions must be >= 1, got {self.partitions}")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.write_policy is WritePolicyKind.HOOK and not self.policy_hook:
            raise MissingConfigurationError(
                "Missing configuration for: BULKGRAPH_POLICY_HOOK (required by the hook policy)"
            )


def parse_write_policy(value: str) -> WritePolicyKind:
    try:
        return WritePolicyKind(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(kind.value for kind in WritePolicyKind)
        raise ConfigurationError(
            f"Unknown write policy {value!r}; expected one of: {choices}"
        ) from exc


def get_loader_config(
    *,
    partitions: int | None = None,
    max_workers: int | None = None,
    write_policy: WritePolicyKind | None = None,
    merge_key: str | None = None,
    policy_hook: str | None = None,
) -> LoaderConfig:
    """Build the loader config from the environment; explicit arguments win.

    Overrides are applied before validation, so an explicit ``policy_hook``
    satisfies ``BULKGRAPH_WRITE_POLICY=hook``.
    """

    if write_policy is None:
        policy = optional_env_var("BULKGRAPH_WRITE_POLICY")
        write_policy = parse_write_policy(policy) if policy else WritePolicyKind.DEFAULT
    if partitions is None:
        partitions = positive_int_env_var("BULKGRAPH_PARTITIONS", DEFAULT_PARTITIONS)
    if max_workers is None:
        max_workers = positive_int_env_var("BULKGRAPH_MAX_WORKERS", DEFAULT_MAX_WORKERS)
    return LoaderConfig(
        partitions=partitions,
        max_workers=max_workers,
        write_policy=write_policy,
        merge_key=merge_key or optional_env_var("BULKGRAPH_MERGE_KEY") or DEFAULT_MERGE_KEY,
        policy_hook=policy_hook or optional_env_var("BULKGRAPH_POLICY_HOOK"),
    )
