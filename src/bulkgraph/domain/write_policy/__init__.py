"""Pluggable get-or-create policies used by the vertex and edge phases."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import (
    MissingOperationError,
    PolicyHookLoadError,
    WritePolicy,
    WritePolicyError,
    WritePolicyFactory,
)
from .default import DEFAULT_MERGE_KEY, DefaultWritePolicy, MergeByKeyWritePolicy
from .hook import HookWritePolicy, hook_policy_factory, load_policy_hook, probe_operation

if TYPE_CHECKING:
    from bulkgraph.domain.model import Phase


def static_policy_factory(policy: WritePolicy) -> WritePolicyFactory:
    """Wrap a stateless policy so every task shares it."""

    def factory(phase: Phase) -> WritePolicy:
        _ = phase
        return policy

    return factory


__all__ = [
    "DEFAULT_MERGE_KEY",
    "DefaultWritePolicy",
    "HookWritePolicy",
    "MergeByKeyWritePolicy",
    "MissingOperationError",
    "PolicyHookLoadError",
    "WritePolicy",
    "WritePolicyError",
    "WritePolicyFactory",
    "hook_policy_factory",
    "load_policy_hook",
    "probe_operation",
    "static_policy_factory",
]
