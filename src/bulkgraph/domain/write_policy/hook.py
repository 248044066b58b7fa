"""Write policies backed by an injected hook object.

A hook is any object (typically a module) exposing one or both of::

    get_or_create_vertex(vertex, store, context) -> VertexHandle
    get_or_create_edge(edge, out_vertex, in_vertex, store, context) -> EdgeHandle

Each task probes the operation it needs once, at setup, by calling it with
all-``None`` arguments. A missing attribute, ``NotImplementedError`` or
:class:`MissingOperationError` means the hook does not provide the operation
and the task uses the default policy for its whole lifetime. Any other probe
outcome, including an exception caused by the ``None`` arguments, counts as
present.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from bulkgraph.domain.model import EdgeHandle, Phase, VertexHandle

from .contracts import MissingOperationError, PolicyHookLoadError, WritePolicyError
from .default import DefaultWritePolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from bulkgraph.domain.model import EdgeRecord, VertexRecord
    from bulkgraph.domain.output_pipeline.task import TaskContext
    from bulkgraph.domain.ports import GraphStore

    from .contracts import WritePolicy, WritePolicyFactory

log = logging.getLogger(__name__)

GET_OR_CREATE_VERTEX: Final[str] = "get_or_create_vertex"
GET_OR_CREATE_EDGE: Final[str] = "get_or_create_edge"

_PROBE_ARGUMENTS: Final[dict[str, tuple[None, ...]]] = {
    GET_OR_CREATE_VERTEX: (None, None, None),
    GET_OR_CREATE_EDGE: (None, None, None, None, None),
}
_OPERATION_BY_PHASE: Final[dict[Phase, str]] = {
    Phase.VERTEX_WRITE: GET_OR_CREATE_VERTEX,
    Phase.EDGE_WRITE: GET_OR_CREATE_EDGE,
}


def probe_operation(hook: object, name: str) -> Callable[..., Any] | None:
    """Return the hook's operation ``name`` if it answers the no-op probe."""

    operation = getattr(hook, name, None)
    if operation is None or not callable(operation):
        return None
    try:
        operation(*_PROBE_ARGUMENTS[name])
    except (NotImplementedError, MissingOperationError):
        return None
    except Exception:  # noqa: BLE001
        log.debug("Probe of %s raised on None arguments; treating it as present", name)
    return operation


class HookWritePolicy:
    """Delegate to hook operations, falling back per operation to the default."""

    def __init__(
        self,
        hook: object,
        *,
        probe: tuple[str, ...] = (GET_OR_CREATE_VERTEX, GET_OR_CREATE_EDGE),
        fallback: WritePolicy | None = None,
    ) -> None:
        self.hook = hook
        self.fallback = fallback or DefaultWritePolicy()
        self._vertex_operation = (
            probe_operation(hook, GET_OR_CREATE_VERTEX) if GET_OR_CREATE_VERTEX in probe else None
        )
        self._edge_operation = (
            probe_operation(hook, GET_OR_CREATE_EDGE) if GET_OR_CREATE_EDGE in probe else None
        )

    @property
    def provides_vertex_operation(self) -> bool:
        return self._vertex_operation is not None

    @property
    def provides_edge_operation(self) -> bool:
        return self._edge_operation is not None

    def get_or_create_vertex(
        self,
        vertex: VertexRecord,
        store: GraphStore,
        context: TaskContext,
    ) -> VertexHandle:
        if self._vertex_operation is None:
            return self.fallback.get_or_create_vertex(vertex, store, context)
        try:
            handle = self._vertex_operation(vertex, store, context)
        except Exception as exc:
            raise WritePolicyError(
                f"{GET_OR_CREATE_VERTEX} hook failed for vertex {vertex.id}: {exc}"
            ) from exc
        if not isinstance(handle, VertexHandle):
            raise WritePolicyError(
                f"{GET_OR_CREATE_VERTEX} hook returned {type(handle).__name__}, "
                "expected VertexHandle"
            )
        return handle

    def get_or_create_edge(
        self,
        edge: EdgeRecord,
        out_vertex: VertexHandle,
        in_vertex: VertexHandle,
        store: GraphStore,
        context: TaskContext,
    ) -> EdgeHandle:
        if self._edge_operation is None:
            return self.fallback.get_or_create_edge(edge, out_vertex, in_vertex, store, context)
        try:
            handle = self._edge_operation(edge, out_vertex, in_vertex, store, context)
        except Exception as exc:
            raise WritePolicyError(
                f"{GET_OR_CREATE_EDGE} hook failed for edge "
                f"{edge.out_id}-[{edge.label}]->{edge.in_id}: {exc}"
            ) from exc
        if not isinstance(handle, EdgeHandle):
            raise WritePolicyError(
                f"{GET_OR_CREATE_EDGE} hook returned {type(handle).__name__}, expected EdgeHandle"
            )
        return handle


def hook_policy_factory(hook: object) -> WritePolicyFactory:
    """Return a factory building a freshly probed :class:`HookWritePolicy` per task."""

    def factory(phase: Phase) -> WritePolicy:
        operation = _OPERATION_BY_PHASE.get(phase)
        policy = HookWritePolicy(hook, probe=(operation,) if operation else ())
        if operation is not None and not (
            policy.provides_vertex_operation or policy.provides_edge_operation
        ):
            log.info("Policy hook has no %s; using the default policy", operation)
        return policy

    return factory


def load_policy_hook(reference: str) -> object:
    """Import a hook from ``package.module``, ``package.module:attr`` or ``file.py``."""

    target, _, attribute = reference.partition(":")
    try:
        if target.endswith(".py"):
            module = _load_module_from_path(Path(target))
        else:
            module = importlib.import_module(target)
    except (ImportError, OSError) as exc:
        raise PolicyHookLoadError(f"Cannot import policy hook {reference!r}: {exc}") from exc

    if not attribute:
        return module
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise PolicyHookLoadError(
            f"Policy hook module {target!r} has no attribute {attribute!r}"
        ) from exc


def _load_module_from_path(path: Path) -> object:
    resolved = path.expanduser().resolve()
    if not resolved.is_file():
        raise ImportError(f"No such file: {resolved}")
    spec = importlib.util.spec_from_file_location(f"bulkgraph_hook_{resolved.stem}", resolved)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot build an import spec for {resolved}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
