"""Reconciler that drives a StatefulMigration through its phases."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from migrationctl.types import Phase, StatefulMigration

_log = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """Raised when a requested migration does not exist."""


@dataclass(frozen=True)
class Request:
    """Identifies the object to reconcile."""

    namespace: str
    name: str


@dataclass(frozen=True)
class Result:
    """Outcome of one reconcile pass."""

    requeue: bool = False
    requeue_after: float = 0.0


class MigrationStore(Protocol):
    """Storage the reconciler reads migrations from and writes status to."""

    def get(self, namespace: str, name: str) -> StatefulMigration:
        """Return the migration, raising NotFoundError if it does not exist."""

    def update_status(self, migration: StatefulMigration) -> None:
        """Persist the status of the given migration."""


class InMemoryStore:
    """A store that keeps migrations in a dictionary; useful for tests and dry runs."""

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], StatefulMigration] = {}

    @staticmethod
    def _key(migration: StatefulMigration) -> tuple[str, str]:
        return migration.metadata.namespace, migration.metadata.name

    def add(self, migration: StatefulMigration) -> None:
        """Store a copy of the migration, replacing any with the same name."""
        self._objects[self._key(migration)] = migration.deep_copy()

    def get(self, namespace: str, name: str) -> StatefulMigration:
        try:
            return self._objects[(namespace, name)].deep_copy()
        except KeyError:
            raise NotFoundError(f"statefulmigration {namespace}/{name} not found") from None

    def update_status(self, migration: StatefulMigration) -> None:
        """Replace only the status of the stored object, as a status subresource does."""
        key = self._key(migration)
        stored = self._objects.get(key)
        if stored is None:
            raise NotFoundError(f"statefulmigration {key[0]}/{key[1]} not found")
        stored.status = migration.status.deep_copy()


class StatefulMigrationReconciler:
    """Moves a migration one phase forward on each reconcile."""

    def __init__(
        self,
        store: MigrationStore,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.logger = logger or _log
        self._handlers: dict[Phase, Callable[[StatefulMigration], Result]] = {
            Phase.PENDING: self._handle_pending,
            Phase.CHECKPOINTING: self._handle_checkpointing,
            Phase.TRANSFERRING: self._handle_transferring,
            Phase.RESTORING: self._handle_restoring,
            Phase.REPLAYING: self._handle_replaying,
            Phase.FINALIZING: self._handle_finalizing,
        }

    def reconcile(self, request: Request) -> Result:
        """Advance the named migration by one phase; missing objects are ignored."""
        try:
            migration = self.store.get(request.namespace, request.name)
        except NotFoundError:
            return Result()

        phase = migration.status.phase
        self.logger.info(
            "Reconciling StatefulMigration phase=%s", phase.value if phase else ""
        )

        if phase is None:
            return self._advance(migration, Phase.PENDING)
        handler = self._handlers.get(phase)
        if handler is None:
            return Result()
        return handler(migration)

    def _advance(self, migration: StatefulMigration, phase: Phase, requeue: bool = True) -> Result:
        migration.status.phase = phase
        self.store.update_status(migration)
        return Result(requeue=requeue)

    def _handle_pending(self, migration: StatefulMigration) -> Result:
        return self._advance(migration, Phase.CHECKPOINTING)

    def _handle_checkpointing(self, migration: StatefulMigration) -> Result:
        migration.status.checkpoint_id = f"chk-{int(self.clock())}"
        return self._advance(migration, Phase.TRANSFERRING)

    def _handle_transferring(self, migration: StatefulMigration) -> Result:
        return self._advance(migration, Phase.RESTORING)

    def _handle_restoring(self, migration: StatefulMigration) -> Result:
        migration.status.target_pod = migration.spec.source_pod + "-restored"
        return self._advance(migration, Phase.REPLAYING)

    def _handle_replaying(self, migration: StatefulMigration) -> Result:
        return self._advance(migration, Phase.FINALIZING)

    def _handle_finalizing(self, migration: StatefulMigration) -> Result:
        return self._advance(migration, Phase.COMPLETED, requeue=False)