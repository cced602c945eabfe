import pytest

from migrationctl.controller import (
    InMemoryStore,
    NotFoundError,
    Request,
    Result,
    StatefulMigrationReconciler,
)
from migrationctl.types import (
    ObjectMeta,
    Phase,
    StatefulMigration,
    StatefulMigrationSpec,
    StatefulMigrationStatus,
)

FIXED_TIME = 1700000000


def _migration(phase=None, source_pod="db-0"):
    return StatefulMigration(
        metadata=ObjectMeta(name="mig", namespace="default"),
        spec=StatefulMigrationSpec(source_pod=source_pod),
        status=StatefulMigrationStatus(phase=phase),
    )


def _setup(phase=None):
    store = InMemoryStore()
    store.add(_migration(phase))
    reconciler = StatefulMigrationReconciler(store, clock=lambda: FIXED_TIME)
    return store, reconciler


REQUEST = Request(namespace="default", name="mig")


def test_initial_phase_becomes_pending():
    store, reconciler = _setup()
    result = reconciler.reconcile(REQUEST)
    assert result == Result(requeue=True)
    assert store.get("default", "mig").status.phase is Phase.PENDING


def test_full_progression():
    store, reconciler = _setup()
    seen = []
    results = []
    for _ in range(7):
        results.append(reconciler.reconcile(REQUEST))
        seen.append(store.get("default", "mig").status.phase)
    assert seen == [
        Phase.PENDING,
        Phase.CHECKPOINTING,
        Phase.TRANSFERRING,
        Phase.RESTORING,
        Phase.REPLAYING,
        Phase.FINALIZING,
        Phase.COMPLETED,
    ]
    assert [r.requeue for r in results] == [True] * 6 + [False]
    final = store.get("default", "mig").status
    assert final.checkpoint_id == f"chk-{FIXED_TIME}"
    assert final.target_pod == "db-0-restored"


def test_checkpoint_id_uses_clock():
    store, reconciler = _setup(Phase.CHECKPOINTING)
    reconciler.reconcile(REQUEST)
    status = store.get("default", "mig").status
    assert status.checkpoint_id == f"chk-{FIXED_TIME}"
    assert status.phase is Phase.TRANSFERRING


def test_restoring_names_target_pod():
    store, reconciler = _setup(Phase.RESTORING)
    reconciler.reconcile(REQUEST)
    assert store.get("default", "mig").status.target_pod == "db-0-restored"


@pytest.mark.parametrize("phase", [Phase.COMPLETED, Phase.FAILED])
def test_terminal_phases_untouched(phase):
    store, reconciler = _setup(phase)
    before = store.get("default", "mig")
    assert reconciler.reconcile(REQUEST) == Result()
    assert store.get("default", "mig") == before


def test_missing_object_is_ignored():
    _, reconciler = _setup()
    assert reconciler.reconcile(Request("default", "absent")) == Result()


def test_store_errors_propagate():
    class FailingStore:
        def get(self, namespace, name):
            return _migration(Phase.PENDING)

        def update_status(self, migration):
            raise RuntimeError("conflict")

    reconciler = StatefulMigrationReconciler(FailingStore())
    with pytest.raises(RuntimeError, match="conflict"):
        reconciler.reconcile(REQUEST)


def test_store_get_missing_raises():
    with pytest.raises(NotFoundError):
        InMemoryStore().get("default", "nothing")


def test_store_update_missing_raises():
    with pytest.raises(NotFoundError):
        InMemoryStore().update_status(_migration(Phase.PENDING))


def test_store_returns_copies():
    store = InMemoryStore()
    store.add(_migration())
    fetched = store.get("default", "mig")
    fetched.status.phase = Phase.FAILED
    assert store.get("default", "mig").status.phase is None


def test_store_update_status_keeps_spec():
    store = InMemoryStore()
    store.add(_migration(source_pod="db-0"))
    changed = _migration(Phase.RESTORING, source_pod="other")
    store.update_status(changed)
    stored = store.get("default", "mig")
    assert stored.status.phase is Phase.RESTORING
    assert stored.spec.source_pod == "db-0"