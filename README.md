# migrationctl

A small library that models `StatefulMigration` resources (API group
`migration.vibe.io`, version `v1alpha1`) and drives them through their
migration phases with a reconciler. It has no dependencies outside the
standard library.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## The resource model

`migrationctl.types` holds the resource's data classes:

- `StatefulMigration` with `ObjectMeta`, a `StatefulMigrationSpec` and a
  `StatefulMigrationStatus`; its `api_version` defaults to
  `migration.vibe.io/v1alpha1` and its `kind` to `StatefulMigration`
- `StatefulMigrationList` with `ListMeta` and its `items`
- `MessageQueueConfig` for the message broker settings (`queue_name`,
  `broker_url`)
- `Condition` for status conditions
- `Phase`, the stages of a migration (`PENDING`, `CHECKPOINTING`,
  `TRANSFERRING`, `RESTORING`, `REPLAYING`, `FINALIZING`, `COMPLETED`,
  `FAILED`); `Phase.is_terminal` is true for `COMPLETED` and `FAILED`
- `GroupVersion`, whose `api_version()` gives `group/version`;
  `GROUP_VERSION` is the one for this API

Each class converts to and from the resource's JSON shape (camelCase keys)
with `to_dict()` and the class method `from_dict(data)`. Empty optional
fields are left out of the output; the nested `metadata`, `spec`, `status`,
`messageQueueConfig` and `items` entries, and a condition's `type`,
`status`, `lastTransitionTime`, `reason` and `message`, are always written.
A status without a phase has `phase` set to `None`; an unknown phase string
in `from_dict` raises `ValueError`.

`StatefulMigrationSpec.replay_cutoff_seconds` must be a 32-bit integer:
a non-integer raises `TypeError`, a value out of range `ValueError`.

`MessageQueueConfig`, `StatefulMigrationSpec`, `StatefulMigrationStatus`,
`StatefulMigration` and `StatefulMigrationList` also offer `deep_copy()`.

```python
from migrationctl.types import StatefulMigration

migration = StatefulMigration.from_dict({
    "metadata": {"name": "orders", "namespace": "shop"},
    "spec": {"sourcePod": "orders-0", "replayCutoffSeconds": 30},
})
print(migration.to_dict())
```

## The reconciler

`migrationctl.controller.StatefulMigrationReconciler` moves a migration
one phase forward each time `reconcile(request)` is called:

```
(no phase) -> Pending -> Checkpointing -> Transferring -> Restoring
           -> Replaying -> Finalizing -> Completed
```

On leaving `Checkpointing` it sets the checkpoint ID to
`chk-<unix seconds>`, taken from the reconciler's `clock` (default
`time.time`); on leaving `Restoring` it names the target pod
`<sourcePod>-restored`. `Completed` and `Failed` are terminal and left
alone. Each call returns a `Result`; `requeue` is true while there is more
to do and false once the migration reaches `Completed`. A `Request` whose
migration does not exist (the store raises `NotFoundError`) yields an empty
`Result` rather than an error. Each pass logs the current phase at INFO
level on the `migrationctl.controller` logger, or on the `logger` passed to
the reconciler.

The reconciler reads and writes migrations through a `MigrationStore`,
any object with `get(namespace, name)` and `update_status(migration)`.
`InMemoryStore` keeps copies of migrations in a dictionary; its
`update_status` replaces only the stored status:

```python
from migrationctl.controller import (
    InMemoryStore, Request, StatefulMigrationReconciler,
)
from migrationctl.types import StatefulMigration

store = InMemoryStore()
store.add(StatefulMigration.from_dict({
    "metadata": {"name": "orders", "namespace": "shop"},
    "spec": {"sourcePod": "orders-0"},
}))

reconciler = StatefulMigrationReconciler(store)
request = Request(namespace="shop", name="orders")
while reconciler.reconcile(request).requeue:
    pass

print(store.get("shop", "orders").status.phase.value)  # Completed
```

An error raised by the store's `update_status` is passed on by `reconcile`.

## What it does not do

The package has no command to run and does not talk to a cluster: there is
no client, watch loop, leader election or health endpoint, and the only
storage is `InMemoryStore`. The phases are bookkeeping only: no checkpoint
is taken, no image is built or pushed, no pod is created, no messages are
replayed and no traffic is switched. Nothing moves a migration to `Failed`.