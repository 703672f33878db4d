"""
Thread safety of the permission store, override registry and engine.

Each test starts a pool of threads hammering one component and checks that
no update was lost and no reader ever failed.
"""

import threading

from gatekeeper.permissions.engine import PermissionEngine
from gatekeeper.permissions.overrides import OverrideRegistry
from gatekeeper.permissions.store import PermissionStore

THREADS = 8
OPERATIONS = 200


def run_threads(target, count=THREADS):
    errors = []

    def guarded(index):
        try:
            target(index)
        except Exception as e:  # collected and asserted on below
            errors.append(e)

    threads = [threading.Thread(target=guarded, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


class TestStoreConcurrency:
    """Concurrent writers and readers on PermissionStore"""

    def test_concurrent_player_grants(self, store: PermissionStore):
        def grant(index):
            pid = 1000 + index
            store.create_player(pid)
            for op in range(OPERATIONS):
                store.add_direct_permission(pid, f"perm{op}")

        assert run_threads(grant) == []
        for index in range(THREADS):
            assert len(store.find_player_by_id(1000 + index).permissions) == OPERATIONS

    def test_concurrent_group_creation_is_unique(self, store):
        results = []

        def create(index):
            results.append(store.create_group("Contested"))

        assert run_threads(create) == []
        assert results.count(True) == 1
        assert len(store.list_groups()) == 1

    def test_readers_during_renames(self, store):
        store.create_group("g0", ["x"])
        store.create_player(1, groups=["g0"])
        stop = threading.Event()
        seen = []

        def reader(_):
            while not stop.is_set():
                for player in store.list_players():
                    seen.append(len(player.groups))

        def renamer(_):
            try:
                for op in range(OPERATIONS):
                    store.rename_group(f"g{op}", f"g{op + 1}")
            finally:
                stop.set()

        errors = run_threads(lambda i: renamer(i) if i == 0 else reader(i), count=4)

        assert errors == []
        assert set(seen) <= {1}
        assert store.find_player_by_id(1).groups == [f"g{OPERATIONS}"]


class TestOverrideConcurrency:
    """Concurrent force_off / clear_force_off"""

    def test_force_off_each_principal_once(self, overrides: OverrideRegistry):
        results = []

        def force(index):
            for pid in range(OPERATIONS):
                results.append(overrides.force_off(pid, False))

        assert run_threads(force) == []
        assert results.count(True) == OPERATIONS
        assert len(overrides) == OPERATIONS


class TestEngineConcurrency:
    """Permission checks racing with administration"""

    def test_checks_during_mutation(self, engine: PermissionEngine):
        engine.create_group("Builders", ["build"])
        engine.create_player(42, groups=["Builders"])
        stop = threading.Event()

        def checker(_):
            while not stop.is_set():
                engine.has_permission(42, "build")
                engine.has_permission(7, "help")

        def admin(_):
            try:
                for op in range(OPERATIONS):
                    engine.add_permission_to_group("Builders", f"tool{op}")
                    engine.force_off(42, False)
                    engine.clear_force_off(42)
            finally:
                stop.set()

        errors = run_threads(lambda i: admin(i) if i == 0 else checker(i), count=4)

        assert errors == []
        assert engine.has_permission(42, "build") is True
        assert engine.has_permission(42, f"tool{OPERATIONS - 1}") is True
