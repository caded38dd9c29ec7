"""Thread-safety tests for TrustStore."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

from trustkeep.trust.codec import read_trust_file, trust_file_path
from trustkeep.trust.store import TrustStore


class TestConcurrentAccess:
    def test_capacity_never_exceeded_under_contention(self, trusts_dir):
        capacity = 8
        store = TrustStore(capacity=capacity, persistent=True, backing_root=trusts_dir)
        owners = [uuid4() for _ in range(40)]
        overflow = threading.Event()

        def worker(seed: int) -> None:
            for i in range(200):
                owner = owners[(seed * 7 + i) % len(owners)]
                with store.lock:
                    store.load(owner)
                    if len(store) > capacity:
                        overflow.set()
                store.get(owner)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert not overflow.is_set()
        assert len(store) <= capacity

    def test_concurrent_load_of_same_owner_yields_one_list(self, trusts_dir):
        store = TrustStore(capacity=4, persistent=True, backing_root=trusts_dir)
        owner = uuid4()
        barrier = threading.Barrier(8)
        results = []

        def worker() -> None:
            barrier.wait()
            results.append(store.load(owner))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_distinct_owners_saved_concurrently(self, trusts_dir):
        store = TrustStore(capacity=4, persistent=True, backing_root=trusts_dir)
        owners = [uuid4() for _ in range(16)]
        trustees = {owner: [uuid4() for _ in range(3)] for owner in owners}

        def worker(owner) -> None:
            with store.lock:
                store.load(owner)[:] = trustees[owner]
                store.save(owner)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, owners))

        for owner in owners:
            assert read_trust_file(trust_file_path(trusts_dir, owner)) == trustees[owner]

    def test_dirty_entries_survive_eviction_storm(self, trusts_dir):
        store = TrustStore(capacity=2, persistent=True, backing_root=trusts_dir)
        owners = [uuid4() for _ in range(12)]
        marker = uuid4()

        def worker(owner) -> None:
            with store.lock:
                store.load(owner).append(marker)

        with ThreadPoolExecutor(max_workers=6) as pool:
            list(pool.map(worker, owners))
        store.flush()

        for owner in owners:
            assert store.load(owner) == [marker]
