"""Benchmark: in-memory store latency — per-call mean/p99 for update and get.

``InMemoryStore`` looks sessions up with a linear scan, so latency grows
with the number of stored sessions.  This measures both operations after
the store has been pre-populated.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gateway_session_store.codec import JsonCodec
from gateway_session_store.session import Session, SessionId
from gateway_session_store.storage.memory import InMemoryStore

_WARMUP: int = 500
_ITERATIONS: int = 2_000


def _summary(operation: str, latencies_ms: list[float]) -> dict[str, object]:
    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000
    return {
        "operation": operation,
        "iterations": n,
        "total_seconds": round(total, 4),
        "ops_per_second": round(n / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
    }


async def bench_store_latency() -> list[dict[str, object]]:
    """Benchmark InMemoryStore.update() and get() per-call latency.

    Returns
    -------
    list of dicts with keys: operation, iterations, total_seconds,
    ops_per_second, avg_latency_ms, p99_latency_ms.
    """
    store = InMemoryStore()
    codec = JsonCodec()
    expires = datetime.now(timezone.utc) + timedelta(hours=1)

    for i in range(_WARMUP):
        sid = SessionId(value=f"warmup-{i}".encode(), expires=expires)
        await store.update(Session(sid, {"uri": f"/warmup/{i}"}), codec)

    ids = [SessionId(value=f"bench-{i}".encode(), expires=expires) for i in range(_ITERATIONS)]

    update_ms: list[float] = []
    for i, sid in enumerate(ids):
        t0 = time.perf_counter()
        await store.update(Session(sid, {"uri": f"/bench/{i}"}), codec)
        update_ms.append((time.perf_counter() - t0) * 1000)

    get_ms: list[float] = []
    for sid in ids:
        t0 = time.perf_counter()
        await store.get(sid, codec)
        get_ms.append((time.perf_counter() - t0) * 1000)

    results = [_summary("memory_update", update_ms), _summary("memory_get", get_ms)]
    for result in results:
        print(
            f"[bench_store_latency] {result['operation']}: "
            f"p99={result['p99_latency_ms']:.4f}ms  "
            f"mean={result['avg_latency_ms']:.4f}ms"
        )
    return results


def run_benchmark() -> list[dict[str, object]]:
    """Entry point returning the benchmark results."""
    return asyncio.run(bench_store_latency())


if __name__ == "__main__":
    results = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2)
    print(f"Results saved to {output_path}")
