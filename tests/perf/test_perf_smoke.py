from __future__ import annotations

import time
from dataclasses import dataclass

from tablebind import MemoryGridReader, MemoryGridWriter, column, read_records, write_records
from tablebind.services.accessors import BindingCache

"""Throughput smoke test for the in-memory read/write paths."""

ROWS = 20_000


@dataclass
class Reading:
    sensor: str = column("Sensor", field_default="")
    value: float = column("Value", field_default=0.0)
    ok: bool = column("OK", field_default=False)


def test_read_throughput():
    grid = [["Sensor", "Value", "OK"]] + [[f"s{i}", str(i * 0.5), "yes"] for i in range(ROWS)]
    reader = MemoryGridReader.single(grid)

    start = time.perf_counter()
    count = sum(1 for _ in read_records(reader, Reading, cache=BindingCache()))
    elapsed = time.perf_counter() - start

    assert count == ROWS
    throughput = count / elapsed
    assert throughput > 2_000, f"read throughput too low: {throughput:.0f} rows/s"


def test_write_throughput():
    records = [Reading(f"s{i}", i * 0.5, i % 2 == 0) for i in range(ROWS)]
    writer = MemoryGridWriter()

    start = time.perf_counter()
    written = write_records(writer, records, cache=BindingCache())
    elapsed = time.perf_counter() - start

    assert written == ROWS
    assert elapsed < 30, f"write too slow: {elapsed:.3f}s"
