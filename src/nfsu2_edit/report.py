"""Per-slot summary of a save record."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from nfsu2_core.protocol import NUM_CAR_SLOTS, PERFORMANCE_BYTES, Performance, car_slot_offset, performance_offset
from nfsu2_edit.record import SaveRecord

SLOT_SCHEMA = pa.schema(
    [
        ("slot", pa.int32()),
        ("used", pa.bool_()),
        ("offset", pa.int64()),
        ("perf_offset", pa.int64()),
        ("perf_state", pa.string()),
    ]
)


def performance_state(block: bytes) -> str:
    if all(b == PERFORMANCE_BYTES[Performance.MAX] for b in block):
        return "maxed"
    if all(b == PERFORMANCE_BYTES[Performance.NILL] for b in block):
        return "nilled"
    return "mixed"


def slot_table(record: SaveRecord) -> pd.DataFrame:
    rows: list[dict] = []
    for i in range(NUM_CAR_SLOTS):
        used = record.slot_used(i)
        rows.append({
            "slot": i,
            "used": used,
            "offset": car_slot_offset(i),
            "perf_offset": performance_offset(i),
            "perf_state": performance_state(record.get_car_performance(i)) if used else "empty",
        })
    return pd.DataFrame(rows)


def write_slot_table(df: pd.DataFrame, out_path: Path) -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=SLOT_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
