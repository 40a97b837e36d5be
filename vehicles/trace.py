"""
Purpose: Tabular export of a simulated run.
What it does:
Builds one row per route point with the metrics the vehicle would report at
that index, so a run can be inspected or written to CSV after playback.
"""

from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from .metrics import compute_metrics
from .models import RoutePoint

TRACE_COLUMNS = [
    "latitude",
    "longitude",
    "timestamp",
    "elapsed_s",
    "distance_traveled_m",
    "speed_kmh",
    "progress_pct",
]


def build_trace_frame(route: Sequence[RoutePoint]) -> pd.DataFrame:
    rows = []
    for index, point in enumerate(route):
        metadata = compute_metrics(route, index)
        rows.append(
            {
                "latitude": point.latitude,
                "longitude": point.longitude,
                "timestamp": point.timestamp,
                "elapsed_s": metadata.elapsed_time,
                "distance_traveled_m": metadata.distance_traveled,
                "speed_kmh": metadata.current_speed,
                "progress_pct": metadata.progress,
            }
        )
    # keep the columns even for an empty route
    return pd.DataFrame(rows, columns=TRACE_COLUMNS)


def write_trace_csv(route: Sequence[RoutePoint], path: Union[str, Path]) -> Path:
    path = Path(path)
    build_trace_frame(route).to_csv(path, index_label="index")
    return path
