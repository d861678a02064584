import argparse
import logging
import time
from typing import Dict, List

import pandas as pd

from geometry.distance import LatLon
from geometry.filters import select_waypoints
from routing.osrm_client import OSRMClient
from simplification.policy import fast_policy, precision_policy
from snapping.service import snap_to_road

PREVIEW_WAYPOINTS = 5


def load_paths(filepath="raw_paths_generated.csv", limit=10) -> Dict[str, List[LatLon]]:
    df = pd.read_csv(filepath)
    df = df.sort_values(["path_id", "seq"])

    paths: Dict[str, List[LatLon]] = {}
    for path_id, group in df.groupby("path_id", sort=True):
        if len(paths) >= limit:
            break
        paths[str(path_id)] = list(zip(group["lat"].astype(float), group["lon"].astype(float)))
    return paths


def run_simulation(filepath: str, limit: int, policy_name: str) -> None:
    print("=== STARTING ROAD SNAPPING SIMULATION ===")

    paths = load_paths(filepath, limit=limit)
    print(f"Loaded {len(paths)} drawn paths.\n")

    policy = fast_policy() if policy_name == "fast" else precision_policy()
    osrm = OSRMClient()

    matched = 0
    degraded = 0
    results = []
    for path_id, path in paths.items():
        start_time = time.time()
        outcome = snap_to_road(osrm, path, policy=policy)
        elapsed = time.time() - start_time

        if not outcome.success:
            print(f"[FAILED] {path_id} -> {outcome.reason}")
            continue

        if outcome.degraded:
            degraded += 1
            print(f"[DEGRADED] {path_id} -> {outcome.warning} ({elapsed:.2f}s)")
        else:
            matched += 1
            print(
                f"[MATCHED] {path_id} -> {len(path)} drawn, {outcome.request_points} sent, "
                f"{len(outcome.snapped_path)} snapped ({elapsed:.2f}s)"
            )
            preview = select_waypoints(outcome.snapped_path, PREVIEW_WAYPOINTS)
            print("  preview: " + " -> ".join(f"({lat:.5f}, {lon:.5f})" for lat, lon in preview))

        results.append({
            "path_id": path_id,
            "drawn_points": len(path),
            "request_points": outcome.request_points,
            "snapped_points": len(outcome.snapped_path),
            "warning": outcome.warning or "",
            "seconds": round(elapsed, 3),
        })

    pd.DataFrame(results).to_csv("snap_results.csv", index=False)

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Matched: {matched} / {len(paths)}")
    print(f"Degraded: {degraded} / {len(paths)}")
    print("Results written to 'snap_results.csv'.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Snap generated drawn paths against OSRM.")
    parser.add_argument("--input", default="raw_paths_generated.csv")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--policy", choices=["precision", "fast"], default="precision")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_simulation(args.input, args.limit, args.policy)
