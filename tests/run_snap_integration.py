import logging

from routing.osrm_client import OSRMClient
from simplification.policy import fast_policy, precision_policy
from snapping.service import snap_to_road


def main():
    logging.basicConfig(level=logging.DEBUG)
    osrm = OSRMClient(profile="driving")

    # hand-drawn along Friedrichstrasse, Berlin (lat, lon)
    drawn = [
        (52.517037, 13.388860),
        (52.518000, 13.388700),
        (52.519500, 13.388600),
        (52.521000, 13.388500),
        (52.523500, 13.388300),
        (52.525500, 13.388100),
    ]

    for policy in (precision_policy(), fast_policy()):
        outcome = snap_to_road(osrm, drawn, policy=policy)
        print(f"\n[{policy.name}] success={outcome.success}")
        if not outcome.success:
            print(f"  reason: {outcome.reason}")
            continue

        print(f"  sent {outcome.request_points} points, got {len(outcome.snapped_path)} back")
        if outcome.warning:
            print(f"  warning: {outcome.warning}")
        for lat, lon in outcome.snapped_path[:5]:
            print(f"  {lat:.6f}, {lon:.6f}")
        print("  " + " -> ".join(state.value for state in outcome.states))

if __name__ == "__main__":
    main()
