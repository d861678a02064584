import pandas as pd
import numpy as np


def generate_mock_paths(num_paths=20, points_per_path=400, output_file="raw_paths_generated.csv"):
    """
    Generates hand-drawn looking paths to exercise simplification and snapping.
    Each path is a random walk with a drift direction plus finger jitter, sampled
    densely the way a touch screen reports drag events.
    """
    # Center around Berlin Mitte (dense road grid, good OSRM demo coverage)
    CENTER_LAT = 52.517037
    CENTER_LON = 13.388860

    rows = []
    for path_index in range(num_paths):
        start_lat = CENTER_LAT + np.random.uniform(-0.03, 0.03)
        start_lon = CENTER_LON + np.random.uniform(-0.03, 0.03)

        # Step length roughly 5-40 m, so paths span ~2-15 km
        step_deg = np.random.uniform(0.00005, 0.0004)
        heading = np.random.uniform(0, 2 * np.pi)
        headings = heading + np.cumsum(np.random.normal(0, 0.08, points_per_path))

        lats = start_lat + np.cumsum(step_deg * np.cos(headings))
        lons = start_lon + np.cumsum(step_deg * np.sin(headings))

        # finger jitter
        lats += np.random.normal(0, 0.00002, points_per_path)
        lons += np.random.normal(0, 0.00002, points_per_path)

        for seq, (lat, lon) in enumerate(zip(lats, lons)):
            rows.append({
                "path_id": f"p_{str(path_index + 1).zfill(4)}",
                "seq": seq,
                "lat": np.round(lat, 6),
                "lon": np.round(lon, 6),
            })

    df = pd.DataFrame(rows)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_paths} paths ({len(df)} points) and saved to '{output_file}'")


if __name__ == "__main__":
    generate_mock_paths(num_paths=20, points_per_path=400)
