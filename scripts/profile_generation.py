import os
import sys
import time
from statistics import mean, pstdev

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from roomgrid.layout import LayoutConfig, RegenerationController  # noqa: E402

SEEDS = [11, 222, 3333, 4444, 55555, 67890, 72223, 88888, 99999, 123456]
CONFIG = LayoutConfig(width=50, height=50, max_rooms=100, min_rooms=20)


def run():
    runtimes = []
    for s in SEEDS:
        controller = RegenerationController(CONFIG)
        t0 = time.perf_counter()
        controller.start(s)
        controller.run()
        t1 = time.perf_counter()
        rt = (t1 - t0) * 1000
        m = controller.metrics
        print(
            f"seed={s} ms={rt:.2f} rooms={m['rooms_placed']} ticks={m['ticks']} doors={m['doors_opened']} "
            f"skipped={m['rejected_skipped']} crowded={m['rejected_crowded']}"
        )
        runtimes.append(rt)
    print("\nSummary:")
    print(
        f"count={len(runtimes)} avg_ms={mean(runtimes):.2f} sd_ms={pstdev(runtimes):.2f} min_ms={min(runtimes):.2f} max_ms={max(runtimes):.2f}"
    )


if __name__ == "__main__":
    run()
