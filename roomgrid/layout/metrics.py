from typing import Dict

REJECTION_REASONS = ("bounds", "occupied", "capacity", "skipped", "crowded")


def init_metrics() -> Dict[str, int | float]:
    metrics: Dict[str, int | float] = {
        'ticks': 0,
        'rooms_placed': 0,
        'doors_opened': 0,
        'regenerations': 0,
        'retries': 0,
        'runtime_ms': 0.0,
    }
    for reason in REJECTION_REASONS:
        metrics[f'rejected_{reason}'] = 0
    return metrics
