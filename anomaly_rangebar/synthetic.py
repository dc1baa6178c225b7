from __future__ import annotations

import numpy as np


def synthetic_anomaly_series(
    points: int,
    *,
    seed: int = 7,
    spikes: int = 6,
    start: float = 0.0,
    step: float = 60.0,
) -> list[tuple[float, float, float]]:
    """Build ``(timestamp, value, anomaly_score)`` rows with a few injected spikes."""
    if points <= 0:
        raise ValueError("points must be > 0")
    rng = np.random.default_rng(seed)
    ts = start + np.arange(points, dtype=np.float64) * step
    phase = np.linspace(0.0, 6.0 * np.pi, points)
    values = 50.0 + 10.0 * np.sin(phase) + rng.normal(0.0, 1.5, size=points)
    scores = np.clip(rng.beta(1.2, 12.0, size=points), 0.0, 1.0)

    for idx in rng.choice(points, size=min(spikes, points), replace=False):
        values[idx] += rng.choice((-1.0, 1.0)) * rng.uniform(15.0, 30.0)
        scores[idx] = rng.uniform(0.6, 1.0)

    return [(float(t), float(v), float(s)) for t, v, s in zip(ts, values, scores)]
