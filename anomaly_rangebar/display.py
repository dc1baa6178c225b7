from __future__ import annotations

import os


DEVICE_PIXEL_RATIO_ENV_VAR = "ANOMALY_RANGEBAR_DEVICE_PIXEL_RATIO"
REFERENCE_DPI = 96.0


def resolve_device_pixel_ratio(*, env_var: str = DEVICE_PIXEL_RATIO_ENV_VAR) -> float:
    raw = os.getenv(env_var, "").strip()
    if raw:
        try:
            ratio = float(raw)
        except ValueError as exc:
            raise ValueError(f"{env_var} must be a number, got {raw!r}") from exc
        if ratio <= 0:
            raise ValueError(f"{env_var} must be > 0")
        return ratio

    detected = _detect_pixel_ratio()
    if detected is None:
        return 1.0
    return detected


def _detect_pixel_ratio() -> float | None:
    try:
        import tkinter as tk

        root = tk.Tk()
        root.withdraw()
        dpi = float(root.winfo_fpixels("1i"))
        root.destroy()
        if dpi > 0:
            # Snap to quarter steps; Tk reports slightly fractional DPIs.
            return max(1.0, round((dpi / REFERENCE_DPI) * 4.0) / 4.0)
    except Exception:
        return None
    return None
