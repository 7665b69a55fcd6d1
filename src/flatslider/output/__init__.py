"""Result post-processing: tabular history and hysteresis plots."""

from flatslider.output.history import export_csv, history_to_frame

__all__ = ["export_csv", "history_to_frame"]
