"""I/O utility functions for file and directory operations."""

import uuid
from datetime import datetime
from pathlib import Path


def create_run_output_dir(base_dir: str, label: str = "") -> Path:
    """
    Create a new timestamped working directory under ``base_dir``.

    Args:
        base_dir: Configured output directory
        label: Optional suffix, e.g. "short" gives "2026-01-31_093000_short"

    Returns:
        Path to the created directory
    """
    stamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    run_dir = Path(base_dir) / (f"{stamp}_{label}" if label else stamp)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def new_run_id() -> str:
    """Return a short unique run identifier."""
    return f"run_{uuid.uuid4().hex[:12]}"
