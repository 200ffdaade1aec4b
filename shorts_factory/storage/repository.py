"""Storage repository for pipeline run records."""

import json
from pathlib import Path
from typing import Any, Optional

from shorts_factory.core.config import Settings
from shorts_factory.models.schemas import PipelineResult


class RunRepository:
    """Stores terminal pipeline results as JSON files, one per run."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the repository.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.storage_path = Path(settings.run_records_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def save_result(self, result: PipelineResult) -> Path:
        """
        Save a run result.

        Args:
            result: Terminal result of a run

        Returns:
            Path of the JSON record
        """
        file_path = self.storage_path / f"{result.run_id}.json"

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(result.model_dump_json(indent=2))

        self.logger.info(f"Run record saved to: {file_path}")
        return file_path

    def load_result(self, run_id: str) -> Optional[PipelineResult]:
        """
        Load a run result.

        Args:
            run_id: Run identifier

        Returns:
            The stored result if found, None otherwise
        """
        file_path = self.storage_path / f"{run_id}.json"

        if not file_path.exists():
            self.logger.warning(f"Run record not found: {run_id}")
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return PipelineResult.model_validate(data)

    def list_runs(self) -> list[str]:
        """
        List all stored run IDs.

        Returns:
            Run IDs sorted by name
        """
        run_ids = sorted(f.stem for f in self.storage_path.glob("*.json"))
        self.logger.debug(f"Found {len(run_ids)} run records")
        return run_ids
