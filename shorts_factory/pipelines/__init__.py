"""Pipeline orchestrators for the Shorts Factory."""

from shorts_factory.pipelines.run_pipeline import ShortsPipeline, main

__all__ = ["ShortsPipeline", "main"]
