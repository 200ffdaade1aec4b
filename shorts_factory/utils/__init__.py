"""Utility functions for the Shorts Factory."""

from shorts_factory.utils.io_utils import create_run_output_dir, new_run_id
from shorts_factory.utils.text_utils import split_sentences, wrap_words

__all__ = [
    "create_run_output_dir",
    "new_run_id",
    "split_sentences",
    "wrap_words",
]
