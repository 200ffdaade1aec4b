"""Subtitle Cue Builder - sentence-level cues spread evenly over the video.

Output: standard SRT (SubRip Text), UTF-8 encoded. Each block is the cue
number, ``HH:MM:SS,mmm --> HH:MM:SS,mmm``, the text and a blank line.
"""

import re
from pathlib import Path
from typing import Any, Optional

from shorts_factory.core.exceptions import EmptyScript, InvalidInput
from shorts_factory.models.schemas import SubtitleCue
from shorts_factory.services.timing_allocator import allocate
from shorts_factory.utils.text_utils import split_sentences

_TIMESTAMP_RE = re.compile(r"^(\d{2,}):(\d{2}):(\d{2}),(\d{3})$")


def build_cues(script: str, total_duration: float) -> list[SubtitleCue]:
    """
    Build one cue per sentence, each taking an equal share of ``total_duration``.

    Args:
        script: Narration script text
        total_duration: Video length in seconds

    Returns:
        Cues ordered by index and time

    Raises:
        EmptyScript: If the script contains no non-empty sentence
        InvalidInput: If total_duration is not positive
    """
    segments = split_sentences(script)
    if not segments:
        raise EmptyScript("script contains no sentences to subtitle")

    slices = allocate(total_duration, len(segments))
    return [
        SubtitleCue(index=time_slice.index + 1, start=time_slice.start, end=time_slice.end, text=text)
        for text, time_slice in zip(segments, slices)
    ]


def format_srt_time(seconds: float) -> str:
    """Convert seconds to SRT timestamp format: HH:MM:SS,mmm (nearest millisecond)."""
    total_ms = max(0, int(round(seconds * 1000)))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1_000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def parse_srt_time(value: str) -> float:
    """Convert an SRT timestamp back to seconds."""
    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise InvalidInput(f"not an SRT timestamp: {value!r}")
    hours, minutes, secs, millis = (int(part) for part in match.groups())
    total_ms = ((hours * 60 + minutes) * 60 + secs) * 1000 + millis
    return total_ms / 1000


def render_srt(cues: list[SubtitleCue]) -> str:
    """Render cues as SRT text."""
    blocks = []
    for cue in cues:
        blocks.append(
            f"{cue.index}\n"
            f"{format_srt_time(cue.start)} --> {format_srt_time(cue.end)}\n"
            f"{cue.text}\n\n"
        )
    return "".join(blocks)


def parse_srt(content: str) -> list[SubtitleCue]:
    """
    Parse SRT text into cues.

    Multi-line cue text is joined with newlines. A leading byte-order mark and
    Windows line endings are tolerated.

    Raises:
        InvalidInput: If a block is malformed
    """
    content = content.lstrip("\ufeff").replace("\r\n", "\n")
    cues = []
    for block in re.split(r"\n\s*\n", content.strip()):
        lines = [line for line in block.split("\n") if line.strip()]
        if not lines:
            continue
        if len(lines) < 3:
            raise InvalidInput(f"incomplete SRT block: {block!r}")
        try:
            index = int(lines[0].strip())
        except ValueError:
            raise InvalidInput(f"SRT block does not start with a cue number: {lines[0]!r}")
        start_text, sep, end_text = lines[1].partition("-->")
        if not sep:
            raise InvalidInput(f"SRT block has no time range: {lines[1]!r}")
        cues.append(
            SubtitleCue(
                index=index,
                start=parse_srt_time(start_text),
                end=parse_srt_time(end_text),
                text="\n".join(line.strip() for line in lines[2:]),
            )
        )
    return cues


def write_srt(cues: list[SubtitleCue], output_path: Path, logger: Optional[Any] = None) -> Path:
    """
    Write cues to ``output_path`` as UTF-8 SRT.

    Returns:
        output_path (for chaining)
    """
    content = render_srt(cues)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    if logger:
        logger.info(f"Wrote subtitles: {output_path} ({len(cues)} cues)")
    return output_path


def read_srt(path: Path) -> list[SubtitleCue]:
    """Read and parse an SRT file."""
    return parse_srt(Path(path).read_text(encoding="utf-8"))
