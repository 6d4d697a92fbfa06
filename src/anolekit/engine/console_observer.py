"""ConsoleObserver: prints each section's transcript as the lesson runs."""

from __future__ import annotations

import sys
from typing import TextIO

from anolekit.engine.events import (
    Event,
    LessonComplete,
    LessonFailed,
    LessonStart,
    SectionComplete,
)


class ConsoleObserver:
    """Write section headings and transcripts to *stream*.

    Transcript text goes to *stream* (stdout by default) so a lesson can be
    piped to a file; the completion and failure lines go to stderr.

    Output looks like::

        ## [1/9] Function intro
        mean(1..5) = 3.0
        ...

    Args:
        stream: Where transcripts are written.
        verbose: Also print per-section timing.
    """

    def __init__(self, stream: TextIO | None = None, verbose: bool = False) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._verbose = verbose
        self._total_sections = 0

    def on_event(self, event: Event) -> None:
        if isinstance(event, LessonStart):
            self._total_sections = len(event.section_names)

        elif isinstance(event, SectionComplete):
            self._stream.write(
                f"## [{event.section_index + 1}/{self._total_sections}] "
                f"{event.title}\n"
            )
            for line in event.transcript:
                self._stream.write(f"{line}\n")
            if self._verbose:
                self._stream.write(f"({event.elapsed_seconds:.2f}s)\n")
            self._stream.write("\n")
            self._stream.flush()

        elif isinstance(event, LessonComplete):
            message = f"Lesson complete ({event.elapsed_seconds:.1f}s)"
            if event.figure_paths:
                message += f", {len(event.figure_paths)} figure(s) saved"
            sys.stderr.write(message + "\n")
            sys.stderr.flush()

        elif isinstance(event, LessonFailed):
            where = f" in section {event.section_name!r}" if event.section_name else ""
            sys.stderr.write(
                f"Lesson FAILED{where} after {event.elapsed_seconds:.1f}s: "
                f"{event.error}\n"
            )
            sys.stderr.flush()
