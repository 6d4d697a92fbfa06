"""Typed event dataclasses for the lesson runner.

Events use a 2-tier taxonomy:
- Lesson lifecycle: LessonStart, LessonComplete, LessonFailed
- Section lifecycle: SectionStart, SectionComplete

All events are frozen dataclasses with an auto-populated timestamp field.
Observers react to events without mutating the lesson context.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Event:
    """Base class for all lesson events.

    Subscribing to ``Event`` receives every event.

    Attributes:
        timestamp: Unix timestamp (seconds) at event construction time.
    """

    timestamp: float = field(default_factory=time.time)


# ---------------------------------------------------------------------------
# Lesson lifecycle events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LessonStart(Event):
    """Emitted when the runner begins.

    Attributes:
        run_id: Unique identifier for this run.
        section_names: Names of the sections about to run, in order.
        config: The lesson config. Typed as ``object`` to keep this module
            free of config imports.
    """

    run_id: str = ""
    section_names: tuple[str, ...] = ()
    config: object = field(default=None, compare=False)


@dataclass(frozen=True)
class LessonComplete(Event):
    """Emitted after every section has run.

    Attributes:
        run_id: Unique identifier for this run.
        elapsed_seconds: Wall-clock time for the whole lesson.
        figure_paths: Images written during the run.
    """

    run_id: str = ""
    elapsed_seconds: float = 0.0
    figure_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class LessonFailed(Event):
    """Emitted when a section raises.

    Attributes:
        run_id: Unique identifier for this run.
        section_name: Section that raised, or ``""`` if the failure came
            before any section ran (e.g. the data file could not be read).
        error: String representation of the exception.
        elapsed_seconds: Wall-clock time before the failure.
    """

    run_id: str = ""
    section_name: str = ""
    error: str = ""
    elapsed_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Section lifecycle events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SectionStart(Event):
    """Emitted immediately before a section runs.

    Attributes:
        section_name: Short name of the section.
        title: Heading shown to the reader.
        section_index: Zero-based position in the lesson.
    """

    section_name: str = ""
    title: str = ""
    section_index: int = 0


@dataclass(frozen=True)
class SectionComplete(Event):
    """Emitted after a section runs.

    Attributes:
        section_name: Short name of the section.
        title: Heading shown to the reader.
        section_index: Zero-based position in the lesson.
        elapsed_seconds: Wall-clock time for this section.
        transcript: Lines the section produced for the reader.
    """

    section_name: str = ""
    title: str = ""
    section_index: int = 0
    elapsed_seconds: float = 0.0
    transcript: tuple[str, ...] = ()
