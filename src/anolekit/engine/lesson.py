"""LessonRunner: runs lesson sections in order and reports through events.

A lesson is an ordered list of :class:`Section` objects sharing one
:class:`LessonContext`. The runner writes the serialized config as the first
artifact, loads the lizard table, then runs each section, emitting lifecycle
events that observers (such as
:class:`~anolekit.engine.console_observer.ConsoleObserver`) turn into output.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import numpy as np
import pandas as pd
from matplotlib import pyplot as plt
from matplotlib.figure import Figure

from anolekit.engine.config import LessonConfig, serialize_config
from anolekit.engine.events import (
    Event,
    LessonComplete,
    LessonFailed,
    LessonStart,
    SectionComplete,
    SectionStart,
)
from anolekit.engine.observers import EventBus, Observer
from anolekit.io.lizards import load_lizards
from anolekit.visualization.site_plots import save_figure

__all__ = ["LessonContext", "LessonRunner", "Section", "format_values"]

logger = logging.getLogger(__name__)


def format_values(values: Any, precision: int = 3) -> str:
    """Render a number or a sequence of numbers for a transcript line."""
    if np.isscalar(values):
        return np.format_float_positional(float(values), precision=precision, trim="-")
    array = np.asarray(values, dtype=float)
    return np.array2string(
        array, precision=precision, separator=", ", suppress_small=True
    )


# ---------------------------------------------------------------------------
# Context and Section protocol
# ---------------------------------------------------------------------------


@dataclass
class LessonContext:
    """State shared by the sections of one lesson run.

    Attributes:
        config: Frozen config for the run.
        lizards: The lizard table, loaded by the runner before any section.
        transcript: Lines written by the section currently running.
        transcripts: Completed transcripts keyed by section name.
        figure_paths: Images written so far, in order.
    """

    config: LessonConfig
    lizards: pd.DataFrame | None = None
    transcript: list[str] = field(default_factory=list)
    transcripts: dict[str, list[str]] = field(default_factory=dict)
    figure_paths: list[Path] = field(default_factory=list)

    def get_lizards(self) -> pd.DataFrame:
        """Return the lizard table.

        Raises:
            ValueError: If the table has not been loaded.
        """
        if self.lizards is None:
            raise ValueError("Lizard data has not been loaded for this lesson")
        return self.lizards

    def say(self, *parts: Any) -> None:
        """Append one transcript line built from *parts*."""
        self.transcript.append(" ".join(str(p) for p in parts))

    def show_figure(self, fig: Figure, name: str) -> Path:
        """Save *fig* under ``<output_dir>/plots/<name>.png`` and record it.

        When ``config.plot.show`` is set the figure is also displayed (this
        blocks until the window is closed).
        """
        if self.config.plot.show:
            plt.show(block=True)
        path = save_figure(
            fig,
            Path(self.config.output_dir).expanduser() / "plots" / f"{name}.png",
            dpi=self.config.plot.dpi,
        )
        self.figure_paths.append(path)
        self.say(f"[figure saved: {path}]")
        return path


@runtime_checkable
class Section(Protocol):
    """Structural protocol for lesson sections.

    Attributes:
        name: Short identifier used to select the section.
        title: Heading shown to the reader.
    """

    name: str
    title: str

    def run(self, context: LessonContext) -> LessonContext:
        """Run the demonstration, writing lines with ``context.say``."""
        ...


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


class LessonRunner:
    """Run sections in order, emitting lifecycle events.

    Example::

        config = load_config(cli_overrides={"output_dir": "/tmp/lesson"})
        runner = LessonRunner(
            sections=build_sections(config),
            config=config,
            observers=[ConsoleObserver()],
        )
        context = runner.run()

    Args:
        sections: Sections to run, first to last.
        config: Frozen config; serialized as ``config.yaml`` before anything
            else runs.
        observers: Observers subscribed to every event.
        lizards: Pre-loaded table; when omitted it is read from
            ``config.data.path``.
    """

    def __init__(
        self,
        sections: list[Section],
        config: LessonConfig,
        observers: list[Observer] | None = None,
        lizards: pd.DataFrame | None = None,
    ) -> None:
        self._sections = list(sections)
        self._config = config
        self._lizards = lizards
        self._bus = EventBus()
        for observer in observers or []:
            self._bus.subscribe(Event, observer)

    def add_observer(self, observer: Observer, event_type: type[Event] = Event) -> None:
        self._bus.subscribe(event_type, observer)

    def run(self) -> LessonContext:
        """Run every section and return the final context.

        Raises:
            Exception: Re-raises whatever a section (or the data loader)
                raised, after emitting ``LessonFailed``.
        """
        lesson_start = time.monotonic()

        output_dir = Path(self._config.output_dir).expanduser()
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "config.yaml").write_text(
            serialize_config(self._config), encoding="utf-8"
        )

        self._bus.emit(
            LessonStart(
                run_id=self._config.run_id,
                section_names=tuple(s.name for s in self._sections),
                config=self._config,
            )
        )

        context = LessonContext(config=self._config)
        current = ""
        try:
            context.lizards = (
                self._lizards
                if self._lizards is not None
                else load_lizards(self._config.data.path)
            )

            for i, section in enumerate(self._sections):
                current = section.name
                self._bus.emit(
                    SectionStart(
                        section_name=section.name, title=section.title, section_index=i
                    )
                )
                section_start = time.monotonic()
                context.transcript = []
                context = section.run(context)
                elapsed = time.monotonic() - section_start
                context.transcripts[section.name] = list(context.transcript)
                logger.debug("Section %s finished in %.3fs", section.name, elapsed)
                self._bus.emit(
                    SectionComplete(
                        section_name=section.name,
                        title=section.title,
                        section_index=i,
                        elapsed_seconds=elapsed,
                        transcript=tuple(context.transcript),
                    )
                )
        except Exception as exc:
            self._bus.emit(
                LessonFailed(
                    run_id=self._config.run_id,
                    section_name=current,
                    error=str(exc),
                    elapsed_seconds=time.monotonic() - lesson_start,
                )
            )
            raise

        self._bus.emit(
            LessonComplete(
                run_id=self._config.run_id,
                elapsed_seconds=time.monotonic() - lesson_start,
                figure_paths=tuple(str(p) for p in context.figure_paths),
            )
        )
        return context
