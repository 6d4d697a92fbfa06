"""Lesson engine: config, events, observers, and the section runner.

The demonstration code lives in :mod:`anolekit.stats`, :mod:`anolekit.tidy`,
:mod:`anolekit.scoping`, and :mod:`anolekit.visualization`; nothing there
imports from the engine.
"""

from anolekit.engine.config import (
    DataConfig,
    LessonConfig,
    PlotConfig,
    load_config,
    serialize_config,
)
from anolekit.engine.console_observer import ConsoleObserver
from anolekit.engine.events import (
    Event,
    LessonComplete,
    LessonFailed,
    LessonStart,
    SectionComplete,
    SectionStart,
)
from anolekit.engine.lesson import LessonContext, LessonRunner, Section
from anolekit.engine.observers import EventBus, Observer
from anolekit.engine.sections import build_sections, section_names

__all__ = [
    "ConsoleObserver",
    "DataConfig",
    "Event",
    "EventBus",
    "LessonComplete",
    "LessonConfig",
    "LessonContext",
    "LessonFailed",
    "LessonRunner",
    "LessonStart",
    "Observer",
    "PlotConfig",
    "Section",
    "SectionComplete",
    "SectionStart",
    "build_sections",
    "load_config",
    "section_names",
    "serialize_config",
]
