"""Unit tests for LessonRunner, the lesson sections, and build_sections."""

from __future__ import annotations

import io
from pathlib import Path

import pandas as pd
import pytest
import yaml

from anolekit.engine import (
    ConsoleObserver,
    Event,
    LessonComplete,
    LessonContext,
    LessonFailed,
    LessonRunner,
    LessonStart,
    Section,
    SectionComplete,
    build_sections,
    load_config,
    section_names,
)


class _Recorder:
    def __init__(self) -> None:
        self.events: list[Event] = []

    def on_event(self, event: Event) -> None:
        self.events.append(event)


class _EchoSection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.title = name.title()

    def run(self, context: LessonContext) -> LessonContext:
        context.say("rows:", len(context.get_lizards()))
        return context


class _FailingSection:
    name = "failing"
    title = "Failing"

    def run(self, context: LessonContext) -> LessonContext:
        raise RuntimeError("section exploded")


@pytest.fixture
def config(tmp_path: Path, lizard_csv: Path):
    return load_config(
        run_id="test_run",
        cli_overrides={
            "output_dir": str(tmp_path / "run"),
            "data.path": str(lizard_csv),
            "plot.dpi": 40,
        },
    )


# ---------------------------------------------------------------------------
# build_sections
# ---------------------------------------------------------------------------


def test_all_sections_in_reading_order(config) -> None:
    sections = build_sections(config)
    assert [s.name for s in sections] == section_names()
    assert section_names()[0] == "intro"
    assert section_names()[-1] == "introspection"
    assert all(isinstance(s, Section) for s in sections)


def test_selection_keeps_reading_order(tmp_path: Path) -> None:
    config = load_config(cli_overrides={"sections": "tidy,intro", "output_dir": str(tmp_path)})
    assert [s.name for s in build_sections(config)] == ["intro", "tidy"]


def test_unknown_section_raises(tmp_path: Path) -> None:
    config = load_config(cli_overrides={"sections": "intro,loops", "output_dir": str(tmp_path)})
    with pytest.raises(ValueError, match="loops"):
        build_sections(config)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def test_runner_writes_config_first(config) -> None:
    LessonRunner(sections=[], config=config).run()
    written = yaml.safe_load((Path(config.output_dir) / "config.yaml").read_text())
    assert written["run_id"] == "test_run"


def test_runner_event_order(config) -> None:
    recorder = _Recorder()
    runner = LessonRunner(
        sections=[_EchoSection("one"), _EchoSection("two")],
        config=config,
        observers=[recorder],
    )

    context = runner.run()

    kinds = [type(e).__name__ for e in recorder.events]
    assert kinds == [
        "LessonStart",
        "SectionStart",
        "SectionComplete",
        "SectionStart",
        "SectionComplete",
        "LessonComplete",
    ]
    assert recorder.events[0].section_names == ("one", "two")
    completes = [e for e in recorder.events if isinstance(e, SectionComplete)]
    assert completes[0].transcript == ("rows: 13",)
    assert context.transcripts == {"one": ["rows: 13"], "two": ["rows: 13"]}


def test_runner_uses_preloaded_table(config, lizards: pd.DataFrame) -> None:
    runner = LessonRunner(
        sections=[_EchoSection("one")], config=config, lizards=lizards.head(4)
    )
    assert runner.run().transcripts["one"] == ["rows: 4"]


def test_runner_failure_emits_and_reraises(config) -> None:
    recorder = _Recorder()
    runner = LessonRunner(
        sections=[_EchoSection("one"), _FailingSection()],
        config=config,
        observers=[recorder],
    )

    with pytest.raises(RuntimeError, match="section exploded"):
        runner.run()

    failed = recorder.events[-1]
    assert isinstance(failed, LessonFailed)
    assert failed.section_name == "failing"
    assert "exploded" in failed.error
    assert not any(isinstance(e, LessonComplete) for e in recorder.events)


def test_runner_missing_data_fails_before_sections(tmp_path: Path) -> None:
    config = load_config(
        cli_overrides={
            "output_dir": str(tmp_path),
            "data.path": str(tmp_path / "missing.csv"),
        }
    )
    recorder = _Recorder()
    runner = LessonRunner(
        sections=[_EchoSection("one")], config=config, observers=[recorder]
    )

    with pytest.raises(FileNotFoundError):
        runner.run()

    assert isinstance(recorder.events[0], LessonStart)
    assert isinstance(recorder.events[-1], LessonFailed)
    assert recorder.events[-1].section_name == ""


# ---------------------------------------------------------------------------
# Full lesson
# ---------------------------------------------------------------------------


@pytest.mark.slow
def test_full_lesson_runs(config) -> None:
    stream = io.StringIO()
    runner = LessonRunner(
        sections=build_sections(config),
        config=config,
        observers=[ConsoleObserver(stream=stream)],
    )

    context = runner.run()

    assert set(context.transcripts) == set(section_names())
    output = stream.getvalue()
    assert "## [1/9] Function intro" in output
    assert "mean(1..5) = 3" in output
    assert "scope_function3(1) = 0" in output
    assert "method='zscore' raises ValueError" in output
    assert "raises UnknownColumnError" in output

    plots = sorted(p.name for p in context.figure_paths)
    assert plots == [
        "all_sites_Limb_Height.png",
        "site_A_Limb_Height.png",
        "site_A_SVL_Tail.png",
    ]
    assert all(p.exists() for p in context.figure_paths)


def test_scoping_section_transcript(config) -> None:
    sections = [s for s in build_sections(config) if s.name == "scoping"]
    context = LessonRunner(sections=sections, config=config).run()
    lines = context.transcripts["scoping"]
    assert "scope_function1(1) = 0" in lines
    assert "scope_function2(1) = 11" in lines
    assert "make_scaler(3)(2) = 6" in lines


def test_defaults_section_shows_keyword_only_error(config) -> None:
    sections = [s for s in build_sections(config) if s.name == "defaults"]
    context = LessonRunner(sections=sections, config=config).run()
    assert any(
        line.startswith("normalize_keyword_only(values, False) raises TypeError")
        for line in context.transcripts["defaults"]
    )
