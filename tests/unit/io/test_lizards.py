"""Unit tests for the lizard table loader."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from anolekit.io import LizardDataError, load_lizards


def test_load_roundtrip(lizard_csv: Path, lizards: pd.DataFrame) -> None:
    loaded = load_lizards(lizard_csv)
    assert list(loaded.columns) == list(lizards.columns)
    assert len(loaded) == len(lizards)
    assert loaded["SVL"].isna().sum() == 1


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_lizards(tmp_path / "nope.csv")


def test_missing_site_column_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("SVL,Tail\n50,60\n")
    with pytest.raises(LizardDataError, match="Site"):
        load_lizards(path)


def test_non_numeric_measurement_becomes_missing(tmp_path: Path) -> None:
    path = tmp_path / "messy.csv"
    path.write_text("Site,SVL\nA,50\nA,unknown\nB,52\n")
    loaded = load_lizards(path)
    assert loaded["SVL"].dtype == float
    assert np.isnan(loaded.loc[1, "SVL"])


def test_category_whitespace_stripped(tmp_path: Path) -> None:
    path = tmp_path / "spaces.csv"
    path.write_text("Site,Color_morph\n A ,Green \nB, Brown\n")
    loaded = load_lizards(path)
    assert list(loaded["Site"]) == ["A", "B"]
    assert list(loaded["Color_morph"]) == ["Green", "Brown"]


def test_numeric_site_codes_load_as_text(tmp_path: Path) -> None:
    path = tmp_path / "coded.csv"
    path.write_text("Site,Limb,Height\n1,8.0,80.0\n01,9.0,90.0\n2,10.0,100.0\n")
    loaded = load_lizards(path)
    assert list(loaded["Site"]) == ["1", "01", "2"]
    assert loaded["Limb"].dtype == float


def test_repo_sample_dataset(repo_data: Path) -> None:
    loaded = load_lizards(repo_data)
    assert {"Site", "Color_morph", "Perch_type", "SVL", "Tail", "Limb", "Height"} <= set(
        loaded.columns
    )
    assert sorted(loaded["Site"].unique()) == ["A", "B", "C", "R"]
