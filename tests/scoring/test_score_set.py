import logging

import pytest

from evaporative_cooling.scoring.score_set import Score, ScoreSet, normalize


def test_rejects_duplicate_names():
    with pytest.raises(ValueError, match="Duplicate"):
        ScoreSet([(1.0, "rs1"), (2.0, "rs1")])


def test_from_arrays_length_mismatch():
    with pytest.raises(ValueError):
        ScoreSet.from_arrays([1.0, 2.0], ["rs1"])


def test_normalize_rescales_to_unit_interval():
    scores = ScoreSet([(2.0, "a"), (4.0, "b"), (6.0, "c")])
    normalized = normalize(scores)

    assert normalized.names == ["a", "b", "c"]
    assert list(normalized.values) == pytest.approx([0.0, 0.5, 1.0])


def test_normalize_degenerate_set_is_identity(caplog):
    scores = ScoreSet([(0.0, "a"), (0.0, "b")])
    with caplog.at_level(logging.WARNING):
        normalized = scores.normalized("Random Jungle")

    assert normalized == scores
    assert "Random Jungle min and max scores are the same" in caplog.text


def test_normalize_empty_set():
    assert len(normalize(ScoreSet())) == 0


def test_sorts_are_stable():
    scores = ScoreSet([(0.5, "x"), (0.1, "y"), (0.5, "z"), (0.1, "w")])

    assert scores.sorted_ascending().names == ["y", "w", "x", "z"]
    assert scores.sorted_descending().names == ["x", "z", "y", "w"]
    assert scores.sorted_by_name().names == ["w", "x", "y", "z"]


def test_subsets():
    scores = ScoreSet([(0.5, "x"), (0.1, "y"), (0.9, "z")])

    assert scores.reordered(["z", "x", "y"]).names == ["z", "x", "y"]
    assert scores.restricted_to({"z", "x"}).names == ["x", "z"]
    assert scores.head(2) == ScoreSet([(0.5, "x"), (0.1, "y")])
    assert scores[2] == Score(0.9, "z")


def test_to_frame():
    frame = ScoreSet([(0.5, "x"), (0.1, "y")]).to_frame()
    assert list(frame.columns) == ["attribute", "score"]
    assert frame["attribute"].tolist() == ["x", "y"]
