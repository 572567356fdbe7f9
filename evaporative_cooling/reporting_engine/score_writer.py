"""
Plain-text score files: one ``<score>\t<attribute>`` line per attribute.
"""
from pathlib import Path
from typing import Union

from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils import constants
from evaporative_cooling.utils.exceptions import ParseError


def format_scores(scores: ScoreSet) -> str:
    """Render scores in their current order with fixed 8-digit precision."""
    return "".join(f"{s.value:.{constants.SCORE_PRECISION}f}\t{s.name}\n" for s in scores)


def results_filename(prefix: str, mode: str) -> str:
    return f"{prefix}{constants.RESULT_SUFFIXES[mode]}"


def write_scores(scores: ScoreSet, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(format_scores(scores))
    return path


def read_scores(path: Union[str, Path]) -> ScoreSet:
    """
    Read a score file written by ``write_scores``.

    Raises:
        ParseError: If a line does not hold exactly a score and a name.
    """
    scores = []
    with open(path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.rstrip('\n')
            if not line.strip():
                continue
            fields = line.split('\t')
            if len(fields) != 2:
                raise ParseError(f"Error parsing {path} line {line_number}: expected 2 tab-separated fields.")
            try:
                scores.append((float(fields[0]), fields[1]))
            except ValueError:
                raise ParseError(f"Error parsing {path} line {line_number}: '{fields[0]}' is not a number.")
    return ScoreSet(scores)
