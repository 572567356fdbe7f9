import pandas as pd
from pathlib import Path


def save_dataframe(df: pd.DataFrame, path: Path, *, excel_copy: bool = False, index: bool = False) -> Path:
    """
    Save a DataFrame to Parquet with an optional Excel copy for human readability.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=index)

    if excel_copy:
        df.to_excel(path.with_suffix(".xlsx"), index=index)

    return path


def read_dataframe(path: Path, delimiter: str = None) -> pd.DataFrame:
    """
    Load a DataFrame from Parquet/Excel/CSV/text based on file extension.

    Text files (.txt, .tsv, .dat) are whitespace-delimited unless a delimiter is given.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix in {".xlsx", ".xls"}:
        return pd.read_excel(path)
    if suffix == ".csv":
        return pd.read_csv(path, sep=delimiter or ",")
    if suffix in {".txt", ".tsv", ".dat", ".tab"}:
        if delimiter:
            return pd.read_csv(path, sep=delimiter)
        return pd.read_csv(path, sep=r"\s+")

    raise ValueError(f"Unsupported file extension for reading: {suffix}")
