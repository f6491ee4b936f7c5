import os
from typing import List, Optional, Union

import duckdb
import pandas as pd

from .config import get_config_or_params
from .logging_config import get_logger

logger = get_logger('utils.io')


def _cast_id_cols_to_int(df: pd.DataFrame) -> pd.DataFrame:
    id_cols = [
        c for c in df.columns
        if c.endswith("_id") and pd.api.types.is_numeric_dtype(df[c])
    ]
    if id_cols:                                   # no-op if none found
        df[id_cols] = df[id_cols].astype("Int64")
    return df


def resolve_table_path(table_name: str, config: dict) -> str:
    """
    Build the on-disk path for a logical table name.

    The file stem defaults to the table name and can be remapped through the
    config's ``tables`` section, e.g. ``{"tables": {"labs": "labs_si"}}``.
    """
    stem = (config.get('tables') or {}).get(table_name, table_name)
    return os.path.join(config['data_directory'], f"{stem}.{config['filetype']}")


def load_data(
    table_name: str,
    config_path: Optional[str] = None,
    return_rel: bool = False,
    *,
    data_directory: Optional[str] = None,
    filetype: Optional[str] = None,
    columns: Optional[List[str]] = None,
    config: Optional[dict] = None,
    verbose: bool = False,
) -> Union[pd.DataFrame, duckdb.DuckDBPyRelation]:
    """
    Load one input table from the configured data directory.

    Parameters
    ----------
    table_name : str
        Logical table name (e.g. 'icustays', 'chartevents', 'labs').
    config_path : str, optional
        Path to a JSON/YAML config file. Ignored for keys given directly.
    return_rel : bool, default False
        If True, return a lazy DuckDB relation on the default connection so it
        can be referenced from ``duckdb.sql`` queries. Otherwise return a
        pandas DataFrame.
    data_directory, filetype : str, optional
        Direct overrides of the config values.
    columns : list of str, optional
        Subset of columns to load.
    config : dict, optional
        Already-resolved configuration (as returned by ``load_lods_config``);
        skips reading the config file again when loading many tables.
    verbose : bool, default False
        If True, log the file being read.

    Returns
    -------
    pd.DataFrame or DuckDBPyRelation

    Raises
    ------
    FileNotFoundError
        If the table file does not exist.
    ValueError
        If the filetype is not supported.
    """
    if config is None:
        config = get_config_or_params(
            config_path=config_path,
            data_directory=data_directory,
            filetype=filetype,
        )
    file_path = resolve_table_path(table_name, config)

    if not os.path.exists(file_path):
        raise FileNotFoundError(f"The file {file_path} does not exist in the specified directory.")

    if verbose:
        logger.info(f"Loading {os.path.basename(file_path)}" + (" (lazy)" if return_rel else ""))

    if config['filetype'] == 'csv':
        rel = duckdb.read_csv(file_path)
    elif config['filetype'] == 'parquet':
        rel = duckdb.read_parquet(file_path)
    else:
        raise ValueError("Unsupported filetype. Only 'csv' and 'parquet' are supported.")

    if columns:
        rel = rel.select(*columns)

    if return_rel:
        return rel

    df = rel.df()
    if verbose:
        logger.info(f"Data loaded successfully from {os.path.basename(file_path)} ({len(df)} rows)")
    return _cast_id_cols_to_int(df)
