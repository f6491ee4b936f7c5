"""Shared utilities and configuration for LODS scoring.

This module contains:
- LODSConfig: Configuration dataclass for customizing calculation parameters
- Input table contracts (required columns per table)
- Helpers to coerce DataFrames to relations and validate their columns
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

import duckdb
import pandas as pd
from duckdb import DuckDBPyRelation


@dataclass
class LODSConfig:
    """
    Configuration for LODS calculation parameters.

    Defaults reproduce the published MIMIC-III LODS concept.

    Attributes
    ----------
    cpap_itemids : tuple of int
        Chart item codes of the "oxygen delivery device" fields scanned for
        CPAP/BiPAP masks. Default (467, 469, 226732).
    cpap_device_pattern : str
        Regular expression matched case-insensitively against the device label.
        Default 'cpap mask|bipap mask'.
    cpap_start_offset_hours : float
        Hours subtracted from the first matching chart time. Default 1.0.
    cpap_end_offset_hours : float
        Hours added to the last matching chart time. Default 4.0.
    """

    cpap_itemids: tuple[int, ...] = (467, 469, 226732)
    cpap_device_pattern: str = 'cpap mask|bipap mask'

    # Asymmetric padding around detected device use
    cpap_start_offset_hours: float = 1.0
    cpap_end_offset_hours: float = 4.0

    def __post_init__(self):
        self.cpap_itemids = tuple(int(i) for i in self.cpap_itemids)
        if not self.cpap_itemids:
            raise ValueError("cpap_itemids must contain at least one item code")
        if self.cpap_start_offset_hours < 0 or self.cpap_end_offset_hours < 0:
            raise ValueError("CPAP interval offsets must be non-negative")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any] | None) -> 'LODSConfig':
        """Build a config from a mapping, e.g. the 'lods' section of a config file."""
        if not values:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown LODSConfig fields: {sorted(unknown)}")
        return cls(**values)


# =============================================================================
# Input table contracts
# =============================================================================

REQUIRED_COLUMNS = {
    'icustays': ['subject_id', 'hadm_id', 'icustay_id', 'intime', 'outtime'],
    'admissions': ['hadm_id'],
    'patients': ['subject_id'],
    'chartevents': ['icustay_id', 'charttime', 'itemid', 'value', 'error'],
    'ventdurations': ['icustay_id', 'starttime', 'endtime'],
    'bloodgasarterial': ['icustay_id', 'charttime', 'pao2fio2'],
    'gcs': ['icustay_id', 'mingcs'],
    'vitals': ['icustay_id', 'heartrate_max', 'heartrate_min', 'sysbp_max', 'sysbp_min'],
    'uo': ['icustay_id', 'urineoutput'],
    'labs': [
        'icustay_id', 'bun_max', 'bun_min', 'wbc_max', 'wbc_min',
        'bilirubin_max', 'creatinine_max', 'inr_max', 'platelet_min',
    ],
    'suspinfect': ['icustay_id', 'suspected_infection_time'],
}

OPTIONAL_TABLES = ('admissions', 'patients', 'ventdurations')
REQUIRED_TABLES = tuple(t for t in REQUIRED_COLUMNS if t not in OPTIONAL_TABLES)


def _as_relation(data: pd.DataFrame | DuckDBPyRelation) -> DuckDBPyRelation:
    """Wrap a DataFrame as a relation on the default connection."""
    if isinstance(data, pd.DataFrame):
        return duckdb.from_df(data)
    return data


def _check_required_columns(rel: DuckDBPyRelation, table_name: str) -> None:
    """Raise ValueError if a table lacks any column the pipeline reads."""
    present = {c.lower() for c in rel.columns}
    missing = [c for c in REQUIRED_COLUMNS[table_name] if c not in present]
    if missing:
        raise ValueError(
            f"Table '{table_name}' is missing required columns: {missing}. "
            f"Present columns: {list(rel.columns)}"
        )


def _empty_ventdurations() -> DuckDBPyRelation:
    """Empty ventilation-duration relation; flows through LEFT JOINs as 'never ventilated'."""
    return duckdb.sql("""
        SELECT
            NULL::BIGINT AS icustay_id
            , NULL::TIMESTAMP AS starttime
            , NULL::TIMESTAMP AS endtime
        WHERE false
    """)
