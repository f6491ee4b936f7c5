"""Core orchestration functions for LODS scoring.

This module contains the main public functions:
- calculate_lods: Calculate LODS for every suspected-infection ICU stay
- calculate_lods_from_files: Same, loading the input tables from a data directory
- compose_lods: Sum the component scores into the final result
"""

from __future__ import annotations

from typing import Mapping

import duckdb
import pandas as pd
from duckdb import DuckDBPyRelation

from ._utils import (
    LODSConfig,
    OPTIONAL_TABLES,
    REQUIRED_TABLES,
    _as_relation,
    _check_required_columns,
    _empty_ventdurations,
)
from ._cpap import detect_cpap_intervals
from ._pafi import flag_pafi_on_support, min_pafi_on_support
from ._cohort import build_stay_cohort
from ._neuro import _calculate_neurologic_subscore
from ._cardio import _calculate_cardiovascular_subscore
from ._renal import _calculate_renal_subscore
from ._pulm import _calculate_pulmonary_subscore
from ._hemat import _calculate_hematologic_subscore
from ._hepatic import _calculate_hepatic_subscore
from ._perf import StepTimer, NoOpTimer
from lodspy.utils.config import get_config_or_params
from lodspy.utils.io import load_data
from lodspy.utils.logging_config import get_logger

logger = get_logger('utils.lods.core')

COMPONENTS = ['neurologic', 'cardiovascular', 'renal', 'pulmonary', 'hematologic', 'hepatic']

TableInput = pd.DataFrame | DuckDBPyRelation


def _prepare_tables(tables: Mapping[str, TableInput]) -> dict[str, DuckDBPyRelation | None]:
    """Validate the input mapping and convert every table to a relation."""
    missing = [t for t in REQUIRED_TABLES if tables.get(t) is None]
    if missing:
        raise ValueError(f"Missing required input tables: {missing}")

    unknown = set(tables) - set(REQUIRED_TABLES) - set(OPTIONAL_TABLES)
    if unknown:
        logger.warning(f"Ignoring unrecognized input tables: {sorted(unknown)}")

    rels = {}
    for name in REQUIRED_TABLES + OPTIONAL_TABLES:
        data = tables.get(name)
        if data is None:
            rels[name] = None
            continue
        rel = _as_relation(data)
        _check_required_columns(rel, name)
        rels[name] = rel

    if rels['ventdurations'] is None:
        logger.warning(
            "Ventilation durations not provided. Blood gases will only be "
            "attributed to support through detected CPAP intervals."
        )
        rels['ventdurations'] = _empty_ventdurations()

    return rels


def compose_lods(
    suspinfect_rel: DuckDBPyRelation,
    neurologic_rel: DuckDBPyRelation,
    cardiovascular_rel: DuckDBPyRelation,
    renal_rel: DuckDBPyRelation,
    pulmonary_rel: DuckDBPyRelation,
    hematologic_rel: DuckDBPyRelation,
    hepatic_rel: DuckDBPyRelation,
) -> DuckDBPyRelation:
    """
    Combine component scores into one row per eligible stay.

    Only stays with a non-null ``suspected_infection_time`` are returned. The
    total treats a NULL component as 0 (unmeasured is assumed normal), while
    the component columns keep their NULLs.

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, lods, neurologic, cardiovascular, renal,
                  pulmonary, hematologic, hepatic], ordered by icustay_id.
    """
    return duckdb.sql("""
        FROM (
            SELECT DISTINCT icustay_id
            FROM suspinfect_rel
            WHERE suspected_infection_time IS NOT NULL
        ) si
        LEFT JOIN neurologic_rel n USING (icustay_id)
        LEFT JOIN cardiovascular_rel cv USING (icustay_id)
        LEFT JOIN renal_rel r USING (icustay_id)
        LEFT JOIN pulmonary_rel p USING (icustay_id)
        LEFT JOIN hematologic_rel hm USING (icustay_id)
        LEFT JOIN hepatic_rel hp USING (icustay_id)
        SELECT
            si.icustay_id
            -- impute a normal score of zero for missing components
            , lods: COALESCE(n.neurologic, 0)
                + COALESCE(cv.cardiovascular, 0)
                + COALESCE(r.renal, 0)
                + COALESCE(p.pulmonary, 0)
                + COALESCE(hm.hematologic, 0)
                + COALESCE(hp.hepatic, 0)
            , n.neurologic
            , cv.cardiovascular
            , r.renal
            , p.pulmonary
            , hm.hematologic
            , hp.hepatic
        ORDER BY si.icustay_id
    """)


def calculate_lods(
    tables: Mapping[str, TableInput],
    *,
    lods_config: LODSConfig | None = None,
    return_rel: bool = False,
    dev: bool = False,
    perf_profile: bool = False,
) -> pd.DataFrame | DuckDBPyRelation | tuple:
    """
    Calculate the Logistic Organ Dysfunction System score per ICU stay.

    The score covers the entire ICU stay and is computed for every stay with
    a suspected infection time.

    Parameters
    ----------
    tables : Mapping[str, pd.DataFrame | DuckDBPyRelation]
        Input tables keyed by logical name. Required: icustays, chartevents,
        bloodgasarterial, gcs, vitals, uo, labs, suspinfect. Optional:
        ventdurations, admissions, patients.
    lods_config : LODSConfig, optional
        Configuration object with calculation parameters.
        If None, uses default values.
    return_rel : bool, default False
        If True, return DuckDB relation for lazy evaluation.
    dev : bool, default False
        If True, return (results, intermediates) where intermediates is a dict
        of DuckDBPyRelation objects. Call .df() on any intermediate to materialize.
    perf_profile : bool, default False
        If True, additionally return the StepTimer with per-stage timings.

    Returns
    -------
    pd.DataFrame | DuckDBPyRelation | tuple
        If dev=False: DataFrame or relation with columns:
            - icustay_id
            - lods (sum of components, NULL components counted as 0)
            - neurologic, cardiovascular, renal, pulmonary, hematologic, hepatic
              (each possibly NULL, except pulmonary)
        If dev=True: (results, intermediates_dict)
        If perf_profile=True: the above followed by the StepTimer.

    Raises
    ------
    ValueError
        If a required table is missing or lacks required columns.
    """
    cfg = lods_config or LODSConfig()
    intermediates = {} if dev else None
    timer = StepTimer() if perf_profile else NoOpTimer()

    logger.info("Starting LODS calculation...")
    logger.info(f"Config: {cfg}")

    with timer.step("prepare_tables"):
        rels = _prepare_tables(tables)

    # =========================================================================
    # Respiratory support
    # =========================================================================
    with timer.step("cpap"):
        cpap = detect_cpap_intervals(rels['icustays'], rels['chartevents'], cfg)

    with timer.step("pafi"):
        pafi_flags = flag_pafi_on_support(rels['bloodgasarterial'], rels['ventdurations'], cpap)
        pafi_min = min_pafi_on_support(pafi_flags)

    # =========================================================================
    # Per-stay summaries
    # =========================================================================
    with timer.step("cohort"):
        cohort = build_stay_cohort(
            rels['suspinfect'],
            rels['icustays'],
            pafi_min,
            rels['gcs'],
            rels['vitals'],
            rels['uo'],
            rels['labs'],
            admissions_rel=rels['admissions'],
            patients_rel=rels['patients'],
        )

    # =========================================================================
    # Calculate subscores
    # =========================================================================
    logger.info("Calculating all 6 organ subscores...")
    with timer.step("components"):
        neurologic = _calculate_neurologic_subscore(cohort)
        cardiovascular = _calculate_cardiovascular_subscore(cohort)
        renal = _calculate_renal_subscore(cohort)
        pulmonary = _calculate_pulmonary_subscore(cohort)
        hematologic = _calculate_hematologic_subscore(cohort)
        hepatic = _calculate_hepatic_subscore(cohort)

    with timer.step("assembly"):
        logger.info("Combining subscores into final LODS total...")
        lods_scores = compose_lods(
            rels['suspinfect'],
            neurologic,
            cardiovascular,
            renal,
            pulmonary,
            hematologic,
            hepatic,
        )
        result = lods_scores if return_rel else lods_scores.df()

    logger.info("LODS calculation complete")

    if dev:
        intermediates.update({
            'cpap': cpap,
            'pafi_flags': pafi_flags,
            'pafi_min': pafi_min,
            'cohort': cohort,
            'neurologic': neurologic,
            'cardiovascular': cardiovascular,
            'renal': renal,
            'pulmonary': pulmonary,
            'hematologic': hematologic,
            'hepatic': hepatic,
        })
        result = result, intermediates

    if perf_profile:
        return result, timer
    return result


def _load_optional(table_name: str, config: dict) -> DuckDBPyRelation | None:
    """Load an optional table; return None if its file is absent."""
    try:
        return load_data(table_name, return_rel=True, config=config)
    except FileNotFoundError as e:
        logger.warning(f"Optional table '{table_name}' not available ({e}).")
        return None


def calculate_lods_from_files(
    config_path: str | None = None,
    *,
    data_directory: str | None = None,
    filetype: str | None = None,
    lods_config: LODSConfig | None = None,
    **kwargs,
) -> pd.DataFrame | DuckDBPyRelation | tuple:
    """
    Load the input tables from disk and calculate LODS.

    Parameters
    ----------
    config_path : str, optional
        Path to a JSON/YAML config with data_directory, filetype and optional
        'tables' (file stem mapping) and 'lods' (LODSConfig fields) sections.
    data_directory, filetype : str, optional
        Direct overrides of the config values.
    lods_config : LODSConfig, optional
        Takes precedence over the config file's 'lods' section.
    **kwargs
        Passed through to ``calculate_lods`` (return_rel, dev, perf_profile).

    Raises
    ------
    FileNotFoundError
        If the config file or a required table file is missing.
    """
    config = get_config_or_params(
        config_path=config_path,
        data_directory=data_directory,
        filetype=filetype,
    )
    cfg = lods_config or LODSConfig.from_dict(config.get('lods'))

    logger.info(f"Loading LODS input tables from {config['data_directory']}...")
    tables = {name: load_data(name, return_rel=True, config=config) for name in REQUIRED_TABLES}
    for name in OPTIONAL_TABLES:
        tables[name] = _load_optional(name, config)

    return calculate_lods(tables, lods_config=cfg, **kwargs)
