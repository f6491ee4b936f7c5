"""CPAP/BiPAP detection from charted oxygen delivery device labels.

One interval per ICU stay spanning all matching chart rows, padded by
``cpap_start_offset_hours`` before the first and ``cpap_end_offset_hours``
after the last match. Stays without a match get no row.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation

from ._utils import LODSConfig
from lodspy.utils.logging_config import get_logger

logger = get_logger('utils.lods.cpap')


def detect_cpap_intervals(
    icustays_rel: DuckDBPyRelation,
    chartevents_rel: DuckDBPyRelation,
    cfg: LODSConfig,
) -> DuckDBPyRelation:
    """
    Derive the padded CPAP interval for each ICU stay.

    Chart rows count when they fall inside the stay's [intime, outtime], carry
    one of ``cfg.cpap_itemids``, match ``cfg.cpap_device_pattern`` ignoring
    case, and are not flagged as errors (``error = 1``).

    Parameters
    ----------
    icustays_rel : DuckDBPyRelation
        ICU stays with columns [icustay_id, intime, outtime]
    chartevents_rel : DuckDBPyRelation
        Chart events with columns [icustay_id, charttime, itemid, value, error]
    cfg : LODSConfig
        Configuration with item codes, label pattern and interval offsets

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, starttime, endtime, cpap]
        At most one row per stay; cpap is always 1.
    """
    itemids = ', '.join(str(i) for i in cfg.cpap_itemids)
    pattern = cfg.cpap_device_pattern.replace("'", "''")
    start_offset = cfg.cpap_start_offset_hours
    end_offset = cfg.cpap_end_offset_hours
    logger.info(
        f"Detecting CPAP intervals (itemids={cfg.cpap_itemids}, "
        f"offsets=-{start_offset}h/+{end_offset}h)..."
    )

    return duckdb.sql(f"""
        FROM icustays_rel ie
        JOIN chartevents_rel ce ON
            ie.icustay_id = ce.icustay_id
            AND ce.charttime::TIMESTAMP >= ie.intime::TIMESTAMP
            AND ce.charttime::TIMESTAMP <= ie.outtime::TIMESTAMP
        SELECT
            ie.icustay_id
            , MIN(ce.charttime::TIMESTAMP) - INTERVAL '{start_offset} hours' AS starttime
            , MAX(ce.charttime::TIMESTAMP) + INTERVAL '{end_offset} hours' AS endtime
            , 1 AS cpap
        WHERE ce.itemid IN ({itemids})
            AND regexp_matches(ce.value::VARCHAR, '{pattern}', 'i')
            -- exclude rows marked as error
            AND ce.error IS DISTINCT FROM 1
        GROUP BY ie.icustay_id
    """)
