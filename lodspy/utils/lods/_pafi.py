"""PaO2/FiO2 ratios measured on respiratory support.

Each arterial blood gas is flagged by overlap with any ventilation duration
and with the stay's CPAP interval. The flags are independent; a gas may carry
both. Only flagged gases feed the per-stay minimum.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation

from lodspy.utils.logging_config import get_logger

logger = get_logger('utils.lods.pafi')


def flag_pafi_on_support(
    bloodgas_rel: DuckDBPyRelation,
    ventdurations_rel: DuckDBPyRelation,
    cpap_rel: DuckDBPyRelation,
) -> DuckDBPyRelation:
    """
    Attach ventilation and CPAP flags to every arterial blood gas.

    Parameters
    ----------
    bloodgas_rel : DuckDBPyRelation
        Arterial blood gases with columns [icustay_id, charttime, pao2fio2]
    ventdurations_rel : DuckDBPyRelation
        Ventilation durations with columns [icustay_id, starttime, endtime]
    cpap_rel : DuckDBPyRelation
        Output of ``detect_cpap_intervals``

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, charttime, pao2fio2, vent, cpap]
        vent/cpap are 1 when charttime lies inside a matching interval
        (bounds inclusive), else 0.
    """
    logger.info("Flagging blood gases drawn during ventilation or CPAP...")
    return duckdb.sql("""
        FROM bloodgas_rel bg
        LEFT JOIN ventdurations_rel vd ON
            bg.icustay_id = vd.icustay_id
            AND bg.charttime::TIMESTAMP >= vd.starttime::TIMESTAMP
            AND bg.charttime::TIMESTAMP <= vd.endtime::TIMESTAMP
        LEFT JOIN cpap_rel cp ON
            bg.icustay_id = cp.icustay_id
            AND bg.charttime::TIMESTAMP >= cp.starttime
            AND bg.charttime::TIMESTAMP <= cp.endtime
        SELECT
            bg.icustay_id
            , bg.charttime::TIMESTAMP AS charttime
            , bg.pao2fio2
            , CASE WHEN vd.icustay_id IS NOT NULL THEN 1 ELSE 0 END AS vent
            , CASE WHEN cp.icustay_id IS NOT NULL THEN 1 ELSE 0 END AS cpap
    """)


def min_pafi_on_support(pafi_flags_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Reduce flagged blood gases to the worst ratio per stay.

    Stays with no flagged gas produce no row, so a later LEFT JOIN leaves
    ``pao2fio2_vent_min`` NULL for patients who were never on support.

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, pao2fio2_vent_min]
    """
    logger.info("Taking minimum PaO2/FiO2 over supported measurements...")
    return duckdb.sql("""
        FROM pafi_flags_rel
        SELECT
            icustay_id
            , MIN(pao2fio2) AS pao2fio2_vent_min
        WHERE vent = 1 OR cpap = 1
        GROUP BY icustay_id
    """)
