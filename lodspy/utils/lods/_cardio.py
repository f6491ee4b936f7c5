"""Cardiovascular subscore calculation for LODS.

Scoring (heart rate in beats/min, systolic BP in mmHg):
- HR < 30 or SBP < 40: 5 points
- SBP 40-69 or SBP >= 270: 3 points
- HR >= 140 or SBP >= 240 or SBP 70-89: 1 point
- otherwise: 0 points

NULL only when both the maximum heart rate and the minimum systolic BP
are missing.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_cardiovascular_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Calculate LODS cardiovascular subscore from heart rate and systolic BP extremes.

    Parameters
    ----------
    cohort_rel : DuckDBPyRelation
        Output of ``build_stay_cohort``

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, heartrate_max, heartrate_min, sysbp_max,
                  sysbp_min, cardiovascular]
    """
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , heartrate_max
            , heartrate_min
            , sysbp_max
            , sysbp_min
            , cardiovascular: CASE
                WHEN heartrate_max IS NULL
                    AND sysbp_min IS NULL THEN NULL
                WHEN heartrate_min < 30 THEN 5
                WHEN sysbp_min < 40 THEN 5
                WHEN sysbp_min < 70 THEN 3
                WHEN sysbp_max >= 270 THEN 3
                WHEN heartrate_max >= 140 THEN 1
                WHEN sysbp_max >= 240 THEN 1
                WHEN sysbp_min < 90 THEN 1
                ELSE 0
            END
    """)
