"""Hematologic subscore calculation for LODS.

Scoring (WBC and platelets in 10^9/L):
- WBC < 1.0: 3 points
- WBC < 2.5 or platelets < 1.0 or WBC >= 50: 1 point
- otherwise: 0 points
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_hematologic_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Calculate LODS hematologic subscore.

    NULL only when both the maximum WBC and the minimum platelet count
    are missing.

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, wbc_max, wbc_min, platelet_min, hematologic]
    """
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , wbc_max
            , wbc_min
            , platelet_min
            , hematologic: CASE
                WHEN wbc_max IS NULL
                    AND platelet_min IS NULL THEN NULL
                WHEN wbc_min < 1.0 THEN 3
                WHEN wbc_min < 2.5 THEN 1
                WHEN platelet_min < 1.0 THEN 1
                WHEN wbc_max >= 50.0 THEN 1
                ELSE 0
            END
    """)
