"""Hepatic subscore calculation for LODS.

Scoring:
- bilirubin >= 2.0 mg/dL or INR >= 1.25: 1 point
- otherwise: 0 points
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_hepatic_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """Calculate LODS hepatic subscore; NULL when both INR and bilirubin are missing."""
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , bilirubin_max
            , inr_max
            , hepatic: CASE
                WHEN inr_max IS NULL
                    AND bilirubin_max IS NULL THEN NULL
                WHEN bilirubin_max >= 2.0 THEN 1
                WHEN inr_max >= 1.25 THEN 1
                ELSE 0
            END
    """)
