"""Neurologic subscore calculation for LODS.

Scoring (minimum GCS over the stay):
- GCS 14-15: 0 points
- GCS 9-13: 1 point
- GCS 6-8: 3 points
- GCS 3-5: 5 points

Special rules:
- GCS < 3 is not a valid scale value (erroneous or tracheostomy charting)
  and scores NULL, as does a missing GCS.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_neurologic_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Calculate LODS neurologic subscore from the minimum GCS.

    Parameters
    ----------
    cohort_rel : DuckDBPyRelation
        Output of ``build_stay_cohort``

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, mingcs, neurologic]
    """
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , mingcs
            , neurologic: CASE
                WHEN mingcs IS NULL THEN NULL
                WHEN mingcs < 3 THEN NULL  -- erroneous value/on trach
                WHEN mingcs <= 5 THEN 5
                WHEN mingcs <= 8 THEN 3
                WHEN mingcs <= 13 THEN 1
                ELSE 0
            END
    """)
