"""Renal subscore calculation for LODS.

Scoring (BUN in mg/dL, creatinine in mg/dL, urine output in mL over the stay),
first matching rule wins:
- urine < 500 or BUN >= 56: 5 points
- creatinine >= 1.60 or urine < 750 or BUN >= 28 or urine >= 10000: 3 points
- creatinine >= 1.20 or BUN >= 7.5: 1 point
- otherwise: 0 points

NULL when any of BUN, creatinine or urine output is missing.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_renal_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Calculate LODS renal subscore.

    The rule order is the clinical severity order of the published score and
    must not be regrouped by variable.

    Parameters
    ----------
    cohort_rel : DuckDBPyRelation
        Output of ``build_stay_cohort``

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, bun_max, creatinine_max, urineoutput, renal]
    """
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , bun_max
            , creatinine_max
            , urineoutput
            , renal: CASE
                WHEN bun_max IS NULL
                    OR urineoutput IS NULL
                    OR creatinine_max IS NULL THEN NULL
                WHEN urineoutput < 500.0 THEN 5
                WHEN bun_max >= 56.0 THEN 5
                WHEN creatinine_max >= 1.60 THEN 3
                WHEN urineoutput < 750.0 THEN 3
                WHEN bun_max >= 28.0 THEN 3
                WHEN urineoutput >= 10000.0 THEN 3
                WHEN creatinine_max >= 1.20 THEN 1
                WHEN bun_max >= 17.0 THEN 1
                WHEN bun_max >= 7.50 THEN 1
                ELSE 0
            END
    """)
