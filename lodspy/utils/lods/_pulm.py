"""Pulmonary subscore calculation for LODS.

Scoring (minimum PaO2/FiO2 measured on ventilation or CPAP):
- not on support (no qualifying ratio): 0 points
- PaO2/FiO2 >= 150: 1 point
- PaO2/FiO2 < 150: 3 points

Unlike the other components a missing input scores 0, not NULL: an
unsupported patient without a qualifying gas is assumed to oxygenate.
"""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation


def _calculate_pulmonary_subscore(cohort_rel: DuckDBPyRelation) -> DuckDBPyRelation:
    """
    Calculate LODS pulmonary subscore.

    Parameters
    ----------
    cohort_rel : DuckDBPyRelation
        Output of ``build_stay_cohort``

    Returns
    -------
    DuckDBPyRelation
        Columns: [icustay_id, pao2fio2_vent_min, pulmonary]
    """
    return duckdb.sql("""
        FROM cohort_rel
        SELECT
            icustay_id
            , pao2fio2_vent_min
            , pulmonary: CASE
                WHEN pao2fio2_vent_min IS NULL THEN 0
                WHEN pao2fio2_vent_min >= 150 THEN 1
                WHEN pao2fio2_vent_min < 150 THEN 3
                ELSE NULL
            END
    """)
