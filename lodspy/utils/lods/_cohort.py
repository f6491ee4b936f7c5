"""Per-stay fan-in of the worst-value summaries used by the LODS components."""

from __future__ import annotations

import duckdb
from duckdb import DuckDBPyRelation

from lodspy.utils.logging_config import get_logger

logger = get_logger('utils.lods.cohort')

COHORT_COLUMNS = [
    'subject_id', 'hadm_id', 'icustay_id', 'intime', 'outtime',
    'mingcs',
    'heartrate_max', 'heartrate_min', 'sysbp_max', 'sysbp_min',
    'pao2fio2_vent_min',
    'bun_max', 'bun_min', 'wbc_max', 'wbc_min',
    'bilirubin_max', 'creatinine_max', 'inr_max', 'platelet_min',
    'urineoutput',
]


def build_stay_cohort(
    suspinfect_rel: DuckDBPyRelation,
    icustays_rel: DuckDBPyRelation,
    pafi_min_rel: DuckDBPyRelation,
    gcs_rel: DuckDBPyRelation,
    vitals_rel: DuckDBPyRelation,
    uo_rel: DuckDBPyRelation,
    labs_rel: DuckDBPyRelation,
    admissions_rel: DuckDBPyRelation | None = None,
    patients_rel: DuckDBPyRelation | None = None,
) -> DuckDBPyRelation:
    """
    Join every suspected-infection stay to its per-stay summaries.

    Each stay with a non-null ``suspected_infection_time`` is taken once, no
    matter how many infection rows it has.

    The stay reference tables are inner-joined; every summary is
    left-joined, so a stay lacking a summary row keeps NULLs in those fields
    instead of being dropped.

    Parameters
    ----------
    suspinfect_rel : DuckDBPyRelation
        Suspected infection markers with columns [icustay_id, ...]
    icustays_rel : DuckDBPyRelation
        ICU stays with columns [subject_id, hadm_id, icustay_id, intime, outtime]
    pafi_min_rel : DuckDBPyRelation
        Output of ``min_pafi_on_support``
    gcs_rel, vitals_rel, uo_rel, labs_rel : DuckDBPyRelation
        Per-stay summaries keyed by icustay_id
    admissions_rel, patients_rel : DuckDBPyRelation, optional
        When given, the stay must also have an admission (hadm_id) and a
        patient (subject_id) row.

    Returns
    -------
    DuckDBPyRelation
        One row per joined stay with the columns in ``COHORT_COLUMNS``.
    """
    logger.info("Assembling per-stay cohort from summary tables...")

    reference_joins = []
    if admissions_rel is not None:
        reference_joins.append(
            "JOIN (SELECT DISTINCT hadm_id FROM admissions_rel) adm ON ie.hadm_id = adm.hadm_id"
        )
    if patients_rel is not None:
        reference_joins.append(
            "JOIN (SELECT DISTINCT subject_id FROM patients_rel) pat ON ie.subject_id = pat.subject_id"
        )
    reference_sql = "\n        ".join(reference_joins)

    return duckdb.sql(f"""
        FROM (
            SELECT DISTINCT icustay_id
            FROM suspinfect_rel
            WHERE suspected_infection_time IS NOT NULL
        ) s
        JOIN icustays_rel ie ON s.icustay_id = ie.icustay_id
        {reference_sql}
        LEFT JOIN pafi_min_rel pf ON ie.icustay_id = pf.icustay_id
        LEFT JOIN gcs_rel gcs ON ie.icustay_id = gcs.icustay_id
        LEFT JOIN vitals_rel vital ON ie.icustay_id = vital.icustay_id
        LEFT JOIN uo_rel uo ON ie.icustay_id = uo.icustay_id
        LEFT JOIN labs_rel labs ON ie.icustay_id = labs.icustay_id
        SELECT
            ie.subject_id
            , ie.hadm_id
            , ie.icustay_id
            , ie.intime
            , ie.outtime
            , gcs.mingcs
            , vital.heartrate_max
            , vital.heartrate_min
            , vital.sysbp_max
            , vital.sysbp_min
            -- non-null iff a ratio was measured on vent/cpap
            , pf.pao2fio2_vent_min
            , labs.bun_max
            , labs.bun_min
            , labs.wbc_max
            , labs.wbc_min
            , labs.bilirubin_max
            , labs.creatinine_max
            , labs.inr_max
            , labs.platelet_min
            , uo.urineoutput
    """)
