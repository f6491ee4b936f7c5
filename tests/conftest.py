"""
Configuration file for pytest.
This file contains fixtures and configuration settings for pytest.
"""
import duckdb
import pytest

from tests.factories import SUMMARY_COLUMNS, hours, make_frame


@pytest.fixture
def make_cohort():
    """Factory: cohort relation from partial per-stay summary dicts."""
    def _make(rows):
        full_rows = [{col: row.get(col) for col in ['icustay_id'] + SUMMARY_COLUMNS} for row in rows]
        df = make_frame(
            full_rows,
            ['icustay_id'] + SUMMARY_COLUMNS,
            float_cols=SUMMARY_COLUMNS,
            int_cols=['icustay_id'],
        )
        return duckdb.from_df(df)
    return _make


@pytest.fixture
def lods_tables():
    """
    Small MIMIC-style dataset exercising every stage of the pipeline.

    Stays (all ICU stays span BASE_TIME to BASE_TIME + 48h):
    - 1001: complete normal data, CPAP row flagged as error -> lods 1 (renal BUN)
    - 1002: GCS 4, PaO2/FiO2 120 during detected CPAP only -> lods 8
    - 1003: GCS 2 (erroneous), severe cv/renal/hemat/hepatic, ventilated -> lods 15
    - 1004: complete data but no suspected infection time -> absent
    - 1005: eligible but no ICU stay row -> all components NULL, lods 0
    - 1006: eligible ICU stay without any measurements -> pulmonary 0, lods 0
    - 1007: not in the suspected infection table -> absent
    """
    icustays = make_frame(
        [
            (1, 101, 1001, hours(0), hours(48)),
            (2, 102, 1002, hours(0), hours(48)),
            (3, 103, 1003, hours(0), hours(48)),
            (4, 104, 1004, hours(0), hours(48)),
            (6, 106, 1006, hours(0), hours(48)),
            (7, 107, 1007, hours(0), hours(48)),
        ],
        ['subject_id', 'hadm_id', 'icustay_id', 'intime', 'outtime'],
        int_cols=['subject_id', 'hadm_id', 'icustay_id'],
        time_cols=['intime', 'outtime'],
    )
    chartevents = make_frame(
        [
            # error rows never open an interval
            (1001, hours(5), 467, 'CPAP mask', 1),
            (1001, hours(6), 467, 'Nasal cannula', None),
            (1002, hours(10), 467, 'CPAP mask', None),
            (1004, hours(10), 469, 'BiPAP mask', 0),
        ],
        ['icustay_id', 'charttime', 'itemid', 'value', 'error'],
        int_cols=['icustay_id', 'itemid', 'error'],
        time_cols=['charttime'],
    )
    ventdurations = make_frame(
        [
            (1003, hours(2), hours(20)),
        ],
        ['icustay_id', 'starttime', 'endtime'],
        int_cols=['icustay_id'],
        time_cols=['starttime', 'endtime'],
    )
    bloodgasarterial = make_frame(
        [
            # not on support: ignored for the pulmonary component
            (1001, hours(3), 100.0),
            (1002, hours(12), 120.0),
            (1003, hours(4), 200.0),
            (1003, hours(30), 90.0),
            (1004, hours(11), 130.0),
        ],
        ['icustay_id', 'charttime', 'pao2fio2'],
        float_cols=['pao2fio2'],
        int_cols=['icustay_id'],
        time_cols=['charttime'],
    )
    gcs = make_frame(
        [(1001, 15), (1002, 4), (1003, 2), (1004, 3)],
        ['icustay_id', 'mingcs'],
        float_cols=['mingcs'],
        int_cols=['icustay_id'],
    )
    vitals = make_frame(
        [
            (1001, 100, 80, 130, 100),
            (1003, 120, 25, 150, 95),
            (1004, 150, 60, 200, 60),
        ],
        ['icustay_id', 'heartrate_max', 'heartrate_min', 'sysbp_max', 'sysbp_min'],
        float_cols=['heartrate_max', 'heartrate_min', 'sysbp_max', 'sysbp_min'],
        int_cols=['icustay_id'],
    )
    uo = make_frame(
        [(1001, 2000.0), (1003, 400.0), (1004, 800.0)],
        ['icustay_id', 'urineoutput'],
        float_cols=['urineoutput'],
        int_cols=['icustay_id'],
    )
    labs = make_frame(
        [
            (1001, 10.0, 8.0, 10.0, 5.0, 0.5, 1.0, 1.0, 200.0),
            (1003, 20.0, 15.0, 12.0, 0.5, 2.5, 1.6, 1.1, 90.0),
            (1004, 60.0, 40.0, 60.0, 3.0, 3.0, 2.0, 1.5, 50.0),
        ],
        [
            'icustay_id', 'bun_max', 'bun_min', 'wbc_max', 'wbc_min',
            'bilirubin_max', 'creatinine_max', 'inr_max', 'platelet_min',
        ],
        float_cols=[
            'bun_max', 'bun_min', 'wbc_max', 'wbc_min',
            'bilirubin_max', 'creatinine_max', 'inr_max', 'platelet_min',
        ],
        int_cols=['icustay_id'],
    )
    suspinfect = make_frame(
        [
            (1001, hours(1)),
            (1002, hours(1)),
            (1003, hours(1)),
            (1004, None),
            (1005, hours(1)),
            (1006, hours(1)),
        ],
        ['icustay_id', 'suspected_infection_time'],
        int_cols=['icustay_id'],
        time_cols=['suspected_infection_time'],
    )
    return {
        'icustays': icustays,
        'chartevents': chartevents,
        'ventdurations': ventdurations,
        'bloodgasarterial': bloodgasarterial,
        'gcs': gcs,
        'vitals': vitals,
        'uo': uo,
        'labs': labs,
        'suspinfect': suspinfect,
    }
