"""Tests for the six LODS organ subscores.

Each case is a single cohort row; the expected value is the subscore
(None for NULL). Boundaries sit on both sides of every threshold.
"""

import pandas as pd
import pytest

from lodspy.utils.lods._neuro import _calculate_neurologic_subscore
from lodspy.utils.lods._cardio import _calculate_cardiovascular_subscore
from lodspy.utils.lods._pulm import _calculate_pulmonary_subscore
from lodspy.utils.lods._hemat import _calculate_hematologic_subscore
from lodspy.utils.lods._hepatic import _calculate_hepatic_subscore


def _score(make_cohort, fn, column, values):
    result = fn(make_cohort([{'icustay_id': 1, **values}])).df()
    assert len(result) == 1
    value = result.loc[0, column]
    return None if pd.isna(value) else int(value)


class TestNeurologic:
    @pytest.mark.parametrize('gcs, expected', [
        (15, 0),
        (14, 0),
        (13, 1),
        (9, 1),
        (8, 3),
        (6, 3),
        (5, 5),
        (3, 5),
        (2, None),   # below the scale: erroneous or on trach
        (None, None),
    ])
    def test_gcs_bands(self, make_cohort, gcs, expected):
        assert _score(make_cohort, _calculate_neurologic_subscore, 'neurologic', {'mingcs': gcs}) == expected


class TestCardiovascular:
    NORMAL = {'heartrate_max': 100, 'heartrate_min': 70, 'sysbp_max': 130, 'sysbp_min': 100}

    @pytest.mark.parametrize('overrides, expected', [
        ({}, 0),
        ({'heartrate_min': 29}, 5),
        ({'heartrate_min': 30}, 0),
        ({'sysbp_min': 39}, 5),
        ({'sysbp_min': 40}, 3),
        ({'sysbp_min': 69}, 3),
        ({'sysbp_min': 70}, 1),
        ({'sysbp_min': 89}, 1),
        ({'sysbp_min': 90}, 0),
        ({'sysbp_max': 270}, 3),
        ({'sysbp_max': 269}, 1),
        ({'sysbp_max': 240}, 1),
        ({'sysbp_max': 239}, 0),
        ({'heartrate_max': 140}, 1),
        ({'heartrate_max': 139}, 0),
        # the most severe rule wins
        ({'heartrate_max': 150, 'sysbp_min': 35}, 5),
    ])
    def test_bands(self, make_cohort, overrides, expected):
        values = {**self.NORMAL, **overrides}
        assert _score(make_cohort, _calculate_cardiovascular_subscore, 'cardiovascular', values) == expected

    def test_null_when_guard_inputs_missing(self, make_cohort):
        values = {'heartrate_min': 25, 'sysbp_max': 280}
        assert _score(make_cohort, _calculate_cardiovascular_subscore, 'cardiovascular', values) is None

    def test_scored_with_only_heart_rate(self, make_cohort):
        values = {'heartrate_max': 145}
        assert _score(make_cohort, _calculate_cardiovascular_subscore, 'cardiovascular', values) == 1


class TestPulmonary:
    @pytest.mark.parametrize('ratio, expected', [
        (None, 0),   # not on support
        (400, 1),
        (150, 1),
        (149.9, 3),
        (60, 3),
    ])
    def test_bands(self, make_cohort, ratio, expected):
        values = {'pao2fio2_vent_min': ratio}
        assert _score(make_cohort, _calculate_pulmonary_subscore, 'pulmonary', values) == expected


class TestHematologic:
    NORMAL = {'wbc_max': 10, 'wbc_min': 5, 'platelet_min': 200}

    @pytest.mark.parametrize('overrides, expected', [
        ({}, 0),
        ({'wbc_min': 0.9}, 3),
        ({'wbc_min': 1.0}, 1),
        ({'wbc_min': 2.4}, 1),
        ({'wbc_min': 2.5}, 0),
        ({'platelet_min': 0.5}, 1),
        ({'platelet_min': 1.0}, 0),
        ({'wbc_max': 50}, 1),
        ({'wbc_max': 49.9}, 0),
        ({'wbc_max': None, 'wbc_min': None}, 0),
        ({'platelet_min': None}, 0),
        ({'wbc_max': None, 'platelet_min': None}, None),
    ])
    def test_bands(self, make_cohort, overrides, expected):
        values = {**self.NORMAL, **overrides}
        assert _score(make_cohort, _calculate_hematologic_subscore, 'hematologic', values) == expected


class TestHepatic:
    @pytest.mark.parametrize('bilirubin, inr, expected', [
        (1.0, 1.0, 0),
        (2.0, 1.0, 1),
        (1.9, 1.24, 0),
        (1.0, 1.25, 1),
        (None, 1.3, 1),
        (2.5, None, 1),
        (1.5, None, 0),
        (None, None, None),
    ])
    def test_bands(self, make_cohort, bilirubin, inr, expected):
        values = {'bilirubin_max': bilirubin, 'inr_max': inr}
        assert _score(make_cohort, _calculate_hepatic_subscore, 'hepatic', values) == expected
