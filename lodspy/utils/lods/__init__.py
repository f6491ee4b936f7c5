"""LODS scoring module for lodspy.

This module calculates the Logistic Organ Dysfunction System (LODS) score over
an entire ICU stay for every stay with a suspected infection.

Public API:
    calculate_lods: Calculate LODS from in-memory input tables
    calculate_lods_from_files: Calculate LODS from tables in a data directory
    LODSConfig: Configuration dataclass for customizing calculation parameters
"""

from ._utils import LODSConfig, REQUIRED_COLUMNS
from ._core import calculate_lods, calculate_lods_from_files, compose_lods, COMPONENTS
from ._cpap import detect_cpap_intervals
from ._pafi import flag_pafi_on_support, min_pafi_on_support
from ._cohort import build_stay_cohort
from ._perf import StepTimer

__all__ = [
    'calculate_lods',
    'calculate_lods_from_files',
    'compose_lods',
    'detect_cpap_intervals',
    'flag_pafi_on_support',
    'min_pafi_on_support',
    'build_stay_cohort',
    'LODSConfig',
    'StepTimer',
    'COMPONENTS',
    'REQUIRED_COLUMNS',
]
