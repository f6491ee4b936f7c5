from .utils import load_data, setup_logging
from .utils.lods import calculate_lods, calculate_lods_from_files, LODSConfig

# Version info
__version__ = "0.1.0"

# Public API
__all__ = [
    "load_data",
    "setup_logging",
    "calculate_lods",
    "calculate_lods_from_files",
    "LODSConfig",
]
