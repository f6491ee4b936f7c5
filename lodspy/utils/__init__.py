from .config import load_lods_config, get_config_or_params, create_example_config
from .io import load_data
from .logging_config import setup_logging, get_logger

__all__ = [
      # io
      'load_data',
      # config
      'load_lods_config',
      'get_config_or_params',
      'create_example_config',
      # logging
      'setup_logging',
      'get_logger',
  ]
