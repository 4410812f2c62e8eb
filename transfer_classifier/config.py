"""
Default configuration and logging setup
"""

import logging
from typing import Dict, Optional

DEFAULT_IMAGE_SIZE = 224
DEFAULT_HIDDEN_UNITS = 100
DEFAULT_BACKBONE = "mobilenet_v1_0.25_224"


def get_default_config() -> Dict:
    """Get default configuration parameters."""
    return {
        'image_size': DEFAULT_IMAGE_SIZE,
        'hidden_units': DEFAULT_HIDDEN_UNITS,
        'backbone': DEFAULT_BACKBONE,
        'learning_rate': 1e-3,
        'freeze_backbone': True,
        'log_level': 'INFO',
    }


def load_config(overrides: Optional[Dict] = None) -> Dict:
    """
    Merge overrides into the default configuration.

    Args:
        overrides (dict): Values replacing the defaults

    Returns:
        dict: The merged configuration

    Raises:
        ValueError: If an override names an unknown key
    """
    config = get_default_config()
    if not overrides:
        return config

    unknown = sorted(set(overrides) - set(config))
    if unknown:
        raise ValueError(f"Unknown configuration keys: {unknown}")

    config.update(overrides)

    if config['image_size'] <= 0:
        raise ValueError(f"image_size must be positive, got {config['image_size']}")
    if config['hidden_units'] <= 0:
        raise ValueError(f"hidden_units must be positive, got {config['hidden_units']}")

    return config


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts and notebooks."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
