import logging

import tensorflow as tf

logger = logging.getLogger(__name__)


def setup_gpu() -> bool:
    """Enable memory growth on every visible GPU. Returns True if a GPU is used."""
    gpus = tf.config.experimental.list_physical_devices("GPU")
    if not gpus:
        logger.info("No GPU detected, using CPU")
        return False

    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth must be set before the GPUs are initialized
        logger.warning(f"GPU configuration error: {e}")
        return False

    logger.info(f"GPU detected: {len(gpus)} device(s)")
    return True
