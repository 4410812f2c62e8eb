"""
Builds (input, one-hot label) tensor pairs from labeled images
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import tensorflow as tf

from .config import DEFAULT_IMAGE_SIZE
from .errors import InsufficientCategoriesError
from .geometry import decode_image, letterbox
from .labels import class_index, trainable_categories
from .types import Category, Image

logger = logging.getLogger(__name__)

MIN_CATEGORIES = 2


@dataclass
class DatasetResult:
    """
    Outcome of :func:`build_dataset`. On failure ``x`` and ``y`` are None and
    ``error`` says why.
    """

    success: bool
    x: Optional[tf.Tensor] = None
    y: Optional[tf.Tensor] = None
    error: Optional[InsufficientCategoriesError] = None

    @property
    def num_samples(self) -> int:
        return 0 if self.x is None else int(self.x.shape[0])

    @property
    def num_classes(self) -> int:
        return 0 if self.y is None else int(self.y.shape[-1])


def normalize_pixels(pixels: np.ndarray) -> np.ndarray:
    """Map pixel values from [0, 255] to [-1, 1]."""
    return (np.asarray(pixels, dtype=np.float32) - 127.5) / 127.5


def preprocess_image(image: Image, size: int = DEFAULT_IMAGE_SIZE) -> np.ndarray:
    """
    Decode, letterbox and normalize one image.

    Returns:
        np.ndarray: float32 array of shape (1, size, size, 3)
    """
    canvas = letterbox(decode_image(image.data), size)
    return normalize_pixels(np.asarray(canvas)).reshape((1, size, size, 3))


async def build_dataset(
    categories: Sequence[Category],
    images: Sequence[Image],
    image_size: int = DEFAULT_IMAGE_SIZE,
) -> DatasetResult:
    """
    Build the training tensors for ``images``.

    Unclassified images and the unclassified category are dropped. Images are
    processed in input order so row i of ``x`` pairs with row i of ``y``.

    Args:
        categories: Full category list, sentinel included or not
        images: Images to encode
        image_size: Side of the square input canvas

    Returns:
        DatasetResult: success=False when fewer than two categories remain

    Raises:
        ImageDecodeError: An image payload is unreadable
        InvalidImageError: An image has zero width or height
        CategoryNotFoundError: An image references an unknown category
    """
    labeled = [image for image in images if not image.is_unclassified]
    classes = trainable_categories(categories)

    if len(classes) < MIN_CATEGORIES:
        error = InsufficientCategoriesError(len(classes), MIN_CATEGORIES)
        logger.warning(f"Dataset not built: {error}")
        return DatasetResult(success=False, error=error)

    # Resolve labels first so an unknown category fails before any decoding
    labels = [class_index(classes, image.category_identifier) for image in labeled]

    xs: List[np.ndarray] = []
    for image in labeled:
        xs.append(await asyncio.to_thread(preprocess_image, image, image_size))

    if xs:
        x = tf.convert_to_tensor(np.concatenate(xs, axis=0))
    else:
        x = tf.zeros((0, image_size, image_size, 3), dtype=tf.float32)

    y = tf.one_hot(tf.constant(labels, dtype=tf.int32), depth=len(classes))

    logger.info(f"Built dataset: {len(labeled)} images, {len(classes)} classes")

    return DatasetResult(success=True, x=x, y=y)
