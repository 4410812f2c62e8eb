"""
Fit / evaluate / predict entry points.

Each call builds its own dataset and model. When fewer than two trainable
categories exist, fit and evaluate return :class:`Skipped` without touching
the model.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import keras
import numpy as np

from .config import load_config
from .dataset import DatasetResult, build_dataset, preprocess_image
from .errors import ClassificationError, EmptyDatasetError
from .labels import trainable_categories
from .model import create_model
from .types import Category, Image, Partition, Score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Skipped:
    """
    Nothing to do: too few categories (InsufficientCategoriesError) or no
    labeled images (EmptyDatasetError).
    """

    error: ClassificationError

    @property
    def reason(self) -> str:
        return str(self.error)


def select_partition(images: Sequence[Image], partition: Partition) -> List[Image]:
    return [image for image in images if image.partition == partition]


async def _prepare(
    images: Sequence[Image],
    categories: Sequence[Category],
    config: Optional[Dict],
):
    config = load_config(config)

    dataset: DatasetResult = await build_dataset(categories, images, image_size=config['image_size'])
    if not dataset.success:
        logger.warning(f"Skipping: {dataset.error}")
        return Skipped(dataset.error), None

    if dataset.num_samples == 0:
        error = EmptyDatasetError("No labeled images to train or evaluate on")
        logger.warning(f"Skipping: {error}")
        return Skipped(error), None

    model = await create_model(
        len(trainable_categories(categories)),
        config['hidden_units'],
        backbone=config['backbone'],
        learning_rate=config['learning_rate'],
        freeze_backbone=config['freeze_backbone'],
    )
    return dataset, model


async def fit(
    images: Sequence[Image],
    categories: Sequence[Category],
    options: Optional[Dict] = None,
    config: Optional[Dict] = None,
) -> Union[keras.callbacks.History, Skipped]:
    """
    Train a fresh model on ``images``.

    Args:
        images: Labeled images; unclassified ones are ignored
        categories: Category list, unclassified sentinel included or not
        options: Keyword arguments for ``keras.Model.fit`` (epochs, batch_size, ...)
        config: Overrides for :func:`transfer_classifier.config.get_default_config`

    Returns:
        The Keras training history (``history.model`` is the trained model),
        or Skipped when fewer than two categories are trainable or no
        image is labeled
    """
    dataset, model = await _prepare(images, categories, config)
    if isinstance(dataset, Skipped):
        return dataset

    logger.info(f"Fitting on {dataset.num_samples} images")
    return await asyncio.to_thread(model.fit, dataset.x, dataset.y, **(options or {}))


async def evaluate(
    images: Sequence[Image],
    categories: Sequence[Category],
    config: Optional[Dict] = None,
) -> Union[List[float], Skipped]:
    """Evaluate a fresh model. Returns ``[loss, accuracy]`` or Skipped."""
    dataset, model = await _prepare(images, categories, config)
    if isinstance(dataset, Skipped):
        return dataset

    logger.info(f"Evaluating on {dataset.num_samples} images")
    results = await asyncio.to_thread(model.evaluate, dataset.x, dataset.y, verbose=0)
    return [float(value) for value in np.atleast_1d(results)]


async def predict(
    model: keras.Model,
    images: Sequence[Image],
    categories: Sequence[Category],
    image_size: Optional[int] = None,
) -> List[List[Score]]:
    """
    Score every image against the trainable categories.

    Returns one list of Score per image, in category order. Unclassified
    images are scored too, this is how new images get suggestions.
    """
    classes = trainable_categories(categories)
    if not images:
        return []

    if image_size is None:
        image_size = int(model.inputs[0].shape[1])

    xs = []
    for image in images:
        xs.append(await asyncio.to_thread(preprocess_image, image, image_size))

    probabilities = await asyncio.to_thread(model.predict, np.concatenate(xs, axis=0), verbose=0)

    if probabilities.shape[-1] != len(classes):
        raise ValueError(
            f"Model predicts {probabilities.shape[-1]} classes, {len(classes)} categories given"
        )

    return [
        [
            Score(category_identifier=category.identifier, probability=float(p))
            for category, p in zip(classes, row)
        ]
        for row in probabilities
    ]
