"""
Transfer Classifier

Transfer-learning helper for small labeled image collections: letterboxes
images to a square canvas, builds normalized tensors with one-hot labels,
splices a trainable head onto a pretrained MobileNet backbone and runs Keras
fit / evaluate.

Example Usage:
    import asyncio
    from transfer_classifier import fit, evaluate, Skipped

    history = asyncio.run(fit(images, categories, {"epochs": 10}))
    if isinstance(history, Skipped):
        print(history.reason)
"""

__version__ = "0.1.0"

from .backbones import BackboneSpec, get_backbone, list_backbones, register_backbone
from .dataset import DatasetResult, build_dataset, normalize_pixels, preprocess_image
from .errors import (
    BackboneLayerNotFoundError,
    CategoryNotFoundError,
    ClassificationError,
    EmptyDatasetError,
    ImageDecodeError,
    InsufficientCategoriesError,
    InvalidImageError,
    ModelLoadError,
)
from .geometry import decode_image, letterbox
from .labels import class_index, find_category_index, trainable_categories
from .model import assemble_model, build_model, create_model
from .training import Skipped, evaluate, fit, predict, select_partition
from .types import (
    UNCLASSIFIED_IDENTIFIER,
    Category,
    Classifier,
    Image,
    ImageVisualization,
    Partition,
    Score,
    unclassified_category,
)

__all__ = [
    # Records
    'UNCLASSIFIED_IDENTIFIER', 'Category', 'Classifier', 'Image',
    'ImageVisualization', 'Partition', 'Score', 'unclassified_category',
    # Errors
    'ClassificationError', 'InvalidImageError', 'ImageDecodeError',
    'CategoryNotFoundError', 'EmptyDatasetError', 'InsufficientCategoriesError', 'ModelLoadError',
    'BackboneLayerNotFoundError',
    # Data
    'decode_image', 'letterbox', 'class_index', 'find_category_index',
    'trainable_categories', 'DatasetResult', 'build_dataset',
    'normalize_pixels', 'preprocess_image',
    # Models
    'BackboneSpec', 'get_backbone', 'list_backbones', 'register_backbone',
    'assemble_model', 'build_model', 'create_model',
    # Training
    'Skipped', 'fit', 'evaluate', 'predict', 'select_partition',
]
