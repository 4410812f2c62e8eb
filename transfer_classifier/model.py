import asyncio
import logging

import keras

from .backbones import get_backbone, load_backbone, truncate_backbone
from .config import DEFAULT_BACKBONE

logger = logging.getLogger(__name__)


def assemble_model(
    features: keras.Model,
    classes: int,
    units: int,
    learning_rate: float = 1e-3,
    freeze_backbone: bool = True,
) -> keras.Model:
    """
    Stack a Flatten / Dense(relu) / Dense(softmax) head on a feature extractor
    and compile it for one-hot targets.
    """
    if classes < 1:
        raise ValueError(f"classes must be positive, got {classes}")
    if units < 1:
        raise ValueError(f"units must be positive, got {units}")

    features.trainable = not freeze_backbone

    model = keras.Sequential([
        keras.Input(shape=tuple(features.inputs[0].shape[1:])),
        features,
        keras.layers.Flatten(name="flatten"),
        keras.layers.Dense(
            units,
            activation="relu",
            kernel_initializer="variance_scaling",
            use_bias=True,
            name="hidden",
        ),
        keras.layers.Dense(
            classes,
            activation="softmax",
            kernel_initializer="variance_scaling",
            use_bias=False,
            name="classifier",
        ),
    ], name="transfer_classifier")

    model.compile(
        optimizer=keras.optimizers.Adam(learning_rate=learning_rate),
        loss="categorical_crossentropy",
        metrics=["accuracy"],
    )

    return model


def build_model(
    classes: int,
    units: int,
    backbone: str = DEFAULT_BACKBONE,
    learning_rate: float = 1e-3,
    freeze_backbone: bool = True,
) -> keras.Model:
    """Blocking counterpart of :func:`create_model`."""
    spec = get_backbone(backbone)
    features = truncate_backbone(load_backbone(spec), spec)

    model = assemble_model(
        features,
        classes,
        units,
        learning_rate=learning_rate,
        freeze_backbone=freeze_backbone,
    )

    logger.info(
        f"Assembled model on '{spec.name}' (cut at '{spec.layer_name}'): "
        f"{units} hidden units, {classes} classes"
    )
    return model


async def create_model(
    classes: int,
    units: int,
    backbone: str = DEFAULT_BACKBONE,
    learning_rate: float = 1e-3,
    freeze_backbone: bool = True,
) -> keras.Model:
    """
    Load a pretrained backbone, truncate it and append a trainable head.

    Args:
        classes: Number of output classes
        units: Width of the hidden dense layer
        backbone: Registered backbone name
        learning_rate: Adam learning rate
        freeze_backbone: Keep backbone weights fixed during training

    Returns:
        keras.Model: A compiled model ready for fit / evaluate

    Raises:
        ModelLoadError: Unknown backbone or fetch / load failure
        BackboneLayerNotFoundError: The truncation layer is missing
    """
    return await asyncio.to_thread(
        build_model,
        classes,
        units,
        backbone=backbone,
        learning_rate=learning_rate,
        freeze_backbone=freeze_backbone,
    )
