"""
Registry of pretrained backbones available for transfer learning.

Each entry names a checkpoint, how to load it and the layer at which it is
truncated (the last layer before the checkpoint's own classification head).
New entries can be added with :func:`register_backbone`.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import keras

from .errors import BackboneLayerNotFoundError, ModelLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackboneSpec:
    name: str
    loader: Callable[[], keras.Model]
    layer_name: str
    input_size: int = 224


BACKBONE_REGISTRY: Dict[str, BackboneSpec] = {}


def register_backbone(
    name: str,
    layer_name: str,
    loader: Optional[Callable[[], keras.Model]] = None,
    url: Optional[str] = None,
    input_size: int = 224,
) -> BackboneSpec:
    """
    Register a backbone under ``name``.

    Exactly one of ``loader`` (a callable returning a Keras model) or ``url``
    (a saved ``.keras`` / ``.h5`` model, downloaded once and cached by
    ``keras.utils.get_file``) must be given.
    """
    if (loader is None) == (url is None):
        raise ValueError("Provide exactly one of 'loader' or 'url'")

    if url is not None:
        loader = _url_loader(name, url)

    spec = BackboneSpec(name=name, loader=loader, layer_name=layer_name, input_size=input_size)
    BACKBONE_REGISTRY[name.lower()] = spec
    return spec


def get_backbone(name: str) -> BackboneSpec:
    name = name.lower()
    if name not in BACKBONE_REGISTRY:
        raise ModelLoadError(
            f"Backbone '{name}' not found. Available backbones: {list_backbones()}"
        )
    return BACKBONE_REGISTRY[name]


def list_backbones() -> List[str]:
    return list(BACKBONE_REGISTRY.keys())


def load_backbone(spec: BackboneSpec) -> keras.Model:
    """Run the loader of ``spec``, converting any failure into ModelLoadError."""
    logger.info(f"Loading backbone '{spec.name}'")
    try:
        model = spec.loader()
    # keras.utils.get_file raises a bare Exception on fetch failures
    except Exception as e:
        raise ModelLoadError(f"Could not load backbone '{spec.name}': {e}") from e

    if not isinstance(model, keras.Model):
        raise ModelLoadError(
            f"Backbone '{spec.name}' loader returned {type(model).__name__}, expected keras.Model"
        )
    return model


def truncate_backbone(model: keras.Model, spec: BackboneSpec) -> keras.Model:
    """Feature extractor from the backbone inputs to ``spec.layer_name``."""
    layer_names = {layer.name for layer in model.layers}
    if spec.layer_name not in layer_names:
        raise BackboneLayerNotFoundError(spec.name, spec.layer_name)

    layer = model.get_layer(spec.layer_name)
    return keras.Model(inputs=model.inputs, outputs=layer.output, name=f"{spec.name}_features")


def _url_loader(name: str, url: str) -> Callable[[], keras.Model]:
    def load() -> keras.Model:
        path = keras.utils.get_file(fname=f"{name}{_suffix(url)}", origin=url, cache_subdir="backbones")
        return keras.models.load_model(path, compile=False)
    return load


def _suffix(url: str) -> str:
    return ".h5" if url.lower().endswith(".h5") else ".keras"


def _mobilenet_v1() -> keras.Model:
    return keras.applications.MobileNet(
        input_shape=(224, 224, 3),
        alpha=0.25,
        include_top=False,
        weights="imagenet",
    )


def _mobilenet_v2() -> keras.Model:
    return keras.applications.MobileNetV2(
        input_shape=(224, 224, 3),
        alpha=1.0,
        include_top=False,
        weights="imagenet",
    )


register_backbone("mobilenet_v1_0.25_224", layer_name="conv_pw_13_relu", loader=_mobilenet_v1)
register_backbone("mobilenet_v2_1.0_224", layer_name="out_relu", loader=_mobilenet_v2)
