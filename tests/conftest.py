import base64
import io

import keras
import pytest
from PIL import Image as PILImage

from transfer_classifier import Category, Image, register_backbone, unclassified_category

TINY_BACKBONE = "tiny_test_backbone"


def tiny_backbone() -> keras.Model:
    inputs = keras.Input(shape=(224, 224, 3))
    x = keras.layers.Conv2D(2, 3, strides=8, name="stem")(inputs)
    x = keras.layers.ReLU(name="features")(x)
    x = keras.layers.GlobalAveragePooling2D(name="pool")(x)
    outputs = keras.layers.Dense(4, activation="softmax", name="predictions")(x)
    return keras.Model(inputs, outputs, name="tiny")


register_backbone(TINY_BACKBONE, layer_name="features", loader=tiny_backbone)


def png_bytes(color=(255, 255, 255), size=(32, 16)) -> bytes:
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def data_url(color=(255, 255, 255), size=(32, 16)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(color, size)).decode("ascii")


def make_image(identifier, category_identifier, color=(255, 255, 255), size=(32, 16)) -> Image:
    return Image(identifier=identifier, data=png_bytes(color, size), category_identifier=category_identifier)


@pytest.fixture
def categories():
    return [unclassified_category(), Category(identifier="cat", index=1), Category(identifier="dog", index=2)]


@pytest.fixture
def tiny_config():
    return {'backbone': TINY_BACKBONE}
