import asyncio

import keras
import pytest

from transfer_classifier import (
    UNCLASSIFIED_IDENTIFIER,
    Category,
    EmptyDatasetError,
    ImageDecodeError,
    InsufficientCategoriesError,
    ModelLoadError,
    Partition,
    Skipped,
    build_model,
    evaluate,
    fit,
    predict,
    select_partition,
    unclassified_category,
)
from transfer_classifier import training

from conftest import TINY_BACKBONE, make_image


@pytest.fixture
def images():
    return [
        make_image("a", "cat", color=(0, 0, 0)),
        make_image("b", "dog", color=(255, 255, 255)),
    ]


def test_fit_returns_history(images, categories, tiny_config):
    history = asyncio.run(fit(images, categories, {"epochs": 2, "verbose": 0}, config=tiny_config))

    assert isinstance(history, keras.callbacks.History)
    assert len(history.history["loss"]) == 2
    assert "accuracy" in history.history


def test_evaluate_returns_scalars(images, categories, tiny_config):
    results = asyncio.run(evaluate(images, categories, config=tiny_config))

    assert len(results) == 2
    loss, accuracy = results
    assert loss >= 0.0
    assert 0.0 <= accuracy <= 1.0


def test_single_category_is_skipped(images, monkeypatch):
    async def fail(*args, **kwargs):
        raise AssertionError("model must not be created")

    monkeypatch.setattr(training, "create_model", fail)
    categories = [unclassified_category(), Category(identifier="cat")]

    result = asyncio.run(fit(images[:1], categories))
    assert isinstance(result, Skipped)
    assert isinstance(result.error, InsufficientCategoriesError)
    assert "at least 2" in result.reason.lower()

    assert isinstance(asyncio.run(evaluate(images[:1], categories)), Skipped)


def test_decode_error_aborts_before_model(categories, monkeypatch):
    async def fail(*args, **kwargs):
        raise AssertionError("model must not be created")

    monkeypatch.setattr(training, "create_model", fail)
    broken = make_image("a", "cat")
    broken.data = b"garbage"

    with pytest.raises(ImageDecodeError):
        asyncio.run(fit([broken], categories))


def test_model_load_error_propagates(images, categories):
    with pytest.raises(ModelLoadError):
        asyncio.run(fit(images, categories, config={'backbone': 'does_not_exist'}))


def test_predict_scores(images, categories):
    model = build_model(2, 8, backbone=TINY_BACKBONE)
    scores = asyncio.run(predict(model, images, categories))

    assert len(scores) == 2
    for row in scores:
        assert [score.category_identifier for score in row] == ["cat", "dog"]
        assert sum(score.probability for score in row) == pytest.approx(1.0, rel=1e-5)


def test_predict_rejects_mismatched_categories(images, categories):
    model = build_model(3, 8, backbone=TINY_BACKBONE)
    with pytest.raises(ValueError):
        asyncio.run(predict(model, images, categories))


def test_select_partition(images):
    images[1].partition = Partition.VALIDATION

    assert [image.identifier for image in select_partition(images, Partition.TRAINING)] == ["a"]
    assert [image.identifier for image in select_partition(images, Partition.VALIDATION)] == ["b"]
    assert select_partition(images, Partition.TEST) == []


def test_only_unclassified_images_is_skipped(categories, monkeypatch):
    async def fail(*args, **kwargs):
        raise AssertionError("model must not be created")

    monkeypatch.setattr(training, "create_model", fail)
    unlabeled = [make_image("a", UNCLASSIFIED_IDENTIFIER)]

    fitted = asyncio.run(fit(unlabeled, categories))
    assert isinstance(fitted, Skipped)
    assert isinstance(fitted.error, EmptyDatasetError)

    evaluated = asyncio.run(evaluate(unlabeled, categories))
    assert isinstance(evaluated, Skipped)
    assert isinstance(evaluated.error, EmptyDatasetError)
