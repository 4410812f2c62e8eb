import asyncio

from transfer_classifier import (
    UNCLASSIFIED_IDENTIFIER,
    Category,
    Classifier,
    Image,
    Partition,
    build_dataset,
    unclassified_category,
)

from conftest import make_image


def test_image_defaults():
    image = Image(identifier="a", data=b"")

    assert image.category_identifier == UNCLASSIFIED_IDENTIFIER
    assert image.is_unclassified
    assert image.partition == Partition.TRAINING
    assert image.scores == []
    assert image.visualization.visible_channels == [0, 1, 2]


def test_sentinel_category():
    assert unclassified_category().is_unclassified
    assert not Category(identifier="cat").is_unclassified


def test_classifier_bundle_builds_dataset():
    classifier = Classifier(
        name="pets",
        categories=[unclassified_category(), Category(identifier="cat"), Category(identifier="dog")],
        images=[make_image("a", "dog"), make_image("b", UNCLASSIFIED_IDENTIFIER)],
    )
    result = asyncio.run(build_dataset(classifier.categories, classifier.images))

    assert result.num_samples == 1
    assert result.y.numpy().tolist() == [[0.0, 1.0]]
