"""
Exceptions raised while building datasets and models
"""


class ClassificationError(Exception):
    """Base class for every error raised by transfer_classifier."""


class InvalidImageError(ClassificationError):
    """The raster has a zero or negative dimension."""


class ImageDecodeError(ClassificationError):
    """The encoded pixel payload could not be decoded."""


class CategoryNotFoundError(ClassificationError):
    def __init__(self, identifier: str):
        super().__init__(f"Image references unknown category: {identifier}")
        self.identifier = identifier


class InsufficientCategoriesError(ClassificationError):
    def __init__(self, count: int, minimum: int = 2):
        super().__init__(
            f"At least {minimum} categories required, got {count}"
        )
        self.count = count
        self.minimum = minimum


class EmptyDatasetError(ClassificationError):
    """Every image is unclassified, so there is nothing to train or evaluate on."""


class ModelLoadError(ClassificationError):
    """The pretrained backbone could not be fetched or loaded."""


class BackboneLayerNotFoundError(ClassificationError):
    def __init__(self, backbone: str, layer_name: str):
        super().__init__(
            f"Layer '{layer_name}' not found in backbone '{backbone}'"
        )
        self.backbone = backbone
        self.layer_name = layer_name
