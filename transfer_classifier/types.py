"""
Records exchanged with the storage / UI layer
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

# Reserved category identifier for images that have not been labeled yet
UNCLASSIFIED_IDENTIFIER = "00000000-0000-0000-0000-000000000000"


class Partition(IntEnum):
    TRAINING = 0
    VALIDATION = 1
    TEST = 2


@dataclass
class Category:
    identifier: str
    index: int = 0
    color: str = "#000000"
    description: str = ""
    visible: bool = True

    @property
    def is_unclassified(self) -> bool:
        return self.identifier == UNCLASSIFIED_IDENTIFIER


@dataclass
class Score:
    category_identifier: str
    probability: float


@dataclass
class ImageVisualization:
    brightness: float = 0.0
    contrast: float = 0.0
    visible_channels: List[int] = field(default_factory=lambda: [0, 1, 2])
    visible: bool = True


@dataclass
class Image:
    """
    A labeled (or unlabeled) image. ``data`` is the encoded pixel payload:
    raw file bytes, base64 text or a ``data:`` URL.
    """

    identifier: str
    data: object
    category_identifier: str = UNCLASSIFIED_IDENTIFIER
    checksum: str = ""
    partition: Partition = Partition.TRAINING
    scores: List[Score] = field(default_factory=list)
    visualization: ImageVisualization = field(default_factory=ImageVisualization)

    @property
    def is_unclassified(self) -> bool:
        return self.category_identifier == UNCLASSIFIED_IDENTIFIER


@dataclass
class Classifier:
    name: str
    categories: List[Category] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)


def unclassified_category() -> Category:
    """The sentinel category, as the storage layer places it first in the list."""
    return Category(
        identifier=UNCLASSIFIED_IDENTIFIER,
        index=0,
        color="#F8F8F8",
        description="Unknown",
        visible=True,
    )
