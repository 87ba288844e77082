"""Scene contents: background layers and the object list."""

from dataclasses import dataclass, field
from typing import List, Optional

from .bitmap import Bitmap
from .core import Vector2

BACKGROUND_LAYER_COUNT = 8
OBJECT_COUNT = 512


@dataclass
class SceneObject:
    """An object placed in the scene."""

    x: int = 0
    y: int = 0
    priority: int = 0
    hflip: bool = False
    vflip: bool = False
    tile: Optional[Bitmap] = None


@dataclass
class BackgroundLayer:
    """A scrolling background layer."""

    position: Vector2 = field(default_factory=Vector2)


@dataclass
class Scene:
    """The fixed set of background layers and objects of a scene."""

    background_layers: List[BackgroundLayer] = field(
        default_factory=lambda: [BackgroundLayer() for _ in range(BACKGROUND_LAYER_COUNT)]
    )
    objects: List[SceneObject] = field(
        default_factory=lambda: [SceneObject() for _ in range(OBJECT_COUNT)]
    )