from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping

from ..errors import OutOfRangeParameter
from .dither import AlgorithmId
from .params import bounded, read
from .tone import ToneSettings


class BlendMode(str, Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    SOFT_LIGHT = "soft-light"

    @classmethod
    def parse(cls, value: object) -> "BlendMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NORMAL


@dataclass(frozen=True)
class Layer:
    id: str
    algorithm: AlgorithmId = AlgorithmId.FLOYD_STEINBERG
    tone: ToneSettings = field(default_factory=ToneSettings)
    threshold: float = 128.0
    opacity: float = 100.0
    blend_mode: BlendMode = BlendMode.NORMAL
    visible: bool = True
    name: str = ""

    def __post_init__(self) -> None:
        tone = self.tone
        if isinstance(tone, Mapping):
            tone = ToneSettings.from_dict(tone)
        elif not isinstance(tone, ToneSettings):
            raise OutOfRangeParameter("settings", tone)
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "algorithm", AlgorithmId.parse(self.algorithm))
        object.__setattr__(self, "tone", tone)
        object.__setattr__(self, "threshold", bounded("threshold", self.threshold, 0, 255))
        object.__setattr__(self, "opacity", bounded("opacity", self.opacity, 0, 100))
        object.__setattr__(self, "blend_mode", BlendMode.parse(self.blend_mode))
        object.__setattr__(self, "visible", bool(self.visible))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Layer":
        """Read one entry of the caller's layer stack.

        Accepts the stack's own camelCase shape::

            {"id": "layer-1", "algorithm": "atkinson", "opacity": 80,
             "isVisible": true, "blendMode": "multiply",
             "settings": {"brightness": 100, "threshold": 128, ...}}
        """

        if not isinstance(payload, Mapping):
            raise OutOfRangeParameter("layer", payload)
        settings = payload.get("settings") or {}
        if not isinstance(settings, Mapping):
            raise OutOfRangeParameter("settings", settings)
        threshold = settings.get("threshold", payload.get("threshold"))
        visible = payload.get("isVisible", payload.get("visible", True))
        return cls(
            id=read(payload, "id", ""),
            name=read(payload, "name", ""),
            algorithm=read(payload, "algorithm", AlgorithmId.FLOYD_STEINBERG),
            tone=ToneSettings.from_dict(settings),
            threshold=128 if threshold is None else threshold,
            opacity=read(payload, "opacity", 100),
            blend_mode=payload.get("blendMode", payload.get("blend_mode")),
            visible=visible,
        )

    def to_dict(self) -> dict:
        settings = self.tone.to_dict()
        settings["threshold"] = self.threshold
        return {
            "id": self.id,
            "name": self.name,
            "algorithm": self.algorithm.value,
            "opacity": self.opacity,
            "isVisible": self.visible,
            "blendMode": self.blend_mode.value,
            "settings": settings,
        }


def coerce_layers(layers: Iterable[Layer | Mapping[str, Any]]) -> List[Layer]:
    return [layer if isinstance(layer, Layer) else Layer.from_dict(layer) for layer in layers]


def describe_layers(layers: Iterable[Layer | Mapping[str, Any]]) -> List[dict]:
    """Normalised description of a layer stack, bottom layer first."""
    return [layer.to_dict() for layer in coerce_layers(layers)]
