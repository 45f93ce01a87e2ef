"""Render configuration passed explicitly through the pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict

from aiblock.constants import CONTAINER_NAME, MIN_MARKER_LEN, POSITION_ATTR
from aiblock.primitives.errors import ConfigurationError
from aiblock.primitives.segments import WindowPolicy


@dataclass(frozen=True)
class RenderConfig:
    """Explicit configuration passed through the render pipeline.

    Attributes:
        container_name: Name after the opening marker.
        min_marker_len: Minimum count of marker characters.
        position_attr: Attribute carrying absolute line numbers.
        prompt_window: Window for the prompt field.
        response_window: Window for a response without interrupts.
        region_window: Window for content around interrupts.
        interrupt_window: Window for interrupt bodies.
        hard_breaks: Turn response newlines into line breaks.
    """

    container_name: str = CONTAINER_NAME
    min_marker_len: int = MIN_MARKER_LEN
    position_attr: str = POSITION_ATTR
    prompt_window: WindowPolicy = field(default_factory=lambda: WindowPolicy.head(10))
    response_window: WindowPolicy = field(default_factory=lambda: WindowPolicy.tail(10))
    region_window: WindowPolicy = field(
        default_factory=lambda: WindowPolicy.head_tail(4, 8)
    )
    interrupt_window: WindowPolicy = field(
        default_factory=lambda: WindowPolicy.head(10)
    )
    hard_breaks: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderConfig":
        """Build a config from merged YAML data.

        Raises:
            ConfigurationError: A section has the wrong shape or value.
        """
        container = data.get("container") or {}
        windows = data.get("windows") or {}
        response = data.get("response") or {}
        if not all(isinstance(s, dict) for s in (container, windows, response)):
            raise ConfigurationError(
                "container, windows and response must be mappings"
            )

        defaults = cls()
        try:
            min_marker_len = int(
                container.get("min_marker_length", defaults.min_marker_len)
            )
        except (TypeError, ValueError):
            raise ConfigurationError(
                "min_marker_length must be an integer", field="container"
            )
        if min_marker_len < 1:
            raise ConfigurationError(
                "min_marker_length must be at least 1", field="container"
            )

        def window(name: str, default: WindowPolicy) -> WindowPolicy:
            if name not in windows:
                return default
            return WindowPolicy.from_dict(windows[name], name=f"windows.{name}")

        return cls(
            container_name=str(container.get("name", defaults.container_name)),
            min_marker_len=min_marker_len,
            position_attr=str(data.get("position_attribute", defaults.position_attr)),
            prompt_window=window("prompt", defaults.prompt_window),
            response_window=window("response", defaults.response_window),
            region_window=window("region", defaults.region_window),
            interrupt_window=window("interrupt", defaults.interrupt_window),
            hard_breaks=bool(response.get("hard_breaks", defaults.hard_breaks)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "container": {
                "name": self.container_name,
                "min_marker_length": self.min_marker_len,
            },
            "position_attribute": self.position_attr,
            "windows": {
                "prompt": self.prompt_window.to_dict(),
                "response": self.response_window.to_dict(),
                "region": self.region_window.to_dict(),
                "interrupt": self.interrupt_window.to_dict(),
            },
            "response": {"hard_breaks": self.hard_breaks},
        }
