"""Render configuration loader.

Defaults live in aiblock/config/render.yaml. A project may override any
key in <project>/.aiblock/render.yaml; an explicit file (AIBLOCK_CONFIG_FILE)
takes the place of the project override.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from aiblock.primitives.config import RenderConfig
from aiblock.primitives.errors import ConfigurationError

CONFIG_NAME = "render.yaml"
PROJECT_DIR = ".aiblock"


class ConfigLoader:
    """Loader for YAML render configs with project overrides."""

    def __init__(self, config_name: str = CONFIG_NAME):
        self.config_name = config_name
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load(
        self,
        project_path: Optional[Path] = None,
        override_path: Optional[Path] = None,
    ) -> Dict[str, Any]:
        """Load defaults merged with the project (or explicit) override."""
        cache_key = f"{project_path}|{override_path}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        system_path = Path(__file__).parent.parent / "config" / self.config_name
        config = self._load_yaml(system_path)

        if override_path is not None:
            if not Path(override_path).exists():
                raise ConfigurationError(f"Config file not found: {override_path}")
            config = self._merge(config, self._load_yaml(Path(override_path)))
        elif project_path is not None:
            project_config_path = Path(project_path) / PROJECT_DIR / self.config_name
            if project_config_path.exists():
                config = self._merge(config, self._load_yaml(project_config_path))

        self._cache[cache_key] = config
        return config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"{path} is not valid UTF-8: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e.strerror or e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
        return data

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge override into base.

        Dicts merge recursively, everything else replaces.
        """
        result = dict(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def clear_cache(self):
        self._cache.clear()


_loader = ConfigLoader()


def load_render_config(
    project_path: Optional[Path] = None,
    override_path: Optional[Path] = None,
) -> RenderConfig:
    """Load the render config for a project."""
    return RenderConfig.from_dict(_loader.load(project_path, override_path))


def clear_config_cache() -> None:
    _loader.clear_cache()
