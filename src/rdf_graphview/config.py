"""
Engine configuration.

Groups layout, viewport and projection settings in one record that loads
from and saves to YAML or JSON.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from rdf_graphview.layout.params import LayoutParams
from rdf_graphview.projection import (
    DEFAULT_LABEL_PREDICATES,
    DEFAULT_TYPE,
    DEFAULT_TYPE_PREDICATES,
)
from rdf_graphview.store import DEFAULT_FUNCTIONAL_PREDICATES

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RDF_GRAPHVIEW_CONFIG"


@dataclass
class ViewportConfig:
    """Viewport geometry used by fit()."""
    width: float = 1200.0
    height: float = 800.0
    padding: float = 50.0
    max_scale: float = 2.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "padding": self.padding,
            "max_scale": self.max_scale,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewportConfig":
        return cls(
            width=float(data.get("width", 1200.0)),
            height=float(data.get("height", 800.0)),
            padding=float(data.get("padding", 50.0)),
            max_scale=float(data.get("max_scale", 2.0)),
        )


@dataclass
class ProjectionConfig:
    """Which predicates supply labels and types, and which are single-valued."""
    label_predicates: List[str] = field(default_factory=lambda: list(DEFAULT_LABEL_PREDICATES))
    type_predicates: List[str] = field(default_factory=lambda: list(DEFAULT_TYPE_PREDICATES))
    functional_predicates: List[str] = field(
        default_factory=lambda: list(DEFAULT_FUNCTIONAL_PREDICATES)
    )
    default_type: str = DEFAULT_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label_predicates": self.label_predicates,
            "type_predicates": self.type_predicates,
            "functional_predicates": self.functional_predicates,
            "default_type": self.default_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectionConfig":
        defaults = cls()
        return cls(
            label_predicates=list(data.get("label_predicates", defaults.label_predicates)),
            type_predicates=list(data.get("type_predicates", defaults.type_predicates)),
            functional_predicates=list(
                data.get("functional_predicates", defaults.functional_predicates)
            ),
            default_type=data.get("default_type", defaults.default_type),
        )


@dataclass
class EngineConfig:
    """Complete configuration for a GraphViewEngine."""
    layout: LayoutParams = field(default_factory=LayoutParams)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    namespaces: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layout": self.layout.to_dict(),
            "viewport": self.viewport.to_dict(),
            "projection": self.projection.to_dict(),
            "namespaces": dict(self.namespaces),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        return cls(
            layout=LayoutParams.from_dict(data.get("layout") or {}),
            viewport=ViewportConfig.from_dict(data.get("viewport") or {}),
            projection=ProjectionConfig.from_dict(data.get("projection") or {}),
            namespaces=dict(data.get("namespaces") or {}),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "EngineConfig":
        """
        Load configuration from a YAML or JSON file (chosen by suffix).

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
        logger.info(f"Loaded engine configuration from {path}")
        return cls.from_dict(data or {})

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() == ".json":
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        else:
            path.write_text(
                yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False),
                encoding="utf-8",
            )

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "EngineConfig":
        """Load from the file named by RDF_GRAPHVIEW_CONFIG, else defaults."""
        environ = os.environ if environ is None else environ
        path = environ.get(CONFIG_ENV_VAR)
        if not path:
            return cls()
        return cls.load(path)
