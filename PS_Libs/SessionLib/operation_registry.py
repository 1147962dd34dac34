"""
Operation Registry.

Named editing operations that an orchestrator runs against an EditingSession
with a parameter dictionary. The command line dispatches every subcommand
through the default registry.

Classes:
    Operation: A named operation and the export feature it produces
    OperationRegistry: Name to operation lookup and execution

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_operations: Register all built-in operations
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from PS_Libs.constants import (
    DEFAULT_NOISE_STRENGTH,
    FEATURE_BACKGROUND,
    FEATURE_CROP,
    FEATURE_FILTERS,
    FEATURE_NOISE,
)
from PS_Libs.ImageEditingLib.filter_compositor import FilterParams
from PS_Libs.ImageEditingLib.image_models import CropRect, PointerEvent, Raster
from PS_Libs.SessionLib.editing_session import EditingSession

logger = logging.getLogger(__name__)

OperationFunction = Callable[[EditingSession, Dict[str, Any]], Optional[Raster]]

RECT_KEYS = ("x", "y", "width", "height")


@dataclass(frozen=True)
class Operation:
    """A registered operation.

    Attributes:
        name: Unique operation name (e.g., "Crop")
        run: Callable accepting (session, params)
        feature: Export feature key of the raster it returns
        description: Human-readable description
    """
    name: str
    run: OperationFunction
    feature: str
    description: str = ""


class OperationRegistry:
    """
    Registry for session operations.

    Example:
        >>> registry = get_default_registry()
        >>> feature, raster = registry.execute("Crop", session, {"x": 10})
    """

    def __init__(self):
        self._operations: Dict[str, Operation] = {}

    def register(self, operation: Operation) -> None:
        """
        Register an operation under its name.

        Raises:
            ValueError: If the name is empty or run is not callable
            RuntimeError: If the name is already registered
        """
        name = operation.name.strip()

        if not name:
            raise ValueError("operation name cannot be empty")

        if not callable(operation.run):
            raise ValueError(f"operation must be callable, got {type(operation.run)}")

        if name in self._operations:
            raise RuntimeError(f"Operation '{name}' is already registered")

        self._operations[name] = operation
        logger.debug(f"Registered operation: {name}")

    def get(self, name: str) -> Operation:
        """
        Get the operation registered under ``name``.

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._operations:
            raise KeyError(
                f"No operation registered as '{name}'. "
                f"Available operations: {', '.join(self.names())}"
            )

        return self._operations[name]

    def names(self) -> List[str]:
        return sorted(self._operations)

    def __contains__(self, name: object) -> bool:
        return str(name).strip() in self._operations

    def execute(
        self,
        name: str,
        session: EditingSession,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[str, Optional[Raster]]:
        """
        Run an operation against a session.

        Returns:
            Tuple of (export feature, resulting raster or None)

        Raises:
            KeyError: If name is not registered
        """
        operation = self.get(name)
        logger.debug(f"Executing {operation.name} with {params or {}}")
        return operation.feature, operation.run(session, dict(params or {}))


# ============================================================================
# Built-in operations
# ============================================================================

def run_remove_background(session: EditingSession, params: Dict[str, Any]) -> Optional[Raster]:
    """
    Paint strokes, then carve the marked pixels.

    Params (all optional):
        - 'brush_radius': Radius used for the strokes
        - 'strokes': List of strokes, each a list of (x, y) points
    """
    if params.get("brush_radius") is not None:
        session.set_brush_radius(params["brush_radius"])

    for stroke in params.get("strokes") or []:
        first, rest = stroke[0], stroke[1:]
        session.paint(PointerEvent("down", *first))
        for point in rest:
            session.paint(PointerEvent("move", *point))
        session.paint(PointerEvent("up"))

    return session.remove_background()


def run_crop(session: EditingSession, params: Dict[str, Any]) -> Optional[Raster]:
    """
    Crop the loaded image.

    Params (all optional):
        - 'x', 'y', 'width', 'height': Rectangle fields; missing ones keep
          the current rectangle's values
        - 'aspect_ratio': Ratio locked after the rectangle is set (None = free)
    """
    overrides = {key: params[key] for key in RECT_KEYS if params.get(key) is not None}
    rect = session.crop_rect
    if overrides and rect is not None:
        fields = rect.to_dict()
        fields.update(overrides)
        session.set_crop_rect(CropRect.from_dict(fields))

    if "aspect_ratio" in params:
        session.set_aspect_ratio(params["aspect_ratio"])

    return session.apply_crop()


def run_filters(session: EditingSession, params: Dict[str, Any]) -> Optional[Raster]:
    """Params: any FilterParams fields; missing ones take their identity value."""
    return session.apply_filters(FilterParams.from_dict(params))


def run_noise_reduction(session: EditingSession, params: Dict[str, Any]) -> Optional[Raster]:
    strength = params.get("strength")
    if strength is None:
        strength = session.noise_strength or DEFAULT_NOISE_STRENGTH
    return session.apply_noise_reduction(int(strength))


# Global singleton registry
_default_registry: Optional[OperationRegistry] = None


def get_default_registry() -> OperationRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in operations.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = OperationRegistry()
        register_default_operations(_default_registry)

    return _default_registry


def register_default_operations(registry: OperationRegistry) -> None:
    registry.register(Operation(
        "Remove Background", run_remove_background, FEATURE_BACKGROUND,
        "Make brush-marked pixels transparent",
    ))
    registry.register(Operation(
        "Crop", run_crop, FEATURE_CROP,
        "Extract the crop rectangle from the original",
    ))
    registry.register(Operation(
        "Filters", run_filters, FEATURE_FILTERS,
        "Apply grayscale, sepia, invert, blur, brightness, contrast and saturate",
    ))
    registry.register(Operation(
        "Noise Reduction", run_noise_reduction, FEATURE_NOISE,
        "Strength-weighted box-blur denoise",
    ))
    logger.info("Registered default operations")
