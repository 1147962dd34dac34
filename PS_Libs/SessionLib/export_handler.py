"""
Export of processed rasters as PNG downloads.

Each feature has a fixed default download filename:

- background: transparent-bg-image.png
- crop: cropped-image.png
- filters: filtered-image.png
- noise: noise-reduced-image.png

Classes:
    ExportConfig: Where and how exports are written
    ExportHandler: Filename resolution, path validation and file I/O
"""

from dataclasses import asdict, dataclass
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PS_Libs.constants import DEFAULT_FILENAMES
from PS_Libs.ImageEditingLib.image_editing_ops import encode_png
from PS_Libs.ImageEditingLib.image_models import Raster

logger = logging.getLogger(__name__)


def default_filename(feature: str) -> str:
    """
    Return the download filename for a feature.

    Raises:
        ValueError: If the feature is unknown
    """
    try:
        return DEFAULT_FILENAMES[feature]
    except KeyError:
        raise ValueError(
            f"Unknown feature: {feature}. "
            f"Valid features: {', '.join(sorted(DEFAULT_FILENAMES))}"
        ) from None


@dataclass
class ExportConfig:
    """Configuration for writing exports to disk.

    Attributes:
        output_dir: Directory the files are written to
        overwrite: Replace existing files (default: False)
        create_directories: Create output_dir if missing (default: True)
        filename: Optional filename overriding the feature default
    """
    output_dir: str = "."
    overwrite: bool = False
    create_directories: bool = True
    filename: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


class ExportHandler:
    """Writes encoded rasters inside a fixed output directory."""

    def __init__(self, config: ExportConfig):
        self.config = config
        self._base_dir = Path(config.output_dir).resolve()

    def resolve_path(self, feature: str) -> Path:
        """
        Resolve the output path for a feature.

        Raises:
            ValueError: If the filename escapes the output directory
        """
        name = self.config.filename or default_filename(feature)
        path = Path(name)

        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"Path traversal detected in export filename: {name}")

        resolved = (self._base_dir / path).resolve()
        try:
            resolved.relative_to(self._base_dir)
        except ValueError:
            raise ValueError(
                f"Security: export filename '{name}' resolves to '{resolved}' "
                f"which is outside the output directory '{self._base_dir}'"
            )
        return resolved

    def save(self, raster: Raster, feature: str) -> Path:
        """
        Encode ``raster`` and write it for ``feature``.

        Returns:
            Path where the image was saved

        Raises:
            ValueError: If the file exists and overwrite=False
            EncodeError: If encoding fails (nothing is written)
            OSError: If the file cannot be written
        """
        output_file = self.resolve_path(feature)

        if self.config.create_directories:
            output_file.parent.mkdir(parents=True, exist_ok=True)

        if output_file.exists() and not self.config.overwrite:
            raise ValueError(
                f"Output file already exists: {output_file}. "
                f"Set overwrite=True to replace."
            )

        payload = encode_png(raster)
        output_file.write_bytes(payload)
        logger.info(f"Exported {feature} image to {output_file}")
        return output_file
