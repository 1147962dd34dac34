"""
Tests for the export handler.

Tests cover:
- Default filenames per feature
- Configuration round trip
- Overwrite protection
- Path traversal rejection
- Encode failures leave no file behind
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PS_Libs.ImageEditingLib.errors import EncodeError
from PS_Libs.ImageEditingLib.image_editing_ops import load_raster
from PS_Libs.ImageEditingLib.image_models import Raster
from PS_Libs.SessionLib.export_handler import (
    ExportConfig,
    ExportHandler,
    default_filename,
)


class TestDefaultFilename(unittest.TestCase):

    def test_known_features(self):
        self.assertEqual(default_filename("background"), "transparent-bg-image.png")
        self.assertEqual(default_filename("crop"), "cropped-image.png")
        self.assertEqual(default_filename("filters"), "filtered-image.png")
        self.assertEqual(default_filename("noise"), "noise-reduced-image.png")

    def test_unknown_feature(self):
        with self.assertRaises(ValueError):
            default_filename("sharpen")


class TestExportConfig(unittest.TestCase):

    def test_defaults(self):
        config = ExportConfig()
        self.assertEqual(config.output_dir, ".")
        self.assertFalse(config.overwrite)
        self.assertTrue(config.create_directories)
        self.assertIsNone(config.filename)

    def test_dict_round_trip_ignores_unknown(self):
        data = ExportConfig(output_dir="out", overwrite=True).to_dict()
        data["quality"] = 90
        config = ExportConfig.from_dict(data)
        self.assertEqual(config.output_dir, "out")
        self.assertTrue(config.overwrite)


class TestExportHandler(unittest.TestCase):
    """Test writing exports to disk."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.temp_dir.name)
        self.raster = Raster.blank(4, 4, (10, 20, 30, 0))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_uses_default_filename(self):
        handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir)))

        path = handler.save(self.raster, "noise")

        self.assertEqual(path.name, "noise-reduced-image.png")
        self.assertTrue(path.exists())
        self.assertEqual(load_raster(path), self.raster)

    def test_creates_directories(self):
        nested = self.output_dir / "a" / "b"
        handler = ExportHandler(ExportConfig(output_dir=str(nested)))

        path = handler.save(self.raster, "crop")

        self.assertTrue(path.exists())

    def test_custom_filename(self):
        handler = ExportHandler(ExportConfig(
            output_dir=str(self.output_dir), filename="custom.png"))
        self.assertEqual(handler.save(self.raster, "crop").name, "custom.png")

    def test_overwrite_protection(self):
        handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir)))
        handler.save(self.raster, "crop")

        with self.assertRaises(ValueError):
            handler.save(self.raster, "crop")

    def test_overwrite_allowed(self):
        handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir), overwrite=True))
        handler.save(self.raster, "crop")

        other = Raster.blank(2, 2, (5, 5, 5, 5))
        path = handler.save(other, "crop")

        self.assertEqual(load_raster(path), other)

    def test_path_traversal_rejected(self):
        for name in ("../escape.png", "sub/../../escape.png", str(self.output_dir / "abs.png")):
            handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir), filename=name))
            with self.assertRaises(ValueError):
                handler.resolve_path("crop")

    def test_unknown_feature(self):
        handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir)))
        with self.assertRaises(ValueError):
            handler.save(self.raster, "sharpen")

    def test_encode_failure_writes_nothing(self):
        handler = ExportHandler(ExportConfig(output_dir=str(self.output_dir)))

        with patch.object(Raster, "to_image", side_effect=RuntimeError("encoder broke")):
            with self.assertRaises(EncodeError):
                handler.save(self.raster, "filters")

        self.assertFalse((self.output_dir / "filtered-image.png").exists())


if __name__ == "__main__":
    unittest.main()
