"""
PS_Libs - Pixel Studio Library Modules

This package contains core functionality for the Pixel Studio project,
organized into specialized sub-packages:

- ImageEditingLib: Raster model and the pixel processing components
- SessionLib: Editing session state, operation registry and export
"""

__version__ = "0.1.0"
