"""
SessionLib - Editing session management for Pixel Studio

This package holds the explicit editing-session state object, the named
operation registry used by orchestrators, and PNG export handling.
"""

from PS_Libs.SessionLib.editing_session import EditingSession
from PS_Libs.SessionLib.export_handler import (
    ExportConfig,
    ExportHandler,
    default_filename,
)
from PS_Libs.SessionLib.operation_registry import (
    Operation,
    OperationRegistry,
    get_default_registry,
    register_default_operations,
)

__all__ = [
    "EditingSession",
    "ExportConfig",
    "ExportHandler",
    "default_filename",
    "Operation",
    "OperationRegistry",
    "get_default_registry",
    "register_default_operations",
]
