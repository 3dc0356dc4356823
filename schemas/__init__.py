"""
Schemas Package

This package contains the Pydantic schemas used for validating operation
parameters and describing image state.
"""

from .image import BoundingBox, CropRegion, Dimensions, FileInfo

__all__ = [
    "BoundingBox",
    "CropRegion",
    "Dimensions",
    "FileInfo",
]
