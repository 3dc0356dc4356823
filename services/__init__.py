"""
Service layer for the image pipeline
"""

from .image_pipeline import ImagePipeline

__all__ = ["ImagePipeline"]
