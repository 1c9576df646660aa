"""
Oil spill segmentation of single-channel SAR intensity images.

Public entry points:
    segment(strategy, image, parameters)  -> binary oil mask
    composite_land_sea(image, parameters) -> (land_mask, oil_mask, combined_mask)
    evaluate(mask, ground_truth)          -> EvaluationResult
"""

from .evaluation import EvaluationResult, evaluate
from .exceptions import InvalidParameterError, ShapeMismatchError
from .ground_truth import GroundTruth, build_ground_truth
from .land_sea import LandSeaResult, composite_land_sea
from .parameters import build_land_sea_parameters, build_parameters
from .segmentation_pipeline import segment

__version__ = "0.1.0"

__all__ = [
    'segment',
    'composite_land_sea',
    'evaluate',
    'build_parameters',
    'build_land_sea_parameters',
    'build_ground_truth',
    'EvaluationResult',
    'GroundTruth',
    'LandSeaResult',
    'InvalidParameterError',
    'ShapeMismatchError',
]
