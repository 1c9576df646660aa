"""
Main segmentation pipeline for SAR oil spill detection.
"""

import numpy as np
from typing import Any, Mapping, Optional, Union

from sar_oilspill.cste import StrategyInfo
from sar_oilspill.exceptions import InvalidParameterError
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import (
    STRATEGY_PARAMETERS,
    ParameterSet,
    build_parameters,
    resolve_strategy_id,
)
from sar_oilspill.post_treatment import refine_candidate
from sar_oilspill.strategies import (
    process_automatic,
    process_fuzzy,
    process_kmeans,
    process_local_adaptive,
    process_manual,
    process_superpixel,
)

log = get_logger(__name__)


# Map strategy IDs to processing functions
STRATEGY_PROCESSORS = {
    StrategyInfo.MANUAL: process_manual,
    StrategyInfo.AUTOMATIC: process_automatic,
    StrategyInfo.LOCAL_ADAPTIVE: process_local_adaptive,
    StrategyInfo.SUPERPIXEL: process_superpixel,
    StrategyInfo.FUZZY: process_fuzzy,
    StrategyInfo.KMEANS: process_kmeans,
}


def validate_image(image: np.ndarray) -> None:
    """
    Check that an array is a 2D intensity image in [0, 1].

    Raises:
        TypeError: If image is not a numpy array
        ValueError: If image is not 2D, is empty or has values outside [0, 1]
    """
    if not isinstance(image, np.ndarray):
        raise TypeError("image must be numpy array")

    if image.ndim != 2:
        raise ValueError(f"image must have shape (H, W), got {image.shape}")

    if image.size == 0:
        raise ValueError("image is empty")

    if not np.isfinite(image).all() or image.min() < 0 or image.max() > 1:
        raise ValueError("image values must be finite and lie in [0, 1]")


def _resolve_parameters(
    strategy_id: int,
    parameters: Optional[Union[ParameterSet, Mapping[str, Any]]]
) -> ParameterSet:
    if parameters is None or isinstance(parameters, Mapping):
        return build_parameters(strategy_id, parameters)

    expected = STRATEGY_PARAMETERS[strategy_id]
    if not isinstance(parameters, expected):
        raise InvalidParameterError(
            f"Strategy {get_strategy_name(strategy_id)!r} expects "
            f"{expected.__name__}, got {type(parameters).__name__}"
        )
    parameters.validate()
    return parameters


def _run_processor(strategy_id: int, image: np.ndarray, params: ParameterSet) -> np.ndarray:
    candidate = STRATEGY_PROCESSORS[strategy_id](image, params)
    return np.asarray(candidate, dtype=bool)


def segment_candidate(
    strategy: Union[int, str],
    image: np.ndarray,
    parameters: Optional[Union[ParameterSet, Mapping[str, Any]]] = None
) -> np.ndarray:
    """
    Run a strategy without refinement and return its raw candidate mask.

    Args: see segment()

    Returns:
        Boolean candidate mask (H, W)
    """
    strategy_id = resolve_strategy_id(strategy)
    params = _resolve_parameters(strategy_id, parameters)
    validate_image(image)

    return _run_processor(strategy_id, image, params)


def segment(
    strategy: Union[int, str],
    image: np.ndarray,
    parameters: Optional[Union[ParameterSet, Mapping[str, Any]]] = None
) -> np.ndarray:
    """
    Segment dark (oil) regions of an intensity image with one strategy.

    The strategy produces a raw candidate mask which then goes through the
    shared refinement and blob filter. Each call is independent: nothing is
    cached between calls, so a tuning loop simply calls again with new
    parameters.

    Args:
        strategy: Strategy ID (see StrategyInfo) or name, e.g. "automatic"
        image: Grayscale intensity image
               - Shape: (H, W)
               - Value range: [0, 1]
        parameters: Parameter record of the strategy, a mapping of overrides
                    applied to the defaults, or None for the defaults

    Returns:
        Boolean mask (H, W), True on detected oil

    Raises:
        InvalidParameterError: Unknown strategy or invalid parameters
        TypeError / ValueError: Malformed image

    Example:
        >>> mask = segment("automatic", img, {"min_area": 50})
        >>> mask.shape == img.shape
        True
    """
    strategy_id = resolve_strategy_id(strategy)
    params = _resolve_parameters(strategy_id, parameters)
    validate_image(image)

    log.info(f"Running {StrategyInfo.STRATEGY_TITLES[strategy_id]} on image {image.shape}")

    candidate = _run_processor(strategy_id, image, params)
    mask = refine_candidate(candidate, **params.refinement_kwargs())

    log.info(f"{get_strategy_name(strategy_id)}: {int(mask.sum())} oil pixels detected")
    return mask


def get_strategy_name(strategy_id: int) -> str:
    """
    Get the strategy name.

    Args:
        strategy_id: Integer strategy ID

    Returns:
        Strategy name string
    """
    return StrategyInfo.STRATEGY_NAMES.get(strategy_id, f"Unknown({strategy_id})")
