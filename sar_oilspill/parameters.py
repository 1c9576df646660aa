"""
Parameter records for the segmentation strategies and the land/sea compositor.

Every record validates itself before a run. Invalid values raise
InvalidParameterError and are never clamped.
"""

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from sar_oilspill.cste import ProcessingConfig, StrategyInfo
from sar_oilspill.exceptions import InvalidParameterError


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _require_number(name: str, value: Any) -> None:
    # bool is a numbers.Real subclass
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be a finite number, got {value!r}")


def _require_odd_window(name: str, value: int) -> None:
    _require_number(name, value)
    if int(value) != value or not value >= 3 or value % 2 != 1:
        raise InvalidParameterError(f"{name} must be an odd integer >= 3, got {value}")


def _require_open_unit(name: str, value: float) -> None:
    _require_number(name, value)
    if not 0.0 < value < 1.0:
        raise InvalidParameterError(f"{name} must lie in (0, 1), got {value}")


def _require_positive(name: str, value: float) -> None:
    _require_number(name, value)
    if not value > 0:
        raise InvalidParameterError(f"{name} must be > 0, got {value}")


def _require_int_at_least(name: str, value: int, minimum: int) -> None:
    _require_number(name, value)
    if int(value) != value or not value >= minimum:
        raise InvalidParameterError(f"{name} must be an integer >= {minimum}, got {value}")


# ============================================================================
# STRATEGY PARAMETERS
# ============================================================================

@dataclass(frozen=True)
class ManualParams:
    """Manual thresholding: histogram peak plus a signed offset."""
    threshold_offset: float = -0.1
    min_area: int = 45
    median_filter: int = 3

    def validate(self) -> None:
        _require_number("threshold_offset", self.threshold_offset)
        if not -1.0 < self.threshold_offset < 1.0:
            raise InvalidParameterError(
                f"threshold_offset must lie in (-1, 1), got {self.threshold_offset}"
            )
        _require_int_at_least("min_area", self.min_area, 1)
        _require_odd_window("median_filter", self.median_filter)

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area}


@dataclass(frozen=True)
class AutomaticParams:
    """Automatic histogram thresholding with adaptive fallback."""
    min_area: int = 45
    median_filter: int = 3
    sensitivity: float = ProcessingConfig.ADAPTIVE_SENSITIVITY

    def validate(self) -> None:
        _require_int_at_least("min_area", self.min_area, 1)
        _require_odd_window("median_filter", self.median_filter)
        _require_open_unit("sensitivity", self.sensitivity)

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area}


@dataclass(frozen=True)
class LocalAdaptiveParams:
    """Wiener despeckle, unsharp mask, Gaussian blur, local threshold."""
    noise_filter: int = 5
    sharp_threshold: float = 0.5
    gaussian_filter: int = 5
    sensitivity: float = ProcessingConfig.ADAPTIVE_SENSITIVITY
    min_area: int = 45

    def validate(self) -> None:
        _require_odd_window("noise_filter", self.noise_filter)
        _require_open_unit("sharp_threshold", self.sharp_threshold)
        _require_odd_window("gaussian_filter", self.gaussian_filter)
        _require_open_unit("sensitivity", self.sensitivity)
        _require_int_at_least("min_area", self.min_area, 1)

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area}


@dataclass(frozen=True)
class SuperpixelParams:
    """SLIC superpixels, Otsu on superpixel means, distance-filtered merge."""
    num_superpixels: int = 25000
    min_distance: float = 450.0
    compactness: float = ProcessingConfig.SLIC_COMPACTNESS
    median_filter: int = 3
    min_area: int = 45

    def validate(self) -> None:
        _require_int_at_least("num_superpixels", self.num_superpixels, 500)
        _require_positive("min_distance", self.min_distance)
        _require_positive("compactness", self.compactness)
        _require_odd_window("median_filter", self.median_filter)
        _require_int_at_least("min_area", self.min_area, 1)

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area, "max_distance": self.min_distance}


@dataclass(frozen=True)
class FuzzyParams:
    """Lee despeckle and fuzzy gradient inference."""
    filter_size: int = 5
    low_sigma: float = ProcessingConfig.FUZZY_LOW_SIGMA
    medium_center: float = ProcessingConfig.FUZZY_MEDIUM_CENTER
    medium_sigma: float = ProcessingConfig.FUZZY_MEDIUM_SIGMA
    high_sigma: float = ProcessingConfig.FUZZY_HIGH_SIGMA
    edge_threshold: float = ProcessingConfig.FUZZY_EDGE_THRESHOLD
    closing_radius: int = ProcessingConfig.FUZZY_CLOSING_RADIUS
    min_area: int = 45

    def validate(self) -> None:
        _require_odd_window("filter_size", self.filter_size)
        _require_positive("low_sigma", self.low_sigma)
        _require_open_unit("medium_center", self.medium_center)
        _require_positive("medium_sigma", self.medium_sigma)
        _require_positive("high_sigma", self.high_sigma)
        _require_open_unit("edge_threshold", self.edge_threshold)
        _require_int_at_least("closing_radius", self.closing_radius, 1)
        _require_int_at_least("min_area", self.min_area, 1)

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area}


@dataclass(frozen=True)
class KMeansParams:
    """K-Means clustering of pixel intensities (optionally with texture)."""
    filter_size: int = 3
    num_clusters: int = 5
    num_blobs: int = 1
    use_texture: bool = False
    min_area: int = 45

    def validate(self) -> None:
        _require_odd_window("filter_size", self.filter_size)
        _require_int_at_least("num_clusters", self.num_clusters, 2)
        _require_int_at_least("num_blobs", self.num_blobs, 1)
        _require_int_at_least("min_area", self.min_area, 1)
        if not isinstance(self.use_texture, bool):
            raise InvalidParameterError(f"use_texture must be True or False, got {self.use_texture!r}")

    def refinement_kwargs(self) -> Dict[str, Any]:
        return {"min_area": self.min_area, "max_blobs": self.num_blobs}


@dataclass(frozen=True)
class LandSeaParams:
    """Land/sea compositor knobs."""
    min_area: int = 45
    land_threshold: float = 0.5
    median_filter: int = 3
    method: str = "automatic"
    sensitivity: float = ProcessingConfig.ADAPTIVE_SENSITIVITY
    num_clusters: int = 5
    num_blobs: int = 1

    def validate(self) -> None:
        _require_int_at_least("min_area", self.min_area, 1)
        _require_open_unit("land_threshold", self.land_threshold)
        _require_odd_window("median_filter", self.median_filter)
        _require_open_unit("sensitivity", self.sensitivity)
        _require_int_at_least("num_clusters", self.num_clusters, 2)
        _require_int_at_least("num_blobs", self.num_blobs, 1)
        if self.method not in StrategyInfo.LAND_SEA_METHODS:
            raise InvalidParameterError(
                f"method must be one of {StrategyInfo.LAND_SEA_METHODS}, got {self.method!r}"
            )


ParameterSet = Union[
    ManualParams,
    AutomaticParams,
    LocalAdaptiveParams,
    SuperpixelParams,
    FuzzyParams,
    KMeansParams,
]

# Map strategy IDs to their parameter record
STRATEGY_PARAMETERS = {
    StrategyInfo.MANUAL: ManualParams,
    StrategyInfo.AUTOMATIC: AutomaticParams,
    StrategyInfo.LOCAL_ADAPTIVE: LocalAdaptiveParams,
    StrategyInfo.SUPERPIXEL: SuperpixelParams,
    StrategyInfo.FUZZY: FuzzyParams,
    StrategyInfo.KMEANS: KMeansParams,
}


def resolve_strategy_id(strategy: Union[int, str]) -> int:
    """
    Turn a strategy ID or name into a validated strategy ID.

    Raises:
        InvalidParameterError: If the strategy is unknown
    """
    if isinstance(strategy, str):
        for strategy_id, name in StrategyInfo.STRATEGY_NAMES.items():
            if name == strategy.lower():
                return strategy_id
        raise InvalidParameterError(
            f"Unknown strategy {strategy!r}. "
            f"Valid names are: {sorted(StrategyInfo.STRATEGY_NAMES.values())}"
        )
    if strategy not in StrategyInfo.STRATEGY_NAMES:
        raise InvalidParameterError(
            f"Unknown strategy ID {strategy}. "
            f"Valid IDs are: {sorted(StrategyInfo.STRATEGY_NAMES)}"
        )
    return strategy


def _build_record(record_cls, overrides: Optional[Mapping[str, Any]]):
    overrides = dict(overrides or {})
    known = {field.name for field in dataclasses.fields(record_cls)}
    unknown = set(overrides) - known
    if unknown:
        raise InvalidParameterError(
            f"Unknown parameters for {record_cls.__name__}: {sorted(unknown)}. "
            f"Valid names are: {sorted(known)}"
        )
    record = record_cls(**overrides)
    record.validate()
    return record


def build_parameters(
    strategy: Union[int, str],
    overrides: Optional[Mapping[str, Any]] = None
) -> ParameterSet:
    """
    Build and validate the parameter record of a strategy.

    Args:
        strategy: Strategy ID (see StrategyInfo) or strategy name
        overrides: Field values replacing the defaults

    Returns:
        Validated, immutable parameter record

    Raises:
        InvalidParameterError: On unknown strategy, unknown field or bad value

    Example:
        >>> params = build_parameters("kmeans", {"num_clusters": 3})
        >>> params.num_clusters
        3
    """
    strategy_id = resolve_strategy_id(strategy)
    return _build_record(STRATEGY_PARAMETERS[strategy_id], overrides)


def build_land_sea_parameters(overrides: Optional[Mapping[str, Any]] = None) -> LandSeaParams:
    """Build and validate the land/sea compositor record."""
    return _build_record(LandSeaParams, overrides)
