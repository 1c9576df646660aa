"""
Constants and configuration for the SAR oil spill segmentation pipeline.
"""

from typing import Dict, List, Tuple

# ============================================================================
# GENERAL CONFIGURATION
# ============================================================================
class GeneralConfig:
    """General project configuration."""
    RANDOM_SEED: int = 42
    LOG_TO_FILE: bool = False  # Also write logs under GeneralPath.LOG_PATH


class GeneralPath:
    """General project paths."""
    LOG_PATH: str = r".logs/"
    OUTPUT_PATH: str = r"data/results/"


# ============================================================================
# GROUND TRUTH
# ============================================================================

class GroundTruthConfig:
    """Brightness thresholds used to decode labeled reference images."""
    OIL_THRESHOLD: float = 0.7   # Cyan oil annotation is the brightest class
    LAND_THRESHOLD: float = 0.35  # Green land annotation is mid-brightness


# ============================================================================
# STRATEGY DEFINITIONS
# ============================================================================

class StrategyInfo:
    """Segmentation strategy identifiers and metadata."""

    MANUAL: int = 0
    AUTOMATIC: int = 1
    LOCAL_ADAPTIVE: int = 2
    SUPERPIXEL: int = 3
    FUZZY: int = 4
    KMEANS: int = 5

    # Mapping from strategy ID to strategy name /!\
    STRATEGY_NAMES: Dict[int, str] = {
        0: "manual",
        1: "automatic",
        2: "local_adaptive",
        3: "superpixel",
        4: "fuzzy",
        5: "kmeans",
    }

    # Human-readable titles used in figures and reports
    STRATEGY_TITLES: Dict[int, str] = {
        0: "MANUAL THRESHOLDING",
        1: "AUTOMATIC THRESHOLDING",
        2: "LOCAL ADAPTIVE THRESHOLDING",
        3: "SUPERPIXEL + OTSU",
        4: "FUZZY LOGIC EDGE DETECTION",
        5: "K-MEANS CLUSTERING",
    }

    # Methods available for scenes with land
    LAND_SEA_METHODS: List[str] = ["automatic", "kmeans"]


# ============================================================================
# PROCESSING PARAMETERS
# ============================================================================

class ProcessingConfig:
    """Default parameters for image processing operations."""

    # Histogram
    HISTEQ_BINS: int = 50
    HISTOGRAM_LEVELS: int = 256

    # Local adaptive thresholding
    ADAPTIVE_SENSITIVITY: float = 0.5
    ADAPTIVE_SCALE: float = 0.2         # Threshold = local mean * (1 - scale * sensitivity)
    ADAPTIVE_BLOCK_FRACTION: int = 16   # Block side = 2 * floor(side / 16) + 1

    # Sharpening (land/sea boundary stabilisation)
    UNSHARP_RADIUS: float = 1.5
    UNSHARP_AMOUNT: float = 1.5
    UNSHARP_THRESHOLD: float = 0.5
    GAUSSIAN_FILTER_SIZE: int = 5

    # Morphological operations
    OPENING_RADIUS: int = 2   # Disk used to erase isolated pixels
    LAND_MORPH_RADIUS: int = 2  # Diamond used to clean the land mask
    CONNECTIVITY: int = 2     # 8-connectivity everywhere

    # Fuzzy edge inference
    FUZZY_LOW_SIGMA: float = 0.1
    FUZZY_MEDIUM_CENTER: float = 0.35
    FUZZY_MEDIUM_SIGMA: float = 0.1
    FUZZY_HIGH_SIGMA: float = 0.25
    FUZZY_EDGE_THRESHOLD: float = 0.5
    FUZZY_CLOSING_RADIUS: int = 2

    # K-Means
    KMEANS_N_INIT: int = 3
    KMEANS_BATCH_SIZE: int = 4096

    # Superpixels
    SLIC_COMPACTNESS: float = 0.1

    # Boundary F1 tolerance as a fraction of the image diagonal
    BF_TOLERANCE_RATIO: float = 0.0075


# ============================================================================
# EVALUATION / VISUALIZATION
# ============================================================================

class ConfusionClass:
    """Per-pixel confusion codes produced by the evaluation engine."""
    BACKGROUND: int = 0
    TRUE_POSITIVE: int = 1
    FALSE_POSITIVE: int = 2
    FALSE_NEGATIVE: int = 3

    CLASS_NAMES: Dict[int, str] = {
        0: "Background",
        1: "True positive",
        2: "False positive",
        3: "False negative",
    }


class OverlayColors:
    """RGB colors in [0, 1] for overlays."""
    OIL: Tuple[float, float, float] = (0.0, 1.0, 1.0)    # Cyan
    LAND: Tuple[float, float, float] = (0.0, 1.0, 0.0)   # Green
    ALPHA: float = 0.4

    # Confusion rendering, keyed by ConfusionClass code
    CONFUSION_COLORS: Dict[int, Tuple[float, float, float]] = {
        0: (0.0, 0.0, 0.0),   # Black
        1: (0.0, 1.0, 0.0),   # Green
        2: (1.0, 0.0, 0.0),   # Red
        3: (1.0, 0.0, 1.0),   # Magenta
    }
