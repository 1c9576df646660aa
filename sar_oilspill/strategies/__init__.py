"""
Segmentation strategies for oil spill detection.

Each module implements one algorithm turning an intensity image into a raw
candidate mask (True = dark candidate region). Refinement and blob filtering
are applied afterwards by the pipeline, never by the strategies themselves.
"""

# ! TO ADD A NEW STRATEGY, IMPORT IT HERE !
# 1. create a file in this module named after the strategy (e.g., manual.py)
# 2. implement the process_<strategy>(image, params) function in that file
# 3. import the function here and add it to __all__
# 4. register it in cste.StrategyInfo, parameters.STRATEGY_PARAMETERS and
#    segmentation_pipeline.STRATEGY_PROCESSORS

from .manual import process_manual
from .automatic import process_automatic
from .local_adaptive import process_local_adaptive
from .superpixel import process_superpixel
from .fuzzy import process_fuzzy
from .kmeans import process_kmeans


__all__ = [
    'process_manual',
    'process_automatic',
    'process_local_adaptive',
    'process_superpixel',
    'process_fuzzy',
    'process_kmeans',
]
