"""
K-Means clustering strategy.

Strategy:
- Median despeckle
- Cluster pixels by intensity (optionally with local mean/std texture)
- The cluster with the lowest intensity centroid is oil
- For land + sea scenes the cluster with the highest centroid is land

The number of blobs kept (num_blobs) is enforced during refinement.
"""

import numpy as np
from sklearn.cluster import MiniBatchKMeans
from typing import Optional, Tuple

from sar_oilspill.cste import GeneralConfig, ProcessingConfig
from sar_oilspill.general_processing import compute_local_statistics, median_despeckle
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import KMeansParams

log = get_logger(__name__)


def _pixel_features(img: np.ndarray, use_texture: bool, window_size: int) -> np.ndarray:
    """(H*W, F) feature matrix: intensity, plus local mean and std if requested."""
    if not use_texture:
        return img.reshape(-1, 1)

    local_mean, local_variance = compute_local_statistics(img, window_size)
    return np.stack(
        [img.ravel(), local_mean.ravel(), np.sqrt(local_variance).ravel()],
        axis=1
    )


def cluster_intensities(
    img: np.ndarray,
    num_clusters: int,
    use_texture: bool = False,
    window_size: int = 3
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Cluster pixels and rank clusters from darkest to brightest.

    The cluster count is reduced to the number of distinct intensities when
    the image has fewer levels than requested clusters.

    Args:
        img: Grayscale image in [0, 1]
        num_clusters: Requested number of clusters
        use_texture: Add local mean and std features
        window_size: Window for the texture features

    Returns:
        (rank_map, centroids)
        - rank_map: (H, W) int array, 0 = darkest cluster, or -1 everywhere
          when the image has a single intensity
        - centroids: intensity centroid of each rank, ascending
    """
    distinct = np.unique(img).size
    if distinct < 2:
        log.warning("Image has a single intensity, nothing to cluster")
        return np.full(img.shape, -1, dtype=np.int64), np.array([])

    n_clusters = min(num_clusters, distinct)
    if n_clusters < num_clusters:
        log.warning(f"Only {distinct} distinct intensities, using {n_clusters} clusters")

    features = _pixel_features(img, use_texture, window_size)
    model = MiniBatchKMeans(
        n_clusters=n_clusters,
        batch_size=ProcessingConfig.KMEANS_BATCH_SIZE,
        n_init=ProcessingConfig.KMEANS_N_INIT,
        random_state=GeneralConfig.RANDOM_SEED
    )
    labels = model.fit_predict(features)

    #! Rank on the intensity column; stable sort keeps the lowest cluster index on ties
    intensity_centroids = model.cluster_centers_[:, 0]
    order = np.argsort(intensity_centroids, kind="stable")
    ranks = np.empty_like(order)
    ranks[order] = np.arange(order.size)

    log.info(f"K-Means centroids: {np.round(intensity_centroids[order], 4).tolist()}")

    return ranks[labels].reshape(img.shape), intensity_centroids[order]


def kmeans_land_and_oil(
    image: np.ndarray,
    filter_size: int,
    num_clusters: int,
    use_texture: bool = False,
    land_threshold: Optional[float] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Darkest and brightest clusters of a despeckled image.

    Args:
        image: Grayscale image in [0, 1]
        filter_size: Median window size
        num_clusters: Requested number of clusters
        use_texture: Add local texture features
        land_threshold: If given, the brightest cluster only counts as land
                        when its centroid is above this intensity

    Returns:
        (oil_candidate, land_candidate) boolean masks
    """
    smoothed = median_despeckle(image, filter_size)
    rank_map, centroids = cluster_intensities(
        smoothed, num_clusters, use_texture=use_texture, window_size=filter_size
    )
    empty = np.zeros(image.shape, dtype=bool)
    if centroids.size == 0:
        return empty, empty.copy()

    land = rank_map == centroids.size - 1
    if land_threshold is not None and centroids[-1] <= land_threshold:
        land = empty

    return rank_map == 0, land


def process_kmeans(image: np.ndarray, params: KMeansParams) -> np.ndarray:
    """
    Generate the K-Means candidate mask.

    Args:
        image: Grayscale intensity image (H, W) in [0, 1]
        params: Validated K-Means parameters

    Returns:
        Boolean candidate mask (H, W), pixels of the darkest cluster
    """
    oil, _ = kmeans_land_and_oil(
        image, params.filter_size, params.num_clusters, use_texture=params.use_texture
    )
    return oil
