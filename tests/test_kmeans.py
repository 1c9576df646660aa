import numpy as np
import pytest

from sar_oilspill.strategies.kmeans import cluster_intensities, kmeans_land_and_oil


@pytest.fixture
def two_dark_levels():
    """Bright sea (0.9) with a darker (0.1) and a lighter (0.15) dark patch."""
    image = np.full((60, 60), 0.9)
    image[5:20, 5:20] = 0.1
    image[35:50, 35:50] = 0.15
    return image


def test_darkest_cluster_gets_rank_zero(two_dark_levels):
    rank_map, centroids = cluster_intensities(two_dark_levels, num_clusters=3)

    assert (rank_map[5:20, 5:20] == 0).all()
    assert (rank_map[35:50, 35:50] == 1).all()
    assert (rank_map[two_dark_levels == 0.9] == 2).all()
    np.testing.assert_allclose(centroids, [0.1, 0.15, 0.9], atol=1e-6)
    assert np.all(np.diff(centroids) > 0)


def test_cluster_count_is_capped_by_distinct_intensities(two_dark_levels):
    rank_map, centroids = cluster_intensities(two_dark_levels, num_clusters=5)
    assert centroids.size == 3
    assert set(np.unique(rank_map)) == {0, 1, 2}


def test_single_intensity_has_no_clusters():
    rank_map, centroids = cluster_intensities(np.full((10, 10), 0.4), num_clusters=3)
    assert centroids.size == 0
    assert (rank_map == -1).all()


def test_oil_is_darkest_and_land_is_brightest(two_dark_levels):
    oil, land = kmeans_land_and_oil(two_dark_levels, filter_size=3, num_clusters=3)

    assert oil[6:19, 6:19].all()
    assert not oil[35:50, 35:50].any()
    assert land[25:30, :].all()
    assert not land[5:20, 5:20].any()


def test_land_threshold_discards_dim_brightest_cluster(two_dark_levels):
    _, land = kmeans_land_and_oil(
        two_dark_levels, filter_size=3, num_clusters=3, land_threshold=0.95
    )
    assert not land.any()

    _, land = kmeans_land_and_oil(
        two_dark_levels, filter_size=3, num_clusters=3, land_threshold=0.5
    )
    assert land.any()
