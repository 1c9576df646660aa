import dataclasses

import pytest

from sar_oilspill.cste import StrategyInfo
from sar_oilspill.exceptions import InvalidParameterError
from sar_oilspill.parameters import (
    STRATEGY_PARAMETERS,
    KMeansParams,
    LandSeaParams,
    ManualParams,
    build_land_sea_parameters,
    build_parameters,
    resolve_strategy_id,
)


@pytest.mark.parametrize("strategy_id", sorted(STRATEGY_PARAMETERS))
def test_defaults_are_valid(strategy_id):
    params = build_parameters(strategy_id)
    assert isinstance(params, STRATEGY_PARAMETERS[strategy_id])


def test_land_sea_defaults_are_valid():
    params = build_land_sea_parameters()
    assert params.method == "automatic"


def test_resolve_strategy_by_name_and_id():
    assert resolve_strategy_id("kmeans") == StrategyInfo.KMEANS
    assert resolve_strategy_id("Local_Adaptive") == StrategyInfo.LOCAL_ADAPTIVE
    assert resolve_strategy_id(StrategyInfo.FUZZY) == StrategyInfo.FUZZY
    with pytest.raises(InvalidParameterError):
        resolve_strategy_id("otsu")
    with pytest.raises(InvalidParameterError):
        resolve_strategy_id(6)


@pytest.mark.parametrize("strategy, overrides", [
    ("automatic", {"median_filter": 4}),
    ("automatic", {"median_filter": 1}),
    ("automatic", {"min_area": 0}),
    ("automatic", {"sensitivity": 0.0}),
    ("manual", {"threshold_offset": 1.0}),
    ("manual", {"threshold_offset": -1.0}),
    ("local_adaptive", {"noise_filter": 6}),
    ("local_adaptive", {"sharp_threshold": 1.2}),
    ("superpixel", {"num_superpixels": 100}),
    ("superpixel", {"min_distance": 0}),
    ("fuzzy", {"edge_threshold": 0.0}),
    ("kmeans", {"num_clusters": 1}),
    ("kmeans", {"num_blobs": 0}),
])
def test_out_of_range_values_are_rejected(strategy, overrides):
    with pytest.raises(InvalidParameterError):
        build_parameters(strategy, overrides)


def test_unknown_parameter_name_is_rejected():
    with pytest.raises(InvalidParameterError, match="num_cluster"):
        build_parameters("kmeans", {"num_cluster": 3})


def test_overrides_replace_defaults():
    params = build_parameters("kmeans", {"num_clusters": 3, "use_texture": True})
    assert params == KMeansParams(num_clusters=3, use_texture=True)


def test_records_are_immutable():
    params = ManualParams()
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.min_area = 10


def test_refinement_kwargs_carry_strategy_specific_filters():
    assert build_parameters("superpixel").refinement_kwargs() == {"min_area": 45, "max_distance": 450.0}
    assert KMeansParams(num_blobs=2).refinement_kwargs() == {"min_area": 45, "max_blobs": 2}
    assert ManualParams(min_area=10).refinement_kwargs() == {"min_area": 10}


def test_land_sea_method_is_checked():
    with pytest.raises(InvalidParameterError):
        build_land_sea_parameters({"method": "superpixel"})
    with pytest.raises(InvalidParameterError):
        LandSeaParams(land_threshold=0.0).validate()


def test_invalid_parameter_error_is_a_value_error():
    assert issubclass(InvalidParameterError, ValueError)


@pytest.mark.parametrize("strategy, overrides", [
    ("superpixel", {"min_distance": float("nan")}),
    ("superpixel", {"min_distance": float("inf")}),
    ("automatic", {"sensitivity": float("nan")}),
    ("manual", {"threshold_offset": float("nan")}),
    ("fuzzy", {"low_sigma": float("nan")}),
])
def test_non_finite_values_are_rejected(strategy, overrides):
    with pytest.raises(InvalidParameterError):
        build_parameters(strategy, overrides)


@pytest.mark.parametrize("strategy, overrides", [
    ("automatic", {"min_area": "abc"}),
    ("manual", {"threshold_offset": "abc"}),
    ("local_adaptive", {"noise_filter": "5"}),
    ("superpixel", {"min_distance": None}),
    ("kmeans", {"num_clusters": True}),
    ("kmeans", {"use_texture": "yes"}),
])
def test_non_numeric_values_are_rejected(strategy, overrides):
    with pytest.raises(InvalidParameterError):
        build_parameters(strategy, overrides)


def test_land_sea_non_numeric_threshold_is_rejected():
    with pytest.raises(InvalidParameterError):
        build_land_sea_parameters({"land_threshold": "high"})
