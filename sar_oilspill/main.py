"""
Single-image driver: segment one SAR image and score it against its label.

Usage:
    python -m sar_oilspill.main --image scene.jpg --label scene.png --strategy automatic
    python -m sar_oilspill.main --image coast.jpg --label coast.png --land-sea \
        --param land_threshold=0.6 --output-dir data/results/
"""

import argparse
import ast
import json
import os
import time
from typing import Any, Dict, List, Optional, Sequence

import matplotlib.pyplot as plt

from sar_oilspill.cste import GeneralPath, StrategyInfo
from sar_oilspill.evaluation import evaluate, log_evaluation_summary
from sar_oilspill.exceptions import InvalidParameterError
from sar_oilspill.general_processing import to_grayscale
from sar_oilspill.ground_truth import build_ground_truth
from sar_oilspill.io_utils import get_filename_noext, load_image, save_mask, save_rgb
from sar_oilspill.land_sea import composite_land_sea
from sar_oilspill.logger import get_logger
from sar_oilspill.parameters import (
    build_land_sea_parameters,
    build_parameters,
    resolve_strategy_id,
)
from sar_oilspill.segmentation_pipeline import segment
from sar_oilspill.strategies.manual import manual_threshold_value
from sar_oilspill.visualization import land_sea_overlay, plot_segmentation_result

log = get_logger("main")


def parse_overrides(items: Optional[List[str]]) -> Dict[str, Any]:
    """
    Parse repeated `key=value` options into a parameter mapping.

    Values are read as Python literals (numbers, booleans); anything else is
    kept as a string.

    Raises:
        InvalidParameterError: If an item has no '='
    """
    overrides: Dict[str, Any] = {}
    for item in items or []:
        if "=" not in item:
            raise InvalidParameterError(f"Expected key=value, got {item!r}")
        key, raw = item.split("=", 1)
        try:
            value = ast.literal_eval(raw)
        except (ValueError, SyntaxError):
            value = raw
        overrides[key.strip()] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Oil spill segmentation of a single SAR image")
    parser.add_argument("--image", required=True, help="SAR image file")
    parser.add_argument("--label", required=True, help="Labeled reference image")
    parser.add_argument(
        "--strategy",
        default="automatic",
        choices=sorted(StrategyInfo.STRATEGY_NAMES.values()),
        help="Segmentation strategy for sea-only scenes"
    )
    parser.add_argument(
        "--land-sea",
        action="store_true",
        help="Scene contains land; use the land/sea compositor"
    )
    parser.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Override a strategy parameter (repeatable)"
    )
    parser.add_argument("--output-dir", default=None, help="Save mask, overlay, figure and report here")
    parser.add_argument("--show", action="store_true", help="Display the result figure")
    return parser


def run(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Execute one segmentation + evaluation run.

    Returns:
        Metrics dictionary (EvaluationResult.as_dict) plus the
        segmentation time in seconds
    """
    start_time = time.time()
    overrides = parse_overrides(args.param)

    image = to_grayscale(load_image(args.image))
    label = load_image(args.label)
    truth = build_ground_truth(label, with_land=args.land_sea)

    segmentation_start = time.time()
    if args.land_sea:
        params = build_land_sea_parameters(overrides)
        land_mask, oil_mask, mask = composite_land_sea(image, params)
        title = f"LAND + SEA ({params.method.upper()})"
        overlay = land_sea_overlay(image, land_mask, oil_mask)
    else:
        params = build_parameters(args.strategy, overrides)
        if resolve_strategy_id(args.strategy) == StrategyInfo.MANUAL:
            log.info(f"Histogram peak before offset: {manual_threshold_value(image, params):.4f}")
        mask = segment(args.strategy, image, params)
        title = StrategyInfo.STRATEGY_TITLES[resolve_strategy_id(args.strategy)]
        overlay = None
    segmentation_time = time.time() - segmentation_start

    log.info(f"Parameters: {params}")
    log.info(f"{title} completed in {segmentation_time:.2f} seconds")
    result = evaluate(mask, truth.mask)
    log_evaluation_summary(result, title)
    report = result.as_dict()
    report["segmentation_seconds"] = segmentation_time

    fig = plot_segmentation_result(image, mask, truth.mask, title, confusion=result.confusion)

    if args.output_dir:
        name = get_filename_noext(args.image)
        os.makedirs(args.output_dir, exist_ok=True)
        save_mask(mask, os.path.join(args.output_dir, f"{name}_mask.png"))
        if overlay is not None:
            save_rgb(overlay, os.path.join(args.output_dir, f"{name}_land_sea.png"))
        fig.savefig(os.path.join(args.output_dir, f"{name}_result.png"), dpi=150, bbox_inches="tight")
        with open(os.path.join(args.output_dir, f"{name}_metrics.json"), "w") as f:
            json.dump(report, f, indent=2)
        log.info(f"Results written to {args.output_dir}")

    if args.show:
        plt.show()
    plt.close(fig)

    log.info(f"Total processing time: {time.time() - start_time:.2f} seconds")
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.output_dir is None and not args.show:
        log.info(f"No --output-dir given; use e.g. {GeneralPath.OUTPUT_PATH} to keep the results")
    try:
        run(args)
    except InvalidParameterError as e:
        log.error(f"Invalid parameter: {e}")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
