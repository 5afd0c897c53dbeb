"""
Headless command line entry point.

Runs the startup pipeline, prints each progress event, then prints the
per-storm forecast error summary.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from data_ingestion.loaders import DatasetConfig
from data_ingestion.weather import WeatherConfig
from temporal_model.lstm import RegressorConfig
from trajectory_prediction.track_predictor import PredictorConfig
from validation.metrics import build_error_table, summarize_errors
from application.orchestrator import PipelineOrchestrator, Stage
from application.state import AppConfig, AppState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m application",
        description="Train the storm track model and report forecast errors."
    )
    parser.add_argument("--dataset", default=None,
                        help="Path or URL of a storm dataset (default: embedded dataset)")
    parser.add_argument("--epochs", type=int, default=RegressorConfig.epochs,
                        help="Training epochs")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for training and forecast perturbation")
    parser.add_argument("--device", default=RegressorConfig.preferred_device,
                        help="Preferred torch device")
    parser.add_argument("--no-weather", action="store_true",
                        help="Skip the Open-Meteo weather fetch")
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        dataset=DatasetConfig(source=args.dataset),
        predictor=PredictorConfig(random_seed=args.seed),
        regressor=RegressorConfig(
            epochs=args.epochs,
            preferred_device=args.device,
            random_seed=args.seed,
        ),
        weather=WeatherConfig(enabled=not args.no_weather),
    )


def print_report(state: AppState) -> None:
    for storm in state.storms:
        print(f"\n{storm.name} ({storm.basin}, {storm.date_range})")
        for source, s in summarize_errors(build_error_table(storm)).items():
            print(
                f"  {source:6s} mean {s.mean_error_km:7.1f} km  "
                f"max {s.max_error_km:7.1f} km  final {s.final_error_km:7.1f} km"
            )

    for outcome in state.weather_cards:
        r = outcome.report
        print(
            f"{r.icon.glyph} {outcome.city.name}: {r.rounded_temperature}°C, "
            f"{r.relative_humidity_pct:.0f}% RH, wind {r.wind_speed_kmh:.0f} km/h"
        )


async def run(config: AppConfig) -> int:
    state = AppState(config=config)
    async for event in PipelineOrchestrator(state).run():
        print(f"[{event.percent:3d}%] {event.message}")
        if event.stage is Stage.FAILED:
            return 1

    print_report(state)
    if state.predictor is not None:
        state.predictor.dispose()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(config_from_args(args)))


if __name__ == "__main__":
    sys.exit(main())
