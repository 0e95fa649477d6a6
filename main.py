"""Entry point for the Market Planner: summarize the stored layout."""

import argparse
import logging
from pathlib import Path

from market_planner.core.projection import pixels_to_meters
from market_planner.infrastructure.config_manager import list_profiles, load_config
from market_planner.schemas import PlannerConfig
from market_planner.state.planner import build_planner

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_dir: Path = Path("outputs")) -> None:
    """Send `market_planner` logs to the console and outputs/planner.log."""
    logger = logging.getLogger("market_planner")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        logger.handlers.clear()

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / "planner.log")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)


def summarize(config: PlannerConfig) -> None:
    """Print the stalls persisted for `config`.

    Sizes are reported in meters at the profile's start view.  The view
    the stalls were confirmed at is not stored, so the figures only match
    when the layout was drawn at that view.
    """
    planner, lifecycle = build_planner(config, session=None)
    try:
        stalls = planner.stalls
        view = planner.view.view
        print(f"--- Profile {config.name} ---")
        print(f"Store: {config.storage.directory}/{config.storage.key}")
        print(f"Start view: {view.center.lat:.6f}, {view.center.lng:.6f} @ zoom {view.zoom}")
        print(f"Stalls: {len(stalls)}")
        for i, stall in enumerate(stalls, start=1):
            w_m = pixels_to_meters(stall.width, view.center.lat, view.zoom)
            h_m = pixels_to_meters(stall.height, view.center.lat, view.zoom)
            print(
                f"  {i:>3}. ({stall.x:7.1f}, {stall.y:7.1f}) px  "
                f"{w_m:.2f} x {h_m:.2f} m at start view  rot {stall.rotation:.0f}"
            )
    finally:
        planner.detach()
        lifecycle.dispose()


def main(argv: list[str] | None = None) -> None:
    """Load the requested profile and summarize its layout."""
    parser = argparse.ArgumentParser(description="Summarize a stored market layout.")
    parser.add_argument("--profile", help="Profile file in profiles/ to use")
    parser.add_argument(
        "--list", action="store_true", help="List available profiles and exit"
    )
    args = parser.parse_args(argv)

    if args.list:
        profiles = list_profiles()
        print("\n".join(profiles) if profiles else "No profiles found.")
        return

    configure_logging()
    config = load_config(args.profile) if args.profile else PlannerConfig()
    summarize(config)


if __name__ == "__main__":
    main()
