#!/usr/bin/env python3
"""
PhonoField - Phonetic wave field viewer

Renders synthetic vowel/trill/fricative/plosive waves radiating from a
mouth point across a wedge-shaped field.
"""

import argparse
import cProfile
import sys

from config import FieldStrategy
from config_persistence import load_config
from logging_utils import log_event


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run PhonoField")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in FieldStrategy],
        default=None,
        help="Wave model (default: value from config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for fricative noise",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable cProfile and save stats to --profile-out",
    )
    parser.add_argument(
        "--profile-out",
        default="profile.prof",
        help="Path to save cProfile stats (default: profile.prof)",
    )
    return parser


def run_app(app_argv: list[str], args: argparse.Namespace) -> int:
    from PyQt6.QtWidgets import QApplication
    from viewer import FieldWindow

    config = load_config()
    if args.strategy is not None:
        config.engine.strategy = FieldStrategy(args.strategy)
    if args.seed is not None:
        config.synth.seed = args.seed

    app = QApplication(app_argv)
    app.setStyle("Fusion")

    window = FieldWindow(config)
    window.show()
    log_event("INFO", "Startup", "Viewer ready", strategy=config.engine.strategy.value)
    return app.exec()


def main() -> None:
    args = build_parser().parse_args()

    # Keep Qt argument list clean; avoid passing our flags downstream
    app_argv = [sys.argv[0]]

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        exit_code = run_app(app_argv, args)
        profiler.disable()
        profiler.dump_stats(args.profile_out)
    else:
        exit_code = run_app(app_argv, args)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
