"""Точка входа в приложение.

    python -m repeaty.main image.png                 # окно с загруженным файлом
    python -m repeaty.main image.png --no-gui -x 2   # без окна, сразу в файл
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from repeaty.config import load_config
from repeaty.logging_setup import setup_logging
from repeaty.services.repeat_service import RepeatService


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tile a PNG into a larger seamless pattern.")
    parser.add_argument("image", nargs="?", type=Path, help="Source PNG image.")
    parser.add_argument("-x", "--repeat-x", type=float, help="Repeat count along X.")
    parser.add_argument("-y", "--repeat-y", type=float, help="Repeat count along Y.")
    parser.add_argument("--dim-x", type=float, help="Output width in mm (overrides --repeat-x).")
    parser.add_argument("--dim-y", type=float, help="Output height in mm (overrides --repeat-y).")
    parser.add_argument("-o", "--output-dir", type=Path, help="Output directory (default: program directory).")
    parser.add_argument("-c", "--config", type=Path, help="Path to repeaty.toml.")
    parser.add_argument("--no-gui", action="store_true", help="Process the image without opening a window.")
    return parser.parse_args(argv)


def run_headless(service: RepeatService, args: argparse.Namespace, logger: logging.Logger) -> int:
    outcome = service.run(
        args.image,
        repeat_x=args.repeat_x,
        repeat_y=args.repeat_y,
        dim_mm_x=args.dim_x,
        dim_mm_y=args.dim_y,
        output_dir=args.output_dir,
    )
    if outcome.ok:
        logger.info("%s", outcome.message)
        return 0
    return 1


def run_gui(service: RepeatService, args: argparse.Namespace, logger: logging.Logger) -> bool:
    """Returns False if no window could be created."""
    try:
        import tkinter

        from repeaty.app import RepeatyApp
    except ImportError as exc:
        logger.error("GUI is unavailable: %s", exc)
        return False

    try:
        app = RepeatyApp(service, output_dir=args.output_dir)
    except tkinter.TclError as exc:
        logger.error("Cannot open a window: %s", exc)
        return False
    if args.image is not None:
        app.open_image(args.image)
    app.mainloop()
    return True


def main(argv: Optional[list[str]] = None) -> int:
    """Создаёт главное окно или обрабатывает файл без интерфейса."""
    args = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 2

    logger = setup_logging(config.logging)
    service = RepeatService(config)

    if args.no_gui:
        if args.image is None:
            logger.error("--no-gui requires an image path")
            return 2
        return run_headless(service, args, logger)

    if run_gui(service, args, logger):
        return 0
    return run_headless(service, args, logger) if args.image is not None else 2


if __name__ == "__main__":
    sys.exit(main())
