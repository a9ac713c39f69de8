"""Command line interface: render a preset scene to an image file.

Usage:
    sdfpath SCENE [options]
    python -m sdfpath SCENE [options]

Options:
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --seed SEED         Seed of the per-row random streams (default: 0)
    --output OUTPUT     Output file path (default: <scene>.ppm; .png for PNG)
    --batch-size SIZE   Samples per progress update (default: 10)
    --no-jitter         Sample pixel centers only
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --threads N         Maximum CPU worker threads
    --show              Display the result in a Matplotlib window
    --quiet             Suppress progress output
    --list              List the available scenes and exit

Example:
    sdfpath mandelbulb --width 400 --height 300 --samples 32
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from sdfpath.core.renderer import (
    DEFAULT_HEIGHT,
    DEFAULT_SAMPLES_PER_PIXEL,
    DEFAULT_WIDTH,
    FrameRenderer,
    RenderSettings,
)
from sdfpath.preview.export import save_image
from sdfpath.scene.presets import SCENE_ALIASES, SCENES, available_scenes, get_scene

logger = logging.getLogger(__name__)

# Exit status for bad arguments (unknown scene, invalid sizes)
EXIT_USAGE = 2

# Exit status when the image could not be written
EXIT_IO_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sdfpath",
        description="Render a signed distance field scene with Monte Carlo path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        help=f"Scene to render ({', '.join(available_scenes())})",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SAMPLES_PER_PIXEL,
        help=f"Number of samples per pixel (default: {DEFAULT_SAMPLES_PER_PIXEL})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the per-row random streams (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: <scene>.ppm; a .png suffix writes PNG)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--no-jitter",
        action="store_true",
        help="Sample pixel centers only",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Maximum number of CPU worker threads (default: all cores)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available scenes and exit",
    )
    return parser


def init_taichi(arch: str = "cpu", threads: int | None = None, quiet: bool = False) -> None:
    """Initialize the Taichi runtime for rendering."""
    kwargs = {}
    if threads is not None:
        kwargs["cpu_max_num_threads"] = threads
    ti.init(
        arch=ti.gpu if arch == "gpu" else ti.cpu,
        log_level=ti.WARN if quiet else ti.INFO,
        **kwargs,
    )


def render_scene(
    scene_name: str,
    settings: RenderSettings,
    output_path: Path,
    quiet: bool = False,
):
    """Render a preset scene and save it.

    Args:
        scene_name: Name of the preset scene.
        settings: Image size, sample count, seed and batching.
        output_path: Destination file; the suffix selects the format.
        quiet: If True, suppress progress output.

    Returns:
        The rendered image (linear radiance), shape (height, width, 3).

    Raises:
        ValueError: If the scene name is unknown.
        OSError: If the image cannot be written.
    """
    scene = get_scene(scene_name, settings.aspect_ratio)
    renderer = FrameRenderer(
        scene, settings.width, settings.height, seed=settings.seed, jitter=settings.jitter
    )

    if not quiet:
        print(
            f"Rendering {scene_name} ({settings.width}x{settings.height}, "
            f"{settings.samples_per_pixel} samples per pixel)..."
        )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=settings.samples_per_pixel,
        batch_size=settings.batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    image = renderer.image()
    save_image(image, output_path)
    return image


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for name in available_scenes():
            print(name)
        return 0

    if args.scene is None:
        parser.print_usage(sys.stderr)
        logger.error("No scene given. Available scenes: %s", ", ".join(available_scenes()))
        return EXIT_USAGE

    if args.scene not in SCENES and args.scene not in SCENE_ALIASES:
        logger.error(
            'Scene "%s" not found. Available scenes: %s',
            args.scene,
            ", ".join(available_scenes()),
        )
        return EXIT_USAGE

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            seed=args.seed,
            jitter=not args.no_jitter,
            batch_size=args.batch_size,
        )
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_USAGE

    output_path = Path(args.output) if args.output else Path(f"{args.scene}.ppm")

    init_taichi(args.arch, args.threads, args.quiet)

    start_time = time.time()
    try:
        image = render_scene(args.scene, settings, output_path, quiet=args.quiet)
    except OSError as e:
        logger.error("Could not write %s: %s", output_path, e)
        return EXIT_IO_ERROR
    finally:
        print(f"Rendering time: {time.time() - start_time:.1f} s")

    if args.show:
        from sdfpath.preview.display import show_preview

        show_preview(image, title=f"{args.scene} - {settings.samples_per_pixel} SPP")

    return 0


if __name__ == "__main__":
    sys.exit(main())
