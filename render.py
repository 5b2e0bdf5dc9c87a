import os
import sys
import time
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from mandelrender import (
    ConfigurationError,
    RenderParameters,
    Viewport,
    colorize,
    get_palette,
    parse_hex_color,
    render_frame,
    write_image,
)
from mandelrender.escape import check_tone_settings
from mandelrender.palette import DEFAULT_PALETTE

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


@dataclass(frozen=True)
class OutputConfig:
    image_path: Path
    image_format: str


@dataclass(frozen=True)
class ColorConfig:
    palette_name: str
    invert: bool
    inside_color: tuple[int, int, int]
    period: float | None
    gamma: float


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set to an image file.')

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the output image in pixels',
                        metavar='WIDTH', default=1000)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the output image in pixels',
                        metavar='HEIGHT', default=1000)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of times to iterate z -> z^2 + c',
                        metavar='MAX_ITERATIONS', default=1000)

    parser.add_argument('--escape-radius', type=float,
                        dest='escape_radius', help='magnitude beyond which a point is considered to diverge (>= 2)',
                        metavar='ESCAPE_RADIUS', default=2.0)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='real coordinate of the image centre',
                        metavar='X_CENTER', default=-0.5)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='imaginary coordinate of the image centre',
                        metavar='Y_CENTER', default=0.0)

    parser.add_argument('--x-width', type=float,
                        dest='x_width', help='width of the window in the complex plane; the height follows the image aspect',
                        metavar='X_WIDTH', default=3.0)

    parser.add_argument('--x-min', type=float, default=None,
                        help='left edge of the window. Together with --x-max, overrides --x-center and --x-width.')
    parser.add_argument('--x-max', type=float, default=None,
                        help='right edge of the window. Requires --x-min.')

    parser.add_argument('--palette', type=str,
                        dest='palette', help='"classic" or a matplotlib colormap name (e.g. "viridis", "inferno")',
                        metavar='PALETTE', default=DEFAULT_PALETTE)
    parser.add_argument('--invert', action='store_true', help='Invert the selected palette.')
    parser.add_argument('--color-period', type=float, default=None,
                        help='Cycle the palette every COLOR_PERIOD smoothed iterations instead of spreading it over the iteration budget.')
    parser.add_argument('--gamma', type=float, default=0.85, help='Gamma correction for tone mapping.')
    parser.add_argument('--inside-color', type=str, default='#000000', help='Hex color for points inside the Mandelbrot set.')

    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker processes. Defaults to the number of CPUs; 1 renders in-process.')
    parser.add_argument('--rows-per-task', type=int, default=None,
                        help='Number of image rows handed to a worker at a time.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the output image. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination image file. Default: mandelbrot.<format>.')

    parser.add_argument('--no-progress', dest='no_progress', action='store_true',
                        help='Do not display the progress bar.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of render settings and timings.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"

    output_arg = getattr(opt, "output", None)
    if not output_arg:
        return OutputConfig(
            image_path=Path(f"mandelbrot.{image_format}").expanduser().resolve(),
            image_format=image_format,
        )

    if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("--output must be a file path.")
    output_path = Path(output_arg).expanduser()
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    suffix = output_path.suffix
    expected_suffix = f".{image_format}"
    if suffix:
        if suffix.lower() != expected_suffix.lower():
            parser.error(f"--output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)

    return OutputConfig(image_path=output_path.resolve(), image_format=image_format)


def resolve_render_config(opt, parser: ArgumentParser) -> RenderParameters:
    """Build validated render parameters from the parsed options."""

    if (opt.x_min is None) != (opt.x_max is None):
        parser.error("--x-min and --x-max must be given together.")

    try:
        if opt.x_min is not None:
            if opt.x_max <= opt.x_min:
                raise ConfigurationError(f"--x-max ({opt.x_max}) must be greater than --x-min ({opt.x_min})")
            viewport = Viewport.from_bounds(opt.x_min, opt.x_max, opt.y_center, opt.width, opt.height)
        else:
            viewport = Viewport.for_image(opt.x_center, opt.y_center, opt.x_width, opt.width, opt.height)
        params = RenderParameters(
            width=opt.width,
            height=opt.height,
            viewport=viewport,
            max_iterations=opt.max_iterations,
            escape_radius=opt.escape_radius,
        )
        params.validate()
        if opt.workers is not None and opt.workers < 1:
            raise ConfigurationError(f"--workers must be at least 1, got {opt.workers}")
        if opt.rows_per_task is not None and opt.rows_per_task < 1:
            raise ConfigurationError(f"--rows-per-task must be at least 1, got {opt.rows_per_task}")
    except ConfigurationError as exc:
        parser.error(str(exc))
    return params


def resolve_color_config(opt, parser: ArgumentParser) -> ColorConfig:
    try:
        inside_color = parse_hex_color(opt.inside_color)
        check_tone_settings(opt.color_period, opt.gamma)
    except ConfigurationError as exc:
        parser.error(str(exc))
    return ColorConfig(
        palette_name=opt.palette,
        invert=bool(opt.invert),
        inside_color=inside_color,
        period=opt.color_period,
        gamma=opt.gamma,
    )


def run(argv=None):
    """Parse ``argv``, render, write the image and return its path."""

    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    output_config = resolve_output_config(opt, parser)
    params = resolve_render_config(opt, parser)
    color_config = resolve_color_config(opt, parser)
    try:
        palette = get_palette(color_config.palette_name, invert=color_config.invert)
    except ConfigurationError as exc:
        parser.error(str(exc))

    metadata = params.validate()
    log("Image: %dx%d, max iterations %d, escape radius %g"
        % (params.width, params.height, params.max_iterations, params.escape_radius))
    log("X: [%.6g, %.6g]  Y: [%.6g, %.6g]"
        % (metadata.x_min, metadata.x_max, metadata.y_min, metadata.y_max))
    log("Workers: %s, palette: %s" % (opt.workers or os.cpu_count(), color_config.palette_name))

    total_pixels = params.width * params.height
    started = time.perf_counter()
    with tqdm(total=total_pixels, unit="px", unit_scale=True, desc="Rendering",
              disable=bool(opt.no_progress), file=sys.stderr) as bar:

        def report(completed):
            bar.update(completed - bar.n)

        result = render_frame(
            params,
            workers=opt.workers,
            rows_per_task=opt.rows_per_task,
            progress=report,
        )
    log("Rendered in %.2fs, %d interior pixels"
        % (time.perf_counter() - started, int(result.interior.sum())))

    rgb = colorize(
        result,
        palette,
        inside_color=color_config.inside_color,
        period=color_config.period,
        gamma=color_config.gamma,
    )
    path = write_image(rgb, output_config.image_path, output_config.image_format)
    log("Wrote %s" % path)
    return path


def main(argv=None):
    run(argv)


if __name__ == "__main__":
    main()
