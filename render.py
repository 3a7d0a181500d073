import os
import sys
import time
import warnings

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandelgrey import PALETTES, DEFAULT_LIMIT, RenderParameters, partition, render_frame, write_image
from mandelgrey.arguments import coordinate, dimensions
from mandelgrey.dispatcher import default_worker_count
from mandelgrey.image import resolve_output

USAGE_EXAMPLE = "example: render.py mandelbrot.png 4000x3000 -1.20,0.35 -1,0.20"

_HELP_FLAGS = {"-h", "--help"}


def build_option_parser():
    parser = ArgumentParser(add_help=False)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations before a point is taken to be inside the set',
                        metavar='MAX_ITERATIONS', default=DEFAULT_LIMIT)

    parser.add_argument('--palette', choices=sorted(PALETTES), default='inverted',
                        help='Mapping from escape count to grey level: "inverted" (255 - count) or "scaled" (spread over the iteration range).')

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of parallel row bands to render (default: number of CPUs)',
                        metavar='WORKERS', default=None)

    parser.add_argument('--format', type=str,
                        dest='format', help='image format overriding the output suffix. Can be any format supported by Pillow.',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def build_parser(options=None):
    parser = ArgumentParser(
        description='Render a greyscale image of the Mandelbrot set.',
        epilog=USAGE_EXAMPLE,
        parents=[options if options is not None else build_option_parser()],
    )

    parser.add_argument('output', metavar='OUTPUT',
                        help='path of the image file to write; the suffix selects the format')

    parser.add_argument('dimensions', type=dimensions, metavar='WxH',
                        help='pixel dimensions of the image, e.g. 4000x3000')

    parser.add_argument('top_left', type=coordinate, metavar='TOP_LEFT',
                        help='complex point at the upper-left corner, as RE,IM')

    parser.add_argument('bottom_right', type=coordinate, metavar='BOTTOM_RIGHT',
                        help='complex point at the lower-right corner, as RE,IM')

    return parser


def parse_args(argv):
    """Parse the command line, accepting operands such as ``-1.20,0.35``.

    Options are taken out first; whatever is left are the operands, which are
    then parsed after a ``--`` separator so a leading minus never reads as a flag.
    """

    options = build_option_parser()
    parser = build_parser(options)

    opt, operands = options.parse_known_args(argv)
    if _HELP_FLAGS & set(operands):
        parser.print_help()
        parser.exit()
    if "--" in operands:
        operands.remove("--")
    return parser, parser.parse_args(["--", *operands], namespace=opt)


def main(argv=None):
    raw_args = sys.argv[1:] if argv is None else list(argv)
    parser, opt = parse_args(raw_args)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.max_iterations < 1:
        parser.error('--max-iterations must be at least 1.')

    workers = opt.workers if opt.workers is not None else default_worker_count()
    if workers < 1:
        parser.error('--workers must be at least 1.')

    try:
        output_path, pil_format = resolve_output(opt.output, opt.format)
    except ValueError as exc:
        parser.error(str(exc))

    width, height = opt.dimensions
    params = RenderParameters(
        width=width,
        height=height,
        top_left=opt.top_left,
        bottom_right=opt.bottom_right,
        max_iterations=opt.max_iterations,
        palette=opt.palette,
        workers=workers,
    )

    log("TensorFlow version: %s" % tf.__version__)
    if not params.viewport.is_oriented:
        log("Warning: top-left %s is not above and left of bottom-right %s; the image will be mirrored."
            % (params.top_left, params.bottom_right))

    bands = partition(params.height, params.workers)
    log("Rendering %dx%d over %s .. %s with %d band(s)"
        % (width, height, params.top_left, params.bottom_right, len(bands)))

    start = time.perf_counter()
    pixels = render_frame(params)
    log("Rendered in %.2fs" % (time.perf_counter() - start))

    try:
        written = write_image(output_path, pixels, params.surface, pil_format)
    except OSError as exc:
        parser.exit(1, f"{parser.prog}: error: failed to write {output_path}: {exc}\n")

    log("Wrote %s" % written)


if __name__ == '__main__':
    main()
