import argparse
import logging
from typing import Optional, Union

from psd_codec import decode
from psd_codec.api.document import Document, Layer
from psd_codec.psd.document import PSD
from psd_codec.version import __version__

try:
    from IPython.lib.pretty import pprint
except ImportError:
    from pprint import pprint

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="psd-codec command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument(
        "--encoding",
        default="macroman",
        help="Encoding of pascal strings in the file (default: macroman).",
    )
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export PSD or layer as PNG")
    export_parser.add_argument(
        "input_file",
        help="Input PSD file (optionally with layer index, e.g. file.psd[0])",
    )
    export_parser.add_argument("output_file", help="Output image file")

    show_parser = subparsers.add_parser("show", help="Show the file content")
    show_parser.add_argument("input_file", help="Input PSD file")

    debug_parser = subparsers.add_parser("debug", help="Show debug info for PSD file")
    debug_parser.add_argument("input_file", help="Input PSD file")

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("psd_codec").setLevel(logging.DEBUG)
    else:
        logging.getLogger("psd_codec").setLevel(logging.INFO)

    if args.command == "export":
        input_parts = args.input_file.split("[")
        input_file = input_parts[0]
        indices = [int(x.rstrip("]")) for x in input_parts[1:]]
        if len(indices) > 1:
            logger.error("Layers are flat, only one index is allowed")
            return 1
        with open(input_file, "rb") as f:
            target: Union[Document, Layer] = decode(f.read(), args.encoding)
        if indices:
            layers = target.layers  # type: ignore[union-attr]
            if not -len(layers) <= indices[0] < len(layers):
                logger.error(
                    "Layer index %d out of range, %s has %d layers"
                    % (indices[0], input_file, len(layers))
                )
                return 1
            target = layers[indices[0]]
        image = target.topil()
        if image is None:
            logger.error("Nothing to export from %s" % args.input_file)
            return 1
        image.save(args.output_file)

    elif args.command == "show":
        with open(args.input_file, "rb") as f:
            pprint(decode(f.read(), args.encoding))

    elif args.command == "debug":
        with open(args.input_file, "rb") as f:
            pprint(PSD.frombytes(f.read(), encoding=args.encoding))

    return None
