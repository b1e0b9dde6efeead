"""Command line entry point: expand doc.restlet and value tags in files.

Usage:
    doc-restlet -D tut.pori.javadocer.rest_uri=http://example.org/rest/ \
        --constants myapp.api docs/*.html --output-dir build/docs
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import PROPERTY_REST_URI, load_settings
from .constants import ConstantRegistry
from .errors import StructuredError
from .logging import logger, setup_logging
from .preprocessor import Preprocessor
from .taglets import RestTaglet, ValueTaglet


def _properties(pairs: List[str]) -> Dict[str, str]:
    properties = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got: {pair}")
        properties[key] = value
    return properties


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="doc-restlet",
        description="Embed live REST XML responses into documentation sources.",
    )
    ap.add_argument("files", nargs="+", type=Path)
    ap.add_argument("-D", dest="properties", action="append", default=[], metavar="KEY=VALUE",
                    help="set a configuration property")
    ap.add_argument("--rest-uri", default=None, help=f"shorthand for -D {PROPERTY_REST_URI}=URI")
    ap.add_argument("--constants", action="append", default=[], metavar="MODULE",
                    help="register the upper-case constants of a module")
    ap.add_argument("--output-dir", type=Path, default=None,
                    help="write results here instead of overwriting the sources")
    ap.add_argument("--root", type=Path, default=None,
                    help="directory output paths are relative to (default: current directory)")
    ap.add_argument("--keep-going", action="store_true",
                    help="render failed tags as error markers instead of aborting")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        overrides = _properties(args.properties)
    except argparse.ArgumentTypeError as e:
        ap.error(str(e))
    if args.rest_uri is not None:
        overrides[PROPERTY_REST_URI] = args.rest_uri

    try:
        settings = load_settings(overrides)
        registry = ConstantRegistry()
        for module in args.constants:
            registry.register_module(module)

        preprocessor = Preprocessor([
            RestTaglet(settings=settings, registry=registry, abort_on_error=not args.keep_going),
            ValueTaglet(registry=registry),
        ])
        root = args.root if args.root is not None else Path.cwd()
        for path in args.files:
            preprocessor.process_file(path, output_dir=args.output_dir, root=root)
    except (StructuredError, ImportError, OSError, ValueError) as e:
        logger.error("Failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
