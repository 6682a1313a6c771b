import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import ConfigError, load_settings
from .core.generator import generate
from .core.model import ModelError, load_model
from .core.source import TypeName


def setup_logging(log_level: str = "INFO", stream=None) -> None:
    """Configure application logging (stdout unless another stream is given)."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(stream or sys.stdout)
        ]
    )


logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_SYNTAX_ISSUES = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildergen",
        description="Generate <Type>_Builder.java sources from value-type models",
    )
    parser.add_argument(
        "models",
        nargs="+",
        metavar="MODEL",
        help="Model files (YAML or JSON) describing a value type and its properties"
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output root; files go under their package directory (default: print to stdout)"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit non-zero if any generated file fails to parse"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (default: config/buildergen.yaml or $BUILDERGEN_CONFIG)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for buildergen."""
    args = build_parser().parse_args(argv)

    # Setup logging; generated source owns stdout when no output root is given
    setup_logging(args.log_level, None if args.output else sys.stderr)

    try:
        settings = load_settings(Path(args.config) if args.config else None)
        nullable_annotation = TypeName.parse(settings.nullable_annotation)
    except (ConfigError, ValueError) as e:
        logger.error(f"Invalid settings: {e}")
        return EXIT_BAD_INPUT

    issue_count = 0
    for model_path in args.models:
        try:
            datatype, properties = load_model(model_path, nullable_annotation)
        except ModelError as e:
            logger.error(str(e))
            return EXIT_BAD_INPUT

        generated = generate(datatype, properties, settings)
        issue_count += len(generated.issues)
        for issue in generated.issues:
            logger.warning(f"{issue.file_path}:{issue.line}: {issue.message}")

        if args.output:
            out_path = Path(args.output) / generated.path
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(generated.text)
            logger.info(f"Wrote {out_path}")
        else:
            sys.stdout.write(generated.text)

    if args.check and issue_count:
        logger.error(f"{issue_count} syntax issue(s) in generated sources")
        return EXIT_SYNTAX_ISSUES
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
