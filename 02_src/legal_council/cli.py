"""CLI interface for legal document translation and analysis.

Scanned documents go through the Model Council page by page; documents with
a text layer can also be translated, analyzed or summarized as plain text.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .core.processor import DocumentProcessor
from .operations.council_translation import CouncilTranslationOperation
from .operations.legal_analysis import LegalAnalysisOperation
from .operations.text_translation import TextTranslationOperation
from .schemas.config import ProcessorConfig
from .schemas.languages import find_language

LOG_FORMAT = "%(asctime)s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

DEFAULT_OUTPUT_DIR = Path("runs")

MODES = ["translate", "text", "analyze", "summarize"]


def setup_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """Setup logging: console + optional file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (UTF-8). If None, console only.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stdout,
        force=True,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logging.getLogger().addHandler(fh)


def validate_arguments(pdf_path: Path, api_key: Optional[str]) -> None:
    """Validate CLI arguments.

    Raises:
        SystemExit: If validation fails
    """
    if not pdf_path.exists():
        print(f"Error: PDF file not found: {pdf_path}", file=sys.stderr)
        sys.exit(1)

    if not pdf_path.is_file():
        print(f"Error: Path is not a file: {pdf_path}", file=sys.stderr)
        sys.exit(1)

    if not api_key:
        print(
            "Error: GEMINI_API_KEY not found in environment. "
            "Please set it in .env file or as environment variable.",
            file=sys.stderr,
        )
        sys.exit(1)


def create_run_dir(parent_dir: Path) -> Path:
    """Create timestamped run subdirectory.

    Args:
        parent_dir: Parent directory for runs

    Returns:
        Path to created run directory, e.g. parent_dir/run_2026-02-09_171500/
    """
    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    run_dir = parent_dir / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate and analyze legal PDF documents with a council of Gemini models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  legal-council contract.pdf --target-language Hindi
  legal-council contract.pdf --mode text --source-language English
  legal-council contract.pdf --mode analyze

Each run creates a timestamped subdirectory inside --output-dir:
  output-dir/run_2026-02-09_171500/
    pages/         rendered page images
    results/       YAML results
    logs/run.log   full log
The verdict cache is shared across runs in output-dir/cache/.
        """,
    )

    parser.add_argument("pdf_path", type=Path, help="Path to PDF file to process")
    parser.add_argument(
        "--mode", "-m",
        choices=MODES,
        default="translate",
        help="translate: council over page images; text: translate text layer; "
             "analyze: risk analysis; summarize: headnote summary (default: translate)",
    )
    parser.add_argument(
        "--target-language", "-t",
        default="Hindi",
        help="Target language (default: Hindi)",
    )
    parser.add_argument(
        "--source-language", "-s",
        default="auto",
        help="Source language for --mode text (default: auto)",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Parent directory for run folders (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--dpi",
        type=int,
        default=216,
        help="DPI for PDF rendering (default: 216)",
    )
    parser.add_argument(
        "--image-format",
        choices=["PNG", "JPEG"],
        default="PNG",
        help="Page image format sent to the models (default: PNG)",
    )
    parser.add_argument(
        "--jpeg-quality",
        type=int,
        default=90,
        help="JPEG quality when --image-format JPEG (default: 90)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the shared verdict cache",
    )
    return parser


def print_status(message: str) -> None:
    print(f"  > {message}", flush=True)


def main() -> int:
    """Main CLI entry point.

    Returns:
        0 on success, 1 on error
    """
    args = build_parser().parse_args()

    try:
        load_dotenv()
        api_key = os.getenv("GEMINI_API_KEY")

        validate_arguments(args.pdf_path, api_key)

        run_dir = create_run_dir(args.output_dir)
        log_file = run_dir / "logs" / "run.log"

        setup_logging(args.log_level, log_file)
        logger = logging.getLogger(__name__)

        logger.info(f"Run directory: {run_dir}")
        logger.info(f"Processing: {args.pdf_path} (mode={args.mode})")

        if find_language(args.target_language) is None:
            logger.warning(f"Target language '{args.target_language}' is not in the supported list")

        config = ProcessorConfig(
            state_dir=run_dir,
            cache_dir=None if args.no_cache else args.output_dir / "cache",
            auto_save=True,
            render_dpi=args.dpi,
            render_format=args.image_format,
            render_quality=args.jpeg_quality,
            log_level=args.log_level,
            target_language=args.target_language,
        )

        processor = DocumentProcessor(source=args.pdf_path, config=config)
        logger.info(f"Document loaded: {processor.num_pages} pages")

        print()
        print("=" * 60)

        if args.mode == "translate":
            verdict = CouncilTranslationOperation(processor).execute(
                status_sink=print_status,
            )
            print("Translation completed successfully!")
            print(f"Confidence:      {verdict.confidence_score}")
            print(f"Text length:     {len(verdict.final_translation)} characters")

        elif args.mode == "text":
            translation = TextTranslationOperation(processor).execute(
                source_language=args.source_language,
            )
            print("Text translation completed successfully!")
            print(f"Text length:     {len(translation)} characters")

        else:
            result = LegalAnalysisOperation(processor).execute(mode=args.mode)
            if args.mode == "analyze":
                print("Risk analysis completed successfully!")
                print(f"Risks found:     {len(result.risks)}")
                print(f"Clauses graded:  {len(result.clauses)}")
            else:
                print("Summary completed successfully!")

        print("=" * 60)
        print(f"Run directory:   {run_dir}")
        print(f"Pages processed: {processor.num_pages}")
        print(f"Results:         {run_dir / 'results'}")
        print(f"Log:             {log_file}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 1

    except Exception as e:
        logging.getLogger(__name__).exception(f"Error during processing: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
