"""Command-line interface for the multi-language SRT translator."""

from __future__ import annotations

import asyncio
import argparse
import logging
import sys
from pathlib import Path
from typing import List

from tqdm import tqdm

from .config import TranslatorConfig, DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_BATCH_SIZE
from .errors import InvalidDocument, MissingCredential
from .jobs import JobQueueController
from .languages import selectable_languages
from .llm_client import create_backend
from .models import RunStatus
from .parser import compute_total_duration, format_duration, read_srt_file, save_translations, validate_srt_file
from .translator import detect_language

REFRESH_INTERVAL = 0.5


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_arguments(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Translate an SRT file into several languages at once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s video.srt -l Japanese -l Spanish        # Two languages
  %(prog)s video.srt --all-languages -o out/       # Every language
  %(prog)s video.srt -l French --batch-size 20     # Smaller requests
  %(prog)s video.srt --all-languages --detect-language
        """
    )

    parser.add_argument("input_path", help="Input SRT file path")
    parser.add_argument("-o", "--output-dir", dest="output_dir", default=None,
                        help="Output directory (default: next to the input file)")

    # Languages
    parser.add_argument("-l", "--language", dest="languages", action="append", default=[],
                        help="Target language, repeat for several")
    parser.add_argument("--all-languages", action="store_true", help="Translate to every available language")
    parser.add_argument("--original-language", help="Language of the input subtitles")
    parser.add_argument("--detect-language", action="store_true",
                        help="Ask the model for the original language")

    # API options
    parser.add_argument("--api-key", help="API key (or set DEEPSEEK_API_KEY)")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--model", dest="model_name", default=DEFAULT_MODEL)
    parser.add_argument("--max-retries", type=int, default=1, help="Attempts per request")

    # Performance
    parser.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Subtitles per request")
    parser.add_argument("--max-concurrency", type=int, default=None,
                        help="Cap on parallel requests per language (default: all chunks at once)")

    # Misc
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    return parser.parse_args(argv)


async def watch_progress(controller: JobQueueController) -> None:
    """Refresh a progress bar until the run settles."""
    with tqdm(total=controller.total_subtitles, desc="Translating", unit="sub") as bar:
        while controller.status != RunStatus.IDLE:
            bar.n = controller.translated_subtitles
            active = controller.state.active_job()
            eta = controller.estimated_remaining()
            bar.set_postfix_str(
                f"{active.language if active else '-'} | "
                f"ETA {format_duration(eta * 1000) if eta is not None else '--'}"
            )
            bar.refresh()
            await asyncio.sleep(REFRESH_INTERVAL)
        bar.n = controller.translated_subtitles
        bar.refresh()


async def main_async(args: argparse.Namespace) -> int:
    """Main async workflow."""
    logger = logging.getLogger(__name__)
    config = TranslatorConfig.from_args(args)

    error = config.validate()
    if error:
        logger.error(error)
        return 1

    in_path = Path(args.input_path).expanduser().resolve()
    error = validate_srt_file(in_path)
    if error:
        logger.error(error)
        return 1

    try:
        backend = create_backend(config)
    except MissingCredential as e:
        logger.error(e.message)
        return 1

    controller = JobQueueController(backend, config)

    logger.info(f"Reading: {in_path}")
    try:
        entries = controller.load(read_srt_file(in_path), in_path.name)
    except InvalidDocument as e:
        logger.error(e.message)
        return 1

    original = config.original_language
    if not original and args.detect_language:
        original = await detect_language(backend, entries, config.model_name)

    logger.info(f"Subtitles: {len(entries)}")
    logger.info(f"Total duration: {compute_total_duration(entries)}")
    logger.info(f"Original language: {original or 'Unknown'}")

    if args.all_languages:
        languages = selectable_languages(original)
    else:
        requested = list(dict.fromkeys(args.languages))
        languages = [
            lang for lang in requested
            if not original or lang.lower() != original.strip().lower()
        ]
        if len(languages) < len(requested):
            logger.warning(f"Skipping original language: {original}")

    if not languages:
        logger.error("Please select at least one target language.")
        return 1

    controller.start(languages)
    try:
        await asyncio.gather(watch_progress(controller), controller.wait())
    except asyncio.CancelledError:
        controller.cancel()
        raise

    report = controller.report
    out_dir = config.output_dir or in_path.parent
    if controller.results:
        save_translations(controller.results, out_dir)

    logger.info(report.summary())
    for line in report.errors:
        logger.error(line)

    return 0 if report.failed == 0 else 1


def main() -> None:
    """CLI entry point."""
    args = parse_arguments()
    setup_logging(args.verbose)

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Run cancelled.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
