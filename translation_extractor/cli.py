"""Command-line trigger for an extraction run."""
import argparse
import logging
import sys
from typing import List, Optional

from translation_extractor.app_config import AppConfig, load_app_config
from translation_extractor.extractor import extract_all
from translation_extractor.models import ExtractionResult
from translation_extractor.providers import RecordSourceProvider, SnapshotRecordSourceProvider

logger = logging.getLogger(__name__)


def run_extraction(
        output_root: str,
        source_locale_id: Optional[str] = None,
        provider: Optional[RecordSourceProvider] = None,
        config: Optional[AppConfig] = None,
        snapshot_path: Optional[str] = None
) -> ExtractionResult:
    """
    Run one extraction into output_root.

    The outcome is reported through the returned ExtractionResult; this function
    does not exit the process.
    """
    config = config or load_app_config()
    options = config.extraction_options()
    if source_locale_id:
        options.source_locale_id = source_locale_id

    if provider is None:
        snapshot_path = snapshot_path or config.snapshot_path
        if not snapshot_path:
            return ExtractionResult(error_message="No record-source snapshot configured (snapshot_path).")
        try:
            provider = SnapshotRecordSourceProvider.from_file(snapshot_path)
        except (OSError, ValueError) as snapshot_exc:
            logger.error("Could not load snapshot '%s': %s", snapshot_path, snapshot_exc)
            return ExtractionResult(error_message=f"Could not load snapshot '{snapshot_path}': {snapshot_exc}")

    logger.info("--- Starting translation extraction into '%s' ---", output_root)
    return extract_all(provider, output_root, options)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract mod localization keys into per-mod translation files.")
    parser.add_argument("output_root", nargs="?", default=None,
                        help="Directory the translation files are written under (default: configured output_root).")
    parser.add_argument("--source-locale", dest="source_locale", default=None,
                        help="Reference locale whose values are preferred (default: configured, en-US).")
    parser.add_argument("--snapshot", default=None,
                        help="Record-source snapshot JSON (default: configured snapshot_path).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_app_config()
    result = run_extraction(args.output_root or config.output_root, args.source_locale,
                            config=config, snapshot_path=args.snapshot)

    if result.success:
        print(f"Extraction complete: {result.total_owners} mod(s), {result.total_entries} entries, "
              f"{len(result.written_files)} file(s).")
        if result.failed_owners:
            print(f"Failed mods: {', '.join(result.failed_owners)}", file=sys.stderr)
        return 0

    print(f"Extraction failed: {result.error_message or 'no files were written'}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
