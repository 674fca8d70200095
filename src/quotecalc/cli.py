import argparse
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Sequence

from dotenv import load_dotenv

from .config import Config
from .config import load_config as load_runtime_config
from .delivery import MailConfig, QuoteMailer, compose_quote_email
from .pdf import write_quote_pdf
from .presets import QuoteConfiguration
from .quote import QuoteResult, QuoteValidationError, build_quote, load_quote_file
from .reporting import make_summary_text, write_breakdown

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def write_artifacts(result: QuoteResult, stem: str, cfg: Config) -> Dict[str, Path]:
    """Write the PDF and breakdown files enabled in ``cfg``; return them keyed by kind."""

    artifacts: Dict[str, Path] = {}
    if cfg.write_pdf:
        artifacts["pdf"] = write_quote_pdf(result, cfg.output_dir / f"{stem}_quote.pdf", cfg.business_name)
    if cfg.write_csv:
        artifacts["csv"] = write_breakdown(result.line_items, result.totals, cfg.output_dir / f"{stem}_breakdown.csv")
    if cfg.write_xlsx:
        artifacts["xlsx"] = write_breakdown(result.line_items, result.totals, cfg.output_dir / f"{stem}_breakdown.xlsx")
    for kind, path in artifacts.items():
        logger.info("Wrote %s: %s", kind, path)
    return artifacts


def run(quote_path: Path, cfg: Config) -> int:
    try:
        payload = load_quote_file(quote_path)
        presets = QuoteConfiguration.load(cfg.presets_path)
        result = build_quote(payload, presets)
    except QuoteValidationError as exc:
        logger.error("Quote %s is invalid:", quote_path)
        for message in exc.errors:
            logger.error("  %s", message)
        return EXIT_INVALID

    if cfg.json_output:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(make_summary_text(result.line_items, result.totals), end="")

    artifacts = write_artifacts(result, quote_path.stem, cfg)

    if cfg.send_to:
        mailer = QuoteMailer(MailConfig.load(cfg.mail_config_path))
        email = compose_quote_email(result, cfg.send_to, artifacts.values(), cfg.business_name)
        provider = mailer.send(email)
        if provider is None:
            logger.error("Quote email was not delivered")
            return EXIT_ERROR
        logger.info("Quote email delivered via %s", provider)
    return EXIT_OK


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute catering quote totals and produce quote documents")
    parser.add_argument("quote", help="Quote request file (JSON or YAML)")
    parser.add_argument("--presets", help="Quote presets file (packages, items, labor, taxes, gratuities)")
    parser.add_argument("--output-dir", help="Directory for generated files")
    parser.add_argument("--business-name", help="Name printed on the PDF and email signature")
    parser.add_argument("--pdf", action="store_true", help="Write a PDF quote document")
    parser.add_argument("--csv", action="store_true", help="Write the line item breakdown as CSV")
    parser.add_argument("--xlsx", action="store_true", help="Write the line item breakdown as XLSX")
    parser.add_argument("--send-to", help="Comma separated recipients for the quote email")
    parser.add_argument("--mail-config", help="Mail provider configuration file (JSON or YAML)")
    parser.add_argument("--json", action="store_true", help="Print the quote as JSON instead of a summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    try:
        return run(Path(args.quote).expanduser().resolve(), runtime_cfg)
    except Exception:  # pragma: no cover - defensive
        logger.exception("Fatal error while generating quote")
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
