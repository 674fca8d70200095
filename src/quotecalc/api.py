from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .cli import write_artifacts
from .config import load_config
from .presets import QuoteConfiguration
from .quote import QuoteResult, build_quote


@dataclass
class QuoteOptions:
    payload: dict
    presets_path: Optional[Path] = None
    output_dir: Optional[Path] = None
    business_name: str = ""
    pdf: bool = False
    csv: bool = False
    xlsx: bool = False
    stem: str = "quote"


def generate(options: QuoteOptions) -> tuple[QuoteResult, Dict[str, Path]]:
    """Programmatic interface: build the quote and write the requested documents.

    Raises :class:`~quotecalc.quote.QuoteValidationError` for an invalid payload.
    """
    env: Dict[str, str] = {}
    if options.presets_path:
        env["QUOTE_PRESETS"] = str(options.presets_path)
    if options.output_dir:
        env["QUOTE_OUTPUT_DIR"] = str(options.output_dir)
    if options.business_name:
        env["BUSINESS_NAME"] = options.business_name
    if options.pdf:
        env["QUOTE_WRITE_PDF"] = "1"
    if options.csv:
        env["QUOTE_WRITE_CSV"] = "1"
    if options.xlsx:
        env["QUOTE_WRITE_XLSX"] = "1"

    cfg = load_config(env, None)
    result = build_quote(options.payload, QuoteConfiguration.load(cfg.presets_path))
    return result, write_artifacts(result, options.stem, cfg)
