from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import List, Mapping, Optional


_BOOLEAN_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    base_dir: Path
    output_dir: Path
    presets_path: Optional[Path] = None
    mail_config_path: Optional[Path] = None
    business_name: str = ""
    write_pdf: bool = False
    write_csv: bool = False
    write_xlsx: bool = False
    send_to: List[str] = field(default_factory=list)
    json_output: bool = False
    verbose: bool = False


def _to_path(value: object | None) -> Optional[Path]:
    text = str(value).strip() if value is not None else ""
    return Path(text).expanduser().resolve() if text else None


def _flag(value: object | None) -> bool:
    if isinstance(value, bool):
        return value
    return value is not None and str(value).strip().lower() in _BOOLEAN_TRUE


def _split(value: object | None) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def _namespace(cli_args: object | None) -> SimpleNamespace:
    """Accept an argparse Namespace, a SimpleNamespace or nothing."""
    return SimpleNamespace(**vars(cli_args)) if cli_args is not None else SimpleNamespace()


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    base_dir = Path.cwd().resolve()
    output_dir = _to_path(env.get("QUOTE_OUTPUT_DIR")) or (base_dir / "outputs").resolve()
    presets_path = _to_path(env.get("QUOTE_PRESETS"))
    mail_config_path = _to_path(env.get("QUOTE_MAIL_CONFIG"))
    business_name = env.get("BUSINESS_NAME", "").strip()
    write_pdf = _flag(env.get("QUOTE_WRITE_PDF"))
    write_csv = _flag(env.get("QUOTE_WRITE_CSV"))
    write_xlsx = _flag(env.get("QUOTE_WRITE_XLSX"))
    send_to = _split(env.get("QUOTE_SEND_TO"))
    json_output = False
    verbose = False

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "output_dir", None):
        output_dir = _to_path(cli_ns.output_dir) or output_dir
    if getattr(cli_ns, "presets", None):
        presets_path = _to_path(cli_ns.presets)
    if getattr(cli_ns, "mail_config", None):
        mail_config_path = _to_path(cli_ns.mail_config)
    if getattr(cli_ns, "business_name", None):
        business_name = str(cli_ns.business_name).strip()
    if getattr(cli_ns, "pdf", False):
        write_pdf = True
    if getattr(cli_ns, "csv", False):
        write_csv = True
    if getattr(cli_ns, "xlsx", False):
        write_xlsx = True
    if getattr(cli_ns, "send_to", None):
        send_to = _split(cli_ns.send_to)
    if getattr(cli_ns, "json", False):
        json_output = True
    if getattr(cli_ns, "verbose", False):
        verbose = bool(cli_ns.verbose)

    return Config(
        base_dir=base_dir,
        output_dir=output_dir,
        presets_path=presets_path,
        mail_config_path=mail_config_path,
        business_name=business_name,
        write_pdf=write_pdf,
        write_csv=write_csv,
        write_xlsx=write_xlsx,
        send_to=send_to,
        json_output=json_output,
        verbose=verbose,
    )


__all__ = ["Config", "load_config"]
