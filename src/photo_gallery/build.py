"""Build step that injects Supabase settings into static HTML pages."""

import argparse
import json
import logging
from enum import Enum
from pathlib import Path

from photo_gallery.app_logging import configure_logging
from photo_gallery.config import Settings, parse_html_files

logger = logging.getLogger(__name__)

CONFIG_MARKER = "window.SUPABASE_URL"
HEAD_CLOSE = "</head>"


class InjectionStatus(Enum):
    """What happened to a single HTML file."""

    INJECTED = "injected"
    ALREADY_PRESENT = "already_present"
    MISSING = "missing"
    NO_HEAD = "no_head"


def build_config_script(supabase_url: str, supabase_anon_key: str) -> str:
    """Return the script block that exposes the settings as globals."""
    return (
        "\n<script>\n"
        "  // Injected at build time\n"
        f"  window.SUPABASE_URL = {json.dumps(supabase_url)};\n"
        f"  window.SUPABASE_ANON_KEY = {json.dumps(supabase_anon_key)};\n"
        "</script>\n"
    )


def inject_config(
    path: Path, supabase_url: str, supabase_anon_key: str
) -> InjectionStatus:
    """Insert the config script before </head>, once."""
    if not path.is_file():
        logger.warning("%s not found", path.name)
        return InjectionStatus.MISSING
    content = path.read_text(encoding="utf-8")
    if CONFIG_MARKER in content:
        logger.info("%s already has the settings injected", path.name)
        return InjectionStatus.ALREADY_PRESENT
    if HEAD_CLOSE not in content:
        logger.warning("%s has no %s tag", path.name, HEAD_CLOSE)
        return InjectionStatus.NO_HEAD
    script = build_config_script(supabase_url, supabase_anon_key)
    updated = content.replace(HEAD_CLOSE, script + HEAD_CLOSE, 1)
    path.write_text(updated, encoding="utf-8")
    logger.info("Settings injected into %s", path.name)
    return InjectionStatus.INJECTED


def run_build(
    root: Path, files: list[str], supabase_url: str, supabase_anon_key: str
) -> dict[str, InjectionStatus]:
    """Inject settings into every listed file under root."""
    if not supabase_url or not supabase_anon_key:
        logger.warning("SUPABASE_URL or SUPABASE_ANON_KEY is empty")
    return {
        name: inject_config(root / name, supabase_url, supabase_anon_key)
        for name in files
    }


def main(argv: list[str] | None = None) -> int:
    """Command-line entrypoint for the build step."""
    configure_logging()
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Inject Supabase settings into static HTML files."
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path(settings.static_root),
        help="Directory holding the HTML files.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="HTML files relative to --root (defaults to HTML_FILES).",
    )
    args = parser.parse_args(argv)
    files = args.files or parse_html_files(settings.html_files)
    logger.info("Injecting settings into %d HTML file(s)", len(files))
    run_build(args.root, files, settings.supabase_url, settings.supabase_anon_key)
    logger.info("Build finished")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
