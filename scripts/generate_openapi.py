"""Write the reconciliation service's OpenAPI schema, or verify a committed copy."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from fastapi.openapi.utils import get_openapi

from spoofcheck.main import create_app

_logger = logging.getLogger(__name__)


def render_schema() -> str:
    app = create_app()
    schema = get_openapi(
        title=app.title,
        version=app.version,
        routes=app.routes,
        description=app.description,
    )
    return json.dumps(schema, indent=2, sort_keys=True) + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the spoofcheck OpenAPI schema")
    parser.add_argument("--output", default="openapi.json", help="Schema path (default: openapi.json)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit non-zero when the schema at --output is missing or differs from the current routes",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    rendered = render_schema()
    output_path = Path(args.output)
    if args.check:
        current = output_path.read_text(encoding="utf-8") if output_path.exists() else None
        if current != rendered:
            _logger.error("OpenAPI schema at %s is stale; regenerate it without --check", output_path)
            return 1
        _logger.info("OpenAPI schema at %s is up to date", output_path)
        return 0

    output_path.write_text(rendered, encoding="utf-8")
    _logger.info("OpenAPI schema written to %s", output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
