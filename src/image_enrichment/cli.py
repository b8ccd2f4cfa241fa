from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

from image_enrichment.errors import ConfigError, InvalidOptionsConfig
from image_enrichment.logging import get_logger, set_verbose
from image_enrichment.pipeline import process_images
from image_enrichment.schemas import DEFAULT_API_URL, DEFAULT_PROMPT, RunConfig
from image_enrichment.utils.options import load_schema_file, parse_options_arg

logger = get_logger(__name__)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    load_dotenv()
    p = argparse.ArgumentParser(
        prog="image-enrichment",
        description="Caption every image in a folder with an Ollama-style chat endpoint, one JSON file per image.",
    )
    p.add_argument("--dir", required=True, help="Directory of input images")
    p.add_argument(
        "--api-url",
        "--api_url",
        dest="api_url",
        default=os.getenv("IMGE_API_URL", DEFAULT_API_URL),
        help="Chat endpoint URL",
    )
    p.add_argument(
        "--model",
        default=os.getenv("IMGE_MODEL"),
        help="Model name on the endpoint",
    )
    p.add_argument("--schema", default=None, help="JSON schema file path (optional)")
    p.add_argument("--prompt", default=DEFAULT_PROMPT, help="Prompt to send to the model")
    p.add_argument(
        "--output-dir",
        "--output_dir",
        dest="output_dir",
        default=None,
        help="Directory to save output JSON files (defaults to --dir)",
    )
    p.add_argument(
        "--debug",
        "--verbose",
        dest="debug",
        action="store_true",
        help="Enable verbose debug logging",
    )
    p.add_argument("--options", default=None, help="JSON string of additional model options")
    p.add_argument("--pretty-json", action="store_true", help="Pretty format the JSON")
    p.add_argument("--batch-size", type=int, default=1, help="Number of images per batch")
    p.add_argument(
        "--skip-existing",
        action="store_true",
        help="Skip any images which already have JSON for them.",
    )
    p.add_argument("--suffix", default="", help="Suffix to append to JSON file names.")
    p.add_argument(
        "--request-mode",
        choices=["per-image", "per-batch"],
        default="per-image",
        help="Send one request per image, or one request carrying the whole batch",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=os.getenv("IMGE_TIMEOUT", "0"),
        help="HTTP timeout in seconds (0=none)",
    )
    return p.parse_args(list(argv) if argv is not None else None)


def build_config(args: argparse.Namespace) -> RunConfig:
    schema_obj = load_schema_file(args.schema) if args.schema else None
    try:
        options = parse_options_arg(args.options)
    except InvalidOptionsConfig as e:
        logger.warning("invalid JSON for --options; ignoring (%s)", e)
        options = None
    return RunConfig(
        input_dir=Path(args.dir),
        api_url=args.api_url,
        model=args.model,
        prompt=args.prompt,
        output_dir=Path(args.output_dir) if args.output_dir else None,
        schema_obj=schema_obj,
        options=options,
        pretty_json=args.pretty_json,
        batch_size=args.batch_size,
        skip_existing=args.skip_existing,
        suffix=args.suffix,
        request_mode=args.request_mode,
        timeout=args.timeout if args.timeout and args.timeout > 0 else None,
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    set_verbose(args.debug)
    if not args.model:
        logger.error("--model is required (or set IMGE_MODEL)")
        return 2
    if args.batch_size < 1:
        logger.error("--batch-size must be >= 1")
        return 2
    try:
        cfg = build_config(args)
        process_images(cfg)
    except ConfigError as e:
        logger.error(str(e))
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
