"""
Command line interface for generating certificates.

Usage:
    python -m certigest --data form.json --assets-dir public --output-dir generated
    python -m certigest --city medellin --debug
    python -m certigest --list-cities
    python -m certigest --show-form cali

Without ``--data`` the bundled sample form is used, so running the command
with no arguments produces the sample Cali certificate.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import config
from .errors import UnknownCity
from .forms import missing_required_fields, sample_form_data, sections_for, with_security_codes
from .main import generate_certificate
from .registry import DEFAULT_REGISTRY, TemplateRegistry, load_json
from .schemas.form import FormData


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stamp company data on a city certificate template.")
    parser.add_argument("--data", type=Path, default=None, help="JSON with the form values (defaults to the bundled sample).")
    parser.add_argument("--city", default=None, help="City template to use (defaults to the form's city).")
    parser.add_argument("--debug", action="store_true", help="Calibration output: grid, captions and translucent masks.")
    parser.add_argument("--fresh-codes", action="store_true", help="Generate receipt number and verification code when empty.")
    parser.add_argument("--assets-dir", type=Path, default=None, help=f"Base directory of templates (default {config.ASSETS_DIR}).")
    parser.add_argument("--output-dir", type=Path, default=None, help=f"Where the PDF is saved (default {config.OUTPUT_DIR}).")
    parser.add_argument("--cities-dir", type=Path, default=None, help="Directory of city JSON files (default: bundled cities).")
    parser.add_argument("--list-cities", action="store_true", help="List configured cities and exit.")
    parser.add_argument("--show-form", metavar="CITY", default=None, help="Print the form sections of a city and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def print_form(city: str, registry: TemplateRegistry) -> None:
    for section in sections_for(city, registry):
        print(section.title)
        for field in section.fields:
            marker = "*" if field.required else " "
            print(f"  {marker} {field.key.value:<20} {field.label} [{field.type}]")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config.validate()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = TemplateRegistry.from_directory(args.cities_dir) if args.cities_dir else DEFAULT_REGISTRY

    if args.list_cities:
        for city in registry.list_cities():
            print(city)
        return 0

    if args.show_form:
        try:
            print_form(args.show_form, registry)
        except UnknownCity as exc:
            print(exc.message)
            return 1
        return 0

    form_data = FormData.model_validate(load_json(args.data)) if args.data else sample_form_data()
    if args.fresh_codes:
        form_data = with_security_codes(form_data)

    city = args.city or form_data.city
    if city in registry:
        missing = missing_required_fields(form_data, sections_for(city, registry))
        if missing:
            print(f"Warning: required fields left empty: {', '.join(key.value for key in missing)}")

    result = generate_certificate(
        form_data,
        city=city,
        debug=args.debug,
        registry=registry,
        assets_dir=args.assets_dir,
        output_dir=args.output_dir,
    )
    if not result.success:
        print(f"Generation failed: {result.error}")
        if result.output_path:
            print(f"Error report written to {result.output_path}")
        else:
            print("Error report could not be saved")
        return 1

    print(f"Generated PDF at {result.output_path} ({result.page_count} pages, {result.operations} operations)")
    return 0
