#!/usr/bin/env python
"""
CLI for rent estimates.

Usage:
    python -m rentestimate.cli.estimate --bedrooms 2 --property-type Flat
    python -m rentestimate.cli.estimate --bedrooms 3 --property-type House --city Leeds --postcode "LS6 2AB" --parking
"""

import argparse
import json
import sys

from rentestimate.logging_config import setup_logging, get_logger
from rentestimate.utils.formatting import format_rent, format_rent_range


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the monthly rent of a property",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m rentestimate.cli.estimate --bedrooms 2 --property-type Flat
    python -m rentestimate.cli.estimate --bedrooms 1 --property-type Studio --furnishing Furnished --json
        """,
    )
    parser.add_argument("--bedrooms", type=int, required=True, help="Number of bedrooms")
    parser.add_argument("--property-type", required=True, help="Property type, e.g. Flat or House")
    parser.add_argument("--bathrooms", type=int, default=None, help="Number of bathrooms")
    parser.add_argument("--city", default=None, help="City")
    parser.add_argument("--postcode", default=None, help="Postcode, e.g. 'SW1A 1AA'")
    parser.add_argument("--furnishing", default=None,
                        help="Furnishing status (Furnished, Unfurnished, Part-Furnished)")
    parser.add_argument("--parking", action="store_true", help="Property has parking")
    parser.add_argument("--garden", action="store_true", help="Property has a garden")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set log level (default: WARNING)",
    )
    return parser


def main(argv=None):
    """Main entry point for the estimate CLI."""
    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level, force=True)
    logger = get_logger(__name__)

    request = {
        "bedrooms": args.bedrooms,
        "property_type": args.property_type,
        "bathrooms": args.bathrooms,
        "city": args.city,
        "postcode": args.postcode,
        "furnishing_status": args.furnishing,
        "has_parking": args.parking,
        "has_garden": args.garden,
    }

    from rentestimate.services.estimation import EstimationService

    try:
        with EstimationService() as service:
            result = service.estimate(request)
    except Exception as e:
        logger.error("Estimate failed: %s", e, exc_info=args.log_level == "DEBUG")
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print("\n" + "=" * 50)
    print("Rent Estimate")
    print("=" * 50)
    print(f"\n  Property: {args.bedrooms}-bed {args.property_type}")
    print(f"  Estimate: {format_rent(result.estimated_price)}")
    print(f"  Range: {format_rent_range(result.price_range.min, result.price_range.max)}")
    print(f"  Confidence: {result.confidence:.0%}")
    print(f"  Comparables used: {len(result.comparable_properties)}")
    print(f"  Source: {result.model_status.value}")
    print()


if __name__ == "__main__":
    main()
