"""imagetransports - inspect images and list repository tags.

Usage:
  python main.py tags docker://library/alpine
  python main.py inspect docker://quay.io/org/app:v1
  python main.py transports
  python main.py --config config.yaml tags docker://localhost:5000/app
"""

import argparse
import json
import sys

from imagetransports.config import load_config
from imagetransports.exceptions import ImageTransportError
from imagetransports.logging_config import setup_all_logging
from imagetransports.transports.alltransports import build_registry, parse_image_name


def cmd_tags(registry, image_name: str) -> int:
    transport, ref = parse_image_name(image_name, registry)
    with transport.open_image(ref) as img:
        for tag in img.get_repository_tags():
            print(tag)
    return 0


def cmd_inspect(registry, image_name: str) -> int:
    transport, ref = parse_image_name(image_name, registry)
    with transport.open_image(ref) as img:
        _, media_type = img.manifest()
        info = {
            "name": img.source_ref_full_name(),
            "digest": img.digest(),
            "media_type": media_type,
            "tags": img.get_repository_tags(),
        }
    print(json.dumps(info, indent=2))
    return 0


def cmd_transports(registry) -> int:
    for descriptor in registry.descriptors():
        status = "stub" if descriptor.stub else "available"
        print(f"{descriptor.name}: {status}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="imagetransports - registry image inspection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", help="Path to YAML configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tags_parser = subparsers.add_parser("tags", help="List all tags of the image's repository")
    tags_parser.add_argument("image", help="transport:reference, e.g. docker://busybox")

    inspect_parser = subparsers.add_parser("inspect", help="Show name, digest and tags")
    inspect_parser.add_argument("image", help="transport:reference, e.g. docker://busybox")

    subparsers.add_parser("transports", help="List registered transports")

    args = parser.parse_args(argv)

    logger = setup_all_logging()
    try:
        registry = build_registry(load_config(args.config))
        if args.command == "tags":
            return cmd_tags(registry, args.image)
        if args.command == "inspect":
            return cmd_inspect(registry, args.image)
        return cmd_transports(registry)
    except ImageTransportError as e:
        logger.error(str(e))
        print(f"✗ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
