"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

Upload a local file to S3 with a SigV4 signed PUT.

Env:
  AWS_ACCESS_KEY_ID
  AWS_SECRET_ACCESS_KEY
  S3_BUCKET           (or --bucket)
  AWS_REGION          (or AWS_DEFAULT_REGION, or --region)

Usage:
    python -m s3_upload_signer ./photo.jpg images/photo.jpg [--content-type image/jpeg]
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence

import requests

from .config import UploadConfig
from .exceptions import MissingConfiguration, MissingCredentials, UploadRejected
from .upload import upload_object


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3_upload_signer",
        description="PUT a local file to S3 using AWS Signature Version 4.",
    )
    parser.add_argument("file", type=pathlib.Path, help="Local file to upload")
    parser.add_argument("key", help="Destination object key")
    parser.add_argument("--bucket", help="Bucket name (default: $S3_BUCKET)")
    parser.add_argument("--region", help="Bucket region (default: $AWS_REGION)")
    parser.add_argument(
        "--content-type", help="Content-Type (default: guessed from the key)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log the signing steps"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = UploadConfig.from_env(bucket=args.bucket, region=args.region)
    except (MissingCredentials, MissingConfiguration) as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2

    try:
        payload = args.file.read_bytes()
    except OSError as e:
        print(f"cannot read {args.file}: {e.strerror}", file=sys.stderr)
        return 2

    try:
        upload_object(config, args.key, payload, content_type=args.content_type)
    except UploadRejected as e:
        print(f"upload rejected: HTTP {e.status_code}", file=sys.stderr)
        print(e.body.decode("utf-8", errors="replace"), file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"upload failed: {e}", file=sys.stderr)
        return 1

    logging.getLogger(__name__).info(
        "Uploaded %s to s3://%s/%s", args.file, config.bucket, args.key
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
