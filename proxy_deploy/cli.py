"""
Command line entry point for deploying the markdown proxy.

Usage: md-proxy-deploy [--region REGION] [--stage STAGE] [--zip lambda.zip]
"""

import argparse
import logging
import sys
from typing import List, Optional

from proxy_deploy.config import load_config
from proxy_deploy.pipeline import MarkdownProxyDeployer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Deploy the Contentful markdown-to-HTML proxy to AWS')
    parser.add_argument('--config',
                        help='YAML file with deployment settings')
    parser.add_argument('--region',
                        help='AWS region (default: AWS_DEFAULT_REGION or eu-west-1)')
    parser.add_argument('--stage',
                        help='Deployment stage (default: spaces)')
    parser.add_argument('--account-id', dest='account_id',
                        help='AWS account ID (default: AWS_ACCOUNT_ID or the caller identity)')
    parser.add_argument('--api-name', dest='api_name',
                        help='REST API name (default: cf-md-to-html)')
    parser.add_argument('--zip', dest='zip_path',
                        help='Path to the Lambda zip package (default: lambda.zip)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            args.config,
            region=args.region,
            stage=args.stage,
            account_id=args.account_id,
            api_name=args.api_name,
            zip_path=args.zip_path,
        )
        MarkdownProxyDeployer(config).deploy()
        return 0

    except Exception:
        logger.exception("❌ Deployment failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
