#!/usr/bin/env python3
"""
Deploy the Contentful markdown-to-HTML proxy

This script:
1. Creates or updates the cf-md-to-html Lambda function from lambda.zip
2. Finds or creates the cf-md-to-html REST API
3. Creates the /{spaceId}/entries resources that are missing
4. Replaces the GET method and its Lambda integration
5. Grants API Gateway permission to invoke the function
6. Deploys the API to the 'spaces' stage

Usage: python deploy-md-proxy.py [--region REGION] [--stage STAGE] [--zip ZIP]
"""

import sys

from proxy_deploy.cli import main


if __name__ == "__main__":
    sys.exit(main())
