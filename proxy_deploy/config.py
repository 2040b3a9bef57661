"""
Deployment configuration.

Values are layered: module defaults, then an optional YAML file, then
environment variables (a ``.env`` file is loaded first), then whatever the
caller passes explicitly (the CLI flags).
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Configuration constants
DEFAULT_REGION = "eu-west-1"
API_NAME = LAMBDA_NAME = "cf-md-to-html"
RUNTIME = "python3.11"
HANDLER = "EntriesHandler.lambda_handler"
ZIP_PATH = "lambda.zip"

# API Gateway always puts the stage first in the URL. Naming the stage
# 'spaces' makes the proxy URL look like the Delivery API one:
# /spaces/{spaceId}/entries
DEPLOYMENT_STAGE = "spaces"
RESOURCE_PATH = "/{spaceId}/entries"

# Default role AWS creates along with a Lambda in the console
ROLE_TEMPLATE = "arn:aws:iam::{account_id}:role/lambda_basic_execution"

# Environment variable -> DeployConfig field
ENV_VARS = {
    "AWS_DEFAULT_REGION": "region",
    "AWS_ACCOUNT_ID": "account_id",
    "LAMBDA_ROLE": "lambda_role",
    "LAMBDA_ZIP": "zip_path",
}


@dataclass(frozen=True)
class DeployConfig:
    region: str = DEFAULT_REGION
    account_id: Optional[str] = None
    api_name: str = API_NAME
    lambda_name: str = LAMBDA_NAME
    lambda_role: Optional[str] = None
    runtime: str = RUNTIME
    handler: str = HANDLER
    stage: str = DEPLOYMENT_STAGE
    resource_path: str = RESOURCE_PATH
    zip_path: str = ZIP_PATH

    def with_account(self, account_id: str) -> 'DeployConfig':
        """Fill in the account id and the role derived from it."""
        return replace(
            self,
            account_id=account_id,
            lambda_role=self.lambda_role or ROLE_TEMPLATE.format(account_id=account_id),
        )

    def read_zip(self) -> bytes:
        zip_file = Path(self.zip_path)
        if not zip_file.exists():
            raise FileNotFoundError(f"Lambda package not found: {zip_file}")
        return zip_file.read_bytes()


def _load_yaml(path: str) -> Dict[str, Any]:
    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, 'r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping")
    return data


def _as_str(key: str, value: Any) -> Optional[str]:
    """
    Every setting is a string. YAML reads an unquoted account id as an int,
    so plain numbers are turned back into text; anything else is rejected.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"Config key {key} must be a string, got {type(value).__name__}")


def load_config(config_file: Optional[str] = None,
                environ: Optional[Dict[str, str]] = None,
                **overrides: Any) -> DeployConfig:
    """
    Build a DeployConfig from defaults, YAML, environment and overrides.

    ``None`` overrides are ignored so argparse defaults can be passed through.
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    known = {f.name for f in fields(DeployConfig)}
    values: Dict[str, Any] = {}

    if config_file:
        for key, value in _load_yaml(config_file).items():
            if key not in known:
                raise ValueError(f"Unknown config key: {key}")
            values[key] = _as_str(key, value)

    for env_name, field_name in ENV_VARS.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]

    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown config key: {key}")
        if value is not None:
            values[key] = _as_str(key, value)

    return DeployConfig(**values)
