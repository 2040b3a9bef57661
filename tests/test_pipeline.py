"""End-to-end deployment against in-memory AWS fakes."""

import os
import tempfile
import unittest
from unittest.mock import MagicMock

from aws_fakes import ACCOUNT_ID, FakeApiGateway, FakeLambda, FakeSts, client_error
from proxy_deploy.aws_client import AWSClient
from proxy_deploy.config import DeployConfig, load_config
from proxy_deploy.deployment import invoke_url, publish_stage
from proxy_deploy.errors import RemoteError
from proxy_deploy.pipeline import MarkdownProxyDeployer
from proxy_deploy.rest_api import get_or_create_rest_api


class DeploymentTests(unittest.TestCase):
    def test_invoke_url(self):
        self.assertEqual(
            invoke_url("abc123", "eu-west-1", "spaces", "/{spaceId}/entries"),
            "https://abc123.execute-api.eu-west-1.amazonaws.com/spaces/{spaceId}/entries",
        )

    def test_every_publish_creates_a_deployment(self):
        gateway = FakeApiGateway()
        client = AWSClient("eu-west-1", lambda_client=MagicMock(), apigateway_client=gateway)

        first = publish_stage(client, "abc123", "spaces")
        second = publish_stage(client, "abc123", "spaces")

        self.assertNotEqual(first, second)
        self.assertEqual(len(gateway.deployments), 2)


class RestApiTests(unittest.TestCase):
    def test_reuses_api_with_same_name(self):
        gateway = FakeApiGateway()
        gateway.add_rest_api("something-else")
        existing = gateway.add_rest_api("cf-md-to-html")
        client = AWSClient("eu-west-1", lambda_client=MagicMock(), apigateway_client=gateway)

        self.assertEqual(get_or_create_rest_api(client, "cf-md-to-html")["id"], existing["id"])
        self.assertNotIn(("create_rest_api", "cf-md-to-html"), gateway.calls)

    def test_creates_missing_api(self):
        gateway = FakeApiGateway()
        client = AWSClient("eu-west-1", lambda_client=MagicMock(), apigateway_client=gateway)

        api = get_or_create_rest_api(client, "cf-md-to-html")

        self.assertEqual(api["name"], "cf-md-to-html")
        self.assertIn(api["id"], gateway.apis)


class MarkdownProxyDeployerTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.zip_path = os.path.join(self.tmpdir.name, "lambda.zip")
        with open(self.zip_path, "wb") as f:
            f.write(b"PK\x03\x04fake")

        self.fake_lambda = FakeLambda()
        self.gateway = FakeApiGateway()
        self.client = AWSClient("eu-west-1", lambda_client=self.fake_lambda,
                                apigateway_client=self.gateway, sts_client=FakeSts())
        self.config = DeployConfig(region="eu-west-1", account_id=ACCOUNT_ID,
                                   zip_path=self.zip_path)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_first_deployment(self):
        result = MarkdownProxyDeployer(self.config, client=self.client).deploy()

        api_id = result.api_id
        self.assertEqual(
            result.url,
            f"https://{api_id}.execute-api.eu-west-1.amazonaws.com/spaces/{{spaceId}}/entries",
        )
        self.assertEqual(
            result.source_arn,
            f"arn:aws:execute-api:eu-west-1:{ACCOUNT_ID}:{api_id}/*/GET/*/entries",
        )
        function = self.fake_lambda.functions["cf-md-to-html"]
        self.assertEqual(result.function_arn, function["FunctionArn"])
        self.assertEqual(function["Role"], f"arn:aws:iam::{ACCOUNT_ID}:role/lambda_basic_execution")
        self.assertEqual(function["Code"], b"PK\x03\x04fake")

        resources = self.gateway.resources[api_id]
        self.assertEqual(resources["/{spaceId}/entries"]["id"], result.resource_id)
        integration = self.gateway.methods[(api_id, result.resource_id, "GET")]["integration"]
        self.assertIn(function["FunctionArn"], integration["uri"])

        statements = self.fake_lambda.policies["cf-md-to-html"]
        self.assertEqual(len(statements), 1)
        self.assertEqual(statements[0]["Condition"]["ArnLike"]["AWS:SourceArn"], result.source_arn)

        self.assertEqual(self.gateway.deployments[-1]["stageName"], "spaces")
        self.assertEqual(self.gateway.deployments[-1]["id"], result.deployment_id)

    def test_redeploy_is_idempotent(self):
        first = MarkdownProxyDeployer(self.config, client=self.client).deploy()
        self.gateway.calls.clear()
        self.fake_lambda.calls.clear()

        second = MarkdownProxyDeployer(self.config, client=self.client).deploy()

        self.assertEqual(first.api_id, second.api_id)
        self.assertEqual(first.resource_id, second.resource_id)
        self.assertEqual(len(self.gateway.apis), 1)
        self.assertFalse([c for c in self.gateway.calls if c[0] in ("create_resource", "create_rest_api")])
        self.assertNotIn(("create_function", "cf-md-to-html"), self.fake_lambda.calls)
        self.assertEqual(len(self.fake_lambda.policies["cf-md-to-html"]), 1)
        self.assertEqual(len(self.gateway.deployments), 2)

    def test_account_id_resolved_through_sts(self):
        config = DeployConfig(region="eu-west-1", zip_path=self.zip_path)

        deployer = MarkdownProxyDeployer(config, client=self.client)

        self.assertEqual(deployer.config.account_id, ACCOUNT_ID)
        self.assertEqual(deployer.config.lambda_role,
                         f"arn:aws:iam::{ACCOUNT_ID}:role/lambda_basic_execution")

    def test_failure_aborts_remaining_steps(self):
        self.gateway.put_integration = MagicMock(
            side_effect=client_error("BadRequestException", "PutIntegration"))

        with self.assertRaises(RemoteError):
            MarkdownProxyDeployer(self.config, client=self.client).deploy()

        self.assertIn("cf-md-to-html", self.fake_lambda.functions)
        self.assertNotIn("cf-md-to-html", self.fake_lambda.policies)
        self.assertEqual(self.gateway.deployments, [])

    def test_numeric_account_id_from_yaml(self):
        config_path = os.path.join(self.tmpdir.name, "deploy.yaml")
        with open(config_path, "w") as f:
            f.write(f"region: eu-west-1\naccount_id: {ACCOUNT_ID}\nzip_path: {self.zip_path}\n")
        config = load_config(config_path, environ={})

        result = MarkdownProxyDeployer(config, client=self.client).deploy()

        self.assertEqual(
            result.source_arn,
            f"arn:aws:execute-api:eu-west-1:{ACCOUNT_ID}:{result.api_id}/*/GET/*/entries",
        )
        self.assertEqual(len(self.fake_lambda.policies["cf-md-to-html"]), 1)

    def test_client_region_must_match_config(self):
        client = AWSClient("us-east-1", lambda_client=self.fake_lambda,
                           apigateway_client=self.gateway, sts_client=FakeSts())

        with self.assertRaises(ValueError):
            MarkdownProxyDeployer(self.config, client=client).deploy()

        self.assertEqual(self.fake_lambda.calls, [])
        self.assertEqual(self.gateway.deployments, [])

    def test_missing_zip_fails_before_any_remote_call(self):
        config = DeployConfig(region="eu-west-1", account_id=ACCOUNT_ID,
                              zip_path=os.path.join(self.tmpdir.name, "missing.zip"))

        with self.assertRaises(FileNotFoundError):
            MarkdownProxyDeployer(config, client=self.client).deploy()

        self.assertEqual(self.fake_lambda.calls, [])


if __name__ == "__main__":
    unittest.main()
