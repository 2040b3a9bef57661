"""Function publisher create-or-update branching."""

import unittest
from unittest.mock import MagicMock

from aws_fakes import FakeLambda, client_error
from proxy_deploy.aws_client import AWSClient
from proxy_deploy.errors import ErrorKind, RemoteError
from proxy_deploy.function_publisher import publish_function

ROLE = "arn:aws:iam::123456789012:role/lambda_basic_execution"


class PublishFunctionTests(unittest.TestCase):
    def setUp(self):
        self.fake_lambda = FakeLambda()
        self.client = AWSClient("eu-west-1", lambda_client=self.fake_lambda,
                                apigateway_client=MagicMock())

    def _publish(self, code=b"zip-v1"):
        return publish_function(self.client, "cf-md-to-html", ROLE, code,
                                runtime="python3.11", handler="EntriesHandler.lambda_handler")

    def test_creates_function_when_missing(self):
        arn = self._publish()

        self.assertEqual(arn, "arn:aws:lambda:eu-west-1:123456789012:function:cf-md-to-html")
        self.assertEqual(
            self.fake_lambda.calls,
            [("update_function_code", "cf-md-to-html"), ("create_function", "cf-md-to-html")],
        )
        function = self.fake_lambda.functions["cf-md-to-html"]
        self.assertEqual(function["Code"], b"zip-v1")
        self.assertEqual(function["Role"], ROLE)
        self.assertEqual(function["Handler"], "EntriesHandler.lambda_handler")

    def test_updates_existing_function_without_create(self):
        self._publish(b"zip-v1")
        self.fake_lambda.calls.clear()

        arn = self._publish(b"zip-v2")

        self.assertEqual(arn, "arn:aws:lambda:eu-west-1:123456789012:function:cf-md-to-html")
        self.assertEqual(self.fake_lambda.calls, [("update_function_code", "cf-md-to-html")])
        self.assertEqual(self.fake_lambda.functions["cf-md-to-html"]["Code"], b"zip-v2")

    def test_other_errors_propagate(self):
        self.client.lambda_client = MagicMock()
        self.client.lambda_client.update_function_code.side_effect = client_error(
            "AccessDeniedException", "UpdateFunctionCode")

        with self.assertRaises(RemoteError) as ctx:
            self._publish()

        self.assertIs(ctx.exception.kind, ErrorKind.OTHER)
        self.client.lambda_client.create_function.assert_not_called()


if __name__ == "__main__":
    unittest.main()
