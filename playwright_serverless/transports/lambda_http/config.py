"""Configuration for the Lambda HTTP transport."""

from pydantic import BaseModel, SecretStr


class LambdaHttpConfig(BaseModel):
    """Configuration for the Lambda HTTP transport.

    Defaults target ``sam local start-lambda``. ``invocation_path`` follows the
    Lambda Invoke API and is formatted with the function name.
    """

    api_base_url: str = "http://127.0.0.1:3001"
    invocation_path: str = "/2015-03-31/functions/{function_name}/invocations"
    token: SecretStr | None = None
