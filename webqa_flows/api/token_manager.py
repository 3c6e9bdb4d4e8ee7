import base64
import logging
from typing import Dict

import httpx

from webqa_flows.config import Credentials
from webqa_flows.errors import AuthServerError, FlowError, MalformedResponseError, TokenAcquisitionError
from webqa_flows.utils.get_log import GetLog


class TokenManager:
    """Exchanges client credentials for a bearer token (OAuth2 client-credentials grant).

    A new token is requested on every call and nothing is cached. Failures are not
    retried; callers that want retries add them.
    """

    GRANT_TYPE = "client_credentials"
    TOKEN_KEY = "access_token"
    TIMEOUT_SECONDS = 10.0

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @staticmethod
    def basic_auth_header(client_id: str, client_secret: str) -> str:
        encoded = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"

    async def acquire_token(self, credentials: Credentials) -> str:
        logging.info("Requesting Bearer token from Auth server using client credentials.")
        credentials.validate()
        GetLog.register_secret(credentials.client_secret)

        headers = {
            "Authorization": self.basic_auth_header(credentials.client_id, credentials.client_secret),
            "Content-Type": "application/x-www-form-urlencoded",
        }

        try:
            logging.info(f"Sending POST request to Auth URL: {credentials.token_endpoint} for token.")
            response = await self.client.post(
                credentials.token_endpoint,
                headers=headers,
                data={"grant_type": self.GRANT_TYPE},
                timeout=self.TIMEOUT_SECONDS,
            )
            logging.debug(f"Token response received with status {response.status_code}.")

            if not response.is_success:
                raise AuthServerError(response.status_code, response.reason_phrase or "Unknown Error")

            body = response.json()
            token = body.get(self.TOKEN_KEY) if isinstance(body, dict) else None
            if not isinstance(token, str) or len(token.strip()) == 0:
                raise MalformedResponseError("Access token is missing or invalid in the response.")

        except FlowError as e:
            logging.error(str(e))
            raise
        except Exception as e:
            error_msg = f"Error occurred while retrieving Bearer token: {type(e).__name__}: {e}"
            logging.error(error_msg)
            raise TokenAcquisitionError(error_msg) from e

        logging.info("Bearer token retrieved successfully.")
        return token

    async def authorization_headers(self, credentials: Credentials) -> Dict[str, str]:
        token = await self.acquire_token(credentials)
        return {"Authorization": f"Bearer {token}"}
