"""
FCM Push Gateway - Firebase Cloud Messaging HTTP v1 adapter.

Guidelines:
- One httpx.AsyncClient per fan-out, opened by connect() and closed on exit
- POST {endpoint}/projects/{project_id}/messages:send with a Bearer token
- dry_run maps to FCM's validate_only (the request is checked, nothing delivered)
- Error mapping:
    404 / UNREGISTERED / INVALID_ARGUMENT on the token → InvalidDeviceTokenError
    any other HTTP error or transport failure          → PushGatewayError
    a 2xx reply that is not a JSON object              → PushGatewayError

Payload (per device):
    {
      "message": {
        "token": "<fcmToken>",
        "notification": {"title": ..., "body": ...},
        "data": {"conversationId": ..., "sender": "<json>", "message": ...},
        "apns": {
          "headers": {"apns-priority": "10"},
          "payload": {"aps": {"sound": "default", "badge": 0}}
        }
      }
    }
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from groupchat.domain.exceptions import InvalidDeviceTokenError, PushGatewayError
from groupchat.domain.ports.push_gateway import (
    PushGateway,
    PushNotification,
    PushSession,
)

logger = logging.getLogger(__name__)

_INVALID_TOKEN_CODES = {"UNREGISTERED", "INVALID_ARGUMENT"}


def build_fcm_message(device_token: str, notification: PushNotification) -> dict:
    return {
        "token": device_token,
        "notification": {"title": notification.title, "body": notification.body},
        "data": {key: str(value) for key, value in notification.data.items()},
        "apns": {
            "headers": {"apns-priority": "10"},
            "payload": {"aps": {"sound": "default", "badge": 0}},
        },
    }


def _json_object(response: httpx.Response) -> Optional[dict]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _error_code(response: httpx.Response) -> Optional[str]:
    """FCM puts the machine-readable code in error.details[].errorCode, else error.status."""
    error = (_json_object(response) or {}).get("error")
    if not isinstance(error, dict):
        return None
    for detail in error.get("details", []):
        if isinstance(detail, dict) and detail.get("errorCode"):
            return detail["errorCode"]
    return error.get("status")


class FcmPushSession(PushSession):
    def __init__(self, client: httpx.AsyncClient, send_url: str):
        self._client = client
        self._send_url = send_url

    async def send(
        self, device_token: str, notification: PushNotification, dry_run: bool = False
    ) -> str:
        body = {"message": build_fcm_message(device_token, notification)}
        if dry_run:
            body["validate_only"] = True

        try:
            response = await self._client.post(self._send_url, json=body)
        except httpx.HTTPError as e:
            raise PushGatewayError(f"FCM request failed: {e}") from e

        if response.status_code >= 400:
            code = _error_code(response)
            detail = f"FCM error ({response.status_code} {code}): {response.text}"
            if response.status_code == 404 or code in _INVALID_TOKEN_CODES:
                raise InvalidDeviceTokenError(detail)
            raise PushGatewayError(detail)

        reply = _json_object(response)
        if reply is None:
            raise PushGatewayError(
                f"FCM returned a non-JSON reply ({response.status_code}): {response.text}"
            )
        return str(reply.get("name", ""))


class FcmPushGateway(PushGateway):
    def __init__(
        self,
        project_id: str,
        access_token: str,
        endpoint: str = "https://fcm.googleapis.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not project_id:
            raise ValueError("FCM_PROJECT_ID is required for the fcm push backend")
        self._send_url = f"{endpoint.rstrip('/')}/projects/{project_id}/messages:send"
        self._access_token = access_token
        self._timeout = timeout
        self._transport = transport

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[PushSession]:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers={"Authorization": f"Bearer {self._access_token}"},
            transport=self._transport,
        ) as client:
            logger.debug(f"[Push] FCM session opened for {self._send_url}")
            yield FcmPushSession(client, self._send_url)
        logger.debug("[Push] FCM session closed")
