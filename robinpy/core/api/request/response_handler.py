"""Response handler for API responses."""
import json
from typing import Any, Type, Union

from ..async_client import TransportResult
from ...exceptions import NetworkError, ServerError

# Keys Robinhood uses to describe a rejection, in order of preference.
MESSAGE_KEYS = ('detail', 'error_description', 'error', 'non_field_errors')


class ResponseHandler:
    """Translates TransportResults into payloads or typed errors."""

    @staticmethod
    def parse_json(body: Union[bytes, str]) -> Any:
        """Parses a JSON body; an empty body yields an empty dict."""
        if isinstance(body, bytes):
            body = body.decode('utf-8', errors='replace')
        if not body.strip():
            return {}
        try:
            return json.loads(body)
        except ValueError:
            raise ServerError("Empty or invalid JSON response", body=body)

    @staticmethod
    def extract_message(body: Union[bytes, str]) -> str:
        """Extracts the server-provided message from an error body."""
        if isinstance(body, bytes):
            body = body.decode('utf-8', errors='replace')
        try:
            data = json.loads(body)
        except ValueError:
            return body.strip()

        if isinstance(data, dict):
            for key in MESSAGE_KEYS:
                value = data.get(key)
                if isinstance(value, list) and value:
                    value = value[0]
                if value:
                    return str(value)
        return body.strip()

    @staticmethod
    def translate(
        result: TransportResult,
        error_cls: Type[ServerError] = ServerError,
        parse_json: bool = True
    ) -> Any:
        """
        Maps a TransportResult to a payload.

        Args:
            result: Transport outcome
            error_cls: ServerError subclass raised on a non-success status
            parse_json: Parse the body as JSON, otherwise return raw bytes

        Returns:
            Parsed payload or raw bytes

        Raises:
            NetworkError: If the transport failed
            ServerError: (or error_cls) if the server rejected the request
        """
        if result.failed:
            raise NetworkError(f"Network error: {result.error}") from result.error

        if not result.ok:
            message = ResponseHandler.extract_message(result.body)
            raise error_cls(
                message or f"HTTP {result.status}",
                status=result.status,
                body=result.body
            )

        if parse_json:
            return ResponseHandler.parse_json(result.body)
        return result.body
