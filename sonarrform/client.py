# encoding: utf-8
import threading

import requests
from pyarr.sonarr import SonarrAPI

from sonarrform import logger
from sonarrform.constants import REQUEST_TIMEOUT
from sonarrform.diagnostics import ClientError, OperationCancelled, ResourceNotFound


class Cancellation:
    """Cooperative cancellation handle handed down by the host runtime."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def check(self):
        if self._event.is_set():
            raise OperationCancelled()


class SonarrClient:
    """
    Thin REST wrapper over a pyarr ``SonarrAPI`` instance.

    pyarr owns the session, the base URL and the API key. Requests go straight
    through that session so every status code and body reaches this class:
    anything but a 2xx JSON answer (or an empty 2xx) becomes a ``ClientError``
    carrying the decoded response text.
    """

    def __init__(self, url, api_key, extra_headers=None):
        self.url = url
        self.instance = SonarrAPI(url, api_key)
        logger.register_secret(api_key)

        if extra_headers:
            self.instance.session.headers.update(extra_headers)
            for value in extra_headers.values():
                logger.register_secret(value)

    def list(self, path, params=None, cancel=None):
        result = self._request("GET", path, cancel, params=params)
        return result if isinstance(result, list) else []

    def get(self, path, item_id=None, cancel=None):
        if item_id is not None:
            path = f"{path}/{item_id}"
        return self._request("GET", path, cancel)

    def create(self, path, body, cancel=None):
        return self._request("POST", path, cancel, data=body)

    def update(self, path, item_id, body, cancel=None):
        if item_id is not None:
            path = f"{path}/{item_id}"
        return self._request("PUT", path, cancel, data=body)

    def delete(self, path, item_id, cancel=None):
        self._request("DELETE", f"{path}/{item_id}", cancel)

    def _request(self, method, path, cancel, params=None, data=None):
        if cancel is not None:
            cancel.check()

        url = self.instance._request_url(path, self.instance.ver_uri)
        logger.debug("%s %s", method, path)

        try:
            response = self.instance.session.request(
                method,
                url,
                params=params,
                json=data,
                headers={"X-Api-Key": self.instance.api_key},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.Timeout as err:
            raise ClientError(f"request timed out after {REQUEST_TIMEOUT}s") from err
        except requests.exceptions.RequestException as err:
            raise ClientError(str(err)) from err

        # An answer that arrives after cancellation is discarded
        if cancel is not None:
            cancel.check()

        return self._payload(response)

    @staticmethod
    def _text(response):
        return response.content.decode(response.encoding or "utf-8", errors="replace")

    @classmethod
    def _payload(cls, response):
        if response.status_code == 404:
            raise ResourceNotFound(details=cls._text(response) or None)

        if not response.ok:
            raise ClientError(
                f"{response.status_code} {response.reason}".strip(),
                details=cls._text(response) or None,
                status_code=response.status_code,
            )

        if not response.content.strip():
            return None

        content_type = response.headers.get("Content-Type", "")
        if "json" not in content_type:
            raise ClientError(
                f"unexpected {content_type or 'untyped'} response",
                details=cls._text(response),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as err:
            raise ClientError(f"unable to decode server response: {err}", status_code=response.status_code) from err
