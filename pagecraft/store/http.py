"""
HTTP block store for pagecraft.

Talks to the store's public REST API with httpx. Errors are wrapped in
StoreError with the decoded error body attached; requests are not retried.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import config
from .base import BlockStore, StoreError, normalize_schema


class HttpBlockStore(BlockStore):
    """
    Block store backed by the REST API.
    """

    def __init__(self, token: str, api_base: Optional[str] = None,
                 api_version: Optional[str] = None, timeout: Optional[float] = None,
                 client: Optional[httpx.Client] = None):
        """
        Initialize the store.

        Args:
            token: Integration token sent as a bearer token
            api_base: API base URL (defaults to config value)
            api_version: API version header (defaults to config value)
            timeout: Request timeout in seconds (defaults to config value)
            client: Preconfigured httpx client, mainly for tests
        """
        self.api_base = (api_base or config.api_base).rstrip('/')
        self.api_version = api_version or config.api_version
        self.page_size = config.page_size
        headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": self.api_version,
            "Content-Type": "application/json",
        }
        if client is not None:
            client.headers.update(headers)
            if not str(client.base_url):
                client.base_url = self.api_base
            self.client = client
        else:
            self.client = httpx.Client(
                base_url=self.api_base,
                headers=headers,
                timeout=timeout or config.store_timeout,
            )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.client.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a request and decode the JSON response.

        Raises:
            StoreError: If the store rejects the request or cannot be reached
        """
        try:
            response = self.client.request(method, path, json=json, params=params)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            try:
                detail = e.response.json()
            except ValueError:
                detail = {"message": e.response.text}
            message = detail.get("message") or str(e)
            logging.error(f"Store request {method} {path} failed ({e.response.status_code}): {message}")
            raise StoreError(message, status=e.response.status_code,
                             code=detail.get("code"), detail=detail) from e

        except httpx.RequestError as e:
            logging.error(f"Store request {method} {path} failed: {e}")
            raise StoreError(f"Failed to reach store: {e}") from e

    def list_children(self, container_id: str) -> List[Dict[str, Any]]:
        blocks: List[Dict[str, Any]] = []
        params: Dict[str, Any] = {"page_size": self.page_size}

        while True:
            data = self._request("GET", f"/v1/blocks/{container_id}/children", params=params)
            blocks.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
            params = {"page_size": self.page_size, "start_cursor": cursor}

        logging.debug(f"Listed {len(blocks)} children of {container_id}")
        return blocks

    def append_children(self, container_id: str, blocks: List[Dict[str, Any]],
                        insert_after: Optional[str] = None) -> List[Dict[str, Any]]:
        body: Dict[str, Any] = {"children": blocks}
        if insert_after:
            body["after"] = insert_after
        data = self._request("PATCH", f"/v1/blocks/{container_id}/children", json=body)
        return data.get("results", [])

    def patch_block(self, block_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/v1/blocks/{block_id}", json=fields)

    def fetch_schema(self, source_id: str) -> Dict[str, Dict[str, Any]]:
        data = self._request("GET", f"/v1/data_sources/{source_id}")
        return normalize_schema(data.get("properties") or {})

    def delete_block(self, block_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/v1/blocks/{block_id}")

    def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v1/blocks/{block_id}")

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v1/pages/{page_id}")

    def create_page(self, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/v1/pages", json=body)

    def update_page(self, page_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/v1/pages/{page_id}", json=body)
