# src/captionguard/clients/dify.py
"""Async client for the Dify chat app that drafts captions.

Create mode uploads the reference files, then sends the fixed trigger query
with the planning inputs. Edit mode sends the user's instruction on the
existing conversation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from captionguard.config import CaptionGuardConfig, config
from captionguard.core.errors import DifyApiError
from captionguard.core.logging import get_logger
from captionguard.models.caption import CaptionAnswer, CaptionInputs, ReferenceFile

logger = get_logger(__name__)

CREATE_QUERY = "キャプション生成"
CONFIG_ERROR_MESSAGE = "API設定が不完全です。環境変数を確認してください。"


def build_inputs(
    inputs: CaptionInputs | None, reference_documents: list[dict[str, str]] | None = None
) -> dict[str, Any]:
    """Workflow inputs; ``reference_documents`` is always a list."""
    inputs = inputs or CaptionInputs()
    payload: dict[str, Any] = inputs.model_dump()
    payload["reference_documents"] = list(reference_documents or [])
    return payload


class DifyClient:
    """Thin wrapper over the Dify ``/files/upload`` and ``/chat-messages`` APIs."""

    def __init__(
        self,
        settings: CaptionGuardConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or config
        self._transport = transport

    @property
    def configured(self) -> bool:
        dify = self.settings.dify
        return bool(dify.api_endpoint and dify.api_key)

    def _require_config(self) -> None:
        if not self.configured:
            raise DifyApiError(500, "CONFIG_ERROR", CONFIG_ERROR_MESSAGE)

    def _client(self) -> httpx.AsyncClient:
        dify = self.settings.dify
        return httpx.AsyncClient(
            base_url=dify.api_endpoint.rstrip("/"),
            headers={"Authorization": f"Bearer {dify.api_key}"},
            timeout=dify.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response, default_code: str, label: str) -> None:
        if response.is_success:
            return
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        raise DifyApiError(
            response.status_code,
            data.get("code") or default_code,
            data.get("message") or f"{label}: {response.reason_phrase}",
        )

    @staticmethod
    def _json_body(response: httpx.Response, label: str) -> dict[str, Any]:
        """Decode a success body, which must be a JSON object."""
        try:
            data = response.json()
        except ValueError as exc:
            raise DifyApiError(500, "NETWORK_ERROR", f"{label}: invalid JSON response") from exc
        if not isinstance(data, dict):
            raise DifyApiError(500, "NETWORK_ERROR", f"{label}: unexpected response body")
        return data

    async def _upload(self, client: httpx.AsyncClient, file: ReferenceFile) -> str:
        response = await client.post(
            "/files/upload",
            files={"file": (file.filename, file.content, file.content_type)},
            data={"user": self.settings.dify.user},
        )
        self._raise_for_status(response, "UPLOAD_ERROR", "ファイルアップロードエラー")
        file_id = self._json_body(response, "ファイルアップロードエラー").get("id")
        if not file_id or not isinstance(file_id, str):
            raise DifyApiError(
                500, "UPLOAD_ERROR", f"ファイルアップロードエラー: {file.filename} のIDがありません"
            )
        logger.debug("Uploaded %s as %s", file.filename, file_id)
        return file_id

    async def _chat(self, client: httpx.AsyncClient, body: dict[str, Any]) -> CaptionAnswer:
        response = await client.post("/chat-messages", json=body)
        self._raise_for_status(response, "UNKNOWN_ERROR", "APIエラー")
        data = self._json_body(response, "APIエラー")
        return CaptionAnswer(
            answer=data.get("answer") or "",
            conversation_id=data.get("conversation_id") or "",
        )

    async def upload_file(self, file: ReferenceFile) -> str:
        """Upload one reference file and return its upload id.

        Raises
        ------
        DifyApiError
            ``CONFIG_ERROR`` when unconfigured, the upstream status and code
            on an error response, ``NETWORK_ERROR`` on transport failure.
        """
        self._require_config()
        try:
            async with self._client() as client:
                return await self._upload(client, file)
        except httpx.RequestError as exc:
            raise DifyApiError(500, "NETWORK_ERROR", str(exc)) from exc

    async def run_workflow(
        self, inputs: CaptionInputs | None, files: Sequence[ReferenceFile] = ()
    ) -> CaptionAnswer:
        """Create mode: upload ``files`` and draft a new caption."""
        self._require_config()
        try:
            async with self._client() as client:
                prepared = [
                    {
                        "type": file.dify_type,
                        "transfer_method": "local_file",
                        "upload_file_id": await self._upload(client, file),
                    }
                    for file in files
                ]
                body: dict[str, Any] = {
                    "inputs": build_inputs(inputs, prepared),
                    "query": CREATE_QUERY,
                    "response_mode": "blocking",
                    "user": self.settings.dify.user,
                }
                # Also exposed to the app as sys.files
                if prepared:
                    body["files"] = prepared
                logger.info("Requesting caption draft with %d reference files", len(prepared))
                return await self._chat(client, body)
        except httpx.RequestError as exc:
            raise DifyApiError(500, "NETWORK_ERROR", str(exc)) from exc

    async def send_chat_message(
        self,
        query: str,
        conversation_id: str | None = None,
        inputs: CaptionInputs | None = None,
    ) -> CaptionAnswer:
        """Edit mode: apply ``query`` to the caption in ``conversation_id``."""
        self._require_config()
        body: dict[str, Any] = {
            "inputs": build_inputs(inputs),
            "query": query,
            "response_mode": "blocking",
            "user": self.settings.dify.user,
        }
        if conversation_id:
            body["conversation_id"] = conversation_id
        try:
            async with self._client() as client:
                logger.info("Requesting caption revision (conversation=%s)", conversation_id)
                return await self._chat(client, body)
        except httpx.RequestError as exc:
            raise DifyApiError(500, "NETWORK_ERROR", str(exc)) from exc


__all__ = ["CREATE_QUERY", "build_inputs", "DifyClient"]
