"""Google Sheets backing store for the contact directory."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from dnicheck.config.settings import DirectoryConfig
from dnicheck.core.errors import DirectoryUnavailable


class GoogleSheetsRowSource:
    """Reads the configured range with a service account, read-only."""

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

    def __init__(self, config: DirectoryConfig) -> None:
        self._config = config

    def _credentials(self) -> service_account.Credentials:
        if self._config.service_account_json:
            try:
                info = json.loads(self._config.service_account_json)
            except ValueError as exc:
                raise DirectoryUnavailable(f"Invalid service account JSON: {exc}") from exc
            return service_account.Credentials.from_service_account_info(info, scopes=self.SCOPES)

        if self._config.service_account_key_file:
            return service_account.Credentials.from_service_account_file(
                self._config.service_account_key_file, scopes=self.SCOPES
            )

        raise DirectoryUnavailable(
            "Google Sheets credentials missing (set DNICHECK_GOOGLE_SERVICE_ACCOUNT_JSON "
            "or DNICHECK_GOOGLE_SERVICE_ACCOUNT_KEY_FILE)"
        )

    async def fetch_rows(self) -> list[list[Any]]:
        def _call() -> list[list[Any]]:  # googleapiclient is blocking
            service = build("sheets", "v4", credentials=self._credentials(), cache_discovery=False)
            try:
                response = (
                    service.spreadsheets()
                    .values()
                    .get(spreadsheetId=self._config.spreadsheet_id, range=self._config.cell_range)
                    .execute()
                )
            except HttpError as exc:
                raise DirectoryUnavailable(f"Google Sheets error: {exc}") from exc
            return response.get("values", [])

        return await asyncio.to_thread(_call)
