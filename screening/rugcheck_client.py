"""
RugCheck API Client

Phase 1 data source: the full token report (risk score, risk flags, top
holders, markets/LP lock, creator info, authorities).
"""

import logging
from typing import Dict

from .base_source import BaseDataSource
from .errors import SourceUnavailableError
from .mint import validate_mint

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.rugcheck.xyz"


class RugCheckClient(BaseDataSource):
    """Async client for https://api.rugcheck.xyz (v1 token endpoints)."""

    source_name = 'rugcheck'

    def __init__(self, config: Dict = None, session=None):
        config = dict(config or {})
        config.setdefault('base_url', DEFAULT_BASE_URL)
        super().__init__(config, session)
        self.api_key = (self.config.get('api_key') or '').strip()

    def _headers(self) -> Dict:
        headers = {'Accept': 'application/json'}
        if self.api_key:
            headers['X-API-KEY'] = self.api_key
        return headers

    async def get_full_report(self, mint: str) -> Dict:
        """
        GET /v1/tokens/{mint}/report

        Returns the raw report dict, cached per mint.
        """
        mint = validate_mint(mint)

        async def load():
            url = f"{self.base_url}/v1/tokens/{mint}/report"
            data = await self._get_json(url, headers=self._headers(), mint=mint)
            if not isinstance(data, dict):
                raise SourceUnavailableError(self.source_name, f'unexpected report type {type(data).__name__}')
            logger.info(f"[RUGCHECK] 🔐 report {mint[:16]}... score={data.get('score')}")
            return data

        return await self._cached(f"report:{mint}", load)

    async def get_report_summary(self, mint: str) -> Dict:
        """GET /v1/tokens/{mint}/report/summary (score, risks, lpLockedPct only)."""
        mint = validate_mint(mint)

        async def load():
            url = f"{self.base_url}/v1/tokens/{mint}/report/summary"
            data = await self._get_json(url, headers=self._headers(), mint=mint)
            if not isinstance(data, dict):
                raise SourceUnavailableError(self.source_name, f'unexpected summary type {type(data).__name__}')
            return data

        return await self._cached(f"summary:{mint}", load)

    async def fetch(self, mint: str) -> Dict:
        return await self.get_full_report(mint)
