"""
GMGN Client

Phase 2 data source: holder/wallet behavioural breakdown that RugCheck does
not provide (phishing, bundler, insider and bluechip holder shares plus
fresh/sniper/smart wallet counts).

Both endpoints wrap their payload as {"code": 0, "msg": "success", "data": {...}}.
"""

import asyncio
import logging
from typing import Dict

from .base_source import BaseDataSource
from .errors import SourceUnavailableError
from .mint import validate_mint

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gmgn.ai"
TOKEN_STAT_PATH = "/api/v1/token_stat/sol/{mint}"
WALLET_TAGS_PATH = "/api/v1/token_wallet_tags_stat/sol/{mint}"


class GMGNClient(BaseDataSource):
    """Async client for the GMGN token holder statistics endpoints."""

    source_name = 'gmgn'

    def __init__(self, config: Dict = None, session=None):
        config = dict(config or {})
        config.setdefault('base_url', DEFAULT_BASE_URL)
        super().__init__(config, session)
        self.user_agent = self.config.get('user_agent', 'Mozilla/5.0 (token-filtering)')

    def _headers(self) -> Dict:
        return {
            'Accept': 'application/json',
            'User-Agent': self.user_agent,
        }

    def _unwrap(self, body, path: str) -> Dict:
        if not isinstance(body, dict):
            raise SourceUnavailableError(self.source_name, f'{path}: unexpected body type {type(body).__name__}')
        if body.get('code', 0) != 0:
            raise SourceUnavailableError(self.source_name, f"{path}: code={body.get('code')} msg={body.get('msg')}")
        data = body.get('data')
        if not isinstance(data, dict):
            raise SourceUnavailableError(self.source_name, f'{path}: missing data object')
        return data

    async def _get_data(self, path_template: str, mint: str) -> Dict:
        path = path_template.format(mint=mint)
        body = await self._get_json(f"{self.base_url}{path}", headers=self._headers(), mint=mint)
        return self._unwrap(body, path)

    async def get_token_stat(self, mint: str) -> Dict:
        """Holder count, bluechip share and top insider/bundler/phishing trader shares (0-1)."""
        mint = validate_mint(mint)
        return await self._cached(f"stat:{mint}", lambda: self._get_data(TOKEN_STAT_PATH, mint))

    async def get_wallet_tags(self, mint: str) -> Dict:
        """Counts of smart, fresh, sniper, bundler, rat-trader and whale wallets."""
        mint = validate_mint(mint)
        return await self._cached(f"tags:{mint}", lambda: self._get_data(WALLET_TAGS_PATH, mint))

    async def get_holder_breakdown(self, mint: str) -> Dict:
        """
        Fetch both endpoints concurrently.

        Returns:
            {'token_stat': {...}, 'wallet_tags': {...}}
        """
        tasks = [
            asyncio.ensure_future(self.get_token_stat(mint)),
            asyncio.ensure_future(self.get_wallet_tags(mint)),
        ]
        try:
            stat, tags = await asyncio.gather(*tasks)
        except Exception:
            # one endpoint failed; the other must not outlive the session
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        logger.info(
            f"[GMGN] 👥 {mint[:16]}... holders={stat.get('holder_count')} "
            f"fresh={tags.get('fresh_wallets')} bundlers={tags.get('bundler_wallets')}"
        )
        return {'token_stat': stat, 'wallet_tags': tags}

    async def fetch(self, mint: str) -> Dict:
        return await self.get_holder_breakdown(mint)
