"""
TOKEN SCREENER

Orchestrates one screen:

  mint ─► validate ─► RugCheck report  ┐ (concurrent)
                     GMGN breakdown    ┘
        ─► normalize ─► metrics ─► risk policy ─► checklist ─► ScreeningResult

Source failures never raise out of ``screen``: they are recorded in
``result.errors`` and the policy falls back to its fail-safe verdict.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from .checklist import ChecklistTable, build_checklist, render_markdown, summarize
from .errors import InvalidMintError, ScreeningError
from .gmgn_client import GMGNClient
from .metrics import compute_metrics
from .mint import validate_mint
from .normalizer import HolderBreakdown, RugCheckReport, normalize_gmgn, normalize_rugcheck
from .risk_policy import RiskPolicy, RiskVerdict
from .rugcheck_client import RugCheckClient

logger = logging.getLogger(__name__)


@dataclass
class ScreeningResult:
    mint: str
    report: Optional[RugCheckReport] = None
    holders: Optional[HolderBreakdown] = None
    metrics: Dict = field(default_factory=dict)
    verdict: Optional[RiskVerdict] = None
    checklist: List[ChecklistTable] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    screened_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def ok(self) -> bool:
        """True when at least the RugCheck report was obtained."""
        return self.report is not None

    @property
    def raw_report(self) -> Optional[Dict]:
        return self.report.raw if self.report is not None else None

    def checklist_markdown(self) -> str:
        return render_markdown(self.checklist)

    def to_dict(self, include_raw: bool = False) -> Dict:
        summary = summarize(self.checklist) if self.checklist else None
        data = {
            'mint': self.mint,
            'screened_at': self.screened_at,
            'token': {
                'name': self.report.name if self.report else None,
                'symbol': self.report.symbol if self.report else None,
            },
            'verdict': self.verdict.to_dict() if self.verdict else None,
            'metrics': dict(self.metrics),
            'report': self.report.to_dict() if self.report else None,
            'holders': self.holders.to_dict() if self.holders else None,
            'checklist': {
                'have': summary.have if summary else [],
                'missing': summary.missing if summary else [],
                'summary': summary.text if summary else '',
            },
            'errors': dict(self.errors),
        }
        if include_raw:
            data['raw_report'] = self.raw_report
        return data


class TokenScreener:
    """
    Screens Solana memecoins against RugCheck (phase 1) and GMGN (phase 2).

    Usage:
        async with TokenScreener(load_screening_config()) as screener:
            result = await screener.screen(mint)
    """

    def __init__(self, config: Dict = None, rugcheck: RugCheckClient = None,
                 gmgn: GMGNClient = None, policy: RiskPolicy = None, session=None):
        """
        Args:
            config: merged screening config (see config.load_screening_config)
            rugcheck / gmgn / policy: injected components, built from config if omitted
            session: aiohttp session shared by clients built here
        """
        if config is None:
            from config import DEFAULT_SCREENING_CONFIG
            config = DEFAULT_SCREENING_CONFIG
        self.config = config

        gmgn_config = self.config.get('gmgn', {})
        self.gmgn_enabled = gmgn_config.get('enabled', True)

        self.rugcheck = rugcheck or RugCheckClient(self.config.get('rugcheck'), session=session)
        self.gmgn = gmgn or (GMGNClient(gmgn_config, session=session) if self.gmgn_enabled else None)
        self.policy = policy or RiskPolicy(self.config.get('thresholds'), self.config.get('points'))
        self.concurrency = max(1, int(self.config.get('concurrency', 4)))

    async def _fetch_rugcheck(self, mint: str, result: ScreeningResult):
        try:
            raw = await self.rugcheck.get_full_report(mint)
        except ScreeningError as e:
            result.errors['rugcheck'] = str(e)
            logger.warning(f"[SCREENER] ❌ RugCheck failed for {mint[:16]}...: {e}")
            return None
        return normalize_rugcheck(raw, mint)

    async def _fetch_holders(self, mint: str, result: ScreeningResult):
        try:
            data = await self.gmgn.get_holder_breakdown(mint)
        except ScreeningError as e:
            result.errors['gmgn'] = str(e)
            logger.warning(f"[SCREENER] ⚠️ Holder breakdown failed for {mint[:16]}...: {e}")
            return None
        return normalize_gmgn(data.get('token_stat'), data.get('wallet_tags'))

    async def screen(self, mint: str, include_holders: bool = True) -> ScreeningResult:
        """
        Screen a single mint.

        Raises:
            InvalidMintError: mint is not a valid Solana pubkey
        """
        mint = validate_mint(mint)
        result = ScreeningResult(mint=mint)
        logger.info(f"[SCREENER] 🔍 starting rug pull check for {mint}")

        tasks = [self._fetch_rugcheck(mint, result)]
        use_holders = include_holders and self.gmgn is not None
        if use_holders:
            tasks.append(self._fetch_holders(mint, result))

        fetched = await asyncio.gather(*tasks)
        result.report = fetched[0]
        result.holders = fetched[1] if use_holders else None

        result.metrics = compute_metrics(result.report, result.holders)
        result.verdict = self.policy.evaluate(
            result.report, result.holders, result.metrics,
            rugcheck_error=result.errors.get('rugcheck', ''),
        )
        result.checklist = build_checklist(result.report, result.holders, result.metrics)

        logger.info(
            f"[SCREENER] {mint[:16]}... → Score: {result.verdict.score}, Level: {result.verdict.level}"
        )
        return result

    async def screen_many(self, mints: Iterable[str], include_holders: bool = True,
                          concurrency: int = None) -> List[ScreeningResult]:
        """
        Screen several mints with bounded concurrency, results in input order.

        Invalid mints do not abort the batch; they come back with
        ``errors['mint']`` set and no verdict.
        """
        if concurrency is None:
            concurrency = self.concurrency
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        semaphore = asyncio.Semaphore(concurrency)

        async def run(mint):
            async with semaphore:
                try:
                    return await self.screen(mint, include_holders=include_holders)
                except InvalidMintError as e:
                    logger.warning(f"[SCREENER] ⛔ {e}")
                    return ScreeningResult(mint=str(mint).strip(), errors={'mint': str(e)})

        return list(await asyncio.gather(*(run(m) for m in mints)))

    def get_stats(self) -> Dict:
        stats = {'rugcheck': self.rugcheck.get_stats()}
        if self.gmgn is not None:
            stats['gmgn'] = self.gmgn.get_stats()
        return stats

    async def close(self):
        await self.rugcheck.close()
        if self.gmgn is not None:
            await self.gmgn.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
