"""
REPORT NORMALIZER

Converts raw RugCheck and GMGN payloads into typed records so metrics,
the risk policy and the checklist never touch source-specific keys.

Missing fields stay None: "the source did not say" must remain
distinguishable from zero.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from safe_math import to_float, to_int

SYSTEM_PROGRAM = '11111111111111111111111111111111'
AUTHORITY_RISK_KEYWORDS = ('Mint', 'Freeze')


@dataclass
class RiskFlag:
    name: str
    level: str = 'info'
    description: str = ''
    score: int = 0
    value: str = ''


@dataclass
class HolderShare:
    address: str
    owner: str
    pct: float
    insider: bool = False


@dataclass
class RugCheckReport:
    """Phase 1 fields from the RugCheck full report."""
    mint: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    score: Optional[int] = None
    score_normalised: Optional[int] = None
    risks: Optional[List[RiskFlag]] = None
    top_holders: Optional[List[HolderShare]] = None
    total_holders: Optional[int] = None
    lp_locked_pct: Optional[float] = None
    lp_burned_pct: Optional[float] = None
    total_market_liquidity: Optional[float] = None
    creator: Optional[str] = None
    creator_balance: Optional[int] = None
    supply: Optional[int] = None
    decimals: Optional[int] = None
    price: Optional[float] = None
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None
    mint_authority_known: bool = False
    freeze_authority_known: bool = False
    rugged: bool = False
    insiders_detected: Optional[int] = None
    known_accounts: Dict[str, Dict] = field(default_factory=dict)
    market_count: int = 0
    raw: Dict = field(default_factory=dict, repr=False)

    @property
    def lp_safe_pct(self) -> Optional[float]:
        """Locked plus burned LP; None when the market states neither."""
        if self.lp_locked_pct is None and self.lp_burned_pct is None:
            return None
        return (self.lp_locked_pct or 0.0) + (self.lp_burned_pct or 0.0)

    def danger_risks(self) -> List[RiskFlag]:
        return [r for r in (self.risks or []) if r.level in ('danger', 'critical')]

    def to_dict(self) -> Dict:
        data = asdict(self)
        data.pop('raw', None)
        return data


@dataclass
class HolderBreakdown:
    """Phase 2 fields from the GMGN-style holder/wallet breakdown (percentages 0-100)."""
    holder_count: Optional[int] = None
    phishing_pct: Optional[float] = None
    bundler_pct: Optional[float] = None
    insider_pct: Optional[float] = None
    bluechip_pct: Optional[float] = None
    bluechip_count: Optional[int] = None
    fresh_wallets: Optional[int] = None
    sniper_wallets: Optional[int] = None
    smart_wallets: Optional[int] = None
    bundler_wallets: Optional[int] = None
    insider_wallets: Optional[int] = None
    whale_wallets: Optional[int] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def _market_depth(market: Dict) -> float:
    lp = market.get('lp') or {}
    return (to_float(lp.get('baseUSD'), 0.0) or 0.0) + (to_float(lp.get('quoteUSD'), 0.0) or 0.0)


def _lp_pct(market: Dict, key: str) -> Optional[float]:
    """Read an LP share from market.lp first, then from the market itself."""
    lp = market.get('lp') or {}
    value = lp.get(key)
    if value is None:
        value = market.get(key)
    return to_float(value)


def _deepest_market(markets: List[Dict]) -> Optional[Dict]:
    """Market with the most liquidity; first listed when depth is unknown."""
    if not markets:
        return None
    best = max(markets, key=_market_depth)
    if _market_depth(best) == 0:
        return markets[0]
    return best


def _parse_risks(raw_risks) -> Optional[List[RiskFlag]]:
    if raw_risks is None:
        return None
    risks = []
    for r in raw_risks:
        if not isinstance(r, dict):
            continue
        risks.append(RiskFlag(
            name=r.get('name') or 'Unknown',
            level=(r.get('level') or 'info').lower(),
            description=r.get('description') or '',
            score=to_int(r.get('score'), 0),
            value=str(r.get('value') or ''),
        ))
    return risks


def _parse_holders(raw_holders) -> Optional[List[HolderShare]]:
    if raw_holders is None:
        return None
    holders = []
    for h in raw_holders:
        if not isinstance(h, dict):
            continue
        holders.append(HolderShare(
            address=h.get('address') or '',
            owner=h.get('owner') or '',
            pct=to_float(h.get('pct'), 0.0),
            insider=bool(h.get('insider', False)),
        ))
    return holders


def normalize_rugcheck(raw: Dict, mint: str = '') -> RugCheckReport:
    """
    Normalize a RugCheck /v1/tokens/{mint}/report body.

    Args:
        raw: decoded JSON report
        mint: requested mint, used when the body lacks one
    """
    raw = raw or {}
    token = raw.get('token') or {}
    meta = raw.get('tokenMeta') or {}
    markets = [m for m in (raw.get('markets') or []) if isinstance(m, dict)]
    main_market = _deepest_market(markets)

    insiders = raw.get('graphInsidersDetected')
    if insiders is None and raw.get('insiderNetworks') is not None:
        insiders = len(raw.get('insiderNetworks') or [])

    return RugCheckReport(
        mint=raw.get('mint') or mint,
        name=meta.get('name') or None,
        symbol=meta.get('symbol') or None,
        score=to_int(raw.get('score')),
        score_normalised=to_int(raw.get('score_normalised')),
        risks=_parse_risks(raw.get('risks')),
        top_holders=_parse_holders(raw.get('topHolders')),
        total_holders=to_int(raw.get('totalHolders')),
        lp_locked_pct=_lp_pct(main_market, 'lpLockedPct') if main_market else None,
        lp_burned_pct=_lp_pct(main_market, 'lpBurnedPct') if main_market else None,
        total_market_liquidity=to_float(raw.get('totalMarketLiquidity')),
        creator=raw.get('creator') or None,
        creator_balance=to_int(raw.get('creatorBalance')),
        supply=to_int(token.get('supply')),
        decimals=to_int(token.get('decimals')),
        price=to_float(raw.get('price')),
        mint_authority=token.get('mintAuthority') or None,
        freeze_authority=token.get('freezeAuthority') or None,
        mint_authority_known='mintAuthority' in token,
        freeze_authority_known='freezeAuthority' in token,
        rugged=bool(raw.get('rugged', False)),
        insiders_detected=to_int(insiders),
        known_accounts=raw.get('knownAccounts') or {},
        market_count=len(markets),
        raw=raw,
    )


def _fraction_to_pct(value) -> Optional[float]:
    fraction = to_float(value)
    # 0.2 * 100 is 20.000000000000004
    return round(fraction * 100, 6) if fraction is not None else None


def normalize_gmgn(token_stat: Dict = None, wallet_tags: Dict = None) -> HolderBreakdown:
    """
    Normalize GMGN token_stat and token_wallet_tags_stat data objects.

    GMGN reports trader shares as 0-1 fractions; they are stored as 0-100.
    """
    stat = token_stat or {}
    tags = wallet_tags or {}

    return HolderBreakdown(
        holder_count=to_int(stat.get('holder_count')),
        phishing_pct=_fraction_to_pct(stat.get('top_entrapment_trader_percentage')),
        bundler_pct=_fraction_to_pct(stat.get('top_bundler_trader_percentage')),
        insider_pct=_fraction_to_pct(stat.get('top_rat_trader_percentage')),
        bluechip_pct=_fraction_to_pct(stat.get('bluechip_owner_percentage')),
        bluechip_count=to_int(stat.get('bluechip_owner_count')),
        fresh_wallets=to_int(tags.get('fresh_wallets')),
        sniper_wallets=to_int(tags.get('sniper_wallets')),
        smart_wallets=to_int(tags.get('smart_wallets')),
        bundler_wallets=to_int(tags.get('bundler_wallets')),
        insider_wallets=to_int(tags.get('rat_trader_wallets')),
        whale_wallets=to_int(tags.get('whale_wallets')),
    )


def is_authority_risk(risk: RiskFlag) -> bool:
    return any(keyword in risk.name for keyword in AUTHORITY_RISK_KEYWORDS)
