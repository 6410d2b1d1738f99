"""
Derived screening metrics.

Every metric is None when one of its inputs is missing so the checklist can
report it as outstanding instead of showing a misleading zero.
"""

from typing import Dict, Optional

from safe_math import safe_div, safe_pct

from .normalizer import HolderBreakdown, RugCheckReport, SYSTEM_PROGRAM

# knownAccounts types that hold tokens on behalf of the pool, not a person
NON_HOLDER_ACCOUNT_TYPES = ('AMM', 'LOCKER')


def top10_holders_pct(report: Optional[RugCheckReport]) -> Optional[float]:
    """Share of supply held by the 10 largest real holders (pools and lockers excluded)."""
    if report is None or report.top_holders is None:
        return None

    known = report.known_accounts or {}
    real_holders = [
        h for h in report.top_holders
        if (known.get(h.owner) or {}).get('type', '') not in NON_HOLDER_ACCOUNT_TYPES
        and (known.get(h.address) or {}).get('type', '') not in NON_HOLDER_ACCOUNT_TYPES
        and h.owner != SYSTEM_PROGRAM
    ]
    return sum(h.pct for h in real_holders[:10])


def market_cap_usd(report: Optional[RugCheckReport]) -> Optional[float]:
    """price * supply / 10**decimals"""
    if report is None or report.price is None or report.supply is None or report.decimals is None:
        return None
    return report.price * (report.supply / (10 ** report.decimals))


def holder_count(report: Optional[RugCheckReport], holders: Optional[HolderBreakdown]) -> Optional[int]:
    if report is not None and report.total_holders is not None:
        return report.total_holders
    if holders is not None:
        return holders.holder_count
    return None


def compute_metrics(report: Optional[RugCheckReport], holders: Optional[HolderBreakdown] = None) -> Dict:
    """
    Compute all derived fields.

    Returns:
        dict with top10_holders_pct, market_cap_usd, holder_count,
        market_cap_per_holder, creator_balance_pct, fresh_wallet_ratio,
        bundled_wallet_ratio
    """
    count = holder_count(report, holders)
    mcap = market_cap_usd(report)

    creator_pct = None
    if report is not None:
        creator_pct = safe_pct(report.creator_balance, report.supply)

    fresh_ratio = None
    bundled_ratio = None
    if holders is not None:
        fresh_ratio = safe_div(holders.fresh_wallets, count)
        bundled_ratio = safe_div(holders.bundler_wallets, count)

    return {
        'top10_holders_pct': top10_holders_pct(report),
        'market_cap_usd': mcap,
        'holder_count': count,
        'market_cap_per_holder': safe_div(mcap, count),
        'creator_balance_pct': creator_pct,
        'fresh_wallet_ratio': fresh_ratio,
        'bundled_wallet_ratio': bundled_ratio,
    }
