"""
Rug-risk scoring policy.

Additive: start from RugCheck's normalised score and add points for every
red flag found in the report, the derived metrics and (when available) the
holder breakdown. 0 is clean, 100 is certain rug.

Levels: score <= safe_max -> SAFE, <= warn_max -> WARN, else FAIL.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from safe_math import clamp

from .normalizer import HolderBreakdown, RugCheckReport, is_authority_risk

logger = logging.getLogger(__name__)

SAFE = 'SAFE'
WARN = 'WARN'
FAIL = 'FAIL'

DEFAULT_BASE_SCORE = 50

DEFAULT_THRESHOLDS = {
    "safe_max": 30,
    "warn_max": 60,
    "top10_warn_pct": 60,
    "top10_fail_pct": 80,
    "min_lp_locked_pct": 50,
    "max_creator_balance_pct": 5,
    "max_bundler_pct": 30,
    "max_insider_pct": 20,
    "max_phishing_pct": 10,
    "max_fresh_wallet_ratio": 0.4,
}

DEFAULT_POINTS = {
    "mint_authority": 25,
    "freeze_authority": 20,
    "danger_risk": 15,
    "warn_risk": 5,
    "top10_fail": 15,
    "top10_warn": 5,
    "lp_unlocked": 10,
    "creator_balance": 10,
    "insiders_detected": 10,
    "bundler": 10,
    "insider": 10,
    "phishing": 10,
    "fresh_wallets": 5,
}


@dataclass
class RiskVerdict:
    score: int
    level: str
    reasons: List[str] = field(default_factory=list)
    checks: Dict = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.level != FAIL

    def to_dict(self) -> Dict:
        return asdict(self)


class RiskPolicy:
    """Configurable additive rug-risk policy."""

    def __init__(self, thresholds: Dict = None, points: Dict = None):
        self.thresholds = dict(DEFAULT_THRESHOLDS)
        self.thresholds.update(thresholds or {})
        self.points = dict(DEFAULT_POINTS)
        self.points.update(points or {})

    def level_for(self, score: float) -> str:
        if score <= self.thresholds['safe_max']:
            return SAFE
        if score <= self.thresholds['warn_max']:
            return WARN
        return FAIL

    def unavailable(self, error: str = '') -> RiskVerdict:
        """Fail-safe verdict when the RugCheck report could not be fetched."""
        reason = '⛔ Security audit unavailable (RugCheck)'
        if error:
            reason += f': {error}'
        return RiskVerdict(score=100, level=FAIL, reasons=[reason], checks={'report_available': False})

    def evaluate(self, report: Optional[RugCheckReport], holders: Optional[HolderBreakdown] = None,
                 metrics: Dict = None, rugcheck_error: str = '') -> RiskVerdict:
        if report is None:
            return self.unavailable(rugcheck_error)

        metrics = metrics or {}
        t = self.thresholds
        p = self.points
        reasons = []

        if report.score_normalised is not None:
            score = report.score_normalised
        elif report.score is not None:
            score = min(report.score, 100)
        else:
            score = DEFAULT_BASE_SCORE
            reasons.append('ℹ️ No RugCheck score, starting from neutral')

        risks = report.risks or []

        # Authorities: the token account is authoritative, risk names are a fallback
        if report.mint_authority_known:
            mintable = bool(report.mint_authority)
        else:
            mintable = any('Mint' in r.name for r in risks)
        if report.freeze_authority_known:
            freezable = bool(report.freeze_authority)
        else:
            freezable = any('Freeze' in r.name for r in risks)

        if mintable:
            score += p['mint_authority']
            reasons.append('🚨 Mint authority enabled')
        if freezable:
            score += p['freeze_authority']
            reasons.append('🚨 Freeze authority enabled')

        for r in risks:
            if is_authority_risk(r):
                continue
            if r.level in ('danger', 'critical'):
                score += p['danger_risk']
                reasons.append(f'🚨 {r.name}')
            elif r.level in ('warn', 'warning'):
                score += p['warn_risk']
                reasons.append(f'⚠️ {r.name}')

        top10 = metrics.get('top10_holders_pct')
        if top10 is not None:
            if top10 > t['top10_fail_pct']:
                score += p['top10_fail']
                reasons.append(f'🚨 Top10: {top10:.1f}%')
            elif top10 > t['top10_warn_pct']:
                score += p['top10_warn']
                reasons.append(f'⚠️ Top10: {top10:.1f}%')

        lp_safe = report.lp_safe_pct
        if lp_safe is not None and lp_safe < t['min_lp_locked_pct']:
            score += p['lp_unlocked']
            reasons.append(f'⚠️ LP Not Locked: {lp_safe:.0f}%')
        elif report.market_count == 0:
            reasons.append('ℹ️ No markets found')

        creator_pct = metrics.get('creator_balance_pct')
        if creator_pct is not None and creator_pct > t['max_creator_balance_pct']:
            score += p['creator_balance']
            reasons.append(f'⚠️ Creator holds {creator_pct:.1f}%')

        if report.insiders_detected:
            score += p['insiders_detected']
            reasons.append(f'⚠️ Insider networks detected: {report.insiders_detected}')

        if holders is None:
            reasons.append('ℹ️ Holder breakdown unavailable')
        else:
            if holders.bundler_pct is not None and holders.bundler_pct > t['max_bundler_pct']:
                score += p['bundler']
                reasons.append(f'⚠️ Bundlers hold {holders.bundler_pct:.1f}%')
            if holders.insider_pct is not None and holders.insider_pct > t['max_insider_pct']:
                score += p['insider']
                reasons.append(f'⚠️ Insiders hold {holders.insider_pct:.1f}%')
            if holders.phishing_pct is not None and holders.phishing_pct > t['max_phishing_pct']:
                score += p['phishing']
                reasons.append(f'⚠️ Phishing wallets hold {holders.phishing_pct:.1f}%')

            fresh_ratio = metrics.get('fresh_wallet_ratio')
            if fresh_ratio is not None and fresh_ratio > t['max_fresh_wallet_ratio']:
                score += p['fresh_wallets']
                reasons.append(f'⚠️ Fresh wallets: {fresh_ratio:.0%} of holders')

        score = int(round(clamp(score)))
        level = self.level_for(score)

        if report.rugged:
            level = FAIL
            reasons.insert(0, '🚨 Marked RUGGED by RugCheck')

        checks = {
            'report_available': True,
            'mintable': mintable,
            'freezable': freezable,
            'rugged': report.rugged,
            'top10_holders_pct': top10,
            'lp_locked_pct': report.lp_locked_pct,
            'lp_burned_pct': report.lp_burned_pct,
            'holder_breakdown_available': holders is not None,
        }

        logger.debug(f"[POLICY] {report.mint[:16]}... score={score} level={level}")
        return RiskVerdict(score=score, level=level, reasons=reasons, checks=checks)
