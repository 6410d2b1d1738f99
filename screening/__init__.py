"""
SCREENING MODULE

Memecoin rug-risk screening for Solana mints.

Architecture:
  RugCheck full report (phase 1) + GMGN holder breakdown (phase 2)
          ↓
  NORMALIZER (typed records)
          ↓
  METRICS (market cap, mcap/holder, top10, fresh/bundled ratios)
          ↓
  RISK POLICY (SAFE / WARN / FAIL)
          ↓
  FIELD CHECKLIST (have / missing per tracked field)
"""

from .errors import (
    ScreeningError,
    InvalidMintError,
    SourceUnavailableError,
    ReportNotFoundError,
    ChecklistParseError,
    ConfigError,
)
from .mint import validate_mint, is_valid_mint
from .cache import ReportCache
from .circuit_breaker import CircuitBreaker
from .base_source import BaseDataSource
from .rugcheck_client import RugCheckClient
from .gmgn_client import GMGNClient
from .normalizer import RugCheckReport, HolderBreakdown, normalize_rugcheck, normalize_gmgn
from .metrics import compute_metrics
from .risk_policy import RiskPolicy, RiskVerdict
from .checklist import (
    ChecklistRow,
    ChecklistTable,
    ChecklistSummary,
    build_checklist,
    render_markdown,
    parse_markdown,
    summarize,
)
from .screener import TokenScreener, ScreeningResult

__all__ = [
    'ScreeningError',
    'InvalidMintError',
    'SourceUnavailableError',
    'ReportNotFoundError',
    'ChecklistParseError',
    'ConfigError',
    'validate_mint',
    'is_valid_mint',
    'ReportCache',
    'CircuitBreaker',
    'BaseDataSource',
    'RugCheckClient',
    'GMGNClient',
    'RugCheckReport',
    'HolderBreakdown',
    'normalize_rugcheck',
    'normalize_gmgn',
    'compute_metrics',
    'RiskPolicy',
    'RiskVerdict',
    'ChecklistRow',
    'ChecklistTable',
    'ChecklistSummary',
    'build_checklist',
    'render_markdown',
    'parse_markdown',
    'summarize',
    'TokenScreener',
    'ScreeningResult',
]
