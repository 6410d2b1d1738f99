"""
FIELD CHECKLIST

Tracks which screening fields were obtained for a token, grouped by phase:

  Phase 1 – RugCheck                    (full token report + derived fields)
  Phase 2 – Holder/wallet breakdown     (GMGN-style wallet labels)

Each row is: index, field name, have/missing, source/notes. The checklist can
be rendered to markdown and parsed back.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .errors import ChecklistParseError

PHASE_RUGCHECK = 'Phase 1 – RugCheck'
PHASE_HOLDERS = 'Phase 2 – Holder/wallet breakdown'

HAVE_MARK = '✅'
MISSING_MARK = '❌'

_TRUE_VALUES = {'✅', 'yes', 'y', 'have', 'true', 'x', '[x]'}
_FALSE_VALUES = {'❌', 'no', 'n', 'missing', 'false', '', '[ ]'}

_HEADING = re.compile(r'^\s*#{1,6}\s+(.+?)\s*#*\s*$')
_SEPARATOR_CELL = re.compile(r'^:?-{1,}:?$')


@dataclass
class ChecklistRow:
    index: int
    field: str
    available: bool
    notes: str = ''


@dataclass
class ChecklistTable:
    phase: str
    rows: List[ChecklistRow] = field(default_factory=list)


@dataclass
class ChecklistSummary:
    have: List[int]
    missing: List[int]
    text: str


@dataclass
class TrackedField:
    index: int
    field: str
    phase: str
    notes: str
    getter: Callable


def _report(attr):
    return lambda report, holders, metrics: getattr(report, attr) if report is not None else None


def _holders(attr):
    return lambda report, holders, metrics: getattr(holders, attr) if holders is not None else None


def _metric(key):
    return lambda report, holders, metrics: (metrics or {}).get(key)


def _authority(known_attr, attr):
    """Authorities are known even when renounced (null in the report)."""
    def getter(report, holders, metrics):
        if report is None or not getattr(report, known_attr):
            return None
        return getattr(report, attr) or 'renounced'
    return getter


FIELD_CATALOG = [
    TrackedField(1, 'Token name', PHASE_RUGCHECK, 'RugCheck tokenMeta.name', _report('name')),
    TrackedField(2, 'Token symbol', PHASE_RUGCHECK, 'RugCheck tokenMeta.symbol', _report('symbol')),
    TrackedField(3, 'Risk score', PHASE_RUGCHECK, 'RugCheck score', _report('score')),
    TrackedField(4, 'Normalised risk score', PHASE_RUGCHECK, 'RugCheck score_normalised', _report('score_normalised')),
    TrackedField(5, 'Detected risk flags', PHASE_RUGCHECK, 'RugCheck risks[]', _report('risks')),
    TrackedField(6, 'Top holder percentages', PHASE_RUGCHECK, 'RugCheck topHolders[].pct', _report('top_holders')),
    TrackedField(7, 'Top-10 holder concentration', PHASE_RUGCHECK, 'Derived: topHolders minus AMM/LOCKER accounts', _metric('top10_holders_pct')),
    TrackedField(8, 'Total holders', PHASE_RUGCHECK, 'RugCheck totalHolders (GMGN holder_count fallback)', _metric('holder_count')),
    TrackedField(9, 'LP locked %', PHASE_RUGCHECK, 'RugCheck markets[].lp.lpLockedPct (deepest market)', _report('lp_locked_pct')),
    TrackedField(10, 'Total market liquidity', PHASE_RUGCHECK, 'RugCheck totalMarketLiquidity', _report('total_market_liquidity')),
    TrackedField(11, 'Creator address', PHASE_RUGCHECK, 'RugCheck creator', _report('creator')),
    TrackedField(12, 'Creator balance', PHASE_RUGCHECK, 'RugCheck creatorBalance', _report('creator_balance')),
    TrackedField(13, 'Creator balance %', PHASE_RUGCHECK, 'Derived: creatorBalance / token.supply', _metric('creator_balance_pct')),
    TrackedField(14, 'Mint authority', PHASE_RUGCHECK, 'RugCheck token.mintAuthority', _authority('mint_authority_known', 'mint_authority')),
    TrackedField(15, 'Freeze authority', PHASE_RUGCHECK, 'RugCheck token.freezeAuthority', _authority('freeze_authority_known', 'freeze_authority')),
    TrackedField(16, 'Insider networks detected', PHASE_RUGCHECK, 'RugCheck graphInsidersDetected', _report('insiders_detected')),
    TrackedField(17, 'Token price', PHASE_RUGCHECK, 'RugCheck price', _report('price')),
    TrackedField(18, 'Market cap', PHASE_RUGCHECK, 'Derived: price × supply / 10^decimals', _metric('market_cap_usd')),
    TrackedField(19, 'Market cap per holder', PHASE_RUGCHECK, 'Derived: market cap / holders', _metric('market_cap_per_holder')),
    TrackedField(20, 'Phishing wallet %', PHASE_HOLDERS, 'GMGN top_entrapment_trader_percentage', _holders('phishing_pct')),
    TrackedField(21, 'Bundler %', PHASE_HOLDERS, 'GMGN top_bundler_trader_percentage', _holders('bundler_pct')),
    TrackedField(22, 'Insider %', PHASE_HOLDERS, 'GMGN top_rat_trader_percentage', _holders('insider_pct')),
    TrackedField(23, 'Bluechip holder %', PHASE_HOLDERS, 'GMGN bluechip_owner_percentage', _holders('bluechip_pct')),
    TrackedField(24, 'Fresh wallets', PHASE_HOLDERS, 'GMGN wallet tags fresh_wallets', _holders('fresh_wallets')),
    TrackedField(25, 'Fresh wallet ratio', PHASE_HOLDERS, 'Derived: fresh wallets / holders', _metric('fresh_wallet_ratio')),
    TrackedField(26, 'Bundled wallet ratio', PHASE_HOLDERS, 'Derived: bundler wallets / holders', _metric('bundled_wallet_ratio')),
    TrackedField(27, 'Sniper wallets', PHASE_HOLDERS, 'GMGN wallet tags sniper_wallets', _holders('sniper_wallets')),
    TrackedField(28, 'Smart money wallets', PHASE_HOLDERS, 'GMGN wallet tags smart_wallets', _holders('smart_wallets')),
    TrackedField(29, 'LP burned %', PHASE_RUGCHECK, 'RugCheck markets[].lp.lpBurnedPct (deepest market)', _report('lp_burned_pct')),
]


def build_checklist(report=None, holders=None, metrics: Dict = None) -> List[ChecklistTable]:
    """One table per phase, one row per catalog field; have = value is not None."""
    tables: Dict[str, ChecklistTable] = {}
    for entry in FIELD_CATALOG:
        table = tables.setdefault(entry.phase, ChecklistTable(phase=entry.phase))
        value = entry.getter(report, holders, metrics)
        table.rows.append(ChecklistRow(
            index=entry.index,
            field=entry.field,
            available=value is not None,
            notes=entry.notes,
        ))
    return list(tables.values())


def compress_ranges(indices: List[int]) -> str:
    """
    >>> compress_ranges([1, 2, 3, 5, 7, 8])
    '1-3, 5, 7-8'
    """
    if not indices:
        return 'none'
    ordered = sorted(set(indices))
    parts = []
    start = prev = ordered[0]
    for i in ordered[1:]:
        if i == prev + 1:
            prev = i
            continue
        parts.append(f"{start}-{prev}" if start != prev else f"{start}")
        start = prev = i
    parts.append(f"{start}-{prev}" if start != prev else f"{start}")
    return ', '.join(parts)


def summarize(tables: List[ChecklistTable]) -> ChecklistSummary:
    have = [row.index for t in tables for row in t.rows if row.available]
    missing = [row.index for t in tables for row in t.rows if not row.available]
    total = len(have) + len(missing)
    text = f"Have: {compress_ranges(have)} ({len(have)} of {total}). Missing: {compress_ranges(missing)}."
    return ChecklistSummary(have=sorted(have), missing=sorted(missing), text=text)


def _escape(cell: str) -> str:
    return str(cell).replace('|', '\\|')


def render_markdown(tables: List[ChecklistTable], include_summary: bool = True) -> str:
    lines = []
    for table in tables:
        if table.phase:
            lines.append(f"## {table.phase}")
            lines.append('')
        lines.append('| # | Field | Have? | Source / notes |')
        lines.append('|---|-------|-------|----------------|')
        for row in table.rows:
            mark = HAVE_MARK if row.available else MISSING_MARK
            lines.append(f"| {row.index} | {_escape(row.field)} | {mark} | {_escape(row.notes)} |")
        lines.append('')

    if include_summary:
        lines.append(f"**Summary:** {summarize(tables).text}")
        lines.append('')

    return '\n'.join(lines)


def _split_cells(line: str) -> List[str]:
    body = line.strip()
    if body.startswith('|'):
        body = body[1:]
    if body.endswith('|') and not body.endswith('\\|'):
        body = body[:-1]
    cells = re.split(r'(?<!\\)\|', body)
    return [c.strip().replace('\\|', '|') for c in cells]


def _parse_available(value: str, line_no: int) -> bool:
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ChecklistParseError(f"line {line_no}: unknown availability value {value!r}")


def parse_markdown(text: str) -> List[ChecklistTable]:
    """
    Parse checklist markdown back into tables.

    Headings start a new phase; table rows before any heading land in an
    untitled table. Header and separator rows are skipped.

    Raises:
        ChecklistParseError: non-numeric or duplicate index, short row,
            unrecognised availability value
    """
    tables: List[ChecklistTable] = []
    current: Optional[ChecklistTable] = None
    seen = set()

    for line_no, line in enumerate(text.splitlines(), start=1):
        heading = _HEADING.match(line)
        if heading:
            current = ChecklistTable(phase=heading.group(1))
            tables.append(current)
            continue

        if not line.strip().startswith('|'):
            continue

        cells = _split_cells(line)
        if all(_SEPARATOR_CELL.match(c) for c in cells if c):
            continue
        if cells and cells[0].lower() in ('#', 'index', 'no', 'no.'):
            continue
        if len(cells) < 3:
            raise ChecklistParseError(f"line {line_no}: expected at least 3 cells, got {len(cells)}")

        try:
            index = int(cells[0])
        except ValueError as e:
            raise ChecklistParseError(f"line {line_no}: index {cells[0]!r} is not a number") from e

        if index in seen:
            raise ChecklistParseError(f"line {line_no}: duplicate index {index}")
        seen.add(index)

        if current is None:
            current = ChecklistTable(phase='')
            tables.append(current)

        current.rows.append(ChecklistRow(
            index=index,
            field=cells[1],
            available=_parse_available(cells[2], line_no),
            notes=' | '.join(cells[3:]) if len(cells) > 3 else '',
        ))

    return [t for t in tables if t.rows]
