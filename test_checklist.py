import unittest

from screening.checklist import (
    FIELD_CATALOG,
    PHASE_HOLDERS,
    PHASE_RUGCHECK,
    build_checklist,
    compress_ranges,
    parse_markdown,
    render_markdown,
    summarize,
)
from screening.errors import ChecklistParseError
from screening.metrics import compute_metrics
from screening.normalizer import normalize_rugcheck, normalize_gmgn
from testing_fakes import SAMPLE_TOKEN_STAT, SAMPLE_WALLET_TAGS, sample_report


PLANNING_CHECKLIST = """
# Memecoin screening fields

## Phase 1 – RugCheck

| # | Field | Have? | Source / notes |
|---|-------|-------|----------------|
| 1 | Risk score | ✅ | `score` |
| 2 | Holder % list | yes | `topHolders[].pct` |
| 3 | Market cap | ❌ | price x supply, compute ourselves |

## Phase 2 – Holder/wallet breakdown

| # | Field | Have? | Source / notes |
|---|-------|-------|----------------|
| 4 | Bundler % | missing | GMGN |
| 5 | Fresh wallet ratio | no | GMGN \\| derived |

Summary: 1-2 covered, 3-5 outstanding.
"""


class TestBuildChecklist(unittest.TestCase):

    def test_catalog_indices_unique_and_ordered(self):
        indices = [f.index for f in FIELD_CATALOG]
        self.assertEqual(indices, sorted(set(indices)))

    def test_rugcheck_only_leaves_phase_two_missing(self):
        report = normalize_rugcheck(sample_report())
        tables = build_checklist(report, None, compute_metrics(report))

        self.assertEqual([t.phase for t in tables], [PHASE_RUGCHECK, PHASE_HOLDERS])
        self.assertTrue(all(row.available for row in tables[0].rows))
        self.assertFalse(any(row.available for row in tables[1].rows))

        summary = summarize(tables)
        self.assertEqual(summary.have, list(range(1, 20)) + [29])
        self.assertEqual(summary.missing, list(range(20, 29)))
        self.assertEqual(summary.text, "Have: 1-19, 29 (20 of 29). Missing: 20-28.")

    def test_full_screen_has_everything(self):
        report = normalize_rugcheck(sample_report())
        holders = normalize_gmgn(SAMPLE_TOKEN_STAT, SAMPLE_WALLET_TAGS)
        tables = build_checklist(report, holders, compute_metrics(report, holders))
        self.assertEqual(summarize(tables).missing, [])

    def test_missing_price_marks_derived_fields_missing(self):
        raw = sample_report(price=None)
        del raw['token']['mintAuthority']
        report = normalize_rugcheck(raw)
        tables = build_checklist(report, None, compute_metrics(report))
        missing = summarize(tables).missing
        # mint authority, price, market cap, market cap per holder
        self.assertEqual(missing[:4], [14, 17, 18, 19])

    def test_lp_burned_row_missing_when_not_reported(self):
        raw = sample_report(markets=[{"lp": {"lpLockedPct": 100, "baseUSD": 1, "quoteUSD": 1}}])
        report = normalize_rugcheck(raw)
        tables = build_checklist(report, None, compute_metrics(report))
        row = [r for r in tables[0].rows if r.index == 29][0]
        self.assertEqual(row.field, 'LP burned %')
        self.assertFalse(row.available)

    def test_no_report(self):
        tables = build_checklist(None, None, compute_metrics(None))
        self.assertEqual(summarize(tables).have, [])


class TestMarkdown(unittest.TestCase):

    def test_render_then_parse_preserves_rows(self):
        report = normalize_rugcheck(sample_report())
        tables = build_checklist(report, None, compute_metrics(report))

        text = render_markdown(tables)
        self.assertIn('## Phase 1 – RugCheck', text)
        self.assertIn('| 18 | Market cap | ✅ |', text)
        self.assertIn('| 21 | Bundler % | ❌ |', text)
        self.assertIn('**Summary:** Have: 1-19', text)

        parsed = parse_markdown(text)
        self.assertEqual(parsed, tables)

    def test_parse_planning_checklist(self):
        tables = parse_markdown(PLANNING_CHECKLIST)
        self.assertEqual([t.phase for t in tables], [PHASE_RUGCHECK, PHASE_HOLDERS])
        self.assertEqual([r.available for r in tables[0].rows], [True, True, False])
        self.assertEqual(tables[0].rows[1].notes, '`topHolders[].pct`')
        self.assertEqual(tables[1].rows[1].notes, 'GMGN | derived')

        summary = summarize(tables)
        self.assertEqual(summary.have, [1, 2])
        self.assertEqual(summary.missing, [3, 4, 5])

    def test_rows_before_heading_go_to_untitled_table(self):
        tables = parse_markdown("| 1 | Risk score | ✅ |\n| 2 | LP locked % | ❌ |\n")
        self.assertEqual(len(tables), 1)
        self.assertEqual(tables[0].phase, '')
        self.assertEqual(tables[0].rows[1].notes, '')

    def test_duplicate_index(self):
        with self.assertRaises(ChecklistParseError):
            parse_markdown("| 1 | A | ✅ | x |\n| 1 | B | ❌ | y |\n")

    def test_bad_availability(self):
        with self.assertRaises(ChecklistParseError):
            parse_markdown("| 1 | A | maybe | x |\n")

    def test_non_numeric_index(self):
        with self.assertRaises(ChecklistParseError):
            parse_markdown("| one | A | ✅ | x |\n")

    def test_compress_ranges(self):
        self.assertEqual(compress_ranges([5, 1, 2, 3, 7, 8]), '1-3, 5, 7-8')
        self.assertEqual(compress_ranges([4]), '4')
        self.assertEqual(compress_ranges([]), 'none')


if __name__ == '__main__':
    unittest.main()
