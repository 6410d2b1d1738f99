import argparse
import asyncio
import json
import logging
import sys

from colorama import init, Fore, Style

from config import LOG_LEVEL, load_screening_config
from screening import TokenScreener, ScreeningError, validate_mint, InvalidMintError

logger = logging.getLogger(__name__)

LEVEL_COLORS = {
    'SAFE': Fore.GREEN,
    'WARN': Fore.YELLOW,
    'FAIL': Fore.RED,
}

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_INVALID_MINT = 2


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Solana Memecoin Rug-Risk Screener (RugCheck + GMGN)")
    parser.add_argument("mints", nargs='*', help="Token mint address(es); prompts when omitted")
    parser.add_argument("--file", help="Read mint addresses from a file (one per line, # comments)")
    parser.add_argument("--full-report", action="store_true",
                        help="Print the raw RugCheck report as pretty JSON")
    parser.add_argument("--summary", action="store_true",
                        help="Print the RugCheck report summary (score, risks, LP lock) as pretty JSON")
    parser.add_argument("--checklist", action="store_true",
                        help="Print the field availability checklist (markdown)")
    parser.add_argument("--json", action="store_true",
                        help="Print machine-readable results instead of the summary")
    parser.add_argument("--no-holders", action="store_true",
                        help="Skip the phase 2 GMGN holder/wallet breakdown")
    parser.add_argument("--config", help="Path to a screening YAML config")
    parser.add_argument("--concurrency", type=positive_int, default=None,
                        help="Max tokens screened in parallel")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def read_mints(args, prompt=input):
    """Collect mints from args, --file, or an interactive prompt."""
    mints = list(args.mints or [])

    if args.file:
        with open(args.file, 'r') as f:
            for line in f:
                line = line.split('#', 1)[0].strip()
                if line:
                    mints.append(line)

    if not mints:
        entered = prompt("please enter token address: ")
        mints.append(entered)

    return mints


def _fmt_usd(value):
    return f"${value:,.2f}" if value is not None else "n/a"


def _fmt_pct(value):
    return f"{value:.1f}%" if value is not None else "n/a"


def _fmt_ratio(value):
    return f"{value:.0%}" if value is not None else "n/a"


def print_summary(result):
    verdict = result.verdict
    report = result.report
    metrics = result.metrics
    color = LEVEL_COLORS.get(verdict.level, Fore.WHITE)

    print(f"\n{Fore.CYAN}{'='*80}")
    name = f"{report.name} ({report.symbol})" if report and report.name else "UNKNOWN"
    print(f"{Fore.WHITE}Token: {Fore.CYAN}{name}")
    print(f"{Fore.WHITE}Mint: {Fore.CYAN}{result.mint}")
    print(f"{Fore.CYAN}{'='*80}")

    print(f"{Fore.WHITE}Risk Score: {color}{verdict.score}/100  [{verdict.level}]{Style.RESET_ALL}")
    if report is not None:
        print(f"{Fore.WHITE}RugCheck Score: {Fore.CYAN}{report.score} (normalised {report.score_normalised})")

    print(f"{Fore.WHITE}Market Cap: {Fore.CYAN}{_fmt_usd(metrics.get('market_cap_usd'))}")
    print(f"{Fore.WHITE}Holders: {Fore.CYAN}{metrics.get('holder_count') if metrics.get('holder_count') is not None else 'n/a'}")
    print(f"{Fore.WHITE}Market Cap / Holder: {Fore.CYAN}{_fmt_usd(metrics.get('market_cap_per_holder'))}")
    print(f"{Fore.WHITE}Top 10 Holders: {Fore.CYAN}{_fmt_pct(metrics.get('top10_holders_pct'))}")
    print(f"{Fore.WHITE}LP Locked: {Fore.CYAN}{_fmt_pct(report.lp_locked_pct if report else None)}"
          f"{Fore.WHITE}  Burned: {Fore.CYAN}{_fmt_pct(report.lp_burned_pct if report else None)}")
    print(f"{Fore.WHITE}Creator Balance: {Fore.CYAN}{_fmt_pct(metrics.get('creator_balance_pct'))}")
    print(f"{Fore.WHITE}Fresh Wallets: {Fore.CYAN}{_fmt_ratio(metrics.get('fresh_wallet_ratio'))}"
          f"{Fore.WHITE}  Bundled: {Fore.CYAN}{_fmt_ratio(metrics.get('bundled_wallet_ratio'))}")

    if verdict.reasons:
        print(f"\n{Fore.YELLOW}Risk Flags:")
        for reason in verdict.reasons:
            print(f"  • {reason}")
    else:
        print(f"\n{Fore.GREEN}✅ No major risk flags detected")

    for source, error in result.errors.items():
        print(f"{Fore.RED}[{source.upper()}] {error}", file=sys.stderr)


def print_report_summary(mint, summary):
    print(f"REPORT SUMMARY {mint}")
    if isinstance(summary, ScreeningError):
        print(f"failed to fetch report summary: {summary}", file=sys.stderr)
    else:
        print(json.dumps(summary, indent=2))


async def fetch_summaries(screener, mints):
    """RugCheck /report/summary per mint; a failed fetch maps to its error."""
    async def fetch(mint):
        try:
            return await screener.rugcheck.get_report_summary(mint)
        except ScreeningError as e:
            return e

    return dict(zip(mints, await asyncio.gather(*(fetch(m) for m in mints))))


def print_full_report(result):
    print("FULL REPORT")
    if result.raw_report is not None:
        print(json.dumps(result.raw_report, indent=2))
    else:
        error = result.errors.get('rugcheck', 'no report')
        print(f"failed to fetch full report: {error}", file=sys.stderr)


async def run(args, prompt=input) -> int:
    config = load_screening_config(args.config)
    if args.no_holders:
        config['gmgn']['enabled'] = False

    try:
        mints = read_mints(args, prompt=prompt)
    except OSError as e:
        print(f"{Fore.RED}⛔ cannot read mint file: {e}", file=sys.stderr)
        return EXIT_INVALID_MINT
    except EOFError:
        print(f"{Fore.RED}⛔ no token address given", file=sys.stderr)
        return EXIT_INVALID_MINT

    valid = []
    invalid = []
    for mint in mints:
        try:
            valid.append(validate_mint(mint))
        except InvalidMintError as e:
            invalid.append(e)
            print(f"{Fore.RED}⛔ {e}", file=sys.stderr)

    if not valid:
        return EXIT_INVALID_MINT

    async with TokenScreener(config) as screener:
        for mint in valid:
            print(f"starting rug pull check for {mint}")
        results = await screener.screen_many(
            valid,
            include_holders=not args.no_holders,
            concurrency=args.concurrency,
        )
        summaries = await fetch_summaries(screener, valid) if args.summary else {}

    if args.json:
        output = []
        for result in results:
            data = result.to_dict(include_raw=args.full_report)
            if args.summary:
                summary = summaries.get(result.mint)
                data['report_summary'] = None if isinstance(summary, ScreeningError) else summary
            output.append(data)
        print(json.dumps(output, indent=2, default=str))
    else:
        for result in results:
            if args.full_report:
                print_full_report(result)
            if args.summary:
                print_report_summary(result.mint, summaries.get(result.mint))
            print_summary(result)
            if args.checklist:
                print()
                print(result.checklist_markdown())

    if invalid:
        return EXIT_INVALID_MINT
    if not any(r.ok for r in results):
        return EXIT_FETCH_FAILED
    return EXIT_OK


def main(argv=None) -> int:
    init(autoreset=True)
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        return asyncio.run(run(args))
    except ScreeningError as e:
        print(f"{Fore.RED}❌ {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
