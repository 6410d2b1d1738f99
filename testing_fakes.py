"""
Shared fakes for the screening tests: canned RugCheck / GMGN payloads and an
aiohttp-like session that serves them without touching the network.
"""
import asyncio
import copy

MINT = "82hVfzp5MV97cdztarpsn4EhgVCdMpYzkcwMQmWTwK6T"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

RUGCHECK_URL = "https://rugcheck.test"
GMGN_URL = "https://gmgn.test"

SAMPLE_REPORT = {
    "mint": MINT,
    "creator": "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
    "creatorBalance": 80000000000000,
    "token": {
        "mintAuthority": None,
        "freezeAuthority": None,
        "supply": 1000000000000000,
        "decimals": 6,
        "isInitialized": True,
    },
    "tokenMeta": {"name": "Dog Wif Test", "symbol": "DWT", "mutable": False},
    "topHolders": [
        {"address": "PoolVault111", "owner": "PoolOwner1", "pct": 30.0, "insider": False},
        {"address": "HolderA", "owner": "OwnerA", "pct": 10.0, "insider": False},
        {"address": "HolderB", "owner": "OwnerB", "pct": 8.0, "insider": False},
        {"address": "HolderC", "owner": "OwnerC", "pct": 7.0, "insider": False},
        {"address": "HolderD", "owner": "OwnerD", "pct": 5.0, "insider": True},
    ],
    "knownAccounts": {
        "PoolOwner1": {"name": "Raydium AMM", "type": "AMM"},
    },
    "risks": [
        {"name": "Low Liquidity", "level": "warn", "score": 400,
         "description": "Low amount of liquidity in the token pool", "value": "$60,200"},
        {"name": "Top 10 holders high ownership", "level": "danger", "score": 3000,
         "description": "The top 10 users hold more than 70% token supply", "value": ""},
    ],
    "score": 3400,
    "score_normalised": 20,
    "markets": [
        {"marketType": "pump_fun", "lp": {"lpLockedPct": 0, "baseUSD": 100, "quoteUSD": 100}},
        {"marketType": "raydium", "lp": {"lpLockedPct": 100, "lpBurnedPct": 0, "baseUSD": 30000, "quoteUSD": 30000}},
    ],
    "totalMarketLiquidity": 60200.0,
    "totalHolders": 1000,
    "price": 0.0005,
    "rugged": False,
    "graphInsidersDetected": 0,
}

SAMPLE_TOKEN_STAT = {
    "holder_count": 1000,
    "bluechip_owner_count": 10,
    "bluechip_owner_percentage": "0.01",
    "top_rat_trader_percentage": "0.05",
    "top_bundler_trader_percentage": "0.35",
    "top_entrapment_trader_percentage": "0.02",
}

SAMPLE_WALLET_TAGS = {
    "smart_wallets": 3,
    "fresh_wallets": 150,
    "renowned_wallets": 1,
    "creator_wallets": 1,
    "sniper_wallets": 12,
    "rat_trader_wallets": 5,
    "whale_wallets": 2,
    "top_wallets": 10,
    "following_wallets": 0,
    "bundler_wallets": 40,
}


def sample_report(**overrides):
    report = copy.deepcopy(SAMPLE_REPORT)
    report.update(overrides)
    return report


def report_url(mint=MINT):
    return f"{RUGCHECK_URL}/v1/tokens/{mint}/report"


def report_summary_url(mint=MINT):
    return f"{RUGCHECK_URL}/v1/tokens/{mint}/report/summary"


def token_stat_url(mint=MINT):
    return f"{GMGN_URL}/api/v1/token_stat/sol/{mint}"


def wallet_tags_url(mint=MINT):
    return f"{GMGN_URL}/api/v1/token_wallet_tags_stat/sol/{mint}"


def gmgn_body(data, code=0):
    return {"code": code, "msg": "success" if code == 0 else "error", "data": data}


def fast_config(base_url):
    """Source config with no rate-limit wait and no backoff sleep."""
    return {
        "base_url": base_url,
        "min_request_interval": 0,
        "backoff_base": 0,
        "max_retries": 3,
        "timeout_seconds": 1,
    }


class FakeResponse:
    def __init__(self, status=200, payload=None, text='', raise_on_enter=None, delay=0):
        self.status = status
        self._payload = payload
        self._text = text
        self._raise_on_enter = raise_on_enter
        self._delay = delay
        self.completed = False

    async def json(self, content_type='application/json'):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._raise_on_enter is not None:
            raise self._raise_on_enter
        self.completed = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Minimal stand-in for aiohttp.ClientSession.

    routes maps URL -> FakeResponse or list of FakeResponse (served in order,
    the last one repeats). Unknown URLs answer 404.
    """

    def __init__(self, routes=None):
        self.routes = {url: list(r) if isinstance(r, list) else [r] for url, r in (routes or {}).items()}
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'headers': headers})
        queue = self.routes.get(url)
        if not queue:
            return FakeResponse(status=404, text='not found')
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def calls_to(self, url):
        return [c for c in self.calls if c['url'] == url]

    async def close(self):
        self.closed = True


def full_routes(mint=MINT, report=None, stat=None, tags=None):
    """Routes for a healthy RugCheck + GMGN screen of one mint."""
    return {
        report_url(mint): FakeResponse(200, report if report is not None else sample_report(mint=mint)),
        token_stat_url(mint): FakeResponse(200, gmgn_body(stat if stat is not None else dict(SAMPLE_TOKEN_STAT))),
        wallet_tags_url(mint): FakeResponse(200, gmgn_body(tags if tags is not None else dict(SAMPLE_WALLET_TAGS))),
    }
