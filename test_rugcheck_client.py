import asyncio
import unittest

import aiohttp

from screening.errors import InvalidMintError, ReportNotFoundError, SourceUnavailableError
from screening.rugcheck_client import RugCheckClient
from testing_fakes import (
    MINT,
    RUGCHECK_URL,
    FakeResponse,
    FakeSession,
    fast_config,
    report_url,
    sample_report,
)


class TestRugCheckClient(unittest.IsolatedAsyncioTestCase):

    def make_client(self, routes, **config):
        self.session = FakeSession(routes)
        cfg = fast_config(RUGCHECK_URL)
        cfg.update(config)
        return RugCheckClient(cfg, session=self.session)

    async def test_full_report(self):
        client = self.make_client({report_url(): FakeResponse(200, sample_report())})
        report = await client.get_full_report(MINT)

        self.assertEqual(report['score'], 3400)
        self.assertEqual(self.session.calls[0]['url'], f"{RUGCHECK_URL}/v1/tokens/{MINT}/report")
        self.assertNotIn('X-API-KEY', self.session.calls[0]['headers'])

    async def test_mint_is_stripped_before_request(self):
        client = self.make_client({report_url(): FakeResponse(200, sample_report())})
        await client.get_full_report(f" {MINT}\n")
        self.assertEqual(self.session.calls[0]['url'], report_url())

    async def test_report_is_cached(self):
        client = self.make_client({report_url(): FakeResponse(200, sample_report())})
        await client.get_full_report(MINT)
        await client.get_full_report(MINT)
        self.assertEqual(len(self.session.calls), 1)
        self.assertEqual(client.cache.hits, 1)

    async def test_api_key_header(self):
        client = self.make_client({report_url(): FakeResponse(200, sample_report())}, api_key='secret')
        await client.get_full_report(MINT)
        self.assertEqual(self.session.calls[0]['headers']['X-API-KEY'], 'secret')

    async def test_not_found_is_not_retried(self):
        client = self.make_client({report_url(): FakeResponse(404, text='token not found')})
        with self.assertRaises(ReportNotFoundError) as ctx:
            await client.get_full_report(MINT)
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(len(self.session.calls), 1)
        self.assertEqual(client.breaker.failure_rate, 0)

    async def test_server_error_then_success(self):
        client = self.make_client({report_url(): [
            FakeResponse(502, text='bad gateway'),
            FakeResponse(200, sample_report()),
        ]})
        report = await client.get_full_report(MINT)
        self.assertEqual(report['mint'], MINT)
        self.assertEqual(len(self.session.calls), 2)

    async def test_server_error_exhausts_retries(self):
        client = self.make_client({report_url(): FakeResponse(503, text='unavailable')})
        with self.assertRaises(SourceUnavailableError) as ctx:
            await client.get_full_report(MINT)
        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(len(self.session.calls), 3)

    async def test_rate_limited_is_retried(self):
        client = self.make_client({report_url(): [
            FakeResponse(429, text='slow down'),
            FakeResponse(200, sample_report()),
        ]})
        await client.get_full_report(MINT)
        self.assertEqual(len(self.session.calls), 2)

    async def test_client_error_fails_fast(self):
        client = self.make_client({report_url(): FakeResponse(403, text='forbidden')})
        with self.assertRaises(SourceUnavailableError):
            await client.get_full_report(MINT)
        self.assertEqual(len(self.session.calls), 1)

    async def test_timeout_and_connection_errors_are_retried(self):
        client = self.make_client({report_url(): [
            FakeResponse(raise_on_enter=asyncio.TimeoutError()),
            FakeResponse(raise_on_enter=aiohttp.ClientConnectionError('reset')),
            FakeResponse(200, sample_report()),
        ]})
        report = await client.get_full_report(MINT)
        self.assertEqual(report['score'], 3400)
        self.assertEqual(len(self.session.calls), 3)

    async def test_malformed_json(self):
        client = self.make_client({report_url(): FakeResponse(200, ValueError('Expecting value'))})
        with self.assertRaises(SourceUnavailableError):
            await client.get_full_report(MINT)

    async def test_non_object_body(self):
        client = self.make_client({report_url(): FakeResponse(200, ['not', 'a', 'report'])})
        with self.assertRaises(SourceUnavailableError):
            await client.get_full_report(MINT)

    async def test_invalid_mint_makes_no_request(self):
        client = self.make_client({})
        with self.assertRaises(InvalidMintError):
            await client.get_full_report("invalid_address_format")
        self.assertEqual(self.session.calls, [])

    async def test_open_circuit_blocks_requests(self):
        client = self.make_client({report_url(): FakeResponse(500, text='boom')}, max_retries=1)
        for _ in range(5):
            with self.assertRaises(SourceUnavailableError):
                await client.get_full_report(MINT)
        self.assertEqual(client.breaker.state, 'OPEN')

        calls_before = len(self.session.calls)
        with self.assertRaises(SourceUnavailableError) as ctx:
            await client.get_full_report(MINT)
        self.assertIn('circuit open', str(ctx.exception))
        self.assertEqual(len(self.session.calls), calls_before)

    async def test_report_summary(self):
        summary = {"score": 3400, "score_normalised": 20, "risks": [], "lpLockedPct": 100}
        url = f"{RUGCHECK_URL}/v1/tokens/{MINT}/report/summary"
        client = self.make_client({url: FakeResponse(200, summary)})
        self.assertEqual(await client.get_report_summary(MINT), summary)

    async def test_stats(self):
        client = self.make_client({report_url(): FakeResponse(200, sample_report())})
        await client.get_full_report(MINT)
        stats = client.get_stats()
        self.assertEqual(stats['source'], 'rugcheck')
        self.assertEqual(stats['request_count'], 1)
        self.assertEqual(stats['circuit']['state'], 'CLOSED')

    async def test_injected_session_is_not_closed(self):
        client = self.make_client({})
        await client.close()
        self.assertFalse(self.session.closed)


if __name__ == '__main__':
    unittest.main()
