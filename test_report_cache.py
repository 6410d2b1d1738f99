import unittest

from screening.cache import ReportCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestReportCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cache = ReportCache({'ttl_seconds': 60, 'max_size': 2}, clock=self.clock)

    def test_hit_and_miss(self):
        self.assertIsNone(self.cache.get('a'))
        self.cache.set('a', {'score': 1})
        self.assertEqual(self.cache.get('a'), {'score': 1})

        stats = self.cache.get_stats()
        self.assertEqual(stats['hits'], 1)
        self.assertEqual(stats['misses'], 1)
        self.assertEqual(stats['hit_rate_pct'], 50)

    def test_entries_expire_after_ttl(self):
        self.cache.set('a', 1)
        self.clock.now += 59
        self.assertEqual(self.cache.get('a'), 1)
        self.clock.now += 1
        self.assertIsNone(self.cache.get('a'))
        self.assertEqual(len(self.cache), 0)

    def test_lru_eviction(self):
        self.cache.set('a', 1)
        self.clock.now += 1
        self.cache.set('b', 2)
        self.clock.now += 1
        self.cache.get('a')  # 'b' is now least recently used
        self.clock.now += 1
        self.cache.set('c', 3)

        self.assertIsNone(self.cache.get('b'))
        self.assertEqual(self.cache.get('a'), 1)
        self.assertEqual(self.cache.get('c'), 3)
        self.assertEqual(self.cache.evictions, 1)

    def test_cleanup_expired(self):
        self.cache.set('a', 1)
        self.clock.now += 30
        self.cache.set('b', 2)
        self.clock.now += 31
        self.assertEqual(self.cache.cleanup_expired(), 1)
        self.assertEqual(self.cache.get('b'), 2)

    def test_zero_ttl_disables_caching(self):
        cache = ReportCache({'ttl_seconds': 0})
        cache.set('a', 1)
        self.assertIsNone(cache.get('a'))

    def test_clear_resets_stats(self):
        self.cache.set('a', 1)
        self.cache.get('a')
        self.cache.clear()
        self.assertEqual(self.cache.get_stats()['size'], 0)
        self.assertEqual(self.cache.hits, 0)


if __name__ == '__main__':
    unittest.main()
