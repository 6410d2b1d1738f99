import unittest

from screening.circuit_breaker import CircuitBreaker, CLOSED, OPEN, HALF_OPEN


class TestCircuitBreaker(unittest.TestCase):

    def setUp(self):
        self.now = 0.0
        self.breaker = CircuitBreaker('RugCheck', failure_threshold=0.6, timeout=300,
                                      clock=lambda: self.now)

    def test_needs_min_samples_before_opening(self):
        for _ in range(4):
            self.assertFalse(self.breaker.record_failure())
        self.assertEqual(self.breaker.state, CLOSED)

    def test_opens_once_threshold_reached(self):
        results = [self.breaker.record_failure() for _ in range(5)]
        self.assertEqual(results, [False, False, False, False, True])
        self.assertEqual(self.breaker.state, OPEN)
        self.assertFalse(self.breaker.can_attempt())
        # further failures do not re-signal
        self.assertFalse(self.breaker.record_failure())

    def test_mixed_results_below_threshold_stay_closed(self):
        for _ in range(3):
            self.breaker.record_success()
        for _ in range(4):
            self.breaker.record_failure()
        # 4 failures out of 7 = 57% < 60%
        self.assertEqual(self.breaker.state, CLOSED)

    def test_half_open_then_recover(self):
        for _ in range(5):
            self.breaker.record_failure()
        self.now += 300
        self.assertTrue(self.breaker.can_attempt())
        self.assertEqual(self.breaker.state, HALF_OPEN)

        self.breaker.record_success()
        self.assertEqual(self.breaker.state, CLOSED)
        self.assertEqual(self.breaker.failure_rate, 0)

    def test_half_open_allows_one_trial(self):
        for _ in range(5):
            self.breaker.record_failure()
        self.now += 300
        self.assertTrue(self.breaker.can_attempt())
        self.assertFalse(self.breaker.can_attempt())
        self.assertFalse(self.breaker.can_attempt())
        self.assertEqual(self.breaker.state, HALF_OPEN)

    def test_stale_trial_is_replaced(self):
        for _ in range(5):
            self.breaker.record_failure()
        self.now += 300
        self.assertTrue(self.breaker.can_attempt())
        self.now += 299
        self.assertFalse(self.breaker.can_attempt())
        self.now += 1
        self.assertTrue(self.breaker.can_attempt())

    def test_half_open_failure_reopens(self):
        for _ in range(5):
            self.breaker.record_failure()
        self.now += 301
        self.breaker.can_attempt()
        self.breaker.record_failure()
        self.assertEqual(self.breaker.state, OPEN)
        self.assertFalse(self.breaker.can_attempt())


if __name__ == '__main__':
    unittest.main()
