import unittest

from safe_math import to_float, to_int, safe_div, safe_pct, clamp


class TestSafeMath(unittest.TestCase):

    def test_to_float(self):
        self.assertEqual(to_float("0.35"), 0.35)
        self.assertEqual(to_float(3), 3.0)
        self.assertIsNone(to_float(None))
        self.assertIsNone(to_float(True))
        self.assertEqual(to_float("n/a", default=0.0), 0.0)

    def test_to_int(self):
        self.assertEqual(to_int("1000000000000000"), 1000000000000000)
        self.assertEqual(to_int(12.0), 12)
        self.assertEqual(to_int("12.7"), 12)
        self.assertIsNone(to_int("abc"))

    def test_safe_div(self):
        self.assertEqual(safe_div(10, 4), 2.5)
        self.assertIsNone(safe_div(10, 0))
        self.assertIsNone(safe_div(None, 10))
        self.assertEqual(safe_div(10, None, default=0.0), 0.0)

    def test_safe_pct(self):
        self.assertAlmostEqual(safe_pct(8, 100), 8.0)
        self.assertEqual(safe_pct(0, 100), 0.0)
        self.assertIsNone(safe_pct(5, 0))

    def test_clamp(self):
        self.assertEqual(clamp(140), 100)
        self.assertEqual(clamp(-3), 0)
        self.assertEqual(clamp(42), 42)


if __name__ == '__main__':
    unittest.main()
