import unittest

from aluguel.core.config import Config
from aluguel.core.listing import Origin
from aluguel.services.aggregator import ListingAggregator
from tests.fakes import make_listing


def _with_total(link, total, area=50):
    # iptu and condominio are fixed at 0 so that price == total.
    return make_listing(link=link, price=total, iptu=0, condominio=0, area=area)


class TestListingAggregator(unittest.TestCase):

    def setUp(self):
        self.aggregator = ListingAggregator(min_total=1300, max_total=1700, min_area=35)

    def test_duplicate_links_keep_first_occurrence(self):
        first = make_listing(link="https://x/1", origin=Origin.OLX, price=1100)
        second = make_listing(link="https://x/1", origin=Origin.ZAP_IMOVEIS, price=1000)

        result = self.aggregator.aggregate([[first], [second]])

        self.assertEqual(result.listings, [first])
        self.assertEqual(result.duplicates, 1)
        self.assertEqual(result.total, 2)

    def test_duplicate_resolution_happens_before_filtering(self):
        # The first occurrence is out of range; the later in-range copy must not replace it.
        first = _with_total("https://x/1", 2000)
        second = _with_total("https://x/1", 1500)

        result = self.aggregator.aggregate([[first, second]])

        self.assertEqual(result.listings, [])
        self.assertEqual(result.filtered, 1)

    def test_total_price_bounds_are_inclusive(self):
        listings = [
            _with_total("https://x/low", 1299),
            _with_total("https://x/min", 1300),
            _with_total("https://x/max", 1700),
            _with_total("https://x/high", 1701),
        ]

        result = self.aggregator.aggregate([listings])

        self.assertEqual({l.link for l in result.listings}, {"https://x/min", "https://x/max"})
        self.assertEqual(result.filtered, 2)

    def test_listing_on_both_bounds_is_kept(self):
        self.assertFalse(self.aggregator.is_filtered(_with_total("https://x/edge", 1700, area=35)))

    def test_zero_area_excluded_regardless_of_price(self):
        self.assertTrue(self.aggregator.is_filtered(_with_total("https://x/zero", 1500, area=0)))

    def test_area_threshold(self):
        listings = [
            _with_total("https://x/35", 1500, area=35),
            _with_total("https://x/34", 1500, area=34),
            _with_total("https://x/0", 1500, area=0),
        ]

        result = self.aggregator.aggregate([listings])

        self.assertEqual([l.link for l in result.listings], ["https://x/35"])

    def test_zero_area_rejected_even_without_minimum(self):
        aggregator = ListingAggregator(min_total=0, max_total=5000, min_area=0)
        self.assertTrue(aggregator.is_filtered(_with_total("https://x/0", 1500, area=0)))

    def test_total_includes_fees(self):
        listing = make_listing(link="https://x/fees", price=1200, iptu=100, condominio=401)
        self.assertEqual(listing.total_price, 1701)
        self.assertTrue(self.aggregator.is_filtered(listing))

    def test_sorted_ascending_by_area_with_stable_ties(self):
        a = _with_total("https://x/a", 1500, area=60)
        b = _with_total("https://x/b", 1500, area=40)
        c = _with_total("https://x/c", 1500, area=60)
        d = _with_total("https://x/d", 1500, area=50)

        result = self.aggregator.aggregate([[a, b], [c, d]])

        self.assertEqual([l.link for l in result.listings],
                         ["https://x/b", "https://x/d", "https://x/a", "https://x/c"])

    def test_descending_order_keeps_ties_stable(self):
        aggregator = ListingAggregator(min_total=1300, max_total=1700, min_area=35, sort_order='desc')
        a = _with_total("https://x/a", 1500, area=60)
        b = _with_total("https://x/b", 1500, area=40)
        c = _with_total("https://x/c", 1500, area=60)

        result = aggregator.aggregate([[a, b, c]])

        self.assertEqual([l.link for l in result.listings],
                         ["https://x/a", "https://x/c", "https://x/b"])

    def test_empty_input(self):
        result = self.aggregator.aggregate([])
        self.assertEqual(result.listings, [])
        self.assertEqual(result.total, 0)

    def test_aggregation_is_idempotent(self):
        listings = [_with_total(f"https://x/{i}", 1300 + i * 50, area=30 + i * 3) for i in range(8)]
        once = self.aggregator.aggregate([listings])
        twice = self.aggregator.aggregate([once.listings])
        self.assertEqual(once.listings, twice.listings)

    def test_from_config_uses_filters(self):
        config = Config({
            "sources": {"olx": {"start_urls": ["https://www.olx.com.br/imoveis"]}},
            "filters": {"min_total": 1000, "max_total": 2000, "min_area": 20, "sort_order": "desc"},
        })
        aggregator = ListingAggregator.from_config(config)

        self.assertEqual(aggregator.min_total, 1000)
        self.assertEqual(aggregator.max_total, 2000)
        self.assertEqual(aggregator.min_area, 20)
        self.assertTrue(aggregator.descending)


if __name__ == '__main__':
    unittest.main()
