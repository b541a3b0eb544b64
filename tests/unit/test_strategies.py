from pkgexplorer.utils.strategies import UpstreamOrder, WeeklyDownloadsSort
from tests.conftest import make_record

def test_sort_by_weekly_downloads_is_numeric():
    records = [make_record("a", 9), make_record("b", 10), make_record("c", 100_000)]
    out = WeeklyDownloadsSort(desc=True).sort(records)
    assert [r.name for r in out] == ["c", "b", "a"]

def test_sort_is_stable_for_ties():
    records = [make_record("first", 5), make_record("second", 5), make_record("third", 7)]
    out = WeeklyDownloadsSort().sort(records)
    assert [r.name for r in out] == ["third", "first", "second"]

def test_upstream_order_keeps_relevance():
    records = [make_record("z", 1), make_record("a", 1000)]
    out = UpstreamOrder().sort(records)
    assert [r.name for r in out] == ["z", "a"]
    assert out is not records
