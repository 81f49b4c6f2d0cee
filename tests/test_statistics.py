from conclab.hello_server.statistics import Report, Statistics


def test_counts_per_key():
    stats = Statistics()
    for report in (Report(0, "a"), Report(1, "b"), Report(2, "a"), Report(3, None)):
        stats.add_report(report)
    assert stats.hits_for("a") == 2
    assert stats.hits_for("b") == 1
    assert stats.hits_for(None) == 1


def test_unknown_key_has_no_hits():
    stats = Statistics()
    stats.add_report(Report(0, "a"))
    assert stats.hits_for("missing") == 0


def test_total_hits_match_reports():
    stats = Statistics()
    keys = ["x", None, "y", "x", None, None]
    for i, key in enumerate(keys):
        stats.add_report(Report(i, key))
    assert sum(stats.hits.values()) == len(keys)
    assert stats.hits_for(None) == keys.count(None)


def test_report_default_key_is_invalid_request():
    report = Report(7)
    assert report.key is None
    assert report == Report(7, None)