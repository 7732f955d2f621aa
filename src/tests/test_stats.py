import math
import tempfile
import unittest
from pathlib import Path

from udpprobe.net.rx import ArrivalRecord
from udpprobe.stats import (
    format_summary,
    load_arrival_log,
    parse_arrival_line,
    summarize,
    summarize_log,
)


def _records(arrivals_ns, *, size=500, sender=("127.0.0.1", 40000)):
    out = []
    prev = 0
    for t in arrivals_ns:
        out.append(ArrivalRecord(time_since_start_ns=t, time_diff_ns=t - prev, size=size, sender=sender))
        prev = t
    return out


class TestParseLine(unittest.TestCase):
    def test_ipv4_line(self) -> None:
        rec = parse_arrival_line("1500000,1500000,500,10.0.0.2:51234\n")
        self.assertEqual(rec, ArrivalRecord(1_500_000, 1_500_000, 500, ("10.0.0.2", 51234)))

    def test_ipv6_line(self) -> None:
        rec = parse_arrival_line("10,10,64,[::1]:5000")
        self.assertEqual(rec.sender, ("::1", 5000))

    def test_line_matches_receiver_format(self) -> None:
        rec = ArrivalRecord(7, 3, 500, ("192.168.0.1", 1024))
        self.assertEqual(parse_arrival_line(rec.format_line()), rec)

    def test_malformed_lines(self) -> None:
        for line in ["", "1,2,3", "a,b,c,1.2.3.4:5", "1,2,3,4,5", "1,2,3,nohost", "1,2,3,1.2.3.4:0"]:
            with self.assertRaises(ValueError, msg=line):
                parse_arrival_line(line)


class TestSummarize(unittest.TestCase):
    def test_steady_one_millisecond_stream(self) -> None:
        recs = _records([2_000_000 + i * 1_000_000 for i in range(11)])
        s = summarize(recs, expected_interval_ns=1_000_000)

        self.assertEqual(s["packets"], 11)
        self.assertEqual(s["bytes"], 5500)
        self.assertEqual(s["span_ns"], 10_000_000)
        self.assertEqual(s["first_ns"], 2_000_000)
        self.assertEqual(s["interval_mean_ns"], 1_000_000.0)
        self.assertEqual(s["interval_min_ns"], 1_000_000)
        self.assertEqual(s["interval_max_ns"], 1_000_000)
        self.assertEqual(s["jitter_ns"], 0.0)
        self.assertAlmostEqual(s["rate_pps"], 1000.0)
        self.assertAlmostEqual(s["throughput_bps"], 500 * 8 * 1000.0)
        self.assertEqual(s["expected_packets"], 11)
        self.assertEqual(s["lost"], 0)
        self.assertEqual(s["loss_ratio"], 0.0)

    def test_first_delta_is_not_an_interval(self) -> None:
        # first arrival 5 s after receiver start must not inflate the stats
        recs = _records([5_000_000_000, 5_001_000_000, 5_002_000_000])
        s = summarize(recs)
        self.assertEqual(s["interval_max_ns"], 1_000_000)
        self.assertNotIn("lost", s)

    def test_gap_counts_as_loss(self) -> None:
        times = [i * 1_000_000 for i in range(1, 21) if i not in (5, 6, 7)]
        s = summarize(_records(times), expected_interval_ns=1_000_000)
        self.assertEqual(s["expected_packets"], 20)
        self.assertEqual(s["packets"], 17)
        self.assertEqual(s["lost"], 3)
        self.assertAlmostEqual(s["loss_ratio"], 3 / 20)
        self.assertEqual(s["interval_max_ns"], 4_000_000)
        self.assertGreater(s["jitter_ns"], 0.0)

    def test_jitter_is_std_of_intervals(self) -> None:
        recs = _records([1_000, 2_000, 4_000, 5_000])
        s = summarize(recs)
        gaps = [1_000, 2_000, 1_000]
        mean = sum(gaps) / 3
        std = math.sqrt(sum((g - mean) ** 2 for g in gaps) / 3)
        self.assertAlmostEqual(s["jitter_ns"], std)
        self.assertAlmostEqual(s["interval_mean_ns"], mean)

    def test_single_record(self) -> None:
        s = summarize(_records([3_000_000]), expected_interval_ns=1_000_000)
        self.assertEqual(s["packets"], 1)
        self.assertIsNone(s["jitter_ns"])
        self.assertIsNone(s["rate_pps"])
        self.assertEqual(s["lost"], 0)

    def test_counts_distinct_senders(self) -> None:
        recs = _records([1, 2], sender=("10.0.0.1", 1000)) + _records([3], sender=("10.0.0.1", 1001))
        self.assertEqual(summarize(recs)["senders"], 2)

    def test_empty_and_bad_interval(self) -> None:
        with self.assertRaises(ValueError):
            summarize([])
        with self.assertRaises(ValueError):
            summarize(_records([1, 2]), expected_interval_ns=0)

    def test_format_summary(self) -> None:
        text = format_summary({"packets": 3, "jitter_ns": 12.5, "rate_pps": None}, keys=["packets", "jitter_ns", "rate_pps"])
        self.assertEqual(text.splitlines(), ["packets  : 3", "jitter_ns: 12.500", "rate_pps : -"])


class TestLoadLog(unittest.TestCase):
    def test_load_and_summarize_file(self) -> None:
        lines = [r.format_line() for r in _records([1_000_000, 2_000_000, 3_000_000])]
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "rx.log"
            path.write_text("\n".join(lines) + "\n\n", encoding="ascii")

            records = load_arrival_log(str(path))
            self.assertEqual(len(records), 3)
            self.assertEqual(records[1].time_diff_ns, 1_000_000)

            s = summarize_log(str(path), expected_interval_ns=1_000_000)
            self.assertEqual(s["packets"], 3)
            self.assertEqual(s["lost"], 0)


if __name__ == "__main__":
    unittest.main()
