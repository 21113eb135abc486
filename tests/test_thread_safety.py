"""Thread safety tests for the scrubber, scanner and highlighter.

The module docs claim that every call keeps its state local and that
TokenHighlighter can be shared. These tests run the same lines serially
and from a thread pool and compare results.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from linescan import Role, TokenHighlighter, scan, scrub

LINES = [
    "\x1b[1mINFO\x1b[0m host=10.0.0.1:8080 took 12.5ms",
    "_\bw_\ba_\br_\bn disk /var/log at 93%",
    "\x1b[4Oerror\x1b[m uuid=123e4567-e89b-12d3-a456-426614174000",
    'B\bBO\bOL\bLD\bD msg="a b" mac=00:1a:2b:3c:4d:5e',
    "ab\x1b[3Ccd\x1b[1;40Hend fe80::1",
] * 8


def _process(line: str) -> tuple:
    scrubbed = scrub(line)
    spans = list(scan(scrubbed.data))
    return scrubbed.data, repr(scrubbed.attrs), spans


class TestConcurrentUse:
    def test_pool_matches_serial(self) -> None:
        expected = [_process(line) for line in LINES]
        with ThreadPoolExecutor(max_workers=8) as executor:
            actual = list(executor.map(_process, LINES))
        assert actual == expected

    def test_shared_highlighter(self) -> None:
        highlighter = TokenHighlighter({"num": Role.NUMBER, "ipv4": Role.IDENTIFIER})
        expected = [repr(highlighter.highlight(line)) for line in LINES]
        barrier = threading.Barrier(4)
        results: list[list[str]] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            mine = [repr(highlighter.highlight(line)) for line in LINES]
            with lock:
                results.append(mine)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        assert len(results) == 4
        assert all(r == expected for r in results)
