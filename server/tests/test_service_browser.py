import asyncio
import time
import unittest

from fakes import FakeProcess, FakeSession
from launchit.services.discovery.service_browser import (
    ResolvedService,
    ServiceBrowser,
    ServiceResolver,
    parse_browse_line,
    parse_resolve_line,
)

BROWSE_OUTPUT = [
    "Browsing for _smb._tcp.local",
    "DATE: ---Sat 18 Oct 2026---",
    "Timestamp     A/R    Flags  if Domain               Service Type         Instance Name",
    "10:41:02.114  Add        3   4 local.               _smb._tcp.           Office NAS",
    "10:41:02.115  Add        3   7 local.               _smb._tcp.           Office NAS",
    "10:41:02.116  Add        2   4 local.               _smb._tcp.           media-box",
    "10:41:05.001  Rmv        0   4 local.               _smb._tcp.           old-share",
]


class TestParsing(unittest.TestCase):

    def test_browse_add_line(self):
        self.assertEqual(parse_browse_line(BROWSE_OUTPUT[3], "_smb._tcp"), "Office NAS")

    def test_browse_ignores_other_events(self):
        self.assertIsNone(parse_browse_line(BROWSE_OUTPUT[0], "_smb._tcp"))
        self.assertIsNone(parse_browse_line(BROWSE_OUTPUT[6], "_smb._tcp"))
        self.assertIsNone(parse_browse_line(BROWSE_OUTPUT[3], "_afpovertcp._tcp"))

    def test_resolve_reached_at_format(self):
        line = "Office\\032NAS._smb._tcp.local. can be reached at nas.local.:445 (interface 4)"
        self.assertEqual(parse_resolve_line(line, "Office NAS"), ResolvedService("nas.local", 445))

    def test_resolve_columnar_format(self):
        line = "10:41:03.000  media-box._smb._tcp.local.  0 0 445 media-box.local."
        self.assertEqual(parse_resolve_line(line, "media-box"), ResolvedService("media-box.local", 445))

    def test_resolve_unrelated_line(self):
        self.assertIsNone(parse_resolve_line("Lookup media-box._smb._tcp.local", "media-box"))
        self.assertIsNone(parse_resolve_line("random noise here ok", "media-box"))


class TestServiceResolver(unittest.TestCase):

    def test_resolves_and_kills_process(self):
        proc = FakeProcess([
            "Lookup Office NAS._smb._tcp.local",
            "Office\\032NAS._smb._tcp.local. can be reached at nas.local.:445 (interface 4)",
        ], stay_open=True)
        session = FakeSession({("dns-sd", "-L"): proc})
        resolver = ServiceResolver(command="dns-sd", timeout_ms=1000)

        result = asyncio.run(resolver.resolve(session, "Office NAS", "_smb._tcp", "local"))

        self.assertEqual(result, ResolvedService("nas.local", 445))
        self.assertEqual(session.spawned[0], ("dns-sd", "-L", "Office NAS", "_smb._tcp", "local"))
        self.assertGreaterEqual(proc.kill_count, 1)
        self.assertEqual(session.processes, set())

    def test_timeout_returns_none(self):
        proc = FakeProcess(["Lookup Office NAS._smb._tcp.local"], stay_open=True)
        session = FakeSession({("dns-sd", "-L"): proc})
        resolver = ServiceResolver(command="dns-sd", timeout_ms=50)

        self.assertIsNone(asyncio.run(resolver.resolve(session, "Office NAS", "_smb._tcp", "local")))
        self.assertGreaterEqual(proc.kill_count, 1)

    def test_spawn_failure_returns_none(self):
        resolver = ServiceResolver(command="dns-sd", timeout_ms=50)
        self.assertIsNone(asyncio.run(resolver.resolve(FakeSession(), "x", "_smb._tcp", "local")))


class TestServiceBrowser(unittest.TestCase):

    def test_each_instance_triggers_one_resolution(self):
        proc = FakeProcess(BROWSE_OUTPUT, stay_open=True)
        session = FakeSession({("dns-sd", "-B"): proc})
        browser = ServiceBrowser(command="dns-sd", domain="local")
        found = []

        async def on_instance(name):
            await asyncio.sleep(0.05)
            found.append(name)

        async def run():
            await browser.browse(session, "_smb._tcp", 100, on_instance)
            await session.drain()

        asyncio.run(run())

        self.assertEqual(sorted(found), ["Office NAS", "media-box"])
        self.assertEqual(session.spawned[0], ("dns-sd", "-B", "_smb._tcp", "local"))
        self.assertGreaterEqual(proc.kill_count, 1)

    def test_browse_lasts_for_the_window(self):
        proc = FakeProcess([], stay_open=True)
        session = FakeSession({("dns-sd", "-B"): proc})
        browser = ServiceBrowser(command="dns-sd")

        async def on_instance(name):
            pass

        started = time.monotonic()
        asyncio.run(browser.browse(session, "_smb._tcp", 150, on_instance))
        self.assertGreaterEqual(time.monotonic() - started, 0.14)
        self.assertEqual(proc.kill_count, 1)

    def test_spawn_failure_is_not_fatal(self):
        browser = ServiceBrowser(command="dns-sd")

        async def on_instance(name):
            raise AssertionError("should not be called")

        asyncio.run(browser.browse(FakeSession(), "_smb._tcp", 1000, on_instance))


if __name__ == "__main__":
    unittest.main()
