import asyncio
import unittest

from fakes import FakeProcess, FakeSession
from launchit.models import ShareType
from launchit.services.discovery.neighbor_sweep import (
    NeighborSweep,
    classify_ports,
    display_name,
    parse_neighbor_table,
)

ARP_OUTPUT = [
    "router.lan (192.168.1.1) at a4:91:b1:00:00:01 on en0 ifscope [ethernet]",
    "nas.lan (192.168.1.10) at 00:11:32:aa:bb:cc on en0 ifscope [ethernet]",
    "? (192.168.1.23) at 3c:22:fb:00:00:02 on en0 ifscope [ethernet]",
    "? (192.168.1.255) at ff:ff:ff:ff:ff:ff on en0 ifscope [ethernet]",
    "? (224.0.0.251) at 1:0:5e:0:0:fb on en0 ifscope permanent [ethernet]",
    "? (239.255.255.250) at 1:0:5e:7f:ff:fa on en0 ifscope permanent [ethernet]",
    "nas.lan (192.168.1.10) at 00:11:32:aa:bb:cc on en1 ifscope [ethernet]",
    "garbage line",
]


class TestParsing(unittest.TestCase):

    def test_neighbor_table_filters_multicast_and_broadcast(self):
        self.assertEqual(
            parse_neighbor_table(ARP_OUTPUT),
            ["192.168.1.1", "192.168.1.10", "192.168.1.23"],
        )

    def test_classification_precedence(self):
        self.assertEqual(classify_ports([22, 139, 548]), ShareType.SMB)
        self.assertEqual(classify_ports([445]), ShareType.SMB)
        self.assertEqual(classify_ports([548, 2049]), ShareType.AFP)
        self.assertEqual(classify_ports([2049]), ShareType.NFS)
        self.assertEqual(classify_ports([22, 80]), ShareType.OTHER)

    def test_display_name(self):
        self.assertEqual(display_name("nas.lan"), "nas")
        self.assertEqual(display_name("192.168.1.23"), "192.168.1.23")


class TestNeighborSweep(unittest.TestCase):

    def test_sweep_populates_registry(self):
        open_ports = {
            "192.168.1.1": [80, 443],
            "192.168.1.10": [22, 445],
            "192.168.1.23": [],
        }
        names = {"192.168.1.1": "router.lan", "192.168.1.10": "nas.lan"}
        probed = []

        async def scanner(ip, selection):
            probed.append((ip, selection))
            return open_ports[ip]

        async def resolver(ip):
            return names.get(ip, ip)

        session = FakeSession({("arp",): FakeProcess(ARP_OUTPUT)})
        sweeper = NeighborSweep(command=["arp", "-a"], port_scanner=scanner, resolver=resolver)
        asyncio.run(sweeper.sweep(session))

        shares = {s.address: s for s in session.shares.values()}
        self.assertEqual(sorted(shares), ["192.168.1.1", "192.168.1.10"])
        self.assertEqual(shares["192.168.1.10"].type, ShareType.SMB)
        self.assertEqual(shares["192.168.1.10"].name, "nas")
        self.assertEqual(shares["192.168.1.10"].open_ports, [22, 445])
        self.assertEqual(shares["192.168.1.1"].type, ShareType.OTHER)
        self.assertEqual(len(probed), 3)
        self.assertTrue(all(sel == "basic" for _, sel in probed))

    def test_unresolvable_host_keeps_ip(self):
        async def scanner(ip, selection):
            return [22]

        async def resolver(ip):
            return ip

        session = FakeSession({("arp",): FakeProcess(["? (10.0.0.7) at 0:1:2:3:4:5 on en0"])})
        asyncio.run(NeighborSweep(["arp", "-a"], scanner, resolver).sweep(session))

        share = session.shares.values()[0]
        self.assertEqual(share.name, "10.0.0.7")
        self.assertEqual(share.host, "10.0.0.7")

    def test_missing_arp_command(self):
        async def scanner(ip, selection):
            raise AssertionError("nothing to probe")

        session = FakeSession()
        asyncio.run(NeighborSweep(["arp", "-a"], scanner).sweep(session))
        self.assertEqual(len(session.shares), 0)


if __name__ == "__main__":
    unittest.main()
