#!/usr/bin/env python
"""
Network Scan Script
===================
Runs one discovery pass against the real network and prints what it found.
Handy for checking dns-sd / arp output on a new machine.

Usage:
    python script/scan_network.py [duration_ms]
"""
import asyncio
import logging
import sys
import time
from pathlib import Path

# Add parent to path so we can import launchit modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from launchit.services.discovery import NetworkDiscoveryService


async def main(duration_ms: int):
    service = NetworkDiscoveryService()

    print(f"Starting network discovery ({duration_ms}ms)...")
    started = time.monotonic()
    shares = await service.scan_for_shares(duration_ms)
    elapsed_ms = int((time.monotonic() - started) * 1000)

    print(f"Scan completed in {elapsed_ms}ms")
    print(f"Found {len(shares)} share(s):")
    for share in shares:
        print(f"- {share.name} ({share.type.value})")
        print(f"  Host: {share.host}")
        print(f"  IP: {share.address or '-'}")
        print(f"  Ports: {', '.join(str(p) for p in share.open_ports or [])}")

    if not shares:
        print("Nothing found. Is dns-sd installed and is arp available?")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 5000))
