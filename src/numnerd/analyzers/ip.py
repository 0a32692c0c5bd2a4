# -----------------------------------------------------------------------------
#  ip.py
#  n read as an IPv4 / IPv6 address
# -----------------------------------------------------------------------------

from __future__ import annotations

from ipaddress import IPV4LENGTH, IPV6LENGTH, IPv4Address, IPv6Address

from numnerd.facts import FactSink
from numnerd.markup import escape_markup
from numnerd.registry import analyzer


@analyzer(label="IP address", description="n as a 32-bit IPv4 or 128-bit IPv6 address.")
async def ip(n: int, sink: FactSink) -> None:
    if n.bit_length() <= IPV6LENGTH:
        await sink.form("IPv6 address", escape_markup(str(IPv6Address(n))))
    if n.bit_length() <= IPV4LENGTH:
        await sink.form("IPv4 address", escape_markup(str(IPv4Address(n))))
