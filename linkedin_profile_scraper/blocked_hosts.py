"""Hosts whose scripts and beacons are aborted while pages render.

Blocking trackers is what a basic ad blocker does; it keeps LinkedIn pages
quicker to settle. The deny-list uses hosts-file syntax so that lists such
as http://winhelp2002.mvps.org/hosts.htm can be dropped in as they are.
"""
from functools import lru_cache
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlparse

TRACKER_HOSTS = frozenset(
    [
        "static.chartbeat.com",
        "scdn.cxense.com",
        "api.cxense.com",
        "www.googletagmanager.com",
        "connect.facebook.net",
        "platform.twitter.com",
        "tags.tiqcdn.com",
        "dev.visualwebsiteoptimizer.com",
        "smartlock.google.com",
        "cdn.embedly.com",
    ]
)

BLOCKED_HOSTS_LIST = """
# Tracking and advertising hosts, hosts-file format.
0.0.0.0 www.google-analytics.com
0.0.0.0 ssl.google-analytics.com
0.0.0.0 stats.g.doubleclick.net
0.0.0.0 ad.doubleclick.net
0.0.0.0 googleads.g.doubleclick.net
0.0.0.0 pagead2.googlesyndication.com
0.0.0.0 adservice.google.com
0.0.0.0 bat.bing.com
0.0.0.0 sb.scorecardresearch.com
0.0.0.0 b.scorecardresearch.com
0.0.0.0 pixel.quantserve.com
0.0.0.0 secure.quantserve.com
0.0.0.0 cdn.krxd.net
0.0.0.0 beacon.krxd.net
0.0.0.0 js-agent.newrelic.com
0.0.0.0 bam.nr-data.net
0.0.0.0 cdn.mxpnl.com
0.0.0.0 api.mixpanel.com
0.0.0.0 static.hotjar.com
0.0.0.0 script.hotjar.com
0.0.0.0 cdn.segment.com
0.0.0.0 api.segment.io
0.0.0.0 s.yimg.com
0.0.0.0 analytics.twitter.com
0.0.0.0 static.ads-twitter.com
0.0.0.0 px.ads.linkedin.com
0.0.0.0 snap.licdn.com
"""


def parse_hosts_file(text: str) -> FrozenSet[str]:
    """Hostnames of every `0.0.0.0 <host>` line; comments and other lines are ignored."""
    hosts = set()
    for line in text.splitlines():
        frags = line.split("#", 1)[0].split()
        if len(frags) > 1 and frags[0] == "0.0.0.0":
            hosts.add(frags[1].strip().lower())
    return frozenset(hosts)


def get_hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class HostBlockPolicy:
    """Immutable set of blocked hostnames, built once per session."""

    __slots__ = ("_hosts",)

    def __init__(self, hosts: Iterable[str]):
        self._hosts = frozenset(h.lower() for h in hosts)

    @classmethod
    def from_hosts_file(cls, text: str, extra: Iterable[str] = TRACKER_HOSTS) -> "HostBlockPolicy":
        return cls(parse_hosts_file(text) | frozenset(extra))

    def should_block(self, hostname: Optional[str]) -> bool:
        if not hostname:
            return False
        return hostname.lower() in self._hosts

    def __len__(self) -> int:
        return len(self._hosts)

    def __contains__(self, hostname: object) -> bool:
        return isinstance(hostname, str) and self.should_block(hostname)


@lru_cache(maxsize=1)
def default_policy() -> HostBlockPolicy:
    return HostBlockPolicy.from_hosts_file(BLOCKED_HOSTS_LIST)
