"""Network indicators: socket/DNS/TLS symbols, Foundation and CFNetwork APIs,
Swift networking types, and URL, IP, domain and port strings.
"""

from __future__ import annotations

from ..engine.source import ANY_STRING_SECTIONS
from ..engine.strings import ExtractPolicy
from .base import PassConfig, Phase, strings, symbols
from .fileops import SWIFT_FILTER

GROUP = "network"

NETWORK_POLICY = ExtractPolicy(min_length=4, max_length=512, accept_partial=True)

TLDS = (
    ".com", ".net", ".org", ".edu", ".gov", ".mil", ".io", ".co", ".us", ".uk", ".de", ".fr", ".cn", ".ru",
)

C_SYMBOLS = Phase(
    title="C Network APIs",
    recommendation="Capture traffic from these sockets",
    symbols=(
        symbols(
            "net_socket",
            "sockets",
            (
                "socket", "connect", "bind", "listen", "accept", "send", "recv", "sendto", "recvfrom",
                "sendmsg", "recvmsg", "shutdown", "close", "setsockopt", "getsockopt", "getpeername",
                "getsockname", "select", "poll", "epoll", "kqueue", "read", "write",
            ),
        ),
        symbols(
            "net_dns",
            "DNS",
            (
                "getaddrinfo", "freeaddrinfo", "getnameinfo", "gethostbyname", "gethostbyaddr",
                "getservbyname", "getservbyport", "inet_pton", "inet_ntop", "inet_addr", "inet_ntoa",
                "res_query", "dns_",
            ),
        ),
        symbols(
            "net_ssl",
            "TLS libraries",
            (
                "SSL_", "SSLContext", "SSLHandshake", "SSLRead", "SSLWrite", "SSLClose", "SSLSetConnection",
                "TLS_", "OpenSSL", "BIO_", "EVP_", "X509_", "PEM_", "RSA_", "SecureTransport",
            ),
        ),
    ),
)

OBJC_SYMBOLS = Phase(
    title="Foundation/CFNetwork APIs",
    recommendation="Proxy Foundation traffic to inspect requests",
    symbols=(
        symbols(
            "net_urlsession",
            "NSURLSession",
            (
                "NSURLSession", "dataTaskWithURL", "dataTaskWithRequest", "uploadTask", "downloadTask",
                "streamTask", "webSocketTask", "sessionWithConfiguration", "sharedSession", "URLSession",
            ),
        ),
        symbols(
            "net_urlconnection",
            "NSURLConnection",
            (
                "NSURLConnection", "sendSynchronousRequest", "sendAsynchronousRequest", "connectionWithRequest",
                "initWithRequest",
            ),
        ),
        symbols(
            "net_cfnetwork",
            "CFNetwork",
            (
                "CFNetwork", "CFHTTPMessage", "CFHTTPStream", "CFHost", "CFNetService", "CFSocketStream",
                "CFReadStream", "CFWriteStream", "CFStream",
            ),
        ),
        symbols(
            "net_stream",
            "streams",
            (
                "NSInputStream", "NSOutputStream", "NSStream", "inputStreamWithURL", "outputStreamToFileAtPath",
                "getStreamsToHost",
            ),
        ),
    ),
)

SWIFT_SYMBOLS = Phase(
    title="Swift Network APIs",
    symbols=(
        symbols(
            "swift_network",
            "Swift networking",
            (
                "URLSession", "URLRequest", "URLResponse", "URLSessionTask", "Network.NWConnection",
                "Network.NWListener", "Network.NWParameters", "WebSocket", "HTTPURLResponse",
                "URLSessionConfiguration",
            ),
            **SWIFT_FILTER,
        ),
    ),
)

STRINGS = Phase(
    title="Network Strings",
    recommendation="Check endpoints against threat intelligence",
    strings=(
        strings(
            "net_urls",
            "URLs",
            ("http://", "https://", "ws://", "wss://", "ftp://", "ftps://"),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="prefix",
            policy=NETWORK_POLICY,
        ),
        strings(
            "net_ips",
            "IPv4 addresses",
            (r"\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="regex",
            policy=NETWORK_POLICY,
        ),
        strings(
            "net_domains",
            "domains",
            (r"[a-zA-Z0-9][a-zA-Z0-9-]{0,61}[a-zA-Z0-9]?\.[a-zA-Z]{2,}",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="regex",
            require=TLDS,
            exclude_prefixes=("http",),
            policy=NETWORK_POLICY,
        ),
        strings(
            "net_ports",
            "ports",
            (r":[0-9]{2,5}\b",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="regex",
            policy=NETWORK_POLICY,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Network Analysis",
    description="Socket, DNS, TLS, Foundation and Swift networking APIs plus URL/IP/domain/port strings.",
    phases=(C_SYMBOLS, OBJC_SYMBOLS, SWIFT_SYMBOLS, STRINGS),
)
