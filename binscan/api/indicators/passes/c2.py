"""Command-and-control indicators.

Network stack usage, domain generation building blocks, crypto and encoding,
known offensive frameworks, exfiltration helpers and beaconing timers. Every
category caps at 100 hits. Framework strings are also looked for in
`__DATA,__data`, where implant configs tend to sit.
"""

from __future__ import annotations

from ..engine.source import STRING_AND_DATA_SECTIONS
from .base import PassConfig, Phase, TypeRule, strings

GROUP = "c2"

RECOMMENDATIONS = (
    "Monitor network connections and DNS queries",
    "Inspect encrypted traffic patterns",
    "Check domains against threat intelligence",
    "Watch for periodic beaconing",
)

FRAMEWORK_TYPES = (
    TypeRule("Cobalt Strike", ("beacon", "Beacon", "cobaltstrike", "malleable")),
    TypeRule("Metasploit", ("meterpreter", "Meterpreter", "metasploit", "msf")),
    TypeRule("Empire", ("empire", "Empire")),
    TypeRule("Sliver", ("sliver", "Sliver")),
    TypeRule("Mythic", ("mythic", "Mythic")),
    TypeRule("Covenant", ("covenant", "Covenant")),
    TypeRule("Havoc", ("havoc", "Havoc", "demon", "Demon")),
    TypeRule("Brute Ratel", ("brute_ratel", "BruteRatel")),
)

NETWORK = Phase(
    title="Network",
    recommendation=RECOMMENDATIONS[0],
    strings=(
        strings(
            "c2_socket",
            "socket API",
            (
                "socket", "connect", "bind", "listen", "accept", "send", "recv", "sendto", "recvfrom",
                "setsockopt", "getsockopt", "getaddrinfo", "gethostbyname", "inet_addr", "inet_ntoa",
            ),
        ),
        strings(
            "c2_http",
            "HTTP clients",
            (
                "NSURLSession", "NSURLConnection", "NSURLRequest", "NSMutableURLRequest", "NSURLSessionTask",
                "NSURLSessionDataTask", "NSURLSessionDownloadTask", "dataTaskWithURL", "dataTaskWithRequest",
                "URLSession", "URLRequest", "dataTask", "curl_easy_init", "curl_easy_perform",
                "curl_easy_setopt", "CFHTTPMessage", "CFReadStream", "CFWriteStream", "http://", "https://",
            ),
        ),
        strings(
            "c2_dns",
            "DNS resolution",
            (
                "res_query", "res_search", "res_init", "dn_expand", "DNSServiceQueryRecord", "DNSServiceBrowse",
                "DNSServiceResolve", "kDNSServiceType", "kDNSServiceClass", "dns_", "__dns_", "dnssd",
            ),
        ),
        strings(
            "c2_url",
            "URL handling",
            (
                "NSURL", "URLWithString", "initWithURL", "CFURLCreate", "CFURLCreateWithString",
                "NSURLComponents", "URLComponents", "NSURLQueryItem", "queryItems", "percentEncoding",
                "addingPercentEncoding", "URLByAppendingPathComponent", "absoluteString", "absoluteURL",
                "baseURL",
            ),
        ),
        strings(
            "c2_ssl",
            "TLS",
            (
                "SSLCreateContext", "SSLSetConnection", "SSLHandshake", "SSLWrite", "SSLRead", "SSLClose",
                "SecTrustEvaluate", "SecTrustSetAnchorCertificates", "kSecTrustResult", "SSL_", "TLS_", "tls_",
                "NSURLAuthenticationChallenge", "didReceiveAuthenticationChallenge", "SecureTransport",
                "kSSLProtocol", "SSLProtocol", "TLSv1",
            ),
        ),
    ),
)

DGA = Phase(
    title="DGA",
    recommendation=RECOMMENDATIONS[2],
    strings=(
        strings(
            "dga_crypto",
            "hashing",
            (
                "MD5", "SHA1", "SHA256", "SHA512", "CC_MD5", "CC_SHA1", "CC_SHA256", "CCDigest", "CCHmac",
                "crc32", "CRC32", "hash", "Hash", "digest", "Digest",
            ),
        ),
        strings(
            "dga_random",
            "randomness",
            (
                "random", "rand", "srand", "srandom", "arc4random", "CCRandomGenerateBytes",
                "SecRandomCopyBytes", "seed", "Seed", "entropy", "Entropy", "nonce",
            ),
        ),
        strings(
            "dga_time",
            "time sources",
            (
                "time", "gettimeofday", "clock_gettime", "NSDate", "CFAbsoluteTimeGetCurrent",
                "mach_absolute_time", "date", "Date", "timestamp", "Timestamp",
            ),
        ),
        strings(
            "dga_string",
            "string building",
            (
                "sprintf", "snprintf", "asprintf", "strcat", "strncat", "strcpy", "strncpy",
                "stringWithFormat", "appendString", "appendFormat", ".com", ".net", ".org", ".info", ".biz",
            ),
        ),
    ),
)

ENCRYPTION = Phase(
    title="Encryption/Encoding",
    recommendation=RECOMMENDATIONS[1],
    strings=(
        strings(
            "crypto_symmetric",
            "symmetric ciphers",
            (
                "AES", "CCCrypt", "CCCryptorCreate", "kCCAlgorithmAES", "kCCAlgorithmDES", "kCCAlgorithm3DES",
                "kCCEncrypt", "kCCDecrypt", "CCCryptorUpdate", "CCCryptorFinal", "ChaCha", "Salsa20", "RC4",
                "Blowfish", "cipher", "Cipher", "encrypt", "decrypt",
            ),
        ),
        strings(
            "crypto_asymmetric",
            "asymmetric crypto",
            (
                "RSA", "SecKeyCreateEncryptedData", "SecKeyCreateDecryptedData", "SecKeyEncrypt",
                "SecKeyDecrypt", "kSecKeyAlgorithmRSA", "SecKeyGeneratePair", "SecKeyCreateRandomKey", "ECC",
                "ECDH", "ECDSA", "SecKeyCreateSignature", "SecKeyVerifySignature", "public_key", "private_key",
            ),
        ),
        strings(
            "crypto_encoding",
            "encodings",
            (
                "Base64", "base64", "BASE64", "base64Encoded", "dataUsingEncoding",
                "initWithBase64EncodedString", "hex", "Hex", "HEX", "hexadecimal", "XOR", "xor", "percent",
                "percentEncoding", "URLEncoding", "stringByAddingPercentEncoding", "UTF8String", "ASCII",
                "encode", "decode",
            ),
        ),
        strings(
            "crypto_custom",
            "custom obfuscation",
            (
                "sbox", "s_box", "SBox", "permutation", "substitution", "key_schedule", "round_key",
                "obfuscate", "deobfuscate", "scramble", "unscramble", "mangle", "unmangle",
            ),
        ),
    ),
)

FRAMEWORKS = Phase(
    title="Frameworks",
    recommendation=RECOMMENDATIONS[2],
    strings=(
        strings(
            "c2_frameworks",
            "C2 frameworks",
            (
                "beacon", "Beacon", "BEACON", "teamserver", "cobaltstrike", "/.cobaltstrike", "beacon.dll",
                "stager", "staged", "malleable", "meterpreter", "Meterpreter", "METERPRETER", "metasploit",
                "Metasploit", "msf", "msfvenom", "reverse_tcp", "reverse_http", "reverse_https", "bind_tcp",
                "empire", "Empire", "powershell empire", "Invoke-Empire", "PSEmpire", "sliver", "Sliver",
                "SLIVER", "sliverpkg", "implant", "Implant", "mythic", "Mythic", "apfell", "covenant",
                "Covenant", "Grunt", "havoc", "Havoc", "demon", "Demon", "brute_ratel", "BruteRatel",
                "nighthawk", "Nighthawk", "posh_c2", "PoshC2",
            ),
            sections=STRING_AND_DATA_SECTIONS,
            types=FRAMEWORK_TYPES,
            type_fallback="Unknown",
        ),
    ),
)

EXFILTRATION = Phase(
    title="Exfiltration",
    recommendation=RECOMMENDATIONS[1],
    strings=(
        strings(
            "exfil_compression",
            "compression",
            (
                "compress", "decompress", "compression", "zlib", "gzip", "deflate", "NSDataCompression",
                "compression_encode", "compression_decode", "COMPRESSION_", "COMPRESSION_ZLIB",
                "COMPRESSION_LZMA", "bz2", "lzma", "lz4",
            ),
        ),
        strings(
            "exfil_archive",
            "archives",
            (
                "zip", "unzip", "archive", "tar", "gzip", "NSFileWrapper", "fileWrapper", "ZipArchive",
                "SSZipArchive", ".zip", ".tar", ".gz",
            ),
        ),
        strings(
            "exfil_chunking",
            "chunking",
            ("chunk", "Chunk", "CHUNK", "split", "Split", "segment", "Segment", "fragment", "Fragment", "part"),
        ),
        strings(
            "exfil_stego",
            "steganography",
            (
                "steg", "Steg", "steganography", "LSB", "least_significant_bit", "embed", "embedded", "hide",
                "hidden", "covert",
            ),
        ),
    ),
)

BEACONING = Phase(
    title="Beaconing",
    recommendation=RECOMMENDATIONS[3],
    strings=(
        strings(
            "beacon_sleep",
            "sleep/delay",
            (
                "sleep", "usleep", "nanosleep", "NSThread", "sleepForTimeInterval", "dispatch_after",
                "dispatch_time", "CFRunLoopRun", "delay", "Delay", "wait", "Wait", "pause", "Pause",
            ),
        ),
        strings(
            "beacon_timer",
            "timers",
            (
                "NSTimer", "timerWithTimeInterval", "scheduledTimerWithTimeInterval", "dispatch_source_create",
                "DISPATCH_SOURCE_TYPE_TIMER", "dispatch_source_set_timer", "CFRunLoopTimer",
                "CFRunLoopTimerCreate", "timer", "Timer", "repeats", "repeating",
            ),
        ),
        strings(
            "beacon_interval",
            "intervals",
            (
                "interval", "Interval", "periodic", "Periodic", "frequency", "Frequency", "heartbeat",
                "Heartbeat", "callback", "Callback",
            ),
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Command & Control Detection",
    description="Network, DGA, crypto, framework, exfiltration and beaconing indicators.",
    phases=(NETWORK, DGA, ENCRYPTION, FRAMEWORKS, EXFILTRATION, BEACONING),
)
