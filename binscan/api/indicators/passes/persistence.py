"""Persistence mechanisms: launchd, login items, cron, kexts, browser extensions
and dylib injection.
"""

from __future__ import annotations

from ..engine.source import CSTRING_SECTIONS
from .base import PassConfig, Phase, TypeRule, strings

GROUP = "persistence"

LAUNCH_PATH_TYPES = (
    TypeRule("LaunchAgent", ("LaunchAgents",)),
    TypeRule("LaunchDaemon", ("LaunchDaemons",)),
    TypeRule("Plist", (".plist",)),
)

BROWSER_TYPES = (
    TypeRule("Safari", ("Safari",)),
    TypeRule("Chrome", ("Chrome",)),
    TypeRule("Firefox", ("Firefox", "firefox", "Mozilla")),
    TypeRule("Brave", ("Brave",)),
    TypeRule("Edge", ("Edge",)),
)

LAUNCH = Phase(
    title="Launch Agents & Daemons",
    recommendation="Check launchd plists installed by this binary",
    strings=(
        strings(
            "launch_smjob",
            "ServiceManagement",
            (
                "SMJobBless", "SMJobSubmit", "SMJobRemove", "SMJobCopyDictionary", "SMCopyAllJobDictionaries",
                "SMLoginItemSetEnabled",
            ),
            cap=50,
        ),
        strings(
            "launch_paths",
            "launchd paths",
            (
                "/Library/LaunchAgents", "/Library/LaunchDaemons", "~/Library/LaunchAgents",
                "/System/Library/LaunchAgents", "/System/Library/LaunchDaemons", "LaunchAgents/",
                "LaunchDaemons/", ".plist",
            ),
            min_length=5,
            max_length=512,
            sections=CSTRING_SECTIONS,
            types=LAUNCH_PATH_TYPES,
            type_fallback="Path",
        ),
        strings(
            "launch_plist",
            "plist writers",
            (
                "CFPropertyListCreateWithData", "CFPropertyListCreateData", "NSPropertyListSerialization",
                "propertyListWithData", "writeToFile", "writeToURL",
            ),
            cap=80,
        ),
    ),
)

LOGIN_ITEMS = Phase(
    title="Login Items",
    recommendation="Review login items and background task management entries",
    strings=(
        strings(
            "login_apis",
            "login item APIs",
            (
                "LSSharedFileListCreate", "LSSharedFileListInsertItemURL", "LSSharedFileListItemRemove",
                "kLSSharedFileListSessionLoginItems", "kLSSharedFileListGlobalLoginItems",
                "SMLoginItemSetEnabled", "SMLoginItemEnabled",
            ),
            cap=50,
        ),
        strings(
            "login_paths",
            "login item paths",
            ("LoginItems", "SessionItems", "com.apple.loginitems.plist", "backgrounditems.btm"),
            cap=30,
        ),
    ),
)

CRON = Phase(
    title="Cron & Periodic",
    recommendation="Inspect crontabs and periodic scripts",
    strings=(
        strings(
            "cron_commands",
            "cron commands",
            ("crontab", "crontab -e", "crontab -l", "at", "atq", "atrm", "/usr/bin/crontab", "/usr/bin/at"),
            cap=40,
        ),
        strings(
            "cron_paths",
            "cron paths",
            (
                "/etc/crontab", "/etc/cron.d", "/var/at/tabs", "/var/cron/tabs", "/etc/periodic",
                "periodic/daily", "periodic/weekly", "periodic/monthly", "/etc/rc.common", "/etc/rc.local",
            ),
            cap=60,
        ),
    ),
)

KEXTS = Phase(
    title="Kernel Extensions",
    recommendation="Verify any kernel extension this binary loads",
    strings=(
        strings(
            "kext_apis",
            "kext APIs",
            (
                "kextload", "kextunload", "kextstat", "kextutil", "IOServiceMatching",
                "IOServiceGetMatchingService", "IOServiceOpen", "IOConnectCallMethod",
                "IOConnectCallStructMethod", "IOConnectCallScalarMethod", "KUNCUserNotificationDisplayNotice",
            ),
            cap=80,
        ),
        strings(
            "kext_paths",
            "kext paths",
            ("/Library/Extensions", "/System/Library/Extensions", ".kext", ".kext/", "Extensions/"),
            cap=40,
        ),
    ),
)

BROWSER = Phase(
    title="Browser Extensions",
    recommendation="Audit installed browser extensions",
    strings=(
        strings(
            "browser_extensions",
            "browser extension paths",
            (
                "Safari/Extensions", "~/Library/Safari/Extensions", "Safari.app/Contents/Extensions",
                "Google/Chrome/Default/Extensions", "Application Support/Google/Chrome",
                "Chrome/Default/Extensions", "Firefox/Profiles", "firefox/extensions", "Mozilla/Extensions",
                "BraveSoftware/Brave-Browser", "Microsoft Edge/Default/Extensions",
            ),
            cap=80,
            min_length=5,
            max_length=512,
            sections=CSTRING_SECTIONS,
            types=BROWSER_TYPES,
            type_fallback="Browser",
        ),
    ),
)

DYLIB = Phase(
    title="Dylib Injection",
    recommendation="Check for DYLD environment abuse and interposing",
    strings=(
        strings(
            "dylib_env",
            "DYLD environment",
            (
                "DYLD_INSERT_LIBRARIES", "DYLD_FORCE_FLAT_NAMESPACE", "DYLD_LIBRARY_PATH",
                "DYLD_FRAMEWORK_PATH", "DYLD_FALLBACK_LIBRARY_PATH", "DYLD_FALLBACK_FRAMEWORK_PATH",
                "LSEnvironment", "EnvironmentVariables",
            ),
            cap=60,
        ),
        strings(
            "dylib_interposing",
            "interposing",
            ("__interpose", "DYLD_INTERPOSE", "interpose_", "dyld_interpose", "__DATA,__interpose"),
            cap=40,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Persistence Mechanism Detection",
    description="launchd, login item, cron, kext, browser extension and dylib persistence.",
    phases=(LAUNCH, LOGIN_ITEMS, CRON, KEXTS, BROWSER, DYLIB),
)
