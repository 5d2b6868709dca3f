"""Analysis pass catalog.

Each pass module declares `GROUP` and a `PASS` definition. Pass names are the
canonical identifiers used on the command line and as report keys; category
names are unique across the whole catalog.
"""

from __future__ import annotations

from typing import Dict

from .antianalysis import PASS as ANTIANALYSIS_PASS
from .base import Category, PassConfig
from .c2 import PASS as C2_PASS
from .fileops import PASS as FILEOPS_PASS
from .injection import PASS as INJECTION_PASS
from .keychain import PASS as KEYCHAIN_PASS
from .machipc import PASS as MACHIPC_PASS
from .network import PASS as NETWORK_PASS
from .persistence import PASS as PERSISTENCE_PASS
from .privesc import PASS as PRIVESC_PASS
from .rootkit import PASS as ROOTKIT_PASS
from .syscalls import PASS as SYSCALLS_PASS
from .xpc import PASS as XPC_PASS


# Keep passes explicit so ordering stays predictable in CLI output and reports.
PASS_GROUPS: Dict[str, PassConfig] = {
    "antianalysis": ANTIANALYSIS_PASS,
    "c2": C2_PASS,
    "keychain": KEYCHAIN_PASS,
    "persistence": PERSISTENCE_PASS,
    "privesc": PRIVESC_PASS,
    "injection": INJECTION_PASS,
    "rootkit": ROOTKIT_PASS,
    "syscalls": SYSCALLS_PASS,
    "machipc": MACHIPC_PASS,
    "fileops": FILEOPS_PASS,
    "network": NETWORK_PASS,
    "xpc": XPC_PASS,
}


def categories_by_name() -> Dict[str, Category]:
    return {cat.name: cat for pass_cfg in PASS_GROUPS.values() for cat in pass_cfg.categories()}
