"""Mach IPC surface: MIG subsystems, port and message APIs, bootstrap lookups
and reverse-DNS service names.

MIG subsystem descriptors are recovered heuristically from constant data; see
`engine.structs` for the record template and its plausibility checks.
"""

from __future__ import annotations

from ..engine.source import ANY_STRING_SECTIONS
from ..engine.strings import ExtractPolicy
from ..engine.structs import MIG_SECTIONS, MIG_SUBSYSTEM
from .base import LayoutScan, PassConfig, Phase, strings, symbols

GROUP = "machipc"

SUBSYSTEMS = Phase(
    title="MIG Subsystems",
    recommendation="Fuzz the recovered MIG message ID ranges",
    layouts=(LayoutScan(layout=MIG_SUBSYSTEM, sections=MIG_SECTIONS, label="MIG subsystems"),),
)

MACH_APIS = Phase(
    title="Mach APIs",
    recommendation="Map which ports the binary allocates and who receives them",
    symbols=(
        symbols(
            "ipc_port_ops",
            "port operations",
            (
                "mach_port_allocate", "mach_port_deallocate", "mach_port_insert_right",
                "mach_port_extract_right", "mach_port_get_attributes", "mach_port_set_attributes",
                "mach_port_request_notification", "mach_port_mod_refs", "mach_port_names", "mach_port_type",
                "mach_port_rename", "mach_port_construct", "mach_port_destruct", "mach_port_guard",
                "mach_port_unguard", "task_get_special_port", "task_set_special_port", "task_for_pid",
                "pid_for_task",
            ),
        ),
        symbols(
            "ipc_msg_ops",
            "message operations",
            (
                "mach_msg", "mach_msg_trap", "mach_msg_send", "mach_msg_receive", "mach_msg_server",
                "mach_msg_server_once", "mach_msg_overwrite", "dispatch_mach_mig_demux", "dispatch_mach_send",
                "dispatch_mach_msg_get_msg",
            ),
        ),
    ),
)

BOOTSTRAP = Phase(
    title="Bootstrap",
    recommendation="Check which of these services are reachable from a sandbox",
    symbols=(
        symbols(
            "ipc_bootstrap_ops",
            "bootstrap operations",
            (
                "bootstrap_look_up", "bootstrap_check_in", "bootstrap_register", "bootstrap_create_server",
                "bootstrap_subset", "bootstrap_parent", "bootstrap_status", "bootstrap_info",
            ),
        ),
    ),
    strings=(
        strings(
            "ipc_service_names",
            "service names",
            ("com.", "org.", "net.", "io."),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="prefix",
            exclude=(" ",),
            policy=ExtractPolicy(min_length=6, max_length=256, tolerate_whitespace=True),
        ),
    ),
)

HANDLERS = Phase(
    title="MIG Handlers",
    recommendation="Audit each server routine for message validation",
    symbols=(
        symbols(
            "ipc_dispatchers",
            "dispatchers",
            ("_server", "_subsystem", "_server_routine", "_demux", "dispatch_mach", "mig_server", "mig_demux"),
        ),
        symbols("ipc_handlers", "handlers", ("__X", "_stub", "_handler", "mig_routine")),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Mach IPC Analysis",
    description="MIG subsystem recovery, port/message/bootstrap symbols and service names.",
    phases=(SUBSYSTEMS, MACH_APIS, BOOTSTRAP, HANDLERS),
)
