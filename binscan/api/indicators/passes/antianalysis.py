"""Anti-analysis indicators: debugger, VM and sandbox checks, integrity checks.

Most categories are API names that land in string sections through selector
and import tables. The VM and tool categories look at longer C strings and
attribute each hit to a vendor or tool family.
"""

from __future__ import annotations

from ..engine.source import CSTRING_SECTIONS
from .base import PassConfig, Phase, TypeRule, strings

GROUP = "antianalysis"

# VMware must be tested before the generic container needles.
VM_TYPES = (
    TypeRule("VMware", ("VMware",)),
    TypeRule("Parallels", ("Parallels", "prl")),
    TypeRule("VirtualBox", ("VirtualBox", "vbox")),
    TypeRule("QEMU", ("QEMU",)),
    TypeRule("Container", ("docker", "container")),
)

TOOL_TYPES = (
    TypeRule("Debugger", ("lldb", "gdb")),
    TypeRule("Disassembler", ("Hopper", "IDA", "Ghidra")),
    TypeRule("Tracer", ("dtrace", "Instruments")),
)

ANTI_DEBUG = Phase(
    title="Anti-Debugging",
    recommendation="Patch anti-debugging checks before dynamic analysis",
    strings=(
        strings(
            "antidebug_ptrace",
            "ptrace",
            ("ptrace", "PT_DENY_ATTACH", "PT_TRACE_ME", "PT_ATTACH", "PT_DETACH"),
            cap=50,
        ),
        strings(
            "antidebug_sysctl",
            "sysctl",
            ("sysctl", "CTL_KERN", "KERN_PROC", "KERN_PROC_PID", "kinfo_proc", "P_TRACED", "p_flag"),
            cap=50,
        ),
        strings(
            "antidebug_timing",
            "timing",
            (
                "gettimeofday",
                "clock_gettime",
                "mach_absolute_time",
                "CFAbsoluteTimeGetCurrent",
                "CACurrentMediaTime",
                "clock",
                "times",
                "getrusage",
            ),
            cap=80,
        ),
        strings(
            "antidebug_exception",
            "exception ports",
            (
                "task_get_exception_ports",
                "task_set_exception_ports",
                "exception_raise",
                "catch_exception_raise",
                "mach_exc_server",
            ),
            cap=50,
        ),
    ),
)

ANTI_VM = Phase(
    title="Anti-VM/Sandbox",
    recommendation="Modify VM artifacts or use bare-metal analysis environment",
    strings=(
        strings(
            "antivm_hardware",
            "hardware queries",
            (
                "sysctl",
                "hw.model",
                "hw.machine",
                "hw.cpufrequency",
                "IOServiceMatching",
                "IOServiceGetMatchingServices",
                "sysctlbyname",
                "machdep.cpu",
            ),
            cap=80,
        ),
        strings(
            "antivm_artifacts",
            "VM artifacts",
            (
                "VMware",
                "vmware",
                "VMWARE",
                "Parallels",
                "parallels",
                "prl",
                "VirtualBox",
                "virtualbox",
                "vbox",
                "VBOX",
                "QEMU",
                "qemu",
                "VMware Tools",
                "Parallels Tools",
                "/.dockerenv",
                "/.containerenv",
                "/Applications/VMware",
                "/Library/Parallels",
            ),
            cap=100,
            max_length=512,
            sections=CSTRING_SECTIONS,
            types=VM_TYPES,
            type_fallback="VM",
        ),
        strings(
            "antivm_sandbox",
            "sandbox checks",
            ("sandbox_init", "sandbox_free_error", "sandbox_check", "APP_SANDBOX_READ", "container", "Containers"),
            cap=50,
        ),
    ),
)

INTEGRITY = Phase(
    title="Code Integrity",
    recommendation="Disable code signature validation before patching",
    strings=(
        strings(
            "integrity_signature",
            "code signature",
            (
                "SecStaticCodeCreateWithPath",
                "SecCodeCheckValidity",
                "SecCodeCopySigningInformation",
                "SecRequirementCreateWithString",
                "SecCodeCopySelf",
                "SecTaskCreateFromSelf",
                "csops",
                "CS_OPS_STATUS",
            ),
            cap=60,
        ),
        strings(
            "integrity_checksum",
            "checksums",
            ("CC_MD5", "CC_SHA1", "CC_SHA256", "CC_SHA512", "CCDigest", "CCCryptorCreate"),
            cap=50,
        ),
        strings(
            "integrity_memory",
            "memory inspection",
            ("vm_region", "vm_read", "vm_region_64", "mach_vm_region", "mach_vm_read", "vm_protect", "mach_vm_protect"),
            cap=60,
        ),
    ),
)

ENVIRONMENT = Phase(
    title="Environment & Tool Detection",
    recommendation="Rename/hide analysis tools or use stealthy techniques",
    strings=(
        strings(
            "env_tools",
            "analysis tools",
            (
                "lldb",
                "LLDB",
                "debugserver",
                "gdb",
                "GDB",
                "Hopper",
                "hopper",
                "IDA",
                "ida",
                "ida64",
                "radare",
                "r2",
                "rizin",
                "dtrace",
                "dtruss",
                "dtrace",
                "Instruments",
                "instruments",
                "sample",
                "spindump",
                "fs_usage",
                "opensnoop",
                "class-dump",
                "otool",
                "jtool",
                "Ghidra",
                "ghidra",
                "Binary Ninja",
                "binaryninja",
            ),
            cap=150,
            max_length=512,
            sections=CSTRING_SECTIONS,
            types=TOOL_TYPES,
            type_fallback="Tool",
        ),
        strings(
            "env_processes",
            "process enumeration",
            (
                "proc_listpids",
                "proc_pidpath",
                "proc_name",
                "NSRunningApplication",
                "runningApplications",
                "kCGWindowListOptionAll",
                "CGWindowListCopyWindowInfo",
            ),
            cap=50,
        ),
    ),
)

DYNAMIC = Phase(
    title="Dynamic API Resolution",
    recommendation="Monitor runtime API resolution for hidden functionality",
    strings=(
        strings(
            "dynamic_resolution",
            "dynamic resolution",
            (
                "dlsym",
                "dlopen",
                "dladdr",
                "NSClassFromString",
                "NSSelectorFromString",
                "class_getMethodImplementation",
                "method_getImplementation",
                "objc_getClass",
                "objc_lookUpClass",
                "CFBundleGetFunctionPointerForName",
            ),
            cap=100,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Anti-Analysis Technique Detection",
    description="Debugger, VM, integrity and tool checks that resist analysis.",
    phases=(ANTI_DEBUG, ANTI_VM, INTEGRITY, ENVIRONMENT, DYNAMIC),
)
