"""Rootkit indicators: kernel extensions, syscall and function hooking, kernel
memory access, process hiding and privilege escalation. Caps are 100 throughout.
"""

from __future__ import annotations

from .base import PassConfig, Phase, strings

GROUP = "rootkit"

KEXT = Phase(
    title="Kernel Extensions",
    recommendation="Check loaded kexts and IOKit user clients",
    strings=(
        strings(
            "rootkit_kext",
            "kext loading",
            (
                "kextload", "kextunload", "kextstat", "KextManagerLoadKextWithIdentifier",
                "KextManagerLoadKextWithURL", "OSKextLoadKextWithIdentifier", "OSKextCopyLoadedKextInfo",
                "kmod_load", "kmod_unload", "kmod_control", "KXKextManagerLoadKext", "kernel_extension",
            ),
        ),
        strings(
            "rootkit_iokit",
            "IOKit",
            (
                "IOServiceMatching", "IOServiceGetMatchingServices", "IOServiceOpen", "IOServiceClose",
                "IOConnectCallMethod", "IOConnectCallScalarMethod", "IOConnectCallStructMethod",
                "IOConnectCallAsyncMethod", "IOConnectMapMemory", "IOConnectUnmapMemory",
                "IORegistryEntryCreateCFProperty", "IORegistryEntryGetName", "IOIteratorNext",
                "IOObjectRelease", "IOObjectRetain", "IOServiceAddInterestNotification",
                "IOServiceAddMatchingNotification", "IOKitWaitQuiet", "IOMasterPort", "kIOMasterPortDefault",
                "IOReturn", "kern_return_t", "io_connect_t", "io_service_t", "io_iterator_t",
            ),
        ),
        strings(
            "rootkit_kernel",
            "kernel interfaces",
            (
                "kernel_task", "kernel", "_kernel", "mach_kernel", "kern_", "KERN_", "sysctl_", "sysctlbyname",
                "host_get_", "host_info", "processor_set_", "processor_info", "task_threads", "thread_info",
                "vm_region", "vm_read", "vm_write", "mach_vm_", "mach_port_", "bootstrap_look_up",
                "bootstrap_register",
            ),
        ),
        strings(
            "rootkit_paths",
            "kernel paths",
            (
                "/System/Library/Extensions", ".kext", "/Library/Extensions", "IOKit.framework",
                "Kernel.framework", "com.apple.kext", "com.apple.driver", "kernel.development",
                "/System/Library/Kernels", "kernelcache",
            ),
        ),
    ),
)

SYSCALL_HOOKING = Phase(
    title="Syscall Hooking",
    recommendation="Compare the syscall table against a known-good kernel",
    strings=(
        strings(
            "rootkit_syscall",
            "syscall references",
            (
                "syscall", "__syscall", "sysent", "nsysent", "syscall_table", "sysent_table", "sys_call_table",
                "SYS_", "__NR_", "syscall_num", "syscall_number", "_syscall", "do_syscall", "sysctlbyname",
                "sysctl",
            ),
        ),
        strings(
            "rootkit_table",
            "table patching",
            (
                "sysent", "sy_call", "sy_narg", "nsysent", "syscall_count", "write_cr0", "read_cr0",
                "wp_disable", "wp_enable", "kernel_map", "kernel_pmap", "pmap_protect", "vm_protect",
            ),
        ),
        strings(
            "rootkit_hook",
            "hook vocabulary",
            (
                "hook", "Hook", "HOOK", "orig_", "original_", "hooked_", "_hooked", "trampoline", "Trampoline",
                "detour", "Detour", "redirect", "Redirect", "hijack", "Hijack", "intercept", "Intercept",
                "patch", "Patch",
            ),
        ),
    ),
)

FUNCTION_HOOKING = Phase(
    title="Function Hooking",
    recommendation="Look for swizzled methods and interposed symbols at runtime",
    strings=(
        strings(
            "rootkit_swizzle",
            "method swizzling",
            (
                "method_exchangeImplementations", "method_setImplementation", "class_replaceMethod",
                "method_getImplementation", "class_getInstanceMethod", "class_getClassMethod", "swizzle",
                "Swizzle", "SWIZZLE", "method_exchange", "IMP", "Method", "objc_msgSend", "_objc_msgForward",
                "objc_setHook_getClass",
            ),
        ),
        strings(
            "rootkit_interpose",
            "interposing",
            (
                "DYLD_INTERPOSE", "__interpose", "__DATA,__interpose", "dyld_interpose", "interpose_",
                "_interpose", "DYLD_INSERT_LIBRARIES", "dyld_", "_dyld_", "rebind", "rebinding", "fishhook",
            ),
        ),
        strings(
            "rootkit_inline",
            "inline hooks",
            (
                "inline_hook", "InlineHook", "jmp", "JMP", "patch_function", "function_patch", "trampoline",
                "Trampoline", "detour", "Detour", "mprotect", "vm_protect", "mach_vm_protect", "hook_function",
                "substitute",
            ),
        ),
        strings(
            "rootkit_dynamic",
            "dynamic lookup",
            (
                "dlsym", "dlopen", "dlclose", "NSClassFromString", "NSSelectorFromString",
                "class_getMethodImplementation", "objc_getClass", "objc_lookUpClass",
                "CFBundleGetFunctionPointerForName", "NSGetSelectorName",
            ),
        ),
    ),
)

KERNEL_MEMORY = Phase(
    title="Kernel Memory",
    recommendation="Watch kernel memory reads and writes from user space",
    strings=(
        strings(
            "rootkit_mem_read",
            "memory reads",
            (
                "vm_read", "vm_read_overwrite", "mach_vm_read", "mach_vm_read_overwrite", "vm_region",
                "vm_region_64", "mach_vm_region", "mach_vm_region_recurse", "task_read", "processor_set_tasks",
                "copyin", "copyout",
            ),
        ),
        strings(
            "rootkit_mem_write",
            "memory writes",
            (
                "vm_write", "mach_vm_write", "vm_protect", "mach_vm_protect", "vm_copy", "vm_remap",
                "mach_vm_copy", "mach_vm_remap", "task_write", "copyin", "copyout", "pmap_enter",
                "pmap_remove", "kernel_memory_allocate", "kmem_alloc",
            ),
        ),
        strings(
            "rootkit_mem_alloc",
            "kernel allocation",
            (
                "kernel_memory_allocate", "kmem_alloc", "kmem_free", "kalloc", "kfree", "OSMalloc", "OSFree",
                "IOMalloc", "IOFree", "vm_allocate",
            ),
        ),
        strings(
            "rootkit_dkom",
            "object manipulation",
            (
                "proc_list", "allproc", "proc_find", "proc_iterate", "task_list", "tasks", "thread_list",
                "kauth_cred_", "cred_", "ucred", "pcred", "vnode", "vnop_", "mount_list", "mountlist",
            ),
        ),
    ),
)

PROCESS_HIDING = Phase(
    title="Process Hiding",
    recommendation="Cross-check process listings from independent sources",
    strings=(
        strings(
            "rootkit_proc",
            "process enumeration",
            (
                "proc_list", "allproc", "proc_find", "proc_findpid", "proc_iterate", "proc_listpids",
                "task_for_pid", "pid_for_task", "proc_name", "proc_pidpath", "kinfo_proc", "sysctl",
                "KERN_PROC", "proc_selfpid", "getpid",
            ),
        ),
        strings(
            "rootkit_hide",
            "hiding vocabulary",
            (
                "hide", "Hide", "HIDE", "hidden", "Hidden", "invisible", "Invisible", "conceal", "Conceal",
                "stealth", "Stealth", "unlink_proc", "remove_proc",
            ),
        ),
        strings(
            "rootkit_list",
            "list unlinking",
            (
                "LIST_REMOVE", "LIST_INSERT", "TAILQ_REMOVE", "TAILQ_INSERT", "next", "prev", "p_list",
                "p_hash", "le_next", "le_prev",
            ),
        ),
    ),
)

PRIVILEGE = Phase(
    title="Privilege Escalation",
    recommendation="Review credential changes and task port access",
    strings=(
        strings(
            "rootkit_cred",
            "credential changes",
            (
                "setuid", "seteuid", "setreuid", "setgid", "setegid", "setregid", "kauth_cred_", "proc_ucred",
                "cred_", "ucred", "pcred", "posix_cred_get", "chown", "chmod", "Authorization",
                "AuthorizationCreate", "SFAuthorization", "SMJobBless",
            ),
        ),
        strings(
            "rootkit_exploit",
            "exploit terms",
            (
                "exploit", "Exploit", "EXPLOIT", "shellcode", "Shellcode", "rop", "ROP", "payload", "Payload",
                "overflow", "Overflow", "spray", "heap_spray", "use_after_free", "race_condition", "TOCTOU",
            ),
        ),
        strings(
            "rootkit_auth",
            "authorization",
            (
                "AuthorizationExecuteWithPrivileges", "Authorization", "kAuthorization", "SFAuthorization",
                "admin", "Admin", "administrator", "root", "Root", "privilege", "Privilege", "elevated",
            ),
        ),
        strings(
            "rootkit_task",
            "task ports",
            (
                "task_for_pid", "pid_for_task", "task_get_special_port", "task_set_special_port",
                "host_get_special_port", "processor_set_tasks", "mach_port_allocate", "mach_port_insert_right",
                "TASK_BOOTSTRAP_PORT", "HOST_PRIV_PORT", "task_threads", "thread_create",
            ),
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Rootkit Technique Detection",
    description="Kext, hooking, kernel memory, process hiding and privilege indicators.",
    phases=(KEXT, SYSCALL_HOOKING, FUNCTION_HOOKING, KERNEL_MEMORY, PROCESS_HIDING, PRIVILEGE),
)
