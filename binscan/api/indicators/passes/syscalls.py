"""Direct syscall and Mach trap indicators.

Binaries that issue syscalls themselves rather than through libSystem leave
`SYS_*` names, trap names and class-prefixed syscall numbers behind.
"""

from __future__ import annotations

from .base import PassConfig, Phase, strings

GROUP = "syscalls"

BSD = Phase(
    title="BSD System Calls",
    recommendation="Hook the raw syscalls instead of their libc wrappers",
    strings=(
        strings(
            "syscall_fileio",
            "file I/O",
            (
                "SYS_read", "SYS_write", "SYS_open", "SYS_close", "SYS_lseek", "SYS_fstat", "SYS_stat",
                "SYS_lstat", "SYS_access", "SYS_dup", "SYS_dup2", "SYS_fcntl", "SYS_ioctl", "SYS_readv",
                "SYS_writev", "SYS_pread", "SYS_pwrite", "SYS_openat", "SYS_fstatat", "SYS_readlink",
                "SYS_readlinkat", "SYS_mkdir", "SYS_rmdir", "SYS_unlink", "SYS_rename",
            ),
        ),
        strings(
            "syscall_process",
            "process control",
            (
                "SYS_fork", "SYS_vfork", "SYS_execve", "SYS_posix_spawn", "SYS_exit", "SYS__exit", "SYS_wait4",
                "SYS_waitpid", "SYS_getpid", "SYS_getppid", "SYS_getuid", "SYS_geteuid", "SYS_getgid",
                "SYS_getegid", "SYS_setuid", "SYS_setgid", "SYS_kill", "SYS_killpg", "SYS_getpgrp",
                "SYS_setpgid",
            ),
        ),
        strings(
            "syscall_signal",
            "signals",
            (
                "SYS_sigaction", "SYS_signal", "SYS_sigprocmask", "SYS_sigsuspend", "SYS_sigpending",
                "SYS_sigaltstack", "SYS_sigreturn", "SYS_sigwait", "SYS_sigwaitinfo", "SYS_kill",
                "SYS_pthread_kill", "SYS_sigqueue",
            ),
        ),
        strings(
            "syscall_memory",
            "memory",
            (
                "SYS_mmap", "SYS_munmap", "SYS_mprotect", "SYS_madvise", "SYS_mincore", "SYS_msync",
                "SYS_mlock", "SYS_munlock", "SYS_mlockall", "SYS_munlockall", "SYS_brk", "SYS_sbrk",
                "SYS_shmat", "SYS_shmdt", "SYS_shmget",
            ),
        ),
    ),
)

MACH = Phase(
    title="Mach Traps",
    recommendation="Trace Mach traps with a kernel-side tracer",
    strings=(
        strings(
            "trap_message",
            "message traps",
            (
                "mach_msg_trap", "mach_msg", "mach_msg_overwrite_trap", "mach_reply_port", "msg_send_trap",
                "msg_receive_trap", "MACH_MSG_", "MACH_SEND_", "MACH_RCV_", "mach_msg2_trap",
            ),
        ),
        strings(
            "trap_thread",
            "thread traps",
            (
                "thread_self_trap", "task_self_trap", "thread_switch", "thread_switch_trap",
                "thread_get_state", "thread_set_state", "_kernelrpc_mach_port_construct_trap",
                "_kernelrpc_mach_port_destruct_trap", "thread_create", "thread_terminate", "swtch_pri",
                "swtch",
            ),
        ),
        strings(
            "trap_semaphore",
            "semaphore traps",
            (
                "semaphore_signal_trap", "semaphore_signal_all_trap", "semaphore_wait_trap",
                "semaphore_wait_signal_trap", "semaphore_timedwait_trap", "semaphore_create",
                "semaphore_destroy", "SYNC_POLICY_", "sync_wait", "clock_sleep_trap",
            ),
        ),
        strings(
            "trap_port",
            "port traps",
            (
                "mach_port_allocate_trap", "mach_port_deallocate_trap", "mach_port_insert_right_trap",
                "mach_port_extract_right_trap", "mach_port_construct_trap", "mach_port_destruct_trap",
                "mach_port_guard_trap", "mach_port_unguard_trap", "mk_timer_create_trap",
                "mk_timer_destroy_trap", "mk_timer_arm_trap", "mk_timer_cancel_trap",
            ),
        ),
    ),
)

WRAPPERS = Phase(
    title="Syscall Instructions & Wrappers",
    recommendation="Locate the svc/syscall instructions behind these wrappers",
    strings=(
        strings(
            "syscall_wrapper",
            "wrappers",
            (
                "__syscall", "syscall", "__mac_syscall", "__pthread_kill", "__sysctl", "___sysctl",
                "__sysctlbyname", "_syscall", "cerror", "cerror_nocancel", "__commpage_", "_commpage",
                "SYSCALL", "syscall_", "indirect_syscall",
            ),
        ),
        strings(
            "syscall_indirect",
            "indirect dispatch",
            (
                "syscall_indirect", "dispatch_syscall", "invoke_syscall", "call_syscall", "indirect_call",
                "syscall_wrapper", "syscall_gate", "enter_syscall", "syscall_entry", "syscall_stub",
            ),
        ),
    ),
)

DANGEROUS = Phase(
    title="Dangerous/Security-Critical",
    recommendation="Prioritize the security-critical syscalls for review",
    strings=(
        strings(
            "syscall_antidebug",
            "anti-debugging",
            (
                "SYS_ptrace", "ptrace", "PT_DENY_ATTACH", "PT_TRACE_ME", "SYS_sysctl", "KERN_PROC", "P_TRACED",
                "task_get_exception_ports", "exception_raise", "debugger_detection",
            ),
        ),
        strings(
            "syscall_injection",
            "injection",
            (
                "task_for_pid", "SYS_task_for_pid", "thread_create_running", "SYS_thread_create", "vm_read",
                "vm_write", "SYS_vm_read", "SYS_vm_write", "mach_vm_read", "mach_vm_write", "vm_remap",
                "vm_copy",
            ),
        ),
        strings(
            "syscall_kernel",
            "kernel access",
            (
                "SYS_kextload", "kextload", "SYS_kextunload", "kextunload", "iokit_user_client_trap",
                "IOConnectTrap", "host_get_special_port", "processor_set_tasks", "SYS_reboot", "SYS_mount",
                "SYS_unmount", "kernel_memory", "kernel_task", "HOST_PRIV_PORT",
            ),
        ),
        strings(
            "syscall_execmem",
            "executable memory",
            (
                "mprotect", "SYS_mprotect", "PROT_EXEC", "PROT_WRITE", "MAP_ANON", "MAP_PRIVATE", "vm_protect",
                "mach_vm_protect", "vm_allocate", "executable_memory",
            ),
        ),
    ),
)

NUMBERS = Phase(
    title="Syscall Number References",
    recommendation="Resolve numeric syscall references to names",
    strings=(
        strings(
            "syscall_numbers",
            "BSD numbers",
            (
                "0x2000000", "0x2000001", "0x2000002", "0x2000003", "0x2000004", "0x2000005", "0x2000006",
                "SYS_syscall", "__NR_", "syscall_number", "syscall_num", "SYSCALL_", "syscall_class",
                "BSD_SYSCALL", "MACH_SYSCALL", "syscall_base", "syscall_max", "nsysent", "syscall_table",
                "sysent",
            ),
        ),
        strings(
            "trap_numbers",
            "Mach trap numbers",
            (
                "-26", "-27", "-28", "-29", "-31", "-32", "-33", "MACH_TRAP_", "mach_trap_", "trap_number",
                "trap_num", "KERN_", "mach_trap_table", "mach_trap_count", "negative_trap",
            ),
        ),
    ),
)

DARWIN = Phase(
    title="macOS-Specific",
    recommendation="Review sandbox and code-signing syscalls",
    strings=(
        strings(
            "syscall_darwin",
            "Darwin-only calls",
            (
                "shared_region_check_np", "shared_region_map_np", "guarded_open_np", "guarded_close_np",
                "change_fdguard_np", "connectx", "disconnectx", "peeloff", "socket_delegate", "workq_",
                "__workq_", "bsdthread_", "__bsdthread_", "coalition_", "ledger_",
            ),
        ),
        strings(
            "syscall_sandbox",
            "MAC/sandbox",
            (
                "__mac_syscall", "mac_syscall", "__sandbox_ms", "sandbox_init", "sandbox_free_error", "MAC_",
                "mac_", "SYS_mac_", "SYS___mac_", "sandbox_", "SANDBOX_", "mac_policy",
            ),
        ),
        strings(
            "syscall_security",
            "code signing",
            (
                "csops", "csops_audittoken", "SYS_csops", "SYS_csops_audittoken", "CS_OPS_", "cs_ops_",
                "code_signature", "amfi_", "AMFI_", "entitlement_", "platform_binary", "cs_enforcement",
            ),
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Direct Syscall Analysis",
    description="BSD syscalls, Mach traps, wrappers, dangerous calls, numbers and Darwin-specific calls.",
    phases=(BSD, MACH, WRAPPERS, DANGEROUS, NUMBERS, DARWIN),
)
