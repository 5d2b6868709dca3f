"""Process creation and code injection indicators.

A single phase; strings shorter than four characters are ignored here since
short API names ("su", "at") would drown the report.
"""

from __future__ import annotations

from .base import PassConfig, Phase, strings

GROUP = "injection"

INJECTION = Phase(
    title="Process & Code Injection",
    recommendation="Trace process creation and foreign task access at runtime",
    strings=(
        strings(
            "injection_process_creation",
            "process creation",
            (
                "fork", "vfork", "execl", "execle", "execlp", "execv", "execve", "execvp", "execvP",
                "posix_spawn", "posix_spawnp", "system", "popen", "NSTask", "NSTaskDidTerminateNotification",
                "launchPath", "setLaunchPath", "arguments", "setArguments", "launch", "waitUntilExit",
                "NSProcessInfo", "processIdentifier", "globallyUniqueString",
            ),
            min_length=4,
        ),
        strings(
            "injection_dynamic_loading",
            "dynamic loading",
            (
                "dlopen", "dlsym", "dlclose", "dlerror", "dladdr", "dyld", "_dyld_register_func_for_add_image",
                "_dyld_register_func_for_remove_image", "dyld_get_image_name", "dyld_image_count", "NSBundle",
                "bundleWithPath", "loadBundle", "principalClass", "classNamed", "pathForResource",
                "CFBundleCreate", "CFBundleGetFunctionPointerForName", "CFBundleLoadExecutable",
            ),
            min_length=4,
        ),
        strings(
            "injection_mach",
            "Mach task/thread/VM",
            (
                "task_for_pid", "pid_for_task", "task_threads", "task_suspend", "task_resume", "task_info",
                "thread_create", "thread_create_running", "thread_suspend", "thread_resume",
                "thread_terminate", "thread_set_state", "thread_get_state", "vm_allocate", "vm_deallocate",
                "vm_write", "vm_read", "vm_protect", "vm_region", "vm_remap", "mach_vm_allocate",
                "mach_vm_write", "mach_vm_read", "mach_port_allocate", "mach_port_insert_right",
            ),
            min_length=4,
        ),
        strings(
            "injection_debugging",
            "debugger interaction",
            (
                "ptrace", "PT_TRACE_ME", "PT_DENY_ATTACH", "PT_ATTACH", "PT_DETACH", "PT_CONTINUE", "sysctl",
                "P_TRACED", "kinfo_proc", "isatty", "ioctl", "TIOCGWINSZ", "AmIBeingDebugged",
                "IsDebuggerPresent",
            ),
            cap=50,
            min_length=4,
        ),
        strings(
            "injection_privilege",
            "privilege changes",
            (
                "setuid", "seteuid", "setreuid", "setresuid", "setgid", "setegid", "setregid", "setresgid",
                "setgroups", "initgroups", "AuthorizationCreate", "AuthorizationExecuteWithPrivileges",
                "AuthorizationCopyRights", "AuthorizationFree", "SMJobBless", "SMJobSubmit", "SMJobRemove",
                "sudo", "/usr/bin/sudo", "su", "/bin/su",
            ),
            cap=50,
            min_length=4,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Process Injection Analysis",
    description="Process creation, dynamic loading, Mach task access, debugging and privilege APIs.",
    phases=(INJECTION,),
)
