"""Privilege escalation indicators.

Covers uid/gid manipulation, credential structures, exploit vocabulary, the
Authorization and ServiceManagement APIs, elevated execution helpers and task
port or entitlement capabilities. Every category caps at 100 hits.
"""

from __future__ import annotations

from .base import PassConfig, Phase, strings

GROUP = "privesc"

SUID = Phase(
    title="SUID/SGID",
    recommendation="Review uid/gid transitions and permission changes",
    strings=(
        strings(
            "privesc_setuid",
            "uid/gid calls",
            (
                "setuid", "seteuid", "setreuid", "setresuid", "setgid", "setegid", "setregid", "setresgid",
                "setgroups", "initgroups", "getuid", "geteuid", "getgid", "getegid", "issetugid",
                "set_user_id", "set_group_id", "effective_user_id",
            ),
        ),
        strings(
            "privesc_permissions",
            "permission changes",
            (
                "chmod", "fchmod", "fchmodat", "chown", "fchown", "lchown", "fchownat", "access", "faccessat",
                "stat", "fstat", "lstat", "fstatat", "st_mode", "S_ISUID", "S_ISGID", "S_ISVTX", "0755",
                "0777", "04755",
            ),
        ),
        strings(
            "privesc_paths",
            "privileged paths",
            (
                "/usr/bin/", "/usr/sbin/", "/bin/", "/sbin/", "/usr/local/bin/", "/etc/sudoers", "sudoers",
                "/etc/pam.d", "pam.d", "/etc/authorization", "authorized_keys", "/Library/LaunchDaemons",
                "/System/Library/CoreServices", "setuid", "suid",
            ),
        ),
    ),
)

CREDENTIALS = Phase(
    title="Credentials",
    recommendation="Trace credential structure access and PAM usage",
    strings=(
        strings(
            "privesc_credentials",
            "credential structures",
            (
                "ucred", "pcred", "xucred", "cr_uid", "cr_gid", "cr_groups", "proc_ucred", "kauth_cred_get",
                "posix_cred_get", "cred_", "credential", "p_ucred", "p_cred", "getlogin", "setlogin",
            ),
        ),
        strings(
            "privesc_kauth",
            "kauth",
            (
                "kauth_cred_", "kauth_authorize_", "kauth_cred_get", "kauth_cred_getuid", "kauth_cred_setuid",
                "kauth_cred_setgid", "KAUTH_", "kauth_scope", "kauth_listener", "posix_cred_get",
                "posix_cred_set", "chgproccnt",
            ),
        ),
        strings(
            "privesc_pam",
            "PAM",
            (
                "pam_", "PAM_", "pam_authenticate", "pam_setcred", "pam_acct_mgmt", "pam_open_session",
                "pam_start", "pam_end", "/etc/pam.d", "pam.d", "pam_handle", "pam_conv", "pam_sm_",
                "PAM_SUCCESS", "libpam",
            ),
        ),
        strings(
            "privesc_keychain",
            "keychain secrets",
            (
                "SecKeychainFindGenericPassword", "SecKeychainFindInternetPassword",
                "SecKeychainItemCopyContent", "SecItemCopyMatching", "kSecClassGenericPassword",
                "kSecClassInternetPassword", "kSecReturnData", "password", "Password", "credentials",
            ),
        ),
    ),
)

EXPLOITS = Phase(
    title="Exploits",
    recommendation="Treat exploit vocabulary as high priority for manual review",
    strings=(
        strings(
            "privesc_exploit",
            "exploit terms",
            (
                "exploit", "Exploit", "EXPLOIT", "shellcode", "Shellcode", "payload", "Payload", "rop", "ROP",
                "rop_chain", "spray", "heap_spray", "jop", "JOP", "gadget", "Gadget", "pivot", "stack_pivot",
                "0day", "zero_day", "CVE-", "vulnerability",
            ),
        ),
        strings(
            "privesc_corruption",
            "memory corruption",
            (
                "overflow", "Overflow", "buffer_overflow", "underflow", "Underflow", "use_after_free", "UAF",
                "double_free", "heap_overflow", "stack_overflow", "out_of_bounds", "OOB", "type_confusion",
                "integer_overflow", "int_overflow", "format_string", "memcpy", "strcpy", "strcat",
            ),
        ),
        strings(
            "privesc_vulnerability",
            "vulnerability classes",
            (
                "race_condition", "TOCTOU", "time_of_check", "symbolic_link", "symlink_race", "uninitialized",
                "uninit", "null_deref", "null_pointer", "dangling_pointer", "memory_leak", "info_leak",
                "infoleak", "side_channel", "spectre", "meltdown",
            ),
        ),
        strings(
            "privesc_bypass",
            "mitigation bypass",
            ("bypass", "Bypass", "disable_", "_disable", "ASLR", "aslr", "DEP", "NX", "SMAP", "SMEP", "kASLR", "kaslr"),
        ),
    ),
)

AUTHORIZATION = Phase(
    title="Authorization",
    recommendation="Audit authorization rights and privileged helpers",
    strings=(
        strings(
            "privesc_authorization",
            "Authorization Services",
            (
                "AuthorizationCreate", "AuthorizationExecuteWithPrivileges", "AuthorizationCopyRights",
                "AuthorizationMakeExternalForm", "AuthorizationCreateFromExternalForm", "AuthorizationFree",
                "SFAuthorization", "kAuthorizationRightExecute", "kAuthorizationEmptyEnvironment",
                "Authorization", "authorization", "kAuthorization", "admin_right", "system.privilege",
                "com.apple.security.authorization", "right", "Right", "/var/db/auth.db", "/etc/authorization",
                "authorization.plist",
            ),
        ),
        strings(
            "privesc_smjob",
            "privileged helpers",
            (
                "SMJobBless", "SMJobSubmit", "SMJobRemove", "SMJobCopyDictionary", "SMCopyAllJobDictionaries",
                "PrivilegedHelperTools", "com.apple.security.application-groups", "privileged_helper",
                "helper_tool", "SMJobBlessSubmit", "xpc_connection_set_privileged",
                "Contents/Library/LaunchServices", "LaunchServices", "launch_services", "bless",
            ),
        ),
        strings(
            "privesc_security",
            "code identity checks",
            (
                "SecTaskCopyValueForEntitlement", "SecCodeCopySelf", "SecCodeCheckValidity",
                "SecRequirementCreateWithString", "SecStaticCodeCreateWithPath", "kSecGuestAttributePid",
                "get-task-allow", "task_for_pid-allow", "com.apple.security.cs.debugger", "admin", "Admin",
                "elevated",
            ),
        ),
    ),
)

ELEVATED = Phase(
    title="Elevated Execution",
    recommendation="Check how elevated commands are constructed",
    strings=(
        strings(
            "privesc_sudo",
            "sudo and friends",
            (
                "sudo", "SUDO", "/usr/bin/sudo", "su", "/bin/su", "sudoers", "/etc/sudoers", "NOPASSWD",
                "SETENV", "visudo", "doas", "pkexec", "polkit", "gksu", "kdesudo",
            ),
        ),
        strings(
            "privesc_script",
            "script execution",
            (
                "osascript", "/usr/bin/osascript", "AppleScript", "do shell script",
                "with administrator privileges", "with prompt", "NSAppleScript",
                'tell application "System Events"', "activate", "with administrator", "kAEOpenApplication",
                "kAEQuitApplication", "sh -c", "bash -c", "/bin/sh", "/bin/bash", "system(", "popen(", "exec",
            ),
        ),
        strings(
            "privesc_launchd",
            "launchd control",
            (
                "launchctl", "/bin/launchctl", "launchctl load", "launchctl submit", "launchctl bootout",
                "launchctl bootstrap", "/Library/LaunchDaemons", "RunAtLoad", "KeepAlive", "SessionCreate",
                "LaunchServices", "launch_activate_socket",
            ),
        ),
    ),
)

CAPABILITIES = Phase(
    title="Capabilities",
    recommendation="Review entitlements and task port access",
    strings=(
        strings(
            "privesc_taskport",
            "task ports",
            (
                "task_for_pid", "pid_for_task", "task_get_special_port", "task_set_special_port",
                "task_threads", "thread_create", "TASK_BOOTSTRAP_PORT", "HOST_PRIV_PORT",
                "host_get_special_port", "processor_set_tasks", "mach_port_allocate", "mach_port_insert_right",
                "bootstrap_look_up", "bootstrap_register", "mach_task_self", "current_task", "kernel_task",
            ),
        ),
        strings(
            "privesc_entitlements",
            "entitlements",
            (
                "com.apple.security.cs.allow-jit", "com.apple.security.cs.allow-unsigned-executable-memory",
                "com.apple.security.cs.allow-dyld-environment-variables",
                "com.apple.security.cs.disable-library-validation",
                "com.apple.security.cs.disable-executable-page-protection", "com.apple.security.get-task-allow",
                "task_for_pid-allow", "com.apple.system-task-ports", "com.apple.security.cs.debugger",
                "com.apple.private.security.clear-library-validation", "com.apple.private.tcc.allow",
                "com.apple.rootless.install", "com.apple.private.kernel.get-kext-info",
                "com.apple.private.iokit.user-access", "platform-application", "entitlement", "Entitlement",
                "SecTaskCopyValueForEntitlement", "kSecGuestAttributePid", "codesign", "--entitlements",
                ".entitlements", "embedded.provisionprofile", "provisioning",
            ),
        ),
        strings(
            "privesc_debug",
            "debugging capability",
            (
                "ptrace", "PT_DENY_ATTACH", "PT_TRACE_ME", "get-task-allow", "debugserver", "lldb", "gdb",
                "CS_DEBUGGED", "debug", "Debug", "DEBUG", "DYLD_INSERT_LIBRARIES",
            ),
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Privilege Escalation Analysis",
    description="uid/gid, credential, exploit, authorization, elevated execution and capability indicators.",
    phases=(SUID, CREDENTIALS, EXPLOITS, AUTHORIZATION, ELEVATED, CAPABILITIES),
)
