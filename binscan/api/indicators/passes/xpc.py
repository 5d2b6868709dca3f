"""XPC services, XPC API usage and privileged-helper (EBAS) authorization
patterns.

EBAS component and command strings share one exclusive bucket: a string that
names a component is not counted again as a command.
"""

from __future__ import annotations

from ..engine.strings import ExtractPolicy
from .base import PassConfig, Phase, TypeRule, strings, symbols

GROUP = "xpc"

SERVICE_POLICY = ExtractPolicy(min_length=4, max_length=512, accept_partial=True)
XPC_POLICY = ExtractPolicy(min_length=4, max_length=256, accept_partial=True)

# Service-looking names: reverse-DNS prefix, and either an XPC-ish word or a
# plausible bundle-identifier length.
SERVICE_PATTERN = r"^(?=(?:com|org|net|io)\.)(?:(?=.*(?:xpc|XPC|service|mach)).*|.{1,127})$"

EBAS_TYPES = (
    TypeRule("Protocol", ("Protocol",)),
    TypeRule("Class", ("Tool", "Helper")),
    TypeRule("Method", (":",)),
    TypeRule("Constant", ("k",), prefix=True),
    TypeRule("Framework", ("NS",), prefix=True),
)

SERVICES = Phase(
    title="XPC Services",
    recommendation="Enumerate the listed services and their message handlers",
    strings=(
        strings(
            "xpc_services",
            "service names",
            (SERVICE_PATTERN,),
            match="regex",
            policy=SERVICE_POLICY,
        ),
        strings(
            "xpc_mach_services",
            "MachServices keys",
            ("mach_service", "MachService"),
            cap=None,
            policy=XPC_POLICY,
        ),
        strings(
            "xpc_strings",
            "XPC strings",
            ("xpc",),
            cap=200,
            fold_case=True,
            policy=XPC_POLICY,
        ),
    ),
)

APIS = Phase(
    title="XPC APIs",
    recommendation="Check connection validation in every listener",
    symbols=(
        symbols(
            "xpc_c_api",
            "libxpc",
            (
                "xpc_connection_create", "xpc_connection_create_mach_service",
                "xpc_connection_set_event_handler", "xpc_connection_resume", "xpc_connection_activate",
                "xpc_connection_send_message", "xpc_connection_send_message_with_reply",
                "xpc_dictionary_create", "xpc_dictionary_set_value", "xpc_dictionary_get_value",
                "xpc_array_create", "xpc_data_create", "xpc_string_create",
            ),
            cap=50,
        ),
        symbols(
            "xpc_old_api",
            "legacy libxpc",
            (
                "xpc_connection_create_from_endpoint", "xpc_connection_get_context",
                "xpc_connection_set_context", "xpc_connection_set_finalizer_f", "xpc_connection_suspend",
            ),
            cap=20,
        ),
        symbols(
            "xpc_objc_api",
            "NSXPC",
            (
                "NSXPCConnection", "NSXPCListener", "NSXPCInterface", "setRemoteObjectInterface:",
                "setExportedInterface:", "setExportedObject:", "remoteObjectProxy",
                "remoteObjectProxyWithErrorHandler:",
            ),
            cap=30,
        ),
        symbols(
            "xpc_swift_api",
            "Swift NSXPC",
            ("Foundation.NSXPCConnection", "__NSXPCConnection", "__NSXPCListener"),
            cap=20,
        ),
    ),
)

AUTHORIZATION = Phase(
    title="Authorization Patterns",
    recommendation="Verify the helper checks authorization for every command",
    symbols=(
        symbols(
            "xpc_auth_apis",
            "Authorization APIs",
            (
                "AuthorizationCreate", "AuthorizationCreateWithAuditToken", "AuthorizationCopyRights",
                "AuthorizationCopyInfo", "AuthorizationMakeExternalForm", "AuthorizationCreateFromExternalForm",
                "AuthorizationExecuteWithPrivileges", "AuthorizationFree",
            ),
            cap=20,
        ),
    ),
    strings=(
        strings(
            "ebas_components",
            "EBAS components",
            (
                "HelperTool", "Common", "PrivilegedHelper", "AuthorizationHelper", "HelperToolProtocol",
                "BASProtocol", "NSXPCListenerDelegate", "shouldAcceptNewConnection:",
                "checkAuthorization:command:", "connectWithEndpointReply:", "getVersionWithReply:",
                "readLicenseKeyAuthorization:withReply:", "writeLicenseKey:authorization:withReply:",
                "bindToLowNumberPortAuthorization:withReply:", "kHelperToolMachServiceName", "kCommandKey",
                "kAuthorizationKey", "kLicenseKeyDefaultsKey", "licenseKey", "NSXPCListener",
                "NSXPCConnection", "NSXPCInterface", "setExportedInterface", "setExportedObject", "resume",
            ),
            cap=30,
            exclusive_group="ebas",
            types=EBAS_TYPES,
            type_fallback="Component",
            type_source="pattern",
            policy=XPC_POLICY,
        ),
        strings(
            "ebas_commands",
            "EBAS commands",
            ("command", "readCommand", "writeCommand", "bindCommand", "versionCommand", "connectCommand"),
            cap=30,
            fold_case=True,
            exclusive_group="ebas",
            type_fallback="Command",
            policy=XPC_POLICY,
        ),
        strings(
            "xpc_smjobbless",
            "SMJobBless",
            (
                "SMJobBless", "SMJobSubmit", "SMJobRemove", "SMJobCopyDictionary", "SMPrivilegedHelper",
                "launchd.plist", "com.apple.ServiceManagement", "SMAuthorizedClients", "SMPrivilegedExecutables",
            ),
            cap=20,
            policy=XPC_POLICY,
        ),
        strings(
            "xpc_auth_rights",
            "authorization rights",
            (r"^(?:com|org)\..*(?:right|auth|privilege|tool)",),
            cap=None,
            match="regex",
            policy=XPC_POLICY,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="XPC Service Analysis",
    description="XPC service names, libxpc/NSXPC APIs and privileged-helper authorization patterns.",
    phases=(SERVICES, APIS, AUTHORIZATION),
)
