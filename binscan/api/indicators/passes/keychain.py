"""Keychain, crypto and credential-handling indicators."""

from __future__ import annotations

from ..engine.source import CSTRING_SECTIONS
from .base import PassConfig, Phase, strings

GROUP = "keychain"

KEYCHAIN_APIS = Phase(
    title="Keychain APIs",
    recommendation="Review keychain item access and accessibility classes",
    strings=(
        strings(
            "keychain_secitem",
            "SecItem API",
            (
                "SecItemAdd", "SecItemCopyMatching", "SecItemUpdate", "SecItemDelete",
                "SecItemUpdateTokenItems", "SecItemExport", "SecItemImport",
            ),
        ),
        strings(
            "keychain_legacy",
            "legacy SecKeychain API",
            (
                "SecKeychainCreate", "SecKeychainOpen", "SecKeychainDelete", "SecKeychainAddGenericPassword",
                "SecKeychainAddInternetPassword", "SecKeychainFindGenericPassword",
                "SecKeychainFindInternetPassword", "SecKeychainItemCopyContent",
                "SecKeychainItemModifyContent", "SecKeychainItemDelete", "SecKeychainItemFreeContent",
                "SecKeychainGetDefault", "SecKeychainSetDefault", "SecKeychainCopyDefault",
                "SecKeychainSetPreferenceDomain", "SecKeychainItemCopyAttributesAndData",
                "SecKeychainItemModifyAttributesAndData",
            ),
        ),
        strings(
            "keychain_attributes",
            "item attributes",
            (
                "kSecClass", "kSecClassGenericPassword", "kSecClassInternetPassword", "kSecClassCertificate",
                "kSecClassKey", "kSecClassIdentity", "kSecAttrAccessible", "kSecAttrAccessibleWhenUnlocked",
                "kSecAttrAccessibleAfterFirstUnlock", "kSecAttrAccessibleAlways",
                "kSecAttrAccessibleWhenUnlockedThisDeviceOnly",
                "kSecAttrAccessibleAfterFirstUnlockThisDeviceOnly", "kSecAttrAccessibleAlwaysThisDeviceOnly",
                "kSecAttrAccount", "kSecAttrService", "kSecAttrGeneric", "kSecAttrLabel", "kSecAttrComment",
                "kSecAttrDescription", "kSecValueData", "kSecReturnData", "kSecReturnAttributes",
                "kSecMatchLimit", "kSecMatchLimitOne", "kSecMatchLimitAll",
            ),
            cap=150,
        ),
    ),
)

CRYPTO = Phase(
    title="Crypto",
    recommendation="Trace key material and derivation parameters",
    strings=(
        strings(
            "crypto_commoncrypto",
            "CommonCrypto",
            (
                "CCCrypt", "CCCryptorCreate", "CCCryptorCreateFromData", "CCCryptorUpdate", "CCCryptorFinal",
                "CCCryptorRelease", "CCCryptorReset", "CCCryptorGetOutputLength", "CC_MD2", "CC_MD4",
                "CC_MD5", "CC_SHA1", "CC_SHA224", "CC_SHA256", "CC_SHA384", "CC_SHA512", "CC_MD5_Init",
                "CC_MD5_Update", "CC_MD5_Final", "CC_SHA1_Init", "CC_SHA1_Update", "CC_SHA1_Final",
                "CC_SHA256_Init", "CC_SHA256_Update", "CC_SHA256_Final", "CC_SHA512_Init", "CC_SHA512_Update",
                "CC_SHA512_Final", "CCHmac", "CCHmacInit", "CCHmacUpdate", "CCHmacFinal",
                "CCKeyDerivationPBKDF", "CCCalibratePBKDF", "CCDeriveKey", "PBKDF2", "CCRandomGenerateBytes",
                "CCRandomCopyBytes",
            ),
            cap=150,
        ),
        strings(
            "crypto_seckey",
            "SecKey API",
            (
                "SecKeyCreateRandomKey", "SecKeyCreateWithData", "SecKeyCreateSignature",
                "SecKeyVerifySignature", "SecKeyCreateEncryptedData", "SecKeyCreateDecryptedData",
                "SecKeyCopyExternalRepresentation", "SecKeyCopyAttributes", "SecKeyCopyPublicKey",
                "SecKeyIsAlgorithmSupported", "SecKeyGeneratePair", "SecKeyRawSign", "SecKeyRawVerify",
                "SecKeyEncrypt", "SecKeyDecrypt",
            ),
        ),
        strings(
            "crypto_enclave",
            "Secure Enclave",
            (
                "kSecAttrTokenIDSecureEnclave", "kSecAttrTokenID", "SecAccessControlCreateWithFlags",
                "kSecAccessControlPrivateKeyUsage", "kSecAccessControlUserPresence",
                "kSecAccessControlBiometryAny", "kSecAccessControlBiometryCurrentSet",
                "kSecAccessControlDevicePasscode", "kSecAccessControlApplicationPassword",
                "SecRandomCopyBytes",
            ),
            cap=50,
        ),
    ),
)

LOCAL_AUTH = Phase(
    title="LocalAuthentication",
    recommendation="Check whether biometric gates can be bypassed",
    strings=(
        strings(
            "la_objc",
            "LAContext (ObjC)",
            (
                "LAContext", "canEvaluatePolicy", "evaluatePolicy", "evaluateAccessControl", "invalidate",
                "setCredential", "isCredentialSet", "biometryType", "localizedReason",
                "localizedFallbackTitle", "LAPolicyDeviceOwnerAuthentication",
                "LAPolicyDeviceOwnerAuthenticationWithBiometrics", "LAPolicyDeviceOwnerAuthenticationWithWatch",
                "LAPolicyDeviceOwnerAuthenticationWithBiometricsOrWatch", "LABiometryNone",
                "LABiometryTypeTouchID", "LABiometryTypeFaceID", "LAError", "LAErrorAuthenticationFailed",
                "LAErrorUserCancel", "LAErrorUserFallback", "LAErrorBiometryNotAvailable",
                "LAErrorBiometryNotEnrolled", "LAErrorBiometryLockout",
            ),
        ),
        strings(
            "la_swift",
            "LAContext (Swift)",
            (
                "LocalAuthentication.LAContext", "$s20LocalAuthentication", "LAContext", "LAPolicy",
                "LABiometryType", "Swift.LAContext", "Swift.LAPolicy",
            ),
            cap=50,
        ),
    ),
)

CERTIFICATES = Phase(
    title="Certificates",
    recommendation="Inspect trust evaluation for pinning or bypasses",
    strings=(
        strings(
            "cert_certificate",
            "certificates",
            (
                "SecCertificateCreateWithData", "SecCertificateCopyData", "SecCertificateCopySubjectSummary",
                "SecCertificateCopyCommonName", "SecCertificateCopyEmailAddresses",
                "SecCertificateCopySerialNumber", "SecCertificateCopyNormalizedIssuerSequence",
                "SecCertificateCopyNormalizedSubjectSequence", "SecCertificateCopyKey",
                "SecCertificateCopyPublicKey",
            ),
            cap=80,
        ),
        strings(
            "cert_trust",
            "trust evaluation",
            (
                "SecTrustCreateWithCertificates", "SecTrustEvaluate", "SecTrustEvaluateAsync",
                "SecTrustEvaluateAsyncWithError", "SecTrustEvaluateWithError", "SecTrustGetCertificateCount",
                "SecTrustGetCertificateAtIndex", "SecTrustCopyResult", "SecTrustCopyPublicKey",
                "SecTrustSetPolicies", "SecTrustSetAnchorCertificates", "SecTrustSetAnchorCertificatesOnly",
                "SecTrustSetNetworkFetchAllowed", "SecPolicyCreateSSL", "SecPolicyCreateBasicX509",
                "SecPolicyCreateRevocation", "SecPolicyCreateWithProperties",
            ),
            cap=80,
        ),
        strings(
            "cert_identity",
            "identities",
            (
                "SecIdentityCreate", "SecIdentityCopyCertificate", "SecIdentityCopyPrivateKey",
                "SecPKCS12Import", "SecIdentityCopyPreference", "SecIdentitySetPreference",
            ),
            cap=40,
        ),
    ),
)

CREDENTIALS = Phase(
    title="Credential strings",
    recommendation="Look for hardcoded secrets near these strings",
    strings=(
        strings(
            "credential_strings",
            "credential strings",
            (
                "password", "passwd", "pwd", "pass", "credential", "creds", "secret", "token", "apikey",
                "api_key", "api-key", "api key", "private_key", "privatekey", "priv_key", "private key",
                "keychain", "authorization", "bearer", "oauth", "jwt", "session", "auth",
            ),
            cap=200,
            min_length=4,
            max_length=512,
            sections=CSTRING_SECTIONS,
            fold_case=True,
            type_from_match=True,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="Keychain & Credential Analysis",
    description="Keychain, CommonCrypto, LocalAuthentication, certificate and credential-string usage.",
    phases=(KEYCHAIN_APIS, CRYPTO, LOCAL_AUTH, CERTIFICATES, CREDENTIALS),
)
