import unittest

from binscan.api.indicators.engine.classify import (
    Category,
    TypeRule,
    classify,
    first_match,
    infer_type,
    match_category,
)
from binscan.api.indicators.passes import antianalysis, fileops, keychain, network, xpc


class ClassifyTests(unittest.TestCase):
    def test_substring_membership(self):
        self.assertTrue(classify("_ptrace_wrapper", ["ptrace"]))
        self.assertFalse(classify("hello", ["ptrace"]))

    def test_case_fold(self):
        self.assertFalse(classify("PASSWORD", ["password"]))
        self.assertTrue(classify("PASSWORD", ["password"], fold_case=True))

    def test_first_match_respects_declared_order(self):
        self.assertEqual(first_match("VMware Tools", ["VMware Tools", "VMware"]), "VMware Tools")
        self.assertEqual(first_match("VMware Tools", ["VMware", "VMware Tools"]), "VMware")

    def test_prefix_mode(self):
        self.assertEqual(first_match("com.apple.foo", ["org.", "com."], mode="prefix"), "com.")
        self.assertIsNone(first_match("x.com.apple", ["com."], mode="prefix"))


class InferTypeTests(unittest.TestCase):
    def test_vm_vendor_order(self):
        rules = antianalysis.VM_TYPES
        self.assertEqual(infer_type("VMware Tools", rules, "VM"), "VMware")
        self.assertEqual(infer_type("prl_tools", rules, "VM"), "Parallels")
        self.assertEqual(infer_type("vboxguest", rules, "VM"), "VirtualBox")
        self.assertEqual(infer_type("/.dockerenv", rules, "VM"), "Container")
        self.assertEqual(infer_type("qemu", rules, "VM"), "VM")

    def test_generic_rule_first_steals_attribution(self):
        rules = (TypeRule("Container", ("container",)), TypeRule("VMware", ("VMware",)))
        self.assertEqual(infer_type("VMware container", rules), "Container")

    def test_specific_needle_before_substring_of_it(self):
        self.assertEqual(infer_type("VMware Tools", ["VMware", "ware"]), "VMware")
        self.assertEqual(infer_type("VMware Tools", ["ware", "VMware"]), "ware")

    def test_plain_string_rules_label_themselves(self):
        self.assertEqual(infer_type("use lldb here", ["gdb", "lldb"]), "lldb")
        self.assertIsNone(infer_type("nothing", ["gdb"]))


class MatchCategoryTests(unittest.TestCase):
    def _cat(self, name, module):
        for cat in module.PASS.categories():
            if cat.name == name:
                return cat
        raise AssertionError(name)

    def test_typed_category(self):
        cat = self._cat("antivm_artifacts", antianalysis)
        hit = match_category("/Library/Parallels/prl_disp", cat)
        self.assertIsNotNone(hit)
        self.assertEqual(hit.type, "Parallels")

    def test_untyped_category_has_no_type(self):
        cat = self._cat("antidebug_ptrace", antianalysis)
        hit = match_category("PT_DENY_ATTACH", cat)
        self.assertEqual(hit.pattern, "PT_DENY_ATTACH")
        self.assertIsNone(hit.type)

    def test_type_from_matched_keyword(self):
        cat = self._cat("credential_strings", keychain)
        hit = match_category("Enter Password", cat)
        self.assertEqual(hit.type, "password")

    def test_regex_detail_lists_all_fragments(self):
        cat = self._cat("net_ips", network)
        hit = match_category("connect 10.0.0.1 then 192.168.1.1", cat)
        self.assertEqual(hit.detail, "10.0.0.1, 192.168.1.1")

    def test_domain_requires_known_tld(self):
        cat = self._cat("net_domains", network)
        self.assertIsNotNone(match_category("evil.example.com", cat))
        self.assertIsNone(match_category("config.plist", cat))
        self.assertIsNone(match_category("https://evil.example.com", cat))

    def test_swift_filter(self):
        cat = self._cat("swift_fileops", fileops)
        self.assertIsNotNone(match_category("_$s10Foundation11FileManagerC7defaultACvgZ", cat))
        self.assertIsNone(match_category("-[NSFileManager SwiftFileManager]", cat))
        self.assertIsNone(match_category("objc_Swift_FileManager", cat))
        self.assertIsNone(match_category("FileManager", cat))

    def test_required_token(self):
        cat = self._cat("objc_nsstring", fileops)
        self.assertIsNone(match_category("-[NSData writeToFile:atomically:]", cat))
        self.assertIsNotNone(match_category("-[NSString writeToFile:atomically:]", cat))

    def test_type_from_pattern(self):
        cat = self._cat("ebas_components", xpc)
        self.assertEqual(match_category("kCommandKey", cat).type, "Constant")
        self.assertEqual(match_category("MyHelperTool", cat).type, "Class")

    def test_exclude_vetoes(self):
        cat = Category(name="svc", patterns=("com.",), match="prefix", exclude=(" ",))
        self.assertIsNone(match_category("com.apple foo", cat))
        self.assertIsNotNone(match_category("com.apple.foo", cat))

    def test_case_folded_gates(self):
        cat = Category(name="creds", patterns=("password",), fold_case=True, exclude=("Example",), require=("KEY",))
        self.assertIsNone(match_category("example PASSWORD key", cat))
        self.assertIsNotNone(match_category("PASSWORD key", cat))
        self.assertIsNone(match_category("PASSWORD only", cat))
        strict = Category(name="strict", patterns=("password",), exclude=("Example",))
        self.assertIsNotNone(match_category("example password", strict))

    def test_unknown_modes_rejected(self):
        with self.assertRaises(ValueError):
            Category(name="bad", patterns=("x",), match="glob")
        with self.assertRaises(ValueError):
            Category(name="bad", patterns=("x",), type_source="symbol")


if __name__ == "__main__":
    unittest.main()
