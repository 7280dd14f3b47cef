import unittest

from tr064client.util import extract_tag, take_param


class TestExtractTag(unittest.TestCase):
    def test_extract(self):
        """
        Should return the value between the tags, whatever surrounds them.
        """
        for prefix, value, suffix in (
            ("", "x", ""),
            ("<a>", "MyNetwork", "</a>"),
            ("garbage<", "", ">more"),
            ("\n  ", "some value with spaces", "\n"),
        ):
            src = prefix + "<tag>" + value + "</tag>" + suffix
            self.assertEqual(extract_tag(src, "tag"), (value, True))

    def test_extract_at_start(self):
        """
        A tag at the very start of the string should be found.
        """
        self.assertEqual(extract_tag("<Nonce>abc</Nonce>", "Nonce"), ("abc", True))

    def test_missing_open(self):
        """
        Should not find a tag without an opening marker.
        """
        self.assertEqual(extract_tag("abc</Nonce>", "Nonce"), ("", False))

    def test_missing_close(self):
        """
        Should not find a tag without a closing marker.
        """
        self.assertEqual(extract_tag("<Nonce>abc", "Nonce"), ("", False))

    def test_close_before_open(self):
        """
        A closing marker before the opening one doesn't count.
        """
        self.assertEqual(extract_tag("</Nonce><Nonce>abc", "Nonce"), ("", False))

    def test_case_sensitive(self):
        """
        The default lookup should respect case.
        """
        self.assertEqual(extract_tag("<TAG>x</TAG>", "tag"), ("", False))

    def test_case_insensitive(self):
        """
        Should match tags regardless of case but keep the content's casing.
        """
        self.assertEqual(
            extract_tag("<TAG>MixedCase</Tag>", "tag", case_sensitive=False),
            ("MixedCase", True),
        )

    def test_case_insensitive_unicode(self):
        """
        Characters whose lowercase form has a different length must not
        shift the returned slice.
        """
        src = "<İnfo>İ</İnfo><Realm>Box</Realm>"
        self.assertEqual(extract_tag(src, "REALM", case_sensitive=False), ("Box", True))

    def test_first_pair_wins(self):
        """
        Only the first open/close pair is used.
        """
        src = "<a>one</a><a>two</a>"
        self.assertEqual(extract_tag(src, "a"), ("one", True))

    def test_nested_same_name(self):
        """
        Nested tags of the same name aren't supported: the first closing
        marker ends the value.
        """
        src = "<a><a>inner</a></a>"
        self.assertEqual(extract_tag(src, "a"), ("<a>inner", True))

    def test_regex_characters_in_name(self):
        """
        Tag names are matched literally.
        """
        src = "<s:Body>body</s:Body><X_AVM-DE_Foo>1</X_AVM-DE_Foo>"
        self.assertEqual(extract_tag(src, "s:Body"), ("body", True))
        self.assertEqual(extract_tag(src, "X_AVM-DE_Foo"), ("1", True))
        self.assertEqual(extract_tag(src, "X.AVM-DE.Foo"), ("", False))


class TestTakeParam(unittest.TestCase):
    def test_exact(self):
        """
        Should return a case-sensitive match directly.
        """
        self.assertEqual(take_param("<Nonce>abc</Nonce>", "Nonce"), ("abc", True))

    def test_fallback(self):
        """
        Should fall back to a case-insensitive lookup.
        """
        self.assertEqual(take_param("<TAG>x</TAG>", "tag"), ("x", True))

    def test_prefers_exact_case(self):
        """
        The case-sensitive match wins over an earlier differently-cased one.
        """
        self.assertEqual(take_param("<nonce>low</nonce><Nonce>up</Nonce>", "Nonce"), ("up", True))

    def test_absent(self):
        """
        Should report a tag missing in both passes.
        """
        self.assertEqual(take_param("<Other>x</Other>", "Nonce"), ("", False))
