import unittest

from package_extra.infrastructure.html import extract_attribute

PAGE = """
<html>
  <head>
    <meta property="og:title" content="foo/bar">
    <meta property="og:image" content="https://opengraph.githubassets.com/abc/foo/bar">
    <link rel="icon stylesheet" href="/favicon.ico">
  </head>
  <body></body>
</html>
"""


class TestExtractAttribute(unittest.TestCase):
    def test_extracts_og_image_content(self) -> None:
        value = extract_attribute(PAGE, "meta[property='og:image']", "content")

        self.assertEqual(value, "https://opengraph.githubassets.com/abc/foo/bar")

    def test_missing_element_returns_none(self) -> None:
        self.assertIsNone(extract_attribute(PAGE, "meta[name='description']", "content"))

    def test_missing_attribute_returns_none(self) -> None:
        self.assertIsNone(extract_attribute(PAGE, "meta[property='og:image']", "data-missing"))

    def test_multi_valued_attribute_is_joined(self) -> None:
        self.assertEqual(extract_attribute(PAGE, "link", "rel"), "icon stylesheet")
