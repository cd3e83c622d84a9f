"""
Tests for the lenient HTML tree and heuristic anchor scanning.
"""

from unittest.mock import patch

import pytest

from unsubscribe_audit.email_processor.unsubscribe.exceptions import HtmlParseError
from unsubscribe_audit.email_processor.unsubscribe.html_tree import Element, Text, build_html_tree
from unsubscribe_audit.email_processor.unsubscribe.scanners import HtmlAnchorScanner
from unsubscribe_audit.email_processor.unsubscribe.types import FoundIn


class TestHtmlTree:
    """Test conversion of markup into Element/Text nodes."""
    
    def test_fragment_wrapped_in_root(self):
        root = build_html_tree("<p>Hi <b>there</b></p>")
        
        assert root.tag == "root"
        paragraph = root.children[0]
        assert isinstance(paragraph, Element)
        assert paragraph.tag == "p"
        assert paragraph.text == "Hi "
        assert paragraph.inner_text() == "Hi there"
    
    def test_text_node_children(self):
        root = build_html_tree("before<i>x</i>after")
        
        assert root.children[0] == Text("before")
        assert root.children[2] == Text("after")
    
    def test_attribute_names_lowercased(self):
        anchor = build_html_tree('<A HREF="https://ex.com" Rel="Unsubscribe">x</A>').children[0]
        
        assert anchor.tag == "a"
        assert anchor.attributes == {"href": "https://ex.com", "rel": "Unsubscribe"}
        assert anchor.get_attribute("REL") == "Unsubscribe"
    
    def test_multi_valued_attribute_kept_as_string(self):
        anchor = build_html_tree('<a rel="nofollow unsubscribe" href="x">y</a>').children[0]
        
        assert anchor.get_attribute("rel") == "nofollow unsubscribe"
    
    def test_comments_excluded_from_text(self):
        paragraph = build_html_tree("<p><!-- unsubscribe -->x</p>").children[0]
        
        assert paragraph.inner_text() == "x"
    
    def test_malformed_markup_tolerated(self):
        root = build_html_tree("<div><a href='u'>Unsub</div></span><p>tail")
        
        anchor = root.children[0].children[0]
        assert anchor.tag == "a"
        assert anchor.inner_text() == "Unsub"
        assert root.inner_text().endswith("tail")
    
    def test_inner_text_skips_nested_anchors(self):
        outer = Element("a", {"href": "https://ex.com/home"}, [
            Text("Home "),
            Element("b", children=[Text("News")]),
            Element("a", {"href": "https://ex.com/unsub"}, [Text("Unsubscribe")]),
        ])
        
        assert outer.inner_text() == "Home News"
        assert outer.children[2].inner_text() == "Unsubscribe"
    
    def test_element_without_text(self):
        assert build_html_tree("<br>").children[0].text is None


class TestAnchorMatching:
    """Test the unsubscribe heuristic on individual anchors."""
    
    def setup_method(self):
        self.scanner = HtmlAnchorScanner()
    
    def test_rel_attribute(self):
        candidate = self.scanner.scan('<a href="https://ex.com/out" rel="unsubscribe">click</a>')
        
        assert candidate.uri == "https://ex.com/out"
        assert candidate.origin == FoundIn.BODY
    
    def test_aria_label(self):
        candidate = self.scanner.scan('<a href="https://ex.com/p" aria-label="Unsubscribe from list">x</a>')
        
        assert candidate.uri == "https://ex.com/p"
    
    @pytest.mark.parametrize("label", [
        "Se désabonner", "Se desabonner", "Désinscrire", "se desinscrire",
        "Opt-out", "opt out", "OPTOUT", "UNSUBSCRIBE here"
    ])
    def test_multilingual_inner_text(self, label):
        candidate = self.scanner.scan(f'<a href="https://ex.com/x">{label}</a>')
        
        assert candidate is not None
        assert candidate.uri == "https://ex.com/x"
    
    def test_text_split_across_inline_elements(self):
        candidate = self.scanner.scan('<a href="https://ex.com/z"><span>Unsub</span><b>scribe</b></a>')
        
        assert candidate.uri == "https://ex.com/z"
    
    def test_target_alone_matches(self):
        candidate = self.scanner.scan('<a href="https://ex.com/unsubscribe?id=1">click here</a>')
        
        assert candidate.uri == "https://ex.com/unsubscribe?id=1"
    
    def test_src_attribute_as_target(self):
        candidate = self.scanner.scan('<a src="https://ex.com/s">unsubscribe</a>')
        
        assert candidate.uri == "https://ex.com/s"
    
    def test_uppercase_markup(self):
        candidate = self.scanner.scan('<A HREF="https://ex.com/u">Unsubscribe</A>')
        
        assert candidate.uri == "https://ex.com/u"
    
    def test_entities_and_whitespace_in_target(self):
        candidate = self.scanner.scan('<a href="  https://ex.com/u?a=1&amp;b=2  ">Unsubscribe</a>')
        
        assert candidate.uri == "https://ex.com/u?a=1&b=2"
    
    def test_anchor_without_target_ignored(self):
        assert self.scanner.scan('<a name="footer">unsubscribe</a>') is None
    
    def test_unrelated_links_ignored(self):
        html = '<a href="https://ex.com/shop">Shop now</a> <a href="https://ex.com/contact">Contact</a>'
        
        assert self.scanner.scan(html) is None
    
    def test_nested_in_malformed_markup(self):
        html = '<table><tr><td><div><a href="https://ex.com/u">Unsubscribe</div></span><p>footer'
        
        assert self.scanner.scan(html).uri == "https://ex.com/u"
    
    def test_unclosed_leading_anchor_does_not_take_later_label(self):
        html = '<a href="https://ex.com/home">Home <p>News</p><a href="https://ex.com/unsub">Unsubscribe</a>'
        
        assert self.scanner.collect_candidates(html) == ["https://ex.com/unsub"]
        assert self.scanner.scan(html).uri == "https://ex.com/unsub"


class TestCandidateSelection:
    """Test fast rejection, deduplication and ranking in the scanner."""
    
    def setup_method(self):
        self.scanner = HtmlAnchorScanner()
    
    @pytest.mark.parametrize("body", [
        "", None, "<p>hello</p>", "To unsubscribe visit https://ex.com/unsubscribe", "<abbr>unsubscribe</abbr>"
    ])
    def test_bodies_without_anchor_tag(self, body):
        assert self.scanner.scan(body) is None
    
    def test_candidates_deduplicated_in_order(self):
        html = (
            '<a href="mailto:u@ex.com">Unsubscribe</a>'
            '<a href="https://ex.com/u">Unsubscribe</a>'
            '<a href="mailto:u@ex.com">opt out</a>'
            '<a href="https://ex.com/v">Unsubscribe</a>'
        )
        
        assert self.scanner.collect_candidates(html) == [
            "mailto:u@ex.com", "https://ex.com/u", "https://ex.com/v"
        ]
    
    def test_http_preferred_over_earlier_mailto(self):
        html = '<a href="mailto:u@ex.com">Unsubscribe</a><a href="https://ex.com/u">Unsubscribe</a>'
        
        assert self.scanner.scan(html).uri == "https://ex.com/u"
    
    def test_mailto_preferred_over_other(self):
        html = '<a href="/relative/unsubscribe">x</a><a href="mailto:u@ex.com">Unsubscribe</a>'
        
        assert self.scanner.scan(html).uri == "mailto:u@ex.com"
    
    def test_other_scheme_when_nothing_better(self):
        assert self.scanner.scan('<a href="/relative/unsubscribe">x</a>').uri == "/relative/unsubscribe"
    
    def test_parse_failure_is_not_found(self):
        with patch('unsubscribe_audit.email_processor.unsubscribe.scanners.build_html_tree') as mock_build:
            mock_build.side_effect = HtmlParseError("boom")
            
            assert self.scanner.scan('<a href="https://ex.com/u">Unsubscribe</a>') is None
    
    def test_custom_term_table(self):
        scanner = HtmlAnchorScanner(terms={'de': [r'abmelden']})
        
        assert scanner.scan('<a href="https://ex.com/d">Newsletter abmelden</a>').uri == "https://ex.com/d"
        assert scanner.scan('<a href="https://ex.com/e">Unsubscribe</a>') is None
    
    def test_empty_term_table_matches_nothing(self):
        scanner = HtmlAnchorScanner(terms={})
        
        assert scanner.scan('<a href="https://ex.com/unsubscribe">Unsubscribe</a>') is None
