"""Tests for lexical rules."""

from __future__ import annotations

from economy.config import ValidatorSettings
from economy.validator.lexical import (
    check_ampersands,
    check_attributes,
    check_lexical,
    check_stray_text,
    check_tag_names,
    outside_text,
)
from economy.validator.models import Severity
from economy.validator.scanner import scan


class TestTagNames:
    def test_valid_names(self) -> None:
        tokens = scan("<_a><b-c.d/><e1></e1></_a>").tokens
        assert check_tag_names(tokens) == []

    def test_trailing_hyphen_has_its_own_message(self) -> None:
        issues = check_tag_names(scan("<types>\n<item->1</item->\n</types>").tokens)
        assert len(issues) == 1
        assert "Invalid tag name" in issues[0].message
        assert "hyphen" in issues[0].message
        assert issues[0].line == 2

    def test_invalid_start_character(self) -> None:
        issues = check_tag_names(scan("<1type/>").tokens)
        assert len(issues) == 1
        assert "Invalid tag name '<1type>'" in issues[0].message
        assert "must not end with a hyphen" not in issues[0].message

    def test_invalid_inner_character(self) -> None:
        issues = check_tag_names(scan("<ty$pe/>").tokens)
        assert "letters, digits" in issues[0].message

    def test_whitespace_after_lt(self) -> None:
        issues = check_tag_names(scan("< type/>").tokens)
        assert "whitespace" in issues[0].message

    def test_closing_tags_not_rechecked(self) -> None:
        issues = check_tag_names(scan("<a->x</a->").tokens)
        assert len(issues) == 1

    def test_space_after_closing_slash(self) -> None:
        issues = check_tag_names(scan("<a>x\n</ a>").tokens)
        assert len(issues) == 1
        assert "Invalid closing tag" in issues[0].message
        assert "whitespace" in issues[0].message
        assert issues[0].line == 2

    def test_closing_tag_with_attributes(self) -> None:
        issues = check_tag_names(scan('<a>x</a foo="1">').tokens)
        assert len(issues) == 1
        assert "Invalid closing tag </a>" in issues[0].message
        assert "attributes" in issues[0].message

    def test_closing_tag_without_name(self) -> None:
        issues = check_tag_names(scan("<a>x</>").tokens)
        assert "no name" in issues[0].message

    def test_trailing_space_in_closing_tag_allowed(self) -> None:
        assert check_tag_names(scan("<a>x</a >").tokens) == []


class TestAttributes:
    def test_quoted_attributes_pass(self) -> None:
        tokens = scan("<type name=\"A\" scope='x'/>").tokens
        assert check_attributes(tokens) == []

    def test_unquoted_value(self) -> None:
        issues = check_attributes(scan("<types><type id=5/></types>").tokens)
        assert len(issues) == 1
        assert "Malformed attribute 'id'" in issues[0].message
        assert "quotes" in issues[0].message
        assert issues[0].suggestion == 'id="5"'

    def test_unterminated_quote(self) -> None:
        issues = check_attributes(scan('<type name="AKM>\n</type>').tokens)
        assert any("Malformed attribute 'name'" in i.message for i in issues)

    def test_mismatched_quote_pair(self) -> None:
        issues = check_attributes(scan("<type name=\"AKM'/>").tokens)
        assert any("Malformed attribute" in i.message for i in issues)

    def test_bare_word_attribute(self) -> None:
        issues = check_attributes(scan("<type hidden/>").tokens)
        assert len(issues) == 1
        assert "Malformed attribute 'hidden'" in issues[0].message

    def test_duplicate_attribute(self) -> None:
        issues = check_attributes(scan('<types><type name="X" name="Y"/></types>').tokens)
        assert len(issues) == 1
        assert "Duplicate attribute 'name'" in issues[0].message
        assert issues[0].line == 1

    def test_triplicate_reported_once(self) -> None:
        issues = check_attributes(scan('<t a="1" a="2" a="3"/>').tokens)
        assert len(issues) == 1


class TestAmpersands:
    def test_bare_ampersand(self) -> None:
        issues = check_ampersands(scan("<a>\nValue & More</a>").texts)
        assert len(issues) == 1
        assert issues[0].severity == Severity.error
        assert "ampersand" in issues[0].message
        assert "&amp;" in issues[0].message
        assert issues[0].line == 2

    def test_entities_pass(self) -> None:
        text = "<a>&amp; &lt; &gt; &quot; &apos; &#38; &#x26;</a>"
        assert check_ampersands(scan(text).texts) == []

    def test_unknown_entity_flagged(self) -> None:
        assert len(check_ampersands(scan("<a>&nbsp;</a>").texts)) == 1

    def test_cdata_and_comments_ignored(self) -> None:
        text = "<a><![CDATA[a & b]]><!-- c & d --></a>"
        assert check_ampersands(scan(text).texts) == []

    def test_warning_severity(self) -> None:
        issues = check_ampersands(scan("<a>x & y</a>").texts, Severity.warning)
        assert issues[0].severity == Severity.warning
        assert issues[0].message.startswith("WARNING")


class TestStrayText:
    def test_text_after_root(self) -> None:
        text = "<types>\n</types>\nefvnervnoeboem garbage"
        issues = check_stray_text(scan(text).texts)
        assert len(issues) == 1
        assert "invalid text content outside of tags" in issues[0].message
        assert "efvnervnoeboem" in issues[0].message
        assert issues[0].line == 3

    def test_short_leftover_ignored(self) -> None:
        assert check_stray_text(scan("<a></a> abc").texts) == []

    def test_numeric_leftover_ignored(self) -> None:
        assert check_stray_text(scan("<a></a> 12345678901234").texts) == []

    def test_text_inside_elements_ignored(self) -> None:
        assert check_stray_text(scan("<a>plenty of words in here</a>").texts) == []

    def test_excerpt_truncated(self) -> None:
        junk = "garbage " * 40
        issues = check_stray_text(scan(f"<a/>{junk}").texts, excerpt_length=20)
        assert issues[0].context == junk.strip()[:20] + "..."

    def test_threshold_configurable(self) -> None:
        assert len(check_stray_text(scan("<a/> abcd").texts, min_length=2)) == 1


class TestOutsideText:
    def test_removes_elements_comments_and_declaration(self) -> None:
        text = '<?xml version="1.0"?>\n<!-- c -->\n<a>inner<b/></a>\noutside'
        assert outside_text(text) == "\n\n\noutside"

    def test_reduction_is_idempotent(self) -> None:
        text = "lead<a>x</a> middle > <b/>tail & end"
        once = outside_text(text)
        assert outside_text(once) == once


def test_check_lexical_uses_settings() -> None:
    settings = ValidatorSettings(ampersand_severity="warning", stray_text_min_length=100)
    result = scan("<a>x & y</a> some stray words")
    issues = check_lexical(result, settings)
    assert [i.severity for i in issues] == [Severity.warning]
