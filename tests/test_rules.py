"""Rule matching and rule-set construction."""

from __future__ import annotations

import pytest

from lexcalc.errors import ConfigError
from lexcalc.rules import (
    BLOCK_COLOR,
    Block,
    Directive,
    Keyword,
    cpp_rules,
    match_rule,
    rules_from_config,
)


class TestKeywordMatch:
    def test_exact_match(self):
        assert match_rule(Keyword("if", "c"), "if", "if x", 2, None) == ("if", 2)

    def test_longer_token_does_not_match(self):
        assert match_rule(Keyword("if", "c"), "iff", "iff", 3, None) is None


class TestDirectiveMatch:
    def test_prefix_and_word(self):
        rule = Directive("include", "blue")
        assert match_rule(rule, "#", "#include <a>", 1, None) == ("#include", 8)

    def test_blanks_after_prefix_are_kept(self):
        rule = Directive("include", "blue")
        assert match_rule(rule, "#", "# \tinclude", 1, None) == ("# \tinclude", 10)

    def test_different_word(self):
        assert match_rule(Directive("define", "blue"), "#", "#include", 1, None) is None

    def test_word_prefix_is_not_enough(self):
        assert match_rule(Directive("if", "blue"), "#", "#ifdef", 1, None) is None

    def test_prefix_without_word(self):
        assert match_rule(Directive("if", "blue"), "#", "#   ", 1, None) is None

    def test_multi_character_prefix(self):
        rule = Directive("pragma", "blue", prefix="%%")
        assert match_rule(rule, "%", "%%pragma", 1, None) == ("%%pragma", 8)

    def test_wrong_token_for_prefix(self):
        assert match_rule(Directive("if", "blue"), "if", "if", 2, None) is None


class TestBlockMatch:
    def test_start_when_inactive(self):
        block = Block("/*", "*/", "g")
        assert match_rule(block, "/", "/* c", 1, None) == ("/*", 2)

    def test_end_not_wanted_when_inactive(self):
        block = Block("/*", "*/", "g")
        assert match_rule(block, "*", "*/", 1, None) is None

    def test_end_when_active(self):
        block = Block("/*", "*/", "g")
        assert match_rule(block, "*", "*/", 1, block) == ("*/", 2)

    def test_other_active_block_does_not_flip(self):
        block = Block("/*", "*/", "g")
        other = Block('"', '"', "g")
        assert match_rule(block, "/", "/*", 1, other) == ("/*", 2)

    def test_partial_delimiter(self):
        assert match_rule(Block("/*", "*/", "g"), "/", "/x", 1, None) is None

    def test_delimiter_cut_by_end_of_input(self):
        assert match_rule(Block("/*", "*/", "g"), "/", "/", 1, None) is None

    def test_long_delimiter(self):
        block = Block("<!--", "-->", "g")
        assert match_rule(block, "<", "<!-- c -->", 1, None) == ("<!--", 4)

    def test_unknown_rule_type(self):
        with pytest.raises(TypeError):
            match_rule("if", "if", "if", 2, None)  # type: ignore[arg-type]


class TestCppRules:
    def test_blocks_come_first(self):
        rules = cpp_rules()
        assert rules[:4] == (
            Block('"', '"', BLOCK_COLOR),
            Block("'", "'", BLOCK_COLOR),
            Block("/*", "*/", BLOCK_COLOR),
            Block("//", "\n", BLOCK_COLOR),
        )

    def test_contains_each_kind(self):
        rules = cpp_rules()
        assert Keyword("int", "#808000") in rules
        assert Keyword("NULL", "#808000") in rules
        assert Directive("include", "blue", "#") in rules
        assert Keyword("/", "red") in rules

    def test_operators_follow_directives(self):
        rules = cpp_rules()
        assert rules.index(Keyword("/", "red")) > rules.index(Directive("warning", "blue"))

    def test_fresh_but_equal(self):
        assert cpp_rules() == cpp_rules()


class TestRulesFromConfig:
    def test_no_highlight_table(self):
        assert rules_from_config({}) == cpp_rules()

    def test_blocks_replaced(self):
        config = {"highlight": {"blocks": [{"start": "#", "end": "\n", "color": "gray"}]}}
        rules = rules_from_config(config)
        assert rules[0] == Block("#", "\n", "gray")
        assert Block('"', '"', BLOCK_COLOR) not in rules
        assert Keyword("int", "#808000") in rules

    def test_block_default_color(self):
        config = {"highlight": {"blocks": [{"start": "<", "end": ">"}]}}
        assert rules_from_config(config)[0] == Block("<", ">", BLOCK_COLOR)

    def test_keywords_replaced_operators_kept(self):
        config = {"highlight": {"keywords": {"color": "purple", "words": ["def", "class"]}}}
        rules = rules_from_config(config)
        assert Keyword("def", "purple") in rules
        assert Keyword("int", "#808000") not in rules
        assert Keyword("+", "red") in rules

    def test_directives_with_prefix(self):
        config = {"highlight": {"directives": {"prefix": "@", "words": ["media"]}}}
        rules = rules_from_config(config)
        assert Directive("media", "blue", "@") in rules
        assert Directive("include", "blue", "#") not in rules

    def test_operators_replaced(self):
        config = {"highlight": {"operators": {"color": "orange", "words": ["=>"]}}}
        rules = rules_from_config(config)
        assert rules[-1] == Keyword("=>", "orange")

    def test_section_order_is_fixed(self):
        config = {
            "highlight": {
                "operators": {"words": ["+"]},
                "keywords": {"words": ["if"]},
                "directives": {"words": ["define"]},
                "blocks": [{"start": "'", "end": "'"}],
            }
        }
        rules = rules_from_config(config)
        assert [type(r).__name__ for r in rules] == ["Block", "Keyword", "Directive", "Keyword"]

    def test_highlight_not_a_table(self):
        with pytest.raises(ConfigError, match="must be a table"):
            rules_from_config({"highlight": "cpp"})

    def test_block_missing_end(self):
        with pytest.raises(ConfigError, match="'start' and 'end'"):
            rules_from_config({"highlight": {"blocks": [{"start": "/*"}]}})

    def test_blocks_not_an_array(self):
        with pytest.raises(ConfigError):
            rules_from_config({"highlight": {"blocks": {"start": "/*", "end": "*/"}}})

    def test_words_not_a_list(self):
        with pytest.raises(ConfigError, match="words"):
            rules_from_config({"highlight": {"keywords": {"words": "if"}}})

    def test_empty_word(self):
        with pytest.raises(ConfigError):
            rules_from_config({"highlight": {"operators": {"words": ["+", ""]}}})

    def test_empty_prefix(self):
        with pytest.raises(ConfigError, match="prefix"):
            rules_from_config({"highlight": {"directives": {"prefix": "", "words": ["x"]}}})

    def test_bad_color(self):
        with pytest.raises(ConfigError, match="color"):
            rules_from_config({"highlight": {"keywords": {"color": 3, "words": ["x"]}}})
