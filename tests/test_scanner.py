"""Test raw token reads: word runs, single characters, peek."""

from lexcalc.scanner import has_next, next_token, peek_token


class TestNextToken:
    def test_word_run(self):
        assert next_token("int main", 0) == ("int", 3)

    def test_underscore_and_digits_in_word(self):
        assert next_token("my_var2 = 1", 0) == ("my_var2", 7)

    def test_single_punctuation(self):
        assert next_token("/*x", 0) == ("/", 1)

    def test_single_space(self):
        assert next_token("  a", 0) == (" ", 1)

    def test_newline_is_own_token(self):
        assert next_token("\nx", 0) == ("\n", 1)

    def test_from_middle(self):
        assert next_token("a+bc", 2) == ("bc", 4)

    def test_end_of_input(self):
        assert next_token("ab", 2) == ("", 2)

    def test_unicode_letters(self):
        assert next_token("변수 =", 0) == ("변수", 2)


class TestPeek:
    def test_peek_returns_next_token(self):
        assert peek_token("foo bar", 0) == "foo"

    def test_peek_is_idempotent(self):
        source = "alpha beta"
        first = peek_token(source, 0)
        second = peek_token(source, 0)
        assert first == second == "alpha"

    def test_peek_then_next_agree(self):
        source = "(x)"
        for pos in range(len(source)):
            token, _ = next_token(source, pos)
            assert peek_token(source, pos) == token


class TestHasNext:
    def test_has_next(self):
        assert has_next("a", 0)
        assert not has_next("a", 1)
        assert not has_next("", 0)
