"""Tests for shell quoting and inspection helpers."""

from faucet.core.bash import bash_join, bash_quote, is_parseable, program_name


class TestBashQuote:
    def test_empty_string(self):
        assert bash_quote("") == "''"

    def test_simple_word(self):
        assert bash_quote("dmenu") == "dmenu"

    def test_with_spaces(self):
        assert bash_quote("Open with") == "'Open with'"

    def test_with_single_quote(self):
        assert bash_quote("it's") == "'it'\"'\"'s'"

    def test_special_chars(self):
        assert bash_quote("$DATA_FILE") == "'$DATA_FILE'"


class TestBashJoin:
    def test_menu_argv(self):
        assert bash_join(["dmenu", "-p", "Pick one"]) == "dmenu -p 'Pick one'"

    def test_empty_list(self):
        assert bash_join([]) == ""


class TestProgramName:
    def test_simple(self):
        assert program_name("dmenu -l 20 -i") == "dmenu"

    def test_skips_assignment(self):
        assert program_name("LANG=C rofi -dmenu") == "rofi"

    def test_pipeline(self):
        assert program_name("fzf --height 10 | head -n1") == "fzf"

    def test_unparseable(self):
        assert program_name("echo 'oops") is None


class TestIsParseable:
    def test_valid(self):
        assert is_parseable('xdg-open "$DATA_FILE"')

    def test_empty(self):
        assert not is_parseable("   ")
