from dbcode.core.directives import parse_directives, parse_require


class TestParseRequire:
    def test_plain_directive(self) -> None:
        assert parse_require("-- require views/foo") == "views/foo"

    def test_indented_directive(self) -> None:
        assert parse_require("    --   require   views/foo  \n") == "views/foo"

    def test_ordinary_comment(self) -> None:
        assert parse_require("-- hi!") is None

    def test_statement(self) -> None:
        assert parse_require("create view foo as select 1") is None


class TestParseDirectives:
    def test_no_directives_keeps_text(self) -> None:
        text = "create view foo as select 1 as number\n"
        parsed = parse_directives(text)
        assert parsed.requires == ()
        assert parsed.body == text

    def test_leading_directives_are_split_from_body(self) -> None:
        text = "-- require views/foo\n-- require functions/bar\ncreate view baz as select * from foo\n"
        parsed = parse_directives(text)
        assert parsed.requires == ("views/foo", "functions/bar")
        assert parsed.body == "create view baz as select * from foo\n"

    def test_blank_lines_inside_header_are_skipped(self) -> None:
        text = "\n    -- require views/foo\n\n    create view bar as select * from foo\n"
        parsed = parse_directives(text)
        assert parsed.requires == ("views/foo",)
        assert parsed.body == "    create view bar as select * from foo\n"

    def test_directive_after_statement_is_ignored(self) -> None:
        text = "create view bar as select 1;\n-- require views/foo\n"
        parsed = parse_directives(text)
        assert parsed.requires == ()
        assert parsed.body == text

    def test_first_non_directive_comment_ends_header(self) -> None:
        text = "-- require views/a\n-- a comment\n-- require views/b\nselect 1"
        parsed = parse_directives(text)
        assert parsed.requires == ("views/a",)
        assert parsed.body == "-- a comment\n-- require views/b\nselect 1"

    def test_duplicates_collapse_in_first_seen_order(self) -> None:
        text = "-- require b\n-- require a\n-- require b\nselect 1"
        assert parse_directives(text).requires == ("b", "a")

    def test_empty_text(self) -> None:
        parsed = parse_directives("")
        assert parsed.requires == ()
        assert parsed.body == ""
