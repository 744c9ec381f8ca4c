from distarchive.docblock import (
    TokenKind,
    find_version_in_code,
    find_version_in_docblock,
    parse_docblock,
    tokenize,
)

PLUGIN = """<?php
/**
 * Plugin Name: Hello World
 * Description: Says hello.
 * @version 1.2.3
 * @author Jane <jane@example.com>
 */
function hello() {}
"""


def test_parse_docblock_annotation_and_property_forms():
    tags = parse_docblock(PLUGIN)
    assert tags["plugin name"] == "Hello World"
    assert tags["description"] == "Says hello."
    assert tags["version"] == "1.2.3"
    assert tags["author"] == "Jane <jane@example.com>"


def test_parse_docblock_last_tag_wins():
    block = "/**\n * @version 1.2.3\n * @version 1.2.4\n */"
    assert parse_docblock(block)["version"] == "1.2.4"
    assert find_version_in_docblock(block) == "1.2.4"


def test_parse_docblock_property_without_asterisk():
    assert parse_docblock("/*\nVersion: 2.0\n*/") == {"version": "2.0"}


def test_parse_docblock_empty_value():
    tags = parse_docblock("/**\n * @version\n * Stable tag:\n */")
    assert tags["version"] == ""
    assert tags["stable tag"] == ""


def test_parse_docblock_skips_prose():
    tags = parse_docblock("/**\n * Just some prose here\n */")
    assert tags == {}


def test_parse_docblock_is_idempotent():
    assert parse_docblock(PLUGIN) == parse_docblock(PLUGIN)


def test_tokenize_classifies_doc_comments():
    kinds = [t.kind for t in tokenize("<?php /** a */ /* b */ // c\n$x = 1;")]
    assert TokenKind.DOC_COMMENT in kinds
    assert kinds.count(TokenKind.DOC_COMMENT) == 1
    assert TokenKind.WHITESPACE in kinds


def test_tokenize_empty_comment_is_not_docblock():
    kinds = [t.kind for t in tokenize("<?php /**/ $x;")]
    assert TokenKind.DOC_COMMENT not in kinds


def test_find_version_in_code():
    assert find_version_in_code(PLUGIN) == "1.2.3"


def test_find_version_first_docblock_with_version():
    code = "<?php\n/** @package foo */\n/** @version 1.0 */\n/** @version 2.0 */\n"
    assert find_version_in_code(code) == "1.0"


def test_find_version_ignores_plain_comments():
    assert find_version_in_code("<?php\n/* Version: 1.0 */\n") is None


def test_find_version_ignores_strings_and_inline_html():
    code = "/** @version 9.9 */\n<?php\n$s = '/** @version 1.0 */';\n$t = \"/** @version 2.0 */\";\n"
    assert find_version_in_code(code) is None


def test_find_version_after_closing_tag_is_html():
    assert find_version_in_code("<?php ?>/** @version 1.0 */") is None


def test_find_version_truncated_docblock():
    code = "<?php\n/**\n * @version 3.1.4\n * Some long description that was cut"
    assert find_version_in_code(code) == "3.1.4"


def test_find_version_none_without_php():
    assert find_version_in_code("") is None
    assert find_version_in_code("plain text") is None


def test_parse_docblock_one_line_block():
    assert parse_docblock("/** @version 1.0 */") == {"version": "1.0"}
    assert parse_docblock("/** Version: 1.0 */") == {"version": "1.0"}


def test_docblock_needs_whitespace_after_opener():
    assert find_version_in_code("<?php\n/**@version 1.0*/\n") is None
    assert find_version_in_code("<?php\n/*** @version 1.0 */\n") is None
    assert find_version_in_code("<?php\n/**\t@version 1.0 */\n") == "1.0"


def test_heredoc_does_not_hide_docblock():
    code = "<?php\n$msg = <<<EOT\nIt's here\nEOT;\n/**\n * @version 2.1\n */\n"
    assert find_version_in_code(code) == "2.1"


def test_nowdoc_and_backtick_contents_are_not_scanned():
    nowdoc = "<?php\n$s = <<<'TXT'\n  /** @version 9.9 */\n  TXT;\n/** @version 1.1 */\n"
    assert find_version_in_code(nowdoc) == "1.1"
    backtick = "<?php\n$out = `echo '/** @version 9.9 */'`;\n"
    assert find_version_in_code(backtick) is None
