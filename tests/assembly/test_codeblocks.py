from __future__ import annotations

import pytest

from snipweave.assembly import codeblocks, errors
from snipweave.assembly.codeblocks import RenderMode


RUST_DOC = """\
Intro text.

```rust
# use std::fmt;
fn main() {
    # let hidden = 1;
    println!("shown");
}
```

Outro # not code.
"""


def test_render_mode_for_target():
    assert RenderMode.for_target(True) is RenderMode.DOC_SOURCE
    assert RenderMode.for_target(False) is RenderMode.RENDER


@pytest.mark.parametrize(
    ("line", "hidden"),
    [
        ("# use std::fmt;", True),
        ("    # let x = 1;", True),
        ("#[derive(Debug)]", False),
        ("#foo", False),
        ("#", False),
        ("let x = 1; # trailing", False),
    ],
)
def test_is_hidden_line(line, hidden):
    assert codeblocks.is_hidden_line(line) is hidden


def test_visible_lines_depends_on_mode():
    lines = ["# hidden", "shown"]

    assert codeblocks.visible_lines(lines, RenderMode.RENDER) == ["shown"]
    assert codeblocks.visible_lines(lines, RenderMode.DOC_SOURCE) == lines


def test_render_mode_drops_hidden_lines_inside_rust_blocks():
    result = codeblocks.filter_code_blocks(RUST_DOC, mode=RenderMode.RENDER)

    assert "# use std::fmt;" not in result
    assert "let hidden" not in result
    assert 'println!("shown");' in result
    assert "Outro # not code." in result
    assert result.startswith("Intro text.\n\n```rust\nfn main() {\n")
    assert result.endswith("}\n```\n\nOutro # not code.\n")


def test_fence_after_html_line_is_still_filtered():
    text = "<details>\n```rust\n# use hidden;\nshown();\n```\n</details>\n"

    result = codeblocks.filter_code_blocks(text, mode=RenderMode.RENDER)

    assert result == "<details>\n```rust\nshown();\n```\n</details>\n"


def test_doc_source_mode_keeps_everything():
    result = codeblocks.filter_code_blocks(RUST_DOC, mode=RenderMode.DOC_SOURCE)

    assert result == RUST_DOC


def test_other_languages_are_untouched():
    text = "```python\n# a comment\nprint(1)\n```\n"

    assert codeblocks.filter_code_blocks(text) == text


def test_info_string_attributes_are_ignored():
    text = "```rust,ignore\n# hidden\nshown\n```\n"

    assert codeblocks.filter_code_blocks(text) == "```rust,ignore\nshown\n```\n"


def test_languages_are_configurable():
    text = "~~~toml\n# hidden\nkey = 1\n~~~\n"

    assert codeblocks.filter_code_blocks(text) == text
    assert (
        codeblocks.filter_code_blocks(text, languages=["TOML"])
        == "~~~toml\nkey = 1\n~~~\n"
    )


def test_empty_language_list_disables_filtering():
    text = "```rust\n# hidden\n```\n"

    assert codeblocks.filter_code_blocks(text, languages=()) == text


def test_text_without_fences_is_returned_unchanged():
    text = "# Heading\n\nNo code here, $5 and # marks.\n"

    assert codeblocks.filter_code_blocks(text) is text


@pytest.mark.parametrize("mode", list(RenderMode))
def test_unclosed_rust_block_is_malformed(mode):
    text = "Before\n\n```rust\n# hidden\nfn main() {}\n"

    with pytest.raises(errors.MalformedCodeBlock):
        codeblocks.filter_code_blocks(text, mode=mode)


def test_multiple_blocks_are_each_filtered():
    text = (
        "```rust\n# a\nb\n```\n"
        "between\n"
        "```rust\nc\n# d\n```"
    )

    assert codeblocks.filter_code_blocks(text) == (
        "```rust\nb\n```\nbetween\n```rust\nc\n```"
    )
