from __future__ import annotations

import pytest

from snipweave.assembly import errors, glossary
from snipweave.assembly.glossary import (
    ContextualTerm,
    ExternalGlossary,
    GenerationContext,
    Glossary,
    InlineGlossary,
    ScalarTerm,
)


FULL = ContextualTerm(default="main", release="v1.0", docs="crate")


@pytest.mark.parametrize(
    ("context", "expected"),
    [
        (GenerationContext(), "main"),
        (GenerationContext(release=True), "v1.0"),
        (GenerationContext(for_docs=True), "crate"),
        (GenerationContext(release=True, for_docs=True), "crate"),
    ],
)
def test_contextual_term_precedence(context, expected):
    assert glossary.resolve_term("link", FULL, context) == expected


def test_missing_context_value_falls_back_to_default():
    term = ContextualTerm(default="main")

    assert (
        glossary.resolve_term(
            "link", term, GenerationContext(release=True, for_docs=True)
        )
        == "main"
    )


def test_release_only_term_without_default():
    term = ContextualTerm(release="v1.0")

    assert glossary.resolve_term("link", term, GenerationContext(release=True)) == "v1.0"
    with pytest.raises(errors.GlossaryTermNotFound) as excinfo:
        glossary.resolve_term("link", term, GenerationContext())
    assert excinfo.value.name == "link"


def test_scalar_term_ignores_context():
    term = ScalarTerm("same")

    assert glossary.resolve_term("t", term, GenerationContext(for_docs=True)) == "same"


def test_compose_later_sources_override_earlier():
    loaded = {"shared": ScalarTerm("external"), "ext-only": ScalarTerm("x")}
    calls = []

    def load(locator):
        calls.append(locator)
        return loaded

    composed = Glossary.compose(
        [
            InlineGlossary({"shared": ScalarTerm("first")}),
            ExternalGlossary("terms.toml"),
            InlineGlossary({"inline-only": ScalarTerm("y")}),
        ],
        load,
    )

    assert calls == ["terms.toml"]
    assert composed.resolve("shared", GenerationContext()) == "external"
    assert set(composed) == {"shared", "ext-only", "inline-only"}
    assert len(composed) == 3


def test_compose_replaces_whole_term():
    base = Glossary({"link": ContextualTerm(default="a", release="b")})

    composed = Glossary.compose(
        [InlineGlossary({"link": ContextualTerm(default="c")})],
        lambda locator: {},
        base=base,
    )

    assert composed.resolve("link", GenerationContext(release=True)) == "c"
    assert base.resolve("link", GenerationContext(release=True)) == "b"


def test_unknown_term_raises():
    with pytest.raises(errors.GlossaryTermNotFound):
        Glossary().resolve("nope", GenerationContext())
    assert "nope" not in Glossary()


def test_parse_glossary_accepts_strings_and_tables():
    terms = glossary.parse_glossary(
        {"name": "snipweave", "docs": {"default": "a", "docs": "b"}},
        source="terms.toml",
    )

    assert terms == {
        "name": ScalarTerm("snipweave"),
        "docs": ContextualTerm(default="a", docs="b"),
    }


@pytest.mark.parametrize(
    "raw",
    [
        {"t": 3},
        {"t": {"default": "a", "nightly": "b"}},
        {"t": {"default": 1}},
    ],
)
def test_parse_glossary_rejects_bad_terms(raw):
    with pytest.raises(errors.ConfigFormatError):
        glossary.parse_glossary(raw, source="terms.toml")


def test_parse_glossary_requires_table():
    with pytest.raises(errors.ConfigFormatError):
        glossary.parse_glossary(["a"], source="terms.toml")
