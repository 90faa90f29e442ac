from __future__ import annotations

import pytest

from silence_manager.domain.coupling import embed, extract, marker, strip_lead

PREFIX = "silence-manager"


@pytest.mark.parametrize("reference", ["OPS-1", "abc-123-def", "a b c"])
@pytest.mark.parametrize("text", ["", "free text", "line one\nline two"])
def test_extract_recovers_embedded_reference(text: str, reference: str) -> None:
    assert extract(embed(text, PREFIX, reference), PREFIX) == reference


def test_embed_with_empty_reference_is_identity() -> None:
    assert embed("unchanged", PREFIX, "") == "unchanged"


def test_embed_with_lead_and_separator() -> None:
    assert embed("body", PREFIX, "OPS-1", lead="# ") == "# silence-manager: OPS-1\nbody"
    assert embed("body", PREFIX, "s-1", separator="\n\n") == "silence-manager: s-1\n\nbody"


def test_extract_reads_to_end_of_string_without_newline() -> None:
    assert extract("silence-manager: OPS-7", PREFIX) == "OPS-7"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "silence-manager",
        "silence-manager:OPS-1",
        " silence-manager: OPS-1",
        "Silence-Manager: OPS-1",
        "notes\nsilence-manager: OPS-1",
        "# silence-manager: OPS-1",
    ],
)
def test_extract_requires_exact_marker_at_position_zero(text: str) -> None:
    assert extract(text, PREFIX) == ""


def test_custom_prefix() -> None:
    text = embed("", "team-x", "OPS-2")

    assert text.startswith(marker("team-x"))
    assert extract(text, "team-x") == "OPS-2"
    assert extract(text, PREFIX) == ""


def test_strip_lead() -> None:
    assert strip_lead("# silence-manager: OPS-1", "# ") == "silence-manager: OPS-1"
    assert strip_lead("silence-manager: OPS-1", "# ") is None
