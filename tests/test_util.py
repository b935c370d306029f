import pytest

from triwidgets.util import embeds_from_string, split_text


@pytest.mark.parametrize("chunk_len", [1, 3, 7, 10, 11, 100])
def test_split_text_joins_back_to_original(chunk_len):
    text = "The quick brown fox jumps over the lazy dog"

    chunks = list(split_text(text, chunk_len))

    assert "".join(chunks) == text
    assert all(0 < len(chunk) <= chunk_len for chunk in chunks)
    assert all(len(chunk) == chunk_len for chunk in chunks[:-1])


def test_split_text_keeps_short_tail():
    # 2500 characters is closer to one chunk than two; the tail must survive
    text = "a" * 2048 + "b" * 452

    chunks = list(split_text(text))

    assert chunks == ["a" * 2048, "b" * 452]


@pytest.mark.parametrize("chunk_len", [0, -1, -2048])
def test_split_text_defaults_to_2048(chunk_len):
    text = "x" * 5000

    assert list(split_text(text, chunk_len)) == list(split_text(text, 2048))
    assert [len(chunk) for chunk in split_text(text, chunk_len)] == [2048, 2048, 904]


def test_split_text_empty():
    assert list(split_text("", 5)) == []


def test_embeds_from_string_puts_chunks_in_descriptions():
    embeds = embeds_from_string("hello world", 5)

    assert [embed.description for embed in embeds] == ["hello", " worl", "d"]


def test_embeds_from_string_short_text_is_one_embed():
    embeds = embeds_from_string("hi")

    assert len(embeds) == 1
    assert embeds[0].description == "hi"
