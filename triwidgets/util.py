"""
Text helpers for widgets.
"""

import typing

import discord

DEFAULT_CHUNK_LEN = 2048


def split_text(text: str, chunk_len: int = 0) -> typing.Generator[str, None, None]:
    """Splits a string into consecutive chunks of at most chunk_len characters.

    The last chunk is whatever is left of the text, so joining all
    chunks gives back the original text.

        >>> list(split_text('abcdefg', 3))
        ['abc', 'def', 'g']
        >>> list(split_text(''))
        []

    Arguments:
        text {str} -- The text to split.

    Keyword Arguments:
        chunk_len {int} -- How long each chunk may be. If 0 or less,
                           it defaults to 2048. (default: 0)
    """

    if chunk_len <= 0:
        chunk_len = DEFAULT_CHUNK_LEN

    for start in range(0, len(text), chunk_len):
        yield text[start : start + chunk_len]


def embeds_from_string(text: str, chunk_len: int = 0) -> list[discord.Embed]:
    """Splits a string into a list of embeds, one per chunk of text.

    Each chunk becomes the description of its own embed.

    Arguments:
        text {str} -- The text to split.

    Keyword Arguments:
        chunk_len {int} -- How long the text in each embed should be.
                           If 0 or less, it defaults to 2048. (default: 0)
    """

    return [discord.Embed(description=chunk) for chunk in split_text(text, chunk_len)]
