# =============================================================================
# Token Truncation — tiktoken
# =============================================================================
#
# Template letters run to several thousand words. Two limits apply:
#   - the embedding model rejects inputs over ~8,191 tokens
#   - twenty full templates would overflow a section prompt
# Both are enforced by cutting text at a token boundary with the same BPE
# tokenizer the OpenAI models use (cl100k_base).
# =============================================================================

from __future__ import annotations

import tiktoken

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    """Lazily initialize and cache the tiktoken encoder."""
    global _encoder
    if _encoder is None:
        _encoder = tiktoken.get_encoding("cl100k_base")
    return _encoder


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """
    Return text cut to at most max_tokens tokens.

    Text already within the limit is returned unchanged. A non-positive
    limit disables truncation.
    """
    if max_tokens <= 0:
        return text
    # Every token covers at least one UTF-8 byte
    if len(text.encode("utf-8")) <= max_tokens:
        return text
    encoder = _get_encoder()
    tokens = encoder.encode(text)
    if len(tokens) <= max_tokens:
        return text
    return encoder.decode(tokens[:max_tokens])
