"""
Unit tests for overflow chunking and truncation.
"""

import pytest

from memory_context.utils.chunking import split_into_chunks, truncate_content


@pytest.mark.unit
class TestSplitIntoChunks:

    def test_short_text_is_returned_untouched(self):
        assert split_into_chunks('hello world', 100) == ['hello world']

    def test_text_at_the_limit_is_returned_untouched(self):
        text = 'One. Two! Three?'
        assert split_into_chunks(text, len(text)) == [text]

    def test_sentences_are_packed_greedily(self):
        text = 'aaaa. bbbb. cccc. dddd.'
        assert split_into_chunks(text, 12) == ['aaaa. bbbb.', ' cccc. dddd.']

    def test_repeated_terminators_split_once(self):
        assert split_into_chunks('Wait!!! What?? Ok...', 10) == ['Wait.', ' What. Ok.']

    def test_blank_fragments_are_dropped(self):
        chunks = split_into_chunks('First sentence.   . Second sentence.', 20)
        assert chunks == ['First sentence.', ' Second sentence.']

    def test_oversized_sentence_becomes_its_own_chunk(self):
        long_sentence = 'x' * 50
        chunks = split_into_chunks(f'short. {long_sentence}. tail.', 20)
        assert chunks == ['short.', f' {long_sentence}.', ' tail.']
        assert len(chunks[1]) > 20

    def test_chunks_respect_bound_except_single_sentences(self):
        text = ' '.join(f'Sentence number {i} is here.' for i in range(200))
        chunks = split_into_chunks(text, 100)
        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_concatenation_reconstructs_sentences(self):
        text = 'Alpha beta. Gamma delta! Epsilon zeta? Eta theta.'
        chunks = split_into_chunks(text, 20)
        rebuilt = ''.join(chunks)
        assert [s for s in rebuilt.split('.') if s.strip()] == ['Alpha beta', ' Gamma delta', ' Epsilon zeta', ' Eta theta']

    def test_is_deterministic(self):
        text = 'One two three. ' * 50
        assert split_into_chunks(text, 64) == split_into_chunks(text, 64)


@pytest.mark.unit
class TestTruncateContent:

    def test_short_content_unchanged(self):
        assert truncate_content('abc', 10) == 'abc'

    def test_long_content_gets_ellipsis(self):
        result = truncate_content('abcdefghijkl', 10)
        assert result == 'abcdefg...'
        assert len(result) == 10
