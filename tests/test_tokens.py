"""Tests for :mod:`consumer_gateway.tokens`."""

from unittest import TestCase

from consumer_gateway import tokens
from consumer_gateway.domain import TokenStatus
from consumer_gateway.exceptions import MalformedToken


class TestGenerate(TestCase):
    """Tokens and reset keys are segments of random alphanumerics."""

    def test_starter_token_shape(self):
        """A starter token has three segments of 9, 7 and 9 characters."""
        token = tokens.generate_starter_token()
        segments = token.split('_')
        self.assertEqual([len(s) for s in segments], [9, 7, 9])
        for segment in segments:
            self.assertTrue(segment.isalnum())
            self.assertTrue(segment.isascii())

    def test_reset_key_shape(self):
        """A reset key has three segments of 5 characters."""
        key = tokens.generate_reset_key()
        self.assertEqual([len(s) for s in key.split('_')], [5, 5, 5])

    def test_tokens_differ(self):
        """Two starter tokens are not the same."""
        self.assertNotEqual(tokens.generate_starter_token(),
                            tokens.generate_starter_token())


class TestClassify(TestCase):
    """Classification looks only at the length of the token."""

    def test_fresh_starter_token(self):
        """A fresh starter token is classified as a starter."""
        self.assertIs(tokens.classify(tokens.generate_starter_token()),
                      TokenStatus.STARTER)

    def test_valid_token(self):
        """A starter token with an id appended is active-shaped."""
        valid = tokens.append_id(tokens.generate_starter_token(), '42')
        self.assertIs(tokens.classify(valid), TokenStatus.ACTIVE)

    def test_any_string_of_starter_length(self):
        """Anything as long as a starter token counts as a starter."""
        self.assertIs(tokens.classify('x' * 27), TokenStatus.STARTER)
        self.assertIs(tokens.classify('x' * 26), TokenStatus.ACTIVE)
        self.assertIs(tokens.classify(''), TokenStatus.ACTIVE)


class TestParse(TestCase):
    """Parsing separates the consumer id from the starter token."""

    def test_round_trip(self):
        """Parsing a token built by :func:`append_id` recovers its parts."""
        for consumer_id in ('1', '42', '123456789'):
            with self.subTest(consumer_id=consumer_id):
                starter = tokens.generate_starter_token()
                parsed = tokens.parse(tokens.append_id(starter, consumer_id))
                self.assertEqual(parsed.id, consumer_id)
                self.assertEqual(parsed.starter_token, starter)

    def test_splits_on_last_delimiter(self):
        """Only the last segment is the id."""
        parsed = tokens.parse('a_b_c_d')
        self.assertEqual(parsed.id, 'd')
        self.assertEqual(parsed.starter_token, 'a_b_c')

    def test_no_delimiter(self):
        """A token without any delimiter is malformed."""
        with self.assertRaises(MalformedToken):
            tokens.parse('abcdefghi')

    def test_empty_segments(self):
        """A trailing delimiter yields an empty id rather than an error."""
        self.assertEqual(tokens.parse('abc_').id, '')
