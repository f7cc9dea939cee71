import os
import tempfile
import unittest
from unittest.mock import patch

import lexer
from exceptions import IllegalEscapeError, TokenizeError, UnterminatedQuoteError
from lexer import Token, TokenStream, TokenType

W = TokenType.WORD
Q = TokenType.QUOTED_WORD


def no_glob(word):
    return []


def pairs(stream):
    return [(t.type, t.word) for t in stream]


class TestTokenStream(unittest.TestCase):
    def setUp(self):
        self.stream = TokenStream([Token(W, "a"), Token(TokenType.PIPE), Token(W, "b")])

    def test_peek_does_not_consume(self):
        self.assertEqual(TokenType.WORD, self.stream.next_type())
        self.assertEqual("a", self.stream.next_word())
        self.assertEqual(3, len(self.stream))

    def test_consume_is_fifo(self):
        self.assertEqual(Token(W, "a"), self.stream.consume())
        self.assertEqual(TokenType.PIPE, self.stream.consume().type)
        self.assertEqual("b", self.stream.consume().word)
        self.assertEqual(0, len(self.stream))

    def test_end_is_synthesized_past_the_end(self):
        for _ in range(3):
            self.stream.consume()
        self.assertEqual(TokenType.END, self.stream.next_type())
        self.assertEqual(TokenType.END, self.stream.consume().type)
        self.assertIsNone(self.stream.next_word())

    def test_nth_negative_counts_from_tail(self):
        self.assertEqual("b", self.stream.nth(-1).word)
        self.assertEqual("a", self.stream[-3].word)
        self.assertEqual(TokenType.END, self.stream[-4].type)
        self.assertEqual(TokenType.END, self.stream[3].type)

    def test_join_drains_source(self):
        other = TokenStream([Token(W, "c"), Token(Q, "d e")])
        self.stream.join(other)
        self.assertEqual(5, len(self.stream))
        self.assertEqual(0, len(other))
        self.assertEqual("d e", self.stream[-1].word)

    def test_foreach_passes_position(self):
        seen = []
        self.stream.foreach(lambda pos, tok: seen.append((pos, tok.type)))
        self.assertEqual([(0, W), (1, TokenType.PIPE), (2, W)], seen)

    def test_describe(self):
        text = self.stream.describe()
        self.assertEqual(
            "Token [0] type ==> WORD, word ==> a\n"
            "Token [1] type ==> PIPE\n"
            "Token [2] type ==> WORD, word ==> b",
            text,
        )


class TestTokenize(unittest.TestCase):
    def tok(self, line):
        return pairs(lexer.tokenize(line, globber=no_glob))

    def test_simple_words(self):
        self.assertEqual([(W, "echo"), (W, "a"), (W, "b")], self.tok("echo a b"))

    def test_escaped_space_joins_word(self):
        self.assertEqual([(W, "echo"), (W, "a b")], self.tok("echo a\\ b"))

    def test_quoted_word(self):
        self.assertEqual([(W, "echo"), (Q, "a b")], self.tok('echo "a b"'))

    def test_escaped_backslash(self):
        self.assertEqual([(W, "echo"), (W, "a\\"), (W, "b")], self.tok("echo a\\\\ b"))

    def test_pipe_without_spaces(self):
        self.assertEqual(
            [(W, "echo"), (W, "hello"), (TokenType.PIPE, None), (W, "grep"), (Q, "ell")],
            self.tok('echo hello|grep "ell"'),
        )

    def test_escaped_pipe_is_literal(self):
        self.assertEqual(
            [(W, "echo"), (W, "hello|grep"), (Q, "ell")],
            self.tok('echo hello\\|grep "ell"'),
        )

    def test_redirect_operator(self):
        self.assertEqual(
            [(W, "echo"), (W, "boo"), (TokenType.GREATERTHAN, None), (W, "out_file")],
            self.tok("echo boo >out_file"),
        )

    def test_quote_ends_plain_word(self):
        self.assertEqual([(W, "echo"), (W, "a"), (Q, "b c")], self.tok('echo a"b c"'))

    def test_operators_inside_quotes(self):
        self.assertEqual([(W, "echo"), (Q, "hello | grep")], self.tok('echo "hello | grep"'))

    def test_whitespace_only(self):
        self.assertEqual([], self.tok(""))
        self.assertEqual([], self.tok("\t   \n \r  \t \t"))

    def test_plain_escapes(self):
        self.assertEqual([(W, "cat"), (W, ">"), (W, "next.txt")], self.tok("cat \\> next.txt"))
        self.assertEqual([(W, "cat"), (W, "<"), (W, "next.txt")], self.tok("cat \\< next.txt"))
        self.assertEqual([(W, "cat"), (W, '"'), (W, "next.txt")], self.tok('cat \\" next.txt'))
        self.assertEqual([(W, "cat\nnext.txt")], self.tok("cat\\nnext.txt"))
        self.assertEqual([(W, "cat\rnext.txt")], self.tok("cat\\rnext.txt"))
        self.assertEqual([(W, "cat\tnext.txt")], self.tok("cat\\tnext.txt"))

    def test_quoted_escapes(self):
        self.assertEqual([(W, "sed"), (Q, "math| file")], self.tok('sed "math\\| file"'))
        self.assertEqual([(W, "sed"), (Q, 'math" file')], self.tok('sed "math\\" file"'))
        self.assertEqual([(W, "sed"), (Q, "math\tfile")], self.tok('sed "math\\tfile"'))

    def test_bare_operators(self):
        L, G, P = TokenType.LESSTHAN, TokenType.GREATERTHAN, TokenType.PIPE
        self.assertEqual([(G, None), (G, None), (P, None), (L, None), (L, None)], self.tok(">>|<<"))

    def test_full_line(self):
        line = 'echo "Hello\\tWorld\\n" > output.txt | cat < output.txt'
        self.assertEqual(
            [
                (W, "echo"), (Q, "Hello\tWorld\n"), (TokenType.GREATERTHAN, None),
                (W, "output.txt"), (TokenType.PIPE, None), (W, "cat"),
                (TokenType.LESSTHAN, None), (W, "output.txt"),
            ],
            self.tok(line),
        )

    # Errors
    def test_illegal_escape_in_plain_word(self):
        with self.assertRaises(IllegalEscapeError) as ctx:
            lexer.tokenize("echo \\g")
        self.assertEqual("g", ctx.exception.char)
        self.assertEqual("Illegal escape character 'g'", str(ctx.exception))

    def test_illegal_escape_in_quoted_word(self):
        with self.assertRaises(IllegalEscapeError) as ctx:
            lexer.tokenize('echo "This is \\a test"')
        self.assertEqual("Illegal escape character 'a'", str(ctx.exception))

    def test_trailing_backslash(self):
        with self.assertRaises(IllegalEscapeError) as ctx:
            lexer.tokenize("\\")
        self.assertEqual("", ctx.exception.char)
        with self.assertRaises(IllegalEscapeError):
            lexer.tokenize('echo "This is a test\\')

    def test_unterminated_quote(self):
        with self.assertRaises(UnterminatedQuoteError) as ctx:
            lexer.tokenize('touch "hacker.txt')
        self.assertEqual("Unterminated quote", str(ctx.exception))
        self.assertIsInstance(ctx.exception, TokenizeError)


class TestGlobbing(unittest.TestCase):
    def test_injected_globber_expands_in_order(self):
        fake = {"*.py": ["a.py", "b.py"]}
        stream = lexer.tokenize("ls *.py", globber=lambda w: fake.get(w, []))
        self.assertEqual([(W, "ls"), (W, "a.py"), (W, "b.py")], pairs(stream))

    def test_matches_are_spliced_between_neighbours(self):
        fake = {"*.py": ["a.py", "b.py"]}
        stream = lexer.tokenize("wc *.py > out", globber=lambda w: fake.get(w, []))
        self.assertEqual(
            [(W, "wc"), (W, "a.py"), (W, "b.py"), (TokenType.GREATERTHAN, None), (W, "out")],
            pairs(stream),
        )

    def test_no_match_keeps_literal(self):
        stream = lexer.tokenize("ls *.nomatch", globber=no_glob)
        self.assertEqual([(W, "ls"), (W, "*.nomatch")], pairs(stream))

    def test_quoted_words_are_not_globbed(self):
        calls = []

        def globber(word):
            calls.append(word)
            return ["x"]

        stream = lexer.tokenize('ls "*.py"', globber=globber)
        self.assertEqual([(W, "ls"), (Q, "*.py")], pairs(stream))
        self.assertEqual([], calls)

    def test_words_without_metacharacters_skip_globber(self):
        with patch.object(lexer.glob, "glob") as mock_glob:
            lexer.tokenize("ls plain")
        mock_glob.assert_not_called()

    @patch.object(lexer.glob, "glob")
    def test_default_globber_sorts_matches(self, mock_glob):
        mock_glob.return_value = ["b.py", "a.py"]
        stream = lexer.tokenize("ls *.py")
        self.assertEqual(["a.py", "b.py"], [t.word for t in stream][1:])

    def test_default_globber_against_filesystem(self):
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("one.txt", "two.txt", "three.log"):
                open(os.path.join(tmp, name), "w").close()
            stream = lexer.tokenize(f"cat {tmp}/t?o.txt {tmp}/*.txt")
        words = [t.word for t in stream]
        self.assertEqual(
            ["cat", f"{tmp}/two.txt", f"{tmp}/one.txt", f"{tmp}/two.txt"],
            words,
        )

    def test_tilde_expanded_for_glob_words(self):
        with tempfile.TemporaryDirectory() as tmp:
            open(os.path.join(tmp, "notes.md"), "w").close()
            with patch.dict(os.environ, {"HOME": tmp}):
                stream = lexer.tokenize("ls ~/*.md")
        self.assertEqual(f"{tmp}/notes.md", stream[-1].word)


if __name__ == "__main__":
    unittest.main()
