"""
Curly CLI Entrypoint.

This module provides the command-line interface for the Curly front end.

Features:
    - Read source from `.curly` files or inline strings.
    - Tokenize and parse, then print the rendered source, the token list, or the tree as JSON.
    - Output to console or file.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    curly hello.curly
    curly -s "let x = 1 + 2;" --json
    curly hello.curly --tokens
    curly hello.curly -o normalized.curly
    curly --repl --verbose

Functions:
    run_curly(source: str, is_string: bool = False, out: Optional[str] = None,
              tokens: bool = False, as_json: bool = False, pretty: bool = False) -> str:
        Runs the pipeline (lex → parse → render/dump) and emits the result.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import json
import sys

from curly.curly_errors import CurlyError
from curly.curly_lexer import tokenize
from curly.curly_parser import Parser
from curly.curly_render import render


def run_curly(
    source: str,
    is_string: bool = False,
    out: str | None = None,
    tokens: bool = False,
    as_json: bool = False,
    pretty: bool = False,
) -> str:
    """
    Run the Curly front end on a file or string and emit the result.

    Args:
        source (str): Curly source code or path to a `.curly` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        tokens (bool): Emit the token list, one token per line, instead of the tree.
        as_json (bool): Emit the tree as JSON (`Program.to_dict()`).
        pretty (bool): Print banners around the output.

    Returns:
        str: The emitted text.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.curly'.
        CurlyError: On the first lexical, syntax or context error.
    """
    if not is_string and not source.endswith(".curly"):
        raise ValueError("Only .curly files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    token_list = tokenize(source)

    # 3. Parsing / dumping
    if tokens:
        text = "\n".join(
            f"{tok.line}:{tok.col}\t{tok.kind.value}\t{tok.text}" for tok in token_list
        )
        title = "Tokens"
    else:
        program = Parser(token_list).parse()
        if as_json:
            text = json.dumps(program.to_dict(), indent=2)
            title = "Syntax Tree"
        else:
            text = render(program)
            title = "Rendered Source"

    # 4. Output result
    if pretty:
        banner = "=" * 20
        print(f"{banner}\n{title}\n{banner}\n{text}\n{banner}\n")
    elif not out:
        print(text)

    # 5. Optional write to file
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        if pretty:
            print(f"(wrote to {out})")

    return text


def main() -> None:
    """
    Entry point for the Curly CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise runs the pipeline on the given file or string.

    A Curly error is reported on stderr as `[<kind> error] >>> <message>` and
    the process exits with status 1.
    """
    if len(sys.argv) == 1:
        from curly.curly_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="curly")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    dump = parser.add_mutually_exclusive_group()
    dump.add_argument(
        "--tokens", action="store_true", help="Print the token list instead of the tree"
    )
    dump.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from curly.curly_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        run_curly(
            source=args.source,
            is_string=args.string,
            out=args.out,
            tokens=args.tokens,
            as_json=args.as_json,
            pretty=args.pretty,
        )
    except CurlyError as e:
        print(f"[{e.kind} error] >>> {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
