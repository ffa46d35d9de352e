"""
Interactive read-parse-render loop for Curly.

Input is collected line by line until braces balance, then parsed as one
program and echoed back in rendered form. Errors are reported and the loop
carries on with the next chunk.

Commands:
    exit, quit      leave the REPL
    verbose-mode    toggle printing of the token list before each tree
"""

from curly.curly_errors import CurlyError
from curly.curly_lexer import Token, tokenize
from curly.curly_parser import Parser
from curly.curly_render import render


def read_chunk(first_prompt: str = ">>> ", next_prompt: str = "... ") -> str | None:
    """Reads lines until braces balance. Returns None on `exit`/`quit`."""
    src_lines: list[str] = []
    brace_count = 0
    while True:
        line = input(first_prompt if not src_lines else next_prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            break
    return "\n".join(src_lines).strip()


def format_tokens(tokens: list[Token]) -> str:
    return " ".join(f"{tok.kind.value}({tok.text})" for tok in tokens)


def evaluate_chunk(src: str, verbose: bool = False) -> str:
    """Parses one chunk and returns what the REPL prints for it."""
    try:
        tokens = tokenize(src)
        program = Parser(tokens).parse()
    except CurlyError as e:
        return f"[{e.kind} error] >>> {e}"

    rendered = render(program)
    if verbose:
        return f"[tokens] >>> {format_tokens(tokens)}\n{rendered}"
    return rendered


def start_repl(verbose: bool = False) -> None:
    print("Curly REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = read_chunk()
        except (EOFError, KeyboardInterrupt):
            print()
            print("Exiting Curly REPL.")
            return

        if src is None:
            print("Exiting Curly REPL.")
            return
        if not src:
            continue
        if src.lower() == "verbose-mode":
            verbose = not verbose
            print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
            continue

        output = evaluate_chunk(src, verbose=verbose)
        if output:
            print(output)


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
