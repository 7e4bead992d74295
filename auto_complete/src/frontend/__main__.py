from __future__ import annotations
import argparse, json
from backend import Engine
from backend import config as CFG
from backend.errors import InvalidInputError
from backend.models import TextUpdate

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Live autocomplete CLI (Engine-backed)")
    p.add_argument("--db", default=None, help='Store DSN: "sqlite:///path" or "memory://"')
    p.add_argument("--type", dest="text", default=None,
                   help="Feed this text one character at a time, then print suggestions")
    p.add_argument("--accept", default=None, help="Accept this suggestion after --type")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--no-llm", action="store_true", help="Store and offline tables only")
    p.add_argument("--timeout", type=float, default=None, help="Generative timeout (seconds)")
    p.add_argument("--boundaries", choices=["basic", "extended"], default="basic")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    eng = Engine()
    try:
        eng.load(
            db_dsn=args.db,
            boundaries=CFG.EXTENDED_BOUNDARY_CHARS if args.boundaries == "extended" else CFG.BOUNDARY_CHARS,
            generative_timeout_s=args.timeout,
            use_generative=not args.no_llm,
            verbose=args.verbose,
        )

        def show(upd: TextUpdate):
            if args.json:
                print(json.dumps(upd.to_json(), ensure_ascii=False, indent=2))
                return
            mode = "next word" if upd.is_word_complete else "completion"
            print(f"text: {upd.current_text!r}  ({mode})")
            if not upd.suggestions:
                print("  (no suggestions)"); return
            for i, s in enumerate(upd.suggestions, 1):
                print(f"  {i}. {s}")

        def feed(text: str) -> TextUpdate:
            upd = eng.current_text()
            for ch in text:
                upd = eng.add_character(ch)
            return upd

        if args.text is not None:
            upd = feed(args.text)
            if args.accept:
                upd = eng.process_suggestion(args.accept)
            show(upd)

        if args.repl:
            print("Type text to append; '<' deletes a character, '#N' accepts suggestion N,")
            print("'!reset' clears the text. Empty line exits.")
            last = eng.current_text()
            while True:
                try:
                    line = input("> ")
                except (EOFError, KeyboardInterrupt):
                    break
                if not line:
                    break
                try:
                    if line == "!reset":
                        last = eng.reset()
                    elif set(line) == {"<"}:
                        for _ in line:
                            last = eng.remove_character()
                    elif line.startswith("#") and line[1:].isdigit():
                        n = int(line[1:])
                        if not 1 <= n <= len(last.suggestions):
                            print("(no such suggestion)"); continue
                        last = eng.process_suggestion(last.suggestions[n - 1])
                    else:
                        last = feed(line)
                except InvalidInputError as e:
                    print(f"error: {e}"); continue
                show(last)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
