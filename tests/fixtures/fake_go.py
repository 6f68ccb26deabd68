"""
Stand-in for a Go toolchain binary used by the tests.

Usage: fake_go.py FULL_VERSION (version | run FILE)

``run`` understands a handful of statements, executed in source order:
``fmt.Println("text")``, ``fmt.Println(os.Getenv("KEY"))``,
``fmt.Println(os.Getwd())``, ``time.Sleep(N * time.Millisecond)``,
``panic("msg")`` and ``os.Exit(N)``.
"""
import os
import re
import sys
import time

STATEMENT = re.compile(
    r'fmt\.Println\(os\.Getenv\("(?P<env>\w+)"\)\)'
    r'|fmt\.Println\(os\.Getwd\(\)\)(?P<cwd>)'
    r'|fmt\.Println\("(?P<text>(?:[^"\\]|\\.)*)"\)'
    r'|time\.Sleep\((?P<sleep>\d+) \* time\.Millisecond\)'
    r'|panic\("(?P<panic>[^"]*)"\)'
    r'|os\.Exit\((?P<exit>\d+)\)'
)


def run(path):
    with open(path, encoding="utf-8") as f:
        source = f.read()
    if "package main" not in source:
        print(f"{path}:1:1: expected 'package', found 'EOF'", file=sys.stderr, flush=True)
        return 1
    for match in STATEMENT.finditer(source):
        if match.group("env") is not None:
            print(os.environ.get(match.group("env"), ""), flush=True)
        elif match.group("cwd") is not None:
            print(os.getcwd(), flush=True)
        elif match.group("text") is not None:
            text = match.group("text").replace('\\"', '"').replace("\\n", "\n")
            print(text, flush=True)
        elif match.group("sleep") is not None:
            time.sleep(int(match.group("sleep")) / 1000.0)
        elif match.group("panic") is not None:
            print(f"panic: {match.group('panic')}", file=sys.stderr, flush=True)
            return 2
        elif match.group("exit") is not None:
            return int(match.group("exit"))
    return 0


def main():
    full_version = sys.argv[1]
    command = sys.argv[2] if len(sys.argv) > 2 else ""
    if command == "version":
        print(f"go version go{full_version} linux/amd64")
        return 0
    if command == "run" and len(sys.argv) > 3:
        return run(sys.argv[3])
    print(f"go {command}: unknown command", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())
