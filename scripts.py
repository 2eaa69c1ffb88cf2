"""Developer tasks: python scripts.py <task>."""

import subprocess
import sys

SOURCES = ["src", "tests"]


def run_tests():
    subprocess.run(["pytest"], check=True)


def run_cli_tests():
    subprocess.run(["pytest", "--run-cli-tests", "tests/integration"], check=True)


def run_lint():
    subprocess.run(["flake8", "--max-line-length", "120", *SOURCES], check=True)


def run_typecheck():
    subprocess.run(["mypy", "src"], check=True)


def run_format():
    subprocess.run(["black", *SOURCES], check=True)


def run_coverage():
    subprocess.run(["pytest", "--cov=struct_tree", "--cov-report=term-missing", "--cov-report=xml"], check=True)


def run_checks():
    run_format()
    run_lint()
    run_typecheck()
    run_tests()


TASKS = {name[len("run_"):]: task for name, task in list(globals().items()) if name.startswith("run_")}

if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(f"usage: python scripts.py {{{','.join(TASKS)}}}", file=sys.stderr)
        sys.exit(2)
    TASKS[sys.argv[1]]()
