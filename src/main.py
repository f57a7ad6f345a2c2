"""Main entry point for term-todo.

Starts the interactive editor, or runs add/delete/print on the plain list.
"""
from cli import cli


def main():
    cli(prog_name='term-todo')

if __name__ == "__main__":
    main()
