#!/usr/bin/env python
"""
Software Visualization - Streamlit entrypoint.
"""

from src.ui import render_app


def main() -> None:
    render_app()


if __name__ == "__main__":
    main()
