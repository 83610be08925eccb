#!/usr/bin/env python3
from pixeldither.tui.app import run

if __name__ == "__main__":
    run()
