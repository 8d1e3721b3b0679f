# Short launcher for the player GUI.
from __future__ import annotations

from snake_gui import run_player_gui


def main() -> None:
    run_player_gui()


if __name__ == "__main__":
    main()
