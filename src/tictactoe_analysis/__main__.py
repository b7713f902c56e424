from __future__ import annotations

from tictactoe_analysis.series_report import main


if __name__ == "__main__":
    raise SystemExit(main())
